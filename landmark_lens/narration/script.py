"""Narration script templates for a recognized site (english / spanish, 1-5 minutes)."""

import hashlib
from typing import Literal

from landmark_lens.recognition.schema import SiteOut

Language = Literal["english", "spanish"]

# Fun facts included per narration length (minutes).
FACTS_PER_DURATION = {1: 1, 3: 2, 5: 3}

_TEXT = {
    "english": {
        "hooks": (
            "Welcome to {name}, one of {country}'s most magnificent cultural treasures!",
            "Standing before you is {name}, a masterpiece that has captivated visitors for centuries.",
            "You're about to discover the story of {name}, a testament to human creativity and ambition.",
            "Prepare to be amazed by {name}, where history, art, and culture meet.",
        ),
        "intro": "{description} Built in {date}{by}, it stands as a symbol of {significance}.",
        "by": " by {architect}",
        "history": "Let me take you back in time. {history}",
        "detail": (
            "As you explore {name}, notice the details that make it extraordinary. "
            "Every stone and every carving tells a story of craftsmanship."
        ),
        "facts": "Here are some details that will make your visit special: {facts}.",
        "tips": "Before you continue exploring, here's a tip: {tips}",
        "location": "You're standing in {city}, a place shaped by centuries of history and culture.",
        "closings": (
            "Thank you for visiting {name}. May it inspire you to discover more of the world's cultural treasures.",
            "As you leave {name}, carry with you the sense of wonder this place embodies.",
            "Your visit to {name} is now part of its living history. Thank you for listening.",
        ),
        "defaults": {
            "description": "A remarkable cultural site.",
            "history": "This site has a rich historical background.",
            "significance": "great cultural importance",
            "date": "an unknown date",
            "city": "this city",
            "country": "the country",
        },
    },
    "spanish": {
        "hooks": (
            "¡Bienvenidos a {name}, uno de los tesoros culturales más magníficos de {country}!",
            "Ante ustedes se encuentra {name}, una obra maestra que ha cautivado a visitantes durante siglos.",
            "Están a punto de descubrir la historia de {name}, un testimonio de la creatividad humana.",
            "Prepárense para maravillarse con {name}, donde la historia, el arte y la cultura se encuentran.",
        ),
        "intro": "{description} Construido en {date}{by}, representa {significance}.",
        "by": " por {architect}",
        "history": "Permítanme llevarlos de vuelta en el tiempo. {history}",
        "detail": (
            "Mientras exploran {name}, noten los detalles que lo hacen extraordinario. "
            "Cada piedra y cada tallado cuenta una historia de maestría."
        ),
        "facts": "Aquí tienen algunos detalles fascinantes para su visita: {facts}.",
        "tips": "Antes de continuar su exploración, un consejo: {tips}",
        "location": "Están en {city}, un lugar moldeado por siglos de historia y cultura.",
        "closings": (
            "Gracias por visitar {name}. Que esta experiencia los inspire a descubrir más tesoros culturales.",
            "Al salir de {name}, lleven consigo la sensación de asombro que este lugar encarna.",
            "Su visita a {name} es ahora parte de su historia viviente. Gracias por escuchar.",
        ),
        "defaults": {
            "description": "Un sitio cultural extraordinario.",
            "history": "Este sitio tiene un rico trasfondo histórico.",
            "significance": "una gran importancia cultural",
            "date": "una fecha desconocida",
            "city": "esta ciudad",
            "country": "el país",
        },
    },
}


def _pick(options: tuple[str, ...], key: str) -> str:
    """Stable choice from options keyed by a string (same site, same phrasing)."""
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    return options[digest[0] % len(options)]


def _facts_for(duration: int) -> int:
    if duration <= 1:
        return FACTS_PER_DURATION[1]
    if duration <= 3:
        return FACTS_PER_DURATION[3]
    return FACTS_PER_DURATION[5]


def generate_script(site: SiteOut, language: Language = "english", duration: int = 3) -> str:
    """Build a narration script for site. Longer durations add a detail paragraph and more facts."""
    if language not in _TEXT:
        raise ValueError(f"Unsupported language: {language}")
    t = _TEXT[language]
    d = t["defaults"]
    values = {
        "name": site.name,
        "country": site.location_country or d["country"],
        "city": site.location_city or d["city"],
        "description": site.description or d["description"],
        "history": site.historical_context or d["history"],
        "significance": site.cultural_significance or d["significance"],
        "date": site.construction_date or d["date"],
        "by": t["by"].format(architect=site.architect_artist) if site.architect_artist else "",
    }

    paragraphs = [
        _pick(t["hooks"], f"hook:{site.name}").format(**values),
        t["intro"].format(**values),
        t["history"].format(**values),
    ]
    if duration >= 3:
        paragraphs.append(t["detail"].format(**values))
    facts = [f.strip().rstrip(".") for f in site.fun_facts if f and f.strip()][: _facts_for(duration)]
    if facts:
        paragraphs.append(t["facts"].format(facts=". ".join(facts)))
    if site.visitor_tips:
        paragraphs.append(t["tips"].format(tips=site.visitor_tips))
    paragraphs.append(t["location"].format(**values))
    paragraphs.append(_pick(t["closings"], f"closing:{site.name}").format(**values))
    return "\n\n".join(paragraphs)
