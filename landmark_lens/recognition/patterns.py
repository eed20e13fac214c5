"""Reference landmark patterns for structural-flag matching.

Each pattern names a landmark, the flag signature the heuristic extractor is
expected to produce for it, and a prior confidence calibrated once by hand.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReferencePattern:
    name: str
    city: str
    country: str
    prior_confidence: float
    keywords: tuple[str, ...]
    text_clues: tuple[str, ...]
    # Flag name (StructuralFeatures attribute) -> expected value.
    signature: dict[str, bool] = field(default_factory=dict)
    site_type: str = "monument"

    def match_terms(self) -> list[str]:
        """Name, keywords and text clues, lower-cased, for resolving the pattern against the catalog."""
        return [t.lower() for t in (self.name, *self.keywords, *self.text_clues)]


REFERENCE_PATTERNS: tuple[ReferencePattern, ...] = (
    ReferencePattern(
        name="Colosseum",
        city="Rome",
        country="Italy",
        prior_confidence=0.95,
        keywords=("amphitheater", "ancient architecture", "roman", "arena"),
        text_clues=("COLOSSEUM", "ROME", "AMPHITHEATRUM"),
        signature={
            "has_circular_structures": True,
            "has_ancient_features": True,
            "has_vertical_structures": False,
            "has_gothic_features": False,
        },
        site_type="amphitheater",
    ),
    ReferencePattern(
        name="Eiffel Tower",
        city="Paris",
        country="France",
        prior_confidence=0.92,
        keywords=("tower", "iron structure", "lattice", "french"),
        text_clues=("TOUR EIFFEL", "PARIS", "EIFFEL"),
        signature={
            "has_vertical_structures": True,
            "has_modern_features": True,
            "has_circular_structures": False,
            "has_gothic_features": False,
        },
        site_type="tower",
    ),
    ReferencePattern(
        name="Big Ben",
        city="London",
        country="United Kingdom",
        prior_confidence=0.88,
        keywords=("clock tower", "gothic architecture", "parliament", "westminster"),
        text_clues=("BIG BEN", "WESTMINSTER", "PARLIAMENT"),
        signature={
            "has_vertical_structures": True,
            "has_gothic_features": True,
            "has_ancient_features": False,
            "has_circular_structures": False,
        },
        site_type="clock tower",
    ),
    ReferencePattern(
        name="Sagrada Familia",
        city="Barcelona",
        country="Spain",
        prior_confidence=0.90,
        keywords=("basilica", "gaudi", "spires", "modernist"),
        text_clues=("SAGRADA FAMILIA", "BARCELONA", "GAUDI"),
        signature={
            "has_vertical_structures": True,
            "has_modern_features": True,
            "has_gothic_features": False,
            "has_circular_structures": False,
        },
        site_type="basilica",
    ),
    ReferencePattern(
        name="Neuschwanstein Castle",
        city="Bavaria",
        country="Germany",
        prior_confidence=0.87,
        keywords=("castle", "fairy tale", "romantic", "bavarian"),
        text_clues=("NEUSCHWANSTEIN", "BAVARIA", "SCHLOSS"),
        signature={
            "has_vertical_structures": True,
            "has_gothic_features": True,
            "has_ancient_features": True,
            "has_circular_structures": False,
        },
        site_type="castle",
    ),
    ReferencePattern(
        name="Notre-Dame Cathedral",
        city="Paris",
        country="France",
        prior_confidence=0.89,
        keywords=("cathedral", "gothic", "notre dame", "french"),
        text_clues=("NOTRE DAME", "CATHEDRAL", "PARIS"),
        signature={
            "has_vertical_structures": True,
            "has_gothic_features": True,
            "has_ancient_features": True,
            "has_circular_structures": False,
        },
        site_type="cathedral",
    ),
    ReferencePattern(
        name="Leaning Tower of Pisa",
        city="Pisa",
        country="Italy",
        prior_confidence=0.91,
        keywords=("tower", "leaning", "pisa", "bell tower"),
        text_clues=("PISA", "TOWER", "CAMPANILE"),
        signature={
            "has_vertical_structures": True,
            "has_ancient_features": True,
            "has_circular_structures": True,
            "has_gothic_features": False,
        },
        site_type="bell tower",
    ),
)
