"""Tests for the site matcher: keyword overlap scoring and structural-flag pattern matching."""

import pytest

from landmark_lens.ai.schema import ImageAnnotations, LabelAnnotation, LandmarkAnnotation, StructuralFeatures
from landmark_lens.recognition.matcher import SiteMatcher, score_pattern, score_site
from landmark_lens.recognition.patterns import REFERENCE_PATTERNS, ReferencePattern
from tests.conftest import make_site

COLOSSEUM_FEATURES = StructuralFeatures(
    has_circular_structures=True,
    has_ancient_features=True,
    has_vertical_structures=False,
    has_gothic_features=False,
)


def _pattern(name: str):
    return next(p for p in REFERENCE_PATTERNS if p.name == name)


def _catalog():
    return [
        make_site(1, "Colosseum", "Rome", "Italy", image_keywords=["amphitheater", "roman"]),
        make_site(2, "Eiffel Tower", "Paris", "France", image_keywords=["iron", "lattice"]),
        make_site(3, "Big Ben", "London", "United Kingdom", image_keywords=["clock tower"]),
    ]


# --- keyword scoring ---


@pytest.mark.fast
def test_score_site_name_location_and_pairs():
    site = make_site(1, "Colosseum", "Rome", "Italy", image_keywords=["amphitheater"])
    # name +10, location +5, pairs: colosseum~colosseum, rome~rome
    assert score_site(["colosseum", "rome"], site) == 17


@pytest.mark.fast
def test_score_site_substring_either_direction():
    site = make_site(1, "Colosseum", "Rome", "Italy")
    # "the colosseum at night" contains the name; "colos" is contained by it.
    assert score_site(["the colosseum at night"], site) >= 10
    assert score_site(["colos"], site) >= 10


@pytest.mark.fast
def test_score_site_no_overlap_is_zero():
    assert score_site(["beach", "sunset"], make_site(1, "Colosseum", "Rome", "Italy")) == 0


@pytest.mark.fast
def test_exact_landmark_name_matches_with_full_strength():
    matcher = SiteMatcher()
    annotations = ImageAnnotations(landmarks=[LandmarkAnnotation(name="Colosseum", confidence=0.9)])
    match = matcher.match(annotations, _catalog())
    assert match is not None
    assert match.site.name == "Colosseum"
    assert match.score >= 10
    assert match.strength == 1.0
    assert match.strategy == "keyword"
    assert [c.site_id for c in match.candidates] == [1, 2, 3]


@pytest.mark.fast
def test_empty_catalog_returns_none():
    annotations = ImageAnnotations(landmarks=[LandmarkAnnotation(name="Colosseum", confidence=0.9)])
    assert SiteMatcher().match(annotations, []) is None


@pytest.mark.fast
def test_no_keywords_returns_none():
    assert SiteMatcher().match(ImageAnnotations(), _catalog()) is None


@pytest.mark.fast
def test_disjoint_keywords_return_none():
    annotations = ImageAnnotations(labels=[LabelAnnotation(keyword="beach", score=0.9)])
    assert SiteMatcher().match(annotations, _catalog()) is None


@pytest.mark.fast
def test_label_only_signal_can_match():
    """A generic label shared with one site name still produces a (weaker or equal) match."""
    annotations = ImageAnnotations(labels=[LabelAnnotation(keyword="Lattice", score=0.6)])
    match = SiteMatcher().match(annotations, _catalog())
    assert match is not None
    assert match.site.name == "Eiffel Tower"
    assert match.score == 1
    assert match.strength == pytest.approx(0.1)


@pytest.mark.fast
def test_tie_goes_to_first_site_in_catalog_order():
    catalog = [
        make_site(7, "Tower Bridge", "London", "United Kingdom"),
        make_site(8, "Eiffel Tower", "Paris", "France"),
    ]
    annotations = ImageAnnotations(labels=[LabelAnnotation(keyword="tower")])
    match = SiteMatcher().match(annotations, catalog)
    assert match is not None
    assert match.site.id == 7
    assert match.candidates[0].score == match.candidates[1].score


@pytest.mark.fast
def test_matching_is_stable_across_calls():
    matcher = SiteMatcher()
    annotations = ImageAnnotations(
        labels=[LabelAnnotation(keyword="clock tower")],
        text_tokens=["WESTMINSTER", "LONDON"],
    )
    first = matcher.match(annotations, _catalog())
    second = matcher.match(annotations, _catalog())
    assert first is not None and second is not None
    assert (first.site.id, first.score) == (second.site.id, second.score)
    assert first.site.name == "Big Ben"
    assert first.score == 5 + 1 + 1


@pytest.mark.fast
def test_ocr_tokens_contribute_to_score():
    annotations = ImageAnnotations(text_tokens=["PARIS"])
    match = SiteMatcher().match(annotations, _catalog())
    assert match is not None
    assert match.site.name == "Eiffel Tower"
    assert match.score == 5 + 1


# --- structural patterns ---


@pytest.mark.fast
def test_score_pattern_full_signature_match():
    result = score_pattern(COLOSSEUM_FEATURES, _pattern("Colosseum"))
    assert result.matched_characteristics == 4
    assert result.total_characteristics == 4
    assert result.score == 2 + 2 + 1 + 1
    assert result.characteristic_match == 1.0
    assert result.final_confidence == pytest.approx(0.95)


@pytest.mark.fast
def test_score_pattern_large_file_bonus_for_ancient_patterns():
    large = COLOSSEUM_FEATURES.model_copy(update={"is_large_file": True, "file_size": 600_000})
    assert score_pattern(large, _pattern("Colosseum")).score == 7
    # Eiffel Tower does not expect ancient features: no bonus.
    assert score_pattern(large, _pattern("Eiffel Tower")).score == score_pattern(
        COLOSSEUM_FEATURES, _pattern("Eiffel Tower")
    ).score


@pytest.mark.fast
def test_structural_confidence_never_exceeds_cap():
    for pattern in REFERENCE_PATTERNS:
        for features in (COLOSSEUM_FEATURES, StructuralFeatures(), StructuralFeatures(has_vertical_structures=True)):
            assert score_pattern(features, pattern).final_confidence <= 0.98


@pytest.mark.fast
def test_rank_patterns_ties_keep_table_order():
    """With no flags set, four patterns tie at 2 points; the first in table order wins."""
    ranked = SiteMatcher().rank_patterns(StructuralFeatures())
    assert [p.name for p in ranked[:4]] == ["Colosseum", "Eiffel Tower", "Big Ben", "Sagrada Familia"]


@pytest.mark.fast
def test_structural_match_resolves_pattern_against_catalog():
    annotations = ImageAnnotations(features=COLOSSEUM_FEATURES)
    match = SiteMatcher().match(annotations, _catalog())
    assert match is not None
    assert match.strategy == "structural"
    assert match.site.name == "Colosseum"
    assert match.pattern is not None
    assert match.pattern.name == "Colosseum"
    assert match.strength == pytest.approx(0.95)


@pytest.mark.fast
def test_structural_match_without_catalog_entry_returns_none():
    annotations = ImageAnnotations(features=COLOSSEUM_FEATURES)
    catalog = [make_site(9, "Sydney Opera House", "Sydney", "Australia", image_keywords=["opera"])]
    assert SiteMatcher().match(annotations, catalog) is None


@pytest.mark.fast
def test_structural_match_with_no_characteristics_matched_returns_none():
    one_flag_pattern = ReferencePattern(
        name="Test Arena",
        city="Rome",
        country="Italy",
        prior_confidence=0.9,
        keywords=("arena",),
        text_clues=(),
        signature={"has_circular_structures": True},
    )
    matcher = SiteMatcher(patterns=[one_flag_pattern])
    assert matcher.match(ImageAnnotations(features=StructuralFeatures()), _catalog()) is None


@pytest.mark.fast
def test_exact_name_hit_with_single_site_catalog():
    catalog = [make_site(1, "Colosseum", "Rome", "Italy")]
    match = SiteMatcher().match_keywords(["colosseum", "amphitheater"], catalog)
    assert match is not None
    assert match.site.name == "Colosseum"
    assert match.score >= 10


@pytest.mark.fast
def test_label_only_tower_matches_via_curated_keyword():
    catalog = [
        make_site(1, "Colosseum", "Rome", "Italy", image_keywords=["amphitheater"]),
        make_site(2, "Campanile di Giotto", "Florence", "Italy", image_keywords=["tower", "bell"]),
    ]
    annotations = ImageAnnotations(labels=[LabelAnnotation(keyword="tower", score=0.8)])
    match = SiteMatcher().match(annotations, catalog)
    assert match is not None
    assert match.site.id == 2
    assert match.score == 1
