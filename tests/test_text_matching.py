import pytest

from hunthub.services.validation.geo import haversine_distance
from hunthub.services.validation.text_matching import levenshtein, normalize, parse_number, similarity


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("", "", 0),
        ("abc", "", 3),
        ("", "abc", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("same", "same", 0),
    ],
)
def test_levenshtein(a, b, expected):
    assert levenshtein(a, b) == expected
    assert levenshtein(b, a) == expected


def test_similarity_bounds():
    assert similarity("", "") == 1.0
    assert similarity("abc", "abc") == 1.0
    assert similarity("abc", "xyz") == 0.0
    assert similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)


def test_similarity_tolerates_a_typo():
    assert similarity("Eiffel Tower", "Eiffel Tower") == 1.0
    assert similarity("Eifel Tower", "Eiffel Tower") >= 0.9


def test_similarity_drops_with_each_edit():
    target = "eiffel tower"
    edited = [target[: len(target) - k] + "x" * k for k in range(len(target) + 1)]
    scores = [similarity(text, target) for text in edited]

    assert scores == sorted(scores, reverse=True)
    assert scores[0] == 1.0
    assert scores[-1] == 0.0


def test_normalize_collapses_whitespace_and_case():
    assert normalize("  Old   Oak\tTree ") == "old oak tree"
    assert normalize("Old Oak", case_sensitive=True) == "Old Oak"


def test_parse_number_accepts_decimal_comma():
    assert parse_number("3,5") == 3.5
    assert parse_number(" 42 ") == 42.0
    assert parse_number("forty") is None


def test_haversine_zero_and_known_distance():
    assert haversine_distance(52.52, 13.405, 52.52, 13.405) == 0.0
    # one degree of latitude is roughly 111 km
    assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111195, rel=1e-3)
