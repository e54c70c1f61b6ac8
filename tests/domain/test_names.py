from __future__ import annotations

import pytest

from genresolve.domain.errors import InvalidNameError
from genresolve.domain.names import (
    ParsedName,
    analyze_name,
    join_name,
    normalize_name,
    parse_name,
    require_name,
)


def test_normalize_collapses_whitespace() -> None:
    assert normalize_name("  Sally \t  Swailes\n") == "Sally Swailes"
    assert normalize_name(None) == ""


def test_require_name_rejects_blank_input() -> None:
    with pytest.raises(InvalidNameError, match="empty"):
        require_name(" \n\t ")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", ParsedName()),
        ("Sally", ParsedName(first="Sally")),
        ("Sally Swailes", ParsedName(first="Sally", last="Swailes")),
        ("John Quincy Adams", ParsedName(first="John", middle="Quincy", last="Adams")),
        (
            "Mary Ann Elizabeth Key",
            ParsedName(first="Mary", middle="Ann Elizabeth", last="Key"),
        ),
        (
            "Martin Luther King Jr.",
            ParsedName(first="Martin", middle="Luther", last="King", suffix="Jr."),
        ),
        ("Henry IV", ParsedName(first="Henry", suffix="IV")),
        ("Jr.", ParsedName()),
        ("Mary\nJane   Smith", ParsedName(first="Mary", middle="Jane", last="Smith")),
    ],
)
def test_parse_name(raw: str, expected: ParsedName) -> None:
    assert parse_name(raw) == expected


@pytest.mark.parametrize(
    "name",
    ["Sally Swailes", "John Quincy Adams", "Martin Luther King Jr.", "Henry IV", "Sally"],
)
def test_join_name_inverts_parse(name: str) -> None:
    parsed = parse_name(name)
    assert parse_name(join_name(parsed)) == parsed


def test_initials_are_upper_case() -> None:
    parsed = parse_name("sally swailes")
    assert parsed.first_initial == "S"
    assert parsed.last_initial == "S"
    assert ParsedName().last_initial == ""


def test_analyze_name_derives_keys_per_component() -> None:
    analysis = analyze_name("  Sally   Swailes ")

    assert analysis.full_name == "Sally Swailes"
    assert analysis.parsed.last == "Swailes"
    assert analysis.keys.first_soundex == "S400"
    assert analysis.keys.last_soundex == "S420"
    assert analysis.keys.last_metaphone == "SWLS"


def test_analyze_name_of_single_token_leaves_surname_keys_empty() -> None:
    analysis = analyze_name("Sally")

    assert analysis.keys.last_soundex == ""
    assert analysis.keys.last_metaphone == ""
