import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cards import (
    DECK_SIZE,
    InvalidCard,
    card_label,
    format_deck,
    parse_card,
    parse_deck_line,
)


@pytest.mark.parametrize(
    "label,expected",
    [
        ("AC", 1),
        ("2C", 2),
        ("10C", 10),
        ("JC", 11),
        ("QC", 12),
        ("KC", 13),
        ("AD", 14),
        ("9D", 22),
        ("JD", 24),
        ("KD", 26),
        ("JA", 27),
        ("JB", 28),
    ],
)
def test_parse_card_known_labels(label, expected):
    assert parse_card(label) == expected


def test_parse_card_ignores_case_and_whitespace():
    assert parse_card("  qd ") == 25
    assert parse_card("ja") == 27
    assert parse_card("\tJb\n") == 28
    assert parse_card("1c") == 1
    assert parse_card("13D") == 26


@pytest.mark.parametrize(
    "label,fragment",
    [
        ("AH", "unknown suit 'H'"),
        ("10S", "unknown suit 'S'"),
        ("0C", "outside 1-13"),
        ("14D", "outside 1-13"),
        ("ZC", "unknown rank"),
        ("-1C", "unknown rank"),
        ("C", "expected a rank"),
        ("", "expected a rank"),
    ],
)
def test_parse_card_rejects_invalid_labels(label, fragment):
    with pytest.raises(InvalidCard) as excinfo:
        parse_card(label)
    assert fragment in str(excinfo.value)
    assert excinfo.value.label == label


def test_invalid_card_is_a_value_error():
    with pytest.raises(ValueError):
        parse_card("XX")


def test_card_label_inverts_parse_card_for_every_token():
    for token in range(1, DECK_SIZE + 1):
        assert parse_card(card_label(token)) == token


@pytest.mark.parametrize(
    "token,expected",
    [(1, "AC"), (10, "10C"), (13, "KC"), (14, "AD"), (24, "JD"), (27, "JA"), (28, "JB")],
)
def test_card_label_known_tokens(token, expected):
    assert card_label(token) == expected


@pytest.mark.parametrize("token", [0, 29, -3, True, "5"])
def test_card_label_rejects_out_of_range_tokens(token):
    with pytest.raises(InvalidCard):
        card_label(token)


def test_parse_deck_line_preserves_order():
    assert parse_deck_line("JB AC\n 2d  ja") == [28, 1, 15, 27]


def test_parse_deck_line_reports_offending_label():
    with pytest.raises(InvalidCard) as excinfo:
        parse_deck_line("AC 2C 3H 4C")
    assert excinfo.value.label == "3H"


def test_format_deck_round_trips_with_parse_deck_line():
    tokens = [5, 27, 18, 28, 1]
    assert format_deck(tokens) == "5C JA 5D JB AC"
    assert parse_deck_line(format_deck(tokens)) == tokens
