"""Card label codec for the 28-card Solitaire deck."""
from __future__ import annotations

from typing import Iterable

CLUBS_OFFSET = 0
DIAMONDS_OFFSET = 13
JOKER_A = 27
JOKER_B = 28
DECK_SIZE = 28

SUIT_OFFSETS = {
    "C": CLUBS_OFFSET,
    "D": DIAMONDS_OFFSET,
}

NAMED_RANKS = {
    "A": 1,
    "J": 11,
    "Q": 12,
    "K": 13,
}

RANK_NAMES = {value: name for name, value in NAMED_RANKS.items()}

JOKER_LABELS = {
    "JA": JOKER_A,
    "JB": JOKER_B,
}


class InvalidCard(ValueError):
    """Raised when a card label or token cannot be mapped."""

    def __init__(self, label: object, reason: str) -> None:
        super().__init__(f"Invalid card {label!r}: {reason}")
        self.label = label
        self.reason = reason


def _parse_rank(label: str, rank: str) -> int:
    if rank in NAMED_RANKS:
        return NAMED_RANKS[rank]
    if not rank or not rank.isdecimal():
        raise InvalidCard(label, f"unknown rank {rank!r}")
    value = int(rank, 10)
    if not 1 <= value <= 13:
        raise InvalidCard(label, f"rank {value} is outside 1-13")
    return value


def parse_card(label: str) -> int:
    """Convert a card label such as ``"AC"``, ``"10D"`` or ``"jb"`` to a token.

    Clubs map to 1-13, Diamonds to 14-26 and the two jokers to 27 and 28.
    Labels are case-insensitive and surrounding whitespace is ignored.
    """

    token = label.strip().upper()
    if token in JOKER_LABELS:
        return JOKER_LABELS[token]
    if len(token) < 2:
        raise InvalidCard(label, "expected a rank followed by a suit")

    rank, suit = token[:-1], token[-1]
    base = _parse_rank(label, rank)
    if suit not in SUIT_OFFSETS:
        raise InvalidCard(label, f"unknown suit {suit!r}")
    return base + SUIT_OFFSETS[suit]


def card_label(token: int) -> str:
    """Return the canonical label for *token* (the inverse of :func:`parse_card`)."""

    if isinstance(token, bool) or not isinstance(token, int):
        raise InvalidCard(token, "tokens must be integers")
    if token == JOKER_A:
        return "JA"
    if token == JOKER_B:
        return "JB"
    if not 1 <= token <= 26:
        raise InvalidCard(token, f"token must be within 1-{DECK_SIZE}")

    suit = "C" if token <= 13 else "D"
    rank = token - SUIT_OFFSETS[suit]
    return f"{RANK_NAMES.get(rank, str(rank))}{suit}"


def parse_deck_line(text: str) -> list[int]:
    """Parse whitespace-separated card labels in deck order."""

    return [parse_card(label) for label in text.split()]


def format_deck(tokens: Iterable[int]) -> str:
    return " ".join(card_label(token) for token in tokens)


__all__ = [
    "DECK_SIZE",
    "JOKER_A",
    "JOKER_B",
    "InvalidCard",
    "card_label",
    "format_deck",
    "parse_card",
    "parse_deck_line",
]
