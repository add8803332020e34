"""Keystream generator for the 28-card Solitaire cipher.

A session owns one deck (a permutation of the tokens 1-28) and mutates it in
place every time a keystream value is requested.  Each request runs the
four-step round below until the selected output is not a joker:

1. move Joker A one position down, wrapping from the bottom to the top;
2. move Joker B two positions down, one wrapping step at a time;
3. swap the cards above the first joker with the cards below the second;
4. move the top ``n`` cards just above the bottom card, where ``n`` is the
   value of the bottom card (jokers count as 27).

The output is the card found ``t`` positions below the top card, where ``t``
is the top card's value (again with jokers counting as 27).
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, MutableSequence, Sequence

from cards import DECK_SIZE, JOKER_A, JOKER_B

JOKERS = frozenset({JOKER_A, JOKER_B})
JOKER_COUNT_VALUE = 27

LOGGER = logging.getLogger("keystream")


class MalformedDeck(ValueError):
    """Raised when a session is initialised from an invalid token sequence."""


class InternalConsistencyError(RuntimeError):
    """Raised when the deck stopped being a permutation of 1-28 mid-session."""


def _is_token(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= DECK_SIZE


def check_permutation(deck: Sequence[int]) -> None:
    """Raise :class:`InternalConsistencyError` unless *deck* holds 1-28 once each."""

    if len(deck) != DECK_SIZE or sorted(deck) != list(range(1, DECK_SIZE + 1)):
        raise InternalConsistencyError(f"Deck is not a permutation of 1-{DECK_SIZE}")


def _locate(deck: Sequence[int], joker: int) -> int:
    try:
        return deck.index(joker)
    except ValueError:
        raise InternalConsistencyError(f"Joker {joker} not found in deck") from None


def advance_card(deck: MutableSequence[int], value: int) -> None:
    """Swap *value* with the card below it, treating the deck as circular."""

    position = _locate(deck, value)
    target = (position + 1) % len(deck)
    deck[position], deck[target] = deck[target], deck[position]


def move_joker_a(deck: MutableSequence[int]) -> None:
    advance_card(deck, JOKER_A)


def move_joker_b(deck: MutableSequence[int]) -> None:
    for _ in range(2):
        advance_card(deck, JOKER_B)


def triple_cut(deck: MutableSequence[int]) -> None:
    """Exchange the cards above the upper joker with those below the lower one.

    Only the joker positions matter, not which joker is which.
    """

    first = _locate(deck, JOKER_A)
    second = _locate(deck, JOKER_B)
    lo, hi = min(first, second), max(first, second)
    deck[:] = [*deck[hi + 1 :], *deck[lo : hi + 1], *deck[:lo]]


def count_cut(deck: MutableSequence[int]) -> None:
    """Move the top ``n`` cards above the bottom card; the bottom card stays put."""

    bottom = deck[-1]
    count = min(bottom, JOKER_COUNT_VALUE)
    deck[:] = [*deck[count:-1], *deck[:count], bottom]


def select_output(deck: Sequence[int]) -> int:
    """Return the candidate output for the current deck (may be a joker)."""

    return deck[min(deck[0], JOKER_COUNT_VALUE)]


def run_round(deck: MutableSequence[int]) -> int:
    """Apply all four steps once and return the round's candidate output."""

    move_joker_a(deck)
    move_joker_b(deck)
    triple_cut(deck)
    count_cut(deck)
    return select_output(deck)


class KeystreamGenerator:
    """A single encryption or decryption session over one deck.

    Sessions are not thread-safe; concurrent runs need independent sessions.
    """

    def __init__(self, tokens: Iterable[int]) -> None:
        deck = list(tokens)
        if len(deck) != DECK_SIZE:
            raise MalformedDeck(f"Deck must contain {DECK_SIZE} cards, got {len(deck)}")
        invalid = [value for value in deck if not _is_token(value)]
        if invalid:
            raise MalformedDeck(
                f"Deck contains values outside 1-{DECK_SIZE}: {invalid!r}"
            )
        counts: dict[int, int] = {}
        duplicates = []
        for value in deck:
            count = counts.get(value, 0) + 1
            counts[value] = count
            if count == 2:
                duplicates.append(value)
        if duplicates:
            raise MalformedDeck(f"Deck contains duplicate values: {duplicates!r}")

        self._deck = deck
        self.rounds = 0
        self.rejected = 0

    @property
    def deck(self) -> tuple[int, ...]:
        """Snapshot of the current deck order."""

        return tuple(self._deck)

    def next_value(self) -> int:
        """Advance the deck and return the next keystream value (1-26)."""

        while True:
            candidate = run_round(self._deck)
            self.rounds += 1
            if candidate not in JOKERS:
                check_permutation(self._deck)
                return candidate
            self.rejected += 1
            LOGGER.debug(
                "Round %d selected joker %d; repeating round", self.rounds, candidate
            )

    def take(self, count: int) -> list[int]:
        if count < 0:
            raise ValueError("count must be non-negative")
        return [self.next_value() for _ in range(count)]

    def __iter__(self) -> Iterator[int]:
        while True:
            yield self.next_value()


def initialize(tokens: Iterable[int]) -> KeystreamGenerator:
    """Create a fresh session from 28 distinct tokens."""

    return KeystreamGenerator(tokens)


__all__ = [
    "InternalConsistencyError",
    "KeystreamGenerator",
    "MalformedDeck",
    "check_permutation",
    "count_cut",
    "initialize",
    "move_joker_a",
    "move_joker_b",
    "run_round",
    "select_output",
    "triple_cut",
]
