"""Deck file loading and validation for Solitaire cipher keys."""
from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from cards import DECK_SIZE, JOKER_A, JOKER_B, InvalidCard, card_label, parse_card
from keystream import MalformedDeck, initialize

FACTORY_ORDER = list(range(1, DECK_SIZE + 1))


class DeckFileError(Exception):
    """Raised when a deck file cannot be read or does not describe a deck."""


def read_labels(path: Path) -> list[str]:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        reason = getattr(exc, "strerror", None) or exc
        raise DeckFileError(f"{path}: {reason}") from exc
    return text.split()


def load_deck(path: Path) -> list[int]:
    """Return the tokens of the deck stored in *path*, in file order.

    The file holds whitespace-separated card labels, possibly over several
    lines.  The result is checked to be a complete 28-card deck.
    """

    labels = read_labels(path)
    try:
        tokens = [parse_card(label) for label in labels]
        initialize(tokens)
    except (InvalidCard, MalformedDeck) as exc:
        raise DeckFileError(f"{path}: {exc}") from exc
    return tokens


@dataclass
class ValidationResult:
    path: Path
    labels: list[str]
    tokens: list[int] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_ok(self) -> bool:
        return not self.errors


def validate_labels(path: Path, labels: Sequence[str]) -> ValidationResult:
    result = ValidationResult(path=path, labels=list(labels))
    if not labels:
        result.errors.append("No cards found")
        return result

    invalid: list[str] = []
    for label in labels:
        try:
            result.tokens.append(parse_card(label))
        except InvalidCard as exc:
            invalid.append(f"{label} ({exc.reason})")
    if invalid:
        result.errors.append("Unparseable cards: " + ", ".join(invalid))

    if len(labels) != DECK_SIZE:
        result.errors.append(f"Expected {DECK_SIZE} cards, found {len(labels)}")

    seen: dict[int, int] = {}
    duplicates = []
    for token in result.tokens:
        count = seen.get(token, 0) + 1
        seen[token] = count
        if count == 2:
            duplicates.append(card_label(token))
    if duplicates:
        result.errors.append("Duplicate cards: " + ", ".join(duplicates))

    missing = [card_label(token) for token in FACTORY_ORDER if token not in seen]
    if missing and not invalid:
        result.errors.append("Missing cards: " + ", ".join(missing))

    if result.is_ok:
        if result.tokens == FACTORY_ORDER:
            result.warnings.append("Deck is in factory order; it has not been shuffled")
        if abs(result.tokens.index(JOKER_A) - result.tokens.index(JOKER_B)) == 1:
            result.warnings.append("Jokers are adjacent")

    return result


def validate_deck(path: Path) -> ValidationResult:
    return validate_labels(path, read_labels(path))


def format_result(result: ValidationResult) -> str:
    status = "ok" if result.is_ok else "failed"
    return f"{result.path}: {status} ({len(result.labels)} cards)"


def run(paths: Iterable[str]) -> list[ValidationResult]:
    return [validate_deck(Path(raw_path)) for raw_path in paths]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate Solitaire cipher deck files.",
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Paths to deck files containing whitespace-separated card labels.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        results = run(args.paths)
    except DeckFileError as exc:
        parser.error(str(exc))

    has_error = False
    for result in results:
        print(format_result(result))
        for warning in result.warnings:
            print(f"  warning: {warning}")
        for error in result.errors:
            print(f"  error: {error}")
            has_error = True
    return 1 if has_error else 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
