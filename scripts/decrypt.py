#!/usr/bin/env python3
"""Decrypt a Solitaire ciphertext file with the deck used to encrypt it."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from keystream import initialize
from messages import decrypt_values, letters_to_numbers, numbers_to_letters
from scripts.encrypt import DEFAULT_OUTPUT_PATH
from scripts.validate_deck import DeckFileError, load_deck

LOGGER = logging.getLogger("decrypt")


class CiphertextFileError(RuntimeError):
    """Raised when the ciphertext file is missing or empty."""


def read_ciphertext(path: Path) -> str:
    """Return the first line of *path*; later lines are ignored."""

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise CiphertextFileError(
            f"Error reading encrypted message {path}: {exc}"
        ) from exc
    if not lines:
        raise CiphertextFileError(f"Encrypted message {path} is empty")
    return lines[0].strip()


def decrypt_file(deck_path: Path, ciphertext_path: Path = DEFAULT_OUTPUT_PATH) -> str:
    tokens = load_deck(deck_path)
    LOGGER.debug("Deck tokens: %s", tokens)

    cipher = letters_to_numbers(read_ciphertext(ciphertext_path))
    LOGGER.debug("Encrypted to numbers: %s", cipher)

    session = initialize(tokens)
    keystream = session.take(len(cipher))
    LOGGER.debug("Keystream: %s (%d rejected rounds)", keystream, session.rejected)

    return numbers_to_letters(decrypt_values(cipher, keystream))


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("deck", help="Path to the deck file")
    parser.add_argument(
        "ciphertext",
        nargs="?",
        default=str(DEFAULT_OUTPUT_PATH),
        help=f"Path to the encrypted message (default: {DEFAULT_OUTPUT_PATH})",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        plaintext = decrypt_file(Path(args.deck), Path(args.ciphertext))
    except (DeckFileError, CiphertextFileError) as exc:
        LOGGER.error("%s", exc)
        return 1

    print(plaintext)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
