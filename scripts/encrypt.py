#!/usr/bin/env python3
"""Encrypt a message file with a Solitaire cipher deck.

Each line of the message is reduced to upper-case letters and padded to a
multiple of five before the whole message is encrypted with one keystream.
The ciphertext is written as a single line to the output file.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from keystream import initialize
from messages import (
    STANDARD,
    MessageFormat,
    clean_message,
    encrypt_values,
    format_blocks,
    letters_to_numbers,
    numbers_to_letters,
)
from scripts.validate_deck import DeckFileError, load_deck

DEFAULT_OUTPUT_PATH = Path("encrypted.txt")

LOGGER = logging.getLogger("encrypt")


class MessageFileError(RuntimeError):
    """Raised when the message file cannot be read."""


class OutputFileError(RuntimeError):
    """Raised when the ciphertext cannot be written."""


def read_message(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MessageFileError(f"Error reading message file {path}: {exc}") from exc


def encrypt_file(
    deck_path: Path,
    message_path: Path,
    *,
    output_path: Path = DEFAULT_OUTPUT_PATH,
    fmt: MessageFormat = STANDARD,
) -> str:
    tokens = load_deck(deck_path)
    LOGGER.debug("Deck tokens: %s", tokens)

    message = clean_message(read_message(message_path), fmt)
    LOGGER.debug("Message: %s", message)
    plain = letters_to_numbers(message)
    LOGGER.debug("Converted letters: %s", plain)

    session = initialize(tokens)
    keystream = session.take(len(plain))
    LOGGER.debug("Keystream: %s (%d rejected rounds)", keystream, session.rejected)

    ciphertext = format_blocks(numbers_to_letters(encrypt_values(plain, keystream)), fmt)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(ciphertext + "\n", encoding="utf-8")
    except OSError as exc:
        raise OutputFileError(
            f"Error writing encrypted message {output_path}: {exc}"
        ) from exc
    LOGGER.info("Wrote %d letters to %s", len(plain), output_path)
    return ciphertext


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("deck", help="Path to the deck file")
    parser.add_argument("message", help="Path to the plaintext message file")
    parser.add_argument(
        "--output",
        default=str(DEFAULT_OUTPUT_PATH),
        help=f"Where to write the ciphertext (default: {DEFAULT_OUTPUT_PATH})",
    )
    parser.add_argument(
        "--group",
        action="store_true",
        help="Write the ciphertext in space-separated blocks of five letters",
    )
    parser.add_argument(
        "--pad-letter",
        default="X",
        help="Letter used to pad each line to a multiple of five (default: X)",
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
        fmt = MessageFormat(pad_letter=args.pad_letter, group_output=args.group)
        ciphertext = encrypt_file(
            Path(args.deck),
            Path(args.message),
            output_path=Path(args.output),
            fmt=fmt,
        )
    except (DeckFileError, MessageFileError, OutputFileError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 1

    print(ciphertext)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
