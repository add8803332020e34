"""Message preparation and letter arithmetic for the Solitaire cipher."""
from __future__ import annotations

import json
import string
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Mapping, MutableMapping, Sequence

from keystream import initialize

ALPHABET = string.ascii_uppercase
ALPHABET_SIZE = len(ALPHABET)


class LengthMismatchError(ValueError):
    """Raised when letter values and keystream values do not line up."""


@dataclass(frozen=True)
class MessageFormat:
    """How plaintext is cleaned before encryption and how output is laid out."""

    pad_letter: str = "X"
    block_size: int = 5
    group_output: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.pad_letter, str) or len(self.pad_letter) != 1:
            raise ValueError("pad_letter must be a single letter")
        if self.pad_letter.upper() not in ALPHABET:
            raise ValueError(f"pad_letter must be A-Z, got {self.pad_letter!r}")
        if isinstance(self.block_size, bool) or not isinstance(self.block_size, int):
            raise TypeError(
                f"Unsupported block_size type: {type(self.block_size).__name__}"
            )
        if self.block_size < 1:
            raise ValueError("block_size must be at least 1")
        object.__setattr__(self, "pad_letter", self.pad_letter.upper())

    def to_dict(self) -> MutableMapping[str, Any]:
        """Return the format as a JSON-serialisable mapping."""
        return dict(asdict(self))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MessageFormat":
        """Create a format from *data* produced by :meth:`to_dict`."""
        fields = {field.name for field in cls.__dataclass_fields__.values()}
        filtered = {k: data[k] for k in data if k in fields}
        return cls(**filtered)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, payload: str) -> "MessageFormat":
        return cls.from_dict(json.loads(payload))


STANDARD = MessageFormat()
GROUPED = MessageFormat(group_output=True)


def clean_line(text: str, fmt: MessageFormat = STANDARD) -> str:
    """Upper-case the letters of *text*, drop everything else and pad.

    A line with no letters stays empty rather than becoming a block of padding.
    """

    cleaned = "".join(ch for ch in text.upper() if ch in ALPHABET)
    remainder = len(cleaned) % fmt.block_size
    if remainder:
        cleaned += fmt.pad_letter * (fmt.block_size - remainder)
    return cleaned


def clean_message(text: str, fmt: MessageFormat = STANDARD) -> str:
    """Clean each line of *text* separately and join the results."""

    return "".join(clean_line(line, fmt) for line in text.splitlines())


def letters_to_numbers(text: str) -> list[int]:
    """Map A-Z (any case) to 1-26, skipping everything else."""

    return [ALPHABET.index(ch) + 1 for ch in text.upper() if ch in ALPHABET]


def numbers_to_letters(values: Iterable[int]) -> str:
    letters = []
    for value in values:
        if not 1 <= value <= ALPHABET_SIZE:
            raise ValueError(f"Letter value out of range: {value}")
        letters.append(ALPHABET[value - 1])
    return "".join(letters)


def _require_same_length(letters: Sequence[int], keystream: Sequence[int]) -> None:
    if len(letters) != len(keystream):
        raise LengthMismatchError(
            f"Message has {len(letters)} letters but keystream has {len(keystream)} values"
        )


def encrypt_values(plain: Sequence[int], keystream: Sequence[int]) -> list[int]:
    _require_same_length(plain, keystream)
    return [(p + k - 1) % ALPHABET_SIZE + 1 for p, k in zip(plain, keystream)]


def decrypt_values(cipher: Sequence[int], keystream: Sequence[int]) -> list[int]:
    _require_same_length(cipher, keystream)
    result = []
    for c, k in zip(cipher, keystream):
        value = c - k
        if value <= 0:
            value += ALPHABET_SIZE
        result.append(value)
    return result


def format_blocks(text: str, fmt: MessageFormat = STANDARD) -> str:
    """Split *text* into space-separated blocks when the format asks for it."""

    if not fmt.group_output:
        return text
    size = fmt.block_size
    return " ".join(text[i : i + size] for i in range(0, len(text), size))


def encrypt_message(
    tokens: Iterable[int], text: str, fmt: MessageFormat = STANDARD
) -> str:
    """Clean *text* and encrypt it with a fresh session over *tokens*."""

    plain = letters_to_numbers(clean_message(text, fmt))
    keystream = initialize(tokens).take(len(plain))
    return format_blocks(numbers_to_letters(encrypt_values(plain, keystream)), fmt)


def decrypt_message(
    tokens: Iterable[int], text: str, fmt: MessageFormat = STANDARD
) -> str:
    """Decrypt *text* with a fresh session; padding letters are kept."""

    cipher = letters_to_numbers(text)
    keystream = initialize(tokens).take(len(cipher))
    return format_blocks(numbers_to_letters(decrypt_values(cipher, keystream)), fmt)


__all__ = [
    "GROUPED",
    "LengthMismatchError",
    "MessageFormat",
    "STANDARD",
    "clean_line",
    "clean_message",
    "decrypt_message",
    "decrypt_values",
    "encrypt_message",
    "encrypt_values",
    "format_blocks",
    "letters_to_numbers",
    "numbers_to_letters",
]
