#!/usr/bin/env python3
"""Keystream diagnostics for Solitaire cipher decks.

Draws a run of keystream values from a deck file and reports how evenly the
values 1-26 occur, how many rounds the generator needed and how often a round
was discarded because it selected a joker.
"""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

from keystream import initialize
from scripts.validate_deck import DeckFileError, load_deck

DEFAULT_COUNT = 1000
KEYSTREAM_VALUES = range(1, 27)

LOGGER = logging.getLogger("keystream_stats")


@dataclass(frozen=True)
class KeystreamSummary:
    """Aggregate statistics for a run of keystream values."""

    total_values: int
    rounds: int
    rejected_rounds: int
    rejection_rate: float | None
    chi_square: float | None
    most_common: int | None
    least_common: int | None
    value_counts: dict[int, int]


def frequency_table(values: Sequence[int]) -> pd.DataFrame:
    """Return one row per keystream value with its count and share of the run."""

    counts = (
        pd.Series(list(values), dtype="int64")
        .value_counts()
        .reindex(KEYSTREAM_VALUES, fill_value=0)
        .sort_index()
    )
    frame = counts.rename_axis("value").reset_index(name="count")
    total = int(frame["count"].sum())
    frame["share"] = frame["count"] / total if total else 0.0
    return frame


def _chi_square(counts: np.ndarray) -> float | None:
    total = counts.sum()
    if total == 0:
        return None
    expected = total / len(counts)
    return float(np.sum((counts - expected) ** 2 / expected))


def summarise_keystream(
    values: Sequence[int], *, rounds: int, rejected_rounds: int
) -> KeystreamSummary:
    table = frequency_table(values)
    counts = table["count"].to_numpy(dtype=float)
    total = len(values)

    if total:
        most_common = int(table.loc[table["count"].idxmax(), "value"])
        least_common = int(table.loc[table["count"].idxmin(), "value"])
    else:
        most_common = None
        least_common = None

    return KeystreamSummary(
        total_values=total,
        rounds=rounds,
        rejected_rounds=rejected_rounds,
        rejection_rate=rejected_rounds / rounds if rounds else None,
        chi_square=_chi_square(counts),
        most_common=most_common,
        least_common=least_common,
        value_counts={int(v): int(c) for v, c in zip(table["value"], table["count"])},
    )


def analyse_deck(path: Path, count: int = DEFAULT_COUNT) -> tuple[KeystreamSummary, pd.DataFrame]:
    tokens = load_deck(path)
    session = initialize(tokens)
    values = session.take(count)
    LOGGER.debug(
        "Drew %d values from %s in %d rounds", len(values), path, session.rounds
    )
    summary = summarise_keystream(
        values, rounds=session.rounds, rejected_rounds=session.rejected
    )
    return summary, frequency_table(values)


def write_table(frame: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".parquet":
        frame.to_parquet(path, index=False)
    else:
        frame.to_csv(path, index=False)


def format_summary(path: Path, summary: KeystreamSummary) -> str:
    lines = [f"{path}: {summary.total_values} values"]
    lines.append(f"  rounds: {summary.rounds} (rejected {summary.rejected_rounds})")
    if summary.rejection_rate is not None:
        lines.append(f"  rejection rate: {summary.rejection_rate * 100:.1f}%")
    if summary.chi_square is not None:
        lines.append(f"  chi-square vs uniform: {summary.chi_square:.2f} (25 dof)")
    if summary.most_common is not None:
        lines.append(
            f"  most common: {summary.most_common} "
            f"({summary.value_counts[summary.most_common]}x)"
        )
        lines.append(
            f"  least common: {summary.least_common} "
            f"({summary.value_counts[summary.least_common]}x)"
        )
    return "\n".join(lines)


def summary_to_dict(summary: KeystreamSummary) -> dict[str, object]:
    payload = asdict(summary)
    payload["value_counts"] = {str(k): v for k, v in sorted(summary.value_counts.items())}
    return payload


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("deck", help="Path to the deck file")
    parser.add_argument(
        "--count",
        type=int,
        default=DEFAULT_COUNT,
        help=f"Number of keystream values to draw (default: {DEFAULT_COUNT})",
    )
    parser.add_argument(
        "--output",
        help="Write the frequency table to this CSV or Parquet file",
    )
    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Emit the summary as JSON instead of formatted text.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.count < 0:
        parser.error("--count must be non-negative")

    path = Path(args.deck)
    try:
        summary, table = analyse_deck(path, args.count)
    except DeckFileError as exc:
        LOGGER.error("%s", exc)
        return 1

    if args.output:
        write_table(table, Path(args.output))
        LOGGER.info("Wrote frequency table to %s", args.output)

    if args.as_json:
        print(json.dumps({"path": str(path), "summary": summary_to_dict(summary)}, indent=2))
    else:
        print(format_summary(path, summary))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
