"""Common CLI formatting and argument helpers for pool-rate scripts."""

from __future__ import annotations

import argparse
from typing import Iterable


def format_float(value: float, decimals: int = 4) -> str:
    """Format floats for tab-separated console tables, trimming trailing zeros."""
    text = f"{value:.{decimals}f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_row(cells: Iterable[object], decimals: int = 4) -> str:
    """Join one console table row with tabs, formatting floats consistently."""
    return "\t".join(
        format_float(cell, decimals) if isinstance(cell, float) else str(cell)
        for cell in cells
    )


def positive_int(raw: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected an integer, got {raw!r}") from exc
    if value < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {value}")
    return value


def unit_interval_float(raw: str) -> float:
    """argparse type for floats strictly between 0 and 1."""
    try:
        value = float(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected a float, got {raw!r}") from exc
    if not 0.0 < value < 1.0:
        raise argparse.ArgumentTypeError(f"Expected a value in (0, 1), got {value}")
    return value
