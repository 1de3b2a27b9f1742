"""Error types raised by the pool-rate engine."""

from __future__ import annotations


class OrderingViolation(ValueError):
    """An input sequence or the rate accumulator broke its date-ordering contract."""


__all__ = ["OrderingViolation"]
