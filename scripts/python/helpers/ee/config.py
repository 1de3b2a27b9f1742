"""
Runtime configuration for the Express Entry pool-rate engine.

Values are read from the environment once at import time. Engine functions take
them as keyword defaults, so tests and scripts can override per call.

@author: Max Stoddard
"""

from __future__ import annotations

import os


def _parse_int_env(name: str, default: int, *, minimum: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer; got {value!r}") from exc
    if parsed < minimum:
        raise ValueError(f"{name} must be >= {minimum}; got {parsed}")
    return parsed


def _parse_unit_float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be a float; got {value!r}") from exc
    if not 0.0 < parsed < 1.0:
        raise ValueError(f"{name} must lie strictly between 0 and 1; got {parsed}")
    return parsed


# Days an invitation keeps depressing the pool before replacement applicants
# show up in the published distribution.
MATURATION_DAYS = _parse_int_env("EE_MATURATION_DAYS", 15, minimum=1)

# Exponential smoothing weight on the newest raw rate.
SMOOTHING_ALPHA = _parse_unit_float_env("EE_SMOOTHING_ALPHA", 0.1)

# Trailing rate entries averaged for the short-horizon projection.
PROJECTION_WINDOW = _parse_int_env("EE_PROJECTION_WINDOW", 181, minimum=1)

# Local copy of the published rounds feed (ee_rounds_123_en.json).
EE_FEED_PATH = os.getenv("EE_FEED_PATH", "private-datasets/ee/ee_rounds_123_en.json")
