"""Exponential smoothing for irregularly spaced rate series."""

from __future__ import annotations

import math
from datetime import date
from typing import Sequence

from scripts.python.helpers.ee.buckets import BucketVector
from scripts.python.helpers.ee.config import SMOOTHING_ALPHA
from scripts.python.helpers.ee.errors import OrderingViolation
from scripts.python.helpers.ee.rate import RateSeries

WEIGHT_TOLERANCE = 1e-9


def step_weights(steps: int, alpha: float) -> tuple[float, float, float]:
    """Weights (new raw, smoothed history, previous raw) for a gap of `steps` days.

    With a one-day step the previous-raw weight is zero and this reduces to
    ordinary exponential smoothing. Longer gaps decay the history by
    (1 - alpha) ** steps and hand the remainder to the previous raw value.
    """
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"alpha must lie strictly between 0 and 1; got {alpha}")
    if steps < 0:
        raise ValueError(f"steps must be non-negative; got {steps}")
    new_weight = alpha
    history_weight = (1.0 - alpha) ** steps
    residual_weight = 1.0 - new_weight - history_weight
    assert math.isclose(
        new_weight + history_weight + residual_weight, 1.0, abs_tol=WEIGHT_TOLERANCE
    ), "smoothing weights must sum to one"
    return new_weight, history_weight, residual_weight


def smooth(
    dates: Sequence[date],
    values: Sequence[BucketVector],
    alpha: float = SMOOTHING_ALPHA,
) -> list[BucketVector]:
    """Smooth `values` front to back, weighting by the day gap between entries."""
    if len(dates) != len(values):
        raise ValueError("dates and values differ in length.")
    if not values:
        return []

    smoothed = [values[0]]
    for index in range(1, len(values)):
        steps = (dates[index] - dates[index - 1]).days
        if steps <= 0:
            raise OrderingViolation(
                f"Rate dates must increase; {dates[index]} follows {dates[index - 1]}."
            )
        new_weight, history_weight, residual_weight = step_weights(steps, alpha)
        smoothed.append(
            values[index] * new_weight
            + smoothed[index - 1] * history_weight
            + values[index - 1] * residual_weight
        )
    return smoothed


def smooth_series(series: RateSeries, alpha: float = SMOOTHING_ALPHA) -> RateSeries:
    return RateSeries(
        dates=series.dates,
        values=tuple(smooth(series.dates, series.values, alpha)),
        warnings=series.warnings,
    )


__all__ = ["WEIGHT_TOLERANCE", "smooth", "smooth_series", "step_weights"]
