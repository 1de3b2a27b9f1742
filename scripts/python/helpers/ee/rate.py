"""Pool entry-rate estimation from pool snapshots and invitation rounds.

There are two sources of pool growth in the raw data:
  1. snapshot growth: the difference between consecutive published pools,
     spread linearly over the days between them;
  2. invitation replacement: invited applicants leave the pool, so the same
     number of newcomers must have arrived for the published counts to hold.
     Each round's removed vector is spread over a maturation window.

`estimate_rate` sweeps both feeds date by date and records the running sum of
active contributions between consecutive event dates.

@author: Max Stoddard
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterator, Sequence

import numpy as np
import pandas as pd

from scripts.python.helpers.ee.accumulator import RateAccumulator, RateContribution
from scripts.python.helpers.ee.buckets import BucketVector, bucket_labels, sum_vectors
from scripts.python.helpers.ee.config import MATURATION_DAYS, PROJECTION_WINDOW
from scripts.python.helpers.ee.draws import InviteEvent, PoolSnapshot
from scripts.python.helpers.ee.errors import OrderingViolation
from scripts.python.helpers.ee.redistribution import invite, leftover_demand


@dataclass(frozen=True)
class RateSeries:
    """Per-bucket daily entry rate labeled by date, strictly increasing."""

    dates: tuple[date, ...] = ()
    values: tuple[BucketVector, ...] = ()
    warnings: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if len(self.dates) != len(self.values):
            raise ValueError("RateSeries dates and values differ in length.")

    def __len__(self) -> int:
        return len(self.dates)

    def __iter__(self) -> Iterator[tuple[date, BucketVector]]:
        return iter(zip(self.dates, self.values))

    def totals(self) -> list[float]:
        return [value.total() for value in self.values]

    def to_frame(self) -> pd.DataFrame:
        """One row per date, one column per bucket label."""
        columns = list(bucket_labels())
        if not self.values:
            return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], name="date"))
        frame = pd.DataFrame(
            np.vstack([value.as_array() for value in self.values]),
            columns=columns,
            index=pd.DatetimeIndex(pd.to_datetime(list(self.dates)), name="date"),
        )
        return frame


def check_snapshot_order(snapshots: Sequence[PoolSnapshot]) -> None:
    """Snapshots must be strictly increasing by date."""
    for index in range(1, len(snapshots)):
        if snapshots[index].date <= snapshots[index - 1].date:
            raise OrderingViolation(
                f"Snapshot {index} dated {snapshots[index].date} does not follow "
                f"{snapshots[index - 1].date}."
            )


def check_invite_order(invites: Sequence[InviteEvent]) -> None:
    """Invites must be non-decreasing by date."""
    for index in range(1, len(invites)):
        if invites[index].date < invites[index - 1].date:
            raise OrderingViolation(
                f"Invite {index} (draw {invites[index].draw_id}) dated "
                f"{invites[index].date} precedes {invites[index - 1].date}."
            )


def estimate_rate(
    snapshots: Sequence[PoolSnapshot],
    invites: Sequence[InviteEvent],
    *,
    maturation_days: int = MATURATION_DAYS,
) -> RateSeries:
    """Sweep both feeds and return the estimated per-bucket entry rate.

    Points are only emitted once the cursor is past the first
    `maturation_days` days, because no invitation contribution has fully
    matured before then. Each point is labeled at the midpoint of the interval
    it covers.
    """
    if maturation_days < 1:
        raise ValueError("maturation_days must be positive.")
    if not snapshots:
        return RateSeries()
    check_snapshot_order(snapshots)
    check_invite_order(invites)

    start = snapshots[0].date
    end = snapshots[-1].date + timedelta(days=1)
    warm_up_end = start + timedelta(days=maturation_days)
    maturation = timedelta(days=maturation_days)

    # Reversed copies act as stacks: the next event is always at the end.
    pool_stack = list(reversed(snapshots))
    invite_stack = [item for item in reversed(invites) if item.date >= start]

    accumulator = RateAccumulator()
    # Reassigned on the first iteration since `start` is a snapshot date.
    pool_to_invite = BucketVector.zero()

    labels: list[date] = []
    rates: list[BucketVector] = []
    warnings: list[str] = []

    cursor = start
    while cursor < end:
        next_cursor = end
        accumulator.update(cursor)

        if pool_stack:
            current = pool_stack[-1]
            if current.date < cursor:
                raise OrderingViolation(f"Snapshot dated {current.date} skipped by sweep at {cursor}.")
            if current.date == cursor:
                pool_to_invite = current.pool
                pool_stack.pop()
                if pool_stack:
                    following = pool_stack[-1]
                    days = (following.date - cursor).days
                    accumulator.insert(
                        RateContribution(
                            expiry=following.date,
                            value=(following.pool - current.pool) / float(days),
                        )
                    )
                    next_cursor = min(next_cursor, following.date)
            else:
                next_cursor = min(next_cursor, current.date)

        while invite_stack:
            event = invite_stack[-1]
            if event.date < cursor:
                raise OrderingViolation(f"Invite {event.draw_id} dated {event.date} skipped by sweep at {cursor}.")
            if event.date != cursor:
                next_cursor = min(next_cursor, event.date)
                break

            removed = invite(pool_to_invite, event)
            leftover = leftover_demand(pool_to_invite, event)
            if leftover > 0.0:
                warnings.append(
                    f"Draw {event.draw_id} on {event.date}: {leftover:.1f} invitations "
                    "exceed the estimated eligible pool and were dropped."
                )
            accumulator.insert(
                RateContribution(
                    expiry=cursor + maturation,
                    value=removed / float(maturation_days),
                )
            )
            # Later rounds on the same date draw from what is left.
            pool_to_invite = pool_to_invite - removed
            invite_stack.pop()

        expiry = accumulator.next_expiry()
        if expiry is not None:
            next_cursor = min(next_cursor, expiry)

        if cursor > warm_up_end:
            interval = (next_cursor - cursor).days
            labels.append(cursor + timedelta(days=(interval + 1) // 2))
            rates.append(accumulator.rate())

        cursor = next_cursor

    return RateSeries(dates=tuple(labels), values=tuple(rates), warnings=tuple(warnings))


def projected_rate(
    values: Sequence[BucketVector] | RateSeries,
    window: int = PROJECTION_WINDOW,
) -> BucketVector:
    """Average of the trailing `window` rate entries, zero when there are none."""
    if window < 1:
        raise ValueError("window must be positive.")
    entries = list(values.values) if isinstance(values, RateSeries) else list(values)
    tail = entries[-window:]
    if not tail:
        return BucketVector.zero()
    return sum_vectors(tail) / float(len(tail))


__all__ = [
    "RateSeries",
    "check_invite_order",
    "check_snapshot_order",
    "estimate_rate",
    "projected_rate",
]
