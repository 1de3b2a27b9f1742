"""Running rate made of time-bounded contributions.

Each contribution adds a per-bucket daily rate until its expiry date. The
accumulator keeps the running sum next to a min-heap of pending contributions
so that expiring them is a pop from the top while the sweep date advances.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass
from datetime import date

from scripts.python.helpers.ee.buckets import BucketVector
from scripts.python.helpers.ee.errors import OrderingViolation


@dataclass(frozen=True)
class RateContribution:
    """Additive per-bucket rate valid up to and including `expiry`."""

    expiry: date
    value: BucketVector


class RateAccumulator:
    """Sum of pending `RateContribution`s, expired in date order."""

    def __init__(self) -> None:
        # Entries are (expiry, insertion sequence, contribution); the sequence
        # keeps the heap from ever comparing two contributions directly.
        self._heap: list[tuple[date, int, RateContribution]] = []
        self._sequence = itertools.count()
        self._rate = BucketVector.zero()
        self._last_update: date | None = None

    def __len__(self) -> int:
        return len(self._heap)

    def pending(self) -> int:
        return len(self._heap)

    def rate(self) -> BucketVector:
        return self._rate

    def next_expiry(self) -> date | None:
        if not self._heap:
            return None
        return self._heap[0][0]

    def insert(self, contribution: RateContribution) -> None:
        if self._last_update is not None and contribution.expiry < self._last_update:
            raise OrderingViolation(
                f"Contribution expiring {contribution.expiry} inserted after "
                f"the accumulator reached {self._last_update}."
            )
        self._rate = self._rate + contribution.value
        heapq.heappush(self._heap, (contribution.expiry, next(self._sequence), contribution))

    def update(self, current: date) -> None:
        """Retire every contribution that expires on `current`.

        `current` must never move backwards, and no pending contribution may
        have expired before it; either case raises `OrderingViolation`.
        """
        if self._last_update is not None and current < self._last_update:
            raise OrderingViolation(
                f"Accumulator updated to {current} after reaching {self._last_update}."
            )
        self._last_update = current

        while self._heap:
            expiry, _, contribution = self._heap[0]
            if expiry < current:
                raise OrderingViolation(
                    f"Pending contribution expired on {expiry}, before {current}."
                )
            if expiry != current:
                break
            self._rate = self._rate - contribution.value
            heapq.heappop(self._heap)


__all__ = ["RateAccumulator", "RateContribution"]
