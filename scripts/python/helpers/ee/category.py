"""Cumulative invitation counts per category.

General rounds are not all "general": when the pool at the time of the round
is known, the share taken from the PNP-reserved band is credited to the
provincial category instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from itertools import groupby
from typing import Sequence

from scripts.python.helpers.ee.buckets import BucketVector
from scripts.python.helpers.ee.draws import (
    AGRICULTURE,
    CATEGORY_ORDER,
    FRENCH,
    GENERAL,
    HEALTH,
    PROVINCE,
    STEM,
    TRADE,
    TRANSPORT,
    InviteEvent,
    PoolSnapshot,
)
from scripts.python.helpers.ee.rate import check_invite_order, check_snapshot_order
from scripts.python.helpers.ee.redistribution import invite

OCCUPATION_CATEGORIES = frozenset({STEM, HEALTH, FRENCH, TRADE, TRANSPORT, AGRICULTURE})
ALL_YEARS = 0


@dataclass(frozen=True)
class CategoryTally:
    """Running invitation totals per category after each round date."""

    dates: tuple[date, ...]
    totals: tuple[dict[str, float], ...]
    categories: frozenset[str]

    def final(self) -> dict[str, float]:
        if not self.totals:
            return {category: 0.0 for category in CATEGORY_ORDER}
        return dict(self.totals[-1])


def _occupation_year(event: InviteEvent) -> int:
    return event.date.year if event.category in OCCUPATION_CATEGORIES else ALL_YEARS


def invites_by_category_year(invites: Sequence[InviteEvent]) -> dict[int, list[InviteEvent]]:
    """Split the rounds into per-year runs starting at the first occupation round.

    A new run starts only when an occupation round falls in a later year, so
    general rounds stay with the year they follow. Key 0 holds every round
    from the first occupation round onward, or nothing when there is none.
    """
    first = next(
        (index for index, item in enumerate(invites) if item.category in OCCUPATION_CATEGORIES),
        None,
    )
    if first is None:
        return {ALL_YEARS: []}

    tail = list(invites[first:])
    grouped: dict[int, list[InviteEvent]] = {}
    year = tail[0].date.year
    start = 0
    for index, item in enumerate(tail):
        next_year = _occupation_year(item)
        if year < next_year:
            grouped[year] = tail[start:index]
            start = index
            year = next_year
    grouped[year] = tail[start:]
    grouped[ALL_YEARS] = tail
    return grouped


def invite_per_category(
    snapshots: Sequence[PoolSnapshot],
    invites: Sequence[InviteEvent],
) -> CategoryTally:
    """Accumulate invitation counts per category across all rounds."""
    if not snapshots or not invites:
        return CategoryTally(dates=(), totals=(), categories=frozenset())
    check_snapshot_order(snapshots)
    check_invite_order(invites)

    running = {category: 0.0 for category in CATEGORY_ORDER}
    seen: set[str] = set()
    labels: list[date] = []
    totals: list[dict[str, float]] = []

    snapshot_index = 0
    pool_to_invite: BucketVector | None = None
    for round_date, same_day in groupby(invites, key=lambda item: item.date):
        while snapshot_index < len(snapshots) and snapshots[snapshot_index].date <= round_date:
            pool_to_invite = snapshots[snapshot_index].pool
            snapshot_index += 1

        for event in same_day:
            removed: BucketVector | None = None
            if pool_to_invite is not None:
                removed = invite(pool_to_invite, event)
                # Later rounds draw from what is left, whatever their category.
                pool_to_invite = pool_to_invite - removed

            if not event.is_general:
                running[event.category] = running.get(event.category, 0.0) + float(event.size)
                seen.add(event.category)
            elif removed is None:
                running[GENERAL] += float(event.size)
                seen.add(GENERAL)
            else:
                running[PROVINCE] += removed.pnp().total()
                running[GENERAL] += removed.non_pnp().total()
                seen.update((PROVINCE, GENERAL))

        labels.append(round_date)
        totals.append(dict(running))

    return CategoryTally(dates=tuple(labels), totals=tuple(totals), categories=frozenset(seen))


__all__ = [
    "ALL_YEARS",
    "CategoryTally",
    "OCCUPATION_CATEGORIES",
    "invite_per_category",
    "invites_by_category_year",
]
