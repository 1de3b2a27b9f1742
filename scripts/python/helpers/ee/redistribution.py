"""Invitation redistribution model: which pool buckets a round removes."""

from __future__ import annotations

from scripts.python.helpers.ee.buckets import SCORE_DOMAIN_MAX, BucketVector
from scripts.python.helpers.ee.draws import InviteEvent


def eligible_pool(pool: BucketVector, event: InviteEvent) -> BucketVector:
    """Drop the PNP-reserved band unless the round admits nominees."""
    if event.is_pnp:
        return pool
    return pool.non_pnp()


def invite(pool: BucketVector, event: InviteEvent) -> BucketVector:
    """Estimate the applicants removed from `pool` by one invitation round.

    General rounds take the highest scorers first until the round size is
    exhausted. Category-restricted rounds take a score-proportional slice of
    everyone at or above the cutoff, rescaled so the removed total equals the
    round size. A restricted round with nobody above the cutoff removes nothing.
    """
    candidates = eligible_pool(pool, event)

    if event.is_general:
        return candidates * candidates.multiplier_for_count(event.size)

    above_cutoff = candidates.within_score(event.score_cutoff, SCORE_DOMAIN_MAX)
    above_total = above_cutoff.total()
    if above_total == 0.0:
        return BucketVector.zero()
    return above_cutoff * (event.size / above_total)


def leftover_demand(pool: BucketVector, event: InviteEvent) -> float:
    """Round size a general draw could not place in the eligible pool."""
    if not event.is_general:
        return 0.0
    return eligible_pool(pool, event).leftover_for_count(event.size)


__all__ = ["eligible_pool", "invite", "leftover_demand"]
