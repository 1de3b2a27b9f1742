"""Express Entry pool entry-rate estimation helpers."""

from scripts.python.helpers.ee.accumulator import RateAccumulator, RateContribution
from scripts.python.helpers.ee.buckets import (
    BUCKET_COUNT,
    PNP_BUCKET_INDEX,
    SCORE_DOMAIN_MAX,
    BucketVector,
    bucket_label,
    bucket_labels,
)
from scripts.python.helpers.ee.category import (
    CategoryTally,
    invite_per_category,
    invites_by_category_year,
)
from scripts.python.helpers.ee.draws import (
    GENERAL,
    InviteEvent,
    PoolOrInvite,
    PoolSnapshot,
    classify_category,
    merge_events,
    parse_pathway,
)
from scripts.python.helpers.ee.errors import OrderingViolation
from scripts.python.helpers.ee.feed import load_rounds, parse_invites, parse_snapshots
from scripts.python.helpers.ee.rate import RateSeries, estimate_rate, projected_rate
from scripts.python.helpers.ee.redistribution import invite, leftover_demand
from scripts.python.helpers.ee.smoothing import smooth, smooth_series, step_weights

__all__ = [
    "BUCKET_COUNT",
    "BucketVector",
    "CategoryTally",
    "GENERAL",
    "InviteEvent",
    "OrderingViolation",
    "PNP_BUCKET_INDEX",
    "PoolOrInvite",
    "PoolSnapshot",
    "RateAccumulator",
    "RateContribution",
    "RateSeries",
    "SCORE_DOMAIN_MAX",
    "bucket_label",
    "bucket_labels",
    "classify_category",
    "estimate_rate",
    "invite",
    "invite_per_category",
    "invites_by_category_year",
    "leftover_demand",
    "load_rounds",
    "merge_events",
    "parse_invites",
    "parse_pathway",
    "parse_snapshots",
    "projected_rate",
    "smooth",
    "smooth_series",
    "step_weights",
]
