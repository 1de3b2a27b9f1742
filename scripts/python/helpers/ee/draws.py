"""Domain records for pool snapshots and invitation rounds.

Category and pathway values are decoded from the free-text fields of the
published rounds feed. Categories are plain string constants; pathways are an
integer bit set so one round can name several eligible programs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from scripts.python.helpers.ee.buckets import BucketVector

GENERAL = "general"
PROVINCE = "province"
INLAND = "inland"
OVERSEA = "oversea"
STEM = "stem"
HEALTH = "health"
FRENCH = "french"
TRADE = "trade"
TRANSPORT = "transport"
AGRICULTURE = "agriculture"
INVALID = "invalid"

CATEGORY_ORDER: tuple[str, ...] = (
    GENERAL,
    PROVINCE,
    INLAND,
    OVERSEA,
    STEM,
    HEALTH,
    FRENCH,
    TRADE,
    TRANSPORT,
    AGRICULTURE,
)

CATEGORY_LABELS = {
    GENERAL: "General",
    PROVINCE: "Province",
    INLAND: "Canadian Experience",
    OVERSEA: "Foreign Worker",
    STEM: "STEM",
    HEALTH: "Health",
    FRENCH: "French",
    TRADE: "Trade",
    TRANSPORT: "Transport",
    AGRICULTURE: "Agriculture",
    INVALID: "Unknown",
}

_EXACT_CATEGORY_NAMES = {
    "No Program Specified": GENERAL,
    "General": GENERAL,
    "Provincial Nominee Program": PROVINCE,
    "Canadian Experience Class": INLAND,
    "Federal Skilled Worker": OVERSEA,
    "Federal Skilled Trades": TRADE,
}
# Occupation rounds carry extra text after the category name.
_CATEGORY_PREFIXES = (
    ("Trade occupations", TRADE),
    ("STEM occupations", STEM),
    ("Healthcare occupations", HEALTH),
    ("French language proficiency", FRENCH),
    ("Transport occupations", TRANSPORT),
    ("Agriculture and agri-food occupations", AGRICULTURE),
)

PATHWAY_PNP = 0x0001
PATHWAY_CEC = 0x0010
PATHWAY_FSW = 0x0100
PATHWAY_FST = 0x1000

_PATHWAY_NAMES = (
    ("Federal Skilled Worker", PATHWAY_FSW),
    ("Canadian Experience Class", PATHWAY_CEC),
    ("Federal Skilled Trades", PATHWAY_FST),
    ("Provincial Nominee Program", PATHWAY_PNP),
)


def classify_category(draw_name: str) -> str:
    """Map a round's `drawName` text to a category constant."""
    text = draw_name.strip()
    if text in _EXACT_CATEGORY_NAMES:
        return _EXACT_CATEGORY_NAMES[text]
    for prefix, category in _CATEGORY_PREFIXES:
        if text.startswith(prefix):
            return category
    return INVALID


def parse_pathway(text: str) -> int:
    """Collect every program named in a round's eligibility text."""
    flags = 0
    for name, flag in _PATHWAY_NAMES:
        if name in text:
            flags |= flag
    return flags


def is_pnp(pathway: int) -> bool:
    return (pathway & PATHWAY_PNP) != 0


def is_valid_pathway(pathway: int) -> bool:
    return (pathway & (PATHWAY_PNP | PATHWAY_CEC | PATHWAY_FSW | PATHWAY_FST)) != 0


@dataclass(frozen=True)
class PoolSnapshot:
    """Full pool distribution as published for one date."""

    date: date
    pool: BucketVector


@dataclass(frozen=True)
class InviteEvent:
    """One invitation round."""

    draw_id: int
    date: date
    category: str
    pathway: int
    size: int
    score_cutoff: int

    @property
    def is_general(self) -> bool:
        return self.category == GENERAL

    @property
    def is_pnp(self) -> bool:
        return is_pnp(self.pathway)

    @property
    def is_valid(self) -> bool:
        return (
            self.draw_id != 0
            and self.category != INVALID
            and is_valid_pathway(self.pathway)
            and self.size != 0
            and self.score_cutoff != 0
        )


SNAPSHOT_KIND = "snapshot"
INVITE_KIND = "invite"
_KIND_RANK = {SNAPSHOT_KIND: 0, INVITE_KIND: 1}


@dataclass(frozen=True)
class PoolOrInvite:
    """Tagged record for a merged chronological view of both feeds."""

    kind: str
    snapshot: PoolSnapshot | None = None
    invite: InviteEvent | None = None

    @property
    def date(self) -> date:
        if self.snapshot is not None:
            return self.snapshot.date
        assert self.invite is not None
        return self.invite.date

    @property
    def sort_key(self) -> tuple[date, int]:
        return self.date, _KIND_RANK[self.kind]


def merge_events(
    snapshots: Sequence[PoolSnapshot],
    invites: Sequence[InviteEvent],
) -> list[PoolOrInvite]:
    """Merge both feeds by date; a snapshot sorts before an invite on the same date.

    The sort is stable, so same-kind records keep their input order.
    """
    merged = [PoolOrInvite(kind=SNAPSHOT_KIND, snapshot=item) for item in snapshots]
    merged.extend(PoolOrInvite(kind=INVITE_KIND, invite=item) for item in invites)
    return sorted(merged, key=lambda item: item.sort_key)


__all__ = [
    "AGRICULTURE",
    "CATEGORY_LABELS",
    "CATEGORY_ORDER",
    "FRENCH",
    "GENERAL",
    "HEALTH",
    "INLAND",
    "INVALID",
    "INVITE_KIND",
    "InviteEvent",
    "OVERSEA",
    "PATHWAY_CEC",
    "PATHWAY_FST",
    "PATHWAY_FSW",
    "PATHWAY_PNP",
    "PROVINCE",
    "PoolOrInvite",
    "PoolSnapshot",
    "SNAPSHOT_KIND",
    "STEM",
    "TRADE",
    "TRANSPORT",
    "classify_category",
    "is_pnp",
    "is_valid_pathway",
    "merge_events",
    "parse_pathway",
]
