"""Decode the published Express Entry rounds document into engine inputs.

The document is the `ee_rounds_123_en.json` feed, already saved locally. Every
field is a string; numbers carry thousands separators and dates are written as
"March 13, 2024".
"""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Mapping

from scripts.python.helpers.ee.buckets import BucketVector
from scripts.python.helpers.ee.draws import (
    InviteEvent,
    PoolSnapshot,
    classify_category,
    parse_pathway,
)

DATE_FORMAT = "%B %d, %Y"

# Feed columns holding bucket counts, lowest score band first. dd3, dd9 and
# dd18 are subtotal rows and are skipped.
POOL_COLUMNS: tuple[str, ...] = (
    "dd17",
    "dd16",
    "dd15",
    "dd14",
    "dd13",
    "dd12",
    "dd11",
    "dd10",
    "dd8",
    "dd7",
    "dd6",
    "dd5",
    "dd4",
    "dd2",
    "dd1",
)

# Round 91 was split into two same-day draws.
_DRAW_NUMBER_ALIASES = {"91a": 91, "91b": 91}


def load_rounds(path: Path | str) -> dict[str, Any]:
    """Read a locally saved rounds document."""
    feed_path = Path(path)
    if not feed_path.exists():
        raise ValueError(f"Missing rounds feed: {feed_path}")
    with feed_path.open("r", encoding="utf-8") as handle:
        document = json.load(handle)
    if not isinstance(document, dict) or not isinstance(document.get("rounds"), list):
        raise ValueError(f"Rounds feed has no 'rounds' list: {feed_path}")
    return document


def parse_feed_int(raw: str | None) -> int:
    """Parse '1,500'-style integers; unparseable text becomes 0."""
    if raw is None:
        return 0
    text = raw.strip()
    if text in _DRAW_NUMBER_ALIASES:
        return _DRAW_NUMBER_ALIASES[text]
    try:
        return int(text.replace(",", ""))
    except ValueError:
        return 0


def parse_feed_float(raw: str | None) -> float:
    if raw is None:
        return 0.0
    try:
        return float(raw.strip().replace(",", ""))
    except ValueError:
        return 0.0


def parse_feed_date(raw: str | None) -> date | None:
    if raw is None:
        return None
    try:
        return datetime.strptime(raw.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def _rounds(document: Mapping[str, Any]) -> list[Mapping[str, str]]:
    rounds = document.get("rounds")
    if not isinstance(rounds, list):
        raise ValueError("Rounds document has no 'rounds' list.")
    return rounds


def parse_invite(row: Mapping[str, str]) -> InviteEvent | None:
    """Decode one round; None when the date is unreadable."""
    draw_date = parse_feed_date(row.get("drawDateFull"))
    if draw_date is None:
        return None
    return InviteEvent(
        draw_id=parse_feed_int(row.get("drawNumber")),
        date=draw_date,
        category=classify_category(row.get("drawName") or ""),
        pathway=parse_pathway(row.get("drawText2") or ""),
        size=parse_feed_int(row.get("drawSize")),
        score_cutoff=parse_feed_int(row.get("drawCRS")),
    )


def parse_invites(document: Mapping[str, Any]) -> list[InviteEvent]:
    """Valid invitation rounds sorted by (date, draw number)."""
    invites: list[InviteEvent] = []
    for row in _rounds(document):
        event = parse_invite(row)
        if event is None or not event.is_valid:
            continue
        invites.append(event)
    return sorted(invites, key=lambda item: (item.date, item.draw_id))


def parse_snapshot(row: Mapping[str, str]) -> PoolSnapshot | None:
    """Decode the pool distribution attached to one round; None when unusable."""
    as_on = parse_feed_date(row.get("drawDistributionAsOn"))
    if as_on is None:
        return None
    pool = BucketVector(parse_feed_float(row.get(column)) for column in POOL_COLUMNS)
    if pool.total() == 0.0:
        return None
    return PoolSnapshot(date=as_on, pool=pool)


def parse_snapshots(document: Mapping[str, Any]) -> list[PoolSnapshot]:
    """One snapshot per distribution date, sorted ascending.

    Several rounds can quote the same distribution; the first one in feed
    order wins.
    """
    by_date: dict[date, PoolSnapshot] = {}
    for row in _rounds(document):
        snapshot = parse_snapshot(row)
        if snapshot is None or snapshot.date in by_date:
            continue
        by_date[snapshot.date] = snapshot
    return [by_date[key] for key in sorted(by_date)]


__all__ = [
    "DATE_FORMAT",
    "POOL_COLUMNS",
    "load_rounds",
    "parse_feed_date",
    "parse_feed_float",
    "parse_feed_int",
    "parse_invite",
    "parse_invites",
    "parse_snapshot",
    "parse_snapshots",
]
