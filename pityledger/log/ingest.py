"""
Ingestion helpers: build pull events from imported records and merge
batches into an existing log.
"""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..core.errors import EventValidationError
from ..core.events import BannerCategory, ItemType, PullEvent, Rarity, format_timestamp
from ..core.ids import stable_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_pull_event(
    external_id: str,
    banner: BannerCategory,
    occurred_at: datetime,
    item_type: ItemType,
    item_key: str,
    rarity: Rarity,
    is_featured: Optional[bool] = None,
    tracked_target: Optional[str] = None,
    now: Optional[datetime] = None,
) -> PullEvent:
    """
    Create a pull event at ingestion, assigning id and ingested_at.

    The id is derived from external_id, so the same real-world pull always
    gets the same id.
    """
    return PullEvent(
        id=stable_id("pull", external_id),
        external_id=external_id,
        banner=banner,
        occurred_at=occurred_at,
        ingested_at=now or _utcnow(),
        item_type=item_type,
        item_key=item_key.strip() or item_key,
        rarity=rarity,
        is_featured=is_featured,
        tracked_target=tracked_target,
    )


def event_from_record(data: Dict[str, Any], now: Optional[datetime] = None) -> PullEvent:
    """
    Build a pull event from an imported record.

    Records from importers or manual entry may omit id and ingested_at; both
    are assigned here. Everything else is validated by PullEvent.from_dict.
    """
    if not isinstance(data, dict):
        raise EventValidationError(f"pull record must be an object, got {type(data).__name__}")

    record = dict(data)
    if record.get("external_id") and not record.get("id"):
        record["id"] = stable_id("pull", str(record["external_id"]))
    if not record.get("ingested_at"):
        record["ingested_at"] = format_timestamp(now or _utcnow())
    return PullEvent.from_dict(record)


def merge_events(
    existing: Iterable[PullEvent], incoming: Iterable[PullEvent]
) -> Tuple[List[PullEvent], int, int, int]:
    """
    Upsert incoming pulls into existing ones, keyed by external_id.

    Last write wins. A superseding pull keeps the stored id and ingested_at
    so its position in replay order does not move on re-import.

    Returns:
        (merged events, added, updated, unchanged)
    """
    merged: Dict[str, PullEvent] = {}
    for ev in existing:
        merged[ev.external_id] = ev

    added = updated = unchanged = 0
    for ev in incoming:
        prior = merged.get(ev.external_id)
        if prior is None:
            merged[ev.external_id] = ev
            added += 1
            continue

        superseding = replace(ev, id=prior.id, ingested_at=prior.ingested_at)
        if superseding == prior:
            unchanged += 1
        else:
            merged[ev.external_id] = superseding
            updated += 1

    return list(merged.values()), added, updated, unchanged
