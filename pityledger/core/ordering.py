"""
Chronological ordering and validation of pull events.

Every replay starts here. Validation is all-or-nothing: one malformed event
rejects the whole input, because skipping it would shift every later pity
count on that banner.
"""

from datetime import datetime
from typing import Iterable, List, Tuple

from .events import BannerCategory, ItemType, PullEvent, Rarity
from .errors import DuplicateEventError, EventValidationError, UnknownBannerError

SortKey = Tuple[datetime, datetime, str]


def sort_key(event: PullEvent) -> SortKey:
    """Strict total order: occurred_at, then ingested_at, then id."""
    return (event.occurred_at, event.ingested_at, event.id)


def validate_event(event: PullEvent) -> None:
    """
    Check one event against the closed sets and required fields.

    Raises:
        EventValidationError: If a field is missing or has the wrong type
        UnknownBannerError: If the banner is not a BannerCategory
    """
    if not isinstance(event, PullEvent):
        raise EventValidationError(f"expected PullEvent, got {type(event).__name__}")

    if not isinstance(event.banner, BannerCategory):
        raise UnknownBannerError(f"event {event.id!r}: unknown banner category {event.banner!r}")
    if not isinstance(event.rarity, Rarity):
        raise EventValidationError(f"event {event.id!r}: unknown rarity {event.rarity!r}")
    if not isinstance(event.item_type, ItemType):
        raise EventValidationError(f"event {event.id!r}: unknown item_type {event.item_type!r}")

    for name in ("id", "external_id", "item_key"):
        value = getattr(event, name)
        if not isinstance(value, str) or not value:
            raise EventValidationError(f"event {event.id!r}: missing {name}")

    for name in ("occurred_at", "ingested_at"):
        value = getattr(event, name)
        if not isinstance(value, datetime) or value.tzinfo is None:
            raise EventValidationError(f"event {event.id!r}: {name} must be a timezone-aware datetime")

    if event.is_featured is not None and not isinstance(event.is_featured, bool):
        raise EventValidationError(f"event {event.id!r}: is_featured must be a boolean")
    if event.tracked_target is not None and not isinstance(event.tracked_target, str):
        raise EventValidationError(f"event {event.id!r}: tracked_target must be a string")


def validate_events(events: Iterable[PullEvent]) -> List[PullEvent]:
    """
    Validate every event and reject duplicates.

    Two events sharing an external_id are the same real-world pull; the
    ingestion boundary must collapse them before replay.

    Returns:
        The events as a new list, in input order

    Raises:
        EventValidationError, UnknownBannerError, DuplicateEventError
    """
    checked: List[PullEvent] = []
    seen_ids = set()
    seen_external = set()

    for ev in events:
        validate_event(ev)
        if ev.id in seen_ids:
            raise DuplicateEventError(f"duplicate event id: {ev.id!r}")
        if ev.external_id in seen_external:
            raise DuplicateEventError(f"duplicate external_id: {ev.external_id!r}")
        seen_ids.add(ev.id)
        seen_external.add(ev.external_id)
        checked.append(ev)

    return checked


def order_events(events: Iterable[PullEvent]) -> List[PullEvent]:
    """
    Validate and sort events into replay order.

    The result depends only on the event set, never on input position.
    The input is not modified.
    """
    return sorted(validate_events(events), key=sort_key)
