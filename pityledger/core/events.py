"""
Pull event model.

A PullEvent is an immutable record of one real-world draw. Events are never
mutated by the engine; ordering and pity state are always derived.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any, Dict, Optional

from .errors import EventValidationError, UnknownBannerError


class BannerCategory(str, Enum):
    """Closed set of draw pools, each with its own state machine."""

    CHARACTER = "character"
    WEAPON = "weapon"
    STANDARD = "standard"
    CHRONICLED = "chronicled"


class ItemType(str, Enum):
    CHARACTER = "character"
    WEAPON = "weapon"


class Rarity(IntEnum):
    COMMON = 3
    UNCOMMON = 4
    RARE = 5


REQUIRED_FIELDS = (
    "id",
    "external_id",
    "banner",
    "occurred_at",
    "ingested_at",
    "item_type",
    "item_key",
    "rarity",
)


def parse_timestamp(value: Any, field_name: str = "timestamp") -> datetime:
    """
    Parse an ISO-8601 string (or datetime) into an aware UTC datetime.

    Naive values are interpreted as UTC. A space separator and a trailing
    "Z" are both accepted, since importers emit either.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError as ex:
            raise EventValidationError(f"invalid {field_name}: {value!r}") from ex
    else:
        raise EventValidationError(f"invalid {field_name}: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_banner(value: Any) -> BannerCategory:
    try:
        return BannerCategory(value)
    except ValueError as ex:
        raise UnknownBannerError(f"unknown banner category: {value!r}") from ex


def parse_rarity(value: Any) -> Rarity:
    """
    Parse a rarity tier from an int or a string of digits.

    Fractional and boolean values are rejected rather than truncated.
    """
    if isinstance(value, bool):
        raise EventValidationError(f"unknown rarity: {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    try:
        return Rarity(value)
    except (TypeError, ValueError) as ex:
        raise EventValidationError(f"unknown rarity: {value!r}") from ex


@dataclass(frozen=True)
class PullEvent:
    """
    Immutable pull record.

    Fields:
        id: Stable unique identifier assigned at ingestion
        external_id: Dedup key from the importer (the game's own record id)
        banner: Banner category the draw belongs to
        occurred_at: Time of the real-world draw (primary ordering key)
        ingested_at: Time the record was stored locally (tie-break only)
        item_type: Character or weapon
        item_key: Identifier of the drawn item
        rarity: Common / uncommon / rare tier
        is_featured: For rare draws, whether the item was the rate-up item
        tracked_target: Weapon banner only, the item the player was charting
    """
    id: str
    external_id: str
    banner: BannerCategory
    occurred_at: datetime
    ingested_at: datetime
    item_type: ItemType
    item_key: str
    rarity: Rarity
    is_featured: Optional[bool] = None
    tracked_target: Optional[str] = None

    @property
    def is_rare(self) -> bool:
        return self.rarity == Rarity.RARE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "external_id": self.external_id,
            "banner": self.banner.value,
            "occurred_at": format_timestamp(self.occurred_at),
            "ingested_at": format_timestamp(self.ingested_at),
            "item_type": self.item_type.value,
            "item_key": self.item_key,
            "rarity": int(self.rarity),
            "is_featured": self.is_featured,
            "tracked_target": self.tracked_target,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PullEvent":
        """
        Build a PullEvent from its JSON shape.

        Raises:
            EventValidationError: If a required field is missing or invalid
            UnknownBannerError: If banner is outside the closed set
        """
        if not isinstance(data, dict):
            raise EventValidationError(f"pull event must be an object, got {type(data).__name__}")

        missing = [k for k in REQUIRED_FIELDS if data.get(k) in (None, "")]
        if missing:
            raise EventValidationError(
                f"pull event {data.get('id') or data.get('external_id')!r} missing fields: {', '.join(missing)}"
            )

        try:
            item_type = ItemType(data["item_type"])
        except ValueError as ex:
            raise EventValidationError(f"unknown item_type: {data['item_type']!r}") from ex
        rarity = parse_rarity(data["rarity"])

        is_featured = data.get("is_featured")
        if is_featured is not None and not isinstance(is_featured, bool):
            raise EventValidationError(f"is_featured must be a boolean, got {is_featured!r}")

        tracked_target = data.get("tracked_target") or None
        if tracked_target is not None and not isinstance(tracked_target, str):
            raise EventValidationError(f"tracked_target must be a string, got {tracked_target!r}")

        return cls(
            id=str(data["id"]),
            external_id=str(data["external_id"]),
            banner=parse_banner(data["banner"]),
            occurred_at=parse_timestamp(data["occurred_at"], "occurred_at"),
            ingested_at=parse_timestamp(data["ingested_at"], "ingested_at"),
            item_type=item_type,
            item_key=str(data["item_key"]),
            rarity=rarity,
            is_featured=is_featured,
            tracked_target=tracked_target,
        )
