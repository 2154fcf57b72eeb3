"""
Builders for pull events used across tests.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pityledger.core import BannerCategory, ItemType, PullEvent, Rarity

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_pull(
    pull_id: str,
    t: int = 0,
    banner: BannerCategory = BannerCategory.CHARACTER,
    rarity: int = 3,
    is_featured: Optional[bool] = None,
    item_key: str = "Item",
    tracked_target: Optional[str] = None,
    ingested_t: Optional[int] = None,
    external_id: Optional[str] = None,
) -> PullEvent:
    """Pull occurring t seconds after BASE_TIME, ingested at the same time unless given."""
    occurred_at = BASE_TIME + timedelta(seconds=t)
    ingested_at = BASE_TIME + timedelta(seconds=t if ingested_t is None else ingested_t)
    return PullEvent(
        id=pull_id,
        external_id=external_id or f"ext-{pull_id}",
        banner=banner,
        occurred_at=occurred_at,
        ingested_at=ingested_at,
        item_type=ItemType.WEAPON if banner == BannerCategory.WEAPON else ItemType.CHARACTER,
        item_key=item_key,
        rarity=Rarity(rarity),
        is_featured=is_featured,
        tracked_target=tracked_target,
    )


def commons(prefix: str, count: int, start: int, banner: BannerCategory = BannerCategory.CHARACTER) -> List[PullEvent]:
    """count common pulls at t = start, start+1, ..."""
    return [make_pull(f"{prefix}-{i}", t=start + i, banner=banner) for i in range(count)]
