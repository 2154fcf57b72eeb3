"""
Current-state queries over the pull log.

Every query is a thin wrapper over replay(): there is no cheaper incremental
path, so the answer here always equals the final state of a full replay.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from .core.events import BannerCategory, PullEvent
from .core.rules import ReplayConfig
from .core.state import (
    BannerPityState,
    BannerState,
    CharacterBannerState,
    ChronicledBannerState,
    StandardBannerState,
    WeaponBannerState,
)
from .replay import replay


def get_current_state(
    events: Iterable[PullEvent], config: Optional[ReplayConfig] = None
) -> BannerPityState:
    return replay(events, config).state


def get_current_state_for_category(
    events: Iterable[PullEvent],
    banner: BannerCategory,
    config: Optional[ReplayConfig] = None,
) -> BannerState:
    return get_current_state(events, config).for_banner(banner)


@dataclass(frozen=True)
class BannerPitySnapshot:
    """
    Flat "where do I stand" view of one banner for display.

    For the weapon banner, guaranteed means fate points are at the cap.
    radiance_active means the next genuine 50/50 would trigger Capturing
    Radiance.
    """
    banner: BannerCategory
    pity: int
    guaranteed: bool = False
    radiant_streak: int = 0
    radiance_active: bool = False
    fate_points: Optional[int] = None
    charted_weapon: Optional[str] = None
    hard_pity: int = 90

    @property
    def pulls_to_hard_pity(self) -> int:
        return max(self.hard_pity - self.pity, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "banner": self.banner.value,
            "pity": self.pity,
            "guaranteed": self.guaranteed,
            "radiant_streak": self.radiant_streak,
            "radiance_active": self.radiance_active,
            "fate_points": self.fate_points,
            "charted_weapon": self.charted_weapon,
            "hard_pity": self.hard_pity,
            "pulls_to_hard_pity": self.pulls_to_hard_pity,
        }


def snapshot_banner(
    banner: BannerCategory, banner_state: BannerState, config: ReplayConfig
) -> BannerPitySnapshot:
    rules = config.rules_for(banner)

    if isinstance(banner_state, CharacterBannerState):
        return BannerPitySnapshot(
            banner=banner,
            pity=banner_state.pity,
            guaranteed=banner_state.guaranteed,
            radiant_streak=banner_state.radiant_streak,
            radiance_active=(
                rules.has_capturing_radiance
                and banner_state.radiant_streak >= rules.radiance_threshold
            ),
            hard_pity=rules.hard_pity,
        )
    if isinstance(banner_state, WeaponBannerState):
        return BannerPitySnapshot(
            banner=banner,
            pity=banner_state.pity,
            guaranteed=rules.has_fate_points and banner_state.fate_points >= rules.max_fate_points,
            fate_points=banner_state.fate_points,
            charted_weapon=banner_state.charted_weapon,
            hard_pity=rules.hard_pity,
        )
    if isinstance(banner_state, ChronicledBannerState):
        return BannerPitySnapshot(
            banner=banner,
            pity=banner_state.pity,
            guaranteed=banner_state.guaranteed,
            hard_pity=rules.hard_pity,
        )
    if isinstance(banner_state, StandardBannerState):
        return BannerPitySnapshot(banner=banner, pity=banner_state.pity, hard_pity=rules.hard_pity)
    raise TypeError(f"unsupported banner state: {type(banner_state).__name__}")


def get_pity_snapshots(
    events: Iterable[PullEvent], config: Optional[ReplayConfig] = None
) -> Dict[BannerCategory, BannerPitySnapshot]:
    config = config or ReplayConfig()
    state = get_current_state(events, config)
    return {b: snapshot_banner(b, state.for_banner(b), config) for b in BannerCategory}
