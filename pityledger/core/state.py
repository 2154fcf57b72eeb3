"""
State model for pity replay.

Each banner has its own state dataclass carrying only the fields that banner
uses. BannerPityState groups the four; it is immutable and every update
returns a new instance.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Union

from .events import BannerCategory
from .errors import UnknownBannerError


class Outcome(str, Enum):
    """Result of a genuine (non-forced) rate-up resolution."""

    WIN = "win"
    LOSS = "loss"


@dataclass(frozen=True)
class CharacterBannerState:
    pity: int = 0
    guaranteed: bool = False
    radiant_streak: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pity": self.pity,
            "guaranteed": self.guaranteed,
            "radiant_streak": self.radiant_streak,
        }


@dataclass(frozen=True)
class WeaponBannerState:
    pity: int = 0
    fate_points: int = 0
    charted_weapon: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pity": self.pity,
            "fate_points": self.fate_points,
            "charted_weapon": self.charted_weapon,
        }


@dataclass(frozen=True)
class StandardBannerState:
    pity: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"pity": self.pity}


@dataclass(frozen=True)
class ChronicledBannerState:
    pity: int = 0
    guaranteed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"pity": self.pity, "guaranteed": self.guaranteed}


BannerState = Union[
    CharacterBannerState,
    WeaponBannerState,
    StandardBannerState,
    ChronicledBannerState,
]

_FIELD_BY_BANNER = {
    BannerCategory.CHARACTER: "character",
    BannerCategory.WEAPON: "weapon",
    BannerCategory.STANDARD: "standard",
    BannerCategory.CHRONICLED: "chronicled",
}


@dataclass(frozen=True)
class BannerPityState:
    """
    Immutable container of all four banner states.

    A fresh instance (all zero / False / None) is the starting point of
    every replay.
    """
    character: CharacterBannerState = field(default_factory=CharacterBannerState)
    weapon: WeaponBannerState = field(default_factory=WeaponBannerState)
    standard: StandardBannerState = field(default_factory=StandardBannerState)
    chronicled: ChronicledBannerState = field(default_factory=ChronicledBannerState)

    @staticmethod
    def initial() -> "BannerPityState":
        return BannerPityState()

    def for_banner(self, banner: BannerCategory) -> BannerState:
        try:
            return getattr(self, _FIELD_BY_BANNER[banner])
        except KeyError as ex:
            raise UnknownBannerError(f"unknown banner category: {banner!r}") from ex

    def with_banner(self, banner: BannerCategory, banner_state: BannerState) -> "BannerPityState":
        """
        Create new state with one banner replaced.

        Since BannerPityState is immutable, this returns a new instance.
        """
        try:
            name = _FIELD_BY_BANNER[banner]
        except KeyError as ex:
            raise UnknownBannerError(f"unknown banner category: {banner!r}") from ex
        return replace(self, **{name: banner_state})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "character": self.character.to_dict(),
            "weapon": self.weapon.to_dict(),
            "standard": self.standard.to_dict(),
            "chronicled": self.chronicled.to_dict(),
        }


@dataclass(frozen=True)
class PullAnnotation:
    """
    Derived facts for one rare-tier pull. Computed at replay, never stored.

    Fields:
        event_id: Id of the annotated pull
        banner: Banner of the pull
        pity_count: Pulls since the previous rare pull on this banner, inclusive
        was_guaranteed: Whether a guarantee was in effect going into the pull
        outcome: WIN / LOSS for a genuine 50/50, None if forced or not applicable
        triggered_radiance: Whether the loss streak had reached its threshold
    """
    event_id: str
    banner: BannerCategory
    pity_count: int
    was_guaranteed: bool
    outcome: Optional[Outcome] = None
    triggered_radiance: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "banner": self.banner.value,
            "pity_count": self.pity_count,
            "was_guaranteed": self.was_guaranteed,
            "outcome": self.outcome.value if self.outcome else None,
            "triggered_radiance": self.triggered_radiance,
        }
