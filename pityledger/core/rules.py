"""
Banner rules and replay configuration.

Configuration is passed explicitly into every replay call. Nothing here is
mutable, so several configurations can be evaluated side by side.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .events import BannerCategory


@dataclass(frozen=True)
class GachaRules:
    """
    Drop-rate contract for one banner.

    Only the bookkeeping fields are consumed by replay; hard/soft pity are
    carried for display.
    """
    hard_pity: int = 90
    soft_pity_start: int = 73
    has_capturing_radiance: bool = False
    radiance_threshold: int = 0
    has_fate_points: bool = False
    max_fate_points: int = 0


DEFAULT_RULES: Mapping[BannerCategory, GachaRules] = MappingProxyType({
    BannerCategory.CHARACTER: GachaRules(
        hard_pity=90,
        soft_pity_start=73,
        has_capturing_radiance=True,
        radiance_threshold=3,
    ),
    BannerCategory.WEAPON: GachaRules(
        hard_pity=77,
        soft_pity_start=62,
        has_fate_points=True,
        max_fate_points=2,
    ),
    BannerCategory.STANDARD: GachaRules(hard_pity=90, soft_pity_start=73),
    BannerCategory.CHRONICLED: GachaRules(hard_pity=90, soft_pity_start=73),
})


@dataclass(frozen=True)
class ReplayConfig:
    """
    Per-call replay configuration.

    Fields:
        rules: Banner -> GachaRules (missing banners fall back to DEFAULT_RULES)
        tracked_target: Weapon the caller is charting, used when an event
            carries no tracked_target of its own
    """
    rules: Mapping[BannerCategory, GachaRules] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_RULES))
    )
    tracked_target: Optional[str] = None

    def rules_for(self, banner: BannerCategory) -> GachaRules:
        rules = self.rules.get(banner)
        if rules is None:
            return DEFAULT_RULES[banner]
        return rules

    def with_tracked_target(self, tracked_target: Optional[str]) -> "ReplayConfig":
        return replace(self, tracked_target=tracked_target or None)

    def with_rules(self, banner: BannerCategory, **changes) -> "ReplayConfig":
        """Return a config with one banner's rules overridden, e.g. a different radiance threshold."""
        new_rules: Dict[BannerCategory, GachaRules] = dict(self.rules)
        new_rules[banner] = replace(self.rules_for(banner), **changes)
        return replace(self, rules=MappingProxyType(new_rules))
