"""
Statistics aggregator.

All figures are computed from one replay of the full log, so rare-pull pity
and 50/50 outcomes come from the same annotations the state machines emit.
The win/loss tally only counts genuine 50/50s: a pull made while a guarantee
was active carries no information about the win probability.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..core.events import BannerCategory, PullEvent, Rarity, parse_banner
from ..core.ordering import order_events, validate_events
from ..core.rules import ReplayConfig
from ..core.state import Outcome, PullAnnotation
from ..query import BannerPitySnapshot, snapshot_banner
from ..replay import ReplayResult, replay

RATE_UP_BANNERS = frozenset({BannerCategory.CHARACTER, BannerCategory.CHRONICLED})


@dataclass(frozen=True)
class BannerStats:
    total_pulls: int = 0
    rare_count: int = 0
    uncommon_count: int = 0
    common_count: int = 0
    rare_rate: float = 0.0
    uncommon_rate: float = 0.0
    average_rare_pity: float = 0.0
    average_uncommon_pity: float = 0.0
    won: int = 0
    lost: int = 0
    win_rate: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_pulls": self.total_pulls,
            "rare_count": self.rare_count,
            "uncommon_count": self.uncommon_count,
            "common_count": self.common_count,
            "rare_rate": self.rare_rate,
            "uncommon_rate": self.uncommon_rate,
            "average_rare_pity": self.average_rare_pity,
            "average_uncommon_pity": self.average_uncommon_pity,
            "won": self.won,
            "lost": self.lost,
            "win_rate": self.win_rate,
        }


@dataclass(frozen=True)
class RarePull:
    """A rare pull together with its replay annotation."""
    event: PullEvent
    annotation: PullAnnotation

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event.to_dict(), "annotation": self.annotation.to_dict()}


@dataclass(frozen=True)
class BannerAnalysis:
    banner: BannerCategory
    stats: BannerStats
    snapshot: BannerPitySnapshot
    rare_pulls: List[RarePull] = field(default_factory=list)
    uncommon_pulls: List[PullEvent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "banner": self.banner.value,
            "stats": self.stats.to_dict(),
            "snapshot": self.snapshot.to_dict(),
            "rare_pulls": [p.to_dict() for p in self.rare_pulls],
            "uncommon_pulls": [e.to_dict() for e in self.uncommon_pulls],
        }


def _percent(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def _mean(values: List[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def _banner_pulls(ordered: List[PullEvent], banner: BannerCategory) -> List[PullEvent]:
    return [ev for ev in ordered if ev.banner == banner]


def _rare_pulls(banner_pulls: List[PullEvent], result: ReplayResult) -> List[RarePull]:
    return [RarePull(event=ev, annotation=result.annotations[ev.id]) for ev in banner_pulls if ev.is_rare]


def _uncommon_pity_values(banner_pulls: List[PullEvent]) -> List[int]:
    """Uncommon pity resets on an uncommon or a rare pull."""
    values: List[int] = []
    pity = 0
    for ev in banner_pulls:
        pity += 1
        if ev.rarity == Rarity.UNCOMMON:
            values.append(pity)
            pity = 0
        elif ev.rarity == Rarity.RARE:
            pity = 0
    return values


def _stats(banner: BannerCategory, banner_pulls: List[PullEvent], rare: List[RarePull]) -> BannerStats:
    total = len(banner_pulls)
    uncommon_count = sum(1 for ev in banner_pulls if ev.rarity == Rarity.UNCOMMON)
    rare_count = len(rare)

    won = lost = 0
    if banner in RATE_UP_BANNERS:
        won = sum(1 for p in rare if p.annotation.outcome is Outcome.WIN)
        lost = sum(1 for p in rare if p.annotation.outcome is Outcome.LOSS)

    return BannerStats(
        total_pulls=total,
        rare_count=rare_count,
        uncommon_count=uncommon_count,
        common_count=total - rare_count - uncommon_count,
        rare_rate=_percent(rare_count, total),
        uncommon_rate=_percent(uncommon_count, total),
        average_rare_pity=_mean([p.annotation.pity_count for p in rare]),
        average_uncommon_pity=_mean(_uncommon_pity_values(banner_pulls)),
        won=won,
        lost=lost,
        win_rate=_percent(won, won + lost),
    )


def compute_stats(
    events: Iterable[PullEvent], banner: BannerCategory, config: Optional[ReplayConfig] = None
) -> BannerStats:
    """
    Compute descriptive statistics for one banner.

    The whole log is validated, not only the banner's slice.
    """
    banner = parse_banner(banner)
    ordered = order_events(events)
    result = replay(ordered, config)
    banner_pulls = _banner_pulls(ordered, banner)
    return _stats(banner, banner_pulls, _rare_pulls(banner_pulls, result))


def find_rare_pulls(
    events: Iterable[PullEvent], banner: BannerCategory, config: Optional[ReplayConfig] = None
) -> List[RarePull]:
    """Rare pulls of a banner with their pity counts, oldest first."""
    banner = parse_banner(banner)
    ordered = order_events(events)
    result = replay(ordered, config)
    return _rare_pulls(_banner_pulls(ordered, banner), result)


def find_uncommon_pulls(events: Iterable[PullEvent], banner: BannerCategory) -> List[PullEvent]:
    """Uncommon pulls of a banner, newest first."""
    banner = parse_banner(banner)
    ordered = order_events(events)
    return [ev for ev in reversed(ordered) if ev.banner == banner and ev.rarity == Rarity.UNCOMMON]


def analyze(
    events: Iterable[PullEvent], banner: BannerCategory, config: Optional[ReplayConfig] = None
) -> BannerAnalysis:
    """Stats, current snapshot and notable pulls of one banner from a single replay."""
    banner = parse_banner(banner)
    config = config or ReplayConfig()
    ordered = order_events(events)
    result = replay(ordered, config)
    banner_pulls = _banner_pulls(ordered, banner)
    rare = _rare_pulls(banner_pulls, result)

    return BannerAnalysis(
        banner=banner,
        stats=_stats(banner, banner_pulls, rare),
        snapshot=snapshot_banner(banner, result.state.for_banner(banner), config),
        rare_pulls=rare,
        uncommon_pulls=[ev for ev in reversed(banner_pulls) if ev.rarity == Rarity.UNCOMMON],
    )


def summarize_by_banner(events: Iterable[PullEvent]) -> Dict[BannerCategory, int]:
    """Pull count per banner, every banner present."""
    summary = {b: 0 for b in BannerCategory}
    for ev in validate_events(events):
        summary[ev.banner] += 1
    return summary
