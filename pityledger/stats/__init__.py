"""
Descriptive statistics over the pull log, derived from replay.
"""

from .aggregator import (
    BannerAnalysis,
    BannerStats,
    RarePull,
    analyze,
    compute_stats,
    find_rare_pulls,
    find_uncommon_pulls,
    summarize_by_banner,
)

__all__ = [
    "BannerAnalysis",
    "BannerStats",
    "RarePull",
    "analyze",
    "compute_stats",
    "find_rare_pulls",
    "find_uncommon_pulls",
    "summarize_by_banner",
]
