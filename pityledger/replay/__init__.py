"""
Replay of pull history into per-banner pity state.

Must be 100% deterministic: same event set -> same state and annotations.
"""

from .runner import ReplayResult, replay

__all__ = [
    "ReplayResult",
    "replay",
]
