"""
Core pity replay primitives.

- PullEvent: Immutable pull record
- ordering: Validation and chronological order
- machines / Reducer: Per-banner state machines and their dispatch
- BannerPityState / PullAnnotation: Replay outputs
- ReplayConfig / GachaRules: Explicit per-call configuration
- canonical: Deterministic serialization
"""

from .events import BannerCategory, ItemType, PullEvent, Rarity
from .state import (
    BannerPityState,
    CharacterBannerState,
    ChronicledBannerState,
    Outcome,
    PullAnnotation,
    StandardBannerState,
    WeaponBannerState,
)
from .rules import DEFAULT_RULES, GachaRules, ReplayConfig
from .ordering import order_events, sort_key, validate_event, validate_events
from .reducer import Reducer
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str, state_hash
from .ids import stable_id
from .errors import (
    DuplicateEventError,
    EventValidationError,
    InvalidTransitionError,
    PityLedgerError,
    PullLogError,
    UnknownBannerError,
)

__all__ = [
    "BannerCategory",
    "ItemType",
    "PullEvent",
    "Rarity",
    "BannerPityState",
    "CharacterBannerState",
    "ChronicledBannerState",
    "Outcome",
    "PullAnnotation",
    "StandardBannerState",
    "WeaponBannerState",
    "DEFAULT_RULES",
    "GachaRules",
    "ReplayConfig",
    "order_events",
    "sort_key",
    "validate_event",
    "validate_events",
    "Reducer",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "state_hash",
    "stable_id",
    "DuplicateEventError",
    "EventValidationError",
    "InvalidTransitionError",
    "PityLedgerError",
    "PullLogError",
    "UnknownBannerError",
]
