"""
Per-banner state machines.

One pure function per banner. Each takes the banner's current state, one
event of that banner and the replay config, and returns the next state plus
an annotation (rare pulls only). Handlers never mutate their inputs.

All handlers are registered with the Reducer in register_machines().
"""

from dataclasses import replace
from typing import Optional, Tuple

from .events import BannerCategory, PullEvent
from .rules import ReplayConfig
from .state import (
    CharacterBannerState,
    ChronicledBannerState,
    Outcome,
    PullAnnotation,
    StandardBannerState,
    WeaponBannerState,
)


def register_machines(reducer) -> None:
    reducer.register(BannerCategory.CHARACTER, advance_character)
    reducer.register(BannerCategory.WEAPON, advance_weapon)
    reducer.register(BannerCategory.STANDARD, advance_standard)
    reducer.register(BannerCategory.CHRONICLED, advance_chronicled)


def _resolve_rate_up(was_guaranteed: bool, ev: PullEvent) -> Tuple[Optional[Outcome], bool]:
    """
    Resolve a rare pull against the 50/50.

    Returns (outcome, guaranteed_after). A forced pull has no outcome. A pull
    with unknown is_featured counts as featured.
    """
    if was_guaranteed:
        return None, False
    featured = True if ev.is_featured is None else ev.is_featured
    if featured:
        return Outcome.WIN, False
    return Outcome.LOSS, True


def advance_character(
    cur: CharacterBannerState, ev: PullEvent, config: ReplayConfig
) -> Tuple[CharacterBannerState, Optional[PullAnnotation]]:
    rules = config.rules_for(BannerCategory.CHARACTER)
    pity_count = cur.pity + 1

    if not ev.is_rare:
        return replace(cur, pity=pity_count), None

    was_guaranteed = cur.guaranteed
    triggered_radiance = (
        rules.has_capturing_radiance
        and not was_guaranteed
        and cur.radiant_streak >= rules.radiance_threshold
    )
    outcome, guaranteed = _resolve_rate_up(was_guaranteed, ev)

    # Forced wins leave the streak alone
    streak = cur.radiant_streak
    if outcome is Outcome.WIN:
        streak = 0
    elif outcome is Outcome.LOSS:
        streak += 1

    annotation = PullAnnotation(
        event_id=ev.id,
        banner=ev.banner,
        pity_count=pity_count,
        was_guaranteed=was_guaranteed,
        outcome=outcome,
        triggered_radiance=triggered_radiance,
    )
    return CharacterBannerState(pity=0, guaranteed=guaranteed, radiant_streak=streak), annotation


def advance_chronicled(
    cur: ChronicledBannerState, ev: PullEvent, config: ReplayConfig
) -> Tuple[ChronicledBannerState, Optional[PullAnnotation]]:
    pity_count = cur.pity + 1

    if not ev.is_rare:
        return replace(cur, pity=pity_count), None

    was_guaranteed = cur.guaranteed
    outcome, guaranteed = _resolve_rate_up(was_guaranteed, ev)

    annotation = PullAnnotation(
        event_id=ev.id,
        banner=ev.banner,
        pity_count=pity_count,
        was_guaranteed=was_guaranteed,
        outcome=outcome,
    )
    return ChronicledBannerState(pity=0, guaranteed=guaranteed), annotation


def advance_weapon(
    cur: WeaponBannerState, ev: PullEvent, config: ReplayConfig
) -> Tuple[WeaponBannerState, Optional[PullAnnotation]]:
    """
    Weapon banner with fate points.

    The charted weapon comes from the event when it carries one, otherwise
    from config. Fate points only accumulate while a weapon is charted and
    are spent when the charted weapon drops or the cap was reached. A rare
    pull with nothing charted leaves them as they were.
    """
    rules = config.rules_for(BannerCategory.WEAPON)
    pity_count = cur.pity + 1
    target = ev.tracked_target or config.tracked_target

    if not ev.is_rare:
        return replace(cur, pity=pity_count, charted_weapon=target), None

    was_guaranteed = rules.has_fate_points and cur.fate_points >= rules.max_fate_points
    hit_target = target is not None and ev.item_key == target

    if not rules.has_fate_points:
        fate_points = 0
    elif target is None:
        # Untargeted pulls neither earn nor spend fate points
        fate_points = cur.fate_points
    elif was_guaranteed or hit_target:
        fate_points = 0
    else:
        fate_points = min(rules.max_fate_points, cur.fate_points + 1)

    annotation = PullAnnotation(
        event_id=ev.id,
        banner=ev.banner,
        pity_count=pity_count,
        was_guaranteed=was_guaranteed,
    )
    return WeaponBannerState(pity=0, fate_points=fate_points, charted_weapon=target), annotation


def advance_standard(
    cur: StandardBannerState, ev: PullEvent, config: ReplayConfig
) -> Tuple[StandardBannerState, Optional[PullAnnotation]]:
    pity_count = cur.pity + 1

    if not ev.is_rare:
        return StandardBannerState(pity=pity_count), None

    annotation = PullAnnotation(
        event_id=ev.id,
        banner=ev.banner,
        pity_count=pity_count,
        was_guaranteed=False,
    )
    return StandardBannerState(pity=0), annotation
