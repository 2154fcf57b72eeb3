"""
Tests for replay determinism.

Critical: Replay must produce identical state and annotations for the same
event set, whatever order the events arrive in, and banners must never leak
state into each other.
"""

import random
from dataclasses import replace

import pytest

from pityledger.core import (
    BannerCategory,
    BannerPityState,
    DuplicateEventError,
    EventValidationError,
    Outcome,
    canonical_json_str,
)
from pityledger.core.ordering import order_events
from pityledger.replay import replay
from pityledger.tests.helpers import make_pull

ALL_BANNERS = list(BannerCategory)


def _random_history(seed: int, size: int = 300):
    """Mixed-banner history with plausible rarity weights."""
    rng = random.Random(seed)
    events = []
    for i in range(size):
        banner = rng.choice(ALL_BANNERS)
        roll = rng.random()
        rarity = 5 if roll < 0.05 else 4 if roll < 0.2 else 3
        is_featured = rng.choice([True, False]) if rarity == 5 else None
        item_key = rng.choice(["X", "Y", "Z"])
        events.append(
            make_pull(
                f"pull-{i:04d}",
                t=i // 10,  # ten-pull batches share a timestamp
                banner=banner,
                rarity=rarity,
                is_featured=is_featured,
                item_key=item_key,
                tracked_target="X" if banner == BannerCategory.WEAPON else None,
            )
        )
    return events


def test_replay_determinism_100_runs():
    """Replay same events 100 times must produce identical output."""
    events = _random_history(seed=1)

    results = {canonical_json_str(replay(events)) for _ in range(100)}

    assert len(results) == 1


def test_replay_order_independent():
    """Any permutation of the same event set replays identically."""
    events = _random_history(seed=2)
    expected = canonical_json_str(replay(events))

    rng = random.Random(99)
    for _ in range(20):
        shuffled = list(events)
        rng.shuffle(shuffled)
        assert canonical_json_str(replay(shuffled)) == expected


def test_replay_empty_log():
    """Replay empty log must return initial state."""
    result = replay([])

    assert result.applied == 0
    assert result.state == BannerPityState.initial()
    assert result.annotations == {}


def test_replay_accepts_generator():
    events = _random_history(seed=3, size=50)

    assert replay(ev for ev in events) == replay(events)


def test_replay_partial():
    """Replay to a pull id equals replay of the ordered prefix."""
    events = _random_history(seed=4)
    ordered = order_events(events)
    stop = ordered[149]

    partial = replay(events, to_event_id=stop.id)
    prefix = replay(ordered[:150])

    assert partial.applied == 150
    assert canonical_json_str(partial) == canonical_json_str(prefix)


def test_replay_partial_unknown_id():
    with pytest.raises(EventValidationError):
        replay(_random_history(seed=5, size=10), to_event_id="missing")


def test_duplicate_external_id_rejected():
    """A re-imported duplicate is rejected rather than double counted."""
    events = _random_history(seed=6, size=40)
    dup = replace(events[10], id="copy")

    with pytest.raises(DuplicateEventError):
        replay(events + [dup])


def test_malformed_event_aborts_replay():
    """No partial result: one bad event fails the whole call."""
    events = _random_history(seed=7, size=40)
    bad = replace(events[5], id="bad", external_id="bad", rarity=2)

    with pytest.raises(EventValidationError):
        replay(events + [bad])


def test_replay_does_not_mutate_events():
    events = _random_history(seed=8, size=60)
    before = [ev.to_dict() for ev in events]

    replay(events)

    assert [ev.to_dict() for ev in events] == before


@pytest.mark.parametrize("target", ALL_BANNERS)
def test_banner_isolation(target):
    """Pulls on other banners never change a banner's state or annotations."""
    events = _random_history(seed=9)
    only_target = [ev for ev in events if ev.banner == target]

    full = replay(events)
    isolated = replay(only_target)

    assert full.state.for_banner(target) == isolated.state.for_banner(target)
    assert {k: v for k, v in full.annotations.items() if v.banner == target} == isolated.annotations


def test_pity_reset_law():
    """n non-rare pulls after a rare pull leave pity at exactly n, on every banner."""
    for banner in ALL_BANNERS:
        for n in (0, 1, 7, 40):
            events = [make_pull("rare", t=0, banner=banner, rarity=5, item_key="X")]
            events += [make_pull(f"c{i}", t=i + 1, banner=banner, rarity=4 if i % 3 == 0 else 3) for i in range(n)]

            assert replay(events).state.for_banner(banner).pity == n


@pytest.mark.parametrize("banner", [BannerCategory.CHARACTER, BannerCategory.CHRONICLED])
def test_guarantee_alternation_law(banner):
    """A genuine loss is always followed, on the next rare pull, by a forced one."""
    events = [ev for ev in order_events(_random_history(seed=10, size=2000)) if ev.banner == banner]
    result = replay(events)

    rare = [result.annotations[ev.id] for ev in events if ev.is_rare]
    assert len(rare) > 5
    for prev, nxt in zip(rare, rare[1:]):
        if prev.outcome is Outcome.LOSS:
            assert nxt.was_guaranteed is True
            assert nxt.outcome is None


def test_escalation_monotonic_law():
    """Streak rises only on genuine losses and resets only on genuine wins."""
    events = [ev for ev in order_events(_random_history(seed=11, size=2000)) if ev.banner == BannerCategory.CHARACTER]

    streak = 0
    for n in range(1, len(events) + 1):
        ev = events[n - 1]
        if not ev.is_rare:
            continue
        result = replay(events[:n])
        ann = result.annotations[ev.id]
        new_streak = result.state.character.radiant_streak
        if ann.outcome is Outcome.LOSS:
            assert new_streak == streak + 1
        elif ann.outcome is Outcome.WIN:
            assert new_streak == 0
        else:
            assert new_streak == streak
        streak = new_streak
