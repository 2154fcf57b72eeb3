"""
Tests for the per-banner state machines.

Each machine is exercised through replay() on a single banner, plus direct
calls where purity matters.
"""

import pytest

from pityledger.core import (
    DEFAULT_RULES,
    BannerCategory,
    CharacterBannerState,
    ChronicledBannerState,
    Outcome,
    ReplayConfig,
    StandardBannerState,
    WeaponBannerState,
)
from pityledger.core.machines import advance_character, advance_weapon
from pityledger.replay import replay
from pityledger.tests.helpers import commons, make_pull

CHAR = BannerCategory.CHARACTER
WEAPON = BannerCategory.WEAPON
STANDARD = BannerCategory.STANDARD
CHRON = BannerCategory.CHRONICLED


def _loss_scenario():
    return commons("c", 3, start=0) + [make_pull("loss", t=3, rarity=5, is_featured=False)]


def test_character_loss_sets_guarantee():
    """Three commons then a lost 50/50: pity 0, guaranteed, streak 1, annotated pity 4."""
    result = replay(_loss_scenario())

    assert result.state.character == CharacterBannerState(pity=0, guaranteed=True, radiant_streak=1)

    ann = result.annotations["loss"]
    assert ann.pity_count == 4
    assert ann.was_guaranteed is False
    assert ann.outcome is Outcome.LOSS


def test_character_forced_win_keeps_streak():
    """A rare pull under guarantee is forced even if marked off-banner, and the streak holds."""
    events = _loss_scenario() + [make_pull("forced", t=4, rarity=5, is_featured=False)]
    result = replay(events)

    ann = result.annotations["forced"]
    assert ann.was_guaranteed is True
    assert ann.outcome is None
    assert ann.pity_count == 1
    assert result.state.character == CharacterBannerState(pity=0, guaranteed=False, radiant_streak=1)


def test_character_genuine_win_resets_streak():
    events = _loss_scenario() + [
        make_pull("forced", t=4, rarity=5, is_featured=True),
        make_pull("won", t=5, rarity=5, is_featured=True),
    ]
    result = replay(events)

    assert result.annotations["won"].outcome is Outcome.WIN
    assert result.state.character.radiant_streak == 0
    assert result.state.character.guaranteed is False


def test_character_unknown_featured_counts_as_win():
    result = replay([make_pull("r", rarity=5, is_featured=None)])

    assert result.annotations["r"].outcome is Outcome.WIN
    assert result.state.character.guaranteed is False


def test_radiance_flag_after_threshold_losses():
    """Three genuine losses (each followed by a forced win) arm radiance for the next genuine pull."""
    events = []
    t = 0
    for i in range(3):
        events.append(make_pull(f"loss-{i}", t=t, rarity=5, is_featured=False))
        events.append(make_pull(f"forced-{i}", t=t + 1, rarity=5, is_featured=True))
        t += 2
    events.append(make_pull("radiant", t=t, rarity=5, is_featured=True))

    result = replay(events)

    assert result.annotations["loss-2"].triggered_radiance is False
    assert result.annotations["forced-2"].triggered_radiance is False
    assert result.annotations["radiant"].triggered_radiance is True
    assert result.annotations["radiant"].outcome is Outcome.WIN
    assert result.state.character.radiant_streak == 0


def test_radiance_threshold_is_configurable():
    """Evaluating a different threshold needs only a different config."""
    events = [
        make_pull("loss", t=0, rarity=5, is_featured=False),
        make_pull("forced", t=1, rarity=5),
        make_pull("next", t=2, rarity=5, is_featured=True),
    ]

    default = replay(events)
    eager = replay(events, ReplayConfig().with_rules(CHAR, radiance_threshold=1))

    assert default.annotations["next"].triggered_radiance is False
    assert eager.annotations["next"].triggered_radiance is True


def test_chronicled_guarantee_without_streak():
    events = [
        make_pull("loss", t=0, banner=CHRON, rarity=5, is_featured=False),
        make_pull("forced", t=1, banner=CHRON, rarity=5, is_featured=False),
    ]
    result = replay(events)

    assert result.annotations["loss"].outcome is Outcome.LOSS
    assert result.annotations["forced"].was_guaranteed is True
    assert result.annotations["forced"].outcome is None
    assert result.annotations["forced"].triggered_radiance is False
    assert result.state.chronicled == ChronicledBannerState(pity=0, guaranteed=False)


def test_weapon_fate_points_accumulate_and_reset_on_hit():
    """Charting X: two misses then X gives fate points 1, 2, 0."""
    config = ReplayConfig(tracked_target="X")
    misses = [
        make_pull("miss-1", t=0, banner=WEAPON, rarity=5, item_key="Y"),
        make_pull("miss-2", t=1, banner=WEAPON, rarity=5, item_key="Z"),
    ]
    hit = make_pull("hit", t=2, banner=WEAPON, rarity=5, item_key="X")

    points = []
    for n in range(1, 4):
        state = replay((misses + [hit])[:n], config).state.weapon
        points.append(state.fate_points)
        assert state.pity == 0

    assert points == [1, 2, 0]


def test_weapon_guarantee_at_cap():
    """With fate points at the cap the next rare pull is guaranteed and spends them."""
    config = ReplayConfig(tracked_target="X")
    events = [
        make_pull("miss-1", t=0, banner=WEAPON, rarity=5, item_key="Y"),
        make_pull("miss-2", t=1, banner=WEAPON, rarity=5, item_key="Y"),
        make_pull("capped", t=2, banner=WEAPON, rarity=5, item_key="Y"),
    ]
    result = replay(events, config)

    assert result.annotations["miss-2"].was_guaranteed is False
    assert result.annotations["capped"].was_guaranteed is True
    assert result.annotations["capped"].outcome is None
    assert result.annotations["capped"].triggered_radiance is False
    assert result.state.weapon.fate_points == 0


def test_weapon_without_target_never_accumulates():
    events = [make_pull(f"miss-{i}", t=i, banner=WEAPON, rarity=5, item_key="Y") for i in range(3)]
    result = replay(events)

    assert result.state.weapon == WeaponBannerState(pity=0, fate_points=0, charted_weapon=None)
    assert all(not a.was_guaranteed for a in result.annotations.values())


def test_weapon_event_target_overrides_config():
    """A target recorded on the pull wins over the caller's target."""
    config = ReplayConfig(tracked_target="Y")
    events = [make_pull("hit", t=0, banner=WEAPON, rarity=5, item_key="X", tracked_target="X")]
    result = replay(events, config)

    assert result.state.weapon.fate_points == 0
    assert result.state.weapon.charted_weapon == "X"


def test_weapon_retarget_mid_history():
    """Charted weapon follows the latest pull's target."""
    events = [
        make_pull("a", t=0, banner=WEAPON, tracked_target="X"),
        make_pull("b", t=1, banner=WEAPON, tracked_target="Y"),
    ]
    result = replay(events)

    assert result.state.weapon.charted_weapon == "Y"
    assert result.state.weapon.pity == 2


def test_standard_flat_pity():
    """Five commons then a rare: annotated pity 6, final pity 0."""
    events = commons("s", 5, start=0, banner=STANDARD) + [make_pull("rare", t=5, banner=STANDARD, rarity=5)]
    result = replay(events)

    assert result.state.standard == StandardBannerState(pity=0)
    ann = result.annotations["rare"]
    assert ann.pity_count == 6
    assert ann.was_guaranteed is False
    assert ann.outcome is None
    assert ann.triggered_radiance is False


def test_non_rare_pulls_have_no_annotation():
    result = replay(commons("c", 4, start=0) + [make_pull("four", t=4, rarity=4)])

    assert result.annotations == {}
    assert result.state.character.pity == 5


def test_machines_do_not_mutate_state():
    """Handlers return new state and leave their input untouched."""
    cur = CharacterBannerState(pity=10, guaranteed=False, radiant_streak=2)
    ev = make_pull("r", rarity=5, is_featured=False)

    nxt, ann = advance_character(cur, ev, ReplayConfig())

    assert cur == CharacterBannerState(pity=10, guaranteed=False, radiant_streak=2)
    assert nxt == CharacterBannerState(pity=0, guaranteed=True, radiant_streak=3)
    assert ann.pity_count == 11


def test_weapon_machine_direct_call():
    cur = WeaponBannerState(pity=3, fate_points=1, charted_weapon="X")
    ev = make_pull("w", banner=WEAPON, rarity=3)

    nxt, ann = advance_weapon(cur, ev, ReplayConfig(tracked_target="X"))

    assert ann is None
    assert nxt == WeaponBannerState(pity=4, fate_points=1, charted_weapon="X")


def test_weapon_untargeted_pull_keeps_fate_points():
    """Fate points earned while charting survive a rare pull with no target."""
    events = [
        make_pull("miss", t=0, banner=WEAPON, rarity=5, item_key="Y", tracked_target="X"),
        make_pull("untargeted", t=1, banner=WEAPON, rarity=5, item_key="Y"),
    ]
    result = replay(events)

    assert result.state.weapon == WeaponBannerState(pity=0, fate_points=1, charted_weapon=None)
    assert result.annotations["untargeted"].was_guaranteed is False


def test_rule_tables_are_read_only():
    """Neither the default table nor a config's rules can be changed in place."""
    config = ReplayConfig().with_rules(CHAR, radiance_threshold=1)

    with pytest.raises(TypeError):
        DEFAULT_RULES[CHAR] = DEFAULT_RULES[STANDARD]
    with pytest.raises(TypeError):
        config.rules[CHAR] = DEFAULT_RULES[STANDARD]
    assert DEFAULT_RULES[CHAR].radiance_threshold == 3
