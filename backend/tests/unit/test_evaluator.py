"""
Unit tests for the policy evaluator.

The evaluator is pure: the same inputs always give the same directives.
"""

import pytest

from xregions.evaluator import (
    ENTER_NO_PVP_NOTICE,
    ENTER_PVP_NOTICE,
    TOGGLE_NO_PVP_NOTICE,
    TOGGLE_PVP_NOTICE,
    DeactivateMob,
    HealToMax,
    RestoreGroup,
    SetHostile,
    SwapGroup,
    on_player_hurt,
    on_pvp_toggle_attempt,
    on_region_entered,
    on_region_left,
    on_world_tick,
)
from xregions.flags import RegionFlag
from xregions.policy import RegionPolicy


def make_policy(name: str = "Spawn", flags: RegionFlag = RegionFlag.NONE, group=None) -> RegionPolicy:
    return RegionPolicy(region_name=name, flags=flags, temp_group=group)


# ============================================================================
# Region Entered
# ============================================================================


@pytest.mark.unit
def test_force_pvp_on_entry():
    policy = make_policy(flags=RegionFlag.FORCE_PVP)

    assert on_region_entered(policy, player_was_hostile=False) == [SetHostile(True, ENTER_PVP_NOTICE)]
    assert on_region_entered(policy, player_was_hostile=True) == []


@pytest.mark.unit
def test_force_pvp_off_on_entry():
    policy = make_policy(flags=RegionFlag.FORCE_PVP_OFF)

    assert on_region_entered(policy, player_was_hostile=True) == [SetHostile(False, ENTER_NO_PVP_NOTICE)]
    assert on_region_entered(policy, player_was_hostile=False) == []


@pytest.mark.unit
def test_temp_group_requires_a_group():
    assert on_region_entered(make_policy(flags=RegionFlag.TEMP_GROUP), False) == []
    assert on_region_entered(make_policy(flags=RegionFlag.TEMP_GROUP, group="vip"), False) == [
        SwapGroup("vip")
    ]


@pytest.mark.unit
def test_entry_evaluates_every_flag():
    policy = make_policy(flags=RegionFlag.FORCE_PVP | RegionFlag.TEMP_GROUP | RegionFlag.HEAL, group="vip")

    assert on_region_entered(policy, False) == [SetHostile(True, ENTER_PVP_NOTICE), SwapGroup("vip")]


@pytest.mark.unit
def test_conflicting_pvp_flags_are_both_evaluated():
    policy = make_policy(flags=RegionFlag.FORCE_PVP | RegionFlag.FORCE_PVP_OFF)

    assert on_region_entered(policy, False) == [SetHostile(True, ENTER_PVP_NOTICE)]
    assert on_region_entered(policy, True) == [SetHostile(False, ENTER_NO_PVP_NOTICE)]


@pytest.mark.unit
def test_entry_is_pure():
    policy = make_policy(flags=RegionFlag.FORCE_PVP | RegionFlag.TEMP_GROUP, group="vip")

    first = on_region_entered(policy, False)
    second = on_region_entered(policy, False)

    assert first == second
    assert policy.flags == RegionFlag.FORCE_PVP | RegionFlag.TEMP_GROUP


@pytest.mark.unit
def test_no_policy_no_directives():
    assert on_region_entered(None, False) == []
    assert on_region_left(None) == []
    assert on_pvp_toggle_attempt(None, False) == []
    assert on_player_hurt(None) == []


# ============================================================================
# Region Left
# ============================================================================


@pytest.mark.unit
def test_leaving_temp_group_region_restores_even_without_group():
    assert on_region_left(make_policy(flags=RegionFlag.TEMP_GROUP)) == [RestoreGroup()]
    assert on_region_left(make_policy(flags=RegionFlag.TEMP_GROUP, group="vip")) == [RestoreGroup()]


@pytest.mark.unit
def test_leaving_plain_region_does_nothing():
    assert on_region_left(make_policy(flags=RegionFlag.FORCE_PVP)) == []


# ============================================================================
# PvP Toggle / Hurt
# ============================================================================


@pytest.mark.unit
def test_toggle_off_in_force_pvp_region():
    policy = make_policy(flags=RegionFlag.FORCE_PVP)

    assert on_pvp_toggle_attempt(policy, requested_pvp_on=False) == [SetHostile(True, TOGGLE_PVP_NOTICE)]
    assert on_pvp_toggle_attempt(policy, requested_pvp_on=True) == []


@pytest.mark.unit
def test_toggle_on_in_force_pvp_off_region():
    policy = make_policy(flags=RegionFlag.FORCE_PVP_OFF)

    assert on_pvp_toggle_attempt(policy, requested_pvp_on=True) == [SetHostile(False, TOGGLE_NO_PVP_NOTICE)]
    assert on_pvp_toggle_attempt(policy, requested_pvp_on=False) == []


@pytest.mark.unit
def test_heal_on_hurt():
    assert on_player_hurt(make_policy(flags=RegionFlag.HEAL)) == [HealToMax()]
    assert on_player_hurt(make_policy(flags=RegionFlag.NO_MOB)) == []


# ============================================================================
# World Tick
# ============================================================================


@pytest.mark.unit
def test_world_tick_suppresses_mobs_in_every_no_mob_region():
    policies = {
        "Spawn": make_policy("Spawn", RegionFlag.NO_MOB),
        "Pond": make_policy("Pond", RegionFlag.NO_MOB),
        "Arena": make_policy("Arena", RegionFlag.FORCE_PVP),
    }
    mobs = {"Spawn": [1], "Arena": [2], "Pond": [3], "Field": [4]}

    assert on_world_tick(policies, mobs) == [DeactivateMob(1), DeactivateMob(3)]


@pytest.mark.unit
def test_world_tick_legacy_stops_after_first_region():
    policies = {
        "Spawn": make_policy("Spawn", RegionFlag.NO_MOB),
        "Pond": make_policy("Pond", RegionFlag.NO_MOB),
    }
    mobs = {"Spawn": [1, 2], "Pond": [3]}

    assert on_world_tick(policies, mobs, stop_after_first_region=True) == [
        DeactivateMob(1), DeactivateMob(2),
    ]


@pytest.mark.unit
def test_world_tick_deduplicates_overlapping_regions():
    policies = {
        "Spawn": make_policy("Spawn", RegionFlag.NO_MOB),
        "Inner": make_policy("Inner", RegionFlag.NO_MOB),
    }
    mobs = {"Spawn": [1], "Inner": [1]}

    assert on_world_tick(policies, mobs) == [DeactivateMob(1)]


@pytest.mark.unit
def test_world_tick_without_policies():
    assert on_world_tick({}, {"Spawn": [1]}) == []
    assert on_world_tick({"Spawn": None}, {"Spawn": [1]}) == []
