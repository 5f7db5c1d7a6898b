# backend/xregions/evaluator.py
"""
Policy evaluation - decides how a region's policy overrides default behavior.

Every function here is pure: it looks at a policy and an event and returns
directives. Applying them to players and mobs is the adapter's job.

A missing policy (``None``) means "no policy configured" and yields nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Union

from .flags import RegionFlag
from .policy import RegionPolicy

ENTER_PVP_NOTICE = "You have entered a PvP area, your PvP is now forced."
ENTER_NO_PVP_NOTICE = "You have entered a no-PvP area, your PvP has been disabled."
TOGGLE_PVP_NOTICE = "You are in a PvP area, your PvP status is forced."
TOGGLE_NO_PVP_NOTICE = "You are in a no-PvP area, you cannot enable PvP here."


# ---------- Directives ----------

@dataclass(frozen=True)
class SetHostile:
    """Force the player's PvP state and re-broadcast it."""
    hostile: bool
    notice: str | None = None


@dataclass(frozen=True)
class SwapGroup:
    """Substitute the player's permission group."""
    group: str


@dataclass(frozen=True)
class RestoreGroup:
    """Put back the group held before the substitution."""


@dataclass(frozen=True)
class HealToMax:
    """Restore the player to full health."""


@dataclass(frozen=True)
class DeactivateMob:
    """Take a mob out of play."""
    mob_id: int


Directive = Union[SetHostile, SwapGroup, RestoreGroup, HealToMax, DeactivateMob]


# ---------- Player events ----------

def on_region_entered(policy: RegionPolicy | None, player_was_hostile: bool) -> List[Directive]:
    """
    Directives for a player entering a region.

    Flags are evaluated independently; a region with both ForcePvp and
    ForcePvpOff is misconfigured but still evaluated flag by flag.
    """
    if policy is None:
        return []

    directives: List[Directive] = []
    if policy.has_flag(RegionFlag.FORCE_PVP) and not player_was_hostile:
        directives.append(SetHostile(True, ENTER_PVP_NOTICE))
    if policy.has_flag(RegionFlag.FORCE_PVP_OFF) and player_was_hostile:
        directives.append(SetHostile(False, ENTER_NO_PVP_NOTICE))
    if policy.has_flag(RegionFlag.TEMP_GROUP) and policy.temp_group:
        directives.append(SwapGroup(policy.temp_group))
    return directives


def on_region_left(policy: RegionPolicy | None) -> List[Directive]:
    """Leaving a temp-group region always attempts a restore, group set or not."""
    if policy is None or not policy.has_flag(RegionFlag.TEMP_GROUP):
        return []
    return [RestoreGroup()]


def on_pvp_toggle_attempt(policy: RegionPolicy | None, requested_pvp_on: bool) -> List[Directive]:
    """
    Directives for a player asking to switch PvP on or off.

    An empty result means the request is left to the host's default handling.
    """
    if policy is None:
        return []
    if not requested_pvp_on and policy.has_flag(RegionFlag.FORCE_PVP):
        return [SetHostile(True, TOGGLE_PVP_NOTICE)]
    if requested_pvp_on and policy.has_flag(RegionFlag.FORCE_PVP_OFF):
        return [SetHostile(False, TOGGLE_NO_PVP_NOTICE)]
    return []


def on_player_hurt(policy: RegionPolicy | None) -> List[Directive]:
    if policy is not None and policy.has_flag(RegionFlag.HEAL):
        return [HealToMax()]
    return []


# ---------- World events ----------

def on_world_tick(
    policies_by_region: Mapping[str, RegionPolicy | None],
    active_mobs_by_region: Mapping[str, Iterable[int]],
    *,
    stop_after_first_region: bool = False,
) -> List[Directive]:
    """
    Suppress active mobs standing in NoMob regions.

    Args:
        policies_by_region: Policy per region name (missing or None = no policy)
        active_mobs_by_region: Candidate mob ids per containing region
        stop_after_first_region: Stop at the first region that suppresses
            anything (older plugin behavior). By default every candidate
            is visited.

    Returns:
        One DeactivateMob per mob, even when it sits in several NoMob regions
    """
    directives: List[Directive] = []
    seen: set[int] = set()
    for region_name, mob_ids in active_mobs_by_region.items():
        policy = policies_by_region.get(region_name)
        if policy is None or not policy.has_flag(RegionFlag.NO_MOB):
            continue

        emitted = False
        for mob_id in mob_ids:
            if mob_id in seen:
                continue
            seen.add(mob_id)
            directives.append(DeactivateMob(mob_id))
            emitted = True

        if emitted and stop_after_first_region:
            break
    return directives
