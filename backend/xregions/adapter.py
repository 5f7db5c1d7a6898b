# backend/xregions/adapter.py
"""
RegionEventAdapter - applies region policies to host events.

Provides:
- Region enter/leave handling (forced PvP, temporary group swap and restore)
- Raw message inspection for PvP toggles and player damage
- Throttled mob suppression on world ticks
- Cleanup when regions are deleted or players disconnect

Every handler returns the events to dispatch; player and mob state is
changed in place on the host objects.
"""

from __future__ import annotations

import logging
import struct
import time
from collections import defaultdict
from typing import TYPE_CHECKING, Callable, Dict, List

from . import evaluator
from . import events as ev
from .config import AdapterConfig
from .evaluator import (DeactivateMob, Directive, HealToMax, RestoreGroup,
                        SetHostile, SwapGroup)
from .packets import PacketType, decode_player_hurt, decode_toggle_pvp
from .policy import PlayerSessionState

if TYPE_CHECKING:
    from .context import PluginContext
    from .events import Event
    from .store import RegionPolicyStore
    from .world import PlayerId, WorldPlayer

logger = logging.getLogger(__name__)

GROUP_REVERTED_NOTICE = "Your group has been reverted to default."


class RegionEventAdapter:
    """
    Bridges host callbacks to the policy evaluator.

    Session state is keyed by player id and created on first use. Group swaps
    and restores for one player are serialized by that player's lock.

    Usage:
        adapter = RegionEventAdapter(ctx, store)
        events = await adapter.on_region_entered(player, "Arena")
        await ctx.dispatch_events(events)
    """

    def __init__(
        self,
        ctx: "PluginContext",
        store: "RegionPolicyStore",
        config: AdapterConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ctx = ctx
        self.store = store
        self.config = config or AdapterConfig()
        self._clock = clock
        self._last_tick: float | None = None
        self.sessions: Dict["PlayerId", PlayerSessionState] = {}

    # ---------- Session State ----------

    def get_or_create_session(self, player: "WorldPlayer") -> PlayerSessionState:
        session = self.sessions.get(player.id)
        if session is None:
            session = PlayerSessionState(previous_group=player.group)
            self.sessions[player.id] = session
        return session

    # ---------- Region Transitions ----------

    async def on_region_entered(self, player: "WorldPlayer", region_name: str) -> List["Event"]:
        session = self.get_or_create_session(player)
        policy = self.store.get(region_name)
        if policy is None:
            return []

        async with session.lock:
            directives = evaluator.on_region_entered(policy, player.hostile)
            events: List["Event"] = []
            for directive in directives:
                if isinstance(directive, SwapGroup):
                    if not session.temp_group_active:
                        session.previous_group = player.group
                        session.temp_group_active = True
                    player.group = directive.group
                    events.append(ev.info(
                        player.id,
                        f"Your group has been changed to '{directive.group}' due to region setup.",
                    ))
                    logger.info(
                        "Player %s group swapped to '%s' in region '%s'",
                        player.name, directive.group, region_name,
                    )
                else:
                    events.extend(self._apply(player, directive))
            return events

    async def on_region_left(self, player: "WorldPlayer", region_name: str) -> List["Event"]:
        session = self.get_or_create_session(player)
        policy = self.store.get(region_name)

        async with session.lock:
            events: List["Event"] = []
            for directive in evaluator.on_region_left(policy):
                if isinstance(directive, RestoreGroup):
                    player.group = session.previous_group
                    session.temp_group_active = False
                    events.append(ev.info(player.id, GROUP_REVERTED_NOTICE))
                    logger.info(
                        "Player %s group restored to '%s' leaving region '%s'",
                        player.name, session.previous_group, region_name,
                    )
            return events

    async def on_region_deleted(self, region_name: str) -> List["Event"]:
        if self.store.get(region_name) is None:
            logger.debug("Deleted region '%s' had no XRegion policy", region_name)
            return []

        await self.store.remove(region_name)
        logger.info("Region '%s' has been removed from the XRegions database.", region_name)
        return []

    async def on_player_leave(self, player_id: "PlayerId") -> List["Event"]:
        """Restore the original group in case a region-left notification was missed."""
        player = self.ctx.world.players.get(player_id)
        session = self.sessions.pop(player_id, None)
        if player is None or session is None:
            return []

        async with session.lock:
            if player.group != session.previous_group:
                logger.info(
                    "Restoring group '%s' for disconnecting player %s",
                    session.previous_group, player.name,
                )
                player.group = session.previous_group
        return []

    # ---------- Network Messages ----------

    async def on_net_get_data(self, msg_id: int, payload: bytes, handled: bool = False) -> List["Event"]:
        """
        Inspect a raw client message.

        Args:
            msg_id: Message type discriminant
            payload: Message body after the header
            handled: True if an earlier handler already consumed the message
        """
        if handled:
            return []

        try:
            if msg_id == PacketType.TOGGLE_PVP:
                packet = decode_toggle_pvp(payload)
                return self._on_toggle_pvp(packet.player_id, packet.pvp)
            if msg_id == PacketType.PLAYER_HURT:
                packet = decode_player_hurt(payload)
                return self._on_player_hurt(packet.player_id)
        except struct.error:
            logger.warning("Malformed message %d (%d bytes)", msg_id, len(payload))
        return []

    def _on_toggle_pvp(self, player_id: "PlayerId", pvp: bool) -> List["Event"]:
        player = self.ctx.world.players.get(player_id)
        if player is None or player.current_region is None:
            return []

        policy = self.store.get(player.current_region)
        events: List["Event"] = []
        for directive in evaluator.on_pvp_toggle_attempt(policy, pvp):
            events.extend(self._apply(player, directive))
        return events

    def _on_player_hurt(self, player_id: "PlayerId") -> List["Event"]:
        player = self.ctx.world.players.get(player_id)
        if player is None or player.current_region is None:
            return []

        policy = self.store.get(player.current_region)
        events: List["Event"] = []
        for directive in evaluator.on_player_hurt(policy):
            events.extend(self._apply(player, directive))
        return events

    # ---------- World Tick ----------

    async def on_world_tick(self) -> List["Event"]:
        """
        Deactivate mobs inside NoMob regions.

        Runs at most once per ``config.tick_interval``; extra ticks are
        dropped. Unless ``config.legacy_tick_scan`` is set, every candidate
        mob is visited in a scan.
        """
        now = self._clock()
        if self._last_tick is not None and now - self._last_tick < self.config.tick_interval:
            return []
        self._last_tick = now

        world = self.ctx.world
        mobs_by_region: Dict[str, List[int]] = defaultdict(list)
        for mob in world.mobs.values():
            if not mob.active or mob.friendly:
                continue
            for region_name in world.regions_at(mob.x, mob.y):
                mobs_by_region[region_name].append(mob.id)

        policies = {name: self.store.get(name) for name in mobs_by_region}
        directives = evaluator.on_world_tick(
            policies,
            mobs_by_region,
            stop_after_first_region=self.config.legacy_tick_scan,
        )

        events: List["Event"] = []
        for directive in directives:
            mob = world.mobs.get(directive.mob_id)
            if mob is None:
                continue
            mob.active = False
            events.append(ev.npc_update(mob.id, active=False))
        if events:
            logger.debug("Suppressed %d mobs", len(events))
        return events

    # ---------- Directive Application ----------

    def _apply(self, player: "WorldPlayer", directive: Directive) -> List["Event"]:
        """Apply a player directive that needs no session state."""
        if isinstance(directive, SetHostile):
            player.hostile = directive.hostile
            events = [ev.pvp_update(player.id, directive.hostile)]
            if directive.notice:
                events.append(ev.info(player.id, directive.notice))
            return events

        if isinstance(directive, HealToMax):
            player.current_health = player.max_health
            return [ev.stat_update(player.id, player.current_health, player.max_health)]

        if isinstance(directive, DeactivateMob):
            raise TypeError("DeactivateMob is applied by on_world_tick")

        raise TypeError(f"Unexpected directive {directive!r}")
