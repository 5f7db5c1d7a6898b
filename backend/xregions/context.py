# backend/xregions/context.py
"""
PluginContext - shared context object for the XRegions components.

Provides:
- Access to the host World (regions, groups, players, mobs)
- Player listener management
- Event dispatch to listener queues
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List
import asyncio

from .events import Event

if TYPE_CHECKING:
    from .world import PlayerId, World


class PluginContext:
    """
    Shared context passed to the adapter and command handlers.

    Usage:
        ctx = PluginContext(world)
        queue = ctx.register_listener(player.id)
        await ctx.dispatch_events(events)
    """

    def __init__(self, world: "World") -> None:
        self.world = world

        # Player event listeners (player_id -> queue of outgoing events)
        self._listeners: Dict["PlayerId", asyncio.Queue[Event]] = {}

    # ---------- Event Dispatch ----------

    async def dispatch_events(self, events: List[Event]) -> None:
        """
        Route events to the appropriate player queues.

        Handles:
        - player-scoped events (direct to one player)
        - all-scoped events (broadcast to everyone)
        """
        for ev in events:
            scope = ev.get("scope", "player")
            wire_event = {k: v for k, v in ev.items() if k != "scope"}

            if scope == "player":
                q = self._listeners.get(ev.get("player_id"))
                if q is not None:
                    await q.put(wire_event)

            elif scope == "all":
                for q in self._listeners.values():
                    await q.put(wire_event)

    # ---------- Player Listener Management ----------

    def register_listener(self, player_id: "PlayerId") -> asyncio.Queue[Event]:
        """Register a player's event queue. Returns the queue for the connection to read from."""
        q: asyncio.Queue[Event] = asyncio.Queue()
        self._listeners[player_id] = q
        return q

    def unregister_listener(self, player_id: "PlayerId") -> None:
        self._listeners.pop(player_id, None)

    def has_listener(self, player_id: "PlayerId") -> bool:
        return player_id in self._listeners
