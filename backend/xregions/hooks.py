# backend/xregions/hooks.py
"""
Hook registry - host callbacks that XRegions subscribes to.

The host fires hooks (region transitions, raw network messages, world ticks,
disconnects); subscribers are coroutines returning events to dispatch.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Tuple

from .events import Event

logger = logging.getLogger(__name__)

HookCallback = Callable[..., Awaitable[List[Event] | None]]


class HookName(Enum):
    GAME_POST_INITIALIZE = "game_post_initialize"
    NET_GET_DATA = "net_get_data"
    WORLD_TICK = "world_tick"
    REGION_ENTERED = "region_entered"
    REGION_LEFT = "region_left"
    REGION_DELETED = "region_deleted"
    SERVER_LEAVE = "server_leave"


class HookRegistry:
    """
    Ordered callback lists per hook.

    Lower ``priority`` values run first; callbacks with equal priority run in
    registration order.
    """

    def __init__(self) -> None:
        self._callbacks: Dict[HookName, List[Tuple[int, HookCallback]]] = {}

    def register(self, hook: HookName, callback: HookCallback, priority: int = 0) -> None:
        callbacks = self._callbacks.setdefault(hook, [])
        callbacks.append((priority, callback))
        callbacks.sort(key=lambda entry: entry[0])

    def deregister(self, hook: HookName, callback: HookCallback) -> None:
        callbacks = self._callbacks.get(hook, [])
        self._callbacks[hook] = [entry for entry in callbacks if entry[1] != callback]

    def subscribers(self, hook: HookName) -> List[HookCallback]:
        return [callback for _, callback in self._callbacks.get(hook, [])]

    async def emit(self, hook: HookName, *args: Any, **kwargs: Any) -> List[Event]:
        """Run every subscriber and collect the events they return."""
        events: List[Event] = []
        for callback in self.subscribers(hook):
            result = await callback(*args, **kwargs)
            if result:
                events.extend(result)
        logger.debug("Hook %s produced %d events", hook.value, len(events))
        return events
