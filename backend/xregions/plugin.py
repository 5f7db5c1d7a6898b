# backend/xregions/plugin.py
"""
XRegionsPlugin - wires the store, adapter and command into a host server.

Lifecycle:
- initialize(): create tables (fatal on failure), subscribe hooks, add command
- game_post_initialize hook: load every policy
- dispose(): unsubscribe, remove command, close storage
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from . import config as settings
from .adapter import RegionEventAdapter
from .commands import XRegionCommand, register_xregion_commands
from .config import AdapterConfig
from .context import PluginContext
from .db import create_engine
from .hooks import HookName, HookRegistry
from .router import CommandRouter
from .store import RegionPolicyStore

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from .events import Event
    from .world import World

logger = logging.getLogger(__name__)


class XRegionsPlugin:
    """
    Usage:
        plugin = XRegionsPlugin(world, hooks=hooks, router=router)
        await plugin.initialize()
        await hooks.emit(HookName.GAME_POST_INITIALIZE)
        ...
        await plugin.dispose()
    """

    name = "XRegions"
    description = "Provides an advanced region management system."

    def __init__(
        self,
        world: "World",
        *,
        engine: "AsyncEngine | None" = None,
        hooks: HookRegistry | None = None,
        router: CommandRouter | None = None,
        config: AdapterConfig | None = None,
    ) -> None:
        self.ctx = PluginContext(world)
        self.hooks = hooks or HookRegistry()
        self.router = router or CommandRouter(specifier=settings.COMMAND_SPECIFIER)
        self.store = RegionPolicyStore(engine or create_engine(), regions=world)
        self.adapter = RegionEventAdapter(self.ctx, self.store, config)
        self.command = XRegionCommand(self.ctx, self.store, specifier=self.router.specifier)

    def _subscriptions(self):
        return [
            (HookName.GAME_POST_INITIALIZE, self.on_game_post_initialize, -1),
            (HookName.NET_GET_DATA, self.adapter.on_net_get_data, 0),
            (HookName.WORLD_TICK, self.adapter.on_world_tick, 0),
            (HookName.REGION_ENTERED, self.adapter.on_region_entered, 0),
            (HookName.REGION_LEFT, self.adapter.on_region_left, 0),
            (HookName.REGION_DELETED, self.adapter.on_region_deleted, 0),
            (HookName.SERVER_LEAVE, self.adapter.on_player_leave, 0),
        ]

    async def initialize(self) -> None:
        """
        Raises:
            StorageUnavailable: the plugin must not run without durable storage
        """
        await self.store.initialize()

        for hook, callback, priority in self._subscriptions():
            self.hooks.register(hook, callback, priority)
        register_xregion_commands(self.router, self.command)
        logger.info("%s initialized", self.name)

    async def on_game_post_initialize(self) -> List["Event"]:
        await self.store.load_all()
        return []

    async def dispose(self) -> None:
        for hook, callback, _ in self._subscriptions():
            self.hooks.deregister(hook, callback)
        self.router.unregister(self.command.handle)
        await self.store.dispose()
        logger.info("%s disposed", self.name)
