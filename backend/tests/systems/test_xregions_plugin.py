"""
End-to-end tests for XRegionsPlugin: hook wiring, command registration,
event dispatch and shutdown.
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from xregions.errors import StorageUnavailable
from xregions.flags import RegionFlag
from xregions.hooks import HookName, HookRegistry
from xregions.packets import PacketType
from xregions.permissions import Permission
from xregions.plugin import XRegionsPlugin
from xregions.router import CommandRouter


@pytest.fixture
async def plugin(world, test_engine):
    plugin = XRegionsPlugin(world, engine=test_engine, hooks=HookRegistry(), router=CommandRouter())
    await plugin.initialize()
    await plugin.hooks.emit(HookName.GAME_POST_INITIALIZE)
    return plugin


@pytest.mark.systems
async def test_initialize_registers_hooks_and_command(plugin):
    for hook in HookName:
        assert plugin.hooks.subscribers(hook), hook
    assert "xregion" in plugin.router.commands


@pytest.mark.systems
async def test_policies_are_loaded_after_post_initialize(world, test_engine):
    first = XRegionsPlugin(world, engine=test_engine)
    await first.initialize()
    await first.store.define("Spawn")

    second = XRegionsPlugin(world, engine=test_engine)
    await second.initialize()
    assert second.store.get("Spawn") is None

    await second.hooks.emit(HookName.GAME_POST_INITIALIZE)
    assert second.store.get("Spawn") is not None


@pytest.mark.systems
async def test_command_then_region_entry_flow(plugin, player_factory):
    admin = player_factory(player_id=1, permissions={p.value for p in Permission})
    player = player_factory(player_id=2, group="default")
    queue = plugin.ctx.register_listener(player.id)

    await plugin.router.dispatch(admin, "/xregion define Arena")
    await plugin.router.dispatch(admin, "/xregion addflag Arena TempGroup")
    await plugin.router.dispatch(admin, "/xregion addflag Arena ForcePvp")
    await plugin.router.dispatch(admin, "/xregion setgroup Arena vip")

    events = await plugin.hooks.emit(HookName.REGION_ENTERED, player, "Arena")
    await plugin.ctx.dispatch_events(events)

    assert player.group == "vip"
    assert player.hostile is True
    delivered = [queue.get_nowait() for _ in range(queue.qsize())]
    assert [e["type"] for e in delivered] == ["pvp_update", "message", "message"]
    assert all("scope" not in e for e in delivered)

    await plugin.hooks.emit(HookName.REGION_LEFT, player, "Arena")
    assert player.group == "default"


@pytest.mark.systems
async def test_net_data_hook(plugin, player_factory):
    policy = await plugin.store.define("Spawn")
    policy = policy.copy()
    policy.flags = RegionFlag.HEAL
    await plugin.store.update(policy)
    player = player_factory(player_id=7, current_region="Spawn")
    player.current_health = 1

    await plugin.hooks.emit(HookName.NET_GET_DATA, PacketType.PLAYER_HURT, bytes([7, 0, 0]))

    assert player.current_health == player.max_health


@pytest.mark.systems
async def test_region_deleted_hook(plugin):
    await plugin.store.define("Pond")

    await plugin.hooks.emit(HookName.REGION_DELETED, "Pond")

    assert plugin.store.get("Pond") is None


@pytest.mark.systems
async def test_dispose_unsubscribes(world):
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    plugin = XRegionsPlugin(world, engine=engine)
    await plugin.initialize()

    await plugin.dispose()

    for hook in HookName:
        assert plugin.hooks.subscribers(hook) == []
    assert "xregion" not in plugin.router.commands


@pytest.mark.systems
async def test_initialize_is_fatal_without_storage(world, tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'nope' / 'x.db'}")
    plugin = XRegionsPlugin(world, engine=engine)

    with pytest.raises(StorageUnavailable):
        await plugin.initialize()

    assert plugin.hooks.subscribers(HookName.REGION_ENTERED) == []
    await engine.dispose()
