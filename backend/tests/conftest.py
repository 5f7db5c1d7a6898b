"""
Global pytest configuration and shared fixtures.

Provides common test infrastructure for all test suites including:
- In-memory database engine per test
- World with a few regions, groups and players
- Initialized region policy store
- Player factory
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from xregions.store import RegionPolicyStore
from xregions.world import World, WorldMob, WorldPlayer, WorldRegion

# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def test_engine():
    """Create in-memory SQLite database engine for testing."""
    # StaticPool shares the single in-memory connection across sessions
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    yield engine
    await engine.dispose()


# ============================================================================
# World Fixtures
# ============================================================================


@pytest.fixture
def world() -> World:
    """
    World with four non-overlapping regions and two extra groups.

    Spawn (0..100), Arena (200..300), Pond (400..500), Field (600..700)
    along x, all 0..100 along y.
    """
    world = World(groups={"default", "vip", "builder"})
    for index, name in enumerate(["Spawn", "Arena", "Pond", "Field"]):
        world.regions[name] = WorldRegion(name=name, x=index * 200, y=0, width=100, height=100)
    return world


@pytest.fixture
def player_factory(world: World):
    """Factory for creating players registered in the world."""

    def _create_player(
        player_id: int = 0,
        name: str = "TestPlayer",
        group: str = "default",
        hostile: bool = False,
        permissions: set[str] | None = None,
        current_region: str | None = None,
    ) -> WorldPlayer:
        player = WorldPlayer(
            id=player_id,
            name=name,
            group=group,
            hostile=hostile,
            permissions=set(permissions or ()),
            current_region=current_region,
        )
        world.players[player.id] = player
        return player

    return _create_player


@pytest.fixture
def mob_factory(world: World):
    """Factory for creating mobs registered in the world."""

    def _create_mob(mob_id: int, x: float, y: float = 50, friendly: bool = False) -> WorldMob:
        mob = WorldMob(id=mob_id, name=f"Mob{mob_id}", x=x, y=y, friendly=friendly)
        world.mobs[mob.id] = mob
        return mob

    return _create_mob


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
async def store(test_engine, world) -> RegionPolicyStore:
    """Initialized, empty region policy store bound to the test world."""
    store = RegionPolicyStore(test_engine, regions=world)
    await store.initialize()
    await store.load_all()
    return store
