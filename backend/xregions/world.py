# backend/xregions/world.py
"""
Host-side world objects seen by XRegions.

The host game server owns region geometry, permission groups, players and
mobs. XRegions only needs the narrow interfaces below; ``World`` is an
in-memory implementation used by the reference server wiring and by tests.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Protocol, runtime_checkable

# Simple type aliases for clarity
PlayerId = int  # Network slot, fits in one byte
MobId = int
RegionName = str
GroupName = str


@runtime_checkable
class RegionEngine(Protocol):
    """Region lookups provided by the host."""

    def has_region(self, name: RegionName) -> bool:
        """Return True if the host knows a region by this exact name."""
        ...

    def regions_at(self, x: float, y: float) -> List[RegionName]:
        """Return the names of all regions containing the point."""
        ...


@runtime_checkable
class GroupRegistry(Protocol):
    """Permission-group lookups provided by the host."""

    def has_group(self, name: GroupName) -> bool:
        ...


@dataclass
class WorldRegion:
    """Axis-aligned rectangular region."""
    name: RegionName
    x: float
    y: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


@dataclass
class WorldPlayer:
    """A connected player."""
    id: PlayerId
    name: str
    group: GroupName = "default"
    permissions: set[str] = field(default_factory=set)

    hostile: bool = False  # PvP enabled
    current_health: int = 100
    max_health: int = 100

    # Region the host currently reports the player in
    current_region: RegionName | None = None

    def has_permission(self, permission: str) -> bool:
        return "*" in self.permissions or permission in self.permissions


@dataclass
class WorldMob:
    """A non-player entity."""
    id: MobId
    name: str
    x: float = 0.0
    y: float = 0.0
    active: bool = True
    friendly: bool = False  # Town NPCs and critters are never suppressed


@dataclass
class World:
    """
    In-memory world state.

    Implements RegionEngine and GroupRegistry.
    """
    regions: Dict[RegionName, WorldRegion] = field(default_factory=dict)
    players: Dict[PlayerId, WorldPlayer] = field(default_factory=dict)
    mobs: Dict[MobId, WorldMob] = field(default_factory=dict)
    groups: set[GroupName] = field(default_factory=lambda: {"default"})

    def has_region(self, name: RegionName) -> bool:
        return name in self.regions

    def regions_at(self, x: float, y: float) -> List[RegionName]:
        return [r.name for r in self.regions.values() if r.contains(x, y)]

    def has_group(self, name: GroupName) -> bool:
        return name in self.groups
