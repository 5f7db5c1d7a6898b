# backend/xregions/policy.py
"""
In-memory value types: region policies and per-player session state.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace

from .flags import RegionFlag, describe_flags


@dataclass
class RegionPolicy:
    """
    Policy attached to one defined region.

    ``temp_group`` is the name of a permission group, looked up in the host's
    group registry when needed. Ban lists are persisted but only consumed by
    enforcement outside this package.
    """
    region_name: str
    flags: RegionFlag = RegionFlag.NONE
    temp_group: str | None = None
    banned_items: set[int] = field(default_factory=set)
    banned_projectiles: set[int] = field(default_factory=set)

    # Set on load when the region engine no longer knows region_name
    dangling: bool = False

    def has_flag(self, flag: RegionFlag) -> bool:
        return bool(self.flags & flag)

    def flag_names(self) -> list[str]:
        return describe_flags(self.flags)

    def copy(self) -> "RegionPolicy":
        """Independent copy for copy-modify-write updates."""
        return replace(
            self,
            banned_items=set(self.banned_items),
            banned_projectiles=set(self.banned_projectiles),
        )


@dataclass
class PlayerSessionState:
    """
    Per-player state kept while the player is connected.

    ``previous_group`` is the group to restore when leaving a temp-group
    region. It is only refreshed when no temp group is active, so nested
    temp-group regions never overwrite the original group.
    """
    previous_group: str | None
    temp_group_active: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)
