# backend/xregions/store.py
"""
RegionPolicyStore - durable catalog of region policies.

Provides:
- Table creation at startup (fatal if storage is unreachable)
- Loading every persisted policy into memory
- define / remove / update / modify with write-through persistence
- Lock-free lookups and snapshots for event evaluation

The in-memory catalog is a cache of the database. Every mutation is written
to storage first and only then becomes visible in memory.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from .db import create_session_factory
from .errors import AlreadyDefined, StorageUnavailable, UnknownRegion
from .flags import deserialize_flags, deserialize_ids, serialize_flags, serialize_ids
from .models import Base, XRegionBanRow, XRegionRow
from .policy import RegionPolicy

if TYPE_CHECKING:
    from .world import RegionEngine

logger = logging.getLogger(__name__)


class RegionPolicyStore:
    """
    Owns the region policy catalog and its persistence.

    Mutations (define, remove, update, modify, load_all) are serialized by one lock.
    The catalog dict is replaced on every mutation, so ``get`` and ``list``
    read without locking and never see a half-applied change.

    Usage:
        store = RegionPolicyStore(engine, regions=world)
        await store.initialize()
        await store.load_all()
        policy = store.get("Spawn")
    """

    def __init__(self, engine: AsyncEngine, regions: "RegionEngine | None" = None) -> None:
        """
        Args:
            engine: Async SQLAlchemy engine
            regions: Host region engine; without one, define always fails and
                dangling detection is skipped
        """
        self.engine = engine
        self.regions = regions
        self._sessions = create_session_factory(engine)
        self._lock = asyncio.Lock()
        self._policies: Dict[str, RegionPolicy] = {}

    # ---------- Lifecycle ----------

    async def initialize(self) -> None:
        """
        Ensure both tables exist.

        Raises:
            StorageUnavailable: if the backend cannot be reached
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as exc:
            raise StorageUnavailable(f"Could not initialize XRegions storage: {exc}") from exc
        logger.info("XRegions storage initialized")

    async def dispose(self) -> None:
        await self.engine.dispose()

    async def load_all(self) -> None:
        """Replace the catalog with every persisted policy."""
        async with self._lock:
            async with self._sessions() as session:
                rows = (await session.execute(select(XRegionRow))).scalars().all()
                bans = {
                    row.name: row
                    for row in (await session.execute(select(XRegionBanRow))).scalars().all()
                }

            policies: Dict[str, RegionPolicy] = {}
            for row in rows:
                policy = RegionPolicy(
                    region_name=row.name,
                    flags=deserialize_flags(row.actions),
                    temp_group=row.temp_group or None,
                )
                ban = bans.get(row.name)
                if ban is not None:
                    policy.banned_items = deserialize_ids(ban.item_bans)
                    policy.banned_projectiles = deserialize_ids(ban.projectile_bans)

                if self.regions is not None and not self.regions.has_region(row.name):
                    policy.dangling = True
                    logger.warning(
                        "XRegion '%s' refers to a region that no longer exists", row.name
                    )
                policies[row.name] = policy

            self._policies = policies

        logger.info("Loaded %d XRegions", len(policies))

    # ---------- Queries ----------

    def get(self, region_name: str) -> RegionPolicy | None:
        """Exact, case-sensitive lookup."""
        return self._policies.get(region_name)

    def list(self) -> Tuple[RegionPolicy, ...]:
        """Snapshot of every policy."""
        return tuple(self._policies.values())

    def __len__(self) -> int:
        return len(self._policies)

    def __contains__(self, region_name: str) -> bool:
        return region_name in self._policies

    # ---------- Mutations ----------

    async def define(self, region_name: str) -> RegionPolicy:
        """
        Create an empty policy for a region known to the region engine.

        Raises:
            UnknownRegion: if the region engine has no such region
            AlreadyDefined: if a policy already exists
        """
        async with self._lock:
            if self.regions is None or not self.regions.has_region(region_name):
                raise UnknownRegion(region_name)
            if region_name in self._policies:
                raise AlreadyDefined(region_name)

            async with self._sessions() as session, session.begin():
                session.add(XRegionRow(name=region_name, actions="", temp_group=""))

            policy = RegionPolicy(region_name=region_name)
            self._policies = {**self._policies, region_name: policy}

        logger.info("Defined XRegion '%s'", region_name)
        return policy

    async def remove(self, region_name: str) -> None:
        """Delete a policy and both of its rows."""
        async with self._lock:
            async with self._sessions() as session, session.begin():
                await session.execute(delete(XRegionRow).where(XRegionRow.name == region_name))
                await session.execute(delete(XRegionBanRow).where(XRegionBanRow.name == region_name))

            policies = dict(self._policies)
            policies.pop(region_name, None)
            self._policies = policies

        logger.info("Removed XRegion '%s'", region_name)

    async def update(self, policy: RegionPolicy) -> None:
        """
        Persist a policy and make it the catalog entry for its region.

        The ban row is replaced, not merged.

        Raises:
            UnknownRegion: if the region was never defined
        """
        async with self._lock:
            current = self._policies.get(policy.region_name)
            if current is None:
                raise UnknownRegion(policy.region_name)
            stored = await self._write(policy, current)

        logger.debug("Updated XRegion '%s': %s", stored.region_name, stored.flag_names())

    async def modify(
        self, region_name: str, change: Callable[[RegionPolicy], None]
    ) -> RegionPolicy:
        """
        Read, change and persist a policy as one step under the store lock.

        Args:
            region_name: Policy to change
            change: Mutates the working copy it is given

        Returns:
            The new catalog entry

        Raises:
            UnknownRegion: if no policy exists, including one removed while
                waiting for the lock
        """
        async with self._lock:
            current = self._policies.get(region_name)
            if current is None:
                raise UnknownRegion(region_name)
            working = current.copy()
            change(working)
            stored = await self._write(working, current)

        logger.debug("Modified XRegion '%s': %s", region_name, stored.flag_names())
        return stored

    async def _write(self, policy: RegionPolicy, current: RegionPolicy) -> RegionPolicy:
        """Persist both rows and swap the catalog entry. Caller holds the lock."""
        name = policy.region_name
        async with self._sessions() as session, session.begin():
            row = await session.get(XRegionRow, name)
            if row is None:
                row = XRegionRow(name=name)
                session.add(row)
            row.actions = serialize_flags(policy.flags)
            row.temp_group = policy.temp_group or ""

            await session.execute(delete(XRegionBanRow).where(XRegionBanRow.name == name))
            await session.flush()
            session.add(
                XRegionBanRow(
                    name=name,
                    item_bans=serialize_ids(policy.banned_items),
                    projectile_bans=serialize_ids(policy.banned_projectiles),
                )
            )

        stored = policy.copy()
        stored.dangling = current.dangling
        self._policies = {**self._policies, name: stored}
        return stored

    async def prune_dangling(self) -> List[str]:
        """
        Remove every policy whose region no longer exists.

        Never called automatically; operators decide when orphans go.

        Returns:
            Names of the removed policies
        """
        names = [p.region_name for p in self.list() if p.dangling]
        for name in names:
            await self.remove(name)
        return names
