# backend/xregions/commands.py
"""
The xregion administrative command.

Subcommands:
- define <region>              - make a region policy-bearing
- addflag <region> <flag>      - add a flag
- deleteflag <region> <flag>   - remove a flag
- setgroup <region> <group>    - set the temporary group
- list                         - list defined regions
- listactions [region]         - show flags of one or every region
- help                         - show the subcommands you may use

Mutating subcommands check permission, then arity, then the region, then the
flag or group, before touching the store.
"""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List

from . import events as ev
from .config import COMMAND_NAME
from .errors import AlreadyDefined, UnknownFlag, UnknownGroup, UnknownRegion
from .flags import flag_token, parse_flag
from .permissions import Permission

if TYPE_CHECKING:
    from .context import PluginContext
    from .policy import RegionPolicy
    from .router import CommandRouter
    from .store import RegionPolicyStore
    from .world import WorldPlayer

Event = dict[str, Any]
Subcommand = Callable[["WorldPlayer", List[str]], Awaitable[List[Event]]]

# (subcommand, usage, description, required permission)
SUBCOMMAND_HELP = [
    ("define", "define <region name>", "Defines a region as an XRegion.", Permission.DEFINE_REGIONS),
    ("addflag", "addflag <region name> <flag>", "Adds a flag to an XRegion.", Permission.MODIFY_ACTIONS),
    ("deleteflag", "deleteflag <region name> <flag>", "Removes a flag from an XRegion.", Permission.MODIFY_ACTIONS),
    ("setgroup", "setgroup <region name> <group name>", "Sets an XRegion's temporary group.", Permission.SET_REGION_GROUP),
    ("list", "list", "Lists every XRegion.", None),
    ("listactions", "listactions [region name]", "Lists the flags of XRegions.", None),
]


class XRegionCommand:
    """Handler for the xregion command and its subcommands."""

    def __init__(
        self,
        ctx: "PluginContext",
        store: "RegionPolicyStore",
        specifier: str = "/",
    ) -> None:
        self.ctx = ctx
        self.store = store
        self.specifier = specifier
        self.subcommands: Dict[str, Subcommand] = {
            "define": self.define,
            "addflag": self.add_flag,
            "deleteflag": self.delete_flag,
            "setgroup": self.set_group,
            "list": self.list_regions,
            "listactions": self.list_actions,
            "help": self.help,
        }

    @property
    def prefix(self) -> str:
        return f"{self.specifier}{COMMAND_NAME}"

    async def handle(self, player: "WorldPlayer", args: str) -> List[Event]:
        try:
            params = shlex.split(args)
        except ValueError:
            params = args.split()

        if not params:
            return [ev.error(player.id, f"Invalid syntax! Use {self.prefix} help for help.")]

        subcommand = self.subcommands.get(params[0].lower(), self.help)
        return await subcommand(player, params)

    def _syntax_error(self, player: "WorldPlayer", usage: str) -> List[Event]:
        return [ev.error(player.id, f"Invalid syntax! Proper syntax: {self.prefix} {usage}")]

    # ---------- Mutating subcommands ----------

    async def define(self, player: "WorldPlayer", params: List[str]) -> List[Event]:
        if not player.has_permission(Permission.DEFINE_REGIONS):
            return [ev.error(player.id, "You do not have permission to define regions.")]
        if len(params) != 2:
            return self._syntax_error(player, "define <region name>")

        region_name = params[1]
        try:
            await self.store.define(region_name)
        except (UnknownRegion, AlreadyDefined) as exc:
            return [ev.error(player.id, str(exc))]
        return [ev.info(player.id, f"Region '{region_name}' has been defined as an XRegion.")]

    async def add_flag(self, player: "WorldPlayer", params: List[str]) -> List[Event]:
        return await self._change_flag(player, params, add=True)

    async def delete_flag(self, player: "WorldPlayer", params: List[str]) -> List[Event]:
        return await self._change_flag(player, params, add=False)

    async def _change_flag(self, player: "WorldPlayer", params: List[str], add: bool) -> List[Event]:
        verb = "addflag" if add else "deleteflag"
        if not player.has_permission(Permission.MODIFY_ACTIONS):
            return [ev.error(player.id, "You do not have permission to modify a region's actions.")]
        if len(params) != 3:
            return self._syntax_error(player, f"{verb} <region name> <flag>")

        region_name = params[1]
        if self.store.get(region_name) is None:
            return [ev.error(player.id, str(UnknownRegion(region_name)))]

        try:
            flag = parse_flag(params[2])
        except UnknownFlag as exc:
            return [ev.error(player.id, str(exc))]

        def change(policy: "RegionPolicy") -> None:
            if add:
                policy.flags |= flag
            else:
                policy.flags &= ~flag

        try:
            await self.store.modify(region_name, change)
        except UnknownRegion as exc:
            return [ev.error(player.id, str(exc))]

        token = flag_token(flag)
        if add:
            return [ev.success(player.id, f"Region '{region_name}' now has flag '{token}'.")]
        return [ev.success(player.id, f"Region '{region_name}' no longer has flag '{token}'.")]

    async def set_group(self, player: "WorldPlayer", params: List[str]) -> List[Event]:
        if not player.has_permission(Permission.SET_REGION_GROUP):
            return [ev.error(player.id, "You do not have permission to modify a region's group.")]
        if len(params) != 3:
            return self._syntax_error(player, "setgroup <region name> <group name>")

        region_name, group_name = params[1], params[2]
        if self.store.get(region_name) is None:
            return [ev.error(player.id, str(UnknownRegion(region_name)))]
        if not self.ctx.world.has_group(group_name):
            return [ev.error(player.id, str(UnknownGroup(group_name)))]

        def change(policy: "RegionPolicy") -> None:
            policy.temp_group = group_name

        try:
            await self.store.modify(region_name, change)
        except UnknownRegion as exc:
            return [ev.error(player.id, str(exc))]
        return [ev.success(player.id, f"Region '{region_name}' now references group '{group_name}'.")]

    # ---------- Read-only subcommands ----------

    async def list_regions(self, player: "WorldPlayer", params: List[str]) -> List[Event]:
        names = sorted(p.region_name for p in self.store.list() if not p.dangling)
        return [ev.info(player.id, f"Defined XRegions: {', '.join(names)}")]

    async def list_actions(self, player: "WorldPlayer", params: List[str]) -> List[Event]:
        if len(params) > 2:
            return self._syntax_error(player, "listactions [region name]")

        if len(params) == 1:
            policies = sorted(self.store.list(), key=lambda p: p.region_name)
            if not policies:
                return [ev.info(player.id, "No XRegions are defined.")]
            return [
                ev.info(player.id, f"{p.region_name}: {', '.join(p.flag_names()) or 'none'}")
                for p in policies
            ]

        region_name = params[1]
        policy = self.store.get(region_name)
        if policy is None:
            return [ev.error(player.id, str(UnknownRegion(region_name)))]

        events = [ev.info(
            player.id,
            f"Region '{region_name}' contains the following flags: {', '.join(policy.flag_names())}",
        )]
        if policy.temp_group:
            events.append(ev.info(player.id, f"Temporary group: {policy.temp_group}"))
        return events

    async def help(self, player: "WorldPlayer", params: List[str]) -> List[Event]:
        lines = [f"{self.prefix} subcommands:"]
        for _, usage, description, permission in SUBCOMMAND_HELP:
            if permission is not None and not player.has_permission(permission):
                continue
            lines.append(f"{self.prefix} {usage} - {description}")
        return [ev.info(player.id, line) for line in lines]


def register_xregion_commands(router: "CommandRouter", handler: XRegionCommand) -> None:
    """Register the xregion command with the command router."""
    router.register(
        names=[COMMAND_NAME],
        description="Manages XRegions",
        usage=f"{COMMAND_NAME} help",
    )(handler.handle)
