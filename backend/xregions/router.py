"""
CommandRouter: registration and dispatch of chat commands.

Provides:
- @register() decorator for handler registration
- Unified command dispatch with alias support
- Command metadata for help listings
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, TYPE_CHECKING

from . import events as ev

if TYPE_CHECKING:
    from .world import WorldPlayer

logger = logging.getLogger(__name__)

# Type alias for event
Event = Dict[str, Any]
CommandHandler = Callable[..., Awaitable[List[Event]]]  # (player, args)


@dataclass
class CommandMeta:
    """Metadata for a registered command."""
    name: str  # Primary command name
    names: List[str]  # All names the command answers to
    handler: CommandHandler  # The actual handler function
    description: str  # Human-readable description
    usage: str  # Usage string (e.g., "xregion <subcommand>")


class CommandRouter:
    """
    Routes player commands to handlers.

    Usage:
        router = CommandRouter()

        @router.register(names=["xregion"], usage="xregion help")
        async def cmd_xregion(player, args):
            ...

        events = await router.dispatch(player, "xregion list")
    """

    def __init__(self, specifier: str = "/") -> None:
        self.specifier = specifier
        self.commands: Dict[str, CommandMeta] = {}  # name -> meta

    def register(
        self,
        names: List[str],
        description: str = "",
        usage: str = "",
    ) -> Callable[[CommandHandler], CommandHandler]:
        """
        Decorator to register a command handler.

        Args:
            names: Command names; the first is the primary name
            description: Human-readable description
            usage: Usage/help text
        """
        def decorator(handler: CommandHandler) -> CommandHandler:
            self.register_handler(names[0], handler, names=names,
                                  description=description, usage=usage)
            return handler

        return decorator

    def register_handler(
        self,
        primary_name: str,
        handler: CommandHandler,
        names: Optional[List[str]] = None,
        description: str = "",
        usage: str = "",
    ) -> None:
        """Register a command handler directly (without decorator)."""
        names = names or [primary_name]
        meta = CommandMeta(
            name=primary_name,
            names=names,
            handler=handler,
            description=description,
            usage=usage,
        )
        for name in names:
            self.commands[name.lower()] = meta

    def unregister(self, handler: CommandHandler) -> None:
        """Remove every name bound to ``handler``."""
        self.commands = {
            name: meta for name, meta in self.commands.items() if meta.handler != handler
        }

    async def dispatch(self, player: "WorldPlayer", raw_command: str) -> List[Event]:
        """
        Parse and dispatch a command to its handler.

        Args:
            player: The player executing the command
            raw_command: Raw command string, with or without the specifier

        Returns:
            List of events to send to players
        """
        raw = raw_command.strip()
        if raw.startswith(self.specifier):
            raw = raw[len(self.specifier):]
        if not raw:
            return []

        parts = raw.split(maxsplit=1)
        cmd_name = parts[0].lower()
        args = parts[1] if len(parts) > 1 else ""

        meta = self.commands.get(cmd_name)
        if meta is None:
            return [ev.error(player.id, f"Invalid command entered. Type {self.specifier}help for a list of valid commands.")]

        logger.debug("Player %s ran command %r", player.name, raw)
        return await meta.handler(player, args)
