# backend/xregions/events.py
"""
Outbound event construction.

Events are plain dicts routed by PluginContext.dispatch_events:
- scope "player": delivered to one player
- scope "all": broadcast to every connected player

Message events carry ``payload.kind`` ("info", "success" or "error") so
clients can color them.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from .world import MobId, PlayerId


# Type alias for events (message dicts sent to players)
Event = Dict[str, Any]


def msg_to_player(player_id: "PlayerId", text: str, *, kind: str = "info") -> Event:
    """
    Create a per-player message event.

    Args:
        player_id: The player to send to
        text: The message text
        kind: "info", "success" or "error"
    """
    return {
        "type": "message",
        "scope": "player",
        "player_id": player_id,
        "text": text,
        "payload": {"kind": kind},
    }


def info(player_id: "PlayerId", text: str) -> Event:
    return msg_to_player(player_id, text, kind="info")


def success(player_id: "PlayerId", text: str) -> Event:
    return msg_to_player(player_id, text, kind="success")


def error(player_id: "PlayerId", text: str) -> Event:
    return msg_to_player(player_id, text, kind="error")


def pvp_update(player_id: "PlayerId", hostile: bool) -> Event:
    """Re-broadcast a player's PvP state so every client sees the forced value."""
    return {
        "type": "pvp_update",
        "scope": "all",
        "player_id": player_id,
        "payload": {"hostile": hostile},
    }


def stat_update(player_id: "PlayerId", health: int, max_health: int) -> Event:
    return {
        "type": "stat_update",
        "scope": "player",
        "player_id": player_id,
        "payload": {"health": health, "max_health": max_health},
    }


def npc_update(mob_id: "MobId", *, active: bool) -> Event:
    return {
        "type": "npc_update",
        "scope": "all",
        "mob_id": mob_id,
        "payload": {"active": active},
    }
