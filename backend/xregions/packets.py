# backend/xregions/packets.py
"""
Decoding of the raw network messages XRegions inspects.

Only the leading fields are read:
- TOGGLE_PVP: player id (u8), requested state (u8, non-zero = on)
- PLAYER_HURT: player id (u8), remaining fields ignored
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

_TOGGLE_PVP = struct.Struct("<B?")
_PLAYER_HURT = struct.Struct("<B")


class PacketType(IntEnum):
    TOGGLE_PVP = 30
    PLAYER_HURT = 117


@dataclass(frozen=True)
class TogglePvp:
    player_id: int
    pvp: bool


@dataclass(frozen=True)
class PlayerHurt:
    player_id: int


def decode_toggle_pvp(payload: bytes) -> TogglePvp:
    """
    Raises:
        struct.error: if the payload is shorter than two bytes
    """
    player_id, pvp = _TOGGLE_PVP.unpack_from(payload)
    return TogglePvp(player_id, pvp)


def decode_player_hurt(payload: bytes) -> PlayerHurt:
    (player_id,) = _PLAYER_HURT.unpack_from(payload)
    return PlayerHurt(player_id)
