# backend/xregions/flags.py
"""
Region flags - the behaviors a region can be configured with.

Flags are stored as comma-joined canonical tokens. The same token table is
used by the command surface and the storage deserializer, so a token accepted
by one is always accepted by the other.

Tokens written by the first plugin revision (numeric bit values and "None")
are mapped onto the canonical set when loading.
"""

from __future__ import annotations

import logging
from enum import IntFlag
from typing import Iterable, Iterator

from .errors import UnknownFlag

logger = logging.getLogger(__name__)


class RegionFlag(IntFlag):
    """Independent region behaviors; combine with ``|``."""

    NONE = 0
    FORCE_PVP = 1
    FORCE_PVP_OFF = 2
    HEAL = 4
    ITEM_BAN = 8
    PROJECTILE_BAN = 16
    NO_MOB = 32
    TEMP_GROUP = 64


# Canonical token -> flag, in bit order
FLAG_TOKENS: dict[str, RegionFlag] = {
    "ForcePvp": RegionFlag.FORCE_PVP,
    "ForcePvpOff": RegionFlag.FORCE_PVP_OFF,
    "Heal": RegionFlag.HEAL,
    "ItemBan": RegionFlag.ITEM_BAN,
    "ProjectileBan": RegionFlag.PROJECTILE_BAN,
    "NoMob": RegionFlag.NO_MOB,
    "TempGroup": RegionFlag.TEMP_GROUP,
}

# Tokens from the first revision (ForcePvp=1, Heal=2, TempGroup=4)
LEGACY_TOKENS: dict[str, RegionFlag] = {
    "None": RegionFlag.NONE,
    "0": RegionFlag.NONE,
    "1": RegionFlag.FORCE_PVP,
    "2": RegionFlag.HEAL,
    "4": RegionFlag.TEMP_GROUP,
}

_TOKENS_BY_FLAG: dict[RegionFlag, str] = {flag: token for token, flag in FLAG_TOKENS.items()}
_TOKENS_FOLDED: dict[str, RegionFlag] = {token.lower(): flag for token, flag in FLAG_TOKENS.items()}


def valid_tokens() -> list[str]:
    """Return every canonical flag token in bit order."""
    return list(FLAG_TOKENS)


def flag_token(flag: RegionFlag) -> str:
    """Return the canonical token for a single flag."""
    return _TOKENS_BY_FLAG[flag]


def try_parse_flag(token: str) -> RegionFlag | None:
    """
    Look up a canonical flag token.

    Exact matches win; otherwise the lookup is case-insensitive.
    Returns None when the token is unknown.
    """
    token = token.strip()
    flag = FLAG_TOKENS.get(token)
    if flag is None:
        flag = _TOKENS_FOLDED.get(token.lower())
    return flag


def parse_flag(token: str) -> RegionFlag:
    """
    Parse a flag token typed by an administrator.

    Raises:
        UnknownFlag: with the list of valid tokens
    """
    flag = try_parse_flag(token)
    if flag is None:
        raise UnknownFlag(token, valid_tokens())
    return flag


def iter_flags(flags: RegionFlag) -> Iterator[RegionFlag]:
    """Yield the single flags contained in ``flags`` in bit order."""
    for flag in FLAG_TOKENS.values():
        if flags & flag:
            yield flag


def describe_flags(flags: RegionFlag) -> list[str]:
    """Canonical tokens of the active flags."""
    return [flag_token(flag) for flag in iter_flags(flags)]


def serialize_flags(flags: RegionFlag) -> str:
    return ",".join(describe_flags(flags))


def deserialize_flags(text: str | None) -> RegionFlag:
    """
    Parse a stored comma-joined token list.

    Unknown tokens are skipped so that rows written by newer versions still
    load; legacy tokens are mapped through LEGACY_TOKENS.
    """
    flags = RegionFlag.NONE
    for raw in (text or "").split(","):
        token = raw.strip()
        if not token:
            continue
        flag = try_parse_flag(token)
        if flag is None:
            flag = LEGACY_TOKENS.get(token)
        if flag is None:
            logger.debug("Skipping unknown flag token %r", token)
            continue
        flags |= flag
    return flags


def serialize_ids(ids: Iterable[int]) -> str:
    return ",".join(str(i) for i in sorted(set(ids)))


def deserialize_ids(text: str | None) -> set[int]:
    """Parse a comma-joined integer list, skipping anything that is not an integer."""
    ids: set[int] = set()
    for raw in (text or "").split(","):
        raw = raw.strip()
        if not raw:
            continue
        try:
            ids.add(int(raw))
        except ValueError:
            logger.debug("Skipping non-integer ban entry %r", raw)
    return ids
