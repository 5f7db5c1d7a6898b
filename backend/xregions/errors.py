# backend/xregions/errors.py
"""
Error types raised by the XRegions store and command surface.

Administrative errors carry a human-readable message that is sent back to the
invoking player unchanged.
"""

from __future__ import annotations

from typing import Iterable


class XRegionsError(Exception):
    """Base class for all XRegions errors."""


class UnknownRegion(XRegionsError):
    """The region engine has no region (or the store no policy) by this name."""

    def __init__(self, region_name: str) -> None:
        self.region_name = region_name
        super().__init__(f"No regions under the name of '{region_name}'.")


class AlreadyDefined(XRegionsError):
    """A policy already exists for the region."""

    def __init__(self, region_name: str) -> None:
        self.region_name = region_name
        super().__init__("This region is already defined as an XRegion.")


class UnknownFlag(XRegionsError):
    """A flag token did not match any known flag."""

    def __init__(self, token: str, valid_tokens: Iterable[str]) -> None:
        self.token = token
        self.valid_tokens = list(valid_tokens)
        super().__init__(f"Invalid flag! Valid flags: {', '.join(self.valid_tokens)}")


class UnknownGroup(XRegionsError):
    """The permission-group registry has no group by this name."""

    def __init__(self, group_name: str) -> None:
        self.group_name = group_name
        super().__init__(f"No groups under the name of '{group_name}'.")


class StorageUnavailable(XRegionsError):
    """The storage backend could not be reached during startup."""
