# backend/xregions/permissions.py
from enum import Enum


class Permission(str, Enum):
    """Permissions required by the mutating xregion subcommands."""
    DEFINE_REGIONS = "xregions.define"
    MODIFY_ACTIONS = "xregions.setaction"
    SET_REGION_GROUP = "xregions.setgroup"
