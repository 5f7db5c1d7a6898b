"""
XRegions configuration.

Settings are read from the environment once at import time.
"""

import os
from dataclasses import dataclass

# Database settings
DATABASE_URL = os.getenv("XREGIONS_DATABASE_URL", "sqlite+aiosqlite:///./xregions.db")

# Mob suppression scan runs at most once per interval (seconds)
TICK_INTERVAL = float(os.getenv("XREGIONS_TICK_INTERVAL", "1.0"))

# Stop the mob scan after the first region that suppresses something
LEGACY_TICK_SCAN = os.getenv("XREGIONS_LEGACY_TICK_SCAN", "0").lower() in ("1", "true", "yes")

# Command settings
COMMAND_NAME = "xregion"
COMMAND_SPECIFIER = os.getenv("XREGIONS_COMMAND_SPECIFIER", "/")

# Admin API bearer token (unset disables the API)
ADMIN_TOKEN = os.getenv("XREGIONS_ADMIN_TOKEN") or None

LOG_LEVEL = os.getenv("XREGIONS_LOG_LEVEL", "INFO")


@dataclass
class AdapterConfig:
    """Configuration for the region event adapter."""
    tick_interval: float = TICK_INTERVAL  # Seconds between mob scans
    legacy_tick_scan: bool = LEGACY_TICK_SCAN  # Early-return mob scan
