"""
XRegions - policy flags for game server regions.

Regions defined as XRegions carry behavioral flags (forced PvP, auto-heal,
mob suppression, temporary permission groups, ...) that are evaluated
against player and world events.
"""

__version__ = "0.1.0"
