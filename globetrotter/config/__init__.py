"""
Configuration package for the GlobeTrotter backend.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    RoleCheckMode,
    DatabaseSettings,
    RedisSettings,
    SessionSettings,
    SecuritySettings,
    AuthSettings,
    ItinerarySettings,
    PexelsSettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "RoleCheckMode",
    "DatabaseSettings",
    "RedisSettings",
    "SessionSettings",
    "SecuritySettings",
    "AuthSettings",
    "ItinerarySettings",
    "PexelsSettings",
    "settings",
    "get_settings",
    "reload_settings",
]
