"""
vw-common: Shared library for VoiceWarden.

Provides common data models, configuration management, structured
logging, and the Redis messaging client used by the moderation service.
"""

from vw_common.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
