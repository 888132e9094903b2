"""
Configuration management package for playlist-player

Exposes the settings singleton used throughout the application. Settings are
read, in order of precedence, from environment variables (optionally loaded
from a .env file), a YAML configuration file, and dataclass defaults.

Usage:

    from playlist_player.config import get_settings

    settings = get_settings()
    directory = settings.get_playlist_directory()
"""

from .settings import get_settings, reload_settings, Settings

__all__ = [
    'get_settings',      # Factory function for singleton settings access
    'reload_settings',   # Re-read settings from files and environment
    'Settings',          # Settings class for direct instantiation
]
