"""
Configuration management for playlist-player

This module handles loading, validation, and management of application settings
from YAML files and environment variables. It provides a centralized
configuration system with reloading and validation.

The configuration is organized into logical sections using dataclasses:
- Storage settings (where playlist records live)
- Playback behaviour (volume steps, save on exit, controls)
- Audio output and file recognition options
- Logging output settings

Settings that point at local directories can be overridden from environment
variables, optionally loaded from a .env file.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()


DEFAULT_AUDIO_EXTENSIONS = [
    ".mp3", ".wav", ".flac", ".ogg", ".oga", ".m4a",
    ".aac", ".opus", ".wma", ".aiff", ".aif",
]


@dataclass
class StorageConfig:
    """
    Playlist storage configuration

    Each playlist is stored as one JSON record named after the playlist
    inside ``playlist_directory``.
    """
    playlist_directory: str = "~/.playlist-player/playlists"
    config_directory: str = "~/.playlist-player/"


@dataclass
class PlaybackConfig:
    """
    Playback session configuration

    Controls how volume keys change a track's amplification and whether
    modified playlists are written back when a session ends.
    """
    volume_step: float = 0.1
    min_volume: float = 0.05
    max_volume: float = 3.0
    save_on_exit: bool = True
    controls: bool = True
    key_poll_interval: float = 0.1


@dataclass
class AudioConfig:
    """
    Audio output configuration

    ``block_size`` is the number of frames rendered per output callback and
    bounds how quickly pause, skip and volume changes become audible.
    """
    block_size: int = 2048
    device: Optional[str] = None
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_AUDIO_EXTENSIONS))


@dataclass
class LoggingConfig:
    """
    Logging configuration and output settings

    Controls application logging behavior including log levels, file output,
    rotation, and console formatting.
    """
    level: str = "INFO"
    file: str = ""
    max_size: str = "10MB"
    backup_count: int = 3
    console_output: bool = True
    colored_output: bool = True


class Settings:
    """
    Main settings class that manages all configuration

    Loads settings from YAML files and environment variables and provides a
    unified interface for accessing configuration throughout the application.

    The class handles:
    - Loading configuration from YAML files
    - Overriding with environment variables
    - Validating configuration values
    - Saving configuration back to files
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings from config file or environment variables

        Args:
            config_path: Path to custom config file, if None uses default locations
        """
        self.config_path = config_path
        self.config_dir = Path.home() / ".playlist-player"

        self.storage = StorageConfig()
        self.playback = PlaybackConfig()
        self.audio = AudioConfig()
        self.logging = LoggingConfig()

        # Load configuration from various sources in order of precedence
        self._load_config()
        self._load_environment_variables()

    def _sections(self) -> Dict[str, Any]:
        return {
            'storage': self.storage,
            'playback': self.playback,
            'audio': self.audio,
            'logging': self.logging,
        }

    def _load_config(self) -> None:
        """
        Load configuration from YAML file

        Searches for configuration files in multiple locations in order of
        precedence. The first file found will be used.
        """
        config_paths = [
            self.config_path,
            self.config_dir / "config.yaml",
            Path("config.yaml")
        ]

        config_data = {}
        for path in config_paths:
            if path and Path(path).exists():
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        config_data = yaml.safe_load(f) or {}
                    break
                except (OSError, yaml.YAMLError) as e:
                    print(f"Warning: Failed to load config from {path}: {e}")

        self._apply_config(config_data)

    def _apply_config(self, config_data: Dict[str, Any]) -> None:
        """
        Apply configuration data to dataclass instances

        Only attributes that exist on both the YAML section and the dataclass
        are updated; unknown keys are ignored.

        Args:
            config_data: Dictionary containing configuration sections
        """
        config_mapping = self._sections()

        for section_name, section_data in config_data.items():
            if section_name in config_mapping and isinstance(section_data, dict):
                config_obj = config_mapping[section_name]
                for key, value in section_data.items():
                    if hasattr(config_obj, key):
                        setattr(config_obj, key, value)

    def _load_environment_variables(self) -> None:
        """
        Load overrides from environment variables

        Environment variables take precedence over file-based configuration.
        """
        env_mappings = {
            'PLAYLIST_PLAYER_DIR': lambda v: setattr(self.storage, 'playlist_directory', v),
            'PLAYLIST_PLAYER_LOG_LEVEL': lambda v: setattr(self.logging, 'level', v),
        }

        for env_var, setter in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                setter(value)

    def get_playlist_directory(self) -> Path:
        """
        Get the expanded playlist storage directory

        Returns:
            Path object for the playlist directory
        """
        return Path(self.storage.playlist_directory).expanduser()

    def get_config_directory(self) -> Path:
        """
        Get the expanded config directory path

        Returns:
            Path object for the configuration directory
        """
        return Path(self.storage.config_directory).expanduser()

    def save_config(self, path: Optional[str] = None) -> Path:
        """
        Save current configuration to file

        Args:
            path: Custom path to save config, defaults to user config directory

        Returns:
            Path the configuration was written to

        Raises:
            OSError: If the configuration cannot be saved
        """
        if not path:
            path = self.get_config_directory() / "config.yaml"
        else:
            path = Path(path)

        config_data = self.to_dict()

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f, default_flow_style=False, indent=2)
        return path

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Convert every section to a plain dictionary"""
        return {
            name: self._dataclass_to_dict(section)
            for name, section in self._sections().items()
        }

    def _dataclass_to_dict(self, obj) -> Dict[str, Any]:
        result = {}
        for key, value in obj.__dict__.items():
            result[key] = value
        return result

    def validate(self) -> bool:
        """
        Validate current configuration

        Returns:
            True if configuration is valid, False otherwise
        """
        errors = []

        if not 0 < self.playback.volume_step < 1:
            errors.append(f"Invalid volume step: {self.playback.volume_step}")

        if not 0 <= self.playback.min_volume <= self.playback.max_volume:
            errors.append(
                f"Invalid volume range: {self.playback.min_volume} - {self.playback.max_volume}"
            )

        if self.audio.block_size <= 0:
            errors.append(f"Invalid block size: {self.audio.block_size}")

        if self.logging.level.upper() not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            print("Configuration validation errors:")
            for error in errors:
                print(f"  - {error}")
            return False

        return True

    def __str__(self) -> str:
        sections = [
            f"Playlists: {self.storage.playlist_directory}",
            f"Volume step: {self.playback.volume_step}",
            f"Save on exit: {'enabled' if self.playback.save_on_exit else 'disabled'}",
        ]
        return f"Settings({', '.join(sections)})"


# Global settings instance for singleton pattern
settings = Settings()


def get_settings() -> Settings:
    """
    Get the global settings instance

    Returns:
        The global Settings instance
    """
    return settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reload settings from configuration files

    Creates a new settings instance with updated configuration from files
    and environment variables.

    Args:
        config_path: Optional path to specific config file

    Returns:
        New Settings instance with reloaded configuration
    """
    global settings
    settings = Settings(config_path)
    return settings
