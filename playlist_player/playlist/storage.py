"""
Playlist record storage

One JSON file per playlist, named ``<playlist name>.json``, inside the
configured playlist directory. Writes are atomic: the record is written to a
temporary file next to the destination and renamed over it, so a crash or a
failed write never leaves a half-written playlist behind.

Record layout::

    {
      "format_version": "1.0",
      "name": "road",
      "settings": {"amplification": 1.0, "random": "off"},
      "tracks": [{"path": "a.mp3", "amplification": 1.0}, ...]
    }
"""

import json
from pathlib import Path
from typing import List, Optional, Union

from ..config.settings import get_settings
from ..exceptions import CorruptData, InvalidName, PersistenceError, PlaylistNotFound
from ..utils.helpers import atomic_write_text
from ..utils.logger import get_logger
from ..utils.validation import validate_playlist_name
from .models import Playlist

RECORD_SUFFIX = ".json"
FORMAT_VERSION = "1.0"


class PlaylistStore:
    """Loads and saves playlist records in a directory"""

    def __init__(self, directory: Union[str, Path]):
        """
        Initialize the store

        Args:
            directory: Directory holding the playlist records, created on first save
        """
        self.directory = Path(directory).expanduser()
        self.logger = get_logger(__name__)

    def path_for(self, name: str) -> Path:
        """
        Record path for a playlist name

        Raises:
            InvalidName: If the name cannot be used as a record file name
        """
        is_valid, error_msg = validate_playlist_name(name)
        if not is_valid:
            raise InvalidName(error_msg, details={'name': name})
        return self.directory / f"{name}{RECORD_SUFFIX}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def list_names(self) -> List[str]:
        """Names of all stored playlists, sorted"""
        if not self.directory.is_dir():
            return []
        return sorted(
            path.stem for path in self.directory.glob(f"*{RECORD_SUFFIX}")
            if path.is_file() and not path.name.startswith('.')
        )

    def load(self, name: str) -> Playlist:
        """
        Load a playlist record

        Args:
            name: Playlist name

        Returns:
            The stored playlist

        Raises:
            PlaylistNotFound: If no record exists for the name
            CorruptData: If the record cannot be parsed
        """
        path = self.path_for(name)
        if not path.is_file():
            raise PlaylistNotFound(
                f"Playlist not found: {name}",
                details={'playlist': name, 'path': str(path)}
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptData(
                f"Playlist '{name}' is corrupted: {e}",
                details={'playlist': name, 'path': str(path), 'original_error': str(e)}
            ) from e
        except OSError as e:
            raise PersistenceError(
                f"Unable to read playlist '{name}': {e}",
                details={'playlist': name, 'path': str(path), 'original_error': str(e)}
            ) from e

        try:
            playlist = Playlist.from_dict(data)
        except CorruptData as e:
            raise CorruptData(
                f"Playlist '{name}' is corrupted: {e.message}",
                details={'playlist': name, 'path': str(path), **e.details}
            ) from e

        if playlist.name != name:
            self.logger.debug(f"Record {path.name} names playlist '{playlist.name}', using '{name}'")
            playlist.name = name

        self.logger.debug(f"Loaded playlist '{name}' with {len(playlist)} tracks")
        return playlist

    def save(self, playlist: Playlist) -> Path:
        """
        Write a playlist record, replacing any previous one

        Args:
            playlist: Playlist to store

        Returns:
            Path of the written record

        Raises:
            InvalidName: If the playlist name cannot be used as a file name
            PersistenceError: If writing fails; the previous record is kept
        """
        path = self.path_for(playlist.name)
        record = {'format_version': FORMAT_VERSION, **playlist.to_dict()}

        try:
            atomic_write_text(path, json.dumps(record, indent=2, ensure_ascii=False) + "\n")
        except OSError as e:
            raise PersistenceError(
                f"Unable to save playlist '{playlist.name}' to {path}: {e}",
                details={'playlist': playlist.name, 'path': str(path), 'original_error': str(e)}
            ) from e

        self.logger.debug(f"Saved playlist '{playlist.name}' ({len(playlist)} tracks) to {path}")
        return path

    def delete(self, name: str) -> None:
        """
        Remove a playlist record

        Raises:
            PlaylistNotFound: If no record exists for the name
        """
        path = self.path_for(name)
        if not path.is_file():
            raise PlaylistNotFound(f"Playlist not found: {name}", details={'playlist': name})
        try:
            path.unlink()
        except OSError as e:
            raise PersistenceError(
                f"Unable to delete playlist '{name}': {e}",
                details={'playlist': name, 'path': str(path), 'original_error': str(e)}
            ) from e
        self.logger.debug(f"Deleted playlist '{name}'")


_store_instance: Optional[PlaylistStore] = None


def get_playlist_store() -> PlaylistStore:
    """
    Get the global playlist store for the configured playlist directory

    Returns:
        Global PlaylistStore instance
    """
    global _store_instance
    directory = get_settings().get_playlist_directory()
    if _store_instance is None or _store_instance.directory != directory:
        _store_instance = PlaylistStore(directory)
    return _store_instance
