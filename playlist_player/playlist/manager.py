"""
Playlist operations behind the command line

The manager turns command arguments into playlist changes and playback
sources. It owns no state of its own: every operation loads the playlist from
the store, changes it, and writes it back before returning.

Operations:
- create: New playlist, optionally seeded with files or directories
- add: Append a file (or a directory's audio files) to a playlist
- edit: Change playlist settings, track amplification, drop invalid files
- remove / delete: Remove one track / a whole playlist
- resolve_source: Ordered tracks for the play command, from files or a playlist

Directory arguments contribute the audio files directly inside the
directory, sorted lexicographically by path.
"""

import random
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from ..audio.processor import AudioProcessor, get_audio_processor
from ..exceptions import DuplicateTrack, FileNotFound, InvalidName, InvalidTrack
from ..utils.helpers import list_audio_files
from ..utils.logger import create_operation_logger, get_logger
from .models import Playlist, PlaylistSettings, RandomMode, Track
from .storage import PlaylistStore, get_playlist_store


class SourceMode(Enum):
    """How the play command interprets its target argument"""
    FILES = "files"
    PLAYLIST = "playlist"


class PlaylistManager:
    """Create, modify and resolve playlists through a PlaylistStore"""

    def __init__(self, store: PlaylistStore, processor: Optional[AudioProcessor] = None):
        """
        Initialize the manager

        Args:
            store: Storage for playlist records
            processor: Audio processor used for directory scans and validation
        """
        self.store = store
        self.processor = processor or get_audio_processor()
        self.logger = get_logger(__name__)

    def collect_tracks(self, path: Union[str, Path], amplification: float = 1.0) -> List[Track]:
        """
        Tracks for a file or directory argument

        A file yields one track regardless of its extension. A directory
        yields its audio files in lexicographic order.

        Raises:
            FileNotFound: If the path does not exist
        """
        path = Path(path)
        if path.is_file():
            return [Track.from_path(path, amplification)]
        if path.is_dir():
            files = list_audio_files(path, self.processor.extensions)
            self.logger.debug(f"Found {len(files)} audio files in {path}")
            return [Track.from_path(f, amplification) for f in files]
        raise FileNotFound(f"Expected file or directory: {path}", details={'path': str(path)})

    def _append_tracks(
        self,
        playlist: Playlist,
        tracks: Iterable[Track],
        strict: bool,
        validate: bool = False
    ) -> List[Track]:
        """
        Append tracks, rejecting duplicates and (optionally) non-audio files

        With ``strict`` a rejected track raises; otherwise it is skipped with a warning.
        """
        added = []
        for track in tracks:
            if validate:
                is_valid, issues = self.processor.validate_audio_file(track.path)
                if not is_valid:
                    message = f"Invalid audio file {track.path}: {', '.join(issues)}"
                    if strict:
                        raise InvalidTrack(message, details={'path': track.path, 'issues': issues})
                    self.logger.console_warning(f"Skipping {message}")
                    continue
            try:
                added.append(playlist.add_track(track))
            except DuplicateTrack as e:
                if strict:
                    raise
                self.logger.console_warning(str(e))
        return added

    def create(
        self,
        name: str,
        initial_files: Iterable[Union[str, Path]] = (),
        amplification: Optional[float] = None,
        random_mode: Optional[RandomMode] = None
    ) -> Playlist:
        """
        Create and store a new playlist

        Args:
            name: Playlist name, must not be taken
            initial_files: Files or directories to seed the playlist with
            amplification: Playlist-wide amplification (default 1.0)
            random_mode: Playback order (default off)

        Returns:
            The stored playlist

        Raises:
            InvalidName: If the name is malformed or already used
            FileNotFound: If a seed path does not exist
        """
        if self.store.exists(name):
            raise InvalidName(f"Playlist already exists: {name}", details={'playlist': name})

        settings = PlaylistSettings(
            amplification=1.0 if amplification is None else amplification,
            random=random_mode or RandomMode.OFF
        )
        playlist = Playlist(name=name, settings=settings)

        # Resolve every seed before anything is stored
        seeds = [self.collect_tracks(path) for path in initial_files]
        for tracks in seeds:
            self._append_tracks(playlist, tracks, strict=False)

        self.store.save(playlist)
        self.logger.console_info(f"Created playlist '{name}' with {len(playlist)} tracks")
        return playlist

    def add(
        self,
        playlist_name: str,
        file_path: Union[str, Path],
        amplification: float = 1.0,
        validate: bool = False
    ) -> List[Track]:
        """
        Append a file, or a directory's audio files, to a stored playlist

        Args:
            playlist_name: Playlist to extend
            file_path: File or directory to add
            amplification: Amplification of the new tracks
            validate: Reject files that are not recognized as audio

        Returns:
            The tracks that were appended

        Raises:
            PlaylistNotFound: If the playlist does not exist
            FileNotFound: If the path does not exist
            DuplicateTrack: If a single file is already in the playlist
            InvalidTrack: If ``validate`` is set and a single file is not audio
        """
        playlist = self.store.load(playlist_name)
        tracks = self.collect_tracks(file_path, amplification)
        strict = Path(file_path).is_file()

        added = self._append_tracks(playlist, tracks, strict=strict, validate=validate)
        if added:
            self.store.save(playlist)
        self.logger.console_info(f"Added {len(added)} track(s) to '{playlist_name}'")
        return added

    def edit(
        self,
        playlist_name: str,
        file_path: Optional[Union[str, Path]] = None,
        amplification: Optional[float] = None,
        random_mode: Optional[RandomMode] = None,
        validate: bool = False,
        track_amplification: Optional[Tuple[int, float]] = None
    ) -> Playlist:
        """
        Change a stored playlist

        Args:
            playlist_name: Playlist to edit
            file_path: Optional file or directory to append
            amplification: New playlist-wide amplification
            random_mode: New playback order
            validate: Drop tracks that are missing or not audio files
            track_amplification: (position, amplification) for a single track

        Returns:
            The updated playlist
        """
        playlist = self.store.load(playlist_name)

        if file_path is not None:
            tracks = self.collect_tracks(file_path)
            self._append_tracks(playlist, tracks, strict=False)
        if amplification is not None:
            playlist.settings = PlaylistSettings(
                amplification=amplification, random=playlist.settings.random
            )
        if random_mode is not None:
            playlist.settings.random = random_mode
        if track_amplification is not None:
            index, value = track_amplification
            playlist.set_track_amplification(index, value)
        if validate:
            self.validate(playlist)

        self.store.save(playlist)
        return playlist

    def validate(self, playlist: Playlist) -> List[Track]:
        """
        Remove tracks whose file is missing or not a recognized audio file

        Args:
            playlist: Playlist to filter in place

        Returns:
            The removed tracks
        """
        operation = create_operation_logger(__name__, f"Validating '{playlist.name}'")
        operation.start()

        kept, removed = [], []
        total = len(playlist)
        for position, track in enumerate(playlist.tracks, start=1):
            is_valid, issues = self.processor.validate_audio_file(track.path)
            if is_valid:
                kept.append(track)
            else:
                removed.append(track)
                operation.warning(f"Filtered invalid audio file {track}: {', '.join(issues)}")
            operation.progress(track.name, position, total)

        playlist.tracks[:] = kept
        operation.complete(f"Validated '{playlist.name}': {len(kept)} kept, {len(removed)} removed")
        return removed

    def remove(self, playlist_name: str, index: int) -> Track:
        """Remove the track at ``index`` from a stored playlist"""
        playlist = self.store.load(playlist_name)
        track = playlist.remove_track(index)
        self.store.save(playlist)
        self.logger.console_info(f"Removed {track} from '{playlist_name}'")
        return track

    def delete(self, playlist_name: str) -> None:
        self.store.delete(playlist_name)
        self.logger.console_info(f"Deleted playlist '{playlist_name}'")

    def list_playlists(self) -> List[str]:
        return self.store.list_names()

    def load(self, playlist_name: str) -> Playlist:
        return self.store.load(playlist_name)

    def resolve_source(self, target: Union[str, Path], mode: SourceMode) -> Playlist:
        """
        Resolve the play command's target into an ordered track list

        Args:
            target: File or directory path, or a playlist name
            mode: How to interpret ``target``

        Returns:
            For FILES an unsaved playlist named after the target, for
            PLAYLIST the stored playlist itself

        Raises:
            FileNotFound: If the path does not exist (FILES)
            PlaylistNotFound: If the playlist does not exist (PLAYLIST)
        """
        if mode is SourceMode.PLAYLIST:
            return self.store.load(str(target))

        tracks = self.collect_tracks(target)
        return Playlist(name=str(target), tracks=tracks)


def play_order(playlist: Playlist, rng: Optional[random.Random] = None) -> List[int]:
    """
    Track indices for one pass through a playlist

    List order for RandomMode.OFF, a shuffled permutation otherwise.
    """
    order = list(range(len(playlist)))
    if playlist.settings.random is not RandomMode.OFF:
        (rng or random).shuffle(order)
    return order


_manager_instance: Optional[PlaylistManager] = None


def get_playlist_manager() -> PlaylistManager:
    """
    Get the global playlist manager bound to the configured playlist store

    Returns:
        Global PlaylistManager instance
    """
    global _manager_instance
    store = get_playlist_store()
    if _manager_instance is None or _manager_instance.store is not store:
        _manager_instance = PlaylistManager(store)
    return _manager_instance
