"""
Data models for playlists and tracks

This module defines the data structures shared by the playlist manager, the
persistence layer and the playback session:

1. **RandomMode**: Playback order selection for a playlist
2. **Track**: One audio file entry with its own amplification
3. **PlaylistSettings**: Playlist-wide amplification and random mode
4. **Playlist**: Named, ordered collection of tracks

Amplification values are plain multipliers. 1.0 leaves the volume untouched,
0.0 mutes, and at playback time the track value is multiplied by the session's
global amplification. Every model validates amplification on construction so
an invalid factor can never reach the audio backend or the stored record.

Serialization:
    ``Playlist.to_dict()`` / ``Playlist.from_dict()`` convert to and from the
    JSON-compatible record used by the playlist store. ``from_dict`` raises
    ``CorruptData`` for any structurally invalid record.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from ..exceptions import CorruptData, DuplicateTrack, InvalidAmplification, NotFoundError
from ..utils.helpers import display_name
from ..utils.validation import validate_amplification


class RandomMode(Enum):
    """
    Playback order of a playlist

    Values:
        OFF: Tracks play in list order
        ON: Each next track is picked at random, repeats allowed
        SHUFFLE: Each pass plays a shuffled permutation of the list

    Without repeat, ON and SHUFFLE behave the same.
    """
    OFF = "off"
    ON = "on"
    SHUFFLE = "shuffle"


def _checked_amplification(value: Union[int, float]) -> float:
    is_valid, error_msg = validate_amplification(value)
    if not is_valid:
        raise InvalidAmplification(error_msg, details={'amplification': value})
    return float(value)


@dataclass
class Track:
    """
    Single audio file entry

    Attributes:
        path: Location of the audio file, stored as given
        amplification: Volume multiplier for this track (1.0 = unchanged)
    """
    path: str
    amplification: float = 1.0

    def __post_init__(self):
        self.path = str(self.path)
        self.amplification = _checked_amplification(self.amplification)

    @classmethod
    def from_path(cls, path: Union[str, Path], amplification: float = 1.0) -> 'Track':
        return cls(path=str(path), amplification=amplification)

    @property
    def name(self) -> str:
        """File name of the track, used for display"""
        return display_name(self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {'path': self.path, 'amplification': self.amplification}

    def __str__(self) -> str:
        return self.name


@dataclass
class PlaylistSettings:
    """
    Playlist-wide playback settings

    Attributes:
        amplification: Multiplier applied to every track of the playlist,
            replaced by ``--amplify`` when given on the command line
        random: Playback order
    """
    amplification: float = 1.0
    random: RandomMode = RandomMode.OFF

    def __post_init__(self):
        self.amplification = _checked_amplification(self.amplification)
        if not isinstance(self.random, RandomMode):
            self.random = RandomMode(self.random)

    def to_dict(self) -> Dict[str, Any]:
        return {'amplification': self.amplification, 'random': self.random.value}

    def __str__(self) -> str:
        return f"Amplify: {self.amplification}; Random mode: {self.random.value}"


@dataclass
class Playlist:
    """
    Named, ordered collection of tracks

    The playlist exclusively owns its track list. Insertion order is playback
    order, and a path can only appear once (exact string equality).

    Attributes:
        name: Unique identifier among stored playlists
        tracks: Ordered track list
        settings: Playlist-wide playback settings
    """
    name: str
    tracks: List[Track] = field(default_factory=list)
    settings: PlaylistSettings = field(default_factory=PlaylistSettings)

    def __len__(self) -> int:
        return len(self.tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(self.tracks)

    def track(self, index: int) -> Optional[Track]:
        """Track at ``index`` or None when out of range"""
        if 0 <= index < len(self.tracks):
            return self.tracks[index]
        return None

    def find(self, path: Union[str, Path]) -> Optional[int]:
        """Index of the track with exactly this path, None when absent"""
        path = str(path)
        for index, track in enumerate(self.tracks):
            if track.path == path:
                return index
        return None

    def add_track(self, track: Track) -> Track:
        """
        Append a track to the end of the playlist

        Raises:
            DuplicateTrack: If a track with the same path is already present
        """
        if self.find(track.path) is not None:
            raise DuplicateTrack(
                f"Track already exists in '{self.name}': {track.path}",
                details={'playlist': self.name, 'path': track.path}
            )
        self.tracks.append(track)
        return track

    def remove_track(self, index: int) -> Track:
        """
        Remove and return the track at ``index``

        Raises:
            NotFoundError: If there is no track at that position
        """
        if not 0 <= index < len(self.tracks):
            raise NotFoundError(
                f"No track at position {index} in '{self.name}'",
                details={'playlist': self.name, 'index': index}
            )
        return self.tracks.pop(index)

    def set_track_amplification(self, index: int, amplification: float) -> Track:
        track = self.track(index)
        if track is None:
            raise NotFoundError(
                f"No track at position {index} in '{self.name}'",
                details={'playlist': self.name, 'index': index}
            )
        track.amplification = _checked_amplification(amplification)
        return track

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the playlist to a JSON-compatible dictionary

        Returns:
            Dictionary with name, settings and the ordered track list
        """
        return {
            'name': self.name,
            'settings': self.settings.to_dict(),
            'tracks': [track.to_dict() for track in self.tracks],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Playlist':
        """
        Build a playlist from a stored record

        Args:
            data: Dictionary as produced by ``to_dict``

        Returns:
            Playlist instance

        Raises:
            CorruptData: If the record is structurally invalid
        """
        try:
            if not isinstance(data, dict):
                raise TypeError(f"expected an object, got {type(data).__name__}")

            name = data['name']
            if not isinstance(name, str):
                raise TypeError("'name' must be a string")

            raw_tracks = data.get('tracks', [])
            if not isinstance(raw_tracks, list):
                raise TypeError("'tracks' must be a list")

            tracks = []
            for raw in raw_tracks:
                if not isinstance(raw, dict) or not isinstance(raw.get('path'), str):
                    raise TypeError(f"invalid track entry: {raw!r}")
                tracks.append(Track(path=raw['path'], amplification=raw.get('amplification', 1.0)))

            raw_settings = data.get('settings') or {}
            if not isinstance(raw_settings, dict):
                raise TypeError("'settings' must be an object")
            settings = PlaylistSettings(
                amplification=raw_settings.get('amplification', 1.0),
                random=RandomMode(raw_settings.get('random', RandomMode.OFF.value)),
            )
        except (KeyError, TypeError, ValueError, InvalidAmplification) as e:
            raise CorruptData(
                f"Invalid playlist record: {e}",
                details={'original_error': str(e)}
            ) from e

        return cls(name=name, tracks=tracks, settings=settings)

    def __str__(self) -> str:
        lines = ["  Settings:", str(self.settings), "  Songs:"]
        lines.extend(str(track) for track in self.tracks)
        return "\n".join(lines)
