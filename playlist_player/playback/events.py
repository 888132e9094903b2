"""
Events consumed by the playback session

The session processes a single queue that merges two producers:

- The audio backend posts ``TrackFinished`` / ``TrackFailed`` from its
  output thread when a track ends or breaks mid-stream.
- The key reader posts ``Command`` events for user controls.

Backend events carry the token of the playback they belong to, so an event
from a track that was already skipped can be recognized and ignored.
"""

from dataclasses import dataclass
from enum import Enum


class CommandKind(Enum):
    """User commands understood by the playback session"""
    QUIT = "quit"
    HELP = "help"
    TOGGLE_PAUSE = "toggle_pause"
    NEXT = "next"
    BACK = "back"
    VOLUME_UP = "volume_up"
    VOLUME_DOWN = "volume_down"
    DELETE = "delete"
    SAVE = "save"


HELP_TEXT = (
    "Exit: q, Help: h, Play/Pause: space, Volume: ↑/↓, "
    "Next: →, Back: ←, Delete: d, Save: s"
)


@dataclass(frozen=True)
class TrackFinished:
    """Playback of the track started with ``token`` reached its end"""
    token: int


@dataclass(frozen=True)
class TrackFailed:
    """Playback of the track started with ``token`` broke off"""
    token: int
    error: str


@dataclass(frozen=True)
class Command:
    """A user control"""
    kind: CommandKind
