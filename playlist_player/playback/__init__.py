"""
Playback package: session state machine, audio output and key controls

Key Components:
- `PlaybackSession`: Drives one playlist track by track from an event queue
- `SoundDeviceBackend`: Streams decoded tracks to the audio device
- `KeyReader` / `StatusDisplay`: Interactive terminal controls and output
- `TrackFinished`, `TrackFailed`, `Command`: Events on the session queue
"""

from .events import Command, CommandKind, TrackFailed, TrackFinished, HELP_TEXT
from .session import PlaybackSession, SessionState, calc_new_volume
from .backend import AudioBackend, SoundDeviceBackend
from .controls import KeyReader, StatusDisplay, key_to_command

__all__ = [
    'Command',
    'CommandKind',
    'TrackFailed',
    'TrackFinished',
    'HELP_TEXT',
    'PlaybackSession',
    'SessionState',
    'calc_new_volume',
    'AudioBackend',
    'SoundDeviceBackend',
    'KeyReader',
    'StatusDisplay',
    'key_to_command',
]
