"""Test configuration and fixtures"""

import pytest
import queue
import tempfile
from pathlib import Path

from playlist_player.audio.processor import AudioProcessor
from playlist_player.config.settings import DEFAULT_AUDIO_EXTENSIONS, PlaybackConfig
from playlist_player.exceptions import PlaybackError
from playlist_player.playback.events import TrackFinished
from playlist_player.playlist.manager import PlaylistManager
from playlist_player.playlist.models import Playlist, Track
from playlist_player.playlist.storage import PlaylistStore


class FakeBackend:
    """
    Audio backend stand-in recording every call

    Paths in ``fail_paths`` raise PlaybackError from play(). With ``events``
    given and ``auto_finish`` set, every started track immediately reports
    completion, so a session runs to its end without real audio. ``durations``
    maps paths to the length play() reports.
    """

    def __init__(self, events=None, fail_paths=(), auto_finish=False, durations=None):
        self.events = events
        self.fail_paths = set(fail_paths)
        self.durations = durations or {}
        self.auto_finish = auto_finish
        self.played = []
        self.volumes = []
        self.calls = []
        self.token = None
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def play(self, path, volume, token):
        self.calls.append('play')
        if path in self.fail_paths:
            raise PlaybackError(f"Unrecognized format: {path}", details={'path': path})
        self.played.append((path, volume))
        self.token = token
        if self.auto_finish and self.events is not None:
            self.events.put(TrackFinished(token))
        return self.durations.get(path)

    def set_volume(self, volume):
        self.calls.append('set_volume')
        self.volumes.append(volume)

    def pause(self):
        self.calls.append('pause')

    def resume(self):
        self.calls.append('resume')

    def stop(self):
        self.calls.append('stop')

    def close(self):
        self.closed = True

    @property
    def played_paths(self):
        return [path for path, _ in self.played]


class RecordingDisplay:
    """Session display collecting output lines"""

    def __init__(self):
        self.messages = []
        self.actions = []
        self.errors = []

    def message(self, text):
        self.messages.append(text)

    def action(self, text):
        self.actions.append(text)

    def error(self, text):
        self.errors.append(text)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def store(temp_dir):
    """Playlist store in a fresh directory"""
    return PlaylistStore(temp_dir / "playlists")


@pytest.fixture
def music_dir(temp_dir):
    """
    Directory with dummy audio files

    Contains a.mp3, b.mp3, c.wav, a text file that is not audio and a
    sub-directory with an audio file that scans must not descend into.
    """
    directory = temp_dir / "music"
    directory.mkdir()
    for name in ["b.mp3", "a.mp3", "c.wav", "notes.txt"]:
        (directory / name).write_bytes(b"\x00" * 16)
    (directory / "nested").mkdir()
    (directory / "nested" / "d.mp3").write_bytes(b"\x00" * 16)
    return directory


@pytest.fixture
def processor():
    return AudioProcessor(extensions=list(DEFAULT_AUDIO_EXTENSIONS))


@pytest.fixture
def manager(store, processor):
    return PlaylistManager(store, processor=processor)


@pytest.fixture
def playback_config():
    return PlaybackConfig()


@pytest.fixture
def events():
    return queue.Queue()


@pytest.fixture
def backend(events):
    return FakeBackend(events)


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def sample_playlist():
    """Three-track playlist in list order"""
    return Playlist(
        name="road",
        tracks=[Track("a.mp3"), Track("b.mp3", 0.5), Track("c.mp3", 2.0)],
    )
