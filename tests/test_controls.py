# tests/test_controls.py
"""Test keyboard controls and status display"""

import io
import queue
import pytest
from contextlib import nullcontext
from unittest.mock import Mock

from playlist_player.playback.controls import KeyReader, StatusDisplay, key_to_command
from playlist_player.playback.events import Command, CommandKind


class Key(str):
    """Minimal stand-in for a blessed Keystroke"""

    def __new__(cls, value, name=None):
        key = super().__new__(cls, value)
        key.name = name
        return key


class TestKeyBindings:
    """Test keystroke to command mapping"""

    @pytest.mark.parametrize("key, kind", [
        (Key("q"), CommandKind.QUIT),
        (Key("h"), CommandKind.HELP),
        (Key(" "), CommandKind.TOGGLE_PAUSE),
        (Key("d"), CommandKind.DELETE),
        (Key("s"), CommandKind.SAVE),
        (Key("\x1b[A", "KEY_UP"), CommandKind.VOLUME_UP),
        (Key("\x1b[B", "KEY_DOWN"), CommandKind.VOLUME_DOWN),
        (Key("\x1b[C", "KEY_RIGHT"), CommandKind.NEXT),
        (Key("\x1b[D", "KEY_LEFT"), CommandKind.BACK),
    ])
    def test_bound_keys(self, key, kind):
        assert key_to_command(key) == Command(kind)

    def test_plain_strings(self):
        assert key_to_command("q") == Command(CommandKind.QUIT)

    @pytest.mark.parametrize("key", [Key("x"), Key("Q"), Key("\x1b[H", "KEY_HOME")])
    def test_unbound_keys(self, key):
        assert key_to_command(key) is None


class TestKeyReader:
    """Test the background key reader"""

    def test_posts_commands_until_quit(self):
        terminal = Mock()
        terminal.cbreak.return_value = nullcontext()
        terminal.inkey.side_effect = [Key(""), Key(" "), Key("x"), Key("\x1b[C", "KEY_RIGHT"), Key("q")]
        events = queue.Queue()

        with KeyReader(events, terminal=terminal, poll_interval=0.01) as reader:
            reader._thread.join(timeout=2.0)

        posted = []
        while not events.empty():
            posted.append(events.get_nowait().kind)
        assert posted == [CommandKind.TOGGLE_PAUSE, CommandKind.NEXT, CommandKind.QUIT]
        terminal.cbreak.assert_called_once()


class TestStatusDisplay:
    """Test terminal status output"""

    @pytest.fixture
    def terminal(self):
        terminal = Mock()
        terminal.move_x.return_value = "<x0>"
        terminal.clear_eol = "<eol>"
        return terminal

    def test_messages_persist(self, terminal):
        stream = io.StringIO()
        display = StatusDisplay(terminal, stream)
        display.message("Playing a.mp3")
        display.message("Playing b.mp3")
        assert stream.getvalue() == "Playing a.mp3\nPlaying b.mp3\n"

    def test_actions_overwrite_each_other(self, terminal):
        stream = io.StringIO()
        display = StatusDisplay(terminal, stream)
        display.action("Pause")
        display.action("Volume 90%")
        display.message("Playing b.mp3")
        assert stream.getvalue() == "Pause<x0><eol>Volume 90%<x0><eol>Playing b.mp3\n"

    def test_errors_are_red(self, terminal):
        stream = io.StringIO()
        StatusDisplay(terminal, stream).error("Unable to play c.mp3")
        assert "\x1b[31mUnable to play c.mp3" in stream.getvalue()
