"""
Keyboard controls and status display for interactive playback

``KeyReader`` runs on a daemon thread, reads single keystrokes with blessed
and posts ``Command`` events to the session queue. ``StatusDisplay`` prints
session status: "Playing ..." lines persist, action messages such as "Pause"
or "Volume 90%" overwrite each other on the current line.
"""

import queue
import sys
import threading
from typing import Optional

from blessed import Terminal
from colorama import Fore, Style

from ..utils.logger import get_logger
from .events import Command, CommandKind


# Keys matched by blessed key name
NAMED_KEYS = {
    "KEY_UP": CommandKind.VOLUME_UP,
    "KEY_DOWN": CommandKind.VOLUME_DOWN,
    "KEY_RIGHT": CommandKind.NEXT,
    "KEY_LEFT": CommandKind.BACK,
}

# Keys matched by character
CHAR_KEYS = {
    "q": CommandKind.QUIT,
    "h": CommandKind.HELP,
    " ": CommandKind.TOGGLE_PAUSE,
    "d": CommandKind.DELETE,
    "s": CommandKind.SAVE,
}


def key_to_command(key) -> Optional[Command]:
    """
    Map a keystroke to a session command

    Args:
        key: blessed Keystroke, or any string with an optional ``name``

    Returns:
        The command, or None for unbound keys
    """
    name = getattr(key, "name", None)
    if name in NAMED_KEYS:
        return Command(NAMED_KEYS[name])
    kind = CHAR_KEYS.get(str(key))
    return Command(kind) if kind is not None else None


class KeyReader:
    """Background thread turning keystrokes into session commands"""

    def __init__(self, events: queue.Queue, terminal: Optional[Terminal] = None,
                 poll_interval: float = 0.1):
        self.events = events
        self.terminal = terminal or Terminal()
        self.poll_interval = poll_interval
        self.logger = get_logger(__name__)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> 'KeyReader':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name="key-reader", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

    def _run(self) -> None:
        with self.terminal.cbreak():
            while not self._stop.is_set():
                key = self.terminal.inkey(timeout=self.poll_interval)
                if not key:
                    continue
                command = key_to_command(key)
                if command is None:
                    self.logger.debug(f"Unbound key: {key!r}")
                    continue
                self.events.put(command)
                if command.kind is CommandKind.QUIT:
                    return


class StatusDisplay:
    """Terminal output for a playback session"""

    def __init__(self, terminal: Optional[Terminal] = None, stream=None):
        self.terminal = terminal or Terminal()
        self.stream = stream or sys.stdout
        self._transient = False

    def _clear_transient(self) -> None:
        if self._transient:
            self.stream.write(self.terminal.move_x(0) + self.terminal.clear_eol)
            self._transient = False

    def message(self, text: str) -> None:
        """Print a line that stays on screen"""
        self._clear_transient()
        self.stream.write(text + "\n")
        self.stream.flush()

    def action(self, text: str) -> None:
        """Print a message replaced by the next one"""
        self._clear_transient()
        self.stream.write(text)
        self.stream.flush()
        self._transient = True

    def error(self, text: str) -> None:
        self._clear_transient()
        self.stream.write(f"{Fore.RED}{text}{Style.RESET_ALL}\n")
        self.stream.flush()
