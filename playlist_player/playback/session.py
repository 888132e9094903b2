"""
Playback session state machine

A ``PlaybackSession`` walks the tracks of one playlist and drives an audio
backend track by track. It owns all mutable playback state (cursor, play
order, pause flag, unsaved changes) and changes it only from the thread that
calls ``run()`` or the transition methods.

States::

    IDLE --start()--> PLAYING --(last track ends)--> FINISHED
                      PLAYING <--pause/resume--> PAUSED
    any state --stop()--> STOPPED

Effective amplification of a track is ``track.amplification * global_amplify``
where ``global_amplify`` is the ``--amplify`` value for this session, or the
playlist's own amplification when none was given. It is never persisted.

Failure semantics: when the backend cannot open or decode a track the session
reports it and moves on to the next track. A session never stops because of
a single bad file.
"""

import queue
import random
from enum import Enum
from typing import List, Optional

from ..config.settings import PlaybackConfig, get_settings
from ..exceptions import EmptyPlaylist, PersistenceError, PlaybackError
from ..playlist.manager import play_order
from ..playlist.models import Playlist, RandomMode, Track
from ..playlist.storage import PlaylistStore
from ..utils.helpers import clamp, format_duration, format_volume
from ..utils.logger import get_logger
from .backend import AudioBackend
from .events import HELP_TEXT, Command, CommandKind, TrackFailed, TrackFinished


class SessionState(Enum):
    """Lifecycle states of a playback session"""
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"
    FINISHED = "finished"


ACTIVE_STATES = (SessionState.PLAYING, SessionState.PAUSED)


def calc_new_volume(volume: float, up: bool, step: float = 0.1,
                    min_volume: float = 0.05, max_volume: float = 3.0) -> float:
    """
    Next amplification for a volume key press

    Up divides by (1 - step), down multiplies by (1 - step), so one press up
    undoes one press down. The result is clamped to [min_volume, max_volume].
    """
    if up:
        volume /= 1.0 - step
    else:
        volume *= 1.0 - step
    return clamp(volume, min_volume, max_volume)


class LogDisplay:
    """Session status output through the application logger"""

    def __init__(self):
        self.logger = get_logger(__name__)

    def message(self, text: str) -> None:
        self.logger.console_info(text)

    def action(self, text: str) -> None:
        self.logger.console_info(text)

    def error(self, text: str) -> None:
        self.logger.console_error(text)


class PlaybackSession:
    """Drives playback of one playlist"""

    def __init__(
        self,
        playlist: Playlist,
        backend: AudioBackend,
        events: Optional[queue.Queue] = None,
        global_amplify: Optional[float] = None,
        repeat: bool = False,
        store: Optional[PlaylistStore] = None,
        autosave: Optional[bool] = None,
        config: Optional[PlaybackConfig] = None,
        display=None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize a session

        Args:
            playlist: Tracks to play; borrowed, changes go to this same object
            backend: Audio backend to drive
            events: Event queue shared with the backend and the key reader
            global_amplify: Session-only amplification, defaults to the
                playlist's amplification
            repeat: Start over instead of finishing after the last track
            store: Store the playlist was loaded from; None in direct file mode
            autosave: Save unsaved changes when the session ends
            config: Volume step and limits, defaults to the configured values
            display: Status output (message/action/error), defaults to the logger
            rng: Random source for shuffled orders
        """
        self.playlist = playlist
        self.backend = backend
        self.events = events if events is not None else queue.Queue()
        self.global_amplify = (
            playlist.settings.amplification if global_amplify is None else global_amplify
        )
        self.repeat = repeat
        self.store = store
        self.config = config or get_settings().playback
        self.autosave = self.config.save_on_exit if autosave is None else autosave
        self.display = display or LogDisplay()
        self.rng = rng or random.Random()
        self.logger = get_logger(__name__)

        self.state = SessionState.IDLE
        self.order: List[int] = []
        self.cursor = 0
        self.dirty = False
        self._token = 0

    # -- queries ---------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.state in ACTIVE_STATES

    @property
    def current_index(self) -> Optional[int]:
        """Playlist index of the current track"""
        if 0 <= self.cursor < len(self.order):
            return self.order[self.cursor]
        return None

    @property
    def current_track(self) -> Optional[Track]:
        index = self.current_index
        return self.playlist.track(index) if index is not None else None

    @property
    def token(self) -> int:
        """Token of the most recent backend playback"""
        return self._token

    def effective_amplification(self, track: Optional[Track] = None) -> float:
        """Amplification handed to the backend for ``track`` (default: current track)"""
        track = track or self.current_track
        if track is None:
            return 0.0
        return track.amplification * self.global_amplify

    # -- transitions -----------------------------------------------------

    def _new_pass(self) -> List[int]:
        if self.repeat and self.playlist.settings.random is RandomMode.ON:
            return [self.rng.randrange(len(self.playlist))]
        return play_order(self.playlist, self.rng)

    def start(self) -> None:
        """
        Begin playback with the first track

        Raises:
            EmptyPlaylist: If there is nothing to play
        """
        if len(self.playlist) == 0:
            raise EmptyPlaylist(
                f"Playlist is empty: {self.playlist.name}",
                details={'playlist': self.playlist.name}
            )
        self.order = self._new_pass()
        self.cursor = 0
        self.state = SessionState.PLAYING
        self.logger.debug(f"Session started: {self.playlist.name} ({len(self.playlist)} tracks)")
        self._play_current()

    def _move_next(self) -> bool:
        """Move the cursor forward; False once the session has finished"""
        if self.cursor + 1 < len(self.order):
            self.cursor += 1
            return True
        if self.repeat and len(self.playlist) > 0:
            self.order = self._new_pass()
            self.cursor = 0
            return True
        self._finish()
        return False

    def _finish(self) -> None:
        self.backend.stop()
        self.state = SessionState.FINISHED
        self.logger.debug(f"Session finished: {self.playlist.name}")

    def _play_current(self) -> None:
        """
        Start the track at the cursor, skipping over tracks that fail to open
        """
        failed = set()
        while self.is_active:
            index = self.current_index
            track = self.current_track
            self._token += 1
            try:
                duration = self.backend.play(track.path, self.effective_amplification(track), self._token)
            except PlaybackError as e:
                self.logger.warning(f"Skipping {track.path}: {e}")
                self.display.error(f"Unable to play {track}: {e}")
                failed.add(index)
                if self.repeat and len(failed) >= len(self.playlist):
                    # Every distinct track failed, repeating would never play anything
                    self.display.error("No playable tracks, stopping")
                    self._finish()
                    return
                if not self._move_next():
                    return
                continue

            self.state = SessionState.PLAYING
            if duration:
                self.display.message(f"Playing {track} ({format_duration(duration)})")
            else:
                self.display.message(f"Playing {track}")
            return

    def advance(self) -> None:
        """Current track completed: play the next one or finish"""
        if not self.is_active:
            return
        if self._move_next():
            self.state = SessionState.PLAYING
            self._play_current()

    def skip(self) -> None:
        """Abandon the current track and advance"""
        if not self.is_active:
            return
        self.backend.stop()
        self.advance()

    def back(self) -> None:
        """Restart the previous track, or the first track when at the start"""
        if not self.is_active:
            return
        self.backend.stop()
        self.cursor = max(self.cursor - 1, 0)
        self.state = SessionState.PLAYING
        self._play_current()

    def pause(self) -> None:
        if self.state is SessionState.PLAYING:
            self.backend.pause()
            self.state = SessionState.PAUSED
            self.display.action("Pause")

    def resume(self) -> None:
        if self.state is SessionState.PAUSED:
            self.backend.resume()
            self.state = SessionState.PLAYING
            self.display.action("Play")

    def toggle_pause(self) -> None:
        if self.state is SessionState.PAUSED:
            self.resume()
        else:
            self.pause()

    def stop(self) -> None:
        """Halt playback; the session cannot be resumed afterwards"""
        self.backend.stop()
        self.state = SessionState.STOPPED
        self.logger.debug(f"Session stopped: {self.playlist.name}")

    def adjust_volume(self, up: bool) -> Optional[float]:
        """
        Change the current track's own amplification by one volume step

        Returns:
            The new track amplification, None when nothing is playing
        """
        track = self.current_track
        if not self.is_active or track is None:
            return None

        track.amplification = calc_new_volume(
            track.amplification, up,
            step=self.config.volume_step,
            min_volume=self.config.min_volume,
            max_volume=self.config.max_volume,
        )
        self.dirty = True
        self.backend.set_volume(self.effective_amplification(track))
        self.display.action(f"Volume {format_volume(track.amplification)}")
        return track.amplification

    def delete_current(self) -> Optional[Track]:
        """
        Remove the current track from the playlist and continue playback

        The cursor stays at the same position, which now holds the following
        track; past the end it is clamped to the new last track. An emptied
        playlist finishes the session.

        Returns:
            The removed track, None when nothing is playing
        """
        index = self.current_index
        if not self.is_active or index is None:
            return None

        self.backend.stop()
        track = self.playlist.remove_track(index)
        self.dirty = True
        self.display.action(f"Deleted {track}")
        self.logger.info(f"Deleted {track.path} from {self.playlist.name}")

        # Remove the entry and shift later indices down
        self.order = [i if i < index else i - 1 for i in self.order if i != index]

        if len(self.playlist) == 0:
            self._finish()
            return track
        if not self.order:
            self.order = self._new_pass()
            self.cursor = 0
        else:
            self.cursor = min(self.cursor, len(self.order) - 1)

        self.state = SessionState.PLAYING
        self._play_current()
        return track

    def save(self) -> bool:
        """
        Write the playlist back to the store it was loaded from

        Returns:
            True if saved, False in direct file mode or when the write failed
        """
        if self.store is None:
            self.logger.warning("Save requested in direct play mode")
            self.display.error("Unable to save: Direct play mode.")
            return False
        try:
            path = self.store.save(self.playlist)
        except PersistenceError as e:
            self.logger.error(f"Save failed: {e}")
            self.display.error(str(e))
            return False
        self.dirty = False
        self.display.action(f"Successfully saved to {path}")
        return True

    # -- event loop ------------------------------------------------------

    def handle(self, event) -> None:
        """Apply one event from the queue"""
        if isinstance(event, TrackFinished):
            if event.token == self._token:
                self.advance()
            else:
                self.logger.debug(f"Ignoring stale completion (token {event.token})")
        elif isinstance(event, TrackFailed):
            if event.token == self._token and self.is_active:
                track = self.current_track
                self.logger.warning(f"Playback of {track.path if track else '?'} failed: {event.error}")
                self.display.error(event.error)
                self.advance()
        elif isinstance(event, Command):
            self._handle_command(event.kind)
        else:
            self.logger.debug(f"Ignoring unknown event: {event!r}")

    def _handle_command(self, kind: CommandKind) -> None:
        if kind is CommandKind.QUIT:
            self.stop()
        elif kind is CommandKind.HELP:
            self.display.action(HELP_TEXT)
        elif kind is CommandKind.TOGGLE_PAUSE:
            self.toggle_pause()
        elif kind is CommandKind.NEXT:
            self.skip()
        elif kind is CommandKind.BACK:
            self.back()
        elif kind is CommandKind.VOLUME_UP:
            self.adjust_volume(up=True)
        elif kind is CommandKind.VOLUME_DOWN:
            self.adjust_volume(up=False)
        elif kind is CommandKind.DELETE:
            self.delete_current()
        elif kind is CommandKind.SAVE:
            self.save()

    def run(self, poll_interval: float = 0.1) -> SessionState:
        """
        Play until the session finishes or is stopped

        Starts the session if it is still idle, then processes queued events
        in arrival order. Unsaved changes are written back on the way out
        when autosave is enabled, including on Ctrl+C.

        Returns:
            The final state (FINISHED or STOPPED)
        """
        if self.state is SessionState.IDLE:
            self.start()
        try:
            while self.is_active:
                try:
                    event = self.events.get(timeout=poll_interval)
                except queue.Empty:
                    continue
                self.handle(event)
        except KeyboardInterrupt:
            self.stop()
            raise
        finally:
            self.backend.stop()
            if self.autosave and self.dirty and self.store is not None:
                self.save()
        return self.state
