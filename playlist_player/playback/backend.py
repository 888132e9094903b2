"""
Audio output backend

``SoundDeviceBackend`` decodes a track with the audio processor and streams
it to the default output device through a PortAudio callback stream. Volume,
pause and stop act on the next rendered block, so control latency is one
block (``audio.block_size`` frames, about 46 ms at 44.1 kHz by default).

The backend reports the end of a track by posting ``TrackFinished`` to the
session's event queue from the audio thread; it never calls into the session
directly.

Use it as a context manager so the output stream is closed on every exit path:

    with SoundDeviceBackend(events) as backend:
        session = PlaybackSession(playlist, backend, events)
        session.run()
"""

import queue
import threading
from typing import Optional, Protocol

import numpy as np

try:
    import sounddevice as sd
except OSError as e:
    # PortAudio shared library missing; reported when a stream is opened
    sd = None
    _sounddevice_import_error = e

from ..audio.processor import AudioProcessor, DecodedAudio, get_audio_processor
from ..exceptions import AudioDeviceError
from ..utils.logger import get_logger
from .events import TrackFailed, TrackFinished


class AudioBackend(Protocol):
    """Interface the playback session drives"""

    def play(self, path: str, volume: float, token: int) -> Optional[float]:
        """
        Stop current playback and start ``path``

        Returns the track duration in seconds when known. Raises PlaybackError
        if the file cannot be opened.
        """
        ...

    def set_volume(self, volume: float) -> None:
        ...

    def pause(self) -> None:
        ...

    def resume(self) -> None:
        ...

    def stop(self) -> None:
        ...

    def close(self) -> None:
        ...


class SoundDeviceBackend:
    """Plays decoded tracks through a sounddevice output stream"""

    def __init__(
        self,
        events: queue.Queue,
        processor: Optional[AudioProcessor] = None,
        block_size: int = 2048,
        device: Optional[str] = None
    ):
        """
        Initialize the backend

        Args:
            events: Queue receiving TrackFinished / TrackFailed events
            processor: Audio processor used for decoding
            block_size: Frames rendered per callback
            device: Output device name or index, None for the default device
        """
        self.events = events
        self.processor = processor or get_audio_processor()
        self.block_size = block_size
        self.device = device
        self.logger = get_logger(__name__)

        self._lock = threading.Lock()
        self._stream = None
        self._audio: Optional[DecodedAudio] = None
        self._position = 0
        self._volume = 1.0
        self._paused = False
        self._token: Optional[int] = None

    def __enter__(self) -> 'SoundDeviceBackend':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def play(self, path: str, volume: float, token: int) -> Optional[float]:
        """
        Start playing a track, replacing any current one

        Args:
            path: Audio file to play
            volume: Effective amplification for this track
            token: Identifier echoed in the completion event

        Returns:
            Duration of the decoded track in seconds

        Raises:
            PlaybackError: If the file cannot be opened or decoded
            AudioDeviceError: If the output device cannot be opened
        """
        self.stop()
        audio = self.processor.load_samples(path)

        with self._lock:
            self._audio = audio
            self._position = 0
            self._volume = volume
            self._paused = False
            self._token = token

        if sd is None:
            raise AudioDeviceError(
                f"Audio output unavailable: {_sounddevice_import_error}",
                details={'original_error': str(_sounddevice_import_error)}
            )

        try:
            stream = sd.OutputStream(
                samplerate=audio.sample_rate,
                channels=audio.channels,
                dtype='float32',
                blocksize=self.block_size,
                device=self.device,
                callback=self._callback,
            )
            stream.start()
        except sd.PortAudioError as e:
            raise AudioDeviceError(
                f"Unable to start audio stream: {e}",
                details={'original_error': str(e)}
            ) from e

        self._stream = stream
        self.logger.debug(f"Streaming {path} at volume {volume:.3f} (token {token})")
        return audio.duration

    def _callback(self, outdata, frames, time_info, status):
        if status:
            self.logger.debug(f"Audio stream status: {status}")

        with self._lock:
            if self._paused or self._audio is None:
                outdata.fill(0)
                return

            token = self._token
            try:
                chunk = self._audio.samples[self._position:self._position + frames]
                count = chunk.shape[0]
                outdata[:count] = np.clip(chunk * self._volume, -1.0, 1.0)
                outdata[count:] = 0
            except Exception as e:
                # An exception escaping the callback would end the stream without any event
                self._audio = None
                self.events.put(TrackFailed(token, f"Audio stream error: {e}"))
                raise sd.CallbackAbort from e

            self._position += count
            if count < frames:
                self._audio = None
                self.events.put(TrackFinished(token))
                raise sd.CallbackStop

    def set_volume(self, volume: float) -> None:
        with self._lock:
            self._volume = volume

    def pause(self) -> None:
        with self._lock:
            self._paused = True

    def resume(self) -> None:
        with self._lock:
            self._paused = False

    def stop(self) -> None:
        """Stop playback immediately and release the output stream"""
        stream, self._stream = self._stream, None
        with self._lock:
            self._audio = None
            self._paused = False
        if stream is None:
            return
        try:
            stream.abort()
            stream.close()
        except sd.PortAudioError as e:
            self.logger.warning(f"Error closing audio stream: {e}")

    def close(self) -> None:
        self.stop()
