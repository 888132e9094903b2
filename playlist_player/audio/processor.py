"""
Audio decoding, amplification and file validation

This module is the only place that touches audio file contents. It provides:

1. **DecodedAudio**: Float32 sample frames ready for the output device
2. **AudioProcessor**: Decoding through pydub, quick validity probing and
   duration lookup through mutagen, and validation with issue reporting

Amplification is a linear multiplier on sample values. ``amplification_to_gain_db``
converts it to decibels for display and logging.

Core Dependencies:
- pydub: Decodes every format ffmpeg understands into raw samples
- numpy: Sample arrays and scaling
- mutagen: Header-level probing that does not need a full decode

Usage Patterns:

    processor = get_audio_processor()
    audio = processor.load_samples("song.mp3")
    is_valid, issues = processor.validate_audio_file("song.mp3")
"""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

import mutagen
import numpy as np
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from ..config.settings import get_settings
from ..exceptions import PlaybackError
from ..utils.helpers import has_audio_extension
from ..utils.logger import get_logger


def amplification_to_gain_db(amplification: float) -> float:
    """
    Convert a linear amplification factor to a gain in decibels

    Args:
        amplification: Linear multiplier, 1.0 is unchanged

    Returns:
        Gain in dB, ``-inf`` for a muted track
    """
    if amplification <= 0:
        return float('-inf')
    return 20.0 * math.log10(amplification)


@dataclass
class DecodedAudio:
    """
    Decoded audio ready for playback

    Attributes:
        samples: Array of shape (frames, channels), float32 in [-1.0, 1.0]
        sample_rate: Frames per second
        channels: Channel count
    """
    samples: np.ndarray
    sample_rate: int
    channels: int

    @property
    def frames(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        """Duration in seconds"""
        return self.frames / self.sample_rate if self.sample_rate else 0.0


class AudioProcessor:
    """
    Audio file decoding and validation

    Decoding goes through pydub (and therefore ffmpeg for compressed formats).
    Validity checks use mutagen, which only reads headers and is fast enough
    to run over a whole playlist.
    """

    def __init__(self, extensions: Optional[List[str]] = None):
        """
        Initialize the processor

        Args:
            extensions: Accepted audio file extensions, defaults to the configured list
        """
        self.logger = get_logger(__name__)
        self.extensions = list(extensions) if extensions is not None else list(get_settings().audio.extensions)

    def is_audio_path(self, path: Union[str, Path]) -> bool:
        """Whether the path has an accepted audio extension"""
        return has_audio_extension(path, self.extensions)

    def load_samples(self, path: Union[str, Path]) -> DecodedAudio:
        """
        Decode an audio file into float32 sample frames

        Args:
            path: Audio file to decode

        Returns:
            DecodedAudio with samples scaled to [-1.0, 1.0]

        Raises:
            PlaybackError: If the file is missing or cannot be decoded
        """
        path = Path(path)
        if not path.is_file():
            raise PlaybackError(f"Unable to open audio file: {path}", details={'path': str(path)})

        try:
            segment = AudioSegment.from_file(str(path))
        except CouldntDecodeError as e:
            raise PlaybackError(
                f"Unrecognized format: {path.name}",
                details={'path': str(path), 'original_error': str(e)}
            ) from e
        except (OSError, IndexError) as e:
            # pydub raises IndexError when ffmpeg reports no audio stream
            raise PlaybackError(
                f"Unable to decode {path.name}: {e}",
                details={'path': str(path), 'original_error': str(e)}
            ) from e

        channels = segment.channels
        samples = np.array(segment.get_array_of_samples(), dtype=np.float32)
        samples = samples.reshape((-1, channels))
        # Scale integer PCM to [-1.0, 1.0]
        samples /= float(1 << (8 * segment.sample_width - 1))

        self.logger.debug(
            f"Decoded {path.name}: {samples.shape[0]} frames, "
            f"{segment.frame_rate} Hz, {channels} channel(s)"
        )
        return DecodedAudio(samples=samples, sample_rate=segment.frame_rate, channels=channels)

    def is_audio_file(self, path: Union[str, Path]) -> bool:
        """
        Quick check that a file exists and carries a recognizable audio header

        Returns:
            True if mutagen recognizes the file as audio
        """
        path = Path(path)
        if not path.is_file():
            return False
        try:
            return mutagen.File(str(path)) is not None
        except (mutagen.MutagenError, OSError) as e:
            self.logger.debug(f"Audio probe failed for {path}: {e}")
            return False

    def probe_duration(self, path: Union[str, Path]) -> Optional[float]:
        """
        Duration of an audio file in seconds from its header

        Returns:
            Duration in seconds, None if unknown
        """
        path = Path(path)
        if not path.is_file():
            return None
        try:
            audio = mutagen.File(str(path))
        except (mutagen.MutagenError, OSError):
            return None
        if audio is None or getattr(audio, 'info', None) is None:
            return None
        length = getattr(audio.info, 'length', None)
        return float(length) if length else None

    def validate_audio_file(self, path: Union[str, Path]) -> Tuple[bool, List[str]]:
        """
        Validate that a file can be used as a playlist track

        Args:
            path: Audio file to validate

        Returns:
            Tuple of (is_valid, list_of_issues)
        """
        issues = []
        path = Path(path)

        if not path.exists():
            issues.append("File does not exist")
            return False, issues

        if not path.is_file():
            issues.append("Not a regular file")
            return False, issues

        if path.stat().st_size == 0:
            issues.append("File is empty")
            return False, issues

        if not self.is_audio_file(path):
            issues.append("Not a recognized audio file")
            return False, issues

        if not self.is_audio_path(path):
            # Playable, but directory scans would skip it
            issues.append(f"Unusual audio file extension: {path.suffix or '(none)'}")

        return True, issues


_processor_instance: Optional[AudioProcessor] = None


def get_audio_processor() -> AudioProcessor:
    """
    Factory function to retrieve the global audio processor instance

    Returns:
        Global AudioProcessor instance with current application configuration
    """
    global _processor_instance
    if not _processor_instance:
        _processor_instance = AudioProcessor()
    return _processor_instance
