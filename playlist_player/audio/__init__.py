"""
Audio package for decoding and validating sound files

Everything that reads audio file contents lives here, so the playlist and
playback packages only deal with paths and amplification factors.

Key Components:
- `AudioProcessor`: pydub decoding, mutagen probing and file validation
- `get_audio_processor()`: Factory function implementing singleton pattern
- `DecodedAudio`: Float32 sample frames with sample rate and channel count
- `amplification_to_gain_db()`: Linear amplification to decibel conversion
"""

from .processor import (
    get_audio_processor,
    AudioProcessor,
    DecodedAudio,
    amplification_to_gain_db
)

__all__ = [
    'get_audio_processor',
    'AudioProcessor',
    'DecodedAudio',
    'amplification_to_gain_db'
]
