"""
Utility functions and helpers for playlist-player
Common functions for file handling, formatting and safe file writes
"""

import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Union


def format_duration(seconds: Union[int, float]) -> str:
    """
    Format duration in seconds to human-readable string

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    if seconds < 0:
        return "0:00"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    else:
        return f"{minutes}:{secs:02d}"


def format_volume(amplification: float) -> str:
    """Format an amplification factor as a percentage, e.g. 0.9 -> '90%'"""
    return f"{amplification * 100:.0f}%"


def display_name(path: Union[str, Path]) -> str:
    """
    Short name for a track path

    Returns the file name when there is one, otherwise the full path.
    """
    name = Path(path).name
    return name if name else str(path)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure directory exists, create if necessary

    Args:
        path: Directory path

    Returns:
        Path object
    """
    path_obj = Path(path)
    path_obj.mkdir(parents=True, exist_ok=True)
    return path_obj


def has_audio_extension(path: Union[str, Path], extensions: Iterable[str]) -> bool:
    """
    Check whether a path carries one of the given audio file extensions

    The comparison is case-insensitive, so ``SONG.MP3`` matches ``.mp3``.
    """
    suffix = Path(path).suffix.lower()
    return suffix in {ext.lower() for ext in extensions}


def list_audio_files(directory: Union[str, Path], extensions: Iterable[str]) -> List[Path]:
    """
    List the audio files directly inside a directory

    Sub-directories are not descended into. The result is sorted
    lexicographically by path so that repeated calls yield the same order.

    Args:
        directory: Directory to scan
        extensions: Accepted file extensions, including the dot

    Returns:
        Sorted list of audio file paths
    """
    extensions = list(extensions)
    files = [
        entry for entry in Path(directory).iterdir()
        if entry.is_file() and has_audio_extension(entry, extensions)
    ]
    return sorted(files, key=lambda p: str(p))


def atomic_write_text(path: Union[str, Path], content: str, encoding: str = 'utf-8') -> Path:
    """
    Write text to a file atomically

    The content goes to a temporary file in the destination directory, is
    flushed to disk, and then replaces the destination in a single rename.
    A crash or error at any point leaves the previous file untouched.

    Args:
        path: Destination file
        content: Text to write
        encoding: Text encoding

    Returns:
        Path of the written file

    Raises:
        OSError: If the temporary file cannot be written or renamed
    """
    target = Path(path)
    ensure_directory(target.parent)

    fd, temp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
    )
    try:
        with os.fdopen(fd, 'w', encoding=encoding) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_name, target)
    finally:
        # Always clean up the temporary file if the rename did not happen
        if os.path.exists(temp_name):
            os.unlink(temp_name)

    return target

