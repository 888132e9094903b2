"""
Input validation utilities
"""
import math
import re
from typing import Optional, Tuple, Union

# Characters that cannot appear in a playlist name because the name is also a file name
_FORBIDDEN_NAME_CHARS = re.compile(r'[/\\\x00-\x1f]')


def validate_playlist_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a playlist name

    Args:
        name: Name to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not name or not name.strip():
        return False, "Playlist name cannot be empty"

    if name != name.strip():
        return False, "Playlist name cannot start or end with whitespace"

    if name.startswith('.'):
        return False, "Playlist name cannot start with '.'"

    if _FORBIDDEN_NAME_CHARS.search(name):
        return False, "Playlist name cannot contain path separators or control characters"

    if len(name) > 200:
        return False, "Playlist name is too long (maximum 200 characters)"

    return True, None


def validate_amplification(value: Union[int, float]) -> Tuple[bool, Optional[str]]:
    """
    Validate an amplification factor

    Amplification must be a finite, non-negative number. 1.0 leaves the
    volume unchanged and 0.0 mutes.

    Args:
        value: Amplification factor

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False, f"Amplification must be a number, got {value!r}"

    if math.isnan(value) or math.isinf(value):
        return False, f"Amplification must be finite, got {value}"

    if value < 0:
        return False, f"Amplification cannot be negative, got {value}"

    return True, None
