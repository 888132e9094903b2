"""
Exception classes for playlist-player.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message and an optional ``details``
dictionary for logging, and belongs to one of a few families that decide
how the command line reacts to it.

Exception Hierarchy:
    PlaylistPlayerError (base)
        UsageError - Malformed invocation or invalid input values (exit code 2)
            InvalidName - Playlist name malformed or already taken
            InvalidAmplification - Negative, NaN or infinite amplification
            DuplicateTrack - Track path already present in the playlist
            InvalidTrack - File rejected by audio validation
        NotFoundError - Referenced file or playlist does not exist
            FileNotFound - Audio file or directory missing
            PlaylistNotFound - No stored record for the playlist name
        CorruptData - Stored playlist record cannot be parsed
        PersistenceError - Writing a playlist record failed
        EmptyPlaylist - Nothing to play
        PlaybackError - A single track could not be opened or decoded
        AudioDeviceError - The audio output device is unavailable
"""


class PlaylistPlayerError(Exception):
    """
    Base exception for all playlist-player errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every application error with a single
    except clause.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (paths, names).
        exit_code: Process exit code used by the CLI for this error family.
    """

    exit_code = 1

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description shown to the user.
            details: Optional dictionary containing additional context about
                     the error. Common keys include 'path', 'playlist' and
                     'original_error'.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class UsageError(PlaylistPlayerError):
    """
    Raised when a command is invoked with conflicting or invalid input.

    Never retried. The CLI prints the message and exits with code 2,
    matching click's own usage error convention.
    """

    exit_code = 2


class InvalidName(UsageError):
    """
    Raised when a playlist name cannot be used.

    Common causes:
        - A playlist with that name already exists (on create)
        - Empty name, a path separator, or a leading dot
    """
    pass


class InvalidAmplification(UsageError):
    """Raised for an amplification that is negative, NaN or infinite."""
    pass


class DuplicateTrack(UsageError):
    """
    Raised when adding a path that the playlist already contains.

    Duplicates are detected by exact equality of the stored path string.
    """
    pass


class NotFoundError(PlaylistPlayerError):
    """
    Raised when a referenced file or playlist does not exist.

    Aborts the requested operation only.
    """
    pass


class FileNotFound(NotFoundError):
    """Raised when an audio file or directory path does not exist."""
    pass


class PlaylistNotFound(NotFoundError):
    """Raised when no stored record exists for a playlist name."""
    pass


class CorruptData(PlaylistPlayerError):
    """
    Raised when a stored playlist record is unreadable.

    The record is left untouched. No automatic repair is attempted.

    Example:
        raise CorruptData(
            "Playlist 'road' is corrupted: invalid JSON",
            details={'path': '/home/me/.playlist-player/playlists/road.json'}
        )
    """
    pass


class PersistenceError(PlaylistPlayerError):
    """
    Raised when a playlist record cannot be written.

    Saves go through a temporary file, so the previous record on disk
    is still intact when this is raised.
    """
    pass


class EmptyPlaylist(PlaylistPlayerError):
    """Raised when a playback session is started without any tracks."""
    pass


class PlaybackError(PlaylistPlayerError):
    """
    Raised when a single track cannot be opened or decoded.

    This is a NON-CRITICAL error: the playback session logs it and
    continues with the next track.
    """
    pass


class AudioDeviceError(PlaylistPlayerError):
    """Raised when the audio output device cannot be opened."""
    pass


class InvalidTrack(UsageError):
    """Raised when a file added with validation is not a recognized audio file."""
    pass
