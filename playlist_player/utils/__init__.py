"""
Utilities package
Common helpers, logging, and validation functions
"""

from .logger import (
    get_logger,
    configure_from_settings,
    setup_logging,
    OperationLogger,
    create_operation_logger,
    get_current_log_file
)
from .helpers import (
    format_duration,
    format_volume,
    display_name,
    clamp,
    ensure_directory,
    has_audio_extension,
    list_audio_files,
    atomic_write_text
)
from .validation import (
    validate_playlist_name,
    validate_amplification
)

__all__ = [
    # Logger exports
    'get_logger',
    'configure_from_settings',
    'setup_logging',
    'OperationLogger',
    'create_operation_logger',
    'get_current_log_file',

    # Helper exports
    'format_duration',
    'format_volume',
    'display_name',
    'clamp',
    'ensure_directory',
    'has_audio_extension',
    'list_audio_files',
    'atomic_write_text',

    # Validation exports
    'validate_playlist_name',
    'validate_amplification',
]
