"""
Main CLI interface for playlist-player

This module provides the command-line interface for playing sound files and
managing playlists. It is the primary entry point for user interaction.

The CLI is built using the Click framework and provides commands for:
- Playback (play files, directories or stored playlists with key controls)
- Playlist management (create, add, edit, show, list, remove, delete)
- Configuration (show)

Track positions on the command line are 1-based, as printed by ``show``.
"""

import functools
import queue
import sys

import click

from . import __version__
from .config.settings import get_settings, reload_settings
from .exceptions import InvalidAmplification, PlaylistPlayerError, UsageError
from .playback.backend import SoundDeviceBackend
from .playback.controls import KeyReader, StatusDisplay
from .playback.session import PlaybackSession, SessionState
from .playlist.manager import SourceMode, get_playlist_manager
from .playlist.models import RandomMode
from .utils.helpers import format_duration, format_volume
from .utils.logger import configure_from_settings, get_current_log_file, get_logger
from .utils.validation import validate_amplification


# Initialize logging system from configuration settings
configure_from_settings()
logger = get_logger(__name__)

RANDOM_CHOICES = [mode.value for mode in RandomMode]


def print_banner():
    """Print application banner to console"""
    banner = """
╔═══════════════════════════════════════════════╗
║                playlist-player                ║
║                                               ║
║   Play sound files and manage playlists       ║
║                                               ║
╚═══════════════════════════════════════════════╝
    """
    click.echo(click.style(banner, fg='green', bold=True))


def handle_error(func):
    """
    Decorator to handle CLI errors gracefully

    Wraps CLI command functions so every command reports failures the same
    way: a red message on stderr, a log entry, and an exit code chosen by
    the error family (2 for usage errors, 1 for everything else, 130 when
    interrupted).

    Args:
        func: The CLI command function to wrap

    Returns:
        Wrapped function with error handling
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo(click.style("\n\nOperation cancelled by user", fg='yellow'))
            sys.exit(130)  # Standard exit code for SIGINT
        except PlaylistPlayerError as e:
            logger.error(f"Command failed: {e}")
            if e.details:
                logger.debug(f"Error details: {e.details}")
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.error(f"Command failed: {e}", exc_info=True)
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)
    return wrapper


def check_amplification(value):
    """Raise InvalidAmplification for an unusable --amplify value"""
    if value is None:
        return None
    is_valid, error_msg = validate_amplification(value)
    if not is_valid:
        raise InvalidAmplification(error_msg, details={'amplification': value})
    return value


def position_to_index(position: int) -> int:
    """Convert a 1-based track position from the command line to a list index"""
    return position - 1


# Main CLI group - root command that all subcommands attach to
@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--config', type=click.Path(), help='Path to config file')
@click.pass_context
def cli(ctx, version, verbose, config):
    """
    playlist-player - Play sound files and manage playlists

    Plays single files, directories or stored playlists from the terminal
    with keyboard controls, and keeps named playlists with per-track volume.
    """
    ctx.ensure_object(dict)

    if version:
        click.echo(f"playlist-player v{__version__}")
        return

    if config:
        reload_settings(config)
        configure_from_settings(verbose)
        logger.debug(f"Loaded config: {config}")

    if verbose:
        ctx.obj['verbose'] = True
        configure_from_settings(verbose=True)
        logger.info("Verbose mode enabled")

    if ctx.invoked_subcommand is None:
        print_banner()
        click.echo(ctx.get_help())


@cli.command()
@click.argument('target')
@click.option('--files', '-f', 'files_mode', is_flag=True,
              help='TARGET is a sound file or a directory (default)')
@click.option('--playlist', '-p', 'playlist_mode', is_flag=True,
              help='TARGET is the name of a stored playlist')
@click.option('--amplify', type=float, help='Amplify every track for this session')
@click.option('--repeat', is_flag=True, help='Start over after the last track')
@click.option('--no-controls', is_flag=True, help='Disable keyboard controls')
@handle_error
def play(target, files_mode, playlist_mode, amplify, repeat, no_controls):
    """
    Play a sound file, a directory or a playlist

    Plays TARGET track by track until the end (or forever with --repeat).
    Press h during playback for the key controls.
    """
    if files_mode and playlist_mode:
        raise UsageError(
            "--files and --playlist cannot be used together",
            details={'target': target}
        )
    check_amplification(amplify)
    settings = get_settings()
    source_mode = SourceMode.PLAYLIST if playlist_mode else SourceMode.FILES

    manager = get_playlist_manager()
    playlist = manager.resolve_source(target, source_mode)
    store = manager.store if source_mode is SourceMode.PLAYLIST else None

    interactive = settings.playback.controls and not no_controls and sys.stdin.isatty()
    display = StatusDisplay() if interactive else None

    events = queue.Queue()
    with SoundDeviceBackend(
        events,
        processor=manager.processor,
        block_size=settings.audio.block_size,
        device=settings.audio.device
    ) as backend:
        session = PlaybackSession(
            playlist,
            backend,
            events,
            global_amplify=amplify,
            repeat=repeat,
            store=store,
            config=settings.playback,
            display=display
        )
        if interactive:
            with KeyReader(events, poll_interval=settings.playback.key_poll_interval):
                state = session.run(poll_interval=settings.playback.key_poll_interval)
        else:
            state = session.run(poll_interval=settings.playback.key_poll_interval)

    logger.debug(f"Playback ended: {state.value}")
    if state is SessionState.FINISHED:
        click.echo(click.style("Playback finished", fg='green'))


@cli.command()
@click.argument('name')
@click.option('--file', '-f', 'files', multiple=True, type=click.Path(),
              help='Sound file or directory to add (repeatable)')
@click.option('--amplify', type=float, help='Playlist-wide amplification')
@click.option('--random', 'random_mode', type=click.Choice(RANDOM_CHOICES), help='Playback order')
@handle_error
def create(name, files, amplify, random_mode):
    """Create a new playlist"""
    check_amplification(amplify)
    manager = get_playlist_manager()
    manager.create(
        name,
        initial_files=files,
        amplification=amplify,
        random_mode=RandomMode(random_mode) if random_mode else None
    )


@cli.command()
@click.argument('file', type=click.Path())
@click.argument('playlist')
@click.option('--amplify', type=float, default=1.0, show_default=True,
              help='Amplification of the added tracks')
@click.option('--validate', is_flag=True, help='Reject files that are not recognized as audio')
@handle_error
def add(file, playlist, amplify, validate):
    """Add a sound file or a directory to a playlist"""
    check_amplification(amplify)
    manager = get_playlist_manager()
    manager.add(playlist, file, amplification=amplify, validate=validate)


@cli.command()
@click.argument('playlist')
@click.option('--file', '-f', 'file_path', type=click.Path(), help='Sound file or directory to add')
@click.option('--amplify', type=float, help='Playlist-wide amplification')
@click.option('--random', 'random_mode', type=click.Choice(RANDOM_CHOICES), help='Playback order')
@click.option('--validate', is_flag=True, help='Remove missing or invalid sound files')
@click.option('--track-amplify', nargs=2, type=(int, float), default=None,
              help='Set the amplification of the track at POSITION')
@handle_error
def edit(playlist, file_path, amplify, random_mode, validate, track_amplify):
    """Edit a playlist's settings or tracks"""
    check_amplification(amplify)
    track_amplification = None
    if track_amplify:
        position, value = track_amplify
        check_amplification(value)
        track_amplification = (position_to_index(position), value)

    manager = get_playlist_manager()
    updated = manager.edit(
        playlist,
        file_path=file_path,
        amplification=amplify,
        random_mode=RandomMode(random_mode) if random_mode else None,
        validate=validate,
        track_amplification=track_amplification
    )
    click.echo(f"Updated playlist '{updated.name}'")
    click.echo(str(updated))


@cli.command()
@click.argument('playlist')
@handle_error
def show(playlist):
    """Show the settings and tracks of a playlist"""
    manager = get_playlist_manager()
    loaded = manager.load(playlist)

    click.echo(click.style(loaded.name, bold=True))
    click.echo(f"   Amplification: {format_volume(loaded.settings.amplification)}")
    click.echo(f"   Random: {loaded.settings.random.value}")
    click.echo(f"   Tracks: {len(loaded)}")
    for position, track in enumerate(loaded, start=1):
        line = f"   {position:3d}. {track.path} ({format_volume(track.amplification)})"
        duration = manager.processor.probe_duration(track.path)
        if duration is not None:
            line += f" [{format_duration(duration)}]"
        click.echo(line)


@cli.command(name='list')
@handle_error
def list_playlists():
    """List stored playlists"""
    manager = get_playlist_manager()
    names = manager.list_playlists()
    if not names:
        click.echo("No playlists found")
        return
    for name in names:
        click.echo(name)


@cli.command()
@click.argument('playlist')
@click.argument('position', type=int)
@handle_error
def remove(playlist, position):
    """Remove the track at POSITION from a playlist"""
    manager = get_playlist_manager()
    manager.remove(playlist, position_to_index(position))


@cli.command()
@click.argument('playlist')
@handle_error
def delete(playlist):
    """Delete a playlist"""
    manager = get_playlist_manager()
    manager.delete(playlist)


@cli.group()
def config():
    """Configuration management"""
    pass


@config.command(name='show')
@handle_error
def config_show():
    """
    Show current configuration

    Displays the active settings after config files and environment
    variables have been applied.
    """
    settings = get_settings()

    click.echo("Current Configuration:\n")

    click.echo("Storage:")
    click.echo(f"   Playlist directory: {settings.get_playlist_directory()}")

    click.echo("\nPlayback:")
    click.echo(f"   Volume step: {settings.playback.volume_step}")
    click.echo(f"   Volume range: {settings.playback.min_volume} - {settings.playback.max_volume}")
    click.echo(f"   Save on exit: {settings.playback.save_on_exit}")
    click.echo(f"   Key controls: {settings.playback.controls}")

    click.echo("\nAudio:")
    click.echo(f"   Block size: {settings.audio.block_size}")
    click.echo(f"   Device: {settings.audio.device or 'default'}")
    click.echo(f"   Extensions: {', '.join(settings.audio.extensions)}")

    click.echo("\nLogging:")
    click.echo(f"   Level: {settings.logging.level}")
    log_file = get_current_log_file()
    click.echo(f"   File: {log_file or 'disabled'}")


if __name__ == '__main__':
    cli()
