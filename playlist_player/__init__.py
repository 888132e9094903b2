"""
playlist-player: Play sound files and manage playlists from the terminal

playlist-player plays single audio files, directories of audio files and named
playlists, with keyboard controls for pause, skip, back, volume, delete and
save while playing. Playlists are stored as JSON records and remember a volume
(amplification) for every track, so a quiet recording can be boosted once and
stays boosted.

## Core Architecture

**Configuration Management (`playlist_player/config/`)**
- Dataclass settings loaded from YAML files and environment variables
- Singleton access through `get_settings()` / `reload_settings()`

**Playlists (`playlist_player/playlist/`)**
- `Playlist`, `Track` and `PlaylistSettings` data model
- Atomic JSON record storage, one file per playlist
- Manager for create, add, edit, remove and playback source resolution

**Playback (`playlist_player/playback/`)**
- Session state machine fed by a single event queue
- sounddevice output backend with per-block volume control
- blessed key reader and status display

**Audio (`playlist_player/audio/`)**
- pydub decoding to float sample frames
- mutagen probing and file validation

**Utilities (`playlist_player/utils/`)**
- colorama console logging with optional rotating log file
- Path, formatting and input validation helpers

## Usage Examples

```bash
# Play a file or every audio file in a directory
playlist-player play ~/Music/live.mp3
playlist-player play ~/Music/road-trip --amplify 2.0

# Build a playlist and play it on repeat
playlist-player create road -f ~/Music/road-trip --random shuffle
playlist-player add ~/Music/quiet.flac road --amplify 1.8
playlist-player play road --playlist --repeat
```
"""

__version__ = "0.1.0"

__author__ = "Verryx-02"

__description__ = "Play sound files and manage playlists with per-track volume"

__all__ = [
    "__version__",
    "__author__",
    "__description__"
]
