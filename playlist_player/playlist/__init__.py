"""
Playlist package: data model, record storage and playlist operations

Key Components:
- `Playlist`, `Track`, `PlaylistSettings`, `RandomMode`: Data model
- `PlaylistStore` / `get_playlist_store()`: Atomic JSON record storage
- `PlaylistManager` / `get_playlist_manager()`: create, add, edit, resolve
"""

from .models import Playlist, Track, PlaylistSettings, RandomMode
from .storage import PlaylistStore, get_playlist_store
from .manager import PlaylistManager, SourceMode, get_playlist_manager, play_order

__all__ = [
    'Playlist',
    'Track',
    'PlaylistSettings',
    'RandomMode',
    'PlaylistStore',
    'get_playlist_store',
    'PlaylistManager',
    'SourceMode',
    'get_playlist_manager',
    'play_order',
]
