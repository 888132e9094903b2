# tests/test_models.py
"""Test playlist data models"""

import math
import pytest

from playlist_player.exceptions import (
    CorruptData, DuplicateTrack, InvalidAmplification, NotFoundError
)
from playlist_player.playlist.models import Playlist, PlaylistSettings, RandomMode, Track


class TestTrack:
    """Test Track model"""

    def test_defaults(self):
        track = Track("music/song.mp3")
        assert track.amplification == 1.0
        assert track.name == "song.mp3"
        assert str(track) == "song.mp3"

    def test_path_is_stored_as_given(self):
        """Test relative paths are not made absolute"""
        assert Track("./a.mp3").path == "./a.mp3"

    @pytest.mark.parametrize("value", [-0.1, math.nan, math.inf, "loud", True])
    def test_invalid_amplification_rejected(self, value):
        with pytest.raises(InvalidAmplification):
            Track("a.mp3", value)

    def test_zero_amplification_mutes(self):
        assert Track("a.mp3", 0).amplification == 0.0


class TestPlaylistSettings:
    """Test PlaylistSettings model"""

    def test_random_mode_from_string(self):
        settings = PlaylistSettings(random="shuffle")
        assert settings.random is RandomMode.SHUFFLE

    def test_unknown_random_mode_rejected(self):
        with pytest.raises(ValueError):
            PlaylistSettings(random="sometimes")

    def test_str(self):
        assert str(PlaylistSettings(1.5, RandomMode.ON)) == "Amplify: 1.5; Random mode: on"


class TestPlaylist:
    """Test Playlist model"""

    def test_add_preserves_order(self):
        playlist = Playlist(name="road")
        for path in ["c.mp3", "a.mp3", "b.mp3"]:
            playlist.add_track(Track(path))
        assert [t.path for t in playlist] == ["c.mp3", "a.mp3", "b.mp3"]
        assert len(playlist) == 3

    def test_duplicate_path_rejected(self, sample_playlist):
        with pytest.raises(DuplicateTrack):
            sample_playlist.add_track(Track("a.mp3", 2.0))
        assert len(sample_playlist) == 3

    def test_find(self, sample_playlist):
        assert sample_playlist.find("b.mp3") == 1
        assert sample_playlist.find("missing.mp3") is None

    def test_remove_track(self, sample_playlist):
        removed = sample_playlist.remove_track(0)
        assert removed.path == "a.mp3"
        assert [t.path for t in sample_playlist] == ["b.mp3", "c.mp3"]

    @pytest.mark.parametrize("index", [-1, 3])
    def test_remove_out_of_range(self, sample_playlist, index):
        with pytest.raises(NotFoundError):
            sample_playlist.remove_track(index)

    def test_set_track_amplification(self, sample_playlist):
        sample_playlist.set_track_amplification(2, 0.25)
        assert sample_playlist.tracks[2].amplification == 0.25

        with pytest.raises(InvalidAmplification):
            sample_playlist.set_track_amplification(0, -1)
        with pytest.raises(NotFoundError):
            sample_playlist.set_track_amplification(5, 1.0)

    def test_track_lookup(self, sample_playlist):
        assert sample_playlist.track(1).path == "b.mp3"
        assert sample_playlist.track(9) is None

    def test_str_lists_settings_and_songs(self, sample_playlist):
        lines = str(sample_playlist).splitlines()
        assert lines[0] == "  Settings:"
        assert lines[2] == "  Songs:"
        assert lines[3:] == ["a.mp3", "b.mp3", "c.mp3"]


class TestSerialization:
    """Test record conversion"""

    def test_round_trip(self, sample_playlist):
        sample_playlist.settings = PlaylistSettings(0.75, RandomMode.SHUFFLE)
        restored = Playlist.from_dict(sample_playlist.to_dict())
        assert restored == sample_playlist

    def test_missing_optional_fields_use_defaults(self):
        playlist = Playlist.from_dict({'name': 'bare', 'tracks': [{'path': 'a.mp3'}]})
        assert playlist.tracks[0].amplification == 1.0
        assert playlist.settings == PlaylistSettings()

    @pytest.mark.parametrize("record", [
        [],
        {'tracks': []},
        {'name': 7},
        {'name': 'x', 'tracks': {}},
        {'name': 'x', 'tracks': [{'amplification': 1.0}]},
        {'name': 'x', 'tracks': [{'path': 'a.mp3', 'amplification': -2}]},
        {'name': 'x', 'settings': {'random': 'sometimes'}},
        {'name': 'x', 'settings': 'loud'},
    ])
    def test_invalid_records(self, record):
        with pytest.raises(CorruptData):
            Playlist.from_dict(record)
