# tests/test_storage.py
"""Test playlist record storage"""

import json
import pytest
from unittest.mock import patch

from playlist_player.exceptions import (
    CorruptData, InvalidName, PersistenceError, PlaylistNotFound
)
from playlist_player.playlist.models import Playlist, PlaylistSettings, RandomMode, Track
from playlist_player.playlist.storage import PlaylistStore


class TestPlaylistStore:
    """Test saving and loading records"""

    def test_save_and_load_round_trip(self, store, sample_playlist):
        sample_playlist.settings = PlaylistSettings(1.25, RandomMode.ON)
        path = store.save(sample_playlist)

        assert path == store.directory / "road.json"
        assert store.load("road") == sample_playlist

    def test_record_layout(self, store, sample_playlist):
        path = store.save(sample_playlist)
        record = json.loads(path.read_text(encoding="utf-8"))

        assert record["format_version"] == "1.0"
        assert record["name"] == "road"
        assert record["settings"] == {"amplification": 1.0, "random": "off"}
        assert record["tracks"][1] == {"path": "b.mp3", "amplification": 0.5}

    def test_unicode_names_and_paths(self, store):
        playlist = Playlist(name="Café del Mar", tracks=[Track("música/canción.flac")])
        store.save(playlist)
        assert store.load("Café del Mar").tracks[0].path == "música/canción.flac"

    def test_missing_playlist(self, store):
        with pytest.raises(PlaylistNotFound):
            store.load("nothing")

    def test_invalid_json_is_corrupt(self, store):
        store.directory.mkdir(parents=True)
        (store.directory / "broken.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(CorruptData) as exc_info:
            store.load("broken")
        assert exc_info.value.details["playlist"] == "broken"

    def test_invalid_structure_is_corrupt(self, store):
        store.directory.mkdir(parents=True)
        (store.directory / "odd.json").write_text('{"name": "odd", "tracks": 3}', encoding="utf-8")
        with pytest.raises(CorruptData):
            store.load("odd")

    def test_corrupt_record_left_untouched(self, store):
        store.directory.mkdir(parents=True)
        record = store.directory / "broken.json"
        record.write_text("{not json", encoding="utf-8")
        with pytest.raises(CorruptData):
            store.load("broken")
        assert record.read_text(encoding="utf-8") == "{not json"

    def test_file_name_wins_over_record_name(self, store, sample_playlist):
        store.save(sample_playlist)
        (store.directory / "road.json").rename(store.directory / "trip.json")
        assert store.load("trip").name == "trip"

    @pytest.mark.parametrize("name", ["", ".hidden", "a/b", "..", " padded"])
    def test_invalid_names(self, store, name):
        with pytest.raises(InvalidName):
            store.path_for(name)

    def test_list_names_sorted(self, store):
        for name in ["zeta", "alpha", "mid"]:
            store.save(Playlist(name=name))
        (store.directory / "readme.txt").write_text("not a playlist")
        assert store.list_names() == ["alpha", "mid", "zeta"]

    def test_list_names_without_directory(self, temp_dir):
        assert PlaylistStore(temp_dir / "absent").list_names() == []

    def test_delete(self, store, sample_playlist):
        store.save(sample_playlist)
        store.delete("road")
        assert not store.exists("road")
        with pytest.raises(PlaylistNotFound):
            store.delete("road")


class TestAtomicSave:
    """Test that failed saves keep the previous record"""

    def test_failed_rename_keeps_previous_record(self, store, sample_playlist):
        store.save(sample_playlist)
        before = (store.directory / "road.json").read_text(encoding="utf-8")

        sample_playlist.add_track(Track("d.mp3"))
        with patch("playlist_player.utils.helpers.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError):
                store.save(sample_playlist)

        assert (store.directory / "road.json").read_text(encoding="utf-8") == before
        assert len(store.load("road")) == 3

    def test_failed_save_leaves_no_temp_files(self, store, sample_playlist):
        with patch("playlist_player.utils.helpers.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError):
                store.save(sample_playlist)

        assert list(store.directory.iterdir()) == []
