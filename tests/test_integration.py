"""Integration tests"""

import logging
import pytest
from unittest.mock import patch

from playlist_player.config.settings import Settings, get_settings, reload_settings


class TestIntegration:
    """Test system integration"""

    def test_settings_defaults_validate(self, monkeypatch, temp_dir):
        """Test built-in defaults pass validation"""
        monkeypatch.chdir(temp_dir)
        monkeypatch.delenv("PLAYLIST_PLAYER_DIR", raising=False)
        monkeypatch.delenv("PLAYLIST_PLAYER_LOG_LEVEL", raising=False)
        settings = Settings(str(temp_dir / "absent.yaml"))

        assert settings.playback.volume_step == 0.1
        assert settings.playback.min_volume == 0.05
        assert settings.playback.max_volume == 3.0
        assert settings.validate() is True

    def test_settings_from_yaml(self, temp_dir):
        config_file = temp_dir / "config.yaml"
        config_file.write_text(
            "storage:\n"
            "  playlist_directory: /tmp/lists\n"
            "playback:\n"
            "  save_on_exit: false\n"
            "  unknown_key: 1\n",
            encoding="utf-8"
        )
        settings = Settings(str(config_file))

        assert settings.storage.playlist_directory == "/tmp/lists"
        assert settings.playback.save_on_exit is False
        assert not hasattr(settings.playback, "unknown_key")

    def test_environment_overrides_file(self, monkeypatch, temp_dir):
        config_file = temp_dir / "config.yaml"
        config_file.write_text("storage:\n  playlist_directory: /tmp/lists\n", encoding="utf-8")
        monkeypatch.setenv("PLAYLIST_PLAYER_DIR", str(temp_dir / "env-lists"))
        monkeypatch.setenv("PLAYLIST_PLAYER_LOG_LEVEL", "DEBUG")

        settings = Settings(str(config_file))
        assert settings.get_playlist_directory() == temp_dir / "env-lists"
        assert settings.logging.level == "DEBUG"

    def test_invalid_settings_fail_validation(self, temp_dir):
        settings = Settings(str(temp_dir / "absent.yaml"))
        settings.playback.volume_step = 1.5
        settings.logging.level = "LOUD"
        assert settings.validate() is False

    def test_save_config_round_trip(self, temp_dir):
        settings = Settings(str(temp_dir / "absent.yaml"))
        settings.playback.volume_step = 0.2
        path = settings.save_config(str(temp_dir / "saved.yaml"))

        reloaded = Settings(str(path))
        assert reloaded.playback.volume_step == 0.2

    def test_reload_settings_replaces_singleton(self, temp_dir):
        original = get_settings()
        try:
            reloaded = reload_settings(str(temp_dir / "absent.yaml"))
            assert get_settings() is reloaded
        finally:
            reload_settings(original.config_path)

    def test_logger_configuration(self, temp_dir):
        """Test logger can be configured with a rotating log file"""
        from playlist_player.utils.logger import get_current_log_file, get_logger, setup_logging

        log_file = temp_dir / "logs" / "player.log"
        try:
            setup_logging(level="DEBUG", log_file=str(log_file), console_output=True)
            logger = get_logger(__name__)
            logger.console_info("hello")
            assert get_current_log_file() == log_file
            assert log_file.exists()
        finally:
            setup_logging(level="INFO")
        assert get_current_log_file() is None

    def test_parse_size(self):
        from playlist_player.utils.logger import parse_size

        assert parse_size("10MB") == 10 * 1024 * 1024
        assert parse_size("512 KB") == 512 * 1024
        with pytest.raises(ValueError):
            parse_size("lots")

    def test_operation_logger_reports_progress(self):
        from playlist_player.utils.logger import create_operation_logger

        operation = create_operation_logger(__name__, "Validating 'road'")
        with patch("tqdm.tqdm") as mock_tqdm:
            operation.start()
            operation.progress("a.mp3", 1, 2)
            operation.progress("b.mp3", 2, 2)
            operation.complete()

        mock_tqdm.assert_called_once()
        assert mock_tqdm.return_value.n == 2
        mock_tqdm.return_value.close.assert_called_once()
        assert operation.progress_bar is None
