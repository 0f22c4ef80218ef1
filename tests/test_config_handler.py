"""Tests for ConfigHandler and LoggingHandler."""

import json
import logging

from protonhook.backend.handlers.config_handler import (
    DEFAULT_WINE_BINARY_SUBPATHS,
    ConfigHandler,
)
from protonhook.backend.handlers.logging_handler import LoggingHandler


class TestConfigHandler:
    def test_defaults(self, tmp_path):
        config = ConfigHandler(tmp_path / "config.json", detect_steam=False)
        assert config.get_steam_path() is None
        assert config.get_override_timeout() == 5.0
        assert config.get_wine_binary_subpaths() == DEFAULT_WINE_BINARY_SUBPATHS
        assert config.get_reference_appid() is None

    def test_file_values_override_defaults(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "steam_path": str(tmp_path / "steam"),
            "reference_appid": 620,
            "override_timeout_ms": 1500,
            "wine_binary_subpaths": ["files/bin/wine"],
        }))
        config = ConfigHandler(config_file, detect_steam=False)
        assert config.get_steam_path() == tmp_path / "steam"
        assert config.get_reference_appid() == "620"
        assert config.get_override_timeout() == 1.5
        assert config.get_wine_binary_subpaths() == ["files/bin/wine"]
        assert config.get("version") == "0.2.0"

    def test_bad_values_fall_back(self, tmp_path):
        config = ConfigHandler(tmp_path / "config.json", detect_steam=False)
        config.update({"override_timeout_ms": "soon", "wine_binary_subpaths": "dist/bin/wine"})
        assert config.get_override_timeout() == 5.0
        assert config.get_wine_binary_subpaths() == DEFAULT_WINE_BINARY_SUBPATHS
        config.set("override_timeout_ms", 0)
        assert config.get_override_timeout() == 5.0

    def test_malformed_file_keeps_defaults(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{oops")
        config = ConfigHandler(config_file, detect_steam=False)
        assert config.get_override_timeout() == 5.0

    def test_save_and_reload(self, tmp_path):
        config_file = tmp_path / "nested" / "config.json"
        config = ConfigHandler(config_file, detect_steam=False)
        config.set("reference_appid", "440")
        assert config.save_config()

        assert ConfigHandler(config_file, detect_steam=False).get_reference_appid() == "440"

    def test_reload_picks_up_external_changes(self, tmp_path):
        config_file = tmp_path / "config.json"
        config = ConfigHandler(config_file, detect_steam=False)
        config_file.write_text(json.dumps({"override_timeout_ms": 2500}))
        assert config.get_override_timeout() == 5.0

        config.reload_config()
        assert config.get_override_timeout() == 2.5

    def test_cache_file_default_and_override(self, tmp_path):
        config = ConfigHandler(tmp_path / "config.json", detect_steam=False)
        assert config.get_cache_file().name == ".protonhook_steam_cache.json"
        config.set("cache_file", str(tmp_path / "c.json"))
        assert config.get_cache_file() == tmp_path / "c.json"


class TestLoggingHandler:
    def test_rotation_keeps_backups(self, tmp_path):
        handler = LoggingHandler(tmp_path)
        log_file = handler.log_dir / "protonhook-cli.log"
        for run in range(3):
            handler.rotate_log_for_logger("protonhook-cli.log", backup_count=2)
            log_file.write_text(f"run {run}\n")

        assert log_file.read_text() == "run 2\n"
        assert (handler.log_dir / "protonhook-cli.log.1").read_text() == "run 1\n"
        assert (handler.log_dir / "protonhook-cli.log.2").read_text() == "run 0\n"

    def test_setup_logger_does_not_duplicate_handlers(self, tmp_path):
        handler = LoggingHandler(tmp_path)
        name = "protonhook-test-logger"
        try:
            handler.setup_logger(name, "test.log")
            app_logger = handler.setup_logger(name, "test.log")
            assert len(app_logger.handlers) == 2
            assert handler.get_log_files() == [handler.log_dir / "test.log"]
        finally:
            app_logger = logging.getLogger(name)
            for h in list(app_logger.handlers):
                app_logger.removeHandler(h)
                h.close()
