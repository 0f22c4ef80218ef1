"""Tests for the command-line frontend."""

import json
import logging

import pytest

from protonhook.frontends.cli.main import CLI_LOG_FILE, ProtonHookCLI

from conftest import make_proton


@pytest.fixture(autouse=True)
def reset_protonhook_logger():
    yield
    app_logger = logging.getLogger('protonhook')
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()


def run_cli(config, *argv):
    return ProtonHookCLI(config=config).run(list(argv))


class TestCLI:
    def test_no_command_prints_help(self, config, capsys):
        assert run_cli(config) == 1
        assert "usage: protonhook" in capsys.readouterr().out

    def test_find(self, config, tf2, capsys):
        assert run_cli(config, "find", "team fortress") == 0
        out = capsys.readouterr().out
        assert "Found App ID: 440" in out
        assert str(tf2) in out

    def test_find_unknown(self, config, tf2, capsys):
        assert run_cli(config, "find", "Elden Ring") == 1
        assert "Could not find App ID for 'Elden Ring'" in capsys.readouterr().out

    def test_install_dir(self, config, tf2, capsys):
        assert run_cli(config, "install-dir", "440") == 0
        assert capsys.readouterr().out.strip() == str(tf2)

    def test_install_dir_invalid(self, config, capsys):
        assert run_cli(config, "install-dir", "not-a-number") == 1

    def test_libraries(self, config, steam_root, capsys):
        assert run_cli(config, "libraries") == 0
        assert capsys.readouterr().out.strip() == str(steam_root)

    def test_steam_path_flag(self, config, tmp_path, capsys):
        assert run_cli(config, "--steam-path", str(tmp_path / "nowhere"), "libraries") == 1
        assert "No Steam library found" in capsys.readouterr().out

    def test_proton(self, config, steam_root, capsys):
        make_proton(steam_root, "Proton 9.0", version="9.0-2")
        assert run_cli(config, "proton") == 0
        out = capsys.readouterr().out
        assert "Proton 9.0 (9.0-2)" in out
        assert "Wine binary:" in out

    def test_proton_none_installed(self, config, capsys):
        assert run_cli(config, "proton") == 1

    @pytest.mark.usefixtures("has_posix_shell")
    def test_override(self, config, steam_root, capsys):
        (steam_root / "steamapps" / "compatdata" / "440" / "pfx").mkdir(parents=True)
        make_proton(steam_root, "Proton 9.0")
        assert run_cli(config, "override", "440") == 0
        assert "winhttp override set to native,builtin" in capsys.readouterr().out

    def test_override_missing_compatdata(self, config, steam_root, capsys):
        assert run_cli(config, "override", "440") == 1
        out = capsys.readouterr().out
        assert "Searched in Steam libraries:" in out
        assert str(steam_root / "steamapps" / "compatdata" / "440") in out

    def test_cache_show_and_clear(self, config, cache_file, capsys):
        cache_file.parent.mkdir(parents=True)
        cache_file.write_text(json.dumps({"team fortress 2": 440}))

        assert run_cli(config, "cache", "show") == 0
        assert "team fortress 2" in capsys.readouterr().out

        assert run_cli(config, "cache", "clear") == 0
        assert json.loads(cache_file.read_text()) == {}

        assert run_cli(config, "cache", "show") == 0
        assert "Cache is empty" in capsys.readouterr().out

    def test_log_file_written(self, config, tf2, tmp_path):
        run_cli(config, "find", "team fortress")
        log_file = tmp_path / "data" / "logs" / CLI_LOG_FILE
        assert log_file.is_file()
        for handler in logging.getLogger('protonhook').handlers:
            handler.flush()
        assert "Found match: 'Team Fortress 2' (App ID: 440)" in log_file.read_text()
