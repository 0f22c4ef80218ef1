"""Tests for ManifestHandler."""

import json

import pytest

from protonhook.backend.handlers import manifest_handler
from protonhook.backend.handlers.cache_handler import AppIdCache
from protonhook.backend.handlers.manifest_handler import ManifestHandler, names_match

from conftest import write_manifest


class TestNamesMatch:
    @pytest.mark.parametrize("a,b", [
        ("Team Fortress 2", "team fortress"),
        ("Hollow Knight", "  HOLLOW knight "),
        ("Portal", "Portal 2"),
        ("Valheim", "Stardew Valley"),
    ])
    def test_symmetric(self, a, b):
        assert names_match(a, b) == names_match(b, a)

    def test_containment_either_way(self):
        assert names_match("Team Fortress 2", "team fortress")
        assert names_match("Portal", "portal 2 deluxe")
        assert not names_match("Valheim", "Stardew Valley")

    def test_blank_never_matches(self):
        assert not names_match("Portal", "   ")


class TestResolveId:
    def test_partial_name(self, steam_root, cache, tf2):
        handler = ManifestHandler([steam_root], cache)
        assert handler.resolve_id("team fortress") == 440

    def test_second_call_is_served_from_cache(self, steam_root, cache, tf2, monkeypatch):
        handler = ManifestHandler([steam_root], cache)
        assert handler.resolve_id("team fortress") == 440

        def no_scan(path):
            raise AssertionError(f"unexpected scan of {path}")

        monkeypatch.setattr(manifest_handler, "parse_app_manifest", no_scan)
        report = handler.scan("team fortress")
        assert report.app_id == 440
        assert report.from_cache
        assert report.scanned == 0

    def test_every_manifest_read_is_cached(self, steam_root, cache, cache_file):
        write_manifest(steam_root, 220, "Half-Life 2", "Half-Life 2")
        write_manifest(steam_root, 440, "Team Fortress 2", "Team Fortress 2")
        write_manifest(steam_root, 620, "Portal 2", "Portal 2")

        handler = ManifestHandler([steam_root], cache)
        assert handler.resolve_id("portal") == 620

        saved = json.loads(cache_file.read_text())
        assert saved["half-life 2"] == 220
        assert saved["team fortress 2"] == 440
        assert saved["portal 2"] == 620
        assert saved["portal"] == 620

    def test_not_found_still_saves_cache(self, steam_root, cache, cache_file, tf2):
        handler = ManifestHandler([steam_root], cache)
        assert handler.resolve_id("Elden Ring") is None
        assert json.loads(cache_file.read_text()) == {"team fortress 2": 440}

    def test_bad_manifest_skipped(self, steam_root, cache, tf2):
        write_manifest(steam_root, 10, installdir="Counter-Strike")
        handler = ManifestHandler([steam_root], cache)

        report = handler.scan("team fortress")
        assert report.app_id == 440
        assert [s.path.name for s in report.skipped] == ["appmanifest_10.acf"]

    def test_first_library_wins(self, tmp_path, steam_root, cache):
        other = tmp_path / "lib2"
        write_manifest(steam_root, 400, "Portal", "Portal")
        write_manifest(other, 620, "Portal 2", "Portal 2")

        handler = ManifestHandler([steam_root, other], cache)
        assert handler.resolve_id("portal") == 400

    def test_blank_name(self, steam_root, cache, tf2):
        report = ManifestHandler([steam_root], cache).scan("   ")
        assert not report.found
        assert report.scanned == 0

    def test_uses_existing_cache_file(self, steam_root, cache_file):
        cache_file.parent.mkdir(parents=True)
        cache_file.write_text(json.dumps({"some game": 12345}))
        handler = ManifestHandler([steam_root], AppIdCache(cache_file))
        assert handler.resolve_id("Some Game") == 12345


class TestResolveInstallDir:
    def test_existing_directory(self, steam_root, cache, tf2):
        handler = ManifestHandler([steam_root], cache)
        assert handler.resolve_install_dir(440) == steam_root / "steamapps" / "common" / "Team Fortress 2"

    def test_directory_missing(self, steam_root, cache):
        write_manifest(steam_root, 440, "Team Fortress 2", "Team Fortress 2")
        assert ManifestHandler([steam_root], cache).resolve_install_dir(440) is None

    def test_later_library_with_existing_directory(self, tmp_path, steam_root, cache):
        other = tmp_path / "lib2"
        write_manifest(steam_root, 440, "Team Fortress 2", "Team Fortress 2")
        write_manifest(other, 440, "Team Fortress 2", "Team Fortress 2")
        (other / "steamapps" / "common" / "Team Fortress 2").mkdir(parents=True)

        handler = ManifestHandler([steam_root, other], cache)
        assert handler.resolve_install_dir(440) == other / "steamapps" / "common" / "Team Fortress 2"

    @pytest.mark.parametrize("app_id", [0, -1, True])
    def test_invalid_id(self, steam_root, cache, app_id):
        assert ManifestHandler([steam_root], cache).resolve_install_dir(app_id) is None
