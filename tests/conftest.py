"""Shared pytest fixtures: a throwaway Steam tree under tmp_path."""

import os
import stat
from pathlib import Path

import pytest

from protonhook.backend.handlers.cache_handler import AppIdCache
from protonhook.backend.handlers.config_handler import ConfigHandler


def write_manifest(library: Path, app_id, name=None, installdir=None, body=None) -> Path:
    """Write steamapps/appmanifest_<app_id>.acf under a library root."""
    steamapps = library / "steamapps"
    steamapps.mkdir(parents=True, exist_ok=True)
    if body is None:
        lines = ['"AppState"', '{', f'\t"appid"\t\t"{app_id}"']
        if name is not None:
            lines.append(f'\t"name"\t\t"{name}"')
        if installdir is not None:
            lines.append(f'\t"installdir"\t\t"{installdir}"')
        lines.append('}')
        body = "\n".join(lines) + "\n"
    path = steamapps / f"appmanifest_{app_id}.acf"
    path.write_text(body)
    return path


def write_library_folders(steam_root: Path, paths) -> Path:
    """Write steamapps/libraryfolders.vdf listing the given library paths."""
    entries = []
    for index, path in enumerate(paths):
        entries.append(f'\t"{index}"\n\t{{\n\t\t"path"\t\t"{path}"\n\t\t"label"\t\t""\n\t}}')
    descriptor = steam_root / "steamapps" / "libraryfolders.vdf"
    descriptor.parent.mkdir(parents=True, exist_ok=True)
    descriptor.write_text('"libraryfolders"\n{\n' + "\n".join(entries) + '\n}\n')
    return descriptor


def make_executable(path: Path, body: str) -> Path:
    """Write a shell script and mark it executable."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def make_proton(library: Path, name: str, subpath: str = "dist/bin/wine64", version=None,
                script: str = "exit 0") -> Path:
    """Create steamapps/common/<name> with a fake wine binary at subpath."""
    proton_dir = library / "steamapps" / "common" / name
    proton_dir.mkdir(parents=True, exist_ok=True)
    if subpath:
        make_executable(proton_dir / subpath, script)
    if version is not None:
        (proton_dir / "version").write_text(version + "\n")
    return proton_dir


@pytest.fixture
def steam_root(tmp_path):
    root = tmp_path / "steam"
    (root / "steamapps" / "common").mkdir(parents=True)
    return root


@pytest.fixture
def cache_file(tmp_path):
    return tmp_path / "cache" / "appids.json"


@pytest.fixture
def cache(cache_file):
    return AppIdCache(cache_file)


@pytest.fixture
def config(tmp_path, steam_root, cache_file):
    cfg = ConfigHandler(config_file=tmp_path / "config" / "config.json", detect_steam=False)
    cfg.update({
        "steam_path": str(steam_root),
        "cache_file": str(cache_file),
        "data_dir": str(tmp_path / "data"),
    })
    return cfg


@pytest.fixture
def tf2(steam_root):
    """Team Fortress 2 installed in the primary library."""
    write_manifest(steam_root, 440, "Team Fortress 2", "Team Fortress 2")
    install_dir = steam_root / "steamapps" / "common" / "Team Fortress 2"
    install_dir.mkdir(parents=True)
    return install_dir


@pytest.fixture
def has_posix_shell():
    if not os.path.exists("/bin/sh"):
        pytest.skip("needs /bin/sh")
