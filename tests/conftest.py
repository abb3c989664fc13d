"""
Shared pytest fixtures for Local Wallpaper Viewer tests.
"""
import copy
import os
import sys

# Ensure project root is on path for all tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from PIL import Image

from config.config_manager import DEFAULT_CONFIG
from core.event_system import EventSystem
from core.folder_roots import FolderRoots
from core.models import FolderKind


class MockConfigManager:
    """In-memory ConfigManager substitute with the same get / set / save_config surface."""

    def __init__(self, overrides: dict | None = None):
        self.config: dict = copy.deepcopy(DEFAULT_CONFIG)
        self.saves = 0
        for key, value in (overrides or {}).items():
            self.set(key, value, save=False)

    def get(self, key: str, default=None):
        keys = key.split(".")
        val = self.config
        for k in keys:
            if isinstance(val, dict):
                val = val.get(k)
            else:
                return default
        return val if val is not None else default

    def set(self, key: str, value, save: bool = True):
        keys = key.split(".")
        node = self.config
        for k in keys[:-1]:
            node = node.setdefault(k, {})
        node[keys[-1]] = value
        if save:
            self.save_config()

    def save_config(self, config=None):
        self.saves += 1


def make_image(path, size, fmt="BMP", color=(40, 90, 160)):
    """Write a solid image. BMP is uncompressed, so a 1920x1080 file is well over 50 KiB."""
    os.makedirs(os.path.dirname(str(path)), exist_ok=True)
    Image.new("RGB", size, color=color).save(str(path), fmt)
    return str(path)


@pytest.fixture()
def folder_dirs(tmp_path):
    """One existing directory per folder kind under tmp_path."""
    dirs = {
        FolderKind.USER_ASSETS: tmp_path / "Assets",
        FolderKind.LOCK_SCREEN: tmp_path / "Themes",
        FolderKind.SPOTLIGHT: tmp_path / "IrisService",
    }
    for d in dirs.values():
        d.mkdir()
    return dirs


@pytest.fixture()
def roots(folder_dirs):
    return FolderRoots({kind: str(path) for kind, path in folder_dirs.items()})


@pytest.fixture()
def wallpaper_set(folder_dirs):
    """A landscape and a portrait wallpaper plus one file too small to be a wallpaper."""
    return {
        "landscape": make_image(folder_dirs[FolderKind.USER_ASSETS] / "land.bmp", (1920, 1080)),
        "portrait": make_image(folder_dirs[FolderKind.LOCK_SCREEN] / "port.bmp", (1080, 1920)),
        "tiny": make_image(folder_dirs[FolderKind.USER_ASSETS] / "tiny.bmp", (10, 10)),
    }


@pytest.fixture()
def events():
    """A private EventSystem so tests never see each other's events."""
    return EventSystem()
