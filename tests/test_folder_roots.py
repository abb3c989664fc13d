"""Tests for core.folder_roots: defaults, overrides and path classification."""
import os

import pytest

from conftest import MockConfigManager
from core.folder_roots import FolderRoots, PathMatchPolicy, default_path
from core.models import FOLDER_KINDS, FolderKind


class TestDefaults:
    def test_default_paths_live_under_user_dir(self):
        user_dir = os.path.join(os.sep, "home", "someone")
        path = default_path(FolderKind.LOCK_SCREEN, user_dir)
        assert path == os.path.join(user_dir, "AppData", "Roaming", "Microsoft", "Windows", "Themes")

    def test_from_config_uses_defaults_when_empty(self, tmp_path):
        roots = FolderRoots.from_config(MockConfigManager(), user_dir=str(tmp_path))
        assert roots.pairs() == [(k, default_path(k, str(tmp_path))) for k in FOLDER_KINDS]
        assert roots.policy is PathMatchPolicy.NATIVE

    def test_override_replaces_one_kind(self, tmp_path):
        config = MockConfigManager({"folders.spotlight": str(tmp_path / "iris")})
        roots = FolderRoots.from_config(config, user_dir=str(tmp_path))
        assert roots.path_for(FolderKind.SPOTLIGHT) == str(tmp_path / "iris")
        assert roots.path_for(FolderKind.USER_ASSETS) == default_path(FolderKind.USER_ASSETS, str(tmp_path))

    def test_missing_kind_is_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            FolderRoots({FolderKind.USER_ASSETS: str(tmp_path)})

    def test_existing_kinds(self, roots, folder_dirs):
        assert roots.existing_kinds() == list(FOLDER_KINDS)
        folder_dirs[FolderKind.LOCK_SCREEN].rmdir()
        assert roots.existing_kinds() == [FolderKind.USER_ASSETS, FolderKind.SPOTLIGHT]
        assert not roots.exists(FolderKind.LOCK_SCREEN)


class TestClassify:
    def test_file_under_root(self, roots, folder_dirs):
        path = str(folder_dirs[FolderKind.SPOTLIGHT] / "sub" / "img.jpg")
        assert roots.classify(path) is FolderKind.SPOTLIGHT

    def test_whole_components_only(self, tmp_path):
        roots = FolderRoots({
            FolderKind.USER_ASSETS: str(tmp_path / "Assets"),
            FolderKind.LOCK_SCREEN: str(tmp_path / "Themes"),
            FolderKind.SPOTLIGHT: str(tmp_path / "Iris"),
        })
        assert roots.classify(str(tmp_path / "AssetsBackup" / "img.jpg")) is None

    def test_longest_root_wins(self, tmp_path):
        roots = FolderRoots({
            FolderKind.USER_ASSETS: str(tmp_path / "outer"),
            FolderKind.LOCK_SCREEN: str(tmp_path / "outer" / "inner"),
            FolderKind.SPOTLIGHT: str(tmp_path / "elsewhere"),
        })
        assert roots.classify(str(tmp_path / "outer" / "inner" / "x.jpg")) is FolderKind.LOCK_SCREEN
        assert roots.classify(str(tmp_path / "outer" / "x.jpg")) is FolderKind.USER_ASSETS

    def test_case_insensitive_policy(self, tmp_path):
        roots = FolderRoots({
            FolderKind.USER_ASSETS: str(tmp_path / "Assets"),
            FolderKind.LOCK_SCREEN: str(tmp_path / "Themes"),
            FolderKind.SPOTLIGHT: str(tmp_path / "Iris"),
        }, PathMatchPolicy.CASE_INSENSITIVE)
        assert roots.classify(str(tmp_path / "THEMES" / "a.jpg")) is FolderKind.LOCK_SCREEN

    def test_case_sensitive_policy(self, tmp_path):
        roots = FolderRoots({
            FolderKind.USER_ASSETS: str(tmp_path / "Assets"),
            FolderKind.LOCK_SCREEN: str(tmp_path / "Themes"),
            FolderKind.SPOTLIGHT: str(tmp_path / "Iris"),
        }, PathMatchPolicy.CASE_SENSITIVE)
        assert roots.classify(str(tmp_path / "THEMES" / "a.jpg")) is None


class TestPolicyParse:
    @pytest.mark.parametrize("value,expected", [
        ("native", PathMatchPolicy.NATIVE),
        ("CASE_INSENSITIVE", PathMatchPolicy.CASE_INSENSITIVE),
        ("case_sensitive", PathMatchPolicy.CASE_SENSITIVE),
        ("whatever", PathMatchPolicy.NATIVE),
    ])
    def test_parse(self, value, expected):
        assert PathMatchPolicy.parse(value) is expected
