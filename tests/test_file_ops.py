"""Tests for core.file_ops: JPEG export, quick-save naming and the open-folder command."""
import os
import sys
from unittest.mock import patch

import pytest
from PIL import Image

from conftest import make_image
from core import file_ops
from core.models import Asset, FolderKind


def _asset_for(path):
    with Image.open(path) as img:
        w, h = img.size
    return Asset(path=str(path), size_bytes=os.path.getsize(path),
                 source_folder=FolderKind.USER_ASSETS, width=w, height=h)


@pytest.fixture()
def asset(tmp_path):
    return _asset_for(make_image(tmp_path / "src" / "a1b2c3", (320, 200)))


class TestNaming:
    def test_suggested_filename(self, asset):
        assert file_ops.suggested_filename(asset) == "a1b2c3.jpg"
        assert file_ops.suggested_filename(asset, "_2") == "a1b2c3_2.jpg"

    def test_unique_save_path_skips_existing(self, tmp_path, asset):
        out = tmp_path / "out"
        out.mkdir()
        (out / "a1b2c3.jpg").write_bytes(b"x")
        (out / "a1b2c3_1.jpg").write_bytes(b"x")
        assert file_ops.unique_save_path(str(out), asset) == str(out / "a1b2c3_2.jpg")


class TestExport:
    def test_export_writes_jpeg(self, tmp_path, asset):
        dst = tmp_path / "nested" / "copy.jpg"
        file_ops.export_jpeg(asset.path, str(dst))
        with Image.open(dst) as img:
            assert img.format == "JPEG"
            assert img.size == (320, 200)

    def test_export_converts_alpha(self, tmp_path):
        src = tmp_path / "rgba.png"
        Image.new("RGBA", (50, 40), (10, 20, 30, 128)).save(src)
        dst = tmp_path / "rgba.jpg"
        file_ops.export_jpeg(str(src), str(dst))
        with Image.open(dst) as img:
            assert img.mode == "RGB"

    def test_export_missing_source_raises(self, tmp_path):
        with pytest.raises(OSError):
            file_ops.export_jpeg(str(tmp_path / "gone.png"), str(tmp_path / "out.jpg"))


class TestQuickSave:
    def test_collisions_get_numbered(self, tmp_path, asset):
        out = str(tmp_path / "quick")
        first = file_ops.quick_save(asset, out)
        second = file_ops.quick_save(asset, out)
        third = file_ops.quick_save(asset, out)
        assert [os.path.basename(p) for p in (first, second, third)] == [
            "a1b2c3.jpg", "a1b2c3_1.jpg", "a1b2c3_2.jpg",
        ]
        assert all(os.path.isfile(p) for p in (first, second, third))

    def test_not_configured(self, asset):
        with pytest.raises(file_ops.QuickSaveNotConfigured):
            file_ops.quick_save(asset, "")


class TestOpenFolder:
    def test_command_per_platform(self):
        with patch.object(sys, "platform", "win32"):
            assert file_ops.open_folder_command("C:\\x") == ["explorer.exe", "C:\\x"]
        with patch.object(sys, "platform", "darwin"):
            assert file_ops.open_folder_command("/x") == ["open", "/x"]
        with patch.object(sys, "platform", "linux"):
            assert file_ops.open_folder_command("/x") == ["xdg-open", "/x"]

    def test_launches_file_manager(self, asset):
        with patch("core.file_ops.subprocess.Popen") as popen:
            assert file_ops.open_containing_folder(asset) is True
        assert popen.call_args[0][0][-1] == asset.directory

    def test_missing_directory(self, tmp_path):
        ghost = Asset(str(tmp_path / "gone" / "x.jpg"), 1, FolderKind.SPOTLIGHT)
        with patch("core.file_ops.subprocess.Popen") as popen:
            assert file_ops.open_containing_folder(ghost) is False
        popen.assert_not_called()

    def test_launch_failure(self, asset):
        with patch("core.file_ops.subprocess.Popen", side_effect=OSError("no xdg-open")):
            assert file_ops.open_containing_folder(asset) is False
