"""Tests for core.asset_scanner: root walking, size floor, decode checks, cancellation."""
import os

from conftest import MockConfigManager, make_image
from core.asset_scanner import (
    MIN_FILE_SIZE, AssetScanner, CancellationToken, ScanResult, read_dimensions,
)
from core.folder_roots import FolderRoots
from core.models import FolderKind


class TestScan:
    def test_small_files_are_excluded(self, roots, wallpaper_set):
        result = AssetScanner(roots).scan()

        paths = {a.path for a in result.assets}
        assert paths == {wallpaper_set["landscape"], wallpaper_set["portrait"]}
        assert result.too_small == 1
        assert result.files_seen == 3
        assert not result.cancelled

    def test_assets_carry_kind_and_dimensions(self, roots, wallpaper_set):
        result = AssetScanner(roots).scan()
        by_path = {a.path: a for a in result.assets}

        land = by_path[wallpaper_set["landscape"]]
        assert land.source_folder is FolderKind.USER_ASSETS
        assert land.dimensions == (1920, 1080)
        assert land.size_bytes == os.path.getsize(wallpaper_set["landscape"])

        port = by_path[wallpaper_set["portrait"]]
        assert port.source_folder is FolderKind.LOCK_SCREEN
        assert port.dimensions == (1080, 1920)

    def test_extensionless_files_are_decoded(self, roots, folder_dirs):
        # Content-delivery caches store images without an extension.
        path = make_image(folder_dirs[FolderKind.USER_ASSETS] / "a1b2c3d4", (800, 600))
        result = AssetScanner(roots).scan()
        assert [a.path for a in result.assets] == [path]

    def test_corrupt_file_is_skipped(self, roots, folder_dirs, wallpaper_set):
        junk = folder_dirs[FolderKind.SPOTLIGHT] / "junk.jpg"
        junk.write_bytes(b"\xff\xd8not really a jpeg" * 10000)

        result = AssetScanner(roots).scan()

        assert str(junk) not in {a.path for a in result.assets}
        assert result.undecodable == 1
        assert len(result.assets) == 2

    def test_missing_roots_are_skipped(self, tmp_path, folder_dirs, wallpaper_set):
        roots = FolderRoots({
            FolderKind.USER_ASSETS: str(folder_dirs[FolderKind.USER_ASSETS]),
            FolderKind.LOCK_SCREEN: str(tmp_path / "nope"),
            FolderKind.SPOTLIGHT: str(tmp_path / "also-nope"),
        })
        result = AssetScanner(roots).scan()

        assert [a.path for a in result.assets] == [wallpaper_set["landscape"]]
        assert result.missing_roots == [str(tmp_path / "nope"), str(tmp_path / "also-nope")]

    def test_subdirectories_are_walked(self, roots, folder_dirs):
        path = make_image(folder_dirs[FolderKind.LOCK_SCREEN] / "CachedFiles" / "img.bmp", (1024, 768))
        result = AssetScanner(roots).scan()
        assert [a.path for a in result.assets] == [path]

    def test_overlapping_roots_yield_unique_paths(self, tmp_path):
        outer = tmp_path / "outer"
        inner = outer / "inner"
        make_image(outer / "a.bmp", (800, 600))
        make_image(inner / "b.bmp", (600, 800))
        roots = FolderRoots({
            FolderKind.USER_ASSETS: str(outer),
            FolderKind.LOCK_SCREEN: str(inner),
            FolderKind.SPOTLIGHT: str(tmp_path / "missing"),
        })

        result = AssetScanner(roots).scan()

        paths = [a.path for a in result.assets]
        assert len(paths) == len(set(paths)) == 2
        kinds = {os.path.basename(a.path): a.source_folder for a in result.assets}
        assert kinds == {"a.bmp": FolderKind.USER_ASSETS, "b.bmp": FolderKind.LOCK_SCREEN}

    def test_min_file_size_from_config(self, roots, wallpaper_set):
        scanner = AssetScanner.from_config(roots, MockConfigManager({"min_file_size": 0}))
        assert scanner.min_file_size == 0
        assert len(scanner.scan().assets) == 3

    def test_default_min_file_size(self, roots):
        assert AssetScanner.from_config(roots).min_file_size == MIN_FILE_SIZE == 50 * 1024

    def test_unusable_min_file_size_falls_back(self, roots):
        for bad in ("huge", -1, [50]):
            scanner = AssetScanner.from_config(roots, MockConfigManager({"min_file_size": bad}))
            assert scanner.min_file_size == MIN_FILE_SIZE


class TestProgressAndCancellation:
    def test_progress_reports_every_file(self, roots, wallpaper_set):
        steps = []
        AssetScanner(roots).scan(progress=steps.append)

        assert [s.index for s in steps] == [1, 2, 3]
        assert all(s.total == 3 for s in steps)
        assert sum(1 for s in steps if s.accepted) == 2

    def test_cancel_returns_partial_result(self, roots, folder_dirs):
        for i in range(5):
            make_image(folder_dirs[FolderKind.SPOTLIGHT] / f"img_{i}.bmp", (800, 600))
        token = CancellationToken()
        steps = []

        def on_progress(step):
            steps.append(step)
            if step.index == 2:
                token.cancel()

        result = AssetScanner(roots).scan(progress=on_progress, cancel_token=token)

        assert result.cancelled
        assert len(steps) == 2
        assert len(result.assets) == 2

    def test_cancel_before_start_stops_after_first_file(self, roots, wallpaper_set):
        token = CancellationToken()
        token.cancel()
        result = AssetScanner(roots).scan(cancel_token=token)
        assert result.cancelled
        assert result.files_seen == 1

    def test_broken_progress_callback_does_not_abort(self, roots, wallpaper_set):
        def boom(step):
            raise RuntimeError("consumer bug")

        result = AssetScanner(roots).scan(progress=boom)
        assert len(result.assets) == 2


class TestReadDimensions:
    def test_reads_size(self, tmp_path):
        path = make_image(tmp_path / "x.png", (321, 123), fmt="PNG")
        assert read_dimensions(path) == (321, 123)

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        assert read_dimensions(str(path)) is None

    def test_missing_file(self, tmp_path):
        assert read_dimensions(str(tmp_path / "gone.jpg")) is None


def test_empty_scan_result_defaults():
    result = ScanResult()
    assert result.assets == []
    assert result.cancelled is False
