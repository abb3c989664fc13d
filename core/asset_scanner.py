import os
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Set, Tuple

from PIL import Image

from core.filter_codec import int_setting
from core.folder_roots import FolderRoots
from core.models import Asset, FolderKind

# Files below this size are almost never full-resolution wallpapers; they are
# rejected on stat alone so the decoder never sees them.
MIN_FILE_SIZE = 50 * 1024

_DECODE_ERRORS = (OSError, ValueError, SyntaxError, MemoryError, Image.DecompressionBombError)


class CancellationToken:
    """Cooperative cancellation flag checked by the scanner at every yield point."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class ScanProgress:
    index: int          # 1-based position of the file just processed
    total: int
    path: str
    accepted: bool


@dataclass
class ScanResult:
    assets: List[Asset] = field(default_factory=list)
    missing_roots: List[str] = field(default_factory=list)
    files_seen: int = 0
    too_small: int = 0
    undecodable: int = 0
    cancelled: bool = False


ProgressCallback = Callable[[ScanProgress], None]


class AssetScanner:
    """Walks the configured roots and keeps every file that decodes as an image."""

    def __init__(self, roots: FolderRoots, min_file_size: int = MIN_FILE_SIZE):
        self.roots = roots
        self.min_file_size = min_file_size

    @classmethod
    def from_config(cls, roots: FolderRoots, config_manager=None) -> "AssetScanner":
        if config_manager is None:
            return cls(roots)
        min_size = int_setting(config_manager.get("min_file_size", MIN_FILE_SIZE), MIN_FILE_SIZE, "min_file_size")
        return cls(roots, min_size)

    def scan(self, progress: Optional[ProgressCallback] = None,
             cancel_token: Optional[CancellationToken] = None) -> ScanResult:
        """Run a full pass over every root and return the accepted assets.

        *progress* is called after each file; *cancel_token* is checked at the
        same points.  A cancelled scan returns what was accepted so far.
        """
        result = ScanResult()
        scan_start = time.monotonic()
        for step in self.iter_scan(result):
            if progress is not None:
                try:
                    progress(step)
                except Exception as e:  # why: a broken progress consumer must not abort the scan
                    logging.error(f"Scan progress callback failed: {e}", exc_info=True)
            if cancel_token is not None and cancel_token.is_cancelled:
                result.cancelled = True
                logging.info(f"Scan cancelled after {step.index} of {step.total} files")
                break

        elapsed = time.monotonic() - scan_start
        logging.info(
            f"Scan finished: {len(result.assets)} assets from {result.files_seen} files "
            f"({result.too_small} too small, {result.undecodable} undecodable, "
            f"{len(result.missing_roots)} missing roots, {elapsed:.2f}s)"
        )
        return result

    def iter_scan(self, result: ScanResult) -> Iterator[ScanProgress]:
        """Generator that processes one file per step, filling *result* as it goes."""
        candidates = self._collect_files(result)
        total = len(candidates)
        seen_paths: Set[str] = set()

        for index, (kind, path) in enumerate(candidates, start=1):
            result.files_seen += 1
            accepted = False
            key = self.roots.policy.normalize(path)
            if key not in seen_paths:
                seen_paths.add(key)
                asset = self._inspect(kind, path, result)
                if asset is not None:
                    result.assets.append(asset)
                    accepted = True
            yield ScanProgress(index=index, total=total, path=path, accepted=accepted)

    def _collect_files(self, result: ScanResult) -> List[Tuple[FolderKind, str]]:
        """List every file under the existing roots in root order, then walk order."""
        files: List[Tuple[FolderKind, str]] = []
        for kind, root in self.roots.pairs():
            if not os.path.isdir(root):
                logging.debug(f"Root for {kind.value} does not exist, skipping: {root}")
                result.missing_roots.append(root)
                continue
            try:
                for dirpath, _, filenames in os.walk(root):
                    for filename in filenames:
                        full_path = os.path.join(dirpath, filename)
                        # Nested roots: the most specific root owns the file.
                        owner = self.roots.classify(full_path) or kind
                        files.append((owner, full_path))
            except Exception as e:  # why: os.walk can raise on unexpected filesystem errors; one root must not abort the others
                logging.error(f"Error walking {root}: {e}", exc_info=True)
        return files

    def _inspect(self, kind: FolderKind, path: str, result: ScanResult) -> Optional[Asset]:
        try:
            size = os.path.getsize(path)
        except OSError as e:
            logging.debug(f"Cannot stat {path}: {e}")
            result.undecodable += 1
            return None

        if size < self.min_file_size:
            result.too_small += 1
            return None

        dimensions = read_dimensions(path)
        if dimensions is None:
            result.undecodable += 1
            return None

        width, height = dimensions
        return Asset(path=path, size_bytes=size, source_folder=kind, width=width, height=height)


def read_dimensions(path: str) -> Optional[Tuple[int, int]]:
    """Open *path* with Pillow and return its (width, height), or None if it is not a usable image."""
    try:
        with Image.open(path) as img:
            width, height = img.size
            img.verify()
        return width, height
    except _DECODE_ERRORS as e:
        logging.debug(f"Skipping undecodable file {path}: {e}")
        return None
