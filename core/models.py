# core/models.py
"""Asset and filter-state value types shared by the scanner, engine and views."""
import os
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple


class FolderKind(Enum):
    USER_ASSETS = "user_assets"
    LOCK_SCREEN = "lock_screen"
    SPOTLIGHT = "spotlight"


# Fixed display / persistence order of the folder kinds.
FOLDER_KINDS: Tuple[FolderKind, ...] = (
    FolderKind.USER_ASSETS,
    FolderKind.LOCK_SCREEN,
    FolderKind.SPOTLIGHT,
)

FOLDER_LABELS: Dict[FolderKind, str] = {
    FolderKind.USER_ASSETS: "Assets folder",
    FolderKind.LOCK_SCREEN: "Lockscreen folder",
    FolderKind.SPOTLIGHT: "SpotLight folder",
}


class Orientation(IntEnum):
    ALL = 0
    PORTRAIT = 1
    LANDSCAPE = 2

    @property
    def label(self) -> str:
        return _ORIENTATION_LABELS[self]


class Resolution(IntEnum):
    # Ordinals are stored in config.yaml and belong to this app. There is no HD
    # slot, so settings written by other wallpaper tools do not map onto them.
    ALL = 0
    FULL_HD = 1
    PORTRAIT_FULL_HD = 2
    ULTRA_HD = 3

    @property
    def size(self) -> Optional[Tuple[int, int]]:
        """(width, height) an asset must match exactly, or None for ALL."""
        return _RESOLUTION_SIZES.get(self)

    @property
    def label(self) -> str:
        size = self.size
        if size is None:
            return "All Resolutions"
        return f"{size[0]}x{size[1]}"


_ORIENTATION_LABELS = {
    Orientation.ALL: "All",
    Orientation.PORTRAIT: "Portrait",
    Orientation.LANDSCAPE: "Landscape",
}

_RESOLUTION_SIZES = {
    Resolution.FULL_HD: (1920, 1080),
    Resolution.PORTRAIT_FULL_HD: (1080, 1920),
    Resolution.ULTRA_HD: (3840, 2160),
}


@dataclass(frozen=True)
class Asset:
    """One discovered image file. Immutable once the scan has produced it."""

    path: str
    size_bytes: int
    source_folder: FolderKind
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def stem(self) -> str:
        return os.path.splitext(self.name)[0]

    @property
    def directory(self) -> str:
        return os.path.dirname(self.path)

    @property
    def dimensions(self) -> Tuple[int, int]:
        # Undecoded assets count as 0x0 so every predicate stays total.
        return (self.width or 0, self.height or 0)

    @property
    def is_portrait(self) -> bool:
        w, h = self.dimensions
        return h > w

    @property
    def is_landscape(self) -> bool:
        w, h = self.dimensions
        return w > h

    @property
    def size_kib(self) -> int:
        return self.size_bytes // 1024

    def describe(self) -> str:
        """Caption shown under a grid thumbnail, e.g. ``1920x1080, 512 KB``."""
        w, h = self.dimensions
        return f"{w}x{h}, {self.size_kib} KB"


@dataclass(frozen=True)
class FolderVisibility:
    """Which folder kinds are shown.

    ``enabled`` holds the visible kinds; every other known kind is hidden, so
    the mapping view always has exactly one entry per kind.  ``initialized``
    is False only for state that was never configured; such state gets its
    defaults from directory existence (see :meth:`resolve_defaults`).
    """

    enabled: FrozenSet[FolderKind] = field(default_factory=frozenset)
    initialized: bool = True

    @classmethod
    def uninitialized(cls) -> "FolderVisibility":
        return cls(frozenset(), initialized=False)

    @classmethod
    def of(cls, kinds: Iterable[FolderKind]) -> "FolderVisibility":
        return cls(frozenset(kinds), initialized=True)

    @classmethod
    def all(cls) -> "FolderVisibility":
        return cls.of(FOLDER_KINDS)

    @classmethod
    def none(cls) -> "FolderVisibility":
        return cls.of(())

    def __post_init__(self):
        unknown = [k for k in self.enabled if not isinstance(k, FolderKind)]
        if unknown:
            raise ValueError(f"Unknown folder kinds: {unknown}")

    def is_visible(self, kind: FolderKind) -> bool:
        return kind in self.enabled

    def with_kind(self, kind: FolderKind, visible: bool) -> "FolderVisibility":
        enabled = set(self.enabled)
        if visible:
            enabled.add(kind)
        else:
            enabled.discard(kind)
        return FolderVisibility(frozenset(enabled), initialized=True)

    def as_dict(self) -> Dict[FolderKind, bool]:
        return {kind: kind in self.enabled for kind in FOLDER_KINDS}

    def resolve_defaults(self, existing: Iterable[FolderKind]) -> "FolderVisibility":
        """Populate never-configured state; configured state is returned as is."""
        if self.initialized:
            return self
        return FolderVisibility.of(existing)


@dataclass(frozen=True)
class FilterState:
    folders: FolderVisibility = field(default_factory=FolderVisibility.uninitialized)
    orientation: Orientation = Orientation.ALL
    resolution: Resolution = Resolution.ALL

    def with_folders(self, folders: FolderVisibility) -> "FilterState":
        return replace(self, folders=folders)

    def with_orientation(self, orientation: Orientation) -> "FilterState":
        return replace(self, orientation=orientation)

    def with_resolution(self, resolution: Resolution) -> "FilterState":
        return replace(self, resolution=resolution)
