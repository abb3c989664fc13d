# core/folder_roots.py
"""Configured source directories and the policy for mapping a path to its folder kind."""
import logging
import os
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from core.models import FOLDER_KINDS, FolderKind

logger = logging.getLogger(__name__)

_USER_DIR = os.path.expanduser("~")

# Windows locations of the three asset caches, relative to the user profile.
DEFAULT_RELATIVE_PATHS: Dict[FolderKind, Tuple[str, ...]] = {
    FolderKind.USER_ASSETS: (
        "AppData", "Local", "Packages",
        "Microsoft.Windows.ContentDeliveryManager_cw5n1h2txyewy",
        "LocalState", "Assets",
    ),
    FolderKind.LOCK_SCREEN: (
        "AppData", "Roaming", "Microsoft", "Windows", "Themes",
    ),
    FolderKind.SPOTLIGHT: (
        "AppData", "Local", "Packages",
        "MicrosoftWindows.Client.CBS_cw5n1h2txyewy",
        "LocalCache", "Microsoft", "IrisService",
    ),
}


def default_path(kind: FolderKind, user_dir: str = _USER_DIR) -> str:
    return os.path.join(user_dir, *DEFAULT_RELATIVE_PATHS[kind])


class PathMatchPolicy(Enum):
    """How paths are compared when deciding which root owns a file."""

    NATIVE = "native"                      # os.path.normcase: folds case on Windows only
    CASE_INSENSITIVE = "case_insensitive"
    CASE_SENSITIVE = "case_sensitive"

    @classmethod
    def parse(cls, value) -> "PathMatchPolicy":
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.warning(f"Unknown path matching policy '{value}', using native")
            return cls.NATIVE

    def normalize(self, path: str) -> str:
        path = os.path.normpath(os.path.abspath(path))
        if self is PathMatchPolicy.CASE_INSENSITIVE:
            return path.casefold()
        if self is PathMatchPolicy.NATIVE:
            return os.path.normcase(path)
        return path


class FolderRoots:
    """Ordered (folder kind, directory) pairs the catalog scans.

    A path belongs to the root that contains it on whole path components;
    when roots nest, the longest (most specific) root wins, so classification
    is never ambiguous.
    """

    def __init__(self, paths: Mapping[FolderKind, str],
                 policy: PathMatchPolicy = PathMatchPolicy.NATIVE):
        missing = [k for k in FOLDER_KINDS if k not in paths]
        if missing:
            raise ValueError(f"No directory configured for {', '.join(k.value for k in missing)}")
        self.policy = policy
        self._paths: Dict[FolderKind, str] = {k: paths[k] for k in FOLDER_KINDS}

    @classmethod
    def from_config(cls, config_manager, user_dir: str = _USER_DIR) -> "FolderRoots":
        """Build roots from defaults, replacing any kind with a non-empty ``folders.<kind>`` override."""
        paths = {}
        for kind in FOLDER_KINDS:
            override = config_manager.get(f"folders.{kind.value}", "") if config_manager else ""
            if override:
                paths[kind] = os.path.expanduser(str(override))
            else:
                paths[kind] = default_path(kind, user_dir)
        policy = PathMatchPolicy.parse(
            config_manager.get("path_matching", "native") if config_manager else "native"
        )
        return cls(paths, policy)

    def __iter__(self) -> Iterator[Tuple[FolderKind, str]]:
        return iter(self.pairs())

    def pairs(self) -> List[Tuple[FolderKind, str]]:
        return [(kind, self._paths[kind]) for kind in FOLDER_KINDS]

    def path_for(self, kind: FolderKind) -> str:
        return self._paths[kind]

    def exists(self, kind: FolderKind) -> bool:
        return os.path.isdir(self._paths[kind])

    def existing_kinds(self) -> List[FolderKind]:
        return [kind for kind in FOLDER_KINDS if self.exists(kind)]

    def classify(self, path: str) -> Optional[FolderKind]:
        """Return the folder kind whose root contains *path*, or None."""
        target = self.policy.normalize(path)
        best: Optional[FolderKind] = None
        best_len = -1
        for kind, root in self.pairs():
            norm_root = self.policy.normalize(root)
            if target == norm_root or target.startswith(norm_root.rstrip(os.sep) + os.sep):
                if len(norm_root) > best_len:
                    best, best_len = kind, len(norm_root)
        return best
