# core/filter_codec.py
"""Scalar encoding of :class:`FilterState` for the settings store.

The folder visibility mask is a small bit set:

    0        never initialized
    bit 0    user assets
    bit 1    lock screen
    bit 2    spotlight
    bit 3    user explicitly chose no folders

Orientation and resolution are stored as their enum ordinals.
"""
import logging
from enum import IntFlag
from typing import Any, Dict, Mapping, Type, TypeVar

from core.models import FOLDER_KINDS, FilterState, FolderKind, FolderVisibility, Orientation, Resolution

logger = logging.getLogger(__name__)

ORIENTATION_KEY = "orientation_filter"
RESOLUTION_KEY = "resolution_filter"
FOLDER_MASK_KEY = "folder_visibility_mask"


class FolderMask(IntFlag):
    NOT_INITIALIZED = 0
    USER_ASSETS = 1 << 0
    LOCK_SCREEN = 1 << 1
    SPOTLIGHT = 1 << 2
    NONE = 1 << 3


_KIND_BITS = {
    FolderKind.USER_ASSETS: FolderMask.USER_ASSETS,
    FolderKind.LOCK_SCREEN: FolderMask.LOCK_SCREEN,
    FolderKind.SPOTLIGHT: FolderMask.SPOTLIGHT,
}

_E = TypeVar("_E", Orientation, Resolution)


def encode_folders(folders: FolderVisibility) -> int:
    if not folders.initialized:
        return int(FolderMask.NOT_INITIALIZED)
    mask = 0
    for kind in FOLDER_KINDS:
        if folders.is_visible(kind):
            mask |= _KIND_BITS[kind]
    if mask == 0:
        mask = FolderMask.NONE
    return int(mask)


def decode_folders(value: Any) -> FolderVisibility:
    mask = as_int(value)
    if mask is None or mask <= 0:
        if mask is None or mask < 0:
            logger.warning(f"Invalid folder visibility mask {value!r}, treating as not initialized")
        return FolderVisibility.uninitialized()
    # Kind bits win over the NONE bit; unknown high bits are ignored.
    return FolderVisibility.of(kind for kind in FOLDER_KINDS if mask & _KIND_BITS[kind])


def decode_enum(enum_cls: Type[_E], value: Any) -> _E:
    """Decode an ordinal, falling back to the ``ALL`` member when it is out of range."""
    ordinal = as_int(value)
    try:
        return enum_cls(ordinal)
    except ValueError:
        logger.warning(f"Invalid {enum_cls.__name__} value {value!r}, falling back to ALL")
        return enum_cls.ALL


def encode(state: FilterState) -> Dict[str, int]:
    return {
        FOLDER_MASK_KEY: encode_folders(state.folders),
        ORIENTATION_KEY: int(state.orientation),
        RESOLUTION_KEY: int(state.resolution),
    }


def decode(values: Mapping[str, Any]) -> FilterState:
    """Build a FilterState from stored scalars. Missing keys read as zero."""
    return FilterState(
        folders=decode_folders(values.get(FOLDER_MASK_KEY, 0)),
        orientation=decode_enum(Orientation, values.get(ORIENTATION_KEY, 0)),
        resolution=decode_enum(Resolution, values.get(RESOLUTION_KEY, 0)),
    )


def as_int(value: Any):
    # bool is an int subclass but never a meaningful stored value here
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def int_setting(value: Any, default: int, name: str) -> int:
    """Coerce a stored integer setting, falling back to *default* when unusable."""
    number = as_int(value)
    if number is None or number < 0:
        logger.warning(f"Invalid {name} value {value!r}, using {default}")
        return default
    return number
