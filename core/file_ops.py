# core/file_ops.py
"""Save, quick-save and open-folder operations for a selected asset.

Saved copies are always re-encoded to JPEG; the caller only chooses where.
"""
import logging
import os
import subprocess
import sys
from typing import List

from PIL import Image, ImageOps

from core.models import Asset

logger = logging.getLogger(__name__)

OUTPUT_EXTENSION = ".jpg"


class QuickSaveNotConfigured(Exception):
    """Raised when a quick save is requested before a quick-save folder is set."""


def suggested_filename(asset: Asset, suffix: str = "") -> str:
    return f"{asset.stem}{suffix}{OUTPUT_EXTENSION}"


def unique_save_path(folder: str, asset: Asset) -> str:
    """Return ``{stem}.jpg`` in *folder*, or the first free ``{stem}_N.jpg``."""
    path = os.path.join(folder, suggested_filename(asset))
    counter = 1
    while os.path.exists(path):
        path = os.path.join(folder, suggested_filename(asset, f"_{counter}"))
        counter += 1
    return path


def export_jpeg(source_path: str, output_path: str, quality: int = 95) -> None:
    """Re-encode *source_path* as JPEG at *output_path*.

    Raises OSError / ValueError from Pillow or the filesystem; callers decide
    how to report them.
    """
    with Image.open(source_path) as img:
        img = ImageOps.exif_transpose(img)
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        out_dir = os.path.dirname(output_path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        img.save(output_path, "JPEG", quality=quality)
    logger.info(f"Saved {source_path} as {output_path}")


def quick_save(asset: Asset, quick_save_folder: str) -> str:
    """Save *asset* into the quick-save folder under a non-clashing name and return the path."""
    if not quick_save_folder:
        raise QuickSaveNotConfigured(
            "Please set a quick save folder first using Settings > Set Quick Save Folder"
        )
    output_path = unique_save_path(quick_save_folder, asset)
    export_jpeg(asset.path, output_path)
    return output_path


def open_folder_command(directory: str) -> List[str]:
    if sys.platform == "win32":
        return ["explorer.exe", directory]
    if sys.platform == "darwin":
        return ["open", directory]
    return ["xdg-open", directory]


def open_containing_folder(asset: Asset) -> bool:
    """Launch the platform file manager on the asset's directory."""
    directory = asset.directory
    if not os.path.isdir(directory):
        logger.warning(f"Cannot open folder, it no longer exists: {directory}")
        return False
    try:
        subprocess.Popen(
            open_folder_command(directory),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=sys.platform != "win32",
        )
        return True
    except OSError as e:
        logger.warning(f"Failed to open folder {directory}: {e}")
        return False
