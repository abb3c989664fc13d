import logging
from typing import Optional, Tuple

from PIL import Image, ImageOps
from PySide6.QtGui import QImage, QPixmap


def load_thumbnail(path: str, max_size: Tuple[int, int]) -> Optional[Image.Image]:
    """Decode *path* and shrink it to fit *max_size*, keeping the aspect ratio."""
    try:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img)
            img.thumbnail(max_size, Image.Resampling.BILINEAR)
            return img.convert("RGBA")
    except (OSError, ValueError, MemoryError, Image.DecompressionBombError) as e:
        logging.debug(f"Could not build thumbnail for {path}: {e}")
        return None


def pil_to_qimage(img: Image.Image) -> QImage:
    img = img.convert("RGBA")
    w, h = img.size
    data = img.tobytes("raw", "RGBA")
    return QImage(data, w, h, 4 * w, QImage.Format_RGBA8888).copy()


def thumbnail_pixmap(path: str, max_size: Tuple[int, int]) -> Optional[QPixmap]:
    img = load_thumbnail(path, max_size)
    if img is None:
        return None
    return QPixmap.fromImage(pil_to_qimage(img))
