from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QApplication
from PySide6.QtCore import Qt, QEvent
from PySide6.QtGui import QPixmap
import logging

from core.models import Asset

_SCREEN_FRACTION = 0.7
_MAX_NAME_LENGTH = 33


def overlay_text(asset: Asset, width: int, height: int, fits_portrait: bool) -> str:
    name = asset.name
    if fits_portrait and len(name) > _MAX_NAME_LENGTH:
        name = name[:_MAX_NAME_LENGTH] + "..."
    return f"{name} - {width}x{height} - {asset.size_kib} KB"


class ImagePopup(QWidget):
    """Frameless preview scaled to 70% of the screen; any left click or focus loss closes it."""

    def __init__(self, asset: Asset, parent=None):
        super().__init__(parent, Qt.Window | Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint)
        self.setAttribute(Qt.WA_DeleteOnClose)
        self.setStyleSheet("background-color: black;")
        self.asset = asset

        pixmap = QPixmap(asset.path)
        if pixmap.isNull():
            logging.warning(f"Could not load image for preview: {asset.path}")

        screen = QApplication.primaryScreen()
        geometry = screen.availableGeometry() if screen else None
        screen_w = geometry.width() if geometry else 1024
        screen_h = geometry.height() if geometry else 768

        img_w = max(pixmap.width(), 1)
        img_h = max(pixmap.height(), 1)
        ratio = min(screen_w * _SCREEN_FRACTION / img_w, screen_h * _SCREEN_FRACTION / img_h)
        final_w, final_h = int(img_w * ratio), int(img_h * ratio)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._image_label = QLabel()
        self._image_label.setAlignment(Qt.AlignCenter)
        if not pixmap.isNull():
            self._image_label.setPixmap(
                pixmap.scaled(final_w, final_h, Qt.KeepAspectRatio, Qt.SmoothTransformation)
            )
        layout.addWidget(self._image_label, 1)

        self._overlay = QLabel(overlay_text(asset, pixmap.width(), pixmap.height(), final_w < final_h))
        self._overlay.setAlignment(Qt.AlignCenter)
        self._overlay.setFixedHeight(30)
        self._overlay.setStyleSheet(
            "background-color: rgba(0, 0, 0, 160); color: white; font-weight: bold;"
        )
        layout.addWidget(self._overlay)

        self.resize(final_w, final_h)
        if geometry:
            self.move(geometry.center() - self.rect().center())

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.close()
            return
        super().mousePressEvent(event)

    def changeEvent(self, event):
        if event.type() == QEvent.ActivationChange and not self.isActiveWindow():
            self.close()
        super().changeEvent(event)
