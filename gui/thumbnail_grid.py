from typing import Dict, List, Tuple
from PySide6.QtWidgets import QListWidget, QListWidgetItem, QListView, QLabel, QAbstractItemView
from PySide6.QtCore import Qt, QSize, QTimer, Signal
import logging

from core.models import Asset
from core.view_sync import NO_RESULTS_TEXT
from utils.thumbnails import thumbnail_pixmap

_ITEM_ID_ROLE = Qt.UserRole
_THUMBNAIL_BATCH = 24


class ThumbnailGrid(QListWidget):
    """Icon-mode list of every asset; filtering only hides cells, it never removes them."""

    itemActivatedId = Signal(int)
    itemSelectedId = Signal(int)
    contextMenuRequestedId = Signal(int, object)  # (item id, global QPoint)

    def __init__(self, config_manager=None, parent=None):
        super().__init__(parent)
        self.config_manager = config_manager
        width = int(self._config("gui.thumbnail_width", 100))
        height = int(self._config("gui.thumbnail_height", 60))
        self.thumbnail_size = (width, height)

        self.setViewMode(QListView.IconMode)
        self.setResizeMode(QListView.Adjust)
        self.setMovement(QListView.Static)
        self.setUniformItemSizes(True)
        self.setWordWrap(True)
        self.setIconSize(QSize(width, height))
        self.setGridSize(QSize(width + 30, height + 40))
        self.setSpacing(4)
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.setContextMenuPolicy(Qt.CustomContextMenu)
        self.setStyleSheet(f"QListWidget {{ background-color: {self._config('gui.background_color', '#282828')}; color: white; }}")

        self._items: Dict[int, QListWidgetItem] = {}
        self._pending: List[Tuple[QListWidgetItem, str]] = []
        self._thumbnail_timer = QTimer(self)
        self._thumbnail_timer.setInterval(0)
        self._thumbnail_timer.timeout.connect(self._load_thumbnail_batch)

        self._no_results = QLabel(NO_RESULTS_TEXT, self.viewport())
        self._no_results.setAlignment(Qt.AlignCenter)
        self._no_results.setStyleSheet("color: white; font-size: 14px;")
        self._no_results.hide()

        self.itemDoubleClicked.connect(lambda item: self.itemActivatedId.emit(item.data(_ITEM_ID_ROLE)))
        self.currentItemChanged.connect(self._on_current_changed)
        self.customContextMenuRequested.connect(self._on_context_menu)

    def _config(self, key, default):
        return self.config_manager.get(key, default) if self.config_manager else default

    def populate(self, entries: List[Tuple[int, Asset]]):
        """Rebuild the grid from (item id, asset) pairs. Thumbnails load in small batches afterwards."""
        self._thumbnail_timer.stop()
        self.clear()
        self._items.clear()
        self._pending.clear()
        for item_id, asset in entries:
            item = QListWidgetItem(asset.describe())
            item.setData(_ITEM_ID_ROLE, item_id)
            item.setToolTip(asset.path)
            item.setTextAlignment(Qt.AlignHCenter | Qt.AlignTop)
            self.addItem(item)
            self._items[item_id] = item
            self._pending.append((item, asset.path))
        if self._pending:
            self._thumbnail_timer.start()
        logging.debug(f"Thumbnail grid populated with {len(entries)} items")

    def _load_thumbnail_batch(self):
        batch, self._pending = self._pending[:_THUMBNAIL_BATCH], self._pending[_THUMBNAIL_BATCH:]
        for item, path in batch:
            pixmap = thumbnail_pixmap(path, self.thumbnail_size)
            if pixmap is not None:
                item.setIcon(pixmap)
        if not self._pending:
            self._thumbnail_timer.stop()

    def set_item_visible(self, item_id: int, visible: bool):
        item = self._items.get(item_id)
        if item is None:
            logging.warning(f"Unknown grid item id {item_id}")
            return
        item.setHidden(not visible)

    def set_no_results_visible(self, visible: bool):
        self._no_results.setVisible(visible)
        if visible:
            self._position_no_results()

    def clear_selection(self):
        self.blockSignals(True)
        self.clearSelection()
        self.setCurrentItem(None)
        self.blockSignals(False)

    def _on_current_changed(self, current, previous):
        if current is not None:
            self.itemSelectedId.emit(current.data(_ITEM_ID_ROLE))

    def _on_context_menu(self, pos):
        item = self.itemAt(pos)
        if item is None:
            return
        self.setCurrentItem(item)
        self.contextMenuRequestedId.emit(item.data(_ITEM_ID_ROLE), self.viewport().mapToGlobal(pos))

    def _position_no_results(self):
        self._no_results.setGeometry(self.viewport().rect())

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._position_no_results()
