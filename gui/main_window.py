from typing import Dict, Optional
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QStackedWidget, QApplication, QFileDialog, QMessageBox,
    QToolBar, QToolButton, QMenu, QLabel, QSizePolicy,
)
from PySide6.QtCore import QSettings
from PySide6.QtGui import QAction
import logging
import os

from .status_bar import CustomStatusBar
from .thumbnail_grid import ThumbnailGrid
from .folder_tree import FolderTree
from .image_popup import ImagePopup
from .folders_dialog import FoldersDialog
from .about_dialog import AboutDialog, APP_NAME
from core import file_ops
from core.catalog import AssetCatalog
from core.event_system import (
    event_system, EventType, CatalogLoadedEventData, FolderWarningEventData, StatusMessageEventData,
)
from core.models import FOLDER_KINDS, FOLDER_LABELS, Asset, FolderKind, Orientation, Resolution
from core.view_sync import FilterControls, ViewMode


class MainWindow(QMainWindow):
    """Grid / tree browser over an AssetCatalog.

    The window is the catalog's view adapter: ViewSync calls the
    ``set_*`` methods below, and user input is forwarded to the catalog.
    """

    def __init__(self, config_manager, catalog: AssetCatalog):
        super().__init__()
        self.config_manager = config_manager
        self.catalog = catalog
        self._popup: Optional[ImagePopup] = None
        self._folder_actions: Dict[FolderKind, QAction] = {}

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self._layout = QVBoxLayout(self.central_widget)
        self._layout.setContentsMargins(0, 0, 0, 0)

        self.stacked_widget = QStackedWidget()
        self._layout.addWidget(self.stacked_widget)

        self.thumbnail_grid = ThumbnailGrid(self.config_manager)
        self.folder_tree = FolderTree()
        self.stacked_widget.addWidget(self.thumbnail_grid)
        self.stacked_widget.addWidget(self.folder_tree)
        for view in (self.thumbnail_grid, self.folder_tree):
            view.itemSelectedId.connect(self._on_item_selected)
            view.itemActivatedId.connect(self._on_item_activated)
            view.contextMenuRequestedId.connect(self._show_context_menu)

        self.status_bar = CustomStatusBar(self.config_manager, self)
        self.setStatusBar(self.status_bar)
        self.status_bar.orientation_selected.connect(
            lambda value: self.catalog.set_orientation(Orientation(value)))
        self.status_bar.resolution_selected.connect(
            lambda value: self.catalog.set_resolution(Resolution(value)))

        self._setup_toolbar()
        self._setup_event_subscriptions()

        self.setWindowTitle(APP_NAME)
        settings = QSettings("WallpaperViewer", "MainWindow")
        geometry = settings.value("geometry")
        if geometry:
            self.restoreGeometry(geometry)
        else:
            self.resize(800, 600)

        self._populate_views()
        self.catalog.bind_view(self)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _setup_toolbar(self):
        toolbar = QToolBar("Main", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        save_action = QAction("Save image", self)
        save_action.triggered.connect(lambda: self.save_image_as())
        toolbar.addAction(save_action)

        self._toggle_view_action = QAction("Tree view", self)
        self._toggle_view_action.triggered.connect(self.toggle_view_mode)
        toolbar.addAction(self._toggle_view_action)

        settings_menu = QMenu("Settings", self)
        for kind in FOLDER_KINDS:
            action = settings_menu.addAction(f"Show {FOLDER_LABELS[kind]}")
            action.setCheckable(True)
            action.toggled.connect(lambda checked, k=kind: self._on_folder_toggled(k, checked))
            self._folder_actions[kind] = action
        settings_menu.addSeparator()
        settings_menu.addAction("Configure Folders...").triggered.connect(self.open_folders_dialog)
        settings_menu.addAction("Set Quick Save Folder...").triggered.connect(self.choose_quick_save_folder)
        settings_menu.addSeparator()
        settings_menu.addAction("About").triggered.connect(lambda: AboutDialog(self).exec())

        settings_button = QToolButton(self)
        settings_button.setText("Settings")
        settings_button.setPopupMode(QToolButton.InstantPopup)
        settings_button.setMenu(settings_menu)
        toolbar.addWidget(settings_button)

        spacer = QWidget(self)
        spacer.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        toolbar.addWidget(spacer)

        self.counter_label = QLabel("")
        self.counter_label.setContentsMargins(0, 0, 8, 0)
        toolbar.addWidget(self.counter_label)

    def _setup_event_subscriptions(self):
        event_system.subscribe(EventType.STATUS_MESSAGE, self._handle_status_message)
        event_system.subscribe(EventType.FOLDER_WARNING, self._handle_folder_warning)
        event_system.subscribe(EventType.CATALOG_LOADED, self._handle_catalog_loaded)

    def _teardown_event_subscriptions(self):
        event_system.unsubscribe(EventType.STATUS_MESSAGE, self._handle_status_message)
        event_system.unsubscribe(EventType.FOLDER_WARNING, self._handle_folder_warning)
        event_system.unsubscribe(EventType.CATALOG_LOADED, self._handle_catalog_loaded)

    def _populate_views(self):
        self.thumbnail_grid.populate(self.catalog.view_sync.grid_entries())
        self.folder_tree.populate(self.catalog.view_sync.tree_entries(), self.catalog.store.counts_by_folder())

    # ------------------------------------------------------------------
    # View adapter
    # ------------------------------------------------------------------

    def set_grid_item_visible(self, item_id: int, visible: bool):
        self.thumbnail_grid.set_item_visible(item_id, visible)

    def set_tree_branch_present(self, kind: FolderKind, present: bool):
        self.folder_tree.set_branch_present(kind, present)
        action = self._folder_actions[kind]
        if action.isChecked() != present:
            action.blockSignals(True)
            action.setChecked(present)
            action.blockSignals(False)

    def set_no_results_visible(self, visible: bool):
        self.thumbnail_grid.set_no_results_visible(visible)

    def set_counter_text(self, text: str):
        self.counter_label.setText(text)

    def set_filter_controls(self, controls: FilterControls):
        self.status_bar.setFilterControls(controls)

    def set_view_mode(self, mode: ViewMode):
        if mode is ViewMode.GRID:
            self.stacked_widget.setCurrentWidget(self.thumbnail_grid)
            self._toggle_view_action.setText("Tree view")
        else:
            self.stacked_widget.setCurrentWidget(self.folder_tree)
            self._toggle_view_action.setText("Grid view")

    def clear_selection(self):
        self.thumbnail_grid.clear_selection()
        self.folder_tree.clear_selection()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def toggle_view_mode(self):
        self.catalog.toggle_view_mode()

    def _on_folder_toggled(self, kind: FolderKind, checked: bool):
        if not self.catalog.set_folder_visible(kind, checked):
            # No branch change is pushed when the kind was already hidden.
            action = self._folder_actions[kind]
            action.blockSignals(True)
            action.setChecked(False)
            action.blockSignals(False)

    def _on_item_selected(self, item_id: int):
        asset = self.catalog.select_item(item_id)
        if asset is not None:
            self.status_bar.setMessage(f"{asset.name} ({asset.describe()})", self.catalog.notification_timeout)

    def _on_item_activated(self, item_id: int):
        asset = self.catalog.select_item(item_id)
        if asset is not None:
            self.open_preview(asset)

    def _show_context_menu(self, item_id: int, global_pos):
        asset = self.catalog.select_item(item_id)
        if asset is None:
            return
        menu = QMenu(self)
        menu.addAction("Open in preview").triggered.connect(lambda: self.open_preview(asset))
        menu.addAction("Quick save").triggered.connect(lambda: self.quick_save(asset))
        menu.addAction("Save to...").triggered.connect(lambda: self.save_image_as(asset))
        menu.addAction("Open image folder").triggered.connect(lambda: self.open_image_folder(asset))
        menu.exec(global_pos)

    def open_preview(self, asset: Asset):
        if self._popup is not None:
            self._popup.close()
        self._popup = ImagePopup(asset, self)
        self._popup.destroyed.connect(self._on_popup_destroyed)
        self._popup.show()
        self._popup.activateWindow()

    def _on_popup_destroyed(self):
        self._popup = None

    def save_image_as(self, asset: Optional[Asset] = None):
        suggestion = self.catalog.save_suggestion(asset)
        if suggestion is None:
            self.catalog.notify("Please select an image first")
            return
        source_path, filename = suggestion
        start_dir = self.config_manager.get("quick_save_path", "") or os.path.expanduser("~")
        output_path, _ = QFileDialog.getSaveFileName(
            self, "Save Image", os.path.join(start_dir, filename), "JPEG Images (*.jpg)"
        )
        if not output_path:
            return
        try:
            file_ops.export_jpeg(source_path, output_path)
        except (OSError, ValueError) as e:
            logging.error(f"Saving {source_path} to {output_path} failed: {e}")
            self.catalog.notify(f"Could not save image: {e}")
            return
        self.catalog.notify(f"Image saved to: {output_path}")

    def quick_save(self, asset: Optional[Asset] = None):
        try:
            self.catalog.quick_save(self.config_manager.get("quick_save_path", ""), asset)
        except file_ops.QuickSaveNotConfigured as e:
            QMessageBox.warning(self, "Quick Save", str(e))

    def choose_quick_save_folder(self):
        current = self.config_manager.get("quick_save_path", "") or os.path.expanduser("~")
        folder = QFileDialog.getExistingDirectory(self, "Select Quick Save Folder", current)
        if not folder:
            return
        self.config_manager.set("quick_save_path", folder)
        logging.info(f"Quick save folder set to {folder}")
        self.catalog.notify(f"Quick save folder set to: {folder}")

    def open_image_folder(self, asset: Asset):
        if not file_ops.open_containing_folder(asset):
            self.catalog.notify(f"Could not open folder: {asset.directory}")

    def open_folders_dialog(self):
        FoldersDialog(self.config_manager, self).exec()
        self.catalog.notify("Folder changes take effect after a restart")

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _handle_status_message(self, event_data: StatusMessageEventData):
        self.status_bar.setMessage(event_data.message, event_data.timeout)

    def _handle_folder_warning(self, event_data: FolderWarningEventData):
        QMessageBox.warning(self, "Warning", event_data.message)

    def _handle_catalog_loaded(self, event_data: CatalogLoadedEventData):
        self._populate_views()

    def closeEvent(self, event):
        logging.info("GUI close requested.")
        if self._popup is not None:
            self._popup.close()
        self._teardown_event_subscriptions()
        self.catalog.persist(self.config_manager)
        settings = QSettings("WallpaperViewer", "MainWindow")
        settings.setValue("geometry", self.saveGeometry())
        settings.sync()
        event.accept()
        QApplication.instance().quit()
