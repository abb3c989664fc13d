import logging
import time
from typing import Iterable, Mapping, Optional, Tuple

from core import file_ops, filter_codec
from core.asset_scanner import ScanResult
from core.event_system import (
    CatalogLoadedEventData, EventSystem, EventType, FiltersAppliedEventData,
    FolderWarningEventData, SelectionChangedEventData, StatusMessageEventData,
    ViewModeEventData, event_system,
)
from core.filter_engine import FilterEngine, VisibilityReport
from core.folder_roots import FolderRoots
from core.metadata_store import MetadataStore
from core.models import Asset, FilterState, FolderKind, Orientation, Resolution
from core.view_sync import ViewAdapter, ViewMode, ViewSync

DEFAULT_STATUS_MESSAGE = "Double click an image from the list to view"
DEFAULT_NOTIFICATION_TIMEOUT = 3000  # ms

VIEW_SETTINGS_PREFIX = "view"


class AssetCatalog:
    """Single owner of the asset store, the filter state and the last visibility report.

    Every filter change goes through a setter here, which re-runs the
    FilterEngine and hands the result to ViewSync before returning.
    """

    def __init__(self, roots: FolderRoots, filter_state: Optional[FilterState] = None,
                 view_mode: ViewMode = ViewMode.GRID, events: Optional[EventSystem] = None,
                 notification_timeout: int = DEFAULT_NOTIFICATION_TIMEOUT):
        self.roots = roots
        self.events = events or event_system
        self.notification_timeout = notification_timeout
        self.engine = FilterEngine()
        self.store = MetadataStore()
        self.view_sync = ViewSync(self.store, view_mode=view_mode)
        self._filter_state = FilterState()
        self._report = VisibilityReport()
        self.restore_filter_state(filter_state or FilterState())

    @classmethod
    def from_config(cls, config_manager, roots: FolderRoots,
                    events: Optional[EventSystem] = None) -> "AssetCatalog":
        """Restore filter state and view mode from the persisted view settings."""
        view_settings = config_manager.get(VIEW_SETTINGS_PREFIX, {}) or {}
        if not isinstance(view_settings, Mapping):
            logging.warning(f"Ignoring malformed view settings {view_settings!r}, using defaults")
            view_settings = {}
        state = filter_codec.decode(view_settings)
        grid_mode = view_settings.get("grid_mode", True)
        view_mode = ViewMode.GRID if grid_mode is not False else ViewMode.TREE
        timeout = filter_codec.int_setting(
            config_manager.get("notification_timeout", DEFAULT_NOTIFICATION_TIMEOUT),
            DEFAULT_NOTIFICATION_TIMEOUT, "notification_timeout")
        return cls(roots, state, view_mode=view_mode, events=events, notification_timeout=timeout)

    # ------------------------------------------------------------------
    # Contents
    # ------------------------------------------------------------------

    def bind_view(self, adapter: ViewAdapter) -> None:
        """Attach *adapter* and push the complete current view state into it.

        The adapter must already hold widgets for ``view_sync.grid_entries()``
        and ``view_sync.tree_entries()``.
        """
        self.view_sync.adapter = adapter
        adapter.set_view_mode(self.view_sync.view_mode)
        self.view_sync.invalidate()
        self.refresh()

    def load(self, scan_result: ScanResult) -> VisibilityReport:
        return self.load_assets(scan_result.assets, cancelled=scan_result.cancelled)

    def load_assets(self, assets: Iterable[Asset], cancelled: bool = False) -> VisibilityReport:
        """Replace the catalog contents wholesale and re-evaluate."""
        self.store = MetadataStore(assets)
        self.view_sync.reset(self.store)
        logging.info(f"Catalog loaded {len(self.store)} assets{' (partial scan)' if cancelled else ''}")
        self.events.publish(CatalogLoadedEventData(
            event_type=EventType.CATALOG_LOADED,
            source="AssetCatalog",
            timestamp=time.time(),
            asset_count=len(self.store),
            cancelled=cancelled,
        ))
        return self.refresh()

    # ------------------------------------------------------------------
    # Filter state
    # ------------------------------------------------------------------

    @property
    def filter_state(self) -> FilterState:
        return self._filter_state

    @property
    def report(self) -> VisibilityReport:
        return self._report

    def restore_filter_state(self, state: FilterState) -> VisibilityReport:
        folders = state.folders.resolve_defaults(self.roots.existing_kinds())
        if folders is not state.folders:
            logging.info(f"Folder visibility not configured, defaulting to existing folders: "
                         f"{sorted(k.value for k in folders.enabled)}")
        self._filter_state = state.with_folders(folders)
        return self.refresh()

    def set_orientation(self, orientation: Orientation) -> VisibilityReport:
        self._filter_state = self._filter_state.with_orientation(Orientation(orientation))
        return self.refresh()

    def set_resolution(self, resolution: Resolution) -> VisibilityReport:
        self._filter_state = self._filter_state.with_resolution(Resolution(resolution))
        return self.refresh()

    def set_folder_visible(self, kind: FolderKind, visible: bool) -> bool:
        """Show or hide a folder kind.

        Enabling a folder whose directory does not exist is rejected: the
        entry is forced off, a FOLDER_WARNING is published and False is
        returned so the caller can revert its toggle.
        """
        accepted = True
        if visible and not self.roots.exists(kind):
            path = self.roots.path_for(kind)
            logging.warning(f"Refusing to show {kind.value}: directory does not exist: {path}")
            self.events.publish(FolderWarningEventData(
                event_type=EventType.FOLDER_WARNING,
                source="AssetCatalog",
                timestamp=time.time(),
                folder_kind=kind.value,
                path=path,
                message=f"Directory '{path}' does not exist!",
            ))
            visible = False
            accepted = False
        self._filter_state = self._filter_state.with_folders(
            self._filter_state.folders.with_kind(kind, visible)
        )
        self.refresh()
        return accepted

    def refresh(self) -> VisibilityReport:
        """Re-run the FilterEngine over every asset and sync the views."""
        report = self.engine.evaluate(self.store, self._filter_state)
        self._report = report
        self.view_sync.apply(report, self._filter_state)
        self.events.publish(FiltersAppliedEventData(
            event_type=EventType.FILTERS_APPLIED,
            source="AssetCatalog",
            timestamp=time.time(),
            visible_count=report.visible_count,
            passes_folder_filter=report.passes_folder_filter,
            total=report.total,
        ))
        return report

    # ------------------------------------------------------------------
    # View mode and selection
    # ------------------------------------------------------------------

    @property
    def view_mode(self) -> ViewMode:
        return self.view_sync.view_mode

    def toggle_view_mode(self) -> ViewMode:
        mode = self.view_sync.toggle_view_mode()
        self.events.publish(ViewModeEventData(
            event_type=EventType.VIEW_MODE_CHANGED,
            source="AssetCatalog",
            timestamp=time.time(),
            grid_mode=mode is ViewMode.GRID,
        ))
        return mode

    def select_item(self, item_id: int) -> Optional[Asset]:
        asset_id = self.view_sync.select_item(item_id)
        self.events.publish(SelectionChangedEventData(
            event_type=EventType.SELECTION_CHANGED,
            source="AssetCatalog",
            timestamp=time.time(),
            asset_id=asset_id,
        ))
        return self.store.get(asset_id) if asset_id is not None else None

    def asset_for_item(self, item_id: int) -> Optional[Asset]:
        asset_id = self.view_sync.asset_for_item(item_id)
        return self.store.get(asset_id) if asset_id is not None else None

    @property
    def selected_asset(self) -> Optional[Asset]:
        asset_id = self.view_sync.selected_asset_id
        return self.store.get(asset_id) if asset_id is not None else None

    # ------------------------------------------------------------------
    # Save / notifications
    # ------------------------------------------------------------------

    def save_suggestion(self, asset: Optional[Asset] = None) -> Optional[Tuple[str, str]]:
        """(source path, suggested output filename) for *asset* or the selection."""
        asset = asset or self.selected_asset
        if asset is None:
            return None
        return asset.path, file_ops.suggested_filename(asset)

    def quick_save(self, quick_save_folder: str, asset: Optional[Asset] = None) -> Optional[str]:
        """Quick-save *asset* (default: the selection) and announce the result.

        Raises QuickSaveNotConfigured when no folder is set; other failures
        are logged, announced and reported as None.
        """
        asset = asset or self.selected_asset
        if asset is None:
            return None
        try:
            output_path = file_ops.quick_save(asset, quick_save_folder)
        except file_ops.QuickSaveNotConfigured:
            raise
        except (OSError, ValueError) as e:
            logging.error(f"Quick save of {asset.path} failed: {e}")
            self.notify(f"Could not save image: {e}")
            return None
        self.notify(f"Image saved to: {output_path}")
        return output_path

    def notify(self, message: str, timeout: Optional[int] = None) -> None:
        self.events.publish(StatusMessageEventData(
            event_type=EventType.STATUS_MESSAGE,
            source="AssetCatalog",
            timestamp=time.time(),
            message=message,
            timeout=self.notification_timeout if timeout is None else timeout,
        ))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def settings_snapshot(self) -> dict:
        values = filter_codec.encode(self._filter_state)
        values["grid_mode"] = self.view_mode is ViewMode.GRID
        return values

    def persist(self, config_manager) -> None:
        """Write the view settings back and save the config file once."""
        for key, value in self.settings_snapshot().items():
            config_manager.set(f"{VIEW_SETTINGS_PREFIX}.{key}", value, save=False)
        config_manager.save_config(config_manager.config)
        logging.info("View settings saved")
