# core/view_sync.py
"""Propagates visibility decisions to the grid and tree views.

ViewSync owns the association between view items and assets: every grid
cell and tree leaf gets a stable integer item id, and the views only ever
hand item ids back.  Changes are pushed to a *view adapter* (the main window
in the GUI, a recording fake in tests) and only when something actually
changed, so applying the same report twice is a no-op.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol, Tuple

from core.filter_engine import VisibilityReport
from core.metadata_store import MetadataStore
from core.models import FOLDER_KINDS, Asset, FilterState, FolderKind

NO_RESULTS_TEXT = "No files match selected filters"


def counter_text(visible_count: int, passes_folder_filter: int) -> str:
    return f"Showing {visible_count} of {passes_folder_filter}"


class ViewMode(Enum):
    GRID = "grid"
    TREE = "tree"


class ItemKind(Enum):
    GRID_CELL = "grid_cell"
    TREE_LEAF = "tree_leaf"


@dataclass(frozen=True)
class FilterControls:
    filter_label_visible: bool
    orientation_visible: bool
    resolution_visible: bool
    orientation_text: str
    resolution_text: str


@dataclass(frozen=True)
class ViewState:
    grid_visible: Dict[int, bool] = field(default_factory=dict)  # grid item id -> visible
    tree_branches: Dict[FolderKind, bool] = field(default_factory=dict)
    no_results_visible: bool = False
    counter_text: str = ""
    controls: Optional[FilterControls] = None


class ViewAdapter(Protocol):
    def set_grid_item_visible(self, item_id: int, visible: bool) -> None: ...
    def set_tree_branch_present(self, kind: FolderKind, present: bool) -> None: ...
    def set_no_results_visible(self, visible: bool) -> None: ...
    def set_counter_text(self, text: str) -> None: ...
    def set_filter_controls(self, controls: FilterControls) -> None: ...
    def set_view_mode(self, mode: ViewMode) -> None: ...
    def clear_selection(self) -> None: ...


@dataclass(frozen=True)
class _Item:
    asset_id: int
    kind: ItemKind


class ViewSync:
    def __init__(self, store: MetadataStore, adapter: Optional[ViewAdapter] = None,
                 view_mode: ViewMode = ViewMode.GRID):
        self.adapter = adapter
        self._view_mode = view_mode
        self._selected_asset: Optional[int] = None
        self._last_state: Optional[ViewState] = None
        self._last_filter_state: Optional[FilterState] = None
        self._last_report: Optional[VisibilityReport] = None
        self.reset(store)

    # ------------------------------------------------------------------
    # Item association
    # ------------------------------------------------------------------

    def reset(self, store: MetadataStore) -> None:
        """Rebuild the association for a new store: one grid cell and one tree leaf per asset."""
        self.store = store
        self._items: Dict[int, _Item] = {}
        self._grid_item: Dict[int, int] = {}
        self._tree_item: Dict[int, int] = {}
        self._next_item_id = 0
        for asset_id in store.ids():
            self._grid_item[asset_id] = self._allocate(asset_id, ItemKind.GRID_CELL)
            self._tree_item[asset_id] = self._allocate(asset_id, ItemKind.TREE_LEAF)
        self._selected_asset = None
        self._last_state = None
        self._last_report = None

    def _allocate(self, asset_id: int, kind: ItemKind) -> int:
        item_id = self._next_item_id
        self._next_item_id += 1
        self._items[item_id] = _Item(asset_id, kind)
        return item_id

    def grid_item_for_asset(self, asset_id: int) -> int:
        return self._grid_item[asset_id]

    def tree_item_for_asset(self, asset_id: int) -> int:
        return self._tree_item[asset_id]

    def asset_for_item(self, item_id: int) -> Optional[int]:
        item = self._items.get(item_id)
        return item.asset_id if item else None

    def grid_entries(self) -> List[Tuple[int, Asset]]:
        """(grid item id, asset) pairs in store order, for building the grid widget."""
        return [(self._grid_item[asset_id], asset) for asset_id, asset in self.store]

    def tree_entries(self) -> List[Tuple[int, Asset]]:
        return [(self._tree_item[asset_id], asset) for asset_id, asset in self.store]

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------

    def compute_state(self, report: VisibilityReport, state: FilterState) -> ViewState:
        grid_visible = {
            self._grid_item[asset_id]: report.is_visible(asset_id)
            for asset_id in self.store.ids()
        }
        branches = {kind: state.folders.is_visible(kind) for kind in FOLDER_KINDS}
        return ViewState(
            grid_visible=grid_visible,
            tree_branches=branches,
            no_results_visible=report.visible_count == 0,
            counter_text=counter_text(report.visible_count, report.passes_folder_filter),
            controls=self._controls(state),
        )

    def apply(self, report: VisibilityReport, state: FilterState) -> ViewState:
        """Push the view changes implied by *report*; returns the resulting view state."""
        new_state = self.compute_state(report, state)
        old_state = self._last_state
        self._last_state = new_state
        self._last_report = report
        self._last_filter_state = state

        if self.adapter is not None:
            self._push(old_state, new_state)

        if self._selected_asset is not None and not self._is_shown(self._selected_asset):
            logging.debug(f"Selected asset {self._selected_asset} is no longer shown, clearing selection")
            self.clear_selection()
        return new_state

    def _push(self, old: Optional[ViewState], new: ViewState) -> None:
        adapter = self.adapter
        for item_id, visible in new.grid_visible.items():
            if old is None or old.grid_visible.get(item_id) != visible:
                adapter.set_grid_item_visible(item_id, visible)
        for kind, present in new.tree_branches.items():
            if old is None or old.tree_branches.get(kind) != present:
                adapter.set_tree_branch_present(kind, present)
        if old is None or old.no_results_visible != new.no_results_visible:
            adapter.set_no_results_visible(new.no_results_visible)
        if old is None or old.counter_text != new.counter_text:
            adapter.set_counter_text(new.counter_text)
        if old is None or old.controls != new.controls:
            adapter.set_filter_controls(new.controls)

    def _controls(self, state: FilterState) -> FilterControls:
        grid = self._view_mode is ViewMode.GRID
        return FilterControls(
            filter_label_visible=grid,
            orientation_visible=grid,
            resolution_visible=grid,
            orientation_text=state.orientation.label,
            resolution_text=state.resolution.label,
        )

    def invalidate(self) -> None:
        """Forget what the adapter was last told; the next apply pushes everything."""
        self._last_state = None

    # ------------------------------------------------------------------
    # View mode and selection
    # ------------------------------------------------------------------

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    def toggle_view_mode(self) -> ViewMode:
        target = ViewMode.TREE if self._view_mode is ViewMode.GRID else ViewMode.GRID
        self.set_view_mode(target)
        return target

    def set_view_mode(self, mode: ViewMode) -> bool:
        """Enter *mode*. Returns False when already in it (no transition)."""
        if mode is self._view_mode:
            return False
        self._view_mode = mode
        self.clear_selection()
        if self.adapter is not None:
            self.adapter.set_view_mode(mode)
        if self._last_report is not None and self._last_filter_state is not None:
            # Control visibility depends on the mode.
            self.apply(self._last_report, self._last_filter_state)
        logging.debug(f"View mode is now {mode.value}")
        return True

    @property
    def selected_asset_id(self) -> Optional[int]:
        return self._selected_asset

    def select_item(self, item_id: int) -> Optional[int]:
        """Select the asset behind *item_id*; unknown ids clear the selection."""
        asset_id = self.asset_for_item(item_id)
        if asset_id is None:
            self.clear_selection()
            return None
        self._selected_asset = asset_id
        return asset_id

    def clear_selection(self) -> None:
        had_selection = self._selected_asset is not None
        self._selected_asset = None
        if had_selection and self.adapter is not None:
            self.adapter.clear_selection()

    def _is_shown(self, asset_id: int) -> bool:
        if self._view_mode is ViewMode.GRID:
            return self._last_report is not None and self._last_report.is_visible(asset_id)
        kind = self.store.get(asset_id).source_folder
        return self._last_filter_state is not None and self._last_filter_state.folders.is_visible(kind)
