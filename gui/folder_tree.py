from typing import Dict, List, Tuple
from PySide6.QtWidgets import QTreeWidget, QTreeWidgetItem
from PySide6.QtCore import Qt, Signal
import logging

from core.models import FOLDER_KINDS, FOLDER_LABELS, Asset, FolderKind

_ITEM_ID_ROLE = Qt.UserRole


class FolderTree(QTreeWidget):
    """One top-level branch per folder kind with the kind's assets as leaves.

    Branches are taken out of the tree when their kind is hidden and put back
    in the fixed kind order when it is shown again.  Orientation and
    resolution filters do not apply here.
    """

    itemActivatedId = Signal(int)
    itemSelectedId = Signal(int)
    contextMenuRequestedId = Signal(int, object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setHeaderHidden(True)
        self.setContextMenuPolicy(Qt.CustomContextMenu)
        self._branches: Dict[FolderKind, QTreeWidgetItem] = {}
        self._present: Dict[FolderKind, bool] = {}

        self.itemDoubleClicked.connect(self._on_double_clicked)
        self.currentItemChanged.connect(self._on_current_changed)
        self.customContextMenuRequested.connect(self._on_context_menu)

    def populate(self, entries: List[Tuple[int, Asset]], counts: Dict[FolderKind, int]):
        """Rebuild from (item id, asset) pairs; every branch starts detached.

        *counts* is the number of assets per kind, shown in the branch label.
        """
        self.clear()
        self._branches = {
            kind: QTreeWidgetItem([f"{FOLDER_LABELS[kind]} ({counts.get(kind, 0)})"]) for kind in FOLDER_KINDS
        }
        self._present = {kind: False for kind in FOLDER_KINDS}
        for item_id, asset in entries:
            leaf = QTreeWidgetItem([asset.name])
            leaf.setData(0, _ITEM_ID_ROLE, item_id)
            leaf.setToolTip(0, f"{asset.path}\n{asset.describe()}")
            self._branches[asset.source_folder].addChild(leaf)
        logging.debug(f"Folder tree populated with {len(entries)} leaves")

    def set_branch_present(self, kind: FolderKind, present: bool):
        if self._present.get(kind) == present:
            return
        branch = self._branches[kind]
        if present:
            index = sum(1 for k in FOLDER_KINDS[:FOLDER_KINDS.index(kind)] if self._present.get(k))
            self.insertTopLevelItem(index, branch)
        else:
            self.takeTopLevelItem(self.indexOfTopLevelItem(branch))
        self._present[kind] = present

    def clear_selection(self):
        self.blockSignals(True)
        self.clearSelection()
        self.setCurrentItem(None)
        self.blockSignals(False)

    @staticmethod
    def _item_id(item):
        return item.data(0, _ITEM_ID_ROLE) if item is not None else None

    def _on_double_clicked(self, item, column):
        item_id = self._item_id(item)
        if item_id is not None:
            self.itemActivatedId.emit(item_id)

    def _on_current_changed(self, current, previous):
        item_id = self._item_id(current)
        if item_id is not None:
            self.itemSelectedId.emit(item_id)

    def _on_context_menu(self, pos):
        item = self.itemAt(pos)
        item_id = self._item_id(item)
        if item_id is None:
            return
        self.setCurrentItem(item)
        self.contextMenuRequestedId.emit(item_id, self.viewport().mapToGlobal(pos))
