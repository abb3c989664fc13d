from PySide6.QtWidgets import (
    QDialog, QGridLayout, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFileDialog, QMessageBox,
)
import logging
import os

from core.folder_roots import default_path
from core.models import FOLDER_KINDS, FolderKind

_SETTING_NAMES = {
    FolderKind.USER_ASSETS: "Assets folder:",
    FolderKind.LOCK_SCREEN: "Lockscreen folder:",
    FolderKind.SPOTLIGHT: "SpotLight folder:",
}


class FoldersDialog(QDialog):
    """Edit the per-kind directory overrides stored under ``folders.<kind>``.

    An empty override means the default location; choosing the default path
    again clears the override.  Changes take effect on the next start.
    """

    def __init__(self, config_manager, parent=None):
        super().__init__(parent)
        self.config_manager = config_manager
        self.setWindowTitle("Edit Folders")
        self.setModal(True)

        self._labels = {}
        self._current = {kind: self._configured_path(kind) for kind in FOLDER_KINDS}

        layout = QVBoxLayout(self)
        grid = QGridLayout()
        for row, kind in enumerate(FOLDER_KINDS):
            label = QLabel()
            self._labels[kind] = label
            grid.addWidget(label, row, 0)
            button = QPushButton("Select folder")
            button.clicked.connect(lambda checked=False, k=kind: self._browse(k))
            grid.addWidget(button, row, 1)
        layout.addLayout(grid)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        reset_button = QPushButton("Reset to Defaults")
        reset_button.clicked.connect(self._reset)
        buttons.addWidget(reset_button)
        layout.addLayout(buttons)

        for kind in FOLDER_KINDS:
            self._update_label(kind)

    def _configured_path(self, kind: FolderKind) -> str:
        return self.config_manager.get(f"folders.{kind.value}", "") or default_path(kind)

    def _is_default(self, kind: FolderKind) -> bool:
        return os.path.normcase(self._current[kind]) == os.path.normcase(default_path(kind))

    def _update_label(self, kind: FolderKind):
        status = " (default)" if self._is_default(kind) else " (modified)"
        self._labels[kind].setText(f"{_SETTING_NAMES[kind]}{status}")
        self._labels[kind].setToolTip(self._current[kind])

    def _save(self, kind: FolderKind, path: str):
        self._current[kind] = path or default_path(kind)
        value = "" if self._is_default(kind) else path
        self.config_manager.set(f"folders.{kind.value}", value)
        logging.info(f"Folder override for {kind.value} set to {value or '(default)'}")
        self._update_label(kind)

    def _browse(self, kind: FolderKind):
        selected = QFileDialog.getExistingDirectory(self, "Select folder", self._current[kind])
        if selected:
            self._save(kind, selected)

    def _reset(self):
        answer = QMessageBox.warning(
            self, "Confirm Reset",
            "Are you sure you want to reset all folder paths to their default values?",
            QMessageBox.Yes | QMessageBox.No,
        )
        if answer != QMessageBox.Yes:
            return
        for kind in FOLDER_KINDS:
            self._save(kind, "")
        QMessageBox.information(self, "Reset Complete", "Settings have been reset to default values and saved.")
