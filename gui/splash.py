from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QProgressBar
from PySide6.QtCore import Qt


class SplashWindow(QWidget):
    """Frameless startup window that mirrors scan progress."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowFlags(Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint | Qt.Tool)
        self.setFixedSize(280, 90)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        self._label = QLabel("Scanning Folders...")
        self._label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._label)

        self._progress = QProgressBar()
        self._progress.setTextVisible(False)
        self._progress.setRange(0, 0)  # busy until the first progress report
        layout.addWidget(self._progress)

    def update_status(self, message: str):
        self._label.setText(message)

    def on_scan_progress(self, index: int, total: int, path: str):
        if total > 0:
            self._progress.setRange(0, total)
            self._progress.setValue(index)
        self.update_status(f"Checking image {index} of {total}...")
