import logging
import threading
from typing import Optional

from PySide6.QtCore import QObject, Signal

from core.asset_scanner import AssetScanner, CancellationToken, ScanProgress, ScanResult


class ScanWorker(QObject):
    """Runs one AssetScanner pass on a background thread.

    Progress and completion are delivered through Qt signals, so connected
    slots run on the GUI thread.
    """

    progress = Signal(int, int, str)   # (index, total, path)
    finished = Signal(object)          # ScanResult

    def __init__(self, scanner: AssetScanner, parent=None):
        super().__init__(parent)
        self.scanner = scanner
        self.cancel_token = CancellationToken()
        self._thread: Optional[threading.Thread] = None

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            logging.warning("Scan already running, ignoring start request")
            return
        self._thread = threading.Thread(target=self._run, name="asset-scan", daemon=True)
        self._thread.start()

    def cancel(self):
        self.cancel_token.cancel()

    def wait(self, timeout: Optional[float] = None) -> bool:
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _on_progress(self, step: ScanProgress):
        self.progress.emit(step.index, step.total, step.path)

    def _run(self):
        try:
            result = self.scanner.scan(progress=self._on_progress, cancel_token=self.cancel_token)
        except Exception as e:  # why: an unexpected scanner bug must still release the splash and open the window
            logging.error(f"Asset scan failed: {e}", exc_info=True)
            result = ScanResult(cancelled=True)
        self.finished.emit(result)
