from PySide6.QtWidgets import QStatusBar, QLabel, QWidget, QHBoxLayout, QToolButton, QMenu
from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QFont, QFontMetrics
import logging

from core.catalog import DEFAULT_STATUS_MESSAGE
from core.models import Orientation, Resolution
from core.view_sync import FilterControls


class CustomStatusBar(QStatusBar):
    """Message (left), filter label and the orientation / resolution drop-downs (right)."""

    orientation_selected = Signal(int)
    resolution_selected = Signal(int)

    def __init__(self, config_manager=None, parent=None):
        super().__init__(parent)
        self.config_manager = config_manager
        self._raw_message: str = DEFAULT_STATUS_MESSAGE

        self._message_timer = QTimer(self)
        self._message_timer.setSingleShot(True)
        self._message_timer.timeout.connect(self._restore_default_message)

        self._build_layout()
        self._apply_font_settings()
        self._refresh_elision()

    def _build_layout(self):
        container = QWidget(self)
        layout = QHBoxLayout(container)
        layout.setContentsMargins(4, 0, 4, 0)
        layout.setSpacing(6)

        self._message_label = QLabel()
        self._message_label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        layout.addWidget(self._message_label, 1)

        self._filter_label = QLabel("Filter:")
        layout.addWidget(self._filter_label)

        self._orientation_button = self._make_dropdown(
            [(o.label if o is not Orientation.ALL else "Show All", int(o)) for o in Orientation],
            self.orientation_selected,
        )
        layout.addWidget(self._orientation_button)

        self._resolution_button = self._make_dropdown(
            [(r.label, int(r)) for r in Resolution],
            self.resolution_selected,
        )
        layout.addWidget(self._resolution_button)

        self.addWidget(container, 1)

    def _make_dropdown(self, entries, signal) -> QToolButton:
        button = QToolButton(self)
        button.setPopupMode(QToolButton.InstantPopup)
        button.setToolButtonStyle(Qt.ToolButtonTextOnly)
        menu = QMenu(button)
        for text, value in entries:
            action = menu.addAction(text)
            action.triggered.connect(lambda checked=False, v=value: signal.emit(v))
        button.setMenu(menu)
        return button

    def _apply_font_settings(self):
        try:
            if self.config_manager:
                font_family = self.config_manager.get("gui.statusbar_font", "Segoe UI")
                font_size = self.config_manager.get("gui.statusbar_font_size", 9)
            else:
                font_family = "Segoe UI"
                font_size = 9
            self._message_label.setFont(QFont(font_family, int(font_size)))
        except Exception as e:  # why: config_manager is user-supplied; malformed config must not crash the status bar at startup
            logging.warning(f"Could not apply status bar font settings: {e}")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def setMessage(self, message: str, timeout: int = 0):
        """Show *message*; with a timeout the default message comes back afterwards."""
        self._message_timer.stop()
        self._raw_message = message
        self._refresh_elision()
        if timeout > 0:
            self._message_timer.start(timeout)

    def message(self) -> str:
        return self._raw_message

    def setFilterControls(self, controls: FilterControls):
        self._filter_label.setVisible(controls.filter_label_visible)
        self._orientation_button.setVisible(controls.orientation_visible)
        self._orientation_button.setText(controls.orientation_text)
        self._resolution_button.setVisible(controls.resolution_visible)
        self._resolution_button.setText(controls.resolution_text)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _restore_default_message(self):
        self._raw_message = DEFAULT_STATUS_MESSAGE
        self._refresh_elision()

    def _refresh_elision(self):
        fm = QFontMetrics(self._message_label.font())
        available = self._message_label.width()
        if available > 0:
            text = fm.elidedText(self._raw_message, Qt.ElideMiddle, available)
        else:
            text = self._raw_message
        self._message_label.setText(text)
        self._message_label.setToolTip(self._raw_message)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._refresh_elision()
