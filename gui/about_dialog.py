from PySide6.QtWidgets import QDialog, QVBoxLayout, QLabel, QTextBrowser, QDialogButtonBox, QGroupBox
from PySide6.QtCore import Qt
import platform

APP_NAME = "Local Wallpaper Viewer"
APP_VERSION = "1.0.0"
REPO_URL = "https://github.com/narfel/LocalWallpaperViewer/"

LICENSE_TEXT = (
    "This program is free software; you can redistribute it and/or modify it under the terms "
    "of the GNU General Public License as published by the Free Software Foundation; either "
    "version 3 of the License, or at your option any later version.\n\n"
    "This program is distributed in the hope that it will be useful, but WITHOUT ANY WARRANTY; "
    "without even the implied warranty of MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. "
    "See the GNU General Public License for more details.\n\n"
    "You should have received a copy of the GNU General Public License along with this program. "
    "If not, see <https://www.gnu.org/licenses/>."
)


class AboutDialog(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle(f"About {APP_NAME}")
        self.resize(450, 335)

        layout = QVBoxLayout(self)

        name = QLabel(APP_NAME)
        font = name.font()
        font.setPointSize(14)
        font.setBold(True)
        name.setFont(font)
        layout.addWidget(name)

        arch = platform.architecture()[0]
        layout.addWidget(QLabel(f"Version {APP_VERSION} ({arch})"))

        link = QLabel(f'<a href="{REPO_URL}">Github Repo</a>')
        link.setTextFormat(Qt.RichText)
        link.setOpenExternalLinks(True)
        layout.addWidget(link)

        group = QGroupBox("GNU General Public License")
        group_layout = QVBoxLayout(group)
        text = QTextBrowser()
        text.setOpenExternalLinks(True)
        text.setPlainText(LICENSE_TEXT)
        group_layout.addWidget(text)
        layout.addWidget(group, 1)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok)
        buttons.accepted.connect(self.accept)
        layout.addWidget(buttons)
