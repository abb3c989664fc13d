import logging
import sys
import os
import argparse
from PySide6.QtWidgets import QApplication
from config.config_manager import ConfigManager
from core.asset_scanner import AssetScanner
from core.catalog import AssetCatalog
from core.folder_roots import FolderRoots
from gui.about_dialog import APP_NAME
from gui.main_window import MainWindow
from gui.scan_worker import ScanWorker
from gui.splash import SplashWindow

SCAN_SHUTDOWN_TIMEOUT = 5.0  # seconds


def setup_logging(log_level, log_dir="~/.wallpaperviewer"):
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)
    log_dir = os.path.expanduser(log_dir)
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "wallpaperviewer.log")
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[
            logging.FileHandler(log_path, mode="a"),
            logging.StreamHandler(sys.stdout)
        ]
    )


def main():
    parser = argparse.ArgumentParser(description="Local Wallpaper Viewer: browse the wallpapers Windows keeps on disk.")
    parser.add_argument('--config', default=None, help='Path to an alternative config.yaml.')
    parser.add_argument('--log-level', default=None, help='Override the logging_level config key.')
    args = parser.parse_args()

    try:
        config_manager = ConfigManager(args.config)
    except ValueError as e:
        setup_logging("INFO")
        logging.error(f"Cannot start: {e}")
        return 1

    logging_level = args.log_level or config_manager.logging_level
    setup_logging(logging_level, config_manager.get("log_dir", "~/.wallpaperviewer"))

    logging.info("Starting Local Wallpaper Viewer")

    roots = FolderRoots.from_config(config_manager)
    for kind, path in roots:
        logging.info(f"{kind.value}: {path}{'' if os.path.isdir(path) else ' (missing)'}")
    scanner = AssetScanner.from_config(roots, config_manager)
    catalog = AssetCatalog.from_config(config_manager, roots)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    splash = SplashWindow()
    worker = ScanWorker(scanner)
    worker.progress.connect(splash.on_scan_progress)
    windows = []

    def on_scan_finished(result):
        catalog.load(result)
        window = MainWindow(config_manager, catalog)
        windows.append(window)
        window.show()
        splash.close()
        logging.info("[startup] window shown")

    def on_about_to_quit():
        if worker.is_running():
            worker.cancel()
            if not worker.wait(SCAN_SHUTDOWN_TIMEOUT):
                logging.warning("Scan thread did not stop in time")

    worker.finished.connect(on_scan_finished)
    app.aboutToQuit.connect(on_about_to_quit)

    splash.show()
    # why: the splash must paint before the scan floods the event loop with progress signals
    app.processEvents()
    worker.start()

    exit_code = app.exec()

    logging.info(f"Application exiting with code {exit_code}.")
    return exit_code

if __name__ == "__main__":
    sys.exit(main())
