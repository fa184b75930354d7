#!/usr/bin/env python3
"""
Eunoia - A local-only meditation and relaxation application.

A calm space for short guided-by-sound sessions with:
- Themed ambient soundscapes with adjustable intensity
- A session timer with preset lengths
- Weekly progress, streaks, achievements and a calendar
- A private meditation journal

Usage:
    pip install -e .
    python main.py

Author: Eunoia
License: MIT
"""

import logging
import signal
import sys
from logging.handlers import RotatingFileHandler

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from core.storage import get_app_data_dir

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logging(level: int = logging.INFO, max_bytes: int = 1_000_000, backup_count: int = 3):
    """Log to a rotating file in the data directory and to stderr."""
    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    try:
        log_file = get_app_data_dir() / 'eunoia.log'
        file_handler = RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    except OSError as e:
        print(f"Warning: Could not open log file: {e}", file=sys.stderr)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)


def setup_exception_handling():
    """Log unhandled exceptions before the default hook prints them."""
    def exception_hook(exctype, value, traceback):
        logger.critical("Unhandled exception", exc_info=(exctype, value, traceback))
        sys.__excepthook__(exctype, value, traceback)

    sys.excepthook = exception_hook


def setup_signal_handlers(app: QApplication):
    """Set up signal handlers for graceful shutdown."""
    def signal_handler(signum, frame):
        logger.info("Received signal %s, shutting down...", signum)
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)


STYLESHEET = """
    QMainWindow, QWidget {
        background-color: #1e1e1e;
        color: #e0e0e0;
    }

    QTabWidget::pane {
        border: none;
        background-color: #252525;
    }
    QTabBar::tab {
        background-color: #2d2d2d;
        color: #b0b0b0;
        padding: 12px 25px;
        margin-right: 2px;
        border-top-left-radius: 6px;
        border-top-right-radius: 6px;
        font-size: 13px;
    }
    QTabBar::tab:selected {
        background-color: #252525;
        color: #ffffff;
        font-weight: bold;
    }

    QGroupBox {
        font-weight: bold;
        font-size: 13px;
        border: 1px solid #404040;
        border-radius: 8px;
        margin-top: 12px;
        padding-top: 12px;
        background-color: #2a2a2a;
    }
    QGroupBox::title {
        subcontrol-origin: margin;
        left: 12px;
        padding: 0 8px;
        color: #42A5F5;
    }

    QComboBox, QTextEdit {
        padding: 6px 10px;
        border: 1px solid #404040;
        border-radius: 5px;
        background-color: #2d2d2d;
        color: #ffffff;
    }

    QSlider::groove:horizontal {
        height: 6px;
        background-color: #404040;
        border-radius: 3px;
    }
    QSlider::handle:horizontal {
        background-color: #42A5F5;
        width: 16px;
        margin: -5px 0;
        border-radius: 8px;
    }

    QProgressBar {
        border: none;
        border-radius: 6px;
        background-color: #2d2d2d;
    }
    QProgressBar::chunk {
        background-color: rgba(33, 150, 243, 0.5);
        border-radius: 6px;
    }

    QListWidget {
        border: 1px solid #404040;
        border-radius: 5px;
        background-color: #252525;
    }
    QListWidget::item {
        padding: 10px;
        border-bottom: 1px solid #353535;
    }

    QPushButton {
        padding: 8px 16px;
        border-radius: 5px;
        background-color: #404040;
        color: #ffffff;
        border: none;
    }
    QPushButton:hover {
        background-color: #505050;
    }
"""


def main():
    """Main entry point for the Eunoia application."""
    setup_logging()
    setup_exception_handling()

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Eunoia")
    app.setApplicationDisplayName("Eunoia")
    app.setOrganizationName("Eunoia")
    app.setStyle("Fusion")
    app.setStyleSheet(STYLESHEET)

    setup_signal_handlers(app)

    from ui.main_window import MainWindow
    window = MainWindow()
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
