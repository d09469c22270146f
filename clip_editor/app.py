"""
ClipCrop - Entry Point

Usage:
    # Run standalone
    clipcrop [video]
    python -m clip_editor.app [video]

    # Or import and use
    from clip_editor.app import launch
    launch()
"""

import sys
from typing import Optional

from clip_editor.config import APP_NAME, VERSION, setup_logging, load_editor_config


def launch(video_path: Optional[str] = None) -> int:
    """
    Launch the editor window.

    Args:
        video_path: Optional video to open on startup

    Returns:
        Exit code from the application
    """
    from PySide6.QtWidgets import QApplication
    from PySide6.QtCore import Qt
    from PySide6.QtGui import QPalette, QColor

    log = setup_logging()
    log.info(f"Starting {APP_NAME} {VERSION}")

    # Create application
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(VERSION)
    app.setOrganizationName(APP_NAME)

    # Set dark palette
    palette = QPalette()
    palette.setColor(QPalette.Window, QColor(30, 30, 35))
    palette.setColor(QPalette.WindowText, Qt.white)
    palette.setColor(QPalette.Base, QColor(45, 45, 50))
    palette.setColor(QPalette.AlternateBase, QColor(50, 50, 55))
    palette.setColor(QPalette.Text, Qt.white)
    palette.setColor(QPalette.Button, QColor(60, 60, 65))
    palette.setColor(QPalette.ButtonText, Qt.white)
    palette.setColor(QPalette.Highlight, QColor(99, 102, 241))
    palette.setColor(QPalette.HighlightedText, Qt.white)
    app.setPalette(palette)

    # Apply global stylesheet
    app.setStyleSheet("""
        QToolTip {
            color: #ffffff;
            background-color: #2d2d2d;
            border: 1px solid #444;
            padding: 4px;
        }
        QPushButton {
            padding: 6px 14px;
            border-radius: 4px;
        }
        QPushButton:disabled {
            color: #666;
        }
    """)

    # Import and create main window
    from clip_editor.ui.main_window import MainWindow

    window = MainWindow(load_editor_config())
    window.show()
    if video_path:
        window.open_video(video_path)

    # Run event loop
    return app.exec()


def main():
    """Main entry point."""
    sys.exit(launch(sys.argv[1] if len(sys.argv) > 1 else None))


if __name__ == "__main__":
    main()
