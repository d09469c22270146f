"""
Main Window for ClipCrop

The central window that integrates all components:
- Video preview with the crop overlay
- Trim timeline with transport controls
- Crop / selection readouts
- Status log
- Menu bar with shortcuts
"""

import os
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QSplitter,
    QFileDialog, QMessageBox, QStatusBar, QLabel, QListWidget,
    QListWidgetItem, QPushButton
)
from PySide6.QtCore import Qt, QSettings
from PySide6.QtGui import QKeySequence, QCloseEvent, QColor

from clip_editor.config import APP_NAME, VERSION, EditorConfig, logger, get_setting, save_settings
from clip_editor.export.exporter import Exporter
from clip_editor.models.edit_state import ClipSelection, CropRegion
from clip_editor.models.session import EditSession
from clip_editor.models.status_log import LogEntry, ERROR, SUCCESS, PROGRESS
from clip_editor.playback.media import QtMediaElement
from clip_editor.ui.crop_view import CropView
from clip_editor.ui.timeline_view import TimelineView

VIDEO_FILTER = "Video Files (*.mp4 *.mov *.mkv);;All Files (*)"
DEFAULT_OUTPUT = "output.mp4"

LOG_COLORS = {
    ERROR: QColor(248, 113, 113),
    SUCCESS: QColor(74, 222, 128),
    PROGRESS: QColor(150, 150, 150),
}


class MainWindow(QMainWindow):
    """
    Main application window.

    Layout:
        ┌───────────────────────────────────────────────────┐
        │ Menu Bar                                          │
        ├─────────────────────────┬─────────────────────────┤
        │                         │                         │
        │   Crop View             │   Status Log            │
        │                         │                         │
        ├─────────────────────────┴─────────────────────────┤
        │ Timeline                                          │
        ├───────────────────────────────────────────────────┤
        │ Readouts                  [Open Video] [Export]   │
        └───────────────────────────────────────────────────┘
    """

    def __init__(self, config: Optional[EditorConfig] = None, parent=None):
        super().__init__(parent)

        # State
        self.media = QtMediaElement(self)
        self.session = EditSession(self.media, config, parent=self)
        self.exporter = Exporter(self)

        # Setup
        self._setup_window()
        self._setup_menu_bar()
        self._setup_ui()
        self._connect_signals()

        # Load settings
        self._load_settings()

    def _setup_window(self) -> None:
        """Configure main window properties."""
        self.setWindowTitle(APP_NAME)
        self.setMinimumSize(900, 600)
        self.resize(1200, 800)

        # Dark theme
        self.setStyleSheet("""
            QMainWindow {
                background-color: #1e1e1e;
            }
            QMenuBar {
                background-color: #2d2d2d;
                color: #fff;
                padding: 4px;
            }
            QMenuBar::item:selected {
                background-color: #6366f1;
            }
            QMenu {
                background-color: #2d2d2d;
                color: #fff;
                border: 1px solid #444;
            }
            QMenu::item:selected {
                background-color: #6366f1;
            }
            QListWidget {
                background-color: #181818;
                color: #ddd;
                border: none;
                font-family: monospace;
                font-size: 11px;
            }
            QStatusBar {
                background-color: #2d2d2d;
                color: #999;
            }
            QSplitter::handle {
                background-color: #444;
            }
        """)

    def _setup_menu_bar(self) -> None:
        """Create menu bar with all menus and actions."""
        menubar = self.menuBar()

        # File Menu
        file_menu = menubar.addMenu("&File")

        self.action_open = file_menu.addAction("Open Video...")
        self.action_open.setShortcut(QKeySequence.Open)
        self.action_open.triggered.connect(self._on_open_video)

        self.action_export = file_menu.addAction("Export Video...")
        self.action_export.setShortcut(QKeySequence("Ctrl+E"))
        self.action_export.triggered.connect(self._on_export)

        file_menu.addSeparator()

        self.action_exit = file_menu.addAction("Exit")
        self.action_exit.setShortcut(QKeySequence.Quit)
        self.action_exit.triggered.connect(self.close)

        # Playback Menu
        playback_menu = menubar.addMenu("&Playback")

        self.action_play = playback_menu.addAction("Play / Pause")
        self.action_play.setShortcut(QKeySequence(Qt.Key_Space))
        self.action_play.triggered.connect(self.session.playback.toggle_play)

        self.action_mute = playback_menu.addAction("Mute / Unmute")
        self.action_mute.setShortcut(QKeySequence("M"))
        self.action_mute.triggered.connect(self.session.playback.toggle_mute)

        # Help Menu
        help_menu = menubar.addMenu("&Help")

        self.action_shortcuts = help_menu.addAction("Keyboard Shortcuts")
        self.action_shortcuts.triggered.connect(self._on_show_shortcuts)

        self.action_about = help_menu.addAction(f"About {APP_NAME}")
        self.action_about.triggered.connect(self._on_about)

    def _setup_ui(self) -> None:
        """Create and arrange UI components."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(8, 8, 8, 8)
        main_layout.setSpacing(6)

        # Top section: Preview + Status Log
        top_splitter = QSplitter(Qt.Horizontal)

        self.crop_view = CropView(self.session, self.media)
        top_splitter.addWidget(self.crop_view)

        self.log_list = QListWidget()
        top_splitter.addWidget(self.log_list)

        # Set initial sizes (75/25 split)
        top_splitter.setSizes([900, 300])
        main_layout.addWidget(top_splitter, stretch=1)

        # Timeline
        self.timeline = TimelineView(self.session)
        main_layout.addWidget(self.timeline)

        # Readouts and actions
        bottom = QHBoxLayout()

        self.crop_label = QLabel("Crop: -")
        self.crop_label.setStyleSheet("font-family: monospace; color: #ccc;")
        bottom.addWidget(self.crop_label)

        self.selection_label = QLabel("Trim: -")
        self.selection_label.setStyleSheet("font-family: monospace; color: #ccc;")
        bottom.addWidget(self.selection_label)

        bottom.addStretch()

        self.btn_open = QPushButton("Open Video")
        self.btn_open.clicked.connect(self._on_open_video)
        bottom.addWidget(self.btn_open)

        self.btn_export = QPushButton("Crop && Trim")
        self.btn_export.setEnabled(False)
        self.btn_export.clicked.connect(self._on_export)
        bottom.addWidget(self.btn_export)

        main_layout.addLayout(bottom)

        # Status bar
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        self.status_label = QLabel("Ready")
        self.status_bar.addWidget(self.status_label, 1)

    def _connect_signals(self) -> None:
        """Connect component signals."""
        # Session signals
        self.session.crop_changed.connect(self._on_crop_changed)
        self.session.selection_changed.connect(self._on_selection_changed)
        self.session.media_ready.connect(self._on_media_ready)
        self.session.media_failed.connect(self._on_media_failed)
        self.session.validation_failed.connect(self._on_validation_failed)
        self.session.processing_changed.connect(self._on_processing_changed)
        self.session.export_finished.connect(self._on_export_finished)

        # Status log
        self.session.status_log.entry_added.connect(self._on_log_entry)
        self.session.status_log.cleared.connect(self.log_list.clear)

        # Exporter signals
        self.exporter.progress.connect(self.session.on_export_progress)
        self.exporter.finished.connect(self.session.on_export_finished)
        self.exporter.failed.connect(self.session.on_export_failed)

    # ========================================================================
    # File Operations
    # ========================================================================

    def _on_open_video(self) -> None:
        """Pick a video and load it into the session."""
        if self.session.is_processing:
            return

        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Video",
            get_setting("last_directory", ""),
            VIDEO_FILTER
        )
        if file_path:
            self.open_video(file_path)

    def open_video(self, file_path: str) -> None:
        """Load a video file by path."""
        save_settings("last_directory", os.path.dirname(file_path))
        self.setWindowTitle(f"{APP_NAME} - {os.path.basename(file_path)}")
        self.status_label.setText(f"Loading {os.path.basename(file_path)}...")
        self.session.load_media(file_path)

    def _on_export(self) -> None:
        """Ask for an output file and hand the edit to the exporter."""
        if self.session.is_processing:
            return

        file_path, _ = QFileDialog.getSaveFileName(
            self, "Export Video",
            DEFAULT_OUTPUT,
            "MP4 Video (*.mp4)"
        )
        if not file_path:
            return
        if not file_path.endswith(".mp4"):
            file_path += ".mp4"

        request = self.session.request_export(file_path)
        if request is None:
            return

        self.status_label.setText("Exporting...")
        if not self.exporter.export(request):
            self.session.on_export_failed("An export is already running.")

    # ========================================================================
    # Session Events
    # ========================================================================

    def _on_crop_changed(self, crop: Optional[CropRegion]) -> None:
        if crop is None:
            self.crop_label.setText("Crop: -")
            return
        self.crop_label.setText(
            f"Crop: {round(crop.width)}x{round(crop.height)} at ({round(crop.x)}, {round(crop.y)})"
        )

    def _on_selection_changed(self, selection: Optional[ClipSelection]) -> None:
        if selection is None:
            self.selection_label.setText("Trim: -")
            return
        self.selection_label.setText(
            f"Trim: {selection.start:.2f}s - {selection.end:.2f}s ({selection.duration:.2f}s)"
        )

    def _on_media_ready(self, media) -> None:
        self.btn_export.setEnabled(not self.session.is_processing)
        self.status_label.setText(f"Loaded {media.width}x{media.height}")

    def _on_media_failed(self, message: str) -> None:
        self.btn_export.setEnabled(False)
        self.status_label.setText("Failed to load video")
        QMessageBox.warning(self, "Load Error", f"Failed to load video:\n{message}")

    def _on_validation_failed(self, message: str) -> None:
        self.status_label.setText(message)

    def _on_processing_changed(self, processing: bool) -> None:
        self.btn_open.setEnabled(not processing)
        self.action_open.setEnabled(not processing)
        self.btn_export.setEnabled(not processing and self.session.is_ready)
        self.action_export.setEnabled(not processing)

    def _on_export_finished(self, success: bool, message: str) -> None:
        """Handle export completion."""
        if success:
            self.status_label.setText("Export complete")
        else:
            self.status_label.setText("Export failed")
            QMessageBox.critical(self, "Export Failed", message)

    def _on_log_entry(self, entry: LogEntry) -> None:
        item = QListWidgetItem(f"[{entry.timestamp}] {entry.message}")
        color = LOG_COLORS.get(entry.kind)
        if color is not None:
            item.setForeground(color)
        self.log_list.addItem(item)

        if entry.kind == PROGRESS and self.session.is_processing:
            self.status_label.setText(f"Exporting... {self.session.status_log.last_progress_message()}")

        # Keep the list bounded like the log itself
        while self.log_list.count() > len(self.session.status_log.entries):
            self.log_list.takeItem(0)
        self.log_list.scrollToBottom()

    # ========================================================================
    # Help
    # ========================================================================

    def _on_about(self) -> None:
        """Show about dialog."""
        QMessageBox.about(
            self, f"About {APP_NAME}",
            f"<h2>{APP_NAME}</h2>"
            f"<p>Version {VERSION}</p>"
            "<p>Crop and trim a single video clip.</p>"
        )

    def _on_show_shortcuts(self) -> None:
        """Show keyboard shortcuts dialog."""
        shortcuts = """
        <h3>Keyboard Shortcuts</h3>
        <table>
        <tr><td><b>Space</b></td><td>Play / Pause</td></tr>
        <tr><td><b>M</b></td><td>Mute / Unmute</td></tr>
        <tr><td><b>← / →</b></td><td>Nudge focused trim handle by 0.1s</td></tr>
        <tr><td><b>Alt + ← / →</b></td><td>Nudge by 0.01s</td></tr>
        <tr><td><b>Shift + ← / →</b></td><td>Nudge by 1s</td></tr>
        <tr><td><b>Ctrl + O</b></td><td>Open video</td></tr>
        <tr><td><b>Ctrl + E</b></td><td>Export video</td></tr>
        </table>
        """
        QMessageBox.information(self, "Keyboard Shortcuts", shortcuts)

    # ========================================================================
    # Utility
    # ========================================================================

    def _load_settings(self) -> None:
        """Load window settings."""
        settings = QSettings(APP_NAME, "Editor")
        geometry = settings.value("geometry")
        if geometry:
            self.restoreGeometry(geometry)

    def _save_settings(self) -> None:
        """Save window settings."""
        settings = QSettings(APP_NAME, "Editor")
        settings.setValue("geometry", self.saveGeometry())

    def closeEvent(self, event: QCloseEvent) -> None:
        """Handle window close."""
        if self.session.is_processing:
            reply = QMessageBox.question(
                self, "Export Running",
                "An export is still running. Cancel it and quit?",
                QMessageBox.Yes | QMessageBox.No
            )
            if reply != QMessageBox.Yes:
                event.ignore()
                return
            logger.info("Cancelling export on exit")
            self.exporter.cancel(wait=True)

        self.session.dispose()
        self._save_settings()
        event.accept()
