"""
Timeline View

Trim selection track with transport controls.

Architecture:
    TimelineView (QWidget)
    ├── Controls (play/pause, mute, time display)
    └── TimelineTrack (custom painted)
        ├── Track background
        ├── Selected range between the START and END handles
        └── Playhead

The track only paints and forwards input; the Timeline Editor owns the
drag, keyboard and seek behavior.
"""

from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton
from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QPainter, QColor, QPen, QBrush, QMouseEvent, QKeyEvent

from clip_editor.editing.timeline_editor import TimelineHandle
from clip_editor.models.edit_state import PlaybackState
from clip_editor.models.session import EditSession
from clip_editor.ui.input_surface import QtInputSurface


# Track dimensions
PAD = 10
TRACK_HEIGHT = 48
BAR_HEIGHT = 16
HANDLE_WIDTH = 8

# Colors
COLOR_TRACK_BG = QColor(40, 40, 45)
COLOR_BAR = QColor(70, 70, 78)
COLOR_SELECTION = QColor(99, 102, 241, 160)
COLOR_HANDLE = QColor(255, 255, 255)
COLOR_HANDLE_FOCUSED = QColor(250, 204, 21)
COLOR_PLAYHEAD = QColor(255, 80, 80)


def format_time(seconds: float) -> str:
    """MM:SS display used by the transport controls."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class TimelineTrack(QWidget):
    """Painted track forwarding presses and arrow keys to the Timeline Editor."""

    def __init__(self, session: EditSession, parent=None):
        super().__init__(parent)

        self.session = session
        self.editor = session.timeline_editor
        self.editor.input_surface = QtInputSurface(self, origin=(PAD, 0))

        self.setFixedHeight(TRACK_HEIGHT)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(True)

        self.session.selection_changed.connect(self._refresh)
        self.session.playback.state_changed.connect(self._refresh)

    def _refresh(self, *args) -> None:
        self.update()

    def _handle_x(self, seconds: float) -> float:
        return PAD + self.editor.time_to_position(seconds)

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), COLOR_TRACK_BG)

        bar_top = (self.height() - BAR_HEIGHT) / 2
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(COLOR_BAR))
        painter.drawRoundedRect(QRectF(PAD, bar_top, self.editor.track_width, BAR_HEIGHT), 4, 4)

        selection = self.session.selection
        if selection is None or not self.editor.enabled:
            painter.end()
            return

        start_x = self._handle_x(selection.start)
        end_x = self._handle_x(selection.end)

        # Selected range
        painter.setBrush(QBrush(COLOR_SELECTION))
        painter.drawRect(QRectF(start_x, bar_top, end_x - start_x, BAR_HEIGHT))

        # Handles
        focused = self.editor.focused_handle if self.hasFocus() else TimelineHandle.NONE
        for handle, x in ((TimelineHandle.START, start_x), (TimelineHandle.END, end_x)):
            color = COLOR_HANDLE_FOCUSED if handle is focused else COLOR_HANDLE
            painter.setBrush(QBrush(color))
            painter.drawRoundedRect(
                QRectF(x - HANDLE_WIDTH / 2, bar_top - 6, HANDLE_WIDTH, BAR_HEIGHT + 12), 2, 2
            )

        # Playhead
        playhead_x = self._handle_x(self.session.playback.state.current_time)
        pen = QPen(COLOR_PLAYHEAD)
        pen.setWidth(2)
        painter.setPen(pen)
        painter.drawLine(int(playhead_x), 2, int(playhead_x), self.height() - 2)
        painter.end()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self.editor.set_track_width(self.width() - 2 * PAD)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        self.setFocus()
        self.editor.pointer_down(event.position().x() - PAD)
        self.update()
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if not self.editor.is_dragging:
            handle = self.editor.hit_test(event.position().x() - PAD)
            self.setCursor(Qt.SizeHorCursor if handle is not TimelineHandle.NONE else Qt.PointingHandCursor)
        super().mouseMoveEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key = event.key()
        if key not in (Qt.Key_Left, Qt.Key_Right):
            super().keyPressEvent(event)
            return

        modifiers = event.modifiers()
        direction = -1 if key == Qt.Key_Left else 1
        self.editor.nudge(
            direction,
            shift=bool(modifiers & Qt.ShiftModifier),
            alt=bool(modifiers & Qt.AltModifier)
        )
        event.accept()

    def focusOutEvent(self, event) -> None:
        self.editor.blur()
        self.update()
        super().focusOutEvent(event)

    def hideEvent(self, event) -> None:
        self.editor.cancel_drag()
        super().hideEvent(event)


class TimelineView(QWidget):
    """
    Timeline track with play/pause, mute and a current / total time readout.

    This is the widget to embed in the main window.
    """

    def __init__(self, session: EditSession, parent=None):
        super().__init__(parent)

        self.session = session

        self._setup_ui()
        self._connect_signals()
        self._on_playback_changed(self.session.playback.state)

    def _setup_ui(self) -> None:
        """Setup the UI layout."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        controls = QHBoxLayout()
        controls.setContentsMargins(5, 2, 5, 2)

        self.play_btn = QPushButton("Play")
        self.play_btn.setFixedWidth(70)
        controls.addWidget(self.play_btn)

        self.mute_btn = QPushButton("Unmute")
        self.mute_btn.setFixedWidth(70)
        controls.addWidget(self.mute_btn)

        controls.addStretch()

        self.time_label = QLabel("00:00 / 00:00")
        self.time_label.setStyleSheet("font-family: monospace; font-size: 12px;")
        controls.addWidget(self.time_label)

        layout.addLayout(controls)

        self.track = TimelineTrack(self.session)
        layout.addWidget(self.track)

    def _connect_signals(self) -> None:
        """Connect internal signals."""
        playback = self.session.playback
        self.play_btn.clicked.connect(playback.toggle_play)
        self.mute_btn.clicked.connect(playback.toggle_mute)
        playback.state_changed.connect(self._on_playback_changed)
        self.session.selection_changed.connect(self._on_selection_changed)

    def _on_playback_changed(self, state: PlaybackState) -> None:
        self.play_btn.setText("Pause" if state.is_playing else "Play")
        self.mute_btn.setText("Unmute" if state.is_muted else "Mute")
        self.time_label.setText(
            f"{format_time(state.current_time)} / {format_time(self.session.duration)}"
        )

    def _on_selection_changed(self, selection) -> None:
        enabled = selection is not None
        self.play_btn.setEnabled(enabled)
        self.mute_btn.setEnabled(enabled)
        self._on_playback_changed(self.session.playback.state)
