"""
Crop View

Video preview with the crop overlay, built on QGraphicsView:

    CropView (QGraphicsView)
    └── QGraphicsScene (sized to the viewport)
        └── QGraphicsVideoItem (placed at the mapper's media rect)

The overlay (dimmed outside area, crop box, corner handles) is painted in
drawForeground from the session's crop projected through the Geometry
Mapper. Presses are forwarded to the Crop Editor; moves and the release
reach it through the input surface while a drag is active.
"""

from PySide6.QtWidgets import QGraphicsView, QGraphicsScene, QFrame
from PySide6.QtCore import Qt, QRectF, QSizeF
from PySide6.QtGui import QPainter, QColor, QPen, QBrush
from PySide6.QtMultimediaWidgets import QGraphicsVideoItem

from clip_editor.editing.crop_editor import CropHandle
from clip_editor.models.session import EditSession
from clip_editor.playback.media import QtMediaElement
from clip_editor.ui.input_surface import QtInputSurface

# Colors
COLOR_BACKGROUND = QColor(0, 0, 0)
COLOR_SHADE = QColor(0, 0, 0, 150)
COLOR_CROP_BORDER = QColor(99, 102, 241)
COLOR_HANDLE = QColor(255, 255, 255)
COLOR_PLACEHOLDER = QColor(150, 150, 150)

HANDLE_SIZE = 10

CURSORS = {
    CropHandle.MOVE: Qt.SizeAllCursor,
    CropHandle.NW: Qt.SizeFDiagCursor,
    CropHandle.SE: Qt.SizeFDiagCursor,
    CropHandle.NE: Qt.SizeBDiagCursor,
    CropHandle.SW: Qt.SizeBDiagCursor,
}


class CropView(QGraphicsView):
    """Video preview with an interactive crop rectangle."""

    def __init__(self, session: EditSession, media: QtMediaElement, parent=None):
        super().__init__(parent)

        self.session = session

        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self._video_item = QGraphicsVideoItem()
        self._scene.addItem(self._video_item)
        media.set_video_output(self._video_item)

        # View settings
        self.setRenderHint(QPainter.Antialiasing)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setFrameShape(QFrame.NoFrame)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setBackgroundBrush(QBrush(COLOR_BACKGROUND))
        self.setMouseTracking(True)
        self.setMinimumSize(320, 180)

        self.session.crop_editor.input_surface = QtInputSurface(self.viewport())

        self.session.crop_changed.connect(self._refresh_overlay)
        self.session.viewport_changed.connect(self._layout_video)
        self.session.media_ready.connect(self._layout_video)
        self.session.media_failed.connect(self._refresh_overlay)

    def _layout_video(self, *args) -> None:
        """Fit the video item to the letterboxed media rect."""
        x, y, width, height = self.session.mapper().media_rect()
        self._video_item.setPos(x, y)
        self._video_item.setSize(QSizeF(width, height))
        self._refresh_overlay()

    def _refresh_overlay(self, *args) -> None:
        self.viewport().update()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        size = self.viewport().size()
        self._scene.setSceneRect(0, 0, size.width(), size.height())
        self.session.set_viewport(size.width(), size.height())

    def drawForeground(self, painter: QPainter, rect: QRectF) -> None:
        crop = self.session.crop
        if crop is None or not self.session.is_ready:
            painter.setPen(QPen(COLOR_PLACEHOLDER))
            painter.drawText(self.sceneRect(), Qt.AlignCenter, "No video loaded. Select a file to begin.")
            return

        x, y, width, height = self.session.mapper().to_display_rect(crop)
        crop_rect = QRectF(x, y, width, height)
        scene_rect = self.sceneRect()

        # Dark overlay outside the crop area
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(COLOR_SHADE))
        painter.drawRect(QRectF(0, 0, scene_rect.width(), crop_rect.top()))
        painter.drawRect(QRectF(0, crop_rect.bottom(), scene_rect.width(), scene_rect.height() - crop_rect.bottom()))
        painter.drawRect(QRectF(0, crop_rect.top(), crop_rect.left(), crop_rect.height()))
        painter.drawRect(QRectF(crop_rect.right(), crop_rect.top(), scene_rect.width() - crop_rect.right(), crop_rect.height()))

        # Crop box
        pen = QPen(COLOR_CROP_BORDER)
        pen.setWidth(2)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(crop_rect)

        # Corner handles
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(COLOR_HANDLE))
        half = HANDLE_SIZE / 2
        for corner in (crop_rect.topLeft(), crop_rect.topRight(), crop_rect.bottomLeft(), crop_rect.bottomRight()):
            painter.drawRect(QRectF(corner.x() - half, corner.y() - half, HANDLE_SIZE, HANDLE_SIZE))

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            pos = event.position()
            handle = self.session.crop_editor.begin_drag(pos.x(), pos.y())
            if handle is not CropHandle.NONE:
                self.viewport().setCursor(CURSORS[handle])
                event.accept()
                return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        editor = self.session.crop_editor
        if not editor.is_dragging:
            pos = event.position()
            handle = editor.hit_test(pos.x(), pos.y())
            self.viewport().setCursor(CURSORS.get(handle, Qt.ArrowCursor))
        super().mouseMoveEvent(event)

    def hideEvent(self, event) -> None:
        # A drag never survives the view going away
        self.session.crop_editor.cancel_drag()
        super().hideEvent(event)
