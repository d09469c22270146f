"""
Crop Editor

Direct manipulation of the crop rectangle: hit-testing the pointer against
the projected crop box, and a drag state machine that converts pointer
motion into clamped crop updates.

    IDLE --press on handle--> DRAGGING(handle) --release / cancel--> IDLE

Pointer deltas are measured against the previous move event, not the
press position, and converted to media pixels with the current scale.
"""

from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

from clip_editor.config import logger
from clip_editor.editing.drag import DragState, InputSurface
from clip_editor.models.edit_state import CropRegion, MediaDimensions

if TYPE_CHECKING:
    from clip_editor.models.session import EditSession


class CropHandle(Enum):
    NONE = "none"
    MOVE = "move"
    NW = "nw"
    NE = "ne"
    SW = "sw"
    SE = "se"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def hit_test(
    x: float,
    y: float,
    rect: Tuple[float, float, float, float],
    radius: float
) -> CropHandle:
    """
    Find the handle under a display-space point.

    Args:
        x, y: Pointer position in display pixels
        rect: Crop box in display pixels (x, y, width, height)
        radius: Grab distance around each corner

    Returns:
        The corner within reach, MOVE for the interior, NONE otherwise
    """
    left, top, width, height = rect
    right = left + width
    bottom = top + height

    def close(a: float, b: float) -> bool:
        return abs(a - b) <= radius

    if close(x, left) and close(y, top):
        return CropHandle.NW
    if close(x, right) and close(y, top):
        return CropHandle.NE
    if close(x, left) and close(y, bottom):
        return CropHandle.SW
    if close(x, right) and close(y, bottom):
        return CropHandle.SE
    if left < x < right and top < y < bottom:
        return CropHandle.MOVE
    return CropHandle.NONE


def _span_to_fixed_edge(origin: float, size: float, new_origin: float, minimum: float) -> float:
    """Extent from a moved near edge to the unmoved far edge, never below minimum."""
    if new_origin == origin:
        return size
    return max(minimum, (origin + size) - new_origin)


def apply_crop_delta(
    crop: CropRegion,
    handle: CropHandle,
    dx: float,
    dy: float,
    media: MediaDimensions,
    min_width: float,
    min_height: float
) -> CropRegion:
    """
    Move or resize a crop by a media-space delta, keeping it inside the frame.

    Corner handles keep the opposite corner fixed: width and height are
    measured from the moved edge to the fixed one and never drop below the
    minimum. A zero delta leaves the region unchanged bit for bit.
    """
    x, y, width, height = crop.x, crop.y, crop.width, crop.height

    if handle is CropHandle.MOVE:
        x = _clamp(crop.x + dx, 0, media.width - crop.width)
        y = _clamp(crop.y + dy, 0, media.height - crop.height)
    elif handle is CropHandle.NW:
        x = _clamp(crop.x + dx, 0, crop.right - min_width)
        y = _clamp(crop.y + dy, 0, crop.bottom - min_height)
        width = _span_to_fixed_edge(crop.x, crop.width, x, min_width)
        height = _span_to_fixed_edge(crop.y, crop.height, y, min_height)
    elif handle is CropHandle.NE:
        width = _clamp(crop.width + dx, min_width, media.width - crop.x)
        y = _clamp(crop.y + dy, 0, crop.bottom - min_height)
        height = _span_to_fixed_edge(crop.y, crop.height, y, min_height)
    elif handle is CropHandle.SW:
        x = _clamp(crop.x + dx, 0, crop.right - min_width)
        width = _span_to_fixed_edge(crop.x, crop.width, x, min_width)
        height = _clamp(crop.height + dy, min_height, media.height - crop.y)
    elif handle is CropHandle.SE:
        width = _clamp(crop.width + dx, min_width, media.width - crop.x)
        height = _clamp(crop.height + dy, min_height, media.height - crop.y)

    return CropRegion(x, y, width, height)


class CropEditor:
    """
    Drag controller for the crop rectangle of an EditSession.

    The editor holds no copy of the crop; every update is read from and
    written back to the session.
    """

    def __init__(self, session: "EditSession", input_surface: Optional[InputSurface] = None):
        self._session = session
        self.input_surface = input_surface
        self._drag: Optional[DragState] = None

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    @property
    def active_handle(self) -> CropHandle:
        return self._drag.handle if self._drag else CropHandle.NONE

    def hit_test(self, x: float, y: float) -> CropHandle:
        """Handle under a display-space point, also used for cursor feedback."""
        crop = self._session.crop
        if crop is None or not self._session.is_ready:
            return CropHandle.NONE
        rect = self._session.mapper().to_display_rect(crop)
        return hit_test(x, y, rect, self._session.config.hit_radius)

    def begin_drag(self, x: float, y: float) -> CropHandle:
        """
        Start a gesture at a display-space point.

        Any gesture still in progress is discarded first. Presses that hit
        no handle are ignored.

        Returns:
            The handle grabbed, or CropHandle.NONE
        """
        self.cancel_drag()

        handle = self.hit_test(x, y)
        if handle is CropHandle.NONE:
            return handle

        self._drag = DragState(handle, x, y)
        if self.input_surface is not None:
            self._drag.dispose = self.input_surface.subscribe(self.update_drag, self.end_drag)
        logger.debug(f"Crop drag started: {handle.value}")
        return handle

    def update_drag(self, x: float, y: float) -> None:
        """Apply the pointer displacement since the previous event."""
        drag = self._drag
        if drag is None:
            return

        crop = self._session.crop
        media = self._session.media
        if crop is None or media is None:
            self.cancel_drag()
            return

        dx, dy = self._session.mapper().delta_to_media(x - drag.anchor_x, y - drag.anchor_y)
        drag.anchor_x, drag.anchor_y = x, y

        min_width, min_height = self._session.min_crop_size()
        self._session.update_crop(
            apply_crop_delta(crop, drag.handle, dx, dy, media, min_width, min_height)
        )

    def end_drag(self) -> None:
        """Finish the gesture; a release without a gesture is a no-op."""
        if self._drag is None:
            return
        self._drag.release()
        self._drag = None

    def cancel_drag(self) -> None:
        """Abort the gesture. Updates already applied stay applied."""
        if self._drag is None:
            return
        logger.debug("Crop drag cancelled")
        self.end_drag()

    def dispose(self) -> None:
        """Teardown: drop any gesture and its listeners."""
        self.cancel_drag()
