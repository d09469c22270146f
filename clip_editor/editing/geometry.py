"""
Geometry Mapper

Converts between media pixel space and display space for a video that is
scaled to fit its container and centered inside it (letterboxed).

    scale    = min(viewport.width / media.width, viewport.height / media.height)
    display  = media * scale + offset
    media    = (display - offset) / scale

The mapper is a throwaway value: build a fresh one whenever the media or
the viewport may have changed.
"""

from dataclasses import dataclass
from typing import Tuple

from clip_editor.models.edit_state import MediaDimensions, DisplayViewport, CropRegion


@dataclass(frozen=True)
class GeometryMapper:
    media: MediaDimensions
    viewport: DisplayViewport

    @property
    def scale(self) -> float:
        """Display pixels per media pixel (1.0 when the media size is unknown)."""
        if self.media.width <= 0 or self.media.height <= 0:
            return 1.0
        return min(
            self.viewport.width / self.media.width,
            self.viewport.height / self.media.height
        )

    @property
    def _safe_scale(self) -> float:
        # An empty viewport yields 0; never divide by it
        scale = self.scale
        return scale if scale > 0 else 1.0

    @property
    def offset(self) -> Tuple[float, float]:
        """Top-left corner of the scaled media inside the viewport."""
        scale = self._safe_scale
        return (
            (self.viewport.width - self.media.width * scale) / 2,
            (self.viewport.height - self.media.height * scale) / 2
        )

    def to_display(self, x: float, y: float) -> Tuple[float, float]:
        scale = self._safe_scale
        offset_x, offset_y = self.offset
        return x * scale + offset_x, y * scale + offset_y

    def to_media(self, x: float, y: float) -> Tuple[float, float]:
        scale = self._safe_scale
        offset_x, offset_y = self.offset
        return (x - offset_x) / scale, (y - offset_y) / scale

    def delta_to_media(self, dx: float, dy: float) -> Tuple[float, float]:
        """Convert a display-space displacement (no offset involved)."""
        scale = self._safe_scale
        return dx / scale, dy / scale

    def to_display_rect(self, region: CropRegion) -> Tuple[float, float, float, float]:
        """Project a crop region to (x, y, width, height) in display pixels."""
        scale = self._safe_scale
        x, y = self.to_display(region.x, region.y)
        return x, y, region.width * scale, region.height * scale

    def media_rect(self) -> Tuple[float, float, float, float]:
        """Display rectangle covered by the scaled video."""
        scale = self._safe_scale
        offset_x, offset_y = self.offset
        return offset_x, offset_y, self.media.width * scale, self.media.height * scale
