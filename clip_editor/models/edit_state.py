"""
Edit State Data Model

Value types describing one editing session. Geometry is kept in media
pixel space (the native resolution of the loaded video) and time in
seconds; only the Geometry Mapper knows about display space.

Architecture:
    EditSession
    ├── media: MediaDimensions
    ├── crop: CropRegion
    ├── selection: ClipSelection
    └── viewport: DisplayViewport

All types are immutable; editors replace them wholesale through the
session's update operations.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MediaDimensions:
    """Native pixel size of the loaded video."""
    width: int
    height: int


@dataclass(frozen=True)
class CropRegion:
    """
    Crop rectangle in media pixel space.

    Attributes:
        x: Left edge
        y: Top edge
        width: Horizontal extent
        height: Vertical extent
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def fits(self, media: MediaDimensions, min_width: float, min_height: float) -> bool:
        """Check the rectangle lies inside the frame and respects the minimum size."""
        return (
            self.x >= 0
            and self.y >= 0
            and self.right <= media.width
            and self.bottom <= media.height
            and self.width >= min_width
            and self.height >= min_height
        )

    @staticmethod
    def full_frame(media: MediaDimensions) -> "CropRegion":
        """A crop covering the whole frame."""
        return CropRegion(0.0, 0.0, float(media.width), float(media.height))


@dataclass(frozen=True)
class ClipSelection:
    """Trim range in seconds."""
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class DisplayViewport:
    """Size of the on-screen container the video is drawn into."""
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class PlaybackState:
    """
    Mirror of the media element's transport state.

    Never authoritative: it only changes when the media element reports
    a play, pause, mute or position event.
    """
    current_time: float = 0.0
    is_playing: bool = False
    is_muted: bool = True
