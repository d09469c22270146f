"""
Timeline Editor

Direct manipulation of the trim selection on a horizontal track:

- dragging the START / END handles (with live scrub preview),
- nudging the focused handle with the arrow keys,
- click-to-seek on the track background,
- auto-pause when playback reaches the end of the selection.

Track positions are display pixels measured from the left edge of the
track; the track width is supplied by the layout.

    time = percent / 100 * duration
    percent = time / duration * 100

With a zero duration the editor is inert.
"""

import math
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

from clip_editor.config import logger
from clip_editor.editing.drag import DragState, InputSurface
from clip_editor.models.edit_state import ClipSelection

if TYPE_CHECKING:
    from clip_editor.models.session import EditSession
    from clip_editor.playback.media import MediaElement


class TimelineHandle(Enum):
    NONE = "none"
    START = "start"
    END = "end"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class TimelineEditor:
    """
    Drag, keyboard and seek controller for the trim selection of an EditSession.

    Usage:
        editor = TimelineEditor(session, media, input_surface)
        editor.set_track_width(600)
        editor.pointer_down(120.0)     # grabs a handle or seeks
        editor.update_drag(150.0)      # normally delivered by the input surface
        editor.end_drag()
    """

    def __init__(
        self,
        session: "EditSession",
        media: "MediaElement",
        input_surface: Optional[InputSurface] = None
    ):
        self._session = session
        self._media = media
        self.input_surface = input_surface
        self._drag: Optional[DragState] = None
        self._focused = TimelineHandle.NONE
        self._track_width = 0.0

        self._media.time_updated.connect(self.on_time_update)
        self._observing = True

    # --- State ---

    @property
    def enabled(self) -> bool:
        return self._session.selection is not None and self._session.duration > 0

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    @property
    def active_handle(self) -> TimelineHandle:
        return self._drag.handle if self._drag else TimelineHandle.NONE

    @property
    def focused_handle(self) -> TimelineHandle:
        return self._focused

    @property
    def track_width(self) -> float:
        return self._track_width

    def set_track_width(self, width: float) -> None:
        self._track_width = max(0.0, float(width))

    # --- Space mapping ---

    def time_to_percent(self, seconds: float) -> float:
        duration = self._session.duration
        if duration <= 0:
            return 0.0
        return seconds / duration * 100

    def percent_to_time(self, percent: float) -> float:
        return percent / 100 * self._session.duration

    def position_to_time(self, x: float) -> float:
        """Track x-position to seconds, clamped to the track."""
        if self._track_width <= 0:
            return 0.0
        percent = _clamp(x / self._track_width * 100, 0, 100)
        return self.percent_to_time(percent)

    def time_to_position(self, seconds: float) -> float:
        return self.time_to_percent(seconds) / 100 * self._track_width

    # --- Hit-testing ---

    def hit_test(self, x: float) -> TimelineHandle:
        """Handle within reach of a track position; the nearer one wins."""
        selection = self._session.selection
        if not self.enabled or self._track_width <= 0:
            return TimelineHandle.NONE

        radius = self._session.config.hit_radius
        start_distance = abs(x - self.time_to_position(selection.start))
        end_distance = abs(x - self.time_to_position(selection.end))

        if start_distance > radius and end_distance > radius:
            return TimelineHandle.NONE
        if start_distance < end_distance:
            return TimelineHandle.START
        if end_distance < start_distance:
            return TimelineHandle.END
        # Handles overlap: pick the one that can move towards the pointer
        return TimelineHandle.END if x >= self.time_to_position(selection.end) else TimelineHandle.START

    # --- Clamping ---

    def _clamped_time(self, handle: TimelineHandle, seconds: float) -> float:
        selection = self._session.selection
        min_duration = self._session.min_clip_duration()
        if handle is TimelineHandle.START:
            return _clamp(seconds, 0, selection.end - min_duration)
        return _clamp(seconds, selection.start + min_duration, self._session.duration)

    def _millisecond_bounds(self, handle: TimelineHandle) -> Tuple[float, float]:
        """Handle range narrowed to whole milliseconds inside the drag bounds."""
        selection = self._session.selection
        min_duration = self._session.min_clip_duration()
        if handle is TimelineHandle.START:
            low, high = 0.0, selection.end - min_duration
        else:
            low, high = selection.start + min_duration, self._session.duration
        return math.ceil(low * 1000) / 1000, math.floor(high * 1000) / 1000

    def _with_handle_time(self, handle: TimelineHandle, seconds: float) -> ClipSelection:
        selection = self._session.selection
        if handle is TimelineHandle.START:
            return ClipSelection(seconds, selection.end)
        return ClipSelection(selection.start, seconds)

    # --- Pointer ---

    def pointer_down(self, x: float) -> TimelineHandle:
        """
        Press on the track: grab a handle if one is within reach,
        otherwise seek to the pressed position.

        Returns:
            The grabbed handle, or TimelineHandle.NONE for a seek / ignored press
        """
        handle = self.hit_test(x)
        if handle is TimelineHandle.NONE:
            self.blur()
            self.seek_to_position(x)
            return handle
        self.begin_drag(handle, x)
        return handle

    def begin_drag(self, handle: TimelineHandle, x: float = 0.0) -> bool:
        """
        Start dragging a handle. The handle takes keyboard focus and
        playback is paused for scrubbing.

        Returns:
            True if a drag started
        """
        self.cancel_drag()
        if handle is TimelineHandle.NONE or not self.enabled:
            return False

        self._focused = handle
        self._drag = DragState(handle, x, 0.0)
        if self.input_surface is not None:
            self._drag.dispose = self.input_surface.subscribe(self.update_drag, self.end_drag)

        if self._media.is_playing:
            self._media.pause()
        logger.debug(f"Timeline drag started: {handle.value}")
        return True

    def update_drag(self, x: float, y: float = 0.0) -> None:
        """Move the dragged handle to the time under the pointer."""
        drag = self._drag
        if drag is None:
            return
        if not self.enabled:
            self.cancel_drag()
            return

        drag.anchor_x, drag.anchor_y = x, y
        seconds = self._clamped_time(drag.handle, self.position_to_time(x))
        self._session.update_selection(self._with_handle_time(drag.handle, seconds))
        self._media.current_time = seconds

    def end_drag(self) -> None:
        if self._drag is None:
            return
        self._drag.release()
        self._drag = None

    def cancel_drag(self) -> None:
        if self._drag is None:
            return
        logger.debug("Timeline drag cancelled")
        self.end_drag()

    def seek_to_position(self, x: float) -> bool:
        """Click-to-seek; the selection is left untouched."""
        if not self.enabled or self._track_width <= 0:
            return False
        self._media.current_time = self.position_to_time(x)
        return True

    # --- Keyboard ---

    def focus(self, handle: TimelineHandle) -> None:
        self._focused = handle

    def blur(self) -> None:
        self._focused = TimelineHandle.NONE

    def step_for(self, shift: bool = False, alt: bool = False) -> float:
        config = self._session.config
        if shift:
            return config.step_coarse
        if alt:
            return config.step_fine
        return config.step_default

    def nudge(self, direction: int, shift: bool = False, alt: bool = False) -> bool:
        """
        Move the focused handle one step.

        Args:
            direction: -1 for ArrowLeft, +1 for ArrowRight
            shift: Coarse step
            alt: Fine step

        Returns:
            True if the selection changed
        """
        handle = self._focused
        if handle is TimelineHandle.NONE or not self.enabled or direction == 0:
            return False

        selection = self._session.selection
        current = selection.start if handle is TimelineHandle.START else selection.end
        step = self.step_for(shift=shift, alt=alt)
        seconds = current + (step if direction > 0 else -step)
        low, high = self._millisecond_bounds(handle)
        if low > high:
            return False
        seconds = _clamp(round(seconds, 3), low, high)

        # A handle resting between the last millisecond and its bound stays put
        if seconds == current or (seconds - current) * direction < 0:
            return False

        self._session.update_selection(self._with_handle_time(handle, seconds))
        self._media.current_time = seconds
        return True

    # --- Playback ---

    def play(self) -> None:
        """Start playback, rewinding to the selection start when past its end."""
        selection = self._session.selection
        if selection is not None:
            if self._media.current_time >= selection.end - self._session.config.replay_epsilon:
                self._media.current_time = selection.start
        self._media.play()

    def on_time_update(self, seconds: float) -> None:
        """Pause exactly at the selection end while playing."""
        selection = self._session.selection
        if selection is None or not self._media.is_playing:
            return
        if seconds >= selection.end - self._session.config.end_epsilon:
            self._media.pause()
            self._media.current_time = selection.end

    def dispose(self) -> None:
        """Teardown: abort any gesture and stop observing the media element."""
        self.cancel_drag()
        self._focused = TimelineHandle.NONE
        if self._observing:
            self._media.time_updated.disconnect(self.on_time_update)
            self._observing = False
