"""
Edit Session

The single owner of all edit state for one loaded video. The UI talks to
the session and to the editors it composes; nothing else holds a copy of
the crop, the selection, or the media geometry.

Architecture:
    EditSession
    ├── MediaDimensions / CropRegion / ClipSelection / DisplayViewport
    ├── CropEditor          (pointer → crop updates)
    ├── TimelineEditor      (pointer / keys → selection updates, seeking)
    ├── PlaybackSynchronizer(media element → PlaybackState)
    └── StatusLog           (media and export events)

Lifecycle:
    load_media(path) → pending → metadata_loaded(w, h, d) → ready
    request_export(out) → processing → on_export_finished / on_export_failed
"""

import math
from typing import Optional, Tuple

from PySide6.QtCore import QObject, Signal

from clip_editor.config import EditorConfig, logger
from clip_editor.editing.crop_editor import CropEditor
from clip_editor.editing.drag import InputSurface
from clip_editor.editing.geometry import GeometryMapper
from clip_editor.editing.timeline_editor import TimelineEditor
from clip_editor.models.edit_state import (
    MediaDimensions, CropRegion, ClipSelection, DisplayViewport
)
from clip_editor.models.export_request import ExportRequest, CropArea, SelectionRange
from clip_editor.models.status_log import StatusLog, INFO, PROGRESS, ERROR, SUCCESS
from clip_editor.playback.media import MediaElement
from clip_editor.playback.synchronizer import PlaybackSynchronizer


class EditValidationError(ValueError):
    """The current edit cannot be exported as it stands."""


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class EditSession(QObject):
    """
    Edit state for the currently loaded video.

    Signals:
        crop_changed: New CropRegion (None when media failed to load)
        selection_changed: New ClipSelection (None when media failed to load)
        viewport_changed: New DisplayViewport
        media_ready: MediaDimensions of freshly loaded media
        media_failed: Load error message
        validation_failed: Reason an export request was rejected
        processing_changed: Whether an export is running
        export_finished: Export ended (success, message)
    """

    crop_changed = Signal(object)
    selection_changed = Signal(object)
    viewport_changed = Signal(object)
    media_ready = Signal(object)
    media_failed = Signal(str)
    validation_failed = Signal(str)
    processing_changed = Signal(bool)
    export_finished = Signal(bool, str)

    def __init__(
        self,
        media: MediaElement,
        config: Optional[EditorConfig] = None,
        input_surface: Optional[InputSurface] = None,
        parent=None
    ):
        super().__init__(parent)

        self.config = config or EditorConfig()
        self._media_element = media

        # State
        self._media: Optional[MediaDimensions] = None
        self._duration = 0.0
        self._crop: Optional[CropRegion] = None
        self._selection: Optional[ClipSelection] = None
        self._viewport = DisplayViewport()
        self._input_path: Optional[str] = None
        self._awaiting_metadata = False
        self._processing = False
        self._disposed = False

        # Collaborators
        self.status_log = StatusLog(self.config.max_log_entries, self)
        self.crop_editor = CropEditor(self, input_surface)
        self.timeline_editor = TimelineEditor(self, media, input_surface)
        self.playback = PlaybackSynchronizer(media, play=self.timeline_editor.play, parent=self)

        media.metadata_loaded.connect(self.on_metadata_loaded)
        media.load_failed.connect(self.on_media_error)

    # --- Read access ---

    @property
    def media(self) -> Optional[MediaDimensions]:
        return self._media

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def crop(self) -> Optional[CropRegion]:
        return self._crop

    @property
    def selection(self) -> Optional[ClipSelection]:
        return self._selection

    @property
    def viewport(self) -> DisplayViewport:
        return self._viewport

    @property
    def input_path(self) -> Optional[str]:
        return self._input_path

    @property
    def is_ready(self) -> bool:
        return self._media is not None and self._crop is not None and self._selection is not None

    @property
    def is_pending(self) -> bool:
        return self._awaiting_metadata

    @property
    def is_processing(self) -> bool:
        return self._processing

    def mapper(self) -> GeometryMapper:
        """A mapper for the current media and viewport."""
        return GeometryMapper(self._media or MediaDimensions(0, 0), self._viewport)

    def min_crop_size(self) -> Tuple[float, float]:
        """Effective minimum crop size; never larger than the frame."""
        min_crop = self.config.min_crop
        if self._media is None:
            return min_crop, min_crop
        return min(min_crop, self._media.width), min(min_crop, self._media.height)

    def min_clip_duration(self) -> float:
        """Effective minimum selection length; never longer than the video."""
        if self._duration <= 0:
            return self.config.min_duration
        return min(self.config.min_duration, self._duration)

    # --- Media lifecycle ---

    def load_media(self, path: str) -> None:
        """
        Start loading a new video. Edit state is reset once valid metadata
        arrives.
        """
        self._cancel_gestures()
        self._input_path = path
        self._awaiting_metadata = True
        self.status_log.clear()
        self.status_log.add(f"Opening {path}", INFO)
        self._media_element.load(path)

    def on_metadata_loaded(self, width: int, height: int, duration: float) -> bool:
        """
        Metadata notification from the media element.

        Invalid values keep the session pending; only the first valid
        notification after load_media() resets the edit state.

        Returns:
            True if the edit state was reset
        """
        if not self._awaiting_metadata:
            return False
        if not self.reset_for_new_media(width, height, duration):
            logger.debug(f"Metadata not ready yet: {width}x{height}, {duration}s")
            return False
        self._awaiting_metadata = False
        return True

    def reset_for_new_media(self, width: int, height: int, duration: float) -> bool:
        """
        Reset crop to the full frame and selection to the whole video.

        Returns:
            False (and changes nothing) if the metadata is not usable
        """
        if width <= 0 or height <= 0 or not math.isfinite(duration) or duration <= 0:
            return False

        self._cancel_gestures()
        self._media = MediaDimensions(int(width), int(height))
        self._duration = float(duration)
        self._crop = CropRegion.full_frame(self._media)
        self._selection = ClipSelection(0.0, self._duration)

        self.crop_changed.emit(self._crop)
        self.selection_changed.emit(self._selection)
        self.status_log.add(
            f"Video loaded. Resolution: {width}x{height}, Duration: {duration:.1f}s",
            SUCCESS
        )
        self.media_ready.emit(self._media)
        return True

    def on_media_error(self, message: str) -> None:
        """Unrecoverable load failure: there is no frame left to clamp against."""
        self._cancel_gestures()
        self._awaiting_metadata = False
        self._media = None
        self._duration = 0.0
        self._crop = None
        self._selection = None

        self.status_log.add(f"Failed to load video: {message}", ERROR)
        self.crop_changed.emit(None)
        self.selection_changed.emit(None)
        self.media_failed.emit(message)

    # --- Layout ---

    def set_viewport(self, width: float, height: float) -> None:
        """Container resized."""
        viewport = DisplayViewport(max(0.0, float(width)), max(0.0, float(height)))
        if viewport != self._viewport:
            self._viewport = viewport
            self.viewport_changed.emit(viewport)

    # --- Mutation (editors only) ---

    def update_crop(self, crop: CropRegion) -> bool:
        if self._media is None or crop == self._crop:
            return False
        self._crop = crop
        self.crop_changed.emit(crop)
        return True

    def update_selection(self, selection: ClipSelection) -> bool:
        if self._duration <= 0 or selection == self._selection:
            return False
        self._selection = selection
        self.selection_changed.emit(selection)
        return True

    # --- Export ---

    def build_export_request(self, output_path: str) -> ExportRequest:
        """
        Validate the edit and format it for the encoding backend.

        Raises:
            EditValidationError: If the edit cannot be exported
        """
        if not self.is_ready or not self._input_path:
            raise EditValidationError("Please select a video file and wait for it to load.")
        if not output_path:
            raise EditValidationError("No output file selected.")

        selection = self._selection
        if round(selection.end - selection.start, 6) < self.config.min_export_duration:
            raise EditValidationError(
                f"Trim duration is too short (must be at least {self.config.min_export_duration}s)."
            )

        min_width, min_height = self.min_crop_size()
        crop = self._crop
        if crop.width < min_width or crop.height < min_height:
            raise EditValidationError(
                f"Crop area is too small (minimum {min_width:g}x{min_height:g}px)."
            )

        x = min(_round_half_up(crop.x), self._media.width - 1)
        y = min(_round_half_up(crop.y), self._media.height - 1)
        width = min(_round_half_up(crop.width), self._media.width - x)
        height = min(_round_half_up(crop.height), self._media.height - y)

        return ExportRequest(
            input_path=self._input_path,
            output_path=output_path,
            crop=CropArea(x=x, y=y, width=width, height=height),
            selection=SelectionRange(
                start=round(selection.start, 3),
                end=round(selection.end, 3)
            )
        )

    def request_export(self, output_path: str) -> Optional[ExportRequest]:
        """
        Validate and enter the processing state.

        Returns:
            The request to hand to the backend, or None if it was rejected
            (the reason is logged and emitted through validation_failed)
        """
        try:
            if self._processing:
                raise EditValidationError("An export is already running.")
            request = self.build_export_request(output_path)
        except EditValidationError as e:
            self.status_log.add(str(e), ERROR)
            self.validation_failed.emit(str(e))
            return None

        self.status_log.add(f"Starting export to: {output_path}", INFO)
        self._set_processing(True)
        return request

    def on_export_progress(self, text: str) -> None:
        self.status_log.add(text, PROGRESS)

    def on_export_finished(self, message: str) -> None:
        self.status_log.add(f"Export Complete! {message}", SUCCESS)
        self._set_processing(False)
        self.export_finished.emit(True, message)

    def on_export_failed(self, message: str) -> None:
        self.status_log.add(f"FFmpeg Process Failed: {message}", ERROR)
        self._set_processing(False)
        self.export_finished.emit(False, message)

    def _set_processing(self, processing: bool) -> None:
        if processing != self._processing:
            self._processing = processing
            self.processing_changed.emit(processing)

    # --- Teardown ---

    def _cancel_gestures(self) -> None:
        self.crop_editor.cancel_drag()
        self.timeline_editor.cancel_drag()

    def dispose(self) -> None:
        """Abort gestures, detach every listener and stop observing the media."""
        if self._disposed:
            return
        self._disposed = True
        self.crop_editor.dispose()
        self.timeline_editor.dispose()
        self.playback.dispose()
        self._media_element.metadata_loaded.disconnect(self.on_metadata_loaded)
        self._media_element.load_failed.disconnect(self.on_media_error)
