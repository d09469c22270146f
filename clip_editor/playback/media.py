"""
Media Element

The video player the editors talk to. MediaElement defines the signals
and controls the editing engine relies on; QtMediaElement implements
them on top of QtMultimedia.

Architecture:
    QtMediaElement
    ├── QMediaPlayer (decoding, position, metadata)
    ├── QAudioOutput (volume / mute)
    └── Video output (QGraphicsVideoItem or QVideoWidget, set by the view)

Signals:
    played: Playback started
    paused: Playback paused or stopped
    muted_changed: Mute state changed (is_muted)
    time_updated: Playback position changed (seconds)
    metadata_loaded: Metadata became available (width, height, duration);
        may fire several times, possibly with zero values at first
    load_failed: The media could not be loaded (message)
"""

import os
from typing import Optional

from PySide6.QtCore import QObject, Signal, QUrl

from clip_editor.config import logger


class MediaElement(QObject):
    """Interface of a video player as seen by the editing engine."""

    played = Signal()
    paused = Signal()
    muted_changed = Signal(bool)
    time_updated = Signal(float)
    metadata_loaded = Signal(int, int, float)
    load_failed = Signal(str)

    def load(self, path: str) -> None:
        raise NotImplementedError

    def play(self) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    @property
    def is_playing(self) -> bool:
        raise NotImplementedError

    @property
    def current_time(self) -> float:
        raise NotImplementedError

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        raise NotImplementedError

    @property
    def muted(self) -> bool:
        raise NotImplementedError

    @muted.setter
    def muted(self, value: bool) -> None:
        raise NotImplementedError


class QtMediaElement(MediaElement):
    """
    MediaElement backed by QMediaPlayer.

    Starts muted, like a preview player embedded in an editor.
    """

    def __init__(self, parent=None):
        super().__init__(parent)

        from PySide6.QtMultimedia import QMediaPlayer, QAudioOutput

        self._player = QMediaPlayer(self)
        self._audio = QAudioOutput(self)
        self._audio.setMuted(True)
        self._player.setAudioOutput(self._audio)
        self._is_playing = False
        self._source: Optional[str] = None
        self._failed = False

        self._player.playbackStateChanged.connect(self._on_playback_state_changed)
        self._player.positionChanged.connect(self._on_position_changed)
        self._player.durationChanged.connect(self._emit_metadata)
        self._player.metaDataChanged.connect(self._emit_metadata)
        self._player.mediaStatusChanged.connect(self._on_media_status_changed)
        self._player.errorOccurred.connect(self._on_error)
        self._audio.mutedChanged.connect(self.muted_changed)

    def set_video_output(self, output) -> None:
        """Attach a QGraphicsVideoItem or QVideoWidget."""
        self._player.setVideoOutput(output)

    def load(self, path: str) -> None:
        if not os.path.exists(path):
            self.load_failed.emit(f"Video file not found: {path}")
            return
        self._source = path
        self._failed = False
        logger.info(f"Loading media: {path}")
        self._player.setSource(QUrl.fromLocalFile(path))

    def play(self) -> None:
        self._player.play()

    def pause(self) -> None:
        self._player.pause()

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def current_time(self) -> float:
        return self._player.position() / 1000.0

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        self._player.setPosition(int(round(seconds * 1000)))

    @property
    def muted(self) -> bool:
        return self._audio.isMuted()

    @muted.setter
    def muted(self, value: bool) -> None:
        self._audio.setMuted(value)

    def _on_playback_state_changed(self, state) -> None:
        from PySide6.QtMultimedia import QMediaPlayer

        playing = state == QMediaPlayer.PlaybackState.PlayingState
        if playing == self._is_playing:
            return
        self._is_playing = playing
        if playing:
            self.played.emit()
        else:
            self.paused.emit()

    def _on_position_changed(self, position_ms: int) -> None:
        self.time_updated.emit(position_ms / 1000.0)

    def _on_media_status_changed(self, status) -> None:
        from PySide6.QtMultimedia import QMediaPlayer

        if status == QMediaPlayer.MediaStatus.LoadedMedia:
            self._emit_metadata()
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._fail(f"Unsupported or corrupt media: {self._source}")

    def _emit_metadata(self, *args) -> None:
        from PySide6.QtMultimedia import QMediaMetaData

        resolution = self._player.metaData().value(QMediaMetaData.Key.Resolution)
        width = resolution.width() if resolution is not None else 0
        height = resolution.height() if resolution is not None else 0
        self.metadata_loaded.emit(width, height, self._player.duration() / 1000.0)

    def _on_error(self, error, message: str) -> None:
        logger.error(f"Media error: {message}")
        self._fail(message or "Failed to load media")

    def _fail(self, message: str) -> None:
        # InvalidMedia and errorOccurred both fire for a broken file
        if self._failed:
            return
        self._failed = True
        self.load_failed.emit(message)
