"""
Playback Synchronizer

Mirrors the media element's transport state (position, playing, muted)
for display, and exposes play/pause and mute toggles.

The media element is the only source of truth: toggles call into it, and
the mirrored PlaybackState changes only when the resulting native event
comes back.
"""

from dataclasses import replace
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from clip_editor.models.edit_state import PlaybackState
from clip_editor.playback.media import MediaElement


class PlaybackSynchronizer(QObject):
    """
    Observer of a MediaElement.

    Signals:
        state_changed: Emitted with the new PlaybackState
    """

    state_changed = Signal(object)

    def __init__(
        self,
        media: MediaElement,
        play: Optional[Callable[[], None]] = None,
        parent=None
    ):
        """
        Args:
            media: The observed media element
            play: Called to start playback (defaults to media.play); lets the
                timeline apply its restart-from-selection rule
        """
        super().__init__(parent)

        self._media = media
        self._play = play or media.play
        self._state = PlaybackState(
            current_time=media.current_time,
            is_playing=media.is_playing,
            is_muted=media.muted
        )

        self._connections = [
            (media.played, self._on_played),
            (media.paused, self._on_paused),
            (media.muted_changed, self._on_muted_changed),
            (media.time_updated, self._on_time_updated),
        ]
        for signal, slot in self._connections:
            signal.connect(slot)

    @property
    def state(self) -> PlaybackState:
        return self._state

    def toggle_play(self) -> None:
        if self._media.is_playing:
            self._media.pause()
        else:
            self._play()

    def toggle_mute(self) -> None:
        self._media.muted = not self._media.muted

    def dispose(self) -> None:
        """Stop observing the media element."""
        for signal, slot in self._connections:
            signal.disconnect(slot)
        self._connections = []

    def _update(self, **changes) -> None:
        new_state = replace(self._state, **changes)
        if new_state != self._state:
            self._state = new_state
            self.state_changed.emit(new_state)

    def _on_played(self) -> None:
        self._update(is_playing=True)

    def _on_paused(self) -> None:
        self._update(is_playing=False)

    def _on_muted_changed(self, muted: bool) -> None:
        self._update(is_muted=muted)

    def _on_time_updated(self, seconds: float) -> None:
        self._update(current_time=seconds)
