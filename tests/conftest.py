"""Shared pytest fixtures: a Qt core application and in-memory stand-ins for the player and pointer."""
from typing import Callable, Dict, List, Tuple

import pytest
from PySide6.QtCore import QCoreApplication

from clip_editor.config import EditorConfig
from clip_editor.editing.drag import InputSurface
from clip_editor.models.session import EditSession
from clip_editor.playback.media import MediaElement


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


class FakeMediaElement(MediaElement):
    """Media element that behaves like a player without decoding anything."""

    def __init__(self):
        super().__init__()
        self.loaded: List[str] = []
        self.seeks: List[float] = []
        self._playing = False
        self._time = 0.0
        self._muted = True

    def load(self, path: str) -> None:
        self.loaded.append(path)

    def play(self) -> None:
        self._playing = True
        self.played.emit()

    def pause(self) -> None:
        self._playing = False
        self.paused.emit()

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def current_time(self) -> float:
        return self._time

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        self._time = seconds
        self.seeks.append(seconds)
        self.time_updated.emit(seconds)

    @property
    def muted(self) -> bool:
        return self._muted

    @muted.setter
    def muted(self, value: bool) -> None:
        if value != self._muted:
            self._muted = value
            self.muted_changed.emit(value)

    def advance(self, seconds: float) -> None:
        """Simulate the decoder reporting a new position."""
        self._time = seconds
        self.time_updated.emit(seconds)


class FakeInputSurface(InputSurface):
    """Pointer source driven by the test."""

    def __init__(self):
        self._subscriptions: Dict[int, Tuple[Callable, Callable]] = {}
        self._next = 0

    @property
    def active_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, on_move, on_release):
        token = self._next
        self._next += 1
        self._subscriptions[token] = (on_move, on_release)

        def dispose():
            self._subscriptions.pop(token, None)

        return dispose

    def move(self, x: float, y: float = 0.0) -> None:
        for on_move, _ in list(self._subscriptions.values()):
            on_move(x, y)

    def release(self) -> None:
        for _, on_release in list(self._subscriptions.values()):
            on_release()


@pytest.fixture
def media():
    return FakeMediaElement()


@pytest.fixture
def surface():
    return FakeInputSurface()


@pytest.fixture
def config():
    return EditorConfig()


@pytest.fixture
def session(media, surface, config):
    session = EditSession(media, config, input_surface=surface)
    yield session
    session.dispose()


@pytest.fixture
def loaded_session(session, media):
    """Session with a 1920x1080, 10s video shown in a 960x540 viewport."""
    session.load_media("input.mp4")
    media.metadata_loaded.emit(1920, 1080, 10.0)
    session.set_viewport(960, 540)
    return session
