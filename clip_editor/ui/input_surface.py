"""
Qt Input Surface

Application-wide pointer tracking for drags. While at least one gesture
is subscribed, an event filter on the QApplication sees every mouse move
and release, whichever widget is under the cursor, so a drag keeps
working when the pointer leaves the view it started in.
"""

from typing import Dict, Tuple

from PySide6.QtCore import QObject, QEvent, QPoint
from PySide6.QtWidgets import QApplication, QWidget

from clip_editor.editing.drag import InputSurface, MoveCallback, ReleaseCallback, Disposer


class QtInputSurface(QObject, InputSurface):
    """
    InputSurface delivering positions in the coordinates of `widget`,
    measured from `origin`.

    Usage:
        surface = QtInputSurface(view)
        dispose = surface.subscribe(on_move, on_release)
        ...
        dispose()
    """

    def __init__(self, widget: QWidget, origin: Tuple[float, float] = (0.0, 0.0)):
        super().__init__(widget)
        self._widget = widget
        self._origin = origin
        self._subscriptions: Dict[int, Tuple[MoveCallback, ReleaseCallback]] = {}
        self._next_token = 0
        self._filter_installed = False
        self._last_global_pos = None

    @property
    def active_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, on_move: MoveCallback, on_release: ReleaseCallback) -> Disposer:
        token = self._next_token
        self._next_token += 1
        self._subscriptions[token] = (on_move, on_release)
        self._last_global_pos = None
        self._update_filter()

        def dispose() -> None:
            if self._subscriptions.pop(token, None) is not None:
                self._update_filter()

        return dispose

    def _update_filter(self) -> None:
        app = QApplication.instance()
        if app is None:
            return
        if self._subscriptions and not self._filter_installed:
            app.installEventFilter(self)
            self._filter_installed = True
        elif not self._subscriptions and self._filter_installed:
            app.removeEventFilter(self)
            self._filter_installed = False

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        event_type = event.type()
        if event_type == QEvent.Type.MouseMove:
            global_pos = event.globalPosition().toPoint()
            # The same move is seen once per receiver while it propagates
            if global_pos != self._last_global_pos:
                self._last_global_pos = global_pos
                self._dispatch_move(self._widget.mapFromGlobal(global_pos))
        elif event_type == QEvent.Type.MouseButtonRelease:
            self._dispatch_release()
        return False

    def _dispatch_move(self, pos: QPoint) -> None:
        for on_move, _ in list(self._subscriptions.values()):
            on_move(pos.x() - self._origin[0], pos.y() - self._origin[1])

    def _dispatch_release(self) -> None:
        # Release handlers dispose their own subscription
        for _, on_release in list(self._subscriptions.values()):
            on_release()
