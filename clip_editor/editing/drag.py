"""
Drag Gesture Plumbing

Shared pieces of the crop and timeline drag state machines:

- DragState: the handle being dragged and the last pointer position.
  It lives for exactly one gesture.
- InputSurface: a global pointer source. Subscribing returns a disposer;
  editors subscribe when a drag starts and must run the disposer on every
  exit path (pointer-up, cancellation, teardown).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

MoveCallback = Callable[[float, float], None]
ReleaseCallback = Callable[[], None]
Disposer = Callable[[], None]


@dataclass
class DragState:
    """
    Active gesture.

    Attributes:
        handle: Which handle is being dragged
        anchor_x: Pointer x at the previous event (display space)
        anchor_y: Pointer y at the previous event (display space)
    """
    handle: Enum
    anchor_x: float
    anchor_y: float
    dispose: Optional[Disposer] = None

    def release(self) -> None:
        """Detach the pointer subscription held by this gesture."""
        if self.dispose is not None:
            dispose, self.dispose = self.dispose, None
            dispose()


class InputSurface:
    """
    Source of pointer events that outlives any single widget press.

    Implementations deliver pointer moves (in the coordinates of the
    widget that owns the gesture) and the pointer release to subscribers.
    """

    def subscribe(self, on_move: MoveCallback, on_release: ReleaseCallback) -> Disposer:
        """
        Start delivering pointer events.

        Returns:
            An idempotent callable that detaches both listeners
        """
        raise NotImplementedError

    @property
    def active_count(self) -> int:
        """Number of live subscriptions."""
        raise NotImplementedError
