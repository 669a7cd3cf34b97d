"""Drag gesture classification for swipe-style decisions.

Pure logic - the host UI feeds pointer coordinates and gets back what the
gesture means. Positive horizontal displacement is accept, negative is reject.
"""

from dataclasses import dataclass
from enum import Enum

COMMIT_THRESHOLD = 100
PREVIEW_THRESHOLD = 50
AXIS_LOCK_DISTANCE = 10


class GestureOutcome(Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    CANCEL = "cancel"
    SCROLL = "scroll"


class Axis(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class GestureTracker:
    """
    Tracks a single drag from start() to end().

    The dominant axis is locked once movement exceeds AXIS_LOCK_DISTANCE.
    A vertical lock is a scroll and never commits a decision.
    """

    commit_threshold: int = COMMIT_THRESHOLD
    preview_threshold: int = PREVIEW_THRESHOLD
    axis_lock_distance: int = AXIS_LOCK_DISTANCE

    def __post_init__(self):
        self._active = False
        self._start = (0.0, 0.0)
        self._current = (0.0, 0.0)
        self.axis: Axis | None = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def displacement(self) -> float:
        """Horizontal displacement since start."""
        return self._current[0] - self._start[0]

    def start(self, x: float, y: float, is_loading: bool = False) -> bool:
        """Begin tracking. Refused while loading."""
        if is_loading:
            return False
        self._active = True
        self._start = (x, y)
        self._current = (x, y)
        self.axis = None
        return True

    def move(self, x: float, y: float) -> Axis | None:
        """Record movement and return the locked axis, if any."""
        if not self._active:
            return None
        self._current = (x, y)
        if self.axis is None:
            dx = abs(x - self._start[0])
            dy = abs(y - self._start[1])
            if max(dx, dy) >= self.axis_lock_distance:
                self.axis = Axis.HORIZONTAL if dx > dy else Axis.VERTICAL
        return self.axis

    def preview(self) -> GestureOutcome | None:
        """Direction hint while dragging, or None inside the dead zone."""
        if not self._active or self.axis is not Axis.HORIZONTAL:
            return None
        if self.displacement > self.preview_threshold:
            return GestureOutcome.ACCEPT
        if self.displacement < -self.preview_threshold:
            return GestureOutcome.REJECT
        return None

    def end(self) -> GestureOutcome:
        """Finish the gesture and classify it."""
        if not self._active:
            return GestureOutcome.CANCEL
        self._active = False

        if self.axis is Axis.VERTICAL:
            return GestureOutcome.SCROLL
        if abs(self.displacement) > self.commit_threshold:
            return GestureOutcome.ACCEPT if self.displacement > 0 else GestureOutcome.REJECT
        return GestureOutcome.CANCEL
