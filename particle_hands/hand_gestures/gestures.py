"""Stability-gated shape switching driven by finger count."""

import math
import time
from dataclasses import dataclass
from enum import Enum

from .math_utils import Point2, dist2
from .features import HandObservation
from .config import STILL_SPEED_THRESHOLD, STILL_HOLD_MS, STILL_PADDING_MS
from ..particles.shapes import DIGIT_SHAPES, ShapeType


def _timestamp() -> str:
    return time.strftime('%H:%M:%S')


class DebouncePhase(Enum):
    IDLE = "Idle"
    TRACKING = "Tracking"
    TRIGGERED = "Triggered"


@dataclass
class StabilityState:
    """Motion history owned by the debouncer."""
    last_position: Point2 | None = None
    last_timestamp_ms: float = 0.0
    accumulated_still_ms: float = 0.0

    def reset(self):
        self.last_position = None
        self.last_timestamp_ms = 0.0
        self.accumulated_still_ms = 0.0


@dataclass
class ActiveShapeState:
    """
    Displayed shape plus the shape the user last picked.

    Digit gestures change only what is displayed; an open hand brings back
    the user's pick.
    """
    current: ShapeType = ShapeType.HEART
    user_selected: ShapeType = ShapeType.HEART

    def select(self, shape: ShapeType):
        """Explicit user selection."""
        self.user_selected = shape
        self.current = shape

    def display(self, shape: ShapeType):
        """Automatic (gesture) override of the displayed shape."""
        self.current = shape


@dataclass(frozen=True)
class ShapeSwitchRequest:
    """Debounced request to display another shape."""
    shape: ShapeType
    previous: ShapeType
    finger_count: int
    timestamp_ms: float


def resolve_target_shape(finger_count: int | None, user_selected: ShapeType) -> ShapeType | None:
    """
    Map a finger count to the shape it asks for.

    1-4 select the digit glyphs, 5 or more restores the user's shape,
    anything else asks for nothing.
    """
    if finger_count is None or finger_count < 1:
        return None
    if finger_count <= len(DIGIT_SHAPES):
        return DIGIT_SHAPES[finger_count - 1]
    return user_selected


class StabilityDebouncer:
    """
    Emits shape switches only after the hand has been nearly motionless long
    enough while showing a recognized finger count.

    Args:
        speed_threshold: Planar speed (units/ms) below which the hand is still
        hold_ms: Accumulated stillness required before a gesture counts
        padding_ms: Added per still sample to absorb detector jitter
    """

    def __init__(
        self,
        speed_threshold: float = STILL_SPEED_THRESHOLD,
        hold_ms: float = STILL_HOLD_MS,
        padding_ms: float = STILL_PADDING_MS,
    ):
        self.speed_threshold = speed_threshold
        self.hold_ms = hold_ms
        self.padding_ms = padding_ms
        self.state = StabilityState()

    @property
    def phase(self) -> DebouncePhase:
        if self.state.last_position is None:
            return DebouncePhase.IDLE
        if self.state.accumulated_still_ms > self.hold_ms:
            return DebouncePhase.TRIGGERED
        return DebouncePhase.TRACKING

    def reset(self):
        self.state.reset()

    def _speed(self, position: Point2, now_ms: float) -> float:
        """Planar speed since the previous sample; inf when there is none."""
        st = self.state
        if st.last_position is None:
            return math.inf
        dt = now_ms - st.last_timestamp_ms
        if dt <= 0:
            return math.inf
        return dist2(position, st.last_position) / dt

    def update(
        self, observation: HandObservation, now_ms: float, shapes: ActiveShapeState
    ) -> ShapeSwitchRequest | None:
        """
        Feed one fresh observation.

        Args:
            observation: Newly extracted observation
            now_ms: Sample timestamp in milliseconds
            shapes: Shape record; `current` is updated when a switch fires

        Returns:
            ShapeSwitchRequest when the displayed shape should change, else None
        """
        st = self.state
        if not observation.is_present:
            st.reset()
            return None

        position = observation.xy
        elapsed = now_ms - st.last_timestamp_ms
        speed = self._speed(position, now_ms)

        if speed < self.speed_threshold:
            st.accumulated_still_ms += elapsed + self.padding_ms
        else:
            st.accumulated_still_ms = 0.0

        st.last_position = position
        st.last_timestamp_ms = now_ms

        if st.accumulated_still_ms <= self.hold_ms:
            return None

        target = resolve_target_shape(observation.finger_count, shapes.user_selected)
        if target is None or target == shapes.current:
            return None

        request = ShapeSwitchRequest(
            shape=target,
            previous=shapes.current,
            finger_count=observation.finger_count,
            timestamp_ms=now_ms,
        )
        shapes.display(target)
        print(f"[{_timestamp()}] Gesture: {observation.finger_count} finger(s) held "
              f"{st.accumulated_still_ms:.0f}ms -> {target.value}")
        return request
