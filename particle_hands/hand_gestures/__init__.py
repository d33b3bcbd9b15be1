"""Hand gesture interpretation module."""

from .config import ViewMode, VIEW_MODE, MAX_NUM_HANDS, MIRROR_X
from .features import (
    LM,
    HandObservation,
    extract_observation,
    count_fingers,
    pinch_openness,
    palm_position,
    hand_rotation,
)
from .gestures import (
    DebouncePhase,
    StabilityState,
    ActiveShapeState,
    ShapeSwitchRequest,
    StabilityDebouncer,
    resolve_target_shape,
)

__all__ = [
    "ViewMode",
    "VIEW_MODE",
    "MAX_NUM_HANDS",
    "MIRROR_X",
    "LM",
    "HandObservation",
    "extract_observation",
    "count_fingers",
    "pinch_openness",
    "palm_position",
    "hand_rotation",
    "DebouncePhase",
    "StabilityState",
    "ActiveShapeState",
    "ShapeSwitchRequest",
    "StabilityDebouncer",
    "resolve_target_shape",
]
