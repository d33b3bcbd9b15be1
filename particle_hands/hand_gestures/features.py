"""Hand observation extraction from MediaPipe landmarks."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .math_utils import Point3, clamp, dist3, mean_point3, remap01, to_point3
from .config import (
    MIRROR_X, NUM_LANDMARKS,
    PINCH_CLOSED_DIST, PINCH_OPEN_DIST, PINCH_RESTING,
    FINGER_EXTENDED_RATIO, THUMB_EXTENDED_RATIO,
)


# MediaPipe landmark indices
class LM:
    WRIST = 0
    THUMB_MCP, THUMB_IP, THUMB_TIP = 2, 3, 4
    INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
    MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP = 9, 10, 11, 12
    RING_MCP, RING_PIP, RING_DIP, RING_TIP = 13, 14, 15, 16
    PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP = 17, 18, 19, 20


# (tip, pip) for index, middle, ring, pinky
FINGER_TIP_PIP = (
    (LM.INDEX_TIP, LM.INDEX_PIP),
    (LM.MIDDLE_TIP, LM.MIDDLE_PIP),
    (LM.RING_TIP, LM.RING_PIP),
    (LM.PINKY_TIP, LM.PINKY_PIP),
)


@dataclass(frozen=True)
class HandObservation:
    """Normalized control signal extracted from one detector frame."""
    is_present: bool
    position: Point3 = (0.0, 0.0, 0.0)
    rotation: float = 0.0
    pinch_openness: float = PINCH_RESTING
    finger_count: int = 0

    @classmethod
    def absent(cls) -> "HandObservation":
        """Neutral observation used whenever no usable hand is in view."""
        return cls(is_present=False)

    @property
    def xy(self) -> tuple[float, float]:
        return self.position[0], self.position[1]


def _coerce_landmarks(landmarks) -> list[Point3] | None:
    if landmarks is None:
        return None
    try:
        n = len(landmarks)
    except TypeError:
        return None
    if n < NUM_LANDMARKS:
        return None

    points = []
    for p in landmarks[:NUM_LANDMARKS]:
        pt = to_point3(p)
        if pt is None:
            return None
        points.append(pt)
    return points


def palm_position(n3: Sequence[Point3], mirror: bool = MIRROR_X) -> Point3:
    """
    Map the palm center from the 0..1 image frame to a centered -1..1 range.

    Horizontal axis is mirrored when `mirror` is set; vertical axis is flipped
    so up is positive. Depth is a constant placeholder.
    """
    cx, cy, _ = mean_point3([n3[LM.WRIST], n3[LM.MIDDLE_MCP]])
    x = (1.0 - cx) * 2.0 - 1.0 if mirror else cx * 2.0 - 1.0
    y = -(cy * 2.0 - 1.0)
    return (clamp(x, -1.0, 1.0), clamp(y, -1.0, 1.0), 0.0)


def pinch_openness(n3: Sequence[Point3]) -> float:
    """Thumb-index tip distance remapped to 0 (closed) .. 1 (open)."""
    d = dist3(n3[LM.THUMB_TIP], n3[LM.INDEX_TIP])
    return remap01(d, PINCH_CLOSED_DIST, PINCH_OPEN_DIST)


def hand_rotation(n3: Sequence[Point3], mirror: bool = MIRROR_X) -> float:
    """
    Roll of the wrist -> middle MCP vector relative to upright, in radians.

    Zero for an upright hand; tilting clockwise as seen on screen increases it.
    """
    vx = n3[LM.MIDDLE_MCP][0] - n3[LM.WRIST][0]
    vy = n3[LM.MIDDLE_MCP][1] - n3[LM.WRIST][1]
    if not mirror:
        vx = -vx
    return -math.atan2(vx, -vy)


def count_fingers(n3: Sequence[Point3]) -> int:
    """Count extended digits (0-5) from distance ratios to the wrist and palm."""
    wrist = n3[LM.WRIST]
    count = 0
    for tip, pip in FINGER_TIP_PIP:
        if dist3(n3[tip], wrist) > dist3(n3[pip], wrist) * FINGER_EXTENDED_RATIO:
            count += 1

    palm_width = dist3(n3[LM.INDEX_MCP], n3[LM.PINKY_MCP])
    thumb_reach = dist3(n3[LM.THUMB_TIP], n3[LM.PINKY_MCP])
    if thumb_reach > palm_width * THUMB_EXTENDED_RATIO:
        count += 1
    return count


def extract_observation(landmarks, mirror: bool = MIRROR_X) -> HandObservation:
    """
    Extract a HandObservation from one frame of hand landmarks.

    Args:
        landmarks: 21 normalized (x, y, z) points in MediaPipe order, or
            None / empty when no hand was detected.
        mirror: Mirror the horizontal axis (selfie view)

    Returns:
        HandObservation; incomplete or non-finite input yields the absent one
    """
    n3 = _coerce_landmarks(landmarks)
    if n3 is None:
        return HandObservation.absent()

    return HandObservation(
        is_present=True,
        position=palm_position(n3, mirror),
        rotation=hand_rotation(n3, mirror),
        pinch_openness=pinch_openness(n3),
        finger_count=count_fingers(n3),
    )
