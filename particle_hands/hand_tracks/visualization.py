"""OpenCV presentation of the particle buffer."""

import math

import cv2
import numpy as np
from numpy.typing import NDArray

from ..hand_gestures.features import HandObservation
from ..particles.color import to_bgr255
from .hand_tracker import TrackerStatus


FONT = cv2.FONT_HERSHEY_SIMPLEX
COLOR_BACKGROUND = (5, 5, 5)
COLOR_TEXT = (200, 200, 200)
COLOR_WARN = (0, 170, 255)
COLOR_ERROR = (0, 0, 255)

CAMERA_DISTANCE = 8.0
FIELD_OF_VIEW_DEG = 60.0
POINT_SIZE = 2

HELP_TEXT = "1-5 shape  c color  f fullscreen  q quit"


def project_points(
    positions: NDArray[np.float32],
    spin: float,
    width: int,
    height: int,
    camera_distance: float = CAMERA_DISTANCE,
    fov_deg: float = FIELD_OF_VIEW_DEG,
) -> tuple[NDArray[np.int32], NDArray[np.int32]]:
    """
    Perspective-project the flat position buffer into pixel coordinates.

    The cloud is spun about the vertical axis first; the camera looks down -z
    from `camera_distance`. Points behind the camera or off screen are dropped.
    """
    pts = positions.reshape(-1, 3)
    c, s = math.cos(spin), math.sin(spin)
    x = pts[:, 0] * c + pts[:, 2] * s
    z = -pts[:, 0] * s + pts[:, 2] * c
    y = pts[:, 1]

    depth = camera_distance - z
    focal = (height / 2.0) / math.tan(math.radians(fov_deg) / 2.0)
    visible = depth > 1e-3
    depth = np.where(visible, depth, 1.0)

    px = (x / depth * focal + width / 2.0).astype(np.int32)
    py = (-y / depth * focal + height / 2.0).astype(np.int32)
    visible &= (px >= 0) & (px < width) & (py >= 0) & (py < height)
    return px[visible], py[visible]


def draw_status(
    frame: NDArray[np.uint8],
    status: TrackerStatus,
    observation: HandObservation,
    shape_name: str,
    error: str | None = None,
) -> None:
    """Draw tracker status, hand readout and current shape."""
    if status == TrackerStatus.LOADING:
        cv2.putText(frame, "Initializing hand tracking...", (10, 30), FONT, 0.7, COLOR_WARN, 2)
    elif status == TrackerStatus.FAILED:
        cv2.putText(frame, f"Hand tracking unavailable: {error or 'unknown error'}",
                    (10, 30), FONT, 0.6, COLOR_ERROR, 2)
    elif observation.is_present:
        text = (f"Fingers: {observation.finger_count}  "
                f"pinch: {observation.pinch_openness:.2f}  "
                f"rot: {math.degrees(observation.rotation):+.0f}")
        cv2.putText(frame, text, (10, 30), FONT, 0.6, COLOR_TEXT, 2)
    else:
        cv2.putText(frame, "No hand detected", (10, 30), FONT, 0.7, COLOR_TEXT, 2)

    h = frame.shape[0]
    cv2.putText(frame, f"Shape: {shape_name}", (10, 60), FONT, 0.6, COLOR_TEXT, 2)
    cv2.putText(frame, HELP_TEXT, (10, h - 15), FONT, 0.5, COLOR_TEXT, 1)


class ParticleDisplay:
    """Manages the OpenCV window the particle cloud is drawn into."""

    def __init__(self, window_name: str = "Particle Morph", width: int = 1280, height: int = 720):
        self.window_name = window_name
        self.width = width
        self.height = height
        self.fullscreen = False
        self._canvas = np.empty((height, width, 3), dtype=np.uint8)
        cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(window_name, width, height)

    def render(
        self,
        positions: NDArray[np.float32],
        spin: float,
        color: tuple[float, float, float],
    ) -> NDArray[np.uint8]:
        """Draw the cloud onto a fresh canvas and return it."""
        canvas = self._canvas
        canvas[:] = COLOR_BACKGROUND
        px, py = project_points(positions, spin, self.width, self.height)
        canvas[py, px] = to_bgr255(color)
        if POINT_SIZE > 1:
            kernel = np.ones((POINT_SIZE, POINT_SIZE), dtype=np.uint8)
            canvas = cv2.dilate(canvas, kernel)
        return canvas

    def toggle_fullscreen(self) -> None:
        self.fullscreen = not self.fullscreen
        mode = cv2.WINDOW_FULLSCREEN if self.fullscreen else cv2.WINDOW_NORMAL
        cv2.setWindowProperty(self.window_name, cv2.WND_PROP_FULLSCREEN, mode)

    def show(self, frame: NDArray[np.uint8]) -> int:
        """Display frame and return key press."""
        cv2.imshow(self.window_name, frame)
        return cv2.waitKey(1) & 0xFF

    def close(self) -> None:
        """Close display window."""
        cv2.destroyWindow(self.window_name)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
