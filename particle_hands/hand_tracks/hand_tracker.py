"""MediaPipe hand landmark source running on a background thread."""

import threading
import time
from enum import Enum
from pathlib import Path

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision
from numpy.typing import NDArray

from ..hand_gestures.config import MAX_NUM_HANDS, MIRROR_X
from ..hand_gestures.features import HandObservation, extract_observation
from .observation_slot import LatestObservation


DEFAULT_MODEL_PATH = Path("hand_landmarker.task")
CAMERA_WIDTH = 640
CAMERA_HEIGHT = 480


def _timestamp() -> str:
    return time.strftime('%H:%M:%S')


class TrackerStatus(Enum):
    STOPPED = "stopped"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class GestureSourceError(RuntimeError):
    """The camera or the hand landmarker could not be brought up."""


class HandTracker:
    """
    Camera + MediaPipe HandLandmarker publishing observations to a slot.

    Initialization and detection both run on one daemon thread; status is
    LOADING until the camera and model are up. The camera is released on
    every exit path, including a failed start.
    """

    def __init__(
        self,
        model_path: str | Path = DEFAULT_MODEL_PATH,
        camera_index: int = 0,
        width: int = CAMERA_WIDTH,
        height: int = CAMERA_HEIGHT,
        slot: LatestObservation | None = None,
        mirror: bool = MIRROR_X,
        min_detection_confidence: float = 0.7,
        min_tracking_confidence: float = 0.6,
    ):
        self.model_path = Path(model_path)
        self.camera_index = camera_index
        self.width = width
        self.height = height
        self.slot = slot if slot is not None else LatestObservation()
        self.mirror = mirror
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence

        self.error: GestureSourceError | None = None
        self._status = TrackerStatus.STOPPED
        self._ready = threading.Event()
        self._stop = threading.Event()
        self._release_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._cap = None
        self._landmarker = None
        self._t0: float | None = None
        self._last_video_ms = -1

    @property
    def status(self) -> TrackerStatus:
        return self._status

    @property
    def ready(self) -> bool:
        return self._status == TrackerStatus.READY

    # --------------------------- lifecycle ---------------------------

    def start(self, block: bool = False, timeout: float | None = None) -> None:
        """
        Begin initialization and detection on the worker thread.

        Args:
            block: Wait for initialization and raise GestureSourceError on failure
            timeout: Seconds to wait when blocking
        """
        if self._thread is not None:
            return
        self._status = TrackerStatus.LOADING
        self._thread = threading.Thread(target=self._run, name="hand-tracker", daemon=True)
        self._thread.start()
        if block:
            self.wait_ready(timeout)
            if self.error is not None:
                raise self.error

    def wait_ready(self, timeout: float | None = None) -> bool:
        """Block until initialization finished; True when the source is live."""
        self._ready.wait(timeout)
        return self.ready

    def stop(self) -> None:
        """Stop detection, close the landmarker and release the camera."""
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=2.0)
        self._release()
        if self._status != TrackerStatus.FAILED:
            self._status = TrackerStatus.STOPPED

    def close(self) -> None:
        self.stop()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    # --------------------------- worker ---------------------------

    def _open(self) -> None:
        if not self.model_path.exists():
            raise GestureSourceError(f"Missing model file: {self.model_path}")

        cap = cv2.VideoCapture(self.camera_index)
        try:
            if not cap.isOpened():
                raise GestureSourceError(f"Cannot open camera {self.camera_index}")
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

            options = vision.HandLandmarkerOptions(
                base_options=mp_tasks.BaseOptions(model_asset_path=str(self.model_path)),
                running_mode=vision.RunningMode.VIDEO,
                num_hands=MAX_NUM_HANDS,
                min_hand_detection_confidence=self.min_detection_confidence,
                min_tracking_confidence=self.min_tracking_confidence,
            )
            try:
                landmarker = vision.HandLandmarker.create_from_options(options)
            except (RuntimeError, ValueError) as e:
                raise GestureSourceError(f"Cannot create hand landmarker: {e}") from e
        except BaseException:
            cap.release()
            raise

        with self._release_lock:
            self._cap = cap
            self._landmarker = landmarker

    def _run(self) -> None:
        try:
            self._open()
        except GestureSourceError as e:
            self._fail(e)
            return

        self._status = TrackerStatus.READY
        self._ready.set()
        print(f"[{_timestamp()}] Tracker: camera {self.camera_index} ready")

        try:
            while not self._stop.is_set():
                ok, frame = self._cap.read()
                if not ok:
                    time.sleep(0.005)
                    continue
                self.process_frame(frame)
        except (RuntimeError, ValueError, cv2.error) as e:
            self._fail(GestureSourceError(f"Detection stopped: {e}"))
        finally:
            self._release()

    def _fail(self, error: GestureSourceError) -> None:
        self.error = error
        self._status = TrackerStatus.FAILED
        self.slot.publish(HandObservation.absent(), self._now_ms())
        self._ready.set()
        print(f"[{_timestamp()}] Tracker: {error}")

    def _release(self) -> None:
        with self._release_lock:
            if self._landmarker is not None:
                self._landmarker.close()
                self._landmarker = None
            if self._cap is not None:
                self._cap.release()
                self._cap = None

    def _now_ms(self) -> float:
        return time.monotonic() * 1000.0

    def _video_timestamp(self, now_ms: float) -> int:
        """VIDEO mode needs strictly increasing integer timestamps."""
        if self._t0 is None:
            self._t0 = now_ms
        ts = max(self._last_video_ms + 1, int(now_ms - self._t0))
        self._last_video_ms = ts
        return ts

    def process_frame(self, frame: NDArray[np.uint8]) -> HandObservation:
        """Detect the hand in one BGR frame and publish the observation."""
        now_ms = self._now_ms()
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
        result = self._landmarker.detect_for_video(image, self._video_timestamp(now_ms))

        landmarks = result.hand_landmarks[0] if result.hand_landmarks else None
        observation = extract_observation(landmarks, mirror=self.mirror)
        self.slot.publish(observation, now_ms)
        return observation
