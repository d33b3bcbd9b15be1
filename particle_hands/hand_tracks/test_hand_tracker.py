"""
Test suite for the MediaPipe hand tracker

Camera and model are mocked; no device or model file is needed.

Run with: python -m pytest particle_hands -v
"""

import os
import tempfile
import time
import unittest
from types import SimpleNamespace
from unittest import mock

import numpy as np

try:
    from particle_hands.hand_tracks import hand_tracker
except ImportError:  # cv2 or mediapipe unavailable on this machine
    hand_tracker = None

from particle_hands.hand_gestures.test_features import make_hand


def fake_result(points):
    landmarks = [SimpleNamespace(x=x, y=y, z=z) for x, y, z in points]
    return SimpleNamespace(hand_landmarks=[landmarks] if points else [])


@unittest.skipIf(hand_tracker is None, "opencv-python / mediapipe not importable")
class TestHandTracker(unittest.TestCase):
    """Test cases for HandTracker."""

    def setUp(self):
        fd, self.model_path = tempfile.mkstemp(suffix=".task")
        os.close(fd)
        self.addCleanup(os.remove, self.model_path)

        self.cap = mock.MagicMock()
        self.cap.isOpened.return_value = True
        self.cap.read.return_value = (True, np.zeros((48, 64, 3), dtype=np.uint8))

        self.landmarker = mock.MagicMock()
        self.landmarker.detect_for_video.return_value = fake_result(make_hand())

        patches = [
            mock.patch.object(hand_tracker.cv2, "VideoCapture", return_value=self.cap),
            mock.patch.object(hand_tracker, "vision"),
            mock.patch.object(hand_tracker, "mp_tasks"),
            mock.patch.object(hand_tracker, "mp"),
        ]
        mocks = [p.start() for p in patches]
        for p in patches:
            self.addCleanup(p.stop)
        self.vision = mocks[1]
        self.vision.HandLandmarker.create_from_options.return_value = self.landmarker

    def make_tracker(self, **kwargs):
        tracker = hand_tracker.HandTracker(model_path=self.model_path, **kwargs)
        self.addCleanup(tracker.stop)
        return tracker

    # ============================================================
    # Startup failures
    # ============================================================

    def test_missing_model(self):
        """A missing model file fails the start with a clear error."""
        tracker = self.make_tracker()
        tracker.model_path = tracker.model_path.with_name("does_not_exist.task")
        with self.assertRaises(hand_tracker.GestureSourceError):
            tracker.start(block=True, timeout=2.0)
        self.assertEqual(tracker.status, hand_tracker.TrackerStatus.FAILED)
        self.assertFalse(tracker.slot.read().observation.is_present)

    def test_camera_not_opened(self):
        """An unopenable camera is released and reported."""
        self.cap.isOpened.return_value = False
        tracker = self.make_tracker()
        with self.assertRaises(hand_tracker.GestureSourceError):
            tracker.start(block=True, timeout=2.0)
        self.cap.release.assert_called_once()
        self.vision.HandLandmarker.create_from_options.assert_not_called()

    def test_landmarker_creation_failure_releases_camera(self):
        """A model that fails to load still releases the camera."""
        self.vision.HandLandmarker.create_from_options.side_effect = RuntimeError("bad model")
        tracker = self.make_tracker()
        tracker.start(block=False)
        self.assertFalse(tracker.wait_ready(timeout=2.0))
        self.assertIn("bad model", str(tracker.error))
        self.cap.release.assert_called_once()

    # ============================================================
    # Detection
    # ============================================================

    def test_runs_and_publishes(self):
        """A live tracker publishes present observations and cleans up on stop."""
        tracker = self.make_tracker()
        tracker.start(block=True, timeout=2.0)
        self.assertEqual(tracker.status, hand_tracker.TrackerStatus.READY)

        deadline = time.monotonic() + 2.0
        while tracker.slot.sequence == 0 and time.monotonic() < deadline:
            time.sleep(0.01)

        obs = tracker.slot.read().observation
        self.assertTrue(obs.is_present)
        self.assertEqual(obs.finger_count, 5)

        tracker.stop()
        self.assertEqual(tracker.status, hand_tracker.TrackerStatus.STOPPED)
        self.landmarker.close.assert_called_once()
        self.cap.release.assert_called_once()

    def test_process_frame_without_hand(self):
        """An empty detection publishes an absent observation."""
        self.landmarker.detect_for_video.return_value = fake_result([])
        tracker = self.make_tracker()
        tracker._landmarker = self.landmarker
        obs = tracker.process_frame(np.zeros((48, 64, 3), dtype=np.uint8))
        self.assertFalse(obs.is_present)
        self.assertEqual(tracker.slot.sequence, 1)

    def test_process_frame_respects_mirror(self):
        """Unmirrored trackers report image-space x."""
        self.landmarker.detect_for_video.return_value = fake_result(make_hand(offset=(0.1, 0.0)))
        tracker = self.make_tracker(mirror=False)
        tracker._landmarker = self.landmarker
        obs = tracker.process_frame(np.zeros((48, 64, 3), dtype=np.uint8))
        self.assertTrue(obs.is_present)
        self.assertAlmostEqual(obs.position[0], 0.2, places=6)

    def test_video_timestamps_strictly_increase(self):
        """Repeated clock readings still give increasing VIDEO timestamps."""
        tracker = self.make_tracker()
        stamps = [tracker._video_timestamp(1000.0) for _ in range(3)]
        self.assertEqual(stamps, [0, 1, 2])
        self.assertEqual(tracker._video_timestamp(1100.0), 100)


if __name__ == '__main__':
    unittest.main(verbosity=2)
