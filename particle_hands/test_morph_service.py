"""
Test suite for the morph service

Run with: python -m pytest particle_hands -v
"""

import unittest

import numpy as np

from particle_hands.hand_gestures import DebouncePhase, HandObservation
from particle_hands.hand_tracks import LatestObservation
from particle_hands.morph_service import FrameOutput, MorphService
from particle_hands.particles import ShapeType


FRAME_MS = 33.0


def present(fingers: int) -> HandObservation:
    return HandObservation(is_present=True, position=(0.2, 0.1, 0.0), pinch_openness=0.7,
                           finger_count=fingers)


class TestMorphService(unittest.TestCase):
    """Test cases for MorphService."""

    def setUp(self):
        """Set up test fixtures."""
        self.service = MorphService(particle_count=200, rng=np.random.default_rng(3))
        self.slot = LatestObservation()
        self.now = 0.0

    def run_frames(self, observation, duration_ms):
        """Publish and render one frame every FRAME_MS; return the switch requests."""
        requests = []
        end = self.now + duration_ms
        while self.now < end:
            self.now += FRAME_MS
            self.slot.publish(observation, self.now)
            _, request = self.service.frame(self.slot.read(), FRAME_MS / 1000.0, self.now / 1000.0)
            if request is not None:
                requests.append(request)
        return requests

    # ============================================================
    # Gesture flow
    # ============================================================

    def test_digit_then_open_hand_then_loss(self):
        """Two fingers show "2", an open hand returns to the heart, loss goes idle."""
        requests = self.run_frames(present(2), 600)
        self.assertEqual([r.shape for r in requests], [ShapeType.DIGIT_2])
        self.assertEqual(self.service.engine.shape, ShapeType.DIGIT_2)

        requests = self.run_frames(present(5), 600)
        self.assertEqual([r.shape for r in requests], [ShapeType.HEART])
        self.assertEqual(self.service.engine.shape, ShapeType.HEART)

        requests = self.run_frames(HandObservation.absent(), 600)
        self.assertEqual(requests, [])
        self.assertEqual(self.service.debouncer.phase, DebouncePhase.IDLE)
        self.assertFalse(self.service.observation.is_present)

    def test_repeated_sequence_not_refed(self):
        """Rendering twice on one published observation feeds the debouncer once."""
        self.slot.publish(present(3), 100.0)
        published = self.slot.read()
        self.service.frame(published, 0.016, 0.1)
        state_before = self.service.debouncer.state.accumulated_still_ms
        self.assertIsNone(self.service.observe(published))
        self.assertEqual(self.service.debouncer.state.accumulated_still_ms, state_before)

    def test_hand_steers_without_new_observations(self):
        """The last observation keeps steering the cloud on repeated frames."""
        self.slot.publish(present(0), 10.0)
        published = self.slot.read()
        for i in range(300):
            self.service.frame(published, FRAME_MS / 1000.0, i * FRAME_MS / 1000.0)
        cloud = self.service.engine.positions.reshape(-1, 3)
        self.assertAlmostEqual(float(cloud[:, 0].mean()), 0.2 * 4.0, delta=0.3)

    # ============================================================
    # UI commands
    # ============================================================

    def test_select_shape(self):
        """Explicit selection switches immediately and becomes the open-hand shape."""
        self.service.select_shape(ShapeType.BURST)
        self.assertEqual(self.service.engine.shape, ShapeType.BURST)
        self.assertEqual(self.service.shapes.user_selected, ShapeType.BURST)

    def test_digits_not_selectable(self):
        """Digits appear only through gestures."""
        with self.assertRaises(ValueError):
            self.service.select_shape(ShapeType.DIGIT_1)
        with self.assertRaises(ValueError):
            MorphService(particle_count=10, shape=ShapeType.DIGIT_4)

    def test_select_color(self):
        """Colors are validated before they are used."""
        self.service.select_color("#ff0000")
        self.assertEqual(self.service.color, "#ff0000")
        with self.assertRaises(ValueError):
            self.service.select_color("blue")
        self.assertEqual(self.service.color, "#ff0000")

    def test_cycle_color(self):
        """The palette advances from the default color."""
        self.assertEqual(self.service.cycle_color(), "#ff00ff")

    def test_frame_output(self):
        """Each frame carries 3N positions, a color and the shape."""
        output = self.service.update(0.016, 0.0)
        self.assertIsInstance(output, FrameOutput)
        self.assertEqual(output.positions.shape, (600,))
        self.assertEqual(len(output.color), 3)
        self.assertEqual(output.shape, ShapeType.HEART)


if __name__ == '__main__':
    unittest.main(verbosity=2)
