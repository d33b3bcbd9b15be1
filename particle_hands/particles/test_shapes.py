"""
Test suite for shape target generation

Run with: python -m pytest particle_hands -v
"""

import unittest

import numpy as np

from particle_hands.particles.shapes import (
    DIGIT_SHAPES,
    FREE_SHAPES,
    SHAPE_EXTENTS,
    SHAPE_REGISTRY,
    ShapeType,
    generate,
)


class TestGenerate(unittest.TestCase):
    """Test cases for generate()."""

    def setUp(self):
        self.rng = np.random.default_rng(1234)

    # ============================================================
    # Registry
    # ============================================================

    def test_every_shape_registered(self):
        """Every ShapeType has a generator and an extent."""
        for shape in ShapeType:
            self.assertIn(shape, SHAPE_REGISTRY)
            self.assertIn(shape, SHAPE_EXTENTS)

    def test_digit_and_free_partition(self):
        """Digit and free shapes split the catalog."""
        self.assertEqual(len(DIGIT_SHAPES), 4)
        self.assertEqual(set(DIGIT_SHAPES) | set(FREE_SHAPES), set(ShapeType))
        self.assertFalse(set(DIGIT_SHAPES) & set(FREE_SHAPES))

    # ============================================================
    # Output contract
    # ============================================================

    def test_count_finite_and_bounded(self):
        """N finite points within the documented extent, for every shape."""
        for shape in ShapeType:
            with self.subTest(shape=shape):
                pts = generate(shape, 5000, self.rng)
                self.assertEqual(pts.shape, (5000, 3))
                self.assertEqual(pts.dtype, np.float32)
                self.assertTrue(np.all(np.isfinite(pts)))
                self.assertLessEqual(float(np.abs(pts).max()), SHAPE_EXTENTS[shape])

    def test_heart_bound(self):
        """The heart stays within about two units."""
        pts = generate(ShapeType.HEART, 10000, self.rng)
        self.assertLessEqual(float(np.abs(pts).max()), 2.0)

    def test_zero_count(self):
        """Zero particles is an empty (0, 3) cloud."""
        for shape in ShapeType:
            self.assertEqual(generate(shape, 0, self.rng).shape, (0, 3))

    def test_negative_count_rejected(self):
        """Negative counts are a caller error."""
        with self.assertRaises(ValueError):
            generate(ShapeType.HEART, -1)

    def test_unknown_shape_rejected(self):
        """A shape missing from the registry raises KeyError."""
        with self.assertRaises(KeyError):
            generate(ShapeType.HEART, 10, registry={})

    def test_default_rng(self):
        """Omitting the random source still works."""
        self.assertEqual(generate(ShapeType.BURST, 10).shape, (10, 3))

    # ============================================================
    # Distribution
    # ============================================================

    def test_independent_draws_same_distribution(self):
        """Two calls differ point-wise but match statistically."""
        a = generate(ShapeType.HEART, 20000, self.rng)
        b = generate(ShapeType.HEART, 20000, self.rng)
        self.assertFalse(np.array_equal(a, b))
        np.testing.assert_allclose(a.std(axis=0), b.std(axis=0), atol=0.03)
        np.testing.assert_allclose(a.mean(axis=0), b.mean(axis=0), atol=0.03)

    def test_planet_ring_fraction(self):
        """About 40% of the planet's points are on the ring."""
        pts = generate(ShapeType.PLANET, 20000, self.rng)
        radial = np.hypot(pts[:, 0], pts[:, 2])
        ring = radial > 2.45
        self.assertAlmostEqual(float(ring.mean()), 0.4, delta=0.02)
        self.assertLessEqual(float(np.abs(pts[ring, 1]).max()), 0.1)

    def test_figure_head_weight(self):
        """The head region receives its fixed share of particles."""
        pts = generate(ShapeType.FIGURE, 20000, self.rng)
        # Only head points rise above the torso top (y = 1.5); 3/4 of the
        # head sphere's surface is above that line.
        head_top = pts[:, 1] > 1.55
        self.assertAlmostEqual(float(head_top.mean()), 0.2 * 0.75, delta=0.02)

    def test_burst_is_isotropic(self):
        """Burst has the same spread on every axis."""
        pts = generate(ShapeType.BURST, 20000, self.rng)
        std = pts.std(axis=0)
        self.assertLess(float(std.max() - std.min()), 0.08)
        self.assertLessEqual(float(np.linalg.norm(pts, axis=1).max()), 4.0 + 1e-5)

    def test_digits_are_flat(self):
        """Glyphs are thin slabs facing the viewer."""
        for shape in DIGIT_SHAPES:
            pts = generate(shape, 2000, self.rng)
            self.assertLessEqual(float(np.abs(pts[:, 2]).max()), 0.2)
            self.assertGreater(float(np.ptp(pts[:, 1])), 2.0)


if __name__ == '__main__':
    unittest.main(verbosity=2)
