"""
Procedural target clouds for the shapes the particles morph between.

Every shape is a generator registered against a ShapeType. A generator takes
a particle count and a numpy random Generator and returns a (count, 3) float32
array in shape-local space. Clouds are random draws: the same shape always has
the same statistical layout, never the same exact points.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np
from numpy.typing import NDArray


class ShapeType(Enum):
    HEART = "Heart"
    FLOWER = "Flower"
    PLANET = "Planet"
    FIGURE = "Figure"
    BURST = "Burst"
    DIGIT_1 = "Digit_1"
    DIGIT_2 = "Digit_2"
    DIGIT_3 = "Digit_3"
    DIGIT_4 = "Digit_4"


DIGIT_SHAPES = (ShapeType.DIGIT_1, ShapeType.DIGIT_2, ShapeType.DIGIT_3, ShapeType.DIGIT_4)
FREE_SHAPES = tuple(s for s in ShapeType if s not in DIGIT_SHAPES)

ShapeGenerator = Callable[[int, np.random.Generator], NDArray[np.float32]]

SHAPE_REGISTRY: dict[ShapeType, ShapeGenerator] = {}

# Max absolute coordinate on any axis, per shape
SHAPE_EXTENTS: dict[ShapeType, float] = {}


def register_shape(shape: ShapeType, extent: float) -> Callable[[ShapeGenerator], ShapeGenerator]:
    """Decorator registering a generator and its documented extent."""
    def decorator(fn: ShapeGenerator) -> ShapeGenerator:
        SHAPE_REGISTRY[shape] = fn
        SHAPE_EXTENTS[shape] = extent
        return fn
    return decorator


def generate(
    shape: ShapeType,
    count: int,
    rng: np.random.Generator | None = None,
    registry: dict[ShapeType, ShapeGenerator] | None = None,
) -> NDArray[np.float32]:
    """
    Generate the target cloud for a shape.

    Args:
        shape: Shape to sample
        count: Number of points
        rng: Random source (fresh default generator if omitted)
        registry: Shape registry override, defaults to SHAPE_REGISTRY

    Returns:
        (count, 3) float32 array in shape-local space
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    registry = SHAPE_REGISTRY if registry is None else registry
    if shape not in registry:
        raise KeyError(f"No generator registered for {shape!r}")
    if rng is None:
        rng = np.random.default_rng()
    return registry[shape](count, rng)


# =============================================================================
# SAMPLING HELPERS
# =============================================================================

def _stack(x, y, z) -> NDArray[np.float32]:
    return np.stack([x, y, z], axis=1).astype(np.float32)


def _centered(rng: np.random.Generator, n: int, width: float) -> NDArray[np.float64]:
    """Uniform samples in [-width/2, width/2)."""
    return (rng.random(n) - 0.5) * width


def _sphere_dirs(rng: np.random.Generator, n: int):
    theta = rng.random(n) * 2.0 * np.pi
    phi = np.arccos(2.0 * rng.random(n) - 1.0)
    return np.sin(phi) * np.cos(theta), np.sin(phi) * np.sin(theta), np.cos(phi)


def _ball(rng: np.random.Generator, n: int, radius: float) -> NDArray[np.float32]:
    """Uniform volume inside a sphere."""
    r = radius * np.cbrt(rng.random(n))
    dx, dy, dz = _sphere_dirs(rng, n)
    return _stack(r * dx, r * dy, r * dz)


def _pick_regions(rng: np.random.Generator, n: int, weights) -> NDArray[np.int64]:
    """Independent per-particle region draw with fixed weights."""
    p = np.asarray(weights, dtype=np.float64)
    return rng.choice(len(p), size=n, p=p / p.sum())


# =============================================================================
# FREE SHAPES
# =============================================================================

@register_shape(ShapeType.HEART, extent=2.0)
def heart(count: int, rng: np.random.Generator) -> NDArray[np.float32]:
    t = rng.random(count) * 2.0 * np.pi
    fill = rng.random(count) ** 0.3  # biased toward the outline
    x = 16.0 * np.sin(t) ** 3
    y = 13.0 * np.cos(t) - 5.0 * np.cos(2 * t) - 2.0 * np.cos(3 * t) - np.cos(4 * t)
    z = _centered(rng, count, 4.0)
    return _stack(x * 0.1 * fill, y * 0.1 * fill, z * fill)


@register_shape(ShapeType.FLOWER, extent=2.4)
def flower(count: int, rng: np.random.Generator) -> NDArray[np.float32]:
    theta = rng.random(count) * 2.0 * np.pi
    petal = np.cos(4.0 * theta) + 2.0  # eight petals
    d = petal * rng.random(count) * 0.8
    z = _centered(rng, count, 1.5) * np.exp(-d * 0.5)
    return _stack(d * np.cos(theta), d * np.sin(theta), z)


@register_shape(ShapeType.PLANET, extent=4.0)
def planet(count: int, rng: np.random.Generator) -> NDArray[np.float32]:
    region = _pick_regions(rng, count, (0.6, 0.4))
    pts = np.empty((count, 3), dtype=np.float32)

    body = region == 0
    pts[body] = _ball(rng, int(body.sum()), 1.5)

    ring = ~body
    n = int(ring.sum())
    theta = rng.random(n) * 2.0 * np.pi
    radius = 2.5 + rng.random(n) * 1.5
    pts[ring] = _stack(radius * np.cos(theta), _centered(rng, n, 0.2), radius * np.sin(theta))
    return pts


@register_shape(ShapeType.FIGURE, extent=2.3)
def figure(count: int, rng: np.random.Generator) -> NDArray[np.float32]:
    """Seated figure: head sphere, tapered torso, crossed-leg base."""
    region = _pick_regions(rng, count, (0.2, 0.4, 0.4))
    pts = np.empty((count, 3), dtype=np.float32)

    head = region == 0
    dx, dy, dz = _sphere_dirs(rng, int(head.sum()))
    pts[head] = _stack(0.5 * dx, 0.5 * dy + 1.8, 0.5 * dz)

    torso = region == 1
    n = int(torso.sum())
    height = rng.random(n) * 2.0
    r = np.sqrt(rng.random(n)) * (1.0 - height * 0.2)
    theta = rng.random(n) * 2.0 * np.pi
    pts[torso] = _stack(r * np.cos(theta), height - 0.5, r * np.sin(theta))

    legs = region == 2
    n = int(legs.sum())
    theta = rng.random(n) * 2.0 * np.pi
    phi = rng.random(n) * 2.0 * np.pi
    tube = 0.4 * np.sqrt(rng.random(n))
    ring = 1.2 + tube * np.cos(phi)
    pts[legs] = _stack(ring * np.cos(theta), tube * np.sin(phi) - 0.5, ring * np.sin(theta) * 0.6)
    return pts


@register_shape(ShapeType.BURST, extent=4.0)
def burst(count: int, rng: np.random.Generator) -> NDArray[np.float32]:
    return _ball(rng, count, 4.0)


# =============================================================================
# DIGIT GLYPHS
# =============================================================================

@dataclass(frozen=True)
class Line:
    start: tuple[float, float]
    end: tuple[float, float]
    weight: float


@dataclass(frozen=True)
class Arc:
    center: tuple[float, float]
    radius: float
    start_angle: float
    end_angle: float
    weight: float


GLYPH_JITTER = 0.1
GLYPH_DEPTH = 0.4

GLYPHS: dict[ShapeType, tuple] = {
    ShapeType.DIGIT_1: (
        Line((0.0, -1.25), (0.0, 1.25), 0.85),
        Line((-0.35, 0.9), (0.0, 1.25), 0.15),
    ),
    ShapeType.DIGIT_2: (
        Arc((0.0, 0.5), 0.7, 0.0, math.pi, 0.4),
        Line((0.7, 0.5), (-0.7, -1.0), 0.3),
        Line((-0.7, -1.0), (0.7, -1.0), 0.3),
    ),
    ShapeType.DIGIT_3: (
        Arc((0.0, 0.6), 0.6, -math.pi / 4, math.pi, 0.5),
        Arc((0.0, -0.6), 0.7, -math.pi, math.pi / 4, 0.5),
    ),
    ShapeType.DIGIT_4: (
        Line((0.6, -1.2), (0.6, 1.2), 0.4),
        Line((-0.5, 1.0), (0.5, -0.2), 0.3),
        Line((-0.6, -0.1), (0.8, -0.1), 0.3),
    ),
}


def _sample_stroke(stroke, rng: np.random.Generator, n: int):
    u = rng.random(n)
    if isinstance(stroke, Arc):
        angle = stroke.start_angle + u * (stroke.end_angle - stroke.start_angle)
        cx, cy = stroke.center
        return cx + stroke.radius * np.cos(angle), cy + stroke.radius * np.sin(angle)
    (x0, y0), (x1, y1) = stroke.start, stroke.end
    return x0 + u * (x1 - x0), y0 + u * (y1 - y0)


def sample_glyph(strokes, count: int, rng: np.random.Generator) -> NDArray[np.float32]:
    """Sample points uniformly along weighted glyph strokes with thin jitter."""
    region = _pick_regions(rng, count, [s.weight for s in strokes])
    x = np.empty(count)
    y = np.empty(count)
    for i, stroke in enumerate(strokes):
        mask = region == i
        x[mask], y[mask] = _sample_stroke(stroke, rng, int(mask.sum()))
    x += _centered(rng, count, GLYPH_JITTER)
    y += _centered(rng, count, GLYPH_JITTER)
    return _stack(x, y, _centered(rng, count, GLYPH_DEPTH))


def _glyph_generator(strokes) -> ShapeGenerator:
    def generate_glyph(count: int, rng: np.random.Generator) -> NDArray[np.float32]:
        return sample_glyph(strokes, count, rng)
    return generate_glyph


for _shape, _strokes in GLYPHS.items():
    register_shape(_shape, extent=1.5)(_glyph_generator(_strokes))
