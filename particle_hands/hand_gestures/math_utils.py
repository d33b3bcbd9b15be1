"""Vector and geometry utility functions."""

import math

Point2 = tuple[float, float]
Point3 = tuple[float, float, float]
Vec3 = tuple[float, float, float]


def dist2(a: Point2, b: Point2) -> float:
    """Euclidean distance between 2D points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def dist3(a: Point3, b: Point3) -> float:
    """Euclidean distance between 3D points."""
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2 + (a[2] - b[2]) ** 2)


def clamp(v: float, lo: float, hi: float) -> float:
    """Clamp value to range [lo, hi]."""
    return max(lo, min(hi, v))


def mean_point3(points: list[Point3]) -> Point3:
    """Average of 3D points."""
    n = len(points)
    return (
        sum(p[0] for p in points) / n,
        sum(p[1] for p in points) / n,
        sum(p[2] for p in points) / n,
    )


def sub3(a: Vec3, b: Vec3) -> Vec3:
    """Vector subtraction: a - b."""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def remap01(v: float, lo: float, hi: float) -> float:
    """Linearly map [lo, hi] onto [0, 1], clamped at both ends."""
    if hi == lo:
        return 0.0
    return clamp((v - lo) / (hi - lo), 0.0, 1.0)


def to_point3(p) -> Point3 | None:
    """
    Coerce a landmark into a finite (x, y, z) tuple.

    Accepts tuples/lists/arrays and objects with x, y, z attributes
    (MediaPipe NormalizedLandmark). Returns None when the value is not
    three finite numbers.
    """
    if hasattr(p, "x") and hasattr(p, "y") and hasattr(p, "z"):
        coords = (p.x, p.y, p.z)
    else:
        try:
            coords = tuple(p)
        except TypeError:
            return None
    if len(coords) != 3:
        return None
    try:
        x, y, z = (float(c) for c in coords)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
        return None
    return (x, y, z)
