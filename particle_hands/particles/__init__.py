"""Particle cloud: shape targets, per-frame transform and color."""

from .shapes import (
    ShapeType,
    DIGIT_SHAPES,
    FREE_SHAPES,
    SHAPE_REGISTRY,
    SHAPE_EXTENTS,
    generate,
    register_shape,
)
from .engine import ParticleEngine, ParticleSystem, hand_transform, transform_targets
from .color import animate_color, parse_hex_color, to_bgr255

__all__ = [
    "ShapeType",
    "DIGIT_SHAPES",
    "FREE_SHAPES",
    "SHAPE_REGISTRY",
    "SHAPE_EXTENTS",
    "generate",
    "register_shape",
    "ParticleEngine",
    "ParticleSystem",
    "hand_transform",
    "transform_targets",
    "animate_color",
    "parse_hex_color",
    "to_bgr255",
]
