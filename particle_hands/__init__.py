"""Hand-steered particle morphing package."""

from .hand_gestures import (
    ViewMode,
    HandObservation,
    extract_observation,
    StabilityDebouncer,
    ActiveShapeState,
    ShapeSwitchRequest,
    DebouncePhase,
)

from .particles import (
    ShapeType,
    DIGIT_SHAPES,
    FREE_SHAPES,
    generate,
    ParticleEngine,
    animate_color,
)

from .hand_tracks import LatestObservation, PublishedObservation

from .morph_service import MorphService, FrameOutput

__all__ = [
    # Gestures
    "ViewMode",
    "HandObservation",
    "extract_observation",
    "StabilityDebouncer",
    "ActiveShapeState",
    "ShapeSwitchRequest",
    "DebouncePhase",
    # Particles
    "ShapeType",
    "DIGIT_SHAPES",
    "FREE_SHAPES",
    "generate",
    "ParticleEngine",
    "animate_color",
    # Tracking
    "LatestObservation",
    "PublishedObservation",
    # Service
    "MorphService",
    "FrameOutput",
]
