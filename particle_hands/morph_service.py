"""
Morph service tying hand observations to the particle cloud.

Handles:
- Feeding fresh observations to the stability debouncer
- Applying debounced shape switches and explicit user selections
- Stepping the particle engine once per rendered frame
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .hand_gestures import (
    ActiveShapeState,
    HandObservation,
    ShapeSwitchRequest,
    StabilityDebouncer,
)
from .hand_tracks import PublishedObservation
from .particles import (
    DIGIT_SHAPES,
    ParticleEngine,
    ShapeType,
    animate_color,
    parse_hex_color,
)
from .particles.config import DEFAULT_COLOR, PALETTE, PARTICLE_COUNT


@dataclass(frozen=True)
class FrameOutput:
    """What the presentation layer draws for one frame."""
    positions: NDArray[np.float32]
    color: tuple[float, float, float]
    spin: float
    shape: ShapeType


class MorphService:
    """
    Single owner of the shape state, debouncer and particle engine.

    Every method must be called from the render loop.
    """

    def __init__(
        self,
        particle_count: int = PARTICLE_COUNT,
        shape: ShapeType = ShapeType.HEART,
        color: str = DEFAULT_COLOR,
        debouncer: StabilityDebouncer | None = None,
        rng: np.random.Generator | None = None,
    ):
        self._check_selectable(shape)
        self._base_color = parse_hex_color(color)
        self.color = color
        self.shapes = ActiveShapeState(current=shape, user_selected=shape)
        self.debouncer = debouncer if debouncer is not None else StabilityDebouncer()
        self.engine = ParticleEngine(particle_count, shape, rng=rng)
        self._observation = HandObservation.absent()
        self._last_sequence = 0

    @property
    def observation(self) -> HandObservation:
        return self._observation

    @staticmethod
    def _check_selectable(shape: ShapeType) -> None:
        if not isinstance(shape, ShapeType) or shape in DIGIT_SHAPES:
            raise ValueError(f"{shape!r} is not a user-selectable shape")

    def _apply(self, shape: ShapeType) -> None:
        if self.engine.shape != shape:
            self.engine.set_shape(shape)

    # --------------------------- UI commands ---------------------------

    def select_shape(self, shape: ShapeType) -> None:
        """Explicit selection: immediate, and remembered for the open-hand gesture."""
        self._check_selectable(shape)
        self.shapes.select(shape)
        self._apply(shape)

    def select_color(self, color: str) -> None:
        self._base_color = parse_hex_color(color)
        self.color = color

    def cycle_color(self) -> str:
        """Advance to the next palette color and return it."""
        try:
            idx = PALETTE.index(self.color)
        except ValueError:
            idx = -1
        self.select_color(PALETTE[(idx + 1) % len(PALETTE)])
        return self.color

    # --------------------------- frame path ---------------------------

    def observe(self, published: PublishedObservation) -> ShapeSwitchRequest | None:
        """
        Take the latest published observation.

        Only a newly published observation reaches the debouncer; repeats just
        keep steering the cloud.
        """
        if published.sequence == self._last_sequence:
            return None
        self._last_sequence = published.sequence
        self._observation = published.observation

        request = self.debouncer.update(published.observation, published.timestamp_ms, self.shapes)
        if request is not None:
            self._apply(request.shape)
        return request

    def update(self, dt: float, elapsed: float) -> FrameOutput:
        """Step the particles and return the frame to draw."""
        positions = self.engine.step(self._observation, dt, elapsed)
        return FrameOutput(
            positions=positions,
            color=animate_color(self._base_color, elapsed),
            spin=self.engine.spin,
            shape=self.engine.shape,
        )

    def frame(
        self, published: PublishedObservation, dt: float, elapsed: float
    ) -> tuple[FrameOutput, ShapeSwitchRequest | None]:
        """One render-loop iteration: observe, then step."""
        request = self.observe(published)
        return self.update(dt, elapsed), request
