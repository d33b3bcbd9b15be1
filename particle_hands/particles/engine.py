"""Per-frame particle transform: hand-driven rigid transform plus lagged easing."""

import math
import time
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..hand_gestures.features import HandObservation
from .shapes import DIGIT_SHAPES, SHAPE_REGISTRY, ShapeGenerator, ShapeType, generate
from .config import (
    PARTICLE_COUNT, SPEED_MIN, SPEED_MAX,
    SCALE_BASE, SCALE_SPREAD, NEUTRAL_SCALE, OFFSET_X, OFFSET_Y,
    IDLE_BOB_AMPLITUDE, IDLE_BOB_PHASE_STEP,
    AUTO_SPIN_RATE, DIGIT_SPIN_DAMPING,
)

TWO_PI = 2.0 * math.pi


def _timestamp() -> str:
    return time.strftime('%H:%M:%S')


@dataclass
class ParticleSystem:
    """Particle buffers. Sizes are fixed at creation and never change."""
    target_positions: NDArray[np.float32]
    current_positions: NDArray[np.float32]
    speeds: NDArray[np.float32]

    @classmethod
    def create(cls, count: int, rng: np.random.Generator) -> "ParticleSystem":
        speeds = SPEED_MIN + rng.random(count) * (SPEED_MAX - SPEED_MIN)
        return cls(
            target_positions=np.zeros(count * 3, dtype=np.float32),
            current_positions=np.zeros(count * 3, dtype=np.float32),
            speeds=speeds.astype(np.float32),
        )

    @property
    def count(self) -> int:
        return int(self.speeds.shape[0])


def hand_transform(observation: HandObservation) -> tuple[float, float, tuple[float, float]]:
    """
    Global (rotation, scale, offset) derived from a hand observation.

    Without a hand the cloud sits unrotated at neutral scale at the origin.
    """
    if not observation.is_present:
        return 0.0, NEUTRAL_SCALE, (0.0, 0.0)
    scale = SCALE_BASE + observation.pinch_openness * SCALE_SPREAD
    x, y = observation.xy
    return observation.rotation, scale, (x * OFFSET_X, y * OFFSET_Y)


def transform_targets(
    targets: NDArray[np.float32],
    rotation: float,
    scale: float,
    offset: tuple[float, float],
    out: NDArray[np.float32] | None = None,
) -> NDArray[np.float32]:
    """
    Rotate about the viewing axis, then scale, then translate.

    Args:
        targets: (N, 3) shape-local points
        rotation: Radians about z
        scale: Uniform scale
        offset: (x, y) translation
        out: Optional (N, 3) output buffer

    Returns:
        (N, 3) transformed points
    """
    if out is None:
        out = np.empty_like(targets, dtype=np.float32)
    c, s = math.cos(rotation), math.sin(rotation)
    x = targets[:, 0] * c - targets[:, 1] * s
    y = targets[:, 0] * s + targets[:, 1] * c
    out[:, 0] = x * scale + offset[0]
    out[:, 1] = y * scale + offset[1]
    out[:, 2] = targets[:, 2] * scale
    return out


def ease_toward(
    current: NDArray[np.float32],
    target: NDArray[np.float32],
    speeds: NDArray[np.float32],
    dt: float,
) -> None:
    """First-order approach of current toward target, in place. Never overshoots."""
    factor = np.minimum(speeds * dt, 1.0).astype(np.float32)[:, None]
    current += (target - current) * factor


class ParticleEngine:
    """
    Owns the particle buffers and advances them one rendered frame at a time.

    Only the render loop may call into the engine.
    """

    def __init__(
        self,
        count: int = PARTICLE_COUNT,
        shape: ShapeType = ShapeType.HEART,
        registry: dict[ShapeType, ShapeGenerator] | None = None,
        rng: np.random.Generator | None = None,
    ):
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        self._rng = rng if rng is not None else np.random.default_rng()
        self._registry = SHAPE_REGISTRY if registry is None else registry
        self._system = ParticleSystem.create(count, self._rng)
        self._frame_targets = np.empty((count, 3), dtype=np.float32)
        self._bob_phase = np.arange(count, dtype=np.float32) * IDLE_BOB_PHASE_STEP
        self._last_good = self._system.target_positions.copy()
        self._needs_regen = False
        self._spin = 0.0
        self._shape = shape
        self.mismatch_count = 0
        self.set_shape(shape)

    @property
    def system(self) -> ParticleSystem:
        return self._system

    @property
    def count(self) -> int:
        return self._system.count

    @property
    def shape(self) -> ShapeType:
        return self._shape

    @property
    def positions(self) -> NDArray[np.float32]:
        """Flat current-position buffer, refreshed in place every frame."""
        return self._system.current_positions

    @property
    def spin(self) -> float:
        """Whole-cloud rotation about the vertical axis, radians."""
        return self._spin

    @spin.setter
    def spin(self, value: float) -> None:
        self._spin = float(value)

    @property
    def needs_regeneration(self) -> bool:
        return self._needs_regen

    def set_shape(self, shape: ShapeType) -> bool:
        """Activate a shape and regenerate its target cloud."""
        self._shape = shape
        return self.load_targets(generate(shape, self.count, self._rng, self._registry))

    def load_targets(self, positions) -> bool:
        """
        Copy a new shape-local target cloud into the target buffer.

        A cloud of the wrong size is rejected: the previous targets stay in
        place and the active shape is regenerated after the next frame.
        """
        flat = np.asarray(positions, dtype=np.float32).reshape(-1)
        expected = self._system.current_positions.size
        if flat.size != expected:
            self._report_mismatch(flat.size, expected)
            return False
        self._system.target_positions[:] = flat
        self._last_good[:] = flat
        self._needs_regen = False
        return True

    def step(self, observation: HandObservation, dt: float, elapsed: float) -> NDArray[np.float32]:
        """
        Advance the particles one frame.

        Args:
            observation: Latest hand observation (repeats are fine)
            dt: Frame time in seconds
            elapsed: Seconds since start, drives the idle bob

        Returns:
            Flat current-position buffer (length 3N)
        """
        rotation, scale, offset = hand_transform(observation)
        targets = self._valid_targets().reshape(-1, 3)
        frame = transform_targets(targets, rotation, scale, offset, out=self._frame_targets)

        if not observation.is_present:
            frame[:, 1] += IDLE_BOB_AMPLITUDE * np.sin(elapsed + self._bob_phase)

        if dt > 0:
            current = self._system.current_positions.reshape(-1, 3)
            ease_toward(current, frame, self._system.speeds, dt)
            self._update_spin(dt)

        if self._needs_regen:
            self.set_shape(self._shape)
        return self._system.current_positions

    def _valid_targets(self) -> NDArray[np.float32]:
        targets = self._system.target_positions
        expected = self._system.current_positions.size
        if targets.size != expected:
            self._report_mismatch(targets.size, expected)
            self._system.target_positions = self._last_good.copy()
            return self._last_good
        return targets

    def _report_mismatch(self, got: int, expected: int) -> None:
        self.mismatch_count += 1
        self._needs_regen = True
        print(f"[{_timestamp()}] Particles: {self._shape.value} targets have {got} values, "
              f"expected {expected}; keeping last good targets")

    def _update_spin(self, dt: float) -> None:
        if self._shape in DIGIT_SHAPES:
            if abs(self._spin) > TWO_PI:
                self._spin = math.fmod(self._spin, TWO_PI)
            self._spin -= self._spin * min(DIGIT_SPIN_DAMPING * dt, 1.0)
        else:
            self._spin += AUTO_SPIN_RATE * dt
