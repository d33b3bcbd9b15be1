"""Latest-observation handoff between the detection thread and the render loop."""

import threading
from dataclasses import dataclass

from ..hand_gestures.features import HandObservation


@dataclass(frozen=True)
class PublishedObservation:
    """An observation stamped with its capture time and publish sequence."""
    observation: HandObservation
    timestamp_ms: float
    sequence: int


class LatestObservation:
    """
    Single-writer / single-reader cell holding the newest observation.

    The writer replaces the whole value; the reader never blocks on detection
    and may see the same value on several frames.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._latest = PublishedObservation(HandObservation.absent(), 0.0, 0)

    def publish(self, observation: HandObservation, timestamp_ms: float) -> PublishedObservation:
        """Swap in a new observation and return what was stored."""
        with self._lock:
            published = PublishedObservation(observation, timestamp_ms, self._latest.sequence + 1)
            self._latest = published
        return published

    def read(self) -> PublishedObservation:
        with self._lock:
            return self._latest

    @property
    def sequence(self) -> int:
        with self._lock:
            return self._latest.sequence
