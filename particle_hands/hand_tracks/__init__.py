"""
Hand tracking and presentation module.

`hand_tracker` (OpenCV + MediaPipe) and `visualization` (OpenCV window) are
imported from their modules directly so the core can run without a camera
stack loaded.
"""

from .observation_slot import LatestObservation, PublishedObservation

__all__ = [
    "LatestObservation",
    "PublishedObservation",
]
