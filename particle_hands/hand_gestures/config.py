"""Configuration constants for hand gesture interpretation."""

from enum import Enum


class ViewMode(Enum):
    FPV_BEHIND_HANDS = "FPV_BEHIND_HANDS"
    SELFIE_WEBCAM = "SELFIE_WEBCAM"


# =============================================================================
# CAMERA / VIEW SETTINGS
# =============================================================================
VIEW_MODE = ViewMode.SELFIE_WEBCAM
FORCE_MIRROR_INPUT = False
MAX_NUM_HANDS = 1

# Horizontal axis is mirrored so the cloud follows the hand like a mirror
MIRROR_X = VIEW_MODE == ViewMode.SELFIE_WEBCAM

if FORCE_MIRROR_INPUT:
    MIRROR_X = not MIRROR_X


# =============================================================================
# LANDMARKS
# =============================================================================
NUM_LANDMARKS = 21


# =============================================================================
# PINCH OPENNESS
# =============================================================================
# Thumb tip to index tip distance, normalized image units
PINCH_CLOSED_DIST = 0.03
PINCH_OPEN_DIST = 0.15
PINCH_RESTING = 0.5


# =============================================================================
# FINGER COUNTING
# =============================================================================
FINGER_EXTENDED_RATIO = 1.10
THUMB_EXTENDED_RATIO = 1.20


# =============================================================================
# STABILITY HOLD
# =============================================================================
STILL_SPEED_THRESHOLD = 0.0008  # position units per ms
STILL_HOLD_MS = 400.0
STILL_PADDING_MS = 50.0  # detector sampling jitter
