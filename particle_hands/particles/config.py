"""Configuration constants for the particle cloud."""

# =============================================================================
# PARTICLE SYSTEM
# =============================================================================
PARTICLE_COUNT = 8000
SPEED_MIN = 1.0  # slow particles trail behind
SPEED_MAX = 8.0


# =============================================================================
# HAND -> CLOUD TRANSFORM
# =============================================================================
SCALE_BASE = 0.2
SCALE_SPREAD = 1.8
NEUTRAL_SCALE = 1.0

# Screen coverage multipliers for the palm position
OFFSET_X = 4.0
OFFSET_Y = 3.0

IDLE_BOB_AMPLITUDE = 0.1
IDLE_BOB_PHASE_STEP = 0.01


# =============================================================================
# GLOBAL ORIENTATION
# =============================================================================
AUTO_SPIN_RATE = 0.1  # rad/s for free shapes
DIGIT_SPIN_DAMPING = 3.0  # 1/s, glyphs turn back to face the viewer


# =============================================================================
# COLOR
# =============================================================================
DEFAULT_COLOR = "#00ffff"
PALETTE = ("#00ffff", "#ff00ff", "#ffff00", "#ff4444", "#44ff44", "#ffffff")
HUE_SPEED = 0.05  # hue turns per second
LIGHTNESS_PULSE = 0.1
LIGHTNESS_PULSE_RATE = 2.0  # rad/s
