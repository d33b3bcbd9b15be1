"""Display color animation: slow hue drift plus a lightness pulse."""

import colorsys
import math
import re

from .config import HUE_SPEED, LIGHTNESS_PULSE, LIGHTNESS_PULSE_RATE

RGB = tuple[float, float, float]

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def parse_hex_color(color: str) -> RGB:
    """Parse '#rrggbb' into RGB floats in [0, 1]."""
    match = _HEX_RE.match(color.strip()) if isinstance(color, str) else None
    if match is None:
        raise ValueError(f"Expected a '#rrggbb' color, got {color!r}")
    digits = match.group(1)
    return tuple(int(digits[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


def animate_color(base: RGB | str, elapsed: float) -> RGB:
    """
    Shift the base color's hue with elapsed time and pulse its lightness.

    Stateless: the same (base, elapsed) always gives the same color.
    """
    if isinstance(base, str):
        base = parse_hex_color(base)
    h, l, s = colorsys.rgb_to_hls(*base)
    hue = (h + elapsed * HUE_SPEED) % 1.0
    lightness = max(0.0, min(1.0, l + math.sin(elapsed * LIGHTNESS_PULSE_RATE) * LIGHTNESS_PULSE))
    return colorsys.hls_to_rgb(hue, lightness, s)


def to_bgr255(rgb: RGB) -> tuple[int, int, int]:
    """RGB floats -> OpenCV BGR byte tuple."""
    r, g, b = (int(round(max(0.0, min(1.0, c)) * 255)) for c in rgb)
    return (b, g, r)
