"""
Particle Colors

HSL stroke colors for the three color modes:
- solid:    every particle uses hsl(hue, saturation, lightness)
- rainbow:  hue follows the particle's angle around the canvas centre
- gradient: hue shifts up to 60 degrees across particle index
"""

import math
import numpy as np


COLOR_MODES = ["solid", "rainbow", "gradient"]


def hsl_to_rgb(h, s, l):
    """Vectorized HSL -> RGB.

    Args:
        h: Hue in degrees (any range, wrapped)
        s, l: Saturation and lightness in percent [0, 100]

    Returns:
        (..., 3) float32 array in [0, 1]
    """
    h = np.mod(np.asarray(h, dtype=np.float64), 360.0)
    s = np.clip(np.asarray(s, dtype=np.float64) / 100.0, 0.0, 1.0)
    l = np.clip(np.asarray(l, dtype=np.float64) / 100.0, 0.0, 1.0)
    h, s, l = np.broadcast_arrays(h, s, l)

    a = s * np.minimum(l, 1.0 - l)
    channels = []
    for n in (0, 8, 4):
        k = np.mod(n + h / 30.0, 12.0)
        channels.append(l - a * np.clip(np.minimum(k - 3.0, 9.0 - k), -1.0, 1.0))
    return np.stack(channels, axis=-1).astype(np.float32)


def particle_colors(mode, x, y, width, height, hue=0, saturation=0, lightness=100):
    """Stroke colors for particles at (x, y).

    Returns (3,) for solid mode (one color for all), (N, 3) otherwise.
    """
    if mode == "rainbow":
        angle = np.arctan2(np.asarray(y) - height / 2, np.asarray(x) - width / 2)
        hues = (angle + math.pi) / (2 * math.pi) * 360.0
        return hsl_to_rgb(hues, saturation or 70, lightness or 60)
    if mode == "gradient":
        n = len(x)
        hues = (hue + np.arange(n) / max(n, 1) * 60.0) % 360.0
        return hsl_to_rgb(hues, saturation, lightness)
    return hsl_to_rgb(hue, saturation, lightness)
