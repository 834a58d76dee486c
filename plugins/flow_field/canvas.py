"""
Trail Canvas

Accumulation buffer that particles draw short strokes into every frame.
Nothing is cleared between frames, so trails build up into the final
image; an optional fade blends the buffer back toward black.
"""

import numpy as np
from PIL import Image
from scipy.ndimage import gaussian_filter


# Strokes are point-sampled; long segments are capped at this many samples
MAX_SAMPLES = 16


class TrailCanvas:
    """Float32 RGB buffer in [0, 1] with alpha-composited strokes."""

    def __init__(self, width, height):
        self.width = int(width)
        self.height = int(height)
        self.buffer = np.zeros((self.height, self.width, 3), dtype=np.float32)

    def clear(self):
        self.buffer[:] = 0.0

    def fade(self, amount):
        """Blend the whole canvas toward black by amount in [0, 1]."""
        if amount > 0:
            self.buffer *= np.float32(1.0 - min(amount, 1.0))

    def resize(self, width, height):
        """Resize, keeping the overlapping top-left region."""
        width, height = int(width), int(height)
        new = np.zeros((height, width, 3), dtype=np.float32)
        h = min(height, self.height)
        w = min(width, self.width)
        new[:h, :w] = self.buffer[:h, :w]
        self.buffer = new
        self.width = width
        self.height = height

    def stroke(self, x0, y0, x1, y1, colors, alpha=0.05, line_width=0.8):
        """Composite line segments (x0, y0) -> (x1, y1) onto the buffer.

        Args:
            x0, y0, x1, y1: (N,) segment endpoints in pixels
            colors: (3,) shared color or (N, 3) per-segment colors
            alpha: Stroke opacity
            line_width: Width in pixels; below 1 fades the stroke, above
                1.5 stamps a wider square footprint
        """
        x0 = np.asarray(x0, dtype=np.float32)
        y0 = np.asarray(y0, dtype=np.float32)
        x1 = np.asarray(x1, dtype=np.float32)
        y1 = np.asarray(y1, dtype=np.float32)
        if x0.size == 0:
            return
        colors = np.asarray(colors, dtype=np.float32)

        length = float(np.max(np.hypot(x1 - x0, y1 - y0)))
        samples = int(min(MAX_SAMPLES, max(1, np.ceil(length))))
        t = np.linspace(0.0, 1.0, samples + 1, dtype=np.float32)[1:]

        px = x0[:, None] + (x1 - x0)[:, None] * t[None, :]
        py = y0[:, None] + (y1 - y0)[:, None] * t[None, :]
        if colors.ndim == 2:
            cols = np.repeat(colors, samples, axis=0)
        else:
            cols = np.broadcast_to(colors, (px.size, 3))
        px = np.floor(px.ravel()).astype(np.int64)
        py = np.floor(py.ravel()).astype(np.int64)

        a = np.float32(alpha * min(line_width, 1.0))
        radius = max(0, int(round(line_width)) - 1) if line_width > 1.5 else 0
        for oy in range(-(radius // 2), radius - radius // 2 + 1):
            for ox in range(-(radius // 2), radius - radius // 2 + 1):
                self._composite(px + ox, py + oy, cols, a)

    def _composite(self, px, py, cols, a):
        keep = (px >= 0) & (px < self.width) & (py >= 0) & (py < self.height)
        px, py, cols = px[keep], py[keep], cols[keep]
        delta = (cols - self.buffer[py, px]) * a
        np.add.at(self.buffer, (py, px), delta)
        np.clip(self.buffer, 0.0, 1.0, out=self.buffer)

    def to_rgb(self, bloom=0.0, sigma=12.0):
        """(H, W, 3) uint8 frame with optional colored glow.

        Glow is a downsample -> gaussian -> upsample additive blend.
        """
        rgb = self.buffer * 255.0
        if bloom > 0:
            factor = 4
            small = rgb[::factor, ::factor, :]
            glow = gaussian_filter(small, [max(1.0, sigma / factor)] * 2 + [0])
            glow = np.repeat(np.repeat(glow, factor, axis=0), factor, axis=1)
            rgb = rgb + glow[:self.height, :self.width, :] * bloom
        return np.clip(rgb, 0, 255).astype(np.uint8)

    def save(self, path, bloom=0.0):
        Image.fromarray(self.to_rgb(bloom)).save(path)
        return path
