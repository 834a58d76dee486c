"""
Particle System

Thousands of independent particles advected through a flow field, stored
as flat numpy arrays so one frame is a handful of vector operations.
Particles wrap toroidally and never die.
"""

import numpy as np


class ParticleSystem:
    """Particle positions, previous positions and per-particle speeds.

    Args:
        count: Number of particles
        width, height: Wrap bounds in pixels
        speed: Base speed in pixels per step
        speed_variation: Per-particle offset drawn from [-v, +v]
        rng: numpy Generator for positions and speed offsets
    """

    def __init__(self, count, width, height, speed=0.5, speed_variation=0.5,
                 rng=None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.width = width
        self.height = height
        self.base_speed = speed
        self.speed_variation = speed_variation

        self.x = self.rng.random(count) * width
        self.y = self.rng.random(count) * height
        self.prev_x = self.x.copy()
        self.prev_y = self.y.copy()
        self.speed = self._draw_speeds(count)

    def __len__(self):
        return len(self.x)

    def _draw_speeds(self, n):
        # No floor: variation > base gives negative speeds (reversed travel)
        offsets = (self.rng.random(n) - 0.5) * 2.0 * self.speed_variation
        return self.base_speed + offsets

    def step(self, field):
        """Advance every particle one step along field.vector_at()."""
        self.prev_x = self.x.copy()
        self.prev_y = self.y.copy()

        vx, vy = field.vector_at(self.x, self.y)
        self.x = self.x + vx * self.speed
        self.y = self.y + vy * self.speed

        w, h = self.width, self.height
        self.x[self.x < 0] = w
        self.x[self.x > w] = 0
        self.y[self.y < 0] = h
        self.y[self.y > h] = 0

        # A wrap would draw a segment across the whole canvas
        jumped_x = np.abs(self.x - self.prev_x) > w / 2
        jumped_y = np.abs(self.y - self.prev_y) > h / 2
        self.prev_x[jumped_x] = self.x[jumped_x]
        self.prev_y[jumped_y] = self.y[jumped_y]

    def reset(self):
        """Scatter every particle to a random position (no trail)."""
        n = len(self)
        self.x = self.rng.random(n) * self.width
        self.y = self.rng.random(n) * self.height
        self.prev_x = self.x.copy()
        self.prev_y = self.y.copy()

    def set_bounds(self, width, height):
        """Change wrap bounds without moving anyone."""
        self.width = width
        self.height = height

    def set_speed(self, speed, variation):
        """Set base speed and redraw every particle's random offset."""
        self.base_speed = speed
        self.speed_variation = variation
        self.speed = self._draw_speeds(len(self))

    def resize(self, count):
        """Grow with freshly spawned particles or truncate to count."""
        n = len(self)
        if count > n:
            extra = count - n
            new_x = self.rng.random(extra) * self.width
            new_y = self.rng.random(extra) * self.height
            self.x = np.concatenate([self.x, new_x])
            self.y = np.concatenate([self.y, new_y])
            self.prev_x = np.concatenate([self.prev_x, new_x])
            self.prev_y = np.concatenate([self.prev_y, new_y])
            self.speed = np.concatenate([self.speed, self._draw_speeds(extra)])
        elif count < n:
            count = max(0, count)
            self.x = self.x[:count].copy()
            self.y = self.y[:count].copy()
            self.prev_x = self.prev_x[:count].copy()
            self.prev_y = self.prev_y[:count].copy()
            self.speed = self.speed[:count].copy()

    def segments(self):
        """(prev_x, prev_y, x, y) arrays for this frame's strokes."""
        return self.prev_x, self.prev_y, self.x, self.y
