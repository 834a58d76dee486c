"""
Fractal Flow Field

Turns multi-octave simplex noise into a direction field. Each point maps
to an angle in [0, 2*pi]; the z offset of the pseudo-3D noise is the time
axis, advanced by evolve().
"""

import math
import numpy as np

from .noise import SimplexNoise, random_seed


MIN_OCTAVES = 1
MAX_OCTAVES = 8


class FractalFlowField:
    """fBm noise flow field with replaceable noise state.

    Args:
        scale: Base spatial frequency (noise units per pixel)
        seed: Integer noise seed, drawn from rng when omitted
        rng: numpy Generator used for default seeds
    """

    def __init__(self, scale, seed=None, rng=None):
        self.rng = rng if rng is not None else np.random.default_rng()
        if seed is None:
            seed = random_seed(self.rng)
        self.noise = SimplexNoise(seed)
        self.scale = scale
        self.octaves = MIN_OCTAVES
        self.z_offset = 0.0

    def angle_at(self, x, y):
        """Flow angle in radians [0, 2*pi] at (x, y)."""
        noise = self.noise
        z = self.z_offset

        value = 0.0
        amplitude = 1.0
        frequency = self.scale
        total = 0.0
        for _ in range(self.octaves):
            value = value + amplitude * noise.noise3d(
                np.multiply(x, frequency), np.multiply(y, frequency), z
            )
            total += amplitude
            amplitude *= 0.5
            frequency *= 2.0

        # [-1, 1] -> [0, 2*pi]
        angle = (value / total + 1.0) * math.pi
        if np.ndim(angle) == 0:
            return float(angle)
        return angle

    def vector_at(self, x, y):
        """Unit flow vector (vx, vy) at (x, y)."""
        angle = self.angle_at(x, y)
        if isinstance(angle, float):
            return math.cos(angle), math.sin(angle)
        return np.cos(angle), np.sin(angle)

    def set_scale(self, scale):
        self.scale = scale

    def set_octaves(self, octaves):
        self.octaves = max(MIN_OCTAVES, min(MAX_OCTAVES, int(octaves)))

    def evolve(self, amount):
        """Advance the time axis of the noise."""
        self.z_offset += amount

    def reset_evolution(self):
        self.z_offset = 0.0

    def regenerate(self, seed=None):
        """Swap in freshly seeded noise and restart the time axis."""
        if seed is None:
            seed = random_seed(self.rng)
        self.noise = SimplexNoise(seed)
        self.z_offset = 0.0

    @property
    def seed(self):
        return self.noise.seed
