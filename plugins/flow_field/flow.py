"""
Composite Flow Field

Noise-driven flow, optionally deflected around a shape boundary. Near the
boundary (|distance| < falloff) the noise direction is blended toward a
tangent of the distance gradient with quadratic falloff:

    influence = (1 - (|d| / falloff)^2) * strength

Inside the shape the tangent is the gradient itself (pushes particles out).
Outside it is whichever perpendicular of the gradient agrees with the noise
direction, so particles slide around the shape instead of flipping.
"""

import threading
import numpy as np

from .fractal import FractalFlowField


MIN_STRENGTH = 0.0
MAX_STRENGTH = 2.0
MIN_FALLOFF = 1.0

# Blended vectors shorter than this collapse to (0, 0)
MIN_LENGTH = 1e-4


class FlowField:
    """Fractal noise flow with an optional attached DistanceField.

    The distance field is referenced, not owned: clearing it is the
    caller's job. Swap points (regenerate, attach/detach) take a lock so a
    stepping thread never sees half-replaced state.

    Args:
        scale: Base noise frequency
        seed: Noise seed, random when omitted
        rng: numpy Generator for default seeds
    """

    def __init__(self, scale, seed=None, rng=None):
        self.fractal = FractalFlowField(scale, seed=seed, rng=rng)
        self.distance_field = None
        self.sdf_strength = 1.0
        self.sdf_falloff = 50.0
        self._swap_lock = threading.Lock()

    # -- noise -------------------------------------------------------------

    def set_scale(self, scale):
        self.fractal.set_scale(scale)

    def set_octaves(self, octaves):
        self.fractal.set_octaves(octaves)

    def evolve(self, amount):
        self.fractal.evolve(amount)

    def reset_evolution(self):
        self.fractal.reset_evolution()

    def regenerate(self, seed=None):
        with self._swap_lock:
            self.fractal.regenerate(seed)

    def angle_at(self, x, y):
        return self.fractal.angle_at(x, y)

    # -- boundary deflection -----------------------------------------------

    def set_distance_field(self, field):
        """Attach a loaded DistanceField, or None to detach."""
        with self._swap_lock:
            self.distance_field = field

    def set_sdf_strength(self, strength):
        self.sdf_strength = max(MIN_STRENGTH, min(MAX_STRENGTH, float(strength)))

    def set_sdf_falloff(self, falloff):
        self.sdf_falloff = max(MIN_FALLOFF, float(falloff))

    def vector_at(self, x, y):
        """Final unit flow vector at (x, y), or (0, 0) if degenerate."""
        with self._swap_lock:
            fractal = self.fractal
            field = self.distance_field
        base_x, base_y = fractal.vector_at(x, y)
        if field is None or not field.is_loaded():
            return base_x, base_y

        d = np.asarray(field.get_distance(x, y), dtype=np.float64)
        grad_x, grad_y = field.get_gradient(x, y)
        grad_x = np.asarray(grad_x, dtype=np.float64)
        grad_y = np.asarray(grad_y, dtype=np.float64)
        bx = np.asarray(base_x, dtype=np.float64)
        by = np.asarray(base_y, dtype=np.float64)

        falloff = self.sdf_falloff
        abs_d = np.abs(d)
        active = (abs_d < falloff) & ((grad_x != 0.0) | (grad_y != 0.0))

        t = np.where(active, abs_d, 0.0) / falloff
        influence = (1.0 - t * t) * self.sdf_strength

        # Outside: perpendicular (-gy, gx) unless it opposes the base flow
        flip = (-grad_y * bx + grad_x * by) < 0.0
        inside = d < 0.0
        tan_x = np.where(inside, grad_x, np.where(flip, grad_y, -grad_y))
        tan_y = np.where(inside, grad_y, np.where(flip, -grad_x, grad_x))

        vx = bx * (1.0 - influence) + tan_x * influence
        vy = by * (1.0 - influence) + tan_y * influence
        length = np.hypot(vx, vy)
        ok = length > MIN_LENGTH
        safe = np.where(ok, length, 1.0)
        vx = np.where(ok, vx / safe, 0.0)
        vy = np.where(ok, vy / safe, 0.0)

        out_x = np.where(active, vx, bx)
        out_y = np.where(active, vy, by)
        if out_x.ndim == 0:
            return float(out_x), float(out_y)
        return out_x, out_y
