"""
FlowSimulator - Headless simulation core

Owns the flow field, particles, optional shape distance field and the
trail canvas, and advances them one rendered frame at a time. No pygame
dependency: the viewer and the CLI snapshot mode both drive this class.

Usage:
    from flow_field.simulator import FlowSimulator
    sim = FlowSimulator(1280, 720, preset_key="aurora", seed=7)
    for _ in range(300):
        sim.step()
    sim.save_image("aurora.png")
"""

import numpy as np

from .canvas import TrailCanvas
from .colors import particle_colors
from .flow import FlowField
from .particles import ParticleSystem
from .presets import DEFAULT_CONFIG, get_preset, merge_preset
from .sdf import DistanceField


# Canvas pixels per distance-field cell
SDF_RESOLUTION = 4


class FlowSimulator:
    """Flow field particle simulation with trail rendering.

    Args:
        width, height: Canvas size in pixels
        preset_key: Optional preset merged over DEFAULT_CONFIG
        seed: Seed for all randomness (noise, positions, speeds)
        config: Optional overrides applied after the preset
    """

    def __init__(self, width=1280, height=720, preset_key=None, seed=None,
                 config=None):
        self.width = width
        self.height = height
        self.rng = np.random.default_rng(seed)

        cfg = dict(DEFAULT_CONFIG)
        if preset_key is not None:
            cfg = merge_preset(cfg, preset_key)
        if config:
            cfg.update(config)
        self.config = cfg
        self.preset_key = preset_key

        self.flow = FlowField(cfg["noise_scale"], rng=self.rng)
        self.flow.set_octaves(cfg["noise_octaves"])
        self.flow.set_sdf_strength(cfg["sdf_strength"])
        self.flow.set_sdf_falloff(cfg["sdf_falloff"])

        self.particles = ParticleSystem(
            int(cfg["particle_count"]), width, height,
            speed=cfg["particle_speed"],
            speed_variation=cfg["particle_speed_variation"],
            rng=self.rng,
        )
        self.canvas = TrailCanvas(width, height)
        self.distance_field = None
        self.shape_name = None
        self.frame = 0

    # -----------------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------------

    def set_params(self, **changes):
        """Apply config changes, touching only the setters that changed."""
        old = self.config
        new = dict(old)
        new.update(changes)
        self.config = new

        def changed(key):
            return key in changes and new[key] != old.get(key)

        if changed("noise_scale"):
            self.flow.set_scale(new["noise_scale"])
        if changed("noise_octaves"):
            self.flow.set_octaves(new["noise_octaves"])
        if changed("sdf_strength"):
            self.flow.set_sdf_strength(new["sdf_strength"])
        if changed("sdf_falloff"):
            self.flow.set_sdf_falloff(new["sdf_falloff"])
        if changed("particle_count"):
            self.particles.resize(int(new["particle_count"]))
        if changed("particle_speed") or changed("particle_speed_variation"):
            self.particles.set_speed(new["particle_speed"],
                                     new["particle_speed_variation"])

    def apply_preset(self, key):
        """Merge a preset into the config and regenerate. False if unknown."""
        if get_preset(key) is None:
            return False
        self.preset_key = key
        self.set_params(**merge_preset(self.config, key))
        self.regenerate()
        return True

    # -----------------------------------------------------------------------
    # Actions
    # -----------------------------------------------------------------------

    def regenerate(self, seed=None):
        """New noise, particles scattered, canvas cleared."""
        self.flow.regenerate(seed)
        self.flow.set_scale(self.config["noise_scale"])
        self.flow.set_octaves(self.config["noise_octaves"])
        if self.distance_field is not None:
            self.flow.set_distance_field(self.distance_field)
        self.particles.reset()
        self.clear_canvas()

    def clear_canvas(self):
        self.canvas.clear()

    def load_shape(self, path):
        """Rasterize an image into a distance field and deflect around it.

        Returns True on success. On failure any previous shape is dropped.
        """
        field = DistanceField(SDF_RESOLUTION)
        try:
            field.load_shape(path, self.width, self.height)
        except (OSError, ValueError) as e:
            print(f"[flow] Failed to load shape {path}: {e}")
            self.clear_shape()
            return False
        self._attach(field, str(path))
        print(f"[flow] Shape loaded: {path} "
              f"({field.grid_width}x{field.grid_height} cells)")
        return True

    def load_mask(self, mask, name="mask"):
        """Like load_shape, from a boolean grid already at SDF resolution."""
        field = DistanceField(SDF_RESOLUTION)
        try:
            field.build(mask)
        except ValueError as e:
            print(f"[flow] Failed to build shape field: {e}")
            self.clear_shape()
            return False
        self._attach(field, name)
        return True

    def _attach(self, field, name):
        self.distance_field = field
        self.shape_name = name
        self.flow.set_distance_field(field)
        self.particles.reset()
        self.clear_canvas()

    def clear_shape(self):
        if self.distance_field is not None:
            self.distance_field.clear()
        self.distance_field = None
        self.shape_name = None
        self.flow.set_distance_field(None)

    def resize(self, width, height):
        """New canvas size. A loaded shape is dropped (sized for the old one)."""
        self.width = width
        self.height = height
        self.canvas.resize(width, height)
        self.particles.set_bounds(width, height)
        if self.distance_field is not None:
            self.clear_shape()

    # -----------------------------------------------------------------------
    # Frame loop
    # -----------------------------------------------------------------------

    def step(self):
        """Advance one frame and draw it. No-op while paused."""
        cfg = self.config
        if cfg["paused"]:
            return False

        if cfg["fade_amount"] > 0:
            self.canvas.fade(cfg["fade_amount"])
        if cfg["noise_evolution"] > 0:
            self.flow.evolve(cfg["noise_evolution"])

        self.particles.step(self.flow)
        x0, y0, x1, y1 = self.particles.segments()
        colors = particle_colors(
            cfg["color_mode"], x1, y1, self.width, self.height,
            hue=cfg["hue"], saturation=cfg["saturation"],
            lightness=cfg["lightness"],
        )
        self.canvas.stroke(x0, y0, x1, y1, colors,
                           alpha=cfg["stroke_alpha"],
                           line_width=cfg["line_width"])
        self.frame += 1
        return True

    def step_n(self, n):
        for _ in range(n):
            self.step()

    def render(self, bloom=0.0):
        """Current canvas as (H, W, 3) uint8."""
        return self.canvas.to_rgb(bloom)

    def save_image(self, path, bloom=0.0):
        self.canvas.save(path, bloom)
        print(f"[flow] Image saved: {path}")
        return path

    @property
    def stats(self):
        return {
            "frame": self.frame,
            "particles": len(self.particles),
            "shape": self.shape_name,
            "seed": self.flow.fractal.seed,
            "paused": bool(self.config["paused"]),
        }
