#!/usr/bin/env python3
"""
Tests for FlowSimulator (headless frame loop) and the CLI entry point.
"""

import numpy as np
from PIL import Image

from flow_field.__main__ import main, parse_args
from flow_field.simulator import SDF_RESOLUTION, FlowSimulator


def _sim(**config):
    cfg = {"particle_count": 300}
    cfg.update(config)
    return FlowSimulator(64, 48, seed=1, config=cfg)


def _square_mask(sim):
    w, h = sim.width // SDF_RESOLUTION, sim.height // SDF_RESOLUTION
    mask = np.zeros((h, w), dtype=bool)
    mask[h // 4:3 * h // 4, w // 4:3 * w // 4] = True
    return mask


def test_steps_draw_trails():
    sim = _sim()
    assert sim.render().max() == 0
    sim.step_n(10)
    assert sim.frame == 10
    assert sim.render().max() > 0
    assert sim.stats["particles"] == 300


def test_same_seed_same_image():
    a = _sim()
    b = _sim()
    a.step_n(5)
    b.step_n(5)
    assert np.array_equal(a.render(), b.render())


def test_paused_does_not_advance():
    sim = _sim(paused=True)
    assert sim.step() is False
    assert sim.frame == 0
    sim.set_params(paused=False)
    assert sim.step() is True


def test_set_params_routes_to_components():
    sim = _sim()
    sim.set_params(noise_octaves=99, sdf_strength=5, sdf_falloff=0)
    assert sim.flow.fractal.octaves == 8
    assert sim.flow.sdf_strength == 2.0
    assert sim.flow.sdf_falloff == 1.0

    sim.set_params(particle_count=500)
    assert len(sim.particles) == 500

    sim.set_params(particle_speed=2.0, particle_speed_variation=0.0)
    assert np.all(sim.particles.speed == 2.0)

    sim.set_params(noise_scale=0.01)
    assert sim.flow.fractal.scale == 0.01


def test_apply_preset():
    sim = _sim()
    assert sim.apply_preset("aurora") is True
    assert sim.preset_key == "aurora"
    assert sim.config["color_mode"] == "rainbow"
    assert len(sim.particles) == 12000
    assert sim.apply_preset("missing") is False
    assert sim.preset_key == "aurora"


def test_regenerate_with_seed_is_reproducible():
    sim = _sim()
    xs = np.linspace(0, 64, 50)
    ys = np.linspace(0, 48, 50)
    sim.regenerate(seed=42)
    first = sim.flow.angle_at(xs, ys)
    sim.step_n(3)
    sim.regenerate(seed=42)
    assert np.array_equal(first, sim.flow.angle_at(xs, ys))
    assert sim.render().max() == 0, "Regenerate clears the canvas"


def test_load_mask_attaches_shape():
    sim = _sim()
    assert sim.load_mask(_square_mask(sim), name="box")
    assert sim.shape_name == "box"
    assert sim.flow.distance_field is sim.distance_field
    assert sim.distance_field.get_distance(32, 24) < 0
    sim.step_n(3)

    sim.clear_shape()
    assert sim.distance_field is None and sim.flow.distance_field is None


def test_load_shape_from_file(tmp_path):
    path = tmp_path / "shape.png"
    img = Image.new("RGB", (64, 48), (0, 0, 0))
    img.paste((255, 255, 255), (16, 12, 48, 36))
    img.save(path)

    sim = _sim()
    assert sim.load_shape(path) is True
    field = sim.distance_field
    assert (field.grid_width, field.grid_height) == (16, 12)
    assert field.get_distance(32, 24) < 0
    assert field.get_distance(2, 2) > 0


def test_failed_load_clears_previous_shape(tmp_path):
    sim = _sim()
    sim.load_mask(_square_mask(sim))
    old = sim.distance_field
    assert sim.load_shape(tmp_path / "missing.png") is False
    assert sim.distance_field is None
    assert sim.flow.distance_field is None
    assert not old.is_loaded()

    junk = tmp_path / "junk.svg"
    junk.write_text("<svg/>")
    assert sim.load_shape(junk) is False

    assert sim.load_mask(np.zeros((0, 0), dtype=bool)) is False


def test_resize_drops_shape():
    sim = _sim()
    sim.load_mask(_square_mask(sim))
    sim.resize(80, 40)
    assert sim.distance_field is None and sim.shape_name is None
    assert (sim.particles.width, sim.particles.height) == (80, 40)
    assert sim.render().shape == (40, 80, 3)


def test_parse_args():
    opts = parse_args(["aurora", "--window", "800x600", "--seed", "5", "--snap", "10"])
    assert opts["preset"] == "aurora"
    assert (opts["width"], opts["height"]) == (800, 600)
    assert opts["seed"] == 5 and opts["snap"] == 10

    assert parse_args(["--list"])["action"] == "list"
    assert parse_args(["--window", "wide"]) is None
    assert parse_args(["--bogus"]) is None
    assert parse_args([])["preset"] == "classic_smoke"


def test_main_snap_and_list(tmp_path):
    out = tmp_path / "snap.png"
    assert main(["chaos", "--snap", "2", "--window", "32x24", "--seed", "3",
                 "--out", str(out)]) == 0
    with Image.open(out) as img:
        assert img.size == (32, 24)

    assert main(["--list"]) == 0
    assert main(["--bogus"]) == 2
    assert main(["--snap", "1", "--window", "32x24",
                 "--shape", str(tmp_path / "missing.png")]) == 1
