#!/usr/bin/env python3
"""
Tests for the composite flow field (noise + shape deflection).
"""

import numpy as np

from flow_field.flow import FlowField
from flow_field.sdf import DistanceField


def _square_field():
    mask = np.zeros((64, 64), dtype=bool)
    mask[20:44, 20:44] = True
    return DistanceField(1).build(mask)


def _grid(size=64, stride=1.5):
    ys, xs = np.mgrid[0:size:stride, 0:size:stride]
    return xs.ravel() + 0.25, ys.ravel() + 0.25


def test_without_shape_equals_noise():
    flow = FlowField(0.01, seed=42)
    xs, ys = _grid()
    vx, vy = flow.vector_at(xs, ys)
    bx, by = flow.fractal.vector_at(xs, ys)
    assert np.array_equal(vx, bx) and np.array_equal(vy, by)


def test_unloaded_shape_is_ignored():
    flow = FlowField(0.01, seed=42)
    flow.set_distance_field(DistanceField(1))
    assert flow.vector_at(12.5, 7.5) == flow.fractal.vector_at(12.5, 7.5)


def test_all_outside_field_with_small_falloff_is_unchanged():
    """Flat gradient everywhere: no point is deflected."""
    flow = FlowField(0.01, seed=3)
    flow.set_distance_field(DistanceField(4).build(np.zeros((8, 8), dtype=bool)))
    flow.set_sdf_falloff(1)
    xs, ys = _grid(size=32, stride=0.7)
    vx, vy = flow.vector_at(xs, ys)
    bx, by = flow.fractal.vector_at(xs, ys)
    assert np.array_equal(vx, bx) and np.array_equal(vy, by)


def test_setter_clamps():
    flow = FlowField(0.01, seed=1)
    flow.set_sdf_strength(-1)
    assert flow.sdf_strength == 0.0
    flow.set_sdf_strength(5)
    assert flow.sdf_strength == 2.0
    flow.set_sdf_falloff(0)
    assert flow.sdf_falloff == 1.0
    flow.set_sdf_falloff(80)
    assert flow.sdf_falloff == 80.0


def test_output_is_unit_or_zero_near_shape():
    flow = FlowField(0.02, seed=7)
    flow.set_distance_field(_square_field())
    xs, ys = _grid()
    for strength in (0.5, 1.0, 2.0):
        flow.set_sdf_strength(strength)
        vx, vy = flow.vector_at(xs, ys)
        mags = np.hypot(vx, vy)
        assert np.all((np.abs(mags - 1.0) < 1e-3) | (mags == 0.0)), f"strength={strength}"


def test_inside_edge_pushes_outward():
    flow = FlowField(0.02, seed=7)
    flow.set_distance_field(_square_field())
    vx, vy = flow.vector_at(20.0, 32.0)
    assert vx < -0.99, f"Leftmost inside column should flow left, got ({vx}, {vy})"


def test_outside_edge_slides_along_boundary():
    flow = FlowField(0.02, seed=7)
    flow.set_distance_field(_square_field())
    bx, by = flow.fractal.vector_at(15.0, 32.0)
    vx, vy = flow.vector_at(15.0, 32.0)
    assert abs(vx) < 0.05, "Tangent to a vertical edge is vertical"
    assert vy * by >= 0, "Tangent keeps the noise's side of travel"


def test_beyond_falloff_is_unchanged():
    flow = FlowField(0.02, seed=7)
    flow.set_distance_field(_square_field())
    flow.set_sdf_falloff(5)
    assert flow.vector_at(2.0, 2.0) == flow.fractal.vector_at(2.0, 2.0)


def test_zero_strength_keeps_direction():
    flow = FlowField(0.02, seed=7)
    flow.set_distance_field(_square_field())
    flow.set_sdf_strength(0)
    xs, ys = _grid()
    vx, vy = flow.vector_at(xs, ys)
    bx, by = flow.fractal.vector_at(xs, ys)
    assert np.allclose(vx, bx) and np.allclose(vy, by)


def test_detach_restores_noise():
    flow = FlowField(0.02, seed=7)
    flow.set_distance_field(_square_field())
    flow.set_distance_field(None)
    assert flow.vector_at(20.0, 32.0) == flow.fractal.vector_at(20.0, 32.0)


def test_regenerate_keeps_shape_attached():
    field = _square_field()
    flow = FlowField(0.02, seed=7)
    flow.set_distance_field(field)
    flow.regenerate(seed=8)
    assert flow.distance_field is field
    assert flow.fractal.seed == 8
