"""Orbit camera projection and input damping."""

from __future__ import annotations

import math

import numpy as np
import pytest

from simulation.camera import OrbitCamera

VIEWPORT = (0, 0, 800, 600)


def test_starts_at_home_position():
    camera = OrbitCamera(VIEWPORT)
    np.testing.assert_allclose(camera.position, [0.0, 5.0, 15.0], atol=1e-9)


def test_target_projects_to_viewport_center():
    camera = OrbitCamera(VIEWPORT)
    sx, sy, depth = camera.project((0, 0, 0))
    assert sx == pytest.approx(400)
    assert sy == pytest.approx(300)
    assert depth == pytest.approx(math.sqrt(250))


def test_axes_map_to_screen_directions():
    camera = OrbitCamera(VIEWPORT)
    right = camera.project((1, 0, 0))
    up = camera.project((0, 1, 0))
    assert right[0] > 400
    assert up[1] < 300


def test_points_behind_camera_are_culled():
    camera = OrbitCamera(VIEWPORT)
    assert camera.project((0, 10, 30)) is None


def test_basis_is_orthonormal():
    camera = OrbitCamera(VIEWPORT)
    camera.rotate(120, -40)
    for _ in range(30):
        camera.update()
    right, up, forward = camera.basis()
    for v in (right, up, forward):
        assert np.linalg.norm(v) == pytest.approx(1.0)
    assert np.dot(right, up) == pytest.approx(0.0, abs=1e-9)
    assert np.dot(right, forward) == pytest.approx(0.0, abs=1e-9)


def test_rotation_is_damped():
    camera = OrbitCamera(VIEWPORT, damping_factor=0.05)
    start = camera.azimuth
    camera.rotate(100, 0)
    camera.update()
    first_step = abs(camera.azimuth - start)
    total_requested = 100 * camera.rotate_speed
    assert first_step == pytest.approx(total_requested * 0.05)
    for _ in range(500):
        camera.update()
    assert abs(camera.azimuth - start) == pytest.approx(total_requested, rel=1e-3)


def test_polar_angle_is_clamped():
    camera = OrbitCamera(VIEWPORT)
    camera.rotate(0, 10000)
    for _ in range(200):
        camera.update()
    assert OrbitCamera.MIN_POLAR <= camera.polar <= OrbitCamera.MAX_POLAR


def test_zoom_is_clamped_and_reset_restores_home():
    camera = OrbitCamera(VIEWPORT, min_distance=2.0, max_distance=50.0)
    camera.zoom(200)
    assert camera.distance == pytest.approx(2.0)
    camera.zoom(-500)
    assert camera.distance == pytest.approx(50.0)
    camera.reset()
    np.testing.assert_allclose(camera.position, [0.0, 5.0, 15.0], atol=1e-9)
