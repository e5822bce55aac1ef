import math
import sys
from pathlib import Path

import numpy as np
import pytest

# Add the ``coaster_ride`` directory to the import path for test execution.
sys.path.append(str(Path(__file__).resolve().parents[1] / "coaster_ride"))

from camera_frame import (
    CameraPose,
    CameraSmoother,
    banked_up,
    camera_targets,
    look_ahead_progress,
    orientation_basis,
)
from ride_config import RideConfig
from track_curve import TrackCurve


def test_basis_for_level_track() -> None:
    right, up = orientation_basis(np.array([1.0, 0.0, 0.0]))
    assert np.allclose(right, [0.0, 0.0, 1.0])
    assert np.allclose(up, [0.0, 1.0, 0.0])


def test_basis_falls_back_on_vertical_track() -> None:
    right, up = orientation_basis(np.array([0.0, 1.0, 0.0]))
    assert np.allclose(right, [1.0, 0.0, 0.0])
    assert np.allclose(up, [0.0, 0.0, 1.0])
    assert np.all(np.isfinite(up))


def test_basis_is_orthonormal_and_right_handed() -> None:
    rng = np.random.default_rng(2)
    for _ in range(50):
        tangent = rng.normal(size=3)
        tangent /= np.linalg.norm(tangent)
        if abs(tangent[1]) > 0.95:
            continue
        right, up = orientation_basis(tangent)
        assert np.isclose(np.linalg.norm(right), 1.0)
        assert np.isclose(np.linalg.norm(up), 1.0)
        assert np.isclose(np.dot(right, tangent), 0.0, atol=1e-9)
        assert np.isclose(np.dot(up, tangent), 0.0, atol=1e-9)
        assert np.isclose(np.dot(right, up), 0.0, atol=1e-9)
        assert np.allclose(np.cross(tangent, up), right)
        # The unbanked frame never points the rider upside down.
        assert up[1] > 0.0

        for tilt in (-60.0, 15.0, 120.0):
            banked = banked_up(tangent, up, tilt)
            assert np.isclose(np.linalg.norm(banked), 1.0)
            assert np.isclose(np.dot(banked, tangent), 0.0, atol=1e-9)
            assert np.isclose(np.dot(banked, up), math.cos(math.radians(tilt)))


def test_banking_rotates_about_tangent() -> None:
    tangent = np.array([1.0, 0.0, 0.0])
    up = np.array([0.0, 1.0, 0.0])
    assert np.allclose(banked_up(tangent, up, 0.0), up)
    assert np.allclose(banked_up(tangent, up, 90.0), [0.0, 0.0, 1.0])
    assert np.allclose(banked_up(tangent, up, -90.0), [0.0, 0.0, -1.0])


def test_look_ahead_progress() -> None:
    assert np.isclose(look_ahead_progress(0.5, closed=False), 0.53)
    assert look_ahead_progress(0.98, closed=False) == 0.999
    assert np.isclose(look_ahead_progress(0.99, closed=True), 0.02)


def test_camera_targets_on_straight_track() -> None:
    curve = TrackCurve([[0.0, 0.0, 0.0], [10.0, 0.0, 0.0]])
    pose = camera_targets(curve, 0.5, 0.0, closed=False)
    assert np.allclose(pose.position, [5.0, 1.5, 0.0])
    assert np.allclose(pose.look_at, [5.3, 1.2, 0.0])
    assert np.allclose(pose.up, [0.0, 1.0, 0.0])


def test_camera_targets_banked() -> None:
    curve = TrackCurve([[0.0, 0.0, 0.0], [10.0, 0.0, 0.0]])
    config = RideConfig(camera_height=2.0)
    pose = camera_targets(curve, 0.5, 90.0, closed=False, config=config)
    assert np.allclose(pose.position, [5.0, 0.0, 2.0])
    assert np.allclose(pose.look_at, [5.3, 0.0, 1.6])


def test_fixed_smoothing_step() -> None:
    smoother = CameraSmoother()
    target = CameraPose(np.array([4.0, 0.0, 0.0]), np.array([0.0, 8.0, 0.0]), np.array([0.0, 1.0, 0.0]))
    pose = smoother.update(target, 1.0 / 30.0)
    assert np.allclose(pose.position, [1.0, 0.0, 0.0])
    assert np.allclose(pose.look_at, [0.0, 2.0, 0.0])
    # Returned pose is a snapshot, not the smoother's own arrays.
    pose.position[0] = 99.0
    assert smoother.position[0] == 1.0


def test_smoothing_converges_to_constant_target() -> None:
    smoother = CameraSmoother()
    smoother.reset(CameraPose(np.zeros(3), np.zeros(3), np.array([0.0, 1.0, 0.0])))
    target = CameraPose(np.array([3.0, -2.0, 7.0]), np.array([1.0, 1.0, 1.0]), np.array([0.0, 1.0, 0.0]))
    previous = np.linalg.norm(target.position)
    for _ in range(200):
        pose = smoother.update(target)
        distance = np.linalg.norm(target.position - pose.position)
        if previous < 1e-9:
            break
        assert distance < previous
        previous = distance
    assert previous < 1e-6
    assert np.allclose(smoother.look_at, target.look_at)


def test_time_scaled_smoothing() -> None:
    rate = -math.log(0.75) * 60.0
    smoother = CameraSmoother(rate=rate)
    assert smoother.blend(1.0 / 60.0) == pytest.approx(0.25)
    assert smoother.blend(2.0 / 60.0) == pytest.approx(1.0 - 0.75**2)
    assert smoother.blend(0.0) == 0.0

    config = RideConfig(smoothing_rate=rate)
    assert CameraSmoother.from_config(config).rate == rate
