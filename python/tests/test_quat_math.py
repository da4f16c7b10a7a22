"""
test_quat_math.py - Quaternion to Euler conversion

Usage:
    pytest python/tests/test_quat_math.py
"""

import numpy as np

from vroid2bvh.quat_math import QuaternionMath


def test_identity_gives_zero_angles():
    angles = QuaternionMath.quat_to_euler_xyz_deg(0.0, 0.0, 0.0, 1.0)
    assert np.allclose(angles, [0.0, 0.0, 0.0])


def test_single_axis_rotations():
    s = np.sin(np.radians(45))
    c = np.cos(np.radians(45))

    roll, pitch, yaw = QuaternionMath.quat_to_euler_xyz_deg(s, 0.0, 0.0, c)
    assert np.isclose(roll, 90.0) and np.isclose(pitch, 0.0) and np.isclose(yaw, 0.0)

    roll, pitch, yaw = QuaternionMath.quat_to_euler_xyz_deg(0.0, 0.0, s, c)
    assert np.isclose(roll, 0.0) and np.isclose(pitch, 0.0) and np.isclose(yaw, 90.0)

    half = np.radians(15)
    roll, pitch, yaw = QuaternionMath.quat_to_euler_xyz_deg(0.0, np.sin(half), 0.0, np.cos(half))
    assert np.isclose(pitch, 30.0)


def test_pitch_argument_is_clamped():
    """2*(w*y - z*x) slightly above 1 must not produce NaN"""
    v = 0.70710682
    assert 2 * v * v > 1.0

    angles = QuaternionMath.quat_to_euler_xyz_deg(0.0, v, 0.0, v)
    assert not np.any(np.isnan(angles))
    assert np.isclose(angles[1], 90.0)

    angles = QuaternionMath.quat_to_euler_xyz_deg(0.0, -v, 0.0, v)
    assert not np.any(np.isnan(angles))
    assert np.isclose(angles[1], -90.0)


def test_non_unit_quaternion_is_not_rejected():
    angles = QuaternionMath.quat_to_euler_xyz_deg(1.0, 1.0, 1.0, 1.0)
    assert np.all(np.isfinite(angles))

    angles = QuaternionMath.quat_to_euler_xyz_deg(0.0, 0.0, 0.0, 2.0)
    assert np.allclose(angles, [0.0, 0.0, 0.0])


def test_combined_rotation_recovers_angles():
    """Rz(yaw) * Ry(pitch) * Rx(roll) decomposes back to (roll, pitch, yaw)"""
    roll, pitch, yaw = 0.3, -0.4, 0.5
    cr, sr = np.cos(roll / 2), np.sin(roll / 2)
    cp, sp = np.cos(pitch / 2), np.sin(pitch / 2)
    cy, sy = np.cos(yaw / 2), np.sin(yaw / 2)

    x = sr * cp * cy - cr * sp * sy
    y = cr * sp * cy + sr * cp * sy
    z = cr * cp * sy - sr * sp * cy
    w = cr * cp * cy + sr * sp * sy

    assert np.allclose(QuaternionMath.quat_to_euler_xyz(x, y, z, w), [roll, pitch, yaw])
