"""Rotation, view and projection matrices."""

from __future__ import annotations

import math

import numpy as np


def _vec3(value) -> np.ndarray:
    array = np.asarray(value, dtype=float)
    if array.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {array.shape}")
    return array


def _normalize(v: np.ndarray) -> np.ndarray:
    length = np.linalg.norm(v)
    if length == 0.0:
        raise ValueError("cannot normalize a zero vector")
    return v / length


def rotate(axis, radians: float) -> np.ndarray:
    """Rotation by ``radians`` about the unit vector ``axis``."""
    x, y, z = _vec3(axis)
    c = math.cos(radians)
    s = math.sin(radians)
    t = 1.0 - c
    return np.array(
        [
            [t * x * x + c, t * x * y - z * s, t * x * z + y * s],
            [t * x * y + z * s, t * y * y + c, t * y * z - x * s],
            [t * x * z - y * s, t * y * z + x * s, t * z * z + c],
        ]
    )


def rotate_vector(rotation) -> np.ndarray:
    """Rotation given as axis times angle; tiny rotations give identity."""
    rotation = _vec3(rotation)
    theta = float(np.linalg.norm(rotation))
    if theta < 0.0001:
        return np.eye(3)
    return rotate(rotation / theta, theta)


def look_at(eye, center, up=(0.0, 1.0, 0.0)) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``center``."""
    eye = _vec3(eye)
    f = _normalize(_vec3(center) - eye)
    s = _normalize(np.cross(f, _vec3(up)))
    u = np.cross(s, f)
    return np.array(
        [
            [*s, -np.dot(s, eye)],
            [*u, -np.dot(u, eye)],
            [*(-f), np.dot(f, eye)],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def perspective_zo(
    fov_y: float, aspect: float, near_z: float, far_z: float
) -> np.ndarray:
    """Right-handed perspective projection mapping depth to [0, 1]."""
    if aspect == 0.0:
        raise ValueError("aspect must not be zero")
    if far_z == near_z:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fov_y / 2.0)
    if tan_half == 0.0:
        raise ValueError("field of view must not be zero")
    result = np.zeros((4, 4))
    result[0, 0] = 1.0 / (aspect * tan_half)
    result[1, 1] = 1.0 / tan_half
    result[2, 2] = far_z / (near_z - far_z)
    result[2, 3] = -(far_z * near_z) / (far_z - near_z)
    result[3, 2] = -1.0
    return result