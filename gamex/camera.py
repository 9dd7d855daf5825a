"""Cameras holding view and projection matrices for a scene."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from gamex.model import StagedBuffer
from gamex.transform import look_at, perspective_zo


def _matrix4(value) -> np.ndarray:
    matrix = np.array(value, dtype=float)
    if matrix.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {matrix.shape}")
    return matrix


@dataclass
class CameraData:
    """View and projection matrices as seen by shaders."""

    view_matrix: np.ndarray = field(default_factory=lambda: np.eye(4))
    projection_matrix: np.ndarray = field(default_factory=lambda: np.eye(4))

    def __post_init__(self) -> None:
        self.view_matrix = _matrix4(self.view_matrix)
        self.projection_matrix = _matrix4(self.projection_matrix)


def _view(eye, center) -> np.ndarray:
    if np.array_equal(np.asarray(eye, dtype=float), np.asarray(center, dtype=float)):
        return np.eye(4)
    return look_at(eye, center, (0.0, 1.0, 0.0))


class Camera:
    """A camera in a scene; ``fov_y`` is in degrees.

    When ``eye`` equals ``center`` the view matrix is the identity.
    """

    def __init__(
        self,
        scene,
        eye=(0.0, 0.0, 0.0),
        center=(0.0, 0.0, 0.0),
        fov_y: float = 45.0,
        aspect: float = 1.0,
        near_z: float = 0.1,
        far_z: float = 100.0,
    ) -> None:
        self.scene = scene
        data = CameraData(
            view_matrix=_view(eye, center),
            projection_matrix=perspective_zo(
                math.radians(fov_y), aspect, near_z, far_z
            ),
        )
        self._buffer = StagedBuffer(scene.renderer.max_frames_in_flight, [data])
        self._closed = False
        scene.renderer.register_sync_object(self._buffer)

    @property
    def data(self) -> CameraData:
        """The most recently set camera data."""
        return self._buffer.staging[0]

    def frame_data(self, frame_index: int) -> CameraData:
        """Camera data as seen by one frame in flight."""
        return self._buffer.frame(frame_index)[0]

    def set_camera_data(self, data: CameraData) -> None:
        if not isinstance(data, CameraData):
            raise TypeError(f"expected CameraData, got {type(data).__name__}")
        self._buffer.upload([data])

    def close(self) -> None:
        """Leave the scene; safe to call more than once."""
        if not self._closed:
            self._closed = True
            self.scene.destroy_camera(self)
            self.scene.renderer.unregister_sync_object(self._buffer)

    def __enter__(self) -> Camera:
        return self

    def __exit__(self, *args) -> None:
        self.close()