"""Drawable instances of a model placed in a scene."""

from __future__ import annotations

import numpy as np

from gamex.model import Model, StagedBuffer


def _matrix4(value) -> np.ndarray:
    matrix = np.array(value, dtype=float)
    if matrix.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {matrix.shape}")
    return matrix


class Entity:
    """A model instance with its own transform and albedo texture."""

    def __init__(self, scene, model: Model) -> None:
        self.scene = scene
        self.model = model
        renderer = scene.renderer
        frames = renderer.max_frames_in_flight

        self._buffer = StagedBuffer(frames, [np.eye(4)])
        renderer.register_sync_object(self._buffer)

        self._albedo_image = renderer.white_image
        self._albedo_sampler = renderer.linear_sampler
        self._staging_version = 0
        self._frame_versions = [0] * frames
        self._bindings = [(self._albedo_image, self._albedo_sampler)] * frames
        self._closed = False
        renderer.register_sync_object(self)

    @property
    def affine_matrix(self) -> np.ndarray:
        """The most recently set model matrix."""
        return self._buffer.staging[0]

    def frame_affine_matrix(self, frame_index: int) -> np.ndarray:
        """The model matrix as seen by one frame in flight."""
        return self._buffer.frame(frame_index)[0]

    @property
    def albedo_image(self):
        return self._albedo_image

    @property
    def albedo_sampler(self):
        return self._albedo_sampler

    def set_affine_matrix(self, affine_matrix) -> None:
        self._buffer.upload([_matrix4(affine_matrix)])

    def set_albedo_image(self, image) -> None:
        """Change the albedo image, keeping the current sampler."""
        self.set_albedo_image_sampler(image, self._albedo_sampler)

    def set_albedo_image_sampler(self, image, sampler) -> None:
        self._albedo_image = image
        self._albedo_sampler = sampler
        self._staging_version += 1

    def sync_data(self, frame_index: int) -> bool:
        """Rebind the albedo texture for one frame if it changed.

        Always returns False: the rebinding needs no recorded commands.
        """
        if self._frame_versions[frame_index] != self._staging_version:
            self._bindings[frame_index] = (self._albedo_image, self._albedo_sampler)
            self._frame_versions[frame_index] = self._staging_version
        return False

    def albedo_binding(self, frame_index: int) -> tuple:
        """The (image, sampler) pair bound for one frame."""
        return self._bindings[frame_index]

    def close(self) -> None:
        """Leave the scene; safe to call more than once."""
        if not self._closed:
            self._closed = True
            renderer = self.scene.renderer
            renderer.unregister_sync_object(self._buffer)
            renderer.unregister_sync_object(self)
            self.scene.destroy_entity(self)

    def __enter__(self) -> Entity:
        return self

    def __exit__(self, *args) -> None:
        self.close()