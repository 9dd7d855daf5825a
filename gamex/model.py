"""GPU-side models: vertex and index buffers built from meshes."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any, Iterable

from gamex.mesh import Mesh
from gamex.vertex import Vertex


class StagedBuffer:
    """Host contents staged once and copied into one slot per frame in flight.

    Writes go to the staging copy. A frame's slot catches up with the latest
    upload only when that frame is synced.
    """

    def __init__(self, frames: int, contents: Iterable[Any] = ()) -> None:
        if frames < 1:
            raise ValueError("a staged buffer needs at least one frame")
        self._staging: tuple[Any, ...] = tuple(copy.deepcopy(list(contents)))
        self._version = 0
        self._frames = [copy.deepcopy(self._staging) for _ in range(frames)]
        self._frame_versions = [0] * frames

    def __len__(self) -> int:
        return len(self._staging)

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def staging(self) -> tuple[Any, ...]:
        """The most recently uploaded contents."""
        return self._staging

    @property
    def version(self) -> int:
        return self._version

    def _check_frame(self, frame_index: int) -> None:
        if not 0 <= frame_index < len(self._frames):
            raise IndexError(
                f"frame index {frame_index} outside 0..{len(self._frames) - 1}"
            )

    def upload(self, contents: Iterable[Any]) -> None:
        """Replace the staged contents; frames pick them up when synced."""
        self._staging = tuple(copy.deepcopy(list(contents)))
        self._version += 1

    def sync(self, frame_index: int) -> bool:
        """Bring one frame's slot up to date; True if anything was copied."""
        self._check_frame(frame_index)
        if self._frame_versions[frame_index] == self._version:
            return False
        self._frames[frame_index] = copy.deepcopy(self._staging)
        self._frame_versions[frame_index] = self._version
        return True

    sync_data = sync

    def frame(self, frame_index: int) -> tuple[Any, ...]:
        """The contents a frame currently sees."""
        self._check_frame(frame_index)
        return self._frames[frame_index]


class Model(ABC):
    """Something that can be drawn with a vertex and an index buffer."""

    def __init__(self, renderer) -> None:
        self.renderer = renderer

    @abstractmethod
    def vertex_buffer(self, frame_index: int) -> tuple[Vertex, ...]:
        """Vertices visible to the given frame."""

    @abstractmethod
    def index_buffer(self, frame_index: int) -> tuple[int, ...]:
        """Indices visible to the given frame."""

    @property
    @abstractmethod
    def index_count(self) -> int:
        """Number of indices to draw."""


class StaticModel(Model):
    """A model whose geometry is fixed when it is created."""

    def __init__(self, renderer, mesh: Mesh) -> None:
        super().__init__(renderer)
        self._vertices = tuple(copy.deepcopy(mesh.vertices))
        self._indices = tuple(mesh.indices)

    def vertex_buffer(self, frame_index: int) -> tuple[Vertex, ...]:
        return self._vertices

    def index_buffer(self, frame_index: int) -> tuple[int, ...]:
        return self._indices

    @property
    def index_count(self) -> int:
        return len(self._indices)


class AnimatedModel(Model):
    """A model whose vertices follow a mesh that may change between frames.

    Edit ``vertices`` in place, then call :meth:`sync_mesh_data` to stage
    the new vertex data; each frame picks it up when synced.
    """

    def __init__(self, renderer, mesh: Mesh) -> None:
        super().__init__(renderer)
        self.mesh = mesh
        self._vertex_buffer = StagedBuffer(
            renderer.max_frames_in_flight, mesh.vertices
        )
        self._indices = tuple(mesh.indices)
        self._closed = False
        renderer.register_sync_object(self)

    @property
    def vertices(self) -> list[Vertex]:
        return self.mesh.vertices

    @property
    def indices(self) -> list[int]:
        return self.mesh.indices

    def vertex_buffer(self, frame_index: int) -> tuple[Vertex, ...]:
        return self._vertex_buffer.frame(frame_index)

    def index_buffer(self, frame_index: int) -> tuple[int, ...]:
        return self._indices

    @property
    def index_count(self) -> int:
        return len(self.mesh.indices)

    def sync_mesh_data(self) -> None:
        """Stage the mesh's current vertices for upload."""
        self._vertex_buffer.upload(self.mesh.vertices)

    def sync_data(self, frame_index: int | None = None) -> bool:
        """Sync one frame's vertices; defaults to the renderer's current frame."""
        if frame_index is None:
            frame_index = self.renderer.current_frame
        return self._vertex_buffer.sync(frame_index)

    def close(self) -> None:
        """Stop taking part in renderer syncs; safe to call more than once."""
        if not self._closed:
            self._closed = True
            self.renderer.unregister_sync_object(self)

    def __enter__(self) -> AnimatedModel:
        return self

    def __exit__(self, *args) -> None:
        self.close()