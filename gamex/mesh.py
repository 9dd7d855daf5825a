"""Triangle meshes as vertex and index lists."""

from __future__ import annotations

from dataclasses import dataclass, field

from gamex.vertex import Vertex

_MAX_INDEX = 0xFFFFFFFF


def _index(value) -> int:
    index = int(value)
    if not 0 <= index <= _MAX_INDEX:
        raise ValueError(f"index {index} is outside the unsigned 32-bit range")
    return index


@dataclass
class Mesh:
    """Vertices with 32-bit indices into them."""

    vertices: list[Vertex] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.vertices = list(self.vertices)
        for vertex in self.vertices:
            if not isinstance(vertex, Vertex):
                raise TypeError(f"expected Vertex, got {type(vertex).__name__}")
        self.indices = [_index(i) for i in self.indices]

    @classmethod
    def from_positions(
        cls,
        positions,
        indices,
        color=(1.0, 1.0, 1.0),
        tex_coord=(0.0, 0.0),
        normal=(0.0, 0.0, 0.0),
        tangent=(0.0, 0.0, 0.0),
    ) -> Mesh:
        """Build a mesh whose vertices share every attribute but position."""
        vertices = [
            Vertex(
                position=position,
                color=color,
                tex_coord=tex_coord,
                normal=normal,
                tangent=tangent,
            )
            for position in positions
        ]
        return cls(vertices, indices)