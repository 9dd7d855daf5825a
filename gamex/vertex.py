"""Vertex layout shared by meshes and the geometry pass."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import accumulate

_FLOAT_SIZE = 4

# Field name and component count, in memory order.
_LAYOUT: tuple[tuple[str, int], ...] = (
    ("position", 3),
    ("color", 3),
    ("tex_coord", 2),
    ("normal", 3),
    ("tangent", 3),
)

_FORMATS = {2: "R32G32_SFLOAT", 3: "R32G32B32_SFLOAT"}

_OFFSETS = tuple(
    accumulate((count * _FLOAT_SIZE for _, count in _LAYOUT[:-1]), initial=0)
)
_STRIDE = sum(count for _, count in _LAYOUT) * _FLOAT_SIZE


def _vector(value, size: int, name: str) -> tuple[float, ...]:
    components = tuple(float(c) for c in value)
    if len(components) != size:
        raise ValueError(
            f"{name} needs {size} components, got {len(components)}"
        )
    return components


@dataclass(frozen=True)
class VertexInputBinding:
    """How a vertex buffer binding is stepped through."""

    binding: int
    stride: int
    input_rate: str


@dataclass(frozen=True)
class VertexInputAttribute:
    """Where one vertex attribute lives inside a vertex."""

    binding: int
    location: int
    format: str
    offset: int


@dataclass
class Vertex:
    """A single mesh vertex."""

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    tex_coord: tuple[float, float] = (0.0, 0.0)
    normal: tuple[float, float, float] = (0.0, 0.0, 0.0)
    tangent: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        for name, size in _LAYOUT:
            setattr(self, name, _vector(getattr(self, name), size, name))

    def sort_key(self) -> tuple[float, ...]:
        """Key ordering by position, normal, tex_coord, tangent, then color."""
        return (
            *self.position,
            *self.normal,
            *self.tex_coord,
            *self.tangent,
            *self.color,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Vertex):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    @staticmethod
    def binding_description() -> VertexInputBinding:
        """Binding 0, one vertex per step."""
        return VertexInputBinding(binding=0, stride=_STRIDE, input_rate="vertex")

    @staticmethod
    def attribute_descriptions() -> list[VertexInputAttribute]:
        """One attribute per field, locations in memory order."""
        return [
            VertexInputAttribute(
                binding=0,
                location=location,
                format=_FORMATS[size],
                offset=offset,
            )
            for location, ((_, size), offset) in enumerate(zip(_LAYOUT, _OFFSETS))
        ]