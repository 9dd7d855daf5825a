"""The renderer: shared samplers and images, sync objects and factories."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Any, Callable

from gamex.asset_probe import AssetProbe
from gamex.image import Image, ImageHDR
from gamex.mesh import Mesh
from gamex.model import AnimatedModel, StaticModel
from gamex.scene import Scene


class Filter(enum.Enum):
    NEAREST = "nearest"
    LINEAR = "linear"


class AddressMode(enum.Enum):
    CLAMP_TO_EDGE = "clamp_to_edge"
    REPEAT = "repeat"


@dataclass(frozen=True, eq=False)
class Sampler:
    """How a texture is filtered and addressed when sampled."""

    mag_filter: Filter
    min_filter: Filter
    address_mode_u: AddressMode
    address_mode_v: AddressMode
    address_mode_w: AddressMode
    anisotropy: bool
    mipmap_mode: Filter
    border_color: str = "float_transparent_black"


class GpuImage:
    """A device image uploaded from an 8-bit or floating-point image."""

    def __init__(self, source: Image | ImageHDR) -> None:
        if isinstance(source, ImageHDR):
            self.format = "R32G32B32A32_SFLOAT"
        elif isinstance(source, Image):
            self.format = "R8G8B8A8_UNORM"
        else:
            raise TypeError(
                f"expected Image or ImageHDR, got {type(source).__name__}"
            )
        self.width = source.width
        self.height = source.height
        self.pixels = tuple(source.pixels)

    @property
    def extent(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def is_hdr(self) -> bool:
        return self.format == "R32G32B32A32_SFLOAT"

    @classmethod
    def from_path(cls, path, probe: AssetProbe | None = None) -> GpuImage:
        """Load a file; ``.hdr`` files become floating-point images."""
        text = os.fspath(path)
        ext = text[text.rfind(".") + 1 :]
        if ext == "hdr":
            return cls(ImageHDR.load(text, probe))
        return cls(Image.load(text, probe))


class Renderer:
    """Owns shared resources and keeps per-frame data in step."""

    def __init__(self, max_frames_in_flight: int = 2) -> None:
        if max_frames_in_flight < 1:
            raise ValueError("max_frames_in_flight must be at least 1")
        self.max_frames_in_flight = max_frames_in_flight
        self.current_frame = 0
        # Insertion-ordered set of objects with a sync_data(frame_index) method.
        self._sync_objects: dict[Any, None] = {}
        self._release_callbacks: list[Callable[[], Any]] = []
        self._closed = False

        self.linear_sampler = Sampler(
            Filter.LINEAR,
            Filter.LINEAR,
            AddressMode.CLAMP_TO_EDGE,
            AddressMode.CLAMP_TO_EDGE,
            AddressMode.CLAMP_TO_EDGE,
            False,
            Filter.LINEAR,
        )
        self.nearest_sampler = Sampler(
            Filter.NEAREST,
            Filter.NEAREST,
            AddressMode.CLAMP_TO_EDGE,
            AddressMode.CLAMP_TO_EDGE,
            AddressMode.CLAMP_TO_EDGE,
            False,
            Filter.NEAREST,
        )
        self.anisotropic_sampler = Sampler(
            Filter.LINEAR,
            Filter.LINEAR,
            AddressMode.REPEAT,
            AddressMode.REPEAT,
            AddressMode.REPEAT,
            True,
            Filter.LINEAR,
        )

        self.white_image = self.create_image(Image.filled(1, 1, (255, 255, 255, 255)))
        self.normal_map_image = self.create_image(
            Image.filled(1, 1, (128, 128, 255, 255))
        )
        self.black_image = self.create_image(Image.filled(1, 1, (0, 0, 0, 255)))

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def registered_sync_objects(self) -> tuple:
        return tuple(self._sync_objects)

    def register_sync_object(self, sync_object) -> None:
        self._sync_objects[sync_object] = None

    def unregister_sync_object(self, sync_object) -> None:
        self._sync_objects.pop(sync_object, None)

    def sync_objects(self) -> None:
        """Bring every registered object up to date for the current frame."""
        for sync_object in list(self._sync_objects):
            sync_object.sync_data(self.current_frame)

    def next_frame(self) -> int:
        """Advance to the next frame in flight and return its index."""
        self.current_frame = (self.current_frame + 1) % self.max_frames_in_flight
        return self.current_frame

    def create_scene(self, *args, **kwargs) -> Scene:
        return Scene(self, *args, **kwargs)

    def create_static_model(self, *args, **kwargs) -> StaticModel:
        """A static model from a Mesh, or from arguments that build one."""
        if len(args) == 1 and not kwargs and isinstance(args[0], Mesh):
            mesh = args[0]
        else:
            mesh = Mesh(*args, **kwargs)
        return StaticModel(self, mesh)

    def create_animated_model(self, *args, **kwargs) -> AnimatedModel:
        """An animated model over a Mesh, or over one built from arguments."""
        if len(args) == 1 and not kwargs and isinstance(args[0], Mesh):
            mesh = args[0]
        else:
            mesh = Mesh(*args, **kwargs)
        return AnimatedModel(self, mesh)

    def create_image(self, source) -> GpuImage:
        """A device image from an Image, an ImageHDR or a file path."""
        if isinstance(source, (str, os.PathLike)):
            return GpuImage.from_path(source)
        return GpuImage(source)

    def add_release_callback(self, callback: Callable[[], Any]) -> None:
        """Run ``callback`` when the renderer closes, latest first."""
        self._release_callbacks.append(callback)

    def close(self) -> None:
        """Run release callbacks in reverse order; safe to call again."""
        while self._release_callbacks:
            self._release_callbacks.pop()()
        self._closed = True

    def __enter__(self) -> Renderer:
        return self

    def __exit__(self, *args) -> None:
        self.close()