"""Light arriving from one direction, as from a distant source."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from gamex.ambient_light import LightingPipeline
from gamex.light import Light
from gamex.model import StagedBuffer


def _vec3(value, name: str) -> tuple[float, float, float]:
    components = tuple(float(c) for c in value)
    if len(components) != 3:
        raise ValueError(f"{name} needs 3 components, got {len(components)}")
    return components


def _normalized(direction) -> tuple[float, float, float]:
    vector = np.asarray(_vec3(direction, "direction"), dtype=float)
    length = float(np.linalg.norm(vector))
    if length == 0.0:
        raise ValueError("direction must not be a zero vector")
    return tuple(float(c) for c in vector / length)


@dataclass(frozen=True)
class DirectionalLightData:
    """Directional light parameters as seen by shaders."""

    color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    intensity: float = 0.0
    direction: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", _vec3(self.color, "color"))
        object.__setattr__(self, "intensity", float(self.intensity))
        object.__setattr__(self, "direction", _vec3(self.direction, "direction"))


_PIPELINES: dict[object, LightingPipeline] = {}


def directional_light_pipeline(renderer) -> LightingPipeline:
    """The directional light pipeline of ``renderer``, built on first use."""
    pipeline = _PIPELINES.get(renderer)
    if pipeline is None:
        pipeline = LightingPipeline(
            vertex_shader="fullscreen_lighting_pass.vert",
            fragment_shader="directional_light.frag",
        )
        _PIPELINES[renderer] = pipeline
        renderer.add_release_callback(lambda: _PIPELINES.pop(renderer, None))
    return pipeline


class DirectionalLight(Light):
    """Light of one color arriving along one direction.

    ``color`` may be a :class:`DirectionalLightData`, used as given; otherwise
    ``direction`` is normalized. With no color at all the light is black.
    """

    def __init__(
        self,
        scene,
        color=None,
        direction=(0.0, -1.0, 0.0),
        intensity: float = 1.0,
    ) -> None:
        super().__init__(scene)
        if color is None:
            data = DirectionalLightData()
        elif isinstance(color, DirectionalLightData):
            data = color
        else:
            data = DirectionalLightData(color, intensity, _normalized(direction))
        renderer = scene.renderer
        self._buffer = StagedBuffer(renderer.max_frames_in_flight, [data])
        renderer.register_sync_object(self._buffer)

    @property
    def data(self) -> DirectionalLightData:
        """The most recently set light parameters."""
        return self._buffer.staging[0]

    def set_light(
        self,
        color=(0.3, 0.3, 0.3),
        direction=(0.0, 1.0, 0.0),
        intensity: float = 1.0,
    ) -> None:
        self._buffer.upload(
            [DirectionalLightData(color, intensity, _normalized(direction))]
        )

    def lighting_pipeline(self) -> LightingPipeline:
        return directional_light_pipeline(self.scene.renderer)

    def lighting(self, frame_index: int) -> DirectionalLightData:
        """The parameters the full-screen draw uses for one frame."""
        return self._buffer.frame(frame_index)[0]

    def close(self) -> None:
        if not self.closed:
            self.scene.renderer.unregister_sync_object(self._buffer)
        super().close()