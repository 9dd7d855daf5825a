"""Uniform ambient lighting over the whole frame."""

from __future__ import annotations

from dataclasses import dataclass

from gamex.light import Light
from gamex.model import StagedBuffer


def _color(value) -> tuple[float, float, float]:
    components = tuple(float(c) for c in value)
    if len(components) != 3:
        raise ValueError(f"color needs 3 components, got {len(components)}")
    return components


@dataclass(frozen=True, eq=False)
class LightingPipeline:
    """A full-screen, additively blended pipeline of the lighting subpass.

    Pipelines compare by identity: one is built per renderer and light kind.
    """

    vertex_shader: str
    fragment_shader: str
    subpass: int = 1
    vertex_count: int = 6
    topology: str = "triangle_list"
    cull_mode: str = "none"
    color_blend: tuple[str, str, str] = ("one", "one", "add")
    alpha_blend: tuple[str, str, str] = ("one", "zero", "add")


@dataclass(frozen=True)
class AmbientLightData:
    """Ambient light parameters as seen by shaders."""

    color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    intensity: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", _color(self.color))
        object.__setattr__(self, "intensity", float(self.intensity))


_PIPELINES: dict[object, LightingPipeline] = {}


def ambient_light_pipeline(renderer) -> LightingPipeline:
    """The ambient light pipeline of ``renderer``, built on first use."""
    pipeline = _PIPELINES.get(renderer)
    if pipeline is None:
        pipeline = LightingPipeline(
            vertex_shader="fullscreen_lighting_pass.vert",
            fragment_shader="ambient_light.frag",
        )
        _PIPELINES[renderer] = pipeline
        renderer.add_release_callback(lambda: _PIPELINES.pop(renderer, None))
    return pipeline


class AmbientLight(Light):
    """Light of one color added equally everywhere.

    ``color`` may be an :class:`AmbientLightData`; with no color at all the
    light is black with zero intensity.
    """

    def __init__(self, scene, color=None, intensity: float = 1.0) -> None:
        super().__init__(scene)
        if color is None:
            data = AmbientLightData()
        elif isinstance(color, AmbientLightData):
            data = color
        else:
            data = AmbientLightData(color, intensity)
        renderer = scene.renderer
        self._buffer = StagedBuffer(renderer.max_frames_in_flight, [data])
        renderer.register_sync_object(self._buffer)

    @property
    def data(self) -> AmbientLightData:
        """The most recently set light parameters."""
        return self._buffer.staging[0]

    def set_light(self, color=(0.3, 0.3, 0.3), intensity: float = 1.0) -> None:
        self._buffer.upload([AmbientLightData(color, intensity)])

    def lighting_pipeline(self) -> LightingPipeline:
        return ambient_light_pipeline(self.scene.renderer)

    def lighting(self, frame_index: int) -> AmbientLightData:
        """The parameters the full-screen draw uses for one frame."""
        return self._buffer.frame(frame_index)[0]

    def close(self) -> None:
        if not self.closed:
            self.scene.renderer.unregister_sync_object(self._buffer)
        super().close()