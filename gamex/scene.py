"""Scenes: the cameras, entities, lights and environment map to render."""

from __future__ import annotations

from dataclasses import dataclass

from gamex.camera import Camera
from gamex.entity import Entity
from gamex.model import StagedBuffer


@dataclass(frozen=True)
class SceneSettings:
    """Capacity hints for a scene."""

    max_objects: int = 1000
    max_ambient_light: int = 100
    max_cameras: int = 100


@dataclass(frozen=True)
class EnvmapData:
    """Environment map parameters as seen by shaders."""

    offset: float = 0.0
    exposure: float = 1.0


class Scene:
    """Holds what is rendered together, plus the environment map."""

    def __init__(self, renderer, settings: SceneSettings | None = None) -> None:
        self.renderer = renderer
        self.settings = settings if settings is not None else SceneSettings()
        frames = renderer.max_frames_in_flight

        # Dicts used as insertion-ordered sets.
        self._cameras: dict[Camera, None] = {}
        self._entities: dict[Entity, None] = {}
        self._lights: dict[object, None] = {}

        renderer.register_sync_object(self)

        self._envmap_image = renderer.white_image
        self._envmap_sampler = renderer.linear_sampler
        self._staging_envmap_version = 0
        self._envmap_versions = [0] * frames
        self._envmap_bindings = [(self._envmap_image, self._envmap_sampler)] * frames

        self._envmap_data = StagedBuffer(frames, [EnvmapData(0.0, 1.0)])
        renderer.register_sync_object(self._envmap_data)
        self._closed = False

    @property
    def cameras(self) -> tuple[Camera, ...]:
        return tuple(self._cameras)

    @property
    def entities(self) -> tuple[Entity, ...]:
        return tuple(self._entities)

    @property
    def lights(self) -> tuple:
        return tuple(self._lights)

    def create_camera(self, *args, **kwargs) -> Camera:
        camera = Camera(self, *args, **kwargs)
        self._cameras[camera] = None
        return camera

    def create_entity(self, *args, **kwargs) -> Entity:
        entity = Entity(self, *args, **kwargs)
        self._entities[entity] = None
        return entity

    def create_light(self, light_type, *args, **kwargs):
        """Create a light of ``light_type`` in this scene."""
        light = light_type(self, *args, **kwargs)
        self._lights[light] = None
        return light

    def destroy_camera(self, camera) -> None:
        self._cameras.pop(camera, None)

    def destroy_entity(self, entity) -> None:
        self._entities.pop(entity, None)

    def destroy_light(self, light) -> None:
        self._lights.pop(light, None)

    @property
    def envmap_image(self):
        return self._envmap_image

    @property
    def envmap_data(self) -> EnvmapData:
        """The most recently set environment map parameters."""
        return self._envmap_data.staging[0]

    def frame_envmap_data(self, frame_index: int) -> EnvmapData:
        """Environment map parameters as seen by one frame in flight."""
        return self._envmap_data.frame(frame_index)[0]

    def sync_data(self, frame_index: int) -> bool:
        """Rebind the environment map for one frame if it changed.

        Always returns False: the rebinding needs no recorded commands.
        """
        if self._envmap_versions[frame_index] != self._staging_envmap_version:
            self._envmap_bindings[frame_index] = (
                self._envmap_image,
                self._envmap_sampler,
            )
            self._envmap_versions[frame_index] = self._staging_envmap_version
        return False

    def envmap_binding(self, frame_index: int) -> tuple:
        """The (image, sampler) pair bound for one frame."""
        return self._envmap_bindings[frame_index]

    def set_envmap_image(self, image) -> None:
        self._envmap_image = image
        self._staging_envmap_version += 1

    def set_envmap_settings(self, offset: float, exposure: float) -> None:
        self._envmap_data.upload([EnvmapData(float(offset), float(exposure))])

    def close(self) -> None:
        """Stop taking part in renderer syncs; safe to call more than once."""
        if not self._closed:
            self._closed = True
            self.renderer.unregister_sync_object(self)
            self.renderer.unregister_sync_object(self._envmap_data)

    def __enter__(self) -> Scene:
        return self

    def __exit__(self, *args) -> None:
        self.close()