import numpy as np
import pytest

from gamex.ambient_light import AmbientLight
from gamex.mesh import Mesh
from gamex.model import StaticModel
from gamex.scene import EnvmapData, Scene, SceneSettings


class FakeRenderer:
    def __init__(self, frames=2):
        self.max_frames_in_flight = frames
        self.current_frame = 0
        self.sync_objects = set()
        self.white_image = "white-image"
        self.linear_sampler = "linear-sampler"
        self.release_callbacks = []

    def register_sync_object(self, obj):
        self.sync_objects.add(obj)

    def unregister_sync_object(self, obj):
        self.sync_objects.discard(obj)

    def add_release_callback(self, callback):
        self.release_callbacks.append(callback)

    def sync_all(self, frame_index):
        for obj in list(self.sync_objects):
            obj.sync_data(frame_index)


def _model(renderer):
    mesh = Mesh.from_positions([(0, 0, 0), (1, 0, 0), (0, 1, 0)], [0, 1, 2])
    return StaticModel(renderer, mesh)


def test_settings_defaults():
    settings = SceneSettings()
    assert settings.max_objects == 1000
    assert settings.max_ambient_light == 100
    assert settings.max_cameras == 100


def test_scene_registers_and_defaults():
    renderer = FakeRenderer()
    scene = Scene(renderer)
    assert scene in renderer.sync_objects
    assert scene.settings == SceneSettings()
    assert scene.envmap_data == EnvmapData(0.0, 1.0)
    assert scene.envmap_binding(0) == ("white-image", "linear-sampler")
    assert scene.envmap_binding(1) == ("white-image", "linear-sampler")


def test_create_and_close_camera():
    renderer = FakeRenderer()
    scene = Scene(renderer)
    camera = scene.create_camera((0, 0, 5), (0, 0, 0))
    assert scene.cameras == (camera,)
    assert camera.scene is scene
    camera.close()
    assert scene.cameras == ()


def test_create_and_close_entity():
    renderer = FakeRenderer()
    scene = Scene(renderer)
    model = _model(renderer)
    entity = scene.create_entity(model)
    assert scene.entities == (entity,)
    assert entity.model is model
    entity.close()
    assert scene.entities == ()
    assert entity not in renderer.sync_objects


def test_create_and_close_light():
    renderer = FakeRenderer()
    scene = Scene(renderer)
    light = scene.create_light(AmbientLight, (0.5, 0.5, 0.5))
    assert scene.lights == (light,)
    light.close()
    assert scene.lights == ()


def test_objects_keep_creation_order():
    renderer = FakeRenderer()
    scene = Scene(renderer)
    model = _model(renderer)
    first = scene.create_entity(model)
    second = scene.create_entity(model)
    assert scene.entities == (first, second)


def test_destroy_unknown_is_ignored():
    scene = Scene(FakeRenderer())
    scene.destroy_camera(object())
    scene.destroy_entity(object())
    scene.destroy_light(object())
    assert scene.cameras == () and scene.entities == () and scene.lights == ()


def test_envmap_image_reaches_frame_only_after_sync():
    renderer = FakeRenderer(frames=2)
    scene = Scene(renderer)
    scene.set_envmap_image("sky")
    assert scene.envmap_image == "sky"
    assert scene.envmap_binding(0) == ("white-image", "linear-sampler")
    assert scene.sync_data(0) is False
    assert scene.envmap_binding(0) == ("sky", "linear-sampler")
    assert scene.envmap_binding(1) == ("white-image", "linear-sampler")
    scene.sync_data(1)
    assert scene.envmap_binding(1) == ("sky", "linear-sampler")


def test_envmap_settings_staged_until_sync():
    renderer = FakeRenderer(frames=2)
    scene = Scene(renderer)
    scene.set_envmap_settings(0.25, 2.0)
    assert scene.envmap_data == EnvmapData(0.25, 2.0)
    assert scene.frame_envmap_data(0) == EnvmapData(0.0, 1.0)
    renderer.sync_all(0)
    assert scene.frame_envmap_data(0) == EnvmapData(0.25, 2.0)
    assert scene.frame_envmap_data(1) == EnvmapData(0.0, 1.0)


def test_bad_frame_index_raises():
    scene = Scene(FakeRenderer(frames=2))
    with pytest.raises(IndexError):
        scene.frame_envmap_data(2)


def test_close_unregisters():
    renderer = FakeRenderer()
    with Scene(renderer) as scene:
        assert scene in renderer.sync_objects
    assert renderer.sync_objects == set()


def test_camera_data_in_scene():
    renderer = FakeRenderer()
    scene = Scene(renderer)
    camera = scene.create_camera()
    assert np.array_equal(camera.data.view_matrix, np.eye(4))