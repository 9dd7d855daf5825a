import pytest

from gamex.ambient_light import (
    AmbientLight,
    AmbientLightData,
    LightingPipeline,
    ambient_light_pipeline,
)
from gamex.scene import Scene


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

    def release(self):
        while self.release_callbacks:
            self.release_callbacks.pop()()

    def sync_all(self, frame_index):
        for obj in list(self.sync_objects):
            obj.sync_data(frame_index)


def test_default_light_is_black():
    scene = Scene(FakeRenderer())
    light = scene.create_light(AmbientLight)
    assert light.data == AmbientLightData((0.0, 0.0, 0.0), 0.0)


def test_color_with_default_intensity():
    scene = Scene(FakeRenderer())
    light = scene.create_light(AmbientLight, (0.2, 0.4, 0.6))
    assert light.data.color == (0.2, 0.4, 0.6)
    assert light.data.intensity == 1.0


def test_accepts_data_object():
    scene = Scene(FakeRenderer())
    data = AmbientLightData((1, 1, 1), 2)
    light = scene.create_light(AmbientLight, data)
    assert light.data == data
    assert light.data.color == (1.0, 1.0, 1.0)


def test_bad_color_raises():
    with pytest.raises(ValueError):
        AmbientLightData((1.0, 1.0), 1.0)


def test_set_light_defaults():
    scene = Scene(FakeRenderer())
    light = scene.create_light(AmbientLight, (1.0, 0.0, 0.0), 5.0)
    light.set_light()
    assert light.data == AmbientLightData((0.3, 0.3, 0.3), 1.0)


def test_lighting_sees_frame_data_after_sync():
    renderer = FakeRenderer(frames=2)
    scene = Scene(renderer)
    light = scene.create_light(AmbientLight, (0.1, 0.1, 0.1), 1.0)
    light.set_light((0.9, 0.8, 0.7), 3.0)
    assert light.lighting(0) == AmbientLightData((0.1, 0.1, 0.1), 1.0)
    renderer.sync_all(0)
    assert light.lighting(0) == AmbientLightData((0.9, 0.8, 0.7), 3.0)
    assert light.lighting(1) == AmbientLightData((0.1, 0.1, 0.1), 1.0)


def test_pipeline_shaders_and_cache():
    renderer = FakeRenderer()
    scene = Scene(renderer)
    light = scene.create_light(AmbientLight, (1, 1, 1))
    pipeline = light.lighting_pipeline()
    assert isinstance(pipeline, LightingPipeline)
    assert pipeline.vertex_shader == "fullscreen_lighting_pass.vert"
    assert pipeline.fragment_shader == "ambient_light.frag"
    assert pipeline.subpass == 1
    assert ambient_light_pipeline(renderer) is pipeline
    assert len(renderer.release_callbacks) == 1


def test_pipelines_are_per_renderer_and_released():
    first = FakeRenderer()
    second = FakeRenderer()
    pipeline = ambient_light_pipeline(first)
    other = ambient_light_pipeline(second)
    assert (pipeline is other) is False
    first.release()
    rebuilt = ambient_light_pipeline(first)
    assert (rebuilt is pipeline) is False
    assert ambient_light_pipeline(first) is rebuilt


def test_close_unregisters_and_leaves_scene():
    renderer = FakeRenderer()
    scene = Scene(renderer)
    before = set(renderer.sync_objects)
    light = scene.create_light(AmbientLight, (1, 1, 1))
    assert len(renderer.sync_objects) == len(before) + 1
    light.close()
    light.close()
    assert renderer.sync_objects == before
    assert scene.lights == ()