import pytest

from gamex.ambient_light import AmbientLight
from gamex.directional_light import (
    DirectionalLight,
    DirectionalLightData,
    directional_light_pipeline,
)
from gamex.renderer import Renderer


@pytest.fixture
def renderer():
    with Renderer(2) as r:
        yield r


@pytest.fixture
def scene(renderer):
    return renderer.create_scene()


def test_direction_is_normalized(scene):
    light = scene.create_light(DirectionalLight, (1.0, 1.0, 1.0), (0.0, -2.0, 0.0))
    assert light.data.direction == pytest.approx((0.0, -1.0, 0.0))
    assert light.data.color == (1.0, 1.0, 1.0)
    assert light.data.intensity == 1.0


def test_default_direction_points_down(scene):
    light = scene.create_light(DirectionalLight, (0.5, 0.5, 0.5))
    assert light.data.direction == pytest.approx((0.0, -1.0, 0.0))


def test_data_is_used_as_given(scene):
    data = DirectionalLightData((1.0, 0.0, 0.0), 2.0, (0.0, 0.0, 3.0))
    light = scene.create_light(DirectionalLight, data)
    assert light.data == data


def test_no_color_gives_zero_data(scene):
    light = scene.create_light(DirectionalLight)
    assert light.data == DirectionalLightData()
    assert light.data.intensity == 0.0


def test_zero_direction_rejected(scene):
    with pytest.raises(ValueError):
        DirectionalLight(scene, (1.0, 1.0, 1.0), (0.0, 0.0, 0.0))


def test_set_light_defaults(scene):
    light = scene.create_light(DirectionalLight, (1.0, 1.0, 1.0))
    light.set_light()
    assert light.data.color == pytest.approx((0.3, 0.3, 0.3))
    assert light.data.direction == pytest.approx((0.0, 1.0, 0.0))
    assert light.data.intensity == 1.0


def test_frames_see_update_only_after_sync(renderer, scene):
    light = scene.create_light(DirectionalLight, (1.0, 0.0, 0.0))
    old = light.data
    light.set_light((0.0, 1.0, 0.0), (3.0, 0.0, 0.0), 2.0)
    new = light.data
    assert light.lighting(0) == old
    renderer.sync_objects()
    assert light.lighting(0) == new
    assert light.lighting(1) == old
    renderer.next_frame()
    renderer.sync_objects()
    assert light.lighting(1) == new
    assert new.direction == pytest.approx((1.0, 0.0, 0.0))


def test_pipeline_shared_per_renderer(scene, renderer):
    a = scene.create_light(DirectionalLight, (1.0, 1.0, 1.0))
    b = scene.create_light(DirectionalLight, (0.0, 1.0, 1.0))
    ambient = scene.create_light(AmbientLight, (1.0, 1.0, 1.0))
    assert a.lighting_pipeline() is b.lighting_pipeline()
    assert a.lighting_pipeline() is directional_light_pipeline(renderer)
    assert a.lighting_pipeline() is not ambient.lighting_pipeline()
    assert a.lighting_pipeline().fragment_shader == "directional_light.frag"
    assert a.lighting_pipeline().vertex_shader == "fullscreen_lighting_pass.vert"


def test_pipeline_rebuilt_after_renderer_close():
    renderer = Renderer(1)
    first = directional_light_pipeline(renderer)
    renderer.close()
    second = directional_light_pipeline(renderer)
    assert first is not second
    renderer.close()


def test_close_leaves_scene_and_syncs(renderer, scene):
    light = scene.create_light(DirectionalLight, (1.0, 1.0, 1.0))
    count = len(renderer.registered_sync_objects)
    light.close()
    assert light not in scene.lights
    assert len(renderer.registered_sync_objects) == count - 1
    light.close()
    assert len(renderer.registered_sync_objects) == count - 1