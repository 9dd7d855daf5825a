# gamex

Building blocks for the scene side of a small deferred 3D renderer: vertices
and meshes, 8-bit and HDR images, camera matrices, scenes that hold cameras,
entities and lights, and a renderer object that keeps per-frame data in step
across the frames in flight.

## Installing

    pip install .

To run the tests as well:

    pip install ".[test]"
    pytest

## A short tour

```python
import numpy as np

from gamex.renderer import Renderer
from gamex.mesh import Mesh
from gamex.ambient_light import AmbientLight
from gamex.directional_light import DirectionalLight

with Renderer(max_frames_in_flight=2) as renderer:
    scene = renderer.create_scene()

    camera = scene.create_camera(eye=(0.0, 0.0, 5.0), center=(0.0, 0.0, 0.0))

    triangle = Mesh.from_positions(
        [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)],
        [0, 1, 2],
    )
    model = renderer.create_static_model(triangle)
    entity = scene.create_entity(model)
    entity.set_affine_matrix(np.eye(4))

    ambient = scene.create_light(AmbientLight, (0.3, 0.3, 0.3), 1.0)
    sun = scene.create_light(DirectionalLight, (1.0, 1.0, 1.0), (0.0, -1.0, 0.0))

    renderer.sync_objects()          # bring frame 0 up to date
    print(sun.lighting(0).direction)  # (0.0, -1.0, 0.0)
    renderer.next_frame()            # now on frame 1
```

## What is in the package

- `gamex.vertex` — `Vertex` (position, color, tex_coord, normal, tangent).
  Vertices order by `sort_key()`: position, normal, tex_coord, tangent, then
  color. `Vertex.binding_description()` and `Vertex.attribute_descriptions()`
  give the vertex-input layout as `VertexInputBinding` and
  `VertexInputAttribute` records.
- `gamex.mesh` — `Mesh`, a list of vertices and unsigned 32-bit indices;
  `Mesh.from_positions` builds one whose vertices share every attribute but
  position (color defaults to white).
- `gamex.image` — `Image` (RGBA, 0..255 per component) and `ImageHDR`
  (RGBA floats), with `Pixel` and `PixelHDR`.
  - `Image.filled`, `Image.from_bytes` (packed RGBA bytes),
    `Image.from_hdr` (clamps to [0, 1] and scales to 0..255),
    `Image.load` and `Image.store`. `store` picks the format from the file
    extension: `png`, `jpg`/`jpeg`, `bmp` or `tga`.
  - `ImageHDR.filled`, `ImageHDR.from_floats`, `ImageHDR.load` and
    `ImageHDR.store`. `store` writes only `.hdr` (Radiance RGBE) files and
    does not keep alpha.
  - `load` finds the file through an `AssetProbe`. Radiance files are read
    directly; other formats are read through Pillow. Loading an 8-bit file
    as HDR, or an HDR file as 8-bit, converts with a gamma of 2.2.
  - Failures raise `ImageError`.
- `gamex.asset_probe` — `AssetProbe` tries each search prefix in turn
  (`""`, `"assets/"`, `"../assets/"`, then the given directory or the
  `GAMEX_ASSETS_DIR` environment variable) and returns the first path that
  exists, or `None`. `add_search_path` appends a prefix and
  `AssetProbe.public_instance()` returns a shared probe. `file_exists`
  checks a path.
- `gamex.transform` — `rotate(axis, radians)`, `rotate_vector(rotation)`
  (axis times angle; near-zero gives the identity), `look_at` and
  `perspective_zo` (depth mapped to [0, 1]), all as NumPy arrays.
- `gamex.metronome` — `Metronome(duration)`, with the duration in seconds or
  as a `timedelta` (1/64 s by default); `tick()` sleeps until one period
  after the previous tick unless already late.
- `gamex.object_manager` — `ObjectManager` and the abstract `ManagedObject`:
  objects declare dependencies with `depend`/`undepend`, and
  `update_subordinates()` calls each `update()` after those of its
  dependencies. A dependency that would close a cycle raises `CycleError`;
  other bad requests raise `ObjectManagerError`.
- `gamex.model` — `StagedBuffer` keeps staged contents plus one copy per
  frame in flight, copied over by `sync(frame_index)`. `StaticModel` holds
  fixed geometry; `AnimatedModel` follows a mesh whose vertices you edit,
  then stage with `sync_mesh_data()`.
- `gamex.camera` — `Camera` and `CameraData` (view and projection matrices;
  `fov_y` in degrees).
- `gamex.entity` — `Entity`, a model instance with an affine matrix and an
  albedo image and sampler, rebound per frame when they change.
- `gamex.light` — the abstract `Light` base class.
- `gamex.scene` — `Scene`, `SceneSettings` and `EnvmapData`: creates and
  tracks cameras, entities and lights, and holds the environment map image
  and its offset and exposure.
- `gamex.ambient_light` and `gamex.directional_light` — `AmbientLight` and
  `DirectionalLight`, their data records, and `ambient_light_pipeline` /
  `directional_light_pipeline`, which describe each renderer's shared
  `LightingPipeline`. A directional light's direction is normalized.
- `gamex.renderer` — `Renderer` with its default samplers (`linear_sampler`,
  `nearest_sampler`, `anisotropic_sampler`) and 1×1 images (`white_image`,
  `black_image`, `normal_map_image`); factories `create_scene`,
  `create_static_model`, `create_animated_model` and `create_image`
  (from an `Image`, an `ImageHDR` or a file path, giving a `GpuImage`);
  `register_sync_object`, `sync_objects()` for the current frame and
  `next_frame()`.

Objects that register with the renderer or a scene have a `close()` method
that undoes the registration and may be called more than once; most are also
context managers. The renderer runs its release callbacks, newest first,
when it closes.

## What the package does not do

It keeps the data a renderer needs and keeps it consistent between frames,
but draws nothing: there is no GPU device, window, shader compilation,
render pass or frame output. Meshes are built from vertices or positions
only; there is no loader for model files. There is no command-line tool.