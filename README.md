# nouframe

Bookkeeping for real-time 3D programs in plain Python and numpy:
transform hierarchies, entities with components, cameras, keyboard and
mouse state, glTF mesh loading, sprite sheet timing and batched debug
geometry. Drawing is left to whatever renderer you connect.

## Modules

- `nouframe.transform`: `Transform`, a node with `pos`, `scale` and a
  `rotation` quaternion `(w, x, y, z)`. Set `parent` to attach it to
  another transform (`children` lists attached nodes, `detach()` removes
  the parent). `do_fk()` updates the global matrix of a node and all its
  descendants; `recompute_global()` recomputes it up the parent chain and
  returns it; `global_matrix` holds the last result and `normal_matrix()`
  gives the 3x3 matrix for normals. Helpers: `translation_matrix`,
  `scale_matrix`, `quaternion_matrix`.
- `nouframe.entity`: `Registry` (ids and components keyed by type:
  `create`, `destroy`, `emplace`, `get`, `remove`, `valid`) and `Entity`,
  which owns a `Transform` and offers `add(component_type, *args,
  **kwargs)`, `get`, `remove` and `destroy`. An entity is also a context
  manager that destroys itself on exit. Components with a `close()`
  method have it called when they are removed or their entity is
  destroyed.
- `nouframe.camera`: `Camera`, a component whose `view`, `projection`
  and `view_projection` come from its owner's transform; `ortho()` and
  `perspective()` set the projection. The first camera created becomes
  `Camera.current`, and `close()` clears that again. Also
  `ortho_matrix` and `perspective_matrix`.
- `nouframe.fpcamera`: `FirstPersonCamera`, with `position`, `forward`,
  `up`, `right` and `view_matrix`; `process_mouse_motion()` turns it
  (moves of 200 pixels or more are ignored) and `update()` rebuilds the
  view matrix.
- `nouframe.keyboard`: `Keyboard`, fed with `handle_key(key, action)`
  (`KeyAction` values); `frame_start()` clears the per-frame flags and
  `is_held`, `was_pressed`, `was_released` query a key.
- `nouframe.devices`: `InputState` for keys, mouse buttons, cursor
  position and scroll wheel, reporting `ButtonState` values against the
  state at the last `poll()`. A process-wide instance is managed by
  `init()`, `instance()` and `uninitialize()`; using it before `init()`
  raises `InputNotInitializedError`.
- `nouframe.mesh`: `Mesh` with `set_verts`, `set_normals`, `set_uvs` and
  `buffer(attrib)`, returning a `VertexBuffer` per `Attrib` (or `None`
  when that attribute has no data).
- `nouframe.gltf`: `load_mesh`, `parse_gltf`, `parse_gltf_bytes`,
  `extract_geometry`, `find_accessor` and `build_getter` for `.gltf`
  and `.glb` files. The first mesh is read as a triangle list from
  16-bit indices, float positions, normals and `TEXCOORD_0`; problems
  raise `GltfError`, missing normals or UVs become warnings on the
  returned `Geometry`.
- `nouframe.spritesheet`: `SpriteSheetAnimation`, which `slice()`s a
  sheet of given pixel size into frames, steps through them with
  `update(delta_time)` (looping or stopping at the last frame), and gives
  `current_coordinates` and `quad_uvs()`.
- `nouframe.batching`: `Context` and `Batch`, collecting lines,
  triangles, quads and points and handing full or flushed batches to a
  sink callable `sink(mode, vertices, view_projection)`. Helpers:
  `set_camera_mode_2d`, `set_camera_mode_3d`, `draw_grid` (with
  `AlignMode`), `draw_line`, `draw_vector`, `draw_point`.
- `nouframe.system`: `memory_usage_bytes`, `peak_memory_usage_bytes`,
  `page_usage_bytes` and `CpuMonitor().usage()`.
- `nouframe.logsetup`: `LoggerSettings`, `init_logging`, `get_logger`,
  `shutdown_logging` and `dump_stack_trace`.
- `nouframe.greeting`: `say_hi()`, which prints a greeting line and
  returns it.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import numpy as np

from nouframe.camera import Camera
from nouframe.entity import Entity, Registry
from nouframe.gltf import load_mesh
from nouframe.mesh import Attrib, Mesh

registry = Registry()

camera_entity = Entity(registry)
camera_entity.transform.pos = np.array([0.0, 0.0, 5.0])
camera = camera_entity.add(Camera, camera_entity)
camera.perspective(60.0, 16 / 9, 0.1, 100.0)

model = Entity(registry)
model.transform.parent = camera_entity.transform

mesh = Mesh()
geometry = load_mesh("model.glb", mesh, True)
print(len(geometry.verts), mesh.buffer(Attrib.POSITION).length)

camera_entity.transform.do_fk()
clip = camera.projection @ camera.view
print(np.allclose(clip, camera.view_projection))
```

Batched debug drawing:

```python
from nouframe.batching import AlignMode, Context, draw_grid, set_camera_mode_3d

def sink(mode, vertices, view_projection):
    print(mode.name, len(vertices))

context = Context(sink)
set_camera_mode_3d(context, 1280, 720, 60.0)
draw_grid(context, 1.0, AlignMode.Y_UP)
context.flush()
```

## What it does not do

The package opens no window and draws nothing itself: there is no GPU
buffer upload, shader compilation, texture or image loading, text
rendering or on-screen GUI. Input state has to be fed in by your own
event handling, and finished vertex batches go to the sink you supply.
There is no command-line program.