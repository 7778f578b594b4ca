# voxelcraft

voxelcraft is the core of a block-building voxel world. It is written in pure
Python and has no runtime dependencies. It holds the world and builds the data
that a renderer needs: block storage, terrain, face meshes, block picking and
camera matrices.

## Modules

### `voxelcraft.noise`

`PerlinNoise(seed=None)` gives improved Perlin noise.

- With no seed it uses the reference permutation table.
- With a seed it uses a deterministic shuffle of 0..255.
- `noise(x, y, z)` returns a value in [0, 1].
- `permutation` gives the 256-entry table in use.

### `voxelcraft.mesh`

- `Vertex` is a frozen dataclass with `position`, `normal` and `texcoord`.
- `MeshObject` holds `vertex_array` and `index_array`.
- `ImageRGBA` is an RGBA texel grid:
  - `allocate(width, height)` resizes the grid.
  - `assign(texels, width, height)` replaces its contents.
  - `image[x, y]` reads a texel and `image[x, y] = texel` writes one.
  - `flip_vertical()` turns the rows upside down.
- `number_of_mip_levels(image)` counts the mipmap levels of an image.

### `voxelcraft.chunk`

`Chunk(width, height, manager=None, start_x=0, start_z=0)` is a
width × height × width column of block ids, one byte each.

- Without a manager the chunk is a flat grass floor at y = 0.
- With a manager the chunk generates terrain from the manager's `perlin`
  noise. Lookups past the chunk's edges go to the manager.

Block ids are the atlas tile numbers: `AIR` (100), `WATER` (179),
`BEDROCK` (225), `GRASS` (240), `STONE` (241), `DIRT` (242) and
`GRASS_SIDE` (243).

Methods:

- `set_block(x, y, z, value)` returns `True` only when the block changed.
- `block_at(x, y, z)`, `is_air(x, y, z)`, `in_chunk(x, y, z)` and
  `index(x, y, z)` look up blocks and positions.
- `generate_meshes()` rebuilds the chunk's quads when the chunk is dirty. It
  keeps only the faces that touch air. The result is in `vertices`,
  `indices` and `mesh`.
- `mark_dirty()` and `needs_render` control when the mesh is rebuilt.
- `str(chunk)` dumps the block ids layer by layer.

Helpers:

- `create_cube_face(face, relative_point, texture_coord)` builds one textured
  quad. Grass uses different tiles for its top, sides and bottom.
- `face_offset(face)` gives the neighbour offset across a face.
- `FaceDirection` lists the six faces.

### `voxelcraft.world`

`ChunkManager(chunk_width, chunk_height, seed)` is an unbounded world made of
chunks, which are created when first needed.

- `chunk_xz` and `local_xz` split a world coordinate into a chunk coordinate
  and a coordinate within that chunk. Both use floor division, so negative
  coordinates work.
- `is_air` and `block_at` answer for any world position. Unloaded space and
  space above or below the world's height count as air.
- `set_block(x, y, z, value)` creates the chunk if needed and returns `True`
  when the block changed. It marks existing neighbouring chunks dirty when
  the edit is on a shared border.
- `get_or_create_chunk`, `exists_chunk` and the read-only `chunks` mapping
  give access to the chunks.
- `rebuild_meshes()` regenerates the meshes of dirty chunks and stores them in
  `drawing_data`, keyed by chunk coordinates.
- `calculate_ray_trace(eye, direction)` walks the voxel grid for up to 25
  units. It sets `highlight_position` to the first solid block and
  `place_position` to the block entered just before it. On a miss the
  highlight is `(-2, -2, -2)`.
- `selection()` returns the block id under the highlight.
- `set_block_at_place(value)` places `value` at the place position. With
  `AIR` it removes the highlighted block instead.
- `containing_block(pos)` floors a point to block coordinates.

### `voxelcraft.camera`

`Camera` keeps `eye`, `at` and `world_up` together with cached
`view_matrix`, `proj_matrix` and `view_proj`.

- `set_view(eye, at, world_up)` places the camera.
- `set_proj(angle, aspect, z_near, z_far)` sets the projection.
- The properties `angle`, `aspect`, `z_near` and `z_far` can also be set one
  at a time.

Helpers:

- `look_at(eye, at, up)` builds a right-handed view matrix.
- `perspective(fovy, aspect, z_near, z_far)` builds a perspective matrix.
- `matmul(a, b)` multiplies two row-major matrices given as tuples.

### `voxelcraft.controls`

`CameraManipulator` flies a `Camera` from input that you feed to it.

- `set_camera(camera)` attaches a camera.
- `key_down(key, repeat)` and `key_up(key)` take a `Key`: W/S move forward
  and back, A/D move left and right, E/Q move up and down. Holding either
  shift key divides `speed` by 4.
- `mouse_move(xrel, yrel, left, right)` turns the view when `left` is true
  and zooms when `right` is true.
- `mouse_wheel(y)` zooms.
- `update(delta_time)` moves the camera.

### `voxelcraft.triangulate`

`triangulate_polygon(polygon)` triangulates a counter-clockwise 2D polygon. It
cuts off the smallest-angle ear each time and then flips edges to meet the
Delaunay condition. It returns a flat list of vertex indices.

### `voxelcraft.objparser`

`parse(path)` and `parse_text(text)` read Wavefront OBJ data into a
`MeshObject` of `Vertex` values.

- Only `v`, `vt`, `vn` and `f` lines are used. Comments, materials, objects
  and groups are ignored.
- Quads and larger polygons are split into triangles.
- Faces without normals get a flat normal for each triangle.
- Identical position/texcoord/normal combinations share one vertex.
- `parse` raises `FileNotFoundError` for a missing file.
- Both raise `ValueError` for a face with fewer than three vertices, or for a
  face that refers to a missing vertex, normal or texture coordinate.

## Example

```python
from voxelcraft.world import ChunkManager

world = ChunkManager(16, 128, 111111)
world.set_block(1, 0, 1, 241)
world.rebuild_meshes()

world.calculate_ray_trace((1.0, 98.0, 1.0), (0.57, -0.57, 0.57))
print(world.highlight_position, world.selection())
```

## What it does not do

- There is no window, no drawing and no GPU upload. The package produces
  meshes and matrices, and drawing them is up to you.
- It does not decode image files and does not manage textures.
  `ImageRGBA` only holds texels that you supply.
- It reads no input devices. Key and mouse events must be passed to
  `CameraManipulator` by your own event loop.
- It does not save worlds. Chunks live in memory only.
- There is no command-line program.

## Install

```
pip install .
```

## Tests

```
pip install .[test]
pytest
```