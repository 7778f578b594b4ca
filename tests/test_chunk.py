import pytest

from voxelcraft.chunk import (
    AIR,
    TW,
    Chunk,
    FaceDirection,
    create_cube_face,
    face_offset,
)


class _FakeNoise:
    def __init__(self, value):
        self.value = value
        self.calls = []

    def noise(self, x, y, z):
        self.calls.append((x, y, z))
        return self.value


class _FakeManager:
    def __init__(self, value=0.0, air=True, block=7):
        self.perlin = _FakeNoise(value)
        self.air = air
        self.block = block
        self.air_calls = []
        self.block_calls = []

    def is_air(self, x, y, z):
        self.air_calls.append((x, y, z))
        return self.air

    def block_at(self, pos):
        self.block_calls.append(tuple(pos))
        return self.block


def test_face_offsets():
    assert face_offset(FaceDirection.FRONT) == (0, 0, 1)
    assert face_offset(FaceDirection.BACK) == (0, 0, -1)
    assert face_offset(FaceDirection.LEFT) == (-1, 0, 0)
    assert face_offset(FaceDirection.RIGHT) == (1, 0, 0)
    assert face_offset(FaceDirection.TOP) == (0, 1, 0)
    assert face_offset(FaceDirection.BOTTOM) == (0, -1, 0)


@pytest.mark.parametrize("face", list(FaceDirection))
def test_cube_face_geometry(face):
    mesh = create_cube_face(face, (2, 3, 4), 0)
    assert mesh.index_array == [0, 1, 2, 2, 3, 0]
    assert len(mesh.vertex_array) == 4
    normal = tuple(float(c) for c in face_offset(face))
    for vertex in mesh.vertex_array:
        assert vertex.normal == normal
        for p, base in zip(vertex.position, (2, 3, 4)):
            assert base <= p <= base + 1
        # all corners lie on the plane of the face
        center = tuple(b + 0.5 for b in (2, 3, 4))
        d = sum((p - c) * n for p, c, n in zip(vertex.position, center, normal))
        assert d == pytest.approx(0.5)


def test_cube_face_uv_tile_zero():
    mesh = create_cube_face(FaceDirection.TOP, (0, 0, 0), 0)
    assert [v.texcoord for v in mesh.vertex_array] == [(0, 0), (TW, 0), (TW, TW), (0, TW)]


def test_cube_face_uv_uses_row_and_column():
    mesh = create_cube_face(FaceDirection.TOP, (0, 0, 0), 17)
    u, v = mesh.vertex_array[0].texcoord
    assert u == pytest.approx(TW)
    assert v == pytest.approx(TW)


@pytest.mark.parametrize(
    "face", [FaceDirection.FRONT, FaceDirection.BACK, FaceDirection.LEFT, FaceDirection.RIGHT]
)
def test_grass_sides_use_side_tile(face):
    assert create_cube_face(face, (1, 1, 1), 240) == create_cube_face(face, (1, 1, 1), 243)


def test_grass_bottom_uses_dirt_tile():
    assert create_cube_face(FaceDirection.BOTTOM, (0, 0, 0), 240) == create_cube_face(
        FaceDirection.BOTTOM, (0, 0, 0), 242
    )


def test_flat_chunk_without_manager():
    chunk = Chunk(3, 4)
    assert chunk.block_at(0, 0, 0) == 240
    assert chunk.block_at(2, 0, 2) == 240
    assert chunk.block_at(1, 1, 1) == AIR
    assert chunk.is_air(1, 3, 1)
    assert not chunk.is_air(1, 0, 1)


def test_outside_without_manager_is_air():
    chunk = Chunk(2, 2)
    assert chunk.is_air(-1, 0, 0)
    assert chunk.block_at(5, 0, 0) == AIR


def test_in_chunk_bounds():
    chunk = Chunk(2, 3)
    assert chunk.in_chunk(0, 0, 0)
    assert chunk.in_chunk(1, 2, 1)
    assert not chunk.in_chunk(2, 0, 0)
    assert not chunk.in_chunk(0, 3, 0)
    assert not chunk.in_chunk(0, 0, -1)


def test_index_is_unique_and_dense():
    chunk = Chunk(3, 2)
    offsets = {
        chunk.index(x, y, z) for x in range(3) for y in range(2) for z in range(3)
    }
    assert offsets == set(range(3 * 3 * 2))


def test_set_block_reports_change():
    chunk = Chunk(2, 2)
    chunk.generate_meshes()
    assert not chunk.needs_render
    assert chunk.set_block(1, 1, 1, 5) is True
    assert chunk.needs_render
    assert chunk.block_at(1, 1, 1) == 5
    assert chunk.set_block(1, 1, 1, 5) is False
    assert chunk.set_block(2, 0, 0, 5) is False


def test_set_block_rejects_out_of_range_value():
    chunk = Chunk(2, 2)
    with pytest.raises(ValueError):
        chunk.set_block(0, 0, 0, 256)


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        Chunk(0, 4)


def test_single_block_has_all_faces():
    chunk = Chunk(1, 1)
    chunk.generate_meshes()
    assert len(chunk.vertices) == 4 * len(FaceDirection)
    assert len(chunk.indices) == 6 * len(FaceDirection)
    assert chunk.indices[:6] == [0, 1, 2, 0, 2, 3]
    normals = {v.normal for v in chunk.vertices}
    assert normals == {tuple(float(c) for c in face_offset(f)) for f in FaceDirection}


def test_mesh_invariants_and_dirty_flag():
    chunk = Chunk(2, 3)
    chunk.set_block(0, 1, 0, 17)
    chunk.generate_meshes()
    assert not chunk.needs_render
    assert len(chunk.indices) * 4 == len(chunk.vertices) * 6
    assert max(chunk.indices) == len(chunk.vertices) - 1
    for vertex in chunk.vertices:
        x, y, z = vertex.position
        assert 0 <= x <= 2 and 0 <= y <= 3 and 0 <= z <= 2
    mesh = chunk.mesh
    assert mesh.vertex_array == chunk.vertices
    assert mesh.index_array == chunk.indices


def test_generate_meshes_skips_when_clean():
    chunk = Chunk(1, 1)
    chunk.generate_meshes()
    before = list(chunk.vertices)
    chunk.vertices.clear()
    chunk.generate_meshes()
    assert chunk.vertices == []
    chunk.mark_dirty()
    chunk.generate_meshes()
    assert chunk.vertices == before


def test_removing_only_block_empties_mesh():
    chunk = Chunk(1, 1)
    chunk.generate_meshes()
    assert chunk.set_block(0, 0, 0, AIR)
    chunk.generate_meshes()
    assert chunk.vertices == []
    assert chunk.indices == []


def test_str_layout():
    chunk = Chunk(1, 2)
    assert str(chunk) == "- - - - - -\n240 \n- - - - - -\n100 \n"


def test_terrain_layers_from_noise():
    manager = _FakeManager(value=0.0)
    chunk = Chunk(2, 40, manager, 0, 0)
    column = {y: chunk.block_at(0, y, 0) for y in range(40)}
    assert column[0] == 225
    assert column[1] == 241
    assert column[22] == 241
    assert column[23] == 242
    assert column[24] == 242
    assert column[25] == 240
    assert column[26] == 179
    assert column[35] == 179
    assert column[36] == AIR
    assert column[39] == AIR


def test_terrain_samples_world_coordinates():
    manager = _FakeManager(value=0.0)
    Chunk(2, 4, manager, 8, 16)
    assert len(manager.perlin.calls) == 4
    assert (8 / 40.0, 16 / 40.0, 0) in manager.perlin.calls


def test_outside_queries_go_to_manager():
    manager = _FakeManager(air=False, block=9)
    chunk = Chunk(2, 4, manager, 10, 20)
    assert chunk.is_air(-1, 3, 0) is False
    assert manager.air_calls == [(10 - 1, 3, 20)]
    assert chunk.block_at(0, 1, 2) == 9
    assert manager.block_calls == [(10, 1, 22)]


def test_enclosed_column_has_no_faces():
    manager = _FakeManager(value=0.0, air=False)
    chunk = Chunk(1, 30, manager)
    chunk.generate_meshes()
    assert chunk.vertices == []


def test_open_column_shows_every_direction():
    manager = _FakeManager(value=0.0, air=True)
    chunk = Chunk(1, 30, manager)
    chunk.generate_meshes()
    normals = {v.normal for v in chunk.vertices}
    assert normals == {tuple(float(c) for c in face_offset(f)) for f in FaceDirection}