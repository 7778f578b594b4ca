import math

import pytest

from voxelcraft.objparser import parse, parse_text

SQUARE = """\
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
f 1 2 3 4
"""


def _triangles(mesh):
    idx = mesh.index_array
    return [
        tuple(mesh.vertex_array[i].position for i in idx[k:k + 3])
        for k in range(0, len(idx), 3)
    ]


def test_single_triangle_with_normal_and_texcoord():
    mesh = parse_text(
        "v 0 0 0\nv 1 0 0\nv 0 1 0\nvt 0.5 0.25\nvn 0 0 1\nf 1/1/1 2/1/1 3/1/1\n"
    )
    assert mesh.index_array == [0, 1, 2]
    assert [v.position for v in mesh.vertex_array] == [
        (0.0, 0.0, 0.0),
        (1.0, 0.0, 0.0),
        (0.0, 1.0, 0.0),
    ]
    assert all(v.texcoord == (0.5, 0.25) for v in mesh.vertex_array)
    assert all(v.normal == (0.0, 0.0, 1.0) for v in mesh.vertex_array)


def test_shared_vertices_are_deduplicated():
    text = "v 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\nvn 0 0 1\nf 1//1 2//1 3//1\nf 1//1 3//1 4//1\n"
    mesh = parse_text(text)
    assert len(mesh.vertex_array) == 4
    assert mesh.index_array == [0, 1, 2, 0, 2, 3]


def test_missing_texcoords_default_to_zero():
    mesh = parse_text("v 0 0 0\nv 1 0 0\nv 0 1 0\nvn 0 0 1\nf 1//1 2//1 3//1\n")
    assert all(v.texcoord == (0.0, 0.0) for v in mesh.vertex_array)


def test_square_quad_split_along_first_diagonal():
    mesh = parse_text(SQUARE)
    p = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]
    assert _triangles(mesh) == [(p[0], p[1], p[2]), (p[0], p[2], p[3])]


def test_computed_normals_are_per_triangle():
    mesh = parse_text(SQUARE)
    # each triangle gets its own computed normal, so no vertices are shared
    assert len(mesh.vertex_array) == 6
    assert mesh.index_array == list(range(6))
    for vertex in mesh.vertex_array:
        assert vertex.normal == pytest.approx((0.0, 0.0, 1.0))


def test_kite_quad_split_along_other_diagonal():
    text = "v 0 0 0\nv 1 -1 0\nv 4 0 0\nv 1 1 0\nvn 0 0 1\nf 1//1 2//1 3//1 4//1\n"
    mesh = parse_text(text)
    p0, p1, p2, p3 = (0.0, 0.0, 0.0), (1.0, -1.0, 0.0), (4.0, 0.0, 0.0), (1.0, 1.0, 0.0)
    assert _triangles(mesh) == [(p0, p1, p3), (p1, p2, p3)]


def test_polygon_is_triangulated_into_n_minus_two_triangles():
    points = [(0, 0, 0), (2, 0, 2), (3, 1, 3), (2, 2, 2), (0, 2, 0), (-1, 1, -1)]
    lines = [f"v {x} {y} {z}" for x, y, z in points]
    lines.append("vn 0 0 1")
    lines.append("f " + " ".join(f"{i}//1" for i in range(1, 7)))
    mesh = parse_text("\n".join(lines) + "\n")

    assert len(mesh.index_array) == 3 * (len(points) - 2)
    assert len(mesh.vertex_array) == len(points)
    assert {v.position for v in mesh.vertex_array} == {
        tuple(float(c) for c in p) for p in points
    }
    for k in range(0, len(mesh.index_array), 3):
        assert len(set(mesh.index_array[k:k + 3])) == 3


def test_homogeneous_coordinate_divides_position():
    mesh = parse_text("v 2 4 6 2\nv 1 0 0\nv 0 1 0\nvn 0 0 1\nf 1//1 2//1 3//1\n")
    assert mesh.vertex_array[0].position == (1.0, 2.0, 3.0)


def test_comments_and_ignored_statements():
    text = (
        "# a comment\nmtllib scene.mtl\no thing\ng group\nusemtl stone\ns off\n"
        "v 0 0 0\n  # indented comment\nv 1 0 0\nv 0 1 0\nvn 0 0 1\nf 1//1 2//1 3//1\n"
    )
    mesh = parse_text(text)
    assert mesh.index_array == [0, 1, 2]
    assert len(mesh.vertex_array) == 3


def test_crlf_line_endings():
    text = SQUARE.replace("\n", "\r\n")
    assert parse_text(text).index_array == parse_text(SQUARE).index_array


def test_empty_text_gives_empty_mesh():
    mesh = parse_text("")
    assert mesh.vertex_array == []
    assert mesh.index_array == []


def test_degenerate_triangle_gets_nan_normal():
    mesh = parse_text("v 0 0 0\nv 1 0 0\nv 2 0 0\nf 1 2 3\n")
    assert mesh.index_array == [0, 1, 2]
    assert [v.position for v in mesh.vertex_array] == [
        (0.0, 0.0, 0.0),
        (1.0, 0.0, 0.0),
        (2.0, 0.0, 0.0),
    ]
    normal = mesh.vertex_array[0].normal
    assert len(normal) == 3
    assert [math.isnan(c) for c in normal] == [True, True, True]


def test_missing_vertex_reference_raises():
    with pytest.raises(ValueError):
        parse_text("v 0 0 0\nv 1 0 0\nf 1 2 5\n")


def test_missing_normal_reference_raises():
    with pytest.raises(ValueError):
        parse_text("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1//2 2//2 3//2\n")


def test_face_with_two_vertices_raises():
    with pytest.raises(ValueError):
        parse_text("v 0 0 0\nv 1 0 0\nf 1 2\n")


def test_parse_reads_file(tmp_path):
    path = tmp_path / "square.obj"
    path.write_text(SQUARE, encoding="utf-8")
    assert parse(path).index_array == parse_text(SQUARE).index_array
    assert len(parse(str(path)).vertex_array) == 6


def test_parse_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse(tmp_path / "missing.obj")