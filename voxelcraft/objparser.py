"""Reader for Wavefront OBJ meshes producing indexed triangle meshes."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from os import PathLike
from pathlib import Path
from typing import NamedTuple

from .camera import _cross, _dot, _sub
from .mesh import MeshObject, Vec2, Vec3, Vertex
from .triangulate import triangulate_polygon

_FLOAT_RE = re.compile(
    r"-?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?|inf(?:inity)?|nan)", re.IGNORECASE
)
_UINT_RE = re.compile(r"\d+")
_DIAGONAL_THRESHOLD = 1e-15


class _FaceVertex(NamedTuple):
    v: int
    vt: int
    vn: int | None


def _parse_float(token: str, default: float = 0.0) -> float:
    match = _FLOAT_RE.match(token)
    return float(match.group()) if match else default


def _parse_uint(token: str) -> int:
    match = _UINT_RE.match(token)
    return int(match.group()) if match else 0


def _fdiv(a: float, b: float) -> float:
    if b != 0.0:
        return a / b
    if a == 0.0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _normalize(v: Sequence[float]) -> Vec3:
    length = math.sqrt(_dot(v, v))
    if length == 0.0:
        return math.nan, math.nan, math.nan
    return v[0] / length, v[1] / length, v[2] / length


def _angle_between(a: Sequence[float], b: Sequence[float]) -> float:
    denominator = math.sqrt(_dot(a, a) * _dot(b, b))
    if denominator == 0.0:
        return math.nan
    cosine = _dot(a, b) / denominator
    if not -1.0 <= cosine <= 1.0:
        return math.nan
    return math.acos(cosine)


def _parse_face_vertex(token: str) -> _FaceVertex:
    pos_end = token.find("/")
    if pos_end < 0:
        pos_end = len(token)
    v = _parse_uint(token[:pos_end]) - 1

    tex_start = pos_end + 1
    tex_end = token.find("/", tex_start)
    if tex_end < 0:
        tex_end = len(token)
    vt = _parse_uint(token[tex_start:tex_end]) if tex_end > tex_start else 0
    if vt:
        vt -= 1

    norm_start = tex_end + 1
    vn = _parse_uint(token[norm_start:]) - 1 if len(token) > norm_start else None
    return _FaceVertex(v, vt, vn)


def _plane_axes(centered: Sequence[Vec3]) -> tuple[Vec3, Vec3]:
    """Two axes spanning the best-fitting plane of centred points."""
    cxx = sum(p[0] * p[0] for p in centered)
    cxy = sum(p[0] * p[1] for p in centered)
    cyy = sum(p[1] * p[1] for p in centered)
    cyz = sum(p[1] * p[2] for p in centered)
    cxz = sum(p[0] * p[2] for p in centered)
    czz = sum(p[2] * p[2] for p in centered)

    p1 = cxy * cxy + cxz * cxz + cyz * cyz
    trace = cxx + cyy + czz
    if p1 > _DIAGONAL_THRESHOLD:
        q = trace / 3.0
        a, b, c = cxx - q, cyy - q, czz - q
        p = math.sqrt((a * a + b * b + c * c + 2.0 * p1) / 6.0)
        r = (
            a * b * c
            + 2.0 * cxy * cyz * cxz
            - a * cyz * cyz
            - b * cxz * cxz
            - c * cxy * cxy
        ) / (2.0 * p * p * p)
        phi = math.acos(min(max(r, -1.0), 1.0)) / 3.0
        eig1 = q + 2.0 * p * math.cos(phi)
        eig2 = q + 2.0 * p * math.cos(phi + 2.0 * math.pi / 3.0)
        eig3 = trace - eig1 - eig2
    else:
        # Numerically diagonal: the diagonal entries stand in for the eigenvalues.
        eig1 = max(cxx, cyy, czz)
        eig3 = min(cxx, cyy, czz)
        eig2 = trace - eig1

    ev0 = (
        cxy * cxy + cxz * cxz + (cxx - eig2) * (cxx - eig3),
        cxy * ((cxx - eig3) + (cyy - eig2)) + cxz * cyz,
        cxz * ((cxx - eig3) + (czz - eig2)) + cxy * cyz,
    )
    ev1 = (
        cxy * ((cxx - eig1) + (cyy - eig3)) + cxz * cyz,
        cyz * cyz + cxy * cxy + (cyy - eig1) * (cyy - eig3),
        cyz * ((cyy - eig3) + (czz - eig1)) + cxy * cxz,
    )
    ev2 = (
        cxz * ((cxx - eig1) + (czz - eig2)) + cxy * cyz,
        cyz * ((cyy - eig1) + (czz - eig2)) + cxy * cxz,
        cyz * cyz + cxz * cxz + (czz - eig1) * (czz - eig2),
    )

    smallest = min(eig1, eig2, eig3)
    if eig3 == smallest:
        return _normalize(ev0), _normalize(ev1)
    if eig2 == smallest:
        return _normalize(ev0), _normalize(ev2)
    return _normalize(ev1), _normalize(ev2)


class _ObjReader:
    def __init__(self) -> None:
        self.positions: list[Vec3] = []
        self.normals: list[Vec3] = []
        self.texcoords: list[Vec2] = []
        self.mesh: MeshObject[Vertex] = MeshObject()
        self._vertex_indices: dict[tuple[int, int, int | None], int] = {}

    def feed_line(self, line: str) -> None:
        stripped = line.lstrip()
        if not stripped or stripped.startswith("#"):
            return
        head = stripped[:2]
        args = stripped.split()[1:]
        if head in ("v ", "v\t"):
            self._add_position(args)
        elif head == "vn":
            self.normals.append(tuple(_parse_float(t) for t in (args + ["", "", ""])[:3]))
        elif head == "vt":
            s, t = (args + ["", ""])[:2]
            self.texcoords.append((_parse_float(s), _parse_float(t)))
        elif head in ("f ", "f\t"):
            self._add_face([_parse_face_vertex(t) for t in args])

    def _add_position(self, args: list[str]) -> None:
        x, y, z = (_parse_float(t) for t in (args + ["", "", ""])[:3])
        if len(args) > 3:
            w = _parse_float(args[3], default=1.0)
            x, y, z = _fdiv(x, w), _fdiv(y, w), _fdiv(z, w)
        self.positions.append((x, y, z))

    @staticmethod
    def _lookup(items: Sequence, index: int, what: str):
        if not 0 <= index < len(items):
            raise ValueError(f"face refers to missing {what} {index + 1}")
        return items[index]

    def _position(self, fv: _FaceVertex) -> Vec3:
        return self._lookup(self.positions, fv.v, "vertex")

    def _add_face(self, face: list[_FaceVertex]) -> None:
        if 0 < len(face) < 3:
            raise ValueError(f"face needs at least three vertices, got {len(face)}")
        needs_normals = any(fv.vn is None for fv in face)
        for fv in face:
            self._position(fv)

        if len(face) == 4:
            face = self._split_quad(face)
        elif len(face) > 4:
            face = self._split_polygon(face)

        if not self.texcoords:
            self.texcoords.append((0.0, 0.0))

        if needs_normals:
            face = self._with_computed_normals(face)

        for fv in face:
            key = (fv.v, fv.vt, fv.vn)
            index = self._vertex_indices.get(key)
            if index is None:
                index = len(self.mesh.vertex_array)
                self.mesh.vertex_array.append(
                    Vertex(
                        position=self._position(fv),
                        normal=self._lookup(self.normals, fv.vn, "normal"),
                        texcoord=self._lookup(self.texcoords, fv.vt, "texture coordinate"),
                    )
                )
                self._vertex_indices[key] = index
            self.mesh.index_array.append(index)

    def _split_quad(self, face: list[_FaceVertex]) -> list[_FaceVertex]:
        p0, p1, p2, p3 = (self._position(fv) for fv in face)
        angle_012 = _angle_between(_sub(p0, p1), _sub(p2, p1))
        angle_230 = _angle_between(_sub(p2, p3), _sub(p0, p3))
        f0, f1, f2, f3 = face
        if angle_012 + angle_230 <= math.pi:
            return [f0, f1, f2, f0, f2, f3]
        return [f0, f1, f3, f1, f2, f3]

    def _split_polygon(self, face: list[_FaceVertex]) -> list[_FaceVertex]:
        points = [self._position(fv) for fv in face]
        count = float(len(points))
        mid = tuple(sum(p[axis] for p in points) / count for axis in range(3))
        centered = [_sub(p, mid) for p in points]
        axis_a, axis_b = _plane_axes(centered)
        projected = [(_dot(c, axis_a), _dot(c, axis_b)) for c in centered]

        closed = projected + projected[:1]
        winding = sum((b[0] - a[0]) * (b[1] + a[1]) for a, b in zip(closed, closed[1:]))
        if winding > 0.0:
            projected = [(x, -y) for x, y in projected]

        return [face[i] for i in triangulate_polygon(projected)]

    def _with_computed_normals(self, face: list[_FaceVertex]) -> list[_FaceVertex]:
        result: list[_FaceVertex] = []
        for start in range(0, len(face), 3):
            triangle = face[start:start + 3]
            a, b, c = (self._position(fv) for fv in triangle)
            normal_index = len(self.normals)
            self.normals.append(_normalize(_cross(_sub(b, a), _sub(c, a))))
            result.extend(fv._replace(vn=normal_index) for fv in triangle)
        return result


def parse_text(text: str) -> MeshObject[Vertex]:
    """Build an indexed triangle mesh from OBJ text.

    Quads and larger polygons are split into triangles; faces without normals
    get a flat normal per triangle.
    """
    reader = _ObjReader()
    for line in text.split("\n"):
        reader.feed_line(line)
    return reader.mesh


def parse(path: str | PathLike[str]) -> MeshObject[Vertex]:
    """Read an OBJ file; raises FileNotFoundError if it does not exist."""
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    return parse_text(text)