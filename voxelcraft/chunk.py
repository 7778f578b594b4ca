"""Fixed-size columns of voxel blocks and their face meshes."""

from __future__ import annotations

import weakref
from collections.abc import Sequence
from enum import IntEnum
from itertools import product
from typing import Any

from .mesh import MeshObject, Vec3, Vertex

TW = 0.0625
"""Width of one tile in the 16x16 texture atlas, in texture coordinates."""

AIR = 100
WATER = 179
BEDROCK = 225
GRASS = 240
STONE = 241
DIRT = 242
GRASS_SIDE = 243

SEA_LEVEL = 36
BASE_HEIGHT = 25
HEIGHT_AMPLITUDE = 30.0
NOISE_SCALE = 40.0

_FACE_INDICES = (0, 1, 2, 2, 3, 0)
_QUAD_INDICES = (0, 1, 2, 0, 2, 3)


class FaceDirection(IntEnum):
    """The six faces of a cube."""

    FRONT = 0
    BACK = 1
    LEFT = 2
    RIGHT = 3
    TOP = 4
    BOTTOM = 5


_FACE_OFFSETS: dict[FaceDirection, tuple[int, int, int]] = {
    FaceDirection.FRONT: (0, 0, 1),
    FaceDirection.BACK: (0, 0, -1),
    FaceDirection.LEFT: (-1, 0, 0),
    FaceDirection.RIGHT: (1, 0, 0),
    FaceDirection.TOP: (0, 1, 0),
    FaceDirection.BOTTOM: (0, -1, 0),
}

_H = 0.5
_CORNERS: dict[FaceDirection, tuple[Vec3, Vec3, Vec3, Vec3]] = {
    FaceDirection.FRONT: ((-_H, -_H, _H), (_H, -_H, _H), (_H, _H, _H), (-_H, _H, _H)),
    FaceDirection.BACK: ((_H, -_H, -_H), (-_H, -_H, -_H), (-_H, _H, -_H), (_H, _H, -_H)),
    FaceDirection.LEFT: ((-_H, -_H, -_H), (-_H, -_H, _H), (-_H, _H, _H), (-_H, _H, -_H)),
    FaceDirection.RIGHT: ((_H, -_H, _H), (_H, -_H, -_H), (_H, _H, -_H), (_H, _H, _H)),
    FaceDirection.TOP: ((-_H, _H, _H), (_H, _H, _H), (_H, _H, -_H), (-_H, _H, -_H)),
    FaceDirection.BOTTOM: ((-_H, -_H, -_H), (_H, -_H, -_H), (_H, -_H, _H), (-_H, -_H, _H)),
}

_GRASS_TEXTURES: dict[FaceDirection, int] = {
    FaceDirection.FRONT: GRASS_SIDE,
    FaceDirection.BACK: GRASS_SIDE,
    FaceDirection.LEFT: GRASS_SIDE,
    FaceDirection.RIGHT: GRASS_SIDE,
    FaceDirection.TOP: GRASS,
    FaceDirection.BOTTOM: DIRT,
}


def face_offset(face: FaceDirection | int) -> tuple[int, int, int]:
    """Unit offset from a block to its neighbour across the given face."""
    return _FACE_OFFSETS[FaceDirection(face)]


def create_cube_face(
    face: FaceDirection | int, relative_point: Sequence[float], texture_coord: int
) -> MeshObject[Vertex]:
    """A textured unit quad for one face of the block at ``relative_point``.

    Grass blocks use different atlas tiles for their top, sides and bottom.
    """
    face = FaceDirection(face)
    if texture_coord == GRASS:
        texture_coord = _GRASS_TEXTURES[face]

    u = (texture_coord % 16) * TW
    v = (texture_coord // 16) * TW
    uvs = ((u, v), (u + TW, v), (u + TW, v + TW), (u, v + TW))

    center = tuple(float(c) + 0.5 for c in relative_point)
    normal = tuple(float(c) for c in _FACE_OFFSETS[face])
    vertices = [
        Vertex(
            position=tuple(c + o for c, o in zip(center, corner)),  # type: ignore[arg-type]
            normal=normal,  # type: ignore[arg-type]
            texcoord=uv,
        )
        for corner, uv in zip(_CORNERS[face], uvs)
    ]
    return MeshObject(vertex_array=vertices, index_array=list(_FACE_INDICES))


def _terrain_block(y: int, surface: int) -> int:
    if y > surface:
        return WATER if y < SEA_LEVEL else AIR
    if y > surface - 1:
        return GRASS
    if y > surface - 3:
        return DIRT
    if y == 0:
        return BEDROCK
    return STONE


class Chunk:
    """A width x height x width block of voxels.

    Without a manager the chunk is a flat grass floor; with one, terrain is
    generated from the manager's Perlin noise and lookups past the chunk's
    edges are answered by the manager.
    """

    AIR = AIR

    def __init__(
        self,
        width: int,
        height: int,
        manager: Any | None = None,
        start_x: int = 0,
        start_z: int = 0,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"chunk dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.start_x = start_x
        self.start_z = start_z
        self._manager_ref = weakref.ref(manager) if manager is not None else None
        self._blocks = bytearray([AIR]) * (width * width * height)
        self._needs_render = True
        self.vertices: list[Vertex] = []
        self.indices: list[int] = []

        if manager is None:
            for z, x in product(range(width), repeat=2):
                self._blocks[self.index(x, 0, z)] = GRASS
        else:
            self._generate_terrain(manager.perlin)

    def _generate_terrain(self, perlin: Any) -> None:
        for z, x in product(range(self.width), repeat=2):
            sample = perlin.noise(
                (self.start_x + x) / NOISE_SCALE, (self.start_z + z) / NOISE_SCALE, 0
            )
            surface = int(BASE_HEIGHT + HEIGHT_AMPLITUDE * sample)
            for y in range(self.height):
                self._blocks[self.index(x, y, z)] = _terrain_block(y, surface)

    @property
    def _manager(self) -> Any | None:
        return self._manager_ref() if self._manager_ref is not None else None

    @property
    def needs_render(self) -> bool:
        """Whether the mesh is out of date with the blocks."""
        return self._needs_render

    @property
    def mesh(self) -> MeshObject[Vertex]:
        """A copy of the current face mesh."""
        return MeshObject(vertex_array=list(self.vertices), index_array=list(self.indices))

    def mark_dirty(self) -> None:
        self._needs_render = True

    def index(self, x: int, y: int, z: int) -> int:
        """Offset of a local block position in the block storage."""
        return x + y * self.width + z * self.width * self.height

    def in_chunk(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.width

    def set_block(self, x: int, y: int, z: int, value: int) -> bool:
        """Set a block; True if the position is inside and the block changed."""
        if not 0 <= value <= 255:
            raise ValueError(f"block value must be in 0..255, got {value}")
        if not self.in_chunk(x, y, z):
            return False
        i = self.index(x, y, z)
        if self._blocks[i] == value:
            return False
        self._blocks[i] = value
        self._needs_render = True
        return True

    def is_air(self, x: int, y: int, z: int) -> bool:
        """Whether the local position holds air, asking the manager past the edges."""
        if not self.in_chunk(x, y, z):
            manager = self._manager
            if manager is None:
                return True
            return manager.is_air(self.start_x + x, y, self.start_z + z)
        return self._blocks[self.index(x, y, z)] == AIR

    def block_at(self, x: int, y: int, z: int) -> int:
        """Block value at a local position, asking the manager past the edges."""
        if not self.in_chunk(x, y, z):
            manager = self._manager
            if manager is None:
                return AIR
            return manager.block_at((self.start_x + x, y, self.start_z + z))
        return self._blocks[self.index(x, y, z)]

    def generate_meshes(self) -> None:
        """Rebuild the face mesh if the chunk is dirty, keeping only faces next to air."""
        if not self._needs_render:
            return
        self.vertices = []
        self.indices = []
        for y, z, x in product(range(self.height), range(self.width), range(self.width)):
            block = self._blocks[self.index(x, y, z)]
            if block == AIR:
                continue
            for face in FaceDirection:
                dx, dy, dz = _FACE_OFFSETS[face]
                if self.is_air(x + dx, y + dy, z + dz):
                    self._add_face(face, (x, y, z), block)
        self._needs_render = False

    def _add_face(self, face: FaceDirection, center: Sequence[float], texture_coord: int) -> None:
        start = len(self.vertices)
        self.vertices.extend(create_cube_face(face, center, texture_coord).vertex_array)
        self.indices.extend(start + i for i in _QUAD_INDICES)

    def __str__(self) -> str:
        lines = []
        for y in range(self.height):
            lines.append("- - - - - -\n")
            for z in range(self.width):
                row = "".join(f"{self._blocks[self.index(x, y, z)]} " for x in range(self.width))
                lines.append(row + "\n")
        return "".join(lines)