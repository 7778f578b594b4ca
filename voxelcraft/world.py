"""A world of lazily created chunks with block editing and ray picking."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from .chunk import AIR, Chunk
from .mesh import MeshObject, Vertex
from .noise import PerlinNoise

MAX_PICK_DISTANCE = 25.0
MAX_PICK_STEPS = 512

_UNSET = (-1.0, -1.0, -1.0)
_MISSED = (-2.0, -2.0, -2.0)


def _sign(value: float) -> int:
    return 1 if value > 0 else (-1 if value < 0 else 0)


def _reciprocal(value: float) -> float:
    if value == 0:
        return math.copysign(math.inf, value)
    return 1.0 / value


def _gmin(a: float, b: float) -> float:
    return b if b < a else a


class ChunkManager:
    """Owns chunks keyed by chunk coordinates and answers world-space queries."""

    def __init__(self, chunk_width: int, chunk_height: int, seed: int) -> None:
        if chunk_width <= 0 or chunk_height <= 0:
            raise ValueError(
                f"chunk dimensions must be positive, got {chunk_width}x{chunk_height}"
            )
        self.chunk_width = chunk_width
        self.chunk_height = chunk_height
        self.perlin = PerlinNoise(seed)
        self.highlight_position: tuple[float, float, float] = _UNSET
        self.place_position: tuple[float, float, float] = _UNSET
        self.drawing_data: dict[tuple[int, int], MeshObject[Vertex]] = {}
        self._chunks: dict[tuple[int, int], Chunk] = {}

    @property
    def chunks(self) -> Mapping[tuple[int, int], Chunk]:
        """Read-only view of the loaded chunks."""
        return MappingProxyType(self._chunks)

    def chunk_xz(self, xz: int) -> int:
        """Chunk coordinate containing the world coordinate (floor division)."""
        return xz // self.chunk_width

    def local_xz(self, xz: int) -> int:
        """Coordinate within its chunk, always in [0, chunk_width)."""
        return xz % self.chunk_width

    def exists_chunk(self, x: int, z: int) -> bool:
        return (x, z) in self._chunks

    def get_or_create_chunk(self, chunk_x: int, chunk_z: int) -> Chunk:
        """The chunk at the given chunk coordinates, generating it if needed."""
        key = (chunk_x, chunk_z)
        chunk = self._chunks.get(key)
        if chunk is None:
            chunk = Chunk(
                self.chunk_width,
                self.chunk_height,
                self,
                chunk_x * self.chunk_width,
                chunk_z * self.chunk_width,
            )
            self._chunks[key] = chunk
        return chunk

    def rebuild_meshes(self) -> None:
        """Regenerate meshes of dirty chunks and store them in drawing_data."""
        for coord, chunk in self._chunks.items():
            if chunk.needs_render:
                chunk.generate_meshes()
                self.drawing_data[coord] = chunk.mesh

    def is_air(self, x: int, y: int, z: int) -> bool:
        """Whether a world position is air; unloaded and out-of-height space is air."""
        if y < 0 or y >= self.chunk_height:
            return True
        chunk = self._chunks.get((self.chunk_xz(x), self.chunk_xz(z)))
        if chunk is None:
            return True
        return chunk.is_air(self.local_xz(x), y, self.local_xz(z))

    def block_at(self, pos: Sequence[int]) -> int:
        """Block value at a world position; air where nothing is loaded."""
        x, y, z = pos
        if y < 0 or y >= self.chunk_height:
            return AIR
        chunk = self._chunks.get((self.chunk_xz(x), self.chunk_xz(z)))
        if chunk is None:
            return AIR
        return chunk.block_at(self.local_xz(x), y, self.local_xz(z))

    def set_block(self, x: int, y: int, z: int, value: int) -> bool:
        """Set a block, creating its chunk; True if it changed.

        Existing neighbouring chunks that share the edited border are marked dirty.
        """
        if y < 0 or y >= self.chunk_height:
            return False
        chunk_x, chunk_z = self.chunk_xz(x), self.chunk_xz(z)
        local_x, local_z = self.local_xz(x), self.local_xz(z)

        chunk = self.get_or_create_chunk(chunk_x, chunk_z)
        if not chunk.set_block(local_x, y, local_z, value):
            return False
        chunk.mark_dirty()

        last = self.chunk_width - 1
        if local_x == 0 and self.exists_chunk(chunk_x - 1, chunk_z):
            self._chunks[(chunk_x - 1, chunk_z)].mark_dirty()
        elif local_x == last and self.exists_chunk(chunk_x + 1, chunk_z):
            self._chunks[(chunk_x + 1, chunk_z)].mark_dirty()

        if local_z == 0 and self.exists_chunk(chunk_x, chunk_z - 1):
            self._chunks[(chunk_x, chunk_z - 1)].mark_dirty()
        elif local_z == last and self.exists_chunk(chunk_x, chunk_z + 1):
            self._chunks[(chunk_x, chunk_z + 1)].mark_dirty()
        return True

    @staticmethod
    def containing_block(pos: Sequence[float]) -> tuple[int, int, int]:
        """Integer coordinates of the block that contains a point."""
        x, y, z = pos
        return math.floor(x), math.floor(y), math.floor(z)

    def calculate_ray_trace(self, eye: Sequence[float], direction: Sequence[float]) -> None:
        """Walk the voxel grid from ``eye`` and record the first solid block.

        Sets highlight_position to the hit block and place_position to the
        block entered just before it. Leaving the world's height counts as a
        hit. If nothing is hit within range, highlight_position is (-2, -2, -2)
        and place_position is (-1, -1, -1).
        """
        eye = tuple(float(c) for c in eye)
        direction = tuple(float(c) for c in direction)

        current = list(self.containing_block(eye))
        step = [_sign(d) for d in direction]
        inv_dir = [_reciprocal(d) for d in direction]
        boundary = [c + (1.0 if s > 0 else 0.0) for c, s in zip(current, step)]
        t_max = [(b - e) * i for b, e, i in zip(boundary, eye, inv_dir)]
        t_delta = [abs(i) for i in inv_dir]
        last = tuple(current)
        max_distance_sq = MAX_PICK_DISTANCE * MAX_PICK_DISTANCE

        self.highlight_position = _UNSET
        self.place_position = _UNSET

        for _ in range(MAX_PICK_STEPS):
            t = _gmin(t_max[0], _gmin(t_max[1], t_max[2]))
            offsets = [(e + d * t) - e for e, d in zip(eye, direction)]
            if sum(o * o for o in offsets) > max_distance_sq:
                break

            x, y, z = current
            if y >= self.chunk_height or y < 0 or not self.is_air(x, y, z):
                self.highlight_position = (float(x), float(y), float(z))
                self.place_position = tuple(float(c) for c in last)  # type: ignore[assignment]
                return

            last = (x, y, z)
            if t_max[0] < t_max[1]:
                axis = 0 if t_max[0] < t_max[2] else 2
            else:
                axis = 1 if t_max[1] < t_max[2] else 2
            current[axis] += step[axis]
            t_max[axis] += t_delta[axis]

        self.highlight_position = _MISSED
        self.place_position = _UNSET

    def selection(self) -> int:
        """Block value under the highlight."""
        block = tuple(int(c) for c in self.highlight_position)
        return self.block_at(block)

    def set_block_at_place(self, value: int) -> None:
        """Place ``value`` next to the highlight, or remove the highlighted block for air."""
        if value == AIR:
            if self.highlight_position[1] > -1.5:
                x, y, z = self.containing_block(tuple(c + 0.01 for c in self.highlight_position))
                self.set_block(x, y, z, value)
        elif self.place_position[1] > -0.5:
            x, y, z = self.containing_block(tuple(c + 0.01 for c in self.place_position))
            self.set_block(x, y, z, value)

    def __str__(self) -> str:
        parts = ["Printing \n"]
        for (cx, cz), chunk in self._chunks.items():
            parts.append(f"x: {cx * self.chunk_width} , z: {cz * self.chunk_width}")
            parts.append(str(chunk))
        return "".join(parts)