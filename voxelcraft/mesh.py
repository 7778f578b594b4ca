"""Mesh and image containers used for rendering data."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]
Texel = tuple[int, int, int, int]

VertexT = TypeVar("VertexT")


@dataclass(frozen=True)
class Vertex:
    """A vertex with position, normal and texture coordinate."""

    position: Vec3
    normal: Vec3
    texcoord: Vec2


@dataclass
class MeshObject(Generic[VertexT]):
    """Vertices and the triangle indices into them."""

    vertex_array: list[VertexT] = field(default_factory=list)
    index_array: list[int] = field(default_factory=list)


def _as_texel(value: Iterable[int]) -> Texel:
    texel = tuple(int(c) for c in value)
    if len(texel) != 4 or any(not 0 <= c <= 255 for c in texel):
        raise ValueError(f"texel must be four integers in 0..255, got {value!r}")
    return texel  # type: ignore[return-value]


@dataclass
class ImageRGBA:
    """An RGBA image stored row by row as four-byte texels."""

    texel_data: list[Texel] = field(default_factory=list)
    width: int = 0
    height: int = 0

    def allocate(self, width: int, height: int) -> bool:
        """Resize to width x height, keeping existing texels; True if non-empty."""
        self.width = width
        self.height = height
        size = width * height
        if len(self.texel_data) > size:
            del self.texel_data[size:]
        else:
            self.texel_data.extend([(0, 0, 0, 0)] * (size - len(self.texel_data)))
        return bool(self.texel_data)

    def assign(self, texels: Iterable[Iterable[int]], width: int, height: int) -> bool:
        """Replace contents with the first width*height texels; True if non-empty."""
        size = width * height
        data = []
        for texel in texels:
            if len(data) == size:
                break
            data.append(_as_texel(texel))
        if len(data) < size:
            raise ValueError(f"expected {size} texels, got {len(data)}")
        self.width = width
        self.height = height
        self.texel_data = data
        return bool(self.texel_data)

    def _offset(self, key: tuple[int, int]) -> int:
        x, y = key
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"texel ({x}, {y}) outside {self.width}x{self.height} image")
        return y * self.width + x

    def __getitem__(self, key: tuple[int, int]) -> Texel:
        return self.texel_data[self._offset(key)]

    def __setitem__(self, key: tuple[int, int], value: Iterable[int]) -> None:
        self.texel_data[self._offset(key)] = _as_texel(value)

    def flip_vertical(self) -> None:
        """Swap rows top to bottom in place."""
        rows = [self.texel_data[r * self.width:(r + 1) * self.width] for r in range(self.height)]
        self.texel_data = [texel for row in reversed(rows) for texel in row]


def number_of_mip_levels(image: ImageRGBA) -> int:
    """Number of mipmap levels for the image's larger dimension."""
    return max(1, max(image.width, image.height).bit_length())