"""Improved Perlin noise with an optional seeded permutation table."""

from __future__ import annotations

import math

_REFERENCE_PERMUTATION: tuple[int, ...] = (
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225, 140, 36, 103, 30, 69, 142,
    8, 99, 37, 240, 21, 10, 23, 190, 6, 148, 247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117,
    35, 11, 32, 57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175, 74, 165, 71,
    134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122, 60, 211, 133, 230, 220, 105, 92, 41,
    55, 46, 245, 40, 244, 102, 143, 54, 65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89,
    18, 169, 200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64, 52, 217, 226,
    250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212, 207, 206, 59, 227, 47, 16, 58, 17, 182,
    189, 28, 42, 223, 183, 170, 213, 119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167,
    43, 172, 9, 129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104, 218, 246,
    97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241, 81, 51, 145, 235, 249, 14, 239,
    107, 49, 192, 214, 31, 181, 199, 106, 157, 184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254,
    138, 236, 205, 93, 222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
)

_MINSTD_MODULUS = 2**31 - 1
_MINSTD_MULTIPLIER = 16807


class _MinStdRand:
    """Minimal-standard linear congruential engine."""

    def __init__(self, seed: int) -> None:
        state = seed % _MINSTD_MODULUS
        self._state = state or 1

    def __call__(self) -> int:
        self._state = (self._state * _MINSTD_MULTIPLIER) % _MINSTD_MODULUS
        return self._state

    def below_or_equal(self, upper: int) -> int:
        """Uniform integer in [0, upper] by rejection sampling."""
        span = upper + 1
        engine_range = _MINSTD_MODULUS - 1  # outputs lie in [1, m - 1]
        limit = engine_range - engine_range % span
        while True:
            value = self() - 1
            if value < limit:
                return value % span


def _shuffled_permutation(seed: int) -> list[int]:
    values = list(range(256))
    engine = _MinStdRand(seed & 0xFFFFFFFF)
    for i in range(len(values) - 1, 0, -1):
        j = engine.below_or_equal(i)
        values[i], values[j] = values[j], values[i]
    return values


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(t: float, a: float, b: float) -> float:
    return a + t * (b - a)


def _grad(hash_value: int, x: float, y: float, z: float) -> float:
    h = hash_value & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h in (12, 14):
        v = x
    else:
        v = z
    return (u if h & 1 == 0 else -u) + (v if h & 2 == 0 else -v)


class PerlinNoise:
    """Three-dimensional gradient noise with values in [0, 1].

    Without a seed the reference permutation table is used; with a seed the
    table is a deterministic shuffle of 0..255.
    """

    def __init__(self, seed: int | None = None) -> None:
        base = list(_REFERENCE_PERMUTATION) if seed is None else _shuffled_permutation(seed)
        self._p: tuple[int, ...] = tuple(base + base)

    @property
    def permutation(self) -> tuple[int, ...]:
        """The first half of the doubled permutation table."""
        return self._p[:256]

    def noise(self, x: float, y: float, z: float) -> float:
        """Noise value at (x, y, z); for 2D use, z may be any constant."""
        p = self._p
        fx, fy, fz = math.floor(x), math.floor(y), math.floor(z)
        cx, cy, cz = fx & 255, fy & 255, fz & 255

        x -= fx
        y -= fy
        z -= fz

        u = _fade(x)
        v = _fade(y)
        w = _fade(z)

        a = p[cx] + cy
        aa = p[a] + cz
        ab = p[a + 1] + cz
        b = p[cx + 1] + cy
        ba = p[b] + cz
        bb = p[b + 1] + cz

        res = _lerp(
            w,
            _lerp(
                v,
                _lerp(u, _grad(p[aa], x, y, z), _grad(p[ba], x - 1, y, z)),
                _lerp(u, _grad(p[ab], x, y - 1, z), _grad(p[bb], x - 1, y - 1, z)),
            ),
            _lerp(
                v,
                _lerp(u, _grad(p[aa + 1], x, y, z - 1), _grad(p[ba + 1], x - 1, y, z - 1)),
                _lerp(u, _grad(p[ab + 1], x, y - 1, z - 1), _grad(p[bb + 1], x - 1, y - 1, z - 1)),
            ),
        )
        return (res + 1.0) / 2.0