"""A look-at camera with a perspective projection."""

from __future__ import annotations

import math
from collections.abc import Sequence

Vec3 = tuple[float, float, float]
Matrix = tuple[tuple[float, ...], ...]

DEFAULT_ANGLE = math.radians(27.0)
DEFAULT_ASPECT = 1.0
DEFAULT_Z_NEAR = 0.01
DEFAULT_Z_FAR = 1000.0


def _vec3(v: Sequence[float]) -> Vec3:
    x, y, z = v
    return float(x), float(y), float(z)


def _sub(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return a[0] - b[0], a[1] - b[1], a[2] - b[2]


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _normalize(v: Sequence[float]) -> Vec3:
    length = math.sqrt(_dot(v, v))
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return v[0] / length, v[1] / length, v[2] / length


def matmul(a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]) -> Matrix:
    """Product of two row-major matrices."""
    columns = list(zip(*b))
    if any(len(row) != len(b) for row in a):
        raise ValueError("matrix dimensions do not match")
    return tuple(
        tuple(sum(x * y for x, y in zip(row, col)) for col in columns) for row in a
    )


def look_at(eye: Sequence[float], at: Sequence[float], up: Sequence[float]) -> Matrix:
    """Right-handed view matrix looking from ``eye`` towards ``at``."""
    eye, at, up = _vec3(eye), _vec3(at), _vec3(up)
    f = _normalize(_sub(at, eye))
    s = _normalize(_cross(f, up))
    u = _cross(s, f)
    return (
        (s[0], s[1], s[2], -_dot(s, eye)),
        (u[0], u[1], u[2], -_dot(u, eye)),
        (-f[0], -f[1], -f[2], _dot(f, eye)),
        (0.0, 0.0, 0.0, 1.0),
    )


def perspective(fovy: float, aspect: float, z_near: float, z_far: float) -> Matrix:
    """Right-handed perspective projection with depth mapped to [-1, 1]."""
    if aspect == 0:
        raise ValueError("aspect ratio must not be zero")
    if z_near == z_far:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fovy / 2.0)
    if tan_half == 0:
        raise ValueError("field of view must not be zero")
    depth = z_far - z_near
    return (
        (1.0 / (aspect * tan_half), 0.0, 0.0, 0.0),
        (0.0, 1.0 / tan_half, 0.0, 0.0),
        (0.0, 0.0, -(z_far + z_near) / depth, -(2.0 * z_far * z_near) / depth),
        (0.0, 0.0, -1.0, 0.0),
    )


class Camera:
    """Camera position, target and projection, with cached matrices."""

    def __init__(self) -> None:
        self._angle = DEFAULT_ANGLE
        self._aspect = DEFAULT_ASPECT
        self._z_near = DEFAULT_Z_NEAR
        self._z_far = DEFAULT_Z_FAR
        self._proj_matrix = perspective(self._angle, self._aspect, self._z_near, self._z_far)
        self.set_view((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0))

    def set_view(
        self, eye: Sequence[float], at: Sequence[float], world_up: Sequence[float]
    ) -> None:
        """Place the camera at ``eye`` looking at ``at``."""
        view = look_at(eye, at, world_up)
        self._eye = _vec3(eye)
        self._at = _vec3(at)
        self._world_up = _vec3(world_up)
        self._view_matrix = view

    def set_proj(self, angle: float, aspect: float, z_near: float, z_far: float) -> None:
        """Set every projection parameter at once."""
        self._proj_matrix = perspective(angle, aspect, z_near, z_far)
        self._angle = angle
        self._aspect = aspect
        self._z_near = z_near
        self._z_far = z_far

    @property
    def eye(self) -> Vec3:
        return self._eye

    @property
    def at(self) -> Vec3:
        return self._at

    @property
    def world_up(self) -> Vec3:
        return self._world_up

    @property
    def view_matrix(self) -> Matrix:
        return self._view_matrix

    @property
    def proj_matrix(self) -> Matrix:
        return self._proj_matrix

    @property
    def view_proj(self) -> Matrix:
        """Projection matrix times view matrix."""
        return matmul(self._proj_matrix, self._view_matrix)

    @property
    def angle(self) -> float:
        return self._angle

    @angle.setter
    def angle(self, value: float) -> None:
        self.set_proj(value, self._aspect, self._z_near, self._z_far)

    @property
    def aspect(self) -> float:
        return self._aspect

    @aspect.setter
    def aspect(self, value: float) -> None:
        self.set_proj(self._angle, value, self._z_near, self._z_far)

    @property
    def z_near(self) -> float:
        return self._z_near

    @z_near.setter
    def z_near(self, value: float) -> None:
        self.set_proj(self._angle, self._aspect, value, self._z_far)

    @property
    def z_far(self) -> float:
        return self._z_far

    @z_far.setter
    def z_far(self, value: float) -> None:
        self.set_proj(self._angle, self._aspect, self._z_near, value)