"""Free-flying camera control driven by keyboard and mouse input."""

from __future__ import annotations

import math
from enum import Enum, auto

from .camera import Camera, Vec3, _cross, _dot, _normalize, _sub

DEFAULT_SPEED = 16.0
SLOW_FACTOR = 4.0
MIN_POLAR = 0.1
MAX_POLAR = 3.1


class Key(Enum):
    """Keys that steer the camera."""

    LSHIFT = auto()
    RSHIFT = auto()
    W = auto()
    S = auto()
    A = auto()
    D = auto()
    E = auto()
    Q = auto()


class CameraManipulator:
    """Moves a camera using spherical look angles and held movement keys."""

    def __init__(self) -> None:
        self._camera: Camera | None = None
        self._u = 0.0
        self._v = 0.0
        self._distance = 0.0
        self._center: Vec3 = (0.0, 0.0, 0.0)
        self._world_up: Vec3 = (0.0, 1.0, 0.0)
        self.speed = DEFAULT_SPEED
        self._go_forward = 0.0
        self._go_right = 0.0
        self._go_up = 0.0

    @property
    def camera(self) -> Camera | None:
        return self._camera

    @property
    def u(self) -> float:
        """Azimuth of the look direction."""
        return self._u

    @property
    def v(self) -> float:
        """Polar angle of the look direction from the up axis."""
        return self._v

    @property
    def distance(self) -> float:
        """Distance from the camera to its target."""
        return self._distance

    @property
    def center(self) -> Vec3:
        """The point the camera looks at."""
        return self._center

    def set_camera(self, camera: Camera | None) -> None:
        """Attach a camera and derive the look angles from its current view."""
        self._camera = camera
        if camera is None:
            return
        self._center = camera.at
        to_aim = _sub(self._center, camera.eye)
        distance = math.sqrt(_dot(to_aim, to_aim))
        if distance == 0.0:
            raise ValueError("camera eye and target coincide")
        self._distance = distance
        self._u = math.atan2(to_aim[2], to_aim[0])
        self._v = math.acos(max(-1.0, min(1.0, to_aim[1] / distance)))
        self._world_up = camera.world_up

    def update(self, delta_time: float) -> None:
        """Move the camera according to the held keys over ``delta_time`` seconds."""
        camera = self._camera
        if camera is None:
            return
        sin_v = math.sin(self._v)
        look = (math.cos(self._u) * sin_v, math.cos(self._v), math.sin(self._u) * sin_v)
        eye = tuple(c - self._distance * d for c, d in zip(self._center, look))
        up = camera.world_up
        right = _normalize(_cross(look, up))
        forward = _cross(up, right)
        scale = self.speed * delta_time
        delta = tuple(
            (self._go_forward * f + self._go_right * r + self._go_up * w) * scale
            for f, r, w in zip(forward, right, up)
        )
        eye = tuple(e + d for e, d in zip(eye, delta))
        self._center = tuple(c + d for c, d in zip(self._center, delta))  # type: ignore[assignment]
        camera.set_view(eye, self._center, self._world_up)

    def key_down(self, key: Key, repeat: int) -> None:
        """Start moving, or slow down while shift is held."""
        if key in (Key.LSHIFT, Key.RSHIFT):
            if not repeat:
                self.speed /= SLOW_FACTOR
        elif key is Key.W:
            self._go_forward = 1.0
        elif key is Key.S:
            self._go_forward = -1.0
        elif key is Key.A:
            self._go_right = -1.0
        elif key is Key.D:
            self._go_right = 1.0
        elif key is Key.E:
            self._go_up = 1.0
        elif key is Key.Q:
            self._go_up = -1.0

    def key_up(self, key: Key) -> None:
        """Stop moving along the released key's axis, or restore speed after shift."""
        if key in (Key.LSHIFT, Key.RSHIFT):
            self.speed *= SLOW_FACTOR
        elif key in (Key.W, Key.S):
            self._go_forward = 0.0
        elif key in (Key.A, Key.D):
            self._go_right = 0.0
        elif key in (Key.Q, Key.E):
            self._go_up = 0.0

    def mouse_move(self, xrel: float, yrel: float, left: bool, right: bool) -> None:
        """Turn with the left button held; zoom with the right button held."""
        if left:
            self._u += xrel / 100.0
            self._v = min(max(self._v + yrel / 100.0, MIN_POLAR), MAX_POLAR)
        if right:
            self._distance *= 0.9 ** (yrel / 50.0)

    def mouse_wheel(self, y: float) -> None:
        """Zoom by the wheel amount."""
        self._distance *= 0.9 ** float(y)