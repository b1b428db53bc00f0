"""Pinhole camera producing primary rays through the image plane."""

from __future__ import annotations

import math

from .ray import Ray, RayType, Vec3

_PI = 3.14159265359

_IDENTITY = (Vec3(1.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0), Vec3(0.0, 0.0, 1.0))


def _apply(rows: tuple[Vec3, Vec3, Vec3], v: Vec3) -> Vec3:
    return Vec3(*(row.dot(v) for row in rows))


class Camera:
    """Camera at ``eye`` looking down ``look`` with image axes ``u`` and ``v``.

    By default it sits at the origin looking down the negative z axis with
    positive y up.
    """

    def __init__(self) -> None:
        self.aspect_ratio = 1.0
        self.normalized_height = 1.0
        self.eye = Vec3(0.0, 0.0, 0.0)
        self.u = Vec3(1.0, 0.0, 0.0)
        self.v = Vec3(0.0, 1.0, 0.0)
        self.look = Vec3(0.0, 0.0, -1.0)
        self.matrix = _IDENTITY

    def ray_through(self, x: float, y: float) -> Ray:
        """Ray through normalized window coordinates, both running 0 to 1."""
        x -= 0.5
        y -= 0.5
        direction = (self.look + self.u * x + self.v * y).normalized()
        return Ray(self.eye, direction, RayType.VISIBILITY)

    def set_eye(self, eye: Vec3) -> None:
        self.eye = eye

    def set_look_quaternion(self, r: float, i: float, j: float, k: float) -> None:
        """Orient the camera by rotating the default view by a quaternion."""
        self.matrix = (
            Vec3(1.0 - 2.0 * (i * i + j * j), 2.0 * (r * i - j * k), 2.0 * (j * r + i * k)),
            Vec3(2.0 * (r * i + j * k), 1.0 - 2.0 * (j * j + r * r), 2.0 * (i * j - r * k)),
            Vec3(2.0 * (j * r - i * k), 2.0 * (i * j + r * k), 1.0 - 2.0 * (i * i + r * r)),
        )
        self._update()

    def set_look(self, view_dir: Vec3, up_dir: Vec3) -> None:
        """Orient the camera from a view direction and an up direction."""
        z = -view_dir
        y = up_dir
        x = y.cross(z)
        self.matrix = (
            Vec3(x.x, y.x, z.x),
            Vec3(x.y, y.y, z.y),
            Vec3(x.z, y.z, z.z),
        )
        self._update()

    def set_fov(self, fov: float) -> None:
        """Set the vertical field of view, in degrees."""
        radians = fov / (180.0 / _PI)
        self.normalized_height = 2.0 * math.tan(radians / 2.0)
        self._update()

    def set_aspect_ratio(self, ar: float) -> None:
        """Set the ratio of image width to height."""
        self.aspect_ratio = ar
        self._update()

    def set_look_simple(self, target: Vec3, pos: Vec3) -> None:
        """Look from ``pos`` towards ``target`` with up as near +y as possible.

        Raises ValueError when the two points coincide.
        """
        view_dir = target - pos
        if view_dir.length2() == 0:
            raise ValueError("cannot look at the position of the camera")
        view_dir = view_dir.normalized()
        if view_dir.x == 0 and view_dir.z == 0:
            self.set_look(view_dir, Vec3(1.0, 0.0, 0.0))
            return
        out = view_dir.cross(Vec3(0.0, 1.0, 0.0)).normalized()
        up_dir = out.cross(view_dir).normalized()
        self.set_look(view_dir, up_dir)

    def _update(self) -> None:
        self.u = _apply(self.matrix, Vec3(1.0, 0.0, 0.0)) * self.normalized_height * self.aspect_ratio
        self.v = _apply(self.matrix, Vec3(0.0, 1.0, 0.0)) * self.normalized_height
        self.look = _apply(self.matrix, Vec3(0.0, 0.0, -1.0))