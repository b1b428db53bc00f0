"""Primitive shapes: box, cone, cylinder, sphere and square."""

from __future__ import annotations

import math

from .ray import Isect, Ray, Vec3
from .scene import RAY_EPSILON, BoundingBox, Geometry

_UP = Vec3(0.0, 0.0, 1.0)
_DOWN = Vec3(0.0, 0.0, -1.0)


class Box(Geometry):
    """Unit cube centred on the origin."""

    def intersect_local(self, ray: Ray) -> Isect | None:
        p, d = ray.position, ray.direction
        best_t = math.inf
        best_face = -1
        for face in range(6):
            axis = face % 3
            if d[axis] == 0:
                continue
            t = (face // 3 - 0.5 - p[axis]) / d[axis]
            if t < RAY_EPSILON or t > best_t:
                continue
            a1, a2 = (face + 1) % 3, (face + 2) % 3
            x = p[a1] + t * d[a1]
            y = p[a2] + t * d[a2]
            if -0.5 <= x <= 0.5 and -0.5 <= y <= 0.5 and t < best_t:
                best_t = t
                best_face = face
        if best_face < 0:
            return None

        point = ray.at(best_t)
        axis = best_face % 3
        i1, i2 = (best_face + 1) % 3, (best_face + 2) % 3
        lo, hi = min(i1, i2), max(i1, i2)
        sign = -1.0 if best_face < 3 else 1.0
        components = [0.0, 0.0, 0.0]
        components[axis] = sign
        return Isect(
            obj=self,
            t=best_t,
            normal=Vec3(*components),
            uv=(0.5 + sign * point[lo], 0.5 + point[hi]),
        )

    def local_bounding_box(self) -> BoundingBox:
        return BoundingBox(Vec3(-0.5, -0.5, -0.5), Vec3(0.5, 0.5, 0.5))


class Cone(Geometry):
    """Truncated cone along +z from the bottom radius at z=0 to the top radius."""

    def __init__(
        self,
        scene,
        material=None,
        height: float = 1.0,
        bottom_radius: float = 1.0,
        top_radius: float = 0.0,
        capped: bool = False,
    ):
        super().__init__(scene, material)
        if height == 0.0:
            raise ValueError("cone height must be non-zero")
        self.height = height
        self.bottom_radius = max(abs(bottom_radius), 0.0001)
        self.top_radius = max(abs(top_radius), 0.0001)
        self.capped = capped

        beta = (self.top_radius - self.bottom_radius) / height
        if abs(beta) < 0.001:
            beta = 0.001
        gamma = self.top_radius / beta if beta < 0.0 else self.bottom_radius / beta
        if gamma < 0.0:
            gamma -= height
        self.beta = beta
        self.beta_squared = beta * beta
        self.gamma = gamma
        self.gamma_squared = gamma * gamma

    def _is_good_root(self, point: Vec3) -> bool:
        return not (point.z < 0 or point.z > self.height)

    def _body_normal(self, point: Vec3) -> Vec3:
        return Vec3(point.x, point.y, -2.0 * self.beta_squared * (point.z + self.gamma))

    def intersect_local(self, ray: Ray) -> Isect | None:
        r0, rd = ray.position, ray.direction
        b2 = self.beta_squared
        a = rd.x * rd.x + rd.y * rd.y - b2 * rd.z * rd.z
        if a == 0.0:
            return None
        b = 2 * (r0.x * rd.x + r0.y * rd.y - b2 * ((r0.z + self.gamma) * rd.z))
        c = -b2 * (self.gamma + r0.z) ** 2 + r0.x * r0.x + r0.y * r0.y

        discriminant = b * b - 4 * a * c
        if discriminant <= 0:
            return None
        discriminant = math.sqrt(discriminant)

        near_root = (-b + discriminant) / (2 * a)
        far_root = (-b - discriminant) / (2 * a)
        the_root = RAY_EPSILON
        normal = Vec3()

        near_good = self._is_good_root(ray.at(near_root))
        if near_good and near_root > the_root:
            the_root = near_root
            normal = self._body_normal(ray.at(the_root))
        far_good = self._is_good_root(ray.at(far_root))
        if far_good and ((near_good and far_root < the_root) or far_root > RAY_EPSILON):
            the_root = far_root
            normal = self._body_normal(ray.at(the_root))

        if not self.capped and normal.dot(rd) > 0:
            normal = -normal

        dz = rd.z
        if self.capped and dz != 0.0:
            t1 = -r0.z / dz
            t2 = (self.height - r0.z) / dz
            p = ray.at(t1)
            if p.x * p.x + p.y * p.y <= self.bottom_radius ** 2 and RAY_EPSILON < t1 < the_root:
                the_root = t1
                normal = _DOWN if dz > 0.0 else _UP
            q = ray.at(t2)
            if q.x * q.x + q.y * q.y <= self.top_radius ** 2 and RAY_EPSILON < t2 < the_root:
                the_root = t2
                normal = _UP if dz > 0.0 else _DOWN

        if the_root <= RAY_EPSILON:
            return None
        return Isect(obj=self, t=the_root, normal=normal.normalized())

    def local_bounding_box(self) -> BoundingBox:
        radius = max(self.bottom_radius, self.top_radius)
        low = self.height if self.height < 0.0 else 0.0
        high = 0.0 if self.height < 0.0 else self.height
        return BoundingBox(Vec3(-radius, -radius, low), Vec3(radius, radius, high))


class Cylinder(Geometry):
    """Unit-radius cylinder along z from 0 to 1, capped unless told otherwise."""

    capped: bool = True

    def intersect_local(self, ray: Ray) -> Isect | None:
        caps = self.intersect_caps(ray)
        if caps is None:
            return self.intersect_body(ray)
        body = self.intersect_body(ray)
        if body is not None and body.t < caps.t:
            return body
        return caps

    def intersect_body(self, ray: Ray) -> Isect | None:
        x0, y0 = ray.position.x, ray.position.y
        x1, y1 = ray.direction.x, ray.direction.y
        a = x1 * x1 + y1 * y1
        b = 2.0 * (x0 * x1 + y0 * y1)
        c = x0 * x0 + y0 * y0 - 1.0
        if a == 0.0:
            return None

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0.0:
            return None
        discriminant = math.sqrt(discriminant)

        t2 = (-b + discriminant) / (2.0 * a)
        if t2 <= RAY_EPSILON:
            return None
        t1 = (-b - discriminant) / (2.0 * a)
        if t1 > RAY_EPSILON:
            p = ray.at(t1)
            if 0.0 <= p.z <= 1.0:
                return Isect(obj=self, t=t1, normal=Vec3(p.x, p.y, 0.0).normalized())

        p = ray.at(t2)
        if 0.0 <= p.z <= 1.0:
            normal = Vec3(p.x, p.y, 0.0)
            if not self.capped and normal.dot(ray.direction) > 0:
                normal = -normal
            return Isect(obj=self, t=t2, normal=normal.normalized())
        return None

    def intersect_caps(self, ray: Ray) -> Isect | None:
        if not self.capped:
            return None
        pz, dz = ray.position.z, ray.direction.z
        if dz == 0.0:
            return None

        t1 = (1.0 - pz) / dz
        t2 = -pz / dz
        if dz > 0.0:
            t1, t2 = t2, t1
        if t2 < RAY_EPSILON:
            return None

        if t1 >= RAY_EPSILON:
            p = ray.at(t1)
            if p.x * p.x + p.y * p.y <= 1.0:
                return Isect(obj=self, t=t1, normal=_DOWN if dz > 0.0 else _UP)
        p = ray.at(t2)
        if p.x * p.x + p.y * p.y <= 1.0:
            return Isect(obj=self, t=t2, normal=_UP if dz > 0.0 else _DOWN)
        return None

    def local_bounding_box(self) -> BoundingBox:
        return BoundingBox(Vec3(-1.0, -1.0, 0.0), Vec3(1.0, 1.0, 1.0))


class Sphere(Geometry):
    """Unit sphere centred on the origin."""

    def intersect_local(self, ray: Ray) -> Isect | None:
        p, d = ray.position, ray.direction
        pd = p.dot(d)
        det = pd * pd - p.dot(p) + 1.0
        if det < 0.0:
            return None
        root = math.sqrt(det)
        t1 = -pd - root
        t2 = -pd + root
        if t1 > RAY_EPSILON:
            t = t1
        elif t2 > RAY_EPSILON:
            t = t2
        else:
            return None
        point = ray.at(t)
        if point.dot(point) - 1.0 < RAY_EPSILON:
            return Isect(obj=self, t=t, normal=point.normalized())
        return None

    def local_bounding_box(self) -> BoundingBox:
        return BoundingBox(Vec3(-1.0, -1.0, -1.0), Vec3(1.0, 1.0, 1.0))


class Square(Geometry):
    """Unit square in the z=0 plane, centred on the origin."""

    def intersect_local(self, ray: Ray) -> Isect | None:
        p, d = ray.position, ray.direction
        if d.z == 0.0:
            return None
        t = -p.z / d.z
        if t <= RAY_EPSILON:
            return None
        point = ray.at(t)
        if not (-0.5 <= point.x <= 0.5 and -0.5 <= point.y <= 0.5):
            return None
        return Isect(
            obj=self,
            t=t,
            normal=_DOWN if d.z > 0.0 else _UP,
            uv=(point.x + 0.5, point.y + 0.5),
        )

    def local_bounding_box(self) -> BoundingBox:
        return BoundingBox(Vec3(-0.5, -0.5, -RAY_EPSILON), Vec3(0.5, 0.5, RAY_EPSILON))