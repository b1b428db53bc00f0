"""Scene graph: transforms, bounding boxes, geometry and the scene itself."""

from __future__ import annotations

import abc
import itertools
import math
from dataclasses import dataclass, field

import numpy as np

from .camera import Camera
from .material import Material, TextureMap
from .ray import Isect, Ray, Vec3

RAY_EPSILON = 0.00001


@dataclass
class BoundingBox:
    """Axis-aligned box from ``min`` to ``max``."""

    min: Vec3 = field(default_factory=Vec3)
    max: Vec3 = field(default_factory=Vec3)

    def intersects_box(self, other: BoundingBox) -> bool:
        """Whether the two boxes overlap, allowing a small tolerance."""
        return all(
            other.min[a] - RAY_EPSILON <= self.max[a] and other.max[a] + RAY_EPSILON >= self.min[a]
            for a in range(3)
        )

    def contains_point(self, point: Vec3) -> bool:
        return all(
            point[a] + RAY_EPSILON >= self.min[a] and point[a] - RAY_EPSILON <= self.max[a]
            for a in range(3)
        )

    def intersect(self, ray: Ray) -> tuple[float, float] | None:
        """Near and far ``t`` where the ray passes through the box, or None."""
        t_min = -math.inf
        t_max = math.inf
        for axis in range(3):
            origin = ray.position[axis]
            vd = ray.direction[axis]
            if vd == 0.0:
                if origin < self.min[axis] or origin > self.max[axis]:
                    return None
                continue
            t1 = (self.min[axis] - origin) / vd
            t2 = (self.max[axis] - origin) / vd
            if t1 > t2:
                t1, t2 = t2, t1
            t_min = max(t_min, t1)
            t_max = min(t_max, t2)
            if t_min > t_max or t_max < RAY_EPSILON:
                return None
        return t_min, t_max

    def merged(self, other: BoundingBox) -> BoundingBox:
        return BoundingBox(
            Vec3(*(min(a, b) for a, b in zip(self.min, other.min))),
            Vec3(*(max(a, b) for a, b in zip(self.max, other.max))),
        )


def translation(x: float, y: float, z: float) -> np.ndarray:
    matrix = np.identity(4)
    matrix[:3, 3] = (x, y, z)
    return matrix


def rotation(angle: float, x: float, y: float, z: float) -> np.ndarray:
    """Rotation by ``angle`` radians about the axis ``(x, y, z)``."""
    axis = np.array((x, y, z), dtype=float)
    axis /= np.linalg.norm(axis)
    x, y, z = axis
    c, s = math.cos(angle), math.sin(angle)
    t = 1.0 - c
    matrix = np.identity(4)
    matrix[:3, :3] = (
        (t * x * x + c, t * x * y - s * z, t * x * z + s * y),
        (t * x * y + s * z, t * y * y + c, t * y * z - s * x),
        (t * x * z - s * y, t * y * z + s * x, t * z * z + c),
    )
    return matrix


def scaling(x: float, y: float, z: float) -> np.ndarray:
    return np.diag((x, y, z, 1.0))


class Transform:
    """Node of the transform hierarchy; holds the composed world matrix."""

    def __init__(self, matrix=None, parent: Transform | None = None):
        self.matrix = np.identity(4) if matrix is None else np.asarray(matrix, dtype=float)
        self.parent = parent
        self.children: list[Transform] = []
        self.xform = parent.xform @ self.matrix if parent is not None else self.matrix
        self.inverse = np.linalg.inv(self.xform)
        self.normal_matrix = self.inverse[:3, :3].T

    def create_child(self, matrix) -> Transform:
        child = Transform(matrix, self)
        self.children.append(child)
        return child

    @staticmethod
    def _apply(matrix: np.ndarray, point: Vec3) -> Vec3:
        x, y, z, _ = matrix @ np.array((point.x, point.y, point.z, 1.0))
        return Vec3(float(x), float(y), float(z))

    def global_to_local(self, point: Vec3) -> Vec3:
        return self._apply(self.inverse, point)

    def local_to_global(self, point: Vec3) -> Vec3:
        return self._apply(self.xform, point)

    def local_to_global_normal(self, normal: Vec3) -> Vec3:
        x, y, z = self.normal_matrix @ np.array(tuple(normal))
        return Vec3(float(x), float(y), float(z)).normalized()


class Geometry(abc.ABC):
    """A scene object intersected in its own local coordinates."""

    def __init__(self, scene: Scene, material: Material | None = None, transform: Transform | None = None):
        self.scene = scene
        self.material = material if material is not None else Material()
        self.transform = transform if transform is not None else Transform()

    def intersect(self, ray: Ray) -> Isect | None:
        """Hit in world coordinates, with ``t`` measured along ``ray``."""
        pos = self.transform.global_to_local(ray.position)
        direction = self.transform.global_to_local(ray.position + ray.direction) - pos
        length = direction.length()
        local = Ray(pos, direction / length, ray.kind)
        hit = self.intersect_local(local)
        if hit is None:
            return None
        hit.normal = self.transform.local_to_global_normal(hit.normal)
        hit.t /= length
        return hit

    @abc.abstractmethod
    def intersect_local(self, ray: Ray) -> Isect | None:
        """Hit with a ray given in local coordinates, or None."""

    def local_bounding_box(self) -> BoundingBox | None:
        """Bounds in local coordinates; None when the object has none."""
        return None

    def bounding_box(self) -> BoundingBox | None:
        """World-space box around the transformed local bounds."""
        local = self.local_bounding_box()
        if local is None:
            return None
        corners = [
            self.transform.local_to_global(Vec3(x, y, z))
            for x, y, z in itertools.product(*zip(local.min, local.max))
        ]
        return BoundingBox(
            Vec3(*(min(c[a] for c in corners) for a in range(3))),
            Vec3(*(max(c[a] for c in corners) for a in range(3))),
        )


class Scene:
    """Objects, lights, camera and textures of one scene."""

    def __init__(self) -> None:
        self.objects: list[Geometry] = []
        self.lights: list = []
        self.ambient = Vec3()
        self.camera = Camera()
        self.transform_root = Transform()
        self.textures: dict[str, TextureMap] = {}
        self.intersect_cache: list[tuple[Ray, Isect | None]] = []
        self.bounded_objects: list[Geometry] = []
        self.nonbounded_objects: list[Geometry] = []
        self.scene_bounds = BoundingBox()
        self._partitioned = False

    def add_object(self, obj: Geometry) -> None:
        self.objects.append(obj)
        if self._partitioned:
            self._classify(obj)

    def add_light(self, light) -> None:
        self.lights.append(light)

    def add_ambient(self, color: Vec3) -> None:
        """Ambient lights sum into one scene-wide intensity."""
        self.ambient = self.ambient + color

    def intersect(self, ray: Ray) -> Isect | None:
        """Nearest hit of the ray with any object, or None."""
        if self._partitioned:
            candidates = itertools.chain(self.nonbounded_objects, self.bounded_objects)
        else:
            candidates = iter(self.objects)
        best: Isect | None = None
        for obj in candidates:
            hit = obj.intersect(ray)
            if hit is not None and (best is None or hit.t < best.t):
                best = hit
        self.intersect_cache.append((ray, best))
        return best

    def _classify(self, obj: Geometry) -> None:
        box = obj.bounding_box()
        if box is None:
            self.nonbounded_objects.append(obj)
            return
        if self.bounded_objects:
            self.scene_bounds = self.scene_bounds.merged(box)
        else:
            self.scene_bounds = box
        self.bounded_objects.append(obj)

    def init_bounds(self) -> None:
        """Split objects into bounded and unbounded and compute scene bounds."""
        self.bounded_objects = []
        self.nonbounded_objects = []
        self.scene_bounds = BoundingBox()
        for obj in self.objects:
            self._classify(obj)
        self._partitioned = True

    def get_texture(self, name: str) -> TextureMap:
        """Load a texture once and reuse it afterwards."""
        texture = self.textures.get(name)
        if texture is None:
            texture = TextureMap(name)
            self.textures[name] = texture
        return texture