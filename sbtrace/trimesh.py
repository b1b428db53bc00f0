"""Triangle meshes and their faces."""

from __future__ import annotations

import copy

from .ray import Isect, Ray, Vec3
from .scene import RAY_EPSILON, BoundingBox, Geometry


class Trimesh(Geometry):
    """A mesh of triangles; each face is added to the scene as its own object.

    Per-vertex normals and materials, when given, must be added in vertex order.
    """

    def __init__(self, scene, material, transform):
        super().__init__(scene, material, transform)
        self.vertices: list[Vec3] = []
        self.faces: list[TrimeshFace] = []
        self.normals: list[Vec3] = []
        self.materials: list = []

    def intersect_local(self, ray: Ray) -> Isect | None:
        """The mesh itself is never hit; its faces are."""
        return None

    def add_vertex(self, vertex: Vec3) -> None:
        self.vertices.append(vertex)

    def add_material(self, material) -> None:
        self.materials.append(material)

    def add_normal(self, normal: Vec3) -> None:
        self.normals.append(normal)

    def add_face(self, a: int, b: int, c: int) -> TrimeshFace:
        """Add a triangle over existing vertices and register it with the scene.

        Raises IndexError when a vertex does not exist.
        """
        count = len(self.vertices)
        if any(index >= count or index < 0 for index in (a, b, c)):
            raise IndexError(f"face ({a}, {b}, {c}) refers to a missing vertex")
        face = TrimeshFace(self.scene, copy.copy(self.material), self, a, b, c)
        face.transform = self.transform
        self.faces.append(face)
        self.scene.add_object(face)
        return face

    def double_check(self) -> None:
        """Raise ValueError if per-vertex materials or normals are miscounted."""
        if self.materials and len(self.materials) != len(self.vertices):
            raise ValueError("Bad Trimesh: Wrong number of materials.")
        if self.normals and len(self.normals) != len(self.vertices):
            raise ValueError("Bad Trimesh: Wrong number of normals.")

    def generate_normals(self) -> None:
        """Give each vertex the average normal of the faces that use it."""
        count = len(self.vertices)
        normals = self.normals[:count] + [Vec3()] * (count - len(self.normals))
        face_counts = [0] * count
        for face in self.faces:
            a, b, c = (self.vertices[index] for index in face.ids)
            face_normal = (b - a).cross(c - a).normalized()
            for index in face.ids:
                normals[index] = normals[index] + face_normal
                face_counts[index] += 1
        self.normals = [
            normal / used if used else normal for normal, used in zip(normals, face_counts)
        ]


class TrimeshFace(Geometry):
    """One triangle of a mesh, referring to its vertices by index."""

    def __init__(self, scene, material, parent: Trimesh, a: int, b: int, c: int):
        super().__init__(scene, material, parent.transform)
        self.parent = parent
        self.ids = (a, b, c)

    def __getitem__(self, index: int) -> int:
        return self.ids[index]

    def _corners(self) -> tuple[Vec3, Vec3, Vec3]:
        vertices = self.parent.vertices
        return vertices[self.ids[0]], vertices[self.ids[1]], vertices[self.ids[2]]

    def intersect_local(self, ray: Ray) -> Isect | None:
        alpha, beta, gamma = self._corners()
        normal = (beta - alpha).cross(gamma - alpha).normalized()
        denominator = normal.dot(ray.direction)
        if denominator == 0.0:
            return None
        t = (normal.dot(alpha) - normal.dot(ray.position)) / denominator
        if t < RAY_EPSILON:
            return None
        q = ray.at(t)
        a1 = (beta - alpha).cross(q - alpha)
        a2 = (gamma - beta).cross(q - beta)
        a3 = (alpha - gamma).cross(q - gamma)
        if a1.dot(a2) > 0 and a2.dot(a3) > 0 and a3.dot(a1) > 0:
            return Isect(obj=self, t=t, normal=normal)
        return None

    def local_bounding_box(self) -> BoundingBox:
        corners = self._corners()
        return BoundingBox(
            Vec3(*(min(c[a] for c in corners) for a in range(3))),
            Vec3(*(max(c[a] for c in corners) for a in range(3))),
        )