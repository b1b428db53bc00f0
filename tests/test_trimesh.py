import math

import pytest

from sbtrace.material import Material
from sbtrace.ray import Ray, Vec3
from sbtrace.scene import Scene
from sbtrace.trimesh import Trimesh


@pytest.fixture
def scene():
    return Scene()


def make_mesh(scene, vertices):
    mesh = Trimesh(scene, Material(), scene.transform_root)
    for vertex in vertices:
        mesh.add_vertex(vertex)
    return mesh


TRIANGLE = [Vec3(0.0, 0.0, 0.0), Vec3(1.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0)]


def test_add_face_registers_with_scene(scene):
    mesh = make_mesh(scene, TRIANGLE)
    face = mesh.add_face(0, 1, 2)
    assert mesh.faces == [face]
    assert scene.objects == [face]
    assert face.transform is mesh.transform
    assert [face[0], face[1], face[2]] == [0, 1, 2]


def test_face_material_is_a_copy(scene):
    mesh = make_mesh(scene, TRIANGLE)
    face = mesh.add_face(0, 1, 2)
    assert face.material is not mesh.material
    assert face.material == mesh.material


def test_add_face_with_missing_vertex(scene):
    mesh = make_mesh(scene, TRIANGLE)
    with pytest.raises(IndexError):
        mesh.add_face(0, 1, 3)
    assert scene.objects == []
    assert mesh.faces == []


def test_face_intersection(scene):
    mesh = make_mesh(scene, TRIANGLE)
    face = mesh.add_face(0, 1, 2)
    ray = Ray(Vec3(0.25, 0.25, 5.0), Vec3(0.0, 0.0, -1.0))
    hit = face.intersect_local(ray)
    assert hit.obj is face
    assert math.isclose(ray.at(hit.t).z, 0.0, abs_tol=1e-12)
    assert math.isclose(hit.normal.length(), 1.0)
    for edge in (TRIANGLE[1] - TRIANGLE[0], TRIANGLE[2] - TRIANGLE[0]):
        assert abs(hit.normal.dot(edge)) < 1e-12


def test_face_misses(scene):
    mesh = make_mesh(scene, TRIANGLE)
    face = mesh.add_face(0, 1, 2)
    assert face.intersect_local(Ray(Vec3(2.0, 2.0, 5.0), Vec3(0.0, 0.0, -1.0))) is None
    assert face.intersect_local(Ray(Vec3(0.25, 0.25, 5.0), Vec3(0.0, 0.0, 1.0))) is None
    assert face.intersect_local(Ray(Vec3(0.0, 0.0, 1.0), Vec3(1.0, 0.0, 0.0))) is None


def test_mesh_itself_is_never_hit(scene):
    mesh = make_mesh(scene, TRIANGLE)
    mesh.add_face(0, 1, 2)
    assert mesh.intersect_local(Ray(Vec3(0.25, 0.25, 5.0), Vec3(0.0, 0.0, -1.0))) is None
    assert mesh.bounding_box() is None


def test_face_bounding_box(scene):
    mesh = make_mesh(scene, TRIANGLE)
    box = mesh.add_face(0, 1, 2).local_bounding_box()
    assert box.min == Vec3(0.0, 0.0, 0.0)
    assert box.max == Vec3(1.0, 1.0, 0.0)


def test_double_check_counts(scene):
    mesh = make_mesh(scene, TRIANGLE)
    assert mesh.double_check() is None
    mesh.add_material(Material())
    with pytest.raises(ValueError, match="materials"):
        mesh.double_check()


def test_double_check_normals(scene):
    mesh = make_mesh(scene, TRIANGLE)
    mesh.add_normal(Vec3(0.0, 0.0, 1.0))
    with pytest.raises(ValueError, match="normals"):
        mesh.double_check()


def test_generate_normals_coplanar(scene):
    vertices = TRIANGLE + [Vec3(1.0, 1.0, 0.0), Vec3(5.0, 5.0, 5.0)]
    mesh = make_mesh(scene, vertices)
    mesh.add_face(0, 1, 2)
    mesh.add_face(1, 3, 2)
    mesh.generate_normals()
    assert len(mesh.normals) == len(vertices)
    used = mesh.normals[:4]
    assert all(n == used[0] for n in used)
    assert math.isclose(used[0].length(), 1.0)
    assert mesh.normals[4].is_zero()
    mesh.double_check()


def test_generate_normals_keeps_existing_entries(scene):
    mesh = make_mesh(scene, TRIANGLE)
    existing = Vec3(0.0, 1.0, 0.0)
    mesh.add_normal(existing)
    mesh.add_face(0, 1, 2)
    mesh.generate_normals()
    assert mesh.normals[0] == existing + mesh.normals[1]
    assert mesh.normals[1] == mesh.normals[2]