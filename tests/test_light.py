import math

import pytest

from sbtrace.light import DirectionalLight, PointLight
from sbtrace.ray import Isect, Vec3
from sbtrace.scene import RAY_EPSILON, BoundingBox, Geometry, Scene, Transform, translation


class UnitSphere(Geometry):
    def intersect_local(self, ray):
        p, d = ray.position, ray.direction
        b = p.dot(d)
        det = b * b - p.dot(p) + 1.0
        if det < 0:
            return None
        root = math.sqrt(det)
        for t in (-b - root, -b + root):
            if t > RAY_EPSILON:
                return Isect(obj=self, t=t, normal=ray.at(t))
        return None

    def local_bounding_box(self):
        return BoundingBox(Vec3(-1, -1, -1), Vec3(1, 1, 1))


def _blocked_scene(z):
    scene = Scene()
    scene.add_object(UnitSphere(scene, transform=Transform(translation(0, 0, z))))
    return scene


def test_directional_basics():
    light = DirectionalLight(Scene(), Vec3(0, -1, 0), Vec3(1, 0.5, 0.25))
    assert tuple(light.direction_to(Vec3(3, 4, 5))) == pytest.approx((0, 1, 0))
    assert light.distance_attenuation(Vec3(100, 0, 0)) == 1.0
    assert tuple(light.color_at(Vec3())) == pytest.approx((1, 0.5, 0.25))


def test_directional_shadow():
    light = DirectionalLight(_blocked_scene(5), Vec3(0, 0, -1), Vec3(1, 1, 1))
    assert light.shadow_attenuation(Vec3()).is_zero()
    open_light = DirectionalLight(Scene(), Vec3(0, 0, -1), Vec3(1, 1, 1))
    assert tuple(open_light.shadow_attenuation(Vec3())) == pytest.approx((1, 1, 1))


def test_point_direction_is_unit_towards_light():
    light = PointLight(Scene(), Vec3(0, 0, 10), Vec3(1, 1, 1))
    assert tuple(light.direction_to(Vec3())) == pytest.approx((0, 0, 1))


def test_point_color_is_constant():
    light = PointLight(Scene(), Vec3(0, 0, 10), Vec3(0.2, 0.4, 0.6))
    assert tuple(light.color_at(Vec3(7, 8, 9))) == pytest.approx((0.2, 0.4, 0.6))


def test_point_constant_attenuation():
    light = PointLight(Scene(), Vec3(0, 0, 10), Vec3(1, 1, 1), 1.0, 0.0, 0.0)
    assert light.distance_attenuation(Vec3()) == pytest.approx(1.0)


def test_point_quadratic_falloff():
    light = PointLight(Scene(), Vec3(0, 0, 2), Vec3(1, 1, 1))
    assert light.distance_attenuation(Vec3()) == pytest.approx(0.25)


def test_point_attenuation_clamped_at_light():
    light = PointLight(Scene(), Vec3(1, 1, 1), Vec3(1, 1, 1))
    assert light.distance_attenuation(Vec3(1, 1, 1)) == 1.0
    near = PointLight(Scene(), Vec3(0, 0, 0.5), Vec3(1, 1, 1))
    assert near.distance_attenuation(Vec3()) == 1.0


def test_point_shadow():
    light = PointLight(_blocked_scene(5), Vec3(0, 0, 10), Vec3(1, 1, 1))
    assert light.shadow_attenuation(Vec3()).is_zero()
    open_light = PointLight(Scene(), Vec3(0, 0, 10), Vec3(1, 1, 1))
    assert tuple(open_light.shadow_attenuation(Vec3())) == pytest.approx((1, 1, 1))