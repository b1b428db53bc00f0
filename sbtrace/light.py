"""Directional and point lights."""

from __future__ import annotations

from .ray import Ray, RayType, Vec3

_LIT = Vec3(1.0, 1.0, 1.0)
_DARK = Vec3(0.0, 0.0, 0.0)


class DirectionalLight:
    """Light arriving everywhere from one direction, without falloff."""

    def __init__(self, scene, orientation: Vec3, color: Vec3):
        self.scene = scene
        self.color = color
        self.orientation = orientation

    def distance_attenuation(self, point: Vec3) -> float:
        return 1.0

    def shadow_attenuation(self, point: Vec3) -> Vec3:
        ray = Ray(point, self.direction_to(point).normalized(), RayType.SHADOW)
        return _DARK if self.scene.intersect(ray) is not None else _LIT

    def color_at(self, point: Vec3) -> Vec3:
        """Colour of the light; it does not depend on the point."""
        return self.color

    def direction_to(self, point: Vec3) -> Vec3:
        """Direction from the point towards the light."""
        return -self.orientation


class PointLight:
    """Light radiating from a position with polynomial distance falloff."""

    def __init__(
        self,
        scene,
        position: Vec3,
        color: Vec3,
        constant: float = 0.0,
        linear: float = 0.0,
        quadratic: float = 1.0,
    ):
        self.scene = scene
        self.color = color
        self.position = position
        self.constant = constant
        self.linear = linear
        self.quadratic = quadratic

    def distance_attenuation(self, point: Vec3) -> float:
        d = (self.position - point).length()
        denominator = self.constant + self.linear * d + self.quadratic * d * d
        if denominator == 0.0:
            return 1.0
        return min(max(1.0 / denominator, 0.0), 1.0)

    def shadow_attenuation(self, point: Vec3) -> Vec3:
        ray = Ray(point, self.direction_to(point).normalized(), RayType.SHADOW)
        distance = (self.position - point).length()
        hit = self.scene.intersect(ray)
        if hit is not None and (hit.normal - point).length() < distance:
            return _DARK
        return _LIT

    def color_at(self, point: Vec3) -> Vec3:
        """Colour of the light; it does not depend on the point."""
        return self.color

    def direction_to(self, point: Vec3) -> Vec3:
        """Unit direction from the point towards the light."""
        return (self.position - point).normalized()