"""Surface materials, texture maps and Phong shading."""

from __future__ import annotations

from dataclasses import dataclass, field, fields

from .imageio import load_image
from .ray import Isect, Ray, TraceError, Vec3


class TextureMapError(TraceError):
    """Raised when a texture image cannot be loaded."""


class TextureMap:
    """An RGB image looked up by texture coordinates."""

    def __init__(self, filename: str):
        try:
            self.data = load_image(filename)
        except (OSError, ValueError) as exc:
            raise TextureMapError(f"Unable to load texture map '{filename}'.") from exc
        self.filename = filename
        self.height, self.width = self.data.shape[:2]

    def mapped_value(self, coord) -> Vec3:
        """Colour at texture coordinates ``(u, v)`` in the unit square."""
        return self.pixel_at(int(coord[0] * self.width), int(coord[1] * self.height))

    def pixel_at(self, x: int, y: int) -> Vec3:
        """Colour of pixel ``(x, y)``, clamped to the last column and row."""
        x = min(x, self.width - 1)
        y = min(y, self.height - 1)
        r, g, b = (int(c) for c in self.data[y, x])
        return Vec3(r / 255.0, g / 255.0, b / 255.0)


class MaterialParameter:
    """A material coefficient: a constant colour or a texture lookup."""

    __slots__ = ("constant", "texture")

    def __init__(self, value=0.0):
        self.texture: TextureMap | None = None
        if isinstance(value, TextureMap):
            self.texture = value
            self.constant = Vec3()
        elif isinstance(value, Vec3):
            self.constant = value
        else:
            scalar = float(value)
            self.constant = Vec3(scalar, scalar, scalar)

    @property
    def mapped(self) -> bool:
        return self.texture is not None

    def value(self, isect: Isect) -> Vec3:
        if self.texture is not None:
            return self.texture.mapped_value(isect.uv)
        return self.constant

    def intensity_value(self, isect: Isect) -> float:
        """Luminance of the value at the hit."""
        r, g, b = self.value(isect)
        return 0.299 * r + 0.587 * g + 0.114 * b

    def __repr__(self) -> str:
        if self.texture is not None:
            return f"MaterialParameter(texture={self.texture.filename!r})"
        return f"MaterialParameter({self.constant!r})"


def _as_parameter(value) -> MaterialParameter:
    return value if isinstance(value, MaterialParameter) else MaterialParameter(value)


@dataclass
class Material:
    """Phong material; every coefficient may be constant or texture mapped."""

    emissive: MaterialParameter = field(default_factory=MaterialParameter)
    ambient: MaterialParameter = field(default_factory=MaterialParameter)
    specular: MaterialParameter = field(default_factory=MaterialParameter)
    diffuse: MaterialParameter = field(default_factory=MaterialParameter)
    reflective: MaterialParameter = field(default_factory=MaterialParameter)
    transmissive: MaterialParameter = field(default_factory=MaterialParameter)
    specular_exponent: MaterialParameter = field(default_factory=MaterialParameter)
    refractive_index: MaterialParameter = field(default_factory=lambda: MaterialParameter(1.0))

    def __post_init__(self) -> None:
        for f in fields(self):
            setattr(self, f.name, _as_parameter(getattr(self, f.name)))

    def ke(self, isect: Isect) -> Vec3:
        return self.emissive.value(isect)

    def ka(self, isect: Isect) -> Vec3:
        return self.ambient.value(isect)

    def ks(self, isect: Isect) -> Vec3:
        return self.specular.value(isect)

    def kd(self, isect: Isect) -> Vec3:
        return self.diffuse.value(isect)

    def kr(self, isect: Isect) -> Vec3:
        return self.reflective.value(isect)

    def kt(self, isect: Isect) -> Vec3:
        return self.transmissive.value(isect)

    def index(self, isect: Isect) -> float:
        return self.refractive_index.intensity_value(isect)

    def shininess(self, isect: Isect) -> float:
        """Phong exponent; texture-mapped values are scaled to 0..128."""
        value = self.specular_exponent.intensity_value(isect)
        return 128.0 * value if self.specular_exponent.mapped else value

    def shade(self, scene, ray: Ray, isect: Isect) -> Vec3:
        """Colour of the hit under the scene's ambient light and lights."""
        lum = self.ke(isect) + self.ka(isect).prod(scene.ambient)
        point = ray.at(isect.t)
        n = isect.normal.normalized()
        v = (-ray.direction).normalized()
        for light in scene.lights:
            ld = light.direction_to(point).normalized()
            rj = (2.0 * (n * (ld.dot(n) / (ld.length() * n.length()))) - ld).normalized()
            color = light.color_at(point)
            atten = light.distance_attenuation(point) * light.shadow_attenuation(point)
            diffuse = self.kd(isect) * max(n.dot(ld), 0.0)
            specular = self.ks(isect) * (max(v.dot(rj), 0.0) ** self.shininess(isect))
            lum = lum + atten.prod(color.prod(diffuse + specular))
        return lum