"""Vectors, rays and ray/surface intersection records."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any, Iterator


class TraceError(Exception):
    """Base class for errors raised while loading or tracing a scene."""

    @property
    def message(self) -> str:
        return str(self)


@dataclass(frozen=True, slots=True)
class Vec3:
    """An immutable three-component vector of floats."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __len__(self) -> int:
        return 3

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def dot(self, other: Vec3) -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        """Vector product."""
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def prod(self, other: Vec3) -> Vec3:
        """Component-wise product."""
        return Vec3(self.x * other.x, self.y * other.y, self.z * other.z)

    def length2(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length2())

    def normalized(self) -> Vec3:
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length == 0.0:
            return self
        return self / length

    def clamped(self) -> Vec3:
        """Each component limited to the range [0, 1]."""
        return Vec3(*(min(max(c, 0.0), 1.0) for c in self))

    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0 and self.z == 0.0


class RayType(enum.Enum):
    VISIBILITY = enum.auto()
    REFLECTION = enum.auto()
    REFRACTION = enum.auto()
    SHADOW = enum.auto()


@dataclass(frozen=True)
class Ray:
    """A half-line starting at ``position`` heading along ``direction``."""

    position: Vec3
    direction: Vec3
    kind: RayType = RayType.VISIBILITY

    def at(self, t: float) -> Vec3:
        """Point reached after travelling ``t`` along the direction."""
        return self.position + self.direction * t


@dataclass
class Isect:
    """Where a ray hit a surface, and what it hit."""

    obj: Any = None
    t: float = 0.0
    normal: Vec3 = field(default_factory=Vec3)
    uv: tuple[float, float] = (0.0, 0.0)
    material: Any = None

    def get_material(self) -> Any:
        """The material set on the hit itself, else that of the object hit."""
        if self.material is not None:
            return self.material
        return self.obj.material