"""Recursive ray tracer rendering a scene into an RGB buffer."""

from __future__ import annotations

import math
from typing import TextIO

from .parser import Parser
from .ray import Ray, RayType, Vec3
from .scene import RAY_EPSILON, Scene
from .tokens import TokenStream


class RayTracer:
    """Traces rays through a loaded scene, recursing up to ``depth`` bounces.

    The image lives in ``buffer`` as ``width * height`` RGB byte triples,
    bottom row first.
    """

    def __init__(self, depth: int = 0):
        self.depth = depth
        self.scene: Scene | None = None
        self.width = 256
        self.height = 256
        self.buffer = bytearray()
        self.ready = False

    @property
    def scene_loaded(self) -> bool:
        return self.scene is not None

    def trace(self, x: float, y: float) -> Vec3:
        """Colour seen through normalized window coordinates ``(x, y)``."""
        self.scene.intersect_cache.clear()
        ray = self.scene.camera.ray_through(x, y)
        return self.trace_ray(ray, Vec3(1.0, 1.0, 1.0), 0).clamped()

    def trace_ray(self, ray: Ray, thresh: Vec3, depth: int) -> Vec3:
        """Colour carried back along ``ray``; black when it hits nothing."""
        hit = self.scene.intersect(ray)
        if hit is None:
            return Vec3(0.0, 0.0, 0.0)

        material = hit.get_material()
        result = material.shade(self.scene, ray, hit)
        if depth >= self.depth:
            return result

        kr = material.kr(hit)
        kt = material.kt(hit)
        d = ray.direction.normalized()
        norm = hit.normal
        n1, n2 = 1.0, material.index(hit)
        if d.dot(hit.normal) > 0.0:
            norm = -norm
            n1, n2 = n2, n1
        nm = n2 / n1

        din = ray.direction
        reflected = (2.0 * (norm * ((-din).dot(norm) / (din.length() * norm.length()))) + din).normalized()

        if not kr.is_zero():
            bounce = Ray(ray.at(hit.t - RAY_EPSILON), reflected, RayType.REFLECTION)
            result = result + kr.prod(self.trace_ray(bounce, thresh, depth + 1))

        if not kt.is_zero():
            dd = -(hit.normal.dot(d)) * hit.normal + d
            under = nm * nm - dd.length2()
            if dd.length() > nm or under <= 0.0:
                bounce = Ray(ray.at(hit.t - RAY_EPSILON), reflected, RayType.REFLECTION)
            else:
                transmitted = (-norm + dd / math.sqrt(under)).normalized()
                bounce = Ray(ray.at(hit.t + RAY_EPSILON), transmitted, RayType.REFRACTION)
            result = result + kt.prod(self.trace_ray(bounce, thresh, depth + 1))
        return result

    def aspect_ratio(self) -> float:
        """Width over height of the camera, or 1 with no scene loaded."""
        return self.scene.camera.aspect_ratio if self.scene_loaded else 1.0

    def trace_setup(self, width: int, height: int) -> None:
        """Size the buffer for a ``width`` by ``height`` image and clear it."""
        self.width = width
        self.height = height
        self.buffer = bytearray(width * height * 3)
        self.ready = True

    def trace_pixel(self, i: int, j: int) -> None:
        """Trace pixel column ``i`` of row ``j`` into the buffer."""
        if not self.scene_loaded:
            return
        colour = self.trace(i / self.width, j / self.height)
        offset = (i + j * self.width) * 3
        self.buffer[offset:offset + 3] = bytes(int(255.0 * c) for c in colour)

    def load_scene(self, tokens: TokenStream | TextIO | str, base_path: str = ".") -> Scene:
        """Parse a scene description and make it the current scene.

        ``tokens`` may be a token stream, a text stream or the text itself.
        Parse and texture errors propagate; the previous scene is dropped first.
        """
        if not isinstance(tokens, TokenStream):
            tokens = TokenStream(tokens)
        self.scene = None
        scene = Parser(tokens, base_path).parse_scene()
        scene.init_bounds()
        self.scene = scene
        return scene