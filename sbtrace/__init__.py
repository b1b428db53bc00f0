"""Recursive ray tracer for SBT-raytracer scene descriptions."""

__version__ = "0.1.0"

__all__ = [
    "buffer",
    "camera",
    "exprparser",
    "getopt",
    "imageio",
    "light",
    "material",
    "parser",
    "ray",
    "ruler",
    "scene",
    "shapes",
    "tokens",
    "tracer",
    "trimesh",
]