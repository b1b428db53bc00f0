"""Reading and writing RGB images stored bottom row first."""

from __future__ import annotations

import numpy as np
from PIL import Image


def load_image(filename: str) -> np.ndarray:
    """Load an image as a ``(height, width, 3)`` uint8 array, bottom row first.

    Raises OSError when the file is missing or cannot be decoded.
    """
    with Image.open(filename) as image:
        pixels = np.asarray(image.convert("RGB"), dtype=np.uint8)
    return np.ascontiguousarray(pixels[::-1])


def save_image(filename: str, buffer, width: int, height: int, kind: str, quality: int = 95) -> None:
    """Write a bottom-row-first RGB buffer as ``.jpg`` or ``.png``.

    ``kind`` selects the format; any other kind writes nothing.
    Raises ValueError when the buffer does not hold ``width * height`` pixels.
    """
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        pixels = np.frombuffer(buffer, dtype=np.uint8)
    else:
        pixels = np.asarray(buffer, dtype=np.uint8)
    pixels = pixels.reshape(height, width, 3)
    if kind not in (".jpg", ".png"):
        return
    image = Image.fromarray(np.ascontiguousarray(pixels[::-1]))
    if kind == ".jpg":
        image.save(filename, format="JPEG", quality=quality)
    else:
        image.save(filename, format="PNG")