"""Tick positions and labels for a linear ruler."""

from __future__ import annotations

import math

_AVERAGE_MARK_SPACING = 15
_MAX_LABEL_LENGTH = 255


def format_decimal(magnitude: int, power: int) -> str:
    """Write ``magnitude * 10**power`` in plain decimal notation."""
    digits = str(int(magnitude))
    if power >= 0:
        text = digits + "0" * power
    elif -power >= len(digits):
        text = "0." + "0" * (-power - len(digits)) + digits
    else:
        split = len(digits) + power
        text = digits[:split] + "." + digits[split:]
    return text[:_MAX_LABEL_LENGTH]


def ruler_marks(range_min: float, range_max: float, window_length: int) -> list[tuple[int, str]]:
    """Return ``(pixel position, label)`` for each long mark on a ruler.

    Marks are a power of ten apart, spaced about 15 pixels, and continue
    until one falls at or beyond the end of the window.
    """
    if range_min >= range_max:
        raise ValueError("ruler range must have min < max")
    mark_count = window_length // _AVERAGE_MARK_SPACING
    if mark_count <= 0 or window_length <= 0:
        return []

    span = range_max - range_min
    power = math.ceil(math.log10(span / mark_count))
    step = 10.0 ** power

    index = math.ceil(range_min / step)
    marks = []
    while True:
        position = int((index * step - range_min) / span * window_length + 0.5)
        marks.append((position, format_decimal(index, power)))
        index += 1
        if position >= window_length:
            return marks