"""Color math for the color wheel.

All functions are pure. Colors are RGB triples of integers 0-255; the wheel
is the HSV disc with value fixed at 1 (hue is the angle, saturation the
distance from the centre).
"""

import math
import random
from typing import NamedTuple, Optional


MAX_DISTANCE = math.sqrt(3 * 255 * 255)
# Margin between the canvas edge and the wheel, in pixels
WHEEL_MARGIN = 2


class Color(NamedTuple):
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.r, self.g, self.b)

    def to_dict(self):
        return {'r': self.r, 'g': self.g, 'b': self.b, 'hex': self.hex}

    @classmethod
    def from_dict(cls, data) -> 'Color':
        """Build a color from a ``{r, g, b}`` mapping, rejecting bad channels."""
        channels = []
        for name in ('r', 'g', 'b'):
            value = data.get(name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f'Channel {name!r} must be an integer 0-255')
            channels.append(value)
        return cls(*channels)


class HSV(NamedTuple):
    h: float
    s: float
    v: float


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _channel(value: float) -> int:
    return max(0, min(255, round_half_up(value * 255)))


def hsv_to_rgb(h: float, s: float, v: float) -> Color:
    h = h % 360
    c = v * s
    x = c * (1 - abs(((h / 60) % 2) - 1))
    m = v - c

    if h < 60:
        r, g, b = c, x, 0
    elif h < 120:
        r, g, b = x, c, 0
    elif h < 180:
        r, g, b = 0, c, x
    elif h < 240:
        r, g, b = 0, x, c
    elif h < 300:
        r, g, b = x, 0, c
    else:
        r, g, b = c, 0, x

    return Color(_channel(r + m), _channel(g + m), _channel(b + m))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    for value in (r, g, b):
        if not 0 <= value <= 255:
            raise ValueError(f'RGB channel out of range: {value}')
    return f'#{r:02x}{g:02x}{b:02x}'


def calculate_color_similarity(color1: Color, color2: Color) -> float:
    """Similarity percentage (0-100) from the Euclidean distance in RGB space."""
    distance = math.sqrt(
        (color2.r - color1.r) ** 2
        + (color2.g - color1.g) ** 2
        + (color2.b - color1.b) ** 2
    )
    similarity = 100 - (distance / MAX_DISTANCE) * 100
    return max(0.0, min(100.0, similarity))


def generate_random_color(rng=random) -> Color:
    hue = rng.random() * 360
    saturation = rng.random()
    return hsv_to_rgb(hue, saturation, 1)


def coords_to_hsv(x: float, y: float, radius: float) -> Optional[HSV]:
    """Map an offset from the wheel centre to HSV, or None outside the disc."""
    if radius <= 0:
        raise ValueError(f'Wheel radius must be positive: {radius}')
    distance = math.sqrt(x * x + y * y)
    if distance > radius:
        return None
    hue = math.degrees(math.atan2(y, x))
    if hue < 0:
        hue += 360
    return HSV(hue, distance / radius, 1.0)


def pixel_to_color(px: float, py: float, size: float) -> Optional[Color]:
    """Color under a click at canvas pixel (px, py) on a size x size wheel."""
    radius = size / 2 - WHEEL_MARGIN
    if radius <= 0:
        raise ValueError(f'Wheel size too small: {size}')
    hsv = coords_to_hsv(px - size / 2, py - size / 2, radius)
    if hsv is None:
        return None
    return hsv_to_rgb(*hsv)
