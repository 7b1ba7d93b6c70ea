#!/usr/bin/env python3
"""
Color value types and conversions between RGB, HSL, HSV/HSB, CIE XYZ and CIE L*a*b*.

RGB is the pivot representation: HSL and HSV convert to and from RGB directly,
Lab only goes through XYZ. The RGB/XYZ/Lab conversions work on single colors and
on numpy arrays shaped (..., 3).
"""

import math
import re
from typing import NamedTuple

import numpy as np


class Rgb(NamedTuple):
    """RGB color, channels nominally between 0 and 255."""
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    def __str__(self):
        return "rgb({},{},{})".format(*(_round_half_up(c) for c in self))


class Hsl(NamedTuple):
    """HSL color, hue in degrees, saturation and lightness between 0 and 1."""
    h: float = 0.0
    s: float = 0.0
    l: float = 0.0

    def __str__(self):
        return "hsl({},{}%,{}%)".format(
            _round_half_up(self.h),
            _round_half_up(self.s * 100),
            _round_half_up(self.l * 100),
        )


class Hsv(NamedTuple):
    """HSV color, hue in degrees, saturation and value between 0 and 1.

    HSB is the same model; ``b`` reads the value channel.
    """
    h: float = 0.0
    s: float = 0.0
    v: float = 0.0

    @property
    def b(self):
        return self.v

    def __str__(self):
        return str(hsv_to_hsl(self))


Hsb = Hsv


def hsb(h=0.0, s=0.0, b=0.0):
    """Build an HSB color (an Hsv with the value given as brightness)."""
    return Hsv(h, s, b)


class Xyz(NamedTuple):
    """CIE XYZ color relative to the D65 reference white, Y between 0 and 100."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class Lab(NamedTuple):
    """CIE L*a*b* color, lightness between 0 and 100."""
    l: float = 0.0
    a: float = 0.0
    b: float = 0.0


COLOR_TYPES = (Rgb, Hsl, Hsv, Xyz, Lab)

# Observer = 2°, Illuminant = D65
WHITE_REFERENCE = Xyz(95.047, 100.000, 108.883)
EPSILON = 0.008856  # 216/24389
KAPPA = 903.3  # 24389/27

_XYZ_TO_RGB = np.array([
    [3.2406, -1.5372, -0.4986],
    [-0.9689, 1.8758, 0.0415],
    [0.0557, -0.2040, 1.0570],
])
_RGB_TO_XYZ = np.array([
    [0.4124, 0.3576, 0.1805],
    [0.2126, 0.7152, 0.0722],
    [0.0193, 0.1192, 0.9505],
])
_SRGB_LINEAR_LIMIT = 0.0031308
_SRGB_ENCODED_LIMIT = 0.04045

_HEX_RE = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)
_NOTATION_RE = re.compile(r"^([a-zA-Z]+)\(([0-9.,;\s+-]+)\)$")


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def _as_triples(values):
    return np.asarray(values, dtype=float)


def _wrap(kind, array):
    """Return a color of ``kind`` for a single triple, the array otherwise."""
    if array.ndim == 1:
        return kind(*(float(c) for c in array))
    return array


def rgb_to_hex(rgb):
    """Convert RGB to a lowercase ``#rrggbb`` string.

    Channels are rounded, then clamped to [0, 255] so the result is always a
    well-formed hex code.
    """
    return "#" + "".join(f"{min(max(_round_half_up(c), 0), 255):02x}" for c in rgb)


def hex_to_rgb(hex_code):
    """Convert ``#rrggbb`` or ``rrggbb`` to RGB; None when the shape is wrong."""
    match = _HEX_RE.fullmatch(hex_code) if isinstance(hex_code, str) else None
    if not match:
        return None
    return Rgb(*(float(int(part, 16)) for part in match.groups()))


def rgb_is_valid(rgb):
    """Check that every channel is in [0, 256).

    Works on a single color (returns bool) or on an (..., 3) array (returns a mask).
    """
    values = _as_triples(rgb)
    valid = np.all((values >= 0) & (values < 256), axis=-1)
    if values.ndim == 1:
        return bool(valid)
    return valid


def rgb_clamp(rgb):
    """Clamp each channel to [0, 255], returning a new color."""
    return Rgb(*(min(max(c, 0), 255) for c in rgb))


def rgb_complement(rgb):
    return Rgb(255 - rgb[0], 255 - rgb[1], 255 - rgb[2])


def _hue_from_rgb(r, g, b, max_val, delta):
    if max_val == r:
        h = (g - b) / delta + (6 if g < b else 0)
    elif max_val == g:
        h = (b - r) / delta + 2
    else:
        h = (r - g) / delta + 4
    return h * 60


def rgb_to_hsl(rgb):
    """Convert RGB to HSL; gray colors get hue and saturation 0."""
    r, g, b = (c / 255.0 for c in rgb)
    max_val = max(r, g, b)
    min_val = min(r, g, b)
    l = (max_val + min_val) / 2

    if max_val == min_val:
        return Hsl(0.0, 0.0, l)  # achromatic

    d = max_val - min_val
    s = d / (2 - max_val - min_val) if l > 0.5 else d / (max_val + min_val)
    return Hsl(_hue_from_rgb(r, g, b, max_val, d), s, l)


def _hue_to_channel(p, q, t):
    t %= 1.0
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(hsl):
    """Convert HSL to RGB."""
    h, s, l = hsl
    if s == 0:
        return Rgb(l * 255.0, l * 255.0, l * 255.0)

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    hue = (h % 360) / 360.0
    return Rgb(
        _hue_to_channel(p, q, hue + 1 / 3) * 255.0,
        _hue_to_channel(p, q, hue) * 255.0,
        _hue_to_channel(p, q, hue - 1 / 3) * 255.0,
    )


def rgb_to_hsv(rgb):
    """Convert RGB to HSV; hue is 0 for grays, saturation is 0 for black."""
    r, g, b = (c / 255.0 for c in rgb)
    max_val = max(r, g, b)
    min_val = min(r, g, b)
    d = max_val - min_val
    s = 0.0 if max_val == 0 else d / max_val

    if max_val == min_val:
        h = 0.0  # achromatic
    else:
        h = _hue_from_rgb(r, g, b, max_val, d)
    return Hsv(h, s, max_val)


def hsv_to_rgb(hsv):
    """Convert HSV to RGB using the six 60° hue sectors."""
    h, s, v = hsv
    sector = math.floor(h / 60.0) % 6
    f = h / 60.0 - math.floor(h / 60.0)

    v = v * 255.0
    p = v * (1 - s)
    q = v * (1 - f * s)
    t = v * (1 - (1 - f) * s)

    if sector == 0:
        return Rgb(v, t, p)
    if sector == 1:
        return Rgb(q, v, p)
    if sector == 2:
        return Rgb(p, v, t)
    if sector == 3:
        return Rgb(p, q, v)
    if sector == 4:
        return Rgb(t, p, v)
    return Rgb(v, p, q)


def hsv_to_hsl(hsv):
    """Convert HSV to HSL without going through RGB."""
    h, s, v = hsv
    l = v * (2 - s) / 2
    denom = 1 - abs(2 * l - 1)
    s_l = 0.0 if denom == 0 else v * s / denom
    return Hsl(h, s_l, l)


def xyz_to_rgb(xyz):
    """Convert XYZ to RGB with the sRGB (D65) matrix and transfer function."""
    linear = (_as_triples(xyz) / 100.0) @ _XYZ_TO_RGB.T
    encoded = np.where(
        linear > _SRGB_LINEAR_LIMIT,
        1.055 * np.power(np.maximum(linear, _SRGB_LINEAR_LIMIT), 1 / 2.4) - 0.055,
        12.92 * linear,
    )
    return _wrap(Rgb, encoded * 255.0)


def rgb_to_xyz(rgb):
    """Convert RGB to XYZ (scaled so the reference white has Y = 100)."""
    encoded = _as_triples(rgb) / 255.0
    linear = np.where(
        encoded > _SRGB_ENCODED_LIMIT,
        np.power((np.maximum(encoded, _SRGB_ENCODED_LIMIT) + 0.055) / 1.055, 2.4),
        encoded / 12.92,
    ) * 100.0
    return _wrap(Xyz, linear @ _RGB_TO_XYZ.T)


def lab_to_xyz(lab):
    """Convert Lab to XYZ relative to WHITE_REFERENCE."""
    values = _as_triples(lab)
    l, a, b = values[..., 0], values[..., 1], values[..., 2]

    y = (l + 16.0) / 116.0
    x = a / 500.0 + y
    z = y - b / 200.0
    x3 = x ** 3
    z3 = z ** 3

    white = WHITE_REFERENCE
    xyz = np.stack([
        white.x * np.where(x3 > EPSILON, x3, (x - 16.0 / 116.0) / 7.787),
        white.y * np.where(l > KAPPA * EPSILON, y ** 3, l / KAPPA),
        white.z * np.where(z3 > EPSILON, z3, (z - 16.0 / 116.0) / 7.787),
    ], axis=-1)
    return _wrap(Xyz, xyz)


def _pivot_xyz(n):
    return np.where(n > EPSILON, np.cbrt(n), (KAPPA * n + 16) / 116)


def xyz_to_lab(xyz):
    """Convert XYZ to Lab; lightness never goes below 0."""
    values = _as_triples(xyz) / np.asarray(WHITE_REFERENCE)
    x = _pivot_xyz(values[..., 0])
    y = _pivot_xyz(values[..., 1])
    z = _pivot_xyz(values[..., 2])

    lab = np.stack([
        np.maximum(0.0, 116 * y - 16),
        500 * (x - y),
        200 * (y - z),
    ], axis=-1)
    return _wrap(Lab, lab)


def lab_to_rgb(lab):
    return xyz_to_rgb(lab_to_xyz(lab))


def rgb_to_lab(rgb):
    return xyz_to_lab(rgb_to_xyz(rgb))


def rgb_is_valid_from(color):
    """Check whether a color would be a valid RGB one.

    Color values of any type go through ``convert``; bare arrays shaped (..., 3)
    are read as Lab.
    """
    if isinstance(color, COLOR_TYPES):
        return rgb_is_valid(convert(color, Rgb))
    return rgb_is_valid(lab_to_rgb(color))


_DIRECT = {
    (Rgb, Hsl): rgb_to_hsl,
    (Hsl, Rgb): hsl_to_rgb,
    (Rgb, Hsv): rgb_to_hsv,
    (Hsv, Rgb): hsv_to_rgb,
    (Hsv, Hsl): hsv_to_hsl,
    (Rgb, Xyz): rgb_to_xyz,
    (Xyz, Rgb): xyz_to_rgb,
    (Xyz, Lab): xyz_to_lab,
    (Lab, Xyz): lab_to_xyz,
    (Rgb, Lab): rgb_to_lab,
    (Lab, Rgb): lab_to_rgb,
}


def convert(color, target):
    """Convert ``color`` to the ``target`` color type.

    Uses a direct conversion when one exists and goes through RGB otherwise.
    """
    if target not in COLOR_TYPES:
        raise ValueError(f"Unknown color type: {target!r}")
    source = type(color)
    if source not in COLOR_TYPES:
        raise ValueError(f"Not a color value: {color!r}")
    if source is target:
        return color

    direct = _DIRECT.get((source, target))
    if direct is not None:
        return direct(color)
    return _DIRECT[(Rgb, target)](_DIRECT[(source, Rgb)](color))


def to_lab(color):
    """Return ``color`` as Lab; plain 3-sequences are read as Lab components."""
    if isinstance(color, COLOR_TYPES):
        return convert(color, Lab)
    l, a, b = color
    return Lab(float(l), float(a), float(b))


_NAMED_TYPES = {
    "rgb": Rgb,
    "hsl": Hsl,
    "hsv": Hsv,
    "hsb": Hsv,
    "xyz": Xyz,
    "lab": Lab,
}


def from_values(kind, text):
    """Build a ``kind`` color from comma-separated numbers; empty text gives zero."""
    if not text or not text.strip():
        return kind()
    return kind(*(float(part) for part in text.split(",")))


def parse_color(text):
    """Parse ``#rrggbb`` or ``name(v1,v2,v3)`` notations.

    Returns None when the text matches neither notation.
    """
    if not isinstance(text, str):
        return None
    text = text.strip()
    rgb = hex_to_rgb(text)
    if rgb is not None:
        return rgb

    match = _NOTATION_RE.match(text)
    if not match:
        return None
    kind = _NAMED_TYPES.get(match.group(1).lower())
    if kind is None:
        return None
    parts = re.split(r"[,;]", match.group(2))
    if len(parts) != 3:
        return None
    try:
        return kind(*(float(p) for p in parts))
    except ValueError:
        return None
