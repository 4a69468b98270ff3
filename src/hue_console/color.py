"""Color model translation for Hue lights.

Converts a generic RGBA display color into the representations the bridge
accepts for a light:

- HSV16: 16-bit hue, 8-bit saturation and value (``hs`` color mode)
- ColorTempValue: a crude 9-bit temperature code (``ct`` color mode)
- Chromaticity: CIE xy coordinates through a color profile (``xy`` color mode)

All conversions normalize each channel to [0, 1] first and truncate when
quantizing. None of them raise; malformed input is rejected earlier by
:func:`parse_hex_color`.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from .exceptions import ColorFormatError, UnknownProfileError

HUE_MAX = (1 << 16) - 1
CHANNEL_MAX = (1 << 8) - 1
TEMPERATURE_MAX = (1 << 9) - 1

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class RGBAColor:
    """8-bit RGBA color."""

    r: int
    g: int
    b: int
    a: int = CHANNEL_MAX

    def normalized(self) -> tuple[float, float, float, float]:
        """Return the channels scaled to [0, 1]."""
        return (
            self.r / CHANNEL_MAX,
            self.g / CHANNEL_MAX,
            self.b / CHANNEL_MAX,
            self.a / CHANNEL_MAX,
        )

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"


@dataclass(frozen=True)
class HSV16:
    hue: int
    sat: int
    value: int


@dataclass(frozen=True)
class ColorTempValue:
    """Approximate temperature code; not a correlated color temperature."""

    temperature: int
    value: int


@dataclass(frozen=True)
class Chromaticity:
    x: float
    y: float
    value: int


@dataclass(frozen=True)
class ColorProfile:
    """Linear RGB to XYZ transform for an assumed display gamut.

    Attributes:
        name: Preset name (e.g. "wide-gamut")
        matrix: Row-major 3x3 matrix, rows produce X, Y and Z
    """

    name: str
    matrix: tuple[
        tuple[float, float, float],
        tuple[float, float, float],
        tuple[float, float, float],
    ]

    def apply(self, r: float, g: float, b: float) -> tuple[float, float, float]:
        """Multiply the matrix with a linear (r, g, b) vector."""
        x, y, z = (row[0] * r + row[1] * g + row[2] * b for row in self.matrix)
        return x, y, z


SRGB = ColorProfile(
    "srgb",
    (
        (0.412453, 0.35758, 0.180423),
        (0.212671, 0.71516, 0.072169),
        (0.019334, 0.119193, 0.950227),
    ),
)
SRGB_D50 = ColorProfile(
    "srgb-d50",
    (
        (0.4360747, 0.3850649, 0.1430804),
        (0.2225045, 0.7168786, 0.0606169),
        (0.0139322, 0.0971045, 0.7141733),
    ),
)
ADOBE_RGB = ColorProfile(
    "adobe-rgb",
    (
        (0.5767309, 0.1855540, 0.1881852),
        (0.2973769, 0.6273491, 0.0752741),
        (0.019334, 0.119193, 0.950227),
    ),
)
WIDE_GAMUT = ColorProfile(
    "wide-gamut",
    (
        (0.7161046, 0.1009296, 0.1471858),
        (0.2581874, 0.7249378, 0.0168748),
        (0.0000000, 0.0517813, 0.7734287),
    ),
)
WIDE_GAMUT_D50 = ColorProfile(
    "wide-gamut-d50",
    (
        (1.4628067, -0.1840623, -0.2743606),
        (-0.5217933, 1.4472381, 0.0677227),
        (0.0349342, -0.0968930, 1.2884099),
    ),
)

PROFILES: dict[str, ColorProfile] = {
    profile.name: profile
    for profile in (SRGB, SRGB_D50, ADOBE_RGB, WIDE_GAMUT, WIDE_GAMUT_D50)
}

DEFAULT_PROFILE = WIDE_GAMUT


def get_profile(name: str) -> ColorProfile:
    """Look up a color profile preset.

    Args:
        name: Preset name, case-insensitive; "_" and "-" are interchangeable

    Returns:
        The matching ColorProfile

    Raises:
        UnknownProfileError: If no preset has that name
    """
    key = name.strip().lower().replace("_", "-")
    try:
        return PROFILES[key]
    except KeyError:
        raise UnknownProfileError(
            f"unknown color profile '{name}' (choose from {', '.join(PROFILES)})"
        ) from None


def parse_hex_color(text: str) -> RGBAColor:
    """Parse a hex color string.

    Accepts an optional leading "#" followed by 8 (RRGGBBAA), 6 (RRGGBB),
    4 (RGBA) or 3 (RGB) hex digits. Shorthand nibbles are widened by
    multiplying by 17, so "f" becomes 0xff. Alpha defaults to 255.

    Raises:
        ColorFormatError: On any other length or a non-hex digit
    """
    digits = text[1:] if text.startswith("#") else text
    if not _HEX_DIGITS.fullmatch(digits):
        raise ColorFormatError(f"invalid hex color '{text}'")

    if len(digits) in (8, 6):
        channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
    elif len(digits) in (4, 3):
        channels = [int(nibble, 16) * 17 for nibble in digits]
    else:
        raise ColorFormatError(f"invalid hex color '{text}'")

    return RGBAColor(*channels)


def to_hsv(color: RGBAColor) -> HSV16:
    """Convert to 16-bit hue, 8-bit saturation and value.

    The value channel is multiplied by alpha, so a transparent color always
    has value 0. Hue is 0 for grays.
    """
    r, g, b, a = color.normalized()
    value = max(r, g, b)
    minimum = min(r, g, b)
    chroma = value - minimum

    saturation = chroma / value if value != 0.0 else 0.0

    hue = 0.0
    if chroma != 0.0:
        if value == r:
            hue = math.fmod((g - b) / chroma, 6.0)
        if value == g:
            hue = (b - r) / chroma + 2.0
        if value == b:
            hue = (r - g) / chroma + 4.0
        hue *= 60.0
        if hue < 0.0:
            hue += 360.0

    return HSV16(
        hue=int(hue / 360 * HUE_MAX),
        sat=int(saturation * CHANNEL_MAX),
        value=int(value * a * CHANNEL_MAX),
    )


def to_color_temp(color: RGBAColor) -> ColorTempValue:
    """Map the red/blue balance onto a 9-bit temperature code.

    Deliberately crude: ``(r - b + 1) / 2`` scaled to 0..511.
    """
    r, _, b, a = color.normalized()
    temperature = (r - b + 1) / 2
    return ColorTempValue(
        temperature=int(temperature * TEMPERATURE_MAX),
        value=int(a * CHANNEL_MAX),
    )


def _linearize(component: float) -> float:
    if component < 0.04045:
        return component / 12.92
    return ((component + 0.055) / 1.055) ** 2.4


def _limit(n: float) -> float:
    # Upper bound only; negative coordinates pass through unchanged.
    return 1.0 if n > 1.0 else n


def to_xy(color: RGBAColor, profile: ColorProfile = DEFAULT_PROFILE) -> Chromaticity:
    """Convert to CIE xy chromaticity through ``profile``.

    x and y are clamped to at most 1.0 but never raised to 0.0. Black maps
    to (0, 0).
    """
    r, g, b, a = color.normalized()
    big_x, big_y, big_z = (
        _limit(c) for c in profile.apply(_linearize(r), _linearize(g), _linearize(b))
    )

    total = big_x + big_y + big_z
    if total == 0.0:
        x = y = 0.0
    else:
        x = _limit(big_x / total)
        y = _limit(big_y / total)

    value = int(big_z * a * CHANNEL_MAX)
    return Chromaticity(x=x, y=y, value=max(0, value))
