#!/usr/bin/env python3
"""
SVG Color Normalizer

This module canonicalizes CSS color values (hex, rgb(), rgba(), hsl(), named
colors) to a single uppercase #RRGGBB form used as the comparison key
everywhere else.
"""

import random
import re
import string

from PIL import ImageColor


# rgba()/hsla() with a fractional alpha are legal CSS but Pillow only accepts
# integer alpha, so the alpha channel is dropped before parsing.
ALPHA_FUNCTION_PATTERN = re.compile(
    r'^(rgb|hsl)a\(\s*([^,()]+),\s*([^,()]+),\s*([^,()]+),\s*([0-9.]+%?)\s*\)$',
    re.IGNORECASE
)

TRANSPARENT_KEYWORDS = ('transparent',)

ID_ALPHABET = string.ascii_lowercase + string.digits


def _strip_alpha(color: str) -> str:
    """Rewrite rgba()/hsla() into rgb()/hsl() so the opaque channels can be parsed."""
    match = ALPHA_FUNCTION_PATTERN.match(color)
    if not match:
        return color
    func, first, second, third, _alpha = match.groups()
    return f"{func.lower()}({first.strip()},{second.strip()},{third.strip()})"


def parse_color(color: str):
    """
    Parse a CSS color string into an (r, g, b) tuple.

    Args:
        color: Color string in any syntax understood by the CSS color parser

    Returns:
        Tuple of three ints in 0..255, or None if the string is not a color
    """
    if not color or not isinstance(color, str):
        return None

    value = color.strip()
    if not value or value.lower() in TRANSPARENT_KEYWORDS:
        return None

    try:
        rgb = ImageColor.getrgb(_strip_alpha(value))
    except ValueError:
        return None

    return tuple(max(0, min(255, int(channel))) for channel in rgb[:3])


def is_valid_color(color: str) -> bool:
    """Return True if the color parser accepts the string as a legal color."""
    return parse_color(color) is not None


def normalize_color(color: str) -> str:
    """
    Normalize a color value to canonical uppercase #RRGGBB.

    Alpha information is discarded. Unparseable input is returned stripped
    and lowercased; callers check is_valid_color() before trusting it.
    """
    rgb = parse_color(color)
    if rgb is None:
        return (color or '').strip().lower()
    return "#{:02X}{:02X}{:02X}".format(*rgb)


def generate_id(length: int = 9) -> str:
    """Generate a short opaque identifier for color options and palettes."""
    return ''.join(random.choice(ID_ALPHABET) for _ in range(length))
