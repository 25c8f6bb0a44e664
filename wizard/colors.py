"""
Color helpers for WiZ bulbs
"""

import re
from types import MappingProxyType
from typing import Mapping, Tuple

from .errors import InvalidInputError

RGB = Tuple[int, int, int]

HEX_PATTERN = re.compile(r"^[0-9A-Fa-f]{6}$")

NAMED_COLORS: Mapping[str, RGB] = MappingProxyType({
    "red": (255, 0, 0),
    "orange": (255, 128, 0),
    "yellow": (255, 255, 0),
    "green": (0, 255, 0),
    "cyan": (0, 255, 255),
    "blue": (0, 0, 255),
    "purple": (128, 0, 255),
    "magenta": (255, 0, 255),
    "pink": (255, 64, 128),
    "white": (255, 255, 255),
})

# White temperature presets in Kelvin
TEMPERATURE_PRESETS: Mapping[str, int] = MappingProxyType({
    "warm": 2700,
    "neutral": 4000,
    "cool": 6500,
})


def is_hex_color(value: str) -> bool:
    return bool(HEX_PATTERN.match(value.strip().lstrip("#")))


def parse_hex(value: str) -> RGB:
    """
    Parse a 6 digit hex color (leading '#' allowed) into an RGB triple

    Raises:
        InvalidInputError: If the value is not exactly 6 hex digits
    """
    digits = value.strip().lstrip("#")
    if not HEX_PATTERN.match(digits):
        raise InvalidInputError(f"invalid hex color '{value}', expected 6 hex digits")
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def named_color(name: str) -> RGB:
    """
    Look up a color by name (case-insensitive)

    Raises:
        InvalidInputError: If the name is not in NAMED_COLORS
    """
    try:
        return NAMED_COLORS[name.strip().lower()]
    except KeyError:
        known = ", ".join(NAMED_COLORS)
        raise InvalidInputError(f"unknown color '{name}', choose one of: {known}")
