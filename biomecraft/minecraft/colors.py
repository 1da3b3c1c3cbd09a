"""
Color helpers - Minecraft stores biome colors as packed RGB integers.
"""

import re

MAX_COLOR = 0xFFFFFF

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
_LOOSE_HEX_PATTERN = re.compile(r"^(?:#|0[xX])?([0-9A-Fa-f]{6})$")


def pack_rgb(r: int, g: int, b: int) -> int:
    """Pack three 0-255 channels into a single integer: (R << 16) | (G << 8) | B"""
    for name, channel in (("red", r), ("green", g), ("blue", b)):
        if not isinstance(channel, int) or isinstance(channel, bool):
            raise ValueError(f"{name} channel must be an integer, got {channel!r}")
        if not 0 <= channel <= 255:
            raise ValueError(f"{name} channel must be between 0 and 255, got {channel}")
    return (r << 16) | (g << 8) | b


def unpack_rgb(value: int) -> tuple[int, int, int]:
    """Split a packed color back into (r, g, b)"""
    if not 0 <= value <= MAX_COLOR:
        raise ValueError(f"Color must be between 0 and {MAX_COLOR}, got {value}")
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def is_hex_color(value: object) -> bool:
    """True for strings in strict #RRGGBB form"""
    return isinstance(value, str) and bool(HEX_COLOR_PATTERN.match(value))


def hex_to_int(value: str) -> int:
    """Convert '#RRGGBB', 'RRGGBB' or '0xRRGGBB' to a packed integer"""
    match = _LOOSE_HEX_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Color must be in #RRGGBB format, got {value!r}")
    return int(match.group(1), 16)


def int_to_hex(value: int) -> str:
    """Convert a packed integer to lowercase '#rrggbb'"""
    r, g, b = unpack_rgb(value)
    return f"#{r:02x}{g:02x}{b:02x}"


def normalize_color(value: object) -> int:
    """
    Coerce an AI-supplied color to a packed integer.

    Accepts packed integers, integral floats, hex strings and decimal digit
    strings. Raises ValueError for anything else or anything out of range.
    """
    if isinstance(value, bool):
        raise ValueError(f"Color must be a number or hex string, got {value!r}")

    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Color must be an integer, got {value}")
        value = int(value)

    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            value = int(text)
        else:
            return hex_to_int(text)

    if not isinstance(value, int):
        raise ValueError(f"Color must be a number or hex string, got {value!r}")

    if not 0 <= value <= MAX_COLOR:
        raise ValueError(f"Color must be between 0 and {MAX_COLOR}, got {value}")
    return value
