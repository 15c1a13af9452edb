"""
Box color palette.

Plain lookup tables shared by the world (which tags each box with a hex color)
and the graphics engine (which needs RGB tuples). No rendering code here.
"""

from typing import Dict, List, Tuple

# Hex colors boxes are drawn from, in the order the picker indexes them
PALETTE: List[int] = [
    0xff0000, 0x00ff00, 0x0000ff, 0xffff00,
    0xff00ff, 0x00ffff, 0xff8000, 0x8000ff,
    0x00ff80, 0xff0080, 0x80ff00, 0x0080ff,
]

COLOR_NAMES: Dict[int, str] = {
    0xff0000: 'Red',
    0x00ff00: 'Green',
    0x0000ff: 'Blue',
    0xffff00: 'Yellow',
    0xff00ff: 'Magenta',
    0x00ffff: 'Cyan',
    0xff8000: 'Orange',
    0x8000ff: 'Purple',
    0x00ff80: 'Mint',
    0xff0080: 'Pink',
    0x80ff00: 'Lime',
    0x0080ff: 'Sky Blue',
}

UNKNOWN_COLOR = 'Unknown'


def color_name(hex_color: int) -> str:
    """Human-readable name for a palette color ('Unknown' if not in the table)."""
    return COLOR_NAMES.get(hex_color, UNKNOWN_COLOR)


def hex_to_rgb(hex_color: int) -> Tuple[int, int, int]:
    """Split 0xRRGGBB into an (r, g, b) tuple for pygame."""
    return ((hex_color >> 16) & 0xff, (hex_color >> 8) & 0xff, hex_color & 0xff)
