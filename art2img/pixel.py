# art2img/pixel.py
from __future__ import annotations

"""
Per-pixel colour derivation.

Stages, in order:
  1. remap      : index -> tile remap[index] when lookup is requested and present
  2. palette    : optional shade table, then base RGB; alpha 255
  3. transparency: index 0 while premultiplying, or Build-engine magenta -> (0,0,0,0)
  4. premultiply: c -> (c*a + 127) // 255

Whole tiles go through build_color_table(): the pipeline is evaluated once per
palette index, and the resulting (256, 4) table is applied with fancy indexing.
"""

from typing import Optional

import numpy as np

from .constants import (
    MAGENTA_MAX_GREEN,
    MAGENTA_MIN_BLUE,
    MAGENTA_MIN_RED,
    PALETTE_SIZE,
    RGBA_CHANNELS,
)
from .core_types import TRANSPARENT_BLACK, ColorTable, RGBATuple, U8Array
from .palette import PaletteLike


def is_build_engine_magenta(r: int, g: int, b: int) -> bool:
    """R>=250, B>=250, G<=5. Tolerant of slightly off palette entries."""
    return r >= MAGENTA_MIN_RED and b >= MAGENTA_MIN_BLUE and g <= MAGENTA_MAX_GREEN


def premultiply_channel(value: int, alpha: int) -> int:
    return (value * alpha + 127) // 255


def check_shade_index(palette: PaletteLike, shade_index: Optional[int]) -> None:
    """Raise ValueError if shade_index names a table the palette does not have."""
    if shade_index is None or not palette.has_shade_tables:
        return
    if not 0 <= shade_index < palette.shade_table_count:
        raise ValueError(
            f"shade index {shade_index} out of range "
            f"(palette has {palette.shade_table_count} shade tables)"
        )


def convert_pixel(
    pixel_index: int,
    palette: PaletteLike,
    remap: Optional[U8Array],
    shade_index: Optional[int],
    apply_lookup: bool,
    fix_transparency: bool = False,
    premultiply: bool = False,
) -> RGBATuple:
    index = pixel_index & 0xFF

    if apply_lookup and remap is not None and index < len(remap):
        index = int(remap[index])

    colour_index = index
    if shade_index is not None and palette.has_shade_tables:
        check_shade_index(palette, shade_index)
        colour_index = int(palette.shade_tables[shade_index, index])

    r, g, b = (int(c) for c in palette.rgb[colour_index])
    a = 255

    if fix_transparency:
        if (index == 0 and premultiply) or is_build_engine_magenta(r, g, b):
            return TRANSPARENT_BLACK

    if premultiply:
        r = premultiply_channel(r, a)
        g = premultiply_channel(g, a)
        b = premultiply_channel(b, a)

    return (r, g, b, a)


def build_color_table(
    palette: PaletteLike,
    remap: Optional[U8Array],
    shade_index: Optional[int],
    apply_lookup: bool,
    fix_transparency: bool = False,
    premultiply: bool = False,
) -> ColorTable:
    """(256, 4) uint8 table mapping every palette index through convert_pixel."""
    check_shade_index(palette, shade_index)
    table = np.zeros((PALETTE_SIZE, RGBA_CHANNELS), dtype=np.uint8)
    for i in range(PALETTE_SIZE):
        table[i] = convert_pixel(
            i,
            palette,
            remap,
            shade_index,
            apply_lookup,
            fix_transparency=fix_transparency,
            premultiply=premultiply,
        )
    return table


__all__ = [
    "is_build_engine_magenta",
    "premultiply_channel",
    "check_shade_index",
    "convert_pixel",
    "build_color_table",
]
