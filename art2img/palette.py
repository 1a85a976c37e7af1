# art2img/palette.py
from __future__ import annotations

"""
PALETTE.DAT decoding.

Layout:
  bytes 0..767   : 256 RGB triplets, 6-bit components (0..63)
  bytes 768..769 : u16 LE shade table count
  then           : count * 256 bytes of shade tables
  then           : optional 65536-byte translucency table

Exports:
  Palette, PaletteView
  decode_palette(data) -> Palette
  load_palette(path)   -> Palette
  view_palette(palette) -> PaletteView
  scale_6bit_to_8bit(value) -> int
"""

from dataclasses import dataclass
from typing import Union

import numpy as np

from .binary_reader import Buffer, read_u16_le
from .constants import (
    COLOR_COMPONENTS,
    MAX_SHADE_TABLES,
    PALETTE_COMPONENT_MAX,
    PALETTE_DATA_SIZE,
    PALETTE_MIN_SIZE,
    PALETTE_SIZE,
    SHADE_COUNT_SIZE,
    SHADE_TABLE_SIZE,
    TRANSLUCENT_TABLE_SIZE,
)
from .core_types import RGBTuple, U8Array
from .errors import Art2ImgError, ErrorKind
from .image_io import PathLike, read_binary_file


def scale_6bit_to_8bit(value: int) -> int:
    """Rounded 6-bit -> 8-bit scale. 0 -> 0 and 63 -> 255 exactly."""
    return (value * 255 + 31) // PALETTE_COMPONENT_MAX


def scale_6bit_array(values: np.ndarray) -> U8Array:
    """Vectorised scale_6bit_to_8bit. Out-of-range inputs are masked to 6 bits."""
    v = np.asarray(values, dtype=np.uint16) & PALETTE_COMPONENT_MAX
    return ((v * 255 + 31) // PALETTE_COMPONENT_MAX).astype(np.uint8)


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Palette:
    """
    Decoded palette. All arrays are read-only.

    raw          : uint8 [256,3] 6-bit values as stored
    rgb          : uint8 [256,3] scaled to 8-bit
    shade_tables : uint8 [count,256] palette index remaps per shade level
    translucent  : uint8 [65536] blend table, zeros when absent from the file
    """

    raw: U8Array
    rgb: U8Array
    shade_tables: U8Array
    translucent: U8Array

    @property
    def shade_table_count(self) -> int:
        return int(self.shade_tables.shape[0])

    @property
    def has_shade_tables(self) -> bool:
        return self.shade_table_count > 0

    @property
    def has_translucent_map(self) -> bool:
        return bool(np.any(self.translucent))

    def entry_rgb(self, index: int) -> RGBTuple:
        r, g, b = self.rgb[index & 0xFF].tolist()
        return (r, g, b)

    def shaded_entry_rgb(self, shade: int, index: int) -> RGBTuple:
        """Colour of index after shade table `shade`; base colour if shade is out of range."""
        if not 0 <= shade < self.shade_table_count:
            return self.entry_rgb(index)
        return self.entry_rgb(int(self.shade_tables[shade, index & 0xFF]))


@dataclass(frozen=True, eq=False)
class PaletteView:
    """Borrowed view of a Palette's colour and shade tables."""

    rgb: U8Array
    shade_tables: U8Array

    @property
    def shade_table_count(self) -> int:
        return int(self.shade_tables.shape[0])

    @property
    def has_shade_tables(self) -> bool:
        return self.shade_table_count > 0


PaletteLike = Union[Palette, PaletteView]


def view_palette(palette: PaletteLike) -> PaletteView:
    if isinstance(palette, PaletteView):
        return palette
    return PaletteView(rgb=palette.rgb, shade_tables=palette.shade_tables)


def decode_palette(data: Buffer) -> Palette:
    """Parse PALETTE.DAT bytes. Raises Art2ImgError(INVALID_PALETTE) on malformed input."""
    size = len(data)
    if size < PALETTE_MIN_SIZE:
        raise Art2ImgError(
            ErrorKind.INVALID_PALETTE,
            f"Palette data too small: {size} bytes, expected at least {PALETTE_MIN_SIZE} bytes",
        )

    buf = np.frombuffer(bytes(data), dtype=np.uint8)
    raw = buf[:PALETTE_DATA_SIZE].reshape(PALETTE_SIZE, COLOR_COMPONENTS).copy()

    offset = PALETTE_DATA_SIZE
    shade_count = read_u16_le(data, offset)
    offset += SHADE_COUNT_SIZE
    if shade_count > MAX_SHADE_TABLES:
        raise Art2ImgError(
            ErrorKind.INVALID_PALETTE, f"Invalid shade table count: {shade_count}"
        )

    shade_bytes = shade_count * SHADE_TABLE_SIZE
    if size < offset + shade_bytes:
        raise Art2ImgError(
            ErrorKind.INVALID_PALETTE,
            f"Palette data too small for shade tables: {size} bytes, "
            f"need at least {offset + shade_bytes} bytes",
        )
    shades = buf[offset : offset + shade_bytes].reshape(shade_count, SHADE_TABLE_SIZE).copy()
    offset += shade_bytes

    if size >= offset + TRANSLUCENT_TABLE_SIZE:
        translucent = buf[offset : offset + TRANSLUCENT_TABLE_SIZE].copy()
    else:
        translucent = np.zeros(TRANSLUCENT_TABLE_SIZE, dtype=np.uint8)

    return Palette(
        raw=_readonly(raw),
        rgb=_readonly(scale_6bit_array(raw)),
        shade_tables=_readonly(shades),
        translucent=_readonly(translucent),
    )


def load_palette(path: PathLike) -> Palette:
    """Read and decode a palette file. I/O errors surface as IO_FAILURE."""
    return decode_palette(read_binary_file(path))


__all__ = [
    "Palette",
    "PaletteView",
    "PaletteLike",
    "scale_6bit_to_8bit",
    "scale_6bit_array",
    "view_palette",
    "decode_palette",
    "load_palette",
]
