# tests/conftest.py
from __future__ import annotations

import struct
from typing import Iterable, List, Optional, Sequence, Tuple

import pytest

from art2img.palette import Palette, decode_palette

# (width, height, column-major pixel bytes, picanm)
TileSpec = Tuple[int, int, bytes, int]


def palette_bytes(
    rgb6: Optional[Sequence[Tuple[int, int, int]]] = None,
    shade_tables: Optional[Sequence[bytes]] = None,
    translucent: Optional[bytes] = None,
) -> bytes:
    """PALETTE.DAT blob. Default colours: index i -> (i % 64, (i // 4) % 64, 0)."""
    if rgb6 is None:
        rgb6 = [(i % 64, (i // 4) % 64, 0) for i in range(256)]
    out = bytearray()
    for r, g, b in rgb6:
        out += bytes((r, g, b))
    tables = list(shade_tables or [])
    out += struct.pack("<H", len(tables))
    for t in tables:
        out += t
    if translucent is not None:
        out += translucent
    return bytes(out)


def art_bytes(tiles: Iterable[TileSpec], tile_start: int = 0) -> bytes:
    """ART blob with a 16-byte header, tile tables and column-major payloads."""
    tiles = list(tiles)
    n = len(tiles)
    out = bytearray(struct.pack("<IIII", 1, n, tile_start, tile_start + n - 1))
    for w, _, _, _ in tiles:
        out += struct.pack("<H", w)
    for _, h, _, _ in tiles:
        out += struct.pack("<H", h)
    for _, _, _, picanm in tiles:
        out += struct.pack("<I", picanm)
    for _, _, pixels, _ in tiles:
        out += pixels
    return bytes(out)


def column_major(rows: List[List[int]]) -> bytes:
    """Row lists (top to bottom) -> column-major bytes as stored in ART files."""
    height = len(rows)
    width = len(rows[0]) if rows else 0
    return bytes(rows[y][x] for x in range(width) for y in range(height))


@pytest.fixture
def magenta_palette() -> Palette:
    """Default colours with index 255 as Build magenta and index 1 pure white."""
    rgb6 = [(i % 64, (i // 4) % 64, 0) for i in range(256)]
    rgb6[1] = (63, 63, 63)
    rgb6[255] = (63, 0, 63)
    return decode_palette(palette_bytes(rgb6))


@pytest.fixture
def shaded_palette() -> Palette:
    """Two shade tables: identity and 'everything -> index 1'."""
    rgb6 = [(i % 64, (i // 4) % 64, 0) for i in range(256)]
    rgb6[1] = (63, 63, 63)
    identity = bytes(range(256))
    flat = bytes([1] * 256)
    return decode_palette(palette_bytes(rgb6, shade_tables=[identity, flat]))
