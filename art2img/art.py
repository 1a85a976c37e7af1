# art2img/art.py
from __future__ import annotations

"""
Build-engine ART container decoding.

File layout (little-endian):
  header  : version u32 (=1), numtiles u32 (legacy, unused), tile_start u32, tile_end u32
  tables  : widths[n] u16, heights[n] u16, picanm[n] u32   with n = tile_end - tile_start + 1
  payload : width*height palette indices per tile, column-major, in tile order

The archive owns two arenas (pixels, remaps). TileViews are read-only numpy
slices into them, so a view stays valid as long as the arena array is alive.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, List, Optional

import numpy as np

from .binary_reader import Buffer, read_u16_le, read_u32_le
from .constants import (
    ART_HEADER_SIZE,
    ART_MAX_TILES,
    ART_MIN_SIZE,
    ART_TILE_ENTRY_SIZE,
    ART_VERSION,
    LOOKUP_TABLE_SIZE,
    MAX_TILE_DIMENSION,
    PICANM_FLAGS_MASK,
    PICANM_FLAGS_SHIFT,
    PICANM_FRAMES_MASK,
    PICANM_SPEED_MASK,
    PICANM_SPEED_SHIFT,
    PICANM_TYPE_MASK,
    PICANM_TYPE_SHIFT,
    PICANM_X_OFFSET_SHIFT,
    PICANM_Y_OFFSET_SHIFT,
)
from .core_types import U8Array
from .errors import Art2ImgError, ErrorKind, format_tile_error
from .image_io import PathLike, discover_lookup_file, read_binary_file

_EMPTY = np.zeros(0, dtype=np.uint8)
_EMPTY.setflags(write=False)


class PaletteHint(IntEnum):
    """Which sidecar files the I/O layer should look for next to an ART file."""

    NONE = 0
    SIDECAR = 1
    LOOKUP = 2
    BOTH = 3

    @property
    def wants_palette(self) -> bool:
        return self in (PaletteHint.SIDECAR, PaletteHint.BOTH)

    @property
    def wants_lookup(self) -> bool:
        return self in (PaletteHint.LOOKUP, PaletteHint.BOTH)


class AnimationType(IntEnum):
    NONE = 0
    OSCILLATING = 1
    FORWARD = 2
    BACKWARD = 3


_ANIMATION_NAMES = {
    AnimationType.NONE: "none",
    AnimationType.OSCILLATING: "oscillation",
    AnimationType.FORWARD: "forward",
    AnimationType.BACKWARD: "backward",
}


def animation_type_name(kind: AnimationType) -> str:
    return _ANIMATION_NAMES.get(kind, "unknown")


def _to_signed8(value: int) -> int:
    value &= 0xFF
    return value - 256 if value >= 128 else value


@dataclass(frozen=True)
class TileAnimation:
    """Unpacked picanm word."""

    frame_count: int = 0
    type: AnimationType = AnimationType.NONE
    x_center_offset: int = 0
    y_center_offset: int = 0
    speed: int = 0
    other_flags: int = 0

    @classmethod
    def from_picanm(cls, picanm: int) -> "TileAnimation":
        picanm &= 0xFFFFFFFF
        return cls(
            frame_count=picanm & PICANM_FRAMES_MASK,
            type=AnimationType((picanm >> PICANM_TYPE_SHIFT) & PICANM_TYPE_MASK),
            x_center_offset=_to_signed8(picanm >> PICANM_X_OFFSET_SHIFT),
            y_center_offset=_to_signed8(picanm >> PICANM_Y_OFFSET_SHIFT),
            speed=(picanm >> PICANM_SPEED_SHIFT) & PICANM_SPEED_MASK,
            other_flags=(picanm >> PICANM_FLAGS_SHIFT) & PICANM_FLAGS_MASK,
        )

    def to_picanm(self) -> int:
        value = self.frame_count & PICANM_FRAMES_MASK
        value |= (int(self.type) & PICANM_TYPE_MASK) << PICANM_TYPE_SHIFT
        value |= (self.y_center_offset & 0xFF) << PICANM_Y_OFFSET_SHIFT
        value |= (self.x_center_offset & 0xFF) << PICANM_X_OFFSET_SHIFT
        value |= (self.speed & PICANM_SPEED_MASK) << PICANM_SPEED_SHIFT
        value |= (self.other_flags & PICANM_FLAGS_MASK) << PICANM_FLAGS_SHIFT
        return value

    @property
    def is_animated(self) -> bool:
        return (
            self.frame_count != 0
            or self.type != AnimationType.NONE
            or self.speed != 0
        )


@dataclass(frozen=True, eq=False)
class TileView:
    """
    Borrowed view of one tile.

    pixels : uint8 [width*height] column-major palette indices
    remap  : uint8 [<=256] optional lookup table, empty when absent
    """

    width: int
    height: int
    pixels: U8Array = field(default_factory=lambda: _EMPTY)
    remap: U8Array = field(default_factory=lambda: _EMPTY)
    animation: TileAnimation = field(default_factory=TileAnimation)
    tile_id: int = 0

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 and self.height == 0

    @property
    def is_valid(self) -> bool:
        if self.width == 0 or self.height == 0:
            return self.is_empty or int(self.pixels.size) == 0
        return (
            self.width <= MAX_TILE_DIMENSION
            and self.height <= MAX_TILE_DIMENSION
            and int(self.pixels.size) == self.pixel_count
        )

    @property
    def has_pixels(self) -> bool:
        return self.width > 0 and self.height > 0 and int(self.pixels.size) > 0

    @property
    def has_remap(self) -> bool:
        return int(self.remap.size) > 0


@dataclass(frozen=True, eq=False)
class ArtArchive:
    """Decoded ART file. Owns the pixel and remap arenas its TileViews borrow from."""

    version: int
    tile_start: int
    tile_end: int
    pixels: U8Array
    remaps: U8Array
    tiles: List[TileView]
    tile_ids: List[int]

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[TileView]:
        return iter(self.tiles)

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    def get_tile(self, index: int) -> Optional[TileView]:
        if 0 <= index < len(self.tiles):
            return self.tiles[index]
        return None

    def get_tile_by_id(self, tile_id: int) -> Optional[TileView]:
        return self.get_tile(tile_id - self.tile_start)


def tile_count(archive: ArtArchive) -> int:
    return archive.tile_count


def get_tile(archive: ArtArchive, index: int) -> Optional[TileView]:
    return archive.get_tile(index)


def get_tile_by_id(archive: ArtArchive, tile_id: int) -> Optional[TileView]:
    return archive.get_tile_by_id(tile_id)


def _invalid(message: str) -> Art2ImgError:
    return Art2ImgError(ErrorKind.INVALID_ART, message)


def _valid_dimensions(width: int, height: int) -> bool:
    if width == 0 or height == 0:
        return True
    return width <= MAX_TILE_DIMENSION and height <= MAX_TILE_DIMENSION


def decode_art(
    data: Buffer,
    hint: PaletteHint = PaletteHint.NONE,
    remap: Optional[Buffer] = None,
) -> ArtArchive:
    """
    Parse an ART container.

    hint is for the caller's I/O layer and does not change decoding.
    remap, when given, is split into consecutive 256-byte tables, one per
    tile index (empty tiles included) in order. Raises Art2ImgError(INVALID_ART).
    """
    size = len(data)
    if size < ART_MIN_SIZE:
        raise _invalid(
            f"ART file too small: {size} bytes, expected at least {ART_MIN_SIZE} bytes"
        )

    version = read_u32_le(data, 0)
    numtiles = read_u32_le(data, 4)
    tile_start = read_u32_le(data, 8)
    tile_end = read_u32_le(data, 12)

    if (
        version != ART_VERSION
        or tile_start > tile_end
        or numtiles > ART_MAX_TILES
        or tile_end - tile_start + 1 > ART_MAX_TILES
    ):
        raise _invalid(
            f"Invalid ART header: version={version}, tile_range={tile_start}-{tile_end}"
        )

    count = tile_end - tile_start + 1
    tables_end = ART_HEADER_SIZE + count * ART_TILE_ENTRY_SIZE
    if size < tables_end:
        raise _invalid(
            f"ART file too small for tile arrays: {size} bytes, need at least {tables_end} bytes"
        )

    offset = ART_HEADER_SIZE
    widths = [read_u16_le(data, offset + 2 * i) for i in range(count)]
    offset += 2 * count
    heights = [read_u16_le(data, offset + 2 * i) for i in range(count)]
    offset += 2 * count
    picanms = [read_u32_le(data, offset + 4 * i) for i in range(count)]
    offset += 4 * count

    for i, (w, h) in enumerate(zip(widths, heights)):
        if not _valid_dimensions(w, h):
            raise _invalid(format_tile_error(f"Invalid tile dimensions {w}x{h}", i))

    total_pixels = sum(w * h for w, h in zip(widths, heights))
    if size - offset < total_pixels:
        raise _invalid(
            f"ART file too small for pixel data: {size} bytes, "
            f"need at least {offset + total_pixels} bytes"
        )

    pixels = np.frombuffer(bytes(data[offset : offset + total_pixels]), dtype=np.uint8)
    remaps = (
        np.frombuffer(bytes(remap), dtype=np.uint8) if remap else _EMPTY
    )

    tiles: List[TileView] = []
    tile_ids: List[int] = []
    pixel_offset = 0
    remap_offset = 0
    for i in range(count):
        w, h = widths[i], heights[i]
        n = w * h
        tile_pixels = _EMPTY
        tile_remap = _EMPTY
        if n > 0:
            tile_pixels = pixels[pixel_offset : pixel_offset + n]
        if remap_offset < remaps.size:
            take = min(LOOKUP_TABLE_SIZE, int(remaps.size) - remap_offset)
            tile_remap = remaps[remap_offset : remap_offset + take]
            remap_offset += take

        tile_id = tile_start + i
        tiles.append(
            TileView(
                width=w,
                height=h,
                pixels=tile_pixels,
                remap=tile_remap,
                animation=TileAnimation.from_picanm(picanms[i]),
                tile_id=tile_id,
            )
        )
        tile_ids.append(tile_id)
        pixel_offset += n

    return ArtArchive(
        version=version,
        tile_start=tile_start,
        tile_end=tile_end,
        pixels=pixels,
        remaps=remaps,
        tiles=tiles,
        tile_ids=tile_ids,
    )


def load_lookup_data(data: Buffer) -> bytes:
    """Validate LOOKUP.DAT bytes (at least one 256-byte table)."""
    if len(data) < LOOKUP_TABLE_SIZE:
        raise _invalid(
            f"LOOKUP.DAT data must be at least {LOOKUP_TABLE_SIZE} bytes, got {len(data)}"
        )
    return bytes(data)


def load_art(path: PathLike, hint: PaletteHint = PaletteHint.NONE) -> ArtArchive:
    """Read and decode an ART file; pulls in LOOKUP.DAT when the hint asks for it."""
    data = read_binary_file(path)
    remap: Optional[bytes] = None
    if hint.wants_lookup:
        lookup_path = discover_lookup_file(path)
        if lookup_path is not None:
            remap = load_lookup_data(read_binary_file(lookup_path))
    return decode_art(data, hint, remap=remap)


__all__ = [
    "PaletteHint",
    "AnimationType",
    "animation_type_name",
    "TileAnimation",
    "TileView",
    "ArtArchive",
    "tile_count",
    "get_tile",
    "get_tile_by_id",
    "decode_art",
    "load_lookup_data",
    "load_art",
]
