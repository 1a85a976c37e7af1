# art2img/core_types.py
from __future__ import annotations

"""
Core type aliases, option bundles, the RGBA image container and small helpers.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .constants import RGBA_CHANNELS

# Basic aliases

RGBTuple = Tuple[int, int, int]
RGBATuple = Tuple[int, int, int, int]

U8Array = NDArray[np.uint8]  # flat byte buffers (pixels, remaps, tables)
U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA
U8Mask = NDArray[np.uint8]  # (H, W) alpha plane
U8Indices = NDArray[np.uint8]  # (H, W) palette indices
ColorTable = NDArray[np.uint8]  # (256, 4) index -> RGBA

TRANSPARENT_BLACK: RGBATuple = (0, 0, 0, 0)

# Option bundles


@dataclass(frozen=True)
class ConversionOptions:
    """
    Per-pixel conversion options.

    apply_lookup     : substitute indices through the tile's remap table first.
    shade_index      : shade table to apply; None uses the base colours.
    fix_transparency : magenta (and index 0 when premultiplying) -> transparent.
    premultiply_alpha: scale RGB by alpha per pixel.

    Only apply_lookup and shade_index select colours. fix_transparency
    defaults to True, so ConversionOptions() already makes magenta transparent;
    pass fix_transparency=False to get the raw palette colours.
    """

    apply_lookup: bool = False
    shade_index: Optional[int] = None
    fix_transparency: bool = True
    premultiply_alpha: bool = False


@dataclass(frozen=True)
class PostprocessOptions:
    """Whole-image passes, applied in the order listed."""

    apply_transparency_fix: bool = True
    sanitize_matte: bool = False
    premultiply_alpha: bool = False


# Image container


@dataclass
class RgbaImage:
    """Owned row-major RGBA buffer. Invariant: len(data) == stride * height."""

    width: int
    height: int
    data: bytearray = field(default_factory=bytearray)
    stride: int = 0

    def __post_init__(self) -> None:
        if self.stride == 0:
            self.stride = self.width * RGBA_CHANNELS
        if self.stride < self.width * RGBA_CHANNELS:
            raise ValueError("stride must be at least width * 4")
        expected = self.stride * self.height
        if not isinstance(self.data, bytearray):
            self.data = bytearray(self.data)
        if not self.data:
            self.data = bytearray(expected)
        elif len(self.data) != expected:
            raise ValueError(
                f"RGBA buffer holds {len(self.data)} bytes, expected {expected}"
            )

    @classmethod
    def from_array(cls, rgba: U8Image) -> "RgbaImage":
        """Copy an (H, W, 4) uint8 array into a tightly packed image."""
        arr = np.ascontiguousarray(rgba, dtype=np.uint8)
        if arr.ndim != 3 or arr.shape[2] != RGBA_CHANNELS:
            raise ValueError(f"expected (H, W, 4) array, got {arr.shape}")
        height, width = int(arr.shape[0]), int(arr.shape[1])
        return cls(width, height, bytearray(arr.tobytes()))

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def as_array(self) -> U8Image:
        """Writable (H, W, 4) view sharing memory with data (padding excluded)."""
        flat = np.frombuffer(self.data, dtype=np.uint8)
        rows = flat.reshape(self.height, self.stride)
        return rows[:, : self.width * RGBA_CHANNELS].reshape(
            self.height, self.width, RGBA_CHANNELS
        )

    def pixel(self, x: int, y: int) -> RGBATuple:
        off = y * self.stride + x * RGBA_CHANNELS
        r, g, b, a = self.data[off : off + RGBA_CHANNELS]
        return (r, g, b, a)

    def packed(self) -> bytes:
        """Rows without stride padding."""
        if self.stride == self.width * RGBA_CHANNELS:
            return bytes(self.data)
        return self.as_array().tobytes()


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> str:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


__all__ = [
    "RGBTuple",
    "RGBATuple",
    "U8Array",
    "U8Image",
    "U8Mask",
    "U8Indices",
    "ColorTable",
    "TRANSPARENT_BLACK",
    "ConversionOptions",
    "PostprocessOptions",
    "RgbaImage",
    "rgb_to_hex",
]
