# art2img/layout.py
from __future__ import annotations

"""
Column-major tile storage to row-major access.

ART stores x as the outer loop: pixel (x, y) lives at x * height + y.
"""

from typing import Iterator

import numpy as np

from .art import TileView
from .core_types import U8Array, U8Indices
from .errors import Art2ImgError, ErrorKind


def column_major_to_row_major(tile: TileView) -> U8Indices:
    """(H, W) uint8 index plane. Empty tiles give a (H, W) array with no elements."""
    if not tile.has_pixels:
        return np.zeros((tile.height, tile.width), dtype=np.uint8)
    return np.ascontiguousarray(tile.pixels.reshape(tile.width, tile.height).T)


def get_pixel_column_major(tile: TileView, x: int, y: int) -> int:
    if not (0 <= x < tile.width and 0 <= y < tile.height):
        raise Art2ImgError(
            ErrorKind.CONVERSION_FAILURE,
            f"Pixel ({x}, {y}) outside {tile.width}x{tile.height} tile",
        )
    return int(tile.pixels[x * tile.height + y])


def iter_rows(tile: TileView) -> Iterator[U8Array]:
    """Yield each row y as a (W,) uint8 array, top to bottom."""
    if not tile.has_pixels:
        return
    columns = tile.pixels.reshape(tile.width, tile.height)
    for y in range(tile.height):
        yield columns[:, y].copy()


__all__ = ["column_major_to_row_major", "get_pixel_column_major", "iter_rows"]
