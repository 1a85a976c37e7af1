# art2img/convert.py
from __future__ import annotations

"""
Tile -> RGBA conversion.

convert_to_rgba() resolves every palette index once through the pixel
pipeline (see pixel.build_color_table) and maps the row-major index plane
through that table. Post-processing stays a separate, explicit step.
"""

from typing import Optional

from .art import TileView
from .constants import PALETTE_SIZE
from .core_types import ConversionOptions, PostprocessOptions, RgbaImage
from .errors import Art2ImgError, ErrorKind, format_tile_error
from .layout import column_major_to_row_major
from .palette import PaletteLike
from .pixel import build_color_table
from .postprocess import postprocess


def convert_to_rgba(
    tile: TileView,
    palette: PaletteLike,
    options: Optional[ConversionOptions] = None,
) -> RgbaImage:
    """
    Convert a tile into a straight-alpha (or premultiplied) row-major RGBA image.

    Raises:
      Art2ImgError(CONVERSION_FAILURE) for tiles whose pixel count does not
        match their dimensions (a tile with a zero dimension gives an empty image)
      Art2ImgError(INVALID_PALETTE) when the palette has no colour data
      ValueError for a shade index the palette does not provide
    """
    opts = options or ConversionOptions()

    if not tile.is_valid:
        raise Art2ImgError(
            ErrorKind.CONVERSION_FAILURE,
            format_tile_error(
                f"Invalid tile for conversion ({tile.width}x{tile.height}, "
                f"{int(tile.pixels.size)} pixels)",
                tile.tile_id,
            ),
        )
    if palette.rgb.shape[0] < PALETTE_SIZE:
        raise Art2ImgError(
            ErrorKind.INVALID_PALETTE, "Palette is missing colour data"
        )
    if tile.width == 0 or tile.height == 0:
        return RgbaImage(tile.width, tile.height)

    table = build_color_table(
        palette,
        tile.remap if tile.has_remap else None,
        opts.shade_index,
        opts.apply_lookup,
        fix_transparency=opts.fix_transparency,
        premultiply=opts.premultiply_alpha,
    )
    indices = column_major_to_row_major(tile)
    return RgbaImage.from_array(table[indices])


def tile_to_rgba(
    tile: TileView,
    palette: PaletteLike,
    conversion: Optional[ConversionOptions] = None,
    post: Optional[PostprocessOptions] = None,
) -> RgbaImage:
    """convert_to_rgba() followed by postprocess()."""
    image = convert_to_rgba(tile, palette, conversion)
    postprocess(image, post)
    return image


__all__ = ["convert_to_rgba", "tile_to_rgba"]
