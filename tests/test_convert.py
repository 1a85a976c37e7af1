import numpy as np
import pytest

from art2img.art import TileView, decode_art
from art2img.convert import convert_to_rgba, tile_to_rgba
from art2img.core_types import ConversionOptions, PostprocessOptions
from art2img.errors import Art2ImgError, ErrorKind
from art2img.palette import PaletteView, view_palette

from conftest import art_bytes, column_major

WHITE = (255, 255, 255, 255)


def _tile(rows, remap=None):
    height, width = len(rows), len(rows[0])
    archive = decode_art(art_bytes([(width, height, column_major(rows), 0)]), remap=remap)
    return archive.get_tile(0)


def test_row_major_output(magenta_palette):
    tile = _tile([[1, 255, 1], [1, 1, 1]])
    img = convert_to_rgba(tile, magenta_palette)
    assert (img.width, img.height, img.stride) == (3, 2, 12)
    assert len(img.data) == 3 * 2 * 4
    assert img.pixel(0, 0) == WHITE
    assert img.pixel(1, 0) == (0, 0, 0, 0)
    assert img.pixel(1, 1) == WHITE


def test_transparency_can_be_disabled(magenta_palette):
    tile = _tile([[255]])
    opts = ConversionOptions(fix_transparency=False)
    assert convert_to_rgba(tile, magenta_palette, opts).pixel(0, 0) == (255, 0, 255, 255)


def test_lookup_applied_from_tile_remap(magenta_palette):
    remap = bytes([1]) * 256
    tile = _tile([[5, 6]], remap=remap)
    assert convert_to_rgba(tile, magenta_palette).pixel(0, 0) != WHITE
    looked_up = convert_to_rgba(tile, magenta_palette, ConversionOptions(apply_lookup=True))
    assert looked_up.pixel(0, 0) == WHITE
    assert looked_up.pixel(1, 0) == WHITE


def test_shade_index_and_view(shaded_palette):
    tile = _tile([[7, 8]])
    img = convert_to_rgba(tile, view_palette(shaded_palette), ConversionOptions(shade_index=1))
    assert img.pixel(1, 0) == WHITE


def test_bad_shade_index_raises(shaded_palette):
    with pytest.raises(ValueError):
        convert_to_rgba(_tile([[1]]), shaded_palette, ConversionOptions(shade_index=9))


def test_empty_tile_gives_empty_image(magenta_palette):
    tile = decode_art(art_bytes([(0, 0, b"", 0)])).get_tile(0)
    img = convert_to_rgba(tile, magenta_palette)
    assert (img.width, img.height) == (0, 0)
    assert len(img.data) == 0
    wide = TileView(width=3, height=0, pixels=np.zeros(0, dtype=np.uint8))
    img = tile_to_rgba(wide, magenta_palette, post=PostprocessOptions())
    assert (img.width, img.height, img.stride) == (3, 0, 12)
    assert img.is_empty


def test_inconsistent_tile_rejected(magenta_palette):
    tile = TileView(width=2, height=2, pixels=np.zeros(3, dtype=np.uint8))
    with pytest.raises(Art2ImgError) as exc:
        convert_to_rgba(tile, magenta_palette)
    assert exc.value.kind == ErrorKind.CONVERSION_FAILURE


def test_palette_without_colours_rejected():
    pal = PaletteView(
        rgb=np.zeros((0, 3), dtype=np.uint8), shade_tables=np.zeros((0, 256), dtype=np.uint8)
    )
    with pytest.raises(Art2ImgError) as exc:
        convert_to_rgba(_tile([[1]]), pal)
    assert exc.value.kind == ErrorKind.INVALID_PALETTE


def test_tile_to_rgba_runs_postprocess(magenta_palette):
    tile = _tile([[255, 1]])
    img = tile_to_rgba(tile, magenta_palette, post=PostprocessOptions())
    assert img.pixel(0, 0) == (128, 128, 128, 0)
    assert img.pixel(1, 0) == WHITE


def test_index_zero_premultiplied_pipeline(magenta_palette):
    tile = _tile([[0, 1]])
    img = tile_to_rgba(
        tile,
        magenta_palette,
        ConversionOptions(premultiply_alpha=True),
        PostprocessOptions(premultiply_alpha=True),
    )
    assert img.pixel(0, 0) == (0, 0, 0, 0)
    assert img.pixel(1, 0) == WHITE
