# art2img/__init__.py
"""
art2img package.

Purpose:
  Decode Build-engine ART tile archives and PALETTE.DAT palettes, convert
  tiles to RGBA and write them out as PNG/TGA/BMP. See art_convert.py for CLI.

Public API:
  decode_palette / load_palette : PALETTE.DAT -> Palette
  decode_art / load_art         : ART bytes or file -> ArtArchive of TileViews
  convert_to_rgba               : TileView + palette -> RgbaImage
  postprocess                   : in-place transparency cleanup, matte hygiene, premultiply
  encode_image                  : RgbaImage -> PNG/TGA/BMP bytes (Pillow)
  export_art_files              : batch export with per-tile failure reporting
  Art2ImgError / ErrorKind      : the one exception type raised for bad input
  utils                         : shared helpers (formatting, logging)

Quick start:
  from art2img import load_palette, load_art, convert_to_rgba, postprocess
  pal = load_palette("PALETTE.DAT")
  art = load_art("TILES000.ART")
  img = convert_to_rgba(art.get_tile(0), pal)
"""

__version__ = "2.0.0"

from . import utils  # noqa: F401
from .animation import (
    AnimationExportConfig,
    export_animation_data,
    format_animation_ini,
    format_animation_json,
)
from .art import (
    AnimationType,
    ArtArchive,
    PaletteHint,
    TileAnimation,
    TileView,
    decode_art,
    get_tile,
    get_tile_by_id,
    load_art,
    load_lookup_data,
    tile_count,
)
from .convert import convert_to_rgba, tile_to_rgba
from .core_types import ConversionOptions, PostprocessOptions, RgbaImage
from .encode import EncoderOptions, ImageFormat, encode_image, file_extension
from .errors import Art2ImgError, ErrorKind
from .export import ExportOptions, ExportResult, export_archive, export_art_files, export_tile
from .grp import GrpFile, decode_grp, load_grp
from .palette import Palette, PaletteView, decode_palette, load_palette, view_palette
from .pixel import convert_pixel
from .postprocess import postprocess

__all__ = [
    "__version__",
    "utils",
    # errors
    "Art2ImgError",
    "ErrorKind",
    # palette
    "Palette",
    "PaletteView",
    "decode_palette",
    "load_palette",
    "view_palette",
    # art
    "AnimationType",
    "ArtArchive",
    "PaletteHint",
    "TileAnimation",
    "TileView",
    "decode_art",
    "load_art",
    "load_lookup_data",
    "tile_count",
    "get_tile",
    "get_tile_by_id",
    # conversion
    "ConversionOptions",
    "PostprocessOptions",
    "RgbaImage",
    "convert_pixel",
    "convert_to_rgba",
    "tile_to_rgba",
    "postprocess",
    # encoding / export
    "ImageFormat",
    "EncoderOptions",
    "encode_image",
    "file_extension",
    "ExportOptions",
    "ExportResult",
    "export_tile",
    "export_archive",
    "export_art_files",
    "AnimationExportConfig",
    "format_animation_ini",
    "format_animation_json",
    "export_animation_data",
    # containers
    "GrpFile",
    "decode_grp",
    "load_grp",
]
