# art2img/export.py
from __future__ import annotations

"""
Tile / archive / multi-file export.

Each tile is converted, post-processed, encoded and written independently,
so per-tile failures are recorded in the ExportResult instead of aborting
the batch. With jobs > 1 tiles are fanned out to a ThreadPoolExecutor; the
decoded archive and palette are read-only and shared between workers.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .animation import AnimationExportConfig, export_animation_data, has_animation
from .art import ArtArchive, PaletteHint, TileView, decode_art, load_art
from .convert import tile_to_rgba
from .core_types import ConversionOptions, PostprocessOptions
from .encode import EncoderOptions, ImageFormat, encode_image, file_extension
from .errors import Art2ImgError, ErrorKind, format_tile_error
from .grp import GrpFile
from .image_io import PathLike, is_art_file, write_binary_file
from .palette import PaletteLike
from .utils import debug_log


@dataclass(frozen=True)
class ExportOptions:
    """
    output_dir           : base directory for all written files
    organize_by_format   : add a <ext>/ subdirectory
    organize_by_art_file : add a <art stem>/ subdirectory
    filename_prefix      : files are named <prefix>_<tile_id:04d>.<ext>
    jobs                 : tiles converted in parallel (1 = sequential)
    export_animation     : write animdata.ini for archives with animated tiles
    """

    output_dir: PathLike = "."
    image_format: ImageFormat = ImageFormat.PNG
    conversion: ConversionOptions = field(default_factory=ConversionOptions)
    postprocess: PostprocessOptions = field(default_factory=PostprocessOptions)
    encoder: EncoderOptions = field(default_factory=EncoderOptions)
    organize_by_format: bool = False
    organize_by_art_file: bool = False
    filename_prefix: str = "tile"
    jobs: int = 1
    export_animation: bool = False
    debug: bool = False


@dataclass
class ExportResult:
    total_tiles: int = 0
    exported_tiles: int = 0
    skipped_tiles: int = 0
    output_files: List[Path] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def merge(self, other: "ExportResult") -> None:
        self.total_tiles += other.total_tiles
        self.exported_tiles += other.exported_tiles
        self.skipped_tiles += other.skipped_tiles
        self.output_files.extend(other.output_files)
        self.failures.extend(other.failures)


def output_directory(options: ExportOptions, art_name: Optional[str] = None) -> Path:
    out = Path(options.output_dir)
    if options.organize_by_format:
        out = out / file_extension(options.image_format)
    if options.organize_by_art_file and art_name:
        out = out / art_name
    return out


def tile_filename(options: ExportOptions, tile_id: int) -> str:
    return f"{options.filename_prefix}_{tile_id:04d}.{file_extension(options.image_format)}"


def export_tile(
    tile: TileView,
    palette: PaletteLike,
    options: ExportOptions,
    art_name: Optional[str] = None,
) -> Path:
    """Convert, post-process, encode and write one tile. Raises Art2ImgError."""
    if not tile.has_pixels:
        raise Art2ImgError(
            ErrorKind.CONVERSION_FAILURE,
            format_tile_error("Empty tile cannot be exported", tile.tile_id),
        )
    try:
        image = tile_to_rgba(tile, palette, options.conversion, options.postprocess)
    except ValueError as e:
        raise Art2ImgError(
            ErrorKind.CONVERSION_FAILURE, format_tile_error(str(e), tile.tile_id)
        ) from e
    data = encode_image(image, options.image_format, options.encoder)
    path = output_directory(options, art_name) / tile_filename(options, tile.tile_id)
    return write_binary_file(path, data)


def _export_one(
    tile: TileView,
    palette: PaletteLike,
    options: ExportOptions,
    art_name: Optional[str],
    cancel: Optional[threading.Event],
) -> Tuple[Optional[Path], Optional[str]]:
    if cancel is not None and cancel.is_set():
        return None, "cancelled"
    try:
        return export_tile(tile, palette, options, art_name), None
    except Art2ImgError as e:
        return None, str(e)


def export_archive(
    archive: ArtArchive,
    palette: PaletteLike,
    options: ExportOptions,
    art_name: Optional[str] = None,
    cancel: Optional[threading.Event] = None,
) -> ExportResult:
    """Export every non-empty tile. Empty tiles count as skipped."""
    result = ExportResult(total_tiles=archive.tile_count)
    tiles = [t for t in archive.tiles if t.has_pixels]
    result.skipped_tiles = archive.tile_count - len(tiles)

    if options.jobs > 1 and len(tiles) > 1:
        with ThreadPoolExecutor(max_workers=options.jobs) as ex:
            futures = [
                ex.submit(_export_one, t, palette, options, art_name, cancel)
                for t in tiles
            ]
            outcomes = [f.result() for f in futures]
    else:
        outcomes = [_export_one(t, palette, options, art_name, cancel) for t in tiles]

    label = art_name or "tile"
    for tile, (path, err) in zip(tiles, outcomes):
        if path is not None:
            result.output_files.append(path)
            result.exported_tiles += 1
        else:
            result.failures.append((f"{label}#{tile.tile_id}", err or "unknown error"))

    if options.debug:
        debug_log(
            f"{label}: exported {result.exported_tiles}/{len(tiles)} tiles, "
            f"skipped {result.skipped_tiles} empty"
        )

    if options.export_animation and has_animation(archive):
        config = AnimationExportConfig(
            output_dir=output_directory(options, art_name),
            image_format=file_extension(options.image_format),
            base_name=f"{options.filename_prefix}_",
        )
        try:
            result.output_files.append(export_animation_data(archive, config))
        except Art2ImgError as e:
            result.failures.append((f"{label}#{config.ini_filename}", str(e)))

    return result


def _hint_for(options: ExportOptions) -> PaletteHint:
    return PaletteHint.LOOKUP if options.conversion.apply_lookup else PaletteHint.NONE


def export_art_files(
    art_files: Iterable[PathLike],
    palette: PaletteLike,
    options: ExportOptions,
    cancel: Optional[threading.Event] = None,
) -> ExportResult:
    """Export several ART files. Files that fail to load are recorded as failures."""
    result = ExportResult()
    for art_path in art_files:
        p = Path(art_path)
        if cancel is not None and cancel.is_set():
            break
        try:
            archive = load_art(p, _hint_for(options))
        except Art2ImgError as e:
            result.failures.append((str(p), str(e)))
            continue
        result.merge(export_archive(archive, palette, options, p.stem, cancel))
    return result


def export_grp(
    grp: GrpFile,
    palette: PaletteLike,
    options: ExportOptions,
    remap: Optional[bytes] = None,
    cancel: Optional[threading.Event] = None,
) -> ExportResult:
    """Export every *.art entry of a GRP container."""
    result = ExportResult()
    for entry in grp.art_entries():
        if cancel is not None and cancel.is_set():
            break
        name = Path(entry.name).stem
        try:
            archive = decode_art(entry.data, _hint_for(options), remap=remap)
        except Art2ImgError as e:
            result.failures.append((entry.name, str(e)))
            continue
        result.merge(export_archive(archive, palette, options, name, cancel))
    return result


def collect_art_files(paths: Sequence[PathLike]) -> List[Path]:
    """Expand directories to their *.art files (case-insensitive), sorted by name."""
    files: List[Path] = []
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            found = [c for c in p.iterdir() if is_art_file(c)]
            files.extend(sorted(found, key=lambda c: c.name.lower()))
        else:
            files.append(p)
    return files


__all__ = [
    "ExportOptions",
    "ExportResult",
    "output_directory",
    "tile_filename",
    "export_tile",
    "export_archive",
    "export_art_files",
    "export_grp",
    "collect_art_files",
]
