#!/usr/bin/env python3
"""
art_convert.py
Convert Build-engine ART tiles to PNG/TGA/BMP images.

Usage:
  python art_convert.py INPUT [-o OUTDIR] [-p PALETTE] [-f png|tga|bmp]
                        [--no-transparency] [--premultiply] [--matte]
                        [--no-lookup] [--shade N] [--no-anim] [--jobs N] [--debug]

Input:
  A single .ART file, a folder of .ART files, or a .GRP container.

Palette:
  -p wins. Otherwise PALETTE.DAT (or <stem>.DAT) next to the input, or the
  palette.dat entry inside a GRP. Conversion cannot run without one.

Output:
  <OUTDIR>/<art stem>/tile_NNNN.<ext> per tile, plus animdata.ini for archives
  with animated tiles unless --no-anim is given.

Notes:
  Tiles are converted in parallel with a ThreadPoolExecutor (--jobs).
  Per-tile failures are reported and the run continues; the exit code is 1
  if anything failed, 2 for unusable input.
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path
from typing import List, Optional

from art2img.art import load_lookup_data
from art2img.core_types import ConversionOptions, PostprocessOptions, rgb_to_hex
from art2img.encode import ImageFormat
from art2img.errors import Art2ImgError
from art2img.export import (
    ExportOptions,
    ExportResult,
    collect_art_files,
    export_art_files,
    export_grp,
)
from art2img.grp import GrpFile, is_grp_file, load_grp
from art2img.image_io import discover_lookup_file, discover_sidecar_palette, read_binary_file
from art2img.palette import Palette, decode_palette, load_palette
from art2img.pixel import check_shade_index
from art2img.utils import (
    # formatting
    format_byte_size,
    format_total_duration_compact,
    default_workers,
    # pretty logging
    print_banner,
    log,
    debug_log,
    warn,
    error,
    print_config_line,
    key_value_pairs_to_string,
    enable_line_buffered_stdout,
)

# CLI args & small helpers


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for ART conversion.

    Returns:
      argparse.Namespace with:
        src: Path to an ART file, folder or GRP
        outdir: output directory
        palette: optional explicit palette path
        format: "png" | "tga" | "bmp"
        no_transparency / premultiply / matte / no_lookup: conversion switches
        shade: optional shade table index
        no_anim: skip animdata.ini
        jobs: tiles converted in parallel
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="art-convert",
        description="Convert Build-engine ART tiles to images.",
    )
    parser.add_argument("src", type=Path, help="ART file, folder of ART files, or GRP")
    parser.add_argument(
        "-o", "--outdir", type=Path, default=Path("output"), help="Output directory"
    )
    parser.add_argument(
        "-p", "--palette", type=Path, default=None, help="Palette file (PALETTE.DAT)"
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=[f.value for f in ImageFormat],
        default=ImageFormat.PNG.value,
        help="Output image format.",
    )
    parser.add_argument(
        "--no-transparency",
        action="store_true",
        help="Keep magenta pixels opaque and skip transparent-pixel cleanup.",
    )
    parser.add_argument(
        "--premultiply", action="store_true", help="Premultiply RGB by alpha."
    )
    parser.add_argument(
        "--matte", action="store_true", help="Erode and soften alpha edges."
    )
    parser.add_argument(
        "--no-lookup", action="store_true", help="Ignore LOOKUP.DAT remap tables."
    )
    parser.add_argument(
        "--shade", type=int, default=None, help="Shade table index to apply."
    )
    parser.add_argument(
        "-n", "--no-anim", action="store_true", help="Do not write animdata.ini."
    )
    parser.add_argument(
        "-j", "--jobs", type=int, default=default_workers(), help="Tiles in parallel"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def _is_grp(src: Path) -> bool:
    if src.suffix.lower() == ".grp":
        return True
    with src.open("rb") as fh:
        return is_grp_file(fh.read(12))


def _resolve_palette(
    args: argparse.Namespace, art_files: List[Path], grp: Optional[GrpFile]
) -> Optional[Palette]:
    if args.palette is not None:
        return load_palette(args.palette)
    if grp is not None:
        entry = grp.entry("palette.dat")
        if entry is not None:
            if args.debug:
                debug_log("palette: palette.dat (from GRP)")
            return decode_palette(entry.data)
        return None
    for art in art_files:
        found = discover_sidecar_palette(art)
        if found is not None:
            if args.debug:
                debug_log(f"palette: {found}")
            return load_palette(found)
    return None


def _resolve_grp_lookup(args: argparse.Namespace, src: Path, grp: GrpFile) -> Optional[bytes]:
    if args.no_lookup:
        return None
    entry = grp.entry("lookup.dat")
    if entry is not None:
        return load_lookup_data(entry.data)
    found = discover_lookup_file(src)
    if found is not None:
        return load_lookup_data(read_binary_file(found))
    return None


def _build_options(args: argparse.Namespace) -> ExportOptions:
    fix = not args.no_transparency
    return ExportOptions(
        output_dir=args.outdir,
        image_format=ImageFormat(args.format),
        conversion=ConversionOptions(
            apply_lookup=not args.no_lookup,
            shade_index=args.shade,
            fix_transparency=fix,
            premultiply_alpha=args.premultiply,
        ),
        postprocess=PostprocessOptions(
            apply_transparency_fix=fix,
            sanitize_matte=args.matte,
            premultiply_alpha=args.premultiply,
        ),
        organize_by_art_file=True,
        jobs=max(1, args.jobs),
        export_animation=not args.no_anim,
        debug=args.debug,
    )


def _report(name: str, result: ExportResult, elapsed: float, debug: bool) -> None:
    written = sum(p.stat().st_size for p in result.output_files if p.exists())
    log(
        key_value_pairs_to_string(
            [
                ("Tiles", result.total_tiles),
                ("Exported", result.exported_tiles),
                ("Empty", result.skipped_tiles),
                ("Failed", len(result.failures)),
                ("Written", format_byte_size(written)),
            ]
        )
    )
    shown = result.failures if debug else result.failures[:5]
    for item, message in shown:
        warn(f"{item}: {message}")
    if len(shown) < len(result.failures):
        warn(f"... {len(result.failures) - len(shown)} more (use --debug)")
    log(f"{name} done in {format_total_duration_compact(elapsed)}")


# Entry point


def main(argv: Optional[List[str]] = None) -> None:
    """
    CLI entry point.

    Handles a single ART file, a folder or a GRP container. Files are
    processed in order; tiles within a file are spread over --jobs threads.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    cpu_cores = os.cpu_count() or 1
    print_config_line(
        "run",
        [("CPU cores", cpu_cores), ("Jobs", args.jobs), ("Format", args.format)],
        debug=False,
    )
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Transparency", not args.no_transparency),
                    ("Premultiply", args.premultiply),
                    ("Matte", args.matte),
                    ("Lookup", not args.no_lookup),
                    ("Shade", "-" if args.shade is None else args.shade),
                    ("Animation", not args.no_anim),
                ]
            )
        )

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        sys.exit(2)

    options = _build_options(args)
    t_start = time.perf_counter()
    total = ExportResult()

    try:
        grp = load_grp(src) if src.is_file() and _is_grp(src) else None
        art_files = [] if grp is not None else collect_art_files([src])
        palette = _resolve_palette(args, art_files, grp)
    except (Art2ImgError, OSError) as e:
        error(str(e))
        sys.exit(2)

    if palette is None:
        error(f"no palette found for {src} (use -p PALETTE.DAT)")
        sys.exit(2)
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Shade tables", palette.shade_table_count),
                    ("Translucency", palette.has_translucent_map),
                    ("Index 255", rgb_to_hex(palette.entry_rgb(255))),
                ]
            )
        )
    try:
        check_shade_index(palette, args.shade)
    except ValueError as e:
        error(str(e))
        sys.exit(2)

    if grp is not None:
        print_banner(src.name)
        try:
            remap = _resolve_grp_lookup(args, src, grp)
        except Art2ImgError as e:
            error(str(e))
            sys.exit(2)
        if args.debug:
            debug_log(f"GRP entries: {len(grp)}  ART entries: {len(grp.art_entries())}")
        t0 = time.perf_counter()
        total = export_grp(grp, palette, options, remap=remap)
        _report(src.name, total, time.perf_counter() - t0, args.debug)
    else:
        if not art_files:
            error(f"no .ART files in {src}")
            sys.exit(2)
        for art in art_files:
            print_banner(art.name)
            t0 = time.perf_counter()
            result = export_art_files([art], palette, options)
            _report(art.name, result, time.perf_counter() - t0, args.debug)
            total.merge(result)

    if len(art_files) > 1 or grp is not None:
        print_banner("summary")
        log(
            key_value_pairs_to_string(
                [
                    ("Tiles", total.total_tiles),
                    ("Exported", total.exported_tiles),
                    ("Failed", len(total.failures)),
                ]
            )
        )
    log(f"Total time {format_total_duration_compact(time.perf_counter() - t_start)}")
    if total.failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
