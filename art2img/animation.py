# art2img/animation.py
from __future__ import annotations

"""
animdata.ini export, in the layout the legacy art2tga tool produced:

  [tile0100.tga -> tile0104.tga]     only for animated tiles
     AnimationType=forward
     AnimationSpeed=3

  [tile0100.tga]                     every non-empty tile (optional)
     XCenterOffset=-2
     YCenterOffset=0
     OtherFlags=0

format_animation_json() gives the same animated tiles as a JSON manifest.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .art import ArtArchive, animation_type_name
from .errors import Art2ImgError, ErrorKind
from .image_io import PathLike, write_text_file

INI_HEADER = (
    "; This file contains animation data from ART tiles\n"
    "; Extracted by art2img v2.0\n\n"
)


@dataclass(frozen=True)
class AnimationExportConfig:
    output_dir: PathLike
    ini_filename: str = "animdata.ini"
    include_non_animated: bool = True
    image_format: str = "tga"
    base_name: str = "tile"


def _tile_name(base_name: str, tile_id: int, ext: str) -> str:
    return f"{base_name}{tile_id:04d}.{ext}"


def _sections(
    archive: ArtArchive, include_non_animated: bool, image_format: str, base_name: str
) -> Tuple[str, bool]:
    lines: List[str] = [INI_HEADER]
    found = False
    for tile in archive.tiles:
        if not tile.has_pixels:
            continue
        anim = tile.animation
        name = _tile_name(base_name, tile.tile_id, image_format)

        if anim.is_animated:
            found = True
            last = _tile_name(base_name, tile.tile_id + anim.frame_count, image_format)
            lines.append(f"[{name} -> {last}]\n")
            lines.append(f"   AnimationType={animation_type_name(anim.type)}\n")
            lines.append(f"   AnimationSpeed={anim.speed}\n")
            lines.append("\n")

        if include_non_animated:
            lines.append(f"[{name}]\n")
            lines.append(f"   XCenterOffset={anim.x_center_offset}\n")
            lines.append(f"   YCenterOffset={anim.y_center_offset}\n")
            lines.append(f"   OtherFlags={anim.to_picanm() >> 28}\n")
            lines.append("\n")
    return "".join(lines), found


def format_animation_ini(
    archive: ArtArchive,
    include_non_animated: bool = True,
    image_format: str = "tga",
    base_name: str = "tile",
) -> str:
    text, _ = _sections(archive, include_non_animated, image_format, base_name)
    return text


# Build advances animations on a 120 Hz clock, one frame every 2**speed ticks.
ENGINE_CLOCK_HZ = 120


def frame_time_ms(speed: int) -> int:
    return round(1000 * (1 << speed) / ENGINE_CLOCK_HZ)


def format_animation_json(
    archive: ArtArchive,
    palette_name: str,
    image_format: str = "tga",
    base_name: str = "tile",
) -> str:
    """
    JSON manifest of the animated tiles:

      {"palette": ..., "animations": [{"name", "type", "first_frame",
       "frame_count", "frame_time_ms", "loops"}, ...]}

    frame_count includes the base tile. Raises Art2ImgError(CONVERSION_FAILURE)
    when palette_name is empty.
    """
    if not palette_name:
        raise Art2ImgError(
            ErrorKind.CONVERSION_FAILURE, "animation manifest requires a palette name"
        )
    animations: List[Dict[str, Any]] = []
    for tile in archive.tiles:
        anim = tile.animation
        if not tile.has_pixels or not anim.is_animated:
            continue
        animations.append(
            {
                "name": _tile_name(base_name, tile.tile_id, image_format),
                "type": animation_type_name(anim.type),
                "first_frame": tile.tile_id,
                "frame_count": anim.frame_count + 1,
                "frame_time_ms": frame_time_ms(anim.speed),
                "loops": True,
            }
        )
    return json.dumps({"palette": palette_name, "animations": animations}, indent=2) + "\n"


def has_animation(archive: ArtArchive) -> bool:
    return any(t.has_pixels and t.animation.is_animated for t in archive.tiles)


def export_animation_data(archive: ArtArchive, config: AnimationExportConfig) -> Path:
    """
    Write the INI into config.output_dir and return its path.

    The file is written even when nothing is animated; that case then raises
    Art2ImgError(NO_ANIMATION) so callers can decide whether it matters.
    """
    text, found = _sections(
        archive, config.include_non_animated, config.image_format, config.base_name
    )
    path = write_text_file(Path(config.output_dir) / config.ini_filename, text)
    if not found:
        raise Art2ImgError(ErrorKind.NO_ANIMATION, "No animated tiles found in ART file")
    return path


__all__ = [
    "INI_HEADER",
    "AnimationExportConfig",
    "format_animation_ini",
    "format_animation_json",
    "frame_time_ms",
    "has_animation",
    "export_animation_data",
]
