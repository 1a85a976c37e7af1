# art2img/image_io.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .constants import LOOKUP_FILE_NAME, MAX_FILE_SIZE, SIDECAR_PALETTE_NAME
from .errors import Art2ImgError, ErrorKind, format_file_error

"""
Binary file I/O and sidecar discovery for ART bundles.

OSError is translated to Art2ImgError(IO_FAILURE) so callers only deal with
one exception type.
"""

PathLike = Union[str, Path]


def read_binary_file(path: PathLike, max_size: int = MAX_FILE_SIZE) -> bytes:
    """Read a whole file. Files above max_size are refused."""
    p = Path(path)
    try:
        size = p.stat().st_size
        if size > max_size:
            raise Art2ImgError(
                ErrorKind.IO_FAILURE,
                format_file_error(f"File too large ({size:,} bytes)", p),
            )
        return p.read_bytes()
    except OSError as e:
        raise Art2ImgError(
            ErrorKind.IO_FAILURE, format_file_error(f"Failed to read file ({e})", p)
        ) from e


def write_binary_file(path: PathLike, data: bytes) -> Path:
    """Write bytes, creating parent directories as needed."""
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
    except OSError as e:
        raise Art2ImgError(
            ErrorKind.IO_FAILURE, format_file_error(f"Failed to write file ({e})", p)
        ) from e
    return p


def write_text_file(path: PathLike, text: str) -> Path:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    except OSError as e:
        raise Art2ImgError(
            ErrorKind.IO_FAILURE, format_file_error(f"Failed to write file ({e})", p)
        ) from e
    return p


def _find_case_insensitive(directory: Path, name: str) -> Optional[Path]:
    exact = directory / name
    if exact.is_file():
        return exact
    if not directory.is_dir():
        return None
    wanted = name.lower()
    for entry in sorted(directory.iterdir()):
        if entry.is_file() and entry.name.lower() == wanted:
            return entry
    return None


def discover_sidecar_palette(art_path: PathLike) -> Optional[Path]:
    """PALETTE.DAT next to the ART file, else <stem>.DAT."""
    p = Path(art_path)
    found = _find_case_insensitive(p.parent, SIDECAR_PALETTE_NAME)
    if found is not None:
        return found
    return _find_case_insensitive(p.parent, f"{p.stem}.DAT")


def discover_lookup_file(art_path: PathLike) -> Optional[Path]:
    """LOOKUP.DAT next to the ART file."""
    p = Path(art_path)
    return _find_case_insensitive(p.parent, LOOKUP_FILE_NAME)


def is_art_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() == ".art"


__all__ = [
    "PathLike",
    "read_binary_file",
    "write_binary_file",
    "write_text_file",
    "discover_sidecar_palette",
    "discover_lookup_file",
    "is_art_file",
]
