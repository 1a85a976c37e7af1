# art2img/errors.py
from __future__ import annotations

"""
Error kinds and the single exception type raised for expected failures.

Decoders fail fast and whole by raising Art2ImgError. Per-tile lookups
return None instead. Caller mistakes (bad shade index, wrong buffer length)
raise ValueError.
"""

from enum import Enum
from os import PathLike
from typing import Union


class ErrorKind(str, Enum):
    """Closed set of failure categories."""

    IO_FAILURE = "io_failure"
    INVALID_ART = "invalid_art"
    INVALID_PALETTE = "invalid_palette"
    CONVERSION_FAILURE = "conversion_failure"
    ENCODING_FAILURE = "encoding_failure"
    UNSUPPORTED = "unsupported"
    NO_ANIMATION = "no_animation"


class Art2ImgError(Exception):
    """Expected failure carrying an ErrorKind and a human-readable message."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind
        self.message = message


def format_error_message(base_message: str, context: str) -> str:
    """'base (context)' or just 'base' when context is empty."""
    if not context:
        return base_message
    return f"{base_message} ({context})"


def format_file_error(base_message: str, path: Union[str, PathLike]) -> str:
    return f"{base_message}: {path}"


def format_tile_error(base_message: str, tile_index: int) -> str:
    return f"{base_message} [tile {tile_index}]"


__all__ = [
    "ErrorKind",
    "Art2ImgError",
    "format_error_message",
    "format_file_error",
    "format_tile_error",
]
