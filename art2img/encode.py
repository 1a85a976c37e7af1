# art2img/encode.py
from __future__ import annotations

"""
RgbaImage -> PNG / TGA / BMP bytes through Pillow.
"""

import io
from dataclasses import dataclass
from enum import Enum

from PIL import Image

from .constants import RGBA_CHANNELS
from .core_types import RgbaImage
from .errors import Art2ImgError, ErrorKind


class ImageFormat(str, Enum):
    PNG = "png"
    TGA = "tga"
    BMP = "bmp"


class CompressionPreset(str, Enum):
    BALANCED = "balanced"
    FAST = "fast"
    SMALLEST = "smallest"


class BitDepth(str, Enum):
    AUTO = "auto"
    BPP24 = "bpp24"
    BPP32 = "bpp32"


_PIL_FORMAT = {
    ImageFormat.PNG: "PNG",
    ImageFormat.TGA: "TGA",
    ImageFormat.BMP: "BMP",
}

_PNG_LEVEL = {
    CompressionPreset.FAST: 1,
    CompressionPreset.BALANCED: 6,
    CompressionPreset.SMALLEST: 9,
}


@dataclass(frozen=True)
class EncoderOptions:
    """
    compression : PNG zlib preset (fast=1, balanced=6, smallest=9 + optimize)
    bit_depth   : bpp24 drops alpha; auto and bpp32 keep RGBA
    tga_rle     : run-length encode TGA output
    """

    compression: CompressionPreset = CompressionPreset.BALANCED
    bit_depth: BitDepth = BitDepth.AUTO
    tga_rle: bool = False


def file_extension(fmt: ImageFormat) -> str:
    return ImageFormat(fmt).value


def parse_image_format(name: str) -> ImageFormat:
    try:
        return ImageFormat(name.lower().lstrip("."))
    except ValueError as e:
        raise Art2ImgError(
            ErrorKind.UNSUPPORTED, f"Unsupported image format: {name}"
        ) from e


def _validate(image: RgbaImage) -> None:
    if image.width <= 0 or image.height <= 0:
        raise Art2ImgError(
            ErrorKind.ENCODING_FAILURE,
            f"Invalid image dimensions {image.width}x{image.height}",
        )
    if image.stride < image.width * RGBA_CHANNELS:
        raise Art2ImgError(
            ErrorKind.ENCODING_FAILURE,
            f"Invalid stride {image.stride} for width {image.width}",
        )
    if len(image.data) < image.stride * image.height:
        raise Art2ImgError(
            ErrorKind.ENCODING_FAILURE,
            f"Image buffer too small: {len(image.data)} bytes, "
            f"expected {image.stride * image.height}",
        )


def to_pil_image(image: RgbaImage, bit_depth: BitDepth = BitDepth.AUTO) -> Image.Image:
    """Wrap an RgbaImage as a Pillow image (RGB when bit_depth is bpp24)."""
    _validate(image)
    pil = Image.frombuffer(
        "RGBA",
        (image.width, image.height),
        bytes(image.data),
        "raw",
        "RGBA",
        image.stride,
        1,
    )
    if BitDepth(bit_depth) == BitDepth.BPP24:
        pil = pil.convert("RGB")
    return pil


def encode_image(
    image: RgbaImage, fmt: ImageFormat, options: EncoderOptions | None = None
) -> bytes:
    """Encode to the requested container. Raises Art2ImgError(ENCODING_FAILURE)."""
    opts = options or EncoderOptions()
    fmt = ImageFormat(fmt)
    pil = to_pil_image(image, opts.bit_depth)

    save_kwargs = {}
    if fmt == ImageFormat.PNG:
        preset = CompressionPreset(opts.compression)
        save_kwargs["compress_level"] = _PNG_LEVEL[preset]
        save_kwargs["optimize"] = preset == CompressionPreset.SMALLEST
    elif fmt == ImageFormat.TGA and opts.tga_rle:
        save_kwargs["compression"] = "tga_rle"

    buf = io.BytesIO()
    try:
        pil.save(buf, format=_PIL_FORMAT[fmt], **save_kwargs)
    except (OSError, ValueError) as e:
        raise Art2ImgError(
            ErrorKind.ENCODING_FAILURE, f"Failed to encode {fmt.value.upper()} ({e})"
        ) from e
    return buf.getvalue()


__all__ = [
    "ImageFormat",
    "CompressionPreset",
    "BitDepth",
    "EncoderOptions",
    "file_extension",
    "parse_image_format",
    "to_pil_image",
    "encode_image",
]
