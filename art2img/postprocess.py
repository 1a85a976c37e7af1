# art2img/postprocess.py
from __future__ import annotations

"""
Whole-image RGBA passes, applied in place.

Order used by postprocess():
  1. transparency cleanup : alpha 0 -> RGB neutral grey
  2. matte hygiene        : 4-neighbour alpha erosion, then 3x3 box blur (interior only)
  3. premultiplication    : RGB scaled by alpha, alpha 0 -> black

Every pass takes either an RgbaImage or a flat RGBA bytearray plus width/height.
"""

from typing import Optional, Union

import numpy as np

from .constants import MATTE_MIN_SIZE, NEUTRAL_GREY, RGBA_CHANNELS
from .core_types import PostprocessOptions, RgbaImage, U8Image, U8Mask

ImageLike = Union[RgbaImage, bytearray]


def _rgba_view(
    image: ImageLike, width: Optional[int] = None, height: Optional[int] = None
) -> U8Image:
    """Writable (H, W, 4) view onto the caller's buffer."""
    if isinstance(image, RgbaImage):
        return image.as_array()
    if width is None or height is None:
        raise ValueError("width and height are required for a raw RGBA buffer")
    expected = width * height * RGBA_CHANNELS
    if len(image) < expected:
        raise ValueError(f"RGBA buffer holds {len(image)} bytes, expected {expected}")
    flat = np.frombuffer(image, dtype=np.uint8)[:expected]
    return flat.reshape(height, width, RGBA_CHANNELS)


# Alpha-plane filters


def erode_alpha_plane(alpha: U8Mask) -> U8Mask:
    """Interior pixel -> min(self, N, S, W, E). Border row/column copied through."""
    out = alpha.copy()
    if alpha.shape[0] < MATTE_MIN_SIZE or alpha.shape[1] < MATTE_MIN_SIZE:
        return out
    out[1:-1, 1:-1] = np.minimum.reduce(
        [
            alpha[1:-1, 1:-1],
            alpha[:-2, 1:-1],
            alpha[2:, 1:-1],
            alpha[1:-1, :-2],
            alpha[1:-1, 2:],
        ]
    )
    return out


def box_blur_alpha_plane(alpha: U8Mask) -> U8Mask:
    """Interior pixel -> floor(sum of 3x3 neighbourhood / 9). Border copied through."""
    out = alpha.copy()
    h, w = alpha.shape
    if h < MATTE_MIN_SIZE or w < MATTE_MIN_SIZE:
        return out
    src = alpha.astype(np.uint32)
    total = np.zeros((h - 2, w - 2), dtype=np.uint32)
    for dy in range(3):
        for dx in range(3):
            total += src[dy : dy + h - 2, dx : dx + w - 2]
    out[1:-1, 1:-1] = (total // 9).astype(np.uint8)
    return out


# In-place passes


def clean_transparent_pixels(
    image: ImageLike, width: Optional[int] = None, height: Optional[int] = None
) -> None:
    """Set RGB of fully transparent pixels to neutral grey so filters don't bleed colour."""
    rgba = _rgba_view(image, width, height)
    rgba[rgba[..., 3] == 0, :3] = NEUTRAL_GREY


def erode_alpha(
    image: ImageLike, width: Optional[int] = None, height: Optional[int] = None
) -> None:
    rgba = _rgba_view(image, width, height)
    rgba[..., 3] = erode_alpha_plane(rgba[..., 3])


def box_blur_alpha(
    image: ImageLike, width: Optional[int] = None, height: Optional[int] = None
) -> None:
    rgba = _rgba_view(image, width, height)
    rgba[..., 3] = box_blur_alpha_plane(rgba[..., 3])


def apply_matte_hygiene(
    image: ImageLike, width: Optional[int] = None, height: Optional[int] = None
) -> None:
    """Erode then blur alpha. Images narrower or shorter than 3 pixels are left alone."""
    rgba = _rgba_view(image, width, height)
    h, w = rgba.shape[:2]
    if w < MATTE_MIN_SIZE or h < MATTE_MIN_SIZE:
        return
    rgba[..., 3] = box_blur_alpha_plane(erode_alpha_plane(rgba[..., 3]))


def premultiply_alpha(
    image: ImageLike, width: Optional[int] = None, height: Optional[int] = None
) -> None:
    """alpha 0 -> RGB 0; 0 < alpha < 255 -> (c*a + 127) // 255; alpha 255 untouched."""
    rgba = _rgba_view(image, width, height)
    alpha = rgba[..., 3]
    partial = (alpha > 0) & (alpha < 255)
    if np.any(partial):
        a = alpha[partial].astype(np.uint16)[:, None]
        rgb = rgba[partial, :3].astype(np.uint16)
        rgba[partial, :3] = ((rgb * a + 127) // 255).astype(np.uint8)
    rgba[alpha == 0, :3] = 0


def postprocess(image: RgbaImage, options: Optional[PostprocessOptions] = None) -> None:
    """Run the enabled passes in fixed order. Empty images are a no-op."""
    opts = options or PostprocessOptions()
    if image.is_empty:
        return
    if opts.apply_transparency_fix:
        clean_transparent_pixels(image)
    if opts.sanitize_matte:
        apply_matte_hygiene(image)
    if opts.premultiply_alpha:
        premultiply_alpha(image)


__all__ = [
    "ImageLike",
    "erode_alpha_plane",
    "box_blur_alpha_plane",
    "clean_transparent_pixels",
    "erode_alpha",
    "box_blur_alpha",
    "apply_matte_hygiene",
    "premultiply_alpha",
    "postprocess",
]
