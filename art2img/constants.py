# art2img/constants.py
"""
Container sizes, limits and transparency tunables used across the project.

- PALETTE_* / SHADE_* / TRANSLUCENT_*: PALETTE.DAT layout
- ART_*: ART container layout and sanity bounds
- MAGENTA_*, NEUTRAL_GREY: transparency handling
"""
from __future__ import annotations

from typing import Tuple

# =========================
# PALETTE.DAT
# =========================
PALETTE_SIZE: int = 256
COLOR_COMPONENTS: int = 3
PALETTE_DATA_SIZE: int = PALETTE_SIZE * COLOR_COMPONENTS  # 768
SHADE_COUNT_SIZE: int = 2
PALETTE_MIN_SIZE: int = PALETTE_DATA_SIZE + SHADE_COUNT_SIZE  # 770
PALETTE_COMPONENT_MAX: int = 63  # 6-bit VGA DAC values
SHADE_TABLE_SIZE: int = PALETTE_SIZE
MAX_SHADE_TABLES: int = 256
TRANSLUCENT_TABLE_SIZE: int = 65536

# =========================
# ART container
# =========================
ART_VERSION: int = 1
ART_HEADER_SIZE: int = 16  # version, numtiles, tile_start, tile_end
ART_TILE_ENTRY_SIZE: int = 2 + 2 + 4  # width, height, picanm
ART_MIN_SIZE: int = ART_HEADER_SIZE + ART_TILE_ENTRY_SIZE
ART_MAX_TILES: int = 10000
MAX_TILE_DIMENSION: int = 32767
LOOKUP_TABLE_SIZE: int = 256

# picanm bit layout (LSB first)
PICANM_FRAMES_MASK: int = 0x3F
PICANM_TYPE_SHIFT: int = 6
PICANM_TYPE_MASK: int = 0x03
PICANM_Y_OFFSET_SHIFT: int = 8
PICANM_X_OFFSET_SHIFT: int = 16
PICANM_SPEED_SHIFT: int = 24
PICANM_SPEED_MASK: int = 0x0F
PICANM_FLAGS_SHIFT: int = 28
PICANM_FLAGS_MASK: int = 0x0F

# =========================
# RGBA output
# =========================
RGBA_CHANNELS: int = 4

# Build-engine magenta (252, 0, 252) is detected with an asymmetric band.
MAGENTA_MIN_RED: int = 250
MAGENTA_MIN_BLUE: int = 250
MAGENTA_MAX_GREEN: int = 5

# RGB written under fully transparent pixels to stop colour bleeding on resize.
NEUTRAL_GREY: Tuple[int, int, int] = (128, 128, 128)

# Matte hygiene only makes sense when there is an interior.
MATTE_MIN_SIZE: int = 3

# =========================
# I/O
# =========================
MAX_FILE_SIZE: int = 100 * 1024 * 1024
SIDECAR_PALETTE_NAME: str = "PALETTE.DAT"
LOOKUP_FILE_NAME: str = "LOOKUP.DAT"
GRP_SIGNATURE: bytes = b"KenSilverman"
GRP_ENTRY_SIZE: int = 16
GRP_NAME_SIZE: int = 12
