# art2img/binary_reader.py
from __future__ import annotations

"""
Bounds-checked little-endian integer reads.

Reads that would run past the end of the buffer return 0 instead of raising.
Decoders check the overall size first, so a zero here never has to be told
apart from truncation.
"""

import struct
from typing import Union

Buffer = Union[bytes, bytearray, memoryview]

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")


def read_u16_le(data: Buffer, offset: int) -> int:
    """Unsigned 16-bit LE value at offset, or 0 if out of bounds."""
    if offset < 0 or offset + _U16.size > len(data):
        return 0
    return _U16.unpack_from(data, offset)[0]


def read_u32_le(data: Buffer, offset: int) -> int:
    """Unsigned 32-bit LE value at offset, or 0 if out of bounds."""
    if offset < 0 or offset + _U32.size > len(data):
        return 0
    return _U32.unpack_from(data, offset)[0]


__all__ = ["Buffer", "read_u16_le", "read_u32_le"]
