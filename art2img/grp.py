# art2img/grp.py
from __future__ import annotations

"""
Read-only GRP container ("KenSilverman" archives shipped with Build games).

  signature  : 12 bytes "KenSilverman"
  count      : u32 LE
  directory  : count * (12-byte name, u32 LE size)
  payloads   : concatenated in directory order
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .binary_reader import Buffer, read_u32_le
from .constants import GRP_ENTRY_SIZE, GRP_NAME_SIZE, GRP_SIGNATURE
from .errors import Art2ImgError, ErrorKind, format_error_message
from .image_io import PathLike, read_binary_file


def normalise_name(name: str) -> str:
    return name.rstrip("\0 ").lower()


@dataclass(frozen=True)
class GrpEntry:
    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class GrpFile:
    entries: Tuple[GrpEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def entry(self, name: str) -> Optional[GrpEntry]:
        """Case-insensitive lookup; None when absent."""
        key = normalise_name(name)
        for e in self.entries:
            if e.name == key:
                return e
        return None

    def names(self) -> List[str]:
        return [e.name for e in self.entries]

    def art_entries(self) -> List[GrpEntry]:
        return [e for e in self.entries if e.name.endswith(".art")]


def _invalid(message: str) -> Art2ImgError:
    return Art2ImgError(ErrorKind.INVALID_ART, message)


def decode_grp(data: Buffer) -> GrpFile:
    header = len(GRP_SIGNATURE) + 4
    if len(data) < header:
        raise _invalid("blob too small for GRP header")
    if bytes(data[: len(GRP_SIGNATURE)]) != GRP_SIGNATURE:
        raise _invalid("invalid GRP signature")

    count = read_u32_le(data, len(GRP_SIGNATURE))
    directory_end = header + count * GRP_ENTRY_SIZE
    if len(data) < directory_end:
        raise _invalid("GRP directory truncated")

    entries: List[GrpEntry] = []
    cursor = header
    payload = directory_end
    for _ in range(count):
        raw_name = bytes(data[cursor : cursor + GRP_NAME_SIZE])
        name = normalise_name(raw_name.decode("latin-1"))
        size = read_u32_le(data, cursor + GRP_NAME_SIZE)
        if payload + size > len(data):
            raise _invalid(format_error_message("GRP entry exceeds file size", name))
        entries.append(GrpEntry(name=name, data=bytes(data[payload : payload + size])))
        payload += size
        cursor += GRP_ENTRY_SIZE

    return GrpFile(entries=tuple(entries))


def load_grp(path: PathLike) -> GrpFile:
    return decode_grp(read_binary_file(path))


def is_grp_file(data: Buffer) -> bool:
    return bytes(data[: len(GRP_SIGNATURE)]) == GRP_SIGNATURE


__all__ = [
    "GrpEntry",
    "GrpFile",
    "normalise_name",
    "decode_grp",
    "load_grp",
    "is_grp_file",
]
