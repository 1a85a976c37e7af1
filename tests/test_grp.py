import struct

import pytest

from art2img.errors import Art2ImgError, ErrorKind
from art2img.grp import decode_grp, is_grp_file, load_grp


def grp_bytes(entries):
    out = bytearray(b"KenSilverman")
    out += struct.pack("<I", len(entries))
    for name, data in entries:
        out += name.encode("latin-1").ljust(12, b"\0")[:12]
        out += struct.pack("<I", len(data))
    for _, data in entries:
        out += data
    return bytes(out)


def test_decode_entries_in_order():
    grp = decode_grp(grp_bytes([("TILES000.ART", b"abc"), ("PALETTE.DAT", b"xy")]))
    assert len(grp) == 2
    assert grp.names() == ["tiles000.art", "palette.dat"]
    assert grp.entry("palette.DAT").data == b"xy"
    assert grp.entry("missing.dat") is None
    assert [e.name for e in grp.art_entries()] == ["tiles000.art"]
    assert grp.entry("tiles000.art").size == 3


def test_names_with_padding_are_normalised():
    blob = bytearray(grp_bytes([("A.ART", b"")]))
    blob[16 + 5 : 16 + 12] = b"  \0\0\0\0\0"
    assert decode_grp(bytes(blob)).names() == ["a.art"]


def test_bad_signature():
    blob = b"KenSilverma!" + bytes(4)
    with pytest.raises(Art2ImgError) as exc:
        decode_grp(blob)
    assert exc.value.kind == ErrorKind.INVALID_ART
    assert not is_grp_file(blob)


def test_truncated_directory_and_payload():
    full = grp_bytes([("A.ART", b"12345")])
    with pytest.raises(Art2ImgError):
        decode_grp(full[:20])
    with pytest.raises(Art2ImgError):
        decode_grp(full[:-1])
    with pytest.raises(Art2ImgError):
        decode_grp(b"Ken")


def test_load_grp(tmp_path):
    path = tmp_path / "GAME.GRP"
    path.write_bytes(grp_bytes([("X.ART", b"1")]))
    assert load_grp(path).names() == ["x.art"]
