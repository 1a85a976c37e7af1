import numpy as np
import pytest

from art2img.errors import Art2ImgError, ErrorKind
from art2img.palette import (
    decode_palette,
    load_palette,
    scale_6bit_array,
    scale_6bit_to_8bit,
    view_palette,
)

from conftest import palette_bytes


def test_scale_reference_values():
    expected = {0: 0, 1: 4, 31: 125, 32: 130, 62: 251, 63: 255}
    for v, out in expected.items():
        assert scale_6bit_to_8bit(v) == out
    arr = scale_6bit_array(np.array(list(expected), dtype=np.uint8))
    assert arr.tolist() == list(expected.values())


def test_scale_is_monotonic_over_range():
    values = [scale_6bit_to_8bit(v) for v in range(64)]
    assert values == sorted(values)
    assert values[0] == 0 and values[-1] == 255


def test_decode_minimal_palette():
    rgb6 = [(i % 64, 0, 63) for i in range(256)]
    pal = decode_palette(palette_bytes(rgb6))
    assert pal.rgb.shape == (256, 3)
    assert pal.raw[5].tolist() == [5, 0, 63]
    assert pal.entry_rgb(63) == (255, 0, 255)
    assert pal.shade_table_count == 0
    assert not pal.has_shade_tables
    assert pal.translucent.shape == (65536,)
    assert not pal.has_translucent_map


def test_too_small_blob_is_invalid_palette():
    with pytest.raises(Art2ImgError) as exc:
        decode_palette(bytes(769))
    assert exc.value.kind == ErrorKind.INVALID_PALETTE


def test_shade_count_above_limit_is_rejected():
    blob = bytearray(palette_bytes())
    blob[768:770] = (257).to_bytes(2, "little")
    with pytest.raises(Art2ImgError) as exc:
        decode_palette(bytes(blob))
    assert exc.value.kind == ErrorKind.INVALID_PALETTE
    assert "257" in exc.value.message


def test_missing_shade_bytes_is_rejected():
    blob = bytearray(palette_bytes())
    blob[768:770] = (2).to_bytes(2, "little")
    blob += bytes(256)
    with pytest.raises(Art2ImgError) as exc:
        decode_palette(bytes(blob))
    assert exc.value.kind == ErrorKind.INVALID_PALETTE


def test_shade_tables_and_translucency():
    shades = [bytes(range(256)), bytes(reversed(range(256)))]
    trans = bytes([7]) * 65536
    pal = decode_palette(palette_bytes(shade_tables=shades, translucent=trans))
    assert pal.shade_table_count == 2
    assert int(pal.shade_tables[1, 0]) == 255
    assert pal.has_translucent_map
    assert pal.shaded_entry_rgb(1, 0) == pal.entry_rgb(255)
    assert pal.shaded_entry_rgb(9, 3) == pal.entry_rgb(3)


def test_partial_translucency_table_is_zero_filled():
    pal = decode_palette(palette_bytes() + bytes([9]) * 100)
    assert not pal.translucent.any()


def test_arrays_are_read_only():
    pal = decode_palette(palette_bytes())
    with pytest.raises(ValueError):
        pal.rgb[0, 0] = 1


def test_view_shares_tables():
    pal = decode_palette(palette_bytes(shade_tables=[bytes(256)]))
    view = view_palette(pal)
    assert view.rgb is pal.rgb
    assert view.shade_table_count == 1
    assert view_palette(view) is view


def test_load_palette_from_disk(tmp_path):
    path = tmp_path / "PALETTE.DAT"
    path.write_bytes(palette_bytes())
    assert load_palette(path).rgb.shape == (256, 3)


def test_load_missing_palette_is_io_failure(tmp_path):
    with pytest.raises(Art2ImgError) as exc:
        load_palette(tmp_path / "nope.dat")
    assert exc.value.kind == ErrorKind.IO_FAILURE
