from art2img.binary_reader import read_u16_le, read_u32_le


def test_reads_little_endian():
    data = bytes([0x34, 0x12, 0x78, 0x56, 0xFF, 0xFF])
    assert read_u16_le(data, 0) == 0x1234
    assert read_u32_le(data, 0) == 0x56781234
    assert read_u16_le(data, 4) == 0xFFFF


def test_out_of_bounds_reads_return_zero():
    data = b"\x01\x02\x03"
    assert read_u16_le(data, 2) == 0
    assert read_u32_le(data, 0) == 0
    assert read_u16_le(data, -1) == 0
    assert read_u32_le(b"", 0) == 0


def test_accepts_memoryview_and_bytearray():
    raw = bytearray(b"\x00\x01\x00\x00")
    assert read_u32_le(memoryview(raw), 0) == 256
    assert read_u16_le(raw, 1) == 1
