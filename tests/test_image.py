import pytest

from cubed.image import Image


def _color_map(x, y, w, h, kind):
    if kind == 2:
        return (y * 255) // w + ((((w - x) * 255) // w) << 16) + (((y * 255) // h) << 8)
    return (x * 255) // w + ((((w - x) * 255) // w) << 16) + (((y * 255) // h) << 8)


@pytest.mark.parametrize(
    "size,kind,big_endian",
    [(42, 1, False), (242, 1, False), (242, 2, False), (42, 1, True)],
)
def test_color_map_round_trip(size, kind, big_endian):
    image = Image(size, size, 32, big_endian)
    for y in range(size):
        for x in range(size):
            image.put_pixel(x, y, _color_map(x, y, size, size, kind))
    for y in range(size):
        for x in range(size):
            assert image.get_pixel(x, y) == _color_map(x, y, size, size, kind)


def test_little_endian_byte_layout():
    image = Image(4, 4, 32, False)
    image.put_pixel(0, 0, 0x11223344)
    assert bytes(image.data[0:4]) == bytes([0x44, 0x33, 0x22, 0x11])


def test_big_endian_byte_layout():
    image = Image(4, 4, 32, True)
    image.put_pixel(0, 0, 0x11223344)
    assert bytes(image.data[0:4]) == bytes([0x11, 0x22, 0x33, 0x44])


def test_row_stride_places_pixels():
    image = Image(42, 42)
    image.put_pixel(1, 2, 0x11223344)
    offset = 2 * image.line_length() + 4
    assert bytes(image.data[offset:offset + 4]) == bytes([0x44, 0x33, 0x22, 0x11])
    assert len(image.data) == image.line_length() * 42


def test_line_length_is_padded_to_four_bytes():
    image = Image(42, 1, 24)
    assert image.line_length() % 4 == 0
    assert image.line_length() >= 42 * 3
    assert image.line_length() - 42 * 3 < 4


def test_twenty_four_bit_drops_top_byte():
    image = Image(3, 3, 24)
    image.put_pixel(1, 1, 0x11223344)
    assert image.get_pixel(1, 1) == 0x223344


def test_fill_sets_every_pixel():
    image = Image(5, 3)
    image.fill(0x0000FF)
    assert all(image.get_pixel(x, y) == 0x0000FF for y in range(3) for x in range(5))


def test_to_rgb_bytes():
    image = Image(2, 1)
    image.put_pixel(0, 0, 0xFF0000)
    image.put_pixel(1, 0, 0x0000FF)
    assert image.to_rgb_bytes() == bytes([0xFF, 0, 0, 0, 0, 0xFF])


def test_to_rgb_bytes_length():
    image = Image(7, 5, 24, True)
    image.fill(0x123456)
    rgb = image.to_rgb_bytes()
    assert len(rgb) == 7 * 5 * 3
    assert rgb[:3] == bytes([0x12, 0x34, 0x56])


@pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (42, 0), (0, 42)])
def test_out_of_range_pixel(x, y):
    image = Image(42, 42)
    with pytest.raises(IndexError):
        image.put_pixel(x, y, 0)
    with pytest.raises(IndexError):
        image.get_pixel(x, y)


def test_invalid_depth():
    with pytest.raises(ValueError):
        Image(4, 4, 12)


def test_invalid_size():
    with pytest.raises(ValueError):
        Image(0, 4)