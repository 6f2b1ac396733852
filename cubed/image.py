"""In-memory pixel images with a fixed row stride and byte order."""

from __future__ import annotations

_SUPPORTED_DEPTHS = (24, 32)


class Image:
    """A width x height raster stored as packed pixel bytes.

    Pixels are integers of the form 0x00RRGGBB (the top byte is kept for
    32-bit images). Rows are padded to a multiple of four bytes.
    """

    def __init__(
        self,
        width: int,
        height: int,
        bits_per_pixel: int = 32,
        big_endian: bool = False,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"image size must be positive, got {width}x{height}")
        if bits_per_pixel not in _SUPPORTED_DEPTHS:
            raise ValueError(f"unsupported bits per pixel: {bits_per_pixel}")
        self.width = width
        self.height = height
        self.bits_per_pixel = bits_per_pixel
        self.big_endian = big_endian
        self.data = bytearray(self.line_length() * height)

    @property
    def bytes_per_pixel(self) -> int:
        return self.bits_per_pixel // 8

    @property
    def _byteorder(self) -> str:
        return "big" if self.big_endian else "little"

    def line_length(self) -> int:
        """Return the number of bytes in one row, padded to 32 bits."""
        return (self.width * self.bits_per_pixel + 31) // 32 * 4

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return y * self.line_length() + x * self.bytes_per_pixel

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Store a colour at (x, y); bits beyond the pixel depth are dropped."""
        offset = self._offset(x, y)
        size = self.bytes_per_pixel
        value = color & ((1 << (size * 8)) - 1)
        self.data[offset:offset + size] = value.to_bytes(size, self._byteorder)

    def get_pixel(self, x: int, y: int) -> int:
        """Return the stored colour at (x, y)."""
        offset = self._offset(x, y)
        size = self.bytes_per_pixel
        return int.from_bytes(self.data[offset:offset + size], self._byteorder)

    def fill(self, color: int) -> None:
        """Set every pixel to one colour."""
        size = self.bytes_per_pixel
        value = color & ((1 << (size * 8)) - 1)
        pixel = value.to_bytes(size, self._byteorder)
        row = pixel * self.width
        row += bytes(self.line_length() - len(row))
        self.data[:] = row * self.height

    def to_rgb_bytes(self) -> bytes:
        """Return the pixels as tightly packed R, G, B bytes, row by row."""
        out = bytearray()
        for y in range(self.height):
            for x in range(self.width):
                value = self.get_pixel(x, y) & 0xFFFFFF
                out += value.to_bytes(3, "big")
        return bytes(out)