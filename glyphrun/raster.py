"""Grey-scale raster surfaces, glyph bitmaps and bounding rectangles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

__all__ = ["GlyphBitmap", "Bitmap", "Rect"]


@dataclass(frozen=True)
class GlyphBitmap:
    """A rendered glyph: 8-bit coverage rows with a bearing from the pen position."""

    width: int
    height: int
    left: int
    top: int
    buffer: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("glyph bitmap size must not be negative")
        if len(self.buffer) < self.width * self.height:
            raise ValueError("glyph bitmap buffer is smaller than width * height")


class Bitmap:
    """An 8-bit grey-scale surface onto which glyphs are accumulated."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError("bitmap size must not be negative")
        self.width = width
        self.height = height
        self.buffer = bytearray(width * height)

    def pixel(self, x: int, y: int) -> int:
        """Return the value of the pixel at column ``x``, row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} bitmap")
        return self.buffer[y * self.width + x]

    def draw_glyph(self, glyph: GlyphBitmap, x: int, y: int) -> None:
        """Add ``glyph`` with its origin at pen position (x, y), saturating at 255.

        Parts of the glyph outside the surface are clipped.
        """
        x += glyph.left
        y -= glyph.top
        x0 = max(0, x)
        x1 = min(self.width, x + glyph.width)
        y0 = max(0, y)
        y1 = min(self.height, y + glyph.height)
        if x1 <= x0:
            return
        for yy in range(y0, y1):
            src_row = (yy - y) * glyph.width
            src = glyph.buffer[src_row + (x0 - x) : src_row + (x1 - x)]
            dst_row = yy * self.width
            dst = self.buffer[dst_row + x0 : dst_row + x1]
            self.buffer[dst_row + x0 : dst_row + x1] = bytes(
                min(a + b, 0xFF) for a, b in zip(dst, src)
            )

    def write_pnm(self, stream: BinaryIO) -> None:
        """Write the surface to a binary stream as a PGM (P5) image."""
        stream.write(f"P5\n{self.width} {self.height}\n255\n".encode("ascii"))
        stream.write(bytes(self.buffer))


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle; empty when it has no width or no height."""

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    def is_empty(self) -> bool:
        """True if the rectangle encloses no area."""
        return self.left == self.right or self.top == self.bottom

    def offset(self, dx: float, dy: float) -> Rect:
        """Return the rectangle moved by (dx, dy)."""
        return Rect(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)

    def join(self, other: Rect) -> Rect:
        """Return the smallest rectangle containing both; empty ones are ignored."""
        if self.is_empty():
            return other
        if other.is_empty():
            return self
        return Rect(
            min(self.left, other.left),
            min(self.top, other.top),
            max(self.right, other.right),
            max(self.bottom, other.bottom),
        )