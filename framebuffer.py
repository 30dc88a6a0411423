#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
"""
Home Clock - Frame Buffer
=========================
Fixed-size packed-RGB pixel surface. Every rasterizer draws through
set_pixel()/fill_rect(), which silently clip anything outside the surface.
"""
import numpy as np


def pack_rgb(color) -> int:
    """(r, g, b) tuple -> 0xRRGGBB. Ints pass through (masked to 24 bits)."""
    if isinstance(color, (int, np.integer)):
        return int(color) & 0xFFFFFF
    r, g, b = color[0], color[1], color[2]
    return ((int(r) & 0xFF) << 16) | ((int(g) & 0xFF) << 8) | (int(b) & 0xFF)


def unpack_rgb(value: int):
    value = int(value)
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


class FrameBuffer:
    """Row-major buffer of packed 0xRRGGBB values, length width*height."""

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros(self.width * self.height, dtype=np.uint32)

    def _rows(self):
        return self.pixels.reshape(self.height, self.width)

    def clear(self, color=0):
        self.pixels.fill(pack_rgb(color))

    def in_bounds(self, x, y) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_pixel(self, x, y, color):
        if not self.in_bounds(x, y):
            return
        self.pixels[int(y) * self.width + int(x)] = pack_rgb(color)

    def get_pixel(self, x, y):
        if not self.in_bounds(x, y):
            return None
        return int(self.pixels[int(y) * self.width + int(x)])

    def fill_rect(self, x, y, w, h, color):
        """Fill the part of the rectangle that lies on the surface."""
        x0 = max(0, int(x)); y0 = max(0, int(y))
        x1 = min(self.width, int(x) + int(w)); y1 = min(self.height, int(y) + int(h))
        if x0 >= x1 or y0 >= y1:
            return
        self._rows()[y0:y1, x0:x1] = pack_rgb(color)

    def count(self, color) -> int:
        """Number of pixels currently holding `color`."""
        return int(np.count_nonzero(self.pixels == pack_rgb(color)))

    def to_rgb_array(self) -> np.ndarray:
        """(height, width, 3) uint8 view-copy for pygame/Pillow."""
        rows = self._rows()
        out = np.empty((self.height, self.width, 3), dtype=np.uint8)
        out[..., 0] = (rows >> 16) & 0xFF
        out[..., 1] = (rows >> 8) & 0xFF
        out[..., 2] = rows & 0xFF
        return out

    def to_rgb_bytes(self) -> bytes:
        return self.to_rgb_array().tobytes()

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()
