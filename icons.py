#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
"""
Home Clock - Weather Icons
==========================
WeatherAPI condition code -> icon category, and 16x16 icon blitting.

Built-in icons are bitmask rows (bit 15 = leftmost column) drawn in one
color per category. A directory of 16x16 RGBA PNGs named after the
categories (sun.png, heavy_rain.png, ...) can replace them; image pixels
with alpha <= ALPHA_THRESHOLD are skipped, never blended.
"""
import os
from enum import Enum

from PIL import Image, UnidentifiedImageError

from framebuffer import pack_rgb

ICON_SIZE = 16
ALPHA_THRESHOLD = 128


class IconCategory(Enum):
    SUN = "sun"
    MOON = "moon"
    CLOUD = "cloud"
    RAIN = "rain"
    HEAVY_RAIN = "heavy_rain"
    SNOW = "snow"
    THUNDER = "thunder"


class IconAssetError(Exception):
    """Icon data that cannot be turned into a 16x16 bitmap."""


_CLOUD_CODES = {1003, 1006, 1009, 1030, 1135, 1147}
_RAIN_CODES = {1063, 1072, 1150, 1153, 1168, 1180, 1183, 1186, 1189, 1198, 1240}
_HEAVY_RAIN_CODES = {1171, 1192, 1195, 1201, 1243, 1246}
_SNOW_CODES = {1066, 1069, 1114, 1117, 1204, 1207, 1210, 1213, 1216, 1219, 1222,
               1225, 1237, 1249, 1252, 1255, 1258, 1261, 1264}
_THUNDER_CODES = {1087, 1273, 1276, 1279, 1282}


def classify(code, is_day) -> IconCategory:
    """Total mapping; unknown codes are drawn as a cloud."""
    try:
        code = int(code)
    except (TypeError, ValueError):
        return IconCategory.CLOUD
    if code == 1000:
        return IconCategory.SUN if is_day else IconCategory.MOON
    if code in _CLOUD_CODES:
        return IconCategory.CLOUD
    if code in _RAIN_CODES:
        return IconCategory.RAIN
    if code in _HEAVY_RAIN_CODES:
        return IconCategory.HEAVY_RAIN
    if code in _SNOW_CODES:
        return IconCategory.SNOW
    if code in _THUNDER_CODES:
        return IconCategory.THUNDER
    return IconCategory.CLOUD


# ------------------------------ BUILT-IN BITMAPS --------------------------------------------------
_CLOUD_TOP = [
    0b0000011110000000,
    0b0000111111000000,
    0b0001111111101100,
    0b0011111111111110,
    0b0111111111111110,
    0b1111111111111111,
    0b1111111111111111,
    0b0111111111111110,
]

_BITMAPS = {
    IconCategory.SUN: [
        0b0000000110000000,
        0b0000000110000000,
        0b0011000000001100,
        0b0011000000001100,
        0b0000011111100000,
        0b0000111111110000,
        0b0000111111110000,
        0b1101111111111011,
        0b1101111111111011,
        0b0000111111110000,
        0b0000111111110000,
        0b0000011111100000,
        0b0011000000001100,
        0b0011000000001100,
        0b0000000110000000,
        0b0000000110000000,
    ],
    IconCategory.MOON: [
        0b0000011111000000,
        0b0001111100000000,
        0b0011111000000000,
        0b0111110000000000,
        0b0111100000000000,
        0b1111100000000000,
        0b1111000000000000,
        0b1111000000000000,
        0b1111000000000000,
        0b1111100000000000,
        0b0111100000000001,
        0b0111110000000010,
        0b0011111100001100,
        0b0001111111111000,
        0b0000011111100000,
        0b0000000000000000,
    ],
    IconCategory.CLOUD: [
        0b0000000000000000,
        0b0000000000000000,
        0b0000000000000000,
        0b0000011110000000,
        0b0000111111000000,
        0b0001111111101100,
        0b0011111111111110,
        0b0111111111111110,
        0b1111111111111111,
        0b1111111111111111,
        0b1111111111111111,
        0b0111111111111110,
        0b0011111111111100,
        0b0000000000000000,
        0b0000000000000000,
        0b0000000000000000,
    ],
    IconCategory.RAIN: _CLOUD_TOP + [
        0b0000000000000000,
        0b0010000100001000,
        0b0010000100001000,
        0b0000000000000000,
        0b0000100001000010,
        0b0000100001000010,
        0b0000000000000000,
        0b0000000000000000,
    ],
    IconCategory.HEAVY_RAIN: _CLOUD_TOP + [
        0b0100100100100100,
        0b1001001001001001,
        0b0100100100100100,
        0b1001001001001001,
        0b0100100100100100,
        0b1001001001001001,
        0b0100100100100100,
        0b0000000000000000,
    ],
    IconCategory.SNOW: [
        0b0000000100000000,
        0b0000010101000000,
        0b0000001110000000,
        0b0010000100001000,
        0b0001000100010000,
        0b0000100100100000,
        0b0000010101000000,
        0b1111111111111110,
        0b0000010101000000,
        0b0000100100100000,
        0b0001000100010000,
        0b0010000100001000,
        0b0000001110000000,
        0b0000010101000000,
        0b0000000100000000,
        0b0000000000000000,
    ],
    IconCategory.THUNDER: [
        0b0000000011111000,
        0b0000000111110000,
        0b0000001111100000,
        0b0000011111000000,
        0b0000111110000000,
        0b0001111111111000,
        0b0011111111110000,
        0b0000000111100000,
        0b0000001111000000,
        0b0000011110000000,
        0b0000111100000000,
        0b0000111000000000,
        0b0001110000000000,
        0b0001100000000000,
        0b0011000000000000,
        0b0010000000000000,
    ],
}

ICON_COLORS = {
    IconCategory.SUN: (255, 200, 0),
    IconCategory.MOON: (240, 230, 140),
    IconCategory.CLOUD: (200, 200, 200),
    IconCategory.RAIN: (100, 150, 255),
    IconCategory.HEAVY_RAIN: (60, 100, 255),
    IconCategory.SNOW: (230, 240, 255),
    IconCategory.THUNDER: (255, 220, 0),
}


class IconBitmap:
    """16x16 icon as a list of (dx, dy, packed_color) cells."""

    def __init__(self, cells):
        self.cells = tuple(cells)

    @classmethod
    def from_rows(cls, rows, color):
        if len(rows) != ICON_SIZE:
            raise IconAssetError(f"expected {ICON_SIZE} rows, got {len(rows)}")
        packed = pack_rgb(color)
        cells = []
        for dy, row in enumerate(rows):
            if not isinstance(row, int) or not 0 <= row < (1 << ICON_SIZE):
                raise IconAssetError(f"row {dy}: {row!r} is not a {ICON_SIZE}-bit mask")
            for dx in range(ICON_SIZE):
                if (row >> (ICON_SIZE - 1 - dx)) & 1:
                    cells.append((dx, dy, packed))
        return cls(cells)

    @classmethod
    def from_image(cls, img, threshold=ALPHA_THRESHOLD):
        """Pillow image -> bitmap, keeping pixels with alpha > threshold."""
        if img.size != (ICON_SIZE, ICON_SIZE):
            raise IconAssetError(f"icon must be {ICON_SIZE}x{ICON_SIZE}, got {img.size[0]}x{img.size[1]}")
        rgba = img.convert("RGBA")
        cells = []
        for dy in range(ICON_SIZE):
            for dx in range(ICON_SIZE):
                r, g, b, a = rgba.getpixel((dx, dy))
                if a > threshold:
                    cells.append((dx, dy, pack_rgb((r, g, b))))
        return cls(cells)

    def footprint(self):
        return {(dx, dy) for dx, dy, _ in self.cells}


def builtin_icons():
    return {cat: IconBitmap.from_rows(rows, ICON_COLORS[cat]) for cat, rows in _BITMAPS.items()}


# Built at import: a broken table stops the program before the first frame.
ICONS = builtin_icons()


def load_icon_image(path, threshold=ALPHA_THRESHOLD) -> IconBitmap:
    try:
        with Image.open(path) as img:
            img.load()
            return IconBitmap.from_image(img, threshold)
    except (OSError, UnidentifiedImageError) as e:
        raise IconAssetError(f"cannot read icon {path}: {e}") from e


def load_icon_dir(path, threshold=ALPHA_THRESHOLD):
    """
    Return the built-in icon set with every <category>.png found in `path`
    swapped in. Missing files keep the built-in bitmap; unreadable or
    wrongly sized files raise IconAssetError.
    """
    if not os.path.isdir(path):
        raise IconAssetError(f"icon directory not found: {path}")
    icon_set = builtin_icons()
    for cat in IconCategory:
        fn = os.path.join(path, f"{cat.value}.png")
        if os.path.exists(fn):
            icon_set[cat] = load_icon_image(fn, threshold)
    return icon_set


def set_icon_set(icon_set):
    """Replace the icons used when draw_icon() is called without icon_set."""
    global ICONS
    ICONS = dict(icon_set)


def draw_icon(surface, category, x, y, scale, icon_set=None):
    icon = (icon_set or ICONS)[category]
    for dx, dy, color in icon.cells:
        surface.fill_rect(x + dx * scale, y + dy * scale, scale, scale, color)
