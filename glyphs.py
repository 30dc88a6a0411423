#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
"""
Home Clock - Cell Font (5x7)
============================
Fixed-pattern glyphs drawn as scale x scale blocks, one per "on" cell.
Covers digits, colon, hyphen, percent and the letters needed for
weekday labels.
"""
from framebuffer import FrameBuffer

DIGIT_WIDTH = 5
COLON_WIDTH = 2
GLYPH_HEIGHT = 7

# ------------------------------ CELL FONT (5x7) ---------------------------------------------------
_DIGITS = {
    0: ["01110","10001","10011","10101","11001","10001","01110"],
    1: ["00100","01100","00100","00100","00100","00100","01110"],
    2: ["01110","10001","00001","00010","00100","01000","11111"],
    3: ["11110","00001","00001","01110","00001","00001","11110"],
    4: ["00010","00110","01010","10010","11111","00010","00010"],
    5: ["11111","10000","11110","00001","00001","10001","01110"],
    6: ["00110","01000","10000","11110","10001","10001","01110"],
    7: ["11111","00001","00010","00100","01000","01000","01000"],
    8: ["01110","10001","10001","01110","10001","10001","01110"],
    9: ["01110","10001","10001","01111","00001","00010","01100"],
}

_LETTERS = {
    'A': ["00100","01010","10001","11111","10001","10001","10001"],
    'D': ["11100","10010","10001","10001","10001","10010","11100"],
    'E': ["11111","10000","10000","11110","10000","10000","11111"],
    'F': ["11111","10000","10000","11110","10000","10000","10000"],
    'H': ["10001","10001","10001","11111","10001","10001","10001"],
    'I': ["01110","00100","00100","00100","00100","00100","01110"],
    'M': ["10001","11011","10101","10101","10001","10001","10001"],
    'N': ["10001","11001","10101","10011","10001","10001","10001"],
    'O': ["01110","10001","10001","10001","10001","10001","01110"],
    'R': ["11110","10001","10001","11110","10100","10010","10001"],
    'S': ["01111","10000","10000","01110","00001","00001","11110"],
    'T': ["11111","00100","00100","00100","00100","00100","00100"],
    'U': ["10001","10001","10001","10001","10001","10001","01110"],
    'W': ["10001","10001","10001","10101","10101","11011","10001"],
}

_COLON   = ["00","11","11","00","11","11","00"]
_HYPHEN  = ["00000","00000","00000","11111","00000","00000","00000"]
_PERCENT = ["11000","11001","00010","00100","01000","10011","00011"]


def _check_pattern(name, pattern, width):
    if len(pattern) != GLYPH_HEIGHT:
        raise ValueError(f"glyph {name!r}: expected {GLYPH_HEIGHT} rows, got {len(pattern)}")
    for row in pattern:
        if len(row) != width or set(row) - {"0", "1"}:
            raise ValueError(f"glyph {name!r}: bad row {row!r}")


def _cells(pattern):
    """Pattern rows -> tuple of (cx, cy) for every on cell."""
    return tuple((cx, cy) for cy, row in enumerate(pattern)
                 for cx, bit in enumerate(row) if bit == "1")


for _k, _p in list(_DIGITS.items()) + list(_LETTERS.items()):
    _check_pattern(_k, _p, DIGIT_WIDTH)
_check_pattern(":", _COLON, COLON_WIDTH)
_check_pattern("-", _HYPHEN, DIGIT_WIDTH)
_check_pattern("%", _PERCENT, DIGIT_WIDTH)

DIGIT_CELLS = {d: _cells(p) for d, p in _DIGITS.items()}
LETTER_CELLS = {ch: _cells(p) for ch, p in _LETTERS.items()}
COLON_CELLS = _cells(_COLON)
HYPHEN_CELLS = _cells(_HYPHEN)
PERCENT_CELLS = _cells(_PERCENT)

# Every character draw_text knows about, each DIGIT_WIDTH cells wide except ':'.
TEXT_CELLS = dict(LETTER_CELLS)
TEXT_CELLS.update({str(d): c for d, c in DIGIT_CELLS.items()})
TEXT_CELLS["-"] = HYPHEN_CELLS
TEXT_CELLS["%"] = PERCENT_CELLS


def draw_cells(surface: FrameBuffer, cells, x, y, scale, color):
    for cx, cy in cells:
        surface.fill_rect(x + cx * scale, y + cy * scale, scale, scale, color)


def draw_digit(surface, value, x, y, scale, color):
    try:
        cells = DIGIT_CELLS[int(value)]
    except (KeyError, ValueError, TypeError):
        raise ValueError(f"digit out of range: {value!r}") from None
    draw_cells(surface, cells, x, y, scale, color)


def draw_colon(surface, x, y, scale, color, blink=True):
    """Colon for HH:MM. With blink=False nothing is drawn (off half of the flash)."""
    if not blink:
        return
    draw_cells(surface, COLON_CELLS, x, y, scale, color)


def draw_hyphen(surface, x, y, scale, color):
    draw_cells(surface, HYPHEN_CELLS, x, y, scale, color)


def draw_percent(surface, x, y, scale, color):
    draw_cells(surface, PERCENT_CELLS, x, y, scale, color)


def char_width(ch: str) -> int:
    """Width in cells."""
    return COLON_WIDTH if ch == ":" else DIGIT_WIDTH


def text_width(text: str, scale: int) -> int:
    """Pixel width of a draw_text() run, without trailing spacing."""
    if not text:
        return 0
    return sum(char_width(ch) * scale for ch in text) + (len(text) - 1) * scale


def draw_text(surface, text, x, y, scale, color):
    """
    Left-to-right run advancing (glyph width + 1) * scale per character.
    Lowercase is folded to uppercase. Characters without a glyph (space
    included) draw nothing but still take one cell of advance.
    Returns the x just past the last character's spacing.
    """
    for ch in (text or ""):
        ch = ch.upper()
        if ch == ":":
            draw_cells(surface, COLON_CELLS, x, y, scale, color)
        else:
            cells = TEXT_CELLS.get(ch)
            if cells:
                draw_cells(surface, cells, x, y, scale, color)
        x += (char_width(ch) + 1) * scale
    return x
