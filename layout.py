#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
"""
Home Clock - Layout
===================
Centering arithmetic and the three rows of the display:

    date      YYYY-MM-DD WEEKDAY     (scale 3,  y=40)
    time      HH:MM                  (scale 16, y=120)
    forecast  4 x [HH:00 / icon / NN%] (scale 2, y=360)

Every run is centered with center_offset(); nothing is clamped, so a run
wider than its container starts at a negative x and gets clipped by the
frame buffer.
"""
from glyphs import (
    DIGIT_WIDTH, COLON_WIDTH,
    draw_digit, draw_colon, draw_hyphen, draw_percent, draw_text, text_width,
)
from icons import ICON_SIZE, classify, draw_icon

WEEKDAYS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")

# Row geometry
DATE_Y = 40
DATE_SCALE = 3
TIME_Y = 120
TIME_SCALE = 16
FORECAST_Y = 360
FORECAST_SCALE = 2
FORECAST_SLOTS = 4
ICON_OFFSET_Y = 30
RAIN_OFFSET_Y = 70

# Colors - updated by homeclock.py via set_globals()
BG_COLOR = (0, 16, 32)
DATE_COLOR = (180, 180, 180)
TIME_COLOR = (255, 255, 255)
FORECAST_COLOR = (150, 150, 150)
RAIN_HIGH_COLOR = (100, 150, 255)
RAIN_LOW_COLOR = (120, 120, 120)
RAIN_HIGH_PCT = 50


def set_globals(**kwargs):
    """Set globals from homeclock.py"""
    g = globals()
    for key, value in kwargs.items():
        if key in g:
            g[key] = value

# ------------------------------ centering ---------------------------------------------------------

def center_offset(container_width: int, total_width: int) -> int:
    """Left edge that centers total_width in container_width (floor, may be negative)."""
    return (int(container_width) - int(total_width)) // 2


def run_width(widths, gaps) -> int:
    """Sum of widths plus the gap after each element except the last."""
    widths = list(widths)
    if not widths:
        return 0
    return sum(widths) + sum(list(gaps)[:len(widths) - 1])


def layout_run(widths, gaps, container_width, origin_x=0):
    """Absolute x of every element of a run centered in [origin_x, origin_x + container_width)."""
    widths = list(widths); gaps = list(gaps)
    x = origin_x + center_offset(container_width, run_width(widths, gaps))
    xs = []
    for i, w in enumerate(widths):
        xs.append(x)
        x += w + (gaps[i] if i < len(gaps) else 0)
    return xs


def _digits(value, n):
    """Last n decimal digits of value, most significant first."""
    return [(int(value) // 10 ** p) % 10 for p in range(n - 1, -1, -1)]

# ------------------------------ rows --------------------------------------------------------------

def date_row(year, month, day, weekday, scale=DATE_SCALE):
    """
    Return [(kind, value, width)] and gaps for YYYY-MM-DD WDY.
    kind is 'digit', 'hyphen' or 'text'.
    """
    dw = DIGIT_WIDTH * scale
    label = WEEKDAYS[weekday]
    items = [("digit", d, dw) for d in _digits(year, 4)]
    items.append(("hyphen", None, dw))
    items += [("digit", d, dw) for d in _digits(month, 2)]
    items.append(("hyphen", None, dw))
    items += [("digit", d, dw) for d in _digits(day, 2)]
    items.append(("text", label, text_width(label, scale)))
    gaps = [scale] * (len(items) - 2) + [scale * 3]
    return items, gaps


def time_row(hour, minute, scale=TIME_SCALE):
    dw = DIGIT_WIDTH * scale
    items = [("digit", d, dw) for d in _digits(hour, 2)]
    items.append(("colon", None, COLON_WIDTH * scale))
    items += [("digit", d, dw) for d in _digits(minute, 2)]
    return items, [scale] * (len(items) - 1)


def rain_row(chance, scale=FORECAST_SCALE):
    chance = max(0, min(100, int(chance)))
    n = 3 if chance >= 100 else 2 if chance >= 10 else 1
    dw = DIGIT_WIDTH * scale
    items = [("digit", d, dw) for d in _digits(chance, n)]
    items.append(("percent", None, dw))
    return items, [scale] * (len(items) - 1)


def draw_row(surface, items, gaps, y, scale, color, container_width=None, origin_x=0, blink=True):
    """Center a row of items and draw it. Returns the x positions used."""
    if container_width is None:
        container_width = surface.width
    xs = layout_run([w for _, _, w in items], gaps, container_width, origin_x)
    for (kind, value, _), x in zip(items, xs):
        if kind == "digit":
            draw_digit(surface, value, x, y, scale, color)
        elif kind == "hyphen":
            draw_hyphen(surface, x, y, scale, color)
        elif kind == "colon":
            draw_colon(surface, x, y, scale, color, blink)
        elif kind == "percent":
            draw_percent(surface, x, y, scale, color)
        elif kind == "text":
            draw_text(surface, value, x, y, scale, color)
    return xs


def draw_date(surface, year, month, day, weekday):
    items, gaps = date_row(year, month, day, weekday)
    return draw_row(surface, items, gaps, DATE_Y, DATE_SCALE, DATE_COLOR)


def draw_time(surface, hour, minute, blink):
    items, gaps = time_row(hour, minute)
    return draw_row(surface, items, gaps, TIME_Y, TIME_SCALE, TIME_COLOR, blink=blink)

# ------------------------------ forecast ----------------------------------------------------------

def slot_origins(surface_width, count):
    """Left edge of each visible forecast slot; the group is centered."""
    slot_w = surface_width // FORECAST_SLOTS
    count = max(0, min(FORECAST_SLOTS, count))
    start = center_offset(surface_width, slot_w * count)
    return [start + i * slot_w for i in range(count)], slot_w


def draw_forecast_item(surface, point, slot_x, slot_w, y=FORECAST_Y):
    scale = FORECAST_SCALE
    # HH:00
    items, gaps = time_row(point.hour, 0, scale)
    draw_row(surface, items, gaps, y, scale, FORECAST_COLOR, slot_w, slot_x)

    icon_px = ICON_SIZE * scale
    icon_x = slot_x + center_offset(slot_w, icon_px)
    icon_y = y + ICON_OFFSET_Y
    draw_icon(surface, classify(point.condition_code, point.is_day), icon_x, icon_y, scale)

    rain_color = RAIN_HIGH_COLOR if point.chance_of_rain >= RAIN_HIGH_PCT else RAIN_LOW_COLOR
    items, gaps = rain_row(point.chance_of_rain, scale)
    draw_row(surface, items, gaps, y + RAIN_OFFSET_Y, scale, rain_color, slot_w, slot_x)


def draw_forecast(surface, forecast):
    points = list(forecast)[:FORECAST_SLOTS]
    origins, slot_w = slot_origins(surface.width, len(points))
    for point, slot_x in zip(points, origins):
        draw_forecast_item(surface, point, slot_x, slot_w)
    return origins

# ------------------------------ frame -------------------------------------------------------------

def render_frame(surface, now_dt, snapshot=None, blink=None):
    """Clear and draw one full frame. Same inputs always give the same pixels."""
    if blink is None:
        blink = now_dt.microsecond < 500_000
    surface.clear(BG_COLOR)
    draw_date(surface, now_dt.year, now_dt.month, now_dt.day, now_dt.weekday())
    draw_time(surface, now_dt.hour, now_dt.minute, blink)
    if snapshot is not None:
        draw_forecast(surface, snapshot.forecast)
    return surface
