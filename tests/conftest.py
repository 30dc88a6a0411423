"""Shared test fixtures."""

import time

import pytest

from framebuffer import FrameBuffer

DAY0 = 1_704_931_200  # 2024-01-11 00:00 UTC


def make_payload(localtime_epoch, day_start=DAY0, days=2):
    """forecast.json-shaped dict: `days` days of 24 hourly points from day_start."""
    forecastday = []
    for d in range(days):
        hours = []
        for h in range(24):
            epoch = day_start + d * 86400 + h * 3600
            hours.append({
                "time_epoch": epoch,
                "time": time.strftime("%Y-%m-%d %H:%M", time.gmtime(epoch)),
                "temp_c": 10 + h,
                "is_day": 1 if 6 <= h < 18 else 0,
                "chance_of_rain": (h * 7) % 101,
                "condition": {"code": 1000 if h % 2 == 0 else 1183},
            })
        forecastday.append({"date": time.strftime("%Y-%m-%d", time.gmtime(day_start + d * 86400)),
                            "date_epoch": day_start + d * 86400, "day": {}, "hour": hours})
    return {
        "location": {"name": "Tokyo", "region": "", "country": "Japan", "lat": 35.69, "lon": 139.69,
                     "tz_id": "Asia/Tokyo", "localtime_epoch": localtime_epoch, "localtime": ""},
        "current": {"temp_c": 7.0, "is_day": 0, "condition": {"code": 1003}},
        "forecast": {"forecastday": forecastday},
    }


@pytest.fixture
def fb() -> FrameBuffer:
    """Freshly cleared 800x480 surface."""
    surface = FrameBuffer(800, 480)
    surface.clear(0)
    return surface


@pytest.fixture
def two_day_payload() -> dict:
    """Two-day payload whose local 'now' is 22:30 on the first day."""
    return make_payload(DAY0 + 22 * 3600 + 1800)
