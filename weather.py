#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
"""
Home Clock - Weather Data
=========================
WeatherAPI.com forecast payload -> the small snapshot the display needs:
current conditions plus the next few hourly points from "now" forward.
"""
import http.client
import json
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import Optional, Tuple

API_URL = "http://api.weatherapi.com/v1/forecast.json"
FORECAST_POINTS = 4


class WeatherFetchError(Exception):
    """Network, HTTP, credential or payload failure while fetching weather."""


class WeatherPayloadError(WeatherFetchError):
    """Provider answered, but the JSON does not have the expected shape."""


@dataclass(frozen=True)
class CurrentConditions:
    temp_c: float
    is_day: bool
    condition_code: int


@dataclass(frozen=True)
class ForecastPoint:
    time_epoch: int
    time: str
    hour: int
    temp_c: float
    condition_code: int
    is_day: bool
    chance_of_rain: int


@dataclass(frozen=True)
class WeatherResponse:
    location_name: str
    localtime_epoch: int
    current: CurrentConditions
    days: Tuple[Tuple[ForecastPoint, ...], ...]


@dataclass(frozen=True)
class WeatherSnapshot:
    reference_epoch: int
    current: CurrentConditions
    forecast: Tuple[ForecastPoint, ...] = ()
    fetched_at: float = field(default=0.0, compare=False)


# ------------------------------ decoding ----------------------------------------------------------
def _get(obj, key, kind, where):
    if not isinstance(obj, dict) or key not in obj:
        raise WeatherPayloadError(f"missing '{key}' in {where}")
    val = obj[key]
    if kind is int and isinstance(val, float) and val.is_integer():
        val = int(val)
    if kind is float and isinstance(val, int) and not isinstance(val, bool):
        val = float(val)
    if not isinstance(val, kind) or isinstance(val, bool):
        raise WeatherPayloadError(f"'{key}' in {where} has type {type(val).__name__}")
    return val


def hour_of_day(time_str: str) -> int:
    """'2024-01-12 22:00' -> 22. Anything unparsable gives 0."""
    try:
        hh = int(time_str.split(" ")[1].split(":")[0])
    except (AttributeError, IndexError, ValueError):
        return 0
    return hh if 0 <= hh <= 23 else 0


def _decode_condition(obj, where):
    cond = obj.get("condition") if isinstance(obj, dict) else None
    return _get(cond, "code", int, f"{where}.condition")


def _decode_current(obj):
    return CurrentConditions(
        temp_c=_get(obj, "temp_c", float, "current"),
        is_day=bool(_get(obj, "is_day", int, "current")),
        condition_code=_decode_condition(obj, "current"),
    )


def _decode_hour(obj, where):
    t = _get(obj, "time", str, where)
    rain = _get(obj, "chance_of_rain", int, where)
    return ForecastPoint(
        time_epoch=_get(obj, "time_epoch", int, where),
        time=t,
        hour=hour_of_day(t),
        temp_c=_get(obj, "temp_c", float, where),
        condition_code=_decode_condition(obj, where),
        is_day=bool(_get(obj, "is_day", int, where)),
        chance_of_rain=max(0, min(100, rain)),
    )


def decode_response(obj) -> WeatherResponse:
    """Validate a forecast.json body. Raises WeatherPayloadError on bad shape."""
    if not isinstance(obj, dict):
        raise WeatherPayloadError(f"expected a JSON object, got {type(obj).__name__}")
    location = obj.get("location")
    if not isinstance(location, dict):
        raise WeatherPayloadError("missing 'location' object")
    forecast = obj.get("forecast")
    forecastdays = forecast.get("forecastday") if isinstance(forecast, dict) else None
    if not isinstance(forecastdays, list):
        raise WeatherPayloadError("missing 'forecast.forecastday' list")
    days = []
    for i, day in enumerate(forecastdays):
        hours = day.get("hour") if isinstance(day, dict) else None
        if not isinstance(hours, list):
            raise WeatherPayloadError(f"missing 'hour' list in forecastday[{i}]")
        days.append(tuple(_decode_hour(h, f"forecastday[{i}].hour[{j}]") for j, h in enumerate(hours)))
    return WeatherResponse(
        location_name=str(location.get("name") or ""),
        localtime_epoch=_get(location, "localtime_epoch", int, "location"),
        current=_decode_current(obj.get("current")),
        days=tuple(days),
    )


# ------------------------------ normalizing -------------------------------------------------------
def normalize(response: WeatherResponse, reference_epoch: Optional[int] = None,
              limit: int = FORECAST_POINTS, fetched_at: float = 0.0) -> WeatherSnapshot:
    """
    Flatten every day's hours in payload order, keep those at or after
    reference_epoch (default: the location's local "now"), keep the first
    `limit`. Current conditions are copied as-is.
    """
    ref = response.localtime_epoch if reference_epoch is None else int(reference_epoch)
    upcoming = []
    for day in response.days:
        for point in day:
            if point.time_epoch >= ref:
                upcoming.append(point)
                if len(upcoming) >= limit:
                    break
        if len(upcoming) >= limit:
            break
    return WeatherSnapshot(reference_epoch=ref, current=response.current,
                           forecast=tuple(upcoming), fetched_at=fetched_at)


# ------------------------------ fetching ----------------------------------------------------------
def build_url(api_key: str, location: str, days: int = 2) -> str:
    q = urllib.parse.urlencode({"key": api_key, "q": location, "days": int(days)})
    return f"{API_URL}?{q}"


def fetch_weather(api_key: str, location: str, timeout: float = 10.0, days: int = 2) -> WeatherResponse:
    if not api_key:
        raise WeatherFetchError("WEATHERAPI_KEY is not set")
    if not location:
        raise WeatherFetchError("WEATHER_LOCATION is not set")
    url = build_url(api_key, location, days)
    try:
        with urllib.request.urlopen(url, timeout=timeout) as resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise WeatherFetchError(f"HTTP {e.code} from weather API") from e
    except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
        raise WeatherFetchError(f"Connection failed: {e}") from e
    try:
        obj = json.loads(body)
    except ValueError as e:
        raise WeatherPayloadError(f"invalid JSON: {e}") from e
    return decode_response(obj)


def get_weather(api_key: str, location: str, timeout: float = 10.0, days: int = 2) -> WeatherSnapshot:
    response = fetch_weather(api_key, location, timeout=timeout, days=days)
    return normalize(response, fetched_at=time.time())


# ------------------------------ demo data ---------------------------------------------------------
_DEMO_CODES = [1000, 1003, 1063, 1195, 1087, 1213, 1009, 1000]


def demo_response(now_epoch: int) -> dict:
    """Two-day forecast.json-shaped payload around now_epoch (no network)."""
    day_start = int(now_epoch) - int(now_epoch) % 86400
    days = []
    for d in range(2):
        hours = []
        for h in range(24):
            epoch = day_start + d * 86400 + h * 3600
            hours.append({
                "time_epoch": epoch,
                "time": time.strftime("%Y-%m-%d %H:%M", time.gmtime(epoch)),
                "temp_c": 12.0 + (h % 12) * 0.5,
                "is_day": 1 if 6 <= h < 18 else 0,
                "chance_of_rain": (h * 13 + d * 7) % 101,
                "condition": {"code": _DEMO_CODES[(h + d) % len(_DEMO_CODES)]},
            })
        days.append({"date_epoch": day_start + d * 86400, "hour": hours})
    return {
        "location": {"name": "Demo", "localtime_epoch": int(now_epoch)},
        "current": {"temp_c": 14.5, "is_day": 1, "condition": {"code": 1003}},
        "forecast": {"forecastday": days},
    }


def demo_snapshot(now_epoch: int) -> WeatherSnapshot:
    return normalize(decode_response(demo_response(now_epoch)), fetched_at=time.time())


def snapshot_summary(snapshot: Optional[WeatherSnapshot]) -> dict:
    """JSON-friendly summary for the status file / control panel."""
    if snapshot is None:
        return {}
    return {
        "reference_epoch": snapshot.reference_epoch,
        "current": {"temp_c": snapshot.current.temp_c, "is_day": snapshot.current.is_day,
                    "code": snapshot.current.condition_code},
        "forecast": [{"time": p.time, "hour": p.hour, "code": p.condition_code,
                      "is_day": p.is_day, "chance_of_rain": p.chance_of_rain} for p in snapshot.forecast],
    }
