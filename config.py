#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
"""
Home Clock - Configuration
==========================
Settings come from the environment (a .env file is loaded first), then
config.json overrides them. config.json is hot-reloaded when its mtime
changes; apply_config() reports which groups of settings changed.
"""
import os

from dotenv import load_dotenv

from utils import atomic_load_json

load_dotenv()


def _env_int(name, default, lo=None, hi=None):
    try: v = int(os.environ.get(name, str(default)) or default)
    except ValueError: v = default
    if lo is not None: v = max(lo, v)
    if hi is not None: v = min(hi, v)
    return v


def _env_float(name, default):
    try: return float(os.environ.get(name, str(default)) or default)
    except ValueError: return default


def _env_str(name, default=""):
    return (os.environ.get(name, default) or default).strip()

# --------------------------------------------------------------------------------
# WEATHER SOURCE
# --------------------------------------------------------------------------------
WEATHERAPI_KEY      = _env_str("WEATHERAPI_KEY")         # WeatherAPI.com credential.
WEATHER_LOCATION    = _env_str("WEATHER_LOCATION")       # City name, "lat,lon", postcode...
WEATHER_REFRESH_SEC = _env_int("WEATHER_REFRESH_SEC", 600, lo=60)
WEATHER_TIMEOUT     = _env_float("WEATHER_TIMEOUT", 10.0)
WEATHER_DAYS        = _env_int("WEATHER_DAYS", 2, lo=1, hi=3)

# --------------------------------------------------------------------------------
# CLOCK / DISPLAY
# --------------------------------------------------------------------------------
W = 800
H = 480
CLOCK_TZ     = _env_str("CLOCK_TZ")                                 # pytz name; empty = system local time.
FPS          = _env_int("FPS", 30, lo=1)
OUTPUT_MODE  = _env_str("OUTPUT_MODE", "WINDOW").upper()            # "WINDOW" or "HEADLESS".
FULLSCREEN   = os.environ.get("FULLSCREEN", "0") == "1"
DEMO_MODE    = os.environ.get("HOMECLOCK_DEMO", "0") == "1"         # Canned forecast, no network.
ICON_DIR     = _env_str("ICON_DIR")                                 # Optional <category>.png overrides.

# --------------------------------------------------------------------------------
# COLORS (palette names or #rrggbb)
# --------------------------------------------------------------------------------
BG_COLOR        = _env_str("BG_COLOR", "#001020")
DATE_COLOR      = _env_str("DATE_COLOR", "#b4b4b4")
TIME_COLOR      = _env_str("TIME_COLOR", "#ffffff")
FORECAST_COLOR  = _env_str("FORECAST_COLOR", "#969696")
RAIN_HIGH_COLOR = _env_str("RAIN_HIGH_COLOR", "#6496ff")
RAIN_LOW_COLOR  = _env_str("RAIN_LOW_COLOR", "#787878")
RAIN_HIGH_PCT   = _env_int("RAIN_HIGH_PCT", 50, lo=0, hi=100)

# --------------------------------------------------------------------------------
# FILES
# --------------------------------------------------------------------------------
BASE_DIR      = os.path.dirname(os.path.abspath(__file__))
CONFIG_PATH   = _env_str("HOMECLOCK_CONFIG", os.path.join(BASE_DIR, "config.json"))
STATUS_PATH   = _env_str("HOMECLOCK_STATUS", os.path.join(BASE_DIR, "homeclock_status.json"))
PREVIEW_PATH  = _env_str("PREVIEW_PATH", "/tmp/homeclock_preview.png")
PREVIEW_EVERY = _env_int("PREVIEW_EVERY", 10, lo=0)                # Frames between preview PNGs; 0 = off.

CONFIG_KEYS = [
    "WEATHERAPI_KEY", "WEATHER_LOCATION", "WEATHER_REFRESH_SEC", "WEATHER_TIMEOUT", "WEATHER_DAYS",
    "CLOCK_TZ", "FPS", "OUTPUT_MODE", "FULLSCREEN", "DEMO_MODE", "ICON_DIR",
    "BG_COLOR", "DATE_COLOR", "TIME_COLOR", "FORECAST_COLOR",
    "RAIN_HIGH_COLOR", "RAIN_LOW_COLOR", "RAIN_HIGH_PCT",
    "PREVIEW_PATH", "PREVIEW_EVERY",
]

COLOR_KEYS = ("BG_COLOR", "DATE_COLOR", "TIME_COLOR", "FORECAST_COLOR",
              "RAIN_HIGH_COLOR", "RAIN_LOW_COLOR", "RAIN_HIGH_PCT")
WEATHER_KEYS = ("WEATHERAPI_KEY", "WEATHER_LOCATION", "WEATHER_REFRESH_SEC", "WEATHER_TIMEOUT",
                "WEATHER_DAYS", "DEMO_MODE")


def _as_bool(v):
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "on")
    return bool(v)


def _as_str(v):
    if v is None: raise TypeError("null string")
    return str(v).strip()

# key -> (cast, lo, hi); keys not listed are strings.
_CASTS = {
    "WEATHER_REFRESH_SEC": (int, 60, None),
    "WEATHER_TIMEOUT":     (float, 1.0, None),
    "WEATHER_DAYS":        (int, 1, 3),
    "FPS":                 (int, 1, None),
    "RAIN_HIGH_PCT":       (int, 0, 100),
    "PREVIEW_EVERY":       (int, 0, None),
    "FULLSCREEN":          (_as_bool, None, None),
    "DEMO_MODE":           (_as_bool, None, None),
}

_cfg_mtime = 0.0


def coerce_setting(key, value):
    """Cast a config.json value to the setting's type and clamp it. Raises TypeError/ValueError."""
    cast, lo, hi = _CASTS.get(key, (_as_str, None, None))
    if cast in (int, float) and (value is None or isinstance(value, bool)):
        raise TypeError(f"expected a number, got {value!r}")
    v = cast(value)
    if lo is not None: v = max(lo, v)
    if hi is not None: v = min(hi, v)
    if key == "OUTPUT_MODE": v = v.upper()
    return v


def apply_config(cfg: dict) -> dict:
    """Apply config.json into globals and set 'changed' flags per category."""
    g = globals()
    changed = {"any": False, "weather": False, "colors": False, "clock": False, "display": False}
    for key in CONFIG_KEYS:
        if key not in cfg: continue
        try:
            new = coerce_setting(key, cfg[key])
        except (TypeError, ValueError):
            print(f"[CFG] Ignoring {key}={cfg[key]!r}: wrong type", flush=True)
            continue
        if g.get(key) == new: continue
        g[key] = new; changed["any"] = True
        if key in WEATHER_KEYS: changed["weather"] = True
        if key in COLOR_KEYS: changed["colors"] = True
        if key == "CLOCK_TZ": changed["clock"] = True
        if key in ("FPS", "OUTPUT_MODE", "FULLSCREEN", "PREVIEW_PATH", "PREVIEW_EVERY"): changed["display"] = True
    return changed


def initial_config_load() -> dict:
    """Load config.json once at startup."""
    global _cfg_mtime
    cfg = atomic_load_json(CONFIG_PATH)
    if not cfg:
        print(f"[START] No config.json overrides found at {CONFIG_PATH}", flush=True)
        return {"any": False}
    changes = apply_config(cfg)
    try: _cfg_mtime = os.path.getmtime(CONFIG_PATH)
    except OSError: _cfg_mtime = 0.0
    print(f"[START] Loaded config.json from {CONFIG_PATH} (changes: {changes})", flush=True)
    return changes


def maybe_reload_config() -> dict:
    """Hot-reload config.json when mtime changes; return change flags."""
    global _cfg_mtime
    try:
        m = os.path.getmtime(CONFIG_PATH)
    except OSError:
        return {"reloaded": False}
    if m <= _cfg_mtime:
        return {"reloaded": False}
    changes = apply_config(atomic_load_json(CONFIG_PATH))
    _cfg_mtime = m
    print(f"[CFG] Reloaded config.json (flags: {changes})", flush=True)
    return {"reloaded": True, **changes}
