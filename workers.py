#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
"""
Home Clock - Data Worker Process
================================
Worker process that fetches the forecast in parallel with the render loop
and hands each new snapshot over through a single-slot queue.
"""

import time
from multiprocessing import Queue

from utils import update_worker_status, put_latest
from weather import WeatherFetchError, get_weather, demo_snapshot, snapshot_summary


def poll_weather_once(api_key, location, timeout_s, days, out_q, status_path=None, demo=False, fetch=get_weather):
    """
    One fetch cycle. On success the snapshot is published; on failure nothing
    is published, so the reader keeps whatever it had. Returns the status dict.
    """
    fetch_start = time.time()
    error_msg = None
    snapshot = None
    try:
        if demo:
            snapshot = demo_snapshot(int(time.time()))
        else:
            snapshot = fetch(api_key, location, timeout=timeout_s, days=days)
        status = "ok"
    except WeatherFetchError as e:
        status = "error"
        error_msg = str(e)[:120]
        print(f"[WEATHER] fetch failed: {error_msg}", flush=True)
    except Exception as e:
        status = "error"
        error_msg = f"{type(e).__name__}: {e}"[:120]
        print(f"[WEATHER] unexpected error: {error_msg}", flush=True)

    fetch_duration = time.time() - fetch_start
    info = {
        "status": status,
        "location": location,
        "points": len(snapshot.forecast) if snapshot else 0,
        "fetch_duration_sec": round(fetch_duration, 2),
        "error_message": error_msg,
        "last_update": time.strftime("%Y-%m-%d %H:%M:%S"),
    }
    if snapshot is not None:
        info["snapshot"] = snapshot_summary(snapshot)
        put_latest(out_q, {"type": "weather", "payload": snapshot})

    if status_path:
        update_worker_status(status_path, "weather", info)
    return info


def weather_worker(api_key, location, refresh_sec, timeout_s, days, out_q: Queue, status_path=None, demo=False,
                   fetch=get_weather):
    """Poll WeatherAPI forever on a fixed interval and publish the newest snapshot."""
    print(f"[WEATHER] worker started: location={location!r} every {refresh_sec}s demo={int(demo)}", flush=True)
    while True:
        try:
            poll_weather_once(api_key, location, timeout_s, days, out_q, status_path, demo, fetch)
        except Exception as e:
            print(f"[WEATHER] cycle failed: {e}", flush=True)
        time.sleep(max(60, refresh_sec))
