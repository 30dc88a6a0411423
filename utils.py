#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
"""
Home Clock - Shared Utilities
=============================
Shared functions used by both the main loop and the workers.
Includes: timezone/clock helpers, status file helpers, queue handoff.
"""

import os
import time
import json
import queue as queue_std
from datetime import datetime

import pytz

# Global timezone (set by set_globals)
TZINFO = None


def set_globals(**kwargs):
    """Set globals from main loop."""
    global TZINFO
    if 'TZINFO' in kwargs:
        TZINFO = kwargs['TZINFO']


def resolve_tz(name: str):
    """Return a pytz timezone for `name`, or None (system local time) if empty/invalid."""
    name = (name or "").strip()
    if not name:
        return None
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        print(f"[WARN] Timezone '{name}' invalid; using local system time.", flush=True)
        return None


def now_local():
    """Get current time in local timezone."""
    return datetime.now(TZINFO) if TZINFO else datetime.now().astimezone()

# =================================================================================================
# ===================================== STATUS FILE HELPERS =======================================
# =================================================================================================

def atomic_load_json(path: str) -> dict:
    """Load JSON safely ({} on error)."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, ValueError):
        return {}


def update_worker_status(status_path: str, worker_name: str, status: dict):
    """Update worker status in the status JSON file."""
    try:
        status_data = atomic_load_json(status_path) if os.path.exists(status_path) else {}
        if "workers" not in status_data:
            status_data["workers"] = {}
        status_data["workers"][worker_name] = {
            **status,
            "timestamp": time.time()
        }
        # Write atomically
        with open(status_path + ".tmp", "w", encoding="utf-8") as f:
            json.dump(status_data, f, indent=2)
        os.replace(status_path + ".tmp", status_path)
    except OSError as e:
        # Status is informational only
        print(f"[STATUS] write failed for {worker_name}: {e}", flush=True)

# =================================================================================================
# ===================================== QUEUE HELPERS =============================================
# =================================================================================================

def put_latest(q, payload: dict):
    """Drop stale payloads and push the newest one to the queue."""
    try:
        while True: q.get_nowait()
    except queue_std.Empty:
        pass
    try:
        q.put_nowait(payload)
    except queue_std.Full:
        # Queue still full after drain (race with the reader) - drop oldest and retry
        try:
            q.get_nowait()
        except queue_std.Empty:
            pass
        try:
            q.put_nowait(payload)
        except queue_std.Full:
            print("[QUEUE] put_latest gave up; reader will keep its previous value", flush=True)


def drain_latest(q, current=None, msg_type: str = "weather"):
    """
    Non-blocking read of everything waiting in `q`; return the payload of the
    newest message of `msg_type`, or `current` if nothing new arrived.
    """
    latest = current
    try:
        while True:
            msg = q.get_nowait()
            if isinstance(msg, dict) and msg.get("type") == msg_type:
                latest = msg.get("payload", latest)
    except queue_std.Empty:
        pass
    return latest
