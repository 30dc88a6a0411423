#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
# =================================================================================================
# ========================================= HOME CLOCK ============================================
# =================================================================================================
# Kiosk clock: date line, big blinking HH:MM, and a 4-hour forecast strip.
# The render loop owns the frame buffer; a worker process fetches weather and
# publishes snapshots through a single-slot queue.
import os
import sys
import time
import signal
from multiprocessing import Process, Queue, set_start_method

import pygame

import config
import layout
import rendering
from framebuffer import FrameBuffer
from icons import IconAssetError, load_icon_dir, set_icon_set
from utils import now_local, drain_latest, resolve_tz, set_globals as set_utils_globals
from workers import weather_worker

# Global shutdown flag
_shutdown_requested = False


def _signal_handler(signum, frame):
    """Handle SIGTERM and SIGINT gracefully."""
    global _shutdown_requested
    sig_name = "SIGTERM" if signum == signal.SIGTERM else "SIGINT"
    print(f"\n[SIGNAL] Received {sig_name}, initiating clean shutdown...", flush=True)
    _shutdown_requested = True


def _terminate_worker(proc):
    """Terminate a worker process gracefully, falling back to kill."""
    if proc and proc.is_alive():
        proc.terminate()
        proc.join(timeout=1.0)
        if proc.is_alive():
            proc.kill()
            proc.join(timeout=0.5)


def _apply_layout_colors():
    pc = rendering.parse_color
    layout.set_globals(
        BG_COLOR=pc(config.BG_COLOR, (0, 16, 32)),
        DATE_COLOR=pc(config.DATE_COLOR, (180, 180, 180)),
        TIME_COLOR=pc(config.TIME_COLOR, (255, 255, 255)),
        FORECAST_COLOR=pc(config.FORECAST_COLOR, (150, 150, 150)),
        RAIN_HIGH_COLOR=pc(config.RAIN_HIGH_COLOR, (100, 150, 255)),
        RAIN_LOW_COLOR=pc(config.RAIN_LOW_COLOR, (120, 120, 120)),
        RAIN_HIGH_PCT=int(config.RAIN_HIGH_PCT),
    )


def _load_icons():
    """Swap in PNG icons from ICON_DIR. Bad assets abort startup."""
    if not config.ICON_DIR:
        return
    try:
        set_icon_set(load_icon_dir(config.ICON_DIR))
    except IconAssetError as e:
        print(f"[ICONS] FATAL: {e}", flush=True)
        sys.exit(1)
    print(f"[ICONS] Loaded icon overrides from {config.ICON_DIR}", flush=True)


def _start_weather_worker(wq):
    proc = Process(target=weather_worker,
                   args=(config.WEATHERAPI_KEY, config.WEATHER_LOCATION, config.WEATHER_REFRESH_SEC,
                         config.WEATHER_TIMEOUT, config.WEATHER_DAYS, wq, config.STATUS_PATH, config.DEMO_MODE),
                   daemon=True)
    proc.start()
    print("[WORKERS] Weather worker started", flush=True)
    return proc


def run():
    global _shutdown_requested

    signal.signal(signal.SIGTERM, _signal_handler)
    signal.signal(signal.SIGINT, _signal_handler)

    # 1) Load config first
    config.initial_config_load()
    set_utils_globals(TZINFO=resolve_tz(config.CLOCK_TZ))
    rendering.set_globals(W=config.W, H=config.H, OUTPUT_MODE=config.OUTPUT_MODE, FULLSCREEN=config.FULLSCREEN)
    _apply_layout_colors()
    _load_icons()

    print("=" * 80, flush=True)
    print(f"[START] Home Clock {config.W}x{config.H} (mode={config.OUTPUT_MODE}, fps={config.FPS})", flush=True)
    print(f"[START] Timezone: {config.CLOCK_TZ or 'system'}", flush=True)
    print(f"[START] Config file: {config.CONFIG_PATH}", flush=True)
    if config.DEMO_MODE: print("[START] DEMO MODE: no network calls", flush=True)
    if not config.DEMO_MODE and not (config.WEATHERAPI_KEY and config.WEATHER_LOCATION):
        print("[START] WEATHERAPI_KEY / WEATHER_LOCATION not set; forecast strip stays empty", flush=True)

    # Single-slot handoff: the worker always replaces whatever is waiting.
    wq = Queue(maxsize=1)
    snapshot = None
    worker = _start_weather_worker(wq)

    screen, clock = rendering.init_pygame()
    fb = FrameBuffer(config.W, config.H)
    frame_count = 0
    first_frame = True

    try:
        while not _shutdown_requested:
            if rendering.quit_requested():
                print("[MAIN] Window closed; exiting.", flush=True)
                break

            snapshot = drain_latest(wq, snapshot)

            layout.render_frame(fb, now_local(), snapshot)
            if rendering.present(screen, fb) and first_frame:
                first_frame = False
                print("[DISPLAY] First frame presented", flush=True)

            frame_count += 1
            if config.PREVIEW_EVERY and frame_count % config.PREVIEW_EVERY == 0:
                rendering.save_preview(fb, config.PREVIEW_PATH)

            if frame_count % max(1, config.FPS) == 0:
                changes = config.maybe_reload_config()
                if changes.get("colors"): _apply_layout_colors()
                if changes.get("clock"): set_utils_globals(TZINFO=resolve_tz(config.CLOCK_TZ))
                if changes.get("weather"):
                    _terminate_worker(worker)
                    worker = _start_weather_worker(wq)
                    print("[WORKERS] Weather worker restarted after config change", flush=True)

            clock.tick(config.FPS)

    except KeyboardInterrupt:
        print("\n[MAIN] Keyboard interrupt; exiting.", flush=True)
    finally:
        print("[SHUTDOWN] Cleaning up workers...", flush=True)
        start_cleanup = time.time()
        _terminate_worker(worker)
        print(f"[SHUTDOWN] Cleanup completed in {time.time() - start_cleanup:.2f}s", flush=True)
        pygame.quit()


def main():
    if os.environ.get("XDG_RUNTIME_DIR", "").strip() == "":
        os.environ["XDG_RUNTIME_DIR"] = "/tmp"
    try:
        set_start_method("spawn")
    except RuntimeError:
        pass
    run()


if __name__ == "__main__":
    main()
