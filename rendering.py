#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
"""
Home Clock - Display Output
===========================
pygame window setup, frame buffer -> screen presentation, PNG preview
snapshots (read by the control panel) and color parsing.
"""
import os
import time

import pygame
from PIL import Image

from framebuffer import FrameBuffer

OUTPUT_MODE = "WINDOW"  # "WINDOW" or "HEADLESS"
FULLSCREEN = False
W = 800
H = 480

_present_err_ts = 0.0
_preview_err_ts = 0.0


def set_globals(**kwargs):
    """Set globals from homeclock.py"""
    g = globals()
    for key, value in kwargs.items():
        if key in g:
            g[key] = value

# ------------------------------ colors ------------------------------------------------------------
_PALETTE = {
    "white": (220, 220, 220), "yellow": (255, 255, 0), "red": (255, 0, 0), "green": (0, 255, 0),
    "cyan": (100, 180, 255), "blue": (80, 160, 255), "magenta": (255, 80, 180), "orange": (255, 165, 0),
    "grey": (140, 140, 140), "gray": (140, 140, 140), "black": (0, 0, 0),
}


def parse_color(value, default=(255, 255, 255)):
    """Palette name, '#rrggbb', or an (r, g, b) sequence -> (r, g, b)."""
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return tuple(max(0, min(255, int(c))) for c in value)
    s = (value or "").strip().lower() if isinstance(value, str) else ""
    if s in _PALETTE:
        return _PALETTE[s]
    if s.startswith("#") and len(s) == 7:
        try:
            return int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16)
        except ValueError:
            pass
    return default

# ------------------------------ PYGAME ------------------------------------------------------------
def init_pygame():
    """Initialize pygame and create the output surface/window."""
    os.environ.setdefault("XDG_RUNTIME_DIR", "/tmp")
    if OUTPUT_MODE == "HEADLESS":
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        os.environ["SDL_AUDIODRIVER"] = "dummy"
        pygame.display.init()
        clock = pygame.time.Clock()
        screen = pygame.Surface((W, H))
        print(f"[PYGAME] Initialized headless ({W}x{H})", flush=True)
        return screen, clock
    pygame.display.init()
    pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN])
    clock = pygame.time.Clock()
    flags = pygame.FULLSCREEN if FULLSCREEN else 0
    screen = pygame.display.set_mode((W, H), flags)
    pygame.display.set_caption("Home Clock")
    if FULLSCREEN:
        pygame.mouse.set_visible(False)
    print(f"[PYGAME] Window {W}x{H} fullscreen={int(FULLSCREEN)}", flush=True)
    return screen, clock


def quit_requested() -> bool:
    """Drain window events; True on close or Escape."""
    if OUTPUT_MODE == "HEADLESS":
        return False
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return True
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return True
    return False


def frame_to_pygame(fb: FrameBuffer) -> pygame.Surface:
    return pygame.image.frombuffer(fb.to_rgb_bytes(), (fb.width, fb.height), "RGB")


def present(screen, fb: FrameBuffer) -> bool:
    """Blit the frame buffer to the window. Returns True on success."""
    global _present_err_ts
    if OUTPUT_MODE == "HEADLESS":
        return True
    try:
        if (screen.get_width(), screen.get_height()) != (fb.width, fb.height):
            raise ValueError(f"dimension mismatch: screen {screen.get_width()}x{screen.get_height()}, "
                             f"frame {fb.width}x{fb.height}")
        screen.blit(frame_to_pygame(fb), (0, 0))
        pygame.display.flip()
        return True
    except (pygame.error, ValueError) as e:
        now = time.time()
        if now - _present_err_ts >= 10.0:
            print(f"[DISPLAY] present failed (suppressing repeats for 10s): {e}", flush=True)
            _present_err_ts = now
        return False

# ------------------------------ preview -----------------------------------------------------------
def frame_to_image(fb: FrameBuffer) -> Image.Image:
    return Image.frombytes("RGB", (fb.width, fb.height), fb.to_rgb_bytes())


def save_preview(fb: FrameBuffer, path: str) -> bool:
    """Write the frame as PNG (tmp file + rename so readers never see half a file)."""
    global _preview_err_ts
    tmp = path + ".tmp"
    try:
        frame_to_image(fb).save(tmp, format="PNG")
        os.replace(tmp, path)
        return True
    except OSError as e:
        now = time.time()
        if now - _preview_err_ts >= 10.0:
            print(f"[PREVIEW] save failed: {e}", flush=True)
            _preview_err_ts = now
        return False
