#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Property of solutions reseaux chromatel
"""
Home Clock - Control Panel (with Live Preview)
==============================================
This Flask UI edits `config.json` (hot-reloaded by the clock), shows the
weather worker status and a Live Preview of the current frame.

Notes
-----
 - Preview reads the PNG the clock writes every PREVIEW_EVERY frames
   (PREVIEW_PATH, default /tmp/homeclock_preview.png).
 - Worker status and the last forecast come from homeclock_status.json.

Environment (optional)
----------------------
HOMECLOCK_CONFIG - path of config.json (default: next to this file)
HOMECLOCK_STATUS - path of the status file (default: next to this file)
PREVIEW_PATH     - preview PNG path
FLASK_SECRET     - Secret key; set this in production
FLASK_PORT       - Listening port (default 5080)
"""
import os
import io
import json
import time
import tempfile
from threading import Lock

from flask import (
    Flask, request, redirect, url_for, render_template_string,
    jsonify, flash, Response
)
from PIL import Image

APP_TITLE = "Home Clock - Control Panel"
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_PATH = os.environ.get("HOMECLOCK_CONFIG", os.path.join(BASE_DIR, "config.json"))
STATUS_PATH = os.environ.get("HOMECLOCK_STATUS", os.path.join(BASE_DIR, "homeclock_status.json"))
PREVIEW_PATH = os.environ.get("PREVIEW_PATH", "/tmp/homeclock_preview.png")

app = Flask(__name__)
app.secret_key = os.environ.get("FLASK_SECRET", "dev-secret")  # change in prod
_write_lock = Lock()

# Form fields: (key, cast). cast None = plain string.
FORM_FIELDS = [
    ("WEATHER_LOCATION", None), ("WEATHER_REFRESH_SEC", int), ("CLOCK_TZ", None), ("FPS", int),
    ("BG_COLOR", None), ("DATE_COLOR", None), ("TIME_COLOR", None), ("FORECAST_COLOR", None),
    ("RAIN_HIGH_COLOR", None), ("RAIN_LOW_COLOR", None), ("RAIN_HIGH_PCT", int),
]

# ---------------------------- helpers ---------------------------------
def load_cfg():
    try:
        with open(CONFIG_PATH, "r", encoding="utf-8") as f:
            data = json.load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, ValueError):
        return {}

def atomic_save_cfg(cfg: dict):
    """Atomic write of config.json with a lock."""
    with _write_lock:
        dname = os.path.dirname(CONFIG_PATH) or "."
        fd, tmp = tempfile.mkstemp(prefix=".cfg.", dir=dname)
        os.close(fd)
        try:
            with open(tmp, "w", encoding="utf-8", newline="\n") as f:
                json.dump(cfg, f, indent=2, ensure_ascii=False)
            os.replace(tmp, CONFIG_PATH)
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)

def load_workers():
    """Worker entries from the status file, each with seconds_ago added."""
    try:
        with open(STATUS_PATH, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    workers = data.get("workers", {}) if isinstance(data, dict) else {}
    now = time.time()
    for worker_data in workers.values():
        ts = worker_data.get("timestamp", 0)
        worker_data["seconds_ago"] = int(now - ts) if ts > 0 else None
    return workers

def _get_num(form, name, default=0, cast=float):
    raw = form.get(name, None)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        return default

def _read_preview_png_bytes(scale: int = 1) -> tuple:
    """
    Return (ok, bytes_or_message, mime):
    - On success: (True, PNG_bytes, 'image/png')
    - On error:   (False, error_message, 'text/plain')
    """
    if not os.path.exists(PREVIEW_PATH):
        return False, f"Preview file not found: {PREVIEW_PATH}\nEnsure the clock is running.", "text/plain"
    try:
        with Image.open(PREVIEW_PATH) as img:
            img.load()
            if scale > 1:
                img = img.resize((img.width * scale, img.height * scale), Image.NEAREST)
            buf = io.BytesIO()
            img.save(buf, format="PNG")
        return True, buf.getvalue(), "image/png"
    except OSError as e:
        return False, f"Error reading preview: {e}", "text/plain"

# ---------------------------- templates --------------------------------
HOME_HTML = """
<!doctype html>
<html lang="en"><head>
 <meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1">
 <title>{{title}}</title>
 <style>
  body{font-family:system-ui,sans-serif;margin:0;background:#0b0f16;color:#e6e6e6}
  header{padding:12px 16px;background:#0f1724;border-bottom:1px solid #1c2434}
  main{padding:16px;max-width:1000px;margin:0 auto}
  section{margin:18px 0;padding:12px;border:1px solid #1c2434;border-radius:8px;background:#0f1724}
  label{display:block;margin:8px 0 4px;color:#a7b1c2}
  input{width:100%;padding:8px;background:#0b0f16;border:1px solid #273046;color:#e6e6e6;border-radius:6px}
  button{background:#2563eb;color:white;border:none;padding:8px 12px;border-radius:6px;cursor:pointer}
  .grid2{display:grid;grid-template-columns:repeat(2,1fr);gap:12px}
  .mono{font-family:ui-monospace,Menlo,Consolas,monospace}
  .ok{color:#16a34a} .bad{color:#dc2626}
 </style>
</head><body>
<header><h1>{{title}}</h1></header>
<main>
{% with msgs = get_flashed_messages() %}
 {% if msgs %}<section>{% for m in msgs %}<div>{{m}}</div>{% endfor %}</section>{% endif %}
{% endwith %}
<section>
 <h2>Live Preview</h2>
 {% if preview_ok %}
 <img src="{{ url_for('preview_png') }}?t={{nowts}}" alt="preview" style="image-rendering:pixelated;max-width:100%">
 {% else %}
 <div class="bad">Preview unavailable - is the clock running?</div>
 {% endif %}
</section>
<section>
 <h2>Weather worker</h2>
 {% if weather %}
  <div class="{{ 'ok' if weather.status == 'ok' else 'bad' }}">{{ weather.status }}
   ({{ weather.seconds_ago }}s ago){% if weather.error_message %} - {{ weather.error_message }}{% endif %}</div>
  {% if weather.snapshot and weather.snapshot.forecast %}
  <table class="mono">
   <tr><th>time</th><th>code</th><th>rain</th></tr>
   {% for p in weather.snapshot.forecast %}
   <tr><td>{{ p.time }}</td><td>{{ p.code }}</td><td>{{ p.chance_of_rain }}%</td></tr>
   {% endfor %}
  </table>
  {% endif %}
 {% else %}
  <div class="bad">No status yet</div>
 {% endif %}
</section>
<form method="post" action="{{ url_for('save') }}">
<section>
 <h2>Settings</h2>
 <div class="grid2">
 {% for key in fields %}
  <div><label>{{ key }}</label><input name="{{ key }}" value="{{ cfg.get(key, '') }}"></div>
 {% endfor %}
 </div>
 <p><button type="submit">Save Config</button></p>
</section>
</form>
</main>
</body></html>
"""

# ---------------------------- routes -----------------------------------
@app.route("/")
def home():
    return render_template_string(
        HOME_HTML,
        title=APP_TITLE,
        cfg=load_cfg(),
        fields=[k for k, _ in FORM_FIELDS],
        weather=load_workers().get("weather"),
        preview_ok=os.path.exists(PREVIEW_PATH),
        nowts=int(time.time()),
    )

@app.post("/save")
def save():
    cfg = load_cfg()
    rejected = []
    for key, cast in FORM_FIELDS:
        raw = request.form.get(key, "").strip()
        # Blank keeps the value in use (config.json or the environment).
        if not raw:
            continue
        if cast is None:
            cfg[key] = raw
            continue
        value = _get_num(request.form, key, None, cast)
        if value is None:
            rejected.append(key)
        else:
            cfg[key] = value
    atomic_save_cfg(cfg)
    if rejected:
        flash(f"Not a number, left unchanged: {', '.join(rejected)}")
    flash("Saved. The clock picks changes up within a second.")
    return redirect(url_for("home"))

@app.get("/preview.png")
def preview_png():
    try:
        scale = max(1, min(8, int(request.args.get("scale", 1))))
    except ValueError:
        scale = 1
    ok, payload, mime = _read_preview_png_bytes(scale=scale)
    if not ok:
        return Response(payload, status=503, mimetype=mime)
    return Response(payload, mimetype=mime, headers={
        "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
        "Pragma": "no-cache",
        "Expires": "0",
    })

# JSON helpers (optional)
@app.get("/api/config")
def api_get_config():
    return jsonify(load_cfg())

@app.post("/api/config")
def api_set_config():
    cfg = request.get_json(force=True, silent=True)
    if not isinstance(cfg, dict):
        return jsonify({"ok": False, "error": "expected JSON object"}), 400
    atomic_save_cfg(cfg)
    return jsonify({"ok": True})

@app.get("/api/workers")
def api_workers():
    """Get worker status from the status file."""
    workers = load_workers()
    return jsonify({
        "workers": workers,
        "file_exists": os.path.exists(STATUS_PATH),
        "timestamp": int(time.time())
    })

def main():
    port = int(os.environ.get("FLASK_PORT", "5080"))
    app.run(host="0.0.0.0", port=port, debug=False)

if __name__ == "__main__":
    main()
