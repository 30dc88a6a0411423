"""Tests for the control panel routes."""

import io
import json

import pytest
from PIL import Image

import flask_ui


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(flask_ui, "CONFIG_PATH", str(tmp_path / "config.json"))
    monkeypatch.setattr(flask_ui, "STATUS_PATH", str(tmp_path / "status.json"))
    monkeypatch.setattr(flask_ui, "PREVIEW_PATH", str(tmp_path / "preview.png"))
    flask_ui.app.config["TESTING"] = True
    with flask_ui.app.test_client() as c:
        yield c


class TestConfigApi:
    def test_empty_config(self, client):
        assert client.get("/api/config").get_json() == {}

    def test_round_trip(self, client, tmp_path):
        resp = client.post("/api/config", json={"WEATHER_LOCATION": "Osaka", "FPS": 20})
        assert resp.get_json() == {"ok": True}
        assert json.loads((tmp_path / "config.json").read_text())["FPS"] == 20
        assert client.get("/api/config").get_json()["WEATHER_LOCATION"] == "Osaka"

    def test_rejects_non_object(self, client):
        resp = client.post("/api/config", data="[1,2]", content_type="application/json")
        assert resp.status_code == 400

    def test_form_save_casts_numbers(self, client, tmp_path):
        (tmp_path / "config.json").write_text(json.dumps({"RAIN_HIGH_PCT": 60}))
        resp = client.post("/save", data={"FPS": "15", "RAIN_HIGH_PCT": "oops", "CLOCK_TZ": " Asia/Tokyo "})
        assert resp.status_code == 302
        cfg = json.loads((tmp_path / "config.json").read_text())
        assert cfg["FPS"] == 15
        assert cfg["RAIN_HIGH_PCT"] == 60
        assert cfg["CLOCK_TZ"] == "Asia/Tokyo"

    def test_blank_form_writes_nothing(self, client, tmp_path):
        (tmp_path / "config.json").write_text(json.dumps({"FPS": 20}))
        client.post("/save", data={key: "" for key, _ in flask_ui.FORM_FIELDS})
        cfg = json.loads((tmp_path / "config.json").read_text())
        assert cfg == {"FPS": 20}

    def test_blank_save_keeps_environment_settings(self, client, monkeypatch):
        import config
        for key in config.CONFIG_KEYS:
            monkeypatch.setattr(config, key, getattr(config, key))
        monkeypatch.setattr(config, "WEATHER_LOCATION", "Tokyo")
        client.post("/save", data={key: "" for key, _ in flask_ui.FORM_FIELDS})
        flags = config.apply_config(flask_ui.load_cfg())
        assert flags["weather"] is False
        assert config.WEATHER_LOCATION == "Tokyo"
        assert isinstance(config.FPS, int) and isinstance(config.RAIN_HIGH_PCT, int)


class TestStatusAndPreview:
    def test_workers_without_file(self, client):
        body = client.get("/api/workers").get_json()
        assert body["workers"] == {} and body["file_exists"] is False

    def test_workers_seconds_ago(self, client, tmp_path):
        (tmp_path / "status.json").write_text(json.dumps(
            {"workers": {"weather": {"status": "ok", "timestamp": 1.0}}}))
        weather = client.get("/api/workers").get_json()["workers"]["weather"]
        assert weather["seconds_ago"] > 0

    def test_home_renders(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"Home Clock" in resp.data

    def test_preview_missing(self, client):
        assert client.get("/preview.png").status_code == 503

    def test_preview_scaled(self, client, tmp_path):
        Image.new("RGB", (8, 4), (0, 16, 32)).save(tmp_path / "preview.png")
        resp = client.get("/preview.png?scale=3")
        assert resp.status_code == 200 and resp.mimetype == "image/png"
        with Image.open(io.BytesIO(resp.data)) as img:
            assert img.size == (24, 12)
