from __future__ import annotations

import os
import re
import sys
from types import SimpleNamespace

from fastapi import FastAPI
from fastapi.testclient import TestClient

from aikit.core import artifacts, speech
from aikit.core.results import Status


def test_expose_without_app_is_empty(tmp_path):
    path = artifacts.save_artifact(str(tmp_path), "voices", "voice", "mp3", b"abc")
    assert artifacts.expose_local_url("voices", path, None) == ""


def test_save_never_overwrites(tmp_path, monkeypatch):
    monkeypatch.setattr(artifacts, "_now_ms", lambda: 1700000000123)
    a = artifacts.save_artifact(str(tmp_path), "images", "image", "png", b"one")
    b = artifacts.save_artifact(str(tmp_path), "images", "image", "png", b"two")

    assert os.path.basename(a) == "image_1700000000123.png"
    assert os.path.basename(b) == "image_1700000000123_1.png"
    with open(a, "rb") as f:
        assert f.read() == b"one"
    with open(b, "rb") as f:
        assert f.read() == b"two"


def test_exposed_route_serves_file(tmp_path):
    app = FastAPI()
    path = artifacts.save_artifact(str(tmp_path), "voices", "voice", "mp3", b"audio-bytes")
    route = artifacts.expose_local_url("voices", path, app)

    assert route == f"/voices/{os.path.basename(path)}"
    resp = TestClient(app).get(route)
    assert resp.status_code == 200
    assert resp.content == b"audio-bytes"


def test_exposed_route_500_when_file_gone(tmp_path):
    app = FastAPI()
    path = artifacts.save_artifact(str(tmp_path), "images", "image", "png", b"x")
    route = artifacts.expose_local_url("images", path, app)
    os.remove(path)

    resp = TestClient(app).get(route)
    assert resp.status_code == 500
    assert resp.text == "Error serving file"


def test_voice_over_hosted(openai_cfg):
    res = speech.generate_and_save_voice_over("hello there", "nova", config=openai_cfg)
    assert res.ok
    assert re.search(r"voices[\\/]voice_\d+\.mp3$", res.value)
    with open(res.value, "rb") as f:
        assert f.read() == b"ID3-fake-mp3"
    call = openai_cfg.openai.speech_calls[0]
    assert call == {"model": "tts-1", "voice": "nova", "input": "hello there", "speed": 1.2}


def test_voice_over_not_configured(cfg):
    res = speech.generate_and_save_voice_over("hello", config=cfg)
    assert res.status is Status.NOT_CONFIGURED


def test_voice_over_local_mode(cfg, monkeypatch):
    class FakeEngine:
        def __init__(self):
            self.props = {}
            self.target = None

        def setProperty(self, name, value):
            self.props[name] = value

        def save_to_file(self, text, path):
            self.target = path

        def runAndWait(self):
            with open(self.target, "wb") as f:
                f.write(b"RIFF-fake-wav")

    engine = FakeEngine()
    monkeypatch.setitem(sys.modules, "pyttsx3", SimpleNamespace(init=lambda: engine))
    cfg.set_local_speech_mode(True)

    res = speech.generate_and_save_voice_over("offline please", config=cfg)
    assert res.ok
    assert res.value.endswith(".wav")
    with open(res.value, "rb") as f:
        assert f.read() == b"RIFF-fake-wav"
    assert engine.props == {"rate": 180}
    assert not os.path.exists(engine.target)


def test_local_mode_ignores_hosted_voice_names(cfg, monkeypatch):
    class StrictEngine:
        """Rejects voice ids it does not know, like the OS drivers do."""

        def __init__(self):
            self.props = {}
            self.target = None

        def setProperty(self, name, value):
            if name == "voice":
                raise KeyError(value)
            self.props[name] = value

        def save_to_file(self, text, path):
            self.target = path

        def runAndWait(self):
            with open(self.target, "wb") as f:
                f.write(b"RIFF-fake-wav")

    engine = StrictEngine()
    monkeypatch.setitem(sys.modules, "pyttsx3", SimpleNamespace(init=lambda: engine))
    cfg.set_local_speech_mode(True)

    for voice in sorted(speech.OPENAI_VOICES):
        res = speech.generate_and_save_voice_over("offline please", voice=voice, config=cfg)
        assert res.ok, voice
        assert res.value.endswith(".wav")
    assert "voice" not in engine.props
