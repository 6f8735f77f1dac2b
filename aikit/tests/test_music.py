from __future__ import annotations

from types import SimpleNamespace

from aikit.core import music
from aikit.core.results import Status


class FakeReplicate:
    def __init__(self, output):
        self.output = output
        self.calls = []

    def run(self, ref, input):  # noqa: A002
        self.calls.append((ref, input))
        return self.output


def test_music_not_configured(cfg):
    res = music.generate_music("lofi beat", config=cfg)
    assert res.status is Status.NOT_CONFIGURED


def test_hosted_music_fixed_parameters(cfg):
    cfg.replicate = FakeReplicate("https://replicate.delivery/out.mp3")
    res = music.generate_music("lofi beat", config=cfg)

    assert res.ok
    assert res.value == music.MusicResult(source="hosted", url="https://replicate.delivery/out.mp3")
    ref, payload = cfg.replicate.calls[0]
    assert ref.startswith("meta/musicgen:")
    assert payload == {
        "prompt": "lofi beat",
        "model_version": "large",
        "output_format": "mp3",
        "normalization_strategy": "peak",
    }


def test_hosted_music_file_output(cfg):
    cfg.replicate = FakeReplicate(SimpleNamespace(url="https://replicate.delivery/file.mp3"))
    res = music.generate_music("jazz", config=cfg)
    assert res.value.url == "https://replicate.delivery/file.mp3"


def test_local_music_same_result_shape(cfg, monkeypatch):
    monkeypatch.setattr(music, "_local_music_wav", lambda prompt: b"RIFF-music")
    res = music.generate_music("jazz", use_local_model=True, config=cfg)

    assert res.ok
    assert isinstance(res.value, music.MusicResult)
    assert res.value.source == "local"
    assert res.value.url == ""
    assert res.value.path.endswith(".wav")


def test_hosted_music_error(cfg):
    class Broken:
        def run(self, ref, input):  # noqa: A002
            raise RuntimeError("quota")

    cfg.replicate = Broken()
    assert music.generate_music("jazz", config=cfg).status is Status.UPSTREAM_ERROR
