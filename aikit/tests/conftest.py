from __future__ import annotations

import base64
import io
from types import SimpleNamespace

import pytest
from PIL import Image

from aikit.core.config import ProviderConfig


def png_b64(color=(255, 0, 0)) -> str:
    img = Image.new("RGB", (4, 4), color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


class FakeOpenAI:
    """Records calls and answers like the OpenAI v1 client."""

    def __init__(self, text: str = "hello from openai", fail: bool = False):
        self.text = text
        self.fail = fail
        self.chat_calls = []
        self.speech_calls = []
        self.image_calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._chat))
        self.audio = SimpleNamespace(speech=SimpleNamespace(create=self._speech))
        self.images = SimpleNamespace(generate=self._image)

    def _chat(self, **kwargs):
        self.chat_calls.append(kwargs)
        if self.fail:
            raise ConnectionError("network down")
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.text))])

    def _speech(self, **kwargs):
        self.speech_calls.append(kwargs)
        if self.fail:
            raise ConnectionError("network down")
        return SimpleNamespace(content=b"ID3-fake-mp3")

    def _image(self, **kwargs):
        self.image_calls.append(kwargs)
        if self.fail:
            raise ConnectionError("network down")
        return SimpleNamespace(data=[SimpleNamespace(b64_json=png_b64())])


@pytest.fixture
def cfg(tmp_path):
    return ProviderConfig(artifacts_dir=str(tmp_path))


@pytest.fixture
def openai_cfg(cfg):
    cfg.openai = FakeOpenAI()
    cfg.openai_key = "sk-test"
    return cfg
