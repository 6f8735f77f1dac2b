from __future__ import annotations

import pytest

from aikit.core import backends
from aikit.core.backends import (
    HostedChatSettings,
    HostedCompletionSettings,
    HostedInferenceSettings,
    LocalSettings,
    ModelKind,
    backend_settings,
)
from aikit.core.results import NotConfiguredError


@pytest.fixture
def keyed(cfg):
    cfg.openai_key = "sk-openai"
    cfg.anthropic_key = "sk-ant"
    cfg.hf_key = "hf_123"
    return cfg


def test_default_model_names(keyed):
    assert backend_settings(ModelKind.LOCAL, keyed) == LocalSettings("mistral", 0.2, "http://localhost:11434")
    assert backend_settings(ModelKind.HOSTED_COMPLETION, keyed) == HostedCompletionSettings(
        "gpt-3.5-turbo-0613", 0.2, "sk-openai"
    )
    assert backend_settings(ModelKind.HOSTED_CHAT, keyed) == HostedChatSettings("claude-2.1", 0.2, "sk-ant", 1024)
    hf = backend_settings(ModelKind.HOSTED_INFERENCE, keyed)
    assert hf == HostedInferenceSettings(
        "mistralai/Mistral-7B-Instruct-v0.2",
        "hf_123",
        "https://api-inference.huggingface.co/models/mistralai/Mistral-7B-Instruct-v0.2",
        0.7,
    )


def test_non_empty_name_overrides_default(keyed):
    s = backend_settings(ModelKind.HOSTED_CHAT, keyed, model_name="claude-3-haiku", temperature=0.5)
    assert s.model == "claude-3-haiku"
    assert s.temperature == 0.5
    assert backend_settings(ModelKind.LOCAL, keyed, model_name="").model == "mistral"


def test_inference_uses_explicit_endpoint_and_fixed_temperature(keyed):
    s = backend_settings(ModelKind.HOSTED_INFERENCE, keyed, "my/model", 0.1, "https://my-endpoint.example")
    assert s.endpoint_url == "https://my-endpoint.example"
    assert s.temperature == 0.7


def test_kind_accepts_string_value(keyed):
    assert isinstance(backend_settings("local", keyed), LocalSettings)
    with pytest.raises(ValueError):
        backend_settings("telepathy", keyed)


def test_hosted_backends_need_credentials(cfg):
    with pytest.raises(NotConfiguredError):
        backends.create_model(backend_settings(ModelKind.HOSTED_COMPLETION, cfg), 10.0)
    with pytest.raises(NotConfiguredError):
        backends.create_model(backend_settings(ModelKind.HOSTED_CHAT, cfg), 10.0)


def test_local_model_invokes_ollama(monkeypatch, cfg):
    seen = {}

    class MockResp:
        status_code = 200

        def json(self):
            return {"response": " grounded answer "}

    def mock_post(url, json, timeout):  # noqa: A002
        seen.update(url=url, json=json, timeout=timeout)
        return MockResp()

    monkeypatch.setattr("requests.post", mock_post)
    model = backends.create_model(backend_settings(ModelKind.LOCAL, cfg, temperature=0.3), 12.0)

    assert model.invoke("q") == "grounded answer"
    assert seen["url"] == "http://localhost:11434/api/generate"
    assert seen["json"]["model"] == "mistral"
    assert seen["json"]["options"] == {"temperature": 0.3}
    assert seen["timeout"] == 12.0


def test_hf_inference_invoke(monkeypatch, keyed):
    seen = {}

    class MockResp:
        status_code = 200

        def json(self):
            return [{"generated_text": "hf says hi"}]

    def mock_post(url, json, headers, timeout):  # noqa: A002
        seen.update(url=url, json=json, headers=headers)
        return MockResp()

    monkeypatch.setattr("requests.post", mock_post)
    model = backends.create_model(backend_settings(ModelKind.HOSTED_INFERENCE, keyed, "gpt2"), 5.0)

    assert model.invoke("hello") == "hf says hi"
    assert seen["headers"] == {"Authorization": "Bearer hf_123"}
    assert seen["json"]["parameters"]["temperature"] == 0.7
