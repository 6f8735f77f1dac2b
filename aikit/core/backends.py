"""Language-model backends for the RAG chain.

ModelKind is a closed set. backend_settings() maps a kind plus caller options
to one frozen settings object per variant; create_model() maps settings to a
model exposing ``invoke(prompt) -> str``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import requests

from .config import DEFAULT_LOCAL_BASE_URL, DEFAULT_TEMPERATURE, ProviderConfig, resolve
from .llm_client import ollama_generate
from .results import NotConfiguredError

logger = logging.getLogger("aikit.backends")

HF_INFERENCE_URL = "https://api-inference.huggingface.co/models/{model}"
HF_TEMPERATURE = 0.7
ANTHROPIC_MAX_TOKENS = 1024


class ModelKind(str, Enum):
    LOCAL = "local"
    HOSTED_COMPLETION = "hosted_completion"
    HOSTED_CHAT = "hosted_chat"
    HOSTED_INFERENCE = "hosted_inference"


DEFAULT_MODEL_NAMES = {
    ModelKind.LOCAL: "mistral",
    ModelKind.HOSTED_COMPLETION: "gpt-3.5-turbo-0613",
    ModelKind.HOSTED_CHAT: "claude-2.1",
    ModelKind.HOSTED_INFERENCE: "mistralai/Mistral-7B-Instruct-v0.2",
}


@dataclass(frozen=True)
class LocalSettings:
    model: str
    temperature: float
    base_url: str


@dataclass(frozen=True)
class HostedCompletionSettings:
    model: str
    temperature: float
    api_key: str


@dataclass(frozen=True)
class HostedChatSettings:
    model: str
    temperature: float
    api_key: str
    max_tokens: int = ANTHROPIC_MAX_TOKENS


@dataclass(frozen=True)
class HostedInferenceSettings:
    model: str
    api_key: str
    endpoint_url: str
    temperature: float = HF_TEMPERATURE


BackendSettings = Union[LocalSettings, HostedCompletionSettings, HostedChatSettings, HostedInferenceSettings]


def backend_settings(
    kind: ModelKind,
    config: Optional[ProviderConfig] = None,
    model_name: str = "",
    temperature: float = DEFAULT_TEMPERATURE,
    base_url: str = DEFAULT_LOCAL_BASE_URL,
) -> BackendSettings:
    """Pick the model name (caller's only if non-empty) and credentials for ``kind``."""
    cfg = resolve(config)
    kind = ModelKind(kind)
    name = model_name or DEFAULT_MODEL_NAMES[kind]

    if kind is ModelKind.LOCAL:
        return LocalSettings(model=name, temperature=temperature, base_url=base_url)
    if kind is ModelKind.HOSTED_COMPLETION:
        return HostedCompletionSettings(model=name, temperature=temperature, api_key=cfg.openai_key)
    if kind is ModelKind.HOSTED_CHAT:
        return HostedChatSettings(model=name, temperature=temperature, api_key=cfg.anthropic_key)
    if kind is ModelKind.HOSTED_INFERENCE:
        # the Ollama default URL means "no dedicated endpoint given"
        endpoint = base_url if base_url and base_url != DEFAULT_LOCAL_BASE_URL else HF_INFERENCE_URL.format(model=name)
        return HostedInferenceSettings(model=name, api_key=cfg.hf_key, endpoint_url=endpoint)
    raise ValueError(f"Unsupported model kind: {kind}")


class OllamaModel:
    def __init__(self, settings: LocalSettings, timeout: float):
        self.settings = settings
        self.timeout = timeout

    def invoke(self, prompt: str) -> str:
        s = self.settings
        return ollama_generate(prompt, s.model, s.temperature, s.base_url, self.timeout)


class OpenAIModel:
    def __init__(self, settings: HostedCompletionSettings, timeout: float):
        if not settings.api_key:
            raise NotConfiguredError("OPEN AI API KEY WAS NOT SET OR IS SET WRONG")
        from openai import OpenAI  # type: ignore

        self.settings = settings
        self._client = OpenAI(api_key=settings.api_key, timeout=timeout)

    def invoke(self, prompt: str) -> str:
        resp = self._client.chat.completions.create(
            model=self.settings.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.settings.temperature,
        )
        return (resp.choices[0].message.content or "").strip()


class AnthropicModel:
    def __init__(self, settings: HostedChatSettings, timeout: float):
        if not settings.api_key:
            raise NotConfiguredError("ANTHROPIC API KEY WAS NOT SET")
        try:
            import anthropic  # type: ignore
        except Exception as e:
            raise RuntimeError("Install anthropic: `pip install anthropic`") from e

        self.settings = settings
        self._client = anthropic.Anthropic(api_key=settings.api_key, timeout=timeout)

    def invoke(self, prompt: str) -> str:
        s = self.settings
        response = self._client.messages.create(
            model=s.model,
            max_tokens=s.max_tokens,
            temperature=s.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(getattr(block, "text", "") for block in (response.content or [])).strip()


class HFInferenceModel:
    def __init__(self, settings: HostedInferenceSettings, timeout: float):
        self.settings = settings
        self.timeout = timeout

    def invoke(self, prompt: str) -> str:
        s = self.settings
        headers = {"Authorization": f"Bearer {s.api_key}"} if s.api_key else {}
        payload = {"inputs": prompt, "parameters": {"temperature": s.temperature, "return_full_text": False}}
        r = requests.post(s.endpoint_url, json=payload, headers=headers, timeout=self.timeout)
        if r.status_code != 200:
            raise RuntimeError(f"Hugging Face inference returned HTTP {r.status_code}: {r.text[:200]}")
        data = r.json()
        if isinstance(data, list):
            data = data[0] if data else {}
        return (data.get("generated_text") or "").strip()


def create_model(settings: BackendSettings, timeout: float):
    logger.debug(f"Creating {type(settings).__name__} backend for {settings.model}")
    if isinstance(settings, LocalSettings):
        return OllamaModel(settings, timeout)
    if isinstance(settings, HostedCompletionSettings):
        return OpenAIModel(settings, timeout)
    if isinstance(settings, HostedChatSettings):
        return AnthropicModel(settings, timeout)
    if isinstance(settings, HostedInferenceSettings):
        return HFInferenceModel(settings, timeout)
    raise ValueError(f"Unsupported backend settings: {settings!r}")
