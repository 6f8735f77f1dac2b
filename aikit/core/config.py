"""Provider configuration shared by every generation helper and RAG chain.

A module-level default (``ai_config``) keeps the simple call style working;
each helper also accepts ``config=`` so callers can hold their own instance.

Env Vars (optional, read by ProviderConfig.from_env)
- OPENAI_API_KEY            hosted completion, speech and images
- ANTHROPIC_API_KEY         hosted-chat RAG backend
- HUGGINGFACEHUB_API_KEY    hosted-inference RAG backend
- REPLICATE_API_TOKEN       hosted music generation
- OLLAMA_MODEL / OLLAMA_BASE_URL
- INPAINT_ENDPOINT
- LOCAL_SPEECH=1|0          offline speech engine instead of OpenAI
- AIKIT_TIMEOUT             seconds, applied to every outbound call
- AIKIT_ARTIFACTS_DIR       root for voices/, images/ and music/

Setup calls are not synchronized: concurrent writers race and the last write
wins.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

logger = logging.getLogger("aikit.config")

DEFAULT_LOCAL_MODEL = "mistral"
DEFAULT_LOCAL_BASE_URL = "http://localhost:11434"
DEFAULT_TEMPERATURE = 0.2
DEFAULT_TIMEOUT = 60.0


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


@dataclass
class LocalModelSettings:
    name: str = DEFAULT_LOCAL_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    base_url: str = DEFAULT_LOCAL_BASE_URL


@dataclass
class ProviderConfig:
    openai: Any = None
    openai_key: str = ""
    anthropic_key: str = ""
    hf_key: str = ""
    local_model: Optional[LocalModelSettings] = None
    replicate: Any = None
    replicate_key: str = ""
    inpaint_endpoint: str = ""
    local_speech: bool = False
    request_timeout: float = DEFAULT_TIMEOUT
    artifacts_dir: str = field(default_factory=lambda: os.getenv("AIKIT_ARTIFACTS_DIR", "."))

    @classmethod
    def from_env(cls) -> "ProviderConfig":
        """Build a config seeded from environment variables.

        Clients are only constructed for keys that are present.
        """
        cfg = cls(
            anthropic_key=os.getenv("ANTHROPIC_API_KEY", "").strip(),
            hf_key=os.getenv("HUGGINGFACEHUB_API_KEY", "").strip(),
            inpaint_endpoint=os.getenv("INPAINT_ENDPOINT", "").strip(),
            local_speech=_env_flag("LOCAL_SPEECH"),
            request_timeout=float(os.getenv("AIKIT_TIMEOUT", str(DEFAULT_TIMEOUT))),
        )
        openai_key = os.getenv("OPENAI_API_KEY", "").strip()
        if openai_key:
            cfg.set_completion_provider(openai_key)
        replicate_key = os.getenv("REPLICATE_API_TOKEN", "").strip()
        if replicate_key:
            cfg.set_generation_provider(replicate_key)
        if os.getenv("OLLAMA_MODEL") or os.getenv("OLLAMA_BASE_URL"):
            cfg.set_local_model(
                os.getenv("OLLAMA_MODEL", DEFAULT_LOCAL_MODEL),
                DEFAULT_TEMPERATURE,
                os.getenv("OLLAMA_BASE_URL", DEFAULT_LOCAL_BASE_URL),
            )
        return cfg

    # ------------------- setup calls -------------------

    def set_completion_provider(self, key: str) -> None:
        try:
            from openai import OpenAI  # type: ignore
        except Exception as e:
            raise RuntimeError(
                "Completion provider requires the 'openai' SDK. Install with: pip install openai"
            ) from e
        self.openai_key = key
        self.openai = OpenAI(api_key=key, timeout=self.request_timeout)
        logger.debug("OpenAI API key is set...")

    def set_anthropic_key(self, key: str) -> None:
        self.anthropic_key = key
        logger.debug("Anthropic API key is set...")

    def set_hf_key(self, key: str) -> None:
        self.hf_key = key
        logger.debug("Hugging Face API key is set...")

    def set_local_model(
        self,
        name: str = DEFAULT_LOCAL_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        endpoint: str = DEFAULT_LOCAL_BASE_URL,
    ) -> None:
        self.local_model = LocalModelSettings(name=name, temperature=temperature, base_url=endpoint.rstrip("/"))
        logger.debug(f"Local model set: {name} @ {endpoint}")

    def set_generation_provider(self, key: str) -> None:
        try:
            import replicate  # type: ignore
        except Exception as e:
            raise RuntimeError(
                "Generation provider requires the 'replicate' SDK. Install with: pip install replicate"
            ) from e
        self.replicate_key = key
        self.replicate = replicate.Client(api_token=key, timeout=self.request_timeout)
        logger.debug("Replicate API key is set...")

    def set_inpaint_endpoint(self, url: str) -> None:
        self.inpaint_endpoint = url
        logger.debug(f"Inpaint endpoint set: {url}")

    def set_local_speech_mode(self, enabled: bool) -> None:
        self.local_speech = bool(enabled)
        logger.debug(f"Local speech mode: {self.local_speech}")

    def set_request_timeout(self, seconds: float) -> None:
        if seconds <= 0:
            raise ValueError("request timeout must be positive")
        self.request_timeout = float(seconds)
        # SDK clients capture the timeout when built
        if self.openai is not None and self.openai_key:
            self.set_completion_provider(self.openai_key)
        if self.replicate is not None and self.replicate_key:
            self.set_generation_provider(self.replicate_key)


# shared default used when no config is passed
ai_config = ProviderConfig()


def resolve(config: Optional[ProviderConfig]) -> ProviderConfig:
    return config if config is not None else ai_config


def set_completion_provider(key: str, config: Optional[ProviderConfig] = None) -> None:
    resolve(config).set_completion_provider(key)


def set_anthropic_key(key: str, config: Optional[ProviderConfig] = None) -> None:
    resolve(config).set_anthropic_key(key)


def set_hf_key(key: str, config: Optional[ProviderConfig] = None) -> None:
    resolve(config).set_hf_key(key)


def set_local_model(
    name: str = DEFAULT_LOCAL_MODEL,
    temperature: float = DEFAULT_TEMPERATURE,
    endpoint: str = DEFAULT_LOCAL_BASE_URL,
    config: Optional[ProviderConfig] = None,
) -> None:
    resolve(config).set_local_model(name, temperature, endpoint)


def set_generation_provider(key: str, config: Optional[ProviderConfig] = None) -> None:
    resolve(config).set_generation_provider(key)


def set_inpaint_endpoint(url: str, config: Optional[ProviderConfig] = None) -> None:
    resolve(config).set_inpaint_endpoint(url)


def set_local_speech_mode(enabled: bool, config: Optional[ProviderConfig] = None) -> None:
    resolve(config).set_local_speech_mode(enabled)


def set_request_timeout(seconds: float, config: Optional[ProviderConfig] = None) -> None:
    resolve(config).set_request_timeout(seconds)


def turn_debug_off() -> None:
    """Silence aikit debug/info output; warnings and errors still show."""
    logging.getLogger("aikit").setLevel(logging.WARNING)


def turn_debug_on() -> None:
    logging.getLogger("aikit").setLevel(logging.DEBUG)
