"""LLM client helpers for the hosted completion provider (OpenAI) and a local Ollama model.

Every helper returns a Result; provider failures come back as UPSTREAM_ERROR
instead of propagating.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

import requests

from .config import ProviderConfig, resolve
from .results import Result

logger = logging.getLogger("aikit.llm_client")

COMPLETION_MODEL = "gpt-3.5-turbo"
NOT_CONFIGURED_MESSAGE = "OPEN AI API KEY WAS NOT SET OR IS SET WRONG"
LOCAL_NOT_CONFIGURED_MESSAGE = "LOCAL MODEL WAS NOT SET UP"


def build_messages(system_message: str, prompt: str) -> List[Dict[str, str]]:
    """Role-tagged system/user pair used for every chat completion request."""
    return [
        {"role": "system", "content": system_message},
        {"role": "user", "content": prompt},
    ]


def get_openai_answer(system_message: str, prompt: str, config: Optional[ProviderConfig] = None) -> Result:
    cfg = resolve(config)
    if cfg.openai is None:
        logger.warning("OpenAI client requested but no key was set")
        return Result.not_configured(NOT_CONFIGURED_MESSAGE)

    try:
        logger.debug("Getting openai answer...")
        completion = cfg.openai.chat.completions.create(
            messages=build_messages(system_message, prompt),
            model=COMPLETION_MODEL,
        )
        text = completion.choices[0].message.content or ""
        logger.debug("Got openai answer!")
        return Result.success(text)
    except Exception as e:
        logger.exception(f"Error in get_openai_answer: {e}")
        return Result.upstream_error(f"Error fetching answer from OpenAI API: {e}", cause=e)


def ollama_generate(
    prompt: str,
    model: str,
    temperature: float,
    base_url: str,
    timeout: float,
) -> str:
    """Single non-streaming call to Ollama's /api/generate. Raises on failure."""
    payload = {
        "model": model,
        "prompt": prompt,
        "stream": False,
        "options": {"temperature": temperature},
    }
    r = requests.post(f"{base_url.rstrip('/')}/api/generate", json=payload, timeout=timeout)
    if r.status_code != 200:
        raise RuntimeError(f"Ollama returned HTTP {r.status_code}: {r.text[:200]}")
    data = r.json()
    return (data.get("response") or "").strip()


def get_local_text(prompt: str, config: Optional[ProviderConfig] = None) -> Result:
    cfg = resolve(config)
    settings = cfg.local_model
    if settings is None:
        return Result.not_configured(LOCAL_NOT_CONFIGURED_MESSAGE)

    try:
        logger.debug("Getting ollama answer...")
        text = ollama_generate(prompt, settings.name, settings.temperature, settings.base_url, cfg.request_timeout)
        logger.debug("Got ollama answer!")
        return Result.success(text)
    except Exception as e:
        logger.exception(f"Error in get_local_text: {e}")
        return Result.upstream_error(f"Error fetching answer from local model: {e}", cause=e)
