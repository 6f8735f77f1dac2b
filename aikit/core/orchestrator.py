"""High-level helpers linking a text call -> speech -> exposed route.

Functions return a Result and never raise for provider failures.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import ProviderConfig
from .llm_client import get_local_text, get_openai_answer
from .results import Result
from .speech import DEFAULT_VOICE, generate_voice_url

logger = logging.getLogger("aikit.orchestrator")


@dataclass(frozen=True)
class TextAndVoice:
    text: str
    voice_url: str = ""


def _with_voice(text_result: Result, app, voice: str, config: Optional[ProviderConfig]) -> Result:
    if not text_result.ok:
        return text_result

    logger.debug("Generating voice...")
    voice_result = generate_voice_url(text_result.value, app=app, voice=voice, config=config)
    if not voice_result.ok:
        logger.warning(f"Voice generation failed, returning text only: {voice_result.detail}")
        return Result.success(TextAndVoice(text=text_result.value), detail=voice_result.detail)
    logger.debug("Voice generated successfully!")
    return Result.success(TextAndVoice(text=text_result.value, voice_url=voice_result.value))


def get_llm_text(system_message: str, prompt: str, config: Optional[ProviderConfig] = None) -> Result:
    return get_openai_answer(system_message, prompt, config)


def get_llm_text_and_voice(
    system_message: str,
    prompt: str,
    app=None,
    voice: str = DEFAULT_VOICE,
    config: Optional[ProviderConfig] = None,
) -> Result:
    return _with_voice(get_openai_answer(system_message, prompt, config), app, voice, config)


def get_local_text_and_voice(
    prompt: str,
    app=None,
    voice: str = DEFAULT_VOICE,
    config: Optional[ProviderConfig] = None,
) -> Result:
    return _with_voice(get_local_text(prompt, config), app, voice, config)
