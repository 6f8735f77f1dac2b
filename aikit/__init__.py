"""
aikit: thin helpers over AI provider SDKs.

Exposes text completion (OpenAI / local Ollama), speech, image and music
generation, and a retrieval-augmented QA chain over a single document.
"""
from .core.backends import ModelKind
from .core.config import (
    ProviderConfig,
    ai_config,
    set_anthropic_key,
    set_completion_provider,
    set_generation_provider,
    set_hf_key,
    set_inpaint_endpoint,
    set_local_model,
    set_local_speech_mode,
    set_request_timeout,
    turn_debug_off,
    turn_debug_on,
)
from .core.artifacts import expose_local_url
from .core.images import generate_and_save_image, inpaint_image
from .core.ingest import DocumentRef
from .core.llm_client import get_local_text, get_openai_answer
from .core.music import MusicResult, generate_music
from .core.orchestrator import TextAndVoice, get_llm_text, get_llm_text_and_voice, get_local_text_and_voice
from .core.rag import RagAnswer, RagChain, create_rag_chain
from .core.results import Result, Status
from .core.speech import generate_and_save_voice_over

__all__ = [
    "ModelKind",
    "ProviderConfig",
    "ai_config",
    "set_anthropic_key",
    "set_completion_provider",
    "set_generation_provider",
    "set_hf_key",
    "set_inpaint_endpoint",
    "set_local_model",
    "set_local_speech_mode",
    "set_request_timeout",
    "turn_debug_off",
    "turn_debug_on",
    "expose_local_url",
    "generate_and_save_image",
    "inpaint_image",
    "DocumentRef",
    "get_local_text",
    "get_openai_answer",
    "MusicResult",
    "generate_music",
    "TextAndVoice",
    "get_llm_text",
    "get_llm_text_and_voice",
    "get_local_text_and_voice",
    "RagAnswer",
    "RagChain",
    "create_rag_chain",
    "Result",
    "Status",
    "generate_and_save_voice_over",
]
