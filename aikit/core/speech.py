"""Text-to-speech: OpenAI tts-1 (hosted) or pyttsx3 (offline), saved under voices/.

Local mode is chosen by ProviderConfig.local_speech.
"""
from __future__ import annotations

import logging
import os
import tempfile
from typing import Optional

from . import artifacts
from .config import ProviderConfig, resolve
from .results import Result

logger = logging.getLogger("aikit.speech")

SPEECH_MODEL = "tts-1"
SPEECH_SPEED = 1.2
DEFAULT_VOICE = "alloy"
OPENAI_VOICES = frozenset({"alloy", "echo", "fable", "onyx", "nova", "shimmer"})
LOCAL_RATE = 180


def _hosted_speech_bytes(cfg: ProviderConfig, text: str, voice: str) -> bytes:
    response = cfg.openai.audio.speech.create(
        model=SPEECH_MODEL,
        voice=voice,
        input=text,
        speed=SPEECH_SPEED,
    )
    return response.content


def _local_speech_bytes(text: str, voice: Optional[str], rate: int = LOCAL_RATE) -> bytes:
    """Synthesize with pyttsx3 into a temp WAV and return its bytes."""
    try:
        import pyttsx3  # type: ignore
    except Exception as e:
        raise RuntimeError(
            "Local speech mode selected but 'pyttsx3' is not installed. Install with: pip install pyttsx3"
        ) from e

    engine = pyttsx3.init()
    engine.setProperty("rate", rate)
    # OpenAI voice names mean nothing to the OS engine
    if voice and voice not in OPENAI_VOICES:
        engine.setProperty("voice", voice)

    tmp = tempfile.NamedTemporaryFile(suffix=".wav", delete=False)
    tmp_path = tmp.name
    tmp.close()
    try:
        engine.save_to_file(text, tmp_path)
        engine.runAndWait()
        with open(tmp_path, "rb") as f:
            return f.read()
    finally:
        try:
            os.remove(tmp_path)
        except OSError:
            pass


def generate_and_save_voice_over(
    text: str,
    voice: str = DEFAULT_VOICE,
    config: Optional[ProviderConfig] = None,
) -> Result:
    """Synthesize ``text`` and return the path of the saved audio file."""
    cfg = resolve(config)
    if not cfg.local_speech and cfg.openai is None:
        return Result.not_configured("OPEN AI API KEY WAS NOT SET OR IS SET WRONG")

    try:
        if cfg.local_speech:
            data = _local_speech_bytes(text, voice)
            ext = "wav"
        else:
            data = _hosted_speech_bytes(cfg, text, voice)
            ext = "mp3"
        path = artifacts.save_artifact(cfg.artifacts_dir, artifacts.VOICES, "voice", ext, data)
        return Result.success(path)
    except Exception as e:
        logger.exception(f"Error in generate_and_save_voice_over: {e}")
        return Result.upstream_error(f"Error generating and saving voice over: {e}", cause=e)


def generate_voice_url(
    text: str,
    app=None,
    voice: str = DEFAULT_VOICE,
    config: Optional[ProviderConfig] = None,
) -> Result:
    """Synthesize, save and expose; value is the route ("" without an app)."""
    saved = generate_and_save_voice_over(text, voice, config)
    if not saved.ok:
        return saved
    return Result.success(artifacts.expose_local_url(artifacts.VOICES, saved.value, app))
