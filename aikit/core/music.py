"""Music generation: Replicate-hosted MusicGen or a local MusicGen model via transformers.

Both paths return a MusicResult so callers handle one shape.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any, Optional

from . import artifacts
from .config import ProviderConfig, resolve
from .results import Result

logger = logging.getLogger("aikit.music")

HOSTED_MODEL = "meta/musicgen:671ac645ce5e552cc63a54a2bbff63fcf798043055d2dac5fc9e36a837eedcfb"
LOCAL_MODEL_ID = "facebook/musicgen-small"
LOCAL_MAX_NEW_TOKENS = 500
LOCAL_GUIDANCE_SCALE = 3

_pipe = None  # type: ignore[var-annotated]


@dataclass(frozen=True)
class MusicResult:
    source: str  # "hosted" | "local"
    url: str = ""
    path: str = ""


def hosted_input(prompt: str) -> dict:
    return {
        "prompt": prompt,
        "model_version": "large",
        "output_format": "mp3",
        "normalization_strategy": "peak",
    }


def _output_url(output: Any) -> str:
    # replicate returns a URL string, a FileOutput, or a list of either
    if isinstance(output, (list, tuple)):
        output = output[0] if output else ""
    return str(getattr(output, "url", output) or "")


def _get_pipeline():
    global _pipe
    if _pipe is None:
        try:
            from transformers import AutoProcessor, MusicgenForConditionalGeneration  # type: ignore
        except Exception as e:  # pragma: no cover - import guard
            raise RuntimeError(
                "transformers is required for local music generation. Please install 'transformers' and 'torch'."
            ) from e
        processor = AutoProcessor.from_pretrained(LOCAL_MODEL_ID)
        model = MusicgenForConditionalGeneration.from_pretrained(LOCAL_MODEL_ID)
        _pipe = (processor, model)
    return _pipe


def _local_music_wav(prompt: str) -> bytes:
    import soundfile as sf

    processor, model = _get_pipeline()
    inputs = processor(text=[prompt], padding=True, return_tensors="pt")
    audio_values = model.generate(
        **inputs,
        max_new_tokens=LOCAL_MAX_NEW_TOKENS,
        do_sample=True,
        guidance_scale=LOCAL_GUIDANCE_SCALE,
    )
    sr = model.config.audio_encoder.sampling_rate
    audio = audio_values[0, 0].cpu().numpy()
    buf = io.BytesIO()
    sf.write(buf, audio, sr, format="WAV")
    return buf.getvalue()


def generate_music(
    prompt: str,
    app=None,
    use_local_model: bool = False,
    config: Optional[ProviderConfig] = None,
) -> Result:
    cfg = resolve(config)

    if use_local_model:
        try:
            logger.debug("Generating music locally...")
            data = _local_music_wav(prompt)
            path = artifacts.save_artifact(cfg.artifacts_dir, artifacts.MUSIC, "music", "wav", data)
            logger.debug("Music generated!")
        except Exception as e:
            logger.exception(f"Error in local generate_music: {e}")
            return Result.upstream_error(f"Error generating music locally: {e}", cause=e)
        url = artifacts.expose_local_url(artifacts.MUSIC, path, app)
        return Result.success(MusicResult(source="local", url=url, path=path))

    if cfg.replicate is None:
        logger.debug("Replicate API key is not set")
        return Result.not_configured("REPLICATE API KEY WAS NOT SET")

    try:
        logger.debug("Generating music...")
        output = cfg.replicate.run(HOSTED_MODEL, input=hosted_input(prompt))
        logger.debug("Music generated!")
    except Exception as e:
        logger.exception(f"Error in generate_music: {e}")
        return Result.upstream_error(f"Error generating music: {e}", cause=e)
    return Result.success(MusicResult(source="hosted", url=_output_url(output)))
