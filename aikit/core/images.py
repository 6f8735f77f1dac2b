"""Image generation (OpenAI) and inpainting (HTTP endpoint), saved under images/."""
from __future__ import annotations

import base64
import binascii
import io
import logging
from typing import Any, Dict, Optional

import requests
from PIL import Image, UnidentifiedImageError

from . import artifacts
from .config import ProviderConfig, resolve
from .results import Result

logger = logging.getLogger("aikit.images")

IMAGE_SIZE = "1024x1024"


def save_image_to_file(base64_data: str, root: str) -> str:
    """Decode a base64 image and save it as PNG. Returns "" if it can't be decoded or written."""
    try:
        raw = base64.b64decode(base64_data, validate=True)
        img = Image.open(io.BytesIO(raw))
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return artifacts.save_artifact(root, artifacts.IMAGES, "image", "png", buf.getvalue())
    except (binascii.Error, UnidentifiedImageError, OSError, TypeError, ValueError) as e:
        logger.error(f"Error saving the image: {e}")
        return ""


def generate_image_b64(prompt: str, config: Optional[ProviderConfig] = None) -> str:
    cfg = resolve(config)
    response = cfg.openai.images.generate(
        prompt=prompt,
        n=1,
        size=IMAGE_SIZE,
        response_format="b64_json",
    )
    return response.data[0].b64_json


def generate_and_save_image(prompt: str, app=None, config: Optional[ProviderConfig] = None) -> Result:
    """Generate an image, save it and return the exposed route.

    The value is "" when there is no app or the image could not be saved.
    """
    cfg = resolve(config)
    if cfg.openai is None:
        return Result.not_configured("OPEN AI API KEY WAS NOT SET OR IS SET WRONG")

    try:
        logger.debug("Generating image...")
        b64 = generate_image_b64(prompt, cfg)
        logger.debug("Image generated successfully!")
    except Exception as e:
        logger.exception(f"Error in generate_and_save_image: {e}")
        return Result.upstream_error(f"Error generating image: {e}", cause=e)

    path = save_image_to_file(b64, cfg.artifacts_dir)
    if not path:
        return Result.success("")
    return Result.success(artifacts.expose_local_url(artifacts.IMAGES, path, app))


def inpaint_image(
    payload_template: Dict[str, Any],
    prompt: str,
    app=None,
    config: Optional[ProviderConfig] = None,
) -> Result:
    """POST the template (with ``prompt`` overwritten) to the inpaint endpoint.

    Expects 200 and ``{"images": [<base64>, ...]}``; the first image is saved.
    Non-200 responses and transport errors give OK with "".
    """
    cfg = resolve(config)
    if not cfg.inpaint_endpoint:
        return Result.not_configured("INPAINT ENDPOINT WAS NOT SET")

    payload = dict(payload_template)
    payload["prompt"] = prompt
    try:
        r = requests.post(cfg.inpaint_endpoint, json=payload, timeout=cfg.request_timeout)
    except requests.RequestException as e:
        logger.error(f"Inpaint request failed: {e}")
        return Result.success("")

    if r.status_code != 200:
        logger.error(f"Inpaint endpoint returned HTTP {r.status_code}")
        return Result.success("")

    try:
        data = r.json()
        images = (data.get("images") if isinstance(data, dict) else data) or []
    except ValueError as e:
        logger.error(f"Inpaint response was not JSON: {e}")
        return Result.success("")
    if not images:
        logger.warning("Inpaint response carried no images")
        return Result.success("")

    path = save_image_to_file(images[0], cfg.artifacts_dir)
    if not path:
        return Result.success("")
    return Result.success(artifacts.expose_local_url(artifacts.IMAGES, path, app))
