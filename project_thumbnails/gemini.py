"""
Gemini image generation — one request, one deadline.

Primary model:  gemini-2.5-flash-image (Nano Banana), image-only response.

The client is built by the caller (make_client) and passed in; there is no
module-level singleton. generate_image raises TierFailure with a category on
every failure so the pipeline can log it and fall through.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import List, Optional

from google import genai
from google.genai import types

from .config import DEFAULT_IMAGE_MODEL, DEFAULT_TIMEOUT_SECONDS
from .data_uri import encode_data_uri
from .errors import FallbackReason, TierFailure, classify_api_error

logger = logging.getLogger(__name__)


def make_client(api_key: Optional[str]) -> Optional[genai.Client]:
    """A Gemini client for `api_key`, or None when no key is configured."""
    if not api_key:
        return None
    return genai.Client(api_key=api_key)


def extract_image(response) -> Optional[str]:
    """First inline-data part carrying bytes and a MIME type, as a data URI."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if not inline or not inline.data or not inline.mime_type:
                continue
            data = inline.data
            # data may be bytes or base64 string
            if isinstance(data, str):
                data = base64.b64decode(data)
            return encode_data_uri(data, inline.mime_type)
    return None


async def generate_image(
    client: Optional[genai.Client],
    prompt: str,
    model: str = DEFAULT_IMAGE_MODEL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    """
    Generate one image for `prompt` and return it as a data URI.

    The request runs under asyncio.wait_for: when `timeout` elapses the
    in-flight request is cancelled, not left running. Raises TierFailure.
    """
    if client is None:
        raise TierFailure(FallbackReason.CREDENTIAL_MISSING, "GEMINI_API_KEY not set")

    try:
        response = await asyncio.wait_for(
            client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_modalities=["IMAGE"],
                ),
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise TierFailure(
            FallbackReason.TIMEOUT, f"{model} request timed out after {timeout:g}s"
        ) from e
    except Exception as e:
        raise TierFailure(classify_api_error(e), f"{model}: {e}") from e

    try:
        image = extract_image(response)
    except ValueError as e:   # binascii.Error on a malformed base64 string payload
        raise TierFailure(
            FallbackReason.NO_IMAGE_IN_RESPONSE, f"{model} returned an undecodable image: {e}"
        ) from e
    if image is None:
        raise TierFailure(
            FallbackReason.NO_IMAGE_IN_RESPONSE, f"{model} response did not contain an image"
        )
    return image


def list_image_models(client: genai.Client) -> List[str]:
    """Names of available models that look image-capable, sorted."""
    names = []
    for model in client.models.list():
        name = getattr(model, "name", "") or ""
        if "image" in name.lower():
            names.append(name)
    return sorted(names)
