"""
Image acquisition pipeline — thumbnail for one project, with a fallback chain:

  1. generated               Gemini image from the description-based prompt
  2. fallback-link-preview   GitHub OpenGraph image (if the project has a repo link)
  3. placeholder             generated SVG, always succeeds

Each tier returns a GeneratedImageResult or None; the first result wins.
Tier failures are logged with their category and never raised, so
generate_project_image always returns a usable image. Settings that fail
validation are logged and replaced by the defaults for the same reason.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import List, Optional

from google import genai
from pydantic import ValidationError

from .config import Settings, load_settings
from .errors import FallbackReason, TierFailure
from .gemini import generate_image, make_client
from .github import parse_repo_link, repo_preview_url
from .models import GeneratedImageResult, ImageSource, ProjectDescriptor
from .placeholder import generate_placeholder_image
from .prompt import build_project_prompt

logger = logging.getLogger(__name__)

# Expected skips (nothing configured) log at INFO; real failures at WARNING.
_QUIET_REASONS = {FallbackReason.CREDENTIAL_MISSING, FallbackReason.REPO_LINK_ABSENT}


def _log_fallback(project: ProjectDescriptor, tier: str, failure: TierFailure) -> None:
    level = logging.INFO if failure.reason in _QUIET_REASONS else logging.WARNING
    logger.log(
        level,
        "%s tier skipped for %r [%s]: %s",
        tier,
        project.title,
        failure.reason.value,
        failure.message,
        extra={"fallback_reason": failure.reason.value, "project": project.title},
    )


# ── Tiers ─────────────────────────────────────────────────────────────────────

async def _try_generate(
    project: ProjectDescriptor,
    client: Optional[genai.Client],
    settings: Settings,
    rng: Optional[random.Random],
    reasons: List[FallbackReason],
) -> Optional[GeneratedImageResult]:
    try:
        if client is None:
            raise TierFailure(FallbackReason.CREDENTIAL_MISSING, "GEMINI_API_KEY not set")
        logger.info("Attempting Gemini image generation for %r", project.title)
        prompt = build_project_prompt(project, rng=rng)
        image = await generate_image(
            client,
            prompt,
            model=settings.image_model,
            timeout=settings.timeout_seconds,
        )
    except TierFailure as failure:
        _log_fallback(project, "AI", failure)
        reasons.append(failure.reason)
        return None

    logger.info("Generated Gemini image for %r", project.title)
    return GeneratedImageResult(image, ImageSource.GENERATED, tuple(reasons))


def _try_repo_preview(
    project: ProjectDescriptor,
    reasons: List[FallbackReason],
) -> Optional[GeneratedImageResult]:
    try:
        if not project.github_link:
            raise TierFailure(FallbackReason.REPO_LINK_ABSENT, "no repository link")
        owner, repo = parse_repo_link(project.github_link)
    except TierFailure as failure:   # includes MalformedRepoLinkError
        _log_fallback(project, "GitHub preview", failure)
        reasons.append(failure.reason)
        return None

    logger.info("Using GitHub OpenGraph image for %r", project.title)
    return GeneratedImageResult(
        repo_preview_url(owner, repo), ImageSource.REPO_PREVIEW, tuple(reasons)
    )


def _placeholder(
    project: ProjectDescriptor,
    reasons: List[FallbackReason],
) -> GeneratedImageResult:
    logger.info("Using placeholder image for %r", project.title)
    return GeneratedImageResult(
        generate_placeholder_image(project.title), ImageSource.PLACEHOLDER, tuple(reasons)
    )


def _settings_from_env() -> Settings:
    try:
        return load_settings()
    except ValidationError as e:
        logger.error("Invalid thumbnail settings in the environment, using defaults: %s", e)
        return Settings()


# ── Public API ────────────────────────────────────────────────────────────────

async def generate_project_image(
    project: ProjectDescriptor,
    client: Optional[genai.Client] = None,
    *,
    settings: Optional[Settings] = None,
    rng: Optional[random.Random] = None,
) -> GeneratedImageResult:
    """
    Produce a thumbnail for `project`, trying each tier in order.

    Args:
        project:   The project to illustrate.
        client:    Gemini client. None builds one from settings.gemini_api_key;
                   with no key either, the AI tier is skipped.
        settings:  Key, model id and timeout; defaults to the environment.
        rng:       Random source for visual-concept selection (seed it to pin prompts).
    """
    settings = settings or _settings_from_env()
    if client is None:
        client = make_client(settings.gemini_api_key)
    reasons: List[FallbackReason] = []

    return (
        await _try_generate(project, client, settings, rng, reasons)
        or _try_repo_preview(project, reasons)
        or _placeholder(project, reasons)
    )


def generate_project_image_sync(
    project: ProjectDescriptor,
    client: Optional[genai.Client] = None,
    *,
    settings: Optional[Settings] = None,
    rng: Optional[random.Random] = None,
) -> GeneratedImageResult:
    """Blocking wrapper for callers without an event loop."""
    return asyncio.run(generate_project_image(project, client, settings=settings, rng=rng))


def is_image_generation_available(settings: Optional[Settings] = None) -> bool:
    return (settings or _settings_from_env()).ai_configured
