"""
Batch regeneration — thumbnails for many projects, one at a time.

Projects are processed strictly sequentially with a fixed pause between
them (never concurrently) to stay inside the image provider's rate limits.
A project whose AI tier was rate-limited is retried once after a longer
wait; if the retry is still not generated, its fallback result is kept.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from google import genai

from .config import Settings, load_settings
from .errors import FallbackReason
from .gemini import make_client
from .models import GeneratedImageResult, ImageSource, ProjectDescriptor
from .pipeline import generate_project_image

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
ProgressCallback = Callable[[int, int, "BatchItem"], None]


@dataclass
class BatchItem:
    project: ProjectDescriptor
    result: GeneratedImageResult
    attempts: int = 1

    @property
    def title(self) -> str:
        return self.project.title

    def to_dict(self) -> dict:
        return {"title": self.title, "attempts": self.attempts, **self.result.to_dict()}


async def regenerate_images(
    projects: Iterable[ProjectDescriptor],
    client: Optional[genai.Client] = None,
    *,
    settings: Optional[Settings] = None,
    rng: Optional[random.Random] = None,
    retry_on_rate_limit: bool = True,
    sleep: Sleep = asyncio.sleep,
    on_progress: Optional[ProgressCallback] = None,
) -> List[BatchItem]:
    """
    Run the pipeline for each project in order.

    Args:
        projects:            Projects to (re)generate thumbnails for.
        client:              Gemini client shared by every call; None builds one
                             from settings.gemini_api_key when a key is set.
        settings:            Supplies batch_delay_seconds / rate_limit_wait_seconds.
        retry_on_rate_limit: Retry a rate-limited project once after the wait.
        sleep:               Awaitable pause; injectable for tests.
        on_progress:         Called as (index, total, item) after each project.
    """
    settings = settings or load_settings()
    if client is None:
        client = make_client(settings.gemini_api_key)
    queue = list(projects)
    items: List[BatchItem] = []

    for index, project in enumerate(queue):
        if index:
            await sleep(settings.batch_delay_seconds)

        result = await generate_project_image(project, client, settings=settings, rng=rng)
        attempts = 1
        if (
            retry_on_rate_limit
            and client is not None
            and FallbackReason.RATE_LIMITED in result.fallback_reasons
        ):
            logger.warning(
                "Rate limited on %r, waiting %gs before one retry",
                project.title,
                settings.rate_limit_wait_seconds,
            )
            await sleep(settings.rate_limit_wait_seconds)
            retry = await generate_project_image(project, client, settings=settings, rng=rng)
            attempts = 2
            if retry.source is ImageSource.GENERATED:
                result = retry
            else:
                logger.warning("Retry for %r did not generate an image either", project.title)

        item = BatchItem(project=project, result=result, attempts=attempts)
        items.append(item)
        if on_progress is not None:
            on_progress(index + 1, len(queue), item)

    return items


def summarize(items: Iterable[BatchItem]) -> Dict[str, int]:
    """Count of results per source tag, every tag present."""
    counts = Counter(item.result.source.value for item in items)
    return {source.value: counts.get(source.value, 0) for source in ImageSource}
