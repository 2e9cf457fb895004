"""Tests for sequential batch regeneration."""

from unittest.mock import patch

import pytest

from project_thumbnails.batch import regenerate_images, summarize
from project_thumbnails.errors import FallbackReason
from project_thumbnails.models import ImageSource, ProjectDescriptor
from tests.conftest import FakeAPIError, FakeClient, image_response

PROJECTS = [
    ProjectDescriptor(title="Alpha"),
    ProjectDescriptor(title="Beta", github_link="https://github.com/me/beta"),
    ProjectDescriptor(title="Gamma"),
]


class SleepRecorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.mark.asyncio
async def test_sequential_with_delay_between_projects(keyless_settings):
    sleep = SleepRecorder()
    progress = []

    items = await regenerate_images(
        PROJECTS,
        None,
        settings=keyless_settings,
        sleep=sleep,
        on_progress=lambda i, total, item: progress.append((i, total, item.title)),
    )

    assert [i.title for i in items] == ["Alpha", "Beta", "Gamma"]
    assert [i.result.source for i in items] == [
        ImageSource.PLACEHOLDER,
        ImageSource.REPO_PREVIEW,
        ImageSource.PLACEHOLDER,
    ]
    assert sleep.calls == [2.0, 2.0]   # between projects, not after the last
    assert progress == [(1, 3, "Alpha"), (2, 3, "Beta"), (3, 3, "Gamma")]


@pytest.mark.asyncio
async def test_rate_limited_project_is_retried_once(settings):
    client = FakeClient(FakeAPIError(429, "quota exceeded"), image_response())
    sleep = SleepRecorder()

    (item,) = await regenerate_images(PROJECTS[:1], client, settings=settings, sleep=sleep)

    assert item.attempts == 2
    assert item.result.source is ImageSource.GENERATED
    assert sleep.calls == [60.0]
    assert len(client.calls) == 2


@pytest.mark.asyncio
async def test_failed_retry_keeps_fallback(settings):
    client = FakeClient(FakeAPIError(429, "quota exceeded"))
    sleep = SleepRecorder()

    (item,) = await regenerate_images(PROJECTS[1:2], client, settings=settings, sleep=sleep)

    assert item.attempts == 2
    assert item.result.source is ImageSource.REPO_PREVIEW
    assert FallbackReason.RATE_LIMITED in item.result.fallback_reasons


@pytest.mark.asyncio
async def test_retry_disabled(settings):
    client = FakeClient(FakeAPIError(429, "quota exceeded"))
    sleep = SleepRecorder()

    (item,) = await regenerate_images(
        PROJECTS[:1], client, settings=settings, sleep=sleep, retry_on_rate_limit=False
    )

    assert item.attempts == 1
    assert sleep.calls == []
    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_summarize_and_serialize(keyless_settings):
    items = await regenerate_images(PROJECTS, None, settings=keyless_settings, sleep=SleepRecorder())
    assert summarize(items) == {"generated": 0, "fallback-link-preview": 1, "placeholder": 2}

    row = items[1].to_dict()
    assert row["title"] == "Beta"
    assert row["source"] == "fallback-link-preview"
    assert row["fallback_reasons"] == ["credential-missing"]


@pytest.mark.asyncio
async def test_one_client_built_from_key_for_whole_batch(settings):
    fake = FakeClient(image_response())
    with patch("project_thumbnails.batch.make_client", return_value=fake) as build:
        items = await regenerate_images(PROJECTS, settings=settings, sleep=SleepRecorder())

    build.assert_called_once_with("test-key")
    assert [i.result.source for i in items] == [ImageSource.GENERATED] * 3
    assert len(fake.calls) == 3
