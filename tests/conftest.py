"""Pytest fixtures: a fake Gemini client so no test touches the network."""

import asyncio
from types import SimpleNamespace

import pytest

from project_thumbnails.config import Settings

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-bytes"


def image_response(data=PNG_BYTES, mime_type="image/png"):
    """Minimal stand-in for a GenerateContentResponse carrying one inline image."""
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def text_only_response(text="I cannot draw that."):
    part = SimpleNamespace(inline_data=None, text=text)
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


class FakeAPIError(Exception):
    """Shaped like google.genai.errors.APIError: HTTP status on `.code`."""

    def __init__(self, code, message):
        self.code = code
        super().__init__(f"{code} {message}")


class FakeModels:
    """
    Async `client.aio.models` stand-in. `outcomes` is consumed one per call:
    a response object is returned, an exception is raised. The last outcome
    repeats once the list is exhausted.
    """

    def __init__(self, outcomes, delay=0.0):
        self.outcomes = list(outcomes)
        self.delay = delay
        self.calls = []
        self.cancelled = False

    async def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeClient:
    def __init__(self, *outcomes, delay=0.0):
        self.models_api = FakeModels(outcomes or [image_response()], delay=delay)
        self.aio = SimpleNamespace(models=self.models_api)

    @property
    def calls(self):
        return self.models_api.calls


@pytest.fixture
def settings():
    return Settings(
        gemini_api_key="test-key",
        image_model="test-image-model",
        timeout_seconds=5.0,
        batch_delay_seconds=2.0,
        rate_limit_wait_seconds=60.0,
    )


@pytest.fixture
def no_env(monkeypatch, tmp_path):
    """Run from an empty directory with no thumbnail-related env vars set."""
    for var in (
        "GEMINI_API_KEY",
        "GEMINI_IMAGE_MODEL",
        "THUMBNAIL_TIMEOUT_SECONDS",
        "THUMBNAIL_BATCH_DELAY_SECONDS",
        "THUMBNAIL_RATE_LIMIT_WAIT_SECONDS",
        "GITHUB_USERNAME",
        "GITHUB_TOKEN",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def keyless_settings(settings):
    """Same settings without an API key, so no client is built from them."""
    return settings.model_copy(update={"gemini_api_key": None})
