"""
Fallback taxonomy for the thumbnail pipeline.

None of these ever reach the pipeline's caller: each is raised inside a
tier, caught at the tier boundary, logged with its category and turned into
a fall-through to the next tier.
"""

from __future__ import annotations

import asyncio
from enum import Enum


class FallbackReason(str, Enum):
    CREDENTIAL_MISSING = "credential-missing"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate-limited"
    CONTENT_REJECTED = "content-rejected"
    MODEL_NOT_FOUND = "model-not-found"
    NO_IMAGE_IN_RESPONSE = "no-image-in-response"
    GENERATION_FAILED = "generation-failed"
    MALFORMED_REPO_LINK = "malformed-repo-link"
    REPO_LINK_ABSENT = "repo-link-absent"


class TierFailure(Exception):
    """A tier could not produce an image; carries the category to log."""

    def __init__(self, reason: FallbackReason, message: str = "") -> None:
        self.reason = reason
        self.message = message or reason.value
        super().__init__(self.message)


class MalformedRepoLinkError(TierFailure, ValueError):
    def __init__(self, link: str, message: str = "") -> None:
        self.link = link
        super().__init__(
            FallbackReason.MALFORMED_REPO_LINK,
            message or f"Invalid GitHub URL: {link!r}",
        )


# HTTP status → category. 403 is how the API reports a blocked prompt on some keys.
_CODE_REASONS = {
    429: FallbackReason.RATE_LIMITED,
    400: FallbackReason.CONTENT_REJECTED,
    403: FallbackReason.CONTENT_REJECTED,
    404: FallbackReason.MODEL_NOT_FOUND,
}

_KEYWORD_REASONS = (
    (("429", "quota", "resource_exhausted"), FallbackReason.RATE_LIMITED),
    (("400", "invalid_argument", "safety", "blocked"), FallbackReason.CONTENT_REJECTED),
    (("404", "not_found", "not found"), FallbackReason.MODEL_NOT_FOUND),
)


def classify_api_error(exc: BaseException) -> FallbackReason:
    """
    Map an exception from the image-generation call to a FallbackReason.

    google-genai's APIError exposes the HTTP status as `.code`; anything
    without one is matched on its message, the way the provider spells
    quota and safety failures ("RESOURCE_EXHAUSTED", "INVALID_ARGUMENT").
    """
    if isinstance(exc, TierFailure):
        return exc.reason
    if isinstance(exc, asyncio.TimeoutError):
        return FallbackReason.TIMEOUT

    code = getattr(exc, "code", None)
    if isinstance(code, int) and code in _CODE_REASONS:
        return _CODE_REASONS[code]

    text = str(exc).lower()
    for keywords, reason in _KEYWORD_REASONS:
        if any(k in text for k in keywords):
            return reason
    return FallbackReason.GENERATION_FAILED
