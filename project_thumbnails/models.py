"""
Data model shared by the thumbnail pipeline.

  ProjectDescriptor     — input: what we know about one portfolio project
  PaletteColor          — one named colour, e.g. "coral red (#FF6B6B)"
  ColorPalette          — primary / secondary / accent triple for a title
  ImageSource           — which tier produced an image
  GeneratedImageResult  — image payload + source tag (+ why earlier tiers were skipped)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import FallbackReason


class ProjectDescriptor(BaseModel):
    """A portfolio project as seen by the thumbnail pipeline."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(description="Project title — used for hashing and prompt labelling")
    description: Optional[str] = Field(
        default=None,
        description="Free-text description. Falls back to the title when absent.",
    )
    technologies: List[str] = Field(
        default_factory=list,
        description="Ordered tech stack. Only the first three reach the prompt.",
    )
    github_link: Optional[str] = Field(
        default=None,
        alias="githubLink",
        description="Repository URL, used only for the GitHub preview tier.",
    )

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v

    @field_validator("technologies", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return [] if v is None else v

    def effective_description(self) -> str:
        if self.description and self.description.strip():
            return self.description
        return self.title


@dataclass(frozen=True)
class PaletteColor:
    name: str
    hex: str

    def __str__(self) -> str:
        return f"{self.name} ({self.hex})"


@dataclass(frozen=True)
class ColorPalette:
    bucket: str                 # e.g. "teal/cyan"
    primary: PaletteColor
    secondary: PaletteColor
    accent: PaletteColor
    base_hue: int               # 0–359, picks the bucket
    secondary_hue: int          # 0–359, offset + jitter from the same hash


class ImageSource(str, Enum):
    GENERATED = "generated"
    REPO_PREVIEW = "fallback-link-preview"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class GeneratedImageResult:
    image: str                  # data URI, or external URL for REPO_PREVIEW
    source: ImageSource
    fallback_reasons: Tuple[FallbackReason, ...] = ()

    def to_dict(self) -> dict:
        return {
            "image": self.image,
            "source": self.source.value,
            "fallback_reasons": [r.value for r in self.fallback_reasons],
        }
