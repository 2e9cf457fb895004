"""
Prompt builder — composes the image-generation prompt for one project.

The prompt is a sectioned brief (description / visual representation /
style / composition / technology) in the same register the model responds
to best: concrete motifs pulled from the description, an explicit palette,
and hard "no text" rules so thumbnails never carry garbled lettering.
"""

from __future__ import annotations

import random
import re
from typing import List, Optional, Sequence

from .concepts import FALLBACK_CONCEPT, extract_visual_concepts
from .models import ColorPalette, ProjectDescriptor
from .palette import generate_color_palette

MAX_DESCRIPTION_CHARS = 150
ELLIPSIS = "..."
MAX_TECHNOLOGIES = 3
UNTITLED = "Untitled Project"

_TITLE_STRIP = re.compile(r"[^a-zA-Z0-9\s]")
_TEMPLATE_CHARS = re.compile(r"[{}\[\]<>]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_title(title: str) -> str:
    clean = _WHITESPACE.sub(" ", _TITLE_STRIP.sub("", title)).strip()
    return clean or UNTITLED


def shorten_description(description: str, limit: int = MAX_DESCRIPTION_CHARS) -> str:
    """Collapse whitespace, drop template-looking characters, cap at `limit` incl. ellipsis."""
    text = _WHITESPACE.sub(" ", _TEMPLATE_CHARS.sub("", description)).strip()
    if len(text) > limit:
        return text[: limit - len(ELLIPSIS)] + ELLIPSIS
    return text


def tech_stack_line(technologies: Sequence[str]) -> str:
    cleaned = (_TEMPLATE_CHARS.sub("", t or "").strip() for t in technologies)
    techs = [t for t in cleaned if t][:MAX_TECHNOLOGIES]
    return ", ".join(techs)


def build_prompt(
    project: ProjectDescriptor,
    palette: ColorPalette,
    concepts: List[str],
) -> str:
    title = sanitize_title(project.title)
    description = shorten_description(project.effective_description())
    visual_scene = ", ".join(concepts) if concepts else FALLBACK_CONCEPT
    tech_stack = tech_stack_line(project.technologies)

    sections = [
        f'Create a unique isometric 3D illustration for "{title}".',
        f"PROJECT DESCRIPTION:\n{description}",
        (
            "VISUAL REPRESENTATION:\n"
            f"The image should visually represent the project's purpose through: {visual_scene}.\n"
            "Create a scene that someone could look at and understand what this software does."
        ),
        (
            "STYLE REQUIREMENTS:\n"
            "- Isometric 3D perspective (30-degree angles)\n"
            "- Modern, polished concept art style\n"
            "- Dark background gradient (#0F172A to #1E293B)\n"
            f"- Primary color: {palette.primary}\n"
            f"- Secondary color: {palette.secondary}\n"
            f"- Accent highlights: {palette.accent}\n"
            "- Soft volumetric lighting with glowing elements\n"
            "- Clean, professional aesthetic"
        ),
        (
            "COMPOSITION:\n"
            "- 16:9 landscape format\n"
            "- Centered main subject with depth layers\n"
            "- NO text, words, letters, or numbers\n"
            "- NO generic tech symbols unless relevant to the description"
        ),
    ]
    if tech_stack:
        sections.append(f"TECHNOLOGY CONTEXT: Built with {tech_stack}")
    sections.append(
        "Make this image UNIQUE and SPECIFIC to this exact project - "
        "it should not look like a generic tech illustration."
    )
    return "\n\n".join(sections)


def build_project_prompt(
    project: ProjectDescriptor,
    rng: Optional[random.Random] = None,
) -> str:
    """Derive palette + concepts for `project` and build its prompt."""
    concepts = extract_visual_concepts(project.effective_description(), rng=rng)
    palette = generate_color_palette(project.title)
    return build_prompt(project, palette, concepts)
