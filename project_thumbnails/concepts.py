"""
Visual-concept extractor — turns a free-text project description into up to
three concrete visual motifs ("sound waveforms", "nested folder hierarchies")
that steer the image prompt toward what the project actually does.

Each VISUAL_MAPPINGS entry is (vocabulary, candidate visuals). Vocabulary
terms match whole words, case-insensitively; a plain term also matches its
plural ("log" → "logs"), and a term ending in "*" is a stem ("translat*" →
"translation", "translating"). Entries are evaluated in table order and the
earliest matches win when the result is capped at three.
"""

from __future__ import annotations

import random
import re
from typing import List, Optional, Pattern, Sequence, Tuple

MAX_CONCEPTS = 3
FALLBACK_CONCEPT = "abstract software visualization with floating geometric shapes"


def _vocabulary_pattern(terms: Sequence[str]) -> Pattern[str]:
    alternatives = []
    for term in terms:
        if term.endswith("*"):
            alternatives.append(re.escape(term[:-1]) + r"\w*")
        else:
            alternatives.append(re.escape(term) + r"(?:e?s)?")
    return re.compile(r"\b(?:" + "|".join(alternatives) + r")\b", re.IGNORECASE)


# ── Vocabulary → visuals ──────────────────────────────────────────────────────

_MAPPING_TABLE: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    # Files / logs
    (("directory", "folder", "file", "path", "structure", "tree"),
     ("nested folder hierarchies", "file tree visualization", "directory branching paths")),
    (("log", "logging", "logger", "record", "track"),
     ("scrolling log entries", "timestamp streams", "data recording visualization")),

    # Image / video processing
    (("blur", "filter", "effect", "image processing"),
     ("layered image filters", "visual effect waves", "gradient transformations")),
    (("video", "media", "stream"),
     ("video frames in sequence", "media player interface", "streaming data flow")),
    (("icon", "image", "picture", "photo"),
     ("floating image frames", "icon grid arrangement", "visual asset collection")),

    # Audio / speech
    (("audio", "sound", "voice", "speech", "whisper", "transcri*"),
     ("sound waveforms", "audio spectrum visualization", "speech bubbles transforming to text")),
    (("subtitle", "caption", "srt"),
     ("text overlays on video frames", "caption timeline", "language text flowing")),

    # Translation / language
    (("translat*", "language", "multilingual"),
     ("parallel text streams", "language transformation arrows", "multilingual text panels")),

    # Database / query
    (("database", "sql", "query", "qbe", "table"),
     ("database schema diagram", "query flow visualization", "connected data tables")),
    (("search", "find", "lookup"),
     ("search magnifier with results", "data discovery paths", "filtering funnel")),

    # ML / AI
    (("neural", "network", "model", "train"),
     ("interconnected neural layers", "model architecture diagram", "training progress visualization")),
    (("predict*", "classif*", "recogni*"),
     ("input-to-output transformation", "classification categories", "recognition bounding boxes")),
    (("flag", "country", "nation"),
     ("world map with flags", "flag grid collection", "geographic identification")),

    # Hardware / monitoring
    (("gpu", "graphics", "cuda"),
     ("graphics card with data streams", "parallel processing units", "GPU memory visualization")),
    (("cpu", "processor", "compute"),
     ("processor chip with circuits", "compute cores diagram", "processing pipeline")),
    (("temperature", "thermal", "heat"),
     ("temperature gauge", "thermal gradient display", "heat map visualization")),
    (("ups", "power", "battery", "energy"),
     ("power flow diagram", "battery status indicators", "energy management display")),
    (("raspberry", "pi", "embedded", "iot"),
     ("single-board computer", "GPIO pin connections", "embedded system layout")),
    (("sensor", "monitor", "real-time"),
     ("live sensor readings", "real-time data dashboard", "monitoring graphs")),

    # Web / UI
    (("portfolio", "website", "web app"),
     ("browser window mockup", "responsive device frames", "web page layout")),
    (("dashboard", "panel", "interface"),
     ("control panel with widgets", "dashboard cards layout", "interactive UI elements")),
    (("gui", "graphical", "window"),
     ("application window frames", "GUI component arrangement", "desktop interface")),

    # Automation / tools
    (("automat*", "script", "task", "bot"),
     ("automated workflow arrows", "task sequence diagram", "robot arm operations")),
    (("generat*", "creat*", "build", "convert"),
     ("transformation pipeline", "creation process stages", "output generation flow")),
    (("combin*", "merge", "join"),
     ("merging elements diagram", "combination visualization", "unified output result")),

    # Data / analytics
    (("excel", "spreadsheet", "csv"),
     ("spreadsheet cells grid", "data columns and rows", "chart from tabular data")),
    (("chart", "graph", "visualiz*", "analytics"),
     ("data visualization charts", "analytics dashboard", "statistical graphs")),
    (("data", "dataset", "annotation", "mask"),
     ("data processing pipeline", "annotated data samples", "dataset visualization")),

    # Library / management
    (("library", "book", "catalog", "manage"),
     ("organized shelves of items", "catalog card system", "management hierarchy")),
    (("user", "account", "login", "auth"),
     ("user profile cards", "authentication flow", "access control gates")),

    # Streaming / gaming / networking
    (("stream", "gaming", "play"),
     ("streaming data connection", "game controller elements", "live broadcast visualization")),
    (("vpn", "network", "connect"),
     ("secure tunnel visualization", "network topology", "encrypted connection paths")),

    # Server / backend
    (("server", "api", "endpoint", "backend"),
     ("server rack infrastructure", "API connection diagram", "backend architecture")),
    (("docker", "container", "deploy"),
     ("container boxes stacked", "deployment pipeline", "containerized services")),
)

VISUAL_MAPPINGS: Tuple[Tuple[Pattern[str], Tuple[str, ...]], ...] = tuple(
    (_vocabulary_pattern(terms), visuals) for terms, visuals in _MAPPING_TABLE
)


def extract_visual_concepts(
    description: Optional[str],
    rng: Optional[random.Random] = None,
) -> List[str]:
    """
    Pick one visual per matching mapping, in table order, at most three.

    `rng` supplies the per-match choice; pass a seeded random.Random to pin
    the selection. Returns [] when nothing matches — the prompt builder then
    falls back to FALLBACK_CONCEPT.
    """
    if not description:
        return []
    chooser = rng if rng is not None else random
    text = description.lower()

    concepts: List[str] = []
    for pattern, visuals in VISUAL_MAPPINGS:
        if not pattern.search(text):
            continue
        visual = chooser.choice(visuals)
        if visual not in concepts:
            concepts.append(visual)
        if len(concepts) == MAX_CONCEPTS:
            break
    return concepts


def visuals_for(description: str) -> List[Tuple[str, ...]]:
    """Candidate sets of every mapping the description matches, in table order."""
    text = description.lower()
    return [visuals for pattern, visuals in VISUAL_MAPPINGS if pattern.search(text)]
