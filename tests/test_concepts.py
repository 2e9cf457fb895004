"""Tests for the visual-concept extractor."""

import random
import re

import pytest

from project_thumbnails.concepts import (
    FALLBACK_CONCEPT,
    MAX_CONCEPTS,
    VISUAL_MAPPINGS,
    extract_visual_concepts,
    visuals_for,
)

DIRECTORY_LOGGER = (
    "Directory Logger is a powerful and flexible tool for generating detailed logs of "
    "directory structures and file metadata. It offers both a command-line interface "
    "and a graphical user interface."
)

FOLDER_VISUALS = {"nested folder hierarchies", "file tree visualization", "directory branching paths"}
LOG_VISUALS = {"scrolling log entries", "timestamp streams", "data recording visualization"}


@pytest.mark.fast
def test_directory_logger_yields_folder_then_log_concepts():
    """The folder/file pattern matches first, the log pattern second ("logs" counts as "log")."""
    concepts = extract_visual_concepts(DIRECTORY_LOGGER, rng=random.Random(7))
    assert len(concepts) == MAX_CONCEPTS
    assert concepts[0] in FOLDER_VISUALS
    assert concepts[1] in LOG_VISUALS


@pytest.mark.fast
@pytest.mark.parametrize("description", ["", None, "Lorem ipsum dolor sit amet", "zzz qqq"])
def test_no_vocabulary_returns_empty(description):
    assert extract_visual_concepts(description) == []


@pytest.mark.fast
def test_match_is_case_insensitive_and_whole_word():
    assert extract_visual_concepts("A DOCKER deployment")  # docker entry
    # "pipeline" must not match "pi"; "powerful" must not match "power"
    assert extract_visual_concepts("a powerful pipeline") == []


@pytest.mark.fast
@pytest.mark.parametrize(
    "description, expected",
    [
        ("Speech transcription service", {"sound waveforms", "audio spectrum visualization", "speech bubbles transforming to text"}),
        ("Automatic translation of documents", {"parallel text streams", "language transformation arrows", "multilingual text panels"}),
        ("Keeps records of everything", LOG_VISUALS),
    ],
)
def test_stems_and_plurals_match(description, expected):
    concepts = extract_visual_concepts(description, rng=random.Random(0))
    assert any(c in expected for c in concepts)


@pytest.mark.fast
def test_every_concept_comes_from_a_matched_entry():
    description = "Realtime GPU temperature monitor dashboard for a Raspberry Pi server with docker"
    matched = visuals_for(description)
    assert len(matched) > MAX_CONCEPTS

    for seed in range(25):
        concepts = extract_visual_concepts(description, rng=random.Random(seed))
        assert 0 < len(concepts) <= min(len(matched), MAX_CONCEPTS)
        # first-matching entries take priority when truncating
        for concept, visuals in zip(concepts, matched):
            assert concept in visuals


@pytest.mark.fast
def test_seeded_rng_pins_selection():
    a = extract_visual_concepts(DIRECTORY_LOGGER, rng=random.Random(123))
    b = extract_visual_concepts(DIRECTORY_LOGGER, rng=random.Random(123))
    assert a == b


@pytest.mark.fast
def test_rng_choice_drives_pick():
    class FirstChoice:
        def choice(self, seq):
            return seq[0]

    concepts = extract_visual_concepts("search the database", rng=FirstChoice())
    assert concepts == ["database schema diagram", "search magnifier with results"]


@pytest.mark.fast
def test_mapping_table_shape():
    assert FALLBACK_CONCEPT == "abstract software visualization with floating geometric shapes"
    for pattern, visuals in VISUAL_MAPPINGS:
        assert visuals
        assert pattern.flags & re.IGNORECASE
