"""Tests for the title-hash palette generator."""

import pytest

from project_thumbnails.palette import (
    PALETTE_BUCKETS,
    generate_color_palette,
    hues_for,
    title_hash,
)


@pytest.mark.fast
@pytest.mark.parametrize(
    "title, expected",
    [
        ("", 0),
        ("a", 97),
        ("ab", 3105),
        ("hello", 99162322),                 # same formula as Java's String.hashCode
        ("polygenelubricants", -2147483648),  # wraps to INT32_MIN
    ],
)
def test_title_hash_is_int32_string_hash(title, expected):
    assert title_hash(title) == expected


@pytest.mark.fast
@pytest.mark.parametrize(
    "title, base_hue, secondary_hue, bucket",
    [
        ("", 0, 45, "red/orange"),
        ("a", 97, 142, "green"),
        ("ab", 225, 282, "blue"),
        ("hello", 322, 29, "pink/magenta"),
        ("polygenelubricants", 128, 181, "teal/cyan"),
    ],
)
def test_hues_and_bucket(title, base_hue, secondary_hue, bucket):
    assert hues_for(title) == (base_hue, secondary_hue)
    palette = generate_color_palette(title)
    assert palette.base_hue == base_hue
    assert palette.secondary_hue == secondary_hue
    assert palette.bucket == bucket


@pytest.mark.fast
def test_identical_titles_get_identical_palettes():
    assert generate_color_palette("Alpha") == generate_color_palette("Alpha")


@pytest.mark.fast
def test_different_titles_spread_across_buckets():
    titles = [f"Project {i}" for i in range(200)]
    buckets = {generate_color_palette(t).bucket for t in titles}
    assert len(buckets) >= 4


@pytest.mark.fast
def test_bucket_matches_hue_range_for_many_titles():
    ranges = {name: (lo, hi) for lo, hi, name, *_ in PALETTE_BUCKETS}
    for i in range(500):
        palette = generate_color_palette(f"Some Title {i} ✨")
        lo, hi = ranges[palette.bucket]
        assert lo <= palette.base_hue < hi
        assert 0 <= palette.secondary_hue < 360


@pytest.mark.fast
def test_palette_colors_render_with_hex():
    palette = generate_color_palette("a")
    assert str(palette.primary) == "emerald (#10B981)"
    assert str(palette.secondary) == "lime (#84CC16)"
    assert str(palette.accent) == "mint (#D1FAE5)"


@pytest.mark.fast
def test_buckets_cover_the_colour_wheel():
    bounds = [(lo, hi) for lo, hi, *_ in PALETTE_BUCKETS]
    assert len(bounds) == 7
    assert bounds[0][0] == 0 and bounds[-1][1] == 360
    for (_, hi), (lo, _) in zip(bounds, bounds[1:]):
        assert hi == lo
