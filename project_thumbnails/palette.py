"""
Palette generator — a deterministic primary / secondary / accent triple per
project title, so every thumbnail in the portfolio gets its own colour scheme
and regenerating a thumbnail keeps the same one.

The title is folded into a 32-bit signed string hash (h*31 + code unit),
the hash into a 0–359 base hue, and the hue into one of seven buckets.
Not cryptographic. Identical titles always share a palette, and with seven
buckets different titles often share one.
"""

from __future__ import annotations

from typing import Iterator, Tuple

from .models import ColorPalette, PaletteColor

# (lower, upper, bucket, primary, secondary, accent), upper bound exclusive
PALETTE_BUCKETS: Tuple[Tuple[int, int, str, PaletteColor, PaletteColor, PaletteColor], ...] = (
    (0, 30, "red/orange",
     PaletteColor("coral red", "#FF6B6B"), PaletteColor("warm orange", "#FFA07A"), PaletteColor("golden yellow", "#FFD93D")),
    (30, 60, "amber",
     PaletteColor("amber", "#F59E0B"), PaletteColor("golden", "#EAB308"), PaletteColor("warm white", "#FEF3C7")),
    (60, 120, "green",
     PaletteColor("emerald", "#10B981"), PaletteColor("lime", "#84CC16"), PaletteColor("mint", "#D1FAE5")),
    (120, 180, "teal/cyan",
     PaletteColor("teal", "#14B8A6"), PaletteColor("cyan", "#06B6D4"), PaletteColor("aqua", "#A5F3FC")),
    (180, 240, "blue",
     PaletteColor("sky blue", "#0EA5E9"), PaletteColor("indigo", "#6366F1"), PaletteColor("electric blue", "#38BDF8")),
    (240, 300, "purple",
     PaletteColor("purple", "#8B5CF6"), PaletteColor("violet", "#A855F7"), PaletteColor("magenta", "#E879F9")),
    (300, 360, "pink/magenta",
     PaletteColor("pink", "#EC4899"), PaletteColor("rose", "#F43F5E"), PaletteColor("fuchsia", "#F0ABFC")),
)


def utf16_code_units(text: str) -> Iterator[int]:
    """Yield UTF-16 code units, so astral characters hash as surrogate pairs."""
    raw = text.encode("utf-16-le")
    for i in range(0, len(raw), 2):
        yield raw[i] | (raw[i + 1] << 8)


def title_hash(title: str) -> int:
    """32-bit signed `hash = (hash << 5) - hash + code`, wrapped every step."""
    h = 0
    for unit in utf16_code_units(title):
        h = (h * 31 + unit) & 0xFFFFFFFF
    return h - 0x100000000 if h >= 0x80000000 else h


def hues_for(title: str) -> Tuple[int, int]:
    h = title_hash(title)
    base_hue = abs(h) % 360
    secondary_hue = (base_hue + 45 + abs(h >> 8) % 30) % 360
    return base_hue, secondary_hue


def generate_color_palette(title: str) -> ColorPalette:
    base_hue, secondary_hue = hues_for(title)
    bucket = next(
        (b for b in PALETTE_BUCKETS if b[0] <= base_hue < b[1]),
        PALETTE_BUCKETS[0],
    )
    _, _, name, primary, secondary, accent = bucket
    return ColorPalette(
        bucket=name,
        primary=primary,
        secondary=secondary,
        accent=accent,
        base_hue=base_hue,
        secondary_hue=secondary_hue,
    )
