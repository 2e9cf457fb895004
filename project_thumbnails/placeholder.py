"""
Placeholder thumbnail — the last tier. Pure string templating, no I/O and no
failure paths: a 1200×675 SVG whose gradient hue is derived from the title,
with a faint grid and three concentric circles.

The hue is a plain sum of the title's UTF-16 code units mod 360. It is kept
separate from the palette hash: the placeholder needs a single hue, not a
bucketed triple.
"""

from __future__ import annotations

from .data_uri import encode_data_uri
from .palette import utf16_code_units

SVG_MIME = "image/svg+xml"
WIDTH, HEIGHT = 1200, 675

_SVG_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">
  <defs>
    <linearGradient id="bg" x1="0%" y1="0%" x2="100%" y2="100%">
      <stop offset="0%" style="stop-color:hsl({hue}, 70%, 15%)"/>
      <stop offset="100%" style="stop-color:hsl({hue2}, 70%, 25%)"/>
    </linearGradient>
    <pattern id="grid" width="40" height="40" patternUnits="userSpaceOnUse">
      <path d="M 40 0 L 0 0 0 40" fill="none" stroke="rgba(255,255,255,0.05)" stroke-width="1"/>
    </pattern>
  </defs>
  <rect width="{w}" height="{h}" fill="url(#bg)"/>
  <rect width="{w}" height="{h}" fill="url(#grid)"/>
  <circle cx="{cx}" cy="{cy}" r="120" fill="none" stroke="rgba(255,255,255,0.1)" stroke-width="2"/>
  <circle cx="{cx}" cy="{cy}" r="80" fill="none" stroke="rgba(255,255,255,0.15)" stroke-width="2"/>
  <circle cx="{cx}" cy="{cy}" r="40" fill="rgba(255,255,255,0.1)"/>
</svg>
"""


def placeholder_hue(title: str) -> int:
    return sum(utf16_code_units(title)) % 360


def generate_placeholder_svg(title: str) -> str:
    hue = placeholder_hue(title)
    return _SVG_TEMPLATE.format(
        w=WIDTH,
        h=HEIGHT,
        cx=WIDTH // 2,
        cy=HEIGHT // 2,
        hue=hue,
        hue2=(hue + 40) % 360,
    )


def generate_placeholder_image(title: str) -> str:
    """Placeholder as a `data:image/svg+xml;base64,...` URI."""
    return encode_data_uri(generate_placeholder_svg(title).encode("utf-8"), SVG_MIME)
