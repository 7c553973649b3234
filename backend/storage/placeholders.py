"""
SVG placeholder artwork for class groups without an uploaded photo.

Each graduation year gets a cover (800x400) and a banner (1200x600) in one of
six rotating colour schemes, plus a single generic "Coming Soon" image. Sizes
come from the policy's dimension profiles.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from .config import DIMENSIONS_DEFAULT, DimensionProfile, PlaceholderStyle
from .keys import DEFAULT_PLACEHOLDER_PATH, make_banner_path, make_placeholder_path
from .ports import ImageStorageBackend

_log = logging.getLogger("alumni.storage")

FIRST_GRADUATION_YEAR = 2007
SVG_CONTENT_TYPE = "image/svg+xml"
SCHOOL_MOTTO = "Ad Altiora Tendo"
SUBTITLE = "PSD AHS Alumni"


@dataclass(frozen=True, slots=True)
class ColorScheme:
    background: str
    text: str
    accent: str


COLOR_SCHEMES = (
    ColorScheme("#1e3a8a", "#ffffff", "#3b82f6"),  # blue
    ColorScheme("#7c2d12", "#ffffff", "#ea580c"),  # orange
    ColorScheme("#14532d", "#ffffff", "#22c55e"),  # green
    ColorScheme("#581c87", "#ffffff", "#a855f7"),  # purple
    ColorScheme("#831843", "#ffffff", "#ec4899"),  # pink
    ColorScheme("#0c4a6e", "#ffffff", "#0ea5e9"),  # cyan
)


def color_scheme_for(year: int) -> ColorScheme:
    return COLOR_SCHEMES[(int(year) - FIRST_GRADUATION_YEAR) % len(COLOR_SCHEMES)]


def academic_year_label(year: int) -> str:
    """`2020` -> `2020/21`."""
    return f"{year}/{str(year + 1)[-2:]}"


def render_placeholder_svg(
    year: int,
    kind: str = "cover",
    *,
    dimensions: Mapping[str, DimensionProfile] | None = None,
    style: PlaceholderStyle | None = None,
) -> str:
    """Render the SVG placeholder for `year`; `kind` is "cover" or "banner"."""
    if kind not in ("cover", "banner"):
        raise ValueError(f"unsupported placeholder kind: {kind}")
    profile = (dimensions or DIMENSIONS_DEFAULT)[kind]
    style = style or PlaceholderStyle()
    colors = color_scheme_for(year)
    w, h = profile.width, profile.height
    banner = kind == "banner"
    class_name = style.text.format(year=academic_year_label(year))
    title_size = style.font_size + 16 if banner else style.font_size
    motto_size = 24 if banner else 16
    subtitle_size = 20 if banner else 16
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg width="{w}" height="{h}" xmlns="http://www.w3.org/2000/svg">
  <rect width="{w}" height="{h}" fill="{colors.background}"/>
  <defs>
    <pattern id="pattern-{year}" x="0" y="0" width="40" height="40" patternUnits="userSpaceOnUse">
      <circle cx="20" cy="20" r="1" fill="{colors.accent}" opacity="0.1"/>
    </pattern>
  </defs>
  <rect width="{w}" height="{h}" fill="url(#pattern-{year})"/>
  <circle cx="{w * 0.15:g}" cy="{h * 0.2:g}" r="{h * 0.3:g}" fill="{colors.accent}" opacity="0.1"/>
  <circle cx="{w * 0.85:g}" cy="{h * 0.8:g}" r="{h * 0.25:g}" fill="{colors.accent}" opacity="0.1"/>
  <text x="{w / 2:g}" y="{h * 0.35:g}" font-family="Georgia, serif" font-size="{motto_size}" fill="{colors.text}" opacity="0.7" text-anchor="middle" font-style="italic">{SCHOOL_MOTTO}</text>
  <text x="{w / 2:g}" y="{h * 0.5:g}" font-family="{style.font_family}" font-size="{title_size}" font-weight="bold" fill="{colors.text}" text-anchor="middle">{class_name}</text>
  <text x="{w / 2:g}" y="{h * 0.65:g}" font-family="{style.font_family}" font-size="{subtitle_size}" fill="{colors.text}" opacity="0.8" text-anchor="middle">{SUBTITLE}</text>
  <line x1="0" y1="{h - 4}" x2="{w}" y2="{h - 4}" stroke="{colors.accent}" stroke-width="4"/>
</svg>
"""


def render_default_placeholder_svg(style: PlaceholderStyle | None = None) -> str:
    style = style or PlaceholderStyle()
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg width="800" height="400" xmlns="http://www.w3.org/2000/svg">
  <rect width="800" height="400" fill="{style.background_color}"/>
  <text x="400" y="180" font-family="{style.font_family}" font-size="32" fill="{style.text_color}" text-anchor="middle" opacity="0.7">{SUBTITLE}</text>
  <text x="400" y="230" font-family="{style.font_family}" font-size="{style.font_size}" font-weight="bold" fill="{style.text_color}" text-anchor="middle">Class Photo</text>
  <text x="400" y="270" font-family="{style.font_family}" font-size="20" fill="{style.text_color}" text-anchor="middle" opacity="0.7">Coming Soon</text>
</svg>
"""


def write_placeholders(
    backend: ImageStorageBackend,
    years: Iterable[int],
    *,
    dimensions: Mapping[str, DimensionProfile] | None = None,
    style: PlaceholderStyle | None = None,
) -> list[str]:
    """Write cover and banner placeholders for each year plus the default image.

    Existing files are overwritten. Returns the relative paths written.
    """
    written: list[str] = []
    for year in years:
        for kind, path in (("cover", make_placeholder_path(year)), ("banner", make_banner_path(year))):
            svg = render_placeholder_svg(year, kind, dimensions=dimensions, style=style)
            written.append(backend.save(path, svg.encode("utf-8"), SVG_CONTENT_TYPE))
    written.append(backend.save(DEFAULT_PLACEHOLDER_PATH, render_default_placeholder_svg(style).encode("utf-8"), SVG_CONTENT_TYPE))
    _log.info("placeholders written: count=%s", len(written))
    return written


__all__ = [
    "COLOR_SCHEMES",
    "FIRST_GRADUATION_YEAR",
    "academic_year_label",
    "color_scheme_for",
    "render_default_placeholder_svg",
    "render_placeholder_svg",
    "write_placeholders",
]
