"""
Helpers to generate standardized relative image paths for class groups.

Why:
    Keep path shapes consistent between uploads, placeholder generation and
    the frontend, and provide simple, testable sanitization that avoids path
    traversal and exotic characters while remaining human-readable.

Conventions:
    - Class photos: /images/class-groups/class-{year}-{uuid}.{ext}
    - Placeholders: /images/class-groups/placeholders/placeholder-{year}.svg
    - Banners: /images/class-groups/banners/banner-{year}.svg

Security:
    - Sanitization removes characters outside [A-Za-z0-9._-] from segments.
    - Filename extensions are lowercased and filtered to alphanumeric + dot.
"""
from __future__ import annotations

import os
import re
import unicodedata

from .config import CATEGORY_PATHS_DEFAULT, ImageCategory

_SEGMENT_RE = re.compile(r"[^A-Za-z0-9._-]+")

MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

DEFAULT_PLACEHOLDER_PATH = f"{CATEGORY_PATHS_DEFAULT[ImageCategory.CLASS_GROUPS]}/default-placeholder.svg"


def _sanitize_segment(value: str, *, fallback: str = "x") -> str:
    value = value or ""
    normalized = unicodedata.normalize("NFKD", value)
    ascii_value = normalized.encode("ascii", "ignore").decode("ascii")
    sanitized = _SEGMENT_RE.sub("-", ascii_value).strip("-_.")
    return sanitized or fallback


def _sanitize_ext_from_filename(filename: str | None, default_ext: str = "") -> str:
    if not filename:
        ext = default_ext
    else:
        _, ext = os.path.splitext(os.path.basename(filename))
    ext = (ext or default_ext or "").lower()
    ext = "".join(ch for ch in ext if ch.isalnum() or ch == ".")
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext


def extension_for_mime(mime_type: str | None) -> str:
    """Return the canonical extension for an allowed image MIME type, else ""."""
    return MIME_EXTENSIONS.get((mime_type or "").strip().lower(), "")


def make_class_photo_path(*, graduation_year: int, filename: str | None, uuid_hex: str, mime_type: str | None = None) -> str:
    """Build the relative path for an uploaded class photo.

    The extension follows the MIME type when it is an allowed image type and
    falls back to the extension of `filename` otherwise.

    Returns: /images/class-groups/class-{year}-{uuid}.{ext}
    """
    year = _sanitize_segment(str(graduation_year), fallback="year")
    hexpart = _sanitize_segment((uuid_hex or "").strip(), fallback="file")
    mime_ext = extension_for_mime(mime_type)
    ext = f".{mime_ext}" if mime_ext else _sanitize_ext_from_filename(filename)
    base = CATEGORY_PATHS_DEFAULT[ImageCategory.CLASS_GROUPS]
    return f"{base}/class-{year}-{hexpart}{ext}"


def make_placeholder_path(year: int) -> str:
    base = CATEGORY_PATHS_DEFAULT[ImageCategory.PLACEHOLDERS]
    return f"{base}/placeholder-{int(year)}.svg"


def make_banner_path(year: int) -> str:
    base = CATEGORY_PATHS_DEFAULT[ImageCategory.BANNERS]
    return f"{base}/banner-{int(year)}.svg"


__all__ = [
    "DEFAULT_PLACEHOLDER_PATH",
    "MIME_EXTENSIONS",
    "extension_for_mime",
    "make_banner_path",
    "make_class_photo_path",
    "make_placeholder_path",
]
