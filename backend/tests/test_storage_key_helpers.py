"""
Tests for image path helper functions to standardize path shapes.

Validates sanitization and structure for class photos, placeholders and
banners.
"""
from __future__ import annotations

import re


def test_make_class_photo_path_shape_and_sanitization():
    from backend.storage.keys import make_class_photo_path

    path = make_class_photo_path(
        graduation_year=2020,
        filename="Abschluß 2020/../Teil#1?.PNG",
        uuid_hex="dead/../beef",
    )
    # Expected structure: /images/class-groups/class-{year}-{uuid}.ext
    assert path.startswith("/images/class-groups/class-2020-")
    parts = path.split("/")
    assert len(parts) == 4, path
    assert re.match(r"^[A-Za-z0-9._-]+$", parts[-1])
    assert path.endswith(".png")


def test_make_class_photo_path_prefers_mime_extension():
    from backend.storage.keys import make_class_photo_path

    path = make_class_photo_path(graduation_year=2015, filename="photo.exe", uuid_hex="cafebabe", mime_type="image/jpeg")
    assert path == "/images/class-groups/class-2015-cafebabe.jpg"


def test_make_class_photo_path_without_filename_or_mime():
    from backend.storage.keys import make_class_photo_path

    path = make_class_photo_path(graduation_year=2015, filename=None, uuid_hex="")
    assert path == "/images/class-groups/class-2015-file"


def test_placeholder_and_banner_paths():
    from backend.storage.keys import DEFAULT_PLACEHOLDER_PATH, make_banner_path, make_placeholder_path

    assert make_placeholder_path(2010) == "/images/class-groups/placeholders/placeholder-2010.svg"
    assert make_banner_path(2010) == "/images/class-groups/banners/banner-2010.svg"
    assert DEFAULT_PLACEHOLDER_PATH == "/images/class-groups/default-placeholder.svg"


def test_extension_for_mime():
    from backend.storage.keys import extension_for_mime

    assert extension_for_mime("image/jpeg") == "jpg"
    assert extension_for_mime("IMAGE/JPG") == "jpg"
    assert extension_for_mime("image/webp") == "webp"
    assert extension_for_mime("application/pdf") == ""
    assert extension_for_mime(None) == ""
