"""
Centralized image storage configuration for class-group photos.

Intent:
    Provide a single source of truth for where images live, which formats are
    accepted, size limits, and the descriptive image profiles used by the
    alumni frontend. Built once at startup by `load_storage_policy()` and passed
    to whoever needs it; nothing here is a module-level singleton.

Behavior:
    - Paths are URL-style (`/images/class-groups/...`) relative to `public_dir`.
    - `IMAGE_MAX_UPLOAD_BYTES` may lower the 5 MiB limit but never raise it.
    - CDN and cloud-storage blocks are read from env; only the CDN base URL is
      consulted by any operation today.

Permissions:
    Pure configuration; no external calls or privileges required.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping


REPO_ROOT = Path(__file__).resolve().parents[2]
PUBLIC_DIR_DEFAULT = REPO_ROOT / "frontend" / "public"
MAX_UPLOAD_BYTES_CONTRACT = 5 * 1024 * 1024


class ImageCategory(str, Enum):
    """Fixed image purposes, each with its own storage subdirectory."""

    CLASS_GROUPS = "class-groups"
    PLACEHOLDERS = "placeholders"
    BANNERS = "banners"
    THUMBNAILS = "thumbnails"


CATEGORY_PATHS_DEFAULT: Mapping[ImageCategory, str] = MappingProxyType(
    {
        ImageCategory.CLASS_GROUPS: "/images/class-groups",
        ImageCategory.PLACEHOLDERS: "/images/class-groups/placeholders",
        ImageCategory.BANNERS: "/images/class-groups/banners",
        ImageCategory.THUMBNAILS: "/images/class-groups/thumbnails",
    }
)
ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png", "webp")
ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})


@dataclass(frozen=True, slots=True)
class DimensionProfile:
    """Target size for a rendered variant; `aspect_ratio` is a label only."""

    width: int
    height: int
    aspect_ratio: str


@dataclass(frozen=True, slots=True)
class OptimizationSettings:
    quality: int = 80
    progressive: bool = True
    compression_level: int = 6
    strip_metadata: bool = True


@dataclass(frozen=True, slots=True)
class PlaceholderStyle:
    background_color: str = "#1e3a8a"
    text_color: str = "#ffffff"
    font_size: int = 48
    font_family: str = "Arial, sans-serif"
    text: str = "Class of {year}"


@dataclass(frozen=True, slots=True)
class CdnConfig:
    enabled: bool = False
    base_url: str = ""
    provider: str = "local"


@dataclass(frozen=True, slots=True)
class CloudinaryConfig:
    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    folder: str = "alumni/class-groups"


@dataclass(frozen=True, slots=True)
class S3Config:
    bucket: str = ""
    region: str = "us-east-1"
    access_key_id: str = ""
    secret_access_key: str = ""
    folder: str = "class-groups"


@dataclass(frozen=True, slots=True)
class CloudStorageConfig:
    provider: str = "local"
    cloudinary: CloudinaryConfig = field(default_factory=CloudinaryConfig)
    s3: S3Config = field(default_factory=S3Config)


DIMENSIONS_DEFAULT: Mapping[str, DimensionProfile] = MappingProxyType(
    {
        "cover": DimensionProfile(width=800, height=400, aspect_ratio="2:1"),
        "banner": DimensionProfile(width=1200, height=600, aspect_ratio="2:1"),
        "thumbnail": DimensionProfile(width=400, height=200, aspect_ratio="2:1"),
    }
)


@dataclass(frozen=True, slots=True)
class StoragePolicy:
    """Immutable policy governing image paths, limits and allowed formats."""

    public_dir: Path
    category_paths: Mapping[ImageCategory, str] = field(default_factory=lambda: CATEGORY_PATHS_DEFAULT)
    allowed_extensions: tuple[str, ...] = ALLOWED_EXTENSIONS
    allowed_mime_types: frozenset[str] = ALLOWED_MIME_TYPES
    max_file_size_bytes: int = MAX_UPLOAD_BYTES_CONTRACT
    dimensions: Mapping[str, DimensionProfile] = field(default_factory=lambda: DIMENSIONS_DEFAULT)
    optimization: OptimizationSettings = field(default_factory=OptimizationSettings)
    placeholder: PlaceholderStyle = field(default_factory=PlaceholderStyle)
    cdn: CdnConfig = field(default_factory=CdnConfig)
    cloud_storage: CloudStorageConfig = field(default_factory=CloudStorageConfig)

    def category_path(self, category: ImageCategory | str) -> str:
        return self.category_paths[ImageCategory(category)]

    def category_dir(self, category: ImageCategory | str) -> Path:
        """Absolute directory of `category` under the public root."""
        return self.public_dir / self.category_path(category).lstrip("/")

    def allowed_types_label(self) -> str:
        return ", ".join(self.allowed_extensions)

    def max_size_label(self) -> str:
        """Human-readable limit with unit: "5MB", "2.5MB", "40KB", "512 bytes".

        Limits of at least 1 MiB are shown in MB, smaller ones in KB, and
        anything below 1 KiB in bytes, so a positive limit never reads as 0.
        """
        size = self.max_file_size_bytes
        if size >= 1024 * 1024:
            return f"{_one_decimal(size / (1024 * 1024))}MB"
        if size >= 1024:
            return f"{_one_decimal(size / 1024)}KB"
        return f"{size} bytes"


def _one_decimal(value: float) -> str:
    return f"{value:.1f}".rstrip("0").rstrip(".")


def _env_flag(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() == "true"


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _parse_int_env(name: str, default: int, *, contract_max: int | None = None) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    if isinstance(contract_max, int) and contract_max > 0:
        value = min(value, contract_max)
    return value


def get_max_upload_bytes() -> int:
    """Maximum image upload size (default/clamped 5 MiB).

    Env:
        IMAGE_MAX_UPLOAD_BYTES – optional lower limit; invalid values fall back
        to the default, larger values are clamped.
    """
    return _parse_int_env("IMAGE_MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES_CONTRACT, contract_max=MAX_UPLOAD_BYTES_CONTRACT)


def get_public_dir() -> Path:
    """Return the public root directory (env `ALUMNI_PUBLIC_DIR`)."""
    raw = _env_str("ALUMNI_PUBLIC_DIR")
    return Path(raw).expanduser().resolve() if raw else PUBLIC_DIR_DEFAULT


def load_cdn_config() -> CdnConfig:
    return CdnConfig(
        enabled=_env_flag("CDN_ENABLED"),
        base_url=_env_str("CDN_BASE_URL"),
        provider=_env_str("CDN_PROVIDER", "local").lower(),
    )


def load_cloud_storage_config() -> CloudStorageConfig:
    return CloudStorageConfig(
        provider=_env_str("CLOUD_STORAGE_PROVIDER", "local").lower(),
        cloudinary=CloudinaryConfig(
            cloud_name=_env_str("CLOUDINARY_CLOUD_NAME"),
            api_key=_env_str("CLOUDINARY_API_KEY"),
            api_secret=_env_str("CLOUDINARY_API_SECRET"),
        ),
        s3=S3Config(
            bucket=_env_str("AWS_S3_BUCKET"),
            region=_env_str("AWS_REGION", "us-east-1"),
            access_key_id=_env_str("AWS_ACCESS_KEY_ID"),
            secret_access_key=_env_str("AWS_SECRET_ACCESS_KEY"),
        ),
    )


def load_storage_policy() -> StoragePolicy:
    """Build the storage policy from the environment.

    Call once during startup and pass the result on; the value is immutable.
    """
    return StoragePolicy(
        public_dir=get_public_dir(),
        max_file_size_bytes=get_max_upload_bytes(),
        cdn=load_cdn_config(),
        cloud_storage=load_cloud_storage_config(),
    )


def _ratio_matches(profile: DimensionProfile) -> bool:
    try:
        w_raw, h_raw = profile.aspect_ratio.split(":", 1)
        w, h = int(w_raw), int(h_raw)
    except ValueError:
        return False
    if w <= 0 or h <= 0:
        return False
    return profile.width * h == profile.height * w


def find_policy_drift(policy: StoragePolicy) -> list[str]:
    """Report mismatches that the policy itself does not prevent.

    Checks that every allowed MIME type has a matching extension (and vice
    versa) and that each dimension profile agrees with its aspect-ratio label.
    Returns human-readable findings; an empty list means consistent.
    """
    findings: list[str] = []
    extensions = {ext.lower() for ext in policy.allowed_extensions}
    subtypes = {mime.split("/", 1)[-1].lower() for mime in policy.allowed_mime_types}
    for mime in sorted(policy.allowed_mime_types):
        if mime.split("/", 1)[-1].lower() not in extensions:
            findings.append(f"MIME type '{mime}' has no matching allowed extension")
    for ext in policy.allowed_extensions:
        if ext.lower() not in subtypes:
            findings.append(f"extension '{ext}' has no matching allowed MIME type")
    for name, profile in policy.dimensions.items():
        if not _ratio_matches(profile):
            findings.append(
                f"dimension profile '{name}' is {profile.width}x{profile.height} but declares {profile.aspect_ratio}"
            )
    return findings


__all__ = [
    "ALLOWED_EXTENSIONS",
    "ALLOWED_MIME_TYPES",
    "CATEGORY_PATHS_DEFAULT",
    "MAX_UPLOAD_BYTES_CONTRACT",
    "CdnConfig",
    "CloudStorageConfig",
    "DimensionProfile",
    "ImageCategory",
    "OptimizationSettings",
    "PlaceholderStyle",
    "StoragePolicy",
    "find_policy_drift",
    "get_max_upload_bytes",
    "get_public_dir",
    "load_storage_policy",
]
