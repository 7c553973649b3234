"""
Upload policy for class-group images.

Centralises MIME/size/path constraints so that routers stay slim and both
tests and documentation can reference a single source of truth. All checks run
against an injected `StoragePolicy`; the service itself holds no other state.

Failure semantics:
    - Validation problems are returned as `ValidationResult` values, never raised.
    - Unsafe relative paths raise `UnsafeImagePathError`.
    - Directory creation errors raise `StorageProvisioningError`.
"""
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .config import ImageCategory, StoragePolicy
from .ports import StorageProvisioningError, UnsafeImagePathError

_log = logging.getLogger("alumni.storage")

NO_FILE_ERROR = "No file provided"
INVALID_SIZE_ERROR = "Invalid file size"


@dataclass(frozen=True, slots=True)
class UploadCandidate:
    """Inbound file description submitted for validation."""

    mimetype: str
    size: int
    filename: str | None = None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        if self.valid:
            return {"valid": True}
        return {"valid": False, "error": self.error}


def _candidate_field(candidate: Any, name: str) -> Any:
    if isinstance(candidate, Mapping):
        return candidate.get(name)
    return getattr(candidate, name, None)


def _is_byte_count(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and value >= 0


class UploadPolicy:
    """Resolves image paths/URLs, validates uploads and provisions directories."""

    def __init__(self, policy: StoragePolicy):
        self._policy = policy
        self._root = Path(policy.public_dir).resolve()

    @property
    def policy(self) -> StoragePolicy:
        return self._policy

    @property
    def public_root(self) -> Path:
        return self._root

    # --- Paths ------------------------------------------------------------------

    def resolve_full_path(self, relative_path: str) -> Path:
        """Return the filesystem path for an image path like `/images/class-groups/x.jpg`.

        The result always lies inside the public directory; anything that would
        escape it (e.g. `../` segments) raises `UnsafeImagePathError`. Existence
        is not checked.
        """
        raw = str(relative_path or "")
        if "\x00" in raw:
            raise UnsafeImagePathError(raw, "invalid_path")
        target = (self._root / raw.lstrip("/\\")).resolve()
        try:
            common = os.path.commonpath([str(self._root), str(target)])
        except ValueError as exc:
            raise UnsafeImagePathError(raw, "path_error") from exc
        if common != str(self._root):
            raise UnsafeImagePathError(raw)
        return target

    def resolve_servable_url(self, relative_path: str) -> str:
        """Return the URL for an image path, prefixed with the CDN base when enabled."""
        cdn = self._policy.cdn
        if cdn.enabled:
            return f"{cdn.base_url}{relative_path}"
        return relative_path

    # --- Provisioning -----------------------------------------------------------

    def storage_directories(self) -> list[Path]:
        return [self._root / self._policy.category_path(category).lstrip("/") for category in ImageCategory]

    def ensure_storage_directories(self) -> list[Path]:
        """Create missing category directories; return the ones created.

        Idempotent: a second call creates nothing. Concurrent callers may race
        on creation; an already existing directory is not an error.
        """
        created: list[Path] = []
        for directory in self.storage_directories():
            if directory.is_dir():
                continue
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StorageProvisioningError(str(directory), exc.strerror or type(exc).__name__) from exc
            _log.info("Created directory: %s", directory)
            created.append(directory)
        return created

    # --- Validation -------------------------------------------------------------

    def validate_upload(self, candidate: Any) -> ValidationResult:
        """Check presence, MIME type and size of `candidate`, in that order.

        `candidate` is an `UploadCandidate`, any object with `mimetype`/`size`
        attributes, or a mapping with those keys. Only the declared metadata is
        inspected; file bytes are never read. A size that is not a non-negative
        number (including `bool` and NaN) is reported as an invalid size.
        """
        if candidate is None:
            return ValidationResult(valid=False, error=NO_FILE_ERROR)

        policy = self._policy
        mimetype = _candidate_field(candidate, "mimetype")
        if not isinstance(mimetype, str) or mimetype not in policy.allowed_mime_types:
            return ValidationResult(
                valid=False,
                error=f"Invalid file type. Allowed types: {policy.allowed_types_label()}",
            )

        size = _candidate_field(candidate, "size")
        if not _is_byte_count(size):
            return ValidationResult(valid=False, error=INVALID_SIZE_ERROR)
        if size > policy.max_file_size_bytes:
            return ValidationResult(
                valid=False,
                error=f"File too large. Maximum size: {policy.max_size_label()}",
            )

        return ValidationResult(valid=True)


__all__ = ["INVALID_SIZE_ERROR", "NO_FILE_ERROR", "UploadCandidate", "UploadPolicy", "ValidationResult"]
