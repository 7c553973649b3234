"""
Local filesystem backend for class-group images.

This backend implements ImageStorageBackend by writing below the public
directory served by the web frontend. All paths go through
`UploadPolicy.resolve_full_path`, so traversal attempts fail before any I/O.

Remote providers (S3, Cloudinary) are configured but not implemented; selecting
them falls back to this backend with a warning.
"""
from __future__ import annotations

import logging
import os
import tempfile

from .ports import ImageStorageBackend, StorageConfigurationError
from .upload_policy import UploadPolicy

_log = logging.getLogger("alumni.storage")

LOCAL_PROVIDER = "local"
PLANNED_PROVIDERS = frozenset({"s3", "cloudinary"})


class LocalFileSystemBackend(ImageStorageBackend):
    """Storage backend writing images to the local public directory."""

    def __init__(self, upload_policy: UploadPolicy):
        self._policy = upload_policy

    def save(self, relative_path: str, body: bytes, content_type: str) -> str:
        target = self._policy.resolve_full_path(relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file first so readers never see partial images.
        fd, tmp_name = tempfile.mkstemp(dir=str(target.parent), prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(body)
            os.replace(tmp_name, target)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        _log.debug("stored image path=%s bytes=%s content_type=%s", relative_path, len(body), content_type)
        return relative_path

    def delete(self, relative_path: str) -> None:
        target = self._policy.resolve_full_path(relative_path)
        try:
            target.unlink()
        except FileNotFoundError:
            return
        _log.debug("deleted image path=%s", relative_path)

    def exists(self, relative_path: str) -> bool:
        return self._policy.resolve_full_path(relative_path).is_file()


def build_storage_backend(upload_policy: UploadPolicy) -> ImageStorageBackend:
    """Select the storage backend for the configured cloud-storage provider.

    Behavior:
        - `local` returns a LocalFileSystemBackend.
        - `s3` / `cloudinary` log a warning and fall back to local storage.
        - Anything else raises StorageConfigurationError.
    """
    provider = (upload_policy.policy.cloud_storage.provider or LOCAL_PROVIDER).strip().lower()
    if provider == LOCAL_PROVIDER:
        return LocalFileSystemBackend(upload_policy)
    if provider in PLANNED_PROVIDERS:
        _log.warning("storage provider '%s' is not available; using local filesystem storage", provider)
        return LocalFileSystemBackend(upload_policy)
    raise StorageConfigurationError(f"unknown storage provider: {provider}")


__all__ = ["LocalFileSystemBackend", "build_storage_backend"]
