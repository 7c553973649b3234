"""
Storage ports and errors for class-group images.

Keep these small and framework-agnostic so tests can supply simple fakes.
"""
from __future__ import annotations

from typing import Protocol


class ImageStorageBackend(Protocol):
    """Minimal interface to persist image bytes under a relative image path.

    Intent:
        Routes and tools write images without knowing whether they end up on the
        local filesystem or in a remote store (object storage, managed CDN).

    Permissions:
        Implementations must reject paths outside their storage root.
    """

    def save(self, relative_path: str, body: bytes, content_type: str) -> str: ...

    def delete(self, relative_path: str) -> None: ...

    def exists(self, relative_path: str) -> bool: ...


# ------------------------------ Errors --------------------------------------


class StorageError(Exception):
    """Base class for image storage failures."""


class StorageProvisioningError(StorageError):
    """A required storage directory could not be created; fatal to startup."""

    def __init__(self, directory: str, reason: str):
        super().__init__(f"cannot create storage directory {directory}: {reason}")
        self.directory = directory
        self.reason = reason


class StorageConfigurationError(StorageError):
    """The configured storage provider is unknown."""


class UnsafeImagePathError(StorageError, ValueError):
    """A relative image path would resolve outside the public directory."""

    def __init__(self, path: str, code: str = "path_escape"):
        super().__init__(code)
        self.path = path
        self.code = code


__all__ = [
    "ImageStorageBackend",
    "StorageError",
    "StorageProvisioningError",
    "StorageConfigurationError",
    "UnsafeImagePathError",
]
