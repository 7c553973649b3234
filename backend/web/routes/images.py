"""Class-group image API routes.

Thin HTTP layer over the storage domain: every upload passes through
`UploadPolicy.validate_upload` before any byte is written, and every stored
path is turned into a servable URL via `UploadPolicy.resolve_servable_url`.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from backend.storage.keys import make_class_photo_path
from backend.storage.placeholders import FIRST_GRADUATION_YEAR
from backend.storage.ports import ImageStorageBackend, UnsafeImagePathError
from backend.storage.upload_policy import UploadCandidate, UploadPolicy

images_router = APIRouter(tags=["Images"])

_log = logging.getLogger("alumni.web")

PHOTO_FIELD = "photo"


def _cache_headers() -> dict[str, str]:
    """Headers for write responses and errors: private, never cached."""
    return {"Cache-Control": "private, no-store", "Vary": "Origin"}


def _error(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(
        {"success": False, "error": error, "detail": detail},
        status_code=status_code,
        headers=_cache_headers(),
    )


def _storage(request: Request) -> tuple[UploadPolicy | None, ImageStorageBackend | None, JSONResponse | None]:
    """Return the provisioned policy/backend from app state, or a 503 response."""
    upload_policy = getattr(request.app.state, "upload_policy", None)
    backend = getattr(request.app.state, "storage_backend", None)
    if upload_policy is None or backend is None:
        return None, None, _error(503, "service_unavailable", "storage_not_provisioned")
    return upload_policy, backend, None


def last_graduation_year() -> int:
    return datetime.now(timezone.utc).year + 1


def _parse_graduation_year(raw: str) -> int | None:
    try:
        year = int(raw)
    except (TypeError, ValueError):
        return None
    if year < FIRST_GRADUATION_YEAR or year > last_graduation_year():
        return None
    return year


@images_router.get("/api/images/policy")
async def get_image_policy(request: Request):
    """Expose allowed formats and limits for client-side messaging."""
    upload_policy, _, error = _storage(request)
    if error:
        return error
    policy = upload_policy.policy
    body: dict[str, Any] = {
        "allowed_extensions": list(policy.allowed_extensions),
        "allowed_mime_types": sorted(policy.allowed_mime_types),
        "max_file_size_bytes": policy.max_file_size_bytes,
        "max_file_size_label": policy.max_size_label(),
        "dimensions": {
            name: {"width": p.width, "height": p.height, "aspect_ratio": p.aspect_ratio}
            for name, p in policy.dimensions.items()
        },
    }
    return JSONResponse(body, headers={"Cache-Control": "public, max-age=300"})


@images_router.post("/api/class-groups/{graduation_year}/photo")
async def upload_class_photo(request: Request, graduation_year: str):
    """Store a class photo for `graduation_year`.

    Parameters:
        request: multipart form-data with a single `photo` file field.
        graduation_year: four-digit year between the first graduating class
            and next year (path).

    Returns:
        201 JSON `{"success": true, "data": {"path", "url", "size", "content_type"}}`.
        400 JSON with `detail` set to the validation message when the year, the
        file type or the file size is rejected.
    """
    upload_policy, backend, error = _storage(request)
    if error:
        return error
    year = _parse_graduation_year(graduation_year)
    if year is None:
        return _error(400, "bad_request", "Invalid graduation year")

    form = await request.form()
    upload = form.get(PHOTO_FIELD)
    if not isinstance(upload, UploadFile):
        result = upload_policy.validate_upload(None)
        return _error(400, "bad_request", result.error or "")

    try:
        body = await upload.read()
    finally:
        await upload.close()
    candidate = UploadCandidate(
        mimetype=(upload.content_type or "").split(";", 1)[0].strip().lower(),
        size=len(body),
        filename=upload.filename,
    )
    result = upload_policy.validate_upload(candidate)
    if not result.valid:
        _log.info("class photo rejected: year=%s reason=%s", year, result.error)
        return _error(400, "bad_request", result.error or "")

    relative_path = make_class_photo_path(
        graduation_year=year,
        filename=candidate.filename,
        uuid_hex=uuid.uuid4().hex,
        mime_type=candidate.mimetype,
    )
    stored = backend.save(relative_path, body, candidate.mimetype)
    _log.info("class photo stored: year=%s path=%s bytes=%s", year, stored, candidate.size)
    data = {
        "path": stored,
        "url": upload_policy.resolve_servable_url(stored),
        "size": candidate.size,
        "content_type": candidate.mimetype,
    }
    return JSONResponse({"success": True, "data": data}, status_code=201, headers=_cache_headers())


@images_router.delete("/api/class-groups/images")
async def delete_class_image(request: Request, path: str = ""):
    """Delete a stored image by its relative path (query `path`)."""
    upload_policy, backend, error = _storage(request)
    if error:
        return error
    if not path:
        return _error(400, "bad_request", "missing_path")
    try:
        if not backend.exists(path):
            return _error(404, "not_found", "image_not_found")
        backend.delete(path)
    except UnsafeImagePathError as exc:
        return _error(400, "bad_request", exc.code)
    _log.info("image deleted: path=%s", path)
    return JSONResponse({"success": True}, headers=_cache_headers())


__all__ = ["images_router", "last_graduation_year"]
