"Alumni image storage API"
from __future__ import annotations

import logging
import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from backend.storage.bootstrap import provision_storage
from backend.storage.config import StoragePolicy, load_storage_policy
from backend.storage.local import build_storage_backend
from backend.storage.ports import StorageConfigurationError, StorageProvisioningError
from backend.web.config import ensure_secure_config_on_startup
from backend.web.routes.images import images_router

logger = logging.getLogger("alumni.web")


def _should_load_dotenv() -> bool:
    """Decide if we should load a local .env file.

    - Never load under pytest to avoid contaminating test env.
    - Allow explicit opt-out via ALUMNI_ENABLE_DOTENV (default true outside pytest).
    """
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("ALUMNI_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


if _should_load_dotenv():
    from dotenv import load_dotenv

    load_dotenv()


def create_app(policy: StoragePolicy | None = None) -> FastAPI:
    """Build the API with `policy` (or one loaded from env) as its single storage config.

    Storage is provisioned in the lifespan handler; a provisioning or provider
    configuration failure aborts startup with SystemExit.
    """
    ensure_secure_config_on_startup()
    storage_policy = policy if policy is not None else load_storage_policy()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            upload_policy = provision_storage(storage_policy)
            backend = build_storage_backend(upload_policy)
        except (StorageProvisioningError, StorageConfigurationError) as exc:
            logger.error("Storage provisioning failed: %s", exc)
            raise SystemExit(f"Refusing to start: {exc}") from exc
        app.state.upload_policy = upload_policy
        app.state.storage_backend = backend
        logger.info("Storage ready: root=%s", upload_policy.public_root)
        yield

    app = FastAPI(title="Alumni Images", version="0.1.0", lifespan=lifespan)
    app.state.storage_policy = storage_policy
    app.include_router(images_router)

    @app.get("/health")
    async def health_check():
        return JSONResponse({"status": "healthy"}, headers={"Cache-Control": "private, no-store"})

    images_dir = storage_policy.public_dir / "images"
    app.mount("/images", StaticFiles(directory=str(images_dir), check_dir=False), name="images")
    return app


__all__ = ["create_app"]
