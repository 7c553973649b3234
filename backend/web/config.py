"""
Configuration and startup safety checks for the alumni backend.

Why: Images are served to the public, and a misconfigured CDN silently breaks
every image URL the API hands out. This module provides a single guard that
enforces minimal production constraints without burdening local development.

Permissions: The caller needs no special privileges. The function simply reads
environment variables and raises `SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

import os
from urllib.parse import urlparse


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def ensure_secure_config_on_startup() -> None:
    """Fail fast on unsafe production configuration.

    Intent: Abort process startup when obviously broken settings are detected
    in production/staging. Development remains permissive for convenience.

    Checks:
    - CDN_ENABLED=true requires a CDN_BASE_URL.
    - The CDN base URL must use https and carry a host.
    - ALUMNI_PUBLIC_DIR must be set explicitly (no repo-relative default).
    """

    env = os.getenv("ALUMNI_ENV", "dev")
    if not _is_prod_like(env):
        return  # dev/test remain permissive

    # 1) CDN must be fully configured when enabled
    cdn_enabled = (os.getenv("CDN_ENABLED", "false") or "").strip().lower() == "true"
    if cdn_enabled:
        base = (os.getenv("CDN_BASE_URL") or "").strip()
        if not base:
            raise SystemExit("Refusing to start: CDN_ENABLED=true but CDN_BASE_URL is unset in production.")
        parsed = urlparse(base)
        if parsed.scheme != "https" or not parsed.netloc:
            raise SystemExit("Refusing to start: CDN_BASE_URL must be an https URL in production.")

    # 2) Public directory must be explicit
    if not (os.getenv("ALUMNI_PUBLIC_DIR") or "").strip():
        raise SystemExit("Refusing to start: ALUMNI_PUBLIC_DIR must be set in production.")


__all__ = ["ensure_secure_config_on_startup"]
