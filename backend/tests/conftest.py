"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend and give every test a clean,
writable storage environment so no test touches the real public directory.
"""
import sys
from pathlib import Path

import pytest

# Ensure the repository root is importable across tests (namespace packages)
REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_storage_env(monkeypatch: pytest.MonkeyPatch):
    """Clear storage-related env toggles and point the public dir at a temp path.

    Why:
        Individual tests opt into CDN or provider settings; without a reset the
        toggles leak into unrelated tests in a full run.
    """
    for var in (
        "ALUMNI_ENV",
        "CDN_ENABLED",
        "CDN_BASE_URL",
        "CDN_PROVIDER",
        "CLOUD_STORAGE_PROVIDER",
        "IMAGE_MAX_UPLOAD_BYTES",
        "AWS_S3_BUCKET",
        "AWS_REGION",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def public_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary public root wired through ALUMNI_PUBLIC_DIR."""
    root = tmp_path / "public"
    monkeypatch.setenv("ALUMNI_PUBLIC_DIR", str(root))
    return root
