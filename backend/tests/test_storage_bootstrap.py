"""
Storage bootstrap: ensure category directories exist.

Why:
    New environments should work without creating image folders by hand. This
    test drives the startup provisioning: missing directories are created once
    with a diagnostic per directory, repeated calls are silent no-ops, and
    filesystem errors surface as StorageProvisioningError.

Scope:
    - Unit-style: real filesystem under tmp_path, logs captured via caplog.
"""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from backend.storage import bootstrap
from backend.storage.config import DimensionProfile, StoragePolicy
from backend.storage.ports import StorageProvisioningError
from backend.storage.upload_policy import UploadPolicy

EXPECTED = [
    ("images", "class-groups"),
    ("images", "class-groups", "placeholders"),
    ("images", "class-groups", "banners"),
    ("images", "class-groups", "thumbnails"),
]


def test_ensure_directories_creates_all_categories(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    policy = UploadPolicy(StoragePolicy(public_dir=tmp_path / "public"))
    caplog.set_level(logging.INFO, logger="alumni.storage")

    created = policy.ensure_storage_directories()

    root = (tmp_path / "public").resolve()
    assert created == [root.joinpath(*parts) for parts in EXPECTED]
    for parts in EXPECTED:
        assert root.joinpath(*parts).is_dir()
    msgs = [rec.message for rec in caplog.records if rec.message.startswith("Created directory:")]
    assert len(msgs) == 4


def test_ensure_directories_is_idempotent(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    policy = UploadPolicy(StoragePolicy(public_dir=tmp_path / "public"))
    policy.ensure_storage_directories()

    caplog.clear()
    caplog.set_level(logging.INFO, logger="alumni.storage")
    again = policy.ensure_storage_directories()

    assert again == []
    assert not [rec for rec in caplog.records if "Created directory" in rec.message]
    root = (tmp_path / "public").resolve()
    for parts in EXPECTED:
        assert root.joinpath(*parts).is_dir()


def test_ensure_directories_only_reports_missing_ones(tmp_path: Path):
    root = tmp_path / "public"
    (root / "images" / "class-groups" / "banners").mkdir(parents=True)
    policy = UploadPolicy(StoragePolicy(public_dir=root))

    created = policy.ensure_storage_directories()

    names = [p.name for p in created]
    assert names == ["placeholders", "thumbnails"]


def test_ensure_directories_tolerates_concurrent_creation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """A directory created by someone else between check and mkdir is not an error."""
    policy = UploadPolicy(StoragePolicy(public_dir=tmp_path / "public"))
    real_is_dir = Path.is_dir

    def racing_is_dir(self: Path) -> bool:
        if real_is_dir(self):
            return True
        self.mkdir(parents=True, exist_ok=True)  # the other process wins the race
        return False

    monkeypatch.setattr(Path, "is_dir", racing_is_dir)
    created = policy.ensure_storage_directories()
    assert len(created) == 4


def test_provisioning_error_is_raised(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    policy = UploadPolicy(StoragePolicy(public_dir=tmp_path / "public"))

    def deny(self: Path, *args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "mkdir", deny)
    with pytest.raises(StorageProvisioningError) as excinfo:
        policy.ensure_storage_directories()
    assert "Permission denied" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, PermissionError)


def test_provision_storage_from_env(public_dir: Path):
    upload_policy = bootstrap.provision_storage_from_env()

    assert upload_policy.public_root == public_dir.resolve()
    assert (public_dir / "images" / "class-groups" / "thumbnails").is_dir()


def test_provision_logs_policy_drift(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    policy = StoragePolicy(
        public_dir=tmp_path / "public",
        dimensions={"thumbnail": DimensionProfile(width=400, height=300, aspect_ratio="2:1")},
    )
    caplog.set_level(logging.WARNING, logger="alumni.storage")

    bootstrap.provision_storage(policy)

    msgs = "\n".join(rec.message for rec in caplog.records)
    assert "storage policy drift" in msgs and "'thumbnail'" in msgs
