"""
Image storage bootstrap helpers.

Intent:
    Ensure the class-group image directories exist before the app serves its
    first request, and surface configuration drift early in the logs.

Security & Safety:
    - Idempotent: checks each directory first, creates only missing ones.
    - Provisioning failures raise StorageProvisioningError; callers treat this
      as fatal to startup instead of serving uploads into a missing tree.

Usage:
    Call `provision_storage(policy)` once during startup and keep the returned
    UploadPolicy for request handling.
"""
from __future__ import annotations

import logging

from .config import StoragePolicy, find_policy_drift, load_storage_policy
from .upload_policy import UploadPolicy

_log = logging.getLogger("alumni.storage")


def log_policy_drift(policy: StoragePolicy) -> list[str]:
    """Log each configuration drift finding as a warning and return them."""
    findings = find_policy_drift(policy)
    for finding in findings:
        _log.warning("storage policy drift: %s", finding)
    return findings


def provision_storage(policy: StoragePolicy) -> UploadPolicy:
    """Build the UploadPolicy for `policy` and create missing directories.

    Behavior:
        - Logs drift between allowed MIME types/extensions and between declared
          aspect ratios and dimensions (warning only, startup continues).
        - Creates the four category directories below the public root.
        - Propagates StorageProvisioningError unchanged.
    """
    log_policy_drift(policy)
    upload_policy = UploadPolicy(policy)
    created = upload_policy.ensure_storage_directories()
    _log.debug("storage provisioned: root=%s created=%s", upload_policy.public_root, len(created))
    return upload_policy


def provision_storage_from_env() -> UploadPolicy:
    """Load the storage policy from the environment and provision it."""
    return provision_storage(load_storage_policy())


__all__ = ["log_policy_drift", "provision_storage", "provision_storage_from_env"]
