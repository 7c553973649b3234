"""Generate SVG placeholder images for class groups.

Why:
    Class groups are listed long before anyone uploads a class photo. This
    utility writes a cover and a banner placeholder per graduation year plus a
    generic "Coming Soon" image, so the frontend always has something to show.

Usage:
    python -m backend.tools.generate_placeholders --first-year 2007 --last-year 2024

Notes:
    - Idempotent: re-running overwrites the same files with identical content.
    - Uses the same storage policy as the API (ALUMNI_PUBLIC_DIR etc.), and
      provisions missing directories first.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import click

from backend.storage.bootstrap import provision_storage
from backend.storage.config import load_storage_policy
from backend.storage.local import build_storage_backend
from backend.storage.placeholders import FIRST_GRADUATION_YEAR, write_placeholders
from backend.storage.ports import StorageError


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--first-year", type=int, default=FIRST_GRADUATION_YEAR, show_default=True, help="First graduation year.")
@click.option("--last-year", type=int, default=None, help="Last graduation year (default: current year).")
@click.option("-v", "--verbose", is_flag=True, help="Log each created directory.")
def main(first_year: int, last_year: int | None, verbose: bool) -> None:
    """Write placeholder covers and banners for each graduation year."""
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    if last_year is None:
        last_year = datetime.now(timezone.utc).year
    if first_year > last_year:
        raise click.BadParameter("--first-year must not be after --last-year", param_hint="--first-year")

    policy = load_storage_policy()
    try:
        upload_policy = provision_storage(policy)
        backend = build_storage_backend(upload_policy)
        written = write_placeholders(
            backend,
            range(first_year, last_year + 1),
            dimensions=policy.dimensions,
            style=policy.placeholder,
        )
    except StorageError as exc:
        raise click.ClickException(str(exc)) from exc

    years = last_year - first_year + 1
    click.echo(f"Generated {len(written)} images for {years} graduation years ({first_year}-{last_year}).")
    click.echo(f"Placeholders: {upload_policy.policy.category_dir('placeholders')}")
    click.echo(f"Banners: {upload_policy.policy.category_dir('banners')}")


if __name__ == "__main__":  # pragma: no cover
    main()
