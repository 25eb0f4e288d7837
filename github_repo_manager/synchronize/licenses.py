"""Materializes licence texts from the bundled Jinja2 templates."""

import datetime
from pathlib import Path

import structlog

from github_repo_manager.synchronize.exceptions import UnsupportedLicenseError
from github_repo_manager.synchronize.models import LicenseChoice
from github_repo_manager.utils.constants import LICENSE_FILE_NAME
from github_repo_manager.utils.templates import (
    TEMPLATES_DIRECTORY,
    construct_jinja2_template_from_file,
    render_template_with_context,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

LICENSE_TEMPLATES_DIRECTORY = TEMPLATES_DIRECTORY / "licenses"

SUPPORTED_LICENSES = (LicenseChoice.MIT, LicenseChoice.APACHE_2_0, LicenseChoice.GPL_3_0)


def parse_license_choice(choice: str | LicenseChoice) -> LicenseChoice:
    """Parse a licence choice, raising UnsupportedLicenseError for anything that has no text."""
    try:
        parsed = LicenseChoice(choice)
    except ValueError as exc:
        raise UnsupportedLicenseError(str(choice)) from exc
    if parsed not in SUPPORTED_LICENSES:
        raise UnsupportedLicenseError(parsed.value)
    return parsed


def materialize_license(choice: str | LicenseChoice, owner: str, year: int | None = None) -> str:
    """Return the literal licence text for a choice with owner and year substituted.

    Args:
        choice: One of "MIT", "Apache-2.0" or "GPL-3.0".
        owner: Copyright holder.
        year: Copyright year, defaults to the current year.

    Raises:
        UnsupportedLicenseError: For "none" or any unknown choice.
    """
    license_choice = parse_license_choice(choice)
    if year is None:
        year = datetime.date.today().year
    template = construct_jinja2_template_from_file(LICENSE_TEMPLATES_DIRECTORY / f"{license_choice.value}.j2")
    return render_template_with_context(template, owner=owner, year=year)


def write_license_file(working_dir: Path, choice: str | LicenseChoice, owner: str, year: int | None = None) -> Path:
    """Write the LICENSE file into a working directory.

    The text is rendered before the file is opened, so an unsupported choice leaves the directory untouched.
    """
    text = materialize_license(choice, owner, year)
    license_path = working_dir / LICENSE_FILE_NAME
    license_path.write_text(text, encoding="utf-8")
    logger.info("Created LICENSE file", license=str(choice), path=str(license_path))
    return license_path
