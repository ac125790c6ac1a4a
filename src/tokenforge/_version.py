"""Package version lookup for tokenforge."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

DIST_NAME = "tokenforge"
FALLBACK_VERSION = "0.0.0"

# src/tokenforge/_version.py -> checkout root
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _checkout_version(pyproject: Path) -> str | None:
    """``[project].version`` from a pyproject.toml that declares tokenforge itself."""
    try:
        with pyproject.open("rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return None
    if project.get("name") != DIST_NAME:
        return None
    version = project.get("version")
    return version if isinstance(version, str) else None


def get_version(pyproject: Path = _PYPROJECT) -> str:
    """
    Version of the running tokenforge.

    A source checkout's pyproject.toml is read first so editable installs
    report the working tree; otherwise the installed distribution metadata.
    """
    if (version := _checkout_version(pyproject)) is not None:
        return version
    try:
        return _metadata_version(DIST_NAME)
    except PackageNotFoundError:
        return FALLBACK_VERSION
