"""Version information for gdrive-mcp."""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "gdrive-mcp"


def _get_version() -> str:
    """Resolve the version from installed metadata, then the VERSION file."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        pass

    # Source checkout: <root>/src/gdrive_mcp/__version__.py
    root_version = Path(__file__).resolve().parents[2] / "VERSION"
    if root_version.exists():
        return root_version.read_text().strip()

    return "0.0.0"


__version__ = _get_version()
