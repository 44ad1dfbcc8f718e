"""Installed version of the jet-lang distribution."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION = "jet-lang"


def get_version() -> str:
    """Version from package metadata; ``0.0.0`` when running from an uninstalled tree."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return "0.0.0"
