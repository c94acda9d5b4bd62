"""handoff - Documentation scaffolding and validation for agent handoffs."""

__version__ = "3.0.0"

VERSION_DATE = "2026-02-20"
FRAMEWORK_NAME = "handoff-framework"


def get_version_info() -> dict:
    """Return the version split into its semver parts."""
    major, minor, patch = (int(part) for part in __version__.split("."))
    return {
        "version": __version__,
        "date": VERSION_DATE,
        "name": FRAMEWORK_NAME,
        "major": major,
        "minor": minor,
        "patch": patch,
    }


def get_version_string() -> str:
    """Return `name@version (date)`."""
    return f"{FRAMEWORK_NAME}@{__version__} ({VERSION_DATE})"
