"""
Correction-scope resolver for the guided German writing exercises.

The package answers one question: for week W of course C, what has been
taught, what may an automated reviewer flag, and is that scope consistent?
"""

from importlib import metadata


def get_version() -> str:
    """Return the installed project version."""
    try:
        return metadata.version("lernscope")
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["get_version"]
