"""Version info for rewardoor."""

import os
import re

CLIENT_NAME = "rewardoor"


def _get_scm_version() -> tuple[str, str]:
    """Get version and commit from setuptools_scm generated _version.py."""
    try:
        from ._version import __version__, __version_tuple__
        version = __version__
        if __version_tuple__ and len(__version_tuple__) >= 4:
            commit = str(__version_tuple__[3]) if __version_tuple__[3] else ""
            if commit.startswith("g"):
                commit = commit[1:]
        else:
            match = re.search(r'\+g([a-f0-9]+)', version)
            commit = match.group(1) if match else ""
        return version, commit
    except ImportError:
        return os.environ.get("REWARDOOR_VERSION", "0.1.0"), os.environ.get("REWARDOOR_COMMIT", "")


def get_version() -> str:
    version, _ = _get_scm_version()
    return version


def get_version_string() -> str:
    """Version string like rewardoor/v0.1.0/abcdef12."""
    version, commit = _get_scm_version()
    if commit:
        return f"{CLIENT_NAME}/v{version}/{commit[:8]}"
    return f"{CLIENT_NAME}/v{version}"
