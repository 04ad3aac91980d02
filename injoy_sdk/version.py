"""
Package version, resolved once at import.

An installed copy reports its distribution metadata; a source checkout reads
the ``[project]`` table of the ``pyproject.toml`` next to the package.
"""
import importlib.metadata
from pathlib import Path
from typing import Optional

import tomli

DISTRIBUTION = "injoy-sdk"
PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"
UNKNOWN_VERSION = "0+unknown"


def _pyproject_version(path: Path) -> Optional[str]:
    try:
        with open(path, "rb") as f:
            return tomli.load(f).get("project", {}).get("version")
    except (OSError, tomli.TOMLDecodeError):
        return None


def resolve_version(distribution: str = DISTRIBUTION, pyproject: Path = PYPROJECT) -> str:
    try:
        return importlib.metadata.version(distribution)
    except importlib.metadata.PackageNotFoundError:
        return _pyproject_version(pyproject) or UNKNOWN_VERSION


def user_agent() -> str:
    """User-Agent sent with node and faucet requests"""
    return f"{DISTRIBUTION}/{__version__}"


__version__ = resolve_version()
