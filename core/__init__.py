"""
KBTC core package.

Shared, dependency-light building blocks: deterministic addresses and the
structured logging setup used by the host, contracts and CLI.
"""

from __future__ import annotations

__version__ = "0.1.0"


def get_version() -> str:
    """Return the semantic version string for this package."""
    return __version__


__all__ = ["__version__", "get_version"]
