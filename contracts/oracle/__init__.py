"""contracts.oracle — settable price oracle."""
from __future__ import annotations

from .contract import SettableOracle

__all__ = ["SettableOracle"]
