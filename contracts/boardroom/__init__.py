"""contracts.boardroom — seigniorage sink for share holders."""
from __future__ import annotations

from .contract import Boardroom

__all__ = ["Boardroom"]
