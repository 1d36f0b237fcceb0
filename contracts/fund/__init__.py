"""contracts.fund — pull-style fund sinks."""
from __future__ import annotations

from .contract import SimpleFund

__all__ = ["SimpleFund"]
