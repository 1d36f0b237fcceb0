"""
execution.types — small dataclasses shared by the host and its callers.

Public surface (re-exported):
    LogEvent                : Dataclass — (address, name, args)
    BlockContext, CallFrame : Dataclasses — execution contexts
    Receipt                 : Dataclass — result of a committed operation
"""

from __future__ import annotations

from .context import BlockContext, CallFrame
from .events import LogEvent
from .result import Receipt

__all__ = [
    "LogEvent",
    "BlockContext",
    "CallFrame",
    "Receipt",
]
