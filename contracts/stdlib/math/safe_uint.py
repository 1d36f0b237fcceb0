# -*- coding: utf-8 -*-
"""
contracts.stdlib.math.safe_uint
===============================

Checked unsigned-integer helpers: every function either returns a value in
[0, U256_MAX] or raises `Revert` with a short, stable tag.

Conventions
-----------
- "checked" variants revert on overflow and underflow.
- Inputs are validated (0..U256_MAX) before use.
"""

from __future__ import annotations

from typing import Final

from execution.errors import Revert

from . import U256_MAX, require_u256

# Canonical error tags (short, stable)
ERR_OVER: Final[str] = "UINT:OVERFLOW"
ERR_UNDER: Final[str] = "UINT:UNDERFLOW"


def u256_add(x: int, y: int) -> int:
    """Checked add: revert on overflow."""
    require_u256(x, y)
    s = x + y
    if s > U256_MAX:
        raise Revert(ERR_OVER)
    return s


def u256_sub(x: int, y: int, message: str = ERR_UNDER) -> int:
    """
    Checked sub: revert on underflow (y > x). Callers may pass their own
    revert message, e.g. "TOKEN:INSUFFICIENT_BALANCE".
    """
    require_u256(x, y)
    if y > x:
        raise Revert(message)
    return x - y


__all__ = ["u256_add", "u256_sub", "ERR_OVER", "ERR_UNDER"]
