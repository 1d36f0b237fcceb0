# -*- coding: utf-8 -*-
"""
contracts.stdlib.math
=====================

Deterministic, integer-only math helpers for KBTC Python contracts.

Conventions
-----------
- All functions are pure and deterministic (aside from raising `Revert`).
- Rounding is explicit: every division here floors.
- Amounts live in the U256 envelope [0, 2**256 - 1].
- Percentages are whole numbers in [0, 100] (PERCENT_DEN).

No floats are used anywhere.

Examples
--------
    from contracts.stdlib.math import mul_div_down, percent_of

    bonds = mul_div_down(amount, peg, price)   # floor(amount * peg / price)
    fee = percent_of(1000, 2)                  # 20
"""
from __future__ import annotations

from typing import Final

from execution.errors import Revert

U256_MAX: Final[int] = (1 << 256) - 1
PERCENT_DEN: Final[int] = 100
WAD: Final[int] = 10**18  # 1e18 fixed-point

ERR_OOB: Final[str] = "UINT:OOB"
ERR_DIV0: Final[str] = "UINT:DIV0"
ERR_PERCENT: Final[str] = "UINT:BAD_PERCENT"


def require_u256(*xs: int) -> None:
    """Revert unless every argument is an int in [0, U256_MAX]."""
    for x in xs:
        if not isinstance(x, int) or x < 0 or x > U256_MAX:
            raise Revert(ERR_OOB, data={"value": str(x)})


def require_divisor(d: int) -> None:
    if not isinstance(d, int) or d <= 0:
        raise Revert(ERR_DIV0)


def require_percent(p: int) -> None:
    if not isinstance(p, int) or p < 0 or p > PERCENT_DEN:
        raise Revert(ERR_PERCENT, data={"value": str(p)})


def mul_div_down(a: int, b: int, d: int) -> int:
    """floor(a * b / d)"""
    require_u256(a, b)
    require_divisor(d)
    return (a * b) // d


def percent_of(amount: int, percent: int) -> int:
    """floor(amount * percent / 100)"""
    require_percent(percent)
    return mul_div_down(amount, percent, PERCENT_DEN)


def sub_floor(x: int, y: int) -> int:
    """x - y, or 0 when y > x."""
    require_u256(x, y)
    return x - y if x > y else 0


__all__ = [
    "U256_MAX",
    "PERCENT_DEN",
    "WAD",
    "require_u256",
    "require_divisor",
    "require_percent",
    "mul_div_down",
    "percent_of",
    "sub_floor",
]
