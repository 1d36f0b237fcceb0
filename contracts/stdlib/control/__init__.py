# -*- coding: utf-8 -*-
"""
contracts.stdlib.control
========================

Storage-backed control primitives for KBTC Python contracts.

Reentrancy Guard
----------------
- `guard_enter(contract, scope=b"default")`
- `guard_exit(contract, scope=b"default")`
- `require_not_entered(contract, scope=b"default")`
- `@nonreentrant(scope)` decorator for entrypoints

A non-reentrancy latch keyed by a *scope* tag. Typical pattern:

    class Vault(Contract):
        @external
        @nonreentrant(b"vault")
        def withdraw(self, amount: int) -> None:
            ...

A nested call that re-enters any method guarded with the same scope while
the outer call is still running reverts with "CONTROL:REENTRANT".
"""
from __future__ import annotations

from .reentrancy import guard_enter, guard_exit, nonreentrant, require_not_entered

__all__ = ["guard_enter", "guard_exit", "require_not_entered", "nonreentrant"]
