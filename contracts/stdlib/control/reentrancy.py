# -*- coding: utf-8 -*-
"""
contracts.stdlib.control.reentrancy
===================================

Reentrancy latch stored in the guarded contract's own storage under
`b"control:reentrancy:" + scope`. Because the flag lives in journaled storage,
a reverted call also rolls the latch back.
"""
from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, Callable, Final, TypeVar

from execution.errors import Revert

if TYPE_CHECKING:  # pragma: no cover
    from ..contract import Contract

F = TypeVar("F", bound=Callable[..., Any])

_REENT_PREFIX: Final[bytes] = b"control:reentrancy:"
ERR_REENTRANT: Final[str] = "CONTROL:REENTRANT"


def _guard_key(scope: bytes) -> bytes:
    return _REENT_PREFIX + scope


def require_not_entered(contract: "Contract", scope: bytes = b"default") -> None:
    """Revert if the guard for `scope` is already entered."""
    if contract._get_bool(_guard_key(scope)):
        raise Revert(ERR_REENTRANT, reason="Reentrancy")


def guard_enter(contract: "Contract", scope: bytes = b"default") -> None:
    """Enter a non-reentrant section for `scope`. Reverts if already entered."""
    require_not_entered(contract, scope)
    contract._set_bool(_guard_key(scope), True)


def guard_exit(contract: "Contract", scope: bytes = b"default") -> None:
    """Exit a non-reentrant section for `scope`. Idempotent."""
    contract._set_bool(_guard_key(scope), False)


def nonreentrant(scope: bytes = b"default") -> Callable[[F], F]:
    """Decorator form of guard_enter/guard_exit around a contract method."""

    def deco(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(self: "Contract", *args: Any, **kwargs: Any) -> Any:
            guard_enter(self, scope)
            try:
                return fn(self, *args, **kwargs)
            finally:
                guard_exit(self, scope)

        return wrapper  # type: ignore[return-value]

    return deco


__all__ = ["guard_enter", "guard_exit", "require_not_entered", "nonreentrant", "ERR_REENTRANT"]
