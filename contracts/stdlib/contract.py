# -*- coding: utf-8 -*-
"""
contracts.stdlib.contract
=========================

Base class and entrypoint decorators for KBTC Python contracts.

A contract is a plain Python object bound to a `Host` and an address. All of
its persistent state lives in host storage (never in instance attributes), so
the host journal can checkpoint and revert it.

Entrypoints
-----------
- `@external` marks a method callable by accounts and other contracts.
- `@view` marks a read-only method. Views may also be called directly on the
  Python object (e.g. `token.balance_of(addr)`) outside of any operation.

Storage helpers
---------------
Values are stored as raw bytes under contract-chosen keys:

- uint    → 32-byte big-endian; zero deletes the key
- address → 20 raw bytes; the zero address deletes the key
- bool    → b"\\x01" or absent

Calling other contracts
-----------------------
    self._at(token_address).mint(to, amount)

runs a nested call with this contract as `msg_sender`. A failure in the callee
reverts only the callee's effects and re-raises here. Outside of an operation
(a view evaluated directly on the object) the call becomes a read-only query.

Sending operations from accounts
--------------------------------
    receipt = treasury.connect(alice).buy_bonds(amount, target_price)
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Any, Callable, Dict, Final, TypeVar

from core.address import ADDRESS_LEN, ZERO_ADDRESS
from execution.errors import Revert
from execution.runtime.host import ENTRYPOINT_ATTR, EXTERNAL, VIEW

from .math import U256_MAX

if TYPE_CHECKING:  # pragma: no cover
    from execution.runtime.host import Host
    from execution.types.result import Receipt

F = TypeVar("F", bound=Callable[..., Any])

ERR_UINT_OOB: Final[str] = "UINT:OOB"
ERR_BAD_ADDRESS: Final[str] = "ADDR:BAD_LENGTH"


# ---------------------------------------------------------------------------
# Entrypoint decorators
# ---------------------------------------------------------------------------


def external(fn: F) -> F:
    """Mark a state-changing entrypoint."""
    setattr(fn, ENTRYPOINT_ATTR, EXTERNAL)
    return fn


def view(fn: F) -> F:
    """Mark a read-only entrypoint."""
    setattr(fn, ENTRYPOINT_ATTR, VIEW)
    return fn


def entrypoint_kind(fn: Any) -> str | None:
    return getattr(fn, ENTRYPOINT_ATTR, None)


def preserve_entrypoint(wrapper: Callable[..., Any], wrapped: Callable[..., Any]) -> Callable[..., Any]:
    """functools.wraps that also keeps the entrypoint marker."""
    functools.update_wrapper(wrapper, wrapped)
    return wrapper


# ---------------------------------------------------------------------------
# Proxies
# ---------------------------------------------------------------------------


class ContractRef:
    """Handle used from inside a contract to call another contract."""

    __slots__ = ("_host", "_caller", "address")

    def __init__(self, host: "Host", caller: bytes, address: bytes) -> None:
        self._host = host
        self._caller = caller
        self.address = address

    def __getattr__(self, method: str) -> Callable[..., Any]:
        if method.startswith("_"):
            raise AttributeError(method)

        def _call(*args: Any, **kwargs: Any) -> Any:
            if not self._host.in_operation():
                # direct view evaluation on the Python object
                return self._host.query(self.address, method, *args, caller=self._caller, **kwargs)
            return self._host.call(self._caller, self.address, method, *args, **kwargs)

        _call.__name__ = method
        return _call


class Connection:
    """
    Account-side handle: externals become operations sent by `sender`,
    views are evaluated as read-only queries with `sender` as caller.
    """

    __slots__ = ("_contract", "sender")

    def __init__(self, contract: "Contract", sender: bytes) -> None:
        self._contract = contract
        self.sender = sender

    def __getattr__(self, method: str) -> Callable[..., Any]:
        contract = self._contract
        kind = entrypoint_kind(getattr(type(contract), method, None))
        if kind is None:
            raise AttributeError(f"{type(contract).__name__}.{method} is not an entrypoint")
        host = contract.host

        if kind == VIEW:
            def _query(*args: Any, **kwargs: Any) -> Any:
                return host.query(contract.address, method, *args, caller=self.sender, **kwargs)
            return _query

        def _send(*args: Any, **kwargs: Any) -> "Receipt":
            return host.transact(self.sender, contract.address, method, *args, **kwargs)
        return _send


# ---------------------------------------------------------------------------
# Base contract
# ---------------------------------------------------------------------------


class Contract:
    """Base class for contracts deployed through `Host.deploy`."""

    def __init__(self, host: "Host", address: bytes) -> None:
        self.host = host
        self.address = address

    def constructor(self, *args: Any, **kwargs: Any) -> None:
        """Runs once at deployment, inside the deploy operation."""

    # ---- context ----------------------------------------------------------

    @property
    def msg_sender(self) -> bytes:
        return self.host.msg_sender

    @property
    def now(self) -> int:
        return self.host.now

    def connect(self, sender: bytes) -> Connection:
        return Connection(self, sender)

    def _at(self, address: bytes) -> ContractRef:
        return ContractRef(self.host, self.address, address)

    def _emit(self, name: str, **args: Any) -> None:
        self.host.emit(self.address, name, args)

    # ---- storage ----------------------------------------------------------

    def _get(self, key: bytes) -> bytes:
        return self.host.storage_get(self.address, key)

    def _set(self, key: bytes, value: bytes) -> None:
        self.host.storage_set(self.address, key, value)

    def _get_uint(self, key: bytes) -> int:
        v = self._get(key)
        return int.from_bytes(v, "big") if v else 0

    def _set_uint(self, key: bytes, value: int) -> None:
        if not isinstance(value, int) or value < 0 or value > U256_MAX:
            raise Revert(ERR_UINT_OOB, data={"value": str(value)})
        self._set(key, value.to_bytes(32, "big") if value else b"")

    def _get_address(self, key: bytes) -> bytes:
        v = self._get(key)
        return v if v else ZERO_ADDRESS

    def _set_address(self, key: bytes, value: bytes) -> None:
        value = bytes(value)
        if len(value) != ADDRESS_LEN:
            raise Revert(ERR_BAD_ADDRESS)
        self._set(key, b"" if value == ZERO_ADDRESS else value)

    def _get_bool(self, key: bytes) -> bool:
        return self._get(key) == b"\x01"

    def _set_bool(self, key: bytes, value: bool) -> None:
        self._set(key, b"\x01" if value else b"")

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"{type(self).__name__}(0x{self.address.hex()[:8]}…)"


def require(cond: bool, message: str, **data: Any) -> None:
    """Revert with `message` unless `cond` holds."""
    if not cond:
        raise Revert(message, data=dict(data) if data else None)


__all__ = [
    "Contract",
    "ContractRef",
    "Connection",
    "external",
    "view",
    "entrypoint_kind",
    "preserve_entrypoint",
    "require",
]
