# -*- coding: utf-8 -*-
"""
BasisAsset — ERC20-like token with operator-gated supply control
================================================================

Ledger used for the stable (KBTC), bond (KBOND) and share (KLON) tokens.

Highlights
----------
- Balances, allowances and total supply live in host storage.
- Events:
    - "Transfer" {from, to, value} (zero address for mint and burn)
    - "Approval" {owner, spender, value}
- U256-checked math via `contracts.stdlib.math.safe_uint` (no silent wrap).
- The operator (normally the treasury) may `mint`, `burn` its own balance and
  `burn_from` an account that approved it. The owner can hand the operator
  role to another account.

Public interface
----------------
# views
name() -> str
symbol() -> str
decimals() -> int
total_supply() -> int
balance_of(addr) -> int
allowance(owner, spender) -> int

# externals
transfer(to, amount) -> bool
approve(spender, amount) -> bool
transfer_from(owner, to, amount) -> bool
mint(to, amount) -> bool                 [operator]
burn(amount) -> None                     [operator]
burn_from(owner, amount) -> None         [operator]
"""

from __future__ import annotations

from typing import Final

from core.address import ZERO_ADDRESS

from ..stdlib.access import Operator
from ..stdlib.contract import external, require, view
from ..stdlib.math import require_u256
from ..stdlib.math.safe_uint import u256_add, u256_sub

# ------------------------------------------------------------------------------
# Storage keys
# ------------------------------------------------------------------------------

K_NAME: Final[bytes] = b"tok:meta:name"
K_SYMBOL: Final[bytes] = b"tok:meta:symbol"
K_DECIMALS: Final[bytes] = b"tok:meta:dec"
K_TOTAL: Final[bytes] = b"tok:meta:total"

ERR_INSUFFICIENT_BALANCE: Final[str] = "TOKEN:INSUFFICIENT_BALANCE"
ERR_ALLOWANCE_LOW: Final[str] = "TOKEN:ALLOWANCE_LOW"
ERR_ZERO_ADDRESS: Final[str] = "TOKEN:ZERO_ADDRESS"

DEFAULT_DECIMALS: Final[int] = 18


def key_balance(addr: bytes) -> bytes:
    return b"tok:bal:" + addr


def key_allow(owner: bytes, spender: bytes) -> bytes:
    return b"tok:allow:" + owner + b":" + spender


class BasisAsset(Operator):
    def constructor(self, name: str, symbol: str, decimals: int = DEFAULT_DECIMALS) -> None:
        super().constructor()
        self._set(K_NAME, name.encode("utf-8"))
        self._set(K_SYMBOL, symbol.encode("utf-8"))
        self._set_uint(K_DECIMALS, decimals)

    # --------------------------------------------------------------------------
    # Views
    # --------------------------------------------------------------------------

    @view
    def name(self) -> str:
        return self._get(K_NAME).decode("utf-8")

    @view
    def symbol(self) -> str:
        return self._get(K_SYMBOL).decode("utf-8")

    @view
    def decimals(self) -> int:
        return self._get_uint(K_DECIMALS)

    @view
    def total_supply(self) -> int:
        return self._get_uint(K_TOTAL)

    @view
    def balance_of(self, addr: bytes) -> int:
        return self._get_uint(key_balance(addr))

    @view
    def allowance(self, owner: bytes, spender: bytes) -> int:
        return self._get_uint(key_allow(owner, spender))

    # --------------------------------------------------------------------------
    # Ledger internals
    # --------------------------------------------------------------------------

    def _move(self, src: bytes, dst: bytes, amount: int) -> None:
        require(dst != ZERO_ADDRESS, ERR_ZERO_ADDRESS)
        require_u256(amount)
        src_key, dst_key = key_balance(src), key_balance(dst)
        self._set_uint(src_key, u256_sub(self._get_uint(src_key), amount, ERR_INSUFFICIENT_BALANCE))
        self._set_uint(dst_key, u256_add(self._get_uint(dst_key), amount))
        self._emit("Transfer", **{"from": src, "to": dst, "value": amount})

    def _mint(self, to: bytes, amount: int) -> None:
        require(to != ZERO_ADDRESS, ERR_ZERO_ADDRESS)
        self._set_uint(K_TOTAL, u256_add(self.total_supply(), amount))
        self._set_uint(key_balance(to), u256_add(self.balance_of(to), amount))
        self._emit("Transfer", **{"from": ZERO_ADDRESS, "to": to, "value": amount})

    def _burn(self, owner: bytes, amount: int) -> None:
        key = key_balance(owner)
        self._set_uint(key, u256_sub(self._get_uint(key), amount, ERR_INSUFFICIENT_BALANCE))
        self._set_uint(K_TOTAL, u256_sub(self.total_supply(), amount))
        self._emit("Transfer", **{"from": owner, "to": ZERO_ADDRESS, "value": amount})

    def _spend_allowance(self, owner: bytes, spender: bytes, amount: int) -> None:
        key = key_allow(owner, spender)
        self._set_uint(key, u256_sub(self._get_uint(key), amount, ERR_ALLOWANCE_LOW))

    # --------------------------------------------------------------------------
    # Externals
    # --------------------------------------------------------------------------

    @external
    def transfer(self, to: bytes, amount: int) -> bool:
        self._move(self.msg_sender, to, amount)
        return True

    @external
    def approve(self, spender: bytes, amount: int) -> bool:
        owner = self.msg_sender
        self._set_uint(key_allow(owner, spender), amount)
        self._emit("Approval", owner=owner, spender=spender, value=amount)
        return True

    @external
    def transfer_from(self, owner: bytes, to: bytes, amount: int) -> bool:
        """Spender (`msg_sender`) moves `amount` from `owner` to `to` using allowance."""
        self._spend_allowance(owner, self.msg_sender, amount)
        self._move(owner, to, amount)
        return True

    @external
    def mint(self, to: bytes, amount: int) -> bool:
        self._only_operator()
        self._mint(to, amount)
        return True

    @external
    def burn(self, amount: int) -> None:
        """Operator burns its own balance."""
        self._only_operator()
        self._burn(self.msg_sender, amount)

    @external
    def burn_from(self, owner: bytes, amount: int) -> None:
        """Operator burns `amount` of `owner`'s balance, consuming its allowance."""
        self._only_operator()
        self._spend_allowance(owner, self.msg_sender, amount)
        self._burn(owner, amount)


__all__ = ["BasisAsset", "key_balance", "key_allow"]
