# -*- coding: utf-8 -*-
"""
contracts.stdlib.access.ownable
================================

Minimal **Ownable** mixin.

- read the current owner (`owner`)
- check that the caller is the owner (`_only_owner`)
- transfer ownership to a new account (`transfer_ownership`)
- renounce ownership (`renounce_ownership`)

The deployer becomes the owner in `constructor`.

Safety notes
------------
- `transfer_ownership` rejects the zero address; use `renounce_ownership`
  explicitly to leave the contract without an owner.
"""
from __future__ import annotations

from typing import Final

from core.address import ZERO_ADDRESS
from execution.errors import Revert

from ..contract import Contract, external, view

OWNER_KEY: Final[bytes] = b"access:owner"

ERR_NOT_OWNER: Final[str] = "ACCESS:NOT_OWNER"
ERR_ZERO_ADDRESS: Final[str] = "ACCESS:ZERO_ADDRESS"


class Ownable(Contract):
    def constructor(self, *args, **kwargs) -> None:
        super().constructor(*args, **kwargs)
        self._set_owner(self.msg_sender)

    @view
    def owner(self) -> bytes:
        return self._get_address(OWNER_KEY)

    def _only_owner(self) -> None:
        owner = self.owner()
        if owner == ZERO_ADDRESS or owner != self.msg_sender:
            raise Revert(ERR_NOT_OWNER, reason="NotOwner")

    def _set_owner(self, new_owner: bytes) -> None:
        previous = self.owner()
        self._set_address(OWNER_KEY, new_owner)
        self._emit("OwnershipTransferred", previous_owner=previous, new_owner=new_owner)

    @external
    def transfer_ownership(self, new_owner: bytes) -> None:
        """Owner-only. Emits OwnershipTransferred."""
        self._only_owner()
        if new_owner == ZERO_ADDRESS:
            raise Revert(ERR_ZERO_ADDRESS, reason="ZeroAddress")
        self._set_owner(new_owner)

    @external
    def renounce_ownership(self) -> None:
        """Owner-only: clear the owner. Owner-gated entrypoints then always fail."""
        self._only_owner()
        self._set_owner(ZERO_ADDRESS)


__all__ = ["OWNER_KEY", "Ownable", "ERR_NOT_OWNER", "ERR_ZERO_ADDRESS"]
