"""
treasury.migration — one-shot handover to a successor treasury.

`migrate(target)` runs on the outgoing instance: it seals the lifecycle as
`MigratedState(target)` and then, for each core token (stable, bond, share),
hands the operator role and ownership to `target` and moves the whole
balance there.

`initialize()` runs once, and only on an instance deployed as a successor
(`requires_initialization`), after it holds the operator roles: it burns
whatever core-token balances were pushed to it during the handover so the
successor starts from a clean reserve.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from core.address import ZERO_ADDRESS, short

from . import lifecycle
from .errors import AlreadyInitialized, InvalidAddress, NotSuccessor

if TYPE_CHECKING:  # pragma: no cover
    from .contract import Treasury

log = logging.getLogger(__name__)

K_INITIALIZED: Final[bytes] = b"treasury:initialized"


class MigrationController:
    def __init__(self, treasury: "Treasury") -> None:
        self._t = treasury

    @property
    def initialized(self) -> bool:
        return self._t._get_bool(K_INITIALIZED)

    def initialize(self, executor: bytes) -> None:
        t = self._t
        if not t.requires_initialization():
            raise NotSuccessor()
        if self.initialized:
            raise AlreadyInitialized()
        t._check_core_permissions()

        t._set_bool(K_INITIALIZED, True)
        for token in t.core_tokens():
            ref = t._at(token)
            balance = ref.balance_of(t.address)
            if balance:
                ref.burn(balance)
        t._set_reserve(t._at(t.stable()).balance_of(t.address))

        t._emit("Initialized", executor=executor, at=t.now)
        log.info("treasury initialized", extra={"treasury": short(t.address)})

    def migrate(self, target: bytes) -> None:
        t = self._t
        if target == ZERO_ADDRESS:
            raise InvalidAddress("Treasury: invalid migration target")

        t._set_lifecycle(lifecycle.MigratedState(target))
        for token in t.core_tokens():
            ref = t._at(token)
            ref.transfer_operator(target)
            ref.transfer_ownership(target)
            balance = ref.balance_of(t.address)
            if balance:
                ref.transfer(target, balance)

        t._emit("Migration", target=target)
        log.info("treasury migrated", extra={"treasury": short(t.address), "successor": short(target)})


__all__ = ["MigrationController", "K_INITIALIZED"]
