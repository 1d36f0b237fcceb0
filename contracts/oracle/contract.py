# contracts/oracle/contract.py
#
# A settable price oracle. The owner posts a price (in peg units per one whole
# token, e.g. 10**8 == one BTC unit) and consumers read it through `consult`.
#
# `update()` stands in for the recompute step of a TWAP oracle: it records the
# round and timestamp of the last refresh. The owner can arm a failure switch
# (`set_revert(True)`) so that `update()` reverts, which lets consumers exercise
# their best-effort refresh path.
#
# consult(token, amount_in) = price * amount_in // 10**18
#
# Events:
#   - PriceSet {price}
#   - Updated  {round, timestamp}

from __future__ import annotations

from typing import Final

from execution.errors import Revert

from ..stdlib.access import Ownable
from ..stdlib.contract import external, view
from ..stdlib.math import WAD, mul_div_down

_PRICE_KEY: Final[bytes] = b"oracle:price"
_REVERT_KEY: Final[bytes] = b"oracle:revert"
_ROUND_KEY: Final[bytes] = b"oracle:round"
_UPDATED_AT_KEY: Final[bytes] = b"oracle:updated_at"

ERR_UPDATE_DISABLED: Final[str] = "Oracle: update reverted"


class SettableOracle(Ownable):
    def constructor(self, price: int = 0) -> None:
        super().constructor()
        if price:
            self._set_uint(_PRICE_KEY, price)

    # ── views ──────────────────────────────────────────────────────────────────

    @view
    def price(self) -> int:
        return self._get_uint(_PRICE_KEY)

    @view
    def consult(self, token: bytes, amount_in: int) -> int:
        return mul_div_down(self.price(), amount_in, WAD)

    @view
    def update_round(self) -> int:
        return self._get_uint(_ROUND_KEY)

    @view
    def updated_at(self) -> int:
        return self._get_uint(_UPDATED_AT_KEY)

    @view
    def reverts(self) -> bool:
        return self._get_bool(_REVERT_KEY)

    # ── owner controls ─────────────────────────────────────────────────────────

    @external
    def set_price(self, price: int) -> None:
        self._only_owner()
        self._set_uint(_PRICE_KEY, price)
        self._emit("PriceSet", price=price)

    @external
    def set_revert(self, flag: bool) -> None:
        self._only_owner()
        self._set_bool(_REVERT_KEY, flag)

    # ── refresh ────────────────────────────────────────────────────────────────

    @external
    def update(self) -> None:
        if self.reverts():
            raise Revert(ERR_UPDATE_DISABLED, reason="OracleUpdateFailed")
        rnd = self.update_round() + 1
        self._set_uint(_ROUND_KEY, rnd)
        self._set_uint(_UPDATED_AT_KEY, self.now)
        self._emit("Updated", round=rnd, timestamp=self.now)


__all__ = ["SettableOracle"]
