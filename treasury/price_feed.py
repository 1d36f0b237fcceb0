"""
treasury.price_feed — oracle adapter with two failure policies.

`refresh()` is best effort: the oracle's `update()` runs in its own nested
call, so a failure rolls back only the oracle's effects. Any exception the
oracle raises, a revert or a plain bug alike, is logged at WARNING and
reported through the return value; the caller carries on with whatever price
the oracle last recorded.

`read_price()` is mandatory: any failure propagates and aborts the operation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from core.address import short
from execution.errors import ExecError

if TYPE_CHECKING:  # pragma: no cover
    from .contract import Treasury

log = logging.getLogger(__name__)

K_BOND_ORACLE: Final[bytes] = b"treasury:bond_oracle"
K_SEIGNIORAGE_ORACLE: Final[bytes] = b"treasury:seigniorage_oracle"


class PriceFeed:
    """Price of the stable token as seen through one oracle slot of the treasury."""

    def __init__(self, treasury: "Treasury", oracle_key: bytes, label: str) -> None:
        self._t = treasury
        self._key = oracle_key
        self.label = label

    @property
    def oracle(self) -> bytes:
        return self._t._get_address(self._key)

    def refresh(self) -> bool:
        oracle = self.oracle
        try:
            self._t._at(oracle).update()
        except Exception as exc:
            if isinstance(exc, ExecError):
                error = exc.to_dict()
            else:
                error = {"code": type(exc).__name__, "message": str(exc)}
            log.warning(
                "%s oracle %s refresh failed; using last recorded price",
                self.label,
                short(oracle),
                extra={"error": error},
            )
            return False
        return True

    def read_price(self) -> int:
        return self._t._at(self.oracle).consult(self._t.stable(), self._t.oracle_unit())


__all__ = ["PriceFeed", "K_BOND_ORACLE", "K_SEIGNIORAGE_ORACLE"]
