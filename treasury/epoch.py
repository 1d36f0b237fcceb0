"""
treasury.epoch — epoch schedule and gating.

    next_epoch_point = start_time + epoch * period

The epoch counter only moves forward, by one, when an allocation succeeds at
or after `next_epoch_point`. Since the boundary is derived from the counter,
a late allocation does not let a missed period be claimed twice.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from contracts.stdlib.math.safe_uint import u256_add

from .errors import EpochAlreadyAllocated, EpochNotStarted, ValidationError

if TYPE_CHECKING:  # pragma: no cover
    from .contract import Treasury

log = logging.getLogger(__name__)

K_EPOCH: Final[bytes] = b"treasury:epoch"
K_START_TIME: Final[bytes] = b"treasury:start_time"
K_PERIOD: Final[bytes] = b"treasury:period"


class EpochGate:
    def __init__(self, treasury: "Treasury") -> None:
        self._t = treasury

    def setup(self, start_time: int, period: int, start_epoch: int = 0) -> None:
        self._t._set_uint(K_START_TIME, start_time)
        self.set_period(period)
        self._t._set_uint(K_EPOCH, start_epoch)

    @property
    def epoch(self) -> int:
        return self._t._get_uint(K_EPOCH)

    @property
    def start_time(self) -> int:
        return self._t._get_uint(K_START_TIME)

    @property
    def period(self) -> int:
        return self._t._get_uint(K_PERIOD)

    def next_epoch_point(self) -> int:
        return self.start_time + self.epoch * self.period

    def assert_epoch_open(self) -> None:
        now = self._t.now
        if now < self.start_time:
            raise EpochNotStarted(data={"now": now, "start_time": self.start_time})

    def assert_allocatable(self) -> None:
        now, boundary = self._t.now, self.next_epoch_point()
        if now < boundary:
            raise EpochAlreadyAllocated(data={"now": now, "next_epoch_point": boundary})

    def advance(self) -> int:
        epoch = u256_add(self.epoch, 1)
        self._t._set_uint(K_EPOCH, epoch)
        log.info("epoch advanced", extra={"epoch": epoch, "next_epoch_point": self.next_epoch_point()})
        return epoch

    def set_period(self, period: int) -> None:
        if not isinstance(period, int) or period <= 0:
            raise ValidationError("Epoch: period must be positive", data={"period": period})
        self._t._set_uint(K_PERIOD, period)


__all__ = ["EpochGate", "K_EPOCH", "K_START_TIME", "K_PERIOD"]
