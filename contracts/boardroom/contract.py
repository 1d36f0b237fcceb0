# -*- coding: utf-8 -*-
"""
Boardroom
=========

Receives the boardroom share of each seigniorage allocation. The operator
(the treasury) approves the boardroom for `amount` of cash and calls
`allocate_seigniorage(amount)`; the boardroom pulls the cash with
`transfer_from` and records a new reward snapshot.

Distribution to share stakers is outside this contract; it only keeps
the running totals needed to audit what was received.

Events:
    - "RewardAdded" {user, reward}
"""
from __future__ import annotations

from typing import Final

from ..stdlib.access import Operator
from ..stdlib.contract import external, require, view
from ..stdlib.math.safe_uint import u256_add

K_CASH: Final[bytes] = b"boardroom:cash"
K_TOTAL_REWARDS: Final[bytes] = b"boardroom:total_rewards"
K_SNAPSHOTS: Final[bytes] = b"boardroom:snapshots"
K_LAST_REWARD: Final[bytes] = b"boardroom:last_reward"

ERR_ZERO_REWARD: Final[str] = "Boardroom: Cannot allocate 0"


class Boardroom(Operator):
    def constructor(self, cash: bytes) -> None:
        super().constructor()
        self._set_address(K_CASH, cash)

    @view
    def cash(self) -> bytes:
        return self._get_address(K_CASH)

    @view
    def total_rewards(self) -> int:
        return self._get_uint(K_TOTAL_REWARDS)

    @view
    def snapshot_count(self) -> int:
        return self._get_uint(K_SNAPSHOTS)

    @view
    def last_reward(self) -> int:
        return self._get_uint(K_LAST_REWARD)

    @external
    def allocate_seigniorage(self, amount: int) -> None:
        self._only_operator()
        require(amount > 0, ERR_ZERO_REWARD, amount=amount)
        sender = self.msg_sender
        self._set_uint(K_TOTAL_REWARDS, u256_add(self.total_rewards(), amount))
        self._set_uint(K_SNAPSHOTS, self.snapshot_count() + 1)
        self._set_uint(K_LAST_REWARD, amount)
        self._at(self.cash()).transfer_from(sender, self.address, amount)
        self._emit("RewardAdded", user=sender, reward=amount)


__all__ = ["Boardroom"]
