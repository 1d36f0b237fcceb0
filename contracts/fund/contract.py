# -*- coding: utf-8 -*-
"""
SimpleFund
==========

Pull-style fund sink used for the dev fund and the stable fund.

- `deposit(token, amount, reason)`: anyone; pulls `amount` of `token` from the
  caller with `transfer_from` (the caller approves the fund first).
- `withdraw(token, amount, to, reason)`: operator only.

Events:
    - "Deposit"    {from, at, reason}
    - "Withdrawal" {from, to, at, reason}
"""
from __future__ import annotations

from ..stdlib.access import Operator
from ..stdlib.contract import external


class SimpleFund(Operator):
    @external
    def deposit(self, token: bytes, amount: int, reason: str) -> None:
        sender = self.msg_sender
        self._at(token).transfer_from(sender, self.address, amount)
        self._emit("Deposit", **{"from": sender, "at": self.now, "reason": reason})

    @external
    def withdraw(self, token: bytes, amount: int, to: bytes, reason: str) -> None:
        self._only_operator()
        self._at(token).transfer(to, amount)
        self._emit("Withdrawal", **{"from": self.msg_sender, "to": to, "at": self.now, "reason": reason})


__all__ = ["SimpleFund"]
