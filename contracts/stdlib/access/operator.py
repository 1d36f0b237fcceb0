# -*- coding: utf-8 -*-
"""
contracts.stdlib.access.operator
================================

**Operator** mixin: an Ownable contract with a second privileged account.

The operator is the account (usually another contract) allowed to run the
contract's day-to-day privileged entrypoints. The owner may hand the operator
role to someone else with `transfer_operator`.

Subclasses can set `operator_error` to an exception class (constructed with
no arguments) to customise the failure raised by `_only_operator`.
"""
from __future__ import annotations

from typing import Callable, ClassVar, Final, Optional

from core.address import ZERO_ADDRESS
from execution.errors import Revert

from ..contract import external, view
from .ownable import ERR_ZERO_ADDRESS, Ownable

OPERATOR_KEY: Final[bytes] = b"access:operator"

ERR_NOT_OPERATOR: Final[str] = "ACCESS:NOT_OPERATOR"


class Operator(Ownable):
    operator_error: ClassVar[Optional[Callable[[], Exception]]] = None

    def constructor(self, *args, **kwargs) -> None:
        super().constructor(*args, **kwargs)
        self._set_operator(self.msg_sender)

    @view
    def operator(self) -> bytes:
        return self._get_address(OPERATOR_KEY)

    @view
    def is_operator(self, account: bytes) -> bool:
        return account == self.operator()

    def _only_operator(self) -> None:
        if self.msg_sender != self.operator():
            if self.operator_error is not None:
                raise self.operator_error()
            raise Revert(ERR_NOT_OPERATOR, reason="NotOperator")

    def _set_operator(self, new_operator: bytes) -> None:
        previous = self.operator()
        self._set_address(OPERATOR_KEY, new_operator)
        self._emit("OperatorTransferred", previous_operator=previous, new_operator=new_operator)

    @external
    def transfer_operator(self, new_operator: bytes) -> None:
        """Owner-only. Emits OperatorTransferred."""
        self._only_owner()
        if new_operator == ZERO_ADDRESS:
            raise Revert(ERR_ZERO_ADDRESS, reason="ZeroAddress")
        self._set_operator(new_operator)


__all__ = ["OPERATOR_KEY", "Operator", "ERR_NOT_OPERATOR"]
