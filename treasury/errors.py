"""
treasury.errors — typed failures of the Treasury.

Every failure is a `Revert` (see execution.errors), so the host discards the
operation's effects. The class name doubles as the stable `reason`; the
message is the human-readable string surfaced to callers.

Hierarchy
---------
TreasuryError (Revert)
 ├─ AccessError
 │   ├─ InsufficientPermission   treasury lacks the operator role on a collaborator
 │   └─ CallerNotOperator        caller is not the treasury operator
 ├─ StateError
 │   ├─ Migrated
 │   ├─ AlreadyInitialized
 │   ├─ NotInitialized
 │   ├─ NotSuccessor             initialize() on an instance not deployed as a successor
 │   ├─ EpochNotStarted
 │   └─ EpochAlreadyAllocated
 └─ ValidationError
     ├─ ZeroAmount
     ├─ PriceMoved
     ├─ PriceNotEligible         message names the side: purchase or redemption
     ├─ InsufficientBudget
     ├─ InvalidRate
     └─ InvalidAddress
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional

from execution.errors import Revert


class TreasuryError(Revert):
    default_message: ClassVar[str] = "Treasury: failed"

    def __init__(self, message: Optional[str] = None, *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message or self.default_message, reason=type(self).__name__, data=data)


# ---- categories -------------------------------------------------------------


class AccessError(TreasuryError):
    """Caller or treasury lacks a required privileged role."""


class StateError(TreasuryError):
    """Operation not allowed in the current lifecycle or epoch state."""


class ValidationError(TreasuryError):
    """Bad input, mismatched price or exhausted budget."""


# ---- access -----------------------------------------------------------------


class InsufficientPermission(AccessError):
    default_message = "Treasury: need more permission"


class CallerNotOperator(AccessError):
    default_message = "operator: caller is not the operator"


# ---- state ------------------------------------------------------------------


class Migrated(StateError):
    default_message = "Treasury: migrated"


class AlreadyInitialized(StateError):
    default_message = "Treasury: initialized"


class NotInitialized(StateError):
    default_message = "Treasury: not initialized"


class NotSuccessor(StateError):
    default_message = "Treasury: not a successor"


class EpochNotStarted(StateError):
    default_message = "Epoch: not started yet"


class EpochAlreadyAllocated(StateError):
    default_message = "Epoch: not allowed"


# ---- validation -------------------------------------------------------------


class ZeroAmount(ValidationError):
    default_message = "Treasury: zero amount"


class PriceMoved(ValidationError):
    default_message = "Treasury: kbtc price moved"


class PriceNotEligible(ValidationError):
    """
    Price outside the band for the requested trade. Buying reports
    "...not eligible for kbond purchase" and redeeming reports
    "...not eligible for kbond redemption", so callers can tell the two apart.
    """

    default_message = "Treasury: kbtcPrice not eligible"


class InsufficientBudget(ValidationError):
    default_message = "Treasury: treasury has no more budget"


class InvalidRate(ValidationError):
    default_message = "Treasury: rate out of range"


class InvalidAddress(ValidationError):
    default_message = "Treasury: zero address"


__all__ = [
    "TreasuryError",
    "AccessError",
    "StateError",
    "ValidationError",
    "InsufficientPermission",
    "CallerNotOperator",
    "Migrated",
    "AlreadyInitialized",
    "NotInitialized",
    "NotSuccessor",
    "EpochNotStarted",
    "EpochAlreadyAllocated",
    "ZeroAmount",
    "PriceMoved",
    "PriceNotEligible",
    "InsufficientBudget",
    "InvalidRate",
    "InvalidAddress",
]
