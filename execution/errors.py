"""
execution.errors — host-level exceptions for the KBTC settlement host.

The host communicates failures via *typed exceptions*. Any exception escaping a
call frame makes the host discard that frame's writes and events; the typed
classes below are what contracts raise on purpose.

Hierarchy
---------
ExecError (base)
 ├─ Revert          : Contract-triggered revert (explicit failure, carries a reason)
 └─ InvalidAccess   : Illegal call per host rules (non-entrypoint, unknown address)

Notes
-----
* Raising `Revert` is a *semantic* failure of the operation, not a host bug.
  Contract packages subclass it to give each failure a stable name.
* `InvalidAccess` indicates the caller tried to reach something that is not an
  entrypoint (private helper, unknown contract address).

These classes intentionally avoid importing other host modules so they can be
used from the storage journal and contract libraries without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class ExecError(Exception):
    """
    Base execution error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'REVERT', 'INVALID_ACCESS').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "execution error"
    code: str = "EXEC_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for receipts/logs."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class Revert(ExecError):
    """
    Contract-triggered revert.

    Optional fields:
        reason: short stable name of the failure (e.g. 'Migrated').

    Usage:
        raise Revert("TOKEN:INSUFFICIENT_BALANCE", data={"needed": 10})
    """
    def __init__(
        self,
        message: str = "reverted",
        *,
        reason: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        if reason is not None:
            d.setdefault("reason", reason)
        super().__init__(message=message, code="REVERT", data=d or None)

    @property
    def reason(self) -> Optional[str]:
        return (self.data or {}).get("reason")


class InvalidAccess(ExecError):
    """
    Illegal access under host rules.

    Examples:
      - Calling a helper that is not marked as an entrypoint
      - Calling an address with no contract deployed
    """
    def __init__(
        self,
        message: str = "invalid access",
        *,
        op: Optional[str] = None,
        address: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        if op is not None:
            d.setdefault("op", op)
        if address is not None:
            d.setdefault("address", address)
        super().__init__(message=message, code="INVALID_ACCESS", data=d or None)


# -------- helper utilities ---------------------------------------------------


def error_to_receipt_fields(err: ExecError) -> Dict[str, Any]:
    """
    Map an ExecError to canonical receipt-like fields.

    Returns:
        {
          "status": "REVERT" | "ERROR",
          "error":  {code, message, data?}
        }
    """
    status = "REVERT" if isinstance(err, Revert) else "ERROR"
    return {"status": status, "error": err.to_dict()}


__all__ = [
    "ExecError",
    "Revert",
    "InvalidAccess",
    "error_to_receipt_fields",
]
