"""
execution.types.context — execution contexts for blocks and call frames.

These minimal, dependency-light dataclasses carry the *evaluated* context that
the host needs while running an operation.

Conventions
-----------
* `timestamp` is Unix time in seconds (int).
* `caller`, `address` and `origin` are raw 20-byte addresses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


def _bytes_to_hex(b: bytes) -> str:
    return "0x" + b.hex()


@dataclass(frozen=True)
class BlockContext:
    """
    Environment for executing the operations of one block.

    Attributes:
        height:    int >= 0 — block height (genesis = 0)
        timestamp: int >= 0 — Unix seconds
        chain_id:  int >= 1 — network id
    """
    height: int
    timestamp: int
    chain_id: int = 1337

    def __post_init__(self) -> None:
        if self.height < 0:
            raise ValueError("height must be >= 0")
        if self.timestamp < 0:
            raise ValueError("timestamp must be >= 0")
        if self.chain_id <= 0:
            raise ValueError("chain_id must be >= 1")

    def next(self, *, timestamp: int | None = None) -> "BlockContext":
        ts = self.timestamp if timestamp is None else timestamp
        if ts < self.timestamp:
            raise ValueError("timestamp must not go backwards")
        return BlockContext(height=self.height + 1, timestamp=ts, chain_id=self.chain_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"height": self.height, "timestamp": self.timestamp, "chainId": self.chain_id}


@dataclass(frozen=True)
class CallFrame:
    """
    One active contract call.

    Attributes:
        caller:  address that made this call (msg.sender)
        address: address of the contract being executed
        origin:  account that started the top-level operation
        method:  entrypoint name
        depth:   0 for the top-level call
    """
    caller: bytes
    address: bytes
    origin: bytes
    method: str
    depth: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "caller": _bytes_to_hex(self.caller),
            "address": _bytes_to_hex(self.address),
            "origin": _bytes_to_hex(self.origin),
            "method": self.method,
            "depth": self.depth,
        }


__all__ = ["BlockContext", "CallFrame"]
