"""
execution.types.result — Receipt container for a committed host operation.

A `Receipt` is produced only for operations that committed; failed operations
raise their `ExecError` instead and leave no trace in state or logs.

Fields
------
* block_number : int   — height of the block the operation ran in
* timestamp    : int   — block timestamp
* tx_hash      : bytes — operation id
* sender       : bytes — account that submitted the operation
* method       : str   — entrypoint name
* return_value : Any   — whatever the entrypoint returned
* logs         : tuple[LogEvent, ...] — emitted events in order
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .events import LogEvent


@dataclass(frozen=True)
class Receipt:
    block_number: int
    timestamp: int
    tx_hash: bytes
    sender: bytes
    method: str
    return_value: Any = None
    logs: Tuple[LogEvent, ...] = field(default_factory=tuple)

    def events(self, name: str, *, address: bytes | None = None) -> List[LogEvent]:
        """Events with the given name, optionally restricted to one emitter."""
        return [
            e for e in self.logs
            if e.name == name and (address is None or e.address == address)
        ]

    def emitted(self, name: str, *, address: bytes | None = None, **args: Any) -> bool:
        return any(
            e.matches(name, **args) and (address is None or e.address == address)
            for e in self.logs
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blockNumber": self.block_number,
            "timestamp": self.timestamp,
            "txHash": "0x" + self.tx_hash.hex(),
            "sender": "0x" + self.sender.hex(),
            "method": self.method,
            "logs": [e.to_dict() for e in self.logs],
        }


__all__ = ["Receipt"]
