"""
execution.state.events — pluggable event/log sinks.

This module defines a small interface for recording and querying events
emitted by contracts during host execution. It ships with two backends:

- InMemoryEventSink: fast, test/dev friendly; keeps all logs in RAM.
- JsonlEventSink: append-only JSONL file; durable and simple to operate.

Events are only handed to a sink once the operation that produced them has
committed; the host buffers them per call frame and drops them on revert.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from ..types.events import LogEvent

# =============================================================================
# Utilities
# =============================================================================


def _b2h(b: bytes) -> str:
    return "0x" + b.hex()


# =============================================================================
# Public data model
# =============================================================================


@dataclass(frozen=True)
class EventRecord:
    """
    A fully-qualified event record with execution context.

    Fields
    ------
    block_number : int
        Height of the block in which the operation executed.
    timestamp : int
        Block timestamp (Unix seconds).
    tx_index : int
        0-based index of the operation inside the block.
    log_index : int
        0-based index of the event inside the operation, in emission order.
    tx_hash : bytes
        Hash identifying the operation.
    event : LogEvent
        The event payload (address, name, args).
    """

    block_number: int
    timestamp: int
    tx_index: int
    log_index: int
    tx_hash: bytes
    event: LogEvent

    @classmethod
    def at(cls, event: LogEvent, **ctx: Any) -> "EventRecord":
        """Wrap `event` with the keyword context an EventSink.append receives."""
        return cls(
            block_number=ctx["block_number"],
            timestamp=ctx["timestamp"],
            tx_index=ctx["tx_index"],
            log_index=ctx["log_index"],
            tx_hash=ctx["tx_hash"],
            event=event,
        )

    @property
    def address(self) -> bytes:
        return self.event.address

    @property
    def name(self) -> str:
        return self.event.name

    @property
    def args(self) -> Dict[str, Any]:
        return self.event.args


# =============================================================================
# Sink interface
# =============================================================================


@runtime_checkable
class EventSink(Protocol):
    def append(
        self,
        event: LogEvent,
        *,
        block_number: int,
        timestamp: int,
        tx_hash: bytes,
        tx_index: int,
        log_index: int,
    ) -> EventRecord:
        """Append a single event with its execution context. Returns stored record."""

    def get_logs(
        self,
        *,
        address: Optional[bytes] = None,
        name: Optional[str] = None,
        from_block: Optional[int] = None,
        to_block: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        """Iterate matching logs in ascending (block, tx, log) order."""

    def flush(self) -> None:
        """Force persistence, if applicable."""

    def close(self) -> None:
        """Release resources (files, buffers)."""


def _record_matches(
    rec: EventRecord,
    address: Optional[bytes],
    name: Optional[str],
    from_block: Optional[int],
    to_block: Optional[int],
) -> bool:
    if from_block is not None and rec.block_number < from_block:
        return False
    if to_block is not None and rec.block_number > to_block:
        return False
    if address is not None and rec.address != address:
        return False
    if name is not None and rec.name != name:
        return False
    return True


# =============================================================================
# In-memory sink
# =============================================================================


class InMemoryEventSink(EventSink):
    """Thread-safe sink keeping every record in RAM; the host default."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: List[EventRecord] = []

    def append(
        self,
        event: LogEvent,
        *,
        block_number: int,
        timestamp: int,
        tx_hash: bytes,
        tx_index: int,
        log_index: int,
    ) -> EventRecord:
        rec = EventRecord.at(
            event,
            block_number=block_number,
            timestamp=timestamp,
            tx_hash=tx_hash,
            tx_index=tx_index,
            log_index=log_index,
        )
        with self._lock:
            self._records.append(rec)
        return rec

    def get_logs(
        self,
        *,
        address: Optional[bytes] = None,
        name: Optional[str] = None,
        from_block: Optional[int] = None,
        to_block: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        with self._lock:
            matched = [
                rec
                for rec in self._records
                if _record_matches(rec, address, name, from_block, to_block)
            ]
        if limit is not None:
            matched = matched[:limit]
        return iter(matched)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def flush(self) -> None:
        return

    def close(self) -> None:
        with self._lock:
            self._records.clear()


# =============================================================================
# JSONL sink (durable)
# =============================================================================


class JsonlEventSink(EventSink):
    """
    Append-only JSONL sink. Each line is a single EventRecord in canonical form.

    Format (one object per line)
    ----------------------------
    {
      "block": 123,
      "timestamp": 1700000000,
      "tx_index": 0,
      "log_index": 2,
      "tx_hash": "0x…",
      "address": "0x…",
      "name": "TreasuryFunded",
      "args": {"timestamp": 1700000000, "amount": 42}
    }
    """

    def __init__(self, path: str) -> None:
        self._path = path
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        self._fh = open(path, "a+", encoding="utf-8", buffering=1)  # line-buffered
        self._lock = threading.RLock()
        self._log = logging.getLogger(__name__)

    def _encode(self, rec: EventRecord) -> str:
        ev = rec.event.to_dict()
        obj = {
            "block": rec.block_number,
            "timestamp": rec.timestamp,
            "tx_index": rec.tx_index,
            "log_index": rec.log_index,
            "tx_hash": _b2h(rec.tx_hash),
            "address": ev["address"],
            "name": ev["name"],
            "args": ev["args"],
        }
        return json.dumps(obj, separators=(",", ":"))

    @staticmethod
    def _decode(line: str) -> EventRecord:
        obj = json.loads(line)
        event = LogEvent.from_dict(obj)
        return EventRecord(
            block_number=int(obj["block"]),
            timestamp=int(obj["timestamp"]),
            tx_index=int(obj["tx_index"]),
            log_index=int(obj["log_index"]),
            tx_hash=bytes.fromhex(obj["tx_hash"][2:]),
            event=event,
        )

    def append(
        self,
        event: LogEvent,
        *,
        block_number: int,
        timestamp: int,
        tx_hash: bytes,
        tx_index: int,
        log_index: int,
    ) -> EventRecord:
        rec = EventRecord.at(
            event,
            block_number=block_number,
            timestamp=timestamp,
            tx_hash=tx_hash,
            tx_index=tx_index,
            log_index=log_index,
        )
        line = self._encode(rec)
        with self._lock:
            self._fh.write(line + "\n")
        return rec

    def get_logs(
        self,
        *,
        address: Optional[bytes] = None,
        name: Optional[str] = None,
        from_block: Optional[int] = None,
        to_block: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterable[EventRecord]:
        out: List[EventRecord] = []
        with self._lock:
            self._fh.flush()
            self._fh.seek(0)
            for line in self._fh:
                if not line.strip():
                    continue
                try:
                    rec = self._decode(line)
                except (ValueError, KeyError) as e:
                    self._log.warning("Skipping malformed event line: %s (%r)", line[:120], e)
                    continue
                if _record_matches(rec, address, name, from_block, to_block):
                    out.append(rec)
                    if limit is not None and len(out) >= limit:
                        break
        return iter(out)

    def flush(self) -> None:
        with self._lock:
            self._fh.flush()
            os.fsync(self._fh.fileno())

    def close(self) -> None:
        with self._lock:
            self._fh.close()


__all__ = [
    "EventRecord",
    "EventSink",
    "InMemoryEventSink",
    "JsonlEventSink",
]
