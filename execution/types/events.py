"""
execution.types.events — event/log record types for the settlement host.

`LogEvent` is a compact, deterministic container used by the host to record
contract-emitted events. It is intentionally minimal and dependency-free.

Conventions
-----------
* `address` is the emitter address as raw bytes (20 bytes).
* `name` is the event name (e.g. "Transfer", "TreasuryFunded").
* `fields` is an ordered tuple of (arg name, value) pairs; values are ints,
  bools, strings or bytes. `args` exposes them as a dict.

Helpers
-------
* `to_dict()` converts to a JSON-friendly form (bytes rendered as 0x-hex).
* `matches(name, **args)` is a small predicate used by tests and filters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple, Union

HexLike = Union[str, bytes, bytearray, memoryview]


def _hex_to_bytes(v: HexLike) -> bytes:
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v)
    if isinstance(v, str):
        s = v.strip()
        if s.startswith(("0x", "0X")):
            s = s[2:]
        if len(s) % 2:
            s = "0" + s
        try:
            return bytes.fromhex(s)
        except ValueError as e:
            raise ValueError(f"invalid hex string: {v!r}") from e
    raise TypeError(f"expected hex-like value, got {type(v).__name__}")


def _bytes_to_hex(b: bytes) -> str:
    return "0x" + b.hex()


def _json_value(v: Any) -> Any:
    if isinstance(v, (bytes, bytearray, memoryview)):
        return _bytes_to_hex(bytes(v))
    return v


@dataclass(frozen=True)
class LogEvent:
    """
    A single event emitted during a host call.

    Attributes:
        address: bytes — emitter address
        name:    str — event name
        fields:  tuple[(str, value), ...] — ordered event arguments

    Raises:
        ValueError if inputs are empty or obviously malformed.
    """

    address: bytes
    name: str
    fields: Tuple[Tuple[str, Any], ...]

    def __init__(self, address: HexLike, name: str, args: Mapping[str, Any] | None = None):
        addr_b = _hex_to_bytes(address)
        if len(addr_b) < 8:
            raise ValueError(f"address length too small: {len(addr_b)} bytes")
        if not name:
            raise ValueError("event name must not be empty")
        pairs = tuple((str(k), bytes(v) if isinstance(v, (bytearray, memoryview)) else v)
                      for k, v in (args or {}).items())
        object.__setattr__(self, "address", addr_b)
        object.__setattr__(self, "name", str(name))
        object.__setattr__(self, "fields", pairs)

    @property
    def args(self) -> Dict[str, Any]:
        return dict(self.fields)

    def matches(self, name: str, **args: Any) -> bool:
        if self.name != name:
            return False
        mine = self.args
        return all(mine.get(k) == v for k, v in args.items())

    # --------------------- conversions & representations ---------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a JSON-friendly mapping using hex strings.

        Returns:
            {
              "address": "0x..",
              "name":    "Transfer",
              "args":    {"from": "0x..", "to": "0x..", "value": 1}
            }
        """
        return {
            "address": _bytes_to_hex(self.address),
            "name": self.name,
            "args": {k: _json_value(v) for k, v in self.fields},
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LogEvent":
        """
        Parse from a mapping produced by `to_dict()`. Arg values that were
        bytes come back as hex strings; callers that need bytes re-decode them.
        """
        return cls(address=d["address"], name=d["name"], args=dict(d.get("args", {})))

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        addr = _bytes_to_hex(self.address)
        args = ", ".join(f"{k}={_json_value(v)}" for k, v in self.fields)
        return f"LogEvent({self.name}@{addr[:10]}…, {args})"


__all__ = ["LogEvent"]
