"""
execution.state.storage — committed contract storage.

Holds the state that survived every operation so far, keyed by contract
address and then by storage key. Contracts never touch this directly: the
host reads and writes through a `Journal` (execution.state.journal), and only
`Journal.flush()` at the end of a successful top-level operation lands here.

Keys are short human-readable prefixes followed by an address or a number
(e.g. b"tok/bal/" + holder). Values are canonical big-endian bytes; an empty
value means absent, so writing b"" deletes the key.

    sv = StorageView()
    sv.set(treasury, b"tsy/epoch", (3).to_bytes(32, "big"))
    sv.get(treasury, b"tsy/epoch")
"""

from __future__ import annotations

from typing import Dict, Iterator, Tuple

BytesLike = bytes | bytearray | memoryview


def _as_bytes(x: BytesLike, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    return bytes(x)


class StorageView:
    """In-memory {address: {key: value}} store with "empty means absent" writes."""

    def __init__(self) -> None:
        self._store: Dict[bytes, Dict[bytes, bytes]] = {}

    def get(self, address: BytesLike, key: BytesLike, default: bytes = b"") -> bytes:
        acc = self._store.get(_as_bytes(address, name="address"), {})
        return acc.get(_as_bytes(key, name="key"), default)

    def has(self, address: BytesLike, key: BytesLike) -> bool:
        acc = self._store.get(_as_bytes(address, name="address"), {})
        return _as_bytes(key, name="key") in acc

    def set(self, address: BytesLike, key: BytesLike, value: BytesLike) -> None:
        """Store `value`; an empty value deletes the key."""
        val = _as_bytes(value, name="value")
        if not val:
            self.delete(address, key)
            return
        addr = _as_bytes(address, name="address")
        self._store.setdefault(addr, {})[_as_bytes(key, name="key")] = val

    def delete(self, address: BytesLike, key: BytesLike) -> bool:
        """Remove (address, key). Returns True if the key existed."""
        addr = _as_bytes(address, name="address")
        acc = self._store.get(addr)
        if acc is None:
            return False
        removed = acc.pop(_as_bytes(key, name="key"), None) is not None
        if not acc:
            del self._store[addr]
        return removed

    def items(self, address: BytesLike) -> Iterator[Tuple[bytes, bytes]]:
        """(key, value) pairs of one contract, ordered by key."""
        acc = self._store.get(_as_bytes(address, name="address"), {})
        for k in sorted(acc):
            yield k, acc[k]

    def total_keys(self) -> int:
        return sum(len(acc) for acc in self._store.values())

    def __repr__(self) -> str:  # pragma: no cover
        return f"StorageView(contracts={len(self._store)}, keys={self.total_keys()})"


__all__ = ["StorageView"]
