"""
execution.state.journal — journaling writes, checkpoints, revert/commit.

This module provides a deterministic, in-memory write journal layered over a
StorageView. It supports nested checkpoints via a stack of overlays. Writes go
to the top overlay; reads consult overlays from top → base. `commit()` merges
the top overlay into the next layer (or the base state if it's the last
layer). `revert()` discards the top overlay.

Key properties
--------------
- Pure Python, no I/O; safe for unit tests and simulations.
- Storage overlay per (address, key) with explicit deletion markers.
- Nested checkpoints (begin/commit/revert) with O(changes) merge cost.
- Deterministic behavior; no reliance on wall clock or randomness.

Intended usage
--------------
    j = Journal(storage)
    j.begin()                       # start a checkpoint
    j.storage_set(addr, key, b"value")
    j.commit()                      # apply to parent/base

The host opens one checkpoint per call frame, so a failing nested call can be
reverted without disturbing its caller's writes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .storage import StorageView


def _b(x: bytes | bytearray | memoryview, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like")
    return bytes(x)


# =============================================================================
# Overlay model
# =============================================================================


@dataclass
class _Overlay:
    """
    A single journal layer.

    `storage`: staged storage changes. `None` means deletion for that key.
    """

    storage: Dict[bytes, Dict[bytes, Optional[bytes]]] = field(default_factory=dict)

    def has_local(self, addr: bytes, key: bytes) -> bool:
        m = self.storage.get(addr)
        return m is not None and key in m

    def storage_get_local(self, addr: bytes, key: bytes) -> Optional[bytes]:
        m = self.storage.get(addr)
        if m is None:
            return None
        return m.get(key, None)

    def storage_set_local(self, addr: bytes, key: bytes, value: Optional[bytes]) -> None:
        m = self.storage.get(addr)
        if m is None:
            m = {}
            self.storage[addr] = m
        m[key] = value


# =============================================================================
# Journal
# =============================================================================


class Journal:
    """
    A copy-on-write write journal with nested checkpoints.

    Parameters
    ----------
    storage : StorageView
        The base storage view.

    API highlights
    --------------
    - begin() / commit() / revert()
    - storage_get(), storage_set(), storage_items()
    - checkpoint() / commit_to(marker) / revert_to(marker)

    Reads consult overlays from top to bottom and then the base. Writes always
    target the top overlay.
    """

    def __init__(self, storage: StorageView) -> None:
        self._base_storage = storage
        # Root overlay; writes outside any checkpoint land here until flushed.
        self._layers: List[_Overlay] = [_Overlay()]

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of overlays (>= 1)."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint. Returns the new depth marker (int)."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> None:
        """
        Commit the top overlay into its parent. Committing the root overlay
        applies it to the base storage and leaves a fresh root in place.
        """
        top = self._layers.pop()
        if self._layers:
            self._merge_layers(self._layers[-1], top)
        else:
            self._apply_to_base(top)
            self._layers.append(_Overlay())

    def revert(self) -> None:
        """Discard the top overlay (or clear it if it's the root)."""
        if len(self._layers) > 1:
            self._layers.pop()
        else:
            self._layers[0] = _Overlay()

    def flush(self) -> None:
        """Commit every open layer down to the base storage."""
        while len(self._layers) > 1:
            self.commit()
        self.commit()

    # Markers for convenience ------------------------------------------------ #

    def checkpoint(self) -> int:
        """Alias for `begin()` returning a marker token (current depth)."""
        return self.begin()

    def commit_to(self, marker: int) -> None:
        """
        Commit repeatedly until the current depth equals `marker`.
        """
        if marker < 1:
            raise ValueError("marker must be >= 1")
        while len(self._layers) > marker:
            self.commit()

    def revert_to(self, marker: int) -> None:
        """
        Revert repeatedly until the current depth equals `marker`.
        """
        if marker < 1:
            raise ValueError("marker must be >= 1")
        while len(self._layers) > marker:
            self.revert()

    # --------------------------------------------------------------------- #
    # Storage API
    # --------------------------------------------------------------------- #

    def storage_get(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
        default: bytes = b"",
    ) -> bytes:
        """
        Read storage with overlay precedence. Returns `default` if absent.
        """
        addr = _b(address, name="address")
        key_b = _b(key, name="key")

        for layer in reversed(self._layers):
            if layer.has_local(addr, key_b):
                local = layer.storage_get_local(addr, key_b)
                return default if local is None else local

        return self._base_storage.get(addr, key_b, default=default)

    def storage_set(
        self,
        address: bytes | bytearray | memoryview,
        key: bytes | bytearray | memoryview,
        value: bytes | bytearray | memoryview,
    ) -> None:
        """
        Stage a storage write in the top overlay. Empty value is a deletion.
        """
        addr = _b(address, name="address")
        key_b = _b(key, name="key")
        val_b = _b(value, name="value")
        top = self._layers[-1]
        top.storage_set_local(addr, key_b, val_b if len(val_b) else None)

    def storage_items(
        self, address: bytes | bytearray | memoryview
    ) -> Iterator[Tuple[bytes, bytes]]:
        """
        Iterate visible (key, value) for an address with overlay precedence.
        Stable order by key. Deletions in overlays are respected.
        """
        addr = _b(address, name="address")

        visible: Dict[bytes, bytes] = dict(self._base_storage.items(addr))
        for layer in self._layers:
            m = layer.storage.get(addr)
            if not m:
                continue
            for k, v in m.items():
                if v is None:
                    visible.pop(k, None)
                else:
                    visible[k] = v

        for k in sorted(visible.keys()):
            yield k, visible[k]

    # --------------------------------------------------------------------- #
    # Internal merge/apply
    # --------------------------------------------------------------------- #

    @staticmethod
    def _merge_layers(dst: _Overlay, src: _Overlay) -> None:
        """Merge `src` overlay into `dst` overlay (last write wins)."""
        for addr, writes in src.storage.items():
            dm = dst.storage.get(addr)
            if dm is None:
                dm = {}
                dst.storage[addr] = dm
            dm.update(writes)

    def _apply_to_base(self, layer: _Overlay) -> None:
        for addr, writes in layer.storage.items():
            for k, v in writes.items():
                if v is None or len(v) == 0:
                    self._base_storage.delete(addr, k)
                else:
                    self._base_storage.set(addr, k, v)


__all__ = ["Journal"]
