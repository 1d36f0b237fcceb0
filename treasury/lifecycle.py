"""
treasury.lifecycle — one-way Active → Migrated state of a treasury.

The lifecycle is a two-variant sum type. A treasury starts `ActiveState`;
`migrate(successor)` moves it to `MigratedState(successor)`, which is terminal.
Every privileged entrypoint calls `require_active` before anything else.

Persisted as a single storage slot holding the successor address; an empty
slot means active.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Union

from core.address import ZERO_ADDRESS

from .errors import Migrated

K_SUCCESSOR: Final[bytes] = b"treasury:lifecycle:successor"


@dataclass(frozen=True)
class ActiveState:
    migrated = False

    def to_dict(self) -> dict:
        return {"state": "active"}


@dataclass(frozen=True)
class MigratedState:
    successor: bytes
    migrated = True

    def __post_init__(self) -> None:
        if self.successor == ZERO_ADDRESS:
            raise ValueError("successor must not be the zero address")

    def to_dict(self) -> dict:
        return {"state": "migrated", "successor": "0x" + self.successor.hex()}


Lifecycle = Union[ActiveState, MigratedState]

ACTIVE: Final[ActiveState] = ActiveState()


def decode(raw_successor: bytes) -> Lifecycle:
    if not raw_successor or raw_successor == ZERO_ADDRESS:
        return ACTIVE
    return MigratedState(raw_successor)


def encode(state: Lifecycle) -> bytes:
    if isinstance(state, MigratedState):
        return state.successor
    return ZERO_ADDRESS


def require_active(state: Lifecycle) -> None:
    if isinstance(state, MigratedState):
        raise Migrated(data={"successor": "0x" + state.successor.hex()})


__all__ = [
    "ActiveState",
    "MigratedState",
    "Lifecycle",
    "ACTIVE",
    "decode",
    "encode",
    "require_active",
    "K_SUCCESSOR",
]
