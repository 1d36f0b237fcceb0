"""
execution.runtime.host — in-process settlement host for Python contracts.

The host owns the ledger (StorageView + Journal), the block clock and the event
sink, and routes every contract interaction through call frames:

  - deploy   → instantiate a contract class at a fresh address and run its
               `constructor` inside an operation
  - transact → top-level operation submitted by an account; mines one block
  - call     → nested contract-to-contract call inside the active operation
  - query    → read-only call whose writes are always discarded

Atomicity
---------
Every frame opens a journal checkpoint and an event buffer. A frame that raises
is reverted (writes and events dropped) and the exception propagates to the
caller, which may catch it and continue. When the outermost frame returns, the
journal is flushed to storage and the buffered events are appended to the sink
with their block/tx/log position. Nothing is observable before that point.

Only methods marked as entrypoints (see `ENTRYPOINT_ATTR`) are reachable through
the host; anything else raises `InvalidAccess`.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from core.address import ZERO_ADDRESS, contract_address, short

from ..errors import InvalidAccess
from ..state.events import EventSink, InMemoryEventSink
from ..state.journal import Journal
from ..state.storage import StorageView
from ..types.context import BlockContext, CallFrame
from ..types.events import LogEvent
from ..types.result import Receipt

log = logging.getLogger(__name__)

DEFAULT_GENESIS_TIME = 1_700_000_000
DEFAULT_CHAIN_ID = 1337

# Attribute set on entrypoint functions: "external" (may write) or "view".
ENTRYPOINT_ATTR = "__entrypoint__"
EXTERNAL = "external"
VIEW = "view"

C = TypeVar("C")


def _tx_hash(sender: bytes, nonce: int, height: int, method: str) -> bytes:
    m = hashlib.sha3_256()
    m.update(b"kbtc/tx|")
    m.update(sender)
    m.update(nonce.to_bytes(8, "big"))
    m.update(height.to_bytes(8, "big"))
    m.update(method.encode("utf-8"))
    return m.digest()


class Host:
    """
    Deterministic single-threaded host. Operations execute one at a time; each
    one runs to completion (commit or revert) before the next begins.

    Parameters
    ----------
    timestamp : int
        Genesis block timestamp (Unix seconds).
    chain_id : int
        Network id carried in the block context.
    storage : StorageView | None
        Base storage; a fresh in-memory view when omitted.
    sink : EventSink | None
        Where committed events go; in-memory when omitted.
    """

    def __init__(
        self,
        *,
        timestamp: int = DEFAULT_GENESIS_TIME,
        chain_id: int = DEFAULT_CHAIN_ID,
        storage: Optional[StorageView] = None,
        sink: Optional[EventSink] = None,
    ) -> None:
        self.storage = storage if storage is not None else StorageView()
        self.journal = Journal(self.storage)
        self.sink: EventSink = sink if sink is not None else InMemoryEventSink()
        self.block = BlockContext(height=0, timestamp=timestamp, chain_id=chain_id)
        self.last_receipt: Optional[Receipt] = None

        self._contracts: Dict[bytes, Any] = {}
        self._nonces: Dict[bytes, int] = {}
        self._frames: List[CallFrame] = []
        self._buffers: List[List[LogEvent]] = []
        self._static = 0

    # ------------------------------------------------------------------ #
    # Clock
    # ------------------------------------------------------------------ #

    @property
    def now(self) -> int:
        return self.block.timestamp

    def advance_time(self, seconds: int) -> int:
        """Mine an empty block `seconds` later. Returns the new timestamp."""
        if seconds < 0:
            raise ValueError("cannot move time backwards")
        self.block = self.block.next(timestamp=self.block.timestamp + seconds)
        return self.block.timestamp

    def set_time(self, timestamp: int) -> int:
        self.block = self.block.next(timestamp=timestamp)
        return self.block.timestamp

    # ------------------------------------------------------------------ #
    # Registry
    # ------------------------------------------------------------------ #

    def contract_at(self, address: bytes) -> Any:
        try:
            return self._contracts[bytes(address)]
        except KeyError:
            raise InvalidAccess(
                "no contract at address", op="call", address="0x" + bytes(address).hex()
            ) from None

    def is_contract(self, address: bytes) -> bool:
        return bytes(address) in self._contracts

    def deploy(self, cls: Type[C], deployer: bytes, *args: Any, **kwargs: Any) -> C:
        """
        Deploy `cls` from `deployer` and run its constructor as one operation.
        A constructor failure leaves no contract behind.
        """
        self._require_idle("deploy")
        address = contract_address(deployer, self._bump_nonce(deployer))
        instance = cls(self, address)  # type: ignore[call-arg]
        self._contracts[address] = instance
        try:
            self._run_operation(deployer, instance, "constructor", instance.constructor, args, kwargs)
        except Exception:
            del self._contracts[address]
            raise
        log.debug("deployed %s at %s", cls.__name__, short(address))
        return instance

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def transact(self, sender: bytes, target: bytes, method: str, *args: Any, **kwargs: Any) -> Receipt:
        """
        Submit an operation from account `sender`. Commits and returns a
        Receipt, or raises the failure with every effect discarded.
        """
        self._require_idle("transact")
        contract = self.contract_at(target)
        fn = self._entrypoint(contract, method, allow_view=True)
        self._bump_nonce(sender)
        return self._run_operation(sender, contract, method, fn, args, kwargs)

    def call(self, caller: bytes, target: bytes, method: str, *args: Any, **kwargs: Any) -> Any:
        """Nested call from contract `caller` within the active operation."""
        if not self._frames:
            raise InvalidAccess("call outside of an operation", op=method)
        contract = self.contract_at(target)
        fn = self._entrypoint(contract, method, allow_view=True)
        return self._run_frame(caller, self._frames[0].origin, contract, method, fn, args, kwargs)

    def query(self, target: bytes, method: str, *args: Any, caller: bytes = ZERO_ADDRESS, **kwargs: Any) -> Any:
        """Read-only call; any attempted write raises and nothing persists."""
        contract = self.contract_at(target)
        fn = self._entrypoint(contract, method, allow_view=True)
        marker = self.journal.checkpoint()
        self._static += 1
        self._buffers.append([])
        self._frames.append(CallFrame(caller, contract.address, caller, method, depth=len(self._frames)))
        try:
            return fn(*args, **kwargs)
        finally:
            self._frames.pop()
            self._buffers.pop()
            self._static -= 1
            self.journal.revert_to(marker - 1)

    # ------------------------------------------------------------------ #
    # Frame context (used by contracts)
    # ------------------------------------------------------------------ #

    @property
    def frame(self) -> CallFrame:
        if not self._frames:
            raise InvalidAccess("no active call frame")
        return self._frames[-1]

    @property
    def msg_sender(self) -> bytes:
        return self.frame.caller

    def in_operation(self) -> bool:
        return bool(self._frames)

    def storage_get(self, address: bytes, key: bytes) -> bytes:
        return self.journal.storage_get(address, key)

    def storage_set(self, address: bytes, key: bytes, value: bytes) -> None:
        self._require_writable(address, "storage_set")
        self.journal.storage_set(address, key, value)

    def emit(self, address: bytes, name: str, args: Dict[str, Any]) -> None:
        self._require_writable(address, "emit")
        self._buffers[-1].append(LogEvent(address, name, args))

    # ------------------------------------------------------------------ #
    # Logs
    # ------------------------------------------------------------------ #

    def logs(self, *, address: Optional[bytes] = None, name: Optional[str] = None) -> List[LogEvent]:
        return [rec.event for rec in self.sink.get_logs(address=address, name=name)]

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _require_idle(self, op: str) -> None:
        if self._frames:
            raise InvalidAccess(f"{op} is not allowed inside an operation", op=op)

    def _require_writable(self, address: bytes, op: str) -> None:
        if not self._frames:
            raise InvalidAccess(f"{op} outside of an operation", op=op)
        if self._static:
            raise InvalidAccess(f"{op} in a read-only call", op=op)
        if self._frames[-1].address != address:
            raise InvalidAccess(f"{op} for a foreign contract", op=op, address="0x" + address.hex())

    def _bump_nonce(self, account: bytes) -> int:
        n = self._nonces.get(account, 0)
        self._nonces[account] = n + 1
        return n

    @staticmethod
    def _entrypoint(contract: Any, method: str, *, allow_view: bool) -> Callable[..., Any]:
        fn = getattr(contract, method, None)
        kind = getattr(fn, ENTRYPOINT_ATTR, None)
        if fn is None or kind is None or (kind == VIEW and not allow_view):
            raise InvalidAccess(
                f"{type(contract).__name__}.{method} is not an entrypoint",
                op=method,
                address="0x" + contract.address.hex(),
            )
        return fn

    def _run_operation(
        self,
        sender: bytes,
        contract: Any,
        method: str,
        fn: Callable[..., Any],
        args: tuple,
        kwargs: Dict[str, Any],
    ) -> Receipt:
        self.block = self.block.next()
        tx_hash = _tx_hash(sender, self._nonces.get(sender, 0), self.block.height, method)
        self._buffers.append([])
        try:
            result = self._run_frame(sender, sender, contract, method, fn, args, kwargs)
        except Exception as exc:
            log.debug("operation %s.%s from %s reverted: %s",
                      type(contract).__name__, method, short(sender), exc)
            raise
        finally:
            events = self._buffers.pop()

        self.journal.flush()
        for i, ev in enumerate(events):
            self.sink.append(
                ev,
                block_number=self.block.height,
                timestamp=self.block.timestamp,
                tx_hash=tx_hash,
                tx_index=0,
                log_index=i,
            )
        receipt = Receipt(
            block_number=self.block.height,
            timestamp=self.block.timestamp,
            tx_hash=tx_hash,
            sender=sender,
            method=method,
            return_value=result,
            logs=tuple(events),
        )
        self.last_receipt = receipt
        return receipt

    def _run_frame(
        self,
        caller: bytes,
        origin: bytes,
        contract: Any,
        method: str,
        fn: Callable[..., Any],
        args: tuple,
        kwargs: Dict[str, Any],
    ) -> Any:
        frame = CallFrame(caller, contract.address, origin, method, depth=len(self._frames))
        marker = self.journal.checkpoint()
        self._frames.append(frame)
        self._buffers.append([])
        try:
            result = fn(*args, **kwargs)
        except Exception:
            self.journal.revert_to(marker - 1)
            self._buffers.pop()
            self._frames.pop()
            if frame.depth:
                log.debug("nested call %s.%s reverted at depth %d",
                          type(contract).__name__, method, frame.depth)
            raise
        self.journal.commit_to(marker - 1)
        events = self._buffers.pop()
        self._buffers[-1].extend(events)
        self._frames.pop()
        return result


__all__ = [
    "Host",
    "ENTRYPOINT_ATTR",
    "EXTERNAL",
    "VIEW",
    "DEFAULT_GENESIS_TIME",
    "DEFAULT_CHAIN_ID",
]
