"""
core.address — deterministic 20-byte addresses.

Accounts and contracts are identified by raw 20-byte addresses. Tests and
tools derive stable account addresses from a tag, and the host derives
contract addresses from the deployer and its operation nonce.
"""

from __future__ import annotations

import hashlib
from typing import Union

ADDRESS_LEN = 20
ZERO_ADDRESS = b"\x00" * ADDRESS_LEN

AddressLike = Union[str, bytes, bytearray, memoryview]


def det_address(tag: str) -> bytes:
    """
    Produce a stable 20-byte address from a tag, e.g. det_address("alice").
    """
    return hashlib.sha3_256(tag.encode("utf-8")).digest()[:ADDRESS_LEN]


def contract_address(deployer: bytes, nonce: int) -> bytes:
    """Address of the contract created by `deployer` at operation `nonce`."""
    m = hashlib.sha3_256()
    m.update(b"kbtc/create|")
    m.update(bytes(deployer))
    m.update(int(nonce).to_bytes(8, "big"))
    return m.digest()[:ADDRESS_LEN]


def to_address(value: AddressLike) -> bytes:
    """Normalize bytes or a 0x-hex string into a 20-byte address."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        out = bytes(value)
    elif isinstance(value, str):
        s = value.strip()
        if s.startswith(("0x", "0X")):
            s = s[2:]
        try:
            out = bytes.fromhex(s)
        except ValueError as e:
            raise ValueError(f"invalid hex address: {value!r}") from e
    else:
        raise TypeError(f"expected address-like value, got {type(value).__name__}")
    if len(out) != ADDRESS_LEN:
        raise ValueError(f"address must be {ADDRESS_LEN} bytes (got {len(out)})")
    return out


def to_hex(addr: bytes) -> str:
    return "0x" + bytes(addr).hex()


def short(addr: bytes) -> str:
    """Abbreviated hex form for logs: 0x1234…abcd."""
    h = bytes(addr).hex()
    return f"0x{h[:4]}…{h[-4:]}"


__all__ = [
    "ADDRESS_LEN",
    "ZERO_ADDRESS",
    "det_address",
    "contract_address",
    "to_address",
    "to_hex",
    "short",
]
