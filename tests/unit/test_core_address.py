from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from core.address import (
    ADDRESS_LEN,
    ZERO_ADDRESS,
    contract_address,
    det_address,
    short,
    to_address,
    to_hex,
)


def test_det_address_is_stable_and_distinct():
    assert det_address("alice") == det_address("alice")
    assert det_address("alice") != det_address("bob")
    assert len(det_address("alice")) == ADDRESS_LEN


def test_contract_address_depends_on_nonce():
    deployer = det_address("deployer")
    assert contract_address(deployer, 0) != contract_address(deployer, 1)
    assert contract_address(deployer, 0) != contract_address(det_address("other"), 0)


@given(st.binary(min_size=ADDRESS_LEN, max_size=ADDRESS_LEN))
def test_hex_round_trip(addr):
    assert to_address(to_hex(addr)) == addr
    assert to_address(to_hex(addr).upper().replace("0X", "0x")) == addr
    assert to_address(bytearray(addr)) == addr


def test_to_address_rejects_bad_input():
    with pytest.raises(ValueError):
        to_address("0x1234")
    with pytest.raises(ValueError):
        to_address("0xzz" + "00" * 19)
    with pytest.raises(TypeError):
        to_address(12345)  # type: ignore[arg-type]


def test_short_form():
    assert short(ZERO_ADDRESS) == "0x0000…0000"
