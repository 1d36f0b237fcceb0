"""
Fixtures for treasury tests.

`system` is a fully deployed KBTC stack on a fresh host; the treasury is not
yet operator of anything. `funded` mints the balances used throughout the
suite and hands the operator role over, leaving the clock before the first
epoch. `started` additionally moves the clock to the start time.
"""
from __future__ import annotations

import pytest

from core.address import det_address
from execution.runtime.host import Host
from treasury.config import DAY, TreasuryConfig
from treasury.deploy import System, deploy_system

ETH = 10**18
BTC = 10**8

OPERATOR = det_address("operator")
ANT = det_address("ant")


def btc(percent: int) -> int:
    """Price at `percent` hundredths of peg, e.g. btc(106) == 1.06 BTC."""
    return BTC * percent // 100


@pytest.fixture
def config() -> TreasuryConfig:
    return TreasuryConfig()


@pytest.fixture
def host() -> Host:
    return Host()


@pytest.fixture
def system(host, config) -> System:
    return deploy_system(host, OPERATOR, start_delay=DAY, config=config)


@pytest.fixture
def treasury(system):
    return system.treasury


@pytest.fixture
def funded(system) -> System:
    op = OPERATOR
    system.stable.connect(op).mint(op, 50_000 * ETH)
    system.stable.connect(op).mint(system.treasury.address, 50_000 * ETH)
    system.bond.connect(op).mint(op, 50_000 * ETH)
    system.share.connect(op).mint(op, 10_000 * ETH)
    system.hand_over_operators()
    return system


@pytest.fixture
def started(funded, host) -> System:
    host.set_time(funded.treasury.get_start_time())
    return funded


def set_price(system: System, price: int) -> None:
    system.oracle.connect(system.operator).set_price(price)
