# -*- coding: utf-8 -*-
"""
contracts.tests.conftest
========================

Pytest fixtures for the contract library.

- A fresh in-memory `Host` per test (deterministic genesis time).
- Stable, readable account addresses derived from labels.
- Deployed collaborators with `operator` as deployer (owner + operator).

Usage (inside a test file):
    def test_mint(token, accounts):
        op, alice = accounts["operator"], accounts["alice"]
        token.connect(op).mint(alice, 10)
        assert token.balance_of(alice) == 10
"""
from __future__ import annotations

import os
from typing import Dict

import pytest

from contracts.boardroom import Boardroom
from contracts.fund import SimpleFund
from contracts.oracle import SettableOracle
from contracts.token import BasisAsset
from core.address import det_address
from execution.runtime.host import Host

# Prefer UTC everywhere.
os.environ.setdefault("TZ", "UTC")

ETH = 10**18


@pytest.fixture
def host() -> Host:
    return Host()


@pytest.fixture
def accounts() -> Dict[str, bytes]:
    return {name: det_address(name) for name in ("operator", "alice", "bob", "ant")}


@pytest.fixture
def operator(accounts) -> bytes:
    return accounts["operator"]


@pytest.fixture
def token(host, operator) -> BasisAsset:
    return host.deploy(BasisAsset, operator, "KBTC", "KBTC")


@pytest.fixture
def oracle(host, operator) -> SettableOracle:
    return host.deploy(SettableOracle, operator, 10**8)


@pytest.fixture
def boardroom(host, operator, token) -> Boardroom:
    return host.deploy(Boardroom, operator, token.address)


@pytest.fixture
def fund(host, operator) -> SimpleFund:
    return host.deploy(SimpleFund, operator)
