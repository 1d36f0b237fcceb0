# -*- coding: utf-8 -*-
"""
Oracle, boardroom and fund: the contracts the treasury pays into or reads from.
"""
from __future__ import annotations

import pytest

from execution.errors import Revert

from .conftest import ETH


# ---- oracle -------------------------------------------------------------------


def test_oracle_consult_scales_by_amount(oracle, token, operator):
    assert oracle.price() == 10**8
    assert oracle.consult(token.address, ETH) == 10**8
    oracle.connect(operator).set_price(210_000_000)
    assert oracle.consult(token.address, ETH) == 210_000_000
    assert oracle.consult(token.address, ETH // 2) == 105_000_000


def test_oracle_admin_is_owner_only(oracle, accounts):
    with pytest.raises(Revert, match="ACCESS:NOT_OWNER"):
        oracle.connect(accounts["alice"]).set_price(1)
    with pytest.raises(Revert, match="ACCESS:NOT_OWNER"):
        oracle.connect(accounts["alice"]).set_revert(True)


def test_oracle_update_records_round(host, oracle, accounts):
    receipt = oracle.connect(accounts["alice"]).update()
    assert oracle.update_round() == 1
    assert oracle.updated_at() == receipt.timestamp
    assert receipt.emitted("Updated", round=1, timestamp=receipt.timestamp)


def test_oracle_revert_switch(oracle, operator):
    oracle.connect(operator).set_revert(True)
    assert oracle.reverts()
    with pytest.raises(Revert) as ei:
        oracle.connect(operator).update()
    assert ei.value.reason == "OracleUpdateFailed"
    assert oracle.update_round() == 0

    oracle.connect(operator).set_revert(False)
    oracle.connect(operator).update()
    assert oracle.update_round() == 1


# ---- boardroom ----------------------------------------------------------------


def test_boardroom_pulls_approved_cash(boardroom, token, operator):
    token.connect(operator).mint(operator, 10 * ETH)
    token.connect(operator).approve(boardroom.address, 4 * ETH)

    receipt = boardroom.connect(operator).allocate_seigniorage(4 * ETH)
    assert receipt.emitted("RewardAdded", user=operator, reward=4 * ETH)
    assert token.balance_of(boardroom.address) == 4 * ETH
    assert boardroom.total_rewards() == 4 * ETH
    assert boardroom.snapshot_count() == 1
    assert boardroom.last_reward() == 4 * ETH
    assert boardroom.cash() == token.address


def test_boardroom_rejects_zero_and_strangers(boardroom, accounts, operator):
    with pytest.raises(Revert, match="Boardroom: Cannot allocate 0"):
        boardroom.connect(operator).allocate_seigniorage(0)
    with pytest.raises(Revert, match="ACCESS:NOT_OPERATOR"):
        boardroom.connect(accounts["alice"]).allocate_seigniorage(1)


def test_boardroom_without_allowance_reverts_totals(boardroom, token, operator):
    token.connect(operator).mint(operator, ETH)
    with pytest.raises(Revert, match="TOKEN:ALLOWANCE_LOW"):
        boardroom.connect(operator).allocate_seigniorage(ETH)
    assert boardroom.total_rewards() == 0
    assert boardroom.snapshot_count() == 0


# ---- fund ---------------------------------------------------------------------


def test_fund_deposit_and_withdraw(fund, token, accounts, operator):
    alice = accounts["alice"]
    token.connect(operator).mint(alice, 3 * ETH)
    token.connect(alice).approve(fund.address, 3 * ETH)

    receipt = fund.connect(alice).deposit(token.address, 3 * ETH, "Treasury: Seigniorage Allocation")
    assert receipt.emitted(
        "Deposit", **{"from": alice, "at": receipt.timestamp, "reason": "Treasury: Seigniorage Allocation"}
    )
    assert token.balance_of(fund.address) == 3 * ETH

    with pytest.raises(Revert, match="ACCESS:NOT_OPERATOR"):
        fund.connect(alice).withdraw(token.address, ETH, alice, "grant")

    fund.connect(operator).withdraw(token.address, ETH, alice, "grant")
    assert token.balance_of(alice) == ETH
    assert token.balance_of(fund.address) == 2 * ETH
