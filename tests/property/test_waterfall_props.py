# -*- coding: utf-8 -*-
"""
Property tests for the seigniorage waterfall.

- conservation: the four reserves always sum to the seigniorage
- priority: dev first, then bonds up to capacity, then the funds
- no expansion at or below peg
- the reserve never covers more than outstanding bonds
"""
from __future__ import annotations

from hypothesis import assume, given
from hypothesis import strategies as st

from treasury.allocation import (
    bond_capacity,
    circulating_supply,
    compute_seigniorage,
    compute_waterfall,
)

from . import PEG, amounts, prices, rates

PRICE, SUPPLY, RATE = prices, amounts, rates


@given(PRICE, SUPPLY, SUPPLY, RATE, RATE)
def test_reserves_sum_to_seigniorage(price, circulating, capacity, dev_rate, stable_rate):
    wf = compute_waterfall(price, PEG, circulating, capacity, dev_rate, stable_rate)
    assert wf.seigniorage == compute_seigniorage(price, PEG, circulating)
    assert all(amount >= 0 for _, amount in wf.items())


@given(PRICE, SUPPLY, SUPPLY, RATE, RATE)
def test_priority_order(price, circulating, capacity, dev_rate, stable_rate):
    wf = compute_waterfall(price, PEG, circulating, capacity, dev_rate, stable_rate)
    total = wf.seigniorage
    assert wf.dev_reserve == total * dev_rate // 100
    assert wf.treasury_reserve <= capacity
    # funds only receive anything once bonds are fully covered
    if wf.stable_reserve or wf.boardroom_reserve:
        assert wf.treasury_reserve == capacity
    leftover = total - wf.dev_reserve - wf.treasury_reserve
    assert wf.stable_reserve == leftover * stable_rate // 100


@given(st.integers(min_value=0, max_value=PEG), SUPPLY, SUPPLY, RATE, RATE)
def test_no_expansion_at_or_below_peg(price, circulating, capacity, dev_rate, stable_rate):
    assert compute_waterfall(price, PEG, circulating, capacity, dev_rate, stable_rate).is_empty


@given(SUPPLY, SUPPLY, SUPPLY)
def test_reserve_stays_within_bond_supply(bonds, stable, reserve):
    assume(reserve <= bonds)
    cap = bond_capacity(bonds, reserve)
    assert reserve + cap == bonds
    assert circulating_supply(stable, reserve) == max(stable - reserve, 0)


@given(st.integers(min_value=PEG + 1, max_value=100 * PEG), SUPPLY)
def test_seigniorage_monotone_in_price(price, circulating):
    assert compute_seigniorage(price, PEG, circulating) >= compute_seigniorage(price - 1, PEG, circulating)
