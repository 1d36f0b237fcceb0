import pytest

from execution.errors import Revert
from treasury.errors import (
    EpochNotStarted,
    InsufficientBudget,
    InsufficientPermission,
    Migrated,
    PriceMoved,
    PriceNotEligible,
    ZeroAmount,
)

from .conftest import ANT, BTC, ETH, OPERATOR, btc, set_price


@pytest.fixture
def market(system):
    op = OPERATOR
    system.stable.connect(op).mint(op, 50_000 * ETH)
    system.bond.connect(op).mint(op, 50_000 * ETH)
    system.hand_over_operators()
    return system


@pytest.fixture
def open_market(market, host):
    host.set_time(market.treasury.get_start_time())
    return market


@pytest.fixture
def redeemable(open_market, host):
    """One allocation at 1.06 has filled the reserve; the next epoch is open."""
    s, t = open_market, open_market.treasury
    set_price(s, btc(106))
    t.connect(OPERATOR).allocate_seigniorage()
    host.set_time(t.next_epoch_point())
    return s


def _give_cash(s, to, amount):
    s.stable.connect(OPERATOR).transfer(to, amount)
    s.stable.connect(to).approve(s.treasury.address, amount)


def _give_bonds(s, to, amount):
    s.bond.connect(OPERATOR).transfer(to, amount)
    s.bond.connect(to).approve(s.treasury.address, amount)


# ---- buy ----------------------------------------------------------------------


def test_buy_below_peg_mints_discounted_bonds(open_market):
    s, t = open_market, open_market.treasury
    price = btc(99)
    set_price(s, price)
    _give_cash(s, ANT, ETH)
    supply = s.stable.total_supply()

    receipt = t.connect(ANT).buy_bonds(ETH, price)

    expected = ETH * BTC // price
    assert receipt.return_value == expected
    assert receipt.emitted("BoughtBonds", address=t.address, **{"from": ANT, "amount": ETH})
    assert s.stable.balance_of(ANT) == 0
    assert s.bond.balance_of(ANT) == expected
    assert s.stable.total_supply() == supply - ETH
    assert s.oracle.update_round() == 1


@pytest.mark.parametrize("price", [BTC, btc(101)])
def test_buy_at_or_above_peg_is_not_eligible(open_market, price):
    set_price(open_market, price)
    _give_cash(open_market, ANT, ETH)
    with pytest.raises(PriceNotEligible, match="not eligible for kbond purchase"):
        open_market.treasury.connect(ANT).buy_bonds(ETH, price)


def test_buy_with_moved_price(open_market):
    set_price(open_market, btc(99))
    _give_cash(open_market, ANT, ETH)
    with pytest.raises(PriceMoved, match="Treasury: kbtc price moved"):
        open_market.treasury.connect(ANT).buy_bonds(ETH, ETH)


def test_buy_zero_amount(open_market):
    set_price(open_market, btc(99))
    with pytest.raises(ZeroAmount, match="cannot purchase kbonds with zero amount"):
        open_market.treasury.connect(ANT).buy_bonds(0, btc(99))


def test_buy_without_allowance_changes_nothing(open_market):
    s = open_market
    set_price(s, btc(99))
    s.stable.connect(OPERATOR).transfer(ANT, ETH)
    bonds = s.bond.total_supply()
    with pytest.raises(Revert, match="TOKEN:ALLOWANCE_LOW"):
        s.treasury.connect(ANT).buy_bonds(ETH, btc(99))
    assert s.bond.total_supply() == bonds
    assert s.stable.balance_of(ANT) == ETH
    assert s.oracle.update_round() == 0


def test_buy_before_start(market):
    set_price(market, btc(99))
    with pytest.raises(EpochNotStarted):
        market.treasury.connect(ANT).buy_bonds(ETH, btc(99))


def test_buy_after_migration(open_market):
    s = open_market
    s.hand_over_ownership()
    s.treasury.connect(OPERATOR).migrate(OPERATOR)
    with pytest.raises(Migrated):
        s.treasury.connect(ANT).buy_bonds(ETH, btc(99))


def test_buy_without_permission(open_market):
    open_market.bond.connect(OPERATOR).transfer_operator(ANT)
    set_price(open_market, btc(99))
    with pytest.raises(InsufficientPermission):
        open_market.treasury.connect(ANT).buy_bonds(ETH, btc(99))


# ---- redeem -------------------------------------------------------------------


def test_reserve_after_allocation(redeemable):
    # 50k supply at 1.06 → 3k seigniorage, 2% dev, the rest covers bonds
    assert redeemable.treasury.get_reserve() == 2_940 * ETH
    assert redeemable.stable.balance_of(redeemable.treasury.address) == 2_940 * ETH


def test_redeem_above_ceiling(redeemable):
    s, t = redeemable, redeemable.treasury
    price = btc(106)
    _give_bonds(s, ANT, ETH)
    rounds = s.oracle.update_round()

    receipt = t.connect(ANT).redeem_bonds(ETH, price)

    assert receipt.emitted("RedeemedBonds", address=t.address, **{"from": ANT, "amount": ETH})
    assert s.bond.balance_of(ANT) == 0
    assert s.stable.balance_of(ANT) == ETH
    assert t.get_reserve() == 2_939 * ETH
    assert s.oracle.update_round() == rounds + 1


def test_redeem_drains_budget_and_floors_reserve(redeemable):
    s, t = redeemable, redeemable.treasury
    s.stable.connect(OPERATOR).transfer(t.address, ETH)
    budget = s.stable.balance_of(t.address)
    assert budget == 2_941 * ETH
    _give_bonds(s, ANT, budget)

    t.connect(ANT).redeem_bonds(budget, btc(106))

    assert s.stable.balance_of(ANT) == budget
    assert s.stable.balance_of(t.address) == 0
    assert t.get_reserve() == 0


def test_redeem_over_budget(redeemable):
    s, t = redeemable, redeemable.treasury
    budget = s.stable.balance_of(t.address)
    _give_bonds(s, ANT, budget + ETH)
    with pytest.raises(InsufficientBudget, match="Treasury: treasury has no more budget"):
        t.connect(ANT).redeem_bonds(budget + ETH, btc(106))
    assert s.bond.balance_of(ANT) == budget + ETH


@pytest.mark.parametrize("price", [btc(104), btc(105)])
def test_redeem_at_or_below_ceiling_is_not_eligible(redeemable, price):
    set_price(redeemable, price)
    _give_bonds(redeemable, ANT, ETH)
    with pytest.raises(PriceNotEligible, match="not eligible for kbond redemption"):
        redeemable.treasury.connect(ANT).redeem_bonds(ETH, price)


def test_redeem_with_moved_price(redeemable):
    _give_bonds(redeemable, ANT, ETH)
    with pytest.raises(PriceMoved):
        redeemable.treasury.connect(ANT).redeem_bonds(ETH, ETH)


def test_redeem_zero_amount(redeemable):
    with pytest.raises(ZeroAmount, match="cannot redeem kbonds with zero amount"):
        redeemable.treasury.connect(ANT).redeem_bonds(0, btc(106))


def test_redeem_after_migration(redeemable):
    s = redeemable
    s.hand_over_ownership()
    s.treasury.connect(OPERATOR).migrate(OPERATOR)
    with pytest.raises(Migrated):
        s.treasury.connect(ANT).redeem_bonds(ETH, btc(106))
