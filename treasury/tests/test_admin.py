import pytest

from core.address import ZERO_ADDRESS, det_address
from execution.errors import InvalidAccess
from treasury.config import DAY, TreasuryConfig
from treasury.deploy import deploy_system
from treasury.errors import (
    CallerNotOperator,
    InvalidAddress,
    InvalidRate,
    ValidationError,
)

from .conftest import ANT, BTC, OPERATOR, btc, set_price


def test_constructor_state(system, host, config):
    t = system.treasury
    assert t.stable() == system.stable.address
    assert t.bond() == system.bond.address
    assert t.share() == system.share.address
    assert t.boardroom() == system.boardroom.address
    assert t.dev_fund() == system.dev_fund.address
    assert t.stable_fund() == system.stable_fund.address
    assert t.bond_oracle() == system.oracle.address
    assert t.seigniorage_oracle() == system.oracle.address
    assert t.peg_price() == BTC
    assert t.price_ceiling() == BTC * 105 // 100
    assert t.oracle_unit() == 10**18
    assert t.dev_fund_allocation_rate() == 2
    assert t.stable_fund_allocation_rate() == 10
    assert t.get_period() == DAY
    assert t.get_start_time() == host.now + DAY
    assert t.get_current_epoch() == 0
    assert t.get_reserve() == 0
    assert not t.migrated()
    assert t.successor() == ZERO_ADDRESS
    assert t.operator() == OPERATOR
    assert t.get_bond_oracle_price() == BTC
    assert t.get_seigniorage_oracle_price() == BTC


def test_constructor_rejects_zero_collaborator(system, host):
    from treasury.contract import Treasury

    with pytest.raises(InvalidAddress):
        host.deploy(
            Treasury,
            OPERATOR,
            system.stable.address,
            ZERO_ADDRESS,
            system.share.address,
            system.oracle.address,
            system.oracle.address,
            system.boardroom.address,
            system.dev_fund.address,
            system.stable_fund.address,
            host.now,
        )


def test_config_overrides_reach_the_contract(host):
    cfg = TreasuryConfig(ceiling_percent=110, dev_fund_allocation_rate=5, period=3600)
    t = deploy_system(host, OPERATOR, config=cfg).treasury
    assert t.price_ceiling() == BTC * 110 // 100
    assert t.dev_fund_allocation_rate() == 5
    assert t.get_period() == 3600


@pytest.mark.parametrize(
    "fields, error, match",
    [
        ({"dev_fund_allocation_rate": 150}, InvalidRate, "Treasury: rate out of range"),
        ({"stable_fund_allocation_rate": -1}, InvalidRate, "Treasury: rate out of range"),
        ({"peg_price": 0}, ValidationError, "Treasury: peg_price must be positive"),
        ({"oracle_unit": 0}, ValidationError, "Treasury: oracle_unit must be positive"),
        ({"ceiling_percent": 99}, ValidationError, "Treasury: price ceiling below peg"),
        ({"period": 0}, ValidationError, "Epoch: period must be positive"),
    ],
)
def test_constructor_rejects_invalid_config(host, fields, error, match):
    with pytest.raises(error, match=match):
        deploy_system(host, OPERATOR, config=TreasuryConfig(**fields))


def test_set_rates(treasury):
    receipt = treasury.connect(OPERATOR).set_dev_fund_allocation_rate(5)
    assert receipt.emitted("DevFundRateChanged", operator=OPERATOR, rate=5)
    receipt = treasury.connect(OPERATOR).set_stable_fund_allocation_rate(0)
    assert receipt.emitted("StableFundRateChanged", operator=OPERATOR, rate=0)
    assert treasury.dev_fund_allocation_rate() == 5
    assert treasury.stable_fund_allocation_rate() == 0


@pytest.mark.parametrize("rate", [-1, 101])
def test_rates_out_of_range(treasury, rate):
    with pytest.raises(InvalidRate):
        treasury.connect(OPERATOR).set_dev_fund_allocation_rate(rate)
    with pytest.raises(InvalidRate):
        treasury.connect(OPERATOR).set_stable_fund_allocation_rate(rate)


def test_set_funds(treasury):
    new_dev, new_stable = det_address("dev2"), det_address("stable2")
    receipt = treasury.connect(OPERATOR).set_dev_fund(new_dev)
    assert receipt.emitted("DevFundChanged", operator=OPERATOR, new_fund=new_dev)
    receipt = treasury.connect(OPERATOR).set_stable_fund(new_stable)
    assert receipt.emitted("StableFundChanged", operator=OPERATOR, new_fund=new_stable)
    assert treasury.dev_fund() == new_dev
    assert treasury.stable_fund() == new_stable

    with pytest.raises(InvalidAddress):
        treasury.connect(OPERATOR).set_dev_fund(ZERO_ADDRESS)
    with pytest.raises(InvalidAddress):
        treasury.connect(OPERATOR).set_stable_fund(ZERO_ADDRESS)


def test_set_period_moves_the_boundary(treasury):
    start = treasury.get_start_time()
    receipt = treasury.connect(OPERATOR).set_period(3600)
    assert receipt.emitted("PeriodChanged", period=3600)
    assert treasury.get_period() == 3600
    assert treasury.next_epoch_point() == start

    with pytest.raises(ValidationError, match="Epoch: period must be positive"):
        treasury.connect(OPERATOR).set_period(0)


@pytest.mark.parametrize(
    "method, arg",
    [
        ("set_period", 60),
        ("set_dev_fund", det_address("x")),
        ("set_stable_fund", det_address("x")),
        ("set_dev_fund_allocation_rate", 1),
        ("set_stable_fund_allocation_rate", 1),
    ],
)
def test_admin_is_operator_only(treasury, method, arg):
    with pytest.raises(CallerNotOperator):
        getattr(treasury.connect(ANT), method)(arg)


def test_operator_can_be_handed_over(treasury):
    treasury.connect(OPERATOR).transfer_operator(ANT)
    treasury.connect(ANT).set_dev_fund_allocation_rate(3)
    with pytest.raises(CallerNotOperator):
        treasury.connect(OPERATOR).set_dev_fund_allocation_rate(4)


def test_internal_helpers_are_not_entrypoints(treasury, host):
    for method in ("_distribute", "_set_reserve", "core_tokens", "_check_core_permissions"):
        with pytest.raises(InvalidAccess):
            host.transact(OPERATOR, treasury.address, method)


VIEWS = (
    "stable",
    "bond",
    "share",
    "boardroom",
    "dev_fund",
    "stable_fund",
    "bond_oracle",
    "seigniorage_oracle",
    "dev_fund_allocation_rate",
    "stable_fund_allocation_rate",
    "peg_price",
    "price_ceiling",
    "oracle_unit",
    "get_reserve",
    "get_current_epoch",
    "next_epoch_point",
    "get_period",
    "get_start_time",
    "lifecycle",
    "migrated",
    "successor",
    "initialized",
    "requires_initialization",
    "get_bond_oracle_price",
    "get_seigniorage_oracle_price",
)


def _snapshot(system, host):
    contracts = (system.treasury, system.oracle, system.boardroom, system.dev_fund, system.stable_fund)
    return (
        host.block.height,
        host.block.timestamp,
        host.last_receipt,
        len(host.logs()),
        {c.address: list(host.storage.items(c.address)) for c in contracts + system.core_tokens()},
    )


def test_views_leave_no_trace(started, host):
    set_price(started, btc(106))
    started.treasury.connect(OPERATOR).allocate_seigniorage()
    before = _snapshot(started, host)

    first = {name: getattr(started.treasury, name)() for name in VIEWS}
    second = {name: getattr(started.treasury, name)() for name in VIEWS}

    assert first == second
    assert first["get_current_epoch"] == 1
    assert first["get_bond_oracle_price"] == btc(106)
    assert _snapshot(started, host) == before
