"""
treasury.allocation — the seigniorage waterfall.

Pure integer arithmetic; no storage or host access. Given a price observation
and supply figures, `compute_waterfall` carves the newly minted seigniorage
into four reserves in fixed priority order:

    seigniorage = circulating * (price - peg) // peg        (0 if price <= peg)
    dev         = seigniorage * dev_rate // 100
    remaining   = seigniorage - dev
    treasury    = min(remaining, bond_capacity)
    leftover    = remaining - treasury
    stable      = leftover * stable_rate // 100
    boardroom   = leftover - stable

The four reserves always sum to `seigniorage` exactly.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterator, Tuple

from contracts.stdlib.math import percent_of, require_percent, require_u256, sub_floor

# Destination names, in payout order. Used for event names and reporting.
DEV_FUND = "dev_fund"
TREASURY = "treasury"
STABLE_FUND = "stable_fund"
BOARDROOM = "boardroom"

FUNDED_EVENTS: Dict[str, str] = {
    DEV_FUND: "DevFundFunded",
    TREASURY: "TreasuryFunded",
    STABLE_FUND: "StableFundFunded",
    BOARDROOM: "BoardroomFunded",
}


@dataclass(frozen=True)
class Waterfall:
    dev_reserve: int = 0
    treasury_reserve: int = 0
    stable_reserve: int = 0
    boardroom_reserve: int = 0

    @property
    def seigniorage(self) -> int:
        return self.dev_reserve + self.treasury_reserve + self.stable_reserve + self.boardroom_reserve

    @property
    def is_empty(self) -> bool:
        return self.seigniorage == 0

    def items(self) -> Iterator[Tuple[str, int]]:
        """(destination, amount) pairs in payout order, zero amounts included."""
        yield DEV_FUND, self.dev_reserve
        yield TREASURY, self.treasury_reserve
        yield STABLE_FUND, self.stable_reserve
        yield BOARDROOM, self.boardroom_reserve

    def to_dict(self) -> Dict[str, int]:
        d = asdict(self)
        d["seigniorage"] = self.seigniorage
        return d


EMPTY = Waterfall()


def circulating_supply(stable_total_supply: int, reserve: int) -> int:
    """Stable supply not held as the treasury's own redemption reserve."""
    return sub_floor(stable_total_supply, reserve)


def bond_capacity(bond_total_supply: int, reserve: int) -> int:
    """Bonds not already covered by the reserve; never negative."""
    return sub_floor(bond_total_supply, reserve)


def compute_seigniorage(price: int, peg_price: int, circulating: int) -> int:
    require_u256(price, circulating)
    if peg_price <= 0:
        raise ValueError("peg_price must be > 0")
    if price <= peg_price:
        return 0
    return circulating * (price - peg_price) // peg_price


def compute_waterfall(
    price: int,
    peg_price: int,
    circulating: int,
    outstanding_bond_capacity: int,
    dev_rate: int,
    stable_rate: int,
) -> Waterfall:
    require_percent(dev_rate)
    require_percent(stable_rate)
    require_u256(outstanding_bond_capacity)

    seigniorage = compute_seigniorage(price, peg_price, circulating)
    if seigniorage == 0:
        return EMPTY

    dev = percent_of(seigniorage, dev_rate)
    remaining = seigniorage - dev
    treasury = min(remaining, outstanding_bond_capacity)
    leftover = remaining - treasury
    stable = percent_of(leftover, stable_rate)

    return Waterfall(
        dev_reserve=dev,
        treasury_reserve=treasury,
        stable_reserve=stable,
        boardroom_reserve=leftover - stable,
    )


__all__ = [
    "Waterfall",
    "EMPTY",
    "FUNDED_EVENTS",
    "DEV_FUND",
    "TREASURY",
    "STABLE_FUND",
    "BOARDROOM",
    "circulating_supply",
    "bond_capacity",
    "compute_seigniorage",
    "compute_waterfall",
]
