"""
treasury.bonds — peg-arbitrage bond market.

Below peg, the treasury sells bonds at a discount: burning `amount` of stable
mints `amount * peg // price` bonds. Above the redemption ceiling it buys them
back 1:1 out of its own stable balance.

The caller's `target_price` must equal the observed price exactly; any
movement between quote and execution fails with PriceMoved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from contracts.stdlib.math import mul_div_down

from .errors import InsufficientBudget, PriceMoved, PriceNotEligible, ZeroAmount

if TYPE_CHECKING:  # pragma: no cover
    from .contract import Treasury
    from .price_feed import PriceFeed


class BondMarket:
    def __init__(self, treasury: "Treasury", feed: "PriceFeed") -> None:
        self._t = treasury
        self._feed = feed

    def _quote(self, target_price: int) -> int:
        price = self._feed.read_price()
        if price != target_price:
            raise PriceMoved(data={"price": price, "target_price": target_price})
        return price

    def buy(self, buyer: bytes, amount: int, target_price: int) -> int:
        """Burn `amount` stable from `buyer`, mint discounted bonds. Returns bonds minted."""
        if amount <= 0:
            raise ZeroAmount("Treasury: cannot purchase kbonds with zero amount")
        price = self._quote(target_price)
        peg = self._t.peg_price()
        if not 0 < price < peg:
            raise PriceNotEligible(
                "Treasury: kbtcPrice not eligible for kbond purchase",
                data={"price": price, "peg_price": peg},
            )

        bond_amount = mul_div_down(amount, peg, price)
        self._t._at(self._t.stable()).burn_from(buyer, amount)
        self._t._at(self._t.bond()).mint(buyer, bond_amount)
        self._t._emit("BoughtBonds", **{"from": buyer, "amount": amount})
        return bond_amount

    def redeem(self, redeemer: bytes, amount: int, target_price: int) -> int:
        """Burn `amount` bonds from `redeemer`, pay out `amount` stable 1:1."""
        if amount <= 0:
            raise ZeroAmount("Treasury: cannot redeem kbonds with zero amount")
        price = self._quote(target_price)
        ceiling = self._t.price_ceiling()
        if price <= ceiling:
            raise PriceNotEligible(
                "Treasury: kbtcPrice not eligible for kbond redemption",
                data={"price": price, "price_ceiling": ceiling},
            )

        stable = self._t._at(self._t.stable())
        budget = stable.balance_of(self._t.address)
        if amount > budget:
            raise InsufficientBudget(data={"amount": amount, "budget": budget})

        reserve = self._t.get_reserve()
        self._t._set_reserve(reserve - min(reserve, amount))
        self._t._at(self._t.bond()).burn_from(redeemer, amount)
        stable.transfer(redeemer, amount)
        self._t._emit("RedeemedBonds", **{"from": redeemer, "amount": amount})
        return amount


__all__ = ["BondMarket"]
