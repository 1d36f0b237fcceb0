"""
Treasury — epoch-gated seigniorage and bond market for KBTC
===========================================================

The treasury is the operator of the stable (KBTC), bond (KBOND) and share
(KLON) ledgers and of the boardroom. Once per epoch it mints new stable supply
when the price is above peg and pays it out through the allocation waterfall
(see treasury.allocation); in between it sells bonds below peg and redeems
them above the price ceiling.

Entrypoints
-----------
    allocate_seigniorage() -> Waterfall
    buy_bonds(amount, target_price) -> int
    redeem_bonds(amount, target_price) -> int
    initialize() -> None
    migrate(target) -> None
    set_period(period)                                   [operator]
    set_dev_fund(address), set_dev_fund_allocation_rate(rate)       [operator]
    set_stable_fund(address), set_stable_fund_allocation_rate(rate) [operator]

Guards run in a fixed order and before any write: lifecycle (Migrated),
initialization (successor instances only), epoch, treasury permissions, then
input validation. Local bookkeeping is written before collaborators are called.

Events
------
    DevFundFunded / TreasuryFunded / StableFundFunded / BoardroomFunded {timestamp, amount}
    BoughtBonds / RedeemedBonds {from, amount}
    Initialized {executor, at}
    Migration {target}
    DevFundChanged / StableFundChanged {operator, new_fund}
    DevFundRateChanged / StableFundRateChanged {operator, rate}
    PeriodChanged {period}
"""

from __future__ import annotations

import logging
from typing import Dict, Final, Optional, Tuple

from contracts.stdlib.access import Operator
from contracts.stdlib.contract import external, view
from contracts.stdlib.control import nonreentrant
from core.address import ZERO_ADDRESS, short

from . import lifecycle as lc
from .allocation import (
    BOARDROOM,
    DEV_FUND,
    FUNDED_EVENTS,
    STABLE_FUND,
    Waterfall,
    bond_capacity,
    circulating_supply,
    compute_waterfall,
)
from .bonds import BondMarket
from .config import TreasuryConfig, get_config
from .epoch import EpochGate
from .errors import (
    CallerNotOperator,
    InsufficientPermission,
    InvalidAddress,
    InvalidRate,
    NotInitialized,
    ValidationError,
)
from .migration import MigrationController
from .price_feed import K_BOND_ORACLE, K_SEIGNIORAGE_ORACLE, PriceFeed

log = logging.getLogger(__name__)

# ── storage keys ──────────────────────────────────────────────────────────────

K_STABLE: Final[bytes] = b"treasury:stable"
K_BOND: Final[bytes] = b"treasury:bond"
K_SHARE: Final[bytes] = b"treasury:share"
K_BOARDROOM: Final[bytes] = b"treasury:boardroom"
K_DEV_FUND: Final[bytes] = b"treasury:dev_fund"
K_STABLE_FUND: Final[bytes] = b"treasury:stable_fund"
K_DEV_RATE: Final[bytes] = b"treasury:dev_fund_rate"
K_STABLE_RATE: Final[bytes] = b"treasury:stable_fund_rate"
K_RESERVE: Final[bytes] = b"treasury:accumulated_seigniorage"
K_PEG: Final[bytes] = b"treasury:peg_price"
K_CEILING: Final[bytes] = b"treasury:price_ceiling"
K_ORACLE_UNIT: Final[bytes] = b"treasury:oracle_unit"
K_REQUIRES_INIT: Final[bytes] = b"treasury:requires_initialization"

GUARD: Final[bytes] = b"treasury"
ALLOCATION_REASON: Final[str] = "Treasury: Seigniorage Allocation"


class Treasury(Operator):
    operator_error = CallerNotOperator

    def __init__(self, host, address: bytes) -> None:
        super().__init__(host, address)
        self._epoch = EpochGate(self)
        self._bond_feed = PriceFeed(self, K_BOND_ORACLE, "bond")
        self._seigniorage_feed = PriceFeed(self, K_SEIGNIORAGE_ORACLE, "seigniorage")
        self._bonds = BondMarket(self, self._bond_feed)
        self._migration = MigrationController(self)

    def constructor(
        self,
        stable: bytes,
        bond: bytes,
        share: bytes,
        bond_oracle: bytes,
        seigniorage_oracle: bytes,
        boardroom: bytes,
        dev_fund: bytes,
        stable_fund: bytes,
        start_time: int,
        period: Optional[int] = None,
        *,
        start_epoch: int = 0,
        requires_initialization: bool = False,
        config: Optional[TreasuryConfig] = None,
    ) -> None:
        super().constructor()
        cfg = config or get_config()
        self._require_pricing(cfg)

        for key, addr in (
            (K_STABLE, stable),
            (K_BOND, bond),
            (K_SHARE, share),
            (K_BOND_ORACLE, bond_oracle),
            (K_SEIGNIORAGE_ORACLE, seigniorage_oracle),
            (K_BOARDROOM, boardroom),
            (K_DEV_FUND, dev_fund),
            (K_STABLE_FUND, stable_fund),
        ):
            self._set_address(key, self._require_address(addr))

        self._set_uint(K_PEG, cfg.peg_price)
        self._set_uint(K_CEILING, cfg.price_ceiling)
        self._set_uint(K_ORACLE_UNIT, cfg.oracle_unit)
        self._set_uint(K_DEV_RATE, cfg.dev_fund_allocation_rate)
        self._set_uint(K_STABLE_RATE, cfg.stable_fund_allocation_rate)
        self._set_bool(K_REQUIRES_INIT, requires_initialization)
        self._epoch.setup(start_time, cfg.period if period is None else period, start_epoch)

    # ── guards ────────────────────────────────────────────────────────────────

    def _require_active(self) -> None:
        lc.require_active(self.lifecycle())

    def _require_initialized(self) -> None:
        if self.requires_initialization() and not self.initialized():
            raise NotInitialized()

    def _check_core_permissions(self) -> None:
        """The treasury must be operator of every core ledger and the boardroom."""
        for name, addr in self._core_collaborators():
            if self._at(addr).operator() != self.address:
                raise InsufficientPermission(data={"collaborator": name})

    @staticmethod
    def _require_address(addr: bytes) -> bytes:
        if addr == ZERO_ADDRESS:
            raise InvalidAddress()
        return addr

    @staticmethod
    def _require_rate(rate: int) -> int:
        if not isinstance(rate, int) or not 0 <= rate <= 100:
            raise InvalidRate(data={"rate": rate})
        return rate

    @classmethod
    def _require_pricing(cls, cfg: TreasuryConfig) -> None:
        cls._require_rate(cfg.dev_fund_allocation_rate)
        cls._require_rate(cfg.stable_fund_allocation_rate)
        for name in ("peg_price", "oracle_unit"):
            value = getattr(cfg, name)
            if not isinstance(value, int) or value <= 0:
                raise ValidationError(f"Treasury: {name} must be positive", data={name: value})
        if not isinstance(cfg.ceiling_percent, int) or cfg.ceiling_percent < 100:
            raise ValidationError(
                "Treasury: price ceiling below peg", data={"ceiling_percent": cfg.ceiling_percent}
            )

    def _guard_admin(self) -> None:
        self._require_active()
        self._only_operator()

    # ── internal state ────────────────────────────────────────────────────────

    def _core_collaborators(self) -> Tuple[Tuple[str, bytes], ...]:
        return (
            ("stable", self.stable()),
            ("bond", self.bond()),
            ("share", self.share()),
            ("boardroom", self.boardroom()),
        )

    def core_tokens(self) -> Tuple[bytes, bytes, bytes]:
        return (self.stable(), self.bond(), self.share())

    def _set_reserve(self, amount: int) -> None:
        self._set_uint(K_RESERVE, amount)

    def _set_lifecycle(self, state: lc.Lifecycle) -> None:
        self._set_address(lc.K_SUCCESSOR, lc.encode(state))

    # ── views ─────────────────────────────────────────────────────────────────

    @view
    def stable(self) -> bytes:
        return self._get_address(K_STABLE)

    @view
    def bond(self) -> bytes:
        return self._get_address(K_BOND)

    @view
    def share(self) -> bytes:
        return self._get_address(K_SHARE)

    @view
    def boardroom(self) -> bytes:
        return self._get_address(K_BOARDROOM)

    @view
    def dev_fund(self) -> bytes:
        return self._get_address(K_DEV_FUND)

    @view
    def stable_fund(self) -> bytes:
        return self._get_address(K_STABLE_FUND)

    @view
    def bond_oracle(self) -> bytes:
        return self._bond_feed.oracle

    @view
    def seigniorage_oracle(self) -> bytes:
        return self._seigniorage_feed.oracle

    @view
    def dev_fund_allocation_rate(self) -> int:
        return self._get_uint(K_DEV_RATE)

    @view
    def stable_fund_allocation_rate(self) -> int:
        return self._get_uint(K_STABLE_RATE)

    @view
    def peg_price(self) -> int:
        return self._get_uint(K_PEG)

    @view
    def price_ceiling(self) -> int:
        return self._get_uint(K_CEILING)

    @view
    def oracle_unit(self) -> int:
        return self._get_uint(K_ORACLE_UNIT)

    @view
    def get_reserve(self) -> int:
        return self._get_uint(K_RESERVE)

    @view
    def get_current_epoch(self) -> int:
        return self._epoch.epoch

    @view
    def next_epoch_point(self) -> int:
        return self._epoch.next_epoch_point()

    @view
    def get_period(self) -> int:
        return self._epoch.period

    @view
    def get_start_time(self) -> int:
        return self._epoch.start_time

    @view
    def lifecycle(self) -> lc.Lifecycle:
        return lc.decode(self._get(lc.K_SUCCESSOR))

    @view
    def migrated(self) -> bool:
        return self.lifecycle().migrated

    @view
    def successor(self) -> bytes:
        return lc.encode(self.lifecycle())

    @view
    def initialized(self) -> bool:
        return self._migration.initialized

    @view
    def requires_initialization(self) -> bool:
        return self._get_bool(K_REQUIRES_INIT)

    @view
    def get_bond_oracle_price(self) -> int:
        return self._bond_feed.read_price()

    @view
    def get_seigniorage_oracle_price(self) -> int:
        return self._seigniorage_feed.read_price()

    # ── lifecycle ─────────────────────────────────────────────────────────────

    @external
    @nonreentrant(GUARD)
    def initialize(self) -> None:
        self._migration.initialize(self.msg_sender)

    @external
    @nonreentrant(GUARD)
    def migrate(self, target: bytes) -> None:
        self._require_active()
        self._only_operator()
        self._check_core_permissions()
        self._migration.migrate(target)

    # ── seigniorage ───────────────────────────────────────────────────────────

    @external
    @nonreentrant(GUARD)
    def allocate_seigniorage(self) -> Waterfall:
        self._require_active()
        self._require_initialized()
        self._epoch.assert_epoch_open()
        self._epoch.assert_allocatable()
        self._check_core_permissions()

        self._seigniorage_feed.refresh()
        price = self._seigniorage_feed.read_price()

        reserve = self.get_reserve()
        waterfall = compute_waterfall(
            price,
            self.peg_price(),
            circulating_supply(self._at(self.stable()).total_supply(), reserve),
            bond_capacity(self._at(self.bond()).total_supply(), reserve),
            self.dev_fund_allocation_rate(),
            self.stable_fund_allocation_rate(),
        )

        epoch = self._epoch.advance()
        if waterfall.treasury_reserve:
            self._set_reserve(reserve + waterfall.treasury_reserve)

        self._distribute(waterfall)
        log.info(
            "seigniorage allocated",
            extra={"epoch": epoch, "price": price, **waterfall.to_dict()},
        )
        return waterfall

    def _distribute(self, waterfall: Waterfall) -> None:
        stable_addr = self.stable()
        stable = self._at(stable_addr)
        sinks: Dict[str, bytes] = {
            DEV_FUND: self.dev_fund(),
            STABLE_FUND: self.stable_fund(),
            BOARDROOM: self.boardroom(),
        }
        timestamp = self.now

        for dest, amount in waterfall.items():
            if not amount:
                continue
            stable.mint(self.address, amount)
            if dest == BOARDROOM:
                stable.approve(sinks[dest], amount)
                self._at(sinks[dest]).allocate_seigniorage(amount)
            elif dest in sinks:
                stable.approve(sinks[dest], amount)
                self._at(sinks[dest]).deposit(stable_addr, amount, ALLOCATION_REASON)
            self._emit(FUNDED_EVENTS[dest], timestamp=timestamp, amount=amount)

    # ── bonds ─────────────────────────────────────────────────────────────────

    def _guard_market(self) -> None:
        self._require_active()
        self._require_initialized()
        self._epoch.assert_epoch_open()
        self._check_core_permissions()

    @external
    @nonreentrant(GUARD)
    def buy_bonds(self, amount: int, target_price: int) -> int:
        self._guard_market()
        minted = self._bonds.buy(self.msg_sender, amount, target_price)
        self._bond_feed.refresh()
        return minted

    @external
    @nonreentrant(GUARD)
    def redeem_bonds(self, amount: int, target_price: int) -> int:
        self._guard_market()
        redeemed = self._bonds.redeem(self.msg_sender, amount, target_price)
        self._bond_feed.refresh()
        return redeemed

    # ── administration ────────────────────────────────────────────────────────

    @external
    def set_period(self, period: int) -> None:
        self._guard_admin()
        self._epoch.set_period(period)
        self._emit("PeriodChanged", period=period)

    @external
    def set_dev_fund(self, new_fund: bytes) -> None:
        self._guard_admin()
        self._set_address(K_DEV_FUND, self._require_address(new_fund))
        self._emit("DevFundChanged", operator=self.msg_sender, new_fund=new_fund)

    @external
    def set_dev_fund_allocation_rate(self, rate: int) -> None:
        self._guard_admin()
        self._set_uint(K_DEV_RATE, self._require_rate(rate))
        self._emit("DevFundRateChanged", operator=self.msg_sender, rate=rate)

    @external
    def set_stable_fund(self, new_fund: bytes) -> None:
        self._guard_admin()
        self._set_address(K_STABLE_FUND, self._require_address(new_fund))
        self._emit("StableFundChanged", operator=self.msg_sender, new_fund=new_fund)

    @external
    def set_stable_fund_allocation_rate(self, rate: int) -> None:
        self._guard_admin()
        self._set_uint(K_STABLE_RATE, self._require_rate(rate))
        self._emit("StableFundRateChanged", operator=self.msg_sender, rate=rate)

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"Treasury({short(self.address)}, epoch={self.get_current_epoch()})"


__all__ = ["Treasury"]
