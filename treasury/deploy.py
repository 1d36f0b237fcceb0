"""
treasury.deploy — wire up a complete KBTC system on a host.

    host = Host()
    system = deploy_system(host, operator)
    system.hand_over_operators()          # treasury becomes operator of the core
    host.advance_time(DAY)

Deploys the three ledgers, a settable oracle (used for both bond and
seigniorage prices), a boardroom, a dev fund and a stable fund, and a
treasury whose first epoch starts `start_delay` seconds after deployment.
The dev and stable fund operators are handed to the treasury straight away.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from contracts.boardroom import Boardroom
from contracts.fund import SimpleFund
from contracts.oracle import SettableOracle
from contracts.token import BasisAsset
from execution.runtime.host import Host

from .config import DAY, TreasuryConfig, get_config
from .contract import Treasury


@dataclass
class System:
    host: Host
    operator: bytes
    stable: BasisAsset
    bond: BasisAsset
    share: BasisAsset
    oracle: SettableOracle
    boardroom: Boardroom
    dev_fund: SimpleFund
    stable_fund: SimpleFund
    treasury: Treasury

    def core_tokens(self) -> Tuple[BasisAsset, BasisAsset, BasisAsset]:
        return (self.stable, self.bond, self.share)

    def operated(self) -> Iterator[object]:
        """Contracts the treasury must operate: the three ledgers and the boardroom."""
        yield from self.core_tokens()
        yield self.boardroom

    def hand_over_operators(self, treasury: Optional[Treasury] = None) -> None:
        target = (treasury or self.treasury).address
        for contract in self.operated():
            contract.connect(self.operator).transfer_operator(target)

    def hand_over_ownership(self, treasury: Optional[Treasury] = None) -> None:
        target = (treasury or self.treasury).address
        for token in self.core_tokens():
            token.connect(self.operator).transfer_ownership(target)


def deploy_treasury(
    host: Host,
    deployer: bytes,
    system: System,
    *,
    start_time: int,
    period: Optional[int] = None,
    requires_initialization: bool = False,
    config: Optional[TreasuryConfig] = None,
) -> Treasury:
    return host.deploy(
        Treasury,
        deployer,
        system.stable.address,
        system.bond.address,
        system.share.address,
        system.oracle.address,
        system.oracle.address,
        system.boardroom.address,
        system.dev_fund.address,
        system.stable_fund.address,
        start_time,
        period,
        requires_initialization=requires_initialization,
        config=config,
    )


def deploy_system(
    host: Host,
    operator: bytes,
    *,
    start_delay: int = DAY,
    period: Optional[int] = None,
    config: Optional[TreasuryConfig] = None,
) -> System:
    cfg = config or get_config()
    stable = host.deploy(BasisAsset, operator, "KBTC", "KBTC")
    bond = host.deploy(BasisAsset, operator, "KBOND", "KBOND")
    share = host.deploy(BasisAsset, operator, "KLON", "KLON")
    oracle = host.deploy(SettableOracle, operator, cfg.peg_price)
    boardroom = host.deploy(Boardroom, operator, stable.address)
    dev_fund = host.deploy(SimpleFund, operator)
    stable_fund = host.deploy(SimpleFund, operator)

    system = System(
        host=host,
        operator=operator,
        stable=stable,
        bond=bond,
        share=share,
        oracle=oracle,
        boardroom=boardroom,
        dev_fund=dev_fund,
        stable_fund=stable_fund,
        treasury=None,  # type: ignore[arg-type]
    )
    system.treasury = deploy_treasury(
        host,
        operator,
        system,
        start_time=host.now + start_delay,
        period=period,
        config=cfg,
    )
    for fund in (dev_fund, stable_fund):
        fund.connect(operator).transfer_operator(system.treasury.address)
    return system


__all__ = ["System", "deploy_system", "deploy_treasury"]
