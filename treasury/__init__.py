"""
KBTC treasury — epoch-gated seigniorage allocation and bond market.

    from treasury import Treasury, compute_waterfall

Submodules
----------
- errors     : typed failures (TreasuryError and its categories)
- config     : env-driven pricing/allocation defaults
- lifecycle  : Active / Migrated(successor) state
- epoch      : EpochGate
- allocation : pure seigniorage waterfall
- price_feed : best-effort refresh / mandatory read oracle adapter
- bonds      : BondMarket buy/redeem
- migration  : initialize / migrate
- contract   : Treasury orchestrator
- deploy     : wire a complete system on a host
- cli        : typer tooling
"""

from __future__ import annotations

from .allocation import Waterfall, compute_waterfall
from .config import TreasuryConfig, get_config, load_config
from .contract import Treasury
from .lifecycle import ActiveState, MigratedState

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Treasury",
    "Waterfall",
    "compute_waterfall",
    "TreasuryConfig",
    "get_config",
    "load_config",
    "ActiveState",
    "MigratedState",
]
