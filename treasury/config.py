"""
treasury.config — pricing and allocation defaults for KBTC treasuries.

Configuration may be provided via environment variables. Safe defaults are
chosen so a local run works out of the box.

Environment variables (all optional):
  KBTC_TREASURY_PEG_PRICE          -> peg in price units (default: 100000000, one BTC unit)
  KBTC_TREASURY_CEILING_PERCENT    -> redemption ceiling, percent of peg (default: 105)
  KBTC_TREASURY_ORACLE_UNIT        -> amount passed to oracle.consult (default: 10**18)
  KBTC_TREASURY_DEV_FUND_RATE      -> dev fund share of seigniorage, percent (default: 2)
  KBTC_TREASURY_STABLE_FUND_RATE   -> stable fund share of the leftover, percent (default: 10)
  KBTC_TREASURY_PERIOD             -> epoch length in seconds (default: 86400)

Programmatic usage:
    from treasury.config import get_config
    cfg = get_config()
    ceiling = cfg.price_ceiling

A deployed treasury copies these values into its own storage at construction;
changing the environment afterwards does not affect running instances.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from functools import lru_cache
from typing import Dict, Mapping, Optional, Union

DAY = 86_400

ENV_PREFIX = "KBTC_TREASURY_"

# env suffix -> field name
_ENV_FIELDS = {
    "PEG_PRICE": "peg_price",
    "CEILING_PERCENT": "ceiling_percent",
    "ORACLE_UNIT": "oracle_unit",
    "DEV_FUND_RATE": "dev_fund_allocation_rate",
    "STABLE_FUND_RATE": "stable_fund_allocation_rate",
    "PERIOD": "period",
}


# ----------------------------- helpers -------------------------------------


def _int_env(name: str, value: Union[str, int]) -> int:
    if isinstance(value, int):
        return value
    s = str(value).strip().replace("_", "")
    try:
        if s.lower().startswith("0x"):
            return int(s, 16)
        if "e" in s.lower():
            # allow 1e18 style for unit-sized values
            base, _, exp = s.lower().partition("e")
            if int(exp) < 0:
                raise ValueError(exp)
            return int(base) * 10 ** int(exp)
        return int(s, 10)
    except ValueError:
        raise ValueError(f"{name}: expected an integer, got {value!r}") from None


# ------------------------------ dataclass ----------------------------------


@dataclass(frozen=True)
class TreasuryConfig:
    peg_price: int = 10**8
    ceiling_percent: int = 105
    oracle_unit: int = 10**18
    dev_fund_allocation_rate: int = 2
    stable_fund_allocation_rate: int = 10
    period: int = DAY

    @property
    def price_ceiling(self) -> int:
        """Redemption threshold: bonds redeem only while price is strictly above it."""
        return self.peg_price * self.ceiling_percent // 100

    def with_overrides(self, **changes: int) -> "TreasuryConfig":
        return _validate(replace(self, **changes))

    def to_dict(self) -> Dict[str, int]:
        d = asdict(self)
        d["price_ceiling"] = self.price_ceiling
        return d


def _validate(cfg: TreasuryConfig) -> TreasuryConfig:
    if cfg.peg_price <= 0:
        raise ValueError("peg_price must be > 0")
    if cfg.ceiling_percent < 100:
        raise ValueError("ceiling_percent must be ≥ 100")
    if cfg.oracle_unit <= 0:
        raise ValueError("oracle_unit must be > 0")
    if cfg.period <= 0:
        raise ValueError("period must be > 0")
    for name in ("dev_fund_allocation_rate", "stable_fund_allocation_rate"):
        rate = getattr(cfg, name)
        if not (0 <= rate <= 100):
            raise ValueError(f"{name} must be in [0,100]")
    return cfg


# ------------------------------ loader -------------------------------------


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int]]] = None,
) -> TreasuryConfig:
    """
    Build a TreasuryConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides keyed by field name; they win
          over the environment.
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    unknown = set(overrides) - set(_ENV_FIELDS.values())
    if unknown:
        raise ValueError(f"unknown config fields: {sorted(unknown)}")

    values: Dict[str, int] = {}
    for suffix, field_name in _ENV_FIELDS.items():
        var = ENV_PREFIX + suffix
        if field_name in overrides:
            values[field_name] = _int_env(field_name, overrides[field_name])
        elif var in env:
            values[field_name] = _int_env(var, env[var])

    return _validate(TreasuryConfig(**values))


@lru_cache(maxsize=1)
def get_config() -> TreasuryConfig:
    """
    Cached global config. Suitable for application bootstraps and module-level consumers.
    """
    return load_config()


__all__ = ["DAY", "TreasuryConfig", "load_config", "get_config"]
