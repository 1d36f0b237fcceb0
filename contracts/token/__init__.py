"""
contracts.token — operator-controlled fungible token ledger.

    from contracts.token import BasisAsset

KBTC (stable), KBOND (bond) and KLON (share) are all `BasisAsset` instances
that differ only in name and symbol.
"""
from __future__ import annotations

from .contract import BasisAsset

__all__ = ["BasisAsset"]
