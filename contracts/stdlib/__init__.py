# -*- coding: utf-8 -*-
"""
contracts.stdlib
================

Standard library for KBTC Python contracts.

- contract : `Contract` base, `@external` / `@view` markers, `require`
- math     : integer-only helpers (U256 envelope, floor mul/div, percentages)
- access   : `Ownable` and `Operator` mixins
- control  : reentrancy guard

    from contracts.stdlib import Contract, external, view
"""
from __future__ import annotations

from .contract import Contract, ContractRef, Connection, external, require, view

__all__ = ["Contract", "ContractRef", "Connection", "external", "view", "require"]
