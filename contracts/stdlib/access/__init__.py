# -*- coding: utf-8 -*-
"""
contracts.stdlib.access
=======================

Access-control mixins for KBTC Python contracts.

- `Ownable`  : one owner, set to the deployer; owner-only ownership transfer.
- `Operator` : Ownable plus an operator (also the deployer initially) that the
               owner can reassign. Token supply control, reward allocation and
               treasury administration are operator-only.

Storage layout (by convention)
------------------------------
- key `b"access:owner"`    → owner address (absent once renounced)
- key `b"access:operator"` → operator address

Events
------
- "OwnershipTransferred" args: {"previous_owner": bytes, "new_owner": bytes}
- "OperatorTransferred"  args: {"previous_operator": bytes, "new_operator": bytes}
"""
from __future__ import annotations

from .operator import OPERATOR_KEY, Operator
from .ownable import OWNER_KEY, Ownable

__all__ = ["OWNER_KEY", "OPERATOR_KEY", "Ownable", "Operator"]
