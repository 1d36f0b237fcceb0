# -*- coding: utf-8 -*-
"""
contracts.tests
================

Tests for the collaborator contracts (BasisAsset, SettableOracle, Boardroom,
SimpleFund) and the contract stdlib they are built from.

Block timestamps in these suites are plain integers, but the logging
formatters render wall-clock times; pinning TZ keeps captured output stable.
"""
from __future__ import annotations

import os


def _set_if_absent(key: str, value: str) -> None:
    """Set environment variable only if it's not already present."""
    if not os.environ.get(key):
        os.environ[key] = value


_set_if_absent("TZ", "UTC")

__all__: list[str] = []
