# -*- coding: utf-8 -*-
"""
tests.property package bootstrap.

Registers the Hypothesis profiles used by the property suites and exposes the
amount strategies shared between them.

Environment knobs:
- HYPOTHESIS_PROFILE=dev|ci|stress
- CI=true (auto-pick the 'ci' profile if HYPOTHESIS_PROFILE not set)
"""
from __future__ import annotations

import os
from typing import Final

from hypothesis import HealthCheck, Verbosity, settings
from hypothesis import strategies as st

settings.register_profile(
    "dev",
    settings(max_examples=100, deadline=None, suppress_health_check=(HealthCheck.too_slow,)),
)
settings.register_profile(
    "ci",
    settings(
        max_examples=300,
        deadline=None,
        suppress_health_check=(HealthCheck.too_slow, HealthCheck.filter_too_much),
        verbosity=Verbosity.verbose,
        derandomize=True,
    ),
)
settings.register_profile(
    "stress",
    settings(max_examples=2000, deadline=None, suppress_health_check=(HealthCheck.too_slow,)),
)


def _env_truthy(name: str) -> bool:
    return (os.getenv(name) or "").lower() not in ("", "0", "false", "no", "off")


_active: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _env_truthy("CI") else "dev")
settings.load_profile(_active)


PEG: Final[int] = 10**8

# prices from zero up to 100x peg, in peg units
prices = st.integers(min_value=0, max_value=100 * PEG)
# token amounts with 18 decimals, up to a trillion tokens
amounts = st.integers(min_value=0, max_value=10**30)
rates = st.integers(min_value=0, max_value=100)


__all__ = ["PEG", "prices", "amounts", "rates", "st"]
