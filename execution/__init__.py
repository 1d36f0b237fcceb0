"""
KBTC execution layer — deterministic in-process host for Python contracts.

The host keeps contract storage behind a checkpointing journal, runs every
operation in nested call frames and publishes events only for committed work.
Import the pieces explicitly from their subpackages:

    from execution.runtime.host import Host
    from execution.errors import Revert
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
