"""
execution.runtime — operation orchestration.

- host : Host (deploy / transact / call / query) plus entrypoint markers

    from execution.runtime import Host
"""

from __future__ import annotations

from .host import ENTRYPOINT_ATTR, EXTERNAL, VIEW, Host

__all__ = ["Host", "ENTRYPOINT_ATTR", "EXTERNAL", "VIEW"]
