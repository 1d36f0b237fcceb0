"""
tests.unit
==========

Unit tests for the shared `core` helpers (addresses, structured logging).
Host, contract and treasury suites live beside their packages.
"""
