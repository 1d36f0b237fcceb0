"""
Nox multi-session runner for the KBTC treasury packages.

Sessions:
  - lint     : ruff + black + mypy over Python sources
  - unit     : all suites except property tests
  - property : hypothesis property tests (tests/property)
  - cov      : full run under coverage with a terminal report

Pass extra args to pytest like:
  nox -s unit -- -k "bonds and not cli" -vv
"""

from __future__ import annotations

from pathlib import Path

import nox

# Reuse envs to speed up local iteration
nox.options.reuse_venv = True
nox.options.stop_on_first_error = False

REPO_ROOT = Path(__file__).resolve().parents[1]
PACKAGES = ["core", "execution", "contracts", "treasury"]
PY_PATHS = [*PACKAGES, "tests"]

TEST_PYTHONS = ["3.10", "3.11", "3.12"]


def _install_test_stack(session: nox.Session) -> None:
    session.run("python", "-m", "pip", "install", "--upgrade", "pip", silent=True)
    session.install("-e", f"{REPO_ROOT}[test]")


@nox.session(name="lint", python="3.11")
def lint(session: nox.Session) -> None:
    """Static analysis: ruff, black (check), mypy."""
    session.install("ruff>=0.6.0", "black>=24.3.0", "mypy>=1.10.0")
    session.install("-e", str(REPO_ROOT))
    with session.chdir(str(REPO_ROOT)):
        session.run("ruff", "check", *PY_PATHS)
        session.run("black", "--check", *PY_PATHS)
        session.run(
            "mypy",
            "--pretty",
            "--show-error-codes",
            "--ignore-missing-imports",
            *PACKAGES,
        )


@nox.session(name="unit", python=TEST_PYTHONS)
def unit(session: nox.Session) -> None:
    """Host, contract and treasury suites."""
    _install_test_stack(session)
    with session.chdir(str(REPO_ROOT)):
        session.run(
            "pytest",
            "execution/tests",
            "contracts/tests",
            "treasury/tests",
            "tests/unit",
            *session.posargs,
        )


@nox.session(name="property", python="3.11")
def property_(session: nox.Session) -> None:
    """Hypothesis property tests; HYPOTHESIS_PROFILE=ci raises the example count."""
    _install_test_stack(session)
    with session.chdir(str(REPO_ROOT)):
        session.run("pytest", "tests/property", "-vv", *session.posargs)


@nox.session(name="cov", python="3.11")
def cov(session: nox.Session) -> None:
    """Full run under coverage."""
    _install_test_stack(session)
    session.install("coverage>=7.4.0")
    with session.chdir(str(REPO_ROOT)):
        session.run(
            "coverage", "run", "--source", ",".join(PACKAGES), "-m", "pytest", *session.posargs
        )
        session.run("coverage", "report", "-m")
