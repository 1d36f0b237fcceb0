from __future__ import annotations

"""
treasury.cli
------------

Operator tooling for KBTC treasuries.

Examples
--------
# Break down one allocation at 2.10x peg
python -m treasury.cli waterfall --price 210000000 --supply 100000000000000000000000 \
  --bond-capacity 50000000000000000000000

# Upcoming epoch boundaries
python -m treasury.cli schedule --start 1700086400 --period 86400 --epochs 5

# Resolved configuration (env KBTC_TREASURY_* applied)
python -m treasury.cli config --json

# Deploy a full system on a fresh in-memory host and run one allocation
python -m treasury.cli simulate --price 210000000
"""

import datetime as _dt
import json
from typing import Any, Dict, Optional

import typer

from core import get_version
from core import logging as clog
from core.address import det_address, to_hex

from .allocation import bond_capacity, circulating_supply, compute_waterfall
from .config import get_config, load_config

app = typer.Typer(
    name="treasury",
    add_completion=False,
    no_args_is_help=True,
    help="Inspect and simulate KBTC treasury allocations.",
)

WAD = 10**18


# -------------------- utils --------------------


def _fmt_units(x: int, decimals: int = 18) -> str:
    whole, frac = divmod(x, 10**decimals)
    s = f"{whole}.{frac:0{decimals}d}".rstrip("0").rstrip(".")
    return s or "0"


def _emit(data: Dict[str, Any], json_out: bool, title: Optional[str] = None) -> None:
    if json_out:
        typer.echo(json.dumps(data, indent=2, sort_keys=True))
        return
    if title:
        typer.echo(title)
    for k, v in data.items():
        typer.echo(f"- {k}: {v}")


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"kbtc-treasury {get_version()}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show the version and exit."
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level (DEBUG, INFO, WARNING, ...)."),
    log_json: bool = typer.Option(False, "--log-json", help="Emit logs as JSON lines."),
) -> None:
    clog.configure(json=log_json, level=log_level)


# -------------------- commands --------------------


@app.command("waterfall")
def waterfall_cmd(
    price: int = typer.Option(..., "--price", help="Observed price in peg units."),
    supply: int = typer.Option(..., "--supply", help="Total stable supply."),
    bond_cap: int = typer.Option(0, "--bond-capacity", help="Bond total supply."),
    reserve: int = typer.Option(0, "--reserve", help="Treasury reserve (accumulated seigniorage)."),
    peg: Optional[int] = typer.Option(None, "--peg", help="Peg price (default from config)."),
    dev_rate: Optional[int] = typer.Option(None, "--dev-rate", help="Dev fund percent."),
    stable_rate: Optional[int] = typer.Option(None, "--stable-rate", help="Stable fund percent."),
    json_out: bool = typer.Option(False, "--json", help="Output result as JSON."),
) -> None:
    """Compute the allocation waterfall for one epoch."""
    cfg = get_config()
    peg = cfg.peg_price if peg is None else peg
    dev_rate = cfg.dev_fund_allocation_rate if dev_rate is None else dev_rate
    stable_rate = cfg.stable_fund_allocation_rate if stable_rate is None else stable_rate
    if peg <= 0:
        typer.echo("error: --peg must be > 0", err=True)
        raise typer.Exit(2)
    for name, rate in (("--dev-rate", dev_rate), ("--stable-rate", stable_rate)):
        if not 0 <= rate <= 100:
            typer.echo(f"error: {name} must be in [0,100]", err=True)
            raise typer.Exit(2)

    wf = compute_waterfall(
        price,
        peg,
        circulating_supply(supply, reserve),
        bond_capacity(bond_cap, reserve),
        dev_rate,
        stable_rate,
    )
    _emit(wf.to_dict(), json_out, title=f"Waterfall at price {price} (peg {peg})")


@app.command("schedule")
def schedule_cmd(
    start: int = typer.Option(..., "--start", help="Epoch start time (unix seconds)."),
    period: Optional[int] = typer.Option(None, "--period", help="Epoch length in seconds."),
    epoch: int = typer.Option(0, "--epoch", help="Current epoch counter."),
    epochs: int = typer.Option(3, "--epochs", help="How many boundaries to list."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List the next epoch boundaries."""
    period = get_config().period if period is None else period
    if period <= 0 or epochs < 0:
        typer.echo("error: --period must be > 0 and --epochs >= 0", err=True)
        raise typer.Exit(2)
    rows = []
    for i in range(epoch, epoch + epochs):
        point = start + i * period
        when = _dt.datetime.fromtimestamp(point, tz=_dt.timezone.utc).isoformat()
        rows.append({"epoch": i, "next_epoch_point": point, "utc": when})
    if json_out:
        typer.echo(json.dumps(rows, indent=2))
        return
    for r in rows:
        typer.echo(f"epoch {r['epoch']:>4}  {r['next_epoch_point']}  {r['utc']}")


@app.command("config")
def config_cmd(json_out: bool = typer.Option(False, "--json")) -> None:
    """Show the resolved treasury configuration."""
    try:
        cfg = load_config()
    except ValueError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(2)
    _emit(cfg.to_dict(), json_out, title="Treasury config")


@app.command("simulate")
def simulate_cmd(
    price: int = typer.Option(..., "--price", help="Oracle price for the allocation."),
    supply: int = typer.Option(50_000 * WAD, "--supply", help="Stable minted to the operator."),
    bonds: int = typer.Option(50_000 * WAD, "--bonds", help="Bonds minted to the operator."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Deploy a full system on an in-memory host and allocate once."""
    # local imports keep `waterfall`/`config` free of host/contract imports
    from execution.errors import ExecError, error_to_receipt_fields
    from execution.runtime.host import Host

    from .deploy import deploy_system

    host = Host()
    operator = det_address("operator")
    with clog.trace_scope():
        clog.bind(component="treasury-sim")
        system = deploy_system(host, operator)
        op = operator
        if supply:
            system.stable.connect(op).mint(op, supply)
        if bonds:
            system.bond.connect(op).mint(op, bonds)
        system.oracle.connect(op).set_price(price)
        system.hand_over_operators()
        host.set_time(system.treasury.get_start_time())

        try:
            receipt = system.treasury.connect(op).allocate_seigniorage()
        except ExecError as e:
            if json_out:
                typer.echo(json.dumps(error_to_receipt_fields(e), indent=2, sort_keys=True))
            else:
                typer.echo(f"allocation failed: {e}", err=True)
            raise typer.Exit(1)

    t = system.treasury
    result: Dict[str, Any] = {
        "epoch": t.get_current_epoch(),
        "next_epoch_point": t.next_epoch_point(),
        "reserve": t.get_reserve(),
        "balances": {
            "dev_fund": system.stable.balance_of(system.dev_fund.address),
            "stable_fund": system.stable.balance_of(system.stable_fund.address),
            "boardroom": system.stable.balance_of(system.boardroom.address),
            "treasury": system.stable.balance_of(t.address),
        },
        "events": [
            ev.to_dict() for ev in receipt.logs if ev.address == t.address
        ],
        "treasury": to_hex(t.address),
    }
    if json_out:
        typer.echo(json.dumps(result, indent=2))
        return
    typer.echo(f"Treasury {result['treasury']} epoch {result['epoch']} reserve {_fmt_units(result['reserve'])}")
    for k, v in result["balances"].items():
        typer.echo(f"- {k}: {_fmt_units(v)}")
    for ev in result["events"]:
        typer.echo(f"  {ev['name']} {ev['args']}")


if __name__ == "__main__":
    app()
