"""
hushh.cli
---------

Command-line entrypoint for the Hushh contract suite.

- bands    : print the score-band table
- classify : print the proof statement a score would produce
- run      : execute a JSON session script on a fresh in-memory ledger
- config   : print the effective configuration (HUSHH_* env vars)

Examples
--------
hushh bands
hushh classify 950
hushh run examples/session.json --json
hushh run session.json --strict
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import load_config
from .errors import HushhError
from .runtime import Ledger, LoggingSink
from .session import StepResult, jsonable, load_script, run_script
from .stdlib.bands import SCORE_BANDS, band_for
from .version import __version__

app = typer.Typer(
    name="hushh",
    help="Hushh contracts: score bands, proof registry, token and identity sessions.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


def _setup_logging(level: str) -> None:
    # Only configure if the host application hasn't.
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _die(msg: str, code: int = 2) -> None:
    typer.echo(msg.rstrip(), err=True)
    raise typer.Exit(code)


def _version_cb(value: bool) -> None:
    if value:
        typer.echo(f"hushh {__version__}")
        raise typer.Exit(0)


@app.callback()
def _meta(
    version: bool = typer.Option(
        False, "--version", "-V", help="Print version and exit", is_eager=True, callback=_version_cb
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override HUSHH_LOG_LEVEL"),
) -> None:
    _setup_logging((log_level or load_config().log_level).upper())


@app.command("bands")
def bands_cmd(json_out: bool = typer.Option(False, "--json", help="Print JSON")) -> None:
    """Print the score-band table, highest band first."""
    if json_out:
        rows = [
            {"lower": b.lower, "upper": b.upper, "label": b.label, "range": b.range_text}
            for b in SCORE_BANDS
        ]
        typer.echo(json.dumps(rows, indent=2))
        return
    t = Table(title="Score bands", box=box.SIMPLE)
    t.add_column("Lower", justify="right")
    t.add_column("Upper", justify="right")
    t.add_column("Label")
    t.add_column("Range")
    for b in SCORE_BANDS:
        t.add_row(str(b.lower), str(b.upper), b.label, b.range_text)
    console.print(t)


@app.command("classify")
def classify_cmd(score: int = typer.Argument(..., help="Score in [0, 1000]")) -> None:
    """Print the statement a proof for SCORE would carry."""
    try:
        band = band_for(score)
    except HushhError as e:
        _die(f"[classify] {e.message}", 2)
        return
    typer.echo(band.statement)


def _report(results: List[StepResult]) -> None:
    t = Table(title="Session", box=box.SIMPLE)
    t.add_column("#", justify="right")
    t.add_column("Step")
    t.add_column("Target")
    t.add_column("OK")
    t.add_column("Result / error", overflow="fold")
    for r in results:
        step = r.kind if r.method is None else f"{r.kind} {r.method}"
        if r.ok:
            detail = json.dumps(jsonable(r.result))
            if r.events:
                detail += "  [" + ", ".join(e["name"] for e in r.events) + "]"
        else:
            detail = f"{r.error['code']}: {r.error['message']}"
        t.add_row(str(r.index), step, escape(r.target), "yes" if r.ok else "[red]no[/red]", escape(detail))
    console.print(t)


@app.command("run")
def run_cmd(
    script: Path = typer.Argument(..., help="Session script (JSON)"),
    json_out: bool = typer.Option(False, "--json", help="Print machine-readable JSON result"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 if any step failed"),
) -> None:
    """Run a session script against a fresh in-memory ledger."""
    try:
        loaded = load_script(script)
        ledger = Ledger(sink=LoggingSink())
        results = run_script(loaded, ledger)
    except HushhError as e:
        _die(f"[run] {script}: {e}", 2)
        return

    failed = sum(1 for r in results if not r.ok)
    if json_out:
        out = {
            "ok": failed == 0,
            "height": ledger.height,
            "steps": [r.to_dict() for r in results],
        }
        typer.echo(json.dumps(out, indent=2, sort_keys=True))
    else:
        _report(results)
        console.print(f"{len(results)} steps, {failed} failed, height {ledger.height}")
    if strict and failed:
        raise typer.Exit(1)


@app.command("config")
def config_cmd(json_out: bool = typer.Option(False, "--json", help="Print JSON")) -> None:
    """Print the effective configuration."""
    cfg = load_config().as_dict()
    if json_out:
        typer.echo(json.dumps(cfg, indent=2, sort_keys=True))
        return
    t = Table.grid(padding=(0, 2))
    for k, v in cfg.items():
        t.add_row(k, str(v))
    console.print(t)


def main(argv: Optional[List[str]] = None) -> int:
    app(args=argv)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
