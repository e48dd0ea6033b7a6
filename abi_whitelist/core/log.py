"""
core.log: Reporting channel for abi-whitelist.

Diagnostics (missing symbols, considered modules, warnings, errors) go to
stderr through a shared ``rich`` console so they never mix with a
whitelist written to stdout.
"""

from __future__ import annotations

from rich.console import Console

console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)


def report(msg: str) -> None:
    """Print a plain diagnostic line (no markup interpretation)."""
    console.print(msg, markup=False)


def warn(msg: str) -> None:
    console.print("[yellow]Warning:[/yellow] ", end="")
    console.print(msg, markup=False)


def error(msg: str) -> None:
    console.print("[bold red]Error:[/bold red] ", end="")
    console.print(msg, markup=False)


def debug_print(module: str, msg: str, *, enabled: bool = True) -> None:
    """Print a bracketed debug message to stderr."""
    if enabled:
        console.print(f"[DEBUG:{module}] {msg}", markup=False, style="dim")
