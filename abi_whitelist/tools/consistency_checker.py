"""
Consistency Checker
───────────────────
Cross-references the undefined symbols of every module against the
symbols exported by the kernel image and the modules. A reference that
nothing provides is reported; the check never aborts a run.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping

from ..core.log import report
from ..core.models import MissingSymbol


def find_missing_symbols(
    undefined: Mapping[str, Iterable[str]],
    exported: Collection[str],
) -> list[MissingSymbol]:
    """Return one record per (module, symbol) required but not provided."""
    return [
        MissingSymbol(module=module, symbol=symbol)
        for module, symbols in undefined.items()
        for symbol in symbols
        if symbol not in exported
    ]


def report_missing_symbols(missing: Iterable[MissingSymbol]) -> None:
    for record in missing:
        report(str(record))
