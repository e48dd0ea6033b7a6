"""
Symbol Extractor
────────────────
Turns inspector listings into symbol sets:
  • undefined references of every module
  • ksymtab exports of the kernel image and, optionally, of every module

Extraction is independent per binary and runs on a bounded thread pool.
All jobs finish before the result is returned, so callers always see the
complete reference table.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor

from ..core.errors import KernelImageNotFound, MalformedSymbolListing
from ..core.log import debug_print, warn
from ..core.models import Binary, KernelBinaries, SymbolTables
from ..core.utils import symbol_sort
from .inspectors import SymbolInspector

# Marker nm prints in front of the ksymtab entry of an exported symbol.
EXPORT_MARKER = " __ksymtab_"

# ---------------------------------------------------------------------------
# Listing parsers
# ---------------------------------------------------------------------------


def parse_undefined_listing(listing: str, source: str = "<listing>") -> list[str]:
    """Parse ``nm --undefined-only`` output into sorted symbol names.

    Each line is ``<type> <name>``. Lines with fewer fields are malformed.
    """
    symbols = []
    for line in listing.splitlines():
        if not line.strip():
            continue
        fields = line.split()
        if len(fields) < 2:
            raise MalformedSymbolListing(source, line)
        symbols.append(fields[1])
    return symbol_sort(symbols)


def parse_exported_listing(listing: str, source: str = "<listing>") -> list[str]:
    """Collect the symbols published through the ksymtab.

    Defined symbols without a ``__ksymtab_`` entry are private and skipped.
    """
    symbols = []
    for line in listing.splitlines():
        pos = line.find(EXPORT_MARKER)
        if pos == -1:
            continue
        symbol = line[pos + len(EXPORT_MARKER):].strip()
        if not symbol or any(c.isspace() for c in symbol):
            raise MalformedSymbolListing(source, line)
        symbols.append(symbol)
    return symbol_sort(symbols)


# ---------------------------------------------------------------------------
# Single-binary extraction
# ---------------------------------------------------------------------------


def extract_undefined_symbols(module: Binary, inspector: SymbolInspector) -> list[str]:
    """Symbols *module* needs resolved from elsewhere."""
    return parse_undefined_listing(inspector.list_undefined(module.path), module.path)


def extract_exported_symbols(binary: Binary, inspector: SymbolInspector) -> list[str]:
    """Symbols *binary* exports through its ksymtab."""
    return parse_exported_listing(inspector.list_defined(binary.path), binary.path)


# ---------------------------------------------------------------------------
# Whole-tree extraction
# ---------------------------------------------------------------------------


def _collect(futures: list[tuple[str, Future]], *, warn_duplicates: bool) -> dict[str, list[str]]:
    """Gather results in discovery order; later duplicates replace earlier ones."""
    result: dict[str, list[str]] = {}
    for identity, future in futures:
        symbols = future.result()
        if identity in result and warn_duplicates:
            warn(f"Duplicate module name {identity}, keeping the last one found")
        result[identity] = symbols
    return result


def extract_symbol_tables(
    binaries: KernelBinaries,
    inspector: SymbolInspector,
    *,
    jobs: int = 1,
    with_module_exports: bool = True,
    debug: bool = False,
) -> SymbolTables:
    """Extract every symbol set needed to build a whitelist.

    The kernel image must be present. Any extraction error propagates after
    the pool has shut down; no partial tables are returned.
    """
    if binaries.kernel_image is None:
        raise KernelImageNotFound("the scanned directory")
    modules = binaries.modules
    debug_print(
        "extractor",
        f"{len(modules)} module(s), {jobs} job(s), module exports: {with_module_exports}",
        enabled=debug,
    )

    with ThreadPoolExecutor(max_workers=max(1, jobs)) as pool:
        kernel_future = pool.submit(
            extract_exported_symbols, binaries.kernel_image, inspector
        )
        undefined_futures = [
            (m.identity, pool.submit(extract_undefined_symbols, m, inspector))
            for m in modules
        ]
        export_futures = [
            (m.identity, pool.submit(extract_exported_symbols, m, inspector))
            for m in modules
        ] if with_module_exports else []

    # The pool has joined: every job completed or failed.
    tables = SymbolTables(kernel_exports=kernel_future.result())
    tables.undefined = _collect(undefined_futures, warn_duplicates=True)
    tables.module_exports = _collect(export_futures, warn_duplicates=False)
    debug_print(
        "extractor",
        f"vmlinux exports {len(tables.kernel_exports)} symbol(s)",
        enabled=debug,
    )
    return tables
