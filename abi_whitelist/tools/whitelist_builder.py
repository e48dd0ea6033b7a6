"""
Whitelist Builder
─────────────────
Builds the ABI whitelist from the complete reference table:
  • counts how many distinct modules reference each symbol
  • factors symbols shared by several modules into a common section
  • lists the remaining symbols under the module that needs them
  • optionally keeps a standalone whitelist per module

Documents are rendered in full before anything is written, and all files
are staged before any destination is replaced.
"""

from __future__ import annotations

import os
import sys
import tempfile
from collections import Counter
from collections.abc import Collection, Iterable, Mapping

from ..core.config import ALWAYS_INCLUDE
from ..core.errors import WhitelistWriteFailed
from ..core.models import WhitelistDocument, WhitelistSection
from ..core.utils import symbol_sort

# Destinations meaning "write to standard output".
STDOUT_PATHS = ("-", "/dev/stdout")

# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


def count_symbol_usage(undefined: Mapping[str, Iterable[str]]) -> Counter:
    """Number of distinct modules referencing each symbol."""
    counter: Counter = Counter()
    for symbols in undefined.values():
        counter.update(set(symbols))
    return counter


def build_whitelist(
    undefined: Mapping[str, Iterable[str]],
    exported: Collection[str],
    *,
    module_grouping: bool = True,
    emit_module_whitelists: bool = False,
    always_include: Iterable[str] = ALWAYS_INCLUDE,
) -> WhitelistDocument:
    """Partition the exported symbols referenced by modules.

    A symbol goes to the common section when it is exported and either
    referenced by more than one module or grouping is disabled. The
    *always_include* symbols are added to it unconditionally. Every other
    exported reference is listed under the module that needs it, with
    modules kept in the iteration order of *undefined*.
    """
    exported = set(exported)
    usage = count_symbol_usage(undefined)

    common = set(always_include)
    common.update(
        symbol for symbol, count in usage.items()
        if symbol in exported and (count > 1 or not module_grouping)
    )

    document = WhitelistDocument(common=symbol_sort(common))
    for module, symbols in undefined.items():
        needed = set(symbols) & exported
        if emit_module_whitelists:
            document.module_whitelists[module] = symbol_sort(needed)
        own = needed - common
        if own:
            document.sections.append(WhitelistSection(module, symbol_sort(own)))

    return document


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def is_stdout(path: str | None) -> bool:
    return path is None or path in STDOUT_PATHS


def module_whitelist_path(whitelist: str, module: str) -> str:
    """``<whitelist>_<module name without extension>``"""
    return f"{whitelist}_{os.path.splitext(module)[0]}"


def write_whitelist(document: WhitelistDocument, whitelist: str | None = None) -> list[str]:
    """Write *document* and its standalone module whitelists.

    Returns the paths written (``-`` for standard output). Standalone
    module whitelists need a real file path. Every file is first written
    to a temporary sibling; destinations are only replaced once all of
    them were written, so a failure leaves the previous files untouched.
    """
    outputs = [(whitelist or "-", document.render())]
    if document.module_whitelists:
        if is_stdout(whitelist):
            raise WhitelistWriteFailed(
                "-", "module whitelists cannot be written to standard output"
            )
        outputs.extend(
            (module_whitelist_path(whitelist, module), document.render_module(module))
            for module in document.module_whitelists
        )

    files = [(path, text) for path, text in outputs if not is_stdout(path)]
    staged: list[tuple[str, str]] = []
    try:
        for path, text in files:
            if os.path.isdir(path):
                raise WhitelistWriteFailed(path, "destination is a directory")
            staged.append((_write_temp(path, text), path))
        while staged:
            tmp, path = staged[0]
            try:
                os.replace(tmp, path)
            except OSError as e:
                raise WhitelistWriteFailed(path, str(e))
            staged.pop(0)
    finally:
        for tmp, _ in staged:
            if os.path.exists(tmp):
                os.unlink(tmp)

    for path, text in outputs:
        if is_stdout(path):
            _write_stdout(text)
    return [path for path, _ in outputs]


def _write_stdout(text: str) -> None:
    try:
        sys.stdout.write(text)
        sys.stdout.flush()
    except OSError as e:
        raise WhitelistWriteFailed("-", str(e))


def _write_temp(path: str, text: str) -> str:
    """Write *text* next to *path* and return the temporary file name."""
    directory = os.path.dirname(os.path.abspath(path))
    tmp = None
    try:
        fd, tmp = tempfile.mkstemp(
            dir=directory, prefix=f".{os.path.basename(path)}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp, 0o644)
        return tmp
    except OSError as e:
        if tmp is not None and os.path.exists(tmp):
            os.unlink(tmp)
        raise WhitelistWriteFailed(path, str(e))
