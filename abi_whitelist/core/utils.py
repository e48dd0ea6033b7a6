"""Utility helpers: symbol ordering, directory validation, binary discovery."""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterable
from pathlib import Path

from .errors import DirectoryNotFound, InvalidSymbol
from .log import warn
from .models import Binary, BinaryRole, KernelBinaries

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

KERNEL_IMAGE_NAME = "vmlinux"
MODULE_SUFFIX = ".ko"

# Symbols with more leading underscores than this share the same tie-break.
MAX_LEADING_UNDERSCORES = 5

# ---------------------------------------------------------------------------
# Symbol ordering
# ---------------------------------------------------------------------------


def validate_symbol(symbol: str) -> str:
    """Return *symbol* unchanged; raise ``InvalidSymbol`` if it is malformed."""
    if not symbol or any(c.isspace() for c in symbol):
        raise InvalidSymbol(symbol)
    return symbol


def symbol_sort_key(symbol: str) -> tuple[str, int, str]:
    """Comparison key clustering related symbols.

    Case and underscores are ignored first, so ``foo``, ``_foo`` and
    ``__foo`` end up next to each other; among those the form with fewer
    leading underscores comes first. The exact name breaks remaining ties.

    The body is padded with underscores before comparison, so a name
    continuing with a digit sorts ahead of its prefix (``memset16`` before
    ``memset``).
    """
    validate_symbol(symbol)
    leading = len(symbol) - len(symbol.lstrip("_"))
    body = symbol.casefold().replace("_", "") + "_" * MAX_LEADING_UNDERSCORES
    return body, min(leading, MAX_LEADING_UNDERSCORES), symbol


def symbol_sort(symbols: Iterable[str]) -> list[str]:
    """Deduplicate *symbols* and return them in ``symbol_sort_key`` order."""
    return sorted(set(symbols), key=symbol_sort_key)


# ---------------------------------------------------------------------------
# Binary discovery
# ---------------------------------------------------------------------------


def validate_directory(path: str | os.PathLike[str]) -> Path:
    """Ensure *path* is an existing directory and return it resolved."""
    p = Path(path).resolve()
    if not p.is_dir():
        raise DirectoryNotFound(str(path))
    return p


def find_binaries(directory: str | os.PathLike[str]) -> KernelBinaries:
    """Locate ``vmlinux`` and kernel modules (``*.ko``) below *directory*.

    Classification is purely by file name. Directories and files are
    visited in sorted order so the discovery order is stable across runs.
    """
    root = validate_directory(directory)
    result = KernelBinaries()

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            if not os.path.isfile(path):
                continue
            if name == KERNEL_IMAGE_NAME:
                if result.kernel_image is not None:
                    warn(f"Ignoring additional kernel image {path}, "
                         f"using {result.kernel_image.path}")
                    continue
                result.kernel_image = Binary(path, BinaryRole.KERNEL_IMAGE)
            elif name.endswith(MODULE_SUFFIX):
                result.modules.append(Binary(path, BinaryRole.MODULE))

    return result


def filter_modules(modules: list[Binary], patterns: Iterable[str]) -> list[Binary]:
    """Keep the modules whose base name matches at least one of *patterns*."""
    patterns = list(patterns)
    return [
        module for module in modules
        if any(fnmatch.fnmatch(module.identity, pattern) for pattern in patterns)
    ]
