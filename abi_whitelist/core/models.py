"""Shared data models used by the extractor, the builder and the CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


WHITELIST_HEADER = "[abi_whitelist]"
SYMBOL_INDENT = "  "


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class BinaryRole(str, Enum):
    KERNEL_IMAGE = "kernel-image"
    MODULE = "module"


# ---------------------------------------------------------------------------
# Binaries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Binary:
    """A kernel binary found on disk."""

    path: str
    role: BinaryRole

    @property
    def identity(self) -> str:
        """Base file name, used to label modules in reports and whitelists."""
        return os.path.basename(self.path)

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "role": self.role.value, "identity": self.identity}


@dataclass
class KernelBinaries:
    """Result of a directory scan: the kernel image and the modules."""

    kernel_image: Binary | None = None
    modules: list[Binary] = field(default_factory=list)

    @property
    def module_names(self) -> list[str]:
        return [m.identity for m in self.modules]


# ---------------------------------------------------------------------------
# Extraction results
# ---------------------------------------------------------------------------

@dataclass
class SymbolTables:
    """Symbols extracted from one kernel image and its modules.

    ``undefined`` maps module identity to the sorted symbols the module
    references but does not define. ``kernel_exports`` lists the symbols
    exported by the kernel image; ``module_exports`` maps module identity
    to its exported symbols and is empty when module exports were not
    extracted. All mappings iterate in module discovery order.
    """

    undefined: dict[str, list[str]] = field(default_factory=dict)
    kernel_exports: list[str] = field(default_factory=list)
    module_exports: dict[str, list[str]] = field(default_factory=dict)

    def all_exported(self) -> set[str]:
        """Every symbol exported by the kernel image or any module."""
        exported = set(self.kernel_exports)
        for symbols in self.module_exports.values():
            exported.update(symbols)
        return exported

    def export_universe(self, include_module_exports: bool) -> set[str]:
        if include_module_exports:
            return self.all_exported()
        return set(self.kernel_exports)


@dataclass(frozen=True)
class MissingSymbol:
    """A symbol a module requires that no binary exports."""

    module: str
    symbol: str

    def __str__(self) -> str:
        return f"Symbol {self.symbol} required by {self.module} but not provided"

    def to_dict(self) -> dict[str, Any]:
        return {"module": self.module, "symbol": self.symbol}


# ---------------------------------------------------------------------------
# Whitelist document
# ---------------------------------------------------------------------------

def _render_symbols(symbols: list[str]) -> list[str]:
    return [f"{SYMBOL_INDENT}{symbol}" for symbol in symbols]


@dataclass
class WhitelistSection:
    """Symbols only required by a single module."""

    module: str
    symbols: list[str] = field(default_factory=list)


@dataclass
class WhitelistDocument:
    """The whitelist artifact.

    ``common`` holds the symbols shared by several modules (plus the
    always-included ones), ``sections`` the remaining symbols grouped by the
    module that needs them. ``module_whitelists`` is filled only when
    standalone per-module documents were requested; it maps module identity
    to the complete list of exported symbols that module references.
    Every symbol list is already sorted.
    """

    common: list[str] = field(default_factory=list)
    sections: list[WhitelistSection] = field(default_factory=list)
    module_whitelists: dict[str, list[str]] = field(default_factory=dict)

    def section_for(self, module: str) -> WhitelistSection | None:
        for section in self.sections:
            if section.module == module:
                return section
        return None

    def render(self) -> str:
        lines = [WHITELIST_HEADER]
        lines.extend(_render_symbols(self.common))
        for section in self.sections:
            lines.append("")
            lines.append(f"# required by {section.module}")
            lines.extend(_render_symbols(section.symbols))
        return "\n".join(lines) + "\n"

    def render_module(self, module: str) -> str:
        """Render the standalone whitelist of *module*."""
        lines = [WHITELIST_HEADER]
        lines.extend(_render_symbols(self.module_whitelists[module]))
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict[str, Any]:
        return {
            "common": list(self.common),
            "sections": {s.module: list(s.symbols) for s in self.sections},
            "module_whitelists": {
                m: list(symbols) for m, symbols in self.module_whitelists.items()
            },
        }
