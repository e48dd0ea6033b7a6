"""
Orchestrator
────────────
Runs one analysis from a directory of kernel binaries to a whitelist
document:

  1. validate options (no side effects yet)
  2. locate ``vmlinux`` and the modules, apply module filters
  3. extract undefined and exported symbols (parallel, full barrier)
  4. check references against exports, unless skipped
  5. build the whitelist document

Writing the document and printing diagnostics are left to the caller.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from .core.config import Config, load_config
from .core.errors import KernelImageNotFound, MissingWhitelistPath
from .core.log import debug_print
from .core.models import KernelBinaries, MissingSymbol, SymbolTables, WhitelistDocument
from .core.utils import filter_modules, find_binaries, validate_directory
from .tools.consistency_checker import find_missing_symbols
from .tools.inspectors import SymbolInspector, create_inspector, describe_inspector
from .tools.symbol_extractor import extract_symbol_tables
from .tools.whitelist_builder import build_whitelist, is_stdout

# ---------------------------------------------------------------------------
# Options / results
# ---------------------------------------------------------------------------


@dataclass
class AnalysisOptions:
    """Per-run flags."""

    directory: str = field(default_factory=os.getcwd)
    whitelist: str | None = None
    include_module_exports: bool = False
    emit_module_whitelists: bool = False
    module_grouping: bool = True
    report_missing: bool = True
    module_filters: list[str] = field(default_factory=list)

    @property
    def check_consistency(self) -> bool:
        # Filtering breaks inter-module dependencies; the report would be noise.
        return self.report_missing and not self.module_filters

    def validate(self) -> None:
        """Reject invalid option combinations before any work is done."""
        if self.emit_module_whitelists and is_stdout(self.whitelist):
            raise MissingWhitelistPath()
        validate_directory(self.directory)


@dataclass
class AnalysisResult:
    """Everything one run produced."""

    binaries: KernelBinaries
    tables: SymbolTables
    document: WhitelistDocument
    missing: list[MissingSymbol] = field(default_factory=list)
    consistency_checked: bool = False

    @property
    def modules(self) -> list[str]:
        return self.binaries.module_names

    def to_dict(self) -> dict[str, Any]:
        return {
            "kernel_image": self.binaries.kernel_image.path if self.binaries.kernel_image else None,
            "modules": self.modules,
            "missing": [m.to_dict() for m in self.missing],
            "consistency_checked": self.consistency_checked,
            "whitelist": self.document.render(),
            "document": self.document.to_dict(),
        }


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def locate_binaries(options: AnalysisOptions) -> KernelBinaries:
    """Find the kernel image and the (filtered) modules."""
    binaries = find_binaries(options.directory)
    if options.module_filters:
        binaries.modules = filter_modules(binaries.modules, options.module_filters)
    if binaries.kernel_image is None:
        raise KernelImageNotFound(options.directory)
    return binaries


def run_analysis(
    options: AnalysisOptions,
    config: Config | None = None,
    inspector: SymbolInspector | None = None,
) -> AnalysisResult:
    """Analyse ``options.directory`` and build its whitelist document."""
    options.validate()
    config = config or load_config()
    inspector = inspector or create_inspector(config)

    binaries = locate_binaries(options)
    debug_print(
        "orchestrator",
        f"kernel image {binaries.kernel_image.path}, "
        f"{len(binaries.modules)} module(s), inspector {describe_inspector(inspector)}",
        enabled=config.debug,
    )

    tables = extract_symbol_tables(
        binaries,
        inspector,
        jobs=config.jobs,
        with_module_exports=options.include_module_exports or options.check_consistency,
        debug=config.debug,
    )

    result = AnalysisResult(
        binaries=binaries,
        tables=tables,
        document=build_whitelist(
            tables.undefined,
            tables.export_universe(options.include_module_exports),
            module_grouping=options.module_grouping,
            emit_module_whitelists=options.emit_module_whitelists,
            always_include=config.always_include,
        ),
    )
    if options.check_consistency:
        result.missing = find_missing_symbols(tables.undefined, tables.all_exported())
        result.consistency_checked = True
    return result
