"""
main: Command line entry point.

Scans a directory for ``vmlinux`` and kernel modules and writes the ABI
whitelist of the symbols the modules need.
"""

from __future__ import annotations

import os
from typing import List, Optional

import typer
from pydantic import ValidationError

from .core.config import load_config
from .core.errors import WhitelistError
from .core.log import error, report
from .orchestrator import AnalysisOptions, run_analysis
from .tools.consistency_checker import report_missing_symbols
from .tools.whitelist_builder import write_whitelist

app = typer.Typer(
    name="abi-whitelist",
    help="Extract the symbols kernel modules require and write an ABI whitelist.",
    add_completion=False,
)


@app.command()
def extract(
    directory: Optional[str] = typer.Argument(None, help="Directory to search for kernel binaries (default: cwd)"),
    whitelist: str = typer.Option("-", "--whitelist", help="Whitelist to create ('-' for stdout)"),
    include_module_exports: bool = typer.Option(
        False, "--include-module-exports",
        help="Include symbols exported by modules, not only by vmlinux",
    ),
    emit_module_whitelists: bool = typer.Option(
        False, "--emit-module-whitelists",
        help="Also write a standalone whitelist per module (requires --whitelist)",
    ),
    module_grouping: bool = typer.Option(
        True, "--module-grouping/--no-module-grouping",
        help="Group symbols used by several modules into the common section",
    ),
    skip_report_missing: bool = typer.Option(
        False, "--skip-report-missing",
        help="Do not report symbols required by modules but not provided",
    ),
    module_filter: Optional[List[str]] = typer.Option(
        None, "--module-filter", help="Only consider modules matching this pattern (repeatable)",
    ),
    print_modules: bool = typer.Option(False, "--print-modules", help="Print the modules considered"),
    always_include: Optional[List[str]] = typer.Option(
        None, "--always-include", help="Symbol always placed in the common section (repeatable)",
    ),
    backend: Optional[str] = typer.Option(None, "--backend", help="Symbol inspector: nm or elf"),
    nm_tool: Optional[str] = typer.Option(None, "--nm", help="nm executable (default: llvm-nm)"),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", help="Parallel inspections"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Seconds allowed per nm invocation"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Write the ABI whitelist for the kernel binaries below DIRECTORY."""
    options = AnalysisOptions(
        directory=directory or os.getcwd(),
        whitelist=whitelist,
        include_module_exports=include_module_exports,
        emit_module_whitelists=emit_module_whitelists,
        module_grouping=module_grouping,
        report_missing=not skip_report_missing,
        module_filters=list(module_filter or []),
    )

    try:
        options.validate()
        cfg = load_config(
            backend=backend,
            nm_tool=nm_tool,
            jobs=jobs,
            timeout=timeout,
            always_include=list(always_include) if always_include else None,
            debug=debug or None,
        )
        result = run_analysis(options, cfg)

        if print_modules:
            report("Considering the following modules:")
            for name in result.modules:
                report(f"  {name}")
        report_missing_symbols(result.missing)

        write_whitelist(result.document, options.whitelist)
    except (WhitelistError, ValidationError) as e:
        error(str(e))
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
