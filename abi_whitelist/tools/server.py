"""
ABI Whitelist MCP Server
────────────────────────
Exposes the whitelist analysis as Model-Context-Protocol tools:
  • generate_whitelist: whitelist document for a directory of binaries
  • find_missing_symbols: references no binary exports

Run with ``python -m abi_whitelist.tools.server``.
"""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP

from ..core.config import load_config
from ..orchestrator import AnalysisOptions, run_analysis
from .inspectors import SymbolInspector

# ---------------------------------------------------------------------------
# MCP server instance
# ---------------------------------------------------------------------------

mcp = FastMCP("abi-whitelist")

# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


def generate_whitelist_impl(
    directory: str,
    include_module_exports: bool = False,
    module_grouping: bool = True,
    module_filters: list[str] | None = None,
    inspector: SymbolInspector | None = None,
) -> dict[str, Any]:
    """Build the whitelist for *directory* (plain callable)."""
    options = AnalysisOptions(
        directory=directory,
        include_module_exports=include_module_exports,
        module_grouping=module_grouping,
        module_filters=list(module_filters or []),
    )
    result = run_analysis(options, load_config(), inspector)
    return result.to_dict()


def find_missing_symbols_impl(
    directory: str,
    inspector: SymbolInspector | None = None,
) -> dict[str, Any]:
    """List symbols required by modules but exported by no binary (plain callable)."""
    result = run_analysis(AnalysisOptions(directory=directory), load_config(), inspector)
    return {
        "modules": result.modules,
        "missing": [m.to_dict() for m in result.missing],
        "summary": (
            f"Checked {len(result.modules)} module(s). "
            f"{len(result.missing)} required symbol(s) not provided."
        ),
    }


@mcp.tool()
def generate_whitelist(
    directory: str,
    include_module_exports: bool = False,
    module_grouping: bool = True,
    module_filters: list[str] | None = None,
) -> dict[str, Any]:
    """Generate the ABI whitelist for a directory holding vmlinux and *.ko modules.

    Returns JSON with the rendered whitelist, its sections, the modules
    considered and any symbols required but not provided.
    """
    return generate_whitelist_impl(
        directory,
        include_module_exports=include_module_exports,
        module_grouping=module_grouping,
        module_filters=module_filters,
    )


@mcp.tool()
def find_missing_symbols(directory: str) -> dict[str, Any]:
    """Report symbols kernel modules require that neither vmlinux nor any module exports."""
    return find_missing_symbols_impl(directory)


# ---------------------------------------------------------------------------
# Standalone
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    mcp.run()
