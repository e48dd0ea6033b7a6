"""Symbol inspection, extraction, checking and whitelist building."""

from .consistency_checker import find_missing_symbols, report_missing_symbols
from .inspectors import ElfInspector, NmInspector, SymbolInspector, create_inspector
from .symbol_extractor import (
    extract_exported_symbols,
    extract_symbol_tables,
    extract_undefined_symbols,
    parse_exported_listing,
    parse_undefined_listing,
)
from .whitelist_builder import build_whitelist, count_symbol_usage, write_whitelist

__all__ = [
    "find_missing_symbols",
    "report_missing_symbols",
    "ElfInspector",
    "NmInspector",
    "SymbolInspector",
    "create_inspector",
    "extract_exported_symbols",
    "extract_symbol_tables",
    "extract_undefined_symbols",
    "parse_exported_listing",
    "parse_undefined_listing",
    "build_whitelist",
    "count_symbol_usage",
    "write_whitelist",
]
