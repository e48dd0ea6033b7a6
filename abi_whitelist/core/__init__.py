"""Core data models, configuration, errors and utilities."""

from .config import ALWAYS_INCLUDE, Config, load_config
from .errors import (
    ConfigurationError,
    DirectoryNotFound,
    InspectionFailed,
    InvalidSymbol,
    KernelImageNotFound,
    MalformedSymbolListing,
    MissingWhitelistPath,
    WhitelistError,
    WhitelistWriteFailed,
)
from .models import (
    Binary,
    BinaryRole,
    KernelBinaries,
    MissingSymbol,
    SymbolTables,
    WhitelistDocument,
    WhitelistSection,
)
from .utils import filter_modules, find_binaries, symbol_sort, symbol_sort_key

__all__ = [
    "ALWAYS_INCLUDE",
    "Config",
    "load_config",
    "ConfigurationError",
    "DirectoryNotFound",
    "InspectionFailed",
    "InvalidSymbol",
    "KernelImageNotFound",
    "MalformedSymbolListing",
    "MissingWhitelistPath",
    "WhitelistError",
    "WhitelistWriteFailed",
    "Binary",
    "BinaryRole",
    "KernelBinaries",
    "MissingSymbol",
    "SymbolTables",
    "WhitelistDocument",
    "WhitelistSection",
    "filter_modules",
    "find_binaries",
    "symbol_sort",
    "symbol_sort_key",
]
