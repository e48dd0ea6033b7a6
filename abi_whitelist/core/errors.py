"""Error taxonomy shared by the extractor, the builder and the CLI."""

from __future__ import annotations


class WhitelistError(Exception):
    """Base class for every fatal error raised while building a whitelist."""


class InvalidSymbol(WhitelistError, ValueError):
    """A symbol name is empty or contains whitespace."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Invalid symbol name: {symbol!r}")
        self.symbol = symbol


class MalformedSymbolListing(WhitelistError):
    """A line of an inspector listing could not be parsed into a symbol."""

    def __init__(self, source: str, line: str) -> None:
        super().__init__(f"Malformed symbol listing line for {source}: {line!r}")
        self.source = source
        self.line = line


class InspectionFailed(WhitelistError):
    """The symbol inspector could not be run on a binary."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Symbol inspection failed for {path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigurationError(WhitelistError):
    """Invalid combination of options, detected before any extraction."""


class MissingWhitelistPath(ConfigurationError):
    def __init__(self) -> None:
        super().__init__(
            "Emitting module whitelists requires a whitelist path (--whitelist)."
        )


class DirectoryNotFound(ConfigurationError):
    def __init__(self, directory: str) -> None:
        super().__init__(
            f"Expected a directory to search for binaries, but got {directory}"
        )
        self.directory = directory


class KernelImageNotFound(WhitelistError):
    def __init__(self, directory: str) -> None:
        super().__init__(f"Could not find a suitable vmlinux file in {directory}.")
        self.directory = directory


class WhitelistWriteFailed(WhitelistError):
    """Writing a whitelist document failed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not write whitelist {path}: {reason}")
        self.path = path
        self.reason = reason
