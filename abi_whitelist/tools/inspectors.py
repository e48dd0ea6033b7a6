"""
Symbol Inspectors
─────────────────
Backends that list the symbols of an object file in ``nm`` format:
  • ``NmInspector``  runs an external nm tool (``llvm-nm`` by default)
  • ``ElfInspector`` reads the ELF symbol table in-process with pyelftools

Both expose ``list_undefined`` and ``list_defined`` and return the raw
listing text; parsing it into symbol names is the extractor's job.
"""

from __future__ import annotations

import os
import subprocess
from typing import Protocol

from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile
from elftools.elf.sections import SymbolTableSection

from ..core.config import Config
from ..core.errors import InspectionFailed

# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------


class SymbolInspector(Protocol):
    def list_undefined(self, path: str) -> str:
        """Listing of the symbols *path* references but does not define."""
        ...

    def list_defined(self, path: str) -> str:
        """Listing of the symbols *path* defines."""
        ...


# ---------------------------------------------------------------------------
# External nm
# ---------------------------------------------------------------------------


class NmInspector:
    """Runs ``<tool> --undefined-only`` / ``<tool> --defined-only``.

    One process per call, so calls for different binaries can run in
    parallel threads.
    """

    def __init__(self, tool: str = "llvm-nm", timeout: float | None = 120.0) -> None:
        self.tool = tool
        self.timeout = timeout

    def list_undefined(self, path: str) -> str:
        return self._run("--undefined-only", path)

    def list_defined(self, path: str) -> str:
        return self._run("--defined-only", path)

    def _run(self, mode: str, path: str) -> str:
        try:
            proc = subprocess.run(
                [self.tool, mode, path],
                check=True,
                capture_output=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise InspectionFailed(path, f"{self.tool} not found")
        except subprocess.TimeoutExpired:
            raise InspectionFailed(path, f"{self.tool} timed out after {self.timeout}s")
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode(errors="replace").strip()
            raise InspectionFailed(
                path, f"{self.tool} {mode} exited with {e.returncode}: {stderr}"
            )
        except OSError as e:
            raise InspectionFailed(path, str(e))

        try:
            return proc.stdout.decode("ascii")
        except UnicodeDecodeError as e:
            raise InspectionFailed(path, f"non-ASCII output from {self.tool}: {e}")


# ---------------------------------------------------------------------------
# In-process ELF reader
# ---------------------------------------------------------------------------

_SKIPPED_TYPES = {"STT_FILE", "STT_SECTION"}


class ElfInspector:
    """Lists symbols from the ELF ``.symtab`` (or any symbol table) directly."""

    def list_undefined(self, path: str) -> str:
        lines = []
        for sym in self._symbols(path):
            if sym["st_shndx"] == "SHN_UNDEF":
                kind = "w" if sym["st_info"]["bind"] == "STB_WEAK" else "U"
                lines.append(f"{'':16} {kind} {sym.name}")
        return "\n".join(lines) + ("\n" if lines else "")

    def list_defined(self, path: str) -> str:
        lines = []
        for sym in self._symbols(path):
            if sym["st_shndx"] == "SHN_UNDEF":
                continue
            if sym["st_info"]["type"] in _SKIPPED_TYPES:
                continue
            lines.append(f"{sym['st_value']:016x} {_nm_type(sym)} {sym.name}")
        return "\n".join(lines) + ("\n" if lines else "")

    def _symbols(self, path: str) -> list:
        try:
            with open(path, "rb") as f:
                elf = ELFFile(f)
                tables = [elf.get_section_by_name(".symtab")]
                if not isinstance(tables[0], SymbolTableSection):
                    tables = [
                        sec for sec in elf.iter_sections()
                        if isinstance(sec, SymbolTableSection)
                    ]
                return [
                    sym
                    for table in tables
                    for sym in table.iter_symbols()
                    if sym.name
                ]
        except (OSError, ELFError) as e:
            raise InspectionFailed(path, str(e))


def _nm_type(sym) -> str:
    """Approximate the nm type letter of a defined symbol."""
    kind = {"STT_FUNC": "t", "STT_OBJECT": "d"}.get(sym["st_info"]["type"], "r")
    if sym["st_info"]["bind"] in ("STB_GLOBAL", "STB_WEAK"):
        kind = kind.upper()
    return kind


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_inspector(config: Config) -> SymbolInspector:
    """Return the inspector selected by ``config.backend``."""
    if config.backend == "elf":
        return ElfInspector()
    return NmInspector(tool=config.nm_tool, timeout=config.timeout)


def describe_inspector(inspector: SymbolInspector) -> str:
    if isinstance(inspector, NmInspector):
        return f"nm ({os.path.basename(inspector.tool)})"
    return type(inspector).__name__
