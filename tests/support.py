"""Synthetic kernel trees and an in-memory symbol inspector for the tests."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from abi_whitelist.core.errors import InspectionFailed


class FakeInspector:
    """Serves nm-style listings from a table keyed by file base name.

    ``binaries`` maps a base name to a dict with optional ``undefined``,
    ``exported`` and ``private`` symbol lists. Names listed in ``broken``
    fail inspection.
    """

    def __init__(self, binaries: dict[str, dict[str, list[str]]], broken=()) -> None:
        self.binaries = binaries
        self.broken = set(broken)
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def _entry(self, mode: str, path: str) -> dict[str, list[str]]:
        name = os.path.basename(path)
        with self._lock:
            self.calls.append((mode, name))
        if name in self.broken:
            raise InspectionFailed(path, "synthetic failure")
        return self.binaries.get(name, {})

    def list_undefined(self, path: str) -> str:
        entry = self._entry("undefined", path)
        return "".join(f"                 U {s}\n" for s in entry.get("undefined", []))

    def list_defined(self, path: str) -> str:
        entry = self._entry("defined", path)
        lines = []
        for i, s in enumerate(entry.get("exported", [])):
            lines.append(f"{i:016x} T {s}\n")
            lines.append(f"{i:016x} r __ksymtab_{s}\n")
            lines.append(f"{i:016x} r __kstrtab_{s}\n")
        for i, s in enumerate(entry.get("private", [])):
            lines.append(f"{i:016x} t {s}\n")
        return "".join(lines)


def make_tree(root: Path, files: list[str]) -> Path:
    """Create empty files at the given relative paths below *root*."""
    for rel in files:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"")
    return root


# vmlinux exports alpha and beta; m1 needs alpha, m2 needs alpha and beta.
SCENARIO = {
    "vmlinux": {"exported": ["alpha", "beta"], "private": ["secret"]},
    "m1.ko": {"undefined": ["alpha"]},
    "m2.ko": {"undefined": ["alpha", "beta"]},
}
