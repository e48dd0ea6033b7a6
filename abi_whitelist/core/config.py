"""
core.config: Tooling configuration.

Loads settings from environment variables and .env files. Per-run
analysis flags live in ``abi_whitelist.orchestrator.AnalysisOptions``;
this module only covers how symbols are inspected and which symbols are
always whitelisted.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Symbols critical to module loading, whitelisted whatever their usage.
ALWAYS_INCLUDE: tuple[str, ...] = ("module_layout",)

_env_loaded = False


def _load_dotenv() -> None:
    """Load ``.env`` from the working directory and the home directory.

    Existing environment variables are never overridden.
    """
    global _env_loaded
    if _env_loaded:
        return
    for p in (Path.cwd() / ".env", Path.home() / ".env"):
        if p.exists():
            load_dotenv(p, override=False)
    _env_loaded = True


class Config(BaseModel):
    """
    Global runtime configuration.

    Create via ``load_config()`` which pre-loads the env file.
    """

    # ── Inspection ───────────────────────────────────────────────────
    backend: Literal["nm", "elf"] = Field(
        default="nm",
        description="'nm' runs an external nm tool, 'elf' reads symbols with pyelftools",
    )
    nm_tool: str = Field(default="llvm-nm", description="nm executable used by the 'nm' backend")
    timeout: float = Field(default=120.0, gt=0, description="Seconds allowed per nm invocation")
    jobs: int = Field(default_factory=lambda: os.cpu_count() or 1, ge=1)

    # ── Whitelist policy ─────────────────────────────────────────────
    always_include: list[str] = Field(default_factory=lambda: list(ALWAYS_INCLUDE))

    # ── Debug ────────────────────────────────────────────────────────
    debug: bool = False


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def load_config(**overrides: object) -> Config:
    """
    Load ``Config`` from environment, applying optional overrides.

    ``None`` overrides are ignored so CLI options left unset fall back to
    the environment.
    """
    _load_dotenv()
    defaults: dict = {"debug": _env_flag("ABI_WHITELIST_DEBUG")}

    backend = os.environ.get("ABI_WHITELIST_BACKEND")
    if backend:
        defaults["backend"] = backend
    nm_tool = os.environ.get("ABI_WHITELIST_NM")
    if nm_tool:
        defaults["nm_tool"] = nm_tool
    timeout = os.environ.get("ABI_WHITELIST_TIMEOUT")
    if timeout:
        defaults["timeout"] = timeout
    jobs = os.environ.get("ABI_WHITELIST_JOBS")
    if jobs:
        defaults["jobs"] = jobs
    always_include = os.environ.get("ABI_WHITELIST_ALWAYS_INCLUDE")
    if always_include is not None:
        defaults["always_include"] = [
            s.strip() for s in always_include.split(",") if s.strip()
        ]

    defaults.update({k: v for k, v in overrides.items() if v is not None})
    return Config(**defaults)  # type: ignore[arg-type]
