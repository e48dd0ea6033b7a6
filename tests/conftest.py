import pytest

from abi_whitelist.core import config as config_module


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep the developer's environment and .env files out of the tests."""
    for name in (
        "ABI_WHITELIST_NM",
        "ABI_WHITELIST_BACKEND",
        "ABI_WHITELIST_JOBS",
        "ABI_WHITELIST_TIMEOUT",
        "ABI_WHITELIST_ALWAYS_INCLUDE",
        "ABI_WHITELIST_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_env_loaded", True)
