import pytest
from typer.testing import CliRunner

from abi_whitelist import orchestrator
from abi_whitelist.main import app

from support import SCENARIO, FakeInspector, make_tree

runner = CliRunner()


@pytest.fixture
def fake(monkeypatch):
    inspector = FakeInspector(dict(SCENARIO, **{"m1.ko": {"undefined": ["alpha", "ghost_fn"]}}))
    monkeypatch.setattr(orchestrator, "create_inspector", lambda config: inspector)
    return inspector


@pytest.fixture
def tree(tmp_path):
    return make_tree(tmp_path / "dist", ["vmlinux", "m1.ko", "m2.ko"])


def test_writes_whitelist_file(tree, tmp_path, fake):
    target = tmp_path / "abi_whitelist"
    result = runner.invoke(app, [str(tree), "--whitelist", str(target)])

    assert result.exit_code == 0, result.output
    assert target.read_text() == (
        "[abi_whitelist]\n"
        "  alpha\n"
        "  module_layout\n"
        "\n"
        "# required by m2.ko\n"
        "  beta\n"
    )
    assert "Symbol ghost_fn required by m1.ko but not provided" in result.output


def test_stdout_is_default(tree, fake):
    result = runner.invoke(app, [str(tree), "--skip-report-missing", "--no-module-grouping"])

    assert result.exit_code == 0, result.output
    assert "[abi_whitelist]\n  alpha\n  beta\n  module_layout\n" in result.output
    assert "ghost_fn" not in result.output


def test_module_whitelists(tree, tmp_path, fake):
    target = tmp_path / "abi_whitelist"
    result = runner.invoke(app, [
        str(tree), "--whitelist", str(target), "--emit-module-whitelists",
    ])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "abi_whitelist_m1").read_text() == "[abi_whitelist]\n  alpha\n"
    assert (tmp_path / "abi_whitelist_m2").read_text() == "[abi_whitelist]\n  alpha\n  beta\n"


def test_print_modules_and_filters(tree, tmp_path, fake):
    target = tmp_path / "abi_whitelist"
    result = runner.invoke(app, [
        str(tree), "--whitelist", str(target), "--print-modules", "--module-filter", "m2*",
    ])

    assert result.exit_code == 0, result.output
    assert "m2.ko" in result.output
    assert "  m1.ko" not in result.output
    # filtered runs never report missing symbols
    assert "ghost_fn" not in result.output


def test_always_include_option(tree, tmp_path, fake):
    target = tmp_path / "abi_whitelist"
    result = runner.invoke(app, [
        str(tree), "--whitelist", str(target), "--always-include", "__put_task_struct",
    ])

    assert result.exit_code == 0, result.output
    assert target.read_text().startswith("[abi_whitelist]\n  alpha\n  __put_task_struct\n\n")


def test_missing_directory(tmp_path, fake):
    result = runner.invoke(app, [str(tmp_path / "nope")])
    assert result.exit_code == 1
    assert fake.calls == []


def test_no_kernel_image(tmp_path, fake):
    make_tree(tmp_path, ["m1.ko"])
    result = runner.invoke(app, [str(tmp_path)])
    assert result.exit_code == 1
    assert "vmlinux" in result.output


def test_module_whitelists_require_a_path(tree, fake):
    result = runner.invoke(app, [str(tree), "--emit-module-whitelists"])
    assert result.exit_code == 1
    assert fake.calls == []


def test_inspection_failure(tree, tmp_path, monkeypatch):
    broken = FakeInspector(SCENARIO, broken=["m2.ko"])
    monkeypatch.setattr(orchestrator, "create_inspector", lambda config: broken)
    target = tmp_path / "abi_whitelist"

    result = runner.invoke(app, [str(tree), "--whitelist", str(target)])

    assert result.exit_code == 1
    assert not target.exists()


def test_invalid_backend(tree, fake):
    result = runner.invoke(app, [str(tree), "--backend", "objdump"])
    assert result.exit_code == 1


def test_invalid_environment_value(tree, fake, monkeypatch):
    monkeypatch.setenv("ABI_WHITELIST_JOBS", "many")
    result = runner.invoke(app, [str(tree)])
    assert result.exit_code == 1
    assert "Error" in result.output
    assert fake.calls == []
