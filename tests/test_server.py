from abi_whitelist.tools.server import find_missing_symbols_impl, generate_whitelist_impl

from support import SCENARIO, FakeInspector, make_tree


def test_generate_whitelist_impl(tmp_path):
    make_tree(tmp_path, ["vmlinux", "m1.ko", "m2.ko"])
    data = generate_whitelist_impl(str(tmp_path), inspector=FakeInspector(SCENARIO))

    assert data["modules"] == ["m1.ko", "m2.ko"]
    assert data["document"]["common"] == ["alpha", "module_layout"]
    assert "# required by m2.ko\n  beta\n" in data["whitelist"]


def test_find_missing_symbols_impl(tmp_path):
    make_tree(tmp_path, ["vmlinux", "m1.ko"])
    binaries = dict(SCENARIO, **{"m1.ko": {"undefined": ["alpha", "ghost_fn"]}})

    data = find_missing_symbols_impl(str(tmp_path), inspector=FakeInspector(binaries))

    assert data["missing"] == [{"module": "m1.ko", "symbol": "ghost_fn"}]
    assert data["summary"].startswith("Checked 1 module(s).")
