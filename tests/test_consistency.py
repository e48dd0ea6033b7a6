from abi_whitelist.core.models import MissingSymbol
from abi_whitelist.tools.consistency_checker import (
    find_missing_symbols,
    report_missing_symbols,
)


def test_reports_unprovided_symbol():
    undefined = {"m.ko": ["alpha", "ghost_fn"], "n.ko": ["alpha"]}
    assert find_missing_symbols(undefined, {"alpha"}) == [MissingSymbol("m.ko", "ghost_fn")]


def test_nothing_missing():
    assert find_missing_symbols({"m.ko": ["alpha"]}, {"alpha", "beta"}) == []


def test_order_follows_modules_then_symbols():
    undefined = {"z.ko": ["a", "b"], "a.ko": ["c"]}
    assert find_missing_symbols(undefined, set()) == [
        MissingSymbol("z.ko", "a"),
        MissingSymbol("z.ko", "b"),
        MissingSymbol("a.ko", "c"),
    ]


def test_report_format(capsys):
    report_missing_symbols([MissingSymbol("m.ko", "ghost_fn")])
    err = capsys.readouterr().err
    assert "Symbol ghost_fn required by m.ko but not provided" in err
