from __future__ import annotations

from dataclasses import replace

from pkgdata import RECEIVER_TYPES, WINDOW, PackageBuilder

from genmethods.classify import Classifier


def _classify(b: PackageBuilder, decl, receiver_types=RECEIVER_TYPES):
    pkg = b.package(("a.go", [decl]))
    return Classifier(receiver_types).classify(decl, pkg)


def test_accepts_allow_listed_first_param():
    b = PackageBuilder()
    d = _classify(b, b.func("DestroyWindow", [("win", "*Window")]))
    assert d.accepted
    assert d.type == WINDOW


def test_rejects_first_param_outside_allow_list():
    b = PackageBuilder()
    d = _classify(b, b.func("PollEvent", [("ev", "*Event")], [("", "bool")]))
    assert not d.accepted
    assert d.reason == "receiver type"


def test_rejects_grouped_first_param_even_if_type_allowed():
    b = PackageBuilder()
    d = _classify(b, b.func("Foo", [("a, b", "int")]), receiver_types={"int"})
    assert not d.accepted
    assert d.reason == "grouped params"


def test_rejects_unnamed_first_param():
    b = PackageBuilder()
    d = _classify(b, b.func("Foo", [("", "*Window")]))
    assert not d.accepted
    assert d.reason == "grouped params"


def test_rejects_methods():
    b = PackageBuilder()
    d = _classify(b, b.func("Resize", [("other", "*Window")], recv=("win", "*Window")))
    assert not d.accepted
    assert d.reason == "method"


def test_rejects_functions_without_params():
    b = PackageBuilder()
    d = _classify(b, b.func("Init", [], [("", "bool")]))
    assert not d.accepted
    assert d.reason == "no params"


def test_rejects_generic_functions():
    b = PackageBuilder()
    decl = replace(b.func("Each", [("win", "*Window")]), type_params=(b.field("T", "any"),))
    d = _classify(b, decl)
    assert not d.accepted
    assert d.reason == "generic"


def test_rejects_unresolved_type():
    b = PackageBuilder()
    d = _classify(b, b.func("Foo", [("x", "unknownpkg.Thing")]))
    assert not d.accepted
    assert d.type is None


def test_match_is_exact():
    b = PackageBuilder()
    # Same type name, different package path.
    d = _classify(b, b.func("DestroyWindow", [("win", "*Window")]), receiver_types={"*other.com/sdl.Window"})
    assert not d.accepted
    assert d.type == WINDOW


def test_classification_is_repeatable():
    b = PackageBuilder()
    decls = [
        b.func("DestroyWindow", [("win", "*Window")]),
        b.func("PollEvent", [("ev", "*Event")]),
        b.func("Foo", [("a, b", "*Window")]),
    ]
    pkg = b.package(("a.go", decls))
    c = Classifier(RECEIVER_TYPES)
    first = [c.classify(d, pkg) for d in decls]
    second = [c.classify(d, pkg) for d in decls]
    assert first == second
    assert [d.accepted for d in first] == [True, False, False]


def test_decisions_are_logged(caplog):
    import logging

    caplog.set_level(logging.DEBUG, logger="genmethods.classify")
    b = PackageBuilder()
    _classify(b, b.func("DestroyWindow", [("win", "*Window")]))
    assert "func DestroyWindow: accepted=True" in caplog.text
    assert WINDOW in caplog.text
