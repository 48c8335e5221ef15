from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import replace
from pathlib import Path

import pytest
from pkgdata import PackageBuilder

from genmethods.emit import HEADER, OutputUnit, emit, format_source, render, write_output
from genmethods.errors import FormatError, RenderError, WriteError
from genmethods.rename import DEFAULT_RENAMES
from genmethods.synth import synthesize


def _methods():
    b = PackageBuilder()
    return (
        synthesize(
            b.func("DestroyWindow", [("win", "*Window")], doc=["// DestroyWindow destroys a window."]),
            renames=DEFAULT_RENAMES,
        ),
        synthesize(
            b.func("GetWindowSize", [("win", "*Window"), ("w", "*int32"), ("h", "*int32")], [("", "bool")]),
            renames=DEFAULT_RENAMES,
        ),
    )


EXPECTED = """\
// Code generated by "genmethods"; DO NOT EDIT.

package sdl

// DestroyWindow destroys a window.
func (win *Window) Destroy() {
\tDestroyWindow(win)
}

func (win *Window) GetSize(w *int32, h *int32) bool {
\treturn GetWindowSize(win, w, h)
}
"""


def test_render_methods():
    assert render(OutputUnit(package="sdl", methods=_methods())) == EXPECTED


def test_render_empty_unit_has_header_and_package_only():
    assert render(OutputUnit(package="sdl", methods=())) == f"{HEADER}\n\npackage sdl\n"


def test_render_named_and_multiple_results():
    b = PackageBuilder()
    m = synthesize(
        b.func("GetWindowPosition", [("win", "*Window")], [("x, y", "int32"), ("ok", "bool")]),
        renames={},
    )
    out = render(OutputUnit(package="sdl", methods=(m,)))
    assert "func (win *Window) GetWindowPosition() (x, y int32, ok bool) {\n" in out
    assert "\treturn GetWindowPosition(win)\n" in out


def test_render_unnamed_multiple_results():
    b = PackageBuilder()
    m = synthesize(b.func("Size", [("win", "*Window")], [("", "int32"), ("", "int32")]), renames={})
    out = render(OutputUnit(package="sdl", methods=(m,)))
    assert "func (win *Window) Size() (int32, int32) {\n" in out


def test_render_variadic_call():
    b = PackageBuilder()
    m = synthesize(b.func("SetHints", [("win", "*Window"), ("hints", "...int32")]), renames={})
    out = render(OutputUnit(package="sdl", methods=(m,)))
    assert "func (win *Window) SetHints(hints ...int32) {\n\tSetHints(win, hints...)\n}\n" in out


def test_render_rejects_invalid_identifier():
    m = replace(_methods()[0], name="Destroy Window")
    with pytest.raises(RenderError, match="invalid identifier"):
        render(OutputUnit(package="sdl", methods=(m,)))


def test_render_rejects_invalid_doc_comment():
    m = replace(_methods()[0], doc=("not a comment",))
    with pytest.raises(RenderError, match="invalid doc comment"):
        render(OutputUnit(package="sdl", methods=(m,)))


def test_render_rejects_invalid_package_name():
    with pytest.raises(RenderError):
        render(OutputUnit(package="", methods=()))


def test_format_source_missing_gofmt_raises_format_error(monkeypatch):
    def fake_run(*args, **kwargs):  # noqa: ANN001
        raise FileNotFoundError("gofmt")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(FormatError, match=r"gofmt not found"):
        format_source("package sdl\n")


def test_format_source_rejected_raises_format_error(monkeypatch):
    def fake_run(cmd, **kwargs):  # noqa: ANN001
        return subprocess.CompletedProcess(cmd, 2, stdout="", stderr="<standard input>:3:1: expected declaration")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(FormatError, match=r"expected declaration"):
        format_source("package sdl\n\nfunc (\n")


def test_emit_uses_gofmt_output(monkeypatch):
    seen = {}

    def fake_run(cmd, **kwargs):  # noqa: ANN001
        seen["cmd"] = cmd
        seen["input"] = kwargs["input"]
        return subprocess.CompletedProcess(cmd, 0, stdout="formatted\n", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    out = emit(OutputUnit(package="sdl", methods=_methods()), gofmt="/opt/go/bin/gofmt")
    assert out == "formatted\n"
    assert seen["cmd"] == ["/opt/go/bin/gofmt"]
    assert seen["input"] == EXPECTED


@pytest.mark.skipif(shutil.which("gofmt") is None, reason="gofmt not installed")
def test_rendered_output_is_gofmt_canonical():
    assert format_source(EXPECTED) == EXPECTED


def test_emit_writes_output_file(tmp_path: Path):
    out = tmp_path / "methods.go"
    text = emit(OutputUnit(package="sdl", methods=_methods()), out, gofmt=None)
    assert text == EXPECTED
    assert out.read_text(encoding="utf-8") == EXPECTED
    assert sorted(p.name for p in tmp_path.iterdir()) == ["methods.go"]


def test_write_output_replaces_existing_file(tmp_path: Path):
    out = tmp_path / "methods.go"
    out.write_text("old", encoding="utf-8")
    write_output(out, "new\n")
    assert out.read_text(encoding="utf-8") == "new\n"
    if os.name != "nt":
        assert out.stat().st_mode & 0o777 == 0o644


def test_write_output_missing_directory_raises_write_error(tmp_path: Path):
    with pytest.raises(WriteError, match="unable to write"):
        write_output(tmp_path / "missing" / "methods.go", "x")


def test_write_output_failed_replace_leaves_no_temp_file(tmp_path: Path, monkeypatch):
    def fake_replace(src, dst):  # noqa: ANN001
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fake_replace)

    with pytest.raises(WriteError, match="disk full"):
        write_output(tmp_path / "methods.go", "x")
    assert list(tmp_path.iterdir()) == []
