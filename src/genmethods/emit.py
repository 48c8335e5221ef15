from __future__ import annotations

import logging
import os
import re
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .errors import FormatError, RenderError, WriteError
from .loader.decls import Field
from .synth import MethodDecl, ReturnStmt

logger = logging.getLogger(__name__)

HEADER = '// Code generated by "genmethods"; DO NOT EDIT.'

_IDENT_RE = re.compile(r"[^\W\d]\w*")


@dataclass(frozen=True)
class OutputUnit:
    package: str
    methods: tuple[MethodDecl, ...]


def emit(unit: OutputUnit, output: str | Path | None = None, *, gofmt: str | None = "gofmt") -> str:
    """Render `unit` as Go source, format it and optionally write it to `output`.

    Returns the generated text. Pass `gofmt=None` to skip the gofmt pass.
    """
    src = render(unit)
    if gofmt is not None:
        src = format_source(src, gofmt=gofmt)
    if output is not None:
        write_output(Path(output), src)
    return src


def render(unit: OutputUnit) -> str:
    _check_ident(unit.package, what="package name")
    lines = [HEADER, "", f"package {unit.package}"]
    for m in unit.methods:
        lines.append("")
        lines.extend(_render_method(m))
    return "\n".join(lines) + "\n"


def format_source(src: str, *, gofmt: str = "gofmt") -> str:
    try:
        proc = subprocess.run(
            [gofmt],
            input=src,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise FormatError(f"gofmt not found (`{gofmt}` is missing from PATH)") from e
    if proc.returncode != 0:
        raise FormatError(f"gofmt rejected generated source:\n{proc.stderr}\n{src}")
    return proc.stdout


def write_output(path: Path, data: str) -> None:
    logger.debug("writing to %s", path)
    try:
        fd, tmp = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
    except OSError as e:
        raise WriteError(f"unable to write {path}: {e}") from e
    # Write to a sibling temp file and rename so `path` is never left half-written.
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except OSError as e:
        raise WriteError(f"unable to write {path}: {e}") from e
    finally:
        try:
            if os.path.exists(tmp):
                os.unlink(tmp)
        except OSError:
            pass


def _render_method(m: MethodDecl) -> list[str]:
    _check_ident(m.name, what="method name")
    for line in m.doc:
        if not line.startswith(("//", "/*")):
            raise RenderError(f"method {m.name}: invalid doc comment {line!r}")

    recv = _render_fields((m.recv,), where=m.name)
    params = _render_fields(m.params, where=m.name)
    sig = f"func ({recv}) {m.name}({params})"
    if m.results:
        results = _render_fields(m.results, where=m.name)
        if len(m.results) == 1 and not m.results[0].names:
            sig += f" {results}"
        else:
            sig += f" ({results})"

    call = m.body.call
    _check_ident(call.func, what=f"method {m.name}: callee")
    for a in call.args:
        _check_ident(a, what=f"method {m.name}: argument")
    args = ", ".join(call.args)
    if call.ellipsis:
        if not call.args:
            raise RenderError(f"method {m.name}: spread call without arguments")
        args += "..."
    stmt = f"{call.func}({args})"
    if isinstance(m.body, ReturnStmt):
        stmt = f"return {stmt}"

    return [*m.doc, sig + " {", f"\t{stmt}", "}"]


def _render_fields(fields: tuple[Field, ...], *, where: str) -> str:
    parts: list[str] = []
    for f in fields:
        t = f.type.text
        if not t or "\n" in t:
            raise RenderError(f"method {where}: invalid type expression {t!r}")
        for n in f.names:
            _check_ident(n, what=f"method {where}: parameter")
        parts.append(f"{', '.join(f.names)} {t}" if f.names else t)
    return ", ".join(parts)


def _check_ident(name: str, *, what: str) -> None:
    if not _IDENT_RE.fullmatch(name):
        raise RenderError(f"{what}: invalid identifier {name!r}")
