from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Union

from .loader.decls import Field, FuncDecl
from .rename import method_name


@dataclass(frozen=True)
class CallExpr:
    func: str
    args: tuple[str, ...]
    ellipsis: bool = False  # last argument is spread (`args...`)


@dataclass(frozen=True)
class ReturnStmt:
    call: CallExpr


@dataclass(frozen=True)
class ExprStmt:
    call: CallExpr


Stmt = Union[ReturnStmt, ExprStmt]


@dataclass(frozen=True)
class MethodDecl:
    name: str
    recv: Field
    params: tuple[Field, ...]
    results: tuple[Field, ...] | None
    body: Stmt
    doc: tuple[str, ...] = ()


def synthesize(decl: FuncDecl, *, renames: Mapping[str, str]) -> MethodDecl:
    """Build a method that forwards to `decl`, with its first parameter as receiver.

    `decl` must already be accepted by the classifier: no receiver and a
    single-name first parameter. Type expressions and the result list are
    shared with `decl`, not copied.
    """
    first = decl.params[0]
    recv = Field(names=(first.names[0],), type=first.type)

    args = tuple(name for f in decl.params for name in f.names)
    call = CallExpr(func=decl.name, args=args, ellipsis=decl.params[-1].variadic)
    body: Stmt = ReturnStmt(call) if decl.results else ExprStmt(call)

    return MethodDecl(
        name=method_name(decl.name, renames),
        recv=recv,
        params=decl.params[1:],
        results=decl.results,
        body=body,
        doc=tuple(decl.doc or ()),
    )
