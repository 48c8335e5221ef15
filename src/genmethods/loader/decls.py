from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union


@dataclass(frozen=True)
class TypeExpr:
    text: str  # Go source text of the type expression, e.g. "*Window"
    pos: int  # token.Pos of the expression in the loaded file set


@dataclass(frozen=True)
class Field:
    names: tuple[str, ...]
    type: TypeExpr

    @property
    def variadic(self) -> bool:
        return self.type.text.startswith("...")


@dataclass(frozen=True)
class FuncDecl:
    name: str
    params: tuple[Field, ...]
    results: tuple[Field, ...] | None = None
    doc: tuple[str, ...] | None = None
    recv: tuple[Field, ...] | None = None
    type_params: tuple[Field, ...] = ()
    pos: int = 0


@dataclass(frozen=True)
class GenDecl:
    tok: str  # import, const, type or var
    pos: int = 0


@dataclass(frozen=True)
class BadDecl:
    kind: str
    pos: int = 0


Decl = Union[FuncDecl, GenDecl, BadDecl]


@dataclass(frozen=True)
class SourceFile:
    path: str
    decls: tuple[Decl, ...]


@dataclass(frozen=True)
class LoadedPackage:
    name: str
    path: str
    files: tuple[SourceFile, ...]
    types: Mapping[int, str] = field(default_factory=dict)

    def type_of(self, expr: TypeExpr) -> str | None:
        """Return the canonical type string resolved for `expr`, if any."""
        return self.types.get(expr.pos)
