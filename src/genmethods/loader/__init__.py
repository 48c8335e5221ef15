"""Go package loading: declarations plus resolved parameter types."""

from __future__ import annotations

from .decls import BadDecl, Field, FuncDecl, GenDecl, LoadedPackage, SourceFile, TypeExpr
from .scan import decode_scan, load_package

__all__ = [
    "BadDecl",
    "Field",
    "FuncDecl",
    "GenDecl",
    "LoadedPackage",
    "SourceFile",
    "TypeExpr",
    "decode_scan",
    "load_package",
]
