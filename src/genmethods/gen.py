from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from .classify import Classifier
from .config import GenConfig
from .emit import OutputUnit, emit
from .errors import GenMethodsError, UnsupportedDeclarationError
from .loader.decls import BadDecl, Decl, FuncDecl, GenDecl, LoadedPackage, SourceFile
from .loader.scan import load_package
from .synth import MethodDecl, synthesize

logger = logging.getLogger(__name__)


class Generator:
    """Collects method wrappers for one loaded package, in declaration order."""

    def __init__(self, pkg: LoadedPackage, *, classifier: Classifier, renames: Mapping[str, str]):
        self.pkg = pkg
        self.classifier = classifier
        self.renames = renames
        self.methods: list[MethodDecl] = []

    def parse_pkg(self) -> None:
        for file in self.pkg.files:
            self.parse_file(file)

    def parse_file(self, file: SourceFile) -> None:
        logger.debug("file: %s", file.path)
        for decl in file.decls:
            try:
                self.parse_decl(decl)
            except GenMethodsError as e:
                raise type(e)(f"{file.path}: {_describe(decl)}: {e}") from e

    def parse_decl(self, decl: Decl) -> None:
        if isinstance(decl, GenDecl):
            return
        if isinstance(decl, FuncDecl):
            self.parse_func_decl(decl)
            return
        if isinstance(decl, BadDecl):
            raise UnsupportedDeclarationError(f"support for declaration kind {decl.kind!r} not yet implemented")
        raise UnsupportedDeclarationError(f"support for declaration type {type(decl).__name__} not yet implemented")

    def parse_func_decl(self, decl: FuncDecl) -> None:
        if not self.classifier.classify(decl, self.pkg).accepted:
            return
        method = synthesize(decl, renames=self.renames)
        logger.info("generating method: %s (%s)", method.name, decl.name)
        self.methods.append(method)

    def output_unit(self) -> OutputUnit:
        return OutputUnit(package=self.pkg.name, methods=tuple(self.methods))


def generate(
    config: GenConfig,
    *,
    output: str | Path | None = None,
    work_dir: Path | None = None,
    pkg: LoadedPackage | None = None,
) -> str:
    """Load `config.pkg`, generate its methods and emit them.

    Writes to `output` when given; the generated text is returned either way.
    A pre-loaded `pkg` skips the Go toolchain.
    """
    if pkg is None:
        pkg = load_package(config.pkg, work_dir=work_dir)
    gen = Generator(pkg, classifier=Classifier(config.receiver_types), renames=config.renames)
    gen.parse_pkg()
    return emit(gen.output_unit(), output, gofmt=config.gofmt)


def _describe(decl: Decl) -> str:
    if isinstance(decl, FuncDecl):
        return f"func {decl.name}"
    if isinstance(decl, GenDecl):
        return f"{decl.tok} declaration"
    return f"declaration at offset {decl.pos}"
