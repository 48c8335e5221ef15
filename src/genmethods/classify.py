from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .loader.decls import FuncDecl, LoadedPackage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    accepted: bool
    reason: str
    type: str | None = None  # resolved first-parameter type, when observed


class Classifier:
    """Decide which free functions become methods on an allow-listed receiver type.

    Matching is exact equality of the first parameter's canonical type string
    (e.g. "*example.com/sdl.Window") against `receiver_types`.
    """

    def __init__(self, receiver_types: Iterable[str]):
        self.receiver_types = frozenset(receiver_types)

    def classify(self, decl: FuncDecl, pkg: LoadedPackage) -> Decision:
        d = self._classify(decl, pkg)
        logger.debug("func %s: accepted=%s (%s) type=%s", decl.name, d.accepted, d.reason, d.type)
        return d

    def _classify(self, decl: FuncDecl, pkg: LoadedPackage) -> Decision:
        if decl.recv is not None:
            return Decision(False, "method")
        if decl.type_params:
            return Decision(False, "generic")
        if not decl.params:
            return Decision(False, "no params")
        first = decl.params[0]
        if len(first.names) != 1:
            # TODO: add support for `a, b T` first parameters.
            return Decision(False, "grouped params")
        typ = pkg.type_of(first.type)
        if typ is None or typ not in self.receiver_types:
            return Decision(False, "receiver type", typ)
        return Decision(True, "receiver type", typ)
