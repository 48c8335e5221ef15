"""genmethods: generate Go methods that wrap handle-taking free functions."""

from __future__ import annotations

from . import errors
from .classify import Classifier, Decision
from .config import GenConfig, load_config
from .emit import OutputUnit, emit, render
from .gen import Generator, generate
from .loader import load_package
from .synth import MethodDecl, synthesize

__all__ = [
    "Classifier",
    "Decision",
    "GenConfig",
    "Generator",
    "MethodDecl",
    "OutputUnit",
    "emit",
    "errors",
    "generate",
    "load_config",
    "load_package",
    "render",
    "synthesize",
]
