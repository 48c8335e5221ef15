"""Domain-specific errors for genmethods."""

from __future__ import annotations


class GenMethodsError(Exception):
    """Base error for genmethods."""


class LoadError(GenMethodsError):
    """Raised when a Go package cannot be located, parsed or type-checked."""


class UnsupportedDeclarationError(GenMethodsError):
    """Raised when a top-level declaration kind is outside the known taxonomy."""


class RenderError(GenMethodsError):
    """Raised when a synthesized declaration cannot be rendered to Go source."""


class FormatError(GenMethodsError):
    """Raised when rendered Go source is rejected by gofmt."""


class WriteError(GenMethodsError):
    """Raised when generated output cannot be written to its destination."""


class ConfigError(GenMethodsError):
    """Raised when a generator config file is malformed."""
