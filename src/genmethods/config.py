from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from .errors import ConfigError
from .rename import DEFAULT_PKG, DEFAULT_RECEIVER_TYPES, DEFAULT_RENAMES


def default_pkg() -> str:
    """Return the default Go package path to generate methods for.

    Override with `GENMETHODS_PKG`.
    """
    return os.environ.get("GENMETHODS_PKG") or DEFAULT_PKG


@dataclass(frozen=True)
class GenConfig:
    pkg: str = field(default_factory=default_pkg)
    receiver_types: frozenset[str] = DEFAULT_RECEIVER_TYPES
    renames: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_RENAMES))
    gofmt: str | None = "gofmt"


def load_config(path: Path) -> GenConfig:
    """Load a generator config from JSON.

    Recognized keys (all optional; missing keys keep the defaults):

        {
          "pkg": "example.com/mod/sdl",
          "receiver_types": ["*example.com/mod/sdl.Window"],
          "renames": {"DestroyWindow": "Destroy"}
        }
    """
    try:
        obj = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"unable to read config {path}: {e}") from e
    except ValueError as e:
        raise ConfigError(f"invalid JSON in config {path}: {e}") from e
    if not isinstance(obj, dict):
        raise ConfigError(f"config {path}: top-level value must be an object")

    cfg = GenConfig()
    pkg = obj.get("pkg", cfg.pkg)
    if not isinstance(pkg, str) or not pkg:
        raise ConfigError(f"config {path}: 'pkg' must be a non-empty string")

    receiver_types = obj.get("receiver_types")
    if receiver_types is None:
        receiver_types = cfg.receiver_types
    elif not isinstance(receiver_types, list) or not all(isinstance(t, str) for t in receiver_types):
        raise ConfigError(f"config {path}: 'receiver_types' must be a list of strings")

    renames = obj.get("renames")
    if renames is None:
        renames = cfg.renames
    elif not isinstance(renames, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in renames.items()
    ):
        raise ConfigError(f"config {path}: 'renames' must map strings to strings")

    return GenConfig(pkg=pkg, receiver_types=frozenset(receiver_types), renames=dict(renames))
