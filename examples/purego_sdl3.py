from __future__ import annotations

import logging
from pathlib import Path

from genmethods import GenConfig, generate


def main() -> None:
    # Generate `methods_gen.go` for a local checkout of purego-sdl3.
    #
    # Requirements:
    # - Go toolchain installed (`go` and `gofmt` on PATH)
    # - Run from (or point `work_dir` at) a module that can resolve the package
    #
    # Equivalent CLI, run inside the checkout: genmethods -pkg ./sdl -o sdl/methods_gen.go -v
    logging.basicConfig(level=logging.INFO)

    checkout = Path("purego-sdl3")
    out = checkout / "sdl" / "methods_gen.go"
    generate(GenConfig(pkg="./sdl"), output=out, work_dir=checkout)
    print(f"wrote {out}")


if __name__ == "__main__":
    main()
