"""
erbgen CLI - embedded template compiler

Usage:
    erbgen [DIRECTORY] [--config PATH] [--debug]
    python -m erbgen [DIRECTORY] [--config PATH] [--debug]

Scans DIRECTORY (default: current directory) for Python modules with
"# +erb" annotated signature stubs and writes <module>_gen.py next to them.
Success is silent; errors are logged and exit with status 1.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import fire

from erbgen.core.engine.config_model import resolve_config
from erbgen.core.engine.errors import ErbgenError
from erbgen.core.engine.generator import Generator

logger = logging.getLogger("erbgen")


def run(directory: str | None = None, config: str | None = None, debug: bool = False) -> None:
    """Generate template functions for every annotated declaration in DIRECTORY.

    Args:
        directory: Directory to scan (default: current working directory)
        config: Path to a YAML config file (default: DIRECTORY/erbgen.yaml if present)
        debug: Enable debug logging
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    target = Path(str(directory)) if directory is not None else Path.cwd()

    try:
        generator = Generator(resolve_config(target, str(config) if config is not None else None))
        generator.run(target)
    except ErbgenError as e:
        logger.error("%s", e)
        logger.debug("traceback", exc_info=True)
        sys.exit(1)


def main() -> None:
    """erbgen CLI entry point (called from python -m erbgen)."""
    fire.Fire(run, name="erbgen")


if __name__ == "__main__":
    main()
