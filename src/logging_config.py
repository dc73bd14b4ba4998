"""Logging setup for the layercheck command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Route all log records to stderr through a rich handler.

    Reports are written to stdout, so nothing logged here can corrupt a
    structured payload.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=verbose,
        show_time=verbose,
        show_path=verbose,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


__all__ = ["setup_logging"]
