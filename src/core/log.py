"""Configuración de logging para la CLI.

Los módulos de librería solo declaran `logger = logging.getLogger(__name__)`;
quien ejecuta (la CLI) decide handler y nivel aquí.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "morphik-docs-rich"


def configure_logging(level: str = "WARNING", *, console: Console | None = None) -> logging.Logger:
    """Instala un `RichHandler` (stderr) en el root logger una sola vez."""

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return root

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    return root
