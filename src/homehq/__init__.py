"""HomeHQ event creation and task suggestion core."""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["__version__", "main"]


def main() -> None:
    from .cli import main as cli_main

    cli_main()
