# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import typer

from . import find, search

app = typer.Typer(
    name="whatexec",
    help="Locate executables via PATH with a ranked filesystem fallback.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
find.register(app)
search.register(app)


def main() -> None:
    """Run the ``whatexec`` console script."""

    app()


__all__ = ["app", "main"]
