"""Utilities for generating the AI Study Camp content pages.

This package exposes the CLI entry points used by ``uv run pages`` to render
course letters and essays, convert markdown drafts, and preview section
navigation.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from studycamp_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
