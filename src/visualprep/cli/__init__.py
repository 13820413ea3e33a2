"""CLI module for visualprep.

Provides the command-line interface for slicing, scaling, letterboxing,
converting and composing images.
"""

from __future__ import annotations

from visualprep.cli.main import app

__all__ = ["app"]
