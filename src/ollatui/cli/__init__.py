"""Command-line entry point for ollatui."""

from .app import app, main

__all__ = ["app", "main"]
