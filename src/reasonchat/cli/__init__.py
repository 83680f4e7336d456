"""Command-line interface for reasonchat."""

from .app import app, main

__all__ = ["app", "main"]
