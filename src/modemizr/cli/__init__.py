"""Command-line interface for playing and estimating document reveals."""

from .main import main

__all__ = ["main"]
