"""Logging setup for the command line and embedding hosts."""

from .logging import configure_logging

__all__ = ["configure_logging"]
