"""Exceptions raised by layerlab.

Structural edits that cannot be applied are not errors: GraphEditor returns
the network unchanged. Exceptions are reserved for untrusted input.
"""

from typing import Any


class LayerlabError(Exception):
    """Base exception for all layerlab errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class NetworkLoadError(LayerlabError):
    """Raised when a saved network document cannot be loaded."""
