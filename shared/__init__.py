"""Shared utilities package."""

from .version import __build_signature__, __version__  # noqa: F401

__all__ = [
    "__version__",
    "__build_signature__",
]
