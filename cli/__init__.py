"""Command line interface for sproc-gen."""

from sprocgen import __version__

__all__ = ["__version__"]
