"""OPDS catalog server for Audiobookshelf libraries."""

from absopds.__version__ import __version__

__all__ = ["__version__"]
