"""Audiobookshelf API access: client, payload parsing and failure handling."""

from .client import AbsClient
from .protocols import CatalogSource
from .resilience import UpstreamFailure

__all__ = ["AbsClient", "CatalogSource", "UpstreamFailure"]
