"""Protocol definition for the raw catalog source."""

from __future__ import annotations

from typing import Protocol, Sequence

from absopds.catalog.types import Library, RawCatalogItem


class CatalogSource(Protocol):
    """Upstream API used by the library service."""

    async def fetch_libraries(self) -> Sequence[Library]:
        ...

    async def fetch_library(self, library_id: str) -> Library:
        ...

    async def fetch_items(self, library_id: str) -> Sequence[RawCatalogItem]:
        ...
