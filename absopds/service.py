"""Library service: fetch from Audiobookshelf, then filter, page or categorize."""

from __future__ import annotations

import asyncio
import time
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from absopds import logger
from absopds.catalog.engine import build_category_listing, filter_and_paginate
from absopds.catalog.strategy import ExecutionStrategy
from absopds.catalog.types import (
    CatalogQuery,
    CategoryEntry,
    FacetType,
    Library,
    NormalizedItem,
    RawCatalogItem,
)
from absopds.config import CatalogConfig
from absopds.upstream.protocols import CatalogSource

_T = TypeVar("_T")


class LibraryService:
    def __init__(
        self,
        source: CatalogSource,
        config: CatalogConfig,
        strategy: Optional[ExecutionStrategy] = None,
    ) -> None:
        self.source = source
        self.config = config
        self.strategy = strategy or ExecutionStrategy.from_config(config)

    async def get_libraries(self) -> List[Library]:
        return list(await self.source.fetch_libraries())

    async def get_library(self, library_id: str) -> Library:
        return await self.source.fetch_library(library_id)

    async def get_filtered_items(
        self, library_id: str, query: CatalogQuery
    ) -> Tuple[List[NormalizedItem], int]:
        """Items of ``query.page`` and the total number of matches."""
        items = await self.source.fetch_items(library_id)
        started = time.monotonic()
        page_items, total = await self._run(
            items,
            lambda: filter_and_paginate(items, query, self.config, self.strategy),
        )
        logger.debug(
            f"Library {library_id}: {total} of {len(items)} items matched, "
            f"page {query.page} has {len(page_items)} ({(time.monotonic() - started) * 1000:.0f}ms)"
        )
        return page_items, total

    async def get_categories(
        self, library_id: str, facet_type: FacetType, query: CatalogQuery
    ) -> Tuple[Library, List[CategoryEntry]]:
        items, library = await asyncio.gather(
            self.source.fetch_items(library_id),
            self.source.fetch_library(library_id),
        )
        entries = await self._run(
            items,
            lambda: build_category_listing(items, facet_type, query, self.config, self.strategy),
        )
        logger.debug(f"Library {library_id}: {len(entries)} {facet_type.value} entries")
        return library, entries

    async def _run(self, items: Sequence[RawCatalogItem], work: Callable[[], _T]) -> _T:
        """Run small collections inline; move large ones off the event loop."""
        if self.strategy.is_parallel(len(items)):
            return await asyncio.to_thread(work)
        return work()
