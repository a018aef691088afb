"""Entry points used by the library service and the HTTP layer."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from absopds.catalog.categorizer import categorize
from absopds.catalog.item_filter import filter_items
from absopds.catalog.normalizer import normalize_item
from absopds.catalog.paginator import paginate
from absopds.catalog.strategy import ExecutionStrategy
from absopds.catalog.types import (
    CatalogQuery,
    CategoryEntry,
    FacetType,
    NormalizedItem,
    RawCatalogItem,
)
from absopds.config import CatalogConfig

__all__ = ["filter_and_paginate", "build_category_listing", "paginate"]


def filter_and_paginate(
    raw_items: Sequence[RawCatalogItem],
    query: CatalogQuery,
    config: CatalogConfig,
    strategy: Optional[ExecutionStrategy] = None,
) -> Tuple[List[NormalizedItem], int]:
    """Normalized items of the requested page plus the total match count.

    Only the items inside the page window are normalized.
    """
    strategy = strategy or ExecutionStrategy.from_config(config)
    result = filter_items(raw_items, query, config.show_audiobooks, strategy)
    start = query.page * config.page_size
    if start >= result.total_count:
        return [], result.total_count
    window = result.items[start:start + config.page_size]
    return [normalize_item(item) for item in window], result.total_count


def build_category_listing(
    raw_items: Sequence[RawCatalogItem],
    facet_type: FacetType,
    query: CatalogQuery,
    config: CatalogConfig,
    strategy: Optional[ExecutionStrategy] = None,
) -> List[CategoryEntry]:
    strategy = strategy or ExecutionStrategy.from_config(config)
    return categorize(
        raw_items,
        facet_type,
        start=query.start,
        bucket_mode=config.show_char_cards,
        strategy=strategy,
    )
