"""Per-item inclusion rules for catalog queries."""

from __future__ import annotations

from typing import Optional, Sequence

from absopds.catalog.matchers import QueryMatchers
from absopds.catalog.strategy import ExecutionStrategy
from absopds.catalog.types import CatalogQuery, FilterResult, RawCatalogItem, RawMetadata


def _free_text_fields(metadata: RawMetadata) -> tuple[Optional[str], ...]:
    return (
        metadata.title,
        metadata.subtitle,
        metadata.description,
        metadata.publisher,
        metadata.isbn,
        metadata.language,
        metadata.published_year,
        metadata.author_name,
    ) + metadata.genres + metadata.tags


def item_matches(
    item: RawCatalogItem,
    query: CatalogQuery,
    matchers: QueryMatchers,
    show_non_ebook_formats: bool,
) -> bool:
    """Apply the format, search/facet, author and title gates in order."""
    if item.ebook_format is None and not show_non_ebook_formats:
        return False

    metadata = item.metadata
    if query.type is not None:
        if matchers.facet_name is not None and not matchers.facet_name.matches_any(
            query.type.match_fields(metadata)
        ):
            return False
    elif matchers.free_text is not None:
        if not matchers.free_text.matches_any(_free_text_fields(metadata)):
            return False

    if matchers.author is not None and not matchers.author.matches(metadata.author_name):
        return False

    if matchers.title is not None and not (
        matchers.title.matches(metadata.title) or matchers.title.matches(metadata.subtitle)
    ):
        return False

    return True


def filter_items(
    items: Sequence[RawCatalogItem],
    query: CatalogQuery,
    show_non_ebook_formats: bool,
    strategy: Optional[ExecutionStrategy] = None,
) -> FilterResult:
    """Return the matching items in input order with their count."""
    strategy = strategy or ExecutionStrategy()
    matchers = QueryMatchers.from_query(query)

    def _predicate(item: RawCatalogItem) -> bool:
        return item_matches(item, query, matchers, show_non_ebook_formats)

    matched = strategy.filter(items, _predicate)
    return FilterResult(items=matched, total_count=len(matched))
