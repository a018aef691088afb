"""Distinct facet values and first-letter buckets for category browsing."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional, Sequence

from absopds.catalog.strategy import ExecutionStrategy
from absopds.catalog.text import fold_initial, is_bucket_letter
from absopds.catalog.types import (
    CategoryEntry,
    CategoryValue,
    FacetType,
    LetterBucket,
    RawCatalogItem,
)


def distinct_values(
    items: Sequence[RawCatalogItem],
    facet_type: FacetType,
    strategy: Optional[ExecutionStrategy] = None,
) -> List[str]:
    """All non-empty values of ``facet_type`` in the library, sorted by codepoint."""
    strategy = strategy or ExecutionStrategy()

    def _extract(item: RawCatalogItem) -> Iterable[str]:
        return (value for value in facet_type.values(item.metadata) if value)

    return sorted(strategy.distinct(items, _extract))


def letter_buckets(values: Iterable[str]) -> List[LetterBucket]:
    """Count values per folded A-Z initial; other initials are left out."""
    counts: Counter[str] = Counter()
    for value in values:
        initial = fold_initial(value)
        if is_bucket_letter(initial):
            counts[initial] += 1
    return [LetterBucket(letter=letter, count=counts[letter]) for letter in sorted(counts)]


def values_starting_with(values: Iterable[str], start: Optional[str]) -> List[str]:
    if not start:
        return list(values)
    wanted = start.strip().upper()
    return [value for value in values if fold_initial(value) == wanted]


def categorize(
    items: Sequence[RawCatalogItem],
    facet_type: FacetType,
    start: Optional[str] = None,
    bucket_mode: bool = False,
    strategy: Optional[ExecutionStrategy] = None,
) -> List[CategoryEntry]:
    """Bucketed counts when browsing without ``start``, value list otherwise."""
    values = distinct_values(items, facet_type, strategy)
    if bucket_mode and not start:
        return list(letter_buckets(values))
    return [CategoryValue(value=value) for value in values_starting_with(values, start)]
