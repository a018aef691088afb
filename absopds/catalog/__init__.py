"""Catalog query engine: filtering, normalization, categories and pagination."""

from .categorizer import categorize, distinct_values, letter_buckets
from .engine import build_category_listing, filter_and_paginate, paginate
from .item_filter import filter_items, item_matches
from .matchers import Matcher, QueryMatchers, compile_literal
from .normalizer import normalize_item
from .strategy import ExecutionStrategy
from .types import (
    Author,
    CatalogQuery,
    CategoryEntry,
    CategoryValue,
    FacetType,
    FilterResult,
    LetterBucket,
    Library,
    NavLinks,
    NormalizedItem,
    PageWindow,
    RawCatalogItem,
    RawMetadata,
)

__all__ = [
    "Author",
    "CatalogQuery",
    "CategoryEntry",
    "CategoryValue",
    "ExecutionStrategy",
    "FacetType",
    "FilterResult",
    "LetterBucket",
    "Library",
    "Matcher",
    "NavLinks",
    "NormalizedItem",
    "PageWindow",
    "QueryMatchers",
    "RawCatalogItem",
    "RawMetadata",
    "build_category_listing",
    "categorize",
    "compile_literal",
    "distinct_values",
    "filter_and_paginate",
    "filter_items",
    "item_matches",
    "letter_buckets",
    "normalize_item",
    "paginate",
]
