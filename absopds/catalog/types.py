"""Shared data structures for the catalog query engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, List, Mapping, Optional, Tuple, Union

from absopds.catalog.text import split_delimited, split_series


@dataclass(frozen=True)
class RawMetadata:
    """Upstream item metadata as delivered, before any splitting."""

    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    genres: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    language: Optional[str] = None
    published_year: Optional[str] = None
    author_name: Optional[str] = None
    narrator_name: Optional[str] = None
    series_name: Optional[str] = None


@dataclass(frozen=True)
class RawCatalogItem:
    """One upstream library item. Read-only for the lifetime of a request."""

    id: str
    metadata: RawMetadata = field(default_factory=RawMetadata)
    ebook_format: Optional[str] = None


@dataclass(frozen=True)
class Author:
    name: str


@dataclass
class NormalizedItem:
    """Public item shape handed to feed assembly."""

    id: str
    title: Optional[str]
    subtitle: Optional[str]
    description: Optional[str]
    genres: List[str]
    tags: List[str]
    publisher: Optional[str]
    isbn: Optional[str]
    language: Optional[str]
    published_year: Optional[str]
    authors: List[Author]
    narrators: List[Author]
    series: List[str]
    format: Optional[str]


@dataclass(frozen=True)
class Library:
    id: str
    name: str
    icon: Optional[str] = None


def _author_values(metadata: RawMetadata) -> Iterator[str]:
    return iter(split_delimited(metadata.author_name))


def _narrator_values(metadata: RawMetadata) -> Iterator[str]:
    return iter(split_delimited(metadata.narrator_name))


def _genre_values(metadata: RawMetadata) -> Iterator[str]:
    for value in metadata.genres:
        yield value.strip()
    for value in metadata.tags:
        yield value.strip()


def _series_values(metadata: RawMetadata) -> Iterator[str]:
    return iter(split_series(metadata.series_name))


def _author_fields(metadata: RawMetadata) -> Tuple[Optional[str], ...]:
    return (metadata.author_name,)


def _narrator_fields(metadata: RawMetadata) -> Tuple[Optional[str], ...]:
    return (metadata.narrator_name,)


def _genre_fields(metadata: RawMetadata) -> Tuple[Optional[str], ...]:
    return metadata.genres + metadata.tags


def _series_fields(metadata: RawMetadata) -> Tuple[Optional[str], ...]:
    return (metadata.series_name,)


class FacetType(str, Enum):
    """Categorical dimensions a library can be browsed by."""

    AUTHORS = "authors"
    NARRATORS = "narrators"
    GENRES = "genres"
    SERIES = "series"

    def match_fields(self, metadata: RawMetadata) -> Tuple[Optional[str], ...]:
        """Raw fields the facet-name matcher is applied to."""
        return _FACET_MATCH_FIELDS[self](metadata)

    def values(self, metadata: RawMetadata) -> Iterator[str]:
        """Trimmed category values this item contributes to the facet."""
        return _FACET_VALUES[self](metadata)

    @classmethod
    def parse(cls, value: str) -> "FacetType":
        try:
            return cls(value.strip().lower())
        except ValueError:
            supported = ", ".join(member.value for member in cls)
            raise ValueError(f"Unsupported category type '{value}'. Supported types: {supported}.") from None


_FACET_MATCH_FIELDS: dict[FacetType, Callable[[RawMetadata], Tuple[Optional[str], ...]]] = {
    FacetType.AUTHORS: _author_fields,
    FacetType.NARRATORS: _narrator_fields,
    FacetType.GENRES: _genre_fields,
    FacetType.SERIES: _series_fields,
}

_FACET_VALUES: dict[FacetType, Callable[[RawMetadata], Iterator[str]]] = {
    FacetType.AUTHORS: _author_values,
    FacetType.NARRATORS: _narrator_values,
    FacetType.GENRES: _genre_values,
    FacetType.SERIES: _series_values,
}


def _optional_text(params: Mapping[str, str], key: str) -> Optional[str]:
    value = params.get(key)
    if value is None:
        return None
    return str(value)


def _parse_page(value: Optional[str]) -> int:
    if value is None:
        return 0
    try:
        return max(0, int(str(value).strip()))
    except ValueError:
        return 0


@dataclass(frozen=True)
class CatalogQuery:
    """User query as received on the catalog query string."""

    q: Optional[str] = None
    type: Optional[FacetType] = None
    name: Optional[str] = None
    author: Optional[str] = None
    title: Optional[str] = None
    page: int = 0
    start: Optional[str] = None
    categories: bool = False

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "CatalogQuery":
        """Build a query from ``q, type, name, author, title, page, start, categories``."""
        raw_type = params.get("type")
        facet = FacetType.parse(raw_type) if raw_type else None
        return cls(
            q=_optional_text(params, "q"),
            type=facet,
            name=_optional_text(params, "name"),
            author=_optional_text(params, "author"),
            title=_optional_text(params, "title"),
            page=_parse_page(params.get("page")),
            start=_optional_text(params, "start") or None,
            categories="categories" in params,
        )


@dataclass
class FilterResult:
    items: List[RawCatalogItem]
    total_count: int


@dataclass(frozen=True)
class CategoryValue:
    value: str


@dataclass(frozen=True)
class LetterBucket:
    letter: str
    count: int


CategoryEntry = Union[CategoryValue, LetterBucket]


@dataclass(frozen=True)
class PageWindow:
    page_index: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def start(self) -> int:
        return min(self.page_index * self.page_size, self.total_items)

    @property
    def end(self) -> int:
        return min(self.start + self.page_size, self.total_items)

    def is_empty(self) -> bool:
        return self.start >= self.end


@dataclass(frozen=True)
class NavLinks:
    self: str
    first: str
    previous: Optional[str] = None
    next: Optional[str] = None
    last: Optional[str] = None
