"""Turn raw upstream items into the public item shape."""

from __future__ import annotations

from absopds.catalog.text import split_delimited, split_series
from absopds.catalog.types import Author, NormalizedItem, RawCatalogItem


def normalize_item(item: RawCatalogItem) -> NormalizedItem:
    metadata = item.metadata
    return NormalizedItem(
        id=item.id,
        title=metadata.title,
        subtitle=metadata.subtitle,
        description=metadata.description,
        genres=list(metadata.genres),
        tags=list(metadata.tags),
        publisher=metadata.publisher,
        isbn=metadata.isbn,
        language=metadata.language,
        published_year=metadata.published_year,
        authors=[Author(name=name) for name in split_delimited(metadata.author_name)],
        narrators=[Author(name=name) for name in split_delimited(metadata.narrator_name)],
        series=split_series(metadata.series_name),
        format=item.ebook_format,
    )
