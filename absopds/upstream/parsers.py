from __future__ import annotations

from typing import Any, List

from absopds.catalog.types import Library, RawCatalogItem, RawMetadata
from absopds.upstream.resilience import (
    expect_dict,
    expect_list,
    optional_dict,
    optional_text,
    optional_text_list,
    required_text,
)


def parse_library(payload: Any, context: str = "library") -> Library:
    data = expect_dict(payload, context)
    return Library(
        id=required_text(data, "id", context),
        name=required_text(data, "name", context),
        icon=optional_text(data, "icon"),
    )


def parse_libraries(payload: Any) -> List[Library]:
    root = expect_dict(payload, "libraries payload")
    entries = expect_list(root, "libraries", "libraries payload")
    return [parse_library(entry, f"libraries[{idx}]") for idx, entry in enumerate(entries)]


def parse_metadata(payload: dict, context: str) -> RawMetadata:
    return RawMetadata(
        title=optional_text(payload, "title"),
        subtitle=optional_text(payload, "subtitle"),
        description=optional_text(payload, "description"),
        genres=optional_text_list(payload, "genres", context),
        tags=optional_text_list(payload, "tags", context),
        publisher=optional_text(payload, "publisher"),
        isbn=optional_text(payload, "isbn"),
        language=optional_text(payload, "language"),
        published_year=optional_text(payload, "publishedYear"),
        author_name=optional_text(payload, "authorName"),
        narrator_name=optional_text(payload, "narratorName"),
        series_name=optional_text(payload, "seriesName"),
    )


def parse_item(payload: Any, context: str = "item") -> RawCatalogItem:
    data = expect_dict(payload, context)
    media = optional_dict(data, "media", context)
    metadata = optional_dict(media, "metadata", f"{context}.media")
    # ABS puts tags on the media object rather than inside metadata.
    if "tags" not in metadata and "tags" in media:
        metadata = {**metadata, "tags": media["tags"]}
    return RawCatalogItem(
        id=required_text(data, "id", context),
        metadata=parse_metadata(metadata, f"{context}.media.metadata"),
        ebook_format=optional_text(media, "ebookFormat"),
    )


def parse_items(payload: Any) -> List[RawCatalogItem]:
    root = expect_dict(payload, "items payload")
    entries = expect_list(root, "results", "items payload")
    return [parse_item(entry, f"results[{idx}]") for idx, entry in enumerate(entries)]
