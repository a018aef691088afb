from __future__ import annotations

from absopds.catalog.normalizer import normalize_item
from absopds.catalog.types import Author, RawCatalogItem, RawMetadata


def test_series_segments_drop_sequence_numbers() -> None:
    item = RawCatalogItem(id="1", metadata=RawMetadata(series_name="The Foo Saga #3, Bar #1"))

    assert normalize_item(item).series == ["The Foo Saga", "Bar"]


def test_authors_and_narrators_are_split_and_trimmed() -> None:
    item = RawCatalogItem(
        id="1",
        metadata=RawMetadata(author_name="Terry Pratchett,  Neil Gaiman ", narrator_name="Martin Jarvis"),
        ebook_format="epub",
    )

    normalized = normalize_item(item)

    assert normalized.authors == [Author("Terry Pratchett"), Author("Neil Gaiman")]
    assert normalized.narrators == [Author("Martin Jarvis")]
    assert normalized.format == "epub"


def test_missing_fields_become_empty_lists() -> None:
    normalized = normalize_item(RawCatalogItem(id="x"))

    assert normalized.authors == []
    assert normalized.narrators == []
    assert normalized.series == []
    assert normalized.genres == []
    assert normalized.title is None


def test_scalar_fields_are_copied() -> None:
    metadata = RawMetadata(
        title="Good Omens",
        subtitle="The Nice and Accurate Prophecies",
        publisher="Gollancz",
        isbn="9780575048003",
        language="en",
        published_year="1990",
        genres=("Fantasy",),
        tags=("Comedy",),
    )

    normalized = normalize_item(RawCatalogItem(id="go", metadata=metadata))

    assert normalized.id == "go"
    assert normalized.subtitle == "The Nice and Accurate Prophecies"
    assert normalized.published_year == "1990"
    assert normalized.genres == ["Fantasy"]
    assert normalized.tags == ["Comedy"]
