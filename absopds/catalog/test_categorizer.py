from __future__ import annotations

from absopds.catalog.categorizer import categorize, distinct_values, letter_buckets
from absopds.catalog.strategy import ExecutionStrategy
from absopds.catalog.types import CategoryValue, FacetType, LetterBucket, RawCatalogItem, RawMetadata


def _item(item_id: str, **metadata) -> RawCatalogItem:
    return RawCatalogItem(id=item_id, metadata=RawMetadata(**metadata), ebook_format="epub")


def test_buckets_fold_accents_into_letters() -> None:
    items = [_item("1", author_name="Émile"), _item("2", author_name="Ernest"), _item("3", author_name="Orwell")]

    entries = categorize(items, FacetType.AUTHORS, bucket_mode=True)

    assert entries == [LetterBucket("E", 2), LetterBucket("O", 1)]


def test_start_filters_values_by_folded_initial() -> None:
    items = [_item("1", author_name="Émile"), _item("2", author_name="Ernest"), _item("3", author_name="Orwell")]

    entries = categorize(items, FacetType.AUTHORS, start="e", bucket_mode=True)

    assert entries == [CategoryValue("Ernest"), CategoryValue("Émile")]


def test_direct_mode_lists_every_distinct_value_sorted() -> None:
    items = [
        _item("1", author_name="Zadie Smith, Ali Smith"),
        _item("2", author_name="Ali Smith"),
        _item("3", author_name="Ben Okri"),
    ]

    entries = categorize(items, FacetType.AUTHORS)

    assert entries == [CategoryValue("Ali Smith"), CategoryValue("Ben Okri"), CategoryValue("Zadie Smith")]


def test_empty_segments_are_not_category_values() -> None:
    items = [_item("1", narrator_name="Kate Reading, , Michael Kramer"), _item("2", narrator_name="")]

    assert distinct_values(items, FacetType.NARRATORS) == ["Kate Reading", "Michael Kramer"]


def test_genres_facet_merges_genres_and_tags() -> None:
    items = [_item("1", genres=("Fantasy", " Horror "), tags=("Classic",)), _item("2", tags=("Fantasy",))]

    assert distinct_values(items, FacetType.GENRES) == ["Classic", "Fantasy", "Horror"]


def test_series_values_drop_sequence_numbers() -> None:
    items = [_item("1", series_name="Discworld #1"), _item("2", series_name="Discworld #2, Witches #1")]

    assert distinct_values(items, FacetType.SERIES) == ["Discworld", "Witches"]


def test_letter_buckets_skip_non_letters() -> None:
    assert letter_buckets(["1984 Society", "Asimov", "asimov fans", "Øbo"]) == [LetterBucket("A", 2)]


def test_parallel_distinct_matches_sequential() -> None:
    items = [_item(str(idx), author_name=f"Author {idx % 37}, Co {idx % 11}") for idx in range(500)]
    parallel = ExecutionStrategy(threshold=0, max_workers=4, min_partition_size=1)

    assert categorize(items, FacetType.AUTHORS, strategy=parallel) == categorize(items, FacetType.AUTHORS)
