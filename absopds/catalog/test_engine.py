from __future__ import annotations

from absopds.catalog.engine import build_category_listing, filter_and_paginate
from absopds.catalog.strategy import ExecutionStrategy
from absopds.catalog.types import (
    CatalogQuery,
    CategoryValue,
    FacetType,
    LetterBucket,
    RawCatalogItem,
    RawMetadata,
)
from absopds.config import CatalogConfig


def _library(size: int) -> list[RawCatalogItem]:
    return [
        RawCatalogItem(
            id=f"item-{idx}",
            metadata=RawMetadata(title=f"Book {idx}", author_name="Tolkien" if idx % 2 else "Orwell"),
            ebook_format="epub",
        )
        for idx in range(size)
    ]


def test_page_window_holds_normalized_items() -> None:
    config = CatalogConfig(page_size=10)

    items, total = filter_and_paginate(_library(25), CatalogQuery(page=2), config)

    assert total == 25
    assert [item.id for item in items] == [f"item-{idx}" for idx in range(20, 25)]
    assert items[0].authors[0].name == "Orwell"


def test_page_beyond_range_returns_empty_window_with_total() -> None:
    items, total = filter_and_paginate(_library(25), CatalogQuery(page=5), CatalogConfig(page_size=10))

    assert items == []
    assert total == 25


def test_only_page_items_are_normalized(monkeypatch) -> None:
    from absopds.catalog import engine

    seen: list[str] = []
    original = engine.normalize_item

    def _tracking(item):
        seen.append(item.id)
        return original(item)

    monkeypatch.setattr(engine, "normalize_item", _tracking)

    engine.filter_and_paginate(_library(50), CatalogQuery(page=1), CatalogConfig(page_size=5))

    assert seen == [f"item-{idx}" for idx in range(5, 10)]


def test_parallel_and_sequential_runs_agree() -> None:
    library = _library(3000)
    query = CatalogQuery(author="tolkien", page=3)
    config = CatalogConfig(page_size=50)
    parallel = ExecutionStrategy(threshold=0, max_workers=4, min_partition_size=100)
    sequential = ExecutionStrategy(threshold=10**9)

    assert filter_and_paginate(library, query, config, parallel) == filter_and_paginate(
        library, query, config, sequential
    )


def test_category_listing_follows_char_cards_setting() -> None:
    library = _library(4)

    buckets = build_category_listing(library, FacetType.AUTHORS, CatalogQuery(), CatalogConfig(show_char_cards=True))
    values = build_category_listing(library, FacetType.AUTHORS, CatalogQuery(), CatalogConfig())
    started = build_category_listing(
        library, FacetType.AUTHORS, CatalogQuery(start="t"), CatalogConfig(show_char_cards=True)
    )

    assert buckets == [LetterBucket("O", 1), LetterBucket("T", 1)]
    assert values == [CategoryValue("Orwell"), CategoryValue("Tolkien")]
    assert started == [CategoryValue("Tolkien")]
