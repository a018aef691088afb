from __future__ import annotations

from absopds.catalog import strategy
from absopds.config import CatalogConfig


def test_partition_is_contiguous_and_complete() -> None:
    items = list(range(10))

    chunks = strategy.partition(items, 3)

    assert [list(chunk) for chunk in chunks] == [[0, 1, 2, 3], [4, 5, 6], [7, 8, 9]]
    assert strategy.partition([], 3) == []


def test_parallel_filter_preserves_order() -> None:
    items = list(range(2000))

    result = strategy.filter_parallel(items, lambda value: value % 7 == 0, workers=4, min_partition_size=100)

    assert result == strategy.filter_sequential(items, lambda value: value % 7 == 0)


def test_parallel_distinct_matches_sequential() -> None:
    items = list(range(1000))

    def _extract(value: int):
        return [value % 13, value % 5]

    assert strategy.distinct_parallel(items, _extract, workers=3, min_partition_size=10) == (
        strategy.distinct_sequential(items, _extract)
    )


def test_threshold_selects_pass(monkeypatch) -> None:
    chosen: list[str] = []
    monkeypatch.setattr(strategy.logger, "debug", lambda msg: chosen.append(msg))
    picker = strategy.ExecutionStrategy(threshold=5, max_workers=2, min_partition_size=1)

    assert not picker.is_parallel(4)
    assert picker.is_parallel(5)
    assert picker.filter([1, 2, 3], lambda value: value > 1) == [2, 3]
    assert picker.filter(list(range(10)), lambda value: value > 7) == [8, 9]
    assert "filter_sequential" in chosen[0]
    assert "filter_parallel" in chosen[1]


def test_from_config_uses_catalog_settings() -> None:
    built = strategy.ExecutionStrategy.from_config(CatalogConfig(parallel_threshold=10, max_workers=3))

    assert built.threshold == 10
    assert built.workers == 3
    assert strategy.ExecutionStrategy.from_config(CatalogConfig()).threshold == strategy.DEFAULT_PARALLEL_THRESHOLD
