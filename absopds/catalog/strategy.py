"""Size-threshold selection between sequential and parallel catalog passes."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Set, TypeVar

from absopds import logger

DEFAULT_PARALLEL_THRESHOLD = 5000
MIN_PARTITION_SIZE = 1024

_T = TypeVar("_T")
_V = TypeVar("_V")

Predicate = Callable[[_T], bool]
ValueExtractor = Callable[[_T], Iterable[_V]]


def _default_workers() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


def _partition_count(size: int, workers: int, min_partition_size: int) -> int:
    by_size = size // max(1, min_partition_size)
    return max(1, min(workers, by_size))


def partition(items: Sequence[_T], parts: int) -> List[Sequence[_T]]:
    """Split ``items`` into at most ``parts`` contiguous, non-empty slices."""
    if not items:
        return []
    parts = max(1, min(parts, len(items)))
    size, extra = divmod(len(items), parts)
    slices: List[Sequence[_T]] = []
    start = 0
    for index in range(parts):
        end = start + size + (1 if index < extra else 0)
        slices.append(items[start:end])
        start = end
    return slices


def filter_sequential(
    items: Sequence[_T], predicate: Predicate, workers: int = 1, min_partition_size: int = MIN_PARTITION_SIZE
) -> List[_T]:
    _ = workers, min_partition_size
    return [item for item in items if predicate(item)]


def filter_parallel(
    items: Sequence[_T], predicate: Predicate, workers: int = 1, min_partition_size: int = MIN_PARTITION_SIZE
) -> List[_T]:
    """Filter partitions concurrently; partition order restores input order."""
    chunks = partition(items, _partition_count(len(items), workers, min_partition_size))
    if len(chunks) <= 1:
        return filter_sequential(items, predicate)
    with ThreadPoolExecutor(max_workers=len(chunks), thread_name_prefix="absopds-filter") as executor:
        results = list(executor.map(lambda chunk: filter_sequential(chunk, predicate), chunks))
    merged: List[_T] = []
    for chunk_result in results:
        merged.extend(chunk_result)
    return merged


def distinct_sequential(
    items: Sequence[_T], extract: ValueExtractor, workers: int = 1, min_partition_size: int = MIN_PARTITION_SIZE
) -> Set:
    _ = workers, min_partition_size
    values: Set = set()
    for item in items:
        values.update(extract(item))
    return values


def distinct_parallel(
    items: Sequence[_T], extract: ValueExtractor, workers: int = 1, min_partition_size: int = MIN_PARTITION_SIZE
) -> Set:
    """Collect distinct values per partition, then union them."""
    chunks = partition(items, _partition_count(len(items), workers, min_partition_size))
    if len(chunks) <= 1:
        return distinct_sequential(items, extract)
    with ThreadPoolExecutor(max_workers=len(chunks), thread_name_prefix="absopds-distinct") as executor:
        partials = list(executor.map(lambda chunk: distinct_sequential(chunk, extract), chunks))
    values: Set = set()
    for partial in partials:
        values |= partial
    return values


@dataclass(frozen=True)
class ExecutionStrategy:
    """Pick the sequential or parallel pass from the collection size alone.

    Both passes return the same result for the same input.
    """

    threshold: int = DEFAULT_PARALLEL_THRESHOLD
    max_workers: Optional[int] = None
    min_partition_size: int = MIN_PARTITION_SIZE

    @property
    def workers(self) -> int:
        return self.max_workers or _default_workers()

    def is_parallel(self, size: int) -> bool:
        return size >= self.threshold

    def filter(self, items: Sequence[_T], predicate: Predicate) -> List[_T]:
        run = filter_parallel if self.is_parallel(len(items)) else filter_sequential
        logger.debug(f"Filtering {len(items)} items via {run.__name__}")
        return run(items, predicate, self.workers, self.min_partition_size)

    def distinct(self, items: Sequence[_T], extract: ValueExtractor) -> Set:
        run = distinct_parallel if self.is_parallel(len(items)) else distinct_sequential
        logger.debug(f"Collecting distinct values from {len(items)} items via {run.__name__}")
        return run(items, extract, self.workers, self.min_partition_size)

    @classmethod
    def from_config(cls, catalog_config) -> "ExecutionStrategy":
        return cls(
            threshold=catalog_config.parallel_threshold,
            max_workers=catalog_config.max_workers or None,
        )
