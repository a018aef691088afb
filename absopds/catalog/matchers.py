"""Compile query text into case-insensitive literal matchers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from absopds import logger
from absopds.catalog.types import CatalogQuery


class Matcher:
    """Case-insensitive literal substring matcher."""

    __slots__ = ("pattern", "_regex")

    def __init__(self, pattern: str, regex: Optional[re.Pattern[str]]):
        self.pattern = pattern
        self._regex = regex

    def matches(self, value: Optional[str]) -> bool:
        if value is None or self._regex is None:
            return False
        return self._regex.search(value) is not None

    def matches_any(self, values: Iterable[Optional[str]]) -> bool:
        return any(self.matches(value) for value in values)

    def __repr__(self) -> str:
        state = "never" if self._regex is None else "literal"
        return f"Matcher({self.pattern!r}, {state})"


def compile_literal(text: str) -> Matcher:
    """Return a matcher for ``text`` taken literally.

    A pattern that still fails to compile yields a matcher that never matches.
    """
    try:
        regex = re.compile(re.escape(text), re.IGNORECASE)
    except (re.error, OverflowError, RecursionError) as exc:
        logger.debug(f"Search pattern {text!r} rejected ({exc}); matching nothing")
        regex = None
    return Matcher(text, regex)


def _optional_matcher(text: Optional[str]) -> Optional[Matcher]:
    if not text:
        return None
    return compile_literal(text)


@dataclass(frozen=True)
class QueryMatchers:
    """One matcher per query axis; ``None`` means the axis is unconstrained."""

    free_text: Optional[Matcher] = None
    facet_name: Optional[Matcher] = None
    author: Optional[Matcher] = None
    title: Optional[Matcher] = None

    @classmethod
    def from_query(cls, query: CatalogQuery) -> "QueryMatchers":
        return cls(
            free_text=_optional_matcher(query.q),
            facet_name=_optional_matcher(query.name),
            author=_optional_matcher(query.author),
            title=_optional_matcher(query.title),
        )
