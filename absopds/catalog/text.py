"""Text helpers shared by normalization, categorization and facet extraction."""

from __future__ import annotations

import re
import unicodedata
from typing import List, Optional

FIELD_DELIMITER = ","

# Sequence marker on a series segment, e.g. "The Foo Saga #3".
SERIES_SEQUENCE_RE = re.compile(r"#.*$", re.DOTALL)


def split_delimited(value: Optional[str]) -> List[str]:
    """Split a comma-delimited upstream field, trimming each segment.

    Empty segments are kept as empty strings.
    """
    if value is None:
        return []
    return [part.strip() for part in value.split(FIELD_DELIMITER)]


def strip_series_sequence(segment: str) -> str:
    return SERIES_SEQUENCE_RE.sub("", segment).strip()


def split_series(value: Optional[str]) -> List[str]:
    return [strip_series_sequence(part) for part in split_delimited(value)]


def fold_initial(value: str) -> str:
    """Case- and accent-folded first character of ``value``.

    Decomposes to NFD, drops combining marks, then uppercases, so
    "émile" and "Émile" both give "E". Returns "" for an empty value.
    """
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value[0])
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.upper()


def is_bucket_letter(folded: str) -> bool:
    return len(folded) == 1 and "A" <= folded <= "Z"
