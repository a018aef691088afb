"""Page windows and first/previous/next/last navigation links."""

from __future__ import annotations

import re
from typing import Tuple

from absopds.catalog.types import NavLinks, PageWindow

PAGE_PARAM_RE = re.compile(r"[?&]page=\d+")


def total_pages(total_items: int, page_size: int) -> int:
    if total_items <= 0:
        return 0
    return -(-total_items // page_size)


def clean_base_url(base_url: str) -> str:
    """Drop every ``page=<digits>`` parameter from ``base_url``."""
    cleaned = PAGE_PARAM_RE.sub("", base_url)
    query_at = base_url.find("?")
    if query_at != -1 and "?" not in cleaned and cleaned[query_at:query_at + 1] == "&":
        # The removed parameter was the first one; promote the next.
        cleaned = f"{cleaned[:query_at]}?{cleaned[query_at + 1:]}"
    return cleaned


def _page_href(clean: str, page_index: int) -> str:
    separator = "&" if "?" in clean else "?"
    return f"{clean}{separator}page={page_index}"


def paginate(total_items: int, page_size: int, page_index: int, base_url: str) -> Tuple[PageWindow, NavLinks]:
    if page_size <= 0:
        raise ValueError("page_size must be greater than 0")
    page_index = max(0, page_index)
    pages = total_pages(total_items, page_size)
    window = PageWindow(
        page_index=page_index,
        page_size=page_size,
        total_items=max(0, total_items),
        total_pages=pages,
    )

    clean = clean_base_url(base_url)
    previous = None
    if page_index > 0:
        previous = _page_href(clean, page_index - 1) if page_index - 1 > 0 else clean
    next_href = _page_href(clean, page_index + 1) if page_index + 1 < pages else None
    last = _page_href(clean, pages - 1) if pages > 1 else None

    links = NavLinks(self=clean, first=clean, previous=previous, next=next_href, last=last)
    return window, links
