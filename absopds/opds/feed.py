"""OPDS 1.2 (Atom) documents for libraries, categories and items."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Sequence
from urllib.parse import quote, urlencode

from absopds.catalog.types import (
    CategoryEntry,
    FacetType,
    LetterBucket,
    Library,
    NavLinks,
    NormalizedItem,
    PageWindow,
)
from absopds.i18n import Localizer

ATOM_NS = "http://www.w3.org/2005/Atom"
OPDS_NS = "http://opds-spec.org/2010/catalog"
DC_NS = "http://purl.org/dc/terms/"
OPENSEARCH_NS = "http://a9.com/-/spec/opensearch/1.1/"

NAVIGATION_TYPE = "application/atom+xml;profile=opds-catalog;kind=navigation"
ACQUISITION_TYPE = "application/atom+xml;profile=opds-catalog;kind=acquisition"
CATALOG_TYPE = "application/atom+xml;profile=opds-catalog"
OPENSEARCH_TYPE = "application/opensearchdescription+xml"
ACQUISITION_REL = "http://opds-spec.org/acquisition"
IMAGE_REL = "http://opds-spec.org/image"

FORMAT_MIME_TYPES = {
    "audiobook": "audio/mpeg",
    "epub": "application/epub+zip",
    "pdf": "application/pdf",
    "mobi": "application/x-mobipocket-ebook",
}
DEFAULT_MIME_TYPE = "application/octet-stream"

CATEGORY_KEYS: tuple[tuple[Optional[FacetType], str], ...] = (
    (None, "category.all"),
    (FacetType.AUTHORS, "category.authors"),
    (FacetType.NARRATORS, "category.narrators"),
    (FacetType.GENRES, "category.genres"),
    (FacetType.SERIES, "category.series"),
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def mime_type_for(format_name: Optional[str]) -> str:
    return FORMAT_MIME_TYPES.get((format_name or "").lower(), DEFAULT_MIME_TYPE)


def library_path(library_id: str) -> str:
    return f"/opds/libraries/{quote(library_id, safe='')}"


def _text(parent: ET.Element, tag: str, value: str) -> ET.Element:
    element = ET.SubElement(parent, tag)
    element.text = value
    return element


def _link(parent: ET.Element, rel: str, type_: str, href: str, title: str = "") -> ET.Element:
    attributes = {}
    if rel:
        attributes["rel"] = rel
    if type_:
        attributes["type"] = type_
    if title:
        attributes["title"] = title
    attributes["href"] = href
    return ET.SubElement(parent, "link", attributes)


def render(root: ET.Element) -> bytes:
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


class OpdsFeedBuilder:
    """Builds feed documents; acquisition links point at ``link_base``."""

    def __init__(self, link_base: str, token: str = "", clock: Callable[[], datetime] = _utc_now):
        self.link_base = link_base.rstrip("/")
        self.token = token
        self._clock = clock

    def _updated(self) -> str:
        return self._clock().isoformat()

    def feed(
        self,
        feed_id: str,
        title: str,
        entries: Iterable[ET.Element] = (),
        library: Optional[Library] = None,
        page: Optional[tuple[PageWindow, NavLinks]] = None,
    ) -> ET.Element:
        """Feed skeleton: header, library search links, paging links, then entries."""
        root = ET.Element(
            "feed",
            {
                "xmlns": ATOM_NS,
                "xmlns:opds": OPDS_NS,
                "xmlns:dcterms": DC_NS,
                "xmlns:opensearch": OPENSEARCH_NS,
            },
        )
        _text(root, "id", feed_id)
        _text(root, "title", title)
        _text(root, "updated", self._updated())

        if library is not None:
            base = library_path(library.id)
            _link(root, "alternate", "text/html", f"/library/{quote(library.id, safe='')}", "Web Interface")
            _link(root, "search", OPENSEARCH_TYPE, f"{base}/search-definition", "Search this library")
            _link(root, "search", "application/atom+xml", f"{base}?q={{searchTerms}}", "Search this library")

        if page is not None:
            window, links = page
            _text(root, "opensearch:totalResults", str(window.total_items))
            _text(root, "opensearch:startIndex", str(window.page_index * window.page_size + 1))
            _text(root, "opensearch:itemsPerPage", str(window.page_size))
            _link(root, "start", NAVIGATION_TYPE, links.first)
            _link(root, "first", ACQUISITION_TYPE, links.first)
            if links.previous is not None:
                _link(root, "previous", ACQUISITION_TYPE, links.previous)
            if links.next is not None:
                _link(root, "next", ACQUISITION_TYPE, links.next)
            if links.last is not None:
                _link(root, "last", ACQUISITION_TYPE, links.last)

        root.extend(entries)
        return root

    def _entry(self, entry_id: str, title: str) -> ET.Element:
        entry = ET.Element("entry")
        _text(entry, "id", entry_id)
        _text(entry, "title", title)
        _text(entry, "updated", self._updated())
        return entry

    def library_entry(self, library: Library) -> ET.Element:
        entry = self._entry(library.id, library.name)
        _link(entry, "subsection", CATALOG_TYPE, f"{library_path(library.id)}?categories=true")
        return entry

    def category_entries(
        self, library_id: str, localizer: Localizer, language_hint: Optional[str] = None
    ) -> list[ET.Element]:
        """Navigation entries: all items, then one per facet."""
        entries = []
        base = library_path(library_id)
        for facet, key in CATEGORY_KEYS:
            entry_id = library_id if facet is None else facet.value
            entry = self._entry(entry_id, localizer.localize(key, language_hint))
            href = base if facet is None else f"{base}/{facet.value}"
            _link(entry, "subsection", CATALOG_TYPE, href)
            entries.append(entry)
        return entries

    def category_entry(self, category: CategoryEntry, facet: FacetType, library_id: str) -> ET.Element:
        base = library_path(library_id)
        if isinstance(category, LetterBucket):
            title = f"{category.letter} ({category.count})"
            href = f"{base}/{facet.value}?{urlencode({'start': category.letter.lower()})}"
        else:
            title = category.value
            href = f"{base}?{urlencode({'name': category.value, 'type': facet.value})}"
        entry = self._entry(title.lower().replace(" ", "-"), title)
        _link(entry, "subsection", CATALOG_TYPE, href)
        return entry

    def item_entry(self, item: NormalizedItem) -> ET.Element:
        entry = ET.Element("entry")
        _text(entry, "id", f"urn:uuid:{item.id}")
        if item.title is not None:
            _text(entry, "title", item.title)
        if item.subtitle:
            _text(entry, "subtitle", item.subtitle)
        _text(entry, "updated", self._updated())
        if item.description:
            content = ET.SubElement(entry, "content", {"type": "text"})
            content.text = item.description
        for tag, value in (
            ("publisher", item.publisher),
            ("isbn", item.isbn),
            ("published", item.published_year),
            ("language", item.language),
        ):
            if value:
                _text(entry, tag, value)

        item_base = f"{self.link_base}/api/items/{quote(item.id, safe='')}"
        token = urlencode({"token": self.token})
        _link(entry, ACQUISITION_REL, DEFAULT_MIME_TYPE, f"{item_base}/download?{token}")
        _link(entry, ACQUISITION_REL, mime_type_for(item.format), f"{item_base}/ebook?{token}")
        _link(entry, IMAGE_REL, "image/webp", f"{item_base}/cover?{token}")
        _link(entry, IMAGE_REL, "image/png", f"{item_base}/cover?{token}")

        for author in item.authors:
            author_element = ET.SubElement(entry, "author")
            _text(author_element, "name", author.name)
        for label in (*item.genres, *item.tags):
            ET.SubElement(entry, "category", {"label": label, "term": label})
        return entry

    def item_entries(self, items: Sequence[NormalizedItem]) -> list[ET.Element]:
        return [self.item_entry(item) for item in items]


def search_definition(library_id: str) -> ET.Element:
    """OpenSearch description for one library."""
    root = ET.Element("OpenSearchDescription", {"xmlns": OPENSEARCH_NS, "xmlns:atom": ATOM_NS})
    _text(root, "ShortName", "ABS")
    _text(root, "LongName", "Audiobookshelf")
    _text(root, "Description", "Search for books in Audiobookshelf")
    template = (
        f"{library_path(library_id)}?q={{searchTerms}}&author={{atom:author}}&title={{atom:title}}"
    )
    ET.SubElement(root, "Url", {"type": ACQUISITION_TYPE, "template": template})
    return root
