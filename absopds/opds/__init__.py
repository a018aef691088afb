"""OPDS feed assembly."""

from .feed import OpdsFeedBuilder, library_path, mime_type_for, render, search_definition

__all__ = ["OpdsFeedBuilder", "library_path", "mime_type_for", "render", "search_definition"]
