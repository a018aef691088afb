"""
verification.py - Upstream connectivity check for absopds
"""

from __future__ import annotations

import asyncio
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .catalog.types import Library
from .config import AbsOpdsConfig
from .upstream.client import AbsClient
from .upstream.protocols import CatalogSource
from .upstream.resilience import UpstreamFailure

console = Console()


async def _count_items(source: CatalogSource, library: Library) -> tuple[Library, Optional[int], str]:
    try:
        items = await source.fetch_items(library.id)
    except UpstreamFailure as exc:
        return library, None, str(exc)
    ebooks = sum(1 for item in items if item.ebook_format is not None)
    return library, len(items), f"{ebooks} with an ebook format"


async def verify_upstream(config: AbsOpdsConfig, source: Optional[CatalogSource] = None) -> bool:
    """List the libraries visible with the configured API key."""
    console.print(f"[cyan][INFO][/cyan] Connecting to {escape(config.upstream.url)}...")
    own_source = source is None
    source = source or AbsClient(config.upstream)
    try:
        try:
            libraries = await source.fetch_libraries()
        except UpstreamFailure as exc:
            console.print(f"[red][ERROR][/red] {escape(str(exc))}")
            return False

        results = await asyncio.gather(*(_count_items(source, library) for library in libraries))
    finally:
        if own_source:
            await source.close()

    table = Table(title="Audiobookshelf Libraries")
    table.add_column("Library", style="cyan", no_wrap=True)
    table.add_column("ID", style="grey50", no_wrap=True)
    table.add_column("Items", justify="right")
    table.add_column("Details", style="yellow")

    for library, count, details in results:
        count_str = f"{count:,}" if count is not None else "[red]✗[/red]"
        table.add_row(escape(library.name), escape(library.id), count_str, escape(details[:100]))

    if not results:
        table.add_row("No libraries", "", "", "[yellow]⚠ API key has no library access[/yellow]")

    console.print(table)
    return bool(results) and all(count is not None for _, count, _ in results)
