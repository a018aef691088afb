"""aiohttp application exposing the OPDS routes."""

from __future__ import annotations

import hashlib
import time
from typing import Optional
from urllib.parse import urlencode

from aiohttp import web

from absopds import logger
from absopds.catalog.paginator import paginate
from absopds.catalog.types import CatalogQuery, FacetType
from absopds.config import AbsOpdsConfig
from absopds.i18n import Localizer
from absopds.opds.feed import OpdsFeedBuilder, library_path, render, search_definition
from absopds.service import LibraryService
from absopds.upstream.client import AbsClient
from absopds.upstream.protocols import CatalogSource
from absopds.upstream.resilience import UpstreamFailure

XML_CONTENT_TYPE = "application/xml"
OPENSEARCH_CONTENT_TYPE = "application/opensearchdescription+xml"
PROXY_PREFIX = "/opds/proxy"
# Query parameters carried into paging links, in link order.
FILTER_PARAMS = ("q", "type", "name", "author", "title")

SERVICE_KEY = web.AppKey("service", LibraryService)
BUILDER_KEY = web.AppKey("builder", OpdsFeedBuilder)
LOCALIZER_KEY = web.AppKey("localizer", Localizer)
CONFIG_KEY = web.AppKey("config", AbsOpdsConfig)
SOURCE_KEY = web.AppKey("source", object)


def _xml_response(document: bytes, content_type: str = XML_CONTENT_TYPE) -> web.Response:
    return web.Response(body=document, content_type=content_type, charset="utf-8")


def _parse_query(request: web.Request) -> CatalogQuery:
    try:
        return CatalogQuery.from_params(request.query)
    except ValueError as exc:
        raise web.HTTPBadRequest(text=str(exc)) from exc


def _library_id(request: web.Request) -> str:
    return request.match_info["library_id"]


def paging_base_url(library_id: str, query: CatalogQuery) -> str:
    """Library URL carrying the active filters but no page parameter."""
    values = {
        "q": query.q,
        "type": query.type.value if query.type else None,
        "name": query.name,
        "author": query.author,
        "title": query.title,
    }
    params = [(key, values[key]) for key in FILTER_PARAMS if values[key] is not None]
    base = library_path(library_id)
    return f"{base}?{urlencode(params)}" if params else base


async def opds_root(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    builder = request.app[BUILDER_KEY]
    config = request.app[CONFIG_KEY]

    libraries = await service.get_libraries()
    if len(libraries) == 1:
        raise web.HTTPTemporaryRedirect(f"{library_path(libraries[0].id)}?categories=true")

    feed_id = hashlib.sha1(config.upstream.url.encode("utf-8")).hexdigest()
    title = request.app[LOCALIZER_KEY].localize("feed.libraries", request.headers.get("Accept-Language"))
    feed = builder.feed(feed_id, title, [builder.library_entry(library) for library in libraries])
    return _xml_response(render(feed))


async def library_feed(request: web.Request) -> web.Response:
    library_id = _library_id(request)
    query = _parse_query(request)
    builder = request.app[BUILDER_KEY]
    localizer = request.app[LOCALIZER_KEY]

    if query.categories:
        language = request.headers.get("Accept-Language")
        feed = builder.feed(
            f"urn:uuid:{library_id}",
            localizer.localize("feed.categories", language),
            builder.category_entries(library_id, localizer, language),
        )
        return _xml_response(render(feed))

    service = request.app[SERVICE_KEY]
    page_size = service.config.page_size
    library = await service.get_library(library_id)
    items, total = await service.get_filtered_items(library_id, query)
    page = paginate(total, page_size, query.page, paging_base_url(library_id, query))
    feed = builder.feed(
        f"urn:uuid:{library_id}",
        library.name,
        builder.item_entries(items),
        library=library,
        page=page,
    )
    return _xml_response(render(feed))


async def library_search_definition(request: web.Request) -> web.Response:
    return _xml_response(render(search_definition(_library_id(request))), OPENSEARCH_CONTENT_TYPE)


async def category_feed(request: web.Request) -> web.Response:
    library_id = _library_id(request)
    try:
        facet = FacetType.parse(request.match_info["type"])
    except ValueError as exc:
        raise web.HTTPBadRequest(text="Invalid type") from exc
    query = _parse_query(request)
    builder = request.app[BUILDER_KEY]

    library, entries = await request.app[SERVICE_KEY].get_categories(library_id, facet, query)
    feed = builder.feed(
        f"urn:uuid:{library_id}",
        library.name,
        [builder.category_entry(entry, facet, library_id) for entry in entries],
    )
    return _xml_response(render(feed))


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    started = time.monotonic()
    status = 500
    try:
        response = await handler(request)
        status = response.status
        return response
    except web.HTTPException as exc:
        status = exc.status
        raise
    except UpstreamFailure as exc:
        logger.error(f"{request.method} {request.path_qs}: {exc}")
        return web.Response(status=500, text="Failed to fetch data from Audiobookshelf")
    finally:
        logger.get_logger().request(
            request.method, request.path_qs, status, (time.monotonic() - started) * 1000
        )


async def _close_source(app: web.Application) -> None:
    close = getattr(app[SOURCE_KEY], "close", None)
    if close is not None:
        await close()


def create_app(
    config: AbsOpdsConfig,
    source: Optional[CatalogSource] = None,
    localizer: Optional[Localizer] = None,
) -> web.Application:
    source = source or AbsClient(config.upstream)
    localizer = localizer or Localizer.from_directory(
        config.i18n.languages_dir, config.i18n.fallback_language
    )
    link_base = PROXY_PREFIX if config.server.use_proxy_links else config.upstream.url
    token = config.upstream.api_key.strip()
    if token.lower().startswith("bearer "):
        token = token[len("bearer "):].strip()

    app = web.Application(middlewares=[error_middleware])
    app[CONFIG_KEY] = config
    app[SOURCE_KEY] = source
    app[SERVICE_KEY] = LibraryService(source, config.catalog)
    app[BUILDER_KEY] = OpdsFeedBuilder(link_base, token)
    app[LOCALIZER_KEY] = localizer
    app.on_cleanup.append(_close_source)

    app.router.add_get("/opds", opds_root)
    app.router.add_get("/opds/libraries/{library_id}", library_feed)
    app.router.add_get("/opds/libraries/{library_id}/search-definition", library_search_definition)
    app.router.add_get("/opds/libraries/{library_id}/{type}", category_feed)
    return app


def run_server(config: AbsOpdsConfig) -> None:
    logger.info(f"OPDS server running at http://{config.server.host}:{config.server.port}/opds")
    logger.info(f"Audiobookshelf URL: {config.upstream.url}")
    web.run_app(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        print=None,
    )
