from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
import logging

from catalog_feeds import __version__
from catalog_feeds.dependencies import FetcherDep, FieldPolicyDep, SettingsDep
from catalog_feeds.exceptions import (
    CatalogFeedError,
    ConfigError,
    DecodeError,
    FetchError,
    RenderError,
)
from catalog_feeds.schemas import StreamSummary
from catalog_feeds.services import (
    load_catalog,
    project_guide,
    project_playlist,
    project_stream_list,
    render_guide,
    render_playlist,
)
from catalog_feeds.services.playlist_service import M3U_HEADER
from catalog_feeds.utils.logging_helpers import (
    log_decode_summary,
    log_pipeline_failure,
    log_pipeline_start,
    log_render_summary,
)


logger = logging.getLogger(__name__)

main_router = APIRouter()

MISSING_MEDIA_URL = "MEDIA_URL environment variable is not set"


def _server_error(error: CatalogFeedError) -> PlainTextResponse:
    """Map a pipeline failure to the 500 text the guide endpoints return"""
    if isinstance(error, ConfigError):
        message = str(error)
    elif isinstance(error, FetchError):
        message = f"Error fetching media data from MEDIA_URL: {error}"
    elif isinstance(error, DecodeError):
        message = f"Error parsing channels JSON: {error}"
    elif isinstance(error, RenderError):
        message = f"Error generating XMLTV data: {error}"
    else:
        message = f"Error: {error}"
    return PlainTextResponse(message, status_code=500)


@main_router.get("/")
async def root() -> dict:
    """Root endpoint with service information"""
    return {
        "service": "Catalog Feeds",
        "version": __version__,
        "endpoints": {
            "m3u": "/api/m3u - M3U playlist of the upstream catalog",
            "xmltv": "/api/xmltv - XMLTV guide of the upstream catalog",
            "streams": "/api/streams - Simplified JSON stream list",
            "health": "/health - Health check"
        }
    }


@main_router.get("/health")
async def health_check(settings: SettingsDep) -> dict:
    """Health check endpoint"""
    return {
        "status": "ok",
        "media_url_configured": bool(settings.media_url)
    }


@main_router.get("/api/m3u")
async def m3u_playlist(
    request: Request,
    settings: SettingsDep,
    fetcher: FetcherDep,
    policy: FieldPolicyDep
) -> Response:
    """
    M3U playlist of the upstream catalog

    Failures are answered with the literal body 'Error' and status 200.
    """
    logger.debug(f"Playlist requested by {request.headers.get('user-agent', '<unknown>')}")
    log_pipeline_start(logger, "m3u", settings.media_url)

    try:
        if settings.playlist_require_media_url and not settings.media_url:
            raise ConfigError(MISSING_MEDIA_URL)

        channels = await load_catalog(fetcher, settings.media_url)
        log_decode_summary(logger, "m3u", len(channels))

        entries = project_playlist(channels, settings.playlist_group, policy)
        body = render_playlist(entries)

    except CatalogFeedError as e:
        log_pipeline_failure(logger, "m3u", e)
        return Response(content="Error", media_type=settings.playlist_media_type)

    if settings.playlist_emit_header:
        body = M3U_HEADER + body

    log_render_summary(logger, "m3u", len(entries), len(body.encode("utf-8")))
    return Response(content=body, media_type=settings.playlist_media_type)


@main_router.get("/api/xmltv")
async def xmltv_guide(
    settings: SettingsDep,
    fetcher: FetcherDep,
    policy: FieldPolicyDep
) -> Response:
    """
    XMLTV guide of the upstream catalog

    Every failure is answered with HTTP 500 and a descriptive message.
    """
    log_pipeline_start(logger, "xmltv", settings.media_url)

    try:
        if not settings.media_url:
            raise ConfigError(MISSING_MEDIA_URL)

        channels = await load_catalog(fetcher, settings.media_url)
        log_decode_summary(logger, "xmltv", len(channels))

        document = project_guide(
            channels,
            policy,
            settings.generator_info_name,
            settings.source_info_name,
        )
        body = render_guide(document)

    except CatalogFeedError as e:
        log_pipeline_failure(logger, "xmltv", e)
        return _server_error(e)

    log_render_summary(logger, "xmltv", len(document.programmes), len(body))
    return Response(content=body, media_type="application/xml")


@main_router.get("/api/streams", response_model=list[StreamSummary])
async def stream_list(
    settings: SettingsDep,
    fetcher: FetcherDep,
    policy: FieldPolicyDep
) -> Response:
    """Simplified JSON list of channel titles, images and stream URLs"""
    log_pipeline_start(logger, "streams", settings.media_url)

    try:
        if not settings.media_url:
            raise ConfigError(MISSING_MEDIA_URL)

        channels = await load_catalog(fetcher, settings.media_url)
        log_decode_summary(logger, "streams", len(channels))

    except CatalogFeedError as e:
        log_pipeline_failure(logger, "streams", e)
        return _server_error(e)

    summaries = project_stream_list(channels, policy)
    return JSONResponse([summary.model_dump() for summary in summaries])
