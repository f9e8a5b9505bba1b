"""Link API routes.

This module contains the endpoints for link operations:
- Create link (POST /api/v1/links)
- Get link (GET /api/v1/links/{short})
- Redirect to original URL (GET /{short})
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode
from pydantic import ValidationError

from ...core.database import LinkStore, get_store
from ...core.exceptions import ShortCodeGenerationError, StoreError
from ...models.link import ErrorResponse, LinkCreate
from ...schemas.link import Link
from ...utils import base62
from ...utils.shortener import create_short_url, generate_short_code

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"

router = APIRouter(tags=["Links"])


def get_request_host(request: Request) -> str:
    """Get the host the request was addressed to, empty if unknown."""
    return request.headers.get("host", "")


def get_tracer(request: Request) -> trace.Tracer:
    """Get the tracer configured on the application."""
    return getattr(request.app.state, "tracer", None) or trace.NoOpTracer()


def location_header(url: str) -> str:
    """Make a stored URL safe for a Location header.

    Only non-ASCII characters are percent-encoded (as UTF-8). Everything
    else, including existing escapes, is sent as stored.
    """
    return "".join(c if ord(c) < 128 else quote(c, safe="") for c in url)


def reject(span: Span, status_code: int, detail: str) -> HTTPException:
    """Mark the span as failed and build the matching HTTP error."""
    span.set_status(Status(StatusCode.ERROR, detail))
    return HTTPException(status_code=status_code, detail=detail)


async def lookup_original(store: LinkStore, short: str, span: Span) -> str:
    """Resolve a short code or raise a 404.

    Unknown codes, malformed codes and store failures all surface as
    "not found".
    """
    span.set_attribute("link.short", short)
    if not base62.is_valid(short):
        logger.debug(f"Malformed short code: {short!r}")
        raise reject(span, 404, "Link not found")

    try:
        original = await store.get_original(short)
    except StoreError as e:
        logger.error(f"Error looking up link {short}: {e}")
        span.record_exception(e)
        raise reject(span, 404, "Link not found") from e

    if original is None:
        logger.info(f"Unknown link: {short}")
        raise reject(span, 404, "Link not found")
    return original


def traced_short_code(tracer: trace.Tracer, url: str) -> str:
    """Generate the short code for a URL inside its own span."""
    with tracer.start_as_current_span(
        "generate_short_code",
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            short = generate_short_code(url)
        except ShortCodeGenerationError as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, "error hashing url"))
            raise
        span.set_attribute("link.short", short)
        return short


@router.post(
    "/api/v1/links",
    response_model=Link,
    status_code=201,
    responses={
        201: {"description": "Link created"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Short code generation failed"},
    },
    summary="Create a link",
)
async def create_link(
    request: Request,
    store: LinkStore = Depends(get_store),
) -> Link:
    """Create a link from a JSON body of the form ``{"url": "..."}``.

    A failure to store the link is logged but does not fail the request.
    """
    tracer = get_tracer(request)
    with tracer.start_as_current_span("create_link") as span:
        content_type = request.headers.get("content-type")
        if content_type is None:
            logger.debug("No Content-Type header")
            raise reject(span, 400, "Missing Content-Type header")

        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type != JSON_MEDIA_TYPE:
            logger.debug(f"Unexpected Content-Type: {content_type}")
            raise reject(span, 400, f"Content-Type must be {JSON_MEDIA_TYPE}")

        body = await request.body()
        try:
            link_data = LinkCreate.model_validate_json(body)
        except ValidationError as e:
            logger.debug(f"Invalid request body: {e.error_count()} error(s)")
            raise reject(
                span, 400, "Body must be a JSON object with a non-empty absolute url"
            ) from e

        try:
            short = traced_short_code(tracer, link_data.url)
        except ShortCodeGenerationError as e:
            raise reject(span, 500, "Cannot generate short code") from e
        span.set_attribute("link.short", short)

        try:
            await store.add_link(short, link_data.url)
        except StoreError as e:
            logger.error(f"Error adding link {short}: {e}")
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, "error adding link"))

        return Link(
            short=create_short_url(get_request_host(request), short),
            original=link_data.url,
        )


@router.get(
    "/api/v1/links/{short}",
    response_model=Link,
    responses={
        200: {"description": "Link found"},
        404: {"model": ErrorResponse, "description": "Link not found"},
    },
    summary="Get a link",
)
async def get_link(
    short: str,
    request: Request,
    store: LinkStore = Depends(get_store),
) -> Link:
    with get_tracer(request).start_as_current_span("get_link") as span:
        original = await lookup_original(store, short, span)
        return Link(
            short=create_short_url(get_request_host(request), short),
            original=original,
        )


@router.get(
    "/{short}",
    response_class=Response,
    status_code=307,
    responses={
        307: {"description": "Redirect to original URL"},
        404: {"model": ErrorResponse, "description": "Link not found"},
    },
    summary="Redirect to original URL",
)
async def redirect_link(
    short: str,
    request: Request,
    store: LinkStore = Depends(get_store),
) -> Response:
    with get_tracer(request).start_as_current_span("redirect") as span:
        original = await lookup_original(store, short, span)
        return Response(status_code=307, headers={"location": location_header(original)})
