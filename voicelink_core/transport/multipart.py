"""
Multipart form POST primitive.

A handful of vendor endpoints (Retell knowledge bases) only accept
``multipart/form-data``. Those requests bypass the shared httpx transport
and go out through aiohttp's own client, with a single attempt. Errors are
classified with the same ``classify_http_error`` as the JSON transport.
"""

import asyncio
import json
from typing import Any, Callable, Dict, Mapping, Optional

import aiohttp
import structlog

from ..exceptions import DecodeError, TransportError, classify_http_error
from .http import DEFAULT_TIMEOUT, MAX_LOGGED_BODY

logger = structlog.get_logger(__name__)

PART_CONTENT_TYPE = "text/plain; charset=utf-8"


def build_form(fields: Mapping[str, str]) -> aiohttp.FormData:
    """
    Build multipart form data from plain string fields.

    aiohttp url-encodes a ``FormData`` made only of bare strings; giving each
    part a content type forces ``multipart/form-data``.
    """
    form = aiohttp.FormData()
    for name, value in fields.items():
        form.add_field(name, value, content_type=PART_CONTENT_TYPE)
    return form


async def multipart_post(
    url: str,
    *,
    vendor: str,
    path: str,
    headers: Optional[Mapping[str, str]] = None,
    fields: Mapping[str, str],
    timeout: float = DEFAULT_TIMEOUT,
    session_factory: Callable[..., Any] = aiohttp.ClientSession,
) -> Dict[str, Any]:
    """
    POST ``fields`` as multipart/form-data and return the parsed JSON body.

    ``headers`` must not carry a Content-Type: aiohttp writes the multipart
    boundary itself.

    Raises:
        TransportError: The vendor could not be reached
        VendorAPIError: The vendor answered with an error status
        DecodeError: The success body was not JSON
    """
    request_headers = {
        k: v for k, v in (headers or {}).items() if k.lower() != "content-type"
    }
    form = build_form(fields)

    try:
        async with session_factory(
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as session:
            async with session.post(url, headers=request_headers, data=form) as response:
                status = response.status
                body = await response.text()
                retry_after = response.headers.get("Retry-After")
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error("vendor_multipart_failed", vendor=vendor, path=path, error=str(e))
        raise TransportError(1, e, vendor, path) from e

    if status >= 400:
        logger.error(
            "vendor_api_error",
            vendor=vendor,
            path=path,
            status_code=status,
            body=body[:MAX_LOGGED_BODY],
            multipart=True,
        )
        raise classify_http_error(status, vendor, path, retry_after)

    try:
        return json.loads(body)
    except ValueError as e:
        logger.error("vendor_multipart_invalid_json", vendor=vendor, path=path, status_code=status)
        raise DecodeError(vendor, path) from e
