"""
HTTP transport for vendor APIs.

- ``HTTPTransport``: JSON requests with retry/backoff and tolerant decoding
- ``multipart_post``: single-shot multipart/form-data POST over aiohttp
- ``NO_BODY``: sentinel returned for successful responses without JSON
- ``parse_resource``: validates resource bodies, raising ``DecodeError``
"""

from .http import NO_BODY, HTTPTransport, decode_response, parse_items, parse_resource
from .multipart import build_form, multipart_post
from .retry import RetryObserver, RetryPolicy

__all__ = [
    "NO_BODY",
    "HTTPTransport",
    "decode_response",
    "parse_items",
    "parse_resource",
    "build_form",
    "multipart_post",
    "RetryObserver",
    "RetryPolicy",
]
