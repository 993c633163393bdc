"""
Resilient JSON transport shared by every vendor client.

One coroutine, ``HTTPTransport.request``, wraps retry with exponential
backoff, uniform error classification and tolerant response decoding.
Vendors are inconsistent about bodies on success (delete and publish
endpoints answer with nothing, or with a body whose content type lies), so
anything that is not parseable JSON on a 2xx becomes ``NO_BODY`` instead of
an exception. Reads that must return a resource go through
``parse_resource``, which turns a missing or malformed body into
``DecodeError``.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from ..exceptions import DecodeError, TransportError, classify_http_error
from .retry import RetryObserver, RetryPolicy

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

# Longest slice of a vendor error body that is written to diagnostic logs.
MAX_LOGGED_BODY = 2000


class _NoBody:
    """Sentinel type for successful responses without a usable JSON body."""

    _instance: Optional["_NoBody"] = None

    def __new__(cls) -> "_NoBody":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_BODY"


NO_BODY = _NoBody()

ModelT = TypeVar("ModelT", bound=BaseModel)


def is_json_content_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and "application/json" in content_type.lower()


def decode_response(
    response: httpx.Response,
    vendor: str,
    path: str,
    expect_body: bool = True,
) -> Any:
    """
    Turn a final response into parsed JSON, ``NO_BODY`` or a classified error.

    Raises:
        VendorAPIError: (or a subclass) for any non-2xx status
    """
    if response.is_error:
        logger.error(
            "vendor_api_error",
            vendor=vendor,
            path=path,
            status_code=response.status_code,
            body=response.text[:MAX_LOGGED_BODY],
        )
        raise classify_http_error(
            response.status_code,
            vendor,
            path,
            response.headers.get("Retry-After"),
        )

    if not expect_body:
        return NO_BODY

    if not is_json_content_type(response.headers.get("content-type")):
        return NO_BODY

    try:
        return response.json()
    except ValueError:
        # Content type claimed JSON but the body is empty or malformed.
        logger.debug(
            "vendor_body_not_json",
            vendor=vendor,
            path=path,
            status_code=response.status_code,
        )
        return NO_BODY


def parse_resource(model: Type[ModelT], data: Any, vendor: str, path: str) -> ModelT:
    """
    Validate a response body that must describe a single resource.

    Raises:
        DecodeError: The body was ``NO_BODY``, not an object, or does not
            fit ``model``
    """
    if not isinstance(data, dict):
        logger.error("vendor_resource_missing", vendor=vendor, path=path, body=repr(data)[:200])
        raise DecodeError(vendor, path)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error("vendor_resource_invalid", vendor=vendor, path=path, errors=e.error_count())
        raise DecodeError(vendor, path) from e


def parse_items(model: Type[ModelT], items: List[Any], vendor: str, path: str) -> List[ModelT]:
    """Validate every entry of an already unwrapped list body."""
    return [parse_resource(model, item, vendor, path) for item in items]


class HTTPTransport:
    """
    Async HTTP request primitive with retry/backoff.

    Holds configuration only; a fresh ``httpx.AsyncClient`` is opened per
    request, so one transport can serve any number of concurrent requests.

    Args:
        timeout: Per-attempt timeout in seconds
        retry_policy: Backoff and retryable-status configuration
        transport: Optional httpx transport (used by tests and proxies)
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
            follow_redirects=True,
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        vendor: str,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        on_retry: Optional[RetryObserver] = None,
        expect_body: bool = True,
    ) -> Any:
        """
        Perform a request, retrying transient failures.

        Network errors and retryable statuses (429/5xx by default) are
        retried up to ``retry_policy.max_attempts`` in total. Any other
        error status fails on the first attempt.

        Returns:
            Parsed JSON, or ``NO_BODY`` for empty/non-JSON success bodies

        Raises:
            TransportError: Every attempt failed at the network level
            VendorAPIError: The final response had an error status
        """
        policy = self.retry_policy
        attempt = 0

        async with self._client() as client:
            while True:
                attempt += 1
                try:
                    response = await client.request(
                        method,
                        url,
                        headers=dict(headers or {}),
                        params=params,
                        json=json,
                    )
                except httpx.RequestError as e:
                    if attempt >= policy.max_attempts:
                        logger.error(
                            "vendor_request_failed",
                            vendor=vendor,
                            path=path,
                            attempts=attempt,
                            error=str(e),
                        )
                        raise TransportError(attempt, e, vendor, path) from e
                    await self._backoff(attempt, vendor, path, str(e), on_retry)
                    continue

                if (
                    response.is_error
                    and policy.is_retryable_status(response.status_code)
                    and attempt < policy.max_attempts
                ):
                    await self._backoff(
                        attempt,
                        vendor,
                        path,
                        f"HTTP {response.status_code}",
                        on_retry,
                    )
                    continue

                return decode_response(response, vendor, path, expect_body)

    async def _backoff(
        self,
        attempt: int,
        vendor: str,
        path: str,
        reason: str,
        on_retry: Optional[RetryObserver],
    ) -> None:
        delay = self.retry_policy.get_delay(attempt)

        logger.warning(
            "vendor_request_retry",
            vendor=vendor,
            path=path,
            attempt=attempt,
            delay=round(delay, 3),
            reason=reason,
        )
        if on_retry:
            on_retry(attempt, delay)

        await asyncio.sleep(delay)
