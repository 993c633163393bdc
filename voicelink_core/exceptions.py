"""
Exceptions for the voice provider integration layer.

Every error raised by a vendor client inherits from ``ProviderError`` so
batch callers (sync jobs, workflow actions) can decide per agent or per
call whether to skip and continue or abort.

Raw vendor response bodies never travel inside these exceptions; they are
only written to diagnostic logs. Messages carry the classified HTTP status
and the vendor path.
"""

from typing import Any, Dict, Optional


class ProviderError(Exception):
    """
    Base exception for all provider integration errors.

    Attributes:
        message: Human-readable error description
        code: Short machine-readable error code
        details: Additional structured context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


# =============================================================================
# Transport Errors
# =============================================================================


class TransportError(ProviderError):
    """
    Raised when a request could not be completed at the network level.

    Either every attempt failed with a connection/timeout error, or the
    multipart primitive could not reach the vendor.

    Attributes:
        attempts: Number of attempts made before giving up
        last_error: The underlying exception from the final attempt
        vendor: Vendor the request was addressed to
        path: Vendor API path
    """

    def __init__(
        self,
        attempts: int,
        last_error: Optional[BaseException],
        vendor: str = "",
        path: str = "",
    ):
        self.attempts = attempts
        self.last_error = last_error
        self.vendor = vendor
        self.path = path
        cause = f"{type(last_error).__name__}: {last_error}" if last_error else "unknown error"
        super().__init__(
            f"{vendor or 'vendor'} request to {path or '?'} failed after "
            f"{attempts} attempt(s): {cause}",
            code="transport_error",
            details={"attempts": attempts, "vendor": vendor, "path": path},
        )


class DecodeError(ProviderError):
    """
    Raised when a response body that must be JSON cannot be parsed.

    The shared JSON transport downgrades this condition to ``NO_BODY``
    because several vendor endpoints mis-declare content type on empty
    bodies. It is raised where a resource is required: by the multipart
    path and by client reads whose body is missing or does not validate.
    """

    def __init__(self, vendor: str = "", path: str = ""):
        self.vendor = vendor
        self.path = path
        super().__init__(
            f"{vendor or 'vendor'} returned an unparsable body for {path or '?'}",
            code="decode_error",
            details={"vendor": vendor, "path": path},
        )


# =============================================================================
# HTTP/API Errors
# =============================================================================


class VendorAPIError(ProviderError):
    """
    Raised when a vendor API answers with a non-2xx status.

    Attributes:
        status_code: HTTP status code of the final response
        vendor: Vendor that produced the response
        path: Vendor API path
    """

    def __init__(
        self,
        status_code: int,
        vendor: str = "",
        path: str = "",
        message: Optional[str] = None,
        code: str = "vendor_api_error",
    ):
        self.status_code = status_code
        self.vendor = vendor
        self.path = path
        super().__init__(
            message or f"{vendor or 'vendor'} API error [{status_code}] {path}".rstrip(),
            code=code,
            details={"status_code": status_code, "vendor": vendor, "path": path},
        )

    def __str__(self) -> str:
        return f"[HTTP {self.status_code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            "status_code": self.status_code,
            "vendor": self.vendor,
            "path": self.path,
        })
        return result


class AuthenticationError(VendorAPIError):
    """Raised when the vendor rejects the API key (401/403)."""

    def __init__(self, status_code: int = 401, vendor: str = "", path: str = ""):
        super().__init__(
            status_code,
            vendor,
            path,
            message=f"{vendor or 'vendor'} rejected the API key for {path or '?'}",
            code="auth_error",
        )


class NotFoundError(VendorAPIError):
    """Raised when the requested agent, call or resource doesn't exist."""

    def __init__(self, vendor: str = "", path: str = ""):
        super().__init__(
            404,
            vendor,
            path,
            message=f"{vendor or 'vendor'} resource not found: {path or '?'}",
            code="not_found",
        )


class RateLimitError(VendorAPIError):
    """
    Raised when the vendor keeps answering 429 after retries are exhausted.

    Attributes:
        retry_after: Seconds suggested by the vendor, when it sent one
    """

    def __init__(
        self,
        vendor: str = "",
        path: str = "",
        retry_after: Optional[float] = None,
    ):
        self.retry_after = retry_after
        message = f"{vendor or 'vendor'} rate limit exceeded for {path or '?'}"
        if retry_after:
            message += f", retry after {retry_after:g} seconds"
        super().__init__(429, vendor, path, message=message, code="rate_limit_error")


class ServerError(VendorAPIError):
    """Raised for vendor-side 5xx responses once retries are exhausted."""

    def __init__(self, status_code: int = 500, vendor: str = "", path: str = ""):
        super().__init__(status_code, vendor, path, code="server_error")


# =============================================================================
# Configuration Errors
# =============================================================================


class UnsupportedProviderError(ProviderError, ValueError):
    """Raised when a provider name does not match any registered vendor."""

    def __init__(self, provider: str, available: Optional[list] = None):
        self.provider = provider
        message = f"Unknown provider: {provider}"
        if available:
            message += f". Available providers: {', '.join(available)}"
        super().__init__(message, code="unsupported_provider")


class MissingAPIKeyError(ProviderError, ValueError):
    """Raised when a client is requested without an API key. No request is made."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(
            f"No API key configured for provider: {provider}",
            code="missing_api_key",
            details={"provider": provider},
        )


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def classify_http_error(
    status_code: int,
    vendor: str = "",
    path: str = "",
    retry_after: Optional[str] = None,
) -> VendorAPIError:
    """
    Map an HTTP error status onto the exception taxonomy.

    Shared by the JSON transport and the multipart primitive so callers
    cannot tell which stack served a failed request.
    """
    if status_code in (401, 403):
        return AuthenticationError(status_code, vendor, path)
    if status_code == 404:
        return NotFoundError(vendor, path)
    if status_code == 429:
        return RateLimitError(vendor, path, _parse_retry_after(retry_after))
    if status_code >= 500:
        return ServerError(status_code, vendor, path)
    return VendorAPIError(status_code, vendor, path)
