"""Upstream event service errors."""

from __future__ import annotations


class UpstreamAPIError(RuntimeError):
    """Raised when the event service cannot satisfy a required request."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialise with a message, the request path and HTTP status."""
        self.path = path
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, path: str, status_code: int) -> UpstreamAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(
            f"Event API HTTP {status_code} for {path}",
            path=path,
            status_code=status_code,
        )

    @classmethod
    def rate_limited(cls, path: str, attempts: int) -> UpstreamAPIError:
        """Return an error when HTTP 429 persists after every retry."""
        return cls(
            f"Event API rate limit persisted after {attempts} attempts for {path}",
            path=path,
            status_code=429,
        )

    @classmethod
    def transport(cls, path: str, exc: BaseException) -> UpstreamAPIError:
        """Return an error for connection failures and timeouts."""
        return cls(f"Event API request to {path} failed: {exc}", path=path)

    @classmethod
    def invalid_body(cls, path: str) -> UpstreamAPIError:
        """Return an error when the response body is not a JSON object."""
        return cls(f"Event API returned a non-object body for {path}", path=path)


class UpstreamConfigError(RuntimeError):
    """Raised when the event service credentials are not configured."""

    @classmethod
    def missing_credentials(cls) -> UpstreamConfigError:
        """Return an error when the token or site id is absent."""
        return cls("VENUEPULSE_API_TOKEN and VENUEPULSE_SITE_ID are required")
