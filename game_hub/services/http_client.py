"""HTTP client service with cooperative cancellation."""

import asyncio
from typing import Any

import httpx
import structlog

from ..models.fetch import FailureKind, FetchCancelled, FetchFailed, FetchOk, FetchOutcome
from .cancellation import CancellationToken
from .errors import handle_error, status_fallback_message

log = structlog.stdlib.get_logger()

_MESSAGE_KEYS = ("message", "error", "detail")
_MAX_TEXT_MESSAGE = 200


class HttpClientService:
    """Base-URL-relative JSON reads that report a tagged outcome.

    Network-level errors and non-2xx responses are both reported as
    ``FetchFailed`` carrying a message; nothing is raised for them. A read
    whose token is triggered while in flight is aborted and reported as
    ``FetchCancelled``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        default_params: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client service.

        Args:
            base_url: Root URL every request path is resolved against
            timeout: Request timeout in seconds
            default_params: Query parameters sent with every request (e.g. the API key)
            transport: Optional transport override, used by tests
        """
        self.base_url = base_url
        self.timeout = timeout
        self._default_params: dict[str, str] = dict(default_params or {})

        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers={
                "User-Agent": "Game-Hub/0.1",
                "Accept": "application/json",
            },
            follow_redirects=True,
            transport=transport,
        )

        log.info(
            "HTTP client service initialized",
            base_url=base_url,
            timeout=timeout,
            default_params=sorted(self._default_params),
        )

    async def get_json(
        self,
        path: str,
        params: dict[str, str] | None = None,
        token: CancellationToken | None = None,
    ) -> FetchOutcome[Any]:
        """Make a GET request and decode its JSON body.

        Args:
            path: Path relative to the base URL
            params: Optional query parameters, merged over the defaults
            token: Cancellation token; triggering it aborts the request

        Returns:
            ``FetchOk`` with the decoded body, ``FetchCancelled`` or ``FetchFailed``
        """
        token = token or CancellationToken(name=path)
        if token.cancelled:
            log.debug("Request cancelled before it was issued", path=path)
            return FetchCancelled()

        merged_params = {**self._default_params, **(params or {})}

        log.debug("Making HTTP GET request", path=path, params=sorted(merged_params))

        request_task = asyncio.ensure_future(self._client.get(path, params=merged_params))
        cancel_task = asyncio.ensure_future(token.wait())
        try:
            _ = await asyncio.wait(
                {request_task, cancel_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            _ = cancel_task.cancel()
            if not request_task.done():
                _ = request_task.cancel()

        if token.cancelled:
            # Let the aborted request unwind; its result is discarded.
            _ = await asyncio.wait({request_task})
            if not request_task.cancelled():
                _ = request_task.exception()
            log.info("HTTP GET request cancelled", path=path)
            return FetchCancelled()

        try:
            response = request_task.result()
        except httpx.HTTPError as e:
            user_error = handle_error(
                e,
                operation="GET",
                component="http_client",
                context={"url": f"{self.base_url}{path}"},
            )
            log.warning(
                "HTTP GET request failed",
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            return FetchFailed(
                message=str(e) or user_error.message,
                kind=FailureKind.NETWORK,
            )

        if response.is_error:
            message = self._status_message(response)
            log.warning(
                "HTTP GET request returned an error status",
                path=path,
                status_code=response.status_code,
                error=message,
            )
            return FetchFailed(
                message=message,
                kind=FailureKind.HTTP,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            log.warning("Response body is not valid JSON", path=path, error=str(e))
            return FetchFailed(
                message="The server response is not valid JSON.",
                kind=FailureKind.PARSE,
                status_code=response.status_code,
            )

        log.info(
            "HTTP GET request successful",
            path=path,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return FetchOk(body)

    @staticmethod
    def _status_message(response: httpx.Response) -> str:
        """Pick the message to show for a non-2xx response."""
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            for key in _MESSAGE_KEYS:
                value = payload.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()

        text = response.text.strip()
        if text and len(text) <= _MAX_TEXT_MESSAGE and not text.startswith("<"):
            return text

        return status_fallback_message(response.status_code)

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._client.aclose()
        log.info("HTTP client closed")

    async def __aenter__(self) -> "HttpClientService":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
