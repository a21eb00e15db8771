"""Request manager for handling HTTP requests.

The request manager is responsible for:
- Maintaining the HTTP client (httpx.Client)
- Turning httpx failures into TransientExceptions
- Converting HTTP responses to Response objects

This separation lets the driver focus on queue management and scraper
orchestration while the request manager deals with HTTP.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from shirtscrape.common.exceptions import (
    HTMLResponseAssumptionException,
    RequestFailedException,
    RequestTimeoutException,
)
from shirtscrape.data_types import Request, Response

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class SyncRequestManager:
    """Manages HTTP requests for the synchronous driver.

    Example::

        with SyncRequestManager(timeout=30.0) as manager:
            response = manager.resolve_request(request)
    """

    def __init__(
        self,
        timeout: float | None = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the request manager.

        Args:
            timeout: Per-request timeout in seconds. None disables it.
            headers: Headers sent with every request (e.g. User-Agent).
            transport: Optional httpx transport, mainly for tests.
        """
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=timeout,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> SyncRequestManager:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def resolve_request(self, request: Request) -> Response:
        """Fetch a Request and return the Response.

        Args:
            request: The Request to fetch. URL should be absolute.

        Returns:
            Response containing the HTTP response data.

        Raises:
            HTMLResponseAssumptionException: If the server answers with a
                4xx or 5xx status code.
            RequestTimeoutException: If the request times out.
            RequestFailedException: If no response could be obtained.
        """
        http_params = request.request
        logger.debug(f"{http_params.method.value} {http_params.url}")

        try:
            http_response = self._client.request(
                method=http_params.method.value,
                url=http_params.url,
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutException(
                url=http_params.url, timeout_seconds=self.timeout
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RequestFailedException(
                url=http_params.url, reason=str(e) or type(e).__name__
            ) from e

        if http_response.status_code >= 400:
            raise HTMLResponseAssumptionException(
                status_code=http_response.status_code,
                expected_codes=[200],
                url=http_params.url,
            )

        return Response(
            status_code=http_response.status_code,
            headers=dict(http_response.headers),
            content=http_response.content,
            text=http_response.text,
            url=str(http_response.url),
            request=request,
        )
