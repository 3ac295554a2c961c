"""
HTTP client for the logs API.

Built on httpx with:
- Credential headers on every request
- Raw (still compressed) body capture
- Exactly one attempt per request; failures are raised, never retried
"""

from typing import Optional

import httpx
import structlog

from .errors import APIError, TransportError
from .models import FetchedLogs

logger = structlog.get_logger(__name__)


DEFAULT_TIMEOUT = 60.0


def canonical_header_name(name: str) -> str:
    """Canonical MIME form, e.g. 'content-type' -> 'Content-Type'."""
    return "-".join(part.capitalize() for part in name.split("-"))


def headers_to_dict(headers: httpx.Headers) -> dict[str, list[str]]:
    """Group response headers by canonical name, keeping every value in order."""
    grouped: dict[str, list[str]] = {}
    for raw_name, raw_value in headers.raw:
        name = canonical_header_name(raw_name.decode("latin-1"))
        grouped.setdefault(name, []).append(raw_value.decode("latin-1"))
    return grouped


class LogsClient:
    """
    Synchronous client that downloads one time range per call.

    Usage:
        with LogsClient(base_url, email, key) as client:
            logs = client.fetch(1500000000, 1500000060)
            data = logs.content
    """

    def __init__(
        self,
        base_url: str,
        auth_email: str,
        auth_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize logs client.

        Args:
            base_url: Logs endpoint, queried with start/end parameters
            auth_email: Value of the X-Auth-Email header
            auth_key: Value of the X-Auth-Key header
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url
        self.auth_email = auth_email
        self.auth_key = auth_key
        self.timeout = timeout
        self.transport = transport

        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> "LogsClient":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self) -> None:
        if self._client is None:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self.transport,
            )

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def _headers(self) -> dict[str, str]:
        return {
            "X-Auth-Email": self.auth_email,
            "X-Auth-Key": self.auth_key,
            "Accept-Encoding": "gzip",
        }

    def build_request(self, start: int, end: int) -> httpx.Request:
        """Build the GET request for [start, end)."""
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'with' context.")

        try:
            return self._client.build_request(
                "GET",
                self.base_url,
                params={"start": int(start), "end": int(end)},
                headers=self._headers(),
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, ValueError) as e:
            raise TransportError(
                f"Failed to create request for {self.base_url}: {e}",
                url=self.base_url,
            ) from e

    def fetch(self, start: int, end: int) -> FetchedLogs:
        """
        Download logs for [start, end).

        Args:
            start: Range start (Unix seconds, inclusive)
            end: Range end (Unix seconds, exclusive)

        Returns:
            FetchedLogs with the undecoded body

        Raises:
            TransportError: Request could not be built or sent
            APIError: Response status is not 2xx
        """
        request = self.build_request(start, end)
        url = str(request.url)

        logger.debug("http_get", url=url)

        try:
            response = self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to make request to {url}: {e}", url=url) from e

        if response.history:
            logger.debug("http_redirected", url=url, final_url=str(response.url))

        try:
            if not response.is_success:
                raise APIError(response.status_code, url)

            try:
                content = b"".join(response.iter_raw())
            except httpx.HTTPError as e:
                raise TransportError(f"Failed to read response from {url}: {e}", url=url) from e
        finally:
            response.close()

        logger.debug(
            "http_response",
            url=url,
            status=response.status_code,
            size=len(content),
        )

        return FetchedLogs(
            url=url,
            status_code=response.status_code,
            content=content,
            headers=headers_to_dict(response.headers),
        )
