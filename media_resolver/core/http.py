"""
HTTP access for media-resolver.

Every network call in the project goes through HttpClient.get_text().
It wraps a requests.Session so that the User-Agent and timeout from
config.yaml apply everywhere, and it converts every requests failure
into a single NetworkError.

There is no retry layer: a failure propagates to the caller
unchanged, and it is the caller that decides what a failure means (the
credential probe, for instance, turns it into False).

Usage:
    from media_resolver.core.http import HttpClient

    http = HttpClient(timeout=30)
    body = http.get_text("https://api-v2.soundcloud.com/resolve", params={...})
    data = http.get_json("https://api-v2.soundcloud.com/resolve", params={...})
"""

import json
from typing import Any

import requests

from media_resolver.core.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, NetworkConfig
from media_resolver.core.exceptions import NetworkError, ParseError
from media_resolver.core.logger import get_logger

logger = get_logger(__name__)


class HttpClient:
    """
    Thin wrapper around requests.Session.

    Attributes:
        session: The underlying requests.Session.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_config(cls, network: NetworkConfig) -> "HttpClient":
        """Create a client from the network section of the configuration."""
        return cls(timeout=network.timeout, user_agent=network.user_agent)

    def get_text(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None
    ) -> str:
        """
        GET a URL and return the response body as text.

        Args:
            url: URL to fetch.
            params: Optional query parameters, appended by requests.
            headers: Optional extra headers for this request.

        Returns:
            The decoded response body.

        Raises:
            NetworkError: On transport failure (DNS, connection, timeout)
                          or when the status code is not 2xx.
        """
        logger.debug(f"GET {url}")

        try:
            response = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise NetworkError(
                f"GET {url} failed: {e}",
                details={"original_error": str(e)},
                url=url
            ) from e

        if not 200 <= response.status_code < 300:
            raise NetworkError(
                f"GET {url} failed with HTTP {response.status_code}",
                details={"reason": response.reason},
                url=url,
                status_code=response.status_code
            )

        return response.text

    def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None
    ) -> dict[str, Any]:
        """
        GET a URL and decode the body as a JSON object.

        Raises:
            NetworkError: As get_text().
            ParseError: If the body is not JSON or not a JSON object.
        """
        body = self.get_text(url, params=params, headers=headers)
        return parse_json_object(body, source=url)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()


def parse_json_object(text: str, source: str = "response") -> dict[str, Any]:
    """
    Decode text that must contain a JSON object.

    Args:
        text: Raw JSON text.
        source: Where the text came from, used in the error message.

    Raises:
        ParseError: If the text is not valid JSON or not an object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Invalid JSON in {source}: {e}",
            details={"source": source, "original_error": str(e)}
        ) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object in {source}, got {type(data).__name__}",
            details={"source": source}
        )

    return data
