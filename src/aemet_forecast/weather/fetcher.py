"""Two-step redirect fetch against the AEMET OpenData API."""

import logging
import time
from functools import lru_cache
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from aemet_forecast.config import AEMET_API_BASE_URL, BASE_BACKOFF_SECONDS, MAX_RETRIES
from aemet_forecast.weather.exceptions import AemetError, DecodeError, TransportError
from aemet_forecast.weather.models import RedirectEnvelope


@lru_cache(maxsize=32)
def _adapter_for(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


class DataFetcher:
    """Fetches AEMET payloads using the API's redirect protocol.

    Every AEMET data endpoint answers with a small JSON envelope whose
    ``datos`` field is the URL of the real payload. The fetcher follows that
    pointer and decodes the second body.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        api_key: str,
        base_url: str = AEMET_API_BASE_URL,
        logger: Optional[logging.Logger] = None
    ):
        """Initialize the fetcher.

        Args:
            http_client: Synchronous httpx client used for both hops
            api_key: AEMET OpenData API key sent on every request
            base_url: Base URL of the OpenData API
            logger: Logger to report retries on (module logger if None)
        """
        self.http_client = http_client
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.logger = logger or logging.getLogger(__name__)

    def _get(self, url: str) -> httpx.Response:
        """Issue a GET with the api_key query parameter.

        Raises:
            TransportError: On connection, timeout or HTTP status failure
        """
        try:
            response = self.http_client.get(url, params={"api_key": self.api_key})
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"error requesting data: HTTP {e.response.status_code} from {_redact(url)}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"error requesting data: {e}") from e

    def fetch_redirected(self, endpoint_path: str, response_type: Any = None) -> Any:
        """Fetch an endpoint and follow its ``datos`` pointer.

        Args:
            endpoint_path: Path below the base URL, without leading slash
            response_type: Type to decode the payload into; raw bytes if None

        Returns:
            Decoded payload, or the payload bytes when no type is given

        Raises:
            TransportError: If either request fails
            DecodeError: If either body is malformed or does not match its schema
        """
        url = f"{self.base_url}/{endpoint_path.lstrip('/')}"
        self.logger.debug(f"Requesting {url}")

        response = self._get(url)
        try:
            envelope = RedirectEnvelope.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeError(f"error decoding data: {e}") from e

        self.logger.debug(f"Following data pointer {envelope.datos}")
        response = self._get(envelope.datos)

        if response_type is None:
            return response.content

        try:
            # AEMET serves payloads as ISO-8859-15, let httpx apply the charset
            return _adapter_for(response_type).validate_json(response.text)
        except ValidationError as e:
            raise DecodeError(f"error decoding data: {e}") from e

    def fetch_redirected_with_retry(
        self,
        endpoint_path: str,
        response_type: Any = None,
        max_attempts: int = MAX_RETRIES,
        base_backoff: float = BASE_BACKOFF_SECONDS
    ) -> Any:
        """Run ``fetch_redirected`` with exponential backoff.

        Every failure is retried the same way, whether it is a network error,
        an HTTP 4xx/5xx or a malformed body. The n-th retry waits
        ``base_backoff * 2 ** (n - 1)`` seconds.

        Args:
            endpoint_path: Path below the base URL
            response_type: Type to decode the payload into
            max_attempts: Number of retries after the first try
            base_backoff: Delay before the first retry, in seconds

        Returns:
            Decoded payload

        Raises:
            AemetError: Same type as the last failure, with the attempt count
        """
        total_attempts = max(max_attempts, 0) + 1
        last_error: Optional[AemetError] = None

        for attempt in range(total_attempts):
            if attempt > 0:
                backoff = base_backoff * (2 ** (attempt - 1))
                self.logger.warning(
                    f"Retrying request (attempt {attempt + 1}/{total_attempts}) after {backoff * 1000:.0f}ms backoff"
                )
                time.sleep(backoff)

            try:
                return self.fetch_redirected(endpoint_path, response_type)
            except AemetError as e:
                last_error = e
                self.logger.warning(f"Request failed (attempt {attempt + 1}/{total_attempts}): {e}")

        assert last_error is not None
        raise type(last_error)(
            f"request failed after {total_attempts} attempts: {last_error}",
            attempts=total_attempts
        ) from last_error


def _redact(url: str) -> str:
    """Drop the query string so API keys never reach error messages."""
    return url.split("?", 1)[0]
