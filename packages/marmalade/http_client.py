"""HTTP client with optional retries, exponential backoff, and jitter."""

import time
import random
import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class HttpClient:
    """HTTP client wrapper around a pooled ``requests`` session.

    Retries are off unless ``max_retries`` is positive.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 20.0,
        max_retries: int = 0,
        backoff_factor: float = 1.0,
        retry_statuses: tuple = (429, 500, 502, 503, 504),
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Base URL for all requests
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts (0 disables retries)
            backoff_factor: Multiplier for exponential backoff
            retry_statuses: HTTP status codes that trigger a retry
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.retry_statuses = retry_statuses

        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry configuration."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=list(self.retry_statuses),
            allowed_methods=["GET"],
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _add_jitter(self, delay: float) -> float:
        """Add random jitter to delay (0-50% of delay)."""
        jitter = random.uniform(0, delay * 0.5)
        return delay + jitter

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(
        self,
        path: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> requests.Response:
        """
        Make a GET request.

        Responses with a retryable status are retried with jittered
        exponential backoff while attempts remain; the last response is
        returned as-is so callers can inspect non-success bodies.

        Args:
            path: URL path (appended to base_url)
            params: Query parameters
            headers: Additional headers

        Returns:
            Response object

        Raises:
            requests.RequestException: On connection failure or timeout
        """
        url = self.url_for(path)
        attempt = 0

        while True:
            response = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )

            if response.status_code not in self.retry_statuses or attempt >= self.max_retries:
                return response

            if response.status_code == 429:
                delay = self._add_jitter(float(response.headers.get("Retry-After", 5)))
            else:
                delay = self._add_jitter(self.backoff_factor * (2**attempt))
            logger.warning(
                f"HTTP {response.status_code} from {url}. "
                f"Waiting {delay:.2f}s before retry. "
                f"Attempt {attempt + 1}/{self.max_retries + 1}"
            )
            time.sleep(delay)
            attempt += 1
