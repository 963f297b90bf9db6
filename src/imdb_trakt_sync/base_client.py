"""Base API client with common functionality."""

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .constants import HTTP_FORBIDDEN, HTTP_NOT_FOUND, HTTP_TOO_MANY_REQUESTS, HTTP_UNAUTHORIZED

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """The requested resource does not exist on the remote service."""


class BaseAPIClient:
    """Base class for API clients with common request handling."""

    service_name = "API"

    def __init__(
        self,
        base_url: str,
        headers: Optional[dict] = None,
        cookies: Optional[dict] = None,
    ):
        """Initialize API client with a retrying session."""
        self.base_url = base_url
        self.session = requests.Session()

        # Configure retry strategy for rate limits (429)
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[HTTP_TOO_MANY_REQUESTS],
            allowed_methods=["GET", "POST", "PATCH", "PUT", "DELETE"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        if headers:
            self.session.headers.update(headers)
        if cookies:
            self.session.cookies.update(cookies)

    def _handle_auth_error(self, response: requests.Response) -> None:
        """Handle authentication errors consistently."""
        if response.status_code in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
            logger.error(f"{self.service_name} authentication failed (HTTP {response.status_code})")
            logger.error(f"{self.service_name} credentials are invalid or expired")

    def _check(self, response: requests.Response) -> requests.Response:
        """Raise NotFoundError on 404 and HTTPError on any other failure."""
        if response.status_code == HTTP_NOT_FOUND:
            raise NotFoundError(f"{self.service_name} resource not found: {response.url}")
        self._handle_auth_error(response)
        response.raise_for_status()
        return response

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"
