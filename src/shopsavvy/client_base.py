from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import ClientConfig
from .errors import APIError, NetworkError, RequestTimeout, map_http_error


logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    HTTP plumbing shared by every ShopSavvy endpoint.

    Features:
    - Persistent session
    - Bearer auth and default headers
    - Per-request timeout from the config
    - Status code / transport failure -> typed error
    - Safe JSON parsing
    """

    def __init__(self, config: ClientConfig) -> None:
        self.config = config
        self.base_url = config.base_url
        self.timeout = config.timeout

        self.session = requests.Session()

        self.session.headers.update(
            {
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": config.user_agent,
            }
        )

        # Failed connections are retried for every method. Read errors are
        # re-raised as-is (a read timeout stays a timeout); statuses never retry.
        retry_strategy = Retry(
            total=config.max_retries,
            read=False,
            status=0,
            backoff_factor=0.5,
            respect_retry_after_header=False,
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    # ---------------------------------------------------
    # Core request method
    # ---------------------------------------------------
    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request and return the parsed JSON body.
        Raises the mapped error for anything but a 2xx JSON response.
        """

        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise RequestTimeout(
                f"Request timed out after {self.timeout}s calling {method} {url}"
            ) from e
        except requests.RequestException as e:
            raise NetworkError(f"Request failed calling {method} {url}: {e}") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)

        if not 200 <= response.status_code < 300:
            raise map_http_error(response.status_code, self._error_body(response))

        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                f"Invalid JSON returned from {url}", status_code=response.status_code
            ) from e

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, json: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", endpoint, json=json)

    def delete(self, endpoint: str, json: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("DELETE", endpoint, json=json)

    @staticmethod
    def _error_body(response: Any) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    # ---------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------
    def close(self) -> None:
        """Release pooled connections. Do not use the client afterwards."""
        self.session.close()

    def __enter__(self) -> "BaseAPIClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()
