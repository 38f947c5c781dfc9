"""Retrying JSON-over-HTTP client shared by the maps and parking-data adapters."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import httpx

from ..config import settings
from ..errors import CollaboratorError

logger = logging.getLogger(__name__)


class JsonHttpClient:
    """GET-and-decode with retries on timeouts, network errors and 5xx/429 responses.

    A fresh ``httpx.Client`` is opened per request so instances can be shared
    across evaluation threads.
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.collaborator_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.collaborator_backoff_seconds
        )
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self.transport,
        )

    def get_json(self, url: str, params: Mapping[str, Any]) -> Any:
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=dict(params))
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    if status_code < 500 and status_code != 429:
                        raise CollaboratorError(f"Request to {url} rejected with HTTP {status_code}.") from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise CollaboratorError(
                            f"Request to {url} failed with HTTP {status_code} after {self.max_retries} retries."
                        ) from e
                    time.sleep(self.backoff_seconds * attempt)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Request to {url} failed after {self.max_retries} retries: {e}")
                        raise CollaboratorError(f"Service at {url} is not reachable: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"Request to {url} failed, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}"
                    )
                    time.sleep(wait_time)
                except httpx.HTTPError as e:
                    logger.warning(f"Request to {url} failed: {type(e).__name__}: {e}")
                    raise CollaboratorError(f"Request to {url} failed: {e}") from e
                except ValueError as e:
                    raise CollaboratorError(f"Response from {url} is not valid JSON.") from e
        finally:
            client.close()
