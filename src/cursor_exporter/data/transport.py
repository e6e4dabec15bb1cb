"""Authenticated JSON transport shared by both API variants."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import httpx
from result import Err, Ok, Result

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class CursorTransport:
    """Builds bearer-authenticated sessions against the Admin API.

    Every logical client call opens its own session, so nothing is shared
    between concurrent scrapes.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._api_token = api_token
        self.timeout = timeout
        self._transport = transport

    @contextmanager
    def session(self) -> Iterator[ApiSession]:
        """Open one HTTP connection scope for a logical call."""
        with httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self._api_token}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=self._transport,
        ) as http:
            yield ApiSession(http)


class ApiSession:
    """Issues requests on one connection and decodes JSON bodies."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Result[Any, str]:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, body: dict[str, Any]) -> Result[Any, str]:
        return self.request("POST", endpoint, body=body)

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Result[Any, str]:
        """Issue one request and return the decoded JSON body.

        Returns:
            Ok with the parsed JSON, or Err describing a transport failure,
            a non-2xx status (with the response body), or an undecodable body.
        """
        logger.debug("Making API request: %s %s", method, endpoint)
        try:
            response = self._http.request(method, endpoint, params=params, json=body)
        except httpx.HTTPError as exc:
            return Err(f"failed to make request: {exc}")

        if not response.is_success:
            return Err(f"API request failed with status {response.status_code}: {response.text}")

        try:
            return Ok(response.json())
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            return Err(f"failed to decode response body: {exc}")
