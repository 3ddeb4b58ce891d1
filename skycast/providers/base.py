from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests
from requests import Response


class ProviderError(RuntimeError):
    """Base provider error."""


@dataclass
class RequestConfig:
    timeout: float = 10.0


class HttpProvider:
    """Base class that adds timeouts and error mapping for HTTP providers.

    Calls run on worker threads. An injected ``session`` is used for every
    call and must tolerate concurrent use; without one each call opens and
    closes its own :class:`requests.Session`.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session
        self._log = logging.getLogger(self.__class__.__name__)

    def _handle_response(self, response: Response) -> Response:
        if response.status_code >= 400:
            self._log.error("Provider returned %s: %s", response.status_code, response.text[:200])
            raise ProviderError(f"HTTP {response.status_code}")
        return response

    def _build_session(self) -> requests.Session:
        return requests.Session()

    def _request(self, method: str, url: str, **kwargs) -> Response:
        if self.session is not None:
            return self._send(self.session, method, url, **kwargs)
        with self._build_session() as session:
            return self._send(session, method, url, **kwargs)

    def _send(self, session: requests.Session, method: str, url: str, **kwargs) -> Response:
        try:
            response = session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise ProviderError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise ProviderError("request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> dict:
        try:
            data = response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise ProviderError("invalid json") from exc
        if not isinstance(data, dict):
            raise ProviderError("unexpected payload")
        return data

    def _get_json_sync(self, url: str, params: Mapping[str, Any]) -> dict:
        return self._json(self._request("GET", url, params=params))

    async def _get_json(self, url: str, params: Mapping[str, Any]) -> dict:
        # requests blocks; keep the event loop free while the call is in flight.
        return await asyncio.to_thread(self._get_json_sync, url, params)


__all__ = ["HttpProvider", "ProviderError", "RequestConfig"]
