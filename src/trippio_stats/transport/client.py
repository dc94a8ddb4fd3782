"""Remote client that resolves paths against the storefront API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from trippio_stats.domain.exceptions import (
    ProbeShapeError,
    ProbeStatusError,
    ProbeTimeoutError,
    ProbeTransportError,
)
from trippio_stats.domain.interfaces import IRemoteClient, ITokenProvider


DEFAULT_BASE_URL = "https://trippiowebapp.azurewebsites.net"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings shared by every probe."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must be provided")
        if self.timeout <= 0:
            raise ValueError("timeout must be greater than zero")


class StaticTokenProvider(ITokenProvider):
    """Token provider backed by a fixed value (or none at all)."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    def access_token(self) -> Optional[str]:
        return self._token


class ApiClient(IRemoteClient):
    """Async JSON client with bearer-token attachment and per-request timeout."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        config: ClientConfig,
        *,
        token_provider: Optional[ITokenProvider] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self._http = http_client
        self._tokens = token_provider or StaticTokenProvider()
        self._base_url = config.base_url.rstrip("/")
        self.logger = logger or logging.getLogger(
            f"{__name__}.{self.__class__.__name__}"
        )

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def get_json(
        self, path: str, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        url = self.url_for(path)
        self.logger.debug(
            "api_request", extra={"url": url, "params": dict(params or {})}
        )
        try:
            http_response = await self._http.get(
                url,
                params=params,
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        except httpx.TimeoutException as exc:
            raise ProbeTimeoutError(
                context={"url": url, "timeout": self.config.timeout}
            ) from exc
        except httpx.HTTPError as exc:
            raise ProbeTransportError(
                str(exc) or None, context={"url": url}
            ) from exc

        return self._map_response(url, http_response)

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._tokens.access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _map_response(self, url: str, http_response: httpx.Response) -> Any:
        status = http_response.status_code
        self.logger.debug("api_response", extra={"url": url, "status_code": status})
        if not 200 <= status < 300:
            raise ProbeStatusError(
                f"GET {url} returned {status}",
                context={"status_code": status, "url": url},
            )
        try:
            return http_response.json()
        except ValueError as exc:
            raise ProbeShapeError(
                "Response body is not valid JSON", context={"url": url}
            ) from exc
