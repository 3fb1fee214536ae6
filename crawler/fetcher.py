"""
Descarga de paginas con httpx (async).

fetch(url) -> FetchResult si el server respondio 2xx.
Cualquier otra cosa (4xx/5xx, timeout, error de red) termina en FetchError; si
hubo respuesta, el error trae los headers para que el RateController los lea.

Siempre hay timeout: una request colgada ocuparia un slot de concurrencia para siempre.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional

import httpx

from crawler.config import TIMEOUT_S, USER_AGENT
from crawler.errors import FetchError

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    url: str
    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)
    content_type: str = ""

    @property
    def is_html(self) -> bool:
        # sin Content-Type asumimos HTML
        return not self.content_type or "html" in self.content_type


# firma de cualquier cosa que sepa descargar (el Fetcher o un fake en tests)
FetchFn = Callable[[str], Awaitable[FetchResult]]


class Fetcher:
    """
    Envuelve un httpx.AsyncClient. Usalo como context manager:

        async with Fetcher(timeout_s=10) as fetcher:
            res = await fetcher.fetch("https://example.com")

    Si le pasas un client propio (p.ej. con MockTransport) no lo cierra.
    """

    def __init__(
        self,
        *,
        timeout_s: float = TIMEOUT_S,
        user_agent: str = USER_AGENT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.timeout_s = timeout_s
        self.user_agent = user_agent
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "Fetcher":
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout_s,
                follow_redirects=True,
            )
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> FetchResult:
        if self._client is None:
            raise RuntimeError("Fetcher sin abrir: usalo con 'async with'")

        try:
            resp = await self._client.get(url, timeout=self.timeout_s)
        except httpx.TimeoutException as e:
            raise FetchError(url, f"timeout:{type(e).__name__}") from e
        except httpx.RequestError as e:
            raise FetchError(url, f"network:{type(e).__name__}") from e

        headers = dict(resp.headers.items())
        if not resp.is_success:
            raise FetchError(
                url,
                f"http_{resp.status_code}",
                status_code=resp.status_code,
                headers=headers,
            )

        return FetchResult(
            url=url,
            status_code=resp.status_code,
            text=resp.text,
            headers=headers,
            content_type=resp.headers.get("Content-Type", "").lower(),
        )

    __call__ = fetch


__all__ = ["Fetcher", "FetchResult", "FetchFn"]
