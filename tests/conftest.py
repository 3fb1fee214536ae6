"""Fixtures compartidas: config rapida y un sitio falso que reemplaza la red."""
from __future__ import annotations

import asyncio
from typing import Dict, List, Mapping, Optional, Union

import pytest

from crawler.config import CrawlConfig
from crawler.errors import FetchError
from crawler.fetcher import FetchResult

Response = Union[FetchResult, Exception]


def page(url: str, html: str, headers: Optional[Mapping[str, str]] = None) -> FetchResult:
    return FetchResult(url=url, status_code=200, text=html, headers=dict(headers or {}), content_type="text/html")


def links_html(*hrefs: str) -> str:
    return "<html><body>" + "".join(f'<a href="{h}">x</a>' for h in hrefs) + "</body></html>"


class FakeSite:
    """
    Fetch falso. Cada URL mapea a una respuesta o a una lista de respuestas que
    se consumen en orden (la ultima se repite). Una URL desconocida es un 404.
    """

    def __init__(self, responses: Dict[str, Union[Response, List[Response]]], latency_s: float = 0.0) -> None:
        self.responses = {u: (list(r) if isinstance(r, list) else [r]) for u, r in responses.items()}
        self.latency_s = latency_s
        self.calls: List[str] = []
        self.active = 0
        self.peak = 0

    async def __call__(self, url: str) -> FetchResult:
        self.calls.append(url)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(self.latency_s)
            queue = self.responses.get(url)
            if not queue:
                raise FetchError(url, "http_404", status_code=404, headers={})
            item = queue.pop(0) if len(queue) > 1 else queue[0]
            if isinstance(item, Exception):
                raise item
            return item
        finally:
            self.active -= 1


@pytest.fixture
def fast_config() -> CrawlConfig:
    return CrawlConfig(max_concurrency=5, max_retries=3, initial_delay_ms=0, backoff_base_ms=0)
