from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from crawler.config import CrawlConfig
from crawler.errors import ConstructionError
from crawler.fetcher import FetchFn
from crawler.scheduler import crawl

logger = logging.getLogger(__name__)

router = APIRouter()


# ===== Schemas =====
class CrawlRequest(BaseModel):
    seed_url: str = Field(min_length=1)
    max_concurrency: Optional[int] = Field(default=None, ge=1)
    max_retries: Optional[int] = Field(default=None, ge=0)
    initial_delay_ms: Optional[float] = Field(default=None, ge=0)


class CrawlResponse(BaseModel):
    seed_url: str
    domain: str
    pages: int
    failures: int
    crawled: Dict[str, List[str]]
    failed: Dict[str, int]


def get_fetch_fn() -> Optional[FetchFn]:
    """None = el crawler abre su propio cliente httpx. Los tests lo pisan con dependency_overrides."""
    return None


def _config_from(req: CrawlRequest) -> CrawlConfig:
    base = CrawlConfig.from_env()
    return CrawlConfig(
        max_concurrency=req.max_concurrency if req.max_concurrency is not None else base.max_concurrency,
        max_retries=req.max_retries if req.max_retries is not None else base.max_retries,
        initial_delay_ms=req.initial_delay_ms if req.initial_delay_ms is not None else base.initial_delay_ms,
        timeout_s=base.timeout_s,
        backoff_base_ms=base.backoff_base_ms,
        backoff_max_ms=base.backoff_max_ms,
        jitter_factor=base.jitter_factor,
    )


# corre la sesion completa y devuelve lo mismo que iria a los JSON
@router.post("/crawl", response_model=CrawlResponse)
async def run_crawl(payload: CrawlRequest, fetch_fn: Optional[FetchFn] = Depends(get_fetch_fn)):
    try:
        session = await crawl(payload.seed_url, _config_from(payload), fetch_fn=fetch_fn)
    except ConstructionError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return CrawlResponse(
        seed_url=session.seed_url,
        domain=session.domain,
        pages=len(session.crawled),
        failures=len(session.failed),
        crawled=session.crawled,
        failed=session.failed,
    )
