"""
Estado de UNA corrida del crawler, todo junto en un objeto (nada global):

    frontier      cola + visitadas
    retry_counts  url -> intentos fallidos
    rate          delay compartido (RateController)
    crawled       url -> links unicos de la pagina
    failed        url -> intentos finales de las que se abandonaron

La semilla se valida antes de crear cualquier estado: si falta o esta rota,
CrawlSession.create levanta y no queda nada a medio armar.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from crawler.config import CrawlConfig
from crawler.errors import InvalidConfiguration, InvalidURL
from crawler.frontier import Frontier
from crawler.rate_limit_backoff import RateController, RetryManager

logger = logging.getLogger(__name__)


def parse_seed(seed_url: Optional[str]) -> Tuple[str, str]:
    """
    Valida la semilla y devuelve (seed_url, dominio).
    - None / "" / solo espacios -> InvalidConfiguration
    - sin scheme o sin hostname (ej "invalid-url") -> InvalidURL
    """
    if seed_url is None or not str(seed_url).strip():
        raise InvalidConfiguration("Se requiere una URL semilla.")

    seed_url = str(seed_url).strip()
    try:
        parts = urlsplit(seed_url)
        host = parts.hostname
        parts.port
    except ValueError as e:
        raise InvalidURL(f"URL invalida: {seed_url}") from e

    if not parts.scheme or not host:
        raise InvalidURL(f"URL invalida: {seed_url}")
    return seed_url, host


@dataclass
class CrawlSession:
    seed_url: str
    domain: str
    config: CrawlConfig
    frontier: Frontier = field(default_factory=Frontier)
    retry_counts: Dict[str, int] = field(default_factory=dict)
    crawled: Dict[str, List[str]] = field(default_factory=dict)
    failed: Dict[str, int] = field(default_factory=dict)
    rate: RateController = field(init=False)
    retries: RetryManager = field(init=False)

    def __post_init__(self) -> None:
        self.rate = RateController(self.config.initial_delay_ms)
        self.retries = RetryManager(
            frontier=self.frontier,
            rate=self.rate,
            config=self.config,
            retry_counts=self.retry_counts,
            failed=self.failed,
        )

    @classmethod
    def create(cls, seed_url: Optional[str], config: Optional[CrawlConfig] = None) -> "CrawlSession":
        seed_url, domain = parse_seed(seed_url)
        session = cls(seed_url=seed_url, domain=domain, config=config or CrawlConfig())
        session.frontier.enqueue(seed_url)
        logger.info("Sesion nueva: semilla=%s dominio=%s", seed_url, domain)
        return session

    def record_page(self, url: str, links: List[str]) -> bool:
        """Escribe crawled[url] una sola vez; devuelve False si ya estaba."""
        if url in self.crawled:
            logger.warning("Pagina ya registrada, se ignora: %s", url)
            return False
        self.crawled[url] = links
        return True


__all__ = ["CrawlSession", "parse_seed"]
