"""
Objetivo del archivo ->
- RateController: un unico delay compartido por toda la sesion que sube o baja
  segun lo que diga el server (x-ratelimit-remaining / retry-after). El scheduler
  lo usa como separacion minima entre despachos.
- RetryManager: cuenta intentos por URL y decide si se reintenta con PAUSAS
  CRECIENTES (backoff) o si la URL se da por perdida.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Dict, Mapping, Optional

from crawler.config import BACKOFF_FLOOR_MS, MIN_DELAY_MS, CrawlConfig
from crawler.frontier import Frontier

logger = logging.getLogger(__name__)

REMAINING_HEADER = "x-ratelimit-remaining"
RETRY_AFTER_HEADER = "retry-after"

# ──────────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────────


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Busca un header sin importar mayusculas (sirve para dict comun y para httpx.Headers)."""
    for k, v in headers.items():
        if k.lower() == name:
            return v
    return None


def _parse_int(raw: str) -> Optional[int]:
    try:
        return int(str(raw).strip())
    except ValueError:
        pass
    try:
        return int(float(str(raw).strip()))
    except ValueError:
        return None


def _backoff_delay_ms(attempt: int,
                      base_ms: float,
                      max_ms: float,
                      jitter_factor: float = 0.0,
                      ) -> float:
    """
    Cuanto dormir antes de reintentar: base * 2^attempt, con techo max_ms.
    Con base 100ms -> 200, 400, 800, ... para attempt 1, 2, 3.

    Jitter: multiplicamos por un factor entre (1 - j) y (1 + j) para que muchas
    URLs que fallaron juntas no reintenten todas al mismo tiempo.
    """
    ideal = min(base_ms * (2 ** attempt), max_ms)
    if jitter_factor <= 0:
        return ideal
    return ideal * random.uniform(1.0 - jitter_factor, 1.0 + jitter_factor)


# ──────────────────────────────────────────────────────────────────────────────
# RateController
# ──────────────────────────────────────────────────────────────────────────────


class RateController:
    """Duenio del delay compartido (en ms)."""

    def __init__(self, initial_delay_ms: float = MIN_DELAY_MS) -> None:
        self.delay_ms = float(initial_delay_ms)

    @property
    def delay_s(self) -> float:
        return self.delay_ms / 1000.0

    def adjust(self, headers: Optional[Mapping[str, str]]) -> float:
        """
        Ajusta el delay con los headers de una respuesta y devuelve el nuevo valor.

        1) x-ratelimit-remaining == 0 -> duplicamos, minimo 1000ms.
           x-ratelimit-remaining  > 0 -> dividimos por 2, minimo 100ms.
        2) retry-after (segundos) -> el delay pasa a ser al menos eso.
        Primero la cuota y despues retry-after.
        """
        if not headers:
            return self.delay_ms

        applied = False

        raw_remaining = _header(headers, REMAINING_HEADER)
        if raw_remaining is not None:
            remaining = _parse_int(raw_remaining)
            if remaining is None:
                logger.warning("Header %s ilegible: %r (se ignora)", REMAINING_HEADER, raw_remaining)
            elif remaining == 0:
                self.delay_ms = max(self.delay_ms * 2, BACKOFF_FLOOR_MS)
                logger.info("Rate limit agotado, frenamos: delay=%.0fms", self.delay_ms)
                applied = True
            else:
                self.delay_ms = max(self.delay_ms / 2, MIN_DELAY_MS)
                applied = True

        raw_retry_after = _header(headers, RETRY_AFTER_HEADER)
        if raw_retry_after is not None:
            seconds = _parse_int(raw_retry_after)
            if seconds is None:
                # puede venir como fecha HTTP, no la soportamos
                logger.warning("Header %s ilegible: %r (se ignora)", RETRY_AFTER_HEADER, raw_retry_after)
            else:
                logger.info("El server pidio retry-after de %d ms", seconds * 1000)
                self.delay_ms = max(self.delay_ms, seconds * 1000.0)
                applied = True

        if applied:
            self.delay_ms = max(self.delay_ms, MIN_DELAY_MS)
        return self.delay_ms


# ──────────────────────────────────────────────────────────────────────────────
# RetryManager
# ──────────────────────────────────────────────────────────────────────────────


class RetryManager:
    """
    Lleva la cuenta de intentos fallidos por URL (retry_counts) y escribe la URL
    en failed cuando llega a max_retries. max_retries = cantidad total de
    intentos fallidos antes de abandonarla.
    """

    def __init__(
        self,
        *,
        frontier: Frontier,
        rate: RateController,
        config: CrawlConfig,
        retry_counts: Optional[Dict[str, int]] = None,
        failed: Optional[Dict[str, int]] = None,
    ) -> None:
        self.frontier = frontier
        self.rate = rate
        self.config = config
        self.retry_counts: Dict[str, int] = retry_counts if retry_counts is not None else {}
        self.failed: Dict[str, int] = failed if failed is not None else {}

    def attempts(self, url: str) -> int:
        return self.retry_counts.get(url, 0)

    def _give_up(self, url: str, count: int) -> None:
        if url not in self.failed:
            logger.warning("Maximo de reintentos alcanzado para %s (%d)", url, count)
            self.failed[url] = count
        if self.frontier.is_visited(url):
            self.frontier.mark_done(url)

    async def handle_failure(self, url: str, headers: Optional[Mapping[str, str]] = None) -> bool:
        """
        Devuelve True si la URL quedo reencolada para otro intento y False si se
        abandono (queda en failed con su cuenta final).
        """
        max_retries = self.config.max_retries
        count = self.retry_counts.get(url, 0)

        if count >= max_retries:
            self._give_up(url, count)
            return False

        count += 1
        self.retry_counts[url] = count

        if count >= max_retries:
            self._give_up(url, count)
            return False

        delay_ms = _backoff_delay_ms(
            count,
            base_ms=self.config.backoff_base_ms,
            max_ms=self.config.backoff_max_ms,
            jitter_factor=self.config.jitter_factor,
        )
        logger.info("Reintentando %s (%d/%d) en %.0fms...", url, count, max_retries, delay_ms)
        await asyncio.sleep(delay_ms / 1000.0)

        if headers:
            self.rate.adjust(headers)

        if self.frontier.is_visited(url):
            self.frontier.requeue_for_retry(url)
        else:
            # nunca paso por el scheduler (llamada directa); entra como URL nueva
            self.frontier.enqueue(url)
        return True


__all__ = ["RateController", "RetryManager"]
