"""
orquestador del crawler completo.

Loop de despacho con techo de concurrencia:
- saca URLs de la frontera (FIFO) y lanza una tarea de descarga por cada una
  mientras haya slots libres (in_flight < max_concurrency);
- si la cabeza de la cola es un repetido viejo la tira y sigue, sin esperar;
- entre despacho y despacho respeta el delay del RateController (cortesia con el server);
- cuando no hay slots o la cola esta vacia pero hay trabajo en vuelo, se duerme
  hasta que una tarea termine (no hace polling);
- termina cuando la cola esta vacia, no hay descargas en vuelo y no queda
  ningun reintento esperando su backoff. Ahi entrega los resultados al sink.

Todo corre en un solo event loop: el estado compartido solo se toca entre awaits,
asi que no hacen falta locks.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Mapping, Optional, Set

from crawler.config import CrawlConfig
from crawler.errors import FetchError
from crawler.fetcher import Fetcher, FetchFn
from crawler.filters import internal_links
from crawler.link_extractor import extract_links, unique_links
from crawler.session import CrawlSession
from crawler.storage import ResultSink

logger = logging.getLogger(__name__)


class Scheduler:
    def __init__(self, session: CrawlSession, fetch_fn: FetchFn, *, sink: Optional[ResultSink] = None) -> None:
        self.session = session
        self.fetch_fn = fetch_fn
        self.sink = sink
        self.in_flight = 0
        self.peak_in_flight = 0
        self.dispatched = 0
        self._fetches: Set[asyncio.Task] = set()
        self._retrying: Set[asyncio.Task] = set()
        self._wake = asyncio.Event()
        self._last_dispatch: Optional[float] = None

    # ──────────────────────────────────────────────────────────────────────
    # loop principal
    # ──────────────────────────────────────────────────────────────────────
    def is_drained(self) -> bool:
        return not self.session.frontier and self.in_flight == 0 and not self._retrying

    async def run(self) -> CrawlSession:
        frontier = self.session.frontier
        limit = self.session.config.max_concurrency

        while not self.is_drained():
            if self.in_flight < limit and frontier:
                url = frontier.accept_next()
                if url is None:
                    continue
                await self._pace()
                self._dispatch(url)
                continue

            # sin slots o sin URLs: esperamos a que termine algo
            self._wake.clear()
            await self._wake.wait()

        logger.info(
            "Crawl completo: %d paginas, %d fallidas, %d despachos",
            len(self.session.crawled), len(self.session.failed), self.dispatched,
        )
        if self.sink is not None:
            self.sink.write(self.session.crawled, self.session.failed)
        return self.session

    async def _pace(self) -> None:
        """Separacion minima entre despachos = delay actual del RateController."""
        loop = asyncio.get_running_loop()
        if self._last_dispatch is not None:
            wait_s = self.session.rate.delay_s - (loop.time() - self._last_dispatch)
            if wait_s > 0:
                await asyncio.sleep(wait_s)
        self._last_dispatch = loop.time()

    def _dispatch(self, url: str) -> None:
        frontier = self.session.frontier
        if frontier.is_retry_pending(url):
            frontier.resume_retry(url)
        else:
            frontier.mark_visited(url)

        self.in_flight += 1
        self.dispatched += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        task = asyncio.create_task(self._run_fetch(url))
        self._fetches.add(task)
        task.add_done_callback(self._fetches.discard)

    async def _run_fetch(self, url: str) -> None:
        try:
            await self.fetch_and_process(url)
        finally:
            self.in_flight -= 1
            self._wake.set()

    # ──────────────────────────────────────────────────────────────────────
    # tarea de descarga
    # ──────────────────────────────────────────────────────────────────────
    async def fetch_and_process(self, url: str) -> None:
        """
        Descarga url (ya marcada como visitada), guarda sus links unicos,
        ajusta el rate y agenda los links del mismo dominio. Si falla, lo
        decide el RetryManager. Nunca levanta.
        """
        session = self.session
        try:
            logger.info("Visitando: %s", url)
            result = await self.fetch_fn(url)

            links = extract_links(result.text, url) if result.is_html else []
            session.record_page(url, unique_links(links))
            session.rate.adjust(result.headers)

            # van los links crudos: si la pagina repite uno, va repetido a la cola
            for link in internal_links(links, session.domain):
                if not session.frontier.is_visited(link):
                    session.frontier.enqueue(link)

            if session.frontier.is_visited(url):
                session.frontier.mark_done(url)
            logger.info("Listo: %s (%d links)", url, len(session.crawled.get(url, [])))
        except FetchError as e:
            logger.warning("Fallo la descarga de %s: %s ...reintentando", url, e)
            self._schedule_retry(url, e.headers)
        except Exception:
            logger.exception("Error inesperado procesando %s", url)
            self._schedule_retry(url, None)

    def _schedule_retry(self, url: str, headers: Optional[Mapping[str, str]]) -> None:
        # el backoff corre aparte para no ocupar un slot de descarga mientras duerme
        task = asyncio.create_task(self.session.retries.handle_failure(url, headers))
        self._retrying.add(task)
        task.add_done_callback(self._on_retry_done)

    def _on_retry_done(self, task: asyncio.Task) -> None:
        self._retrying.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Fallo manejando un reintento", exc_info=task.exception())
        self._wake.set()

    async def wait_retries(self) -> None:
        """Espera los backoffs pendientes (util cuando se usa fetch_and_process suelto)."""
        while self._retrying:
            await asyncio.gather(*list(self._retrying), return_exceptions=True)


async def crawl(
    seed_url: Optional[str],
    config: Optional[CrawlConfig] = None,
    *,
    sink: Optional[ResultSink] = None,
    fetch_fn: Optional[FetchFn] = None,
) -> CrawlSession:
    """
    Corre una sesion completa desde seed_url. Sin fetch_fn usa un Fetcher httpx
    con el timeout de la config.
    """
    session = CrawlSession.create(seed_url, config)
    if fetch_fn is not None:
        return await Scheduler(session, fetch_fn, sink=sink).run()

    async with Fetcher(timeout_s=session.config.timeout_s) as fetcher:
        return await Scheduler(session, fetcher.fetch, sink=sink).run()


__all__ = ["Scheduler", "crawl"]
