"""
Frontera del crawler: cola FIFO de URLs pendientes + el "portero" de visitadas.

Reglas:
- enqueue no deduplica: la misma URL puede estar varias veces en la cola.
- una URL entra al set de visitadas UNA sola vez, justo antes de su primer despacho
  (no cuando se descubre).
- accept_next saca la cabeza; si ya fue visitada devuelve None y no busca la
  siguiente, el scheduler vuelve a pedir en la proxima vuelta.

Reintentos: una URL que fallo ya esta visitada, asi que si la volvemos a meter
por la cola normal el portero la tiraria. Por eso requeue_for_retry la marca
RETRY_PENDING y accept_next la deja pasar (una vez) sin tocar visitadas.
"""
from __future__ import annotations

import enum
from collections import deque
from typing import Deque, Dict, FrozenSet, Optional


class UrlStatus(enum.Enum):
    IN_FLIGHT = "in_flight"
    RETRY_PENDING = "retry_pending"
    DONE = "done"


class Frontier:
    def __init__(self) -> None:
        self._queue: Deque[str] = deque()
        # las claves de este dict son justamente el set de visitadas
        self._status: Dict[str, UrlStatus] = {}

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    def __contains__(self, url: object) -> bool:
        return url in self._queue

    @property
    def visited(self) -> FrozenSet[str]:
        return frozenset(self._status)

    def pending(self) -> list[str]:
        """Copia de la cola en orden (para tests / diagnostico)."""
        return list(self._queue)

    def status(self, url: str) -> Optional[UrlStatus]:
        return self._status.get(url)

    def is_visited(self, url: str) -> bool:
        return url in self._status

    def is_retry_pending(self, url: str) -> bool:
        return self._status.get(url) is UrlStatus.RETRY_PENDING

    # ──────────────────────────────────────────────────────────────────────
    # cola
    # ──────────────────────────────────────────────────────────────────────
    def enqueue(self, url: str) -> None:
        self._queue.append(url)

    def accept_next(self) -> Optional[str]:
        """
        Saca la cabeza de la cola. Devuelve la URL si hay que despacharla
        (nunca visitada, o esperando reintento) y None si es un repetido viejo.
        Con la cola vacia levanta IndexError.
        """
        url = self._queue.popleft()
        status = self._status.get(url)
        if status is None or status is UrlStatus.RETRY_PENDING:
            return url
        return None

    # ──────────────────────────────────────────────────────────────────────
    # transiciones de estado
    # ──────────────────────────────────────────────────────────────────────
    def mark_visited(self, url: str) -> None:
        """Primer despacho de la URL. Llamarlo dos veces es un bug del que llama."""
        if url in self._status:
            raise ValueError(f"URL ya visitada: {url}")
        self._status[url] = UrlStatus.IN_FLIGHT

    def requeue_for_retry(self, url: str) -> None:
        if url not in self._status:
            raise ValueError(f"No se puede reintentar una URL nunca despachada: {url}")
        self._status[url] = UrlStatus.RETRY_PENDING
        self._queue.append(url)

    def resume_retry(self, url: str) -> None:
        if self._status.get(url) is not UrlStatus.RETRY_PENDING:
            raise ValueError(f"La URL no esta esperando reintento: {url}")
        self._status[url] = UrlStatus.IN_FLIGHT

    def mark_done(self, url: str) -> None:
        if url not in self._status:
            raise ValueError(f"URL nunca despachada: {url}")
        self._status[url] = UrlStatus.DONE


__all__ = ["Frontier", "UrlStatus"]
