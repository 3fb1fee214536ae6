"""
Errores del crawler.

- ConstructionError: fatal, se levanta ANTES de que exista la sesion (semilla faltante o rota).
- FetchError: recuperable, lo consume el RetryManager y nunca sale de la tarea de descarga.

Los links invalidos no usan excepciones: resolve_href devuelve None y listo.
"""
from __future__ import annotations

from typing import Mapping, Optional


class CrawlerError(Exception):
    """Base de todos los errores del paquete."""


class ConstructionError(CrawlerError, ValueError):
    """La sesion no se pudo construir."""


class InvalidConfiguration(ConstructionError):
    """Falta la semilla o algun parametro esta fuera de rango."""


class InvalidURL(ConstructionError):
    """La semilla no se puede partir en scheme + hostname."""


class FetchError(CrawlerError):
    """
    Fallo una descarga (error de red o status distinto de 2xx).
    Si el server llego a responder, trae sus headers para que el RateController
    pueda leer x-ratelimit-remaining / retry-after.
    """

    def __init__(
        self,
        url: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status_code = status_code
        self.headers = headers


__all__ = [
    "CrawlerError",
    "ConstructionError",
    "InvalidConfiguration",
    "InvalidURL",
    "FetchError",
]
