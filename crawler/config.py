"""
Config del crawler.

Todo sale del entorno (o del .env si existe) con un default razonable.
CrawlConfig junta esos valores en un objeto validado que recibe la sesion.

Variables:
    CRAWLER_MAX_CONCURRENCY   descargas en vuelo como maximo (5)
    CRAWLER_MAX_RETRIES       intentos fallidos antes de darla por perdida (3)
    CRAWLER_INITIAL_DELAY_MS  delay inicial entre despachos, en ms (100)
    CRAWLER_TIMEOUT_S         timeout de cada GET, en segundos (15)
    CRAWLER_BACKOFF_BASE_MS   primer escalon del backoff exponencial (100)
    CRAWLER_BACKOFF_MAX_MS    techo del backoff (30000)
    CRAWLER_JITTER_FACTOR     variacion aleatoria del backoff, 0..1 (0)
    CRAWLER_OUTPUT_DIR        carpeta donde se escriben los JSON (output)
    CRAWLER_USER_AGENT        User-Agent de las requests
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from crawler.errors import InvalidConfiguration

load_dotenv()

# -------- Config por entorno --------
MAX_CONCURRENCY = int(os.getenv("CRAWLER_MAX_CONCURRENCY", "5"))
MAX_RETRIES = int(os.getenv("CRAWLER_MAX_RETRIES", "3"))
INITIAL_DELAY_MS = float(os.getenv("CRAWLER_INITIAL_DELAY_MS", "100"))
TIMEOUT_S = float(os.getenv("CRAWLER_TIMEOUT_S", "15.0"))
BACKOFF_BASE_MS = float(os.getenv("CRAWLER_BACKOFF_BASE_MS", "100"))
BACKOFF_MAX_MS = float(os.getenv("CRAWLER_BACKOFF_MAX_MS", "30000"))
JITTER_FACTOR = float(os.getenv("CRAWLER_JITTER_FACTOR", "0.0"))
OUTPUT_DIR = os.getenv("CRAWLER_OUTPUT_DIR", "output")
USER_AGENT = os.getenv("CRAWLER_USER_AGENT", "site-crawler/0.1")

# pisos del RateController
MIN_DELAY_MS = 100.0
BACKOFF_FLOOR_MS = 1000.0


@dataclass(frozen=True)
class CrawlConfig:
    max_concurrency: int = MAX_CONCURRENCY
    max_retries: int = MAX_RETRIES
    initial_delay_ms: float = INITIAL_DELAY_MS
    timeout_s: float = TIMEOUT_S
    backoff_base_ms: float = BACKOFF_BASE_MS
    backoff_max_ms: float = BACKOFF_MAX_MS
    jitter_factor: float = JITTER_FACTOR

    def __post_init__(self) -> None:
        # bool es subclase de int, no lo queremos como numero
        if isinstance(self.max_concurrency, bool) or not isinstance(self.max_concurrency, int) or self.max_concurrency < 1:
            raise InvalidConfiguration(f"max_concurrency debe ser un entero positivo (vino {self.max_concurrency!r})")
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int) or self.max_retries < 0:
            raise InvalidConfiguration(f"max_retries debe ser un entero >= 0 (vino {self.max_retries!r})")
        if self.initial_delay_ms < 0:
            raise InvalidConfiguration("initial_delay_ms no puede ser negativo")
        if self.timeout_s <= 0:
            raise InvalidConfiguration("timeout_s debe ser > 0")
        if self.backoff_base_ms < 0 or self.backoff_max_ms < 0:
            raise InvalidConfiguration("el backoff no puede ser negativo")
        if not 0.0 <= self.jitter_factor <= 1.0:
            raise InvalidConfiguration("jitter_factor tiene que estar entre 0 y 1")

    @classmethod
    def from_env(cls) -> "CrawlConfig":
        """Relee el entorno (util si alguien cambio variables despues del import)."""
        return cls(
            max_concurrency=int(os.getenv("CRAWLER_MAX_CONCURRENCY", str(MAX_CONCURRENCY))),
            max_retries=int(os.getenv("CRAWLER_MAX_RETRIES", str(MAX_RETRIES))),
            initial_delay_ms=float(os.getenv("CRAWLER_INITIAL_DELAY_MS", str(INITIAL_DELAY_MS))),
            timeout_s=float(os.getenv("CRAWLER_TIMEOUT_S", str(TIMEOUT_S))),
            backoff_base_ms=float(os.getenv("CRAWLER_BACKOFF_BASE_MS", str(BACKOFF_BASE_MS))),
            backoff_max_ms=float(os.getenv("CRAWLER_BACKOFF_MAX_MS", str(BACKOFF_MAX_MS))),
            jitter_factor=float(os.getenv("CRAWLER_JITTER_FACTOR", str(JITTER_FACTOR))),
        )


__all__ = [
    "CrawlConfig",
    "MIN_DELAY_MS",
    "BACKOFF_FLOOR_MS",
    "OUTPUT_DIR",
    "USER_AGENT",
    "TIMEOUT_S",
]
