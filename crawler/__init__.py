"""
Crawler de un solo dominio: arranca de una semilla, baja todas las paginas
alcanzables del mismo hostname y guarda los links de cada una.
"""
from crawler.config import CrawlConfig
from crawler.errors import ConstructionError, CrawlerError, FetchError, InvalidConfiguration, InvalidURL
from crawler.scheduler import Scheduler, crawl
from crawler.session import CrawlSession

__version__ = "0.1.0"

__all__ = [
    "CrawlConfig",
    "CrawlSession",
    "Scheduler",
    "crawl",
    "CrawlerError",
    "ConstructionError",
    "InvalidConfiguration",
    "InvalidURL",
    "FetchError",
]
