"""
Salida del crawler: al terminar la sesion se entregan dos dicts
    crawled: url -> links unicos de esa pagina
    failed:  url -> cantidad final de intentos
y el sink decide donde guardarlos. El default escribe dos JSON en una carpeta.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Protocol, Sequence, Union

from crawler.config import OUTPUT_DIR

logger = logging.getLogger(__name__)

CRAWLED_FILE = "crawled_data.json"
FAILED_FILE = "failed_urls.json"


class ResultSink(Protocol):
    def write(self, crawled: Mapping[str, Sequence[str]], failed: Mapping[str, int]) -> None:
        ...


class JsonFileSink:
    """Escribe output/crawled_data.json y output/failed_urls.json (crea la carpeta si falta)."""

    def __init__(self, output_dir: Union[str, Path] = OUTPUT_DIR) -> None:
        self.output_dir = Path(output_dir)

    @property
    def crawled_path(self) -> Path:
        return self.output_dir / CRAWLED_FILE

    @property
    def failed_path(self) -> Path:
        return self.output_dir / FAILED_FILE

    def write(self, crawled: Mapping[str, Sequence[str]], failed: Mapping[str, int]) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        crawled_plain: Dict[str, List[str]] = {u: list(links) for u, links in crawled.items()}
        self.crawled_path.write_text(json.dumps(crawled_plain, ensure_ascii=False, indent=2), encoding="utf-8")
        self.failed_path.write_text(json.dumps(dict(failed), ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Resultados en %s (%d paginas, %d fallidas)", self.output_dir, len(crawled_plain), len(failed))


class MemorySink:
    """Se queda con lo ultimo que le escribieron (API y tests)."""

    def __init__(self) -> None:
        self.crawled: Dict[str, List[str]] = {}
        self.failed: Dict[str, int] = {}
        self.writes = 0

    def write(self, crawled: Mapping[str, Sequence[str]], failed: Mapping[str, int]) -> None:
        self.crawled = {u: list(links) for u, links in crawled.items()}
        self.failed = dict(failed)
        self.writes += 1


__all__ = ["ResultSink", "JsonFileSink", "MemorySink", "CRAWLED_FILE", "FAILED_FILE"]
