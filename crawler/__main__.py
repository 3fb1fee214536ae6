"""
Corre el crawler desde la terminal.

Uso:
    python -m crawler https://example.com \
        --max-concurrency 5 \
        --max-retries 3 \
        --output-dir output

Deja output/crawled_data.json y output/failed_urls.json.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from crawler.config import OUTPUT_DIR, CrawlConfig
from crawler.errors import ConstructionError
from crawler.scheduler import crawl
from crawler.storage import JsonFileSink

LOG = logging.getLogger("crawler")


def build_parser() -> argparse.ArgumentParser:
    defaults = CrawlConfig()
    p = argparse.ArgumentParser(prog="site-crawler", description="Crawler de un solo dominio")
    p.add_argument("seed_url", nargs="?", default=None, help="URL semilla (ej: https://example.com)")
    p.add_argument("--max-concurrency", type=int, default=defaults.max_concurrency)
    p.add_argument("--max-retries", type=int, default=defaults.max_retries)
    p.add_argument("--initial-delay-ms", type=float, default=defaults.initial_delay_ms)
    p.add_argument("--timeout", type=float, default=defaults.timeout_s, help="timeout por request, en segundos")
    p.add_argument("--output-dir", default=OUTPUT_DIR)
    p.add_argument("--log-level", default="INFO")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = CrawlConfig(
            max_concurrency=args.max_concurrency,
            max_retries=args.max_retries,
            initial_delay_ms=args.initial_delay_ms,
            timeout_s=args.timeout,
        )
        sink = JsonFileSink(args.output_dir)
        asyncio.run(crawl(args.seed_url, config, sink=sink))
    except ConstructionError as e:
        LOG.error("%s", e)
        print("Uso: python -m crawler <seed_url>", file=sys.stderr)
        return 2

    print(f"Revisa la carpeta {args.output_dir} para ver los resultados")
    return 0


if __name__ == "__main__":
    sys.exit(main())
