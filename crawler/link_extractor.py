# crawler/link_extractor.py
"""
Saca los links de una pagina: junta los href de <a> en orden de aparicion y los
resuelve contra la URL de la propia pagina (NO contra la semilla).

- Un href vacio o que no se puede resolver se descarta solo a el, el resto sigue.
- La lista que devuelve extract_links NO esta deduplicada; el que llama decide.
"""
from __future__ import annotations

import logging
from html.parser import HTMLParser
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

WEB_SCHEMES = ("http", "https")


# ──────────────────────────────────────────────────────────────────────────────
# Coleccionista simple de <a href="..."> usando la librería estándar
# ──────────────────────────────────────────────────────────────────────────────
class _HrefCollector(HTMLParser):
    """
    recorre el HTML y se guarda TODOS los valores de href que encuentre en
    etiquetas <a>, incluso los vacios. No decide nada; solo junta los textos crudos.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.hrefs: List[str] = []

    def handle_starttag(self, tag: str, attrs) -> None:
        if tag.lower() != "a":
            return
        for (k, v) in attrs:
            if k.lower() == "href":
                # <a href> sin valor llega como None
                self.hrefs.append(v or "")
                break


def _has_bad_chars(s: str) -> bool:
    return any(ch.isspace() or ord(ch) < 0x20 for ch in s)


# ──────────────────────────────────────────────────────────────────────────────
# Resolucion de un href
# ──────────────────────────────────────────────────────────────────────────────
def resolve_href(href: str, base_url: str) -> Optional[str]:
    """
    Convierte un href (relativo o absoluto) en URL absoluta usando base_url.
    Devuelve None si el href esta vacio o no se puede resolver.

    Para http/https normaliza: scheme y host en minuscula, path vacio -> "/",
    sin #fragment. Ej: "http://valid-link.com" -> "http://valid-link.com/".
    """
    s = (href or "").strip()
    if not s:
        return None

    try:
        abs_url = urljoin(base_url, s)
        parts = urlsplit(abs_url)
        parts.port  # un puerto no numerico levanta ValueError recien aca
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    if not scheme:
        return None

    if scheme not in WEB_SCHEMES:
        # mailto:, tel:, etc. son URLs absolutas validas; nunca van a matchear el dominio
        return abs_url

    if not parts.hostname or _has_bad_chars(parts.netloc):
        return None

    path = parts.path or "/"
    return urlunsplit((scheme, parts.netloc.lower(), path, parts.query, ""))


# ──────────────────────────────────────────────────────────────────────────────
# API principal
# ──────────────────────────────────────────────────────────────────────────────
def collect_links(html: str, base_url: str) -> Tuple[List[str], List[str]]:
    """
    Devuelve (links, skipped):
      - links: URLs absolutas en orden de documento (con repetidos).
      - skipped: hrefs crudos que se descartaron, para diagnostico.
    """
    parser = _HrefCollector()
    parser.feed(html or "")
    parser.close()

    links: List[str] = []
    skipped: List[str] = []
    for href in parser.hrefs:
        resolved = resolve_href(href, base_url)
        if resolved is None:
            skipped.append(href)
            continue
        links.append(resolved)
    return links, skipped


def extract_links(html: str, base_url: str) -> List[str]:
    """Links absolutos de la pagina, en orden y sin deduplicar."""
    links, skipped = collect_links(html, base_url)
    for href in skipped:
        logger.debug("Link invalido descartado en %s: %r", base_url, href)
    if skipped:
        logger.info("%s: %d links validos, %d descartados", base_url, len(links), len(skipped))
    return links


def unique_links(links: Iterable[str]) -> List[str]:
    """Saca repetidos manteniendo el orden de primera aparicion."""
    seen: set[str] = set()
    out: List[str] = []
    for u in links:
        if u in seen:
            continue
        seen.add(u)
        out.append(u)
    return out


__all__ = ["resolve_href", "collect_links", "extract_links", "unique_links"]
