"""
Filtro de dominio: un link es "interno" si su hostname es EXACTAMENTE el de la
semilla. Subdominios y otros hosts son externos: se guardan en el registro de
la pagina pero nunca se agendan.
"""
from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import urlsplit


def host_of(url: str) -> Optional[str]:
    """Hostname en minuscula, o None si la URL no tiene / no se puede parsear."""
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def is_internal(url: str, domain: str) -> bool:
    host = host_of(url)
    return host is not None and host == domain.lower()


def internal_links(links: Iterable[str], domain: str) -> List[str]:
    """
    Se queda con los links internos respetando orden y repetidos
    (si la pagina repite un link, va repetido a la frontera).
    """
    return [u for u in links if is_internal(u, domain)]


__all__ = ["host_of", "is_internal", "internal_links"]
