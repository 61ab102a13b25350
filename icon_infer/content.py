"""Icon link extraction and URL resolution for fetched pages."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple, Union
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from .models import CandidateLink, Size

logger = logging.getLogger("icon_infer")


def _rel_value(rel: object) -> str:
    # bs4 exposes rel as a list because it is a multi-valued attribute.
    if isinstance(rel, (list, tuple)):
        return " ".join(rel)
    return str(rel)


def parse_sizes(value: Optional[str]) -> Optional[Size]:
    """Largest entry of a ``sizes`` attribute such as ``16x16 32x32``; ``any`` is ignored."""
    best: Optional[Size] = None
    for token in (value or "").split():
        try:
            size = Size.parse(token)
        except ValueError:
            continue
        if best is None or size.area > best.area:
            best = size
    return best


def _iter_icon_links(
    html: Union[str, bytes],
    diagnostics: logging.Logger,
) -> Iterator[Tuple[str, Optional[Size]]]:
    # Bytes let BeautifulSoup honour the charset the page declares.
    soup = BeautifulSoup(html, "html.parser")
    for link in soup.find_all("link"):
        rel = link.get("rel")
        href = (link.get("href") or "").strip()
        if not rel:
            diagnostics.debug("Skipping link without rel attribute: %s", link)
            continue
        if not href:
            diagnostics.debug("Skipping link without href attribute: %s", link)
            continue
        if "icon" not in _rel_value(rel).lower():
            continue
        yield href, parse_sizes(link.get("sizes"))


def extract_icon_links(
    html: Union[str, bytes],
    diagnostics: Optional[logging.Logger] = None,
) -> List[str]:
    """Return the href of every ``<link>`` that advertises an icon, in document order."""
    return [href for href, _ in _iter_icon_links(html, diagnostics or logger)]


def resolve_href(
    href: str,
    base: str,
    diagnostics: Optional[logging.Logger] = None,
) -> Optional[str]:
    """Make ``href`` absolute against ``base``; ``None`` when that is not possible."""
    diagnostics = diagnostics or logger
    try:
        if urlparse(href).scheme:
            return href
        resolved = urljoin(base, href)
        parsed = urlparse(resolved)
    except ValueError as exc:
        diagnostics.debug("Cannot resolve %s against %s: %s", href, base, exc)
        return None
    if not parsed.scheme or not parsed.netloc:
        diagnostics.debug("Cannot resolve %s against %s: no absolute base", href, base)
        return None
    return resolved


def collect_candidates(
    html: Union[str, bytes],
    base: str,
    diagnostics: Optional[logging.Logger] = None,
) -> List[CandidateLink]:
    """Extract icon links from ``html`` and keep the ones that resolve."""
    diagnostics = diagnostics or logger
    candidates: List[CandidateLink] = []
    for position, (href, declared) in enumerate(_iter_icon_links(html, diagnostics)):
        resolved = resolve_href(href, base, diagnostics)
        if resolved is None:
            continue
        candidates.append(
            CandidateLink(href=href, resolved=resolved, position=position, declared_size=declared)
        )
    return candidates


def favicon_fallback(url: str) -> Optional[CandidateLink]:
    """Conventional ``/favicon.ico`` candidate for the host of ``url``."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return None
    resolved = f"{parsed.scheme}://{parsed.netloc}/favicon.ico"
    return CandidateLink(href="/favicon.ico", resolved=resolved, position=0)
