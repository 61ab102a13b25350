"""HTTP fetching used for both the page and every icon candidate."""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests

from .config import DEFAULT_USER_AGENT
from .errors import FetchError

logger = logging.getLogger("icon_infer")

CHUNK_SIZE = 64 * 1024
DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class Fetcher(ABC):
    """Anything that can download the bytes behind a URL."""

    @abstractmethod
    def fetch(
        self,
        url: str,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
    ) -> bytes:
        """Perform a single GET and return the body, raising ``FetchError``."""


class RequestsFetcher(Fetcher):
    """Fetcher backed by ``requests``.

    Configuration is fixed at construction. Every thread gets its own
    ``requests.Session`` so the instance can be shared across worker threads.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ) -> None:
        self._headers: Dict[str, str] = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,image/*;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._local = threading.local()

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self._headers)
            self._local.session = session
        return session

    def fetch(
        self,
        url: str,
        timeout: Optional[float] = None,
        max_bytes: Optional[int] = None,
    ) -> bytes:
        timeout = self.timeout if timeout is None else timeout
        max_bytes = self.max_bytes if max_bytes is None else max_bytes
        deadline = time.monotonic() + timeout
        try:
            resp = self._session().get(url, timeout=timeout, stream=True)
        except requests.RequestException as exc:
            raise FetchError(url, str(exc)) from exc
        with resp:
            try:
                resp.raise_for_status()
            except requests.HTTPError as exc:
                raise FetchError(url, f"HTTP {resp.status_code}") from exc
            chunks = []
            received = 0
            try:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    received += len(chunk)
                    if received > max_bytes:
                        raise FetchError(url, f"response larger than {max_bytes} bytes")
                    if time.monotonic() > deadline:
                        raise FetchError(url, f"deadline of {timeout:.1f}s exceeded")
                    chunks.append(chunk)
            except requests.RequestException as exc:
                raise FetchError(url, str(exc)) from exc
        logger.debug("Fetched %s (%d bytes)", url, received)
        return b"".join(chunks)
