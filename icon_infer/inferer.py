"""High-level orchestration for discovering, downloading and ranking icons."""

from __future__ import annotations

import logging
import math
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Tuple

from .config import InferConfig
from .content import collect_candidates, favicon_fallback
from .errors import (
    DecodeError,
    FetchError,
    FetchPageError,
    NoCandidatesError,
    NoIconsDecodedError,
)
from .fetcher import Fetcher, RequestsFetcher
from .images import decode_icon
from .models import CandidateLink, Icon

logger = logging.getLogger("icon_infer")

POLL_INTERVAL = 0.05


def select_best(results: List[Tuple[CandidateLink, Icon]]) -> Optional[Icon]:
    """Pick the icon with the largest pixel area.

    Ties go to the candidate that appeared first in the document, so the
    outcome does not depend on which download finished first.
    """
    best: Optional[Tuple[CandidateLink, Icon]] = None
    for candidate, icon in results:
        if best is None:
            best = (candidate, icon)
            continue
        best_candidate, best_icon = best
        if icon > best_icon or (
            icon.area == best_icon.area and candidate.position < best_candidate.position
        ):
            best = (candidate, icon)
    return best[1] if best else None


class IconInferer:
    """Infers the best icon for a URL by downloading every advertised icon link."""

    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        config: Optional[InferConfig] = None,
        diagnostics: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config or InferConfig()
        self.fetcher = fetcher or RequestsFetcher(
            user_agent=self.config.user_agent,
            timeout=self.config.candidate_timeout,
            max_bytes=self.config.max_icon_bytes,
        )
        self.diagnostics = diagnostics or logger

    def scrape(self, url: str) -> List[CandidateLink]:
        """Fetch the page at ``url`` and return its resolvable icon links."""
        try:
            body = self.fetcher.fetch(
                url,
                timeout=self.config.page_timeout,
                max_bytes=self.config.max_page_bytes,
            )
        except FetchError as exc:
            raise FetchPageError(url, exc.reason) from exc
        candidates = collect_candidates(body, url, self.diagnostics)
        self.diagnostics.info("Found %d icon candidate(s) on %s", len(candidates), url)
        return candidates

    def _download(self, candidate: CandidateLink, started: Dict[int, float]) -> Optional[Icon]:
        started[candidate.position] = time.monotonic()
        url = candidate.resolved
        try:
            data = self.fetcher.fetch(
                url,
                timeout=self.config.candidate_timeout,
                max_bytes=self.config.max_icon_bytes,
            )
            icon = decode_icon(data, url)
        except (FetchError, DecodeError) as exc:
            self.diagnostics.debug("Discarding icon candidate %s: %s", url, exc)
            return None
        except Exception:  # pylint: disable=broad-except
            self.diagnostics.debug(
                "Unexpected error processing icon candidate %s", url, exc_info=True
            )
            return None
        if candidate.declared_size and candidate.declared_size != icon.dimensions:
            self.diagnostics.debug(
                "Icon %s declares %s but decodes to %s",
                url,
                candidate.declared_size,
                icon.dimensions,
            )
        return icon

    def download_all(self, candidates: List[CandidateLink]) -> List[Tuple[CandidateLink, Icon]]:
        """Download and decode every candidate concurrently.

        Waits for every task, except that a task running longer than
        ``candidate_timeout`` is abandoned and counts as no result.
        """
        if not candidates:
            return []
        results: List[Tuple[CandidateLink, Icon]] = []
        started: Dict[int, float] = {}
        workers = max(1, min(self.config.max_workers, len(candidates)))
        # Abandoned tasks keep their worker busy, so queued ones get a ceiling too.
        waves = math.ceil(len(candidates) / workers)
        drain_deadline = time.monotonic() + waves * self.config.candidate_timeout + POLL_INTERVAL
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="icon-infer")
        try:
            futures = {
                pool.submit(self._download, candidate, started): candidate
                for candidate in candidates
            }
            pending = set(futures)
            while pending:
                done, pending = wait(pending, timeout=POLL_INTERVAL, return_when=FIRST_COMPLETED)
                for future in done:
                    icon = future.result()
                    if icon is not None:
                        results.append((futures[future], icon))
                now = time.monotonic()
                for future in list(pending):
                    candidate = futures[future]
                    began = started.get(candidate.position)
                    expired = began is not None and now - began > self.config.candidate_timeout
                    if expired or now > drain_deadline:
                        self.diagnostics.debug(
                            "Discarding icon candidate %s: deadline of %.1fs exceeded",
                            candidate.resolved,
                            self.config.candidate_timeout,
                        )
                        pending.discard(future)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
        return results

    def infer(self, url: str) -> Icon:
        """Return the largest decodable icon advertised by the page at ``url``."""
        start = time.perf_counter()
        candidates = self.scrape(url)
        if not candidates and self.config.fallback_favicon:
            fallback = favicon_fallback(url)
            if fallback is not None:
                self.diagnostics.warning(
                    "No icon links on %s; falling back to %s", url, fallback.resolved
                )
                candidates = [fallback]
        if not candidates:
            raise NoCandidatesError(url)

        results = self.download_all(candidates)
        best = select_best(results)
        if best is None:
            raise NoIconsDecodedError(url, len(candidates))
        self.diagnostics.info(
            "Selected %s (%s, %s) from %d/%d decoded candidate(s) in %.2fs",
            best.source,
            best.extension,
            best.dimensions,
            len(results),
            len(candidates),
            time.perf_counter() - start,
        )
        return best


def infer_icon(url: str, config: Optional[InferConfig] = None) -> Icon:
    """Infer an icon for ``url`` using the default ``requests`` backed fetcher."""
    return IconInferer(config=config).infer(url)
