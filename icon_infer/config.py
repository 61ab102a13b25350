"""Configuration objects and constants for icon inference."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/118.0.0.0 Safari/537.36"
)


@dataclass
class InferConfig:
    """Settings that bound the page fetch and the concurrent icon downloads."""

    candidate_timeout: float = 10.0
    page_timeout: float = 15.0
    max_workers: int = 8
    max_icon_bytes: int = 10 * 1024 * 1024
    max_page_bytes: int = 5 * 1024 * 1024
    user_agent: str = DEFAULT_USER_AGENT
    fallback_favicon: bool = False
