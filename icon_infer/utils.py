"""Utility helpers for string normalization and name inference."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from .errors import InferNameError

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "icon") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def infer_name(url: str) -> str:
    """Derive a short application name from the hostname of ``url``.

    ``soundcloud.com`` gives ``soundcloud`` and ``www.example.com`` gives
    ``example``. Hostnames with any other number of dots are rejected.
    """
    host = urlparse(url).hostname
    if not host:
        raise InferNameError(url, "url does not include hostname")
    labels = host.split(".")
    if len(labels) == 2:
        return labels[0]
    if len(labels) == 3:
        return labels[1]
    raise InferNameError(url, "url contains an uncommon hostname format")
