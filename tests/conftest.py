"""Pytest fixtures and config."""

import io
import threading
import time

import pytest
from PIL import Image

from icon_infer.errors import FetchError
from icon_infer.fetcher import Fetcher


def make_png(width, height, color=(200, 30, 30, 255)):
    buffer = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_ico(sizes):
    buffer = io.BytesIO()
    largest = max(sizes)
    Image.new("RGBA", largest, (0, 0, 255, 255)).save(buffer, format="ICO", sizes=sizes)
    return buffer.getvalue()


class FakeFetcher(Fetcher):
    """Deterministic fetcher serving canned responses.

    Values may be bytes, an exception instance to raise, or a
    ``(delay_seconds, bytes)`` tuple.
    """

    def __init__(self, responses):
        self.responses = dict(responses)
        self.calls = []
        self._lock = threading.Lock()

    def fetch(self, url, timeout=None, max_bytes=None):
        with self._lock:
            self.calls.append(url)
        if url not in self.responses:
            raise FetchError(url, "connection refused")
        value = self.responses[url]
        if isinstance(value, tuple):
            delay, value = value
            time.sleep(delay)
        if isinstance(value, BaseException):
            raise value
        return value


@pytest.fixture
def png_16():
    return make_png(16, 16)


@pytest.fixture
def png_64():
    return make_png(64, 64)


@pytest.fixture
def fake_fetcher_factory():
    return FakeFetcher
