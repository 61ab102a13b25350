"""Error types raised while inferring icons and names."""

from __future__ import annotations


class IconInferError(Exception):
    """Base class for every error raised by this package."""


class FetchError(IconInferError):
    """A single GET request failed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"fetching {url}: {reason}")
        self.url = url
        self.reason = reason


class DecodeError(IconInferError):
    """A payload could not be decoded into a supported raster image."""


class InferenceError(IconInferError):
    """Call-level failure of an inference run."""


class FetchPageError(InferenceError):
    """The page itself could not be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"fetching page {url}: {reason}")
        self.url = url


class NoCandidatesError(InferenceError):
    """The page did not advertise any icon links."""

    def __init__(self, url: str) -> None:
        super().__init__(f"no icon links found on {url}")
        self.url = url


class NoIconsDecodedError(InferenceError):
    """Every candidate failed to download or decode."""

    def __init__(self, url: str, attempted: int) -> None:
        super().__init__(
            f"none of the {attempted} icon candidate(s) on {url} could be decoded"
        )
        self.url = url
        self.attempted = attempted


class InferNameError(IconInferError, ValueError):
    """An application name could not be derived from a URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"inferring name for {url}: {reason}")
        self.url = url
        self.reason = reason
