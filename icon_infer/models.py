"""Data models used throughout the icon inference pipeline."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple, Optional

from PIL import Image


class Size(NamedTuple):
    """Pixel dimensions of a decoded image."""

    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @classmethod
    def parse(cls, value: str) -> "Size":
        """Parse dimensions written like ``64x64``."""
        parts = value.strip().lower().split("x")
        if len(parts) != 2:
            raise ValueError(f"invalid size: {value!r}")
        width, height = (int(part) for part in parts)
        if width < 0 or height < 0:
            raise ValueError(f"invalid size: {value!r}")
        return cls(width, height)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass
class CandidateLink:
    """Icon reference scraped from a page, before it is downloaded."""

    href: str
    resolved: Optional[str]
    position: int = 0
    declared_size: Optional[Size] = None


@dataclass(eq=False)
class Icon:
    """Decoded icon image along with where it came from.

    Icons order by pixel area. Two icons are equal when they share a name and
    dimensions, which makes them usable in a "seen" set.
    """

    source: str
    name: str
    extension: str
    image: Image.Image = field(repr=False)

    @property
    def dimensions(self) -> Size:
        width, height = self.image.size
        return Size(width, height)

    @property
    def width(self) -> int:
        return self.dimensions.width

    @property
    def height(self) -> int:
        return self.dimensions.height

    @property
    def area(self) -> int:
        return self.dimensions.area

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Icon):
            return NotImplemented
        return (self.name, self.dimensions) == (other.name, other.dimensions)

    def __hash__(self) -> int:
        return hash((self.name, self.dimensions))

    def __lt__(self, other: "Icon") -> bool:
        if not isinstance(other, Icon):
            return NotImplemented
        return self.area < other.area

    def __le__(self, other: "Icon") -> bool:
        if not isinstance(other, Icon):
            return NotImplemented
        return self.area <= other.area

    def __gt__(self, other: "Icon") -> bool:
        if not isinstance(other, Icon):
            return NotImplemented
        return self.area > other.area

    def __ge__(self, other: "Icon") -> bool:
        if not isinstance(other, Icon):
            return NotImplemented
        return self.area >= other.area

    def to_png(self) -> bytes:
        """Encode the pixel buffer as PNG."""
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()

    def save(self, path: Path) -> Path:
        """Write the icon to ``path`` as PNG and return the path."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_png())
        return path
