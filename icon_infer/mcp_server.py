"""MCP server exposing icon and name inference tools."""

from __future__ import annotations

import logging
from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from .config import InferConfig
from .inferer import IconInferer
from .utils import infer_name as infer_app_name

logger = logging.getLogger("icon_infer.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="icon-infer")


def describe_icon(url: str, config: InferConfig | None = None) -> Dict[str, Any]:
    icon = IconInferer(config=config).infer(url)
    return {
        "source": icon.source,
        "name": icon.name,
        "extension": icon.extension,
        "width": icon.width,
        "height": icon.height,
    }


@mcp.tool()
def infer_icon(
    url: str,
) -> Dict[str, Any]:
    """Find the largest icon a web page advertises and describe it."""
    return describe_icon(url)


@mcp.tool()
def infer_name(
    url: str,
) -> str:
    """Derive a short application name from a URL's hostname."""
    return infer_app_name(url)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
