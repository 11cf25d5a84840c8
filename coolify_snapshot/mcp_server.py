"""MCP server exposing the Coolify snapshot as a tool."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import SnapshotConfig
from .pipeline import run_snapshot
from .summary import summarize

logger = logging.getLogger("coolify_snapshot.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="coolify-snapshot")


@mcp.tool()
async def snapshot(include_summary: bool = True) -> str:
    """Log into Coolify with the configured credentials and return the full snapshot as JSON."""

    with tempfile.TemporaryDirectory(prefix="coolify-snapshot-") as tmp_dir:
        config = SnapshotConfig.from_env(output_root=Path(tmp_dir))
        result = await run_snapshot(config, save=False)
    payload = result.to_dict()
    if include_summary:
        payload["summary"] = summarize(result).to_dict()
    return json.dumps(payload, indent=2, ensure_ascii=False)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
