#!/usr/bin/env python3
"""
Triflow smoke test MCP server.

Tools:
- triflow.smoketest: log in, create an opportunity, run the analysis and
  verify hypotheses are visible
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool

from triflow_smoke.core.config import SmokeConfig
from triflow_smoke.reporter.reporter import ContentPart
from triflow_smoke.server.registry import ToolRegistry, register_smoketest

SERVER_NAME = "triflow-smoke"

logger = logging.getLogger("triflow_smoke.server")


def create_server(registry: ToolRegistry) -> Server:
    """Build an MCP server whose tools are whatever ``registry`` holds."""
    app = Server(SERVER_NAME)

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        return [
            Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema())
            for spec in registry.specs()
        ]

    # Arguments are validated by the tool's pydantic model in registry.dispatch
    @app.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[ContentPart]:
        if not registry.has(name):
            raise ValueError(f"Unknown tool: {name}")
        return await registry.dispatch(name, arguments)

    return app


def configure_logging(config: SmokeConfig) -> None:
    # stdout carries the stdio protocol
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


def build_registry(config: SmokeConfig) -> ToolRegistry:
    registry = ToolRegistry()
    result = register_smoketest(registry, config)
    if not result.ok:
        logger.error("tool registration failed: %s", result.error)
    else:
        logger.info("tools registered: %s", ", ".join(registry.names()))
    return registry


async def main() -> None:
    """Run the MCP server over stdio."""
    config = SmokeConfig.from_env()
    configure_logging(config)
    app = create_server(build_registry(config))
    async with stdio_server() as (read_stream, write_stream):
        await app.run(
            read_stream,
            write_stream,
            app.create_initialization_options(),
        )


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
