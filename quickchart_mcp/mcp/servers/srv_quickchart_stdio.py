#!/usr/bin/env python3
"""QuickChart Server - MCP stdio implementation"""
import asyncio
import sys

from quickchart_mcp.config import Config
from quickchart_mcp.mcp.protocol import MCPDispatcher, MCPProtocol
from quickchart_mcp.mcp.servers.srv_quickchart import QuickChartServer
from quickchart_mcp.observability.logger import logger


async def serve(dispatcher: MCPDispatcher, stdin=None, stdout_handle=None):
    """Read one request per line until EOF, answering each in order"""
    stdin = stdin or sys.stdin

    while True:
        line = await asyncio.to_thread(stdin.readline)
        if not line:
            break
        if not line.strip():
            continue

        response = await dispatcher.handle_line(line)
        if response is not None:
            MCPProtocol.write_message(response, stdout_handle)


def main(settings: Config = None):
    """Main entry point for stdio server"""
    settings = settings or Config.from_env()

    # Check for --manifest flag
    if len(sys.argv) > 1 and sys.argv[1] == "--manifest":
        MCPProtocol.write_manifest(QuickChartServer(settings).manifest())
        return

    # Setup stdio mode - redirect debug prints to stderr
    original_stdout = MCPProtocol.setup_stdio_mode()

    dispatcher = MCPDispatcher(QuickChartServer(settings))
    logger.info("server_started", transport="stdio")
    asyncio.run(serve(dispatcher, stdout_handle=original_stdout))
    logger.info("server_stopped", transport="stdio")


if __name__ == "__main__":
    main()
