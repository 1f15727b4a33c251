import asyncio
from typing import List

import httpx
from mcp.server.fastmcp.utilities.logging import configure_logging, get_logger
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolRequest, CallToolResult, ServerResult, Tool
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed

from mcp_solana_liquidity.config import SERVER_NAME, SERVER_VERSION, SOLANA_RPC_URL
from mcp_solana_liquidity.service import SolanaLiquidityService
from mcp_solana_liquidity.tools import ToolDispatcher

logger = get_logger(__name__)


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Registers the dispatcher's tools on an MCP server."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return dispatcher.list_tools()

    # Registered directly rather than through `server.call_tool()`, which turns
    # raised errors into tool results. A ProtocolError raised here is sent to
    # the host as a JSON-RPC error with its code.
    async def call_tool(req: CallToolRequest) -> ServerResult:
        content = await dispatcher.call(req.params.name, req.params.arguments)
        return ServerResult(CallToolResult(content=content, isError=False))

    server.request_handlers[CallToolRequest] = call_tool

    return server


async def serve(rpc_url: str = SOLANA_RPC_URL) -> None:
    """Runs the server over stdio until the host closes the stream."""
    logger.info(f"Using RPC Endpoint: {rpc_url}")
    async with AsyncClient(rpc_url, commitment=Confirmed) as rpc_client, httpx.AsyncClient() as http_client:
        service = SolanaLiquidityService(rpc_client, http_client)
        server = create_server(ToolDispatcher(service))
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Solana Pairs & Liquidity MCP server running on stdio")
            await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    # Logs go to stderr; stdout carries the MCP stdio protocol
    configure_logging("INFO")
    asyncio.run(serve())


if __name__ == "__main__":
    # Example: python -m mcp_solana_liquidity.server
    main()
