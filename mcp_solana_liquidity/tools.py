"""
Tool registry and dispatcher.

Every tool is declared once as a `ToolSpec`. Its pydantic input model is used
both to publish the JSON input schema and to validate incoming arguments.
`ToolDispatcher.call` routes a validated call to the liquidity service and
wraps the result in the JSON envelope returned to the MCP host.
"""

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

import pydantic
from mcp.server.fastmcp.utilities.logging import get_logger
from mcp.types import TextContent, Tool
from pydantic import BaseModel

from mcp_solana_liquidity.errors import ProtocolError
from mcp_solana_liquidity.models import (
    FindTokenPairParams,
    GetLiquidityParams,
    GetPairsParams,
    GetPoolStatsParams,
    utc_timestamp,
)
from mcp_solana_liquidity.service import SolanaLiquidityService

logger = get_logger(__name__)

Handler = Callable[[SolanaLiquidityService, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    params_model: Type[BaseModel]
    handler: Handler

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.params_model.model_json_schema(),
        )


async def _get_solana_pairs(service: SolanaLiquidityService, args: GetPairsParams):
    return await service.fetch_trading_pairs(args.dex, args.limit, args.sort)


async def _get_pool_liquidity(service: SolanaLiquidityService, args: GetLiquidityParams):
    return await service.fetch_pool_liquidity(args.pool_address, args.dex)


async def _find_token_pair(service: SolanaLiquidityService, args: FindTokenPairParams):
    return await service.find_token_pair(args.token_a, args.token_b, args.dex)


async def _get_pool_stats(service: SolanaLiquidityService, args: GetPoolStatsParams):
    return await service.get_pool_stats(args.pool_address)


TOOLS: Dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            name="get_solana_pairs",
            description="Get real-time Solana trading pairs data from various DEXes",
            params_model=GetPairsParams,
            handler=_get_solana_pairs,
        ),
        ToolSpec(
            name="get_pool_liquidity",
            description="Get detailed liquidity information for a specific Solana pool",
            params_model=GetLiquidityParams,
            handler=_get_pool_liquidity,
        ),
        ToolSpec(
            name="find_token_pair",
            description="Find trading pairs for specific tokens on Solana",
            params_model=FindTokenPairParams,
            handler=_find_token_pair,
        ),
        ToolSpec(
            name="get_pool_stats",
            description="Get comprehensive statistics and analysis for a Solana liquidity pool",
            params_model=GetPoolStatsParams,
            handler=_get_pool_stats,
        ),
    )
}


def _format_validation_error(error: pydantic.ValidationError) -> str:
    details = []
    for err in error.errors():
        path = ".".join(str(part) for part in err["loc"]) or "arguments"
        details.append(f"{path}: {err['msg']}")
    return f"Invalid parameters: {', '.join(details)}"


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    return result


def build_envelope(result: Any) -> Dict[str, Any]:
    """Success envelope; `count` is only included for list results."""
    envelope: Dict[str, Any] = {"success": True, "data": _to_jsonable(result)}
    if isinstance(result, list):
        envelope["count"] = len(result)
    envelope["timestamp"] = utc_timestamp()
    return envelope


class ToolDispatcher:
    def __init__(self, service: SolanaLiquidityService, tools: Optional[Dict[str, ToolSpec]] = None):
        self.service = service
        self.tools = TOOLS if tools is None else tools

    def list_tools(self) -> List[Tool]:
        return [spec.to_tool() for spec in self.tools.values()]

    async def call(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        """
        Runs a tool and returns its JSON envelope as a single text block.

        Raises ProtocolError: method-not-found for an unknown tool, invalid-params
        for arguments rejected by the tool's input model, and internal-error for
        any other failure, including a malformed address.
        """
        spec = self.tools.get(name)
        if spec is None:
            raise ProtocolError.method_not_found(f"Unknown tool: {name}")

        logger.info(f"Received {name} call with arguments={arguments}")
        try:
            args = spec.params_model.model_validate(arguments or {})
        except pydantic.ValidationError as e:
            raise ProtocolError.invalid_params(_format_validation_error(e)) from e

        try:
            result = await spec.handler(self.service, args)
        except Exception as e:
            logger.exception(f"Error executing {name}: {e}")
            raise ProtocolError.internal_error(f"Tool execution failed: {e}") from e

        envelope = build_envelope(result)
        return [TextContent(type="text", text=json.dumps(envelope, indent=2))]
