import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from solders.account import Account
from solders.pubkey import Pubkey
from solders.rpc.responses import GetAccountInfoResp

# Ensure the package can be imported without installation
ROOT_DIR = Path(__file__).parent.parent.parent
sys.path.insert(0, str(ROOT_DIR))

from mcp_solana_liquidity.config import ORCA_WHIRLPOOLS_URL, RAYDIUM_PAIRS_URL
from mcp_solana_liquidity.errors import ProtocolError
from mcp_solana_liquidity.service import SolanaLiquidityService
from mcp_solana_liquidity.tools import ToolDispatcher

SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
RAY_MINT = "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R"
BONK_MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"

RAYDIUM_POOL = "58oQChx4yWmvKdwLLZzBi4ChoCc2fqCUWBkwMihLYQo2"


def raydium_pair(amm_id: str, base: str, quote: str, **overrides: Any) -> Dict[str, Any]:
    pair = {
        "ammId": amm_id,
        "baseMint": base,
        "quoteMint": quote,
        "baseSymbol": "BASE",
        "quoteSymbol": "QUOTE",
        "price": 1.0,
        "volume24h": 50_000,
        "liquidity": 500_000,
        "priceChange24h": 1.5,
        "baseReserve": 1_000.0,
        "quoteReserve": 2_000.0,
        "fees24h": 125.0,
        "apy": 9.1,
    }
    pair.update(overrides)
    return pair


# --- Sample Provider Data ---

@pytest.fixture(scope="function")
def raydium_pairs() -> List[Dict[str, Any]]:
    """Raydium pairs deliberately out of order for every sort key."""
    return [
        raydium_pair(str(Pubkey.new_unique()), RAY_MINT, USDC_MINT,
                     volume24h=10_000, liquidity=900_000, priceChange24h=-30.0),
        raydium_pair(RAYDIUM_POOL, SOL_MINT, USDC_MINT, baseSymbol="WSOL", quoteSymbol="USDC",
                     volume24h=5_000_000, liquidity=20_000_000, priceChange24h=2.5),
        raydium_pair(str(Pubkey.new_unique()), BONK_MINT, SOL_MINT,
                     volume24h=750_000, liquidity=100_000, priceChange24h=12.0),
    ]


@pytest.fixture(scope="function")
def orca_whirlpools() -> List[Dict[str, Any]]:
    return [
        {
            "address": "HJPjoWUrhoZzkNfRpHuieeFk9WcZWjwy6PBjZ81ngndJ",
            "tokenA": {"mint": SOL_MINT, "symbol": "SOL"},
            "tokenB": {"mint": USDC_MINT, "symbol": "USDC"},
            "price": 142.3,
            "volume": {"day": 1_000},
            "tvl": 30_000_000,
            "priceChange": {"day": -1.2},
        },
        {
            "address": "2AEWSvUds1wsufnsDPCXjFsJCMJH5SNNm7fSF4kxys9a",
            "tokenA": {"mint": BONK_MINT, "symbol": "BONK"},
            "tokenB": {"mint": SOL_MINT, "symbol": "SOL"},
            "price": 0.0000001,
            "volume": {"day": 9_000_000},
            "tvl": 2_500_000,
            "priceChange": {"day": 8.0},
        },
    ]


# --- Mock HTTP Client Fixture ---

class RecordingRoutes:
    """Serves canned DEX responses by URL and records every request made."""

    def __init__(self) -> None:
        self.routes: Dict[str, Any] = {}
        self.requested: List[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        if isinstance(route, Exception):
            raise route
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, content=json.dumps(route).encode())


@pytest.fixture(scope="function")
def http_routes(raydium_pairs, orca_whirlpools) -> RecordingRoutes:
    routes = RecordingRoutes()
    routes.routes[RAYDIUM_PAIRS_URL] = {"success": True, "data": raydium_pairs}
    routes.routes[ORCA_WHIRLPOOLS_URL] = {"whirlpools": orca_whirlpools}
    return routes


@pytest.fixture(scope="function")
def http_client(http_routes: RecordingRoutes) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(http_routes.handler))


# --- Mock RPC Client Fixture ---

def create_mock_account(lamports: int = 6_124_800, rent_epoch: int = 361) -> MagicMock:
    account = MagicMock(spec=Account)
    account.lamports = lamports
    account.owner = Pubkey.from_string("675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8")
    account.executable = False
    account.rent_epoch = rent_epoch
    return account


def create_mock_account_info_resp(account: Optional[MagicMock]) -> MagicMock:
    mock_resp = MagicMock(spec=GetAccountInfoResp)
    mock_resp.value = account
    return mock_resp


@pytest.fixture(scope="function")
def rpc_client() -> AsyncMock:
    """AsyncClient stand-in whose pool account exists by default."""
    client = AsyncMock()
    client.get_account_info.return_value = create_mock_account_info_resp(create_mock_account())
    return client


# --- Service / Dispatcher Fixtures ---

@pytest.fixture(scope="function")
def service(rpc_client: AsyncMock, http_client: httpx.AsyncClient) -> SolanaLiquidityService:
    return SolanaLiquidityService(rpc_client, http_client)


@pytest.fixture(scope="function")
def dispatcher(service: SolanaLiquidityService) -> ToolDispatcher:
    return ToolDispatcher(service)


@pytest.fixture(scope="function")
def call_tool(dispatcher: ToolDispatcher) -> Callable:
    """Calls a tool and returns the decoded JSON envelope."""

    async def _call(name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        content = await dispatcher.call(name, arguments)
        assert len(content) == 1
        assert content[0].type == "text"
        return json.loads(content[0].text)

    return _call


@pytest.fixture(scope="function")
def expect_protocol_error(dispatcher: ToolDispatcher) -> Callable:
    """Calls a tool that is expected to fail and returns the ProtocolError."""

    async def _call(name: str, arguments: Optional[Dict[str, Any]] = None) -> ProtocolError:
        with pytest.raises(ProtocolError) as exc_info:
            await dispatcher.call(name, arguments)
        return exc_info.value

    return _call
