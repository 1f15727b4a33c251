"""
Liquidity data service.

Fetches trading pairs and pool data from DEX REST endpoints and the Solana RPC,
normalizes them into the records in `models`, and derives pool statistics.
The service keeps no state between calls apart from the two network clients
it is constructed with.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
from mcp.server.fastmcp.utilities.logging import get_logger
from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.core import RPCException
from solders.account import Account
from solders.pubkey import Pubkey

from mcp_solana_liquidity.config import DEFAULT_PAIR_LIMIT, MAX_PAIR_LIMIT, RELATED_PAIRS_LIMIT
from mcp_solana_liquidity.errors import FetchError, NotFoundError, ValidationError
from mcp_solana_liquidity.metrics import build_pool_stats
from mcp_solana_liquidity.models import (
    OnChainData,
    PoolLiquidity,
    PoolStats,
    TokenPairSearchResult,
    TradingPair,
    utc_timestamp,
)
from mcp_solana_liquidity.providers import (
    PAIR_SOURCES,
    Dex,
    extract_items,
    fetch_json,
    map_raydium_pool_details,
    resolve_pair_source,
)

logger = get_logger(__name__)


def parse_pool_address(pool_address: str) -> Pubkey:
    """Validates a base58 account address."""
    try:
        return Pubkey.from_string(pool_address)
    except ValueError as e:
        raise ValidationError(f"Invalid pool address {pool_address!r}: {e}") from e


def _involves(pair: TradingPair, mint: str) -> bool:
    return pair.base_mint == mint or pair.quote_mint == mint


class SolanaLiquidityService:
    def __init__(self, rpc_client: AsyncClient, http_client: httpx.AsyncClient):
        self.rpc_client = rpc_client
        self.http_client = http_client

    async def fetch_trading_pairs(
        self,
        dex: Optional[str] = None,
        limit: int = DEFAULT_PAIR_LIMIT,
        sort: str = "volume",
    ) -> List[TradingPair]:
        """
        Lists trading pairs from one DEX.

        Raydium (the default) is sorted descending by `sort` before truncating to
        `limit`; Orca keeps the provider's ordering. A dex without a pair listing,
        such as jupiter, yields an empty list.
        """
        source = resolve_pair_source(dex)
        if source is None:
            logger.debug(f"No pair listing available for dex={dex!r}")
            return []

        try:
            payload = await fetch_json(self.http_client, source.url)
        except FetchError as e:
            raise FetchError(f"Failed to fetch trading pairs: {e}") from e

        items = source.select(extract_items(payload, source.list_key), limit, sort)
        last_updated = utc_timestamp()
        pairs = [source.mapper(item, last_updated) for item in items]
        logger.debug(f"Fetched {len(pairs)} {source.dex.value} pairs (limit={limit}, sort={sort})")
        return pairs

    async def _get_pool_account(self, pubkey: Pubkey) -> Optional[Account]:
        try:
            resp = await self.rpc_client.get_account_info(pubkey, commitment=Confirmed)
        except (RPCException, SolanaRpcException, httpx.HTTPError) as e:
            raise FetchError(f"Failed to fetch pool account {pubkey}: {e}") from e
        return resp.value

    async def _lookup_pool_enrichment(
        self, pool_address: str, dex: Optional[str]
    ) -> Optional[Dict[str, Any]]:
        """
        Finds provider-reported details for a pool, or None when unavailable.

        Only Raydium publishes per-pool reserves and fees. A failed fetch is
        logged and reported as None so the on-chain lookup can still succeed.
        """
        if dex not in (None, Dex.RAYDIUM.value):
            return None

        source = PAIR_SOURCES[Dex.RAYDIUM]
        try:
            payload = await fetch_json(self.http_client, source.url)
        except FetchError as e:
            logger.warning(f"Could not fetch Raydium data for pool {pool_address}: {e}")
            return None

        for item in extract_items(payload, source.list_key):
            if item.get("ammId") == pool_address:
                return map_raydium_pool_details(item)
        return None

    async def fetch_pool_liquidity(self, pool_address: str, dex: Optional[str] = None) -> PoolLiquidity:
        """Looks up a pool on-chain and enriches it with DEX-reported liquidity data."""
        pubkey = parse_pool_address(pool_address)

        account, details = await asyncio.gather(
            self._get_pool_account(pubkey),
            self._lookup_pool_enrichment(pool_address, dex),
        )
        if account is None:
            raise NotFoundError(f"Pool not found on-chain: {pool_address}")

        return PoolLiquidity(
            pool_address=pool_address,
            **(details or {}),
            dex=dex or "unknown",
            on_chain_data=OnChainData(
                lamports=account.lamports,
                owner=str(account.owner),
                executable=account.executable,
                rent_epoch=account.rent_epoch,
            ),
        )

    async def find_token_pair(self, token_a: str, token_b: str, dex: Optional[str] = None) -> TokenPairSearchResult:
        """Finds pairs trading token_a against token_b, falling back to pairs that include either token."""
        pairs = await self.fetch_trading_pairs(dex, MAX_PAIR_LIMIT, "volume")

        direct = [
            pair for pair in pairs
            if (pair.base_mint == token_a and pair.quote_mint == token_b)
            or (pair.base_mint == token_b and pair.quote_mint == token_a)
        ]
        if direct:
            return TokenPairSearchResult(
                direct_pairs=direct,
                related_pairs=[],
                message="Direct trading pairs found",
            )

        related = [pair for pair in pairs if _involves(pair, token_a) or _involves(pair, token_b)]
        return TokenPairSearchResult(
            direct_pairs=[],
            related_pairs=related[:RELATED_PAIRS_LIMIT],
            message="No direct trading pairs found, showing related pairs",
        )

    async def get_pool_stats(self, pool_address: str) -> PoolStats:
        pool = await self.fetch_pool_liquidity(pool_address)
        return build_pool_stats(pool)
