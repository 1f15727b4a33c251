"""
DEX provider adapters.

Each supported provider returns pairs in its own JSON shape. The functions here
fetch the raw listing and reshape provider items into `TradingPair` records.
They are registered in `PAIR_SOURCES`, keyed by provider, so adding a provider
means adding one `PairSource` entry and one mapping function.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import httpx
from mcp.server.fastmcp.utilities.logging import get_logger

from mcp_solana_liquidity.config import ORCA_WHIRLPOOLS_URL, RAYDIUM_PAIRS_URL
from mcp_solana_liquidity.errors import FetchError
from mcp_solana_liquidity.models import TradingPair

logger = get_logger(__name__)


class Dex(str, Enum):
    RAYDIUM = "raydium"
    ORCA = "orca"
    JUPITER = "jupiter" # Accepted by the tool schemas, no pair listing available


# --- Value helpers ---

def to_float(value: Any) -> Optional[float]:
    """Parses a provider numeric (number or numeric string); anything else becomes None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    # NaN and infinity cannot be encoded as JSON
    return parsed if math.isfinite(parsed) else None


def numeric(value: Any) -> float:
    """Like `to_float`, but missing values count as 0 for arithmetic and sorting."""
    parsed = to_float(value)
    return 0.0 if parsed is None else parsed


def _nested(item: Dict[str, Any], *keys: str) -> Any:
    current: Any = item
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _as_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def extract_items(payload: Any, key: str) -> List[Dict[str, Any]]:
    """Returns the list stored under `key`, or an empty list if it is missing."""
    items = payload.get(key) if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


# --- HTTP ---

async def fetch_json(http_client: httpx.AsyncClient, url: str) -> Any:
    """
    GETs `url` and decodes the JSON body.

    The status code is not checked: an error response with a JSON body is decoded
    like any other. Raises FetchError when the request fails or the body is not JSON.
    """
    logger.debug(f"GET {url}")
    try:
        response = await http_client.get(url)
        return response.json()
    except httpx.HTTPError as e:
        raise FetchError(f"GET {url} failed: {e}") from e
    except ValueError as e: # Body is not valid JSON
        raise FetchError(f"Invalid JSON from {url}: {e}") from e


# --- Provider mappings ---

def map_raydium_pair(item: Dict[str, Any], last_updated: str) -> TradingPair:
    return TradingPair(
        pool_address=_as_str(item.get("ammId")),
        base_mint=_as_str(item.get("baseMint")),
        quote_mint=_as_str(item.get("quoteMint")),
        base_symbol=_as_str(item.get("baseSymbol")),
        quote_symbol=_as_str(item.get("quoteSymbol")),
        price=to_float(item.get("price")),
        volume_24h=to_float(item.get("volume24h")),
        liquidity_usd=to_float(item.get("liquidity")),
        price_change_24h=to_float(item.get("priceChange24h")),
        dex=Dex.RAYDIUM.value,
        last_updated=last_updated,
    )


def map_orca_whirlpool(item: Dict[str, Any], last_updated: str) -> TradingPair:
    return TradingPair(
        pool_address=_as_str(item.get("address")),
        base_mint=_as_str(_nested(item, "tokenA", "mint")),
        quote_mint=_as_str(_nested(item, "tokenB", "mint")),
        base_symbol=_as_str(_nested(item, "tokenA", "symbol")),
        quote_symbol=_as_str(_nested(item, "tokenB", "symbol")),
        price=to_float(item.get("price")),
        volume_24h=to_float(_nested(item, "volume", "day")),
        liquidity_usd=to_float(item.get("tvl")),
        price_change_24h=to_float(_nested(item, "priceChange", "day")),
        dex=Dex.ORCA.value,
        last_updated=last_updated,
    )


def map_raydium_pool_details(item: Dict[str, Any]) -> Dict[str, Any]:
    """Pool-level fields used to enrich an on-chain pool lookup."""
    return {
        "base_mint": _as_str(item.get("baseMint")),
        "quote_mint": _as_str(item.get("quoteMint")),
        "base_symbol": _as_str(item.get("baseSymbol")),
        "quote_symbol": _as_str(item.get("quoteSymbol")),
        "base_reserve": to_float(item.get("baseReserve")),
        "quote_reserve": to_float(item.get("quoteReserve")),
        "liquidity_usd": to_float(item.get("liquidity")),
        "volume_24h": to_float(item.get("volume24h")),
        "fees_24h": to_float(item.get("fees24h")),
        "apy": to_float(item.get("apy")),
        "price": to_float(item.get("price")),
        "price_change_24h": to_float(item.get("priceChange24h")),
    }


# --- Registry ---

SortKeyFn = Callable[[Dict[str, Any]], float]

RAYDIUM_SORT_KEYS: Dict[str, SortKeyFn] = {
    "volume": lambda item: numeric(item.get("volume24h")),
    "liquidity": lambda item: numeric(item.get("liquidity")),
    "price_change": lambda item: abs(numeric(item.get("priceChange24h"))),
}


@dataclass(frozen=True)
class PairSource:
    dex: Dex
    url: str
    list_key: str
    mapper: Callable[[Dict[str, Any], str], TradingPair]
    # None keeps the provider's own ordering
    sort_keys: Optional[Dict[str, SortKeyFn]] = None

    def select(self, items: List[Dict[str, Any]], limit: int, sort: str) -> List[Dict[str, Any]]:
        """Orders raw items (descending by the sort key, if supported) and truncates to `limit`."""
        if self.sort_keys is not None and sort in self.sort_keys:
            items = sorted(items, key=self.sort_keys[sort], reverse=True)
        return items[:limit]


PAIR_SOURCES: Dict[Dex, PairSource] = {
    Dex.RAYDIUM: PairSource(
        dex=Dex.RAYDIUM,
        url=RAYDIUM_PAIRS_URL,
        list_key="data",
        mapper=map_raydium_pair,
        sort_keys=RAYDIUM_SORT_KEYS,
    ),
    Dex.ORCA: PairSource(
        dex=Dex.ORCA,
        url=ORCA_WHIRLPOOLS_URL,
        list_key="whirlpools",
        mapper=map_orca_whirlpool,
    ),
}


def resolve_pair_source(dex: Optional[str]) -> Optional[PairSource]:
    """Maps a caller-supplied dex name to its pair source; no dex means Raydium."""
    if dex is None:
        return PAIR_SOURCES[Dex.RAYDIUM]
    try:
        return PAIR_SOURCES.get(Dex(dex))
    except ValueError:
        return None
