"""Pydantic records for tool inputs and outputs."""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from mcp_solana_liquidity.config import DEFAULT_PAIR_LIMIT, MAX_PAIR_LIMIT

DexName = Literal["raydium", "orca", "jupiter"]
SortKey = Literal["volume", "liquidity", "price_change"]
RiskLevel = Literal["low", "medium", "high"]


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# --- Tool inputs ---

class GetPairsParams(BaseModel):
    dex: Optional[DexName] = Field(None, description="DEX platform (raydium, orca, jupiter)")
    limit: int = Field(
        DEFAULT_PAIR_LIMIT,
        ge=1,
        le=MAX_PAIR_LIMIT,
        description=f"Number of pairs to return (1-{MAX_PAIR_LIMIT})",
    )
    sort: SortKey = Field("volume", description="Sort order")


class GetLiquidityParams(BaseModel):
    pool_address: str = Field(..., description="Pool address to get liquidity data for")
    dex: Optional[DexName] = Field(None, description="DEX platform")


class FindTokenPairParams(BaseModel):
    token_a: str = Field(..., description="First token mint address")
    token_b: str = Field(..., description="Second token mint address")
    dex: Optional[DexName] = Field(None, description="DEX platform to search on")


class GetPoolStatsParams(BaseModel):
    pool_address: str = Field(..., description="Pool address to get statistics for")


# --- Tool outputs ---

class TradingPair(BaseModel):
    pool_address: Optional[str] = None
    base_mint: Optional[str] = None
    quote_mint: Optional[str] = None
    base_symbol: Optional[str] = None
    quote_symbol: Optional[str] = None
    price: Optional[float] = None
    volume_24h: Optional[float] = None
    liquidity_usd: Optional[float] = None
    price_change_24h: Optional[float] = None
    dex: str
    last_updated: str = Field(default_factory=utc_timestamp)


class OnChainData(BaseModel):
    lamports: int
    owner: str # Owning program, base58
    executable: bool
    rent_epoch: int


class PoolLiquidity(TradingPair):
    base_reserve: Optional[float] = None
    quote_reserve: Optional[float] = None
    fees_24h: Optional[float] = None
    apy: Optional[float] = None
    on_chain_data: OnChainData


class PoolMetrics(BaseModel):
    volume_to_liquidity_ratio: float
    fees_apr: float
    utilization: float
    health_score: int


class RiskAnalysis(BaseModel):
    impermanent_loss_risk: RiskLevel
    liquidity_risk: RiskLevel
    volume_consistency: RiskLevel


class PoolStats(PoolLiquidity):
    metrics: PoolMetrics
    risk_analysis: RiskAnalysis


class TokenPairSearchResult(BaseModel):
    direct_pairs: List[TradingPair] = Field(default_factory=list)
    related_pairs: List[TradingPair] = Field(default_factory=list)
    message: str
