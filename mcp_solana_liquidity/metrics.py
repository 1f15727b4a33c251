"""Derived pool metrics and risk buckets. Missing inputs are treated as 0."""

from typing import Optional

from mcp_solana_liquidity.models import PoolLiquidity, PoolMetrics, PoolStats, RiskAnalysis
from mcp_solana_liquidity.providers import numeric

DAYS_PER_YEAR = 365

LOW_LIQUIDITY_USD = 10_000
MEDIUM_LIQUIDITY_USD = 100_000
LOW_VOLUME_USD = 1_000
MEDIUM_VOLUME_USD = 10_000
HIGH_VOLUME_USD = 100_000


def volume_to_liquidity_ratio(volume_24h: Optional[float], liquidity_usd: Optional[float]) -> float:
    liquidity = numeric(liquidity_usd)
    if liquidity <= 0:
        return 0.0
    return numeric(volume_24h) / liquidity


def fees_apr(fees_24h: Optional[float], liquidity_usd: Optional[float]) -> float:
    """Annualised fee yield in percent, extrapolated from one day of fees."""
    liquidity = numeric(liquidity_usd)
    if liquidity <= 0:
        return 0.0
    return numeric(fees_24h) * DAYS_PER_YEAR / liquidity * 100


def utilization(ratio: float) -> float:
    if ratio <= 0:
        return 0.0
    return min(ratio * 100, 100.0)


def health_score(
    liquidity_usd: Optional[float],
    price_change_24h: Optional[float],
    volume_24h: Optional[float],
) -> int:
    """
    Scores pool health from 100 down to 0.

    Deductions are cumulative, one per criterion:
    liquidity below 10k (-30) or 100k (-15), absolute 24h price change above
    20% (-25) or 10% (-15), and 24h volume below 1k (-20) or 10k (-10).
    """
    liquidity = numeric(liquidity_usd)
    price_change = abs(numeric(price_change_24h))
    volume = numeric(volume_24h)

    score = 100
    if liquidity < LOW_LIQUIDITY_USD:
        score -= 30
    elif liquidity < MEDIUM_LIQUIDITY_USD:
        score -= 15

    if price_change > 20:
        score -= 25
    elif price_change > 10:
        score -= 15

    if volume < LOW_VOLUME_USD:
        score -= 20
    elif volume < MEDIUM_VOLUME_USD:
        score -= 10

    return max(0, min(score, 100))


def impermanent_loss_risk(price_change_24h: Optional[float]) -> str:
    price_change = abs(numeric(price_change_24h))
    if price_change > 15:
        return "high"
    if price_change > 5:
        return "medium"
    return "low"


def liquidity_risk(liquidity_usd: Optional[float]) -> str:
    liquidity = numeric(liquidity_usd)
    if liquidity < LOW_LIQUIDITY_USD:
        return "high"
    if liquidity < MEDIUM_LIQUIDITY_USD:
        return "medium"
    return "low"


def volume_consistency(volume_24h: Optional[float]) -> str:
    # Volume size is the only signal available from a single snapshot
    volume = numeric(volume_24h)
    if volume > HIGH_VOLUME_USD:
        return "high"
    if volume > MEDIUM_VOLUME_USD:
        return "medium"
    return "low"


def build_pool_stats(pool: PoolLiquidity) -> PoolStats:
    """Extends a pool liquidity record with derived metrics and risk flags."""
    ratio = volume_to_liquidity_ratio(pool.volume_24h, pool.liquidity_usd)
    metrics = PoolMetrics(
        volume_to_liquidity_ratio=ratio,
        fees_apr=fees_apr(pool.fees_24h, pool.liquidity_usd),
        utilization=utilization(ratio),
        health_score=health_score(pool.liquidity_usd, pool.price_change_24h, pool.volume_24h),
    )
    risk_analysis = RiskAnalysis(
        impermanent_loss_risk=impermanent_loss_risk(pool.price_change_24h),
        liquidity_risk=liquidity_risk(pool.liquidity_usd),
        volume_consistency=volume_consistency(pool.volume_24h),
    )
    return PoolStats(**pool.model_dump(), metrics=metrics, risk_analysis=risk_analysis)
