"""近期价格的市场分析。

输入为最近在前的价格记录：
- 走势：最近一天众数价相对前一天超过 ±5% 为上涨 / 下跌
- 价差：最近 5 天 (max - min) / min 的平均值，>0.2 高，>0.1 中
- 建议和文字解读由走势与价差推出
"""

from collections.abc import Sequence

from src.modules.market.domain.entities import (
    MarketAnalysis,
    PriceRecord,
    PriceSpread,
    PriceTrend,
)

TREND_THRESHOLD = 0.05
SPREAD_WINDOW = 5


def price_trend(prices: Sequence[PriceRecord]) -> PriceTrend:
    if len(prices) < 2:
        return PriceTrend.STABLE
    recent = prices[0].modal_price
    previous = prices[1].modal_price
    if recent > previous * (1 + TREND_THRESHOLD):
        return PriceTrend.INCREASING
    if recent < previous * (1 - TREND_THRESHOLD):
        return PriceTrend.DECREASING
    return PriceTrend.STABLE


def price_spread(prices: Sequence[PriceRecord]) -> PriceSpread:
    if len(prices) < 2:
        return PriceSpread.LOW
    window = prices[:SPREAD_WINDOW]
    spreads = [
        (p.max_price - p.min_price) / p.min_price if p.min_price else 0.0
        for p in window
    ]
    average = sum(spreads) / len(spreads)
    if average > 0.2:
        return PriceSpread.HIGH
    if average > 0.1:
        return PriceSpread.MEDIUM
    return PriceSpread.LOW


def recommendation(trend: PriceTrend, spread: PriceSpread) -> str:
    if trend == PriceTrend.INCREASING and spread == PriceSpread.LOW:
        return "Good time to sell - prices are rising steadily"
    if trend == PriceTrend.DECREASING and spread == PriceSpread.LOW:
        return "Consider holding - prices may stabilize soon"
    if spread == PriceSpread.HIGH:
        return "Market is volatile - monitor closely before making decisions"
    return "Market is stable - normal trading conditions"


def market_insights(prices: Sequence[PriceRecord]) -> list[str]:
    if not prices:
        return []

    latest = prices[0]
    insights = [
        f"Current modal price: ₹{latest.modal_price} per kg",
        f"Price range: ₹{latest.min_price} - ₹{latest.max_price}",
    ]
    if len(prices) > 1:
        previous = prices[1].modal_price
        change = latest.modal_price - previous
        percent = abs(change) / previous * 100 if previous else 0.0
        if change > 0:
            insights.append(
                f"Price increased by ₹{change} ({percent:.1f}%) from previous day"
            )
        elif change < 0:
            insights.append(
                f"Price decreased by ₹{-change} ({percent:.1f}%) from previous day"
            )
        else:
            insights.append("Price remained stable from previous day")
    return insights


def analyze_prices(
    commodity: str,
    state: str,
    market: str,
    prices: Sequence[PriceRecord],
) -> MarketAnalysis:
    """分析最近在前的价格记录。"""
    trend = price_trend(prices)
    spread = price_spread(prices)
    return MarketAnalysis(
        commodity=commodity,
        state=state,
        market=market,
        price_trend=trend,
        volatility=spread,
        recommendation=recommendation(trend, spread),
        insights=market_insights(prices),
        prices=list(prices),
    )
