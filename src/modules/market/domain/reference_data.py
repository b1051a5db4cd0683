"""市场参考数据（静态表）。

价格单位为 卢比/公斤。未收录的品种使用默认值，查询永远不会失败。
"""

from dataclasses import dataclass

DEFAULT_BASE_PRICE = 40.0
DEFAULT_VOLATILITY_FACTOR = 1.0
DEFAULT_RISK_FACTOR = 1.0
DEFAULT_MARKETS: tuple[str, ...] = ("Default Market",)

BASE_PRICES: dict[str, float] = {
    # Vegetables
    "Potato": 25,
    "Tomato": 40,
    "Onion": 30,
    "Carrot": 35,
    "Cauliflower": 45,
    "Cabbage": 20,
    "Brinjal": 35,
    "Capsicum": 60,
    "Cucumber": 25,
    "Ladies Finger": 40,
    # Grains
    "Rice": 45,
    "Wheat": 35,
    "Maize": 25,
    "Bajra": 30,
    "Jowar": 28,
    # Pulses
    "Pulses": 120,
    "Lentils": 100,
    "Chickpeas": 80,
    "Kidney Beans": 90,
    # Commercial crops
    "Sugarcane": 3.5,
    "Cotton": 60,
    "Soybean": 45,
    "Groundnut": 80,
    # Oilseeds
    "Oilseeds": 55,
    "Mustard": 50,
    "Sunflower": 65,
    "Sesame": 120,
}


@dataclass(frozen=True)
class SeasonalPattern:
    """旺季 / 淡季月份（1-12）。"""

    peak: tuple[int, ...]
    low: tuple[int, ...]


SEASONAL_PATTERNS: dict[str, SeasonalPattern] = {
    "Potato": SeasonalPattern(peak=(10, 11), low=(4, 5)),
    "Tomato": SeasonalPattern(peak=(5, 6), low=(11, 12)),
    "Onion": SeasonalPattern(peak=(8, 9), low=(2, 3)),
    "Rice": SeasonalPattern(peak=(9, 10), low=(3, 4)),
    "Wheat": SeasonalPattern(peak=(4, 5), low=(10, 11)),
}
DEFAULT_SEASONAL_COMMODITY = "Potato"

MARKET_TRENDS: dict[str, dict[str, float]] = {
    "Potato": {"Karnataka": 0.05, "Maharashtra": 0.03, "default": 0.02},
    "Tomato": {"Karnataka": -0.02, "Maharashtra": 0.08, "default": 0.01},
    "Onion": {"Karnataka": 0.01, "Maharashtra": 0.04, "default": 0.02},
}
DEFAULT_TREND_COMMODITY = "Potato"

VOLATILITY_FACTORS: dict[str, float] = {
    "Potato": 0.8,
    "Tomato": 1.5,
    "Onion": 1.2,
    "Rice": 0.6,
    "Wheat": 0.7,
}

RISK_FACTORS: dict[str, float] = {
    "Potato": 0.8,
    "Tomato": 1.3,
    "Onion": 1.1,
    "Rice": 0.6,
    "Wheat": 0.7,
}

# 每月价格走向（下标 0 = 一月）
MONTHLY_TRENDS: dict[str, tuple[str, ...]] = {
    "Potato": (
        "Rising", "Rising", "Stable", "Falling", "Falling", "Stable",
        "Stable", "Rising", "Rising", "Peak", "Peak", "Falling",
    ),
    "Tomato": (
        "Falling", "Falling", "Rising", "Rising", "Peak", "Peak",
        "Falling", "Falling", "Stable", "Stable", "Falling", "Falling",
    ),
}

# 收获月份（1-12），收获期供给充足
HARVEST_MONTHS: dict[str, tuple[int, ...]] = {
    "Potato": (1, 2, 3, 10, 11, 12),
    "Tomato": (5, 6, 7, 8),
    "Onion": (2, 3, 4, 8, 9, 10),
    "Rice": (9, 10, 11, 12),
    "Wheat": (3, 4, 5),
}
DEFAULT_HARVEST_COMMODITY = "Potato"

# 节庆带来的额外需求（按月）
FESTIVAL_DEMAND: dict[int, float] = {
    1: 0.1, 2: 0.05, 3: 0.1, 4: 0.05, 5: 0.1, 6: 0.05,
    7: 0.05, 8: 0.1, 9: 0.15, 10: 0.2, 11: 0.1, 12: 0.15,
}


@dataclass(frozen=True)
class TradeFactors:
    """国际贸易因子（0-1）。"""

    export_demand: float
    import_pressure: float
    global_price: float


TRADE_FACTORS: dict[str, TradeFactors] = {
    "Potato": TradeFactors(export_demand=0.3, import_pressure=0.2, global_price=0.4),
    "Tomato": TradeFactors(export_demand=0.2, import_pressure=0.1, global_price=0.3),
    "Onion": TradeFactors(export_demand=0.4, import_pressure=0.1, global_price=0.5),
    "Rice": TradeFactors(export_demand=0.8, import_pressure=0.3, global_price=0.7),
    "Wheat": TradeFactors(export_demand=0.6, import_pressure=0.2, global_price=0.6),
}
DEFAULT_TRADE_COMMODITY = "Potato"

COMMODITIES: tuple[str, ...] = (
    "Potato",
    "Tomato",
    "Onion",
    "Rice",
    "Wheat",
    "Sugarcane",
    "Cotton",
    "Soybean",
    "Maize",
    "Pulses",
    "Oilseeds",
)

STATES: tuple[str, ...] = (
    "Karnataka",
    "Maharashtra",
    "Tamil Nadu",
    "Andhra Pradesh",
    "Telangana",
    "Kerala",
    "Gujarat",
    "Rajasthan",
    "Madhya Pradesh",
    "Uttar Pradesh",
    "Bihar",
    "West Bengal",
    "Odisha",
    "Assam",
)

MARKETS: dict[str, tuple[str, ...]] = {
    "Karnataka": ("Bangalore", "Mysore", "Hubli", "Mangalore"),
    "Maharashtra": ("Mumbai", "Pune", "Nagpur", "Aurangabad"),
    "Tamil Nadu": ("Chennai", "Coimbatore", "Madurai", "Salem"),
    "Andhra Pradesh": ("Hyderabad", "Vijayawada", "Guntur", "Visakhapatnam"),
    "Telangana": ("Hyderabad", "Warangal", "Karimnagar", "Nizamabad"),
    "Kerala": ("Thiruvananthapuram", "Kochi", "Kozhikode", "Thrissur"),
    "Gujarat": ("Ahmedabad", "Surat", "Vadodara", "Rajkot"),
    "Rajasthan": ("Jaipur", "Jodhpur", "Kota", "Bikaner"),
}


def base_price(commodity: str) -> float:
    return BASE_PRICES.get(commodity, DEFAULT_BASE_PRICE)


def seasonal_pattern(commodity: str) -> SeasonalPattern:
    return SEASONAL_PATTERNS.get(
        commodity, SEASONAL_PATTERNS[DEFAULT_SEASONAL_COMMODITY]
    )


def market_trend(commodity: str, state: str) -> float:
    trends = MARKET_TRENDS.get(commodity, MARKET_TRENDS[DEFAULT_TREND_COMMODITY])
    return trends.get(state, trends["default"])


def volatility_factor(commodity: str) -> float:
    return VOLATILITY_FACTORS.get(commodity, DEFAULT_VOLATILITY_FACTOR)


def risk_factor(commodity: str) -> float:
    return RISK_FACTORS.get(commodity, DEFAULT_RISK_FACTOR)


def monthly_trend(commodity: str, month_index: int) -> str:
    trends = MONTHLY_TRENDS.get(commodity, MONTHLY_TRENDS["Potato"])
    return trends[month_index % 12]


def markets_for(state: str) -> tuple[str, ...]:
    return MARKETS.get(state, DEFAULT_MARKETS)


def harvest_months(commodity: str) -> tuple[int, ...]:
    return HARVEST_MONTHS.get(commodity, HARVEST_MONTHS[DEFAULT_HARVEST_COMMODITY])


def festival_demand(month: int) -> float:
    return FESTIVAL_DEMAND.get(month, 0.0)


def trade_factors(commodity: str) -> TradeFactors:
    return TRADE_FACTORS.get(commodity, TRADE_FACTORS[DEFAULT_TRADE_COMMODITY])
