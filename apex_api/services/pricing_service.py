from __future__ import annotations

TRADITIONAL_PRICE_FACTOR = 1.30

LOW_RISK_CEILING = 40
HIGH_RISK_FLOOR = 65
LOW_RISK_DISCOUNT_PCT = -10
HIGH_RISK_LOADING_PCT = 8


def price_adjustment_for_risk(risk_value: int) -> int:
    """Signed percentage applied to every plan's base price."""
    if risk_value < LOW_RISK_CEILING:
        return LOW_RISK_DISCOUNT_PCT
    if risk_value > HIGH_RISK_FLOOR:
        return HIGH_RISK_LOADING_PCT
    return 0


def adjusted_price(base_price: float, adjustment_pct: int) -> float:
    return round(base_price * (100 + adjustment_pct) / 100, 2)


def savings_vs_traditional(base_price: float, final_price: float) -> float:
    traditional_price = base_price * TRADITIONAL_PRICE_FACTOR
    return round(max(traditional_price - final_price, 0.0), 2)
