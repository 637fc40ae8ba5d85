import math
from datetime import datetime, tzinfo
from typing import NamedTuple, Optional

from homemove.schemas.schemas import RateCard, CategoryRate, LineItem

# Tier breakpoints (km)
FIRST_TIER_LIMIT_KM = 4
MID_TIER_LIMIT_KM = 40

# [start, end) local hours
PEAK_HOURS = ((7, 9), (17, 19))

# (month, day); fixed dates only, no lunar calendar
HOLIDAYS = {(1, 1), (4, 30), (5, 1), (9, 2)}


class DistanceSplit(NamedTuple):
    first_km: float
    mid_km: float
    last_km: float


class TemporalFactors(NamedTuple):
    is_peak_hour: bool
    is_weekend: bool
    is_holiday: bool


def round_money(value: float) -> int:
    """Round half up to a whole minor currency unit."""
    return int(math.floor(value + 0.5))


def format_money(amount: int) -> str:
    """Render minor units for display, e.g. 1500000 -> '1,500,000đ'."""
    return f"{amount:,}đ"


def split_distance(distance_km: float) -> DistanceSplit:
    first = min(distance_km, FIRST_TIER_LIMIT_KM)
    mid = min(max(distance_km - FIRST_TIER_LIMIT_KM, 0), MID_TIER_LIMIT_KM - FIRST_TIER_LIMIT_KM)
    last = max(distance_km - MID_TIER_LIMIT_KM, 0)
    return DistanceSplit(first, mid, last)


def price_distance(distance_km: float, rate_card: RateCard) -> int:
    """
    Tiered per-km price: first 4 km, 4-40 km, beyond 40 km.
    Tiers are summed unrounded; the total is rounded once.
    """
    split = split_distance(distance_km)
    raw = (
        split.first_km * rate_card.per_km_first_tier
        + split.mid_km * rate_card.per_km_mid_tier
        + split.last_km * rate_card.per_km_last_tier
    )
    return round_money(raw)


def describe_distance(distance_km: float, rate_card: RateCard) -> str:
    """Human-readable tier formula for quote previews."""
    split = split_distance(distance_km)
    if distance_km <= FIRST_TIER_LIMIT_KM:
        return f"{split.first_km:.1f}km x {format_money(rate_card.per_km_first_tier)}"
    parts = [
        f"{FIRST_TIER_LIMIT_KM}km x {format_money(rate_card.per_km_first_tier)}",
        f"{split.mid_km:.1f}km x {format_money(rate_card.per_km_mid_tier)}",
    ]
    if split.last_km > 0:
        parts.append(f"{split.last_km:.1f}km x {format_money(rate_card.per_km_last_tier)}")
    return " + ".join(parts)


def price_line_item(item: LineItem, category_rate: CategoryRate) -> int:
    """
    Unit price with handling multipliers (fragile, disassembly, heavy, in that
    order), rounded once per unit, then multiplied by quantity.
    """
    unit_price = float(category_rate.base_price)
    if item.is_fragile:
        unit_price *= category_rate.fragile_multiplier
    if item.requires_disassembly:
        unit_price *= category_rate.disassembly_multiplier
    if item.is_heavy:
        unit_price *= category_rate.heavy_multiplier
    return round_money(unit_price) * item.quantity


def temporal_factors(scheduled_at: datetime, tz: Optional[tzinfo] = None) -> TemporalFactors:
    """
    Peak hour, weekend and holiday flags for a scheduling timestamp.
    Aware timestamps are converted to tz first; naive ones are taken as local.
    """
    local = scheduled_at
    if tz is not None and scheduled_at.tzinfo is not None:
        local = scheduled_at.astimezone(tz)

    is_peak = any(start <= local.hour < end for start, end in PEAK_HOURS)
    is_weekend = local.weekday() >= 5
    is_holiday = (local.month, local.day) in HOLIDAYS
    return TemporalFactors(is_peak, is_weekend, is_holiday)


def combined_multiplier(factors: TemporalFactors, rate_card: RateCard) -> float:
    multiplier = 1.0
    if factors.is_peak_hour:
        multiplier *= rate_card.peak_multiplier
    if factors.is_weekend:
        multiplier *= rate_card.weekend_multiplier
    if factors.is_holiday:
        multiplier *= rate_card.holiday_multiplier
    return multiplier


def temporal_multiplier(scheduled_at: datetime, rate_card: RateCard, tz: Optional[tzinfo] = None) -> float:
    """Product of every active surge multiplier; 1.0 when none applies."""
    return combined_multiplier(temporal_factors(scheduled_at, tz), rate_card)


def floor_surcharge(floor: int, has_elevator: bool, fee_per_floor: int) -> int:
    """Carrying fee for each floor above ground when there is no elevator."""
    if has_elevator or floor <= 1:
        return 0
    return (floor - 1) * fee_per_floor
