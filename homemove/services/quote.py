import logging
import math
from datetime import tzinfo
from typing import Optional

from homemove.core.exceptions import InvalidQuoteRequest, UnknownCategory
from homemove.schemas.schemas import QuoteBreakdown, QuoteLine, QuoteRequest
from homemove.services.pricing import (
    combined_multiplier,
    describe_distance,
    floor_surcharge,
    price_distance,
    price_line_item,
    round_money,
    split_distance,
    temporal_factors,
)

logger = logging.getLogger(__name__)


def _validate(request: QuoteRequest):
    if not math.isfinite(request.distance_km):
        raise InvalidQuoteRequest(
            f"distance_km must be a finite number, got {request.distance_km}",
            {"field": "distance_km", "value": request.distance_km},
        )
    if request.distance_km < 0:
        raise InvalidQuoteRequest(
            f"distance_km must be >= 0, got {request.distance_km}",
            {"field": "distance_km", "value": request.distance_km},
        )
    if not request.items:
        raise InvalidQuoteRequest("Quote needs at least one item", {"field": "items", "value": []})
    for item in request.items:
        if item.category_id not in request.category_rates:
            raise UnknownCategory(item.category_id)


def compute_quote(request: QuoteRequest, tz: Optional[tzinfo] = None) -> QuoteBreakdown:
    """
    Itemized price for a move.

    Order: distance, items, floor surcharges, base price -> subtotal; the
    temporal multiplier then scales the whole subtotal and the result is
    rounded once. The same call serves live previews and the charged price.
    """
    _validate(request)
    card = request.rate_card

    split = split_distance(request.distance_km)
    distance_cost = price_distance(request.distance_km, card)

    items_cost = sum(
        price_line_item(item, request.category_rates[item.category_id])
        for item in request.items
    )

    pickup_fee = floor_surcharge(
        request.pickup_floor, request.pickup_has_elevator, card.no_elevator_fee_per_floor
    )
    dropoff_fee = floor_surcharge(
        request.dropoff_floor, request.dropoff_has_elevator, card.no_elevator_fee_per_floor
    )

    subtotal = card.base_price + distance_cost + items_cost + pickup_fee + dropoff_fee

    factors = temporal_factors(request.scheduled_at, tz)
    multiplier = combined_multiplier(factors, card)
    total = round_money(subtotal * multiplier)

    lines = []
    if card.base_price:
        lines.append(QuoteLine(label="Base price", amount=card.base_price))
    lines.append(QuoteLine(
        label=f"Distance ({request.distance_km:.1f}km)",
        amount=distance_cost,
        description=describe_distance(request.distance_km, card),
    ))
    lines.append(QuoteLine(label=f"Items ({len(request.items)})", amount=items_cost))
    if pickup_fee or dropoff_fee:
        lines.append(QuoteLine(label="Floor surcharge", amount=pickup_fee + dropoff_fee))
    if total != subtotal:
        active = [
            name for name, on in (
                ("peak hour", factors.is_peak_hour),
                ("weekend", factors.is_weekend),
                ("holiday", factors.is_holiday),
            ) if on
        ]
        lines.append(QuoteLine(
            label=f"Surge (x{multiplier:g})",
            amount=total - subtotal,
            description=", ".join(active),
        ))

    logger.info(
        f"Quote: {request.distance_km:.2f}km, {len(request.items)} items, "
        f"subtotal={subtotal}, multiplier={multiplier:g}, total={total}"
    )

    return QuoteBreakdown(
        base_price=card.base_price,
        first_tier_km=split.first_km,
        mid_tier_km=split.mid_km,
        last_tier_km=split.last_km,
        first_tier_cost=round_money(split.first_km * card.per_km_first_tier),
        mid_tier_cost=round_money(split.mid_km * card.per_km_mid_tier),
        last_tier_cost=round_money(split.last_km * card.per_km_last_tier),
        distance_cost=distance_cost,
        items_cost=items_cost,
        pickup_floor_surcharge=pickup_fee,
        dropoff_floor_surcharge=dropoff_fee,
        floor_surcharge=pickup_fee + dropoff_fee,
        subtotal=subtotal,
        is_peak_hour=factors.is_peak_hour,
        is_weekend=factors.is_weekend,
        is_holiday=factors.is_holiday,
        temporal_multiplier=multiplier,
        surge_amount=total - subtotal,
        total=total,
        lines=lines,
    )
