from pydantic import BaseModel, Field
from typing import Optional, Union
from datetime import datetime
from enum import Enum


# ─── Geo Schemas ──────────────────────────────────────────────────────────────

class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    class Config:
        frozen = True


class DistanceMethod(str, Enum):
    EXTERNAL = "external"
    FALLBACK = "fallback"

    def __str__(self):
        return self.value


class DistanceResult(BaseModel):
    distance_km: float = Field(..., ge=0)
    duration_minutes: int = Field(..., ge=0)
    method: DistanceMethod

    class Config:
        frozen = True


class DistanceRequest(BaseModel):
    origin: Union[Coordinates, str]
    destination: Union[Coordinates, str]


# ─── Pricing Schemas ──────────────────────────────────────────────────────────

class RateCard(BaseModel):
    """Per-provider vehicle rates. Money fields are minor currency units."""

    per_km_first_tier: int = Field(..., ge=0)
    per_km_mid_tier: int = Field(..., ge=0)
    per_km_last_tier: int = Field(..., ge=0)
    peak_multiplier: float = Field(default=1.0, ge=1)
    weekend_multiplier: float = Field(default=1.0, ge=1)
    holiday_multiplier: float = Field(default=1.0, ge=1)
    base_price: int = Field(default=0, ge=0)
    no_elevator_fee_per_floor: int = Field(default=0, ge=0)

    class Config:
        frozen = True


class CategoryRate(BaseModel):
    base_price: int = Field(..., ge=0)
    fragile_multiplier: float = Field(default=1.0, ge=1)
    disassembly_multiplier: float = Field(default=1.0, ge=1)
    heavy_multiplier: float = Field(default=1.0, ge=1)

    class Config:
        frozen = True


class LineItem(BaseModel):
    category_id: int
    quantity: int = Field(default=1, ge=1)
    is_fragile: bool = False
    requires_disassembly: bool = False
    is_heavy: bool = False


# ─── Quote Schemas ────────────────────────────────────────────────────────────

class QuoteRequest(BaseModel):
    # distance_km and items are checked by the quote engine so that bad values
    # surface as InvalidQuoteRequest rather than a schema error.
    rate_card: RateCard
    category_rates: dict[int, CategoryRate]
    distance_km: float
    items: list[LineItem]
    scheduled_at: datetime
    pickup_floor: int = 1
    dropoff_floor: int = 1
    pickup_has_elevator: bool = False
    dropoff_has_elevator: bool = False


class QuoteLine(BaseModel):
    label: str
    amount: int
    description: Optional[str] = None


class QuoteBreakdown(BaseModel):
    base_price: int
    first_tier_km: float
    mid_tier_km: float
    last_tier_km: float
    first_tier_cost: int
    mid_tier_cost: int
    last_tier_cost: int
    distance_cost: int
    items_cost: int
    pickup_floor_surcharge: int
    dropoff_floor_surcharge: int
    floor_surcharge: int
    subtotal: int
    is_peak_hour: bool
    is_weekend: bool
    is_holiday: bool
    temporal_multiplier: float
    surge_amount: int
    total: int
    lines: list[QuoteLine] = Field(default_factory=list)


# ─── Booking Schemas ──────────────────────────────────────────────────────────

class BookingStatus(str, Enum):
    PENDING = "PENDING"
    QUOTED = "QUOTED"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REVIEWED = "REVIEWED"
    CANCELLED = "CANCELLED"

    def __str__(self):
        return self.value


class CancellationOutcome(BaseModel):
    """None means not applicable from this status; 0 means computed as zero."""

    refund_amount: Optional[int] = None
    cancellation_fee: Optional[int] = None


class TransitionRequest(BaseModel):
    current_status: BookingStatus
    target_status: BookingStatus


class TransitionResponse(BaseModel):
    previous_status: BookingStatus
    status: BookingStatus
    next_statuses: list[BookingStatus]


class CancellationRequest(BaseModel):
    status: BookingStatus
    final_price: Optional[int] = Field(default=None, ge=0)
    scheduled_at: Optional[datetime] = None
    now: Optional[datetime] = None
