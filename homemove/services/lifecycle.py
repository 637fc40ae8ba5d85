"""Booking status state machine and cancellation-fee policy."""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from homemove.core.exceptions import IllegalTransition
from homemove.schemas.schemas import BookingStatus, CancellationOutcome

logger = logging.getLogger(__name__)

VALID_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.QUOTED, BookingStatus.CANCELLED}),
    BookingStatus.QUOTED: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED}),
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.COMPLETED: frozenset({BookingStatus.REVIEWED}),
    BookingStatus.REVIEWED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

# Timeline position; CANCELLED sits outside the forward path.
STATUS_ORDER = {
    BookingStatus.PENDING: 1,
    BookingStatus.QUOTED: 2,
    BookingStatus.CONFIRMED: 3,
    BookingStatus.IN_PROGRESS: 4,
    BookingStatus.COMPLETED: 5,
    BookingStatus.REVIEWED: 6,
    BookingStatus.CANCELLED: 0,
}

HALF_REFUND_WINDOW = timedelta(hours=24)
QUOTATION_EXPIRY_BUFFER = timedelta(minutes=5)


def can_transition(from_status: BookingStatus, to_status: BookingStatus) -> bool:
    return to_status in VALID_TRANSITIONS[from_status]


def ensure_transition(from_status: BookingStatus, to_status: BookingStatus):
    if not can_transition(from_status, to_status):
        logger.warning(f"Rejected booking transition {from_status} -> {to_status}")
        raise IllegalTransition(from_status, to_status)


def apply_transition(from_status: BookingStatus, to_status: BookingStatus) -> BookingStatus:
    """Validated status change; the only way callers obtain a new status."""
    ensure_transition(from_status, to_status)
    return to_status


def next_statuses(status: BookingStatus) -> list[BookingStatus]:
    return sorted(VALID_TRANSITIONS[status], key=lambda s: STATUS_ORDER[s])


def is_terminal(status: BookingStatus) -> bool:
    return not VALID_TRANSITIONS[status]


def status_order(status: BookingStatus) -> int:
    return STATUS_ORDER[status]


def can_cancel(status: BookingStatus) -> bool:
    return can_transition(status, BookingStatus.CANCELLED)


def can_accept_quotation(status: BookingStatus) -> bool:
    return status == BookingStatus.QUOTED


def can_start_job(status: BookingStatus, is_assigned_transport: bool) -> bool:
    return status == BookingStatus.CONFIRMED and is_assigned_transport


def can_complete_job(status: BookingStatus) -> bool:
    return status == BookingStatus.IN_PROGRESS


def compute_cancellation_outcome(
    status: BookingStatus,
    final_price: Optional[int],
    scheduled_at: Optional[datetime],
    now: datetime,
) -> CancellationOutcome:
    """
    Refund and fee for cancelling a booking at `now`.

    Only CONFIRMED bookings with a known price and pickup time are priced:
    more than 24h ahead splits the price 50/50, anything later (including a
    pickup time already passed) keeps the full price as the fee. Every other
    case yields None for both amounts.
    """
    if status != BookingStatus.CONFIRMED or final_price is None or scheduled_at is None:
        return CancellationOutcome()

    if scheduled_at - now > HALF_REFUND_WINDOW:
        half = math.floor(final_price * 0.5)
        return CancellationOutcome(refund_amount=half, cancellation_fee=half)

    return CancellationOutcome(refund_amount=0, cancellation_fee=final_price)


def is_quotation_expired(expires_at: Optional[datetime], now: datetime) -> bool:
    """Expired once within 5 minutes of expires_at. No expiry never expires."""
    if expires_at is None:
        return False
    return expires_at - QUOTATION_EXPIRY_BUFFER < now


def time_until_expiration(expires_at: Optional[datetime], now: datetime) -> str:
    if expires_at is None:
        return "unknown"

    remaining = expires_at - now
    if remaining <= timedelta(0):
        return "expired"

    total_minutes = int(remaining.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
