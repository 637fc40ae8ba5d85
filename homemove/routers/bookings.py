from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException
from homemove.core.config import Settings, get_settings
from homemove.core.exceptions import IllegalTransition
from homemove.schemas.schemas import (
    CancellationOutcome,
    CancellationRequest,
    TransitionRequest,
    TransitionResponse,
)
from homemove.services.lifecycle import (
    apply_transition,
    compute_cancellation_outcome,
    next_statuses,
)

router = APIRouter(prefix="/v1/bookings", tags=["Bookings"])


@router.post("/transitions", response_model=TransitionResponse)
async def transition_booking(payload: TransitionRequest):
    try:
        status = apply_transition(payload.current_status, payload.target_status)
    except IllegalTransition as e:
        raise HTTPException(status_code=409, detail={"error": e.message, **e.details})
    return TransitionResponse(
        previous_status=payload.current_status,
        status=status,
        next_statuses=next_statuses(status),
    )


@router.post("/cancellation", response_model=CancellationOutcome)
async def cancellation_outcome(payload: CancellationRequest, settings: Settings = Depends(get_settings)):
    """
    Refund/fee for cancelling at `now` (the server clock when omitted).
    Naive timestamps are read in the pricing timezone.
    """
    local_tz = ZoneInfo(settings.pricing_timezone)
    now = payload.now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=local_tz)
    scheduled_at = payload.scheduled_at
    if scheduled_at is not None and scheduled_at.tzinfo is None:
        scheduled_at = scheduled_at.replace(tzinfo=local_tz)

    return compute_cancellation_outcome(payload.status, payload.final_price, scheduled_at, now)
