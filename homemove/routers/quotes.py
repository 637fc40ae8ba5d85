from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException
from homemove.core.config import Settings, get_settings
from homemove.core.exceptions import InvalidQuoteRequest, UnknownCategory
from homemove.schemas.schemas import QuoteBreakdown, QuoteRequest
from homemove.services.quote import compute_quote

router = APIRouter(prefix="/v1/quotes", tags=["Quotes"])


@router.post("/preview", response_model=QuoteBreakdown)
async def preview_quote(payload: QuoteRequest, settings: Settings = Depends(get_settings)):
    """Itemized quote. Previews and charged prices both come from here."""
    try:
        return compute_quote(payload, tz=ZoneInfo(settings.pricing_timezone))
    except (InvalidQuoteRequest, UnknownCategory) as e:
        raise HTTPException(status_code=422, detail={"error": e.message, **e.details})
