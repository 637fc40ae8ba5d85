"""Typed failures raised by the pricing and lifecycle core."""

from typing import Any, Optional


class HomeMoveError(Exception):
    """Base exception for all core errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LocationUnresolvable(HomeMoveError):
    """Geocoding and routing were exhausted without coordinates for both endpoints."""

    pass


class GeoTimeout(LocationUnresolvable):
    """Distance resolution exceeded the caller's timeout; the provider call was abandoned."""

    pass


class InvalidQuoteRequest(HomeMoveError):
    """Malformed quote input (negative distance, empty item list)."""

    pass


class UnknownCategory(HomeMoveError):
    """A line item refers to a category missing from the supplied rate map."""

    def __init__(self, category_id: int):
        super().__init__(
            f"No rate configured for category {category_id}",
            {"category_id": category_id},
        )
        self.category_id = category_id


class IllegalTransition(HomeMoveError):
    """Requested booking status change is not in the transition table."""

    def __init__(self, from_status, to_status):
        super().__init__(
            f"Cannot move booking from {from_status} to {to_status}",
            {"from_status": str(from_status), "to_status": str(to_status)},
        )
        self.from_status = from_status
        self.to_status = to_status
