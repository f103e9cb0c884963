"""Courier adapters."""

from .http_courier import CourierAdapter, CourierApiError
from .response_parser import candidates, parse_consignment, parse_tracking, pick_value

__all__ = [
    "CourierAdapter",
    "CourierApiError",
    "candidates",
    "parse_consignment",
    "parse_tracking",
    "pick_value",
]
