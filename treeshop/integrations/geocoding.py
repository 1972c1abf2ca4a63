"""
integrations/geocoding.py - Customer address geocoding.
"""

from __future__ import annotations
from typing import Optional, Protocol, Tuple
import logging

from ..proposals.schema import Customer, utc_now

logger = logging.getLogger(__name__)


Coordinates = Tuple[float, float]


class Geocoder(Protocol):
    """Protocol for address lookup backends."""

    def geocode(self, address: str) -> Optional[Coordinates]:
        """(latitude, longitude) for an address, or None when not found."""
        ...


def apply_geocode(customer: Customer, geocoder: Geocoder) -> bool:
    """Fill the customer's coordinates. Leaves them untouched on failure."""
    if not customer.address.strip():
        return False

    coords = geocoder.geocode(customer.address)
    if coords is None:
        logger.warning(f"Could not geocode address for customer {customer.customer_id}")
        return False

    customer.latitude, customer.longitude = coords
    customer.updated_at = utc_now()
    return True
