"""Distance-based delivery fee calculation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from foodcart.models.restaurant import Restaurant

logger = logging.getLogger(__name__)

WHOLE_UNIT: Decimal = Decimal("1")


@dataclass(frozen=True)
class GeoPoint:
    """Latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class PricingSettings:
    """Admin-configured delivery pricing."""

    base_fee: Decimal
    per_km_rate: Decimal


@dataclass(frozen=True)
class DeliveryFeeResult:
    """Computed fee with the inputs that produced it."""

    delivery_fee: Decimal
    base_fee: Decimal
    distance_km: Decimal

    @classmethod
    def zero(cls) -> DeliveryFeeResult:
        return cls(delivery_fee=Decimal("0"), base_fee=Decimal("0"), distance_km=Decimal("0"))


class DistanceProvider(Protocol):
    def route_distance_km(self, origin: GeoPoint, destination: GeoPoint) -> Decimal:
        """Return routed distance or raise ``RouteUnavailableError``."""


class PricingSource(Protocol):
    def get(self) -> PricingSettings:
        """Return current pricing or raise ``SettingsUnavailableError``."""


def fee_for_distance(distance_km: Decimal, pricing: PricingSettings) -> Decimal:
    """Apply the per-km rate, round half-up to whole units, then floor at the base fee."""
    raw_fee = (distance_km * pricing.per_km_rate).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)
    return max(raw_fee, pricing.base_fee)


def calculate_delivery_fee(
    delivery_location: GeoPoint,
    restaurant_location: GeoPoint,
    pricing: PricingSettings,
    *,
    distance_provider: DistanceProvider,
) -> DeliveryFeeResult:
    """Compute the delivery fee for a routed trip from the restaurant to the customer.

    ``RouteUnavailableError`` from the provider propagates unchanged; there is no
    default distance.
    """
    distance_km = distance_provider.route_distance_km(delivery_location, restaurant_location)
    delivery_fee = fee_for_distance(distance_km, pricing)
    logger.debug("[PRICING] distance=%s km fee=%s base=%s", distance_km, delivery_fee, pricing.base_fee)
    return DeliveryFeeResult(delivery_fee=delivery_fee, base_fee=pricing.base_fee, distance_km=distance_km)


def restaurant_location(restaurant: Restaurant) -> GeoPoint:
    return GeoPoint(lat=restaurant.location_lat, lng=restaurant.location_lng)


def quote_delivery_fee(
    delivery_location: GeoPoint,
    restaurant: Restaurant,
    *,
    pricing_source: PricingSource,
    distance_provider: DistanceProvider,
) -> DeliveryFeeResult:
    """Quote the fee for a canonical restaurant using current cached pricing.

    Used by both the cart preview and checkout so they always agree.
    """
    pricing = pricing_source.get()
    return calculate_delivery_fee(
        delivery_location,
        restaurant_location(restaurant),
        pricing,
        distance_provider=distance_provider,
    )
