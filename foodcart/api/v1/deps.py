"""Shared request dependencies for v1 endpoints."""

from fastapi import Request

from foodcart.services.delivery_fee import DistanceProvider
from foodcart.services.pricing_cache import PricingCache


def get_pricing_cache(request: Request) -> PricingCache:
    """Return the process pricing cache built at startup."""
    return request.app.state.pricing_cache


def get_distance_provider(request: Request) -> DistanceProvider:
    """Return the routed-distance provider built at startup."""
    return request.app.state.distance_provider
