"""Routed road distance lookup backed by an OSRM server."""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal

import httpx

from foodcart.core.config import settings
from foodcart.services.delivery_fee import GeoPoint
from foodcart.services.errors import RouteUnavailableError

logger = logging.getLogger(__name__)

TENTH_KM: Decimal = Decimal("0.1")


def _first_route_distance(routes: object) -> float | None:
    """Return the first route's distance in metres when it is a finite, non-negative number."""
    if not isinstance(routes, list) or not routes or not isinstance(routes[0], dict):
        return None
    distance = routes[0].get("distance")
    if isinstance(distance, bool) or not isinstance(distance, (int, float)):
        return None
    if not math.isfinite(distance) or distance < 0:
        return None
    return distance


class OSRMDistanceProvider:
    """Driving distance between two points via the OSRM route service."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.routing_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.routing_timeout_secs
        self.transport = transport

    def _route_url(self, origin: GeoPoint, destination: GeoPoint) -> str:
        # OSRM expects lng,lat order.
        return (
            f"{self.base_url}/route/v1/driving/"
            f"{origin.lng:.6f},{origin.lat:.6f};{destination.lng:.6f},{destination.lat:.6f}"
        )

    def route_distance_km(self, origin: GeoPoint, destination: GeoPoint) -> Decimal:
        """Return road distance in km rounded to 0.1 km."""
        url = self._route_url(origin, destination)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.get(url, params={"overview": "false"})
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("[ROUTING] route lookup failed: %s", exc)
            raise RouteUnavailableError from exc

        code = body.get("code") if isinstance(body, dict) else None
        if code != "Ok":
            logger.warning("[ROUTING] route lookup returned code=%s", code)
            raise RouteUnavailableError
        distance = _first_route_distance(body.get("routes"))
        if distance is None:
            logger.warning("[ROUTING] route lookup returned no usable route")
            raise RouteUnavailableError

        metres = Decimal(str(distance))
        return (metres / 1000).quantize(TENTH_KM, rounding=ROUND_HALF_UP)
