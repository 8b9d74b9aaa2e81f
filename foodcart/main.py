"""FastAPI entrypoint for the food-ordering checkout service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from foodcart.api.v1.api import api_router
from foodcart.core.config import settings
from foodcart.db import session as db_session
from foodcart.db.base import Base
from foodcart.schemas.checkout import DeliveryFeeDetails
from foodcart.services.errors import (
    CheckoutError,
    RestaurantNotFoundError,
    RestaurantOfflineError,
    RouteUnavailableError,
    SettingsUnavailableError,
)
from foodcart.services.pricing_cache import PricingCache
from foodcart.services.routing import OSRMDistanceProvider

logger = logging.getLogger(__name__)

CHECKOUT_ERROR_STATUS: dict[type[CheckoutError], int] = {
    RestaurantNotFoundError: 404,
    RestaurantOfflineError: 409,
    RouteUnavailableError: 422,
    SettingsUnavailableError: 503,
}

app = FastAPI(title=settings.app_name)
app.include_router(api_router, prefix="/api/v1")


def build_state(target: FastAPI) -> None:
    """Attach the pricing cache and distance provider owned by this process."""
    target.state.pricing_cache = PricingCache(ttl_seconds=settings.pricing_cache_ttl_secs)
    target.state.distance_provider = OSRMDistanceProvider()


@app.on_event("startup")
def startup() -> None:
    Base.metadata.create_all(bind=db_session.engine)
    build_state(app)
    logger.info("[BOOTSTRAP] env=%s timezone=%s", settings.app_env, settings.local_timezone)
    logger.info(
        "[BOOTSTRAP] routing=%s timeout=%ss pricing_ttl=%ss",
        settings.routing_base_url,
        settings.routing_timeout_secs,
        settings.pricing_cache_ttl_secs,
    )


@app.exception_handler(CheckoutError)
async def checkout_error_handler(request: Request, exc: CheckoutError) -> JSONResponse:
    """Render whole-cart failures in the checkout result shape."""
    status_code = CHECKOUT_ERROR_STATUS.get(type(exc), 400)
    content: dict = {"success": False, "message": exc.message, "code": exc.code}
    if isinstance(exc, SettingsUnavailableError):
        content["delivery_fee_details"] = DeliveryFeeDetails.from_result(exc.fallback).model_dump(mode="json")
    logger.info("[CHECKOUT] %s %s -> %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=status_code, content=content)


@app.get("/")
def root() -> dict[str, str]:
    return {"name": settings.app_name, "status": "ok"}
