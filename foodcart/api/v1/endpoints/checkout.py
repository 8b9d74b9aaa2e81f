"""Checkout verification, fee preview and order placement endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from foodcart.api.v1.deps import get_distance_provider, get_pricing_cache
from foodcart.core.security import get_current_user
from foodcart.db.session import get_db
from foodcart.models.user import User
from foodcart.schemas.checkout import (
    CartLinePayload,
    CheckoutRejectedResponse,
    CheckoutRequest,
    CheckoutVerifiedResponse,
    DeliveryFeeDetails,
    DeliveryFeeRequest,
    DeliveryFeeResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    RemovedItemResponse,
)
from foodcart.services.cart_validation import ValidationOutcome, validate_cart
from foodcart.services.delivery_fee import DistanceProvider, quote_delivery_fee
from foodcart.services.errors import RestaurantNotFoundError
from foodcart.services.order_service import place_order
from foodcart.services.pricing_cache import PricingCache
from foodcart.services.restaurant_service import get_verified_restaurant
from foodcart.services.security_guards import ensure_checkout_customer

router: APIRouter = APIRouter()


def _rejected(outcome: ValidationOutcome) -> CheckoutRejectedResponse:
    return CheckoutRejectedResponse(
        message=outcome.message,
        removed_items=[RemovedItemResponse.from_removed(entry) for entry in outcome.removed],
    )


def _run_validation(
    payload: CheckoutRequest,
    db: Session,
    pricing_cache: PricingCache,
    distance_provider: DistanceProvider,
) -> ValidationOutcome:
    return validate_cart(
        db,
        payload.cart_lines(),
        payload.restaurant_id,
        payload.delivery_location.to_point(),
        pricing_source=pricing_cache,
        distance_provider=distance_provider,
    )


@router.post("/verify", response_model=CheckoutVerifiedResponse | CheckoutRejectedResponse)
def verify_checkout(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    pricing_cache: PricingCache = Depends(get_pricing_cache),
    distance_provider: DistanceProvider = Depends(get_distance_provider),
) -> CheckoutVerifiedResponse | CheckoutRejectedResponse:
    """Re-validate a client cart against the live menu and quote delivery."""
    ensure_checkout_customer(current_user)
    outcome = _run_validation(payload, db, pricing_cache, distance_provider)
    if not outcome.success:
        return _rejected(outcome)

    return CheckoutVerifiedResponse(
        message=outcome.message,
        verified_items=[CartLinePayload.from_cart_line(line) for line in outcome.verified],
        delivery_fee_details=DeliveryFeeDetails.from_result(outcome.delivery_fee),
        restaurant_id=outcome.restaurant_id,
    )


@router.post("/delivery-fee", response_model=DeliveryFeeResponse)
def delivery_fee_preview(
    payload: DeliveryFeeRequest,
    db: Session = Depends(get_db),
    pricing_cache: PricingCache = Depends(get_pricing_cache),
    distance_provider: DistanceProvider = Depends(get_distance_provider),
) -> DeliveryFeeResponse:
    """Quote delivery for the cart preview with the same calculator as checkout."""
    restaurant = get_verified_restaurant(db, payload.restaurant_id)
    if restaurant is None:
        raise RestaurantNotFoundError
    result = quote_delivery_fee(
        payload.delivery_location.to_point(),
        restaurant,
        pricing_source=pricing_cache,
        distance_provider=distance_provider,
    )
    return DeliveryFeeResponse(delivery_fee=result.delivery_fee, base_fee=result.base_fee, distance_km=result.distance_km)


@router.post("/place-order", response_model=PlaceOrderResponse, status_code=status.HTTP_201_CREATED)
def place_order_endpoint(
    payload: PlaceOrderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    pricing_cache: PricingCache = Depends(get_pricing_cache),
    distance_provider: DistanceProvider = Depends(get_distance_provider),
) -> PlaceOrderResponse | JSONResponse:
    """Validate the cart again and write the order only if every line verifies."""
    ensure_checkout_customer(current_user)
    outcome = _run_validation(payload, db, pricing_cache, distance_provider)
    if not outcome.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_rejected(outcome).model_dump(mode="json"),
        )

    order = place_order(
        db,
        customer_id=current_user.id,
        outcome=outcome,
        dropoff=payload.delivery_location.to_point(),
        dropoff_address=payload.delivery_location.address,
        special_instructions=payload.special_instructions or "",
        payment_slip_url=payload.payment_slip_url or "",
    )
    return PlaceOrderResponse(message="Order created successfully", order_number=order.order_number)
