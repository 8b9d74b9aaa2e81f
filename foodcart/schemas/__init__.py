"""Schema exports."""

from foodcart.schemas.admin import PricingSettingsPayload
from foodcart.schemas.checkout import (
    CartLinePayload,
    CheckoutRejectedResponse,
    CheckoutRequest,
    CheckoutVerifiedResponse,
    DeliveryFeeDetails,
    DeliveryFeeRequest,
    DeliveryFeeResponse,
    DeliveryLocationPayload,
    GeoPointPayload,
    PlaceOrderRequest,
    PlaceOrderResponse,
    PreviewLocationPayload,
    RemovedItemResponse,
    SelectedOptionPayload,
)
from foodcart.schemas.menu import (
    MenuItemResponse,
    MenuOptionResponse,
    OverrideUpdate,
    RestaurantMenuResponse,
    RestaurantResponse,
)

__all__ = [
    "CartLinePayload",
    "CheckoutRejectedResponse",
    "CheckoutRequest",
    "CheckoutVerifiedResponse",
    "DeliveryFeeDetails",
    "DeliveryFeeRequest",
    "DeliveryFeeResponse",
    "DeliveryLocationPayload",
    "GeoPointPayload",
    "PlaceOrderRequest",
    "PlaceOrderResponse",
    "PreviewLocationPayload",
    "RemovedItemResponse",
    "SelectedOptionPayload",
    "MenuItemResponse",
    "MenuOptionResponse",
    "OverrideUpdate",
    "PricingSettingsPayload",
    "RestaurantMenuResponse",
    "RestaurantResponse",
]
