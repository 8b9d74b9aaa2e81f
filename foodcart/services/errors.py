"""Checkout error taxonomy shared by the calculators and the cart validator."""

from __future__ import annotations

from enum import Enum

from foodcart.services.delivery_fee import DeliveryFeeResult


class CheckoutError(Exception):
    """Whole-cart failure; ``message`` is safe to show to the customer."""

    code: str = "checkout_error"
    message: str = "Checkout could not be completed"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RestaurantNotFoundError(CheckoutError):
    """Raised when the restaurant is missing or not verified."""

    code = "restaurant_not_found"
    message = "Restaurant not found"


class RestaurantOfflineError(CheckoutError):
    """Raised when the restaurant is not accepting orders right now."""

    code = "restaurant_offline"
    message = "Restaurant is currently offline"


class RouteUnavailableError(CheckoutError):
    """Raised when no routed distance exists between the two points."""

    code = "route_unavailable"
    message = "Unable to calculate delivery route. The selected location may be too far or not accessible."


class SettingsUnavailableError(CheckoutError):
    """Raised when delivery pricing cannot be loaded.

    ``fallback`` is a zero fee the caller may display but must never charge.
    """

    code = "settings_unavailable"
    message = "Failed to calculate delivery fee"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message)
        self.fallback: DeliveryFeeResult = DeliveryFeeResult.zero()


class RemovalReason(str, Enum):
    """Line-level defect codes for a cart line dropped during reconciliation."""

    ITEM_NO_LONGER_EXISTS = "item_no_longer_exists"
    ITEM_UNAVAILABLE = "item_unavailable"
    PRICE_CHANGED = "price_changed"
    REQUIRED_OPTION_MISSING = "required_option_missing"
    OPTION_GROUP_REMOVED = "option_group_removed"
    OPTION_CHOICE_REMOVED = "option_choice_removed"
    OPTION_PRICE_CHANGED = "option_price_changed"


def removal_message(
    reason: RemovalReason,
    *,
    option_header: str | None = None,
    selected: str | None = None,
    missing_headers: list[str] | None = None,
) -> str:
    """Build the customer-facing text for a removal reason."""
    if reason is RemovalReason.ITEM_NO_LONGER_EXISTS:
        return "Item no longer exists in the menu"
    if reason is RemovalReason.ITEM_UNAVAILABLE:
        return "Item is currently unavailable"
    if reason is RemovalReason.PRICE_CHANGED:
        return "Item price has changed"
    if reason is RemovalReason.REQUIRED_OPTION_MISSING:
        return f"Required options are missing: {', '.join(missing_headers or [])}"
    if reason is RemovalReason.OPTION_GROUP_REMOVED:
        return f'Option "{option_header}" is no longer available'
    if reason is RemovalReason.OPTION_CHOICE_REMOVED:
        return f'Option "{option_header}: {selected}" is no longer available'
    return f'Price for option "{option_header}: {selected}" has changed'
