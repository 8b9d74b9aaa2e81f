"""Reconcile a client-submitted cart against canonical restaurant and menu data."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.orm import Session

from foodcart.models.menu import MenuItem, MenuOption
from foodcart.services.availability import compute_menu_online, compute_restaurant_online
from foodcart.services.delivery_fee import (
    DeliveryFeeResult,
    DistanceProvider,
    GeoPoint,
    PricingSource,
    quote_delivery_fee,
)
from foodcart.services.errors import (
    RemovalReason,
    RestaurantNotFoundError,
    RestaurantOfflineError,
    removal_message,
)
from foodcart.services.menu_service import list_menu_items_by_ids
from foodcart.services.restaurant_service import get_verified_restaurant
from foodcart.utils.time import local_minute_of_day

logger = logging.getLogger(__name__)

MESSAGE_VERIFIED: str = "Order verified successfully"
MESSAGE_ITEMS_CHANGED: str = "Some items are no longer available or have been modified"


@dataclass(frozen=True)
class SelectedOption:
    option_header: str
    selected: str
    additional_price: Decimal


@dataclass(frozen=True)
class CartLine:
    """Cart line as asserted by the client; nothing here is trusted yet."""

    menu_item_id: int
    name: str
    base_price: Decimal
    quantity: int
    options: tuple[SelectedOption, ...] = ()


@dataclass(frozen=True)
class RemovedCartLine:
    line: CartLine
    reason: RemovalReason
    message: str


@dataclass(frozen=True)
class OrderLine:
    """Verified line with canonical menu details, ready to persist."""

    menu_item_id: int
    restaurant_id: int
    name: str
    base_price: Decimal
    image_url: str
    category: str
    quantity: int
    options: tuple[SelectedOption, ...] = ()

    @property
    def unit_price(self) -> Decimal:
        return self.base_price + sum((option.additional_price for option in self.options), Decimal("0"))

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class ValidationOutcome:
    """Result of one validation pass.

    ``success`` is True only when every line verified and a fee was computed.
    On line-level rejection ``verified`` still lists the lines that passed, but
    ``order_lines`` stays empty so a partial cart cannot be placed.
    """

    success: bool
    message: str
    restaurant_id: int
    verified: list[CartLine] = field(default_factory=list)
    removed: list[RemovedCartLine] = field(default_factory=list)
    order_lines: list[OrderLine] = field(default_factory=list)
    delivery_fee: DeliveryFeeResult | None = None


def _find_option(item: MenuItem, option_header: str) -> MenuOption | None:
    for option in item.options:
        if option.option_header == option_header:
            return option
    return None


def _missing_required_headers(item: MenuItem, line: CartLine) -> list[str]:
    submitted_headers = {option.option_header for option in line.options}
    return [
        option.option_header
        for option in item.options
        if option.required and option.option_header not in submitted_headers
    ]


def _check_selected_options(item: MenuItem, line: CartLine) -> RemovedCartLine | None:
    """Return the first defect among the submitted options, if any."""
    for submitted in line.options:
        option = _find_option(item, submitted.option_header)
        if option is None:
            reason = RemovalReason.OPTION_GROUP_REMOVED
            return RemovedCartLine(line, reason, removal_message(reason, option_header=submitted.option_header))

        names = option.names
        if submitted.selected not in names:
            reason = RemovalReason.OPTION_CHOICE_REMOVED
            return RemovedCartLine(
                line,
                reason,
                removal_message(reason, option_header=submitted.option_header, selected=submitted.selected),
            )

        canonical_price = option.additional_prices[names.index(submitted.selected)]
        if canonical_price != submitted.additional_price:
            reason = RemovalReason.OPTION_PRICE_CHANGED
            return RemovedCartLine(
                line,
                reason,
                removal_message(reason, option_header=submitted.option_header, selected=submitted.selected),
            )
    return None


def check_cart_line(line: CartLine, item: MenuItem | None, item_online: bool) -> RemovedCartLine | None:
    """Apply the per-line checks in order and stop at the first defect."""
    if item is None:
        reason = RemovalReason.ITEM_NO_LONGER_EXISTS
        return RemovedCartLine(line, reason, removal_message(reason))
    if not item_online:
        reason = RemovalReason.ITEM_UNAVAILABLE
        return RemovedCartLine(line, reason, removal_message(reason))
    if item.base_price != line.base_price:
        reason = RemovalReason.PRICE_CHANGED
        return RemovedCartLine(line, reason, removal_message(reason))

    # Omitted required groups are reported before problems with submitted ones.
    missing = _missing_required_headers(item, line)
    if missing:
        reason = RemovalReason.REQUIRED_OPTION_MISSING
        return RemovedCartLine(line, reason, removal_message(reason, missing_headers=missing))

    return _check_selected_options(item, line)


def _order_line(line: CartLine, item: MenuItem) -> OrderLine:
    return OrderLine(
        menu_item_id=item.id,
        restaurant_id=item.restaurant_id,
        name=item.name,
        base_price=item.base_price,
        image_url=item.image_url,
        category=item.category,
        quantity=line.quantity,
        options=line.options,
    )


def validate_cart(
    db: Session,
    cart_lines: list[CartLine],
    restaurant_id: int,
    delivery_location: GeoPoint,
    *,
    pricing_source: PricingSource,
    distance_provider: DistanceProvider,
    now_minute: int | None = None,
) -> ValidationOutcome:
    """Validate a submitted cart and, when every line verifies, quote delivery.

    Raises ``RestaurantNotFoundError`` or ``RestaurantOfflineError`` for the whole
    cart, and lets ``RouteUnavailableError`` / ``SettingsUnavailableError`` from
    the fee quote propagate. Line-level defects are returned in ``removed``.
    """
    if now_minute is None:
        now_minute = local_minute_of_day()

    restaurant = get_verified_restaurant(db, restaurant_id)
    if restaurant is None:
        logger.info("[CHECKOUT] restaurant_id=%s not found or unverified", restaurant_id)
        raise RestaurantNotFoundError
    if not compute_restaurant_online(restaurant, now_minute):
        logger.info("[CHECKOUT] restaurant_id=%s offline at minute=%s", restaurant_id, now_minute)
        raise RestaurantOfflineError

    items_by_id = list_menu_items_by_ids(db, restaurant.id, (line.menu_item_id for line in cart_lines))
    online_by_id = compute_menu_online(items_by_id.values(), restaurant, now_minute)

    verified: list[CartLine] = []
    removed: list[RemovedCartLine] = []
    order_lines: list[OrderLine] = []
    for line in cart_lines:
        item = items_by_id.get(line.menu_item_id)
        defect = check_cart_line(line, item, online_by_id.get(line.menu_item_id, False))
        if defect is not None:
            removed.append(defect)
            continue
        verified.append(line)
        order_lines.append(_order_line(line, item))

    if removed:
        logger.info(
            "[CHECKOUT] restaurant_id=%s rejected %s of %s lines: %s",
            restaurant.id,
            len(removed),
            len(cart_lines),
            ", ".join(entry.reason.value for entry in removed),
        )
        return ValidationOutcome(
            success=False,
            message=MESSAGE_ITEMS_CHANGED,
            restaurant_id=restaurant.id,
            verified=verified,
            removed=removed,
        )

    delivery_fee = quote_delivery_fee(
        delivery_location,
        restaurant,
        pricing_source=pricing_source,
        distance_provider=distance_provider,
    )
    return ValidationOutcome(
        success=True,
        message=MESSAGE_VERIFIED,
        restaurant_id=restaurant.id,
        verified=verified,
        order_lines=order_lines,
        delivery_fee=delivery_fee,
    )
