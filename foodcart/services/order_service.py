"""Order creation from a verified cart."""

import logging
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.orm import Session

from foodcart.models.counter import Counter
from foodcart.models.order import ORDER_STATUS_PENDING, PAYMENT_STATUS_UNPAID, Order, OrderItem, OrderItemOption
from foodcart.models.restaurant import Restaurant
from foodcart.services.cart_validation import OrderLine, ValidationOutcome
from foodcart.services.delivery_fee import GeoPoint

logger = logging.getLogger(__name__)

ORDER_NUMBER_SEQUENCE: str = "order_number"


class UnverifiedCartError(Exception):
    """Raised when asked to place an order from an outcome that did not verify."""


def next_sequence(db: Session, name: str) -> int:
    """Increment and return the named counter within the current transaction.

    The increment happens in a single UPDATE so concurrent callers never read
    the same value; the row is created on first use.
    """
    value: int | None = db.scalar(
        update(Counter)
        .where(Counter.name == name)
        .values(value=Counter.value + 1)
        .returning(Counter.value)
        .execution_options(synchronize_session=False)
    )
    if value is None:
        db.add(Counter(name=name, value=1))
        db.flush()
        value = 1
    return value


def order_amount(order_lines: list[OrderLine]) -> Decimal:
    """Sum of (base price + option surcharges) * quantity over all lines."""
    return sum((line.line_total for line in order_lines), Decimal("0"))


def _order_item(line: OrderLine) -> OrderItem:
    return OrderItem(
        menu_item_id=line.menu_item_id,
        restaurant_id=line.restaurant_id,
        name=line.name,
        base_price=line.base_price,
        image_url=line.image_url,
        category=line.category,
        quantity=line.quantity,
        options=[
            OrderItemOption(
                option_header=option.option_header,
                selected=option.selected,
                additional_price=option.additional_price,
            )
            for option in line.options
        ],
    )


def place_order(
    db: Session,
    *,
    customer_id: int,
    outcome: ValidationOutcome,
    dropoff: GeoPoint,
    dropoff_address: str,
    special_instructions: str = "",
    payment_slip_url: str = "",
) -> Order:
    """Write one order for a verified outcome in a single commit."""
    if not outcome.success or outcome.delivery_fee is None or not outcome.order_lines:
        raise UnverifiedCartError("Cart must be verified before placing an order")

    restaurant: Restaurant | None = db.get(Restaurant, outcome.restaurant_id)
    if restaurant is None:
        raise UnverifiedCartError("Restaurant disappeared after verification")

    sequence = next_sequence(db, ORDER_NUMBER_SEQUENCE)
    order = Order(
        order_number=f"{restaurant.order_code}-{sequence}",
        customer_id=customer_id,
        restaurant_id=restaurant.id,
        status=ORDER_STATUS_PENDING,
        pickup_lat=restaurant.location_lat,
        pickup_lng=restaurant.location_lng,
        pickup_address=restaurant.location_address,
        dropoff_lat=dropoff.lat,
        dropoff_lng=dropoff.lng,
        dropoff_address=dropoff_address,
        distance_km=outcome.delivery_fee.distance_km,
        order_amount=order_amount(outcome.order_lines),
        delivery_fee=outcome.delivery_fee.delivery_fee,
        payment_slip_url=payment_slip_url,
        payment_status=PAYMENT_STATUS_UNPAID,
        special_instructions=special_instructions,
        items=[_order_item(line) for line in outcome.order_lines],
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("[ORDERS] created order %s for customer_id=%s", order.order_number, customer_id)
    return order
