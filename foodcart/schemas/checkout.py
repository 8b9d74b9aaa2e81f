"""Checkout request and response schemas.

Cart payloads are client assertions; they are decoded here into the validator's
``CartLine`` type and checked against canonical data before anything is trusted.
"""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from foodcart.services.cart_validation import CartLine, RemovedCartLine, SelectedOption
from foodcart.services.delivery_fee import DeliveryFeeResult, GeoPoint


class GeoPointPayload(BaseModel):
    """Coordinates in decimal degrees."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


class DeliveryLocationPayload(GeoPointPayload):
    """Dropoff point with the address the rider will see."""

    address: str = Field(min_length=10, max_length=200)


class PreviewLocationPayload(GeoPointPayload):
    """Dropoff point for a fee preview; the address is optional here."""

    address: str | None = Field(default=None, max_length=200)


class SelectedOptionPayload(BaseModel):
    """Option choice submitted with a cart line."""

    model_config = ConfigDict(extra="ignore")

    option_header: str
    selected: str
    additional_price: Decimal

    def to_selected_option(self) -> SelectedOption:
        return SelectedOption(
            option_header=self.option_header,
            selected=self.selected,
            additional_price=self.additional_price,
        )

    @classmethod
    def from_selected_option(cls, option: SelectedOption) -> "SelectedOptionPayload":
        return cls(
            option_header=option.option_header,
            selected=option.selected,
            additional_price=option.additional_price,
        )


class CartLinePayload(BaseModel):
    """Single cart line payload."""

    model_config = ConfigDict(extra="ignore")

    menu_item_id: int
    name: str
    base_price: Decimal
    quantity: int = Field(default=1, ge=1)
    options: list[SelectedOptionPayload] = Field(default_factory=list)

    def to_cart_line(self) -> CartLine:
        return CartLine(
            menu_item_id=self.menu_item_id,
            name=self.name,
            base_price=self.base_price,
            quantity=self.quantity,
            options=tuple(option.to_selected_option() for option in self.options),
        )

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "CartLinePayload":
        return cls(
            menu_item_id=line.menu_item_id,
            name=line.name,
            base_price=line.base_price,
            quantity=line.quantity,
            options=[SelectedOptionPayload.from_selected_option(option) for option in line.options],
        )


class CheckoutRequest(BaseModel):
    """Cart submitted for verification."""

    restaurant_id: int
    items: list[CartLinePayload] = Field(min_length=1)
    delivery_location: DeliveryLocationPayload
    special_instructions: str | None = Field(default=None, max_length=500)

    def cart_lines(self) -> list[CartLine]:
        return [item.to_cart_line() for item in self.items]


class PlaceOrderRequest(CheckoutRequest):
    """Cart submitted for order placement."""

    payment_slip_url: str | None = Field(default=None, max_length=512)


class RemovedItemResponse(CartLinePayload):
    """Cart line dropped during verification with the reason to show."""

    reason: str
    reason_code: str

    @classmethod
    def from_removed(cls, removed: RemovedCartLine) -> "RemovedItemResponse":
        line = CartLinePayload.from_cart_line(removed.line)
        return cls(**line.model_dump(), reason=removed.message, reason_code=removed.reason.value)


class DeliveryFeeDetails(BaseModel):
    """Serialized delivery fee result."""

    delivery_fee: Decimal
    base_fee: Decimal
    distance_km: Decimal

    @classmethod
    def from_result(cls, result: DeliveryFeeResult) -> "DeliveryFeeDetails":
        return cls(delivery_fee=result.delivery_fee, base_fee=result.base_fee, distance_km=result.distance_km)


class CheckoutVerifiedResponse(BaseModel):
    """Every line verified; fee attached."""

    success: Literal[True] = True
    message: str
    verified_items: list[CartLinePayload]
    delivery_fee_details: DeliveryFeeDetails
    restaurant_id: int


class CheckoutRejectedResponse(BaseModel):
    """Whole-cart or line-level rejection."""

    success: Literal[False] = False
    message: str
    removed_items: list[RemovedItemResponse] | None = None


class DeliveryFeeRequest(BaseModel):
    """Fee preview for a restaurant and dropoff point."""

    restaurant_id: int
    delivery_location: PreviewLocationPayload


class DeliveryFeeResponse(DeliveryFeeDetails):
    """Fee preview result."""

    success: bool = True


class PlaceOrderResponse(BaseModel):
    """Created order reference."""

    success: Literal[True] = True
    message: str
    order_number: str
