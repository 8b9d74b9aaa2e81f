"""Restaurant and menu API schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field

from foodcart.models.menu import MenuItem, MenuOption
from foodcart.models.restaurant import Restaurant
from foodcart.utils.time import format_minutes


class MenuOptionResponse(BaseModel):
    """Option group with parallel choice names and surcharges."""

    option_header: str
    name: list[str]
    additional_price: list[Decimal]
    required: bool

    @classmethod
    def from_option(cls, option: MenuOption) -> "MenuOptionResponse":
        return cls(
            option_header=option.option_header,
            name=option.names,
            additional_price=option.additional_prices,
            required=option.required,
        )


class MenuItemResponse(BaseModel):
    """Serialized menu item with computed online flag."""

    id: int
    name: str
    description: str
    base_price: Decimal
    image_url: str
    category: str
    online: bool
    options: list[MenuOptionResponse]

    @classmethod
    def from_item(cls, item: MenuItem, online: bool) -> "MenuItemResponse":
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            base_price=item.base_price,
            image_url=item.image_url,
            category=item.category,
            online=online,
            options=[MenuOptionResponse.from_option(option) for option in item.options],
        )


class RestaurantResponse(BaseModel):
    """Serialized restaurant with computed online flag."""

    id: int
    name: str
    location_address: str
    location_city: str
    online: bool
    online_from: str
    online_until: str
    force_online_override: int

    @classmethod
    def from_restaurant(cls, restaurant: Restaurant, online: bool) -> "RestaurantResponse":
        return cls(
            id=restaurant.id,
            name=restaurant.name,
            location_address=restaurant.location_address,
            location_city=restaurant.location_city,
            online=online,
            online_from=format_minutes(restaurant.online_start_minute),
            online_until=format_minutes(restaurant.online_end_minute),
            force_online_override=restaurant.force_online_override,
        )


class RestaurantMenuResponse(BaseModel):
    """Public menu; ``menu`` is omitted while the restaurant is offline."""

    success: bool = True
    restaurant: RestaurantResponse
    menu: list[MenuItemResponse] | None = None
    message: str | None = None


class OverrideUpdate(BaseModel):
    """Manual online override: -1 offline, 0 follow schedule, 1 online."""

    override: int = Field(ge=-1, le=1)

