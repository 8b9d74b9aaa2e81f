"""Application models package."""

from foodcart.models.app_setting import AppSetting
from foodcart.models.counter import Counter
from foodcart.models.menu import MenuItem, MenuOption, MenuOptionChoice
from foodcart.models.order import Order, OrderItem, OrderItemOption
from foodcart.models.restaurant import Restaurant
from foodcart.models.user import User

__all__ = [
    "AppSetting", "Counter", "MenuItem", "MenuOption", "MenuOptionChoice", "Order", "OrderItem", "OrderItemOption",
    "Restaurant", "User",
]
