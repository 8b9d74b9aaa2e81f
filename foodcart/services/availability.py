"""Online/offline status for restaurants and menu items.

A restaurant is online when it is verified and either forced online or inside its
daily window. Menu items inherit the restaurant's status unless they opt into
their own window, and an item is never orderable while its restaurant is offline.
All functions take the current minute as an argument so one validation pass
evaluates every window against the same clock reading.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from foodcart.models.menu import MenuItem
from foodcart.models.restaurant import Restaurant
from foodcart.utils.time import MINUTES_PER_DAY


class RestaurantOverride(IntEnum):
    """Tri-state manual override replacing the restaurant's schedule decision."""

    FORCE_OFFLINE = -1
    NONE = 0
    FORCE_ONLINE = 1


@dataclass(frozen=True)
class TimeWindow:
    """Daily recurring interval in minutes since midnight, end exclusive.

    ``start > end`` wraps past midnight; ``start == end`` is closed all day.
    """

    start_minute: int
    end_minute: int

    def __post_init__(self) -> None:
        for value in (self.start_minute, self.end_minute):
            if not 0 <= value < MINUTES_PER_DAY:
                raise ValueError(f"window minute out of range: {value}")

    def contains(self, minute: int) -> bool:
        if self.start_minute == self.end_minute:
            return False
        if self.start_minute < self.end_minute:
            return self.start_minute <= minute < self.end_minute
        return minute >= self.start_minute or minute < self.end_minute


def restaurant_window(restaurant: Restaurant) -> TimeWindow:
    return TimeWindow(restaurant.online_start_minute, restaurant.online_end_minute)


def item_window(item: MenuItem) -> TimeWindow | None:
    if item.online_start_minute is None or item.online_end_minute is None:
        return None
    return TimeWindow(item.online_start_minute, item.online_end_minute)


def compute_restaurant_online(restaurant: Restaurant, now_minute: int) -> bool:
    """Return whether the restaurant accepts orders at ``now_minute``."""
    if not restaurant.is_verified:
        return False
    override = RestaurantOverride(restaurant.force_online_override)
    if override is RestaurantOverride.FORCE_OFFLINE:
        return False
    if override is RestaurantOverride.FORCE_ONLINE:
        return True
    return restaurant_window(restaurant).contains(now_minute)


def compute_menu_item_online(
    item: MenuItem,
    restaurant: Restaurant,
    now_minute: int,
    restaurant_online: bool | None = None,
) -> bool:
    """Return whether the item can be ordered at ``now_minute``.

    Pass ``restaurant_online`` when it is already known for this pass.
    """
    if not item.available:
        return False
    if restaurant_online is None:
        restaurant_online = compute_restaurant_online(restaurant, now_minute)
    if not item.force_online_override:
        return restaurant_online

    window = item_window(item)
    if window is None:
        # Override without a window of its own falls back to the restaurant.
        return restaurant_online
    return restaurant_online and window.contains(now_minute)


def compute_menu_online(
    items: Iterable[MenuItem],
    restaurant: Restaurant,
    now_minute: int,
) -> dict[int, bool]:
    """Map item id to online status, evaluating the restaurant once."""
    restaurant_online = compute_restaurant_online(restaurant, now_minute)
    return {
        item.id: compute_menu_item_online(item, restaurant, now_minute, restaurant_online=restaurant_online)
        for item in items
    }
