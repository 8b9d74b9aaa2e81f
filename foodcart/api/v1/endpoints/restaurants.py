"""Public restaurant listing and menu endpoints plus the online override action."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from foodcart.core.security import get_current_user
from foodcart.db.session import get_db
from foodcart.models.user import User
from foodcart.schemas.menu import MenuItemResponse, OverrideUpdate, RestaurantMenuResponse, RestaurantResponse
from foodcart.services.availability import RestaurantOverride, compute_menu_online, compute_restaurant_online
from foodcart.services.menu_service import list_available_menu_items
from foodcart.services.restaurant_service import (
    get_restaurant,
    get_verified_restaurant,
    list_verified_restaurants,
    set_online_override,
)
from foodcart.services.security_guards import ensure_can_manage_restaurant
from foodcart.utils.time import local_minute_of_day

router: APIRouter = APIRouter()


@router.get("", response_model=list[RestaurantResponse])
def list_restaurants(db: Session = Depends(get_db)) -> list[RestaurantResponse]:
    """Return verified restaurants with their current online flag."""
    now_minute = local_minute_of_day()
    return [
        RestaurantResponse.from_restaurant(restaurant, compute_restaurant_online(restaurant, now_minute))
        for restaurant in list_verified_restaurants(db)
    ]


@router.get("/{restaurant_id}/menu", response_model=RestaurantMenuResponse, response_model_exclude_none=True)
def get_restaurant_menu(restaurant_id: int, db: Session = Depends(get_db)) -> RestaurantMenuResponse:
    """Return the orderable menu, or only the restaurant while it is offline."""
    restaurant = get_verified_restaurant(db, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found or not verified.")

    now_minute = local_minute_of_day()
    online = compute_restaurant_online(restaurant, now_minute)
    restaurant_payload = RestaurantResponse.from_restaurant(restaurant, online)
    if not online:
        return RestaurantMenuResponse(restaurant=restaurant_payload, message="Restaurant is currently offline.")

    items = list_available_menu_items(db, restaurant.id)
    online_by_id = compute_menu_online(items, restaurant, now_minute)
    menu = [MenuItemResponse.from_item(item, True) for item in items if online_by_id[item.id]]
    if not menu:
        return RestaurantMenuResponse(
            restaurant=restaurant_payload,
            menu=[],
            message="Restaurant has no available menu items.",
        )
    return RestaurantMenuResponse(restaurant=restaurant_payload, menu=menu)


@router.patch("/{restaurant_id}/override", response_model=RestaurantResponse)
def update_online_override(
    restaurant_id: int,
    payload: OverrideUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RestaurantResponse:
    """Force a restaurant online or offline, or hand control back to its schedule."""
    restaurant = get_restaurant(db, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    ensure_can_manage_restaurant(current_user, restaurant)

    restaurant = set_online_override(db, restaurant, RestaurantOverride(payload.override))
    return RestaurantResponse.from_restaurant(restaurant, compute_restaurant_online(restaurant, local_minute_of_day()))
