"""Restaurant helpers for menu browsing and checkout."""

from sqlalchemy.orm import Session

from foodcart.models.restaurant import Restaurant
from foodcart.services.availability import RestaurantOverride


def get_restaurant(db: Session, restaurant_id: int) -> Restaurant | None:
    return db.get(Restaurant, restaurant_id)


def get_verified_restaurant(db: Session, restaurant_id: int) -> Restaurant | None:
    """Return restaurant only when it exists and has been verified."""
    return (
        db.query(Restaurant)
        .filter(Restaurant.id == restaurant_id, Restaurant.is_verified.is_(True))
        .first()
    )


def list_verified_restaurants(db: Session) -> list[Restaurant]:
    """Return verified restaurants ordered by name."""
    return (
        db.query(Restaurant)
        .filter(Restaurant.is_verified.is_(True))
        .order_by(Restaurant.name.asc(), Restaurant.id.asc())
        .all()
    )


def set_online_override(db: Session, restaurant: Restaurant, override: RestaurantOverride) -> Restaurant:
    """Persist the manual online override for a restaurant."""
    restaurant.force_online_override = int(override)
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant
