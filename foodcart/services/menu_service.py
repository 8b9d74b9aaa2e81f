"""Menu query helpers shared by the public menu and checkout."""

from collections.abc import Iterable

from sqlalchemy.orm import Session, selectinload

from foodcart.models.menu import MenuItem, MenuOption


def _with_options(query):
    return query.options(selectinload(MenuItem.options).selectinload(MenuOption.choices))


def list_menu_items_by_ids(db: Session, restaurant_id: int, menu_item_ids: Iterable[int]) -> dict[int, MenuItem]:
    """Return menu items keyed by id, restricted to one restaurant."""
    ids: set[int] = set(menu_item_ids)
    if not ids:
        return {}
    items: list[MenuItem] = (
        _with_options(db.query(MenuItem))
        .filter(MenuItem.id.in_(ids), MenuItem.restaurant_id == restaurant_id)
        .all()
    )
    return {item.id: item for item in items}


def list_available_menu_items(db: Session, restaurant_id: int) -> list[MenuItem]:
    """Return items with the manual availability toggle on, by category then name."""
    return (
        _with_options(db.query(MenuItem))
        .filter(MenuItem.restaurant_id == restaurant_id, MenuItem.available.is_(True))
        .order_by(MenuItem.category.asc(), MenuItem.name.asc())
        .all()
    )
