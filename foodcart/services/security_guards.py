"""Centralized role and ownership guards for API operations."""

from __future__ import annotations

from fastapi import HTTPException

from foodcart.models import Restaurant, User


def ensure_role(user: User, allowed_roles: set[str]) -> None:
    """Ensure user role is one of allowed roles."""
    if user.role not in allowed_roles:
        raise HTTPException(status_code=403, detail="Forbidden")


def ensure_checkout_customer(user: User) -> None:
    """Only verified customer accounts may check out."""
    if not user.is_verified:
        raise HTTPException(status_code=401, detail="Please verify your account before placing orders.")
    if user.role != "CUSTOMER":
        raise HTTPException(status_code=401, detail="Only customer accounts can place orders.")


def ensure_can_manage_restaurant(user: User, restaurant: Restaurant) -> None:
    """Admins manage every restaurant; restaurant users only their own."""
    if user.role == "ADMIN":
        return
    if user.role == "RESTAURANT" and user.restaurant_id == restaurant.id:
        return
    raise HTTPException(status_code=403, detail="Forbidden")
