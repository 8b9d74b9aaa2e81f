"""User service operations."""

from sqlalchemy.orm import Session

from foodcart.models.user import User


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)
