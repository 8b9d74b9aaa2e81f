"""Restaurant ORM model."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foodcart.db.base import Base

# -1 forces offline, 1 forces online.
NO_OVERRIDE: int = 0


class Restaurant(Base):
    """Represents a marketplace restaurant and its daily online window."""

    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    order_code: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    location_lat: Mapped[float] = mapped_column(Float, nullable=False)
    location_lng: Mapped[float] = mapped_column(Float, nullable=False)
    location_address: Mapped[str] = mapped_column(String(255), nullable=False)
    location_city: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    online_start_minute: Mapped[int] = mapped_column(Integer, nullable=False)
    online_end_minute: Mapped[int] = mapped_column(Integer, nullable=False)
    force_online_override: Mapped[int] = mapped_column(Integer, nullable=False, default=NO_OVERRIDE)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    menu_items: Mapped[list["MenuItem"]] = relationship(back_populates="restaurant")
