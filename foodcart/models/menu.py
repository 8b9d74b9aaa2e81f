"""Menu ORM models."""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foodcart.db.base import Base


class MenuItem(Base):
    """Dish offered by one restaurant."""

    __tablename__ = "menu_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(ForeignKey("restaurants.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    image_url: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    category: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # True means the item follows its own online window instead of the restaurant's.
    force_online_override: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    online_start_minute: Mapped[int | None] = mapped_column(Integer, nullable=True)
    online_end_minute: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    restaurant: Mapped["Restaurant"] = relationship(back_populates="menu_items")
    options: Mapped[list["MenuOption"]] = relationship(
        back_populates="menu_item",
        cascade="all, delete-orphan",
        order_by="MenuOption.position",
    )


class MenuOption(Base):
    """Named option group on a menu item, e.g. "Size"."""

    __tablename__ = "menu_options"
    __table_args__ = (
        UniqueConstraint("menu_item_id", "option_header", name="uq_menu_option_item_header"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    menu_item_id: Mapped[int] = mapped_column(ForeignKey("menu_items.id"), nullable=False, index=True)
    option_header: Mapped[str] = mapped_column(String(255), nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    menu_item: Mapped[MenuItem] = relationship(back_populates="options")
    choices: Mapped[list["MenuOptionChoice"]] = relationship(
        back_populates="option",
        cascade="all, delete-orphan",
        order_by="MenuOptionChoice.position",
    )

    @property
    def names(self) -> list[str]:
        return [choice.name for choice in self.choices]

    @property
    def additional_prices(self) -> list[Decimal]:
        return [choice.additional_price for choice in self.choices]


class MenuOptionChoice(Base):
    """One selectable entry of an option group with its surcharge."""

    __tablename__ = "menu_option_choices"

    id: Mapped[int] = mapped_column(primary_key=True)
    option_id: Mapped[int] = mapped_column(ForeignKey("menu_options.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    additional_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    option: Mapped[MenuOption] = relationship(back_populates="choices")
