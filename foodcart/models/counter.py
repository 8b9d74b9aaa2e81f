"""Named sequence counters."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from foodcart.db.base import Base


class Counter(Base):
    """Monotonic sequence keyed by name, used for order numbers."""

    __tablename__ = "counters"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
