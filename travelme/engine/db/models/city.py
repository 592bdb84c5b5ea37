"""City ORM model."""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from travelme.engine.db.base import Base


class CityRow(Base):
    """Cities table - name to id lookup."""

    __tablename__ = "cities"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<CityRow(id={self.id!r}, name={self.name!r})>"
