"""Place ORM model."""

from typing import Any

from sqlalchemy import JSON, Boolean, Float, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from travelme.engine.db.base import Base


class PlaceRow(Base):
    """Places table - catalog of recommendable places, owned by the app."""

    __tablename__ = "places"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    safety_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    city_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    coordinates: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True
    )  # {latitude: float, longitude: float}
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    opening_hours: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviews: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True
    )  # {count: int, average: float}
    verified: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    def __repr__(self) -> str:
        return f"<PlaceRow(id={self.id!r}, title={self.title!r}, city_id={self.city_id!r})>"
