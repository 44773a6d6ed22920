"""Dish catalog models."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


class Dish(BaseModel):
    """Catalog dish.

    Only ``id`` is guaranteed. An update replaces every other field, so a
    field omitted from an update request is stored as null.
    """

    id: str = Field(..., description="Unique dish identifier")
    name: str | None = Field(None, description="Dish name")
    price: Decimal | None = Field(None, description="Dish price", ge=0)
    description: str | None = Field(None, description="Dish description")
    image: str | None = Field(None, description="Path of the uploaded image, e.g. /uploads/x.png")
    category: str | None = Field(None, description="Menu category")

    def to_record(self) -> dict[str, Any]:
        """Convert to the stored JSON record.

        Returns:
            dict: JSON-compatible representation, price as a string
        """
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price) if self.price is not None else None,
            "description": self.description,
            "image": self.image,
            "category": self.category,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Dish":
        """Create a Dish from a stored record.

        Args:
            record: Stored JSON record

        Returns:
            Dish: Parsed model instance
        """
        price = record.get("price")
        return cls(
            id=str(record["id"]),
            name=record.get("name"),
            price=Decimal(str(price)) if price is not None else None,
            description=record.get("description"),
            image=record.get("image"),
            category=record.get("category"),
        )


class DishResponse(BaseModel):
    """Response for dish create/update."""

    message: str
    dish: Dish
