"""Shopping cart models.

A cart holds denormalized snapshots of dishes taken at add time. Lines are
identified by ``dishId``; adding an existing dish accumulates its quantity.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CartItem(BaseModel):
    """One cart line: dish snapshot plus quantity."""

    model_config = ConfigDict(populate_by_name=True)

    dish_id: str = Field(..., alias="dishId", description="Identifier of the dish")
    name: str = Field(..., description="Dish name at add time")
    price: Decimal = Field(..., description="Dish price at add time")
    image: str = Field(..., description="Dish image at add time")
    description: str = Field(..., description="Dish description at add time")
    quantity: int = Field(..., description="Number of portions", ge=1)

    def to_record(self) -> dict[str, Any]:
        """Convert to the stored JSON record."""
        return {
            "dishId": self.dish_id,
            "name": self.name,
            "price": str(self.price),
            "image": self.image,
            "description": self.description,
            "quantity": self.quantity,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "CartItem":
        """Create a CartItem from a stored record."""
        return cls(
            dish_id=str(record["dishId"]),
            name=record["name"],
            price=Decimal(str(record["price"])),
            image=record["image"],
            description=record["description"],
            quantity=int(record["quantity"]),
        )


class Cart(BaseModel):
    """All cart lines of one user."""

    email: str
    items: list[CartItem] = Field(default_factory=list)

    def find_item(self, dish_id: str) -> CartItem | None:
        """Return the line for a dish, if present."""
        for item in self.items:
            if item.dish_id == dish_id:
                return item
        return None

    def add_item(self, item: CartItem) -> CartItem:
        """Merge a line into the cart.

        Args:
            item: Line to add

        Returns:
            CartItem: The line now holding the dish (existing or appended)
        """
        existing = self.find_item(item.dish_id)
        if existing is not None:
            existing.quantity += item.quantity
            return existing

        self.items.append(item)
        return item

    def remove_item(self, dish_id: str) -> bool:
        """Drop the line for a dish.

        Returns:
            bool: True if a line was removed, False if none matched
        """
        remaining = [item for item in self.items if item.dish_id != dish_id]
        removed = len(remaining) != len(self.items)
        self.items = remaining
        return removed

    def to_record(self) -> dict[str, Any]:
        """Convert to the stored JSON record."""
        return {"email": self.email, "items": [item.to_record() for item in self.items]}

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Cart":
        """Create a Cart from a stored record."""
        return cls(
            email=record["email"],
            items=[CartItem.from_record(item) for item in record.get("items", [])],
        )


class AddCartItemRequest(BaseModel):
    """Payload for adding a dish to a cart. Presence is checked by the service."""

    model_config = ConfigDict(coerce_numbers_to_str=True, populate_by_name=True)

    dish_id: str | None = Field(None, alias="dishId")
    name: str | None = None
    price: str | None = None
    image: str | None = None
    description: str | None = None
    quantity: str | None = None
