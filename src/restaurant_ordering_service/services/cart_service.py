"""Cart engine: per-user cart lines merged with the live catalog."""

import logging
from typing import Any

from restaurant_ordering_service.errors import NotFoundError, ValidationError
from restaurant_ordering_service.models.cart_models import CartItem
from restaurant_ordering_service.observability.decorators import traced
from restaurant_ordering_service.observability.metrics import record_cart_item_added
from restaurant_ordering_service.repositories.ordering_repositories import (
    CartRepository,
    DishRepository,
)
from restaurant_ordering_service.services.catalog_service import parse_price

logger = logging.getLogger(__name__)


def parse_quantity(value: str | int | None) -> int:
    """Parse a client-supplied quantity.

    Raises:
        ValidationError: If the value is not an integer of at least 1
    """
    try:
        quantity = int(str(value).strip())
    except ValueError as e:
        raise ValidationError("Invalid quantity") from e

    if quantity < 1:
        raise ValidationError("Invalid quantity")
    return quantity


class CartService:
    """Service for reading and modifying user carts.

    Cart lines are stored as snapshots of the dish at add time. Reads overlay
    the current catalog entry for each line; lines whose dish has since been
    deleted are returned as stored.
    """

    def __init__(self, cart_repository: CartRepository, dish_repository: DishRepository) -> None:
        """Initialize the CartService.

        Args:
            cart_repository: Repository for cart records
            dish_repository: Repository used to resolve current dish data
        """
        self.cart_repository = cart_repository
        self.dish_repository = dish_repository

    @traced("cart.get_cart")
    async def get_cart(self, email: str) -> list[dict[str, Any]]:
        """Return a user's cart lines enriched with current dish data.

        Args:
            email: Cart owner

        Returns:
            List of line dicts; empty list if the user has no cart
        """
        cart = self.cart_repository.get_cart(email)
        if cart is None:
            return []

        dishes = {dish.id: dish for dish in self.dish_repository.list_dishes()}

        lines: list[dict[str, Any]] = []
        for item in cart.items:
            dish = dishes.get(item.dish_id)
            if dish is None:
                lines.append(item.to_record())
            else:
                lines.append({**dish.to_record(), "dishId": dish.id, "quantity": item.quantity})

        return lines

    @traced(
        "cart.add_item", attributes={"dish.id": "dish_id", "cart.quantity": "quantity"}
    )
    async def add_item(
        self,
        email: str,
        dish_id: str | None,
        name: str | None,
        price: str | None,
        image: str | None,
        description: str | None,
        quantity: str | int | None,
    ) -> None:
        """Add a dish to a user's cart, accumulating the quantity of an existing line.

        Raises:
            ValidationError: If a field is missing or the quantity is below 1
        """
        parsed_price = parse_price(price)
        if parsed_price is None or not (dish_id and name and image and description and quantity):
            raise ValidationError("Missing cart item fields")

        item = CartItem(
            dish_id=str(dish_id),
            name=name,
            price=parsed_price,
            image=image,
            description=description,
            quantity=parse_quantity(quantity),
        )
        self.cart_repository.add_item(email, item)

        record_cart_item_added(item.quantity)
        logger.info(f"Added {item.quantity} x {item.dish_id} to cart of {email}")

    @traced("cart.clear_cart")
    async def clear_cart(self, email: str) -> None:
        """Remove a user's whole cart. Succeeds when there is no cart."""
        if self.cart_repository.clear_cart(email):
            logger.info(f"Cleared cart of {email}")

    @traced("cart.remove_item", attributes={"dish.id": "dish_id"})
    async def remove_item(self, email: str, dish_id: str) -> None:
        """Remove a single line from a user's cart.

        Raises:
            NotFoundError: If the user has no cart or no line for the dish
        """
        if self.cart_repository.get_cart(email) is None:
            raise NotFoundError("Cart", email)

        if not self.cart_repository.remove_item(email, dish_id):
            raise NotFoundError("Cart item", dish_id)

        logger.info(f"Removed {dish_id} from cart of {email}")
