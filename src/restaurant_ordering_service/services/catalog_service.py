"""Dish catalog management."""

import logging
import uuid
from decimal import Decimal, InvalidOperation

from restaurant_ordering_service.errors import NotFoundError, ValidationError
from restaurant_ordering_service.models.dish_models import Dish
from restaurant_ordering_service.observability.decorators import traced
from restaurant_ordering_service.observability.metrics import record_dish_created
from restaurant_ordering_service.repositories.ordering_repositories import DishRepository
from restaurant_ordering_service.services.image_storage import ImageStorage

logger = logging.getLogger(__name__)


def parse_price(value: str | int | float | Decimal | None) -> Decimal | None:
    """Parse a client-supplied price.

    Args:
        value: Price as received (form fields arrive as strings)

    Returns:
        Decimal price, or None when no price was supplied

    Raises:
        ValidationError: If the value is not a non-negative number
    """
    if value is None or value == "":
        return None

    try:
        price = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValidationError(f"Invalid price: {value}") from e

    if not price.is_finite() or price < 0:
        raise ValidationError(f"Invalid price: {value}")
    return price


class CatalogService:
    """Service for creating, updating and deleting dishes.

    Each dish carries a reference to an uploaded image stored through
    ImageStorage. Dish ids are ``dish_`` followed by a random UUID.
    """

    def __init__(self, dish_repository: DishRepository, image_storage: ImageStorage) -> None:
        """Initialize the CatalogService.

        Args:
            dish_repository: Repository for dish records
            image_storage: Storage for uploaded dish images
        """
        self.dish_repository = dish_repository
        self.image_storage = image_storage

    async def list_dishes(self) -> list[Dish]:
        """Return every dish as stored."""
        return self.dish_repository.list_dishes()

    @traced("catalog.create_dish", attributes={"dish.category": "category"})
    async def create_dish(
        self,
        name: str | None,
        price: str | None,
        description: str | None,
        category: str | None,
        image_filename: str | None,
        image_content: bytes | None,
    ) -> Dish:
        """Add a dish to the catalog.

        Args:
            name: Dish name
            price: Dish price
            description: Dish description
            category: Menu category
            image_filename: Original filename of the uploaded image
            image_content: Uploaded image bytes

        Returns:
            Dish: The created dish

        Raises:
            ValidationError: If any field or the image is missing, or the price is invalid
        """
        parsed_price = parse_price(price)
        if not (name and parsed_price is not None and description and category and image_content):
            raise ValidationError("Missing dish fields")

        dish = Dish(
            id=f"dish_{uuid.uuid4().hex}",
            name=name,
            price=parsed_price,
            description=description,
            image=self.image_storage.save(image_filename, image_content),
            category=category,
        )
        self.dish_repository.add_dish(dish)

        record_dish_created(category)
        logger.info(f"Created dish {dish.id} ({name})")
        return dish

    @traced("catalog.update_dish", attributes={"dish.id": "dish_id"})
    async def update_dish(
        self,
        dish_id: str,
        name: str | None,
        price: str | None,
        description: str | None,
        category: str | None,
        image_filename: str | None = None,
        image_content: bytes | None = None,
    ) -> Dish:
        """Replace the fields of a dish.

        Every field is overwritten, so an omitted field becomes null. The image
        is only replaced when new image content is supplied.

        Returns:
            Dish: The updated dish

        Raises:
            NotFoundError: If no dish has this id
            ValidationError: If the price is not a valid number
        """
        current = self.dish_repository.get_dish(dish_id)
        if current is None:
            raise NotFoundError("Dish", dish_id)

        parsed_price = parse_price(price)
        image = current.image
        if image_content:
            image = self.image_storage.save(image_filename, image_content)

        dish = Dish(
            id=dish_id,
            name=name,
            price=parsed_price,
            description=description,
            image=image,
            category=category,
        )
        if not self.dish_repository.replace_dish(dish):
            raise NotFoundError("Dish", dish_id)

        logger.info(f"Updated dish {dish_id}")
        return dish

    @traced("catalog.delete_dish", attributes={"dish.id": "dish_id"})
    async def delete_dish(self, dish_id: str) -> None:
        """Remove a dish from the catalog.

        Raises:
            NotFoundError: If no dish has this id
        """
        if not self.dish_repository.delete_dish(dish_id):
            raise NotFoundError("Dish", dish_id)

        logger.info(f"Deleted dish {dish_id}")
