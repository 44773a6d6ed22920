"""Unit tests for CatalogService."""

from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from restaurant_ordering_service.errors import NotFoundError, ValidationError
from restaurant_ordering_service.repositories.json_store import JsonStore
from restaurant_ordering_service.repositories.ordering_repositories import DishRepository
from restaurant_ordering_service.services.catalog_service import CatalogService, parse_price
from restaurant_ordering_service.services.image_storage import ImageStorage


@pytest.mark.unit
class TestParsePrice:
    """Test suite for price parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("12.50", Decimal("12.50")), (" 3 ", Decimal("3")), (7, Decimal("7")), ("0", Decimal("0"))],
    )
    def test_valid_prices(self, value: str | int, expected: Decimal) -> None:
        """Test accepted price formats."""
        assert parse_price(value) == expected

    @pytest.mark.parametrize("value", [None, ""])
    def test_absent_price(self, value: str | None) -> None:
        """Test that absent prices parse to None."""
        assert parse_price(value) is None

    @pytest.mark.parametrize("value", ["abc", "-1", "NaN", "Infinity"])
    def test_invalid_prices(self, value: str) -> None:
        """Test that non-numeric and negative prices are rejected."""
        with pytest.raises(ValidationError, match="Invalid price"):
            parse_price(value)


@pytest.mark.unit
class TestCatalogService:
    """Test suite for CatalogService."""

    @pytest.fixture
    def image_storage(self, upload_dir: Path) -> ImageStorage:
        """Create image storage in a temporary directory."""
        return ImageStorage(upload_dir)

    @pytest.fixture
    def catalog_service(self, store: JsonStore, image_storage: ImageStorage) -> CatalogService:
        """Create a CatalogService backed by real storage."""
        return CatalogService(dish_repository=DishRepository(store), image_storage=image_storage)

    async def create_sample(self, catalog_service: CatalogService):
        return await catalog_service.create_dish(
            name="Llapingachos",
            price="6.25",
            description="Potato patties with peanut sauce",
            category="Mains",
            image_filename="llapingachos.jpg",
            image_content=b"jpeg-bytes",
        )

    @pytest.mark.asyncio
    async def test_create_dish(
        self, catalog_service: CatalogService, store: JsonStore, upload_dir: Path
    ) -> None:
        """Test that a dish is stored with a generated id and an uploaded image."""
        dish = await self.create_sample(catalog_service)

        assert dish.id.startswith("dish_")
        assert dish.price == Decimal("6.25")
        assert dish.image.startswith("/uploads/") and dish.image.endswith(".jpg")
        assert (upload_dir / dish.image.removeprefix("/uploads/")).read_bytes() == b"jpeg-bytes"
        assert store.load("dishes") == [dish.to_record()]

    @pytest.mark.asyncio
    async def test_create_dish_ids_are_unique(self, catalog_service: CatalogService) -> None:
        """Test that consecutive dishes get distinct ids."""
        first = await self.create_sample(catalog_service)
        second = await self.create_sample(catalog_service)

        assert first.id != second.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["name", "price", "description", "category", "image_content"])
    async def test_create_dish_missing_field(
        self, catalog_service: CatalogService, upload_dir: Path, missing: str
    ) -> None:
        """Test that every field and the image are required, and nothing is stored."""
        kwargs = {
            "name": "Bolón",
            "price": "3",
            "description": "Green plantain ball",
            "category": "Breakfast",
            "image_filename": "bolon.png",
            "image_content": b"png",
        }
        kwargs[missing] = None

        with pytest.raises(ValidationError):
            await catalog_service.create_dish(**kwargs)

        assert await catalog_service.list_dishes() == []
        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_update_dish_keeps_image_when_none_uploaded(
        self, catalog_service: CatalogService
    ) -> None:
        """Test that the previous image reference survives an update without upload."""
        dish = await self.create_sample(catalog_service)

        updated = await catalog_service.update_dish(
            dish.id, name="Llapingachos XL", price="8", description="Bigger", category="Mains"
        )

        assert updated.image == dish.image
        assert updated.name == "Llapingachos XL"
        assert (await catalog_service.list_dishes())[0] == updated

    @pytest.mark.asyncio
    async def test_update_dish_replaces_image(self, catalog_service: CatalogService) -> None:
        """Test that a new upload replaces the image reference."""
        dish = await self.create_sample(catalog_service)

        updated = await catalog_service.update_dish(
            dish.id,
            name=dish.name,
            price="6.25",
            description=dish.description,
            category=dish.category,
            image_filename="new.png",
            image_content=b"new-png",
        )

        assert updated.image != dish.image
        assert updated.image.endswith(".png")

    @pytest.mark.asyncio
    async def test_update_dish_nulls_omitted_fields(self, catalog_service: CatalogService) -> None:
        """Test that fields absent from the update are overwritten with null."""
        dish = await self.create_sample(catalog_service)

        updated = await catalog_service.update_dish(
            dish.id, name="Only name", price=None, description=None, category=None
        )

        assert updated.price is None
        assert updated.description is None
        assert updated.category is None
        assert updated.image == dish.image

    @pytest.mark.asyncio
    async def test_update_dish_not_found(self, catalog_service: CatalogService, upload_dir: Path) -> None:
        """Test that updating an unknown dish fails without storing the upload."""
        with pytest.raises(NotFoundError):
            await catalog_service.update_dish(
                "dish_missing",
                name="x",
                price="1",
                description="x",
                category="x",
                image_filename="x.png",
                image_content=b"x",
            )

        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_delete_dish(self, catalog_service: CatalogService) -> None:
        """Test deleting a dish and deleting it again."""
        dish = await self.create_sample(catalog_service)

        await catalog_service.delete_dish(dish.id)

        assert await catalog_service.list_dishes() == []
        with pytest.raises(NotFoundError):
            await catalog_service.delete_dish(dish.id)

    @pytest.mark.asyncio
    async def test_create_dish_does_not_store_image_on_invalid_price(self, store: JsonStore) -> None:
        """Test that validation happens before the image is written."""
        mock_storage = MagicMock(spec=ImageStorage)
        service = CatalogService(dish_repository=DishRepository(store), image_storage=mock_storage)

        with pytest.raises(ValidationError):
            await service.create_dish("Bolón", "cheap", "desc", "Breakfast", "b.png", b"png")

        mock_storage.save.assert_not_called()
