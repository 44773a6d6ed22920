"""Unit tests for OrderService."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from restaurant_ordering_service.errors import (
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from restaurant_ordering_service.repositories.json_store import JsonStore
from restaurant_ordering_service.repositories.ordering_repositories import OrderRepository
from restaurant_ordering_service.services.order_service import OrderService


@pytest.mark.unit
class TestOrderService:
    """Test suite for OrderService in its default, permissive mode."""

    @pytest.fixture
    def order_service(self, store: JsonStore) -> OrderService:
        """Create an OrderService backed by a real repository."""
        return OrderService(order_repository=OrderRepository(store))

    @pytest.mark.asyncio
    async def test_create_order(self, order_service: OrderService, store: JsonStore) -> None:
        """Test that an order is created Pending with a timestamp and stored verbatim."""
        before = datetime.now(UTC)

        order = await order_service.create_order(
            email="ana@example.com",
            items=[{"dishId": "dish_abc", "quantity": 2}],
            total=20,
            address="Quito",
            contact="099",
        )

        assert order.id.startswith("ord_")
        assert order.status == "Pending"
        assert before <= order.created_at <= datetime.now(UTC)
        stored = store.load("orders")[0]
        assert stored["items"] == [{"dishId": "dish_abc", "quantity": 2}]
        assert stored["total"] == 20
        assert stored["status"] == "Pending"
        assert stored["createdAt"] == order.created_at.isoformat()

    @pytest.mark.asyncio
    async def test_total_is_not_recomputed(self, order_service: OrderService) -> None:
        """Test that the client-supplied total is kept even if it does not match the items."""
        order = await order_service.create_order(
            email="ana@example.com",
            items=[{"dishId": "dish_abc", "price": "10", "quantity": 2}],
            total="1.00",
        )

        assert order.total == "1.00"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("email", "items", "total"),
        [
            (None, [], 20),
            ("ana@example.com", None, 20),
            ("ana@example.com", {"dishId": "dish_abc"}, 20),
            ("ana@example.com", "dish_abc", 20),
            ("ana@example.com", [], None),
            ("ana@example.com", [], 0),
        ],
    )
    async def test_create_order_invalid(
        self, order_service: OrderService, email: str | None, items: object, total: object
    ) -> None:
        """Test that email, a list of items and a truthy total are required."""
        with pytest.raises(ValidationError):
            await order_service.create_order(email=email, items=items, total=total)

    @pytest.mark.asyncio
    async def test_list_orders_per_user(self, order_service: OrderService) -> None:
        """Test that user listings only include that user's orders."""
        mine = await order_service.create_order("ana@example.com", [{"dishId": "d"}], 20)
        theirs = await order_service.create_order("luis@example.com", [{"dishId": "d"}], 10)

        assert [o.id for o in await order_service.list_orders_for_user("ana@example.com")] == [mine.id]
        assert [o.id for o in await order_service.list_orders_for_user("luis@example.com")] == [theirs.id]
        assert [o.id for o in await order_service.list_all_orders()] == [mine.id, theirs.id]

    @pytest.mark.asyncio
    async def test_set_status_accepts_any_string(self, order_service: OrderService) -> None:
        """Test that no transition validation happens by default."""
        order = await order_service.create_order("ana@example.com", [], 20)

        updated = await order_service.set_status(order.id, "Banana")
        assert updated.status == "Banana"

        back = await order_service.set_status(order.id, "Pending")
        assert back.status == "Pending"

    @pytest.mark.asyncio
    async def test_set_status_not_found(self, order_service: OrderService) -> None:
        """Test updating an unknown order."""
        with pytest.raises(NotFoundError):
            await order_service.set_status("ord_missing", "Delivered")

    @pytest.mark.asyncio
    async def test_set_status_requires_status(self, order_service: OrderService) -> None:
        """Test that a missing status is rejected for an existing order."""
        order = await order_service.create_order("ana@example.com", [], 20)

        with pytest.raises(ValidationError):
            await order_service.set_status(order.id, None)

    @pytest.mark.asyncio
    async def test_set_status_accepts_empty_string(self, order_service: OrderService) -> None:
        """Test that an empty string is stored like any other status."""
        order = await order_service.create_order("ana@example.com", [], 20)

        updated = await order_service.set_status(order.id, "")

        assert updated.status == ""
        assert (await order_service.list_all_orders())[0].status == ""

    @pytest.mark.asyncio
    async def test_missing_status_on_unknown_order_is_not_found(
        self, order_service: OrderService
    ) -> None:
        """Test that the order lookup wins over the missing status."""
        with pytest.raises(NotFoundError):
            await order_service.set_status("ord_missing", None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("total", [{"amount": 20}, [20, "USD"], True])
    async def test_total_is_stored_as_sent(
        self, order_service: OrderService, total: object
    ) -> None:
        """Test that non-numeric totals are kept verbatim."""
        order = await order_service.create_order("ana@example.com", [], total)

        assert order.total == total
        assert (await order_service.list_all_orders())[0].total == total

    @pytest.mark.asyncio
    async def test_default_mode_does_not_read_current_status(self) -> None:
        """Test that the permissive mode goes straight to the update."""
        mock_repo = MagicMock(spec=OrderRepository)
        mock_repo.update_status.return_value = None
        service = OrderService(order_repository=mock_repo)

        with pytest.raises(NotFoundError):
            await service.set_status("ord_1", "Ready")

        mock_repo.get_order.assert_not_called()
        mock_repo.update_status.assert_called_once_with("ord_1", "Ready", check=None)


@pytest.mark.unit
class TestStrictOrderStatus:
    """Test suite for OrderService with the transition table enforced."""

    @pytest.fixture
    def order_service(self, store: JsonStore) -> OrderService:
        """Create an OrderService with strict status transitions."""
        return OrderService(order_repository=OrderRepository(store), strict_status_transitions=True)

    @pytest.mark.asyncio
    async def test_happy_path(self, order_service: OrderService) -> None:
        """Test walking an order through its lifecycle."""
        order = await order_service.create_order("ana@example.com", [], 20)

        for status in ["Preparing", "Ready", "Delivered"]:
            order = await order_service.set_status(order.id, status)

        assert order.status == "Delivered"

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, order_service: OrderService) -> None:
        """Test that statuses outside the closed set are rejected."""
        order = await order_service.create_order("ana@example.com", [], 20)

        with pytest.raises(InvalidStatusTransitionError, match="Unknown order status"):
            await order_service.set_status(order.id, "Banana")

    @pytest.mark.asyncio
    async def test_backward_transition_rejected(self, order_service: OrderService) -> None:
        """Test that a terminal order cannot move again."""
        order = await order_service.create_order("ana@example.com", [], 20)
        await order_service.set_status(order.id, "Cancelled")

        with pytest.raises(InvalidStatusTransitionError, match="from Cancelled to Pending"):
            await order_service.set_status(order.id, "Pending")

    @pytest.mark.asyncio
    async def test_skipping_states_rejected(self, order_service: OrderService) -> None:
        """Test that Pending cannot jump straight to Delivered."""
        order = await order_service.create_order("ana@example.com", [], 20)

        with pytest.raises(InvalidStatusTransitionError):
            await order_service.set_status(order.id, "Delivered")

    @pytest.mark.asyncio
    async def test_same_status_is_allowed(self, order_service: OrderService) -> None:
        """Test that re-applying the current status is a no-op."""
        order = await order_service.create_order("ana@example.com", [], 20)

        updated = await order_service.set_status(order.id, "Pending")

        assert updated.status == "Pending"

    @pytest.mark.asyncio
    async def test_not_found(self, order_service: OrderService) -> None:
        """Test that unknown ids are reported before transition checks."""
        with pytest.raises(NotFoundError):
            await order_service.set_status("ord_missing", "Banana")

    @pytest.mark.asyncio
    async def test_transition_is_checked_inside_the_update(self) -> None:
        """Test that the guard runs in the repository write, not in a separate read."""
        mock_repo = MagicMock(spec=OrderRepository)
        mock_repo.update_status.side_effect = lambda order_id, status, check: check(
            "Delivered", status
        )
        service = OrderService(order_repository=mock_repo, strict_status_transitions=True)

        with pytest.raises(InvalidStatusTransitionError, match="from Delivered to Ready"):
            await service.set_status("ord_1", "Ready")

        mock_repo.get_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_stale_status_cannot_be_overwritten(
        self, order_service: OrderService, store: JsonStore
    ) -> None:
        """Test that a rejected transition leaves the stored order untouched."""
        order = await order_service.create_order("ana@example.com", [], 20)
        await order_service.set_status(order.id, "Cancelled")

        with pytest.raises(InvalidStatusTransitionError):
            await order_service.set_status(order.id, "Preparing")

        assert store.load("orders")[0]["status"] == "Cancelled"
