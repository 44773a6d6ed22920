"""Order ledger: order placement and status tracking."""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from restaurant_ordering_service.errors import (
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from restaurant_ordering_service.models.order_models import (
    ORDER_STATUS_TRANSITIONS,
    Order,
    OrderStatusEnum,
)
from restaurant_ordering_service.observability.decorators import traced
from restaurant_ordering_service.observability.metrics import (
    record_order_created,
    record_order_status_change,
)
from restaurant_ordering_service.repositories.ordering_repositories import OrderRepository

logger = logging.getLogger(__name__)


class OrderService:
    """Service for placing orders and updating their status.

    Orders store the items and total exactly as sent by the client. Status
    updates accept any string unless ``strict_status_transitions`` is set, in
    which case only OrderStatusEnum values reachable through
    ORDER_STATUS_TRANSITIONS are allowed.
    """

    def __init__(
        self, order_repository: OrderRepository, strict_status_transitions: bool = False
    ) -> None:
        """Initialize the OrderService.

        Args:
            order_repository: Repository for order records
            strict_status_transitions: Enforce the closed status set and transition table
        """
        self.order_repository = order_repository
        self.strict_status_transitions = strict_status_transitions

    @traced("orders.create_order")
    async def create_order(
        self,
        email: str | None,
        items: Any,
        total: Any,
        address: str | None = None,
        contact: str | None = None,
    ) -> Order:
        """Place an order from a cart snapshot.

        Args:
            email: Ordering user
            items: Ordered lines, stored verbatim
            total: Order total, stored verbatim
            address: Delivery address
            contact: Contact detail

        Returns:
            Order: The created order with status Pending

        Raises:
            ValidationError: If email is missing, items is not a list or total is falsy
        """
        if not email or not isinstance(items, list) or not total:
            raise ValidationError("Incomplete order data")

        order = Order(
            id=f"ord_{uuid.uuid4().hex}",
            email=email,
            items=items,
            total=total,
            address=address,
            contact=contact,
            status=OrderStatusEnum.PENDING.value,
            created_at=datetime.now(UTC),
        )
        self.order_repository.add_order(order)

        record_order_created()
        logger.info(f"Created order {order.id} for {email} with {len(items)} items")
        return order

    async def list_orders_for_user(self, email: str) -> list[Order]:
        """List the orders placed by one user."""
        return self.order_repository.list_orders_for_email(email)

    async def list_all_orders(self) -> list[Order]:
        """List every order."""
        return self.order_repository.list_orders()

    @traced(
        "orders.set_status", attributes={"order.id": "order_id", "order.status": "status"}
    )
    async def set_status(self, order_id: str, status: str | None) -> Order:
        """Overwrite the status of an order.

        Args:
            order_id: Order identifier
            status: New status

        Returns:
            Order: The updated order

        Raises:
            NotFoundError: If no order has this id
            ValidationError: If the order exists but no status was sent
            InvalidStatusTransitionError: In strict mode, for unknown or illegal transitions
        """
        if status is None:
            if self.order_repository.get_order(order_id) is None:
                raise NotFoundError("Order", order_id)
            raise ValidationError("Status is required")

        check = self._check_transition if self.strict_status_transitions else None
        order = self.order_repository.update_status(order_id, status, check=check)
        if order is None:
            raise NotFoundError("Order", order_id)

        record_order_status_change(status)
        logger.info(f"Order {order_id} status set to {status}")
        return order

    def _check_transition(self, current: str, target: str) -> None:
        try:
            target_status = OrderStatusEnum(target)
        except ValueError as e:
            raise InvalidStatusTransitionError(f"Unknown order status: {target}") from e

        if current == target_status.value:
            return

        try:
            current_status = OrderStatusEnum(current)
        except ValueError as e:
            raise InvalidStatusTransitionError(f"Order has unknown status: {current}") from e

        if target_status not in ORDER_STATUS_TRANSITIONS[current_status]:
            raise InvalidStatusTransitionError(
                f"Cannot change order status from {current_status.value} to {target_status.value}"
            )
