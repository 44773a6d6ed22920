"""Order ledger models.

Status is an open string by default. ``OrderStatusEnum`` and
``ORDER_STATUS_TRANSITIONS`` define the closed set used when strict status
checking is enabled.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OrderStatusEnum(str, Enum):
    """Known order statuses."""

    PENDING = "Pending"
    PREPARING = "Preparing"
    READY = "Ready"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


ORDER_STATUS_TRANSITIONS: dict[OrderStatusEnum, frozenset[OrderStatusEnum]] = {
    OrderStatusEnum.PENDING: frozenset({OrderStatusEnum.PREPARING, OrderStatusEnum.CANCELLED}),
    OrderStatusEnum.PREPARING: frozenset({OrderStatusEnum.READY, OrderStatusEnum.CANCELLED}),
    OrderStatusEnum.READY: frozenset({OrderStatusEnum.DELIVERED}),
    OrderStatusEnum.DELIVERED: frozenset(),
    OrderStatusEnum.CANCELLED: frozenset(),
}


class Order(BaseModel):
    """Placed order.

    ``items`` and ``total`` are stored exactly as the client supplied them;
    they are not recomputed against the catalog.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique order identifier")
    email: str = Field(..., description="Email of the ordering user")
    items: list[Any] = Field(default_factory=list, description="Snapshot of the ordered lines")
    total: Any = Field(..., description="Order total as supplied")
    address: str | None = Field(None, description="Delivery address")
    contact: str | None = Field(None, description="Contact detail")
    status: str = Field(default=OrderStatusEnum.PENDING.value, description="Current status")
    created_at: datetime | None = Field(
        None, alias="createdAt", description="Creation timestamp (UTC), None on old records"
    )

    def to_record(self) -> dict[str, Any]:
        """Convert to the stored JSON record.

        Returns:
            dict: JSON-compatible representation
        """
        return {
            "id": self.id,
            "email": self.email,
            "items": self.items,
            "total": self.total,
            "address": self.address,
            "contact": self.contact,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Order":
        """Create an Order from a stored record.

        Legacy records carry the timestamp as ``date`` or have none at all.

        Args:
            record: Stored JSON record

        Returns:
            Order: Parsed model instance
        """
        created_at = record.get("createdAt", record.get("date"))
        return cls(
            id=str(record["id"]),
            email=record["email"],
            items=record.get("items", []),
            total=record.get("total"),
            address=record.get("address"),
            contact=record.get("contact"),
            status=record.get("status", OrderStatusEnum.PENDING.value),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )


class CreateOrderRequest(BaseModel):
    """Order placement payload. ``items`` is left untyped so a non-list can be
    reported as a validation error by the service."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    email: str | None = None
    items: Any = None
    total: Any = None
    address: str | None = None
    contact: str | None = None


class StatusUpdateRequest(BaseModel):
    """Payload for changing an order status."""

    status: str | None = None


class OrderResponse(BaseModel):
    """Response for order create/status update."""

    message: str
    order: Order
