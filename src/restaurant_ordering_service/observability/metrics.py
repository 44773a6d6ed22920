"""Custom metrics for the ordering service."""

from opentelemetry import metrics

meter = metrics.get_meter("ordering-svc")

users_registered_counter = meter.create_counter(
    name="users_registered_total",
    description="Total number of successful user registrations",
    unit="1",
)

dishes_created_counter = meter.create_counter(
    name="dishes_created_total",
    description="Total number of dishes added to the catalog",
    unit="1",
)

cart_items_added_counter = meter.create_counter(
    name="cart_items_added_total",
    description="Total number of portions added to carts",
    unit="1",
)

orders_created_counter = meter.create_counter(
    name="orders_created_total",
    description="Total number of orders placed",
    unit="1",
)

order_status_changes_counter = meter.create_counter(
    name="order_status_changes_total",
    description="Total number of order status updates by target status",
    unit="1",
)


def record_user_registered() -> None:
    """Record a successful registration."""
    users_registered_counter.add(1)


def record_dish_created(category: str) -> None:
    """Record a dish added to the catalog.

    Args:
        category: Menu category of the new dish
    """
    dishes_created_counter.add(1, {"category": category})


def record_cart_item_added(quantity: int) -> None:
    """Record portions added to a cart.

    Args:
        quantity: Number of portions added
    """
    cart_items_added_counter.add(quantity)


def record_order_created() -> None:
    """Record a placed order."""
    orders_created_counter.add(1)


def record_order_status_change(status: str) -> None:
    """Record an order status update.

    Args:
        status: Status the order was moved to
    """
    order_status_changes_counter.add(1, {"status": status})
