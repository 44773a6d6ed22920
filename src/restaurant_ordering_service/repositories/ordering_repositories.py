"""JSON-file repository classes for the ordering models.

Each repository owns one collection of the JsonStore. Lookups are linear scans
over the loaded array; every mutation is a read-modify-write inside
``JsonStore.transaction``. Expected misses are reported with None/False rather
than exceptions; storage errors propagate.
"""

import logging
from collections.abc import Callable

from restaurant_ordering_service.models.cart_models import Cart, CartItem
from restaurant_ordering_service.models.dish_models import Dish
from restaurant_ordering_service.models.order_models import Order, OrderStatusEnum
from restaurant_ordering_service.models.user_models import User
from restaurant_ordering_service.repositories.json_store import JsonStore

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user records, keyed by email."""

    def __init__(self, store: JsonStore, collection: str = "users") -> None:
        """Initialize repository.

        Args:
            store: Backing JSON store
            collection: Name of the users collection
        """
        self.store = store
        self.collection = collection

    def list_users(self) -> list[User]:
        """List every registered user.

        Returns:
            list: Users in registration order
        """
        return [User.from_record(record) for record in self.store.load(self.collection)]

    def get_user(self, email: str) -> User | None:
        """Retrieve a user by email.

        Args:
            email: Exact email to match

        Returns:
            User if found, None otherwise
        """
        for record in self.store.load(self.collection):
            if record.get("email") == email:
                return User.from_record(record)
        return None

    def find_by_national_id(self, national_id: str) -> User | None:
        """Retrieve a user by national id.

        Args:
            national_id: Exact national id to match

        Returns:
            User if found, None otherwise
        """
        for record in self.store.load(self.collection):
            if str(record.get("nationalId", record.get("cedula"))) == national_id:
                return User.from_record(record)
        return None

    def add_user(self, user: User) -> bool:
        """Append a new user.

        Uniqueness of email and national id is re-checked under the collection
        lock.

        Args:
            user: User to add

        Returns:
            bool: True if added, False if either key is already taken
        """
        with self.store.transaction(self.collection) as records:
            for record in records:
                national_id = str(record.get("nationalId", record.get("cedula")))
                if record.get("email") == user.email or national_id == user.national_id:
                    logger.warning(f"Rejected duplicate user {user.email}")
                    return False
            records.append(user.to_record())
        return True

    def update_password(self, email: str, password_hash: str) -> bool:
        """Overwrite the stored password hash of a user.

        Args:
            email: User email
            password_hash: New bcrypt hash

        Returns:
            bool: True if updated, False if the user does not exist
        """
        with self.store.transaction(self.collection) as records:
            for record in records:
                if record.get("email") == email:
                    record["password"] = password_hash
                    return True
        return False

    def delete_user(self, email: str) -> bool:
        """Delete a user by email.

        Carts and orders referencing the email are left untouched.

        Args:
            email: User email

        Returns:
            bool: True if a user was removed, False otherwise
        """
        with self.store.transaction(self.collection) as records:
            remaining = [record for record in records if record.get("email") != email]
            if len(remaining) == len(records):
                return False
            records[:] = remaining
        return True


class DishRepository:
    """Repository for catalog dishes, keyed by id."""

    def __init__(self, store: JsonStore, collection: str = "dishes") -> None:
        """Initialize repository.

        Args:
            store: Backing JSON store
            collection: Name of the dishes collection
        """
        self.store = store
        self.collection = collection

    def list_dishes(self) -> list[Dish]:
        """List every dish in catalog order."""
        return [Dish.from_record(record) for record in self.store.load(self.collection)]

    def get_dish(self, dish_id: str) -> Dish | None:
        """Retrieve a dish by id.

        Args:
            dish_id: Dish identifier

        Returns:
            Dish if found, None otherwise
        """
        for record in self.store.load(self.collection):
            if str(record.get("id")) == dish_id:
                return Dish.from_record(record)
        return None

    def add_dish(self, dish: Dish) -> None:
        """Append a dish to the catalog."""
        with self.store.transaction(self.collection) as records:
            records.append(dish.to_record())

    def replace_dish(self, dish: Dish) -> bool:
        """Replace the stored dish with the same id.

        Args:
            dish: Dish holding the new field values

        Returns:
            bool: True if replaced, False if no dish has that id
        """
        with self.store.transaction(self.collection) as records:
            for index, record in enumerate(records):
                if str(record.get("id")) == dish.id:
                    records[index] = dish.to_record()
                    return True
        return False

    def delete_dish(self, dish_id: str) -> bool:
        """Delete a dish by id.

        Returns:
            bool: True if a dish was removed, False otherwise
        """
        with self.store.transaction(self.collection) as records:
            remaining = [record for record in records if str(record.get("id")) != dish_id]
            if len(remaining) == len(records):
                return False
            records[:] = remaining
        return True


class CartRepository:
    """Repository for per-user carts, one record per email."""

    def __init__(self, store: JsonStore, collection: str = "cart") -> None:
        """Initialize repository.

        Args:
            store: Backing JSON store
            collection: Name of the carts collection
        """
        self.store = store
        self.collection = collection

    def get_cart(self, email: str) -> Cart | None:
        """Retrieve the cart of a user.

        Args:
            email: Cart owner

        Returns:
            Cart if the user has one, None otherwise
        """
        for record in self.store.load(self.collection):
            if record.get("email") == email:
                return Cart.from_record(record)
        return None

    def add_item(self, email: str, item: CartItem) -> Cart:
        """Merge a line into a user's cart, creating the cart if needed.

        Args:
            email: Cart owner
            item: Line to merge

        Returns:
            Cart: The cart as persisted
        """
        with self.store.transaction(self.collection) as records:
            for index, record in enumerate(records):
                if record.get("email") == email:
                    cart = Cart.from_record(record)
                    cart.add_item(item)
                    records[index] = cart.to_record()
                    return cart

            cart = Cart(email=email, items=[item])
            records.append(cart.to_record())
            logger.info(f"Created cart for {email}")
            return cart

    def clear_cart(self, email: str) -> bool:
        """Remove a user's cart record.

        Returns:
            bool: True if a cart existed, False otherwise
        """
        with self.store.transaction(self.collection) as records:
            remaining = [record for record in records if record.get("email") != email]
            removed = len(remaining) != len(records)
            records[:] = remaining
        return removed

    def remove_item(self, email: str, dish_id: str) -> bool:
        """Remove one line from a user's cart.

        Args:
            email: Cart owner
            dish_id: Dish whose line is removed

        Returns:
            bool: True if a line was removed, False if the cart or line is missing
        """
        with self.store.transaction(self.collection) as records:
            for index, record in enumerate(records):
                if record.get("email") == email:
                    cart = Cart.from_record(record)
                    if not cart.remove_item(dish_id):
                        return False
                    records[index] = cart.to_record()
                    return True
        return False


class OrderRepository:
    """Repository for placed orders, keyed by id."""

    def __init__(self, store: JsonStore, collection: str = "orders") -> None:
        """Initialize repository.

        Args:
            store: Backing JSON store
            collection: Name of the orders collection
        """
        self.store = store
        self.collection = collection

    def list_orders(self) -> list[Order]:
        """List every order in placement order."""
        return [Order.from_record(record) for record in self.store.load(self.collection)]

    def list_orders_for_email(self, email: str) -> list[Order]:
        """List orders placed by one user.

        Args:
            email: Exact email to match

        Returns:
            list: Matching orders (empty list if none)
        """
        return [
            Order.from_record(record)
            for record in self.store.load(self.collection)
            if record.get("email") == email
        ]

    def get_order(self, order_id: str) -> Order | None:
        """Retrieve an order by id."""
        for record in self.store.load(self.collection):
            if str(record.get("id")) == order_id:
                return Order.from_record(record)
        return None

    def add_order(self, order: Order) -> None:
        """Append an order to the ledger."""
        with self.store.transaction(self.collection) as records:
            records.append(order.to_record())

    def update_status(
        self,
        order_id: str,
        status: str,
        check: Callable[[str, str], None] | None = None,
    ) -> Order | None:
        """Overwrite the status of an order.

        ``check`` is called with the current and new status while the
        collection is locked; if it raises, nothing is written.

        Args:
            order_id: Order identifier
            status: New status value
            check: Optional guard on the transition

        Returns:
            Order: The updated order, None if no order has that id
        """
        with self.store.transaction(self.collection) as records:
            for record in records:
                if str(record.get("id")) == order_id:
                    if check is not None:
                        check(record.get("status", OrderStatusEnum.PENDING.value), status)
                    record["status"] = status
                    return Order.from_record(record)
        return None
