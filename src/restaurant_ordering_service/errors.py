"""Domain exceptions for the ordering service.

Each exception carries the HTTP status code it maps to. The API layer renders
them as ``{"message": ...}`` bodies; anything not derived from
OrderingServiceError becomes an opaque 500.
"""


class OrderingServiceError(Exception):
    """Base class for expected, caller-facing failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Human-readable description returned to the caller
        """
        super().__init__(message)
        self.message = message


class ValidationError(OrderingServiceError):
    """Missing or malformed request fields."""

    status_code = 400


class ConflictError(OrderingServiceError):
    """A unique key (email, national id) is already taken."""

    status_code = 400


class AuthError(OrderingServiceError):
    """Credentials did not match."""

    status_code = 401


class NotFoundError(OrderingServiceError):
    """Unknown user, dish, cart, cart line or order."""

    status_code = 404

    def __init__(self, entity: str, key: str | None = None) -> None:
        """Initialize the error.

        Args:
            entity: Kind of record that was looked up (e.g. "Dish")
            key: Identifier that was not found
        """
        message = f"{entity} {key} not found" if key else f"{entity} not found"
        super().__init__(message)
        self.entity = entity
        self.key = key


class InvalidStatusTransitionError(OrderingServiceError):
    """Order status change rejected by the transition table."""

    status_code = 409
