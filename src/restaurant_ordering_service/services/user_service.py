"""User directory: registration, login and account management."""

import logging

from restaurant_ordering_service.auth.password_hasher import PasswordHasher
from restaurant_ordering_service.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from restaurant_ordering_service.models.user_models import User, UserProfile
from restaurant_ordering_service.observability.decorators import traced
from restaurant_ordering_service.observability.metrics import record_user_registered
from restaurant_ordering_service.repositories.ordering_repositories import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Service for user registration, authentication and lookup.

    Emails and national ids are unique; both are checked by a full scan at
    registration time only. Passwords are stored as bcrypt hashes and are
    never returned to callers.
    """

    def __init__(self, user_repository: UserRepository, password_hasher: PasswordHasher) -> None:
        """Initialize the UserService.

        Args:
            user_repository: Repository for user records
            password_hasher: Hasher used to store and verify passwords
        """
        self.user_repository = user_repository
        self.password_hasher = password_hasher

    @traced("users.register")
    async def register(
        self,
        name: str | None,
        email: str | None,
        address: str | None,
        password: str | None,
        contact: str | None,
        national_id: str | None,
    ) -> None:
        """Register a new user.

        Raises:
            ValidationError: If any field is missing
            ConflictError: If the email or national id is already registered
        """
        if not (name and email and address and password and contact and national_id):
            raise ValidationError("Missing registration fields")

        if self.user_repository.get_user(email) is not None:
            raise ConflictError("Email is already registered")
        if self.user_repository.find_by_national_id(national_id) is not None:
            raise ConflictError("National id is already registered")

        user = User(
            name=name,
            email=email,
            address=address,
            password=self.password_hasher.hash(password),
            contact=contact,
            national_id=national_id,
        )
        if not self.user_repository.add_user(user):
            raise ConflictError("Email or national id is already registered")

        record_user_registered()
        logger.info(f"Registered user {email}")

    @traced("users.login")
    async def login(self, email: str | None, password: str | None) -> UserProfile:
        """Authenticate a user by email and password.

        Returns:
            UserProfile: The authenticated user, without password

        Raises:
            AuthError: If the email is unknown or the password does not match
        """
        user = self._authenticate(email, password)
        if user is None:
            logger.info(f"Failed login for {email}")
            raise AuthError("Incorrect email or password")

        return user.to_profile()

    @traced("users.change_password")
    async def change_password(
        self, email: str | None, old_password: str | None, new_password: str | None
    ) -> None:
        """Replace a user's password after checking the current one.

        Raises:
            AuthError: If email and old password do not match
            ValidationError: If the new password is empty
        """
        user = self._authenticate(email, old_password)
        if user is None:
            raise AuthError("Incorrect credentials")

        if not new_password:
            raise ValidationError("New password is required")

        hashed = self.password_hasher.hash(new_password)
        if not self.user_repository.update_password(user.email, hashed):
            raise NotFoundError("User", user.email)

        logger.info(f"Password changed for {user.email}")

    async def list_users(self) -> list[UserProfile]:
        """List all users without passwords."""
        return [user.to_profile() for user in self.user_repository.list_users()]

    async def get_user(self, email: str) -> UserProfile:
        """Get one user without password.

        Raises:
            NotFoundError: If no user has this email
        """
        user = self.user_repository.get_user(email)
        if user is None:
            raise NotFoundError("User", email)
        return user.to_profile()

    @traced("users.delete")
    async def delete_user(self, email: str) -> None:
        """Delete a user. Carts and orders of the user are kept.

        Raises:
            NotFoundError: If no user has this email
        """
        if not self.user_repository.delete_user(email):
            raise NotFoundError("User", email)

        logger.info(f"Deleted user {email}")

    def _authenticate(self, email: str | None, password: str | None) -> User | None:
        if not email or not password:
            return None

        user = self.user_repository.get_user(email)
        if user is None or not self.password_hasher.verify(password, user.password):
            return None
        return user
