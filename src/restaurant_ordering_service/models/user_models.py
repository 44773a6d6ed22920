"""User directory models.

Users are keyed by email; the national id is a second unique key checked at
registration. The stored password is a bcrypt hash and never leaves the service.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class User(BaseModel):
    """Registered user as persisted in the users collection."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Unique login email")
    address: str = Field(..., description="Delivery address")
    password: str = Field(..., description="bcrypt hash of the password")
    contact: str = Field(..., description="Phone or other contact detail")
    national_id: str = Field(..., alias="nationalId", description="Unique national id")

    def to_profile(self) -> "UserProfile":
        """Return the user without the password hash."""
        return UserProfile(
            name=self.name,
            email=self.email,
            address=self.address,
            contact=self.contact,
            national_id=self.national_id,
        )

    def to_record(self) -> dict[str, Any]:
        """Convert to the stored JSON record.

        Returns:
            dict: JSON-compatible representation
        """
        return {
            "name": self.name,
            "email": self.email,
            "address": self.address,
            "password": self.password,
            "contact": self.contact,
            "nationalId": self.national_id,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "User":
        """Create a User from a stored record.

        Records written by the legacy API carry the national id as ``cedula``.

        Args:
            record: Stored JSON record

        Returns:
            User: Parsed model instance
        """
        return cls(
            name=record["name"],
            email=record["email"],
            address=record["address"],
            password=record["password"],
            contact=str(record["contact"]),
            national_id=str(record.get("nationalId", record.get("cedula", ""))),
        )


class UserProfile(BaseModel):
    """Public view of a user, password stripped."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    address: str
    contact: str
    national_id: str = Field(..., alias="nationalId")


class RegisterRequest(BaseModel):
    """Registration payload. Presence is checked by the service."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str | None = None
    email: str | None = None
    address: str | None = None
    password: str | None = None
    contact: str | None = None
    national_id: str | None = Field(
        None, validation_alias=AliasChoices("nationalId", "national_id", "cedula")
    )


class LoginRequest(BaseModel):
    """Login payload."""

    email: str | None = None
    password: str | None = None


class ChangePasswordRequest(BaseModel):
    """Password change payload."""

    email: str | None = None
    old_password: str | None = Field(
        None, validation_alias=AliasChoices("oldPassword", "old_password")
    )
    new_password: str | None = Field(
        None, validation_alias=AliasChoices("newPassword", "new_password")
    )
