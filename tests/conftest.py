"""Shared pytest fixtures and configuration for all tests."""

import os

# Must be set before src.main is imported so no application is built at import time
os.environ.setdefault("ENVIRONMENT", "test")

from pathlib import Path  # noqa: E402

import pytest  # noqa: E402

from restaurant_ordering_service.auth.password_hasher import PasswordHasher  # noqa: E402
from restaurant_ordering_service.repositories.json_store import JsonStore  # noqa: E402


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Fixture providing an empty directory for JSON collections."""
    return tmp_path / "data"


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    """Fixture providing a directory for uploaded images."""
    return tmp_path / "uploads"


@pytest.fixture
def store(data_dir: Path) -> JsonStore:
    """Fixture providing a JsonStore over a temporary directory."""
    return JsonStore(data_dir)


@pytest.fixture
def password_hasher() -> PasswordHasher:
    """Fixture providing a fast bcrypt hasher (minimum cost factor)."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def mock_email() -> str:
    """Fixture providing a standard test user email."""
    return "ana@example.com"


@pytest.fixture
def mock_registration() -> dict:
    """Fixture providing a complete registration payload."""
    return {
        "name": "Ana Torres",
        "email": "ana@example.com",
        "address": "Av. Siempre Viva 742",
        "password": "s3cret",
        "contact": "0991234567",
        "nationalId": "1712345678",
    }


@pytest.fixture
def mock_cart_item() -> dict:
    """Fixture providing a cart item payload for a dish."""
    return {
        "dishId": "dish_abc",
        "name": "Locro de papa",
        "price": "10",
        "image": "/uploads/locro.png",
        "description": "Potato soup with cheese",
        "quantity": 2,
    }
