"""Main application entry point for the restaurant ordering service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from restaurant_ordering_service.auth.password_hasher import PasswordHasher
from restaurant_ordering_service.handlers.api_handler import create_app
from restaurant_ordering_service.observability import configure_logging, setup_observability
from restaurant_ordering_service.repositories.json_store import JsonStore
from restaurant_ordering_service.repositories.ordering_repositories import (
    CartRepository,
    DishRepository,
    OrderRepository,
    UserRepository,
)
from restaurant_ordering_service.services.cart_service import CartService
from restaurant_ordering_service.services.catalog_service import CatalogService
from restaurant_ordering_service.services.image_storage import ImageStorage
from restaurant_ordering_service.services.order_service import OrderService
from restaurant_ordering_service.services.user_service import UserService

logger = logging.getLogger(__name__)


def get_cors_origins() -> list[str]:
    """Read allowed CORS origins from the environment.

    Returns:
        List of origins; ``["*"]`` when CORS_ORIGINS is unset or empty
    """
    raw = os.getenv("CORS_ORIGINS", "*")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the JSON store and repositories
    3. Creates services
    4. Creates the FastAPI app with all routes
    5. Sets up observability

    Returns:
        Configured FastAPI application instance
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Initializing restaurant ordering service...")

    data_dir = os.getenv("DATA_DIR", "./data")
    upload_dir = os.getenv("UPLOAD_DIR", "./uploads")

    store = JsonStore(data_dir)
    user_repository = UserRepository(store, collection=os.getenv("USERS_COLLECTION", "users"))
    dish_repository = DishRepository(store, collection=os.getenv("DISHES_COLLECTION", "dishes"))
    cart_repository = CartRepository(store, collection=os.getenv("CARTS_COLLECTION", "cart"))
    order_repository = OrderRepository(store, collection=os.getenv("ORDERS_COLLECTION", "orders"))

    logger.info(f"Repositories configured - data directory: {data_dir}")

    hash_rounds = int(os.getenv("PASSWORD_HASH_ROUNDS", "12"))
    strict_status = os.getenv("STRICT_ORDER_STATUS", "false").lower() == "true"

    user_service = UserService(
        user_repository=user_repository, password_hasher=PasswordHasher(rounds=hash_rounds)
    )
    catalog_service = CatalogService(
        dish_repository=dish_repository, image_storage=ImageStorage(upload_dir)
    )
    cart_service = CartService(cart_repository=cart_repository, dish_repository=dish_repository)
    order_service = OrderService(
        order_repository=order_repository, strict_status_transitions=strict_status
    )

    logger.info(f"Services initialized - uploads: {upload_dir}, strict status: {strict_status}")

    app = create_app(
        user_service=user_service,
        catalog_service=catalog_service,
        cart_service=cart_service,
        order_service=order_service,
        upload_dir=upload_dir,
        cors_origins=get_cors_origins(),
    )

    setup_observability(app)

    logger.info("Restaurant ordering service initialized successfully")

    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "5000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
