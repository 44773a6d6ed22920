"""FastAPI application for the restaurant ordering REST API."""

import logging
from pathlib import Path
from typing import Any

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from restaurant_ordering_service.errors import OrderingServiceError
from restaurant_ordering_service.models.cart_models import AddCartItemRequest
from restaurant_ordering_service.models.dish_models import Dish, DishResponse
from restaurant_ordering_service.models.order_models import (
    CreateOrderRequest,
    Order,
    OrderResponse,
    StatusUpdateRequest,
)
from restaurant_ordering_service.models.user_models import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    UserProfile,
)
from restaurant_ordering_service.services.cart_service import CartService
from restaurant_ordering_service.services.catalog_service import CatalogService
from restaurant_ordering_service.services.order_service import OrderService
from restaurant_ordering_service.services.user_service import UserService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class LoginResponse(BaseModel):
    """Response model for a successful login."""

    message: str
    user: UserProfile


def create_app(
    user_service: UserService,
    catalog_service: CatalogService,
    cart_service: CartService,
    order_service: OrderService,
    upload_dir: str | Path,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        user_service: Service for the user directory
        catalog_service: Service for the dish catalog
        cart_service: Service for user carts
        order_service: Service for the order ledger
        upload_dir: Directory of uploaded images, served under /uploads
        cors_origins: Allowed CORS origins (defaults to all)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Ordering API",
        description="Users, dish catalog, carts and orders for a restaurant ordering app",
        version="1.0.0",
    )

    app.state.user_service = user_service
    app.state.catalog_service = catalog_service
    app.state.cart_service = cart_service
    app.state.order_service = order_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    Path(upload_dir).mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")

    @app.exception_handler(OrderingServiceError)
    async def handle_service_error(request: Request, exc: OrderingServiceError) -> JSONResponse:
        logger.info(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info(f"{request.method} {request.url.path} rejected payload: {exc.errors()}")
        return JSONResponse(status_code=400, content={"message": "Invalid request payload"})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @app.get("/", response_model=MessageResponse, tags=["Health"])
    async def root() -> MessageResponse:
        """Service banner."""
        return MessageResponse(message="Restaurant API running")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    # Users

    @app.post("/api/register", response_model=MessageResponse, status_code=201, tags=["Users"])
    async def register(payload: RegisterRequest) -> MessageResponse:
        """Register a new user."""
        await app.state.user_service.register(
            name=payload.name,
            email=payload.email,
            address=payload.address,
            password=payload.password,
            contact=payload.contact,
            national_id=payload.national_id,
        )
        return MessageResponse(message="User registered successfully")

    @app.post("/api/login", response_model=LoginResponse, tags=["Users"])
    async def login(payload: LoginRequest) -> LoginResponse:
        """Authenticate a user; the returned user has no password."""
        user = await app.state.user_service.login(email=payload.email, password=payload.password)
        return LoginResponse(message="Login successful", user=user)

    @app.post("/api/change-password", response_model=MessageResponse, tags=["Users"])
    async def change_password(payload: ChangePasswordRequest) -> MessageResponse:
        """Change a user's password."""
        await app.state.user_service.change_password(
            email=payload.email,
            old_password=payload.old_password,
            new_password=payload.new_password,
        )
        return MessageResponse(message="Password updated successfully")

    @app.get("/api/users", response_model=list[UserProfile], tags=["Users"])
    async def list_users() -> list[UserProfile]:
        """List all users without passwords."""
        users: list[UserProfile] = await app.state.user_service.list_users()
        return users

    @app.get("/api/users/{email}", response_model=UserProfile, tags=["Users"])
    async def get_user(email: str) -> UserProfile:
        """Get one user by email."""
        user: UserProfile = await app.state.user_service.get_user(email)
        return user

    @app.delete("/api/users/{email}", response_model=MessageResponse, tags=["Users"])
    async def delete_user(email: str) -> MessageResponse:
        """Delete a user by email."""
        await app.state.user_service.delete_user(email)
        return MessageResponse(message="User deleted successfully")

    # Dishes

    @app.get("/api/dishes", response_model=list[Dish], tags=["Dishes"])
    async def list_dishes() -> list[Dish]:
        """List the dish catalog."""
        dishes: list[Dish] = await app.state.catalog_service.list_dishes()
        return dishes

    @app.post("/api/dishes", response_model=DishResponse, status_code=201, tags=["Dishes"])
    async def create_dish(
        name: str | None = Form(None),
        price: str | None = Form(None),
        description: str | None = Form(None),
        category: str | None = Form(None),
        image: UploadFile | None = File(None),
    ) -> DishResponse:
        """Create a dish from a multipart form with an ``image`` file."""
        dish = await app.state.catalog_service.create_dish(
            name=name,
            price=price,
            description=description,
            category=category,
            image_filename=image.filename if image else None,
            image_content=await image.read() if image else None,
        )
        return DishResponse(message="Dish added successfully", dish=dish)

    @app.put("/api/dishes/{dish_id}", response_model=DishResponse, tags=["Dishes"])
    async def update_dish(
        dish_id: str,
        name: str | None = Form(None),
        price: str | None = Form(None),
        description: str | None = Form(None),
        category: str | None = Form(None),
        image: UploadFile | None = File(None),
    ) -> DishResponse:
        """Replace a dish; the image is kept when no new one is uploaded."""
        dish = await app.state.catalog_service.update_dish(
            dish_id=dish_id,
            name=name,
            price=price,
            description=description,
            category=category,
            image_filename=image.filename if image else None,
            image_content=await image.read() if image else None,
        )
        return DishResponse(message="Dish updated successfully", dish=dish)

    @app.delete("/api/dishes/{dish_id}", response_model=MessageResponse, tags=["Dishes"])
    async def delete_dish(dish_id: str) -> MessageResponse:
        """Delete a dish."""
        await app.state.catalog_service.delete_dish(dish_id)
        return MessageResponse(message="Dish deleted successfully")

    # Cart

    @app.get("/api/cart/{email}", response_model=list[dict[str, Any]], tags=["Cart"])
    async def get_cart(email: str) -> list[dict[str, Any]]:
        """Get a user's cart enriched with current dish data."""
        lines: list[dict[str, Any]] = await app.state.cart_service.get_cart(email)
        return lines

    @app.post("/api/cart/{email}", response_model=MessageResponse, status_code=201, tags=["Cart"])
    async def add_to_cart(email: str, payload: AddCartItemRequest) -> MessageResponse:
        """Add a dish to a user's cart."""
        await app.state.cart_service.add_item(
            email=email,
            dish_id=payload.dish_id,
            name=payload.name,
            price=payload.price,
            image=payload.image,
            description=payload.description,
            quantity=payload.quantity,
        )
        return MessageResponse(message="Item added to cart")

    @app.delete("/api/cart/{email}", response_model=MessageResponse, tags=["Cart"])
    async def clear_cart(email: str) -> MessageResponse:
        """Empty a user's cart."""
        await app.state.cart_service.clear_cart(email)
        return MessageResponse(message="Cart cleared")

    @app.delete("/api/cart/{email}/{dish_id}", response_model=MessageResponse, tags=["Cart"])
    async def remove_from_cart(email: str, dish_id: str) -> MessageResponse:
        """Remove one dish from a user's cart."""
        await app.state.cart_service.remove_item(email, dish_id)
        return MessageResponse(message="Item removed from cart")

    # Orders

    @app.post("/api/orders", response_model=OrderResponse, status_code=201, tags=["Orders"])
    async def create_order(payload: CreateOrderRequest) -> OrderResponse:
        """Place an order."""
        order = await app.state.order_service.create_order(
            email=payload.email,
            items=payload.items,
            total=payload.total,
            address=payload.address,
            contact=payload.contact,
        )
        return OrderResponse(message="Order placed", order=order)

    @app.get("/api/orders", response_model=list[Order], tags=["Orders"])
    async def list_orders() -> list[Order]:
        """List every order."""
        orders: list[Order] = await app.state.order_service.list_all_orders()
        return orders

    @app.get("/api/orders/{email}", response_model=list[Order], tags=["Orders"])
    async def list_user_orders(email: str) -> list[Order]:
        """List the orders of one user."""
        orders: list[Order] = await app.state.order_service.list_orders_for_user(email)
        return orders

    @app.put("/api/orders/{order_id}/status", response_model=OrderResponse, tags=["Orders"])
    async def update_order_status(order_id: str, payload: StatusUpdateRequest) -> OrderResponse:
        """Set the status of an order."""
        order = await app.state.order_service.set_status(order_id, payload.status)
        return OrderResponse(message="Status updated", order=order)

    return app
