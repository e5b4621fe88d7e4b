"""
FastAPI Application Entry Point

Restaurant Order Backend - HTTP layer over the in-memory OrderStore.

Endpoints:
    - GET  /menu: List the menu
    - POST /order: Create an order from a JSON array of item ids
    - POST /order/add: Add items to an existing order
    - POST /order/pay: Pay an order (sends it out for delivery)
    - GET  /order/history: List all orders
    - POST /order/status: Override an order's status
    - GET  /order/{order_id}: Get a single order
    - GET  /health: System health check

Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Any, List
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Body, Depends, Request
from pydantic import StrictInt
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from order_backend.catalog import Catalog
from order_backend.core.config import get_settings, setup_logging
from order_backend.errors import InvalidOrderStateError, OrderNotFoundError
from order_backend.schemas import (
    AddItemsRequest,
    ErrorResponse,
    HealthResponse,
    MenuItemResponse,
    OrderResponse,
    PayOrderRequest,
    PaymentResponse,
    UpdateStatusRequest,
)
from order_backend.store import OrderStore

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the catalog and order store on startup and attach them to
    ``app.state``. Each application run gets a fresh, empty store.
    """
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name} for {settings.restaurant_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    if settings.menu_file:
        catalog = Catalog.from_json_file(settings.menu_file)
    else:
        catalog = Catalog.default()
    logger.info(f"✅ Menu loaded: {len(catalog)} items")

    app.state.catalog = catalog
    app.state.order_store = OrderStore(catalog)
    logger.info("✅ Order store ready")

    yield  # Application runs

    logger.info(f"Shutting down with {len(app.state.order_store)} orders in memory")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Order-taking backend for a single restaurant: menu, orders, payment and delivery status.",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_order_store(request: Request) -> OrderStore:
    return request.app.state.order_store


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍛 Welcome to {settings.restaurant_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "menu": "/menu",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    catalog: Catalog = Depends(get_catalog),
    store: OrderStore = Depends(get_order_store),
) -> HealthResponse:
    """Report menu size and number of orders held in memory."""
    return HealthResponse(
        status="operational",
        environment=settings.env_mode.value,
        menu_items=len(catalog),
        orders=len(store),
        timestamp=datetime.now(),
    )


# =============================================================================
# MENU ENDPOINTS
# =============================================================================

@app.get(
    "/menu",
    response_model=List[MenuItemResponse],
    tags=["Menu"],
    summary="List Menu",
)
async def get_menu(
    catalog: Catalog = Depends(get_catalog),
) -> List[MenuItemResponse]:
    """Return every dish on the menu."""
    return [MenuItemResponse.from_domain(item) for item in catalog.list()]


# =============================================================================
# ORDER API ENDPOINTS
# =============================================================================

@app.post(
    "/order",
    response_model=OrderResponse,
    responses={400: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Create Order",
)
async def create_order(
    item_ids: List[StrictInt] = Body(..., examples=[[1, 2]]),
    store: OrderStore = Depends(get_order_store),
) -> OrderResponse:
    """
    Create a new order from a JSON array of menu item ids.

    Ids that are not on the menu are ignored, so an empty or unknown
    selection still creates a (zero-total) order.
    """
    order = store.create_order(item_ids)
    return OrderResponse.from_domain(order)


@app.post(
    "/order/add",
    response_model=OrderResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Add Items To Order",
)
async def add_items_to_order(
    data: AddItemsRequest,
    store: OrderStore = Depends(get_order_store),
) -> OrderResponse:
    """Append menu items to an existing order, in any status."""
    order = store.add_items(data.order_id, data.items)
    return OrderResponse.from_domain(order)


@app.post(
    "/order/pay",
    response_model=PaymentResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Pay Order",
)
async def pay_order(
    data: PayOrderRequest,
    store: OrderStore = Depends(get_order_store),
) -> PaymentResponse:
    """Pay an order that is still being processed and send it out for delivery."""
    confirmation = store.pay_order(data.order_id)
    return PaymentResponse.from_domain(confirmation)


@app.get(
    "/order/history",
    response_model=List[OrderResponse],
    tags=["Orders"],
    summary="Order History",
)
async def get_order_history(
    store: OrderStore = Depends(get_order_store),
) -> List[OrderResponse]:
    """List every order held in memory, in no particular order."""
    return [OrderResponse.from_domain(order) for order in store.list_orders()]


@app.post(
    "/order/status",
    response_model=OrderResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Update Order Status",
)
async def update_order_status(
    data: UpdateStatusRequest,
    store: OrderStore = Depends(get_order_store),
) -> OrderResponse:
    """
    Set an order's status directly.

    This is a staff override: unlike /order/pay it does not check the
    current status, so orders can also be moved backwards.
    """
    order = store.set_status(data.order_id, data.status)
    return OrderResponse.from_domain(order)


@app.get(
    "/order/{order_id:int}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Orders"],
)
async def get_order(
    order_id: int,
    store: OrderStore = Depends(get_order_store),
) -> OrderResponse:
    """Get a specific order by ID."""
    return OrderResponse.from_domain(store.get_order(order_id))


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def _error_response(status_code: int, error: str, detail: Any = None) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        detail=str(detail) if detail is not None else None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(OrderNotFoundError)
async def order_not_found_handler(request: Request, exc: OrderNotFoundError) -> JSONResponse:
    logger.warning(f"{request.url.path}: order #{exc.order_id} not found")
    return _error_response(404, exc.message, exc)


@app.exception_handler(InvalidOrderStateError)
async def invalid_order_state_handler(request: Request, exc: InvalidOrderStateError) -> JSONResponse:
    logger.warning(f"{request.url.path}: {exc}")
    return _error_response(400, exc.message, exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or unparseable request bodies."""
    logger.warning(f"{request.url.path}: invalid request - {exc.errors()}")
    return _error_response(400, "Invalid request body", exc.errors())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return _error_response(
        500,
        "Internal Server Error",
        exc if settings.debug else "An unexpected error occurred",
    )


# =============================================================================
# ENTRY POINT
# =============================================================================

def run() -> None:
    """Start the API server with uvicorn."""
    uvicorn.run(
        "order_backend.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development and settings.debug,
    )


if __name__ == "__main__":
    run()
